"""SQLAlchemy persistence for users, templates, consent and delivery records."""

from __future__ import annotations

from .models import Base, DeliveryModel, SubscriptionModel, TemplateModel, UserModel
from .store import SQLAlchemyNotificationStore

__all__ = [
    "Base",
    "DeliveryModel",
    "SQLAlchemyNotificationStore",
    "SubscriptionModel",
    "TemplateModel",
    "UserModel",
]
