"""Port definitions for the dispatch pipeline."""

from __future__ import annotations

from .backend import BackendResult, IChannelBackend
from .renderer import ITemplateRenderer
from .store import IConsentStore, IDeliveryRecordStore, ITemplateStore, IUserStore

__all__ = [
    "BackendResult",
    "IChannelBackend",
    "ITemplateRenderer",
    "IConsentStore",
    "IDeliveryRecordStore",
    "ITemplateStore",
    "IUserStore",
]
