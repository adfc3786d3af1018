"""Multi-tenant notification dispatch over APNs, FCM, SMS and email."""

from __future__ import annotations

from .backends import BackendTable, ConsoleBackend, InMemoryBackend, build_backend_table
from .channel import ChannelResolver
from .config import (
    ApnsSettings,
    BackendSettings,
    DispatchConfig,
    FcmSettings,
    SmtpSettings,
    TwilioSettings,
)
from .delivery import (
    Channel,
    ChannelOutcome,
    DeliveryRecord,
    DeliveryStatus,
    DispatchResult,
    RenderedContent,
)
from .dispatcher import DispatchOrchestrator
from .exceptions import (
    BackendConfigurationError,
    ContentUnavailableError,
    DispatchError,
    InfrastructureError,
    NotificationDispatchError,
    StoreDataError,
    TemplateError,
    TemplateNotFoundError,
    UserNotFoundError,
)
from .locales import LocaleResolver
from .models import ConsentRecord, LocalizedContent, SendRequest, Template, User
from .persistence import InMemoryNotificationStore
from .ports import (
    BackendResult,
    IChannelBackend,
    IConsentStore,
    IDeliveryRecordStore,
    ITemplateRenderer,
    ITemplateStore,
    IUserStore,
)
from .template import TemplateRenderer

__all__ = [
    "ApnsSettings",
    "BackendConfigurationError",
    "BackendResult",
    "BackendSettings",
    "BackendTable",
    "Channel",
    "ChannelOutcome",
    "ChannelResolver",
    "ConsentRecord",
    "ConsoleBackend",
    "ContentUnavailableError",
    "DeliveryRecord",
    "DeliveryStatus",
    "DispatchConfig",
    "DispatchError",
    "DispatchOrchestrator",
    "DispatchResult",
    "FcmSettings",
    "IChannelBackend",
    "IConsentStore",
    "IDeliveryRecordStore",
    "ITemplateRenderer",
    "ITemplateStore",
    "IUserStore",
    "InfrastructureError",
    "InMemoryBackend",
    "InMemoryNotificationStore",
    "LocaleResolver",
    "LocalizedContent",
    "NotificationDispatchError",
    "RenderedContent",
    "SendRequest",
    "SmtpSettings",
    "StoreDataError",
    "Template",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRenderer",
    "TwilioSettings",
    "User",
    "UserNotFoundError",
]
