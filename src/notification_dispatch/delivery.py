"""Delivery tracking types, channel enum and dispatch results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

NO_RECIPIENT = "no recipient configured"
PROVIDER_NOT_CONFIGURED = "provider not configured"


class Channel(str, Enum):
    """Supported delivery channels."""

    APPLE_PUSH = "APPLE_PUSH"
    GOOGLE_PUSH = "GOOGLE_PUSH"
    SMS = "SMS"
    EMAIL = "EMAIL"

    @classmethod
    def _missing_(cls, value: object) -> Channel | None:
        if isinstance(value, str):
            for member in cls:
                if member.value == value.upper():
                    return member
        return None

    @property
    def is_multi_device(self) -> bool:
        return self in (Channel.APPLE_PUSH, Channel.GOOGLE_PUSH)


class DeliveryStatus(str, Enum):
    """Delivery record status.

    The pipeline only writes PENDING, SENT and FAILED. DELIVERED and BOUNCED are
    set by provider callbacks outside this package.
    """

    PENDING = "PENDING"
    SENT = "SENT"
    DELIVERED = "DELIVERED"
    FAILED = "FAILED"
    BOUNCED = "BOUNCED"


@dataclass(frozen=True)
class RenderedContent:
    """Fully substituted content, owned by a single dispatch call."""

    body: str
    subject: str | None = None
    title: str | None = None

    def to_dict(self) -> dict[str, str]:
        data = {"body": self.body}
        if self.subject is not None:
            data["subject"] = self.subject
        if self.title is not None:
            data["title"] = self.title
        return data


@dataclass(frozen=True)
class DeliveryRecord:
    """Snapshot of the persisted audit row for one channel attempt."""

    id: str
    tenant_id: str
    user_id: str
    template_key: str
    channel: Channel
    status: DeliveryStatus
    variables: dict[str, Any] = field(default_factory=dict)
    rendered_content: dict[str, str] = field(default_factory=dict)
    error: str | None = None
    provider_message_id: str | None = None
    sent_at: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class ChannelOutcome:
    """Outcome of one channel within a dispatch call."""

    channel: Channel
    status: DeliveryStatus
    delivery_id: str | None = None
    reason: str | None = None

    @property
    def delivered(self) -> bool:
        return self.status is DeliveryStatus.SENT

    @classmethod
    def sent(cls, channel: Channel, delivery_id: str) -> ChannelOutcome:
        """Create a successful outcome."""
        return cls(channel=channel, status=DeliveryStatus.SENT, delivery_id=delivery_id)

    @classmethod
    def failed(
        cls,
        channel: Channel,
        reason: str,
        delivery_id: str | None = None,
    ) -> ChannelOutcome:
        """Create a failed outcome."""
        return cls(
            channel=channel,
            status=DeliveryStatus.FAILED,
            delivery_id=delivery_id,
            reason=reason,
        )


@dataclass(frozen=True)
class DispatchResult:
    """Aggregated result of a dispatch call.

    ``success`` is true when at least one channel was delivered. A call where every
    channel failed is still a result, not an error.
    """

    outcomes: tuple[ChannelOutcome, ...] = ()

    @property
    def success(self) -> bool:
        return any(outcome.delivered for outcome in self.outcomes)

    @property
    def delivery_ids(self) -> list[str]:
        return [o.delivery_id for o in self.outcomes if o.delivered and o.delivery_id]

    @property
    def failures(self) -> list[ChannelOutcome]:
        return [o for o in self.outcomes if not o.delivered]

    def to_dict(self) -> dict[str, Any]:
        """Caller-facing response body."""
        body: dict[str, Any] = {
            "success": self.success,
            "notificationIds": self.delivery_ids,
        }
        if self.failures:
            body["errors"] = [
                {"channel": f.channel.value, "error": f.reason or ""} for f in self.failures
            ]
        return body
