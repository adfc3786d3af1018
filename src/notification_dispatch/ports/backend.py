"""Channel backend port."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..delivery import Channel, RenderedContent


@dataclass(frozen=True)
class BackendResult:
    """What a backend reports for one destination."""

    success: bool
    message_id: str | None = None
    error: str | None = None

    @classmethod
    def sent(cls, message_id: str | None = None) -> BackendResult:
        return cls(success=True, message_id=message_id)

    @classmethod
    def failed(cls, error: str) -> BackendResult:
        return cls(success=False, error=error)


@runtime_checkable
class IChannelBackend(Protocol):
    """
    Delivery mechanism for a single channel (APNs, FCM, SMS, email).

    ``send`` reports transport and provider failures through
    :meth:`BackendResult.failed` rather than raising. The orchestrator still
    treats a raised exception as a failed send.
    """

    channel: Channel

    def is_configured(self) -> bool:
        """Whether the backend has the settings it needs to send."""
        ...

    async def send(
        self,
        destination: str,
        content: RenderedContent,
        *,
        data: dict[str, Any] | None = None,
    ) -> BackendResult:
        """Send rendered content to one destination address."""
        ...
