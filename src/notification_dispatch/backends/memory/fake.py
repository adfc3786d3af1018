"""In-memory backend for test assertions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from notification_dispatch.delivery import Channel, RenderedContent
from notification_dispatch.ports.backend import BackendResult, IChannelBackend


@dataclass
class SentMessage:
    """Record of a sent message for test assertions."""

    destination: str
    content: RenderedContent
    data: dict[str, Any] | None


class InMemoryBackend(IChannelBackend):
    """
    Test double (Fake) that stores messages in a list for assertions.

    ``fail_with`` makes every send report that error; ``raise_with`` makes every
    send raise it. ``failing_destinations`` fails only those addresses.
    """

    def __init__(
        self,
        channel: Channel,
        *,
        configured: bool = True,
        fail_with: str | None = None,
        raise_with: Exception | None = None,
        failing_destinations: dict[str, str] | None = None,
    ) -> None:
        self.channel = channel
        self.configured = configured
        self.fail_with = fail_with
        self.raise_with = raise_with
        self.failing_destinations = failing_destinations or {}
        self.sent_messages: list[SentMessage] = []
        self._counter = 0

    def is_configured(self) -> bool:
        return self.configured

    async def send(
        self,
        destination: str,
        content: RenderedContent,
        *,
        data: dict[str, Any] | None = None,
    ) -> BackendResult:
        if self.raise_with is not None:
            raise self.raise_with
        if self.fail_with is not None:
            return BackendResult.failed(self.fail_with)
        if destination in self.failing_destinations:
            return BackendResult.failed(self.failing_destinations[destination])

        self.sent_messages.append(SentMessage(destination, content, data))
        self._counter += 1
        return BackendResult.sent(f"{self.channel.value.lower()}-{self._counter}")

    def assert_sent(self, destination: str, count: int = 1) -> None:
        """Helper for test assertions."""
        matches = [m for m in self.sent_messages if m.destination == destination]
        if len(matches) != count:
            raise AssertionError(
                f"Expected {count} messages to {destination} via {self.channel.value}, "
                f"but found {len(matches)}."
            )

    def clear(self) -> None:
        """Clear all sent messages."""
        self.sent_messages.clear()
