"""Console backend for development debugging."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from notification_dispatch.delivery import Channel, RenderedContent
from notification_dispatch.ports.backend import BackendResult, IChannelBackend

logger = logging.getLogger(__name__)


class ConsoleBackend(IChannelBackend):
    """
    Development backend that prints notifications to the console.
    """

    def __init__(self, channel: Channel, output_to_stdout: bool = True):
        self.channel = channel
        self.output_to_stdout = output_to_stdout

    def is_configured(self) -> bool:
        return True

    async def send(
        self,
        destination: str,
        content: RenderedContent,
        *,
        data: dict[str, Any] | None = None,
    ) -> BackendResult:
        output = [
            "═" * 50,
            f"NOTIFICATION SENT VIA {self.channel.value}",
            f"To:      {destination}",
        ]
        if content.subject is not None:
            output.append(f"Subject: {content.subject}")
        if content.title is not None:
            output.append(f"Title:   {content.title}")
        output.append(f"Body:    {content.body}")
        if data:
            output.append(f"Data:    {', '.join(sorted(data))}")
        output.append("═" * 50)

        full_output = "\n".join(output)
        logger.info(full_output)

        if self.output_to_stdout:
            print(full_output)

        return BackendResult.sent(f"console-{uuid.uuid4().hex[:12]}")
