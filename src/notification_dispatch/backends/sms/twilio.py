"""Twilio SMS backend."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from ...delivery import Channel, RenderedContent
from ...ports.backend import BackendResult, IChannelBackend

if TYPE_CHECKING:
    from ...config import TwilioSettings

logger = logging.getLogger(__name__)


class TwilioSmsBackend(IChannelBackend):
    """
    Twilio SMS backend. Sends the rendered body only.

    The Twilio client is blocking, so each request runs in a worker thread.
    Requires the twilio library: pip install twilio
    """

    channel = Channel.SMS

    def __init__(self, settings: TwilioSettings | None, client: Any | None = None):
        self.settings = settings
        self._client = client

    def is_configured(self) -> bool:
        return self.settings is not None

    def _get_client(self) -> Any:
        """Lazy-initialize the Twilio REST client."""
        if self._client is None:
            assert self.settings is not None
            try:
                from twilio.rest import Client as TwilioClient
            except ImportError as e:
                raise ImportError(
                    "twilio is required for TwilioSmsBackend. "
                    "Install with: pip install 'notification-dispatch[sms]'"
                ) from e
            self._client = TwilioClient(
                self.settings.account_sid, self.settings.auth_token.get_secret_value()
            )
        return self._client

    async def send(
        self,
        destination: str,
        content: RenderedContent,
        *,
        data: dict[str, Any] | None = None,
    ) -> BackendResult:
        if self.settings is None:
            return BackendResult.failed("SMS backend not configured")

        try:
            client = self._get_client()
            message = await asyncio.to_thread(
                client.messages.create,
                to=destination,
                from_=self.settings.from_number,
                body=content.body,
            )

            logger.info(f"SMS sent via Twilio to {destination} (SID: {message.sid})")
            return BackendResult.sent(message.sid)

        except ImportError:
            raise
        except Exception as e:
            logger.error(f"Failed to send SMS via Twilio to {destination}: {str(e)}")
            return BackendResult.failed(str(e))
