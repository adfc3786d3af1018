"""SMTP email backend."""

from __future__ import annotations

import email.message
import email.policy
import email.utils
import logging
from typing import TYPE_CHECKING, Any

from markupsafe import escape

from ...delivery import Channel, RenderedContent
from ...ports.backend import BackendResult, IChannelBackend

if TYPE_CHECKING:
    from ...config import SmtpSettings

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "Notification"


class SmtpEmailBackend(IChannelBackend):
    """
    Async SMTP email backend using aiosmtplib.

    Port 465 uses implicit TLS; any other port upgrades with STARTTLS.
    """

    channel = Channel.EMAIL

    def __init__(self, settings: SmtpSettings | None):
        self.settings = settings

    def is_configured(self) -> bool:
        return self.settings is not None

    def build_message(
        self, destination: str, content: RenderedContent
    ) -> email.message.EmailMessage:
        """Build a text message with an HTML alternative."""
        assert self.settings is not None
        domain = self.settings.from_email.rpartition("@")[2] or None

        message = email.message.EmailMessage(policy=email.policy.default)
        message["To"] = destination
        message["From"] = email.utils.formataddr(
            (self.settings.from_name, self.settings.from_email)
        )
        message["Subject"] = content.subject or DEFAULT_SUBJECT
        message["Message-ID"] = email.utils.make_msgid(domain=domain)

        html = str(escape(content.body)).replace("\n", "<br>")
        message.set_content(content.body, subtype="plain", charset="utf-8")
        message.add_alternative(html, subtype="html", charset="utf-8")
        return message

    async def send(
        self,
        destination: str,
        content: RenderedContent,
        *,
        data: dict[str, Any] | None = None,
    ) -> BackendResult:
        if self.settings is None:
            return BackendResult.failed("SMTP backend not configured")

        # Lazy import of aiosmtplib
        try:
            import aiosmtplib
        except ImportError as e:
            raise ImportError(
                "aiosmtplib is required for SmtpEmailBackend. "
                "Install with: pip install 'notification-dispatch[smtp]'"
            ) from e

        settings = self.settings
        try:
            message = self.build_message(destination, content)

            async with aiosmtplib.SMTP(
                hostname=settings.host,
                port=settings.port,
                timeout=settings.timeout,
                use_tls=settings.implicit_tls,
                start_tls=False,
            ) as smtp:
                if not settings.implicit_tls:
                    await smtp.starttls()
                await smtp.login(settings.username, settings.password.get_secret_value())
                await smtp.send_message(message)

            logger.info(f"Email sent to {destination} via SMTP")
            return BackendResult.sent(message["Message-ID"])

        except Exception as e:
            logger.error(f"Failed to send email to {destination}: {str(e)}")
            return BackendResult.failed(str(e))
