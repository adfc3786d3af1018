"""Static capability table mapping each channel to its configured backend."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING

from ..delivery import Channel
from ..ports.backend import IChannelBackend

if TYPE_CHECKING:
    from ..config import BackendSettings

logger = logging.getLogger(__name__)


class BackendTable(Mapping[Channel, IChannelBackend]):
    """
    Immutable ``Channel -> backend`` mapping built once at process start.

    Only backends whose ``is_configured()`` is true are kept, so a missing key
    means "provider not configured".
    """

    def __init__(self, backends: Iterable[IChannelBackend] = ()) -> None:
        table: dict[Channel, IChannelBackend] = {}
        for backend in backends:
            if not backend.is_configured():
                logger.info(f"Skipping unconfigured {backend.channel.value} backend")
                continue
            if backend.channel in table:
                logger.warning(f"Replacing {backend.channel.value} backend with {backend!r}")
            table[backend.channel] = backend
        self._table = table
        logger.info(f"Initialized {len(table)} channel backends")

    def __getitem__(self, channel: Channel) -> IChannelBackend:
        return self._table[channel]

    def __iter__(self) -> Iterator[Channel]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        channels = ", ".join(channel.value for channel in self._table)
        return f"BackendTable({channels})"


def build_backend_table(settings: BackendSettings) -> BackendTable:
    """Build the table from settings, constructing only configured backends."""
    backends: list[IChannelBackend] = []
    if settings.smtp is not None:
        from .email.smtp import SmtpEmailBackend

        backends.append(SmtpEmailBackend(settings.smtp))
    if settings.twilio is not None:
        from .sms.twilio import TwilioSmsBackend

        backends.append(TwilioSmsBackend(settings.twilio))
    if settings.apns is not None:
        from .push.apns import ApnsPushBackend

        backends.append(ApnsPushBackend(settings.apns))
    if settings.fcm is not None:
        from .push.fcm import FcmPushBackend

        backends.append(FcmPushBackend(settings.fcm))
    return BackendTable(backends)
