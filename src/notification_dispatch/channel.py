"""Channel resolution: request override, then consent, then template defaults."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .delivery import Channel
    from .models import ConsentRecord, SendRequest, Template

logger = logging.getLogger(__name__)


class ChannelResolver:
    """
    Decides which channels a send request targets.

    An explicit override wins even for channels without a configured backend;
    those fail later, per channel. A consent record replaces the template
    defaults entirely, so an explicit ``False`` excludes a default channel.
    """

    def resolve(
        self,
        request: SendRequest,
        template: Template,
        consent: ConsentRecord | None,
    ) -> tuple[Channel, ...]:
        if request.channels:
            return _unique(request.channels)
        if consent is not None:
            return _unique(consent.enabled_channels())
        channels = _unique(template.channels)
        if not channels:
            logger.warning(f"Template {template.key!r} declares no channels")
        return channels


def _unique(channels: tuple[Channel, ...]) -> tuple[Channel, ...]:
    return tuple(dict.fromkeys(channels))
