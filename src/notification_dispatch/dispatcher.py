"""Dispatch orchestrator: load, resolve, render, fan out, aggregate."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from .channel import ChannelResolver
from .config import DispatchConfig
from .delivery import (
    NO_RECIPIENT,
    PROVIDER_NOT_CONFIGURED,
    Channel,
    ChannelOutcome,
    DeliveryStatus,
    DispatchResult,
    RenderedContent,
)
from .exceptions import TemplateNotFoundError, UserNotFoundError
from .locales import LocaleResolver
from .ports.backend import BackendResult, IChannelBackend
from .template.engine import TemplateRenderer

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from .models import SendRequest, Template, User
    from .ports.renderer import ITemplateRenderer
    from .ports.store import IConsentStore, IDeliveryRecordStore, ITemplateStore, IUserStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DispatchOrchestrator:
    """
    Runs one dispatch call per :meth:`dispatch` invocation.

    Steps run strictly in order: load user, load template, resolve channels,
    resolve locale, render. Any failure up to that point is terminal and raises a
    :class:`~notification_dispatch.exceptions.DispatchError` before a single
    delivery record exists. After rendering, each channel runs as an independent
    task with its own delivery record; a failing channel never aborts or rolls
    back its siblings, and the result is aggregated only once every task is done.

    Backends are injected as a ``Channel -> backend`` mapping (normally a
    :class:`~notification_dispatch.backends.BackendTable`); a channel missing from
    it fails with "provider not configured".
    """

    def __init__(
        self,
        *,
        users: IUserStore,
        templates: ITemplateStore,
        consents: IConsentStore,
        deliveries: IDeliveryRecordStore,
        backends: Mapping[Channel, IChannelBackend],
        config: DispatchConfig | None = None,
        renderer: ITemplateRenderer | None = None,
        channel_resolver: ChannelResolver | None = None,
        locale_resolver: LocaleResolver | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.config = config or DispatchConfig()
        self.users = users
        self.templates = templates
        self.consents = consents
        self.deliveries = deliveries
        self.backends = backends
        self.renderer = renderer or TemplateRenderer()
        self.channel_resolver = channel_resolver or ChannelResolver()
        self.locale_resolver = locale_resolver or LocaleResolver(self.config.default_locale)
        self._clock = clock

    @classmethod
    def from_store(
        cls,
        store: Any,
        backends: Mapping[Channel, IChannelBackend],
        **kwargs: Any,
    ) -> DispatchOrchestrator:
        """Build an orchestrator around a store implementing every store port."""
        return cls(
            users=store,
            templates=store,
            consents=store,
            deliveries=store,
            backends=backends,
            **kwargs,
        )

    async def dispatch(self, tenant_id: str, request: SendRequest) -> DispatchResult:
        """Deliver one template to one user on every resolved channel."""
        user = await self.users.load_user(tenant_id, request.user_id)
        if user is None:
            logger.warning(f"Dispatch aborted: user {request.user_id!r} not found")
            raise UserNotFoundError(tenant_id, request.user_id)

        template = await self.templates.load_template(tenant_id, request.template_key)
        if template is None:
            logger.warning(f"Dispatch aborted: template {request.template_key!r} not found")
            raise TemplateNotFoundError(tenant_id, request.template_key)

        consent = None
        if not request.channels:
            consent = await self.consents.load_consent(user.id, template.key)
        channels = self.channel_resolver.resolve(request, template, consent)

        content = self.locale_resolver.resolve(template, user.locale)
        rendered = self.renderer.render_content(content, request.variables)

        logger.info(
            f"Dispatching {template.key!r} to user {user.id!r} on "
            f"[{', '.join(c.value for c in channels)}]"
        )
        outcomes = await self._fan_out(
            channels,
            lambda channel: self._send_channel(
                tenant_id, user, template, channel, rendered, request
            ),
        )
        result = DispatchResult(outcomes=tuple(outcomes))

        logger.info(
            f"Dispatch of {template.key!r} to user {user.id!r} finished: "
            f"{len(result.delivery_ids)} sent, {len(result.failures)} failed"
        )
        return result

    async def _fan_out(
        self,
        channels: tuple[Channel, ...],
        send: Callable[[Channel], Awaitable[ChannelOutcome]],
    ) -> list[ChannelOutcome]:
        if self.config.concurrent_sends:
            results: list[Any] = await asyncio.gather(
                *(send(channel) for channel in channels), return_exceptions=True
            )
        else:
            results = []
            for channel in channels:
                try:
                    results.append(await send(channel))
                except Exception as e:
                    results.append(e)

        outcomes: list[ChannelOutcome] = []
        for channel, result in zip(channels, results):
            if isinstance(result, Exception):
                logger.error(
                    f"Unexpected error on {channel.value} channel: {result}",
                    exc_info=result,
                )
                reason = str(result) or type(result).__name__
                outcomes.append(ChannelOutcome.failed(channel, reason))
            elif isinstance(result, BaseException):
                raise result
            else:
                outcomes.append(result)
        return outcomes

    async def _send_channel(
        self,
        tenant_id: str,
        user: User,
        template: Template,
        channel: Channel,
        rendered: RenderedContent,
        request: SendRequest,
    ) -> ChannelOutcome:
        delivery_id = await self.deliveries.create_delivery_record(
            tenant_id, user.id, template.key, channel, rendered, request.variables
        )

        addresses = user.addresses_for(channel)
        if not addresses:
            return await self._fail(channel, delivery_id, NO_RECIPIENT)

        backend = self.backends.get(channel)
        if backend is None:
            return await self._fail(channel, delivery_id, PROVIDER_NOT_CONFIGURED)

        results = [
            await self._send_one(backend, address, rendered, request.variables)
            for address in addresses
        ]
        errors = [r.error or "unknown error" for r in results if not r.success]
        message_ids = [r.message_id for r in results if r.success and r.message_id]

        if len(errors) == len(results):
            return await self._fail(channel, delivery_id, "; ".join(errors))

        if errors:
            logger.warning(
                f"{channel.value}: {len(errors)} of {len(results)} devices failed "
                f"for delivery {delivery_id}"
            )
        await self.deliveries.update_delivery_status(
            delivery_id,
            DeliveryStatus.SENT,
            error="; ".join(errors) or None,
            sent_at=self._clock(),
            provider_message_id=",".join(message_ids) or None,
        )
        return ChannelOutcome.sent(channel, delivery_id)

    async def _send_one(
        self,
        backend: IChannelBackend,
        address: str,
        rendered: RenderedContent,
        variables: dict[str, Any],
    ) -> BackendResult:
        try:
            return await backend.send(address, rendered, data=variables)
        except Exception as e:
            logger.warning(f"{backend.channel.value} backend raised: {e!r}")
            return BackendResult.failed(str(e) or type(e).__name__)

    async def _fail(self, channel: Channel, delivery_id: str, reason: str) -> ChannelOutcome:
        logger.warning(f"{channel.value} delivery {delivery_id} failed: {reason}")
        await self.deliveries.update_delivery_status(
            delivery_id, DeliveryStatus.FAILED, error=reason
        )
        return ChannelOutcome.failed(channel, reason, delivery_id)
