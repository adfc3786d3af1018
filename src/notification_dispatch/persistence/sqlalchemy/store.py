"""SQLAlchemy store implementing every port the pipeline consumes."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy import select, update

from ...delivery import Channel, DeliveryRecord, DeliveryStatus
from ...exceptions import StoreDataError
from ...models import ConsentRecord, Template, User
from ...ports.store import IConsentStore, IDeliveryRecordStore, ITemplateStore, IUserStore
from .models import DeliveryModel, SubscriptionModel, TemplateModel, UserModel

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.ext.asyncio import AsyncSession

    from ...delivery import RenderedContent

    AsyncSessionFactory = Callable[[], AsyncSession]

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _validate(model: type[M], data: dict[str, Any], what: str) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.error(f"Invalid {what}: {e}")
        raise StoreDataError(f"Invalid {what}: {e}") from e


class SQLAlchemyNotificationStore(IUserStore, ITemplateStore, IConsentStore, IDeliveryRecordStore):
    """
    Reads users, templates and consent, and writes delivery records.

    Every call opens its own session, so nothing is cached across dispatch calls
    and each delivery status write is committed immediately.
    """

    def __init__(self, session_factory: AsyncSessionFactory) -> None:
        self._session_factory = session_factory

    async def load_user(self, tenant_id: str, user_id: str) -> User | None:
        async with self._session_factory() as session:
            row = await session.scalar(
                select(UserModel).where(UserModel.id == user_id, UserModel.tenant_id == tenant_id)
            )
        if row is None:
            return None
        return _validate(
            User,
            {
                "id": row.id,
                "tenant_id": row.tenant_id,
                "locale": row.locale,
                "email": row.email,
                "phone_number": row.phone_number,
                "timezone": row.timezone,
                "apns_tokens": row.apns_tokens,
                "fcm_tokens": row.fcm_tokens,
            },
            f"user {user_id!r}",
        )

    async def load_template(self, tenant_id: str, template_key: str) -> Template | None:
        async with self._session_factory() as session:
            row = await session.scalar(
                select(TemplateModel).where(
                    TemplateModel.tenant_id == tenant_id, TemplateModel.key == template_key
                )
            )
        if row is None:
            return None
        return _validate(
            Template,
            {
                "key": row.key,
                "tenant_id": row.tenant_id,
                "name": row.name,
                "description": row.description,
                "channels": row.channels or [],
                "translations": row.translations or {},
            },
            f"template {template_key!r}",
        )

    async def load_consent(self, user_id: str, template_key: str) -> ConsentRecord | None:
        async with self._session_factory() as session:
            row = await session.scalar(
                select(SubscriptionModel).where(
                    SubscriptionModel.user_id == user_id,
                    SubscriptionModel.template_key == template_key,
                )
            )
        if row is None:
            return None
        return _validate(
            ConsentRecord,
            {"user_id": row.user_id, "template_key": row.template_key, "channels": row.channels},
            f"subscription {user_id!r}/{template_key!r}",
        )

    async def create_delivery_record(
        self,
        tenant_id: str,
        user_id: str,
        template_key: str,
        channel: Channel,
        rendered: RenderedContent,
        variables: dict[str, Any],
    ) -> str:
        delivery_id = str(uuid.uuid4())
        record = DeliveryModel(
            id=delivery_id,
            tenant_id=tenant_id,
            user_id=user_id,
            template_key=template_key,
            channel=channel.value,
            status=DeliveryStatus.PENDING,
            variables=dict(variables),
            rendered_content=rendered.to_dict(),
        )
        async with self._session_factory() as session:
            session.add(record)
            await session.commit()
        return delivery_id

    async def update_delivery_status(
        self,
        delivery_id: str,
        status: DeliveryStatus,
        *,
        error: str | None = None,
        sent_at: datetime | None = None,
        provider_message_id: str | None = None,
    ) -> None:
        async with self._session_factory() as session:
            result = await session.execute(
                update(DeliveryModel)
                .where(DeliveryModel.id == delivery_id)
                .values(
                    status=status,
                    error=error,
                    sent_at=sent_at,
                    provider_message_id=provider_message_id,
                    updated_at=datetime.now(timezone.utc),
                )
            )
            if result.rowcount == 0:
                await session.rollback()
                raise StoreDataError(f"Delivery record {delivery_id!r} not found")
            await session.commit()

    async def get_delivery_record(self, delivery_id: str) -> DeliveryRecord | None:
        async with self._session_factory() as session:
            row = await session.get(DeliveryModel, delivery_id)
        if row is None:
            return None
        return DeliveryRecord(
            id=row.id,
            tenant_id=row.tenant_id,
            user_id=row.user_id,
            template_key=row.template_key,
            channel=Channel(row.channel),
            status=row.status,
            variables=row.variables or {},
            rendered_content=row.rendered_content or {},
            error=row.error,
            provider_message_id=row.provider_message_id,
            sent_at=row.sent_at,
            created_at=row.created_at,
        )
