"""Dict-backed fake implementing every store port."""

from __future__ import annotations

import dataclasses
import uuid
from typing import TYPE_CHECKING, Any

from ..delivery import DeliveryRecord, DeliveryStatus
from ..exceptions import StoreDataError
from ..ports.store import IConsentStore, IDeliveryRecordStore, ITemplateStore, IUserStore

if TYPE_CHECKING:
    from datetime import datetime

    from ..delivery import Channel, RenderedContent
    from ..models import ConsentRecord, Template, User


class InMemoryNotificationStore(IUserStore, ITemplateStore, IConsentStore, IDeliveryRecordStore):
    """In-memory implementation of the store ports.

    Users and templates are keyed by ``(tenant_id, id)``, consent by
    ``(user_id, template_key)``. Every status written to a delivery record is
    kept in :attr:`status_history` for audit assertions.
    """

    def __init__(self) -> None:
        self._users: dict[tuple[str, str], User] = {}
        self._templates: dict[tuple[str, str], Template] = {}
        self._consents: dict[tuple[str, str], ConsentRecord] = {}
        self.deliveries: dict[str, DeliveryRecord] = {}
        self.status_history: dict[str, list[DeliveryStatus]] = {}

    # -- seeding (the CRUD side lives outside the pipeline) --

    def add_user(self, user: User) -> None:
        self._users[(user.tenant_id, user.id)] = user

    def add_template(self, template: Template) -> None:
        self._templates[(template.tenant_id, template.key)] = template

    def set_consent(self, consent: ConsentRecord) -> None:
        self._consents[(consent.user_id, consent.template_key)] = consent

    # -- ports --

    async def load_user(self, tenant_id: str, user_id: str) -> User | None:
        return self._users.get((tenant_id, user_id))

    async def load_template(self, tenant_id: str, template_key: str) -> Template | None:
        return self._templates.get((tenant_id, template_key))

    async def load_consent(self, user_id: str, template_key: str) -> ConsentRecord | None:
        return self._consents.get((user_id, template_key))

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
        self.deliveries[delivery_id] = DeliveryRecord(
            id=delivery_id,
            tenant_id=tenant_id,
            user_id=user_id,
            template_key=template_key,
            channel=channel,
            status=DeliveryStatus.PENDING,
            variables=dict(variables),
            rendered_content=rendered.to_dict(),
        )
        self.status_history[delivery_id] = [DeliveryStatus.PENDING]
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
        record = self.deliveries.get(delivery_id)
        if record is None:
            raise StoreDataError(f"Delivery record {delivery_id!r} not found")
        self.deliveries[delivery_id] = dataclasses.replace(
            record,
            status=status,
            error=error,
            sent_at=sent_at,
            provider_message_id=provider_message_id,
        )
        self.status_history[delivery_id].append(status)

    def get_delivery_record(self, delivery_id: str) -> DeliveryRecord | None:
        return self.deliveries.get(delivery_id)

    def records_for(self, user_id: str) -> list[DeliveryRecord]:
        return [r for r in self.deliveries.values() if r.user_id == user_id]
