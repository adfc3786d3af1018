"""Store ports consumed by the dispatch pipeline.

Users, templates and consent records are owned by external CRUD collaborators and
read fresh on every dispatch call. Delivery records are the only rows the pipeline
writes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime

    from ..delivery import Channel, DeliveryStatus, RenderedContent
    from ..models import ConsentRecord, Template, User


@runtime_checkable
class IUserStore(Protocol):
    async def load_user(self, tenant_id: str, user_id: str) -> User | None:
        """Load a user scoped to a tenant."""
        ...


@runtime_checkable
class ITemplateStore(Protocol):
    async def load_template(self, tenant_id: str, template_key: str) -> Template | None:
        """Load a template by key scoped to a tenant."""
        ...


@runtime_checkable
class IConsentStore(Protocol):
    async def load_consent(self, user_id: str, template_key: str) -> ConsentRecord | None:
        """Load the user's consent record for a template, if any."""
        ...


@runtime_checkable
class IDeliveryRecordStore(Protocol):
    """Protocol for persisting per-channel delivery records."""

    async def create_delivery_record(
        self,
        tenant_id: str,
        user_id: str,
        template_key: str,
        channel: Channel,
        rendered: RenderedContent,
        variables: dict[str, Any],
    ) -> str:
        """Persist a PENDING record and return its id."""
        ...

    async def update_delivery_status(
        self,
        delivery_id: str,
        status: DeliveryStatus,
        *,
        error: str | None = None,
        sent_at: datetime | None = None,
        provider_message_id: str | None = None,
    ) -> None:
        """Update the status of a delivery record."""
        ...
