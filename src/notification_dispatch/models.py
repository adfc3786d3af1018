"""External entities read by the pipeline.

These are validated once, where a store hands data to the pipeline, so the
orchestrator only ever sees well-typed channel tags and locale maps.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .delivery import Channel

DEFAULT_LOCALE = "en-US"

LocaleTag = Annotated[str, Field(pattern=r"^[A-Za-z]{2,3}(-[A-Za-z0-9]{2,8})*$")]


class ValueObject(BaseModel):
    """Immutable model; accepts both snake_case and camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class LocalizedContent(ValueObject):
    """Placeholder patterns for one locale. ``body`` is mandatory."""

    body: str
    subject: str | None = None
    title: str | None = None
    variables: tuple[str, ...] = ()


class Template(ValueObject):
    key: str = Field(min_length=1)
    tenant_id: str
    name: str = ""
    description: str | None = None
    channels: tuple[Channel, ...] = ()
    translations: dict[LocaleTag, LocalizedContent] = Field(default_factory=dict)


class User(ValueObject):
    """Recipient with per-channel destination addresses."""

    id: str
    tenant_id: str
    locale: str = DEFAULT_LOCALE
    email: str | None = None
    phone_number: str | None = None
    timezone: str | None = None
    apns_tokens: tuple[str, ...] = ()
    fcm_tokens: tuple[str, ...] = ()

    @field_validator("locale", mode="before")
    @classmethod
    def _normalize_locale(cls, value: Any) -> Any:
        # Legacy rows hold tags like "en_GB"; unknown locales fall back at lookup.
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_LOCALE
        if not isinstance(value, str):
            return value
        language, *rest = value.strip().replace("_", "-").split("-")
        subtags = [tag.upper() if len(tag) == 2 else tag for tag in rest]
        return "-".join([language.lower(), *subtags])

    @field_validator("email", "phone_number", "timezone", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("apns_tokens", "fcm_tokens", mode="before")
    @classmethod
    def _clean_tokens(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        return tuple(token for token in value if isinstance(token, str) and token.strip())

    def addresses_for(self, channel: Channel) -> tuple[str, ...]:
        """Destination addresses for a channel; empty when none is configured."""
        if channel is Channel.APPLE_PUSH:
            return self.apns_tokens
        if channel is Channel.GOOGLE_PUSH:
            return self.fcm_tokens
        if channel is Channel.SMS:
            return (self.phone_number,) if self.phone_number else ()
        if channel is Channel.EMAIL:
            return (self.email,) if self.email else ()
        return ()


class ConsentRecord(ValueObject):
    """A user's explicit per-channel opt-in/opt-out for one template."""

    user_id: str
    template_key: str
    channels: dict[Channel, bool] = Field(default_factory=dict)

    def enabled_channels(self) -> tuple[Channel, ...]:
        return tuple(channel for channel, enabled in self.channels.items() if enabled)


class SendRequest(ValueObject):
    """One dispatch request. ``channels`` overrides consent and template defaults."""

    user_id: str
    template_key: str
    variables: dict[str, Any] = Field(default_factory=dict)
    channels: tuple[Channel, ...] = ()
