"""Configuration for the pipeline and its channel backends.

Backend settings are read from the process environment once at start-up with
pydantic-settings. ``from_env`` returns ``None`` unless every required variable
is set, which is how a backend ends up absent from the backend table. Values
that are set but unusable raise :class:`BackendConfigurationError`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar

from pydantic import Field, SecretStr, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import BackendConfigurationError
from .models import DEFAULT_LOCALE

logger = logging.getLogger(__name__)

_S = TypeVar("_S", bound="ChannelSettings")


def _is_unset(error: Mapping[str, Any]) -> bool:
    # Blank values strip to "" and count as unset.
    return error["type"] == "missing" or error.get("input") == ""


@dataclass(frozen=True)
class DispatchConfig:
    """Pipeline configuration.

    Attributes:
        default_locale: Locale used when a template lacks the user's locale.
        concurrent_sends: Fan per-channel sends out concurrently. Sequential
            sends produce the same result.
    """

    default_locale: str = DEFAULT_LOCALE
    concurrent_sends: bool = True


class ChannelSettings(BaseSettings):
    """Base for backend settings read from prefixed environment variables."""

    model_config = SettingsConfigDict(
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
        populate_by_name=True,
    )

    @field_validator("*", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @classmethod
    def from_env(cls: type[_S]) -> _S | None:
        try:
            return cls()
        except ValidationError as e:
            unset = [
                ".".join(str(part) for part in error["loc"])
                for error in e.errors()
                if _is_unset(error)
            ]
            if len(unset) == e.error_count():
                logger.info(f"{cls.__name__} not configured; unset: {', '.join(unset)}")
                return None
            raise BackendConfigurationError(f"Invalid {cls.__name__}: {e}") from e


class SmtpSettings(ChannelSettings):
    model_config = SettingsConfigDict(env_prefix="SMTP_")

    host: str = Field(min_length=1)
    port: int = Field(ge=1, le=65535)
    username: str = Field(min_length=1, validation_alias="SMTP_USER")
    password: SecretStr = Field(min_length=1)
    from_email: str = Field(min_length=1)
    from_name: str = Field(min_length=1)
    timeout: float = 10.0

    @property
    def implicit_tls(self) -> bool:
        return self.port == 465


class TwilioSettings(ChannelSettings):
    model_config = SettingsConfigDict(env_prefix="TWILIO_")

    account_sid: str = Field(min_length=1)
    auth_token: SecretStr = Field(min_length=1)
    from_number: str = Field(min_length=1, validation_alias="TWILIO_PHONE_NUMBER")


class ApnsSettings(ChannelSettings):
    """APNs token-based authentication settings.

    Attributes:
        key_id: Key identifier of the .p8 signing key.
        team_id: Apple developer team id (token issuer).
        private_key: PEM contents of the .p8 signing key, read from ``key_path``
            when not given directly.
        topic: App bundle id sent as ``apns-topic``.
        production: Use the production gateway instead of the sandbox.
    """

    model_config = SettingsConfigDict(env_prefix="APNS_")

    key_id: str = Field(min_length=1)
    team_id: str = Field(min_length=1)
    key_path: Path | None = None
    private_key: SecretStr = Field(min_length=1)
    topic: str = Field(min_length=1)
    production: bool = False
    timeout: float = 10.0

    @model_validator(mode="before")
    @classmethod
    def _load_key(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("private_key"):
            return data
        path = data.get("key_path")
        if isinstance(path, str):
            path = path.strip()
        if not path:
            return data
        try:
            key = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise BackendConfigurationError(f"Cannot read APNs key file {str(path)!r}: {e}") from e
        return {**data, "private_key": key}


class FcmSettings(ChannelSettings):
    """Firebase service-account settings for the HTTP v1 API."""

    model_config = SettingsConfigDict(env_prefix="FCM_")

    project_id: str = Field(min_length=1)
    client_email: str = Field(min_length=1)
    private_key: SecretStr = Field(min_length=1)
    timeout: float = 10.0

    @field_validator("private_key")
    @classmethod
    def _unescape_newlines(cls, value: SecretStr) -> SecretStr:
        # Keys pasted into env files usually carry literal "\n" sequences.
        return SecretStr(value.get_secret_value().replace("\\n", "\n"))


@dataclass(frozen=True)
class BackendSettings:
    """Settings for every channel backend; ``None`` means not configured."""

    smtp: SmtpSettings | None = None
    twilio: TwilioSettings | None = None
    apns: ApnsSettings | None = None
    fcm: FcmSettings | None = None

    @classmethod
    def from_env(cls) -> BackendSettings:
        return cls(
            smtp=SmtpSettings.from_env(),
            twilio=TwilioSettings.from_env(),
            apns=ApnsSettings.from_env(),
            fcm=FcmSettings.from_env(),
        )
