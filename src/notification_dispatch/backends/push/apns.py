"""Apple Push Notification service backend (HTTP/2 provider API)."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import httpx
from joserfc import jwt
from joserfc.jwk import ECKey

from ...delivery import Channel, RenderedContent
from ...ports.backend import BackendResult, IChannelBackend
from ...utils import json_safe

if TYPE_CHECKING:
    from ...config import ApnsSettings

logger = logging.getLogger(__name__)

PRODUCTION_URL = "https://api.push.apple.com"
SANDBOX_URL = "https://api.sandbox.push.apple.com"

# Apple rejects provider tokens older than an hour.
TOKEN_TTL_SECONDS = 50 * 60


class ApnsPushBackend(IChannelBackend):
    """
    APNs backend using token-based (ES256 JWT) authentication over HTTP/2.

    The provider token is cached and reissued before Apple's one-hour limit.
    One connection is kept open and reused across sends; call :meth:`aclose`
    on shutdown.
    """

    channel = Channel.APPLE_PUSH

    def __init__(
        self,
        settings: ApnsSettings | None,
        http_client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings
        self._client = http_client
        self._clock = clock
        self._token: str | None = None
        self._token_issued_at = 0.0

    def is_configured(self) -> bool:
        return self.settings is not None

    @property
    def base_url(self) -> str:
        assert self.settings is not None
        return PRODUCTION_URL if self.settings.production else SANDBOX_URL

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            assert self.settings is not None
            self._client = httpx.AsyncClient(http2=True, timeout=self.settings.timeout)
        return self._client

    def provider_token(self) -> str:
        """Return the cached provider token, issuing a new one when stale."""
        assert self.settings is not None
        now = self._clock()
        if self._token is None or now - self._token_issued_at >= TOKEN_TTL_SECONDS:
            key = ECKey.import_key(self.settings.private_key.get_secret_value())
            self._token = jwt.encode(
                {"alg": "ES256", "kid": self.settings.key_id},
                {"iss": self.settings.team_id, "iat": int(now)},
                key,
            )
            self._token_issued_at = now
        return self._token

    @staticmethod
    def build_payload(
        content: RenderedContent, data: dict[str, Any] | None
    ) -> dict[str, Any]:
        payload = {key: value for key, value in json_safe(data).items() if key != "aps"}
        payload["aps"] = {
            "alert": {"title": content.title or "", "body": content.body},
            "sound": "default",
            "badge": 1,
        }
        return payload

    async def send(
        self,
        destination: str,
        content: RenderedContent,
        *,
        data: dict[str, Any] | None = None,
    ) -> BackendResult:
        if self.settings is None:
            return BackendResult.failed("APNs backend not configured")

        try:
            headers = {
                "authorization": f"bearer {self.provider_token()}",
                "apns-topic": self.settings.topic,
                "apns-push-type": "alert",
                "apns-priority": "10",
            }
            response = await self._get_client().post(
                f"{self.base_url}/3/device/{destination}",
                json=self.build_payload(content, data),
                headers=headers,
            )

            if response.status_code == 200:
                apns_id = response.headers.get("apns-id")
                logger.info(
                    f"Push sent via APNs to device {destination[:8]}... (apns-id: {apns_id})"
                )
                return BackendResult.sent(apns_id)

            reason = self._error_reason(response)
            logger.error(f"APNs rejected device {destination[:8]}...: {reason}")
            return BackendResult.failed(reason)

        except Exception as e:
            logger.error(f"Failed to send push via APNs: {str(e)}")
            return BackendResult.failed(str(e))

    @staticmethod
    def _error_reason(response: httpx.Response) -> str:
        try:
            reason = response.json().get("reason")
        except ValueError:
            reason = None
        return reason or f"HTTP {response.status_code}"

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
