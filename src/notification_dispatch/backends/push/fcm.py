"""Firebase Cloud Messaging backend (HTTP v1 API)."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import httpx
from joserfc import jwt
from joserfc.jwk import RSAKey

from ...delivery import Channel, RenderedContent
from ...ports.backend import BackendResult, IChannelBackend
from .payload import string_values

if TYPE_CHECKING:
    from ...config import FcmSettings

logger = logging.getLogger(__name__)

TOKEN_URL = "https://oauth2.googleapis.com/token"
MESSAGING_SCOPE = "https://www.googleapis.com/auth/firebase.messaging"
SEND_URL = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"
JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"

# Refresh the access token this many seconds before Google expires it.
TOKEN_EXPIRY_MARGIN = 60


class FcmPushBackend(IChannelBackend):
    """
    FCM backend authenticating with a service-account key.

    A signed RS256 assertion is exchanged for an OAuth2 access token, which is
    cached until shortly before it expires.
    """

    channel = Channel.GOOGLE_PUSH

    def __init__(
        self,
        settings: FcmSettings | None,
        http_client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings
        self._client = http_client
        self._clock = clock
        self._access_token: str | None = None
        self._expires_at = 0.0

    def is_configured(self) -> bool:
        return self.settings is not None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            assert self.settings is not None
            self._client = httpx.AsyncClient(timeout=self.settings.timeout)
        return self._client

    def _assertion(self, now: float) -> str:
        assert self.settings is not None
        key = RSAKey.import_key(self.settings.private_key.get_secret_value())
        claims = {
            "iss": self.settings.client_email,
            "scope": MESSAGING_SCOPE,
            "aud": TOKEN_URL,
            "iat": int(now),
            "exp": int(now) + 3600,
        }
        return jwt.encode({"alg": "RS256", "typ": "JWT"}, claims, key)

    async def access_token(self) -> str:
        """Return a cached OAuth2 access token, exchanging a new assertion when due."""
        now = self._clock()
        if self._access_token is not None and now < self._expires_at - TOKEN_EXPIRY_MARGIN:
            return self._access_token

        response = await self._get_client().post(
            TOKEN_URL,
            data={"grant_type": JWT_BEARER_GRANT, "assertion": self._assertion(now)},
        )
        response.raise_for_status()
        body = response.json()
        self._access_token = body["access_token"]
        self._expires_at = now + float(body.get("expires_in", 3600))
        return self._access_token

    @staticmethod
    def build_message(
        destination: str, content: RenderedContent, data: dict[str, Any] | None
    ) -> dict[str, Any]:
        return {
            "message": {
                "token": destination,
                "notification": {"title": content.title or "", "body": content.body},
                "data": string_values(data),
                "android": {"priority": "high"},
                "apns": {"payload": {"aps": {"badge": 1, "sound": "default"}}},
            }
        }

    async def send(
        self,
        destination: str,
        content: RenderedContent,
        *,
        data: dict[str, Any] | None = None,
    ) -> BackendResult:
        if self.settings is None:
            return BackendResult.failed("FCM backend not configured")

        try:
            token = await self.access_token()
            response = await self._get_client().post(
                SEND_URL.format(project_id=self.settings.project_id),
                json=self.build_message(destination, content, data),
                headers={"Authorization": f"Bearer {token}"},
            )

            if response.status_code == 200:
                message_id = response.json().get("name")
                logger.info(f"Push sent via FCM (message: {message_id})")
                return BackendResult.sent(message_id)

            reason = self._error_reason(response)
            logger.error(f"FCM rejected device {destination[:8]}...: {reason}")
            return BackendResult.failed(reason)

        except httpx.HTTPStatusError as e:
            logger.error(f"FCM token exchange failed: HTTP {e.response.status_code}")
            return BackendResult.failed(f"token exchange failed: HTTP {e.response.status_code}")
        except Exception as e:
            logger.error(f"Failed to send push via FCM: {str(e)}")
            return BackendResult.failed(str(e))

    @staticmethod
    def _error_reason(response: httpx.Response) -> str:
        try:
            error = response.json().get("error") or {}
        except ValueError:
            error = {}
        return error.get("message") or error.get("status") or f"HTTP {response.status_code}"

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
