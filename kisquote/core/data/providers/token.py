"""Access-token issuance and caching for the KIS Open API."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass

import httpx

from kisquote.core.exceptions import AuthenticationError, ConfigurationError
from kisquote.core.logging import get_logger

TOKEN_PATH = "/oauth2/tokenP"
EXPIRY_BUFFER_SECONDS = 10 * 60
RATE_LIMIT_COOLDOWN_SECONDS = 60.0
RATE_LIMIT_CODE = "EGW00133"

logger = get_logger(__name__)


@dataclass
class AccessToken:
    value: str
    expires_at: float

    def is_fresh(self, now: float) -> bool:
        return now < self.expires_at - EXPIRY_BUFFER_SECONDS


class TokenManager:
    """Issue, cache and share one bearer token per client.

    Concurrent callers wait on a single in-flight issuance. A 403 carrying
    ``EGW00133`` (one issuance per minute) opens a cool-down during which the
    cached token is reused even if it is past its refresh point.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        app_key: str,
        app_secret: str,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._http = http
        self._app_key = app_key
        self._app_secret = app_secret
        self._clock = clock
        self._token: AccessToken | None = None
        self._cooldown_until = 0.0
        self._lock = asyncio.Lock()

    @property
    def cached(self) -> AccessToken | None:
        return self._token

    def invalidate(self) -> None:
        """Forget the cached token; the next caller issues a new one."""
        self._token = None

    async def get_token(self) -> str:
        if not self._app_key or not self._app_secret:
            raise ConfigurationError("KIS API credentials are not configured")

        token = self._token
        if token and token.is_fresh(self._clock()):
            return token.value

        async with self._lock:
            now = self._clock()
            token = self._token
            if token and token.is_fresh(now):
                return token.value

            if now < self._cooldown_until:
                if token:
                    logger.warning("Token issuance cooling down, reusing cached token")
                    return token.value
                raise AuthenticationError(
                    "Token issuance is rate limited", details={"msg_cd": RATE_LIMIT_CODE}
                )

            return await self._issue(now)

    async def _issue(self, now: float) -> str:
        response = await self._http.post(
            TOKEN_PATH,
            json={
                "grant_type": "client_credentials",
                "appkey": self._app_key,
                "appsecret": self._app_secret,
            },
        )

        if response.status_code == 403 and RATE_LIMIT_CODE in response.text:
            self._cooldown_until = now + RATE_LIMIT_COOLDOWN_SECONDS
            if self._token:
                logger.warning("Token issuance rate limited, reusing cached token")
                return self._token.value
            raise AuthenticationError(
                "Token issuance is rate limited", details={"msg_cd": RATE_LIMIT_CODE}
            )

        if response.status_code != 200:
            raise AuthenticationError(
                f"Token issuance failed with HTTP {response.status_code}",
                details={"status_code": response.status_code},
            )

        try:
            body = response.json()
            value = body["access_token"]
            expires_in = float(body.get("expires_in", 86400))
        except (ValueError, KeyError, TypeError) as e:
            raise AuthenticationError(f"Malformed token response: {e}") from e

        self._token = AccessToken(value=value, expires_at=now + expires_in)
        logger.info("Issued KIS access token")
        return value


__all__ = ["AccessToken", "TokenManager"]
