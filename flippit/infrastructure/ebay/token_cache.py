"""OAuth access-token cache for the eBay Trading API."""
import asyncio
import base64
import time
from collections.abc import Callable

import httpx
import structlog

from flippit.application.interfaces.ebay_gateway import TokenProvider
from flippit.domain.entities.credentials import CachedToken, Credentials
from flippit.domain.errors import AuthError

logger = structlog.get_logger(__name__)

EXPIRY_MARGIN_MS = 60_000
DEFAULT_EXPIRES_IN_SECONDS = 7200


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class TokenCache(TokenProvider):
    """
    Holds a single cached access token and refreshes it from the seller's
    refresh token once it is within a minute of expiring.

    Concurrent callers that find the token stale wait on one shared exchange
    instead of each hitting the token endpoint.
    """

    def __init__(
        self,
        credentials: Credentials,
        token_url: str,
        scope: str,
        timeout: float = 30.0,
        clock: Callable[[], int] = _epoch_ms,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._credentials = credentials
        self._token_url = token_url
        self._scope = scope
        self._timeout = timeout
        self._clock = clock
        self._transport = transport
        self._cached: CachedToken | None = None
        self._lock: asyncio.Lock | None = None
        self._lock_loop: asyncio.AbstractEventLoop | None = None

    @property
    def cached(self) -> CachedToken | None:
        return self._cached

    def invalidate(self) -> None:
        self._cached = None

    async def get_token(self) -> str:
        token = self._fresh_token()
        if token is not None:
            return token

        async with self._refresh_lock():
            # Another caller may have refreshed while we waited.
            token = self._fresh_token()
            if token is not None:
                return token
            self._cached = await self._exchange_refresh_token()
            return self._cached.value

    def _refresh_lock(self) -> asyncio.Lock:
        # An asyncio.Lock belongs to one event loop; the cache outlives loops.
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    def _fresh_token(self) -> str | None:
        if self._cached is not None and self._cached.is_fresh(self._clock(), EXPIRY_MARGIN_MS):
            return self._cached.value
        return None

    async def _exchange_refresh_token(self) -> CachedToken:
        missing = self._credentials.missing_fields()
        if missing:
            raise AuthError(f"Missing eBay OAuth environment variables: {', '.join(missing)}")

        basic = base64.b64encode(
            f"{self._credentials.client_id}:{self._credentials.client_secret}".encode()
        ).decode()
        headers = {
            "Authorization": f"Basic {basic}",
            "Content-Type": "application/x-www-form-urlencoded",
        }
        form = {
            "grant_type": "refresh_token",
            "refresh_token": self._credentials.refresh_token,
            "scope": self._scope,
        }

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.post(self._token_url, data=form, headers=headers)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                logger.error(
                    "ebay_token_exchange_failed",
                    status_code=exc.response.status_code,
                    response=exc.response.text,
                )
                raise AuthError(
                    "Failed to obtain eBay access token: "
                    f"{exc.response.status_code} {exc.response.reason_phrase}",
                    details=exc.response.text,
                ) from exc
            except httpx.RequestError as exc:
                logger.error("ebay_token_endpoint_unreachable", error=str(exc))
                raise AuthError(f"Failed to reach eBay token endpoint: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise AuthError("eBay token response is not valid JSON", details=response.text) from exc

        access_token = data.get("access_token") if isinstance(data, dict) else None
        if not access_token:
            raise AuthError("eBay token response missing access_token", details=response.text)

        try:
            raw_expires_in = data.get("expires_in")
            expires_in = int(DEFAULT_EXPIRES_IN_SECONDS if raw_expires_in is None else raw_expires_in)
        except (TypeError, ValueError) as exc:
            raise AuthError("eBay token response has invalid expires_in", details=response.text) from exc

        token = CachedToken(value=str(access_token), expires_at=self._clock() + expires_in * 1000)
        logger.info("ebay_token_refreshed", expires_in=expires_in)
        return token
