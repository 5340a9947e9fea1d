"""Unit tests for the eBay OAuth token cache; the token endpoint is mocked."""
import asyncio
import base64
from urllib.parse import parse_qs

import httpx
import pytest

from flippit.domain.entities.credentials import Credentials
from flippit.domain.errors import AuthError
from flippit.infrastructure.ebay.token_cache import TokenCache

TOKEN_URL = "https://api.sandbox.ebay.com/identity/v1/oauth2/token"
SCOPE = "https://api.ebay.com/oauth/api_scope"


class FakeClock:
    def __init__(self, now_ms: int = 1_700_000_000_000) -> None:
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, seconds: float) -> None:
        self.now_ms += int(seconds * 1000)


class TokenEndpoint:
    """Records requests and answers with a canned response."""

    def __init__(self, status_code: int = 200, json_body: object | None = None, text: str | None = None) -> None:
        self.status_code = status_code
        self.json_body = json_body if json_body is not None else {"access_token": "tok", "expires_in": 7200}
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.json_body)


def _credentials(**overrides: str) -> Credentials:
    values = {"client_id": "app-id", "client_secret": "cert-id", "refresh_token": "v^1.1#refresh"}
    values.update(overrides)
    return Credentials(**values)


def _make_cache(endpoint: TokenEndpoint, clock: FakeClock | None = None, **cred_overrides: str) -> TokenCache:
    return TokenCache(
        credentials=_credentials(**cred_overrides),
        token_url=TOKEN_URL,
        scope=SCOPE,
        clock=clock or FakeClock(),
        transport=httpx.MockTransport(endpoint),
    )


class TestTokenExchange:
    @pytest.mark.asyncio
    async def test_returns_access_token(self) -> None:
        endpoint = TokenEndpoint()
        cache = _make_cache(endpoint)
        assert await cache.get_token() == "tok"

    @pytest.mark.asyncio
    async def test_sends_refresh_token_grant_with_basic_auth(self) -> None:
        endpoint = TokenEndpoint()
        cache = _make_cache(endpoint)
        await cache.get_token()

        request = endpoint.requests[0]
        assert request.method == "POST"
        assert str(request.url) == TOKEN_URL
        expected = base64.b64encode(b"app-id:cert-id").decode()
        assert request.headers["Authorization"] == f"Basic {expected}"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        form = parse_qs(request.content.decode())
        assert form == {
            "grant_type": ["refresh_token"],
            "refresh_token": ["v^1.1#refresh"],
            "scope": [SCOPE],
        }

    @pytest.mark.asyncio
    async def test_computes_expiry_from_expires_in(self) -> None:
        clock = FakeClock(now_ms=1_000)
        cache = _make_cache(TokenEndpoint(json_body={"access_token": "tok", "expires_in": 60}), clock)
        await cache.get_token()
        assert cache.cached is not None
        assert cache.cached.expires_at == 61_000

    @pytest.mark.asyncio
    async def test_defaults_expires_in_when_missing(self) -> None:
        clock = FakeClock(now_ms=0)
        cache = _make_cache(TokenEndpoint(json_body={"access_token": "tok"}), clock)
        await cache.get_token()
        assert cache.cached is not None
        assert cache.cached.expires_at == 7_200_000

    @pytest.mark.asyncio
    async def test_zero_expires_in_is_kept_and_token_is_not_reused(self) -> None:
        endpoint = TokenEndpoint(json_body={"access_token": "tok", "expires_in": 0})
        clock = FakeClock(now_ms=0)
        cache = _make_cache(endpoint, clock)

        await cache.get_token()
        assert cache.cached is not None
        assert cache.cached.expires_at == 0

        await cache.get_token()
        assert len(endpoint.requests) == 2


class TestCaching:
    @pytest.mark.asyncio
    async def test_reuses_token_within_validity_window(self) -> None:
        endpoint = TokenEndpoint()
        clock = FakeClock()
        cache = _make_cache(endpoint, clock)

        first = await cache.get_token()
        clock.advance(3600)
        second = await cache.get_token()

        assert first == second == "tok"
        assert len(endpoint.requests) == 1

    @pytest.mark.asyncio
    async def test_refreshes_inside_safety_margin(self) -> None:
        endpoint = TokenEndpoint()
        clock = FakeClock()
        cache = _make_cache(endpoint, clock)

        await cache.get_token()
        # 7200s lifetime; 60s early counts as expired
        clock.advance(7200 - 60)
        await cache.get_token()

        assert len(endpoint.requests) == 2

    @pytest.mark.asyncio
    async def test_still_fresh_just_before_margin(self) -> None:
        endpoint = TokenEndpoint()
        clock = FakeClock()
        cache = _make_cache(endpoint, clock)

        await cache.get_token()
        clock.advance(7200 - 61)
        await cache.get_token()

        assert len(endpoint.requests) == 1

    @pytest.mark.asyncio
    async def test_invalidate_forces_refresh(self) -> None:
        endpoint = TokenEndpoint()
        cache = _make_cache(endpoint)
        await cache.get_token()
        cache.invalidate()
        await cache.get_token()
        assert len(endpoint.requests) == 2

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_exchange(self) -> None:
        endpoint = TokenEndpoint()
        cache = _make_cache(endpoint)

        tokens = await asyncio.gather(*(cache.get_token() for _ in range(5)))

        assert tokens == ["tok"] * 5
        assert len(endpoint.requests) == 1

    def test_survives_being_used_from_separate_event_loops(self) -> None:
        requests: list[httpx.Request] = []

        async def slow_endpoint(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            await asyncio.sleep(0)
            return httpx.Response(200, json={"access_token": "tok", "expires_in": 7200})

        cache = TokenCache(
            credentials=_credentials(),
            token_url=TOKEN_URL,
            scope=SCOPE,
            clock=FakeClock(),
            transport=httpx.MockTransport(slow_endpoint),
        )

        async def contend() -> list[str]:
            return await asyncio.gather(*(cache.get_token() for _ in range(3)))

        assert asyncio.run(contend()) == ["tok"] * 3
        cache.invalidate()
        assert asyncio.run(contend()) == ["tok"] * 3
        assert len(requests) == 2


class TestFailures:
    @pytest.mark.asyncio
    async def test_missing_credentials_raise_without_network_call(self) -> None:
        endpoint = TokenEndpoint()
        cache = _make_cache(endpoint, refresh_token="")

        with pytest.raises(AuthError) as exc_info:
            await cache.get_token()

        assert "EBAY_REFRESH_TOKEN" in exc_info.value.message
        assert endpoint.requests == []

    @pytest.mark.asyncio
    async def test_non_2xx_raises_with_body_attached(self) -> None:
        endpoint = TokenEndpoint(status_code=400, json_body={"error": "invalid_grant"})
        cache = _make_cache(endpoint)

        with pytest.raises(AuthError) as exc_info:
            await cache.get_token()

        assert "400" in exc_info.value.message
        assert exc_info.value.details is not None
        assert "invalid_grant" in exc_info.value.details

    @pytest.mark.asyncio
    async def test_missing_access_token_raises(self) -> None:
        cache = _make_cache(TokenEndpoint(json_body={"expires_in": 7200}))
        with pytest.raises(AuthError, match="missing access_token"):
            await cache.get_token()

    @pytest.mark.asyncio
    async def test_malformed_json_raises(self) -> None:
        cache = _make_cache(TokenEndpoint(text="<html>oops</html>"))
        with pytest.raises(AuthError, match="not valid JSON"):
            await cache.get_token()

    @pytest.mark.asyncio
    async def test_transport_error_raises_auth_error(self) -> None:
        def _boom(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        cache = TokenCache(
            credentials=_credentials(),
            token_url=TOKEN_URL,
            scope=SCOPE,
            transport=httpx.MockTransport(_boom),
        )
        with pytest.raises(AuthError):
            await cache.get_token()

    @pytest.mark.asyncio
    async def test_failed_refresh_keeps_previous_cache(self) -> None:
        endpoint = TokenEndpoint()
        clock = FakeClock()
        cache = _make_cache(endpoint, clock)
        await cache.get_token()
        previous = cache.cached

        clock.advance(7200)
        endpoint.status_code = 500
        with pytest.raises(AuthError):
            await cache.get_token()

        assert cache.cached == previous
