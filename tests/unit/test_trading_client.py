"""Unit tests for the Trading API HTTP client."""
import httpx
import pytest

from flippit.domain.errors import NetworkError
from flippit.infrastructure.ebay.trading_client import EbayTradingClient

TRADING_URL = "https://api.sandbox.ebay.com/ws/api.dll"


def _client(handler) -> EbayTradingClient:  # type: ignore[no-untyped-def]
    return EbayTradingClient(
        trading_url=TRADING_URL,
        site_id="0",
        compatibility_level="1237",
        transport=httpx.MockTransport(handler),
    )


class TestAddFixedPriceItem:
    @pytest.mark.asyncio
    async def test_posts_xml_with_trading_headers(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="<Ack>Success</Ack>")

        body = await _client(handler).add_fixed_price_item("<Req/>", "tok")

        assert body == "<Ack>Success</Ack>"
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == TRADING_URL
        assert request.content == b"<Req/>"
        assert request.headers["X-EBAY-API-CALL-NAME"] == "AddFixedPriceItem"
        assert request.headers["X-EBAY-API-SITEID"] == "0"
        assert request.headers["X-EBAY-API-COMPATIBILITY-LEVEL"] == "1237"
        assert request.headers["X-EBAY-API-IAF-TOKEN"] == "tok"
        assert request.headers["Content-Type"] == "text/xml"

    @pytest.mark.asyncio
    async def test_non_2xx_raises_network_error_with_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="maintenance")

        with pytest.raises(NetworkError) as exc_info:
            await _client(handler).add_fixed_price_item("<Req/>", "tok")

        assert exc_info.value.message == "eBay Trading API error: 503 Service Unavailable"
        assert exc_info.value.details == "maintenance"

    @pytest.mark.asyncio
    async def test_timeout_raises_network_error(self) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(NetworkError):
            await _client(handler).add_fixed_price_item("<Req/>", "tok")
        assert calls == 1
