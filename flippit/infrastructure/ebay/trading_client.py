"""HTTP client for the eBay Trading API (XML over POST)."""

import httpx
import structlog

from flippit.application.interfaces.ebay_gateway import TradingGateway
from flippit.domain.errors import NetworkError

logger = structlog.get_logger(__name__)


class EbayTradingClient(TradingGateway):
    """Thin HTTP wrapper around ``/ws/api.dll``. Never retries."""

    def __init__(
        self,
        trading_url: str,
        site_id: str = "0",
        compatibility_level: str = "1237",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._trading_url = trading_url
        self._site_id = site_id
        self._compatibility_level = compatibility_level
        self._timeout = timeout
        self._transport = transport

    def _headers(self, call_name: str, access_token: str) -> dict[str, str]:
        return {
            "X-EBAY-API-CALL-NAME": call_name,
            "X-EBAY-API-SITEID": self._site_id,
            "X-EBAY-API-COMPATIBILITY-LEVEL": self._compatibility_level,
            "X-EBAY-API-IAF-TOKEN": access_token,
            "Content-Type": "text/xml",
        }

    async def add_fixed_price_item(self, xml_body: str, access_token: str) -> str:
        """
        POST AddFixedPriceItem → raw XML response text.
        """
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    self._trading_url,
                    content=xml_body.encode("utf-8"),
                    headers=self._headers("AddFixedPriceItem", access_token),
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                logger.error(
                    "ebay_trading_request_failed",
                    status_code=exc.response.status_code,
                    response=exc.response.text,
                )
                raise NetworkError(
                    "eBay Trading API error: "
                    f"{exc.response.status_code} {exc.response.reason_phrase}",
                    details=exc.response.text,
                ) from exc
            except httpx.RequestError as exc:
                logger.error("ebay_trading_connection_failed", error=str(exc))
                raise NetworkError(f"Failed to reach eBay Trading API: {exc}") from exc

        logger.info("ebay_trading_response_received", status_code=response.status_code)
        return response.text
