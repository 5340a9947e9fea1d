from abc import ABC, abstractmethod


class TokenProvider(ABC):
    """Port for obtaining a bearer token for the Trading API."""

    @abstractmethod
    async def get_token(self) -> str:
        """Raises AuthError when no token can be obtained."""
        ...


class TradingGateway(ABC):
    """Port for submitting XML calls to the eBay Trading API."""

    @abstractmethod
    async def add_fixed_price_item(self, xml_body: str, access_token: str) -> str:
        """Returns the raw XML response body. Raises NetworkError on transport or non-2xx."""
        ...
