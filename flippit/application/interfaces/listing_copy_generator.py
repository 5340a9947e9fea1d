from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class ListingCopy:
    title: str
    description: str
    suggested_price: Decimal | None = None


class ListingCopyGeneratorInterface(ABC):
    """Port for drafting marketplace listing copy with a language model."""

    @abstractmethod
    async def generate(
        self, query_text: str, msrp_price: Decimal | None, platform: str
    ) -> ListingCopy:
        ...
