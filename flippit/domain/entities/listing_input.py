from dataclasses import dataclass
from decimal import Decimal

TITLE_MAX_LENGTH = 80
DEFAULT_CONDITION_ID = 3000  # "Used"


@dataclass(frozen=True)
class ListingInput:
    """A listing that has passed validation and is ready to be rendered."""

    title: str
    description: str
    price: Decimal
    photo_url: str
    condition_id: int = DEFAULT_CONDITION_ID
