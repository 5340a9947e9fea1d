"""
Validation and XML rendering for the Trading API ``AddFixedPriceItem`` call.

The title is embedded as-is (only its length is checked); the description
goes inside a CDATA section. A title containing ``&`` or ``<`` therefore
produces XML the Trading API will reject.
"""
import math
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from numbers import Real
from typing import Any
from urllib.parse import urlsplit

from flippit.domain.entities.listing_input import (
    DEFAULT_CONDITION_ID,
    TITLE_MAX_LENGTH,
    ListingInput,
)
from flippit.domain.errors import ValidationError

_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class ListingDefaults:
    """Fixed listing policy sent with every item. Configuration, not business logic."""

    category_id: str = "31387"
    currency: str = "USD"
    country: str = "US"
    site: str = "US"
    postal_code: str = "95125"
    dispatch_time_max: int = 3
    listing_duration: str = "GTC"
    shipping_service: str = "USPSPriority"
    shipping_cost: str = "25.00"


def _first_present(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def _as_stripped_str(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _as_price(value: Any) -> Decimal | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, Real):
        return Decimal(str(value)) if math.isfinite(value) else None
    return None


def _as_condition_id(value: Any) -> int:
    if isinstance(value, bool):
        return DEFAULT_CONDITION_ID
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return DEFAULT_CONDITION_ID


def is_https_url(url: str) -> bool:
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme.lower() == "https" and bool(parts.netloc)


def format_price(price: Decimal) -> str:
    # quantize needs one digit of precision per integer digit plus the cents
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, price.adjusted() + 3)
        return str(price.quantize(_CENTS, rounding=ROUND_HALF_UP))


class ListingRequestBuilder:
    def __init__(self, defaults: ListingDefaults | None = None) -> None:
        self._defaults = defaults or ListingDefaults()

    def validate(self, raw: Mapping[str, Any]) -> ListingInput:
        """
        Check a caller-supplied listing and return an immutable ListingInput.

        Checks run in a fixed order and the first failure is the one raised:
        title present, title length, description present, price positive and
        finite, photo URL present and https. ``conditionId`` is optional and
        falls back to 3000 ("Used") when absent or not an integer.
        Accepts camelCase (``photoUrl``) or snake_case (``photo_url``) keys.
        """
        title = _as_stripped_str(raw.get("title"))
        if not title:
            raise ValidationError("title is required")
        if len(title) > TITLE_MAX_LENGTH:
            raise ValidationError(f"title must be ≤ {TITLE_MAX_LENGTH} characters")

        description = _as_stripped_str(raw.get("description"))
        if not description:
            raise ValidationError("description is required")

        price = _as_price(raw.get("price"))
        if price is None or price <= 0:
            raise ValidationError("price must be a positive number")

        photo_url = _as_stripped_str(_first_present(raw, "photoUrl", "photo_url"))
        if not photo_url or not is_https_url(photo_url):
            raise ValidationError("photoUrl must be a valid public HTTPS URL")

        condition_id = _as_condition_id(_first_present(raw, "conditionId", "condition_id"))

        return ListingInput(
            title=title,
            description=description,
            price=price,
            photo_url=photo_url,
            condition_id=condition_id,
        )

    def build(self, listing: ListingInput) -> str:
        d = self._defaults
        title = listing.title[:TITLE_MAX_LENGTH]
        return f"""<?xml version="1.0" encoding="utf-8"?>
<AddFixedPriceItemRequest xmlns="urn:ebay:apis:eBLBaseComponents">
  <ErrorLanguage>en_US</ErrorLanguage>
  <WarningLevel>High</WarningLevel>
  <Item>
    <Title>{title}</Title>
    <Description><![CDATA[{listing.description}]]></Description>
    <PrimaryCategory>
      <CategoryID>{d.category_id}</CategoryID>
    </PrimaryCategory>
    <StartPrice currencyID="{d.currency}">{format_price(listing.price)}</StartPrice>
    <CategoryMappingAllowed>true</CategoryMappingAllowed>
    <ConditionID>{listing.condition_id}</ConditionID>
    <Country>{d.country}</Country>
    <Currency>{d.currency}</Currency>
    <DispatchTimeMax>{d.dispatch_time_max}</DispatchTimeMax>
    <ListingDuration>{d.listing_duration}</ListingDuration>
    <ListingType>FixedPriceItem</ListingType>
    <PictureDetails>
      <PictureURL>{listing.photo_url}</PictureURL>
    </PictureDetails>
    <PostalCode>{d.postal_code}</PostalCode>
    <Quantity>1</Quantity>
    <ShipToLocations>{d.country}</ShipToLocations>
    <ShippingDetails>
      <ShippingType>Flat</ShippingType>
      <ShippingServiceOptions>
        <ShippingServicePriority>1</ShippingServicePriority>
        <ShippingService>{d.shipping_service}</ShippingService>
        <ShippingServiceCost currencyID="{d.currency}">{d.shipping_cost}</ShippingServiceCost>
      </ShippingServiceOptions>
    </ShippingDetails>
    <Site>{d.site}</Site>
  </Item>
</AddFixedPriceItemRequest>"""
