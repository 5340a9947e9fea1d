"""
Reads the Trading API's XML reply.

Values are pulled out with a first-match, case-insensitive tag lookup rather
than a real XML parse. A nested or repeated tag earlier in the document wins,
so e.g. an ``<ItemID>`` inside an error's parameter block would be picked up.
"""
import re

import structlog

from flippit.domain.entities.listing_result import (
    GENERIC_FAILURE_MESSAGE,
    ListingFailure,
    ListingResult,
    ListingSuccess,
)
from flippit.domain.enums.failure_kind import FailureKind

logger = structlog.get_logger(__name__)

_TAG_PATTERNS: dict[str, re.Pattern[str]] = {}


def extract_tag(xml: str, tag: str) -> str | None:
    """Return the text between the first ``<tag>`` and ``</tag>``, or None."""
    pattern = _TAG_PATTERNS.get(tag)
    if pattern is None:
        pattern = re.compile(rf"<{re.escape(tag)}>([\s\S]*?)</{re.escape(tag)}>", re.IGNORECASE)
        _TAG_PATTERNS[tag] = pattern
    match = pattern.search(xml)
    return match.group(1) if match else None


class ListingResponseParser:
    def __init__(self, item_base_url: str) -> None:
        self._item_base_url = item_base_url.rstrip("/")

    def parse(self, xml_body: str) -> ListingResult:
        ack = extract_tag(xml_body, "Ack")
        item_id = extract_tag(xml_body, "ItemID")

        if ack is not None and ack.lower() == "success" and item_id:
            return ListingSuccess(item_id=item_id, url=f"{self._item_base_url}/{item_id}")

        message = (
            extract_tag(xml_body, "LongMessage")
            or extract_tag(xml_body, "ShortMessage")
            or GENERIC_FAILURE_MESSAGE
        )
        logger.warning("ebay_listing_rejected", ack=ack, error=message)
        return ListingFailure(
            error_message=message,
            raw_response_body=xml_body,
            kind=FailureKind.UPSTREAM_REJECTION,
        )
