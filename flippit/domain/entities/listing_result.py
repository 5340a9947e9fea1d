from dataclasses import dataclass

from flippit.domain.enums.failure_kind import FailureKind

GENERIC_FAILURE_MESSAGE = "Failed to create listing"


@dataclass(frozen=True)
class ListingSuccess:
    item_id: str
    url: str


@dataclass(frozen=True)
class ListingFailure:
    error_message: str
    raw_response_body: str | None = None
    kind: FailureKind = FailureKind.UPSTREAM_REJECTION


ListingResult = ListingSuccess | ListingFailure
