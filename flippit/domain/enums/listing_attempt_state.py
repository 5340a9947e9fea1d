from enum import Enum


class ListingAttemptState(str, Enum):
    """Every state a single create-listing call can pass through."""

    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    ACQUIRING_TOKEN = "ACQUIRING_TOKEN"
    BUILDING_REQUEST = "BUILDING_REQUEST"
    SENDING = "SENDING"
    PARSING_RESPONSE = "PARSING_RESPONSE"
    INVALID = "INVALID"
    AUTH_FAILED = "AUTH_FAILED"
    NETWORK_FAILED = "NETWORK_FAILED"
    SUCCEEDED = "SUCCEEDED"
    REJECTED = "REJECTED"

    @property
    def is_terminal(self) -> bool:
        """Terminal states cannot be transitioned out of."""
        return self in (
            ListingAttemptState.INVALID,
            ListingAttemptState.AUTH_FAILED,
            ListingAttemptState.NETWORK_FAILED,
            ListingAttemptState.SUCCEEDED,
            ListingAttemptState.REJECTED,
        )
