from flippit.domain.enums.listing_attempt_state import ListingAttemptState


# Mapping of valid transitions: from_state -> set of allowed to_states
VALID_TRANSITIONS: dict[ListingAttemptState, frozenset[ListingAttemptState]] = {
    ListingAttemptState.IDLE: frozenset({ListingAttemptState.VALIDATING}),
    ListingAttemptState.VALIDATING: frozenset(
        {ListingAttemptState.INVALID, ListingAttemptState.ACQUIRING_TOKEN}
    ),
    ListingAttemptState.ACQUIRING_TOKEN: frozenset(
        {ListingAttemptState.AUTH_FAILED, ListingAttemptState.BUILDING_REQUEST}
    ),
    ListingAttemptState.BUILDING_REQUEST: frozenset({ListingAttemptState.SENDING}),
    ListingAttemptState.SENDING: frozenset(
        {ListingAttemptState.NETWORK_FAILED, ListingAttemptState.PARSING_RESPONSE}
    ),
    ListingAttemptState.PARSING_RESPONSE: frozenset(
        {ListingAttemptState.SUCCEEDED, ListingAttemptState.REJECTED}
    ),
    # Terminal states: no outgoing transitions
    ListingAttemptState.INVALID: frozenset(),
    ListingAttemptState.AUTH_FAILED: frozenset(),
    ListingAttemptState.NETWORK_FAILED: frozenset(),
    ListingAttemptState.SUCCEEDED: frozenset(),
    ListingAttemptState.REJECTED: frozenset(),
}


class InvalidStateTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_state: ListingAttemptState, to_state: ListingAttemptState) -> None:
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid transition from {from_state.value} to {to_state.value}. "
            f"Allowed transitions: {sorted(s.value for s in VALID_TRANSITIONS.get(from_state, frozenset()))}"
        )


class ListingAttemptStateMachine:
    """
    Validates state transitions for a single create-listing call.

    Stateless; callers pass explicit from/to states.
    """

    def can_transition(
        self, from_state: ListingAttemptState, to_state: ListingAttemptState
    ) -> bool:
        """Return True if transitioning from_state → to_state is permitted."""
        if from_state.is_terminal:
            return False
        return to_state in VALID_TRANSITIONS.get(from_state, frozenset())

    def validate_transition(
        self, from_state: ListingAttemptState, to_state: ListingAttemptState
    ) -> None:
        """Raise InvalidStateTransitionError if the transition is not permitted."""
        if not self.can_transition(from_state, to_state):
            raise InvalidStateTransitionError(from_state, to_state)

