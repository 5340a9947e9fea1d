from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

from flippit.domain.entities.listing_result import ListingFailure, ListingResult, ListingSuccess
from flippit.domain.enums.failure_kind import FailureKind
from flippit.domain.enums.listing_attempt_state import ListingAttemptState
from flippit.domain.events.domain_events import (
    DomainEvent,
    ListingFailedEvent,
    ListingPublishedEvent,
)
from flippit.domain.state_machine.listing_attempt_state_machine import (
    ListingAttemptStateMachine,
)

_state_machine = ListingAttemptStateMachine()

_FAILURE_STATES: dict[FailureKind, ListingAttemptState] = {
    FailureKind.VALIDATION: ListingAttemptState.INVALID,
    FailureKind.AUTH: ListingAttemptState.AUTH_FAILED,
    FailureKind.NETWORK: ListingAttemptState.NETWORK_FAILED,
    FailureKind.UPSTREAM_REJECTION: ListingAttemptState.REJECTED,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ListingAttempt:
    """
    One pass through the create-listing workflow.

    Walks the attempt state machine, remembers when each state was entered and
    emits a domain event once it reaches a terminal state. Callers are
    responsible for collecting and publishing the events.
    """

    id: UUID = field(default_factory=uuid4)
    state: ListingAttemptState = ListingAttemptState.IDLE
    title: str = ""
    history: list[tuple[ListingAttemptState, datetime]] = field(default_factory=list)
    result: ListingResult | None = None

    _events: list[DomainEvent] = field(default_factory=list, repr=False, compare=False)

    def transition_to(self, new_state: ListingAttemptState) -> None:
        """Validate and apply a state transition."""
        _state_machine.validate_transition(self.state, new_state)
        now = _utcnow()
        self.state = new_state
        self.history.append((new_state, now))

    def succeed(self, result: ListingSuccess) -> None:
        self.transition_to(ListingAttemptState.SUCCEEDED)
        self.result = result
        self._events.append(
            ListingPublishedEvent(
                attempt_id=self.id,
                item_id=result.item_id,
                url=result.url,
                title=self.title,
            )
        )

    def fail(self, result: ListingFailure) -> None:
        """Move into the terminal state matching the failure kind."""
        self.transition_to(_FAILURE_STATES[result.kind])
        self.result = result
        self._events.append(
            ListingFailedEvent(
                attempt_id=self.id,
                kind=result.kind,
                error_message=result.error_message,
            )
        )

    @property
    def visited_states(self) -> list[ListingAttemptState]:
        return [state for state, _ in self.history]

    def collect_events(self) -> list[DomainEvent]:
        """Return pending events and clear the internal buffer."""
        events = list(self._events)
        self._events.clear()
        return events
