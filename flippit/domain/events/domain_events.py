from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

from flippit.domain.enums.failure_kind import FailureKind


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    """Base class for all domain events."""

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class ListingPublishedEvent(DomainEvent):
    """Published when the Trading API accepts a new fixed-price item."""

    attempt_id: UUID = field(default_factory=uuid4)
    item_id: str = ""
    url: str = ""
    title: str = ""


@dataclass(frozen=True)
class ListingFailedEvent(DomainEvent):
    """Published when a create-listing attempt ends in any failure state."""

    attempt_id: UUID = field(default_factory=uuid4)
    kind: FailureKind = FailureKind.UPSTREAM_REJECTION
    error_message: str = ""
