"""
Event publisher that writes domain events to the structured log.

Used as the default publisher; there is no message bus in this deployment.
"""
from dataclasses import asdict

import structlog

from flippit.application.interfaces.event_publisher import EventPublisher
from flippit.domain.events.domain_events import DomainEvent

logger = structlog.get_logger(__name__)


class LoggingEventPublisher(EventPublisher):

    async def publish(self, event: DomainEvent) -> None:
        payload = {
            key: str(value) if value is not None else None
            for key, value in asdict(event).items()
        }
        logger.info("domain_event", event_type=type(event).__name__, **payload)


class NoOpEventPublisher(EventPublisher):
    """Discards all events. Useful for testing."""

    async def publish(self, event: DomainEvent) -> None:
        logger.debug("noop_event_discarded", event_type=type(event).__name__)
