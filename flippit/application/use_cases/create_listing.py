from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from flippit.application.interfaces.ebay_gateway import TokenProvider, TradingGateway
from flippit.application.interfaces.event_publisher import EventPublisher
from flippit.domain.entities.listing_attempt import ListingAttempt
from flippit.domain.entities.listing_result import ListingFailure, ListingResult, ListingSuccess
from flippit.domain.enums.listing_attempt_state import ListingAttemptState
from flippit.domain.errors import FlippitError
from flippit.infrastructure.ebay.listing_request_builder import ListingRequestBuilder
from flippit.infrastructure.ebay.listing_response_parser import ListingResponseParser

logger = structlog.get_logger(__name__)


@dataclass
class CreateListingOutput:
    attempt: ListingAttempt
    result: ListingResult


class ListingService:
    """
    Use case: publish one fixed-price item on eBay.

    validate → acquire token → build XML → POST to the Trading API → parse.
    Every failure is returned as a tagged ListingFailure; nothing is retried
    and nothing raises past this class. A failed call leaves the token cache
    as it was.
    """

    def __init__(
        self,
        token_provider: TokenProvider,
        trading_gateway: TradingGateway,
        request_builder: ListingRequestBuilder,
        response_parser: ListingResponseParser,
        event_publisher: EventPublisher,
    ) -> None:
        self._token_provider = token_provider
        self._trading_gateway = trading_gateway
        self._request_builder = request_builder
        self._response_parser = response_parser
        self._event_publisher = event_publisher

    async def create_listing(self, raw_input: Mapping[str, Any]) -> ListingResult:
        output = await self.execute(raw_input)
        return output.result

    async def execute(self, raw_input: Mapping[str, Any]) -> CreateListingOutput:
        attempt = ListingAttempt()
        try:
            result = await self._run(attempt, raw_input)
        except FlippitError as exc:
            result = ListingFailure(
                error_message=exc.message,
                raw_response_body=exc.details,
                kind=exc.kind,
            )

        if isinstance(result, ListingSuccess):
            attempt.succeed(result)
            logger.info(
                "ebay_listing_created",
                attempt_id=str(attempt.id),
                item_id=result.item_id,
                url=result.url,
            )
        else:
            attempt.fail(result)
            logger.warning(
                "ebay_listing_failed",
                attempt_id=str(attempt.id),
                kind=result.kind.value,
                error=result.error_message,
                final_state=attempt.state.value,
            )

        await self._event_publisher.publish_many(attempt.collect_events())
        return CreateListingOutput(attempt=attempt, result=result)

    async def _run(self, attempt: ListingAttempt, raw_input: Mapping[str, Any]) -> ListingResult:
        attempt.transition_to(ListingAttemptState.VALIDATING)
        listing = self._request_builder.validate(raw_input)
        attempt.title = listing.title

        attempt.transition_to(ListingAttemptState.ACQUIRING_TOKEN)
        access_token = await self._token_provider.get_token()

        attempt.transition_to(ListingAttemptState.BUILDING_REQUEST)
        xml_body = self._request_builder.build(listing)

        attempt.transition_to(ListingAttemptState.SENDING)
        logger.info("ebay_listing_sending", attempt_id=str(attempt.id), title=listing.title)
        response_body = await self._trading_gateway.add_fixed_price_item(xml_body, access_token)

        attempt.transition_to(ListingAttemptState.PARSING_RESPONSE)
        return self._response_parser.parse(response_body)
