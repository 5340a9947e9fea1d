"""
FastAPI dependency injection wiring.

Each dependency function returns a fully-constructed object with its
collaborators injected, keeping the route handlers thin. The token cache is
built once per process so every request shares the same cached token.
"""
from functools import lru_cache

from fastapi import Depends
from openai import AsyncOpenAI

from flippit.application.interfaces.ebay_gateway import TokenProvider, TradingGateway
from flippit.application.interfaces.event_publisher import EventPublisher
from flippit.application.interfaces.listing_copy_generator import ListingCopyGeneratorInterface
from flippit.application.use_cases.create_listing import ListingService
from flippit.config import Settings, settings
from flippit.infrastructure.ebay.listing_request_builder import (
    ListingDefaults,
    ListingRequestBuilder,
)
from flippit.infrastructure.ebay.listing_response_parser import ListingResponseParser
from flippit.infrastructure.ebay.token_cache import TokenCache
from flippit.infrastructure.ebay.trading_client import EbayTradingClient
from flippit.infrastructure.messaging.logging_publisher import LoggingEventPublisher
from flippit.infrastructure.openai_client.listing_copy_generator import ListingCopyGenerator


# ---- Low-level dependencies ------------------------------------------------

def get_settings() -> Settings:
    return settings


@lru_cache(maxsize=1)
def get_token_cache() -> TokenProvider:
    return TokenCache(
        credentials=settings.ebay_credentials,
        token_url=settings.ebay_token_url,
        scope=settings.ebay_oauth_scope,
        timeout=settings.http_timeout_seconds,
    )


def get_trading_gateway(app_settings: Settings = Depends(get_settings)) -> TradingGateway:
    return EbayTradingClient(
        trading_url=app_settings.ebay_trading_url,
        site_id=app_settings.ebay_site_id,
        compatibility_level=app_settings.ebay_compatibility_level,
        timeout=app_settings.http_timeout_seconds,
    )


def get_request_builder(app_settings: Settings = Depends(get_settings)) -> ListingRequestBuilder:
    return ListingRequestBuilder(
        ListingDefaults(
            category_id=app_settings.ebay_category_id,
            currency=app_settings.ebay_currency,
            country=app_settings.ebay_country,
            site=app_settings.ebay_site,
            postal_code=app_settings.ebay_postal_code,
            dispatch_time_max=app_settings.ebay_dispatch_time_max,
            listing_duration=app_settings.ebay_listing_duration,
            shipping_service=app_settings.ebay_shipping_service,
            shipping_cost=app_settings.ebay_shipping_cost,
        )
    )


def get_response_parser(app_settings: Settings = Depends(get_settings)) -> ListingResponseParser:
    return ListingResponseParser(item_base_url=app_settings.ebay_item_base_url)


def get_event_publisher() -> EventPublisher:
    return LoggingEventPublisher()


# ---- Use-case dependencies -------------------------------------------------

def get_listing_service(
    token_provider: TokenProvider = Depends(get_token_cache),
    trading_gateway: TradingGateway = Depends(get_trading_gateway),
    request_builder: ListingRequestBuilder = Depends(get_request_builder),
    response_parser: ListingResponseParser = Depends(get_response_parser),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> ListingService:
    return ListingService(
        token_provider, trading_gateway, request_builder, response_parser, event_publisher
    )


# ---- External service clients ---------------------------------------------

def get_listing_copy_generator(
    app_settings: Settings = Depends(get_settings),
) -> ListingCopyGeneratorInterface:
    client = (
        AsyncOpenAI(api_key=app_settings.openai_api_key, timeout=app_settings.http_timeout_seconds)
        if app_settings.openai_api_key
        else None
    )
    return ListingCopyGenerator(client, model=app_settings.openai_model)
