from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse, RedirectResponse, Response

from flippit.api.dependencies import get_listing_service, get_settings
from flippit.api.schemas.listing_schemas import (
    ConsentCallbackResponse,
    CreateListingResponse,
    ErrorResponse,
)
from flippit.application.use_cases.create_listing import ListingService
from flippit.config import Settings
from flippit.domain.entities.listing_result import ListingSuccess
from flippit.domain.enums.failure_kind import FailureKind
from flippit.domain.errors import AuthError
from flippit.infrastructure.ebay.consent import build_authorize_url

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/ebay", tags=["ebay"])

_FAILURE_STATUS: dict[FailureKind, int] = {
    FailureKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    FailureKind.AUTH: status.HTTP_502_BAD_GATEWAY,
    FailureKind.NETWORK: status.HTTP_502_BAD_GATEWAY,
    FailureKind.UPSTREAM_REJECTION: status.HTTP_502_BAD_GATEWAY,
}


@router.post(
    "/listings",
    response_model=CreateListingResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def create_listing(
    payload: dict[str, Any] | None = Body(default=None),
    service: ListingService = Depends(get_listing_service),
) -> JSONResponse:
    """Publish a fixed-price item: ``{title, description, price, photoUrl, conditionId?}``."""
    if payload is None:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(error="Missing request body").model_dump(exclude_none=True),
        )

    result = await service.create_listing(payload)

    if isinstance(result, ListingSuccess):
        body = CreateListingResponse(item_id=result.item_id, url=result.url)
        return JSONResponse(status_code=status.HTTP_200_OK, content=body.model_dump(by_alias=True))

    error = ErrorResponse(error=result.error_message, details=result.raw_response_body)
    return JSONResponse(
        status_code=_FAILURE_STATUS[result.kind],
        content=error.model_dump(exclude_none=True),
    )


@router.get("/auth")
async def start_consent(app_settings: Settings = Depends(get_settings)) -> Response:
    """Redirect the seller to eBay's consent page."""
    try:
        url = build_authorize_url(
            auth_base_url=app_settings.ebay_auth_base_url,
            client_id=app_settings.ebay_client_id,
            runame=app_settings.ebay_runame,
            scope=app_settings.ebay_oauth_scope,
        )
    except AuthError as exc:
        logger.error("ebay_consent_not_configured", error=exc.message)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error=exc.message).model_dump(exclude_none=True),
        )
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


@router.get("/callback", response_model=ConsentCallbackResponse)
async def consent_callback(
    code: str | None = Query(default=None),
    error: str | None = Query(default=None),
) -> ConsentCallbackResponse:
    """Landing page for the RuName accept/decline URLs; echoes what eBay sent."""
    logger.info("ebay_consent_callback", has_code=code is not None, error=error)
    return ConsentCallbackResponse(code=code, error=error)
