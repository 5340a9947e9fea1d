from decimal import Decimal

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from flippit.api.dependencies import get_listing_copy_generator
from flippit.api.schemas.listing_schemas import (
    ErrorResponse,
    GenerateListingRequest,
    GenerateListingResponse,
)
from flippit.application.interfaces.listing_copy_generator import ListingCopyGeneratorInterface
from flippit.domain.errors import AuthError, FlippitError

router = APIRouter(prefix="/listings", tags=["listings"])


@router.post(
    "/generate",
    response_model=GenerateListingResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def generate_listing(
    request: GenerateListingRequest,
    generator: ListingCopyGeneratorInterface = Depends(get_listing_copy_generator),
) -> JSONResponse:
    query_text = request.query_text.strip()
    if not query_text:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(error="queryText is required").model_dump(exclude_none=True),
        )

    msrp = Decimal(str(request.msrp_price)) if request.msrp_price is not None else None
    try:
        copy = await generator.generate(query_text, msrp, request.platform)
    except AuthError as exc:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error=exc.message).model_dump(exclude_none=True),
        )
    except FlippitError as exc:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content=ErrorResponse(error=exc.message, details=exc.details).model_dump(
                exclude_none=True
            ),
        )

    body = GenerateListingResponse(
        title=copy.title,
        description=copy.description,
        suggested_price=request.msrp_price,
    )
    return JSONResponse(status_code=status.HTTP_200_OK, content=body.model_dump(by_alias=True))
