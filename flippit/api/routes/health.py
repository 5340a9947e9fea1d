from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from flippit.api.dependencies import get_settings
from flippit.config import Settings

router = APIRouter(tags=["health"])


@router.get("/")
async def service_info(app_settings: Settings = Depends(get_settings)) -> dict:  # type: ignore[type-arg]
    return {
        "message": "Flippit Backend API",
        "version": app_settings.app_version,
        "status": "running",
    }


@router.get("/health")
async def health_check(app_settings: Settings = Depends(get_settings)) -> dict:  # type: ignore[type-arg]
    """Liveness check. Reports whether eBay credentials are configured without calling eBay."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "ebay_env": "sandbox" if app_settings.is_sandbox else "production",
        "credentials_configured": not app_settings.ebay_credentials.missing_fields(),
    }
