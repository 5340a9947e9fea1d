"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flippit.api.routes import ebay, health, listings
from flippit.config import settings

logger = structlog.get_logger(__name__)


def configure_logging(level: str) -> None:
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    configure_logging(settings.log_level)
    logger.info(
        "flippit_starting",
        ebay_env="sandbox" if settings.is_sandbox else "production",
    )
    yield
    logger.info("flippit_stopping")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Flippit Lister",
        description="Turns sourced items into eBay fixed-price listings.",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(ebay.router)
    app.include_router(listings.router)

    return app


app = create_app()
