"""
FastAPI Application Entry Point

This module builds the FastAPI application and configures:
- API routes
- Middleware (logging, security headers)
- Rate limiting
- Startup/shutdown of the slug store, GeoIP service and visit pipeline

Startup Order:
1. Slug store (a load failure is logged, the service starts empty)
2. GeoIP service
3. Visit pipeline (a visit log that cannot be opened aborts startup)

Shutdown runs after uvicorn has finished in-flight requests, so no
handler can record a visit once the pipeline starts draining.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from redirector import __version__
from redirector.api.endpoints import create_router
from redirector.core.exceptions import ConfigurationError, SlugStoreError, VisitLogError
from redirector.core.rate_limit import create_limiter
from redirector.core.setting import Settings, get_settings
from redirector.middleware.logging import add_logging_middleware
from redirector.middleware.security_headers import add_security_headers_middleware
from redirector.services.geoip_service import GeoIPService
from redirector.services.slug_store import SlugStore
from redirector.services.visit_pipeline import VisitPipeline

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    geoip: Optional[GeoIPService] = None
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Application settings, read from the environment when omitted
        geoip: Optional GeoIP service; one is built from settings when omitted

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            app.state.slug_store = SlugStore.load(settings.DATA_FILE)
        except SlugStoreError as e:
            logger.error(f"Error loading URLs: {e}")
            app.state.slug_store = SlugStore()

        geoip_service = geoip if geoip is not None else GeoIPService(
            account_id=settings.GEOIP_ACCOUNT_ID,
            license_key=settings.GEOIP_LICENSE_KEY,
            base_url=settings.GEOIP_BASE_URL,
            timeout=settings.GEOIP_TIMEOUT,
        )

        try:
            app.state.pipeline = await VisitPipeline.start(
                settings.VISITS_FILE,
                geoip=geoip_service,
                capacity=settings.VISIT_QUEUE_SIZE,
            )
        except VisitLogError:
            await geoip_service.aclose()
            raise

        logger.info(f"Server starting on port {settings.PORT}")
        try:
            yield
        finally:
            logger.info("Shutting down server...")
            try:
                await app.state.pipeline.shutdown()
            except VisitLogError as e:
                logger.error(f"Error closing visit log: {e}")
            await geoip_service.aclose()
            logger.info("Server exiting")

    app = FastAPI(
        title="Slug Redirector",
        description="Redirects slugs to destination URLs and records visit analytics",
        version=__version__,
        lifespan=lifespan,
        # Every path belongs to the slug namespace, so no generated docs routes
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings

    limiter = create_limiter(enabled=settings.RATE_LIMIT_ENABLED)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    add_logging_middleware(app)
    add_security_headers_middleware(app)

    app.include_router(create_router(limiter))

    return app


def main() -> None:
    """Console entry point: configure logging and serve the app."""
    try:
        settings = get_settings()
    except ConfigurationError as e:
        logging.basicConfig(level=logging.ERROR)
        logger.error(str(e))
        sys.exit(1)

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stdout,
    )

    uvicorn.run(
        create_app(settings),
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
        timeout_graceful_shutdown=5,
    )


if __name__ == "__main__":
    main()
