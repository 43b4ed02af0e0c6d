"""
FastAPI Endpoints for the Redirector Service

Endpoints only handle:
- Slug lookup and redirect
- Rate limiting
- Handing the visit to the pipeline

Analytics never influence the response: the visit is queued without
waiting and the pipeline reports nothing back to the handler.

Routing:
Every path except "/" is looked up in the slug store first, slashes
included, so any key of the data file is reachable. The health check
answers on "/health" only when no slug of that name exists.
"""

import logging

from fastapi import APIRouter, Request, HTTPException, status
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response
from slowapi import Limiter

from redirector.api.request_info import visit_fields
from redirector.api.schemas import HealthResponse
from redirector.core.rate_limit import RATE_LIMITS
from redirector.core.validators import is_safe_redirect_url

logger = logging.getLogger(__name__)

EMPTY_PAGE = "<!DOCTYPE html><html><head></head><body></body></html>"

HEALTH_SLUG = "health"


def health_check(request: Request) -> JSONResponse:
    """
    Health status of the service and visit pipeline counters.
    """
    pipeline = request.app.state.pipeline
    health = HealthResponse(
        status="healthy",
        visits_pending=pipeline.pending,
        visits_written=pipeline.written,
        visits_dropped=pipeline.dropped,
    )
    return JSONResponse(health.model_dump())


async def root() -> HTMLResponse:
    """Blank landing page for the bare domain."""
    return HTMLResponse(EMPTY_PAGE)


async def redirect_to_url(slug: str, request: Request) -> Response:
    """
    Redirect to the destination URL for a given slug.

    Args:
        slug: The slug to look up, may contain slashes
        request: FastAPI Request object (for visit fields and rate limiting)

    Returns:
        RedirectResponse (HTTP 302) to the destination URL, or the health
        report for an unclaimed "/health"

    Raises:
        HTTPException 400: If the stored URL is not http(s)
        HTTPException 404: If the slug is not found
        HTTPException 429: If rate limit exceeded
    """
    url = request.app.state.slug_store.get(slug)

    if url is None:
        if slug == HEALTH_SLUG:
            return health_check(request)
        logger.debug(f"Slug not found: {slug}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Not Found"
        )

    if not is_safe_redirect_url(url):
        logger.warning(f"Blocked unsafe redirect scheme: slug={slug}, url={url}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid redirect URL"
        )

    logger.info(f"Redirecting: slug={slug}, url={url}")
    request.app.state.pipeline.record(slug, **visit_fields(request))

    return RedirectResponse(
        url=url,
        status_code=status.HTTP_302_FOUND
    )


def create_router(limiter: Limiter) -> APIRouter:
    """
    Build the router, with the redirect route limited by `limiter`.

    Args:
        limiter: The application's own rate limiter
    """
    router = APIRouter()
    router.add_api_route("/", root, methods=["GET"], response_class=HTMLResponse)
    router.add_api_route(
        "/{slug:path}",
        limiter.limit(RATE_LIMITS["redirect"])(redirect_to_url),
        methods=["GET"],
        status_code=status.HTTP_302_FOUND,
        summary="Redirect to destination URL",
        description="Looks up the slug and redirects to its destination URL",
    )
    return router
