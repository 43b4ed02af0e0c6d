"""
Rate Limiting Configuration

This module provides rate limiting functionality for the redirect endpoint.

Design Decisions:
- Uses slowapi for rate limiting (lightweight, FastAPI-compatible)
- Keyed on the resolved client IP, so clients behind the reverse proxy
  are limited individually instead of sharing the proxy's address
- One limiter per application, built by create_limiter(); its counters
  and its enabled flag never leak between apps
"""

from slowapi import Limiter

from redirector.api.request_info import get_client_ip

# Rate limit configurations per endpoint
# Format: "count/period" (e.g., "100/minute" means 100 requests per minute)
RATE_LIMITS = {
    "redirect": "100/minute",  # Redirects: 100 per minute per IP
}


def create_limiter(enabled: bool = True) -> Limiter:
    """
    Build a rate limiter with its own in-memory counters.

    Args:
        enabled: False turns every limit into a no-op (RATE_LIMIT_ENABLED)
    """
    return Limiter(key_func=get_client_ip, enabled=enabled)
