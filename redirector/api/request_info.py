"""
Request Information Extraction

Turns an incoming request into the raw fields of a visit.

Deployment Assumption:
The service runs behind a trusted reverse proxy. X-Forwarded-For and
X-Real-IP are client-controlled headers and can be spoofed when the
service is reachable directly, yet they are preferred over the transport
address because behind the proxy the transport address is always the
proxy itself. Do not reorder the precedence without changing that
deployment model.
"""

from typing import Dict, Optional

from fastapi import Request


def resolve_client_ip(
    forwarded_for: Optional[str],
    real_ip: Optional[str],
    remote_addr: Optional[str]
) -> str:
    """
    Resolve the client IP address.

    Precedence:
    1. First entry of X-Forwarded-For (comma-separated, trimmed)
    2. X-Real-IP
    3. Transport-level remote address

    Args:
        forwarded_for: Raw X-Forwarded-For header value
        real_ip: Raw X-Real-IP header value
        remote_addr: Address of the peer that opened the connection

    Returns:
        IP address as string, empty if nothing is known
    """
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs, the client is the first one
        return forwarded_for.split(",")[0].strip()

    if real_ip:
        return real_ip

    return remote_addr or ""


def get_client_ip(request: Request) -> str:
    """
    Extract client IP address from request.

    Args:
        request: FastAPI Request object

    Returns:
        IP address as string
    """
    return resolve_client_ip(
        request.headers.get("X-Forwarded-For"),
        request.headers.get("X-Real-IP"),
        request.client.host if request.client else None,
    )


def visit_fields(request: Request) -> Dict[str, str]:
    """
    Collect the raw visit fields the pipeline records for a request.

    Cheap and free of I/O, safe to call inside the request path.
    """
    return {
        "ip": get_client_ip(request),
        "user_agent": request.headers.get("User-Agent", ""),
        "referer": request.headers.get("Referer", ""),
        "query_params": request.url.query,
        "language": request.headers.get("Accept-Language", ""),
    }
