"""
Input Validators

Security Considerations:
- Only http and https destinations are ever redirected to, so a stored
  "javascript:" or "data:" URI can never be executed through a redirect
"""

from urllib.parse import urlparse

ALLOWED_REDIRECT_SCHEMES = ("http", "https")


def is_safe_redirect_url(url: str) -> bool:
    """
    Check that a stored destination may be used in a Location header.

    Args:
        url: The destination URL from the slug store

    Returns:
        True if the URL uses an allowed scheme and names a host
    """
    if not url or not isinstance(url, str):
        return False

    parsed = urlparse(url.strip())
    return parsed.scheme.lower() in ALLOWED_REDIRECT_SCHEMES and bool(parsed.netloc)
