"""
GeoIP Lookup Service

Resolves an IP address to a (country, city) pair through the MaxMind
GeoLite web service.

Design Decisions:
- One HTTPS GET per lookup, HTTP basic auth, fixed client-side timeout
- Best-effort: every failure degrades to empty strings, nothing is raised
  and nothing is retried, so a slow or broken upstream can only ever cost
  the pipeline worker one timeout per visit
"""

import logging
from typing import Optional, Tuple
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://geolite.info/geoip/v2.1/city"
DEFAULT_TIMEOUT_SECONDS = 5.0


class GeoIPService:
    """
    Service for IP geolocation lookups.

    The service owns its httpx client unless one is injected, in which
    case the caller is responsible for closing it.
    """

    def __init__(
        self,
        account_id: str,
        license_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize the GeoIP service.

        Args:
            account_id: Web service account ID
            license_key: Web service license key
            base_url: City lookup resource, the IP is appended as a path segment
            timeout: Timeout for one lookup in seconds
            client: Optional pre-built httpx client (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.auth = httpx.BasicAuth(account_id, license_key)
        self.timeout = timeout
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def lookup(self, ip: str) -> Tuple[str, str]:
        """
        Look up country code and city name for an IP address.

        Args:
            ip: IP address as string, client-supplied and escaped as one path segment

        Returns:
            (country ISO code, English city name), either may be empty
        """
        if not ip:
            return "", ""

        try:
            response = await self.client.get(
                f"{self.base_url}/{quote(ip, safe='')}",
                auth=self.auth,
                timeout=self.timeout,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug(f"GeoIP lookup for {ip} failed: {e}")
            return "", ""

        if response.status_code != httpx.codes.OK:
            logger.debug(f"GeoIP lookup for {ip} returned HTTP {response.status_code}")
            return "", ""

        try:
            return parse_city_response(response.json())
        except ValueError as e:
            logger.debug(f"GeoIP response for {ip} is not valid JSON: {e}")
            return "", ""

    async def aclose(self) -> None:
        """Release the HTTP client if this service created it."""
        if self._owns_client:
            await self.client.aclose()


def parse_city_response(payload) -> Tuple[str, str]:
    """
    Extract country ISO code and English city name from a city response.

    Missing or oddly typed members yield empty strings.
    """
    if not isinstance(payload, dict):
        return "", ""

    country = payload.get("country")
    city = payload.get("city")

    iso_code = country.get("iso_code") if isinstance(country, dict) else None
    names = city.get("names") if isinstance(city, dict) else None
    city_name = names.get("en") if isinstance(names, dict) else None

    return (
        iso_code if isinstance(iso_code, str) else "",
        city_name if isinstance(city_name, str) else "",
    )
