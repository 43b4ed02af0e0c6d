"""
User-Agent Classification

Parses user agent strings with the user-agents library to extract
browser, OS and device information.

Behavior:
- Pure string parsing, no I/O
- Fail-open: unknown or malformed agents yield default fields
"""

import logging
from dataclasses import dataclass

from user_agents import parse as parse_user_agent  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserAgentInfo:
    """Fields extracted from a user agent string."""
    browser: str = ""
    browser_version: str = ""
    os: str = ""
    os_version: str = ""
    is_bot: bool = False
    device_type: str = "unknown"


def classify_user_agent(user_agent: str) -> UserAgentInfo:
    """
    Classify a raw user agent string.

    Device type is decided in a fixed order, first match wins:
    tablet, mobile, desktop, bot, unknown. The parser's flags overlap
    (a tablet is often also flagged mobile), so the order matters.

    Args:
        user_agent: Raw User-Agent header value

    Returns:
        UserAgentInfo, all defaults when nothing can be parsed
    """
    if not user_agent:
        return UserAgentInfo()

    try:
        ua = parse_user_agent(user_agent)
    except Exception as e:
        logger.warning(f"Failed to parse user agent {user_agent[:100]!r}: {e}")
        return UserAgentInfo()

    if ua.is_tablet:
        device_type = "tablet"
    elif ua.is_mobile:
        device_type = "mobile"
    elif ua.is_pc:
        device_type = "desktop"
    elif ua.is_bot:
        device_type = "bot"
    else:
        device_type = "unknown"

    return UserAgentInfo(
        browser=_known(ua.browser.family),
        browser_version=ua.browser.version_string or "",
        os=_known(ua.os.family),
        os_version=ua.os.version_string or "",
        is_bot=bool(ua.is_bot),
        device_type=device_type,
    )


def _known(family: str) -> str:
    # ua-parser reports "Other" when it does not recognise a family
    if not family or family == "Other":
        return ""
    return family
