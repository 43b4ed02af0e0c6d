"""
Tests for user agent classification.
"""

from redirector.services.user_agent import UserAgentInfo, classify_user_agent

IPAD_UA = (
    "Mozilla/5.0 (iPad; CPU OS 12_2 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/12.1 Mobile/15E148 Safari/604.1"
)
IPHONE_UA = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 16_5 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/16.5 Mobile/15E148 Safari/604.1"
)
CHROME_WINDOWS_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
GOOGLEBOT_UA = "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"


class TestDeviceType:
    """Device type decision order."""

    def test_tablet_wins_over_mobile_tokens(self):
        """The iPad UA carries "Mobile/" but is still a tablet."""
        info = classify_user_agent(IPAD_UA)
        assert info.device_type == "tablet"
        assert info.os == "iOS"

    def test_mobile(self):
        info = classify_user_agent(IPHONE_UA)
        assert info.device_type == "mobile"
        assert info.browser == "Mobile Safari"
        assert info.is_bot is False

    def test_desktop(self):
        info = classify_user_agent(CHROME_WINDOWS_UA)
        assert info.device_type == "desktop"
        assert info.browser == "Chrome"
        assert info.browser_version.startswith("120")
        assert info.os == "Windows"
        assert info.os_version == "10"

    def test_crawler_is_bot(self):
        info = classify_user_agent(GOOGLEBOT_UA)
        assert info.device_type == "bot"
        assert info.is_bot is True


class TestDegradation:
    """Inputs the parser cannot make sense of."""

    def test_empty_string_yields_defaults(self):
        assert classify_user_agent("") == UserAgentInfo()

    def test_garbage_yields_unknown(self):
        info = classify_user_agent("???")
        assert info.device_type == "unknown"
        assert info.browser == ""
        assert info.os == ""
        assert info.is_bot is False
