"""Tests for building client environments from reports and request headers."""

import pytest

from device_detect.environment import (
    ClientEnvironment,
    UserAgentData,
    environment_from_headers,
    environment_from_report,
    media_matcher_from_dict,
    parse_accept_language,
)
from device_detect.schemas import ClientReport
from tests.user_agents import PIXEL_CHROME_UA, WINDOWS_CHROME_UA


class TestUserAgentData:
    @pytest.mark.asyncio
    async def test_only_requested_hints_are_returned(self):
        data = UserAgentData(
            mobile=True,
            platform="Android",
            high_entropy_values={"model": "Pixel 7", "platformVersion": "14.0.0"},
        )
        values = await data.get_high_entropy_values(["model"])
        assert values == {"mobile": True, "platform": "Android", "model": "Pixel 7"}

    @pytest.mark.asyncio
    async def test_unknown_hint_is_omitted(self):
        values = await UserAgentData().get_high_entropy_values(["platformVersion"])
        assert "platformVersion" not in values


class TestParseAcceptLanguage:
    def test_quality_order(self):
        assert parse_accept_language("fr;q=0.8, en-US, en;q=0.9") == ["en-US", "en", "fr"]

    def test_ties_keep_header_order(self):
        assert parse_accept_language("de, en") == ["de", "en"]

    def test_wildcard_and_zero_quality_are_dropped(self):
        assert parse_accept_language("en, *;q=0.5, fr;q=0") == ["en"]

    def test_malformed_quality(self):
        assert parse_accept_language("en, fr;q=high") == ["en"]

    def test_empty(self):
        assert parse_accept_language("") == []


class TestEnvironmentFromHeaders:
    def test_plain_user_agent(self):
        env = environment_from_headers({"User-Agent": WINDOWS_CHROME_UA, "Accept-Language": "sv-SE,sv;q=0.9"})
        assert env.user_agent == WINDOWS_CHROME_UA
        assert env.languages == ("sv-SE", "sv")
        assert env.language == "sv-SE"
        assert env.user_agent_data is None

    def test_client_hints(self):
        env = environment_from_headers({
            "user-agent": PIXEL_CHROME_UA,
            "Sec-CH-UA-Mobile": "?1",
            "Sec-CH-UA-Platform": '"Android"',
            "Sec-CH-UA-Platform-Version": '"14.0.0"',
            "Sec-CH-UA-Model": '"Pixel 7"',
        })
        assert env.user_agent_data.mobile is True
        assert env.user_agent_data.platform == "Android"
        assert env.user_agent_data.high_entropy_values == {"platformVersion": "14.0.0", "model": "Pixel 7"}

    def test_empty_model_hint_is_ignored(self):
        env = environment_from_headers({"Sec-CH-UA-Mobile": "?0", "Sec-CH-UA-Model": '""'})
        assert env.user_agent_data.mobile is False
        assert env.user_agent_data.high_entropy_values == {}


class TestEnvironmentFromReport:
    def test_full_report(self):
        report = ClientReport(
            user_agent=PIXEL_CHROME_UA,
            platform="Linux armv81",
            max_touch_points=5,
            languages=["en-US", "en"],
            screen_width=412,
            screen_height=915,
            media={"(pointer:coarse)": True, "(pointer:fine)": False},
            time_zone="Europe/Berlin",
            is_private=True,
            user_agent_data={"mobile": True, "platform": "Android", "high_entropy_values": {"model": "Pixel 7"}},
        )
        env = environment_from_report(report)

        assert env.user_agent == PIXEL_CHROME_UA
        assert env.max_touch_points == 5
        assert env.languages == ("en-US", "en")
        assert env.language == "en-US"
        assert env.media_matcher("(pointer:coarse)") is True
        assert env.incognito_probe is not None
        assert env.user_agent_data.high_entropy_values == {"model": "Pixel 7"}

    def test_minimal_report(self):
        env = environment_from_report(ClientReport())
        assert env == ClientEnvironment()


class TestMediaMatcher:
    def test_no_queries_means_unavailable(self):
        assert media_matcher_from_dict({}) is None

    def test_whitespace_and_case_insensitive(self):
        matcher = media_matcher_from_dict({"(Pointer: Fine)": True})
        assert matcher("(pointer:fine)") is True

    def test_unevaluated_query_raises_key_error(self):
        matcher = media_matcher_from_dict({"(pointer:fine)": True})
        with pytest.raises(KeyError):
            matcher("(hover:hover)")
