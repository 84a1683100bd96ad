# device_detect/environment.py

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple
from device_detect.schemas import ClientReport
import logging

logger = logging.getLogger(__name__)


@dataclass
class UserAgentData:
    """
    Structured client hints (navigator.userAgentData / Sec-CH-UA-* headers).
    High-entropy values are only handed out on request.
    """
    mobile: Optional[bool] = None
    platform: str = ""
    high_entropy_values: Dict[str, Any] = field(default_factory=dict)

    async def get_high_entropy_values(self, hints: List[str]) -> Dict[str, Any]:
        values = {"mobile": self.mobile, "platform": self.platform}
        for hint in hints:
            if hint in self.high_entropy_values:
                values[hint] = self.high_entropy_values[hint]
        return values


@dataclass(frozen=True)
class ClientEnvironment:
    """
    Everything the classifiers may read about one client.
    None means the capability is not available.
    """
    user_agent: str = ""
    platform: str = ""
    max_touch_points: Optional[int] = None
    ms_max_touch_points: Optional[int] = None
    has_orientation: bool = False
    screen_width: Optional[int] = None
    screen_height: Optional[int] = None
    languages: Tuple[str, ...] = ()
    language: Optional[str] = None
    time_zone: Optional[str] = None
    telegram_webview: bool = False
    user_agent_data: Optional[UserAgentData] = None
    # matchMedia: returns whether the query matches, raises KeyError if it was not evaluated
    media_matcher: Optional[Callable[[str], bool]] = None
    incognito_probe: Optional[Callable[[], Awaitable[bool]]] = None


def media_matcher_from_dict(media: Mapping[str, bool]) -> Optional[Callable[[str], bool]]:
    """Wrap a dict of evaluated media queries as a matcher"""
    if not media:
        return None

    normalized = {_normalize_media_query(query): bool(matches) for query, matches in media.items()}

    def matcher(query: str) -> bool:
        return normalized[_normalize_media_query(query)]

    return matcher


def _normalize_media_query(query: str) -> str:
    return "".join(query.split()).lower()


def _constant_probe(verdict: bool) -> Callable[[], Awaitable[bool]]:
    async def probe() -> bool:
        return verdict
    return probe


def environment_from_report(report: ClientReport) -> ClientEnvironment:
    """
    Build an environment from a ClientReport posted by the page.
    """
    user_agent_data = None
    if report.user_agent_data is not None:
        user_agent_data = UserAgentData(
            mobile=report.user_agent_data.mobile,
            platform=report.user_agent_data.platform,
            high_entropy_values=dict(report.user_agent_data.high_entropy_values),
        )

    incognito_probe = None
    if report.is_private is not None:
        incognito_probe = _constant_probe(report.is_private)

    return ClientEnvironment(
        user_agent=report.user_agent,
        platform=report.platform,
        max_touch_points=report.max_touch_points,
        ms_max_touch_points=report.ms_max_touch_points,
        has_orientation=report.has_orientation,
        screen_width=report.screen_width,
        screen_height=report.screen_height,
        languages=tuple(report.languages),
        language=report.language or (report.languages[0] if report.languages else None),
        time_zone=report.time_zone,
        telegram_webview=report.telegram_webview,
        user_agent_data=user_agent_data,
        media_matcher=media_matcher_from_dict(report.media),
        incognito_probe=incognito_probe,
    )


def environment_from_headers(headers: Mapping[str, str]) -> ClientEnvironment:
    """
    Build an environment from HTTP request headers alone.
    Client hints map onto userAgentData; Accept-Language onto the locale list.
    """
    lowered = {key.lower(): value for key, value in headers.items()}

    languages = parse_accept_language(lowered.get("accept-language", ""))

    user_agent_data = None
    if any(key.startswith("sec-ch-ua") for key in lowered):
        high_entropy = {}
        platform_version = _unquote_hint(lowered.get("sec-ch-ua-platform-version"))
        if platform_version:
            high_entropy["platformVersion"] = platform_version
        model = _unquote_hint(lowered.get("sec-ch-ua-model"))
        if model:
            high_entropy["model"] = model

        user_agent_data = UserAgentData(
            mobile=_parse_boolean_hint(lowered.get("sec-ch-ua-mobile")),
            platform=_unquote_hint(lowered.get("sec-ch-ua-platform")) or "",
            high_entropy_values=high_entropy,
        )

    return ClientEnvironment(
        user_agent=lowered.get("user-agent", ""),
        languages=tuple(languages),
        language=languages[0] if languages else None,
        user_agent_data=user_agent_data,
    )


def parse_accept_language(header: str) -> List[str]:
    """
    Order Accept-Language tags by quality, keeping header order on ties.
    "*" and tags with q=0 are dropped.
    """
    weighted = []
    for position, part in enumerate(header.split(",")):
        pieces = [piece.strip() for piece in part.split(";")]
        tag = pieces[0]
        if not tag or tag == "*":
            continue

        quality = 1.0
        for param in pieces[1:]:
            if param.startswith("q="):
                try:
                    quality = float(param[2:])
                except ValueError:
                    logger.debug(f"Ignoring malformed quality value: {param}")
                    quality = 0.0

        if quality > 0:
            weighted.append((-quality, position, tag))

    return [tag for _, _, tag in sorted(weighted)]


def _unquote_hint(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip().strip('"')


def _parse_boolean_hint(value: Optional[str]) -> Optional[bool]:
    # Structured header booleans: ?1 / ?0
    if value is None:
        return None
    value = value.strip()
    if value == "?1":
        return True
    if value == "?0":
        return False
    return None
