# device_detect/browser.py

import re
from typing import Callable, Optional, Tuple
from device_detect.environment import ClientEnvironment
import logging

logger = logging.getLogger(__name__)

# detector(user_agent, telegram_webview) -> label or None to fall through
BrowserDetector = Callable[[str, bool], Optional[str]]

_SEAMONKEY = re.compile(r"SeaMonkey/([^\s;]+)")
_CHROME = re.compile(r"Chrome/([^\s;]+)")
_CHROMIUM = re.compile(r"Chromium/([^\s;]+)")
_CHROMIUM_OR_EDGE = re.compile(r"(Chromium|Edg[^/]*)/")
_SAFARI = re.compile(r"Safari/([^\s;]+)")
_SAFARI_VERSION = re.compile(r"Version/([^\s;]+)")
_FACEBOOK = re.compile(r"FBAN|FBAV", re.IGNORECASE)
_FACEBOOK_APP = re.compile(r"FBAN/([^\s;\]]+)", re.IGNORECASE)
_FACEBOOK_VERSION = re.compile(r"FBAV/([^\s;\]]+)", re.IGNORECASE)
_WECHAT = re.compile(r"micromessenger|weixin", re.IGNORECASE)
_TRIDENT = re.compile(r"trident", re.IGNORECASE)
_IE_RV = re.compile(r"\brv[ :]+(\d+)")
_IE_MSIE = re.compile(r"\bMSIE\s([\d.]+)")

# FBAN values naming the main Facebook app itself rather than a sibling app
_FACEBOOK_MAIN_APPS = {"FB4A", "FBIOS"}

_APPLE_UA_PATTERN = re.compile(r"iphone|ipod|ipad|macintosh")


def _token_detector(name: str, pattern: str, flags: int = 0, exclude: Optional[re.Pattern] = None) -> BrowserDetector:
    """Detector reporting "<name> <version>" from a single version token"""
    compiled = re.compile(pattern, flags)

    def detect(user_agent: str, telegram_webview: bool) -> Optional[str]:
        match = compiled.search(user_agent)
        if not match:
            return None
        if exclude is not None and exclude.search(user_agent):
            return None
        return f"{name} {match.group(1)}"

    return detect


def _detect_facebook(user_agent: str, telegram_webview: bool) -> Optional[str]:
    if not _FACEBOOK.search(user_agent):
        return None

    label = "Facebook"
    app = _FACEBOOK_APP.search(user_agent)
    if app and app.group(1).upper() not in _FACEBOOK_MAIN_APPS:
        label = f"{label} {app.group(1)}"

    version = _FACEBOOK_VERSION.search(user_agent)
    if version:
        label = f"{label} {version.group(1)}"

    return label.strip()


def _detect_telegram(user_agent: str, telegram_webview: bool) -> Optional[str]:
    if telegram_webview:
        return "Telegram InApp Browser"
    return None


def _detect_wechat(user_agent: str, telegram_webview: bool) -> Optional[str]:
    if _WECHAT.search(user_agent):
        return "WeChat"
    return None


def _detect_safari(user_agent: str, telegram_webview: bool) -> Optional[str]:
    # Chrome and Chromium also carry a Safari/ token
    if not _SAFARI.search(user_agent):
        return None
    if _CHROME.search(user_agent) or _CHROMIUM.search(user_agent):
        return None

    version = _SAFARI_VERSION.search(user_agent)
    if version:
        return f"Safari {version.group(1)}"
    return None


def _detect_internet_explorer(user_agent: str, telegram_webview: bool) -> Optional[str]:
    if not _TRIDENT.search(user_agent):
        return None

    # IE 11 dropped the MSIE token in favour of rv:
    match = _IE_RV.search(user_agent) or _IE_MSIE.search(user_agent)
    if match:
        return f"IE {match.group(1)}"
    return "IE"


# Detectors evaluated in order - first match wins.
# In-app browsers come first since they embed the tokens of the engine they run on.
BROWSER_DETECTORS: list[Tuple[str, BrowserDetector]] = [
    ("Yandex", _token_detector("Yandex", r"YaBrowser/([^\s;]+)", re.IGNORECASE)),
    ("Messenger", _token_detector("Messenger", r"\bMessenger/([^\s;]+)")),
    ("Facebook", _detect_facebook),
    ("Instagram", _token_detector("Instagram", r"Instagram ([^\s;]+)", re.IGNORECASE)),
    ("Telegram", _detect_telegram),
    ("WeChat", _detect_wechat),
    ("SeaMonkey", _token_detector("SeaMonkey", r"SeaMonkey/([^\s;]+)")),
    ("Firefox", _token_detector("Firefox", r"Firefox/([^\s;]+)", exclude=_SEAMONKEY)),
    ("Chrome", _token_detector("Chrome", r"Chrome/([^\s;]+)", exclude=_CHROMIUM_OR_EDGE)),
    ("Chromium", _token_detector("Chromium", r"Chromium/([^\s;]+)")),
    ("Edge", _token_detector("Edge", r"Edg[^/]*/([^\s;]+)")),
    ("Safari", _detect_safari),
    # Opera 15+, then Opera 12-14
    ("Opera", _token_detector("Opera", r"OPR/([^\s;]+)")),
    ("Opera (Presto)", _token_detector("Opera", r"Opera/([^\s;]+)")),
    ("Internet Explorer", _detect_internet_explorer),
]


def get_browser(user_agent: str, telegram_webview: bool = False) -> str:
    """
    Browser name and version.

    telegram_webview is the client's window.TelegramWebview marker, which the
    user agent alone does not reveal. Returns "Unknown" when nothing matches.
    """
    if not user_agent and not telegram_webview:
        return "Unknown"

    for _, detect in BROWSER_DETECTORS:
        label = detect(user_agent or "", telegram_webview)
        if label:
            return label

    return "Unknown"


def is_webview(user_agent: str) -> bool:
    """
    Embedded webview detection.

    Apple devices: WKWebView user agents lack the Safari token.
    Everything else: Android marks webviews with "wv".
    """
    user_agent = user_agent.lower()

    if _APPLE_UA_PATTERN.search(user_agent):
        return "safari" not in user_agent

    return "wv" in user_agent


async def is_incognito_mode(env: ClientEnvironment) -> bool:
    """Private browsing verdict from the client's incognito probe, False if unknown"""
    if env.incognito_probe is None:
        return False

    try:
        return bool(await env.incognito_probe())
    except Exception as e:
        logger.error(f"Error checking incognito mode: {e}")
        return False
