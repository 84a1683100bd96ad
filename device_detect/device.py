# device_detect/device.py

import re
from typing import Optional
from device_detect.config import settings
from device_detect.environment import ClientEnvironment
import logging

logger = logging.getLogger(__name__)

# Last-resort touch sniffing when no touch or pointer API is available
_TOUCH_UA_PATTERNS = [
    re.compile(r"\b(BlackBerry|webOS|iPhone|IEMobile|Mobile)\b", re.IGNORECASE),
    re.compile(r"\b(Android|Windows Phone|iPad|iPod)\b", re.IGNORECASE),
]

_MOBILE_UA_PATTERN = re.compile(r"mobi|tablet")
_TABLET_UA_PATTERN = re.compile(r"tablet|ipad", re.IGNORECASE)
_APPLE_UA_PATTERN = re.compile(r"iphone|ipad|macintosh")

# Logical screen resolution (WIDTHxHEIGHT) -> Apple devices sharing it
IOS_DEVICE_MAPPING: dict[str, str] = {
    "320x480": "iPhone 4S, 4, 3GS, 3G, 1st gen",
    "320x568": "iPhone 5, 5c, 5s, SE",
    "375x667": "iPhone 6, 6s, 7, 8, SE (2020), SE (2022)",
    "414x736": "iPhone 6s Plus, 7 Plus, 8 Plus",
    "375x812": "iPhone 11 Pro, X",
    "414x896": "iPhone 11, 11 Pro Max, XR, XS Max",
    "360x780": "iPhone 12 mini, 13 mini",
    "390x844": "iPhone 12, 12 Pro, 13, 13 Pro, 14",
    "428x926": "iPhone 12 Pro Max, 13 Pro Max, 14 Plus",
    "393x852": "iPhone 14 Pro, 15, 15 Pro, 16",
    "430x932": "iPhone 14 Pro Max, 15 Plus, 15 Pro Max, 16 Plus",
    "402x874": "iPhone 16 Pro",
    "440x956": "iPhone 16 Pro Max",
    "744x1133": "iPad Mini (6th gen)",
    "768x1024": "iPad Mini (5th gen), iPad Mini 4, iPad (6th gen), iPad (5th gen), iPad III & IV gen, "
                "iPad Air 1 & 2, iPad Mini 2 & 3, iPad Mini",
    "810x1080": "iPad (9th gen), iPad (8th gen), iPad (7th gen)",
    "820x1180": "iPad Air (5th gen), iPad Air (4th gen), iPad (10th gen)",
    "834x1112": "iPad Air (3rd gen)",
    "1024x1366": "iPad Pro",
}


def _query_media(env: ClientEnvironment, query: str) -> Optional[bool]:
    """Evaluate a media query, None if the client could not answer it"""
    if env.media_matcher is None:
        return None
    try:
        return bool(env.media_matcher(query))
    except KeyError:
        return None
    except Exception as e:
        logger.warning(f"Media query {query} failed: {e}")
        return None


def is_pointer_device(env: ClientEnvironment) -> bool:
    """Fine pointer (mouse, trackpad, stylus) available"""
    return _query_media(env, "(pointer:fine)") is True


def is_sensor_device(env: ClientEnvironment) -> bool:
    """
    Touch / coarse pointer available.

    Each source is consulted only when the previous one is unavailable:
    maxTouchPoints, msMaxTouchPoints, (pointer:coarse), orientation support,
    and finally user agent sniffing.
    """
    if env.max_touch_points is not None:
        return env.max_touch_points > 0

    if env.ms_max_touch_points is not None:
        return env.ms_max_touch_points > 0

    coarse = _query_media(env, "(pointer:coarse)")
    if coarse is not None:
        return coarse

    if env.has_orientation:
        return True

    return any(pattern.search(env.user_agent) for pattern in _TOUCH_UA_PATTERNS)


def is_mobile(env: ClientEnvironment) -> bool:
    """Structured mobile flag if the client has one, user agent tokens otherwise"""
    if env.user_agent_data is not None and env.user_agent_data.mobile is not None:
        return env.user_agent_data.mobile

    user_agent = env.user_agent.lower()

    if _MOBILE_UA_PATTERN.search(user_agent):
        return True

    return any(token.lower() in user_agent for token in settings.mobile_browser_tokens)


def is_iphone(env: ClientEnvironment) -> bool:
    return "iphone" in env.user_agent.lower()


def is_ipad(env: ClientEnvironment) -> bool:
    """
    iPad detection, including iPadOS 13+ which reports a desktop Mac user agent
    but still exposes multi-touch.
    """
    if is_iphone(env):
        return False

    user_agent = env.user_agent.lower()
    if "ipad" in user_agent:
        return True

    return (
        "macintosh" in user_agent
        and (env.max_touch_points or 0) > 2
        and env.platform != "iPhone"
    )


def is_mac(env: ClientEnvironment) -> bool:
    """Apple user agent that is neither an iPhone nor an iPad"""
    if not _APPLE_UA_PATTERN.search(env.user_agent.lower()):
        return False
    return not is_iphone(env) and not is_ipad(env)


def get_device_type(env: ClientEnvironment) -> str:
    """Tablet, Mobile or Desktop - first match wins"""
    if is_ipad(env):
        return "Tablet"

    if _TABLET_UA_PATTERN.search(env.user_agent):
        return "Tablet"

    if is_iphone(env):
        return "Mobile"

    if is_mobile(env):
        return "Mobile"

    return "Desktop"


def get_ios_device_name(env: ClientEnvironment) -> str:
    """Apple model names for the client's screen resolution, "" when unknown"""
    if settings.gate_ios_resolution_lookup and not _APPLE_UA_PATTERN.search(env.user_agent.lower()):
        return ""

    if env.screen_width is None or env.screen_height is None:
        return ""

    return IOS_DEVICE_MAPPING.get(f"{env.screen_width}x{env.screen_height}", "")


def get_android_device_name_from_user_agent(user_agent: str) -> str:
    """
    Device code name from an Android user agent.

    "Mozilla/5.0 (Linux; Android 13; Pixel 7) ..." -> "Pixel"
    Only the first word is kept since vendors append build info.
    """
    position = user_agent.find("Android")
    if position == -1:
        return ""

    android_part = user_agent[position:]
    separator = android_part.find("; ")
    if separator == -1:
        return ""

    end = android_part.find(")")
    if end == -1:
        end = len(android_part)

    device_name = android_part[separator + 1:end].strip()
    if not device_name:
        return ""

    return device_name.split()[0]


async def get_model_from_high_entropy_values(env: ClientEnvironment) -> Optional[str]:
    """Model reported through client hints, None if unavailable"""
    if env.user_agent_data is None:
        return None

    try:
        data = await env.user_agent_data.get_high_entropy_values(["model"])
    except Exception as e:
        logger.warning(f"Error getting device model: {e}")
        return None

    model = data.get("model")
    if isinstance(model, str) and model:
        return model
    return None


async def get_device_model(env: ClientEnvironment) -> str:
    """
    Best-effort device model, "-" when it cannot be determined.

    Apple devices resolve through the screen-resolution table and never reach
    the client hints query. Non-mobile devices without a hinted model give "-".
    """
    if is_ipad(env):
        return get_ios_device_name(env) or "iPad"

    if is_iphone(env):
        return get_ios_device_name(env) or "iPhone"

    if is_mac(env):
        return "Mac"

    model = await get_model_from_high_entropy_values(env)
    if model:
        return model

    if not is_mobile(env):
        return "-"

    if "Android" in env.user_agent:
        device = get_android_device_name_from_user_agent(env.user_agent)
        if device:
            return device

    return "-"
