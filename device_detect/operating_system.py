# device_detect/operating_system.py

import re
from dataclasses import replace
from typing import Optional, Tuple
from device_detect.config import settings
from device_detect.device import is_ipad
from device_detect.environment import ClientEnvironment
import logging

logger = logging.getLogger(__name__)

# Patterns matched in order - first match wins
OPERATING_SYSTEM_RULES: list[Tuple[str, re.Pattern]] = [
    # Mobile
    ("iOS", re.compile(r"iP(hone|od|ad)")),
    ("Android", re.compile(r"Android")),
    ("BlackBerry OS", re.compile(r"BlackBerry|BB10")),
    ("Windows Mobile", re.compile(r"IEMobile")),
    ("Amazon OS", re.compile(r"Kindle")),

    # Windows desktop, by NT version
    ("Windows 3.11", re.compile(r"Win16")),
    ("Windows 95", re.compile(r"Windows 95|Win95|Windows_95")),
    ("Windows 98", re.compile(r"Windows 98|Win98")),
    ("Windows 2000", re.compile(r"Windows NT 5\.0|Windows 2000")),
    ("Windows XP", re.compile(r"Windows NT 5\.1|Windows XP")),
    ("Windows Server 2003", re.compile(r"Windows NT 5\.2")),
    ("Windows Vista", re.compile(r"Windows NT 6\.0")),
    ("Windows 7", re.compile(r"Windows NT 6\.1")),
    ("Windows 8", re.compile(r"Windows NT 6\.2")),
    ("Windows 8.1", re.compile(r"Windows NT 6\.3")),
    ("Windows 10", re.compile(r"Windows NT 10\.0")),
    ("Windows ME", re.compile(r"Windows ME")),
    ("Windows CE", re.compile(r"Windows CE|WinCE|Microsoft Pocket Internet Explorer")),

    # Unix-likes; Linux must stay after the mobile rules
    ("Open BSD", re.compile(r"OpenBSD")),
    ("Sun OS", re.compile(r"SunOS")),
    ("Chrome OS", re.compile(r"CrOS")),
    ("Linux", re.compile(r"Linux|X11")),
    ("Mac OS", re.compile(r"Mac_PowerPC|Macintosh")),

    # Others
    ("QNX", re.compile(r"QNX")),
    ("BeOS", re.compile(r"BeOS")),
    ("OS/2", re.compile(r"OS/2")),
    ("Aurora", re.compile(r"Aurora")),
]

_IOS_VERSION = re.compile(r"OS (\d+)_(\d+)_(\d+)")
_MAC_VERSION = re.compile(r"Mac OS X\s([0-9._]*)", re.IGNORECASE)
_SAFARI_VERSION = re.compile(r"Version/([^\s;]+)")
_ANDROID_VERSION = re.compile(r"android\s([0-9.]*)", re.IGNORECASE)
_AURORA_VERSION = re.compile(r"Aurora/([^\s;]+)", re.IGNORECASE)


def match_operating_system(user_agent: str) -> str:
    """
    First matching OS label for a user agent, without version refinement.

    Returns "Unknown" when no rule matches.
    """
    if not user_agent:
        return "Unknown"

    for label, pattern in OPERATING_SYSTEM_RULES:
        if pattern.search(user_agent):
            return label

    return "Unknown"


def _with_user_agent(env: Optional[ClientEnvironment], user_agent: Optional[str]) -> ClientEnvironment:
    env = env or ClientEnvironment()
    if user_agent is not None and user_agent != env.user_agent:
        env = replace(env, user_agent=user_agent)
    return env


def _ios_version(user_agent: str) -> str:
    match = _IOS_VERSION.search(user_agent)
    if match:
        return "iOS " + ".".join(match.groups())
    return "iOS"


def _mac_version(env: ClientEnvironment) -> str:
    match = _MAC_VERSION.search(env.user_agent)
    if not match:
        return "Mac OS"

    # iPadOS 13+ presents itself as desktop Safari on a Mac
    if is_ipad(env):
        safari = _SAFARI_VERSION.search(env.user_agent)
        if safari:
            return "iPad OS " + safari.group(1)
        return "iPad OS"

    version = match.group(1).replace("_", ".").strip(".")
    if version:
        return "Mac OS " + version
    return "Mac OS"


def _aurora_version(user_agent: str) -> str:
    match = _AURORA_VERSION.search(user_agent)
    if match:
        return "Aurora " + match.group(1)
    return "Aurora"


def _android_version_from_user_agent(user_agent: str) -> str:
    match = _ANDROID_VERSION.search(user_agent)
    if match and match.group(1):
        return "Android " + match.group(1)
    return "Android"


async def get_android_os(env: ClientEnvironment) -> str:
    """
    Android with version: client hints platformVersion first, then the
    user agent token, then bare "Android".
    """
    if env.user_agent_data is not None:
        try:
            data = await env.user_agent_data.get_high_entropy_values(["platformVersion"])
        except Exception as e:
            logger.warning(f"Error getting Android platform version: {e}")
            data = {}

        platform_version = data.get("platformVersion")
        if isinstance(platform_version, str) and platform_version:
            return "Android " + platform_version

    return _android_version_from_user_agent(env.user_agent)


async def is_windows11(env: ClientEnvironment) -> bool:
    """
    Windows 11 reports NT 10.0 in the user agent; only the client hints
    platformVersion (major >= 13) tells it apart from Windows 10.
    """
    user_agent_data = env.user_agent_data
    if user_agent_data is None:
        return False

    try:
        data = await user_agent_data.get_high_entropy_values(["platformVersion"])
    except Exception as e:
        logger.warning(f"Windows 11 check failed: {e}")
        return False

    if user_agent_data.platform != "Windows":
        return False

    platform_version = data.get("platformVersion")
    if not isinstance(platform_version, str):
        return False

    try:
        major = int(platform_version.split(".")[0])
    except ValueError:
        return False

    return major >= settings.windows11_min_platform_version


def _refine(label: str, env: ClientEnvironment) -> str:
    if label == "iOS":
        return _ios_version(env.user_agent)
    if label == "Mac OS":
        return _mac_version(env)
    if label == "Aurora":
        return _aurora_version(env.user_agent)
    return label


async def get_os(env: Optional[ClientEnvironment] = None, user_agent: Optional[str] = None) -> str:
    """
    Operating system name and version.

    user_agent overrides env.user_agent. Windows 10 is upgraded to
    Windows 11 when the client hints say so.
    """
    env = _with_user_agent(env, user_agent)
    label = match_operating_system(env.user_agent)

    if label == "Windows 10":
        if await is_windows11(env):
            return "Windows 11"
        return label

    if label == "Android":
        return await get_android_os(env)

    return _refine(label, env)


def get_os_sync(env: Optional[ClientEnvironment] = None, user_agent: Optional[str] = None) -> str:
    """Same as get_os but without the client hints queries"""
    env = _with_user_agent(env, user_agent)
    label = match_operating_system(env.user_agent)

    if label == "Android":
        return _android_version_from_user_agent(env.user_agent)

    return _refine(label, env)
