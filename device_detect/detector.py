# device_detect/detector.py

import asyncio
from device_detect.browser import get_browser, is_incognito_mode, is_webview
from device_detect.device import (
    get_device_model,
    get_device_type,
    is_mobile,
    is_pointer_device,
    is_sensor_device,
)
from device_detect.environment import ClientEnvironment
from device_detect.locale_info import (
    format_supported_languages,
    get_browser_language,
    get_current_time_zone,
)
from device_detect.operating_system import get_os
from device_detect.schemas import ClientInfo
import logging

logger = logging.getLogger(__name__)


async def detect_client(env: ClientEnvironment) -> ClientInfo:
    """
    Run every classifier against one client environment.
    The client hints and incognito queries are awaited together.
    """
    os_name, device_model, incognito = await asyncio.gather(
        get_os(env),
        get_device_model(env),
        is_incognito_mode(env),
    )

    info = ClientInfo(
        browser=get_browser(env.user_agent, env.telegram_webview),
        os=os_name,
        device_type=get_device_type(env),
        device_model=device_model,
        is_mobile=is_mobile(env),
        is_pointer_device=is_pointer_device(env),
        is_sensor_device=is_sensor_device(env),
        is_webview=is_webview(env.user_agent),
        is_incognito=incognito,
        browser_language=get_browser_language(env.language),
        languages=format_supported_languages(env.languages),
        time_zone=get_current_time_zone(env),
    )

    logger.debug(f"Detected {info.browser} on {info.os} ({info.device_type})")
    return info
