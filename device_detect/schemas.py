# device_detect/schemas.py

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class UserAgentDataReport(BaseModel):
    """navigator.userAgentData as collected by the page"""

    mobile: Optional[bool] = None
    platform: str = ""
    # Result of getHighEntropyValues(["model", "platformVersion"])
    high_entropy_values: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        extra = "ignore"


class ClientReport(BaseModel):
    """Environment facts posted by the page"""

    # navigator
    user_agent: str = ""
    platform: str = ""
    max_touch_points: Optional[int] = None  # absent when the browser has no maxTouchPoints
    ms_max_touch_points: Optional[int] = None
    languages: List[str] = Field(default_factory=list)
    language: Optional[str] = None
    user_agent_data: Optional[UserAgentDataReport] = None

    # window
    has_orientation: bool = False
    telegram_webview: bool = False
    screen_width: Optional[int] = None
    screen_height: Optional[int] = None

    # matchMedia results keyed by query, e.g. {"(pointer:fine)": true}
    media: Dict[str, bool] = Field(default_factory=dict)

    # Intl.DateTimeFormat().resolvedOptions().timeZone
    time_zone: Optional[str] = None

    # Verdict of the page's incognito probe, if it ran
    is_private: Optional[bool] = None

    class Config:
        extra = "ignore"  # Ignore unexpected fields


class ClientInfo(BaseModel):
    """Everything detected about one client"""

    browser: str
    os: str
    device_type: str
    device_model: str
    is_mobile: bool
    is_pointer_device: bool
    is_sensor_device: bool
    is_webview: bool
    is_incognito: bool
    browser_language: str
    languages: List[str]
    time_zone: str


class LanguageResponse(BaseModel):
    code: str
    name: str


class CountryResponse(BaseModel):
    code: str
    name: str
