# device_detect/config.py

from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # HTTP server
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"

    # Browser tokens that mark a user agent as mobile when no structured flag exists.
    # Older builds did not list BlackBerry.
    mobile_browser_tokens: List[str] = ["uZard", "Opera Mini", "BlackBerry"]

    # Sec-CH-UA-Platform-Version major number from which Windows reports itself as 11
    windows11_min_platform_version: int = 13

    # Only consult the screen-resolution table for Apple user agents
    gate_ios_resolution_lookup: bool = True

    class Config:
        env_file = ".env"
        env_prefix = "DEVICE_DETECT_"


settings = Settings()
