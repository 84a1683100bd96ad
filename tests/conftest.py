"""Shared fixtures for device detection tests."""

import pytest
from unittest.mock import AsyncMock

from device_detect.environment import UserAgentData


@pytest.fixture
def failing_user_agent_data():
    """Client hints whose high-entropy query is refused"""
    data = UserAgentData(mobile=None, platform="Android")
    data.get_high_entropy_values = AsyncMock(side_effect=RuntimeError("permission denied"))
    return data


@pytest.fixture
def windows11_user_agent_data():
    return UserAgentData(
        mobile=False,
        platform="Windows",
        high_entropy_values={"platformVersion": "15.0.0"},
    )
