"""Tests for the HTTP endpoints."""

import pytest
from fastapi.testclient import TestClient

from device_detect.main import app
from tests.user_agents import IPHONE_SAFARI_UA, PIXEL_CHROME_UA, WINDOWS_CHROME_UA


@pytest.fixture
def client():
    with TestClient(app) as client:
        yield client


class TestDetectFromReport:
    def test_android_phone(self, client):
        response = client.post("/api/detect", json={
            "user_agent": PIXEL_CHROME_UA,
            "max_touch_points": 5,
            "languages": ["en-US", "en-GB", "fr"],
            "language": "en",
            "media": {"(pointer:fine)": False, "(pointer:coarse)": True},
            "time_zone": "Europe/Paris",
            "is_private": False,
        })

        assert response.status_code == 200
        body = response.json()
        assert body["browser"] == "Chrome 118.0.0.0"
        assert body["os"] == "Android 13"
        assert body["device_type"] == "Mobile"
        assert body["device_model"] == "Pixel"
        assert body["is_mobile"] is True
        assert body["is_pointer_device"] is False
        assert body["is_sensor_device"] is True
        assert body["is_webview"] is False
        assert body["is_incognito"] is False
        assert body["browser_language"] == "English"
        assert body["languages"] == ["English (United States, United Kingdom)", "French"]
        assert body["time_zone"] == "Europe/Paris"

    def test_iphone_with_private_browsing(self, client):
        response = client.post("/api/detect", json={
            "user_agent": IPHONE_SAFARI_UA,
            "platform": "iPhone",
            "max_touch_points": 5,
            "screen_width": 390,
            "screen_height": 844,
            "is_private": True,
            "unexpected_field": "ignored",
        })

        assert response.status_code == 200
        body = response.json()
        assert body["os"] == "iOS 17.4.1"
        assert body["device_model"] == "iPhone 12, 12 Pro, 13, 13 Pro, 14"
        assert body["is_incognito"] is True
        assert body["time_zone"] == "-"

    def test_non_string_model_hint(self, client):
        response = client.post("/api/detect", json={
            "user_agent": PIXEL_CHROME_UA,
            "user_agent_data": {"mobile": True, "platform": "Android", "high_entropy_values": {"model": 7}},
        })

        assert response.status_code == 200
        assert response.json()["device_model"] == "Pixel"

    def test_invalid_report(self, client):
        response = client.post("/api/detect", json={"max_touch_points": "many"})
        assert response.status_code == 422


class TestDetectFromHeaders:
    def test_windows11_client_hints(self, client):
        response = client.get("/api/detect", headers={
            "User-Agent": WINDOWS_CHROME_UA,
            "Accept-Language": "de-DE,de;q=0.9,en;q=0.5",
            "Sec-CH-UA-Mobile": "?0",
            "Sec-CH-UA-Platform": '"Windows"',
            "Sec-CH-UA-Platform-Version": '"15.0.0"',
        })

        assert response.status_code == 200
        body = response.json()
        assert body["os"] == "Windows 11"
        assert body["device_type"] == "Desktop"
        assert body["device_model"] == "-"
        assert body["languages"] == ["German (Germany)", "English"]


class TestLookups:
    def test_language(self, client):
        response = client.get("/api/languages/fr")
        assert response.json() == {"code": "fr", "name": "French"}

    def test_country(self, client):
        response = client.get("/api/countries/gb")
        assert response.json() == {"code": "gb", "name": "United Kingdom"}

    def test_invalid_country_code(self, client):
        response = client.get("/api/countries/USA")
        assert response.status_code == 400

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}
