# device_detect/routes.py

from fastapi import APIRouter, HTTPException, Request
from device_detect.detector import detect_client
from device_detect.environment import environment_from_headers, environment_from_report
from device_detect.locale_info import (
    InvalidCountryCodeError,
    lookup_country_name,
    lookup_language_name,
)
from device_detect.schemas import ClientInfo, ClientReport, CountryResponse, LanguageResponse
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/detect", response_model=ClientInfo)
async def detect_from_report(report: ClientReport) -> ClientInfo:
    """
    Classify a client from the environment facts its page collected.
    """
    env = environment_from_report(report)
    return await detect_client(env)


@router.get("/api/detect", response_model=ClientInfo)
async def detect_from_request(request: Request) -> ClientInfo:
    """
    Classify the calling client from its request headers only
    (User-Agent, Accept-Language and Sec-CH-UA-* client hints).
    """
    env = environment_from_headers(request.headers)
    return await detect_client(env)


@router.get("/api/languages/{code}", response_model=LanguageResponse)
async def language_name(code: str) -> LanguageResponse:
    return LanguageResponse(code=code, name=lookup_language_name(code))


@router.get("/api/countries/{code}", response_model=CountryResponse)
async def country_name(code: str) -> CountryResponse:
    try:
        name = lookup_country_name(code)
    except InvalidCountryCodeError as e:
        logger.warning(f"Rejected country lookup: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    return CountryResponse(code=code, name=name)


@router.get("/health")
async def health_check():
    """Simple health check endpoint"""
    return {"status": "healthy"}
