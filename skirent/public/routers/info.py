from fastapi import APIRouter, Request

from skirent.core.config import SUPPORTED_LOCALES, DEFAULT_LOCALE
from skirent.core.limits import limiter
from skirent.core.weather import fetch_current_weather
from skirent.public.schemas.catalog import LocalesResponse

router = APIRouter(tags=["Info"])


@router.get("/weather")
@limiter.limit("30/minute")
async def current_weather(request: Request):
    """Current conditions at Gudauri, passed through from WeatherAPI.com"""
    return await fetch_current_weather()


@router.get("/locales", response_model=LocalesResponse)
async def list_locales():
    return LocalesResponse(locales=list(SUPPORTED_LOCALES), default=DEFAULT_LOCALE)
