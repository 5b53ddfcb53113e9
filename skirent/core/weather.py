"""Current conditions at Gudauri from WeatherAPI.com"""
import logging
from typing import Any, Dict, Optional

import httpx

from skirent.core import config
from skirent.core.exceptions import ConfigurationError, ExternalServiceError

logger = logging.getLogger(__name__)

WEATHER_TIMEOUT = 10.0


async def fetch_current_weather(
    client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    """
    Проксирует запрос текущей погоды.

    Raises:
        ConfigurationError: WEATHERAPI_KEY не задан
        ExternalServiceError: upstream вернул ошибку или недоступен
    """
    if not config.WEATHERAPI_KEY:
        raise ConfigurationError("WEATHERAPI_KEY", "Weather API key is not configured")

    params = {
        "key": config.WEATHERAPI_KEY,
        "q": f"{config.WEATHER_LAT},{config.WEATHER_LON}",
        "aqi": "no",
    }

    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=WEATHER_TIMEOUT)
    try:
        response = await client.get(config.WEATHERAPI_URL, params=params)
    except httpx.HTTPError as e:
        logger.warning(f"Weather API request failed: {str(e)}")
        raise ExternalServiceError("weatherapi", "Failed to fetch weather data")
    finally:
        if owns_client:
            await client.aclose()

    if response.status_code >= 400:
        logger.warning(
            f"Weather API returned {response.status_code}",
            extra={"upstream_status": response.status_code},
        )
        raise ExternalServiceError(
            "weatherapi", "Failed to fetch weather data", response.status_code
        )

    return response.json()
