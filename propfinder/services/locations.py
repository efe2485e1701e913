from typing import Any, Dict, Tuple

import httpx
from pybreaker import CircuitBreaker, CircuitBreakerError
from structlog import get_logger

from propfinder.config import settings
from propfinder.utils.retry import retry_api

logger = get_logger(__name__)
breaker = CircuitBreaker(fail_max=3, reset_timeout=60)

INDIAN_CITIES = [
    "Mumbai", "Delhi", "Bangalore", "Hyderabad", "Chennai",
    "Kolkata", "Pune", "Ahmedabad", "Jaipur", "Surat",
    "Lucknow", "Kanpur", "Nagpur", "Indore", "Thane",
    "Bhopal", "Visakhapatnam", "Noida", "Gurgaon", "Kochi",
]
# Used when the city cannot be detected or is not in INDIAN_CITIES
DEFAULT_CITY = "Mumbai"


@retry_api(tries=3, delay=1, backoff=2, exceptions=(httpx.TransportError, httpx.HTTPStatusError))
async def reverse_geocode(lat: float, lon: float) -> Dict[str, Any]:
    """
    Calls the reverse-geocoding endpoint and returns its JSON body.
    Raises httpx.HTTPError on transport or status errors, CircuitBreakerError while the breaker is open.
    """
    params = {"latitude": round(float(lat), 6), "longitude": round(float(lon), 6), "localityLanguage": "en"}
    with breaker.calling():
        async with httpx.AsyncClient() as client:
            resp = await client.get(settings.REVERSE_GEOCODE_URL, params=params, timeout=10.0, follow_redirects=True)
            if resp.status_code != 200:
                logger.error("Reverse geocode failed", status_code=resp.status_code, text=resp.text)
            resp.raise_for_status()
            return resp.json()


async def detect_city(lat: float, lon: float) -> Tuple[str, bool]:
    """Returns (city, detected). Never raises; falls back to DEFAULT_CITY."""
    try:
        data = await reverse_geocode(lat, lon)
    except (httpx.HTTPError, CircuitBreakerError, ValueError) as e:
        logger.warning("City detection failed, using default", default=DEFAULT_CITY, error=str(e))
        return DEFAULT_CITY, False

    city = data.get("city") if isinstance(data, dict) else None
    if city in INDIAN_CITIES:
        return city, True
    logger.info("Detected city not supported, using default", city=city, default=DEFAULT_CITY)
    return DEFAULT_CITY, False
