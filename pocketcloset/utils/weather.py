"""
Weather and geocoding lookups (Open-Meteo, Nominatim).
Every lookup degrades to a neutral default instead of failing the request.
"""
import logging
from typing import Dict, Optional

import requests

from pocketcloset.config import settings

logger = logging.getLogger(__name__)

FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
REVERSE_GEOCODING_URL = "https://nominatim.openstreetmap.org/reverse"
USER_AGENT = "PocketCloset/1.0"
UNKNOWN_LOCATION = "Unknown location"

# WMO weather codes
CONDITIONS = {
    0: "Clear",
    1: "Mostly clear",
    2: "Partly cloudy",
    3: "Cloudy",
    45: "Fog",
    51: "Light rain",
    61: "Rain",
    80: "Heavy rain",
    95: "Thunderstorm",
}


def fallback_weather() -> Dict:
    return {"temperature": 20, "condition": "Unknown", "code": 0}


def condition_for_code(code: Optional[int]) -> str:
    return CONDITIONS.get(code, "Unknown")


def current_weather(latitude: float, longitude: float) -> Dict:
    """Current temperature (rounded) and condition at a coordinate."""
    try:
        response = requests.get(
            FORECAST_URL,
            params={
                "latitude": latitude,
                "longitude": longitude,
                "current": "temperature_2m,weather_code",
                "timezone": "auto",
            },
            timeout=10,
        )
        response.raise_for_status()
        current = response.json()["current"]
        code = current.get("weather_code")
        weather = {
            "temperature": round(current["temperature_2m"]),
            "condition": condition_for_code(code),
            "code": code,
        }
        logger.info(f"Weather at {latitude},{longitude}: {weather['temperature']}°C, {weather['condition']}")
        return weather
    except (requests.RequestException, KeyError, TypeError, ValueError) as e:
        logger.warning(f"Weather lookup failed at {latitude},{longitude}: {e}")
        return fallback_weather()


def default_weather() -> Dict:
    """Weather at the configured home location."""
    return current_weather(settings.DEFAULT_LATITUDE, settings.DEFAULT_LONGITUDE)


def geocode_city(city: str) -> Optional[Dict]:
    """First Open-Meteo geocoding hit for a place name, or None."""
    try:
        response = requests.get(GEOCODING_URL, params={"name": city, "count": 1}, timeout=10)
        response.raise_for_status()
        results = response.json().get("results") or []
    except (requests.RequestException, ValueError) as e:
        logger.warning(f"Geocoding failed for {city!r}: {e}")
        return None
    if not results:
        logger.info(f"No geocoding match for {city!r}")
        return None
    return results[0]


def weather_for_city(city: Optional[str]) -> Dict:
    """Current weather for a named place; unknown places get the neutral default."""
    if not city:
        return default_weather()
    place = geocode_city(city)
    if place is None:
        return fallback_weather()
    return current_weather(place["latitude"], place["longitude"])


def reverse_geocode(latitude: float, longitude: float) -> str:
    """City name for a coordinate via Nominatim."""
    try:
        response = requests.get(
            REVERSE_GEOCODING_URL,
            params={"format": "json", "lat": latitude, "lon": longitude},
            headers={"User-Agent": USER_AGENT},
            timeout=10,
        )
        response.raise_for_status()
        address = response.json().get("address") or {}
    except (requests.RequestException, ValueError) as e:
        logger.warning(f"Reverse geocoding failed for {latitude},{longitude}: {e}")
        return UNKNOWN_LOCATION
    return address.get("city") or address.get("town") or address.get("county") or UNKNOWN_LOCATION
