"""
Season of a date, taking the hemisphere of the place into account.
"""
from datetime import date, datetime
from typing import Optional, Union

# Place names that put a city in the southern hemisphere (matched as substrings)
SOUTHERN_PLACES = (
    "buenos aires",
    "argentina",
    "chile",
    "santiago de chile",
    "australia",
    "sydney",
    "melbourne",
    "johannesburg",
    "south africa",
    "cape town",
    "brazil",
    "brasil",
    "são paulo",
    "sao paulo",
    "rio de janeiro",
    "peru",
    "perú",
    "lima",
    "montevideo",
    "uruguay",
    "auckland",
    "new zealand",
)

NORTHERN_SEASONS = {
    3: "spring", 4: "spring", 5: "spring",
    6: "summer", 7: "summer", 8: "summer",
    9: "autumn", 10: "autumn", 11: "autumn",
    12: "winter", 1: "winter", 2: "winter",
}

OPPOSITE = {"spring": "autumn", "summer": "winter", "autumn": "spring", "winter": "summer"}


def parse_date(value: Union[str, date]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value[:10], "%Y-%m-%d").date()


def is_southern_hemisphere(city: Optional[str]) -> bool:
    if not city:
        return False
    lowered = city.lower()
    return any(place in lowered for place in SOUTHERN_PLACES)


def season_for(when: Union[str, date], city: Optional[str] = None) -> str:
    """Meteorological season for a date at a place (north by default)."""
    season = NORTHERN_SEASONS[parse_date(when).month]
    if is_southern_hemisphere(city):
        return OPPOSITE[season]
    return season
