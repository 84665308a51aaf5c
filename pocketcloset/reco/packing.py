"""
Suitcase sizing, outfit counts and packing recommendations for trips.
"""
import math
from datetime import date
from typing import Sequence, Union

from pocketcloset.models.trip import PACKING_KINDS

from .outfit_builder import format_wardrobe, heuristic_pick
from .season import parse_date

MAX_OUTFITS = 20
MIN_OUTFITS = 3


def trip_days(start: Union[str, date], end: Union[str, date]) -> int:
    """Inclusive number of days, so a same-day trip is one day."""
    return (parse_date(end) - parse_date(start)).days + 1


def default_outfit_count(days: int) -> int:
    return min(MAX_OUTFITS, max(MIN_OUTFITS, math.ceil(days / 2)))


def suitcase_score(days: int, activities: Sequence[str], temperature: float) -> int:
    score = 0

    if days <= 3:
        score += 1
    elif days <= 7:
        score += 2
    else:
        score += 3

    count = len(activities or [])
    if count <= 2:
        score += 1
    elif count <= 4:
        score += 2
    else:
        score += 3

    # Cold weather means bulkier clothes; heat means more changes
    if temperature < 5:
        score += 2
    elif temperature < 15:
        score += 1
    elif temperature > 28:
        score += 1

    return score


def suitcase_size(days: int, activities: Sequence[str], temperature: float) -> str:
    score = suitcase_score(days, activities, temperature)
    if score <= 3:
        return "small"
    if score <= 5:
        return "medium"
    return "large"


# =============================================================================
# Packing list recommendations
# =============================================================================

PACKING_CATEGORIES = ("casual", "formal", "sport", "elegant")
FULL_OUTFIT_SHARE = 0.6


def packing_prompt(trip, garments, weather: dict, season: str, size: str, days: int,
                   count: int, category_priority=None, notes=None) -> str:
    activities = ", ".join(trip.activities or []) or "not specified"
    extra = ""
    if category_priority:
        extra += f"\n- Favour the \"{category_priority}\" category"
    if notes:
        extra += f"\n- Traveller notes: {notes}"
    return f"""You are a fashion and packing expert. Help the user pack for a trip.

TRIP
Destination: {trip.destination}
Location: {trip.city or trip.destination}
Duration: {days} days
Dates: {trip.start_date} to {trip.end_date}
Transport: {trip.transport}
Activities: {activities}

WEATHER
Temperature: {weather['temperature']}°C
Condition: {weather['condition']}
Season: {season}

SUITCASE
Size: {size} (computed)
Recommendations to generate: {count}

AVAILABLE GARMENTS
{format_wardrobe(garments)}

Generate EXACTLY {count} varied packing recommendations. Each one is either:
1. A FULL OUTFIT (kind "full_outfit"): 2-4 coordinated garments for one day, suited to weather and activities
2. LOOSE ITEMS (kind "loose_items"): essentials such as underwear, socks, pyjamas, accessories or extra layers, with a quantity

Rules:
- Mix full outfits and loose items roughly 60/40
- Consider the duration ({days} days) and the temperature ({weather['temperature']}°C)
- Prioritise the planned activities: {activities}
- Fit the amount to a {size} suitcase
- Do not repeat garments across outfits; prefer versatile garments{extra}

Reply only with a JSON array of {count} items:
[{{"kind": "full_outfit|loose_items", "name": "descriptive name", "category": "casual|formal|sport|elegant", "quantity": 1, "garments": ["garment name 1", "garment name 2"], "description": "what these are for"}}]
Use the EXACT garment names from the list."""


def normalize_recommendation(raw: dict, default_category: str = "casual") -> dict:
    kind = str(raw.get("kind") or "full_outfit").lower()
    category = str(raw.get("category") or default_category).lower()
    try:
        quantity = max(1, int(raw.get("quantity") or 1))
    except (TypeError, ValueError):
        quantity = 1
    names = raw.get("garments")
    return {
        "kind": kind if kind in PACKING_KINDS else "full_outfit",
        "name": str(raw.get("name") or "Packing item"),
        "category": category if category in PACKING_CATEGORIES else default_category,
        "quantity": quantity,
        "garments": [str(n) for n in names if n] if isinstance(names, list) else [],
        "description": raw.get("description"),
    }


def fallback_recommendations(garments, count: int, season: str, temperature: float,
                             category: str = "casual") -> list:
    """Packing list without the model: daily outfits plus bundles of extras."""
    full = math.ceil(count * FULL_OUTFIT_SHARE)
    items = []
    for day in range(full):
        picked = heuristic_pick(garments, season=season, temperature=temperature, variant=day)
        items.append({
            "kind": "full_outfit",
            "name": f"Outfit for day {day + 1}",
            "category": category,
            "quantity": 1,
            "garments": [g.name for g in picked],
            "description": None,
        })

    extras = [g for g in garments if g.section in ("accessories", "outerwear", "footwear")]
    loose = count - full
    for index in range(loose):
        items.append({
            "kind": "loose_items",
            "name": "Extras and accessories" if loose == 1 else f"Extras and accessories {index + 1}",
            "category": category,
            "quantity": 1,
            "garments": [g.name for g in extras[index::loose]],
            "description": "Layers, footwear and accessories to mix with the outfits",
        })
    return items
