"""
Outfit assembly: Gemini prompts, mapping of suggested garment names back to
wardrobe rows, heuristic fallbacks and the collage preview.

Gemini is asked for garment *names*; anything it invents that is not in the
wardrobe is dropped. When the model is unavailable the heuristic picker
keeps the feature working.
"""
import asyncio
import logging
from typing import Dict, List, Optional, Sequence

from pocketcloset.core.exceptions import ExternalServiceError, safe_execute
from pocketcloset.models import Garment
from pocketcloset.reco.collage import build_collage
from pocketcloset.utils.cloudinary_helper import download_image, upload_image
from pocketcloset.utils.gemini import generate_json

logger = logging.getLogger(__name__)

DEFAULT_OUTFIT_NAME = "Suggested outfit"
SUGGESTION_COUNT = 3
PICK_COUNT = 3


# =============================================================================
# Prompt building
# =============================================================================

def format_wardrobe(garments: Sequence[Garment]) -> str:
    return "\n".join(
        f"{i}. {g.name} (type: {g.type}, color: {g.color}, section: {g.section or 'unknown'}, "
        f"season: {g.season or 'all'})"
        for i, g in enumerate(garments, start=1)
    )


def temperature_guidance(temperature: float) -> str:
    if temperature < 10:
        return "Below 10°C: recommend coats, sweaters and winter garments"
    if temperature <= 15:
        return "10-15°C: sweater plus a light jacket"
    if temperature <= 20:
        return "15-20°C: t-shirt plus a light jacket"
    return "Above 20°C: light garments, no heavy coat"


def suggestions_prompt(garments: Sequence[Garment], weather: Dict) -> str:
    return f"""You are a fashion expert. Current weather: {weather['temperature']}°C, {weather['condition']}.

Available garments:
{format_wardrobe(garments)}

Create EXACTLY {SUGGESTION_COUNT} varied, sensible outfits considering:
1. Temperature {weather['temperature']}°C. {temperature_guidance(weather['temperature'])}
2. Garment seasons: combine garments meant for the same season
3. Structure: one garment (a dress), two (bottom + top) or three or more (bottom + top + outerwear/accessories)
4. Varied categories: casual, formal, sport

Reply with a JSON array of {SUGGESTION_COUNT} outfits:
[{{"name": "descriptive name", "category": "casual|formal|sport", "garments": ["garment name 1", "garment name 2"]}}]
Use the EXACT garment names from the list. Return only the JSON array."""


def weather_prompt(garments: Sequence[Garment], weather: Dict, category: Optional[str]) -> str:
    wanted = f'The outfit category must be "{category}".' if category else "Choose the most fitting category."
    return f"""You are a fashion expert. Current weather: {weather['temperature']}°C, {weather['condition']}.
{temperature_guidance(weather['temperature'])}.

Available garments:
{format_wardrobe(garments)}

Suggest ONE outfit for this weather. {wanted}
Reply only with JSON:
{{"name": "descriptive name", "category": "casual|formal|sport|elegant", "garments": ["garment name 1", "garment name 2", "garment name 3"]}}
Use the EXACT garment names from the list."""


def event_prompt(garments: Sequence[Garment], event, weather: Dict, season: str,
                 category: Optional[str], default_city: str) -> str:
    city = event.city or default_city
    hint = f"\nPreferred category: {category}" if category else ""
    return f"""You are a fashion expert. The user needs an outfit for this event:

Event: {event.name}
Description: {event.description or 'No description'}
Type: {event.type or 'General'}
Location: {city}
Date: {event.date}
Season: {season}
Weather: {weather['temperature']}°C, {weather['condition']}{hint}

Available garments:
{format_wardrobe(garments)}

Suggest an outfit that is:
1. Appropriate for the event "{event.name}"
2. Comfortable at {weather['temperature']}°C in {season}
3. Suitable for {city}
4. Coherent in colors and style

Reply only with JSON:
{{"name": "descriptive name", "category": "casual|formal|sport|elegant", "season": "{season}", "garments": ["garment name 1", "garment name 2", "garment name 3"]}}"""


def selection_prompt(garments: Sequence[Garment], suggestion: Dict, count: int) -> str:
    context = [f"- Name: {suggestion.get('name') or DEFAULT_OUTFIT_NAME}",
               f"- Category: {suggestion.get('category') or 'casual'}"]
    if suggestion.get("base"):
        context.append(f"- Must go with: {suggestion['base']}")
    if suggestion.get("season"):
        context.append(f"- Season: {suggestion['season']}")
    if suggestion.get("weather"):
        weather = suggestion["weather"]
        context.append(f"- Weather: {weather['temperature']}°C, {weather['condition']}")
    if suggestion.get("event"):
        context.append(f"- Event: {suggestion['event']}")
    context_text = "\n".join(context)
    return f"""You are a fashion expert. Select the {count} garments that combine best into one outfit.

Outfit context:
{context_text}

Available garments:
{format_wardrobe(garments)}

Pick {count} garments that:
1. Work well together (colors, styles)
2. Form a coherent "{suggestion.get('category') or 'casual'}" outfit
3. Cover different sections (top, bottom, footwear...)

Reply only with a JSON array of the EXACT garment names:
["garment name 1", "garment name 2", "garment name 3"]"""


# =============================================================================
# Gemini calls (None when the model is unavailable or unparseable)
# =============================================================================

def ask_gemini(prompt: str, kind: str = "object"):
    try:
        return generate_json(prompt, kind=kind)
    except ExternalServiceError as e:
        logger.warning(f"Gemini unavailable, using heuristics: {e.message}")
        return None


def normalize_suggestion(raw, default_category: str = "casual") -> Dict:
    if not isinstance(raw, dict):
        raw = {}
    names = raw.get("garments")
    if not isinstance(names, list):
        names = []
    category = str(raw.get("category") or default_category).lower()
    return {
        "name": str(raw.get("name") or DEFAULT_OUTFIT_NAME),
        "category": category,
        "garments": [str(n) for n in names if n],
    }


# =============================================================================
# Garment selection
# =============================================================================

def match_garments(names: Sequence[str], garments: Sequence[Garment]) -> List[Garment]:
    """Case-insensitive exact name lookup; keeps order, drops unknowns and repeats."""
    by_name: Dict[str, Garment] = {}
    for garment in garments:
        by_name.setdefault(garment.name.strip().lower(), garment)

    matched: List[Garment] = []
    for name in names:
        garment = by_name.get(str(name).strip().lower())
        if garment is not None and garment not in matched:
            matched.append(garment)
    return matched


def _season_rank(garment: Garment, season: Optional[str]) -> int:
    if not season or season == "all":
        return 0
    garment_season = (garment.season or "all").lower()
    if garment_season == season:
        return 0
    if garment_season == "all":
        return 1
    return 2


def heuristic_pick(
    garments: Sequence[Garment],
    season: Optional[str] = None,
    temperature: Optional[float] = None,
    variant: int = 0,
    base: Optional[Garment] = None,
) -> List[Garment]:
    """
    Build a plausible outfit without the model: a one-piece or top + bottom,
    then footwear, then outerwear when it is cold. `variant` rotates through
    candidates so repeated calls give different outfits.
    """
    by_section: Dict[str, List[Garment]] = {}
    for garment in sorted(garments, key=lambda g: _season_rank(g, season)):
        by_section.setdefault(garment.section or "top", []).append(garment)

    def choose(section: str) -> Optional[Garment]:
        candidates = by_section.get(section) or []
        if not candidates:
            return None
        return candidates[variant % len(candidates)]

    picked: List[Garment] = [base] if base is not None else []
    taken = {base.section} if base is not None else set()

    if base is not None:
        use_one_piece = base.section == "one-piece"
    else:
        use_one_piece = variant % 2 == 1 and bool(by_section.get("one-piece"))

    wanted = ["one-piece"] if use_one_piece else ["top", "bottom"]
    wanted.append("footwear")
    if temperature is not None and temperature < 15:
        wanted.append("outerwear")

    for section in wanted:
        if section in taken:
            continue
        garment = choose(section)
        if garment is not None and garment not in picked:
            picked.append(garment)
            taken.add(section)

    # Sparse wardrobes: pad with whatever is left
    for garment in garments:
        if len(picked) >= 2:
            break
        if garment not in picked:
            picked.append(garment)
    return picked


def pick_garments(
    garments: Sequence[Garment],
    suggestion: Dict,
    count: int = PICK_COUNT,
    season: Optional[str] = None,
    temperature: Optional[float] = None,
    variant: int = 0,
    base: Optional[Garment] = None,
) -> List[Garment]:
    """
    Resolve a suggestion to wardrobe garments: its own names first, then a
    Gemini selection, then the heuristic picker.
    """
    selected = match_garments(suggestion.get("garments") or [], garments)
    if not selected:
        logger.info(f"No suggested garments matched for {suggestion.get('name')!r}, asking for a selection")
        names = ask_gemini(selection_prompt(garments, suggestion, count), kind="array")
        if names:
            # the base garment takes one of the slots
            limit = count - 1 if base is not None else count
            selected = [g for g in match_garments(names, garments) if g is not base][:limit]
    if not selected:
        selected = heuristic_pick(garments, season=season, temperature=temperature, variant=variant, base=base)

    if base is not None and base not in selected:
        selected.insert(0, base)
    return selected


# =============================================================================
# Preview image
# =============================================================================

async def render_outfit_image(garments: Sequence[Garment]) -> Optional[str]:
    """Collage the garment photos and store it; None if no photo could be read."""
    images: List[bytes] = []
    for garment in garments:
        if not garment.image_url:
            continue
        data = await asyncio.to_thread(safe_execute, download_image, garment.image_url)
        if data:
            images.append(data)

    if not images:
        return None

    try:
        collage = await asyncio.to_thread(build_collage, images)
    except (OSError, ValueError) as e:
        logger.warning(f"Collage generation failed: {e}")
        return None

    stored = await upload_image(collage, "outfits", content_type="image/jpeg", tags=["outfit"])
    return stored["url"]
