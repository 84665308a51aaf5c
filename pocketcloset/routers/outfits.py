import asyncio
import logging
from typing import List, Optional, Sequence

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pocketcloset.config import settings
from pocketcloset.database import get_db
from pocketcloset.models import Event, Garment, Outfit, User
from pocketcloset.reco.outfit_builder import (
    DEFAULT_OUTFIT_NAME,
    SUGGESTION_COUNT,
    ask_gemini,
    event_prompt,
    normalize_suggestion,
    pick_garments,
    render_outfit_image,
    suggestions_prompt,
    weather_prompt,
)
from pocketcloset.reco.season import season_for
from pocketcloset.routers.helpers import get_owned, owned_garments, require_garments, user_garments
from pocketcloset.schemas import (
    EventOutfitRequest,
    GarmentOutfitRequest,
    GarmentResponse,
    OutfitCreate,
    OutfitResponse,
    OutfitUpdate,
    WeatherOutfitRequest,
)
from pocketcloset.utils.auth import get_current_user
from pocketcloset.utils.weather import default_weather, weather_for_city

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/outfits", tags=["Outfits"])

# Categories used to pad suggestions when Gemini returns fewer than asked
FALLBACK_CATEGORIES = ("casual", "formal", "sport")


def _outfit(outfit: Outfit) -> dict:
    return OutfitResponse.model_validate(outfit).model_dump(mode="json")


def _preview(
    name: str,
    category: str,
    season: str,
    garments: Sequence[Garment],
    image_url: Optional[str],
    event_id: Optional[str] = None,
) -> dict:
    """Unsaved outfit; the client decides whether to keep it through POST /outfits."""
    return OutfitResponse(
        name=name,
        category=category,
        season=season,
        image_url=image_url,
        event_id=event_id,
        garments=[GarmentResponse.model_validate(g) for g in garments],
    ).model_dump(mode="json")


async def _event_weather(event: Event) -> dict:
    if event.city:
        return await asyncio.to_thread(weather_for_city, event.city)
    return await asyncio.to_thread(default_weather)


def _list(db: Session, user: User, **filters) -> List[Outfit]:
    query = db.query(Outfit).filter(Outfit.user_id == user.id)
    for field, value in filters.items():
        query = query.filter(getattr(Outfit, field) == value)
    return query.order_by(Outfit.created_at.desc()).all()


# IMPORTANT: Specific routes must come BEFORE parameterized routes like /{outfit_id}
@router.post("", status_code=201)
def create_outfit(
    payload: OutfitCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    garments = owned_garments(db, current_user, payload.garment_ids)
    if payload.event_id:
        get_owned(db, Event, payload.event_id, current_user, "Event")

    outfit = Outfit(
        user_id=current_user.id,
        name=payload.name,
        category=payload.category,
        season=payload.season,
        event_id=payload.event_id,
        image_url=payload.image_url,
    )
    outfit.garments = garments
    db.add(outfit)
    db.commit()
    db.refresh(outfit)
    return {"ok": True, "outfit": _outfit(outfit)}


@router.get("")
def list_outfits(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {"ok": True, "outfits": [_outfit(o) for o in _list(db, current_user)]}


@router.get("/category/{category}")
def list_outfits_by_category(
    category: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    outfits = _list(db, current_user, category=category.lower())
    return {"ok": True, "outfits": [_outfit(o) for o in outfits]}


@router.get("/season/{season}")
def list_outfits_by_season(
    season: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    outfits = _list(db, current_user, season=season.lower())
    return {"ok": True, "outfits": [_outfit(o) for o in outfits]}


@router.post("/suggestions", status_code=201)
async def suggest_outfits(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Generate and save three outfits for today's weather at the home location.
    """
    garments = user_garments(db, current_user)
    require_garments(garments)

    weather = await asyncio.to_thread(default_weather)
    logger.info(
        f"Generating suggestions for user {current_user.id}: {len(garments)} garments, "
        f"{weather['temperature']}°C {weather['condition']}"
    )

    raw = await asyncio.to_thread(ask_gemini, suggestions_prompt(garments, weather), kind="array") or []
    suggestions = [normalize_suggestion(item) for item in raw if isinstance(item, dict)][:SUGGESTION_COUNT]
    for category in FALLBACK_CATEGORIES[len(suggestions):]:
        suggestions.append({"name": DEFAULT_OUTFIT_NAME, "category": category, "garments": []})

    created = []
    for variant, suggestion in enumerate(suggestions):
        selected = await asyncio.to_thread(
            pick_garments, garments, suggestion, temperature=weather["temperature"], variant=variant
        )
        outfit = Outfit(
            user_id=current_user.id,
            name=suggestion["name"],
            category=suggestion["category"],
            season="all",
            image_url=await render_outfit_image(selected),
        )
        outfit.garments = selected
        db.add(outfit)
        created.append(outfit)

    db.commit()
    for outfit in created:
        db.refresh(outfit)
    return {"ok": True, "weather": weather, "outfits": [_outfit(o) for o in created]}


@router.post("/by-weather")
async def outfit_for_weather(
    payload: WeatherOutfitRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    garments = user_garments(db, current_user)
    require_garments(garments)

    if payload.temperature is not None:
        weather = {"temperature": payload.temperature, "condition": "Custom", "code": None}
    else:
        weather = await asyncio.to_thread(default_weather)

    raw = await asyncio.to_thread(ask_gemini, weather_prompt(garments, weather, payload.category), kind="object")
    suggestion = normalize_suggestion(raw, payload.category or "casual")
    selected = await asyncio.to_thread(pick_garments, garments, suggestion, temperature=weather["temperature"])

    preview = _preview(
        suggestion["name"],
        payload.category or suggestion["category"],
        "all",
        selected,
        await render_outfit_image(selected),
    )
    return {"ok": True, "weather": weather, "outfit": preview}


@router.post("/by-event")
async def outfit_for_event(
    payload: EventOutfitRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    event = get_owned(db, Event, payload.event_id, current_user, "Event")
    garments = user_garments(db, current_user)
    require_garments(garments)

    season = season_for(event.date, event.city)
    weather = await _event_weather(event)
    logger.info(f"Outfit for event {event.id}: season={season}, {weather['temperature']}°C")

    raw = await asyncio.to_thread(
        ask_gemini,
        event_prompt(garments, event, weather, season, payload.category, settings.DEFAULT_CITY),
        kind="object",
    )
    suggestion = normalize_suggestion(raw, payload.category or "casual")
    suggestion.update({"season": season, "weather": weather, "event": event.name})
    selected = await asyncio.to_thread(
        pick_garments, garments, suggestion, season=season, temperature=weather["temperature"]
    )

    preview = _preview(
        suggestion["name"],
        suggestion["category"],
        season,
        selected,
        await render_outfit_image(selected),
        event_id=event.id,
    )
    return {"ok": True, "season": season, "weather": weather, "outfit": preview}


@router.post("/by-garment")
async def outfit_from_garment(
    payload: GarmentOutfitRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    base = get_owned(db, Garment, payload.garment_id, current_user, "Garment")
    garments = user_garments(db, current_user)
    require_garments(garments)

    event = None
    season = (payload.season or "all").lower()
    weather = None
    if payload.event_id:
        event = get_owned(db, Event, payload.event_id, current_user, "Event")
        season = season_for(event.date, event.city)
        weather = await _event_weather(event)

    category = payload.category or "casual"
    suggestion = {
        "name": base.name,
        "category": category,
        "garments": [],
        "base": base.name,
        "season": season if season != "all" else None,
        "weather": weather,
        "event": event.name if event else None,
    }
    selected = await asyncio.to_thread(
        pick_garments,
        garments,
        suggestion,
        season=season,
        temperature=weather["temperature"] if weather else None,
        base=base,
    )

    preview = _preview(
        f"Outfit with {base.name}",
        category,
        season,
        selected,
        await render_outfit_image(selected),
        event_id=event.id if event else None,
    )
    return {"ok": True, "outfit": preview}


@router.get("/{outfit_id}")
def get_outfit(
    outfit_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    outfit = get_owned(db, Outfit, outfit_id, current_user, "Outfit")
    return {"ok": True, "outfit": _outfit(outfit)}


@router.put("/{outfit_id}")
def update_outfit(
    outfit_id: str,
    payload: OutfitUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    outfit = get_owned(db, Outfit, outfit_id, current_user, "Outfit")
    changes = payload.model_dump(exclude_unset=True)

    garment_ids = changes.pop("garment_ids", None)
    if garment_ids:
        outfit.garments = owned_garments(db, current_user, garment_ids)

    if changes.get("event_id"):
        get_owned(db, Event, changes["event_id"], current_user, "Event")

    for field, value in changes.items():
        if value is None and field in ("name", "category", "season"):
            continue
        setattr(outfit, field, value)

    db.commit()
    db.refresh(outfit)
    return {"ok": True, "outfit": _outfit(outfit)}


@router.delete("/{outfit_id}")
def delete_outfit(
    outfit_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    outfit = get_owned(db, Outfit, outfit_id, current_user, "Outfit")
    db.delete(outfit)
    db.commit()
    return {"ok": True, "message": "Outfit deleted"}
