import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pocketcloset.core.exceptions import ValidationError, raise_not_found
from pocketcloset.database import get_db
from pocketcloset.models import PackingItem, Trip, User
from pocketcloset.reco.outfit_builder import ask_gemini, match_garments, render_outfit_image
from pocketcloset.reco.packing import (
    default_outfit_count,
    fallback_recommendations,
    normalize_recommendation,
    packing_prompt,
    suitcase_size,
    trip_days,
)
from pocketcloset.reco.season import parse_date, season_for
from pocketcloset.routers.helpers import get_owned, owned_garments, require_garments, user_garments
from pocketcloset.schemas import (
    PackingGenerateRequest,
    PackingItemCreate,
    PackingItemResponse,
    PackingItemUpdate,
    TripCreate,
    TripResponse,
    TripUpdate,
)
from pocketcloset.utils.auth import get_current_user
from pocketcloset.utils.weather import weather_for_city

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips", tags=["Trips"])


def _trip(trip: Trip) -> dict:
    return TripResponse.model_validate(trip).model_dump(mode="json")


def _item(item: PackingItem) -> dict:
    return PackingItemResponse.model_validate(item).model_dump(mode="json")


def _get_item(db: Session, trip: Trip, item_id: str) -> PackingItem:
    item = db.query(PackingItem).filter(PackingItem.id == item_id, PackingItem.trip_id == trip.id).first()
    if item is None:
        raise_not_found("Packing item", item_id)
    return item


@router.post("", status_code=201)
def create_trip(
    payload: TripCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    trip = Trip(user_id=current_user.id, **payload.model_dump())
    db.add(trip)
    db.commit()
    db.refresh(trip)
    return {"ok": True, "trip": _trip(trip)}


@router.get("")
def list_trips(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    trips = (
        db.query(Trip)
        .filter(Trip.user_id == current_user.id)
        .order_by(Trip.start_date.desc(), Trip.created_at.desc())
        .all()
    )
    return {"ok": True, "trips": [_trip(t) for t in trips]}


@router.get("/{trip_id}")
def get_trip(
    trip_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    trip = get_owned(db, Trip, trip_id, current_user, "Trip")
    return {"ok": True, "trip": _trip(trip)}


@router.put("/{trip_id}")
def update_trip(
    trip_id: str,
    payload: TripUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    trip = get_owned(db, Trip, trip_id, current_user, "Trip")
    changes = payload.model_dump(exclude_unset=True)
    for field in ("destination", "start_date", "end_date", "transport"):
        if field in changes and not changes[field]:
            raise ValidationError(f"{field} cannot be empty", field=field)

    start = changes.get("start_date", trip.start_date)
    end = changes.get("end_date", trip.end_date)
    if parse_date(end) < parse_date(start):
        raise ValidationError("end_date must not be before start_date", field="end_date")

    for field, value in changes.items():
        setattr(trip, field, value)
    db.commit()
    db.refresh(trip)
    return {"ok": True, "trip": _trip(trip)}


@router.delete("/{trip_id}")
def delete_trip(
    trip_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    trip = get_owned(db, Trip, trip_id, current_user, "Trip")
    db.delete(trip)
    db.commit()
    return {"ok": True, "message": "Trip deleted"}


# =============================================================================
# Packing list
# =============================================================================

@router.post("/{trip_id}/packing/generate", status_code=201)
async def generate_packing(
    trip_id: str,
    payload: Optional[PackingGenerateRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Build the packing list for a trip from the user's wardrobe.
    Regenerating replaces the previous list.
    """
    payload = payload or PackingGenerateRequest()
    trip = get_owned(db, Trip, trip_id, current_user, "Trip")
    garments = user_garments(db, current_user)
    require_garments(garments)

    weather = await asyncio.to_thread(weather_for_city, trip.city or trip.destination)
    season = season_for(trip.start_date, trip.city or trip.destination)
    days = trip_days(trip.start_date, trip.end_date)
    count = payload.outfit_count or default_outfit_count(days)
    size = suitcase_size(days, trip.activities or [], weather["temperature"])
    category = payload.category_priority or "casual"
    logger.info(
        f"Packing for trip {trip.id}: {days} days, {count} items, {size} suitcase, "
        f"{weather['temperature']}°C, {season}"
    )

    raw = await asyncio.to_thread(
        ask_gemini,
        packing_prompt(trip, garments, weather, season, size, days, count,
                       payload.category_priority, payload.notes),
        kind="array",
    ) or []
    recommendations = [normalize_recommendation(r, category) for r in raw if isinstance(r, dict)][:count]
    if not recommendations:
        recommendations = fallback_recommendations(garments, count, season, weather["temperature"], category)

    trip.packing_items.clear()
    for rec in recommendations:
        selected = match_garments(rec["garments"], garments)
        item = PackingItem(
            name=rec["name"],
            category=rec["category"],
            kind=rec["kind"],
            quantity=rec["quantity"],
            notes=rec["description"],
            packed=False,
            image_url=await render_outfit_image(selected) if rec["kind"] == "full_outfit" else None,
        )
        item.garments = selected
        trip.packing_items.append(item)

    trip.suitcase_size = size
    trip.packing_generated = True
    db.commit()
    db.refresh(trip)
    return {
        "ok": True,
        "trip": _trip(trip),
        "weather": weather,
        "season": season,
        "days": days,
        "packing": [_item(i) for i in trip.packing_items],
    }


@router.get("/{trip_id}/packing")
def get_packing(
    trip_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    trip = get_owned(db, Trip, trip_id, current_user, "Trip")
    items = (
        db.query(PackingItem)
        .filter(PackingItem.trip_id == trip.id)
        .order_by(PackingItem.created_at.asc())
        .all()
    )
    return {"ok": True, "packing": [_item(i) for i in items]}


@router.post("/{trip_id}/packing", status_code=201)
def add_packing_item(
    trip_id: str,
    payload: PackingItemCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    trip = get_owned(db, Trip, trip_id, current_user, "Trip")
    garments = owned_garments(db, current_user, payload.garment_ids)
    item = PackingItem(
        trip_id=trip.id,
        name=payload.name,
        category=payload.category,
        kind=payload.kind,
        quantity=payload.quantity,
        notes=payload.notes,
        image_url=payload.image_url,
    )
    item.garments = garments
    db.add(item)
    db.commit()
    db.refresh(item)
    return {"ok": True, "item": _item(item)}


@router.put("/{trip_id}/packing/{item_id}")
def update_packing_item(
    trip_id: str,
    item_id: str,
    payload: PackingItemUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    trip = get_owned(db, Trip, trip_id, current_user, "Trip")
    item = _get_item(db, trip, item_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("packed", True) is None or changes.get("quantity", 1) is None:
        raise ValidationError("packed and quantity cannot be null")
    for field, value in changes.items():
        setattr(item, field, value)
    db.commit()
    db.refresh(item)
    return {"ok": True, "item": _item(item)}


@router.delete("/{trip_id}/packing/{item_id}")
def delete_packing_item(
    trip_id: str,
    item_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    trip = get_owned(db, Trip, trip_id, current_user, "Trip")
    item = _get_item(db, trip, item_id)
    db.delete(item)
    db.commit()
    return {"ok": True, "message": "Packing item deleted"}
