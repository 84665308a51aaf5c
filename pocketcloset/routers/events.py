from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pocketcloset.core.exceptions import ValidationError
from pocketcloset.database import get_db
from pocketcloset.models import Event, User
from pocketcloset.routers.helpers import get_owned
from pocketcloset.schemas import EventCreate, EventResponse, EventUpdate
from pocketcloset.schemas.common import validate_iso_date
from pocketcloset.utils.auth import get_current_user

router = APIRouter(prefix="/events", tags=["Events"])


def _event(event: Event) -> dict:
    return EventResponse.model_validate(event).model_dump(mode="json")


@router.post("", status_code=201)
def create_event(
    payload: EventCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    event = Event(user_id=current_user.id, **payload.model_dump())
    db.add(event)
    db.commit()
    db.refresh(event)
    return {"ok": True, "event": _event(event)}


@router.get("")
def list_events(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Upcoming first: ordered by event date."""
    events = (
        db.query(Event)
        .filter(Event.user_id == current_user.id)
        .order_by(Event.date.asc(), Event.created_at.asc())
        .all()
    )
    return {"ok": True, "events": [_event(e) for e in events]}


@router.get("/date/{date}")
def list_events_by_date(
    date: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        date = validate_iso_date(date)
    except ValueError as e:
        raise ValidationError(str(e), field="date")
    events = (
        db.query(Event)
        .filter(Event.user_id == current_user.id, Event.date == date)
        .order_by(Event.created_at.desc())
        .all()
    )
    return {"ok": True, "events": [_event(e) for e in events]}


@router.get("/{event_id}")
def get_event(
    event_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    event = get_owned(db, Event, event_id, current_user, "Event")
    return {"ok": True, "event": _event(event)}


@router.put("/{event_id}")
def update_event(
    event_id: str,
    payload: EventUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    event = get_owned(db, Event, event_id, current_user, "Event")
    changes = payload.model_dump(exclude_unset=True)
    if "name" in changes and not changes["name"]:
        raise ValidationError("name cannot be empty", field="name")
    if "date" in changes and not changes["date"]:
        raise ValidationError("date cannot be empty", field="date")
    for field, value in changes.items():
        setattr(event, field, value)
    db.commit()
    db.refresh(event)
    return {"ok": True, "event": _event(event)}


@router.delete("/{event_id}")
def delete_event(
    event_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    event = get_owned(db, Event, event_id, current_user, "Event")
    db.delete(event)
    db.commit()
    return {"ok": True, "message": "Event deleted"}
