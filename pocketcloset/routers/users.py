import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from pocketcloset.core.exceptions import ConflictError, NotFoundError, ValidationError
from pocketcloset.database import get_db
from pocketcloset.models import User, UserPreferences
from pocketcloset.routers.helpers import read_image_upload
from pocketcloset.schemas import PreferencesCreate, PreferencesResponse, PreferencesUpdate, UserResponse
from pocketcloset.utils.auth import get_current_user
from pocketcloset.utils.cloudinary_helper import delete_image, upload_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def _user(user: User) -> dict:
    return UserResponse.model_validate(user).model_dump(mode="json")


def _preferences(prefs: UserPreferences) -> dict:
    return PreferencesResponse.model_validate(prefs).model_dump(mode="json")


@router.get("/profile")
def get_profile(current_user: User = Depends(get_current_user)):
    return {"ok": True, "user": _user(current_user)}


@router.put("/profile")
async def update_profile(
    name: Optional[str] = Form(None),
    city: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Multipart update of name, city and avatar image; omitted fields are kept."""
    if name is not None:
        name = name.strip()
        if not 2 <= len(name) <= 80:
            raise ValidationError("Name must be between 2 and 80 characters", field="name")
        current_user.name = name
    if city is not None:
        current_user.city = city.strip() or None

    if avatar is not None and avatar.filename:
        data, content_type = await read_image_upload(avatar)
        stored = await upload_image(data, "avatars", content_type=content_type, tags=["avatar"])
        previous = current_user.avatar_storage_id
        current_user.avatar_url = stored["url"]
        current_user.avatar_storage_id = stored["public_id"]
        if previous:
            await delete_image(previous)

    db.commit()
    db.refresh(current_user)
    return {"ok": True, "user": _user(current_user)}


@router.post("/preferences", status_code=201)
def create_preferences(
    payload: PreferencesCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    existing = db.query(UserPreferences).filter(UserPreferences.user_id == current_user.id).first()
    if existing:
        raise ConflictError("Preferences already exist, use PUT to update them")

    prefs = UserPreferences(user_id=current_user.id, **payload.model_dump())
    db.add(prefs)
    db.commit()
    db.refresh(prefs)
    return {"ok": True, "preferences": _preferences(prefs)}


@router.get("/preferences")
def get_preferences(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    prefs = db.query(UserPreferences).filter(UserPreferences.user_id == current_user.id).first()
    if prefs is None:
        raise NotFoundError("Preferences")
    return {"ok": True, "preferences": _preferences(prefs)}


@router.put("/preferences")
def update_preferences(
    payload: PreferencesUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    prefs = db.query(UserPreferences).filter(UserPreferences.user_id == current_user.id).first()
    if prefs is None:
        raise NotFoundError("Preferences")

    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(prefs, field, value)
    db.commit()
    db.refresh(prefs)
    return {"ok": True, "preferences": _preferences(prefs)}
