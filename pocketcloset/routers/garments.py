import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from pocketcloset.config import settings
from pocketcloset.core.exceptions import ValidationError
from pocketcloset.database import get_db
from pocketcloset.models import Garment, User
from pocketcloset.routers.helpers import get_owned, read_image_upload
from pocketcloset.schemas import Classification, GarmentCreate, GarmentResponse, GarmentUpdate
from pocketcloset.utils.auth import get_current_user
from pocketcloset.utils.cache import cache_delete, cache_get, cache_set
from pocketcloset.utils.cloudinary_helper import (
    decode_data_url,
    delete_image,
    download_image,
    upload_image,
)
from pocketcloset.utils.image_analyzer import (
    classify_from_labels,
    classify_garment_image,
    section_for_type,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/garments", tags=["Garments"])


def _garment(garment: Garment) -> dict:
    return GarmentResponse.model_validate(garment).model_dump(mode="json")


def _upload_claim_key(user_id: str, public_id: str) -> str:
    return f"garment_upload:{user_id}:{public_id}"


def _check_upload_claim(user: User, storage_id: Optional[str], image: str) -> Optional[str]:
    """Only storage ids issued to this user by /garments/upload for this image URL are accepted."""
    if not storage_id:
        return None
    if cache_get(_upload_claim_key(user.id, storage_id)) != image:
        raise ValidationError("Unknown upload for this image", field="storage_id")
    return storage_id


def _classify_image_reference(image: str) -> dict:
    """Classify an image given by URL or data URL; unreadable images get the defaults."""
    decoded = decode_data_url(image)
    try:
        if decoded is not None:
            mime_type, data = decoded
        else:
            mime_type, data = "image/jpeg", download_image(image)
    except Exception as e:
        logger.warning(f"Could not fetch garment image for classification: {e}")
        return classify_from_labels([], source="default")
    return classify_garment_image(data, mime_type)


# IMPORTANT: Specific routes must come BEFORE parameterized routes like /{garment_id}
@router.post("/upload")
async def upload_garment(
    file: UploadFile = File(...),
    brand: Optional[str] = Form(None),
    current_user: User = Depends(get_current_user),
):
    """
    Store a garment photo and classify it without saving a garment.
    The client reviews the classification and then calls POST /garments.
    """
    data, content_type = await read_image_upload(file)
    stored = await upload_image(data, "garments", content_type=content_type, tags=["garment"])
    if stored["public_id"]:
        cache_set(
            _upload_claim_key(current_user.id, stored["public_id"]),
            stored["url"],
            ttl=settings.UPLOAD_CLAIM_TTL_SECONDS,
        )
    classification = await asyncio.to_thread(classify_garment_image, data, content_type)
    logger.info(
        f"Garment photo classified for user {current_user.id}: "
        f"{classification['type']}/{classification['color']} via {classification['source']}"
    )
    return {
        "ok": True,
        "image_url": stored["url"],
        "storage_id": stored["public_id"],
        "brand": brand,
        "classification": Classification(**classification).model_dump(),
    }


@router.post("", status_code=201)
async def create_garment(
    payload: GarmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    claimed_id = _check_upload_claim(current_user, payload.storage_id, payload.image)
    classification = None
    if not (payload.name and payload.type and payload.color):
        classification = await asyncio.to_thread(_classify_image_reference, payload.image)

    stored = await upload_image(payload.image, "garments", tags=["garment"])
    garment_type = payload.type or classification["type"]

    garment = Garment(
        user_id=current_user.id,
        name=payload.name or classification["name"],
        type=garment_type,
        color=payload.color or classification["color"],
        brand=payload.brand,
        image_url=stored["url"],
        storage_id=claimed_id or stored["public_id"],
        occasion=payload.occasion or (classification or {}).get("occasion"),
        season=payload.season or (classification or {}).get("season"),
        section=payload.section or (classification or {}).get("section") or section_for_type(garment_type),
        ai_metadata=(
            {"labels": classification["labels"], "processed_by": classification["source"]}
            if classification else None
        ),
    )
    db.add(garment)
    db.commit()
    db.refresh(garment)
    if claimed_id:
        cache_delete(_upload_claim_key(current_user.id, claimed_id))
    logger.info(f"Garment {garment.id} created for user {current_user.id}")
    return {"ok": True, "garment": _garment(garment)}


@router.get("")
def list_garments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    garments = (
        db.query(Garment)
        .filter(Garment.user_id == current_user.id)
        .order_by(Garment.created_at.desc())
        .all()
    )
    return {"ok": True, "garments": [_garment(g) for g in garments]}


@router.get("/{garment_id}")
def get_garment(
    garment_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    garment = get_owned(db, Garment, garment_id, current_user, "Garment")
    return {"ok": True, "garment": _garment(garment)}


@router.put("/{garment_id}")
def update_garment(
    garment_id: str,
    payload: GarmentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    garment = get_owned(db, Garment, garment_id, current_user, "Garment")
    changes = payload.model_dump(exclude_unset=True)
    for field in ("name", "type", "color"):
        if field in changes and not changes[field]:
            raise ValidationError(f"{field} cannot be empty", field=field)

    for field, value in changes.items():
        setattr(garment, field, value)
    if "type" in changes and "section" not in changes:
        garment.section = section_for_type(garment.type)
    db.commit()
    db.refresh(garment)
    return {"ok": True, "garment": _garment(garment)}


@router.delete("/{garment_id}")
async def delete_garment(
    garment_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    garment = get_owned(db, Garment, garment_id, current_user, "Garment")
    storage_id = garment.storage_id
    db.delete(garment)
    db.commit()
    if storage_id:
        await delete_image(storage_id)
    return {"ok": True, "message": "Garment deleted"}
