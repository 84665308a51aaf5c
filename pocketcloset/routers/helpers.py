"""
Helpers shared by the resource routers: ownership lookups and upload checks.
"""
from typing import List, Sequence, Tuple

from fastapi import UploadFile
from sqlalchemy.orm import Session

from pocketcloset.config import settings
from pocketcloset.core.exceptions import NotFoundError, ValidationError
from pocketcloset.models import Garment, User


def get_owned(db: Session, model, resource_id: str, user: User, resource: str):
    """Row of `model` owned by `user`; someone else's row is reported as missing."""
    row = db.query(model).filter(model.id == resource_id, model.user_id == user.id).first()
    if row is None:
        raise NotFoundError(resource, resource_id)
    return row


def owned_garments(db: Session, user: User, garment_ids: Sequence[str]) -> List[Garment]:
    """All requested garments, in request order; any foreign or unknown id fails the call."""
    unique_ids = list(dict.fromkeys(garment_ids))
    if not unique_ids:
        return []
    garments = db.query(Garment).filter(Garment.id.in_(unique_ids), Garment.user_id == user.id).all()
    if len(garments) != len(unique_ids):
        raise ValidationError(
            "One or more garments do not exist or do not belong to the user", field="garment_ids"
        )
    by_id = {g.id: g for g in garments}
    return [by_id[i] for i in unique_ids]


def user_garments(db: Session, user: User) -> List[Garment]:
    return db.query(Garment).filter(Garment.user_id == user.id).order_by(Garment.created_at.asc()).all()


def require_garments(garments: Sequence[Garment], minimum: int = 2) -> None:
    if len(garments) < minimum:
        raise ValidationError(f"You need at least {minimum} garments to generate outfits")


async def read_image_upload(upload: UploadFile, field: str = "file") -> Tuple[bytes, str]:
    """Return (bytes, content type) after checking it is a non-empty image within MAX_IMAGE_SIZE."""
    content_type = upload.content_type or ""
    if not content_type.startswith("image/"):
        raise ValidationError("File must be an image", field=field)

    data = await upload.read()
    if not data:
        raise ValidationError("Uploaded file is empty", field=field)
    if len(data) > settings.MAX_IMAGE_SIZE:
        limit_mb = settings.MAX_IMAGE_SIZE / (1024 * 1024)
        raise ValidationError(f"Image exceeds the {limit_mb:.0f}MB limit", field=field)
    return data, content_type
