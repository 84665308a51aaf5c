"""
Cloudinary image storage helpers
"""
import asyncio
import base64
import logging
import re
from typing import Any, Dict, Optional, Union

import cloudinary
import cloudinary.uploader
import requests

from pocketcloset.config import settings
from pocketcloset.core.exceptions import ExternalServiceError, ValidationError

logger = logging.getLogger(__name__)

_DATA_URL_RE = re.compile(r"data:(image/[^;]+);base64,(.+)", re.DOTALL)

"""Initialize Cloudinary with configuration from settings"""
def initialize_cloudinary():
    if settings.cloudinary_configured:
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            secure=True
        )
        return True
    return False


def storage_enabled() -> bool:
    return settings.USE_CLOUDINARY and settings.cloudinary_configured


"""Check if string is a base64 encoded image"""
def is_base64_image(image_data: str) -> bool:
    if not image_data:
        return False
    return image_data.startswith('data:image/')


def decode_data_url(data_url: str) -> Optional[tuple]:
    """Split a data URL into (mime type, raw bytes)."""
    match = _DATA_URL_RE.match(data_url or "")
    if not match:
        return None
    try:
        return match.group(1), base64.b64decode(match.group(2))
    except (ValueError, TypeError):
        return None


def to_data_url(data: bytes, content_type: str = "image/jpeg") -> str:
    return f"data:{content_type};base64,{base64.b64encode(data).decode('ascii')}"


"""     Store an image
    Args:
        image: raw bytes, a base64 data URL or a regular URL
        subfolder: folder under CLOUDINARY_FOLDER (garments, outfits, avatars)
        content_type: mime type of raw bytes
    Returns:
        Dict with 'url', 'public_id' and 'uploaded'. When Cloudinary is not
        configured the image is kept inline as a data URL.
    Raises:
        ExternalServiceError: if the upload fails
"""
async def upload_image(
    image: Union[bytes, str],
    subfolder: str,
    content_type: str = "image/jpeg",
    tags: Optional[list] = None
) -> Dict[str, Any]:

    # Regular URLs are stored as-is
    if isinstance(image, str) and not is_base64_image(image):
        return {"url": image, "public_id": None, "uploaded": False}

    if isinstance(image, str):
        decoded = decode_data_url(image)
        if decoded is None:
            raise ValidationError("Invalid base64 image data", field="image")
        content_type, payload = decoded
    else:
        payload = image

    if not storage_enabled():
        logger.debug("Cloudinary disabled, keeping image inline")
        return {"url": to_data_url(payload, content_type), "public_id": None, "uploaded": False}

    initialize_cloudinary()
    upload_options: Dict[str, Any] = {
        "folder": f"{settings.CLOUDINARY_FOLDER}/{subfolder}",
        "resource_type": "image",
        "transformation": [
            {"quality": "auto:good"},
            {"fetch_format": "auto"}
        ]
    }
    if tags:
        upload_options["tags"] = tags

    try:
        result = await asyncio.to_thread(
            cloudinary.uploader.upload, to_data_url(payload, content_type), **upload_options
        )
    except Exception as e:
        logger.error(f"Cloudinary upload failed: {e}")
        raise ExternalServiceError("Cloudinary", str(e))

    logger.info(f"Uploaded image {result.get('public_id')} ({result.get('bytes')} bytes)")
    return {
        "url": result.get("secure_url"),
        "public_id": result.get("public_id"),
        "uploaded": True,
    }


"""    Delete an image from Cloudinary
    Args:
        public_id: The Cloudinary public ID of the image
    Returns:
        bool: True if deletion was successful
"""
async def delete_image(public_id: Optional[str]) -> bool:
    if not public_id or not storage_enabled():
        return False

    try:
        initialize_cloudinary()
        result = await asyncio.to_thread(cloudinary.uploader.destroy, public_id)
        return result.get("result") == "ok"
    except Exception as e:
        logger.warning(f"Failed to delete image {public_id} from Cloudinary: {e}")
        return False


def download_image(url: str, timeout: int = 15) -> bytes:
    """Fetch image bytes from a URL or decode an inline data URL."""
    if is_base64_image(url):
        decoded = decode_data_url(url)
        if decoded is None:
            raise ValidationError("Invalid base64 image data", field="image")
        return decoded[1]
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.content


def get_cloudinary_status() -> Dict[str, Any]:
    """Get Cloudinary configuration status"""
    return {
        "enabled": settings.USE_CLOUDINARY,
        "configured": settings.cloudinary_configured,
        "folder": settings.CLOUDINARY_FOLDER
    }
