"""
Outfit preview collage built from garment photos.
"""
import io
import logging
import math
from typing import List, Sequence, Tuple

from PIL import Image, ImageOps

logger = logging.getLogger(__name__)

TILE_SIZE = 200
SPACING = 10
BACKGROUND = (255, 255, 255)
JPEG_QUALITY = 85


def collage_layout(count: int) -> Tuple[int, int, int]:
    """
    Return (columns, width, height) of the canvas for `count` tiles.
    Up to three tiles sit in one row; more go in a square grid.
    """
    if count <= 0:
        raise ValueError("collage needs at least one image")
    if count <= 3:
        width = count * TILE_SIZE + (count - 1) * SPACING
        return count, width, TILE_SIZE
    columns = math.ceil(math.sqrt(count))
    side = columns * TILE_SIZE + (columns - 1) * SPACING
    return columns, side, side


def _tile(data: bytes) -> Image.Image:
    with Image.open(io.BytesIO(data)) as img:
        img = ImageOps.exif_transpose(img).convert("RGB")
        return ImageOps.fit(img, (TILE_SIZE, TILE_SIZE), method=Image.LANCZOS, centering=(0.5, 0.5))


def build_collage(images: Sequence[bytes]) -> bytes:
    """Compose the images into a single JPEG."""
    tiles: List[Image.Image] = [_tile(data) for data in images]
    columns, width, height = collage_layout(len(tiles))

    canvas = Image.new("RGB", (width, height), BACKGROUND)
    for index, tile in enumerate(tiles):
        row, column = divmod(index, columns)
        canvas.paste(tile, (column * (TILE_SIZE + SPACING), row * (TILE_SIZE + SPACING)))

    buffer = io.BytesIO()
    canvas.save(buffer, format="JPEG", quality=JPEG_QUALITY)
    logger.debug(f"Collage of {len(tiles)} images, {width}x{height}")
    return buffer.getvalue()
