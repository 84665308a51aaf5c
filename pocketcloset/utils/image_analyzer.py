"""
Garment classification from a photo using Gemini vision, with a keyword
fallback when the model is unavailable or replies with something unusable.
"""
import logging
from typing import Dict, Iterable, List, Optional

from pocketcloset.core.exceptions import ExternalServiceError
from pocketcloset.models.garment import SECTIONS
from pocketcloset.utils.gemini import extract_json, generate_text

logger = logging.getLogger(__name__)

DEFAULT_TYPE = "shirt"
DEFAULT_COLOR = "blue"

# Ordered: first keyword found in the labels wins, so compound names come first
GARMENT_TYPES = [
    "t-shirt", "shirt", "pants", "jeans", "skirt", "dress", "jacket", "coat",
    "hoodie", "sneakers", "shoes", "boots", "hat", "cap", "bag", "sweater",
]

COLORS = [
    "red", "blue", "green", "yellow", "black", "white", "gray", "pink",
    "purple", "orange", "brown",
]

SECTION_BY_TYPE = {
    "t-shirt": "top",
    "shirt": "top",
    "sweater": "top",
    "hoodie": "top",
    "blouse": "top",
    "pants": "bottom",
    "jeans": "bottom",
    "skirt": "bottom",
    "shorts": "bottom",
    "dress": "one-piece",
    "jumpsuit": "one-piece",
    "jacket": "outerwear",
    "coat": "outerwear",
    "blazer": "outerwear",
    "shoes": "footwear",
    "boots": "footwear",
    "sneakers": "footwear",
    "sandals": "footwear",
    "hat": "accessories",
    "cap": "accessories",
    "bag": "accessories",
    "scarf": "accessories",
}

VALID_SEASONS = {"spring", "summer", "autumn", "winter", "all"}

CLASSIFY_PROMPT = """You are a fashion cataloguing assistant. Look at the garment in the photo and
answer with ONLY a JSON object, no prose, with these keys:
  "name": short descriptive name, e.g. "Navy striped shirt"
  "type": one lowercase word or hyphenated word, e.g. shirt, t-shirt, jeans, dress, sneakers
  "color": dominant color in lowercase English
  "section": one of top, bottom, footwear, outerwear, one-piece, accessories
  "season": one of spring, summer, autumn, winter, all
  "occasion": one of casual, formal, sport, elegant, work, party
  "labels": list of up to 8 lowercase visual keywords"""


def section_for_type(garment_type: Optional[str]) -> str:
    """Map a garment type to a wardrobe section; unknown types count as tops."""
    if not garment_type:
        return "top"
    normalized = garment_type.lower().strip()
    if normalized in SECTION_BY_TYPE:
        return SECTION_BY_TYPE[normalized]
    for keyword, section in SECTION_BY_TYPE.items():
        if keyword in normalized:
            return section
    return "top"


def _first_match(labels: Iterable[str], keywords: List[str]) -> Optional[str]:
    for label in labels:
        text = (label or "").lower()
        for keyword in keywords:
            if keyword in text:
                return keyword
    return None


def extract_type(labels: Iterable[str]) -> str:
    return _first_match(labels, GARMENT_TYPES) or DEFAULT_TYPE


def extract_color(labels: Iterable[str]) -> str:
    return _first_match(labels, COLORS) or DEFAULT_COLOR


def generate_name(garment_type: str, color: str) -> str:
    return f"{color[:1].upper()}{color[1:]} {garment_type}"


def classify_from_labels(labels: List[str], source: str = "keywords") -> Dict:
    """Build a classification purely from keyword labels."""
    garment_type = extract_type(labels)
    color = extract_color(labels)
    return {
        "name": generate_name(garment_type, color),
        "type": garment_type,
        "color": color,
        "section": section_for_type(garment_type),
        "season": "all",
        "occasion": "casual",
        "labels": labels,
        "source": source,
    }


def _normalize(parsed: Dict) -> Dict:
    labels = [str(label).lower() for label in parsed.get("labels") or [] if label]
    garment_type = str(parsed.get("type") or "").lower().strip() or extract_type(labels)
    color = str(parsed.get("color") or "").lower().strip() or extract_color(labels)
    section = str(parsed.get("section") or "").lower().strip()
    if section not in SECTIONS:
        section = section_for_type(garment_type)
    season = str(parsed.get("season") or "").lower().strip()
    if season not in VALID_SEASONS:
        season = "all"
    return {
        "name": (parsed.get("name") or "").strip() or generate_name(garment_type, color),
        "type": garment_type,
        "color": color,
        "section": section,
        "season": season,
        "occasion": str(parsed.get("occasion") or "casual").lower().strip(),
        "labels": labels,
        "source": "gemini",
    }


def classify_garment_image(image: bytes, mime_type: str = "image/jpeg") -> Dict:
    """
    Classify a garment photo.

    Args:
        image: raw image bytes
        mime_type: content type of the image

    Returns:
        dict with name, type, color, section, season, occasion, labels and
        source ("gemini", "keywords" or "default")
    """
    try:
        text = generate_text(CLASSIFY_PROMPT, json_mode=True, image=image, mime_type=mime_type, temperature=0.2)
    except ExternalServiceError as e:
        logger.warning(f"Garment classification unavailable, using defaults: {e.message}")
        return classify_from_labels([], source="default")

    parsed = extract_json(text, kind="object")
    if parsed:
        return _normalize(parsed)

    # Unstructured reply: treat its words as labels
    logger.warning("Gemini classification was not JSON, falling back to keyword extraction")
    return classify_from_labels(text.lower().split(), source="keywords")
