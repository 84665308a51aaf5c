"""
Thin client for the Gemini generateContent REST endpoint plus helpers to
pull JSON out of model replies.
"""
import base64
import json
import logging
import re
from typing import Any, List, Optional

import requests

from pocketcloset.config import settings
from pocketcloset.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

_OPENERS = {"object": ("{", "}"), "array": ("[", "]")}


def generate_text(
    prompt: str,
    json_mode: bool = True,
    image: Optional[bytes] = None,
    mime_type: str = "image/jpeg",
    model: Optional[str] = None,
    temperature: float = 0.7,
    max_output_tokens: int = 2048,
) -> str:
    """
    Send a prompt (and optionally one image) to Gemini and return the reply text.

    Raises:
        ExternalServiceError: key missing, HTTP failure or empty reply
    """
    if not settings.GEMINI_API_KEY:
        raise ExternalServiceError("Gemini", "GEMINI_API_KEY not set")

    parts: List[dict] = [{"text": prompt}]
    if image is not None:
        parts.append({
            "inline_data": {
                "mime_type": mime_type,
                "data": base64.b64encode(image).decode("ascii"),
            }
        })

    generation_config = {
        "temperature": temperature,
        "maxOutputTokens": max_output_tokens,
    }
    if json_mode:
        generation_config["responseMimeType"] = "application/json"

    model_name = model or (settings.GEMINI_VISION_MODEL if image is not None else settings.GEMINI_MODEL)
    url = GEMINI_URL.format(model=model_name)

    try:
        response = requests.post(
            url,
            params={"key": settings.GEMINI_API_KEY},
            json={"contents": [{"parts": parts}], "generationConfig": generation_config},
            timeout=30,
        )
    except requests.RequestException as e:
        logger.error(f"Gemini request failed: {e}")
        raise ExternalServiceError("Gemini", str(e))

    if response.status_code != 200:
        logger.error(f"Gemini API error: {response.status_code} {response.text[:300]}")
        raise ExternalServiceError("Gemini", f"HTTP {response.status_code}")

    result = response.json()
    candidates = result.get("candidates") or []
    if not candidates:
        logger.error(f"No candidates in Gemini response: {json.dumps(result)[:500]}")
        raise ExternalServiceError("Gemini", "empty response")

    content = candidates[0].get("content") or {}
    text_parts = [p.get("text", "") for p in content.get("parts") or [] if "text" in p]
    if not text_parts:
        raise ExternalServiceError("Gemini", "response has no text")
    return "".join(text_parts).strip()


def extract_json(text: str, kind: str = "object") -> Optional[Any]:
    """
    Extract and parse JSON from a Gemini reply.
    Handles pure JSON, markdown code blocks and JSON embedded in prose.

    Args:
        text: Raw response text
        kind: "object" or "array", the top-level shape expected

    Returns:
        Parsed value of the requested shape, or None if parsing fails
    """
    if not text:
        return None
    expected = dict if kind == "object" else list
    opener, closer = _OPENERS[kind]

    try:
        parsed = json.loads(text)
        if isinstance(parsed, expected):
            return parsed
        # {"outfits": [...]} when an array was asked for
        if expected is list and isinstance(parsed, dict):
            for value in parsed.values():
                if isinstance(value, list):
                    return value
    except json.JSONDecodeError:
        pass

    fenced = re.search(r"```(?:json)?\s*(.*?)\s*```", text, re.DOTALL)
    if fenced:
        try:
            parsed = json.loads(fenced.group(1))
            if isinstance(parsed, expected):
                return parsed
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse JSON from code block: {e}")

    # Bracket matching, skipping brackets inside strings
    start_idx = text.find(opener)
    while start_idx != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start_idx, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == opener:
                depth += 1
            elif ch == closer:
                depth -= 1
                if depth == 0:
                    try:
                        return json.loads(text[start_idx:i + 1])
                    except json.JSONDecodeError:
                        break
        start_idx = text.find(opener, start_idx + 1)

    logger.error(f"Failed to extract valid JSON from Gemini response. Response text: {text[:500]}")
    return None


def generate_json(prompt: str, kind: str = "object", **kwargs) -> Optional[Any]:
    """generate_text + extract_json; None when the reply has no usable JSON."""
    return extract_json(generate_text(prompt, json_mode=True, **kwargs), kind=kind)
