"""
Identity verification for Google and Apple sign-in.
Both return a dict with email, name and the provider's subject id.
"""
import logging
from typing import Dict, Optional

import requests
from jose import JWTError, jwt

from pocketcloset.config import settings
from pocketcloset.core.exceptions import AuthenticationError, ValidationError

logger = logging.getLogger(__name__)

GOOGLE_TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
APPLE_KEYS_URL = "https://appleid.apple.com/auth/keys"
APPLE_ISSUER = "https://appleid.apple.com"
DEFAULT_APPLE_NAME = "Apple user"


def _google_id_token_claims(token: str) -> Optional[Dict]:
    try:
        response = requests.get(GOOGLE_TOKENINFO_URL, params={"id_token": token}, timeout=10)
    except requests.RequestException as e:
        logger.warning(f"Google tokeninfo request failed: {e}")
        return None
    if response.status_code != 200:
        return None
    claims = response.json()
    if settings.GOOGLE_CLIENT_ID and claims.get("aud") != settings.GOOGLE_CLIENT_ID:
        logger.warning("Google ID token issued for another client")
        return None
    return claims


def _google_userinfo(token: str) -> Optional[Dict]:
    try:
        response = requests.get(
            GOOGLE_USERINFO_URL, headers={"Authorization": f"Bearer {token}"}, timeout=10
        )
    except requests.RequestException as e:
        logger.warning(f"Google userinfo request failed: {e}")
        return None
    if response.status_code != 200:
        return None
    return response.json()


def verify_google_token(id_token: Optional[str] = None, access_token: Optional[str] = None) -> Dict:
    """Verify an ID token, falling back to treating the token as an access token."""
    token = id_token or access_token
    if not token:
        raise ValidationError("id_token or access_token is required", field="id_token")

    claims = _google_id_token_claims(token) if id_token else None
    if claims:
        return {"email": claims.get("email"), "name": claims.get("name"), "subject": claims.get("sub")}

    info = _google_userinfo(token)
    if info and info.get("email"):
        return {"email": info.get("email"), "name": info.get("name"), "subject": info.get("id")}

    raise AuthenticationError("Invalid Google token")


def verify_apple_token(id_token: str) -> Dict:
    """Check the RS256 signature against Apple's published keys."""
    try:
        kid = jwt.get_unverified_header(id_token).get("kid")
    except JWTError:
        raise AuthenticationError("Invalid Apple token")

    try:
        response = requests.get(APPLE_KEYS_URL, timeout=10)
        response.raise_for_status()
        keys = response.json().get("keys", [])
    except (requests.RequestException, ValueError) as e:
        logger.error(f"Could not fetch Apple signing keys: {e}")
        raise AuthenticationError("Invalid Apple token")

    key = next((k for k in keys if k.get("kid") == kid), None)
    if key is None:
        raise AuthenticationError("Invalid Apple token")

    try:
        claims = jwt.decode(
            id_token,
            key,
            algorithms=["RS256"],
            audience=settings.APPLE_CLIENT_ID or None,
            issuer=APPLE_ISSUER,
            options={"verify_aud": bool(settings.APPLE_CLIENT_ID)},
        )
    except JWTError as e:
        logger.warning(f"Apple token rejected: {e}")
        raise AuthenticationError("Invalid Apple token")

    if not claims.get("email"):
        raise AuthenticationError("Apple token carries no email")
    return {
        "email": claims["email"],
        "name": claims.get("name") or DEFAULT_APPLE_NAME,
        "subject": claims.get("sub"),
    }
