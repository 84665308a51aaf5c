import logging
import secrets
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.orm import Session

from pocketcloset.config import settings
from pocketcloset.core.exceptions import (
    AuthenticationError,
    ConflictError,
    RateLimitError,
    ValidationError,
)
from pocketcloset.database import get_db
from pocketcloset.models import User
from pocketcloset.schemas import (
    AppleAuthRequest,
    ForgotPasswordRequest,
    GoogleAuthRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UserResponse,
)
from pocketcloset.utils import login_throttle
from pocketcloset.utils.auth import create_access_token, get_client_ip, get_password_hash, verify_password
from pocketcloset.utils.cache import cache_delete, cache_set
from pocketcloset.utils.oauth import verify_apple_token, verify_google_token

logger = logging.getLogger(__name__)

# Rate limiter for auth endpoints (uses same key function as main app)
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        401: {"description": "Not authenticated - invalid or missing credentials"},
        429: {"description": "Too many requests - rate limit exceeded or address blocked"},
    }
)

GENERIC_RESET_MESSAGE = "If the email is registered you will receive reset instructions"


def _session(user: User) -> dict:
    return {
        "ok": True,
        "user": UserResponse.model_validate(user).model_dump(mode="json"),
        "token": create_access_token(user),
    }


def _aware(moment: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


@router.post("/register", status_code=201)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def register(request: Request, payload: RegisterRequest, db: Session = Depends(get_db)):
    existing = db.query(User).filter(User.email == payload.email).first()
    if existing:
        logger.warning(f"RegisterDuplicateEmail email={payload.email}")
        raise ConflictError("Email already registered", field="email")

    user = User(
        name=payload.name,
        email=payload.email,
        password_hash=get_password_hash(payload.password),
        confirmed_at=datetime.now(timezone.utc),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"UserRegistered user_id={user.id}")
    return _session(user)


@router.post("/login")
@limiter.limit(settings.AUTH_RATE_LIMIT)
def login(request: Request, payload: LoginRequest, db: Session = Depends(get_db)):
    ip = get_client_ip(request)

    if login_throttle.is_blocked(ip):
        logger.warning(f"LoginRejectedBlockedIp ip={ip}")
        raise RateLimitError(
            "Too many failed attempts. Try again later.",
            retry_after=settings.LOGIN_BLOCK_SECONDS,
        )

    if not payload.email or not payload.password:
        raise ValidationError("Email and password are required")

    email = payload.email.strip().lower()
    user = db.query(User).filter(User.email == email).first()

    if user is None:
        login_throttle.register_failure(ip)
        raise AuthenticationError("Invalid email or password")

    if not user.is_active:
        login_throttle.register_failure(ip)
        logger.warning(f"LoginInactiveAccount user_id={user.id} ip={ip}")
        raise AuthenticationError("Account is not active")

    if not user.email_confirmed:
        login_throttle.register_failure(ip)
        logger.warning(f"LoginUnconfirmedEmail user_id={user.id} ip={ip}")
        raise AuthenticationError("Email not confirmed")

    if not verify_password(payload.password, user.password_hash):
        login_throttle.register_failure(ip)
        raise AuthenticationError("Invalid email or password")

    login_throttle.reset(ip)
    logger.info(f"UserLoggedIn user_id={user.id} ip={ip}")
    return _session(user)


@router.post("/forgot-password")
def forgot_password(payload: ForgotPasswordRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == payload.email).first()
    if user is None:
        # Same answer either way so accounts cannot be enumerated
        return {"ok": True, "message": GENERIC_RESET_MESSAGE}

    token = secrets.token_hex(32)
    ttl = settings.RESET_TOKEN_TTL_SECONDS
    cache_set(f"reset_token:{user.email}", token, ttl=ttl)
    user.reset_token = token
    user.reset_token_expires = datetime.now(timezone.utc) + timedelta(seconds=ttl)
    db.commit()
    logger.info(f"PasswordResetRequested user_id={user.id}")

    # TODO: send the token by email once an outbound mail provider is configured
    response = {"ok": True, "message": GENERIC_RESET_MESSAGE}
    if not settings.is_production:
        response["token"] = token
    return response


@router.post("/reset-password")
def reset_password(payload: ResetPasswordRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.reset_token == payload.token).first()
    now = datetime.now(timezone.utc)
    if user is None or user.reset_token_expires is None or _aware(user.reset_token_expires) <= now:
        raise ValidationError("Invalid or expired token", field="token")

    user.password_hash = get_password_hash(payload.new_password)
    user.reset_token = None
    user.reset_token_expires = None
    db.commit()
    cache_delete(f"reset_token:{user.email}")
    logger.info(f"PasswordReset user_id={user.id}")
    return {"ok": True, "message": "Password updated"}


def _find_or_create_oauth_user(db: Session, identity: dict, provider: str) -> User:
    email = (identity.get("email") or "").strip().lower()
    if not email:
        raise AuthenticationError(f"{provider} account has no email")

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        user = User(
            name=(identity.get("name") or email.split("@")[0])[:80],
            email=email,
            password_hash="",
            email_confirmed=True,
            confirmed_at=datetime.now(timezone.utc),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info(f"UserRegistered user_id={user.id} provider={provider}")
    elif not user.is_active:
        raise AuthenticationError("Account is not active")
    return user


@router.post("/oauth/google")
def google_login(payload: GoogleAuthRequest, db: Session = Depends(get_db)):
    identity = verify_google_token(payload.id_token, payload.access_token)
    user = _find_or_create_oauth_user(db, identity, "Google")
    logger.info(f"UserLoggedIn user_id={user.id} provider=google")
    return _session(user)


@router.post("/oauth/apple")
def apple_login(payload: AppleAuthRequest, db: Session = Depends(get_db)):
    identity = verify_apple_token(payload.id_token)
    if payload.name:
        identity["name"] = payload.name
    user = _find_or_create_oauth_user(db, identity, "Apple")
    logger.info(f"UserLoggedIn user_id={user.id} provider=apple")
    return _session(user)
