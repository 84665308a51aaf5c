"""
Per-IP brute-force protection for password login.

Failed attempts are counted in `login_attempts:{ip}`; the counter lives for
LOGIN_BLOCK_SECONDS from the first failure. Reaching LOGIN_MAX_ATTEMPTS sets
`login_blocked:{ip}` for LOGIN_BLOCK_SECONDS, during which every login from
that address is refused without looking at the credentials.
"""
import logging

from pocketcloset.config import settings
from pocketcloset.utils.cache import cache_delete, cache_exists, cache_incr, cache_set

logger = logging.getLogger(__name__)


def attempts_key(ip: str) -> str:
    return f"login_attempts:{ip}"


def block_key(ip: str) -> str:
    return f"login_blocked:{ip}"


def is_blocked(ip: str) -> bool:
    return cache_exists(block_key(ip))


def register_failure(ip: str) -> int:
    """Count a failed attempt; block the address once the limit is reached."""
    attempts = cache_incr(attempts_key(ip), ttl=settings.LOGIN_BLOCK_SECONDS)
    if attempts >= settings.LOGIN_MAX_ATTEMPTS:
        cache_set(block_key(ip), "blocked", ttl=settings.LOGIN_BLOCK_SECONDS)
        logger.warning(
            f"LoginBlocked ip={ip} attempts={attempts} duration={settings.LOGIN_BLOCK_SECONDS}s"
        )
    else:
        logger.info(f"LoginFailed ip={ip} attempts={attempts}/{settings.LOGIN_MAX_ATTEMPTS}")
    return attempts


def reset(ip: str) -> None:
    cache_delete(attempts_key(ip))
