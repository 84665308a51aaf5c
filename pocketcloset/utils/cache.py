"""
Key/value store for short-lived security state (login counters, lockouts,
reset tokens). Uses Redis when REDIS_URL is configured and an in-memory
TTL cache otherwise.
"""
import json
import logging
import threading
from typing import Any, Dict, Optional

import redis
from cachetools import TTLCache

from pocketcloset.config import settings

logger = logging.getLogger(__name__)


# In-memory caches (fallback when Redis is unavailable), one per TTL
_in_memory_caches: Dict[int, TTLCache] = {}
_in_memory_lock = threading.RLock()

# Redis client (initialized lazily)
_redis_client: Optional[Any] = None
_redis_failed = False


class _Counter:
    """Mutable counter so increments keep the entry's original expiry."""
    __slots__ = ("value",)

    def __init__(self, value: int):
        self.value = value


def get_redis_client():
    """Get or create Redis client with connection pooling."""
    global _redis_client, _redis_failed
    if not settings.REDIS_URL or _redis_failed:
        return None

    if _redis_client is None:
        try:
            logger.info(f"Attempting Redis connection via REDIS_URL: {settings.REDIS_URL[:50]}...")
            client = redis.from_url(
                settings.REDIS_URL,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
                health_check_interval=30
            )
            ping_result = client.ping()
            logger.info(f"Redis connected (ping: {ping_result})")
            _redis_client = client
        except Exception as e:
            logger.warning(f"Redis connection failed: {e}. Using in-memory cache only.")
            _redis_failed = True
            _redis_client = None

    return _redis_client


def _ttl_cache(ttl: int) -> TTLCache:
    """One TTLCache per expiry so each entry dies on its own schedule."""
    if ttl not in _in_memory_caches:
        _in_memory_caches[ttl] = TTLCache(maxsize=10000, ttl=ttl)
    return _in_memory_caches[ttl]


def _find_in_memory(key: str):
    for cache in _in_memory_caches.values():
        if key in cache:
            return cache
    return None


def cache_get(key: str) -> Optional[Any]:
    """Get value from cache (Redis or in-memory)."""
    redis_client = get_redis_client()
    if redis_client:
        try:
            cached = redis_client.get(key)
            return json.loads(cached) if cached is not None else None
        except Exception as e:
            logger.warning(f"Redis get failed for key {key[:50]}: {e}")

    with _in_memory_lock:
        cache = _find_in_memory(key)
        value = cache.get(key) if cache is not None else None
        return value.value if isinstance(value, _Counter) else value


def cache_set(key: str, value: Any, ttl: int = 300) -> bool:
    """Set value with an expiry in seconds."""
    redis_client = get_redis_client()
    if redis_client:
        try:
            redis_client.setex(key, ttl, json.dumps(value))
            return True
        except Exception as e:
            logger.warning(f"Redis set failed for key {key[:50]}: {e}")

    with _in_memory_lock:
        existing = _find_in_memory(key)
        if existing is not None:
            del existing[key]
        _ttl_cache(ttl)[key] = value
    return True


def cache_incr(key: str, ttl: int) -> int:
    """
    Increment a counter and return the new value.
    The expiry is set when the counter is created and not extended afterwards.
    """
    redis_client = get_redis_client()
    if redis_client:
        try:
            value = redis_client.incr(key)
            if value == 1:
                redis_client.expire(key, ttl)
            return int(value)
        except Exception as e:
            logger.warning(f"Redis incr failed for key {key[:50]}: {e}")

    with _in_memory_lock:
        cache = _find_in_memory(key)
        if cache is None:
            _ttl_cache(ttl)[key] = _Counter(1)
            return 1
        # TTLCache restarts the timer on assignment; bump in place instead
        counter = cache[key]
        if not isinstance(counter, _Counter):
            counter = _Counter(int(counter))
            cache[key] = counter
        counter.value += 1
        return counter.value


def cache_delete(key: str) -> bool:
    """Delete value from cache."""
    redis_client = get_redis_client()
    if redis_client:
        try:
            redis_client.delete(key)
            return True
        except Exception as e:
            logger.warning(f"Redis delete failed for key {key}: {e}")

    with _in_memory_lock:
        for cache in _in_memory_caches.values():
            cache.pop(key, None)
    return True


def cache_exists(key: str) -> bool:
    return cache_get(key) is not None


def clear_all_caches():
    """Clear all caches (useful for testing or cache invalidation)."""
    redis_client = get_redis_client()
    if redis_client:
        try:
            redis_client.flushdb()
        except Exception as e:
            logger.warning(f"Redis flush failed: {e}")

    with _in_memory_lock:
        for cache in _in_memory_caches.values():
            cache.clear()

    logger.info("All caches cleared")
