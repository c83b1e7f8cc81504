import redis
import json
from typing import Any, Callable, Optional
from tracker.core.config import settings
from tracker.core.logger import logger

# Shared connection pool, do NOT create per-request connections
_pool = redis.ConnectionPool.from_url(
    settings.REDIS_URL,
    max_connections=100,
    decode_responses=True,
    socket_connect_timeout=2,
    socket_timeout=2,
)


def get_redis() -> redis.Redis:
    return redis.Redis(connection_pool=_pool)


def key_page(path: str, user_id: Optional[int] = None) -> str:
    if user_id is not None:
        return f"page:{path}:user:{user_id}"
    return f"page:{path}"


def cache_get(key: str) -> Optional[Any]:
    if not settings.CACHE_ENABLED:
        return None
    try:
        val = get_redis().get(key)
        if val:
            logger.debug(f"[CACHE HIT] {key}")
            return json.loads(val)
        logger.debug(f"[CACHE MISS] {key}")
        return None
    except Exception as e:
        # Cache failure must NEVER break the API, fall through to DB
        logger.warning(f"[CACHE GET ERROR] {key}: {e}")
        return None


def cache_set(key: str, value: Any, ttl: int) -> None:
    if not settings.CACHE_ENABLED:
        return
    try:
        get_redis().setex(key, ttl, json.dumps(value, default=str))
    except Exception as e:
        logger.warning(f"[CACHE SET ERROR] {key}: {e}")


def cache_delete_pattern(pattern: str) -> None:
    if not settings.CACHE_ENABLED:
        return
    try:
        r = get_redis()
        keys = r.keys(pattern)
        if keys:
            r.delete(*keys)
            logger.info(f"[CACHE FLUSH] pattern={pattern} count={len(keys)}")
    except Exception as e:
        logger.warning(f"[CACHE PATTERN DELETE ERROR] {pattern}: {e}")


def cached_page(
    path: str,
    build: Callable[[], Any],
    user_id: Optional[int] = None,
    ttl: Optional[int] = None,
) -> Any:
    """Return the cached payload for a page, building and storing it on a miss."""
    key = key_page(path, user_id)
    cached = cache_get(key)
    if cached is not None:
        return cached
    payload = build()
    cache_set(key, payload, ttl=ttl or settings.PAGE_CACHE_TTL)
    return payload


# ── Path revalidation ─────────────────────────────────────────────
def revalidate_path(*paths: str) -> None:
    """Drops every cached page under each path prefix (all users included)."""
    for path in paths:
        cache_delete_pattern(f"{key_page(path)}*")
