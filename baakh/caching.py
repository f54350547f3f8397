from functools import wraps
from cachetools import TTLCache
import redis
import json
from flask import current_app, has_app_context, request
import logging

logger = logging.getLogger(__name__)

# In-memory cache, used only when Redis is not available
local_cache = None

# Initialize Redis client
redis_client = None


def init_cache(redis_url=None):
    """Initialize Redis client with error handling."""
    global redis_client
    if redis_client is not None or not redis_url:
        return

    try:
        client = redis.from_url(
            redis_url,
            decode_responses=True,
            socket_connect_timeout=1,
            socket_timeout=1
        )
        # Test the connection
        client.ping()
        redis_client = client
        logger.info("Redis cache connected")
    except (redis.ConnectionError, redis.TimeoutError) as e:
        logger.warning(f"Redis connection failed: {str(e)}")
        redis_client = None


def should_use_cache():
    """Caching is off under TESTING and when CACHE_ENABLED is false."""
    if not has_app_context():
        return False
    if current_app.config.get('TESTING', False):
        return False
    return current_app.config.get('CACHE_ENABLED', True)


def _expiration():
    return int(current_app.config.get('CACHE_EXPIRATION', 3600))


def get_local_cache():
    """Per-process TTLCache, rebuilt when CACHE_EXPIRATION changes."""
    global local_cache
    ttl = _expiration() if has_app_context() else 3600
    if local_cache is None or local_cache.ttl != ttl:
        local_cache = TTLCache(maxsize=1000, ttl=ttl)
    return local_cache


def cache_key_with_params(prefix):
    """Generate cache key including query parameters."""
    sorted_params = sorted(request.args.items(multi=True))
    param_str = '&'.join(f"{k}={v}" for k, v in sorted_params)
    return f"{prefix}:{request.path}?{param_str}"


def get_from_cache(key):
    """Retrieve a decoded value from Redis, or the local cache without Redis."""
    if redis_client is None:
        return get_local_cache().get(key)
    try:
        cached = redis_client.get(key)
    except redis.RedisError as e:
        logger.warning(f"Redis read failed: {str(e)}")
        return None
    return json.loads(cached) if cached else None


def add_to_cache(key, value):
    """Store a JSON-serializable value in Redis, or the local cache without Redis."""
    if redis_client is None:
        get_local_cache()[key] = value
        return
    try:
        redis_client.setex(key, _expiration(), json.dumps(value, default=str))
    except redis.RedisError as e:
        logger.warning(f"Redis write failed: {str(e)}")


def clear_cache():
    """Clear the entire cache."""
    if redis_client is not None:
        try:
            redis_client.flushdb()
        except redis.RedisError as e:
            logger.warning(f"Redis flush failed: {str(e)}")
    if local_cache is not None:
        local_cache.clear()


def cached_response(prefix):
    """
    Cache the dict returned by a view, keyed by path and query string.

    Views that return a tuple (status code, headers) bypass the cache, so
    only successful plain responses are stored.
    """
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            if not should_use_cache():
                return f(*args, **kwargs)

            cache_key = cache_key_with_params(prefix)
            cached = get_from_cache(cache_key)
            if cached is not None:
                return cached

            result = f(*args, **kwargs)
            if isinstance(result, dict):
                add_to_cache(cache_key, result)
            return result
        return wrapper
    return decorator
