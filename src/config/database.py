"""
Redis client singleton.

This module provides the shared Redis connection used by the search
index when application code does not inject its own client.
"""

from functools import lru_cache

import redis

from config.settings import get_settings


class RedisClientError(Exception):
    """Raised when the Redis client cannot be created."""
    pass


@lru_cache(maxsize=1)
def get_redis_client() -> redis.Redis:
    """
    Get the singleton Redis client instance.

    Uses lru_cache to ensure only one client is created and reused.
    The connection is verified with PING before it is returned.

    Returns:
        redis.Redis: Client with decode_responses=True

    Raises:
        RedisClientError: If the client cannot be created or reached
    """
    settings = get_settings()
    try:
        client = redis.from_url(settings.redis_url, decode_responses=True)
        client.ping()
    except redis.RedisError as e:
        raise RedisClientError(f"Failed to connect to Redis: {e}") from e
    return client

