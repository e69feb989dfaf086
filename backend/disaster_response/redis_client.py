# disaster_response/redis_client.py
# ------------------------------------------------------------
# Redis connection helper shared by the routes and the
# simulation loop.
# ------------------------------------------------------------

from typing import Optional

import redis
from .config import settings

_pool: Optional[redis.ConnectionPool] = None


def _connection_pool() -> redis.ConnectionPool:
    global _pool
    if _pool is None:
        _pool = redis.ConnectionPool.from_url(
            settings.redis_url,
            decode_responses=True,
            health_check_interval=30,
        )
    return _pool


def get_redis() -> redis.Redis:
    """
    FastAPI dependency returning a client on the process-wide pool.

    Routes take it as `r: redis.Redis = Depends(get_redis)`; tests replace
    it through `app.dependency_overrides[get_redis]` with an in-memory
    double, so no route ever opens its own connection.

    decode_responses=True returns str values for the JSON blobs and
    SSE payloads.
    """
    return redis.Redis(connection_pool=_connection_pool())
