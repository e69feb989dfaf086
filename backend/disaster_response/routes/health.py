# disaster_response/routes/health.py
# ------------------------------------------------------------
# Health endpoint
#
# Purpose:
# - quick liveness check
# - counts for UI chips
# - freshness of the latest sensor reading / alert
# ------------------------------------------------------------

from fastapi import APIRouter, Depends
from datetime import datetime, timezone
import time
import redis

from ..redis_client import get_redis
from .. import store
from ..logger import get_logger

router = APIRouter(tags=["health"])
logger = get_logger(__name__)

# server start reference (module load time)
STARTED_AT = datetime.now(timezone.utc)


def _iso(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("/api/health")
def health(r: redis.Redis = Depends(get_redis)):
    """
    Health status for the dashboard.

    The API reports ok while it is up; `redis.ok` carries the
    dependency state separately.
    """
    t0 = time.perf_counter()

    try:
        r.ping()
    except redis.RedisError as exc:
        logger.error("health_redis_unavailable", error=str(exc))
        return {
            "ok": True,
            "utc": _iso(datetime.now(timezone.utc)),
            "redis": {"ok": False},
        }

    counts = {
        "sensors": r.llen(store.K_SENSORS),
        "alerts": r.llen(store.K_ALERTS),
        "reports": r.llen(store.K_REPORTS),
        "teams": r.llen(store.K_TEAMS),
    }

    latest_alert = None
    last_id = r.lindex(store.K_ALERTS, -1)
    if last_id:
        try:
            latest_alert = _iso(store.get_alert(r, last_id).created_at)
        except LookupError:
            latest_alert = None

    now = datetime.now(timezone.utc)
    return {
        "ok": True,
        "utc": _iso(now),
        "started_at": _iso(STARTED_AT),
        "uptime_seconds": int((now - STARTED_AT).total_seconds()),
        "counts": counts,
        "stream_backlog": r.llen(store.K_UPDATES),
        "redis": {"ok": True},
        "freshness": {"alerts_latest": latest_alert},
        "latency_ms": round((time.perf_counter() - t0) * 1000, 2),
    }
