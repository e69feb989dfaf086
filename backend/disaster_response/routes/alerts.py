# disaster_response/routes/alerts.py
# ------------------------------------------------------------
# Alerts API
#
# Alerts are stored as:
# - K_ALERTS: list of alert_ids (tail is newest)
# - alert:<id>: JSON payload
# ------------------------------------------------------------

from fastapi import APIRouter, Depends, Query
from typing import Optional
import redis

from ..redis_client import get_redis
from ..models import AlertSeverity, AlertType, AssignTeamRequest, ResolveRequest, utcnow
from .. import store

router = APIRouter(tags=["alerts"])


@router.get("/api/alerts")
def list_alerts(
    status: str = Query("all", pattern="^(all|active|resolved)$"),
    severity: Optional[AlertSeverity] = None,
    type: Optional[AlertType] = None,
    limit: int = Query(50, ge=1, le=300),
    r: redis.Redis = Depends(get_redis),
):
    """
    List recent alerts (newest first).
    """
    items = store.list_alerts(r, status=status, severity=severity, alert_type=type, limit=limit)
    return {"items": [a.model_dump(mode="json") for a in items]}


@router.get("/api/alerts/stats/overview")
def alert_stats(r: redis.Redis = Depends(get_redis)):
    return store.alert_stats(r)


@router.get("/api/alerts/{alert_id}")
def get_alert(alert_id: str, r: redis.Redis = Depends(get_redis)):
    return store.get_alert(r, alert_id).model_dump(mode="json")


@router.patch("/api/alerts/{alert_id}/acknowledge")
def acknowledge_alert(alert_id: str, r: redis.Redis = Depends(get_redis)):
    alert = store.acknowledge_alert(r, alert_id, utcnow())
    return {"message": "Alert acknowledged successfully", "alert": alert.model_dump(mode="json")}


@router.patch("/api/alerts/{alert_id}/resolve")
def resolve_alert(
    alert_id: str,
    body: Optional[ResolveRequest] = None,
    r: redis.Redis = Depends(get_redis),
):
    resolution = body.resolution if body else None
    alert = store.resolve_alert(r, alert_id, utcnow(), resolution=resolution)
    return {"message": "Alert resolved successfully", "alert": alert.model_dump(mode="json")}


@router.patch("/api/alerts/{alert_id}/assign-team")
def assign_team(alert_id: str, body: AssignTeamRequest, r: redis.Redis = Depends(get_redis)):
    """
    Dispatch a registered, available team to this alert.
    """
    team, alert = store.dispatch_team(r, body.team_id, alert_id, utcnow(), priority=body.priority)
    return {
        "message": "Team assigned successfully",
        "alert": alert.model_dump(mode="json"),
        "team": team.model_dump(mode="json"),
    }
