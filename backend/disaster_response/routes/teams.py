# disaster_response/routes/teams.py
# ------------------------------------------------------------
# Response teams API
#
# Teams are stored as:
# - K_TEAMS: list of team_ids (registration order)
# - team:<id>: JSON payload
#
# A team is dispatched to an alert (available -> deployed) and
# returns to available when its mission is completed.
# ------------------------------------------------------------

from fastapi import APIRouter, Depends
from typing import Optional
import redis

from ..redis_client import get_redis
from ..models import (
    MissionCompleteRequest,
    NearbyTeamsRequest,
    TeamDispatchRequest,
    TeamIn,
    TeamPosition,
    TeamStatus,
    TeamStatusUpdate,
    TeamType,
    utcnow,
)
from .. import store

router = APIRouter(tags=["teams"])


@router.get("/api/teams")
def list_teams(
    type: Optional[TeamType] = None,
    status: Optional[TeamStatus] = None,
    available: bool = False,
    r: redis.Redis = Depends(get_redis),
):
    """
    List teams sorted by name. `available=true` overrides `status`.
    """
    if available:
        status = TeamStatus.AVAILABLE
    items = store.list_teams(r, team_type=type, status=status)
    return {"items": [t.model_dump(mode="json") for t in items]}


@router.post("/api/teams", status_code=201)
def create_team(body: TeamIn, r: redis.Redis = Depends(get_redis)):
    return store.create_team(r, body, utcnow()).model_dump(mode="json")


@router.get("/api/teams/stats/overview")
def team_stats(r: redis.Redis = Depends(get_redis)):
    return store.team_stats(r)


@router.get("/api/teams/available/{team_type}")
def available_teams(team_type: TeamType, r: redis.Redis = Depends(get_redis)):
    items = store.list_teams(r, team_type=team_type, status=TeamStatus.AVAILABLE)
    return {"items": [t.model_dump(mode="json") for t in items]}


@router.post("/api/teams/nearby")
def nearby_teams(body: NearbyTeamsRequest, r: redis.Redis = Depends(get_redis)):
    """
    Available teams within `max_distance_m` meters, nearest first.
    """
    found = store.nearby_teams(
        r, body.coordinates, max_distance_m=body.max_distance_m, team_type=body.type
    )
    return {
        "items": [
            {**item["team"].model_dump(mode="json"), "distance_m": item["distance_m"]}
            for item in found
        ]
    }


@router.get("/api/teams/{team_id}")
def get_team(team_id: str, r: redis.Redis = Depends(get_redis)):
    return store.get_team(r, team_id).model_dump(mode="json")


@router.patch("/api/teams/{team_id}/assign")
def assign_team(team_id: str, body: TeamDispatchRequest, r: redis.Redis = Depends(get_redis)):
    team, alert = store.dispatch_team(
        r,
        team_id,
        body.alert_id,
        utcnow(),
        priority=body.priority,
        estimated_duration_min=body.estimated_duration_min,
    )
    return {
        "message": "Team assigned successfully",
        "team": team.model_dump(mode="json"),
        "alert": alert.model_dump(mode="json"),
    }


@router.patch("/api/teams/{team_id}/complete")
def complete_mission(
    team_id: str,
    body: Optional[MissionCompleteRequest] = None,
    r: redis.Redis = Depends(get_redis),
):
    body = body or MissionCompleteRequest()
    team = store.complete_mission(r, team_id, utcnow(), successful=body.successful, notes=body.notes)
    return {"message": "Mission completed successfully", "team": team.model_dump(mode="json")}


@router.patch("/api/teams/{team_id}/status")
def update_status(team_id: str, body: TeamStatusUpdate, r: redis.Redis = Depends(get_redis)):
    team = store.update_team_status(r, team_id, body.status, utcnow())
    return {"message": "Team status updated successfully", "team": team.model_dump(mode="json")}


@router.patch("/api/teams/{team_id}/location")
def update_location(team_id: str, body: TeamPosition, r: redis.Redis = Depends(get_redis)):
    team = store.update_team_location(r, team_id, body, utcnow())
    return {"message": "Team location updated successfully", "team": team.model_dump(mode="json")}
