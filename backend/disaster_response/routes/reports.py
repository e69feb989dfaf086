# disaster_response/routes/reports.py
# ------------------------------------------------------------
# Citizen reports API
#
# Priority is never accepted from the client; it is recomputed
# every time a report is saved.
# ------------------------------------------------------------

from fastapi import APIRouter, Depends, Query
from typing import Optional
import redis

from ..redis_client import get_redis
from ..models import (
    ReportAssignTeamRequest,
    ReportIn,
    ReportResponseIn,
    ReportStatus,
    ReportStatusUpdate,
    utcnow,
)
from .. import store

router = APIRouter(tags=["reports"])


@router.post("/api/reports", status_code=201)
def create_report(body: ReportIn, r: redis.Redis = Depends(get_redis)):
    report = store.create_report(r, body, utcnow())
    return report.model_dump(mode="json")


@router.get("/api/reports")
def list_reports(
    status: Optional[ReportStatus] = None,
    limit: int = Query(50, ge=1, le=300),
    r: redis.Redis = Depends(get_redis),
):
    """
    Highest priority first.
    """
    items = store.list_reports(r, status=status, limit=limit)
    return {"items": [rp.model_dump(mode="json") for rp in items]}


@router.get("/api/reports/stats/overview")
def report_stats(r: redis.Redis = Depends(get_redis)):
    return store.report_stats(r)


@router.get("/api/reports/{report_id}")
def get_report(report_id: str, r: redis.Redis = Depends(get_redis)):
    return store.get_report(r, report_id).model_dump(mode="json")


@router.patch("/api/reports/{report_id}/status")
def update_status(report_id: str, body: ReportStatusUpdate, r: redis.Redis = Depends(get_redis)):
    report = store.update_report_status(
        r, report_id, body.status, utcnow(), admin_notes=body.admin_notes
    )
    return report.model_dump(mode="json")


@router.post("/api/reports/{report_id}/reprioritize")
def reprioritize(report_id: str, r: redis.Redis = Depends(get_redis)):
    """
    Re-save the report so its age factor is applied as of now.
    """
    report = store.save_report(r, store.get_report(r, report_id), utcnow())
    return {"report_id": report.report_id, "priority": report.priority}


@router.post("/api/reports/{report_id}/responses", status_code=201)
def add_response(report_id: str, body: ReportResponseIn, r: redis.Redis = Depends(get_redis)):
    _, response = store.add_report_response(r, report_id, body, utcnow())
    return {"message": "Response added successfully", "response": response.model_dump(mode="json")}


@router.patch("/api/reports/{report_id}/assign-team")
def assign_team(report_id: str, body: ReportAssignTeamRequest, r: redis.Redis = Depends(get_redis)):
    report = store.assign_team_to_report(r, report_id, body.team_id, utcnow())
    return {"message": "Team assigned successfully", "report": report.model_dump(mode="json")}
