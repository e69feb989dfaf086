# disaster_response/store.py
# ------------------------------------------------------------
# Redis-backed persistence for sensors, readings, alerts, response
# teams and citizen reports.
#
# Redis storage model:
# - sensors:list -> list of sensor_ids (provisioning order)
# - sensor:<id> -> SensorConfig JSON
# - sensor:<id>:readings -> list of Reading JSON (tail is newest, capped)
# - sensor:<id>:alerts -> alert_ids raised by that sensor (pruned to the dedup window)
# - alerts:list -> list of alert_ids (tail is newest)
# - alert:<id> -> Alert JSON
# - reports:list -> list of report_ids (tail is newest)
# - report:<id> -> DisasterReport JSON
# - teams:list -> list of team_ids (registration order)
# - team:<id> -> Team JSON
# - updates:stream -> list of JSON payloads for SSE
# ------------------------------------------------------------

from __future__ import annotations

import json
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

import redis

from .config import settings
from .exceptions import NotFoundError, StateConflictError
from .geo import haversine_m
from .logger import get_logger
from .models import (
    Alert,
    AlertCreationCommand,
    AlertSeverity,
    AlertType,
    AssignmentPriority,
    Classification,
    Coordinates,
    CurrentAssignment,
    CurrentReading,
    DisasterReport,
    Reading,
    ReportIn,
    ReportResponse,
    ReportResponseIn,
    ReportStatus,
    ReportTeamAssignment,
    SensorConfig,
    SensorStatus,
    SensorType,
    Team,
    TeamAssignment,
    TeamAssignmentStatus,
    TeamIn,
    TeamPosition,
    TeamStatus,
    TeamType,
    Thresholds,
    new_report_id,
)
from .priority import score
from .thresholds import classify

logger = get_logger(__name__)


# -------------------------------
# Redis keys
# -------------------------------
K_SENSORS = "sensors:list"
K_ALERTS = "alerts:list"
K_REPORTS = "reports:list"
K_TEAMS = "teams:list"
K_UPDATES = "updates:stream"


def sensor_key(sensor_id: str) -> str:
    return f"sensor:{sensor_id}"


def readings_key(sensor_id: str) -> str:
    return f"sensor:{sensor_id}:readings"


def sensor_alerts_key(sensor_id: str) -> str:
    return f"sensor:{sensor_id}:alerts"


def alert_key(alert_id: str) -> str:
    return f"alert:{alert_id}"


def report_key(report_id: str) -> str:
    return f"report:{report_id}"


def team_key(team_id: str) -> str:
    return f"team:{team_id}"


# -------------------------------
# Helpers
# -------------------------------
def push_update(r: redis.Redis, payload: Dict[str, Any]) -> None:
    """
    payload example:
      {"type": "alert_raised", "data": {...}}
    """
    r.rpush(K_UPDATES, json.dumps(payload))
    # keep last N
    r.ltrim(K_UPDATES, -settings.update_stream_max, -1)


def _newest_first(r: redis.Redis, list_key: str) -> List[str]:
    return list(reversed(r.lrange(list_key, 0, -1)))


# -------------------------------
# Sensors
# -------------------------------
def save_sensor(r: redis.Redis, sensor: SensorConfig) -> None:
    r.set(sensor_key(sensor.sensor_id), sensor.model_dump_json())


def create_sensor(r: redis.Redis, sensor: SensorConfig) -> SensorConfig:
    if r.get(sensor_key(sensor.sensor_id)) is not None:
        raise StateConflictError(f"Sensor already exists: {sensor.sensor_id}")
    save_sensor(r, sensor)
    r.rpush(K_SENSORS, sensor.sensor_id)
    logger.info("sensor_created", sensor_id=sensor.sensor_id, sensor_type=sensor.type.value)
    return sensor


def get_sensor(r: redis.Redis, sensor_id: str) -> SensorConfig:
    raw = r.get(sensor_key(sensor_id))
    if raw is None:
        raise NotFoundError("sensor", sensor_id)
    return SensorConfig.model_validate_json(raw)


def list_sensors(
    r: redis.Redis,
    sensor_type: Optional[SensorType] = None,
    status: Optional[SensorStatus] = None,
    limit: Optional[int] = None,
) -> List[SensorConfig]:
    """
    Sensors in provisioning order. `status=None` means any status.
    """
    out: List[SensorConfig] = []
    for sensor_id in r.lrange(K_SENSORS, 0, -1):
        raw = r.get(sensor_key(sensor_id))
        if not raw:
            continue
        sensor = SensorConfig.model_validate_json(raw)
        if sensor_type is not None and sensor.type != sensor_type:
            continue
        if status is not None and sensor.status != status:
            continue
        out.append(sensor)
        if limit is not None and len(out) >= limit:
            break
    return out


def update_thresholds(
    r: redis.Redis,
    sensor_id: str,
    thresholds: Thresholds,
    now: datetime,
) -> SensorConfig:
    """
    Calibration: replace thresholds and stamp last_calibrated.
    The current reading's status is re-derived against the new values.
    """
    sensor = get_sensor(r, sensor_id)
    sensor.thresholds = thresholds
    sensor.calibration.last_calibrated = now
    if sensor.current_reading is not None:
        sensor.current_reading.status = classify(sensor.current_reading.value, thresholds)
    save_sensor(r, sensor)
    logger.info(
        "sensor_calibrated",
        sensor_id=sensor_id,
        warning=thresholds.warning,
        critical=thresholds.critical,
    )
    return sensor


# -------------------------------
# Readings
# -------------------------------
def add_reading(r: redis.Redis, sensor: SensorConfig, reading: Reading) -> SensorConfig:
    """
    Append a reading and trim the buffer to the most recent
    `reading_buffer_max` entries, updating current_reading in the
    same MULTI/EXEC transaction.
    """
    sensor.current_reading = CurrentReading(
        value=reading.value,
        timestamp=reading.timestamp,
        status=classify(reading.value, sensor.thresholds),
    )

    pipe = r.pipeline(transaction=True)
    pipe.rpush(readings_key(sensor.sensor_id), reading.model_dump_json())
    pipe.ltrim(readings_key(sensor.sensor_id), -settings.reading_buffer_max, -1)
    pipe.set(sensor_key(sensor.sensor_id), sensor.model_dump_json())
    pipe.execute()
    return sensor


def list_readings(r: redis.Redis, sensor_id: str) -> List[Reading]:
    """Oldest first."""
    return [Reading.model_validate_json(raw) for raw in r.lrange(readings_key(sensor_id), 0, -1)]


def reading_history(
    r: redis.Redis,
    sensor_id: str,
    now: datetime,
    hours: float = 24,
    limit: int = 100,
) -> Dict[str, Any]:
    """
    Readings from the last `hours` (at most `limit`, newest kept),
    sorted by timestamp, with a count/average/min/max summary.
    """
    sensor = get_sensor(r, sensor_id)
    since = now - timedelta(hours=hours)

    readings = [rd for rd in list_readings(r, sensor_id) if rd.timestamp >= since]
    readings = sorted(readings[-limit:], key=lambda rd: rd.timestamp)
    values = [rd.value for rd in readings]

    summary: Dict[str, Any] = {
        "count": len(readings),
        "period_hours": hours,
        "latest": sensor.current_reading.model_dump(mode="json") if sensor.current_reading else None,
        "average": round(sum(values) / len(values), 2) if values else None,
        "min": min(values) if values else None,
        "max": max(values) if values else None,
    }

    return {
        "sensor_id": sensor.sensor_id,
        "type": sensor.type.value,
        "unit": sensor.unit,
        "readings": [rd.model_dump(mode="json") for rd in readings],
        "summary": summary,
    }


def current_readings(r: redis.Redis) -> Dict[str, List[Dict[str, Any]]]:
    """
    Latest reading of every active sensor, grouped by sensor type.
    Status is re-derived against the sensor's current thresholds; a
    sensor that never reported shows value None and status normal.
    """
    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for sensor in list_sensors(r, status=SensorStatus.ACTIVE):
        reading = sensor.current_reading
        grouped.setdefault(sensor.type.value, []).append({
            "sensor_id": sensor.sensor_id,
            "value": reading.value if reading else None,
            "unit": sensor.unit,
            "timestamp": reading.timestamp.isoformat() if reading else None,
            "status": (
                classify(reading.value, sensor.thresholds) if reading else Classification.NORMAL
            ).value,
            "location": sensor.location.model_dump(mode="json"),
        })
    return grouped


# -------------------------------
# Alerts
# -------------------------------
def _write_alert(r: redis.Redis, alert: Alert) -> None:
    r.set(alert_key(alert.id), alert.model_dump_json())


def save_new_alert(r: redis.Redis, command: AlertCreationCommand) -> Alert:
    """
    Persist a freshly derived alert and index it for dedup lookups.
    """
    alert = Alert(**command.model_dump())

    pipe = r.pipeline(transaction=True)
    pipe.set(alert_key(alert.id), alert.model_dump_json())
    pipe.rpush(K_ALERTS, alert.id)
    pipe.ltrim(K_ALERTS, -settings.alert_list_max, -1)
    if alert.sensor_data is not None:
        pipe.rpush(sensor_alerts_key(alert.sensor_data.sensor_id), alert.id)
    pipe.execute()

    if alert.sensor_data is not None:
        since = alert.created_at - timedelta(seconds=settings.alert_dedup_window_sec)
        prune_sensor_alert_index(r, alert.sensor_data.sensor_id, since)

    push_update(r, {"type": "alert_raised", "data": alert.model_dump(mode="json")})
    return alert


def prune_sensor_alert_index(r: redis.Redis, sensor_id: str, since: datetime) -> int:
    """
    Drop ids from the head of the per-sensor index while their alert
    is missing or older than `since`. Ids are appended in creation
    order, so every alert still inside the dedup window is kept no
    matter how many were raised. Returns the number of ids removed.
    """
    idx = sensor_alerts_key(sensor_id)
    removed = 0
    while True:
        head = r.lindex(idx, 0)
        if head is None:
            break
        raw = r.get(alert_key(head))
        if raw is not None and Alert.model_validate_json(raw).created_at >= since:
            break
        # LREM by value: a concurrent prune may already have popped this head
        r.lrem(idx, 1, head)
        removed += 1
    return removed


def get_alert(r: redis.Redis, alert_id: str) -> Alert:
    raw = r.get(alert_key(alert_id))
    if raw is None:
        raise NotFoundError("alert", alert_id)
    return Alert.model_validate_json(raw)


def _alerts_by_ids(r: redis.Redis, ids: List[str]) -> List[Alert]:
    out: List[Alert] = []
    for _id in ids:
        raw = r.get(alert_key(_id))
        if raw:
            out.append(Alert.model_validate_json(raw))
    return out


def recent_alerts(
    r: redis.Redis,
    sensor_id: str,
    alert_type: AlertType,
    severity: AlertSeverity,
    since: datetime,
) -> List[Alert]:
    """
    Unresolved alerts from `sensor_id` with matching type/severity
    created at or after `since`.
    """
    return [
        a for a in _alerts_by_ids(r, r.lrange(sensor_alerts_key(sensor_id), 0, -1))
        if not a.resolved
        and a.type == alert_type
        and a.severity == severity
        and a.created_at >= since
    ]


def list_alerts(
    r: redis.Redis,
    status: str = "all",
    severity: Optional[AlertSeverity] = None,
    alert_type: Optional[AlertType] = None,
    limit: int = 50,
) -> List[Alert]:
    """
    Newest first. status: "all" | "active" (unresolved) | "resolved".
    """
    out: List[Alert] = []
    for alert in _alerts_by_ids(r, _newest_first(r, K_ALERTS)):
        if status == "active" and alert.resolved:
            continue
        if status == "resolved" and not alert.resolved:
            continue
        if severity is not None and alert.severity != severity:
            continue
        if alert_type is not None and alert.type != alert_type:
            continue
        out.append(alert)
        if len(out) >= limit:
            break
    return out


def acknowledge_alert(r: redis.Redis, alert_id: str, now: datetime) -> Alert:
    alert = get_alert(r, alert_id)
    if alert.acknowledged:
        raise StateConflictError("Alert already acknowledged")
    alert.acknowledged = True
    alert.acknowledged_at = now
    _write_alert(r, alert)
    push_update(r, {"type": "alert_acknowledged", "data": {"id": alert.id}})
    return alert


def resolve_alert(
    r: redis.Redis,
    alert_id: str,
    now: datetime,
    resolution: Optional[str] = None,
) -> Alert:
    alert = get_alert(r, alert_id)
    if alert.resolved:
        raise StateConflictError("Alert already resolved")
    alert.resolved = True
    alert.resolved_at = now
    alert.resolution = resolution or "Resolved by system"
    _write_alert(r, alert)
    push_update(r, {"type": "alert_resolved", "data": {"id": alert.id}})
    logger.info("alert_resolved", alert_id=alert.id, resolution=alert.resolution)
    return alert


def alert_stats(r: redis.Redis, recent: int = 10) -> Dict[str, Any]:
    alerts = _alerts_by_ids(r, _newest_first(r, K_ALERTS))

    total = len(alerts)
    resolved = sum(1 for a in alerts if a.resolved)
    active = [a for a in alerts if not a.resolved]
    critical = sum(1 for a in active if a.severity == AlertSeverity.CRITICAL)
    by_type = Counter(a.type.value for a in alerts)

    return {
        "overview": {
            "total": total,
            "active": len(active),
            "critical": critical,
            "resolved": resolved,
            "resolution_rate": round(resolved / total * 100, 1) if total else 0,
        },
        "alerts_by_type": [{"type": t, "count": c} for t, c in by_type.most_common()],
        "recent_alerts": [
            {
                "id": a.id,
                "type": a.type.value,
                "severity": a.severity.value,
                "message": a.message,
                "location": a.location,
                "created_at": a.created_at.isoformat(),
            }
            for a in active[:recent]
        ],
    }


# -------------------------------
# Response teams
# -------------------------------
def _write_team(r: redis.Redis, team: Team, now: datetime) -> None:
    team.updated_at = now
    r.set(team_key(team.team_id), team.model_dump_json())


def create_team(r: redis.Redis, body: TeamIn, now: datetime) -> Team:
    if r.get(team_key(body.team_id)) is not None:
        raise StateConflictError(f"Team already exists: {body.team_id}")
    team = Team(created_at=now, updated_at=now, **body.model_dump())
    _write_team(r, team, now)
    r.rpush(K_TEAMS, team.team_id)
    logger.info("team_registered", team_id=team.team_id, team_type=team.type.value)
    return team


def get_team(r: redis.Redis, team_id: str) -> Team:
    raw = r.get(team_key(team_id))
    if raw is None:
        raise NotFoundError("team", team_id)
    return Team.model_validate_json(raw)


def list_teams(
    r: redis.Redis,
    team_type: Optional[TeamType] = None,
    status: Optional[TeamStatus] = None,
) -> List[Team]:
    """
    Sorted by name.
    """
    teams: List[Team] = []
    for team_id in r.lrange(K_TEAMS, 0, -1):
        raw = r.get(team_key(team_id))
        if not raw:
            continue
        team = Team.model_validate_json(raw)
        if team_type is not None and team.type != team_type:
            continue
        if status is not None and team.status != status:
            continue
        teams.append(team)
    teams.sort(key=lambda t: t.name)
    return teams


def dispatch_team(
    r: redis.Redis,
    team_id: str,
    alert_id: str,
    now: datetime,
    priority: AssignmentPriority = AssignmentPriority.MEDIUM,
    estimated_duration_min: Optional[int] = None,
) -> Tuple[Team, Alert]:
    """
    Send an available team to an open alert.
    The team becomes `deployed` and the alert records the assignment;
    both are written in one MULTI/EXEC.
    """
    team = get_team(r, team_id)
    alert = get_alert(r, alert_id)

    if team.status != TeamStatus.AVAILABLE:
        raise StateConflictError("Team is not available")
    if alert.resolved:
        raise StateConflictError("Alert already resolved")
    if any(t.team_id == team_id for t in alert.response_teams):
        raise StateConflictError("Team already assigned to this alert")

    team.status = TeamStatus.DEPLOYED
    team.current_assignment = CurrentAssignment(
        alert_id=alert_id,
        assigned_at=now,
        estimated_duration_min=estimated_duration_min,
        priority=priority,
    )
    team.performance.total_missions += 1
    team.updated_at = now
    alert.response_teams.append(TeamAssignment(team_id=team_id, assigned_at=now))

    pipe = r.pipeline(transaction=True)
    pipe.set(team_key(team_id), team.model_dump_json())
    pipe.set(alert_key(alert_id), alert.model_dump_json())
    pipe.execute()

    push_update(r, {"type": "team_dispatched", "data": {"id": alert_id, "team_id": team_id}})
    logger.info("team_dispatched", team_id=team_id, alert_id=alert_id, priority=priority.value)
    return team, alert


def complete_mission(
    r: redis.Redis,
    team_id: str,
    now: datetime,
    successful: bool = True,
    notes: Optional[str] = None,
) -> Team:
    """
    Close the team's current assignment and make it available again.
    The matching entry on the alert is marked completed.
    """
    team = get_team(r, team_id)
    if team.status != TeamStatus.DEPLOYED or team.current_assignment is None:
        raise StateConflictError("Team is not currently deployed")

    assignment = team.current_assignment
    perf = team.performance
    if successful:
        perf.successful_missions += 1
    # running mean of mission duration over every dispatched mission
    duration_min = max(0.0, (now - assignment.assigned_at).total_seconds() / 60.0)
    done = max(perf.total_missions, 1)
    perf.average_response_time_min = round(
        perf.average_response_time_min + (duration_min - perf.average_response_time_min) / done, 1
    )
    perf.last_mission_date = now

    team.status = TeamStatus.AVAILABLE
    team.current_assignment = None
    _write_team(r, team, now)

    raw = r.get(alert_key(assignment.alert_id))
    if raw is not None:
        alert = Alert.model_validate_json(raw)
        for entry in alert.response_teams:
            if entry.team_id == team_id:
                entry.status = TeamAssignmentStatus.COMPLETED
        _write_alert(r, alert)

    push_update(r, {
        "type": "mission_completed",
        "data": {"team_id": team_id, "alert_id": assignment.alert_id, "successful": successful},
    })
    logger.info(
        "mission_completed",
        team_id=team_id,
        alert_id=assignment.alert_id,
        successful=successful,
        notes=notes,
    )
    return team


def update_team_status(r: redis.Redis, team_id: str, status: TeamStatus, now: datetime) -> Team:
    team = get_team(r, team_id)
    team.status = status
    _write_team(r, team, now)
    return team


def update_team_location(
    r: redis.Redis,
    team_id: str,
    position: TeamPosition,
    now: datetime,
) -> Team:
    team = get_team(r, team_id)
    team.location.current = position
    _write_team(r, team, now)
    return team


def nearby_teams(
    r: redis.Redis,
    coordinates: Coordinates,
    max_distance_m: float = 50_000,
    team_type: Optional[TeamType] = None,
) -> List[Dict[str, Any]]:
    """
    Available teams with a known current position within
    `max_distance_m` of `coordinates`, nearest first.
    """
    found: List[Dict[str, Any]] = []
    for team in list_teams(r, team_type=team_type, status=TeamStatus.AVAILABLE):
        if team.location.current is None:
            continue
        distance = haversine_m(coordinates, team.location.current.coordinates)
        if distance <= max_distance_m:
            found.append({"team": team, "distance_m": round(distance)})
    found.sort(key=lambda item: item["distance_m"])
    return found


def team_stats(r: redis.Redis) -> Dict[str, Any]:
    teams = list_teams(r)

    total = len(teams)
    available = sum(1 for t in teams if t.status == TeamStatus.AVAILABLE)
    deployed = sum(1 for t in teams if t.status == TeamStatus.DEPLOYED)

    by_type: Dict[str, Dict[str, int]] = {}
    for t in teams:
        row = by_type.setdefault(t.type.value, {"total": 0, "available": 0, "deployed": 0})
        row["total"] += 1
        row["available"] += int(t.status == TeamStatus.AVAILABLE)
        row["deployed"] += int(t.status == TeamStatus.DEPLOYED)

    missions = sum(t.performance.total_missions for t in teams)
    successful = sum(t.performance.successful_missions for t in teams)
    response_times = [
        t.performance.average_response_time_min for t in teams if t.performance.total_missions
    ]

    return {
        "overview": {
            "total": total,
            "available": available,
            "deployed": deployed,
            "busy": total - available - deployed,
            "availability_rate": round(available / total * 100, 1) if total else 0,
        },
        "teams_by_type": [{"type": k, **v} for k, v in sorted(by_type.items())],
        "performance": {
            "total_missions": missions,
            "successful_missions": successful,
            "success_rate": round(successful / missions * 100, 1) if missions else 0,
            "average_response_time_min": (
                round(sum(response_times) / len(response_times), 1) if response_times else 0
            ),
        },
    }


# -------------------------------
# Reports
# -------------------------------
def save_report(r: redis.Redis, report: DisasterReport, now: datetime) -> DisasterReport:
    """
    Every save re-scores the report.
    """
    is_new = r.get(report_key(report.report_id)) is None
    report.priority = score(report, now)
    report.updated_at = now
    r.set(report_key(report.report_id), report.model_dump_json())
    if is_new:
        r.rpush(K_REPORTS, report.report_id)
        r.ltrim(K_REPORTS, -settings.report_list_max, -1)
    return report


def create_report(r: redis.Redis, body: ReportIn, now: datetime) -> DisasterReport:
    report = DisasterReport(
        report_id=new_report_id(now),
        created_at=now,
        updated_at=now,
        **body.model_dump(),
    )
    report = save_report(r, report, now)
    push_update(r, {"type": "report_created", "data": report.model_dump(mode="json")})
    logger.info(
        "report_created",
        report_id=report.report_id,
        report_type=report.type.value,
        priority=report.priority,
    )
    return report


def get_report(r: redis.Redis, report_id: str) -> DisasterReport:
    raw = r.get(report_key(report_id))
    if raw is None:
        raise NotFoundError("report", report_id)
    return DisasterReport.model_validate_json(raw)


def list_reports(
    r: redis.Redis,
    status: Optional[ReportStatus] = None,
    limit: int = 50,
) -> List[DisasterReport]:
    """
    Highest priority first, newest first within a priority.
    """
    reports: List[DisasterReport] = []
    for report_id in r.lrange(K_REPORTS, 0, -1):
        raw = r.get(report_key(report_id))
        if not raw:
            continue
        report = DisasterReport.model_validate_json(raw)
        if status is not None and report.status != status:
            continue
        reports.append(report)

    reports.sort(key=lambda rp: (rp.priority, rp.created_at), reverse=True)
    return reports[:limit]


def update_report_status(
    r: redis.Redis,
    report_id: str,
    status: ReportStatus,
    now: datetime,
    admin_notes: Optional[str] = None,
) -> DisasterReport:
    report = get_report(r, report_id)
    report.status = status
    if admin_notes is not None:
        report.admin_notes = admin_notes
    return save_report(r, report, now)


def add_report_response(
    r: redis.Redis,
    report_id: str,
    body: ReportResponseIn,
    now: datetime,
) -> Tuple[DisasterReport, ReportResponse]:
    report = get_report(r, report_id)
    response = ReportResponse(timestamp=now, **body.model_dump())
    report.responses.append(response)
    report = save_report(r, report, now)
    push_update(r, {
        "type": "report_response",
        "data": {"report_id": report_id, **response.model_dump(mode="json")},
    })
    return report, response


def assign_team_to_report(
    r: redis.Redis,
    report_id: str,
    team_id: str,
    now: datetime,
) -> DisasterReport:
    """
    Attach a registered team to a report. A freshly reported incident
    moves to in_progress once a team is on it.
    """
    report = get_report(r, report_id)
    get_team(r, team_id)
    if any(t.team_id == team_id for t in report.assigned_teams):
        raise StateConflictError("Team already assigned to this report")

    report.assigned_teams.append(ReportTeamAssignment(team_id=team_id, assigned_at=now))
    if report.status == ReportStatus.REPORTED:
        report.status = ReportStatus.IN_PROGRESS
    report = save_report(r, report, now)
    push_update(r, {"type": "report_team_assigned", "data": {"report_id": report_id, "team_id": team_id}})
    logger.info("report_team_assigned", report_id=report_id, team_id=team_id)
    return report


ACTIVE_REPORT_STATUSES = (ReportStatus.REPORTED, ReportStatus.VERIFIED, ReportStatus.IN_PROGRESS)


def report_stats(r: redis.Redis, recent: int = 5) -> Dict[str, Any]:
    reports = [
        DisasterReport.model_validate_json(raw)
        for raw in (r.get(report_key(_id)) for _id in _newest_first(r, K_REPORTS))
        if raw
    ]

    total = len(reports)
    active = [rp for rp in reports if rp.status in ACTIVE_REPORT_STATUSES]
    resolved = sum(1 for rp in reports if rp.status == ReportStatus.RESOLVED)
    by_type = Counter(rp.type.value for rp in reports)
    by_severity = Counter(rp.severity.value for rp in reports)

    return {
        "overview": {
            "total": total,
            "active": len(active),
            "resolved": resolved,
            "resolution_rate": round(resolved / total * 100, 1) if total else 0,
        },
        "reports_by_type": [{"type": t, "count": c} for t, c in by_type.most_common()],
        "reports_by_severity": [{"severity": s, "count": c} for s, c in by_severity.most_common()],
        "recent_reports": [
            {
                "report_id": rp.report_id,
                "type": rp.type.value,
                "title": rp.title,
                "severity": rp.severity.value,
                "priority": rp.priority,
                "created_at": rp.created_at.isoformat(),
            }
            for rp in active[:recent]
        ],
    }
