"""
HTTP tests for the FastAPI routes (TestClient + in-memory Redis).
"""

from __future__ import annotations

import json
from datetime import timedelta

from disaster_response import store
from disaster_response.models import utcnow
from disaster_response.simulator import bootstrap_sensors

SENSOR_BODY = {
    "sensor_id": "river-042",
    "type": "water_level",
    "unit": "m",
    "thresholds": {"warning": 6.0, "critical": 8.0},
    "location": {"name": "Hindon River Monitor", "coordinates": {"lat": 28.68, "lng": 77.44}},
}

REPORT_BODY = {
    "type": "building_collapse",
    "title": "Wall collapse near market",
    "description": "Part of an old building fell onto the street",
    "severity": "high",
    "location": {"address": "Old Market Road", "coordinates": {"lat": 28.66, "lng": 77.45}},
    "affected_people": {"estimated": 25},
}

TEAM_BODY = {
    "team_id": "rescue-01",
    "name": "Rescue Alpha",
    "type": "rescue",
    "location": {
        "base": "Sector 23 Station",
        "current": {"address": "Ghaziabad Central", "coordinates": {"lat": 28.6692, "lng": 77.4538}},
    },
    "members": [{"name": "A. Sharma", "role": "lead", "is_leader": True}],
}

JSON = {"content-type": "application/json"}


def test_create_and_fetch_sensor(client):
    r1 = client.post("/api/sensors", json=SENSOR_BODY)
    assert r1.status_code == 201
    assert r1.json()["status"] == "active"

    r2 = client.get("/api/sensors/river-042")
    assert r2.status_code == 200
    assert r2.json()["thresholds"] == {"warning": 6.0, "critical": 8.0}

    assert client.post("/api/sensors", json=SENSOR_BODY).status_code == 400


def test_sensor_validation(client):
    body = dict(SENSOR_BODY, type="volcanic")
    assert client.post("/api/sensors", json=body).status_code == 422

    body = dict(SENSOR_BODY, thresholds={"warning": 6.0})
    assert client.post("/api/sensors", json=body).status_code == 422


def test_unknown_sensor_is_404(client):
    r = client.get("/api/sensors/ghost-001")
    assert r.status_code == 404
    assert r.json()["ok"] is False


def test_list_sensors_after_bootstrap(client, fake_redis):
    assert bootstrap_sensors(fake_redis) == 5
    assert bootstrap_sensors(fake_redis) == 0

    items = client.get("/api/sensors").json()["items"]
    assert {s["sensor_id"] for s in items} == {
        "seismic-001", "weather-001", "air-001", "water-001", "wind-001",
    }
    only_wind = client.get("/api/sensors", params={"type": "wind_speed"}).json()["items"]
    assert [s["sensor_id"] for s in only_wind] == ["wind-001"]


def test_reading_raises_then_dedups(client):
    client.post("/api/sensors", json=SENSOR_BODY)

    r1 = client.post("/api/sensors/river-042/readings", json={"value": 8.0})
    assert r1.status_code == 200
    body = r1.json()
    assert body["current_reading"]["status"] == "critical"
    assert body["alert"]["type"] == "flood"
    assert body["alert"]["severity"] == "critical"
    assert body["alert"]["estimated_impact"] == 8000
    assert body["alert"]["message"] == "Rising water levels detected: 8.0m"

    r2 = client.post("/api/sensors/river-042/readings", json={"value": 8.4, "quality": "poor"})
    assert r2.json()["alert"] is None

    r3 = client.post("/api/sensors/river-042/readings", json={"value": 2.0})
    assert r3.json()["current_reading"]["status"] == "normal"
    assert r3.json()["alert"] is None


def test_reading_must_be_number(client):
    client.post("/api/sensors", json=SENSOR_BODY)
    r = client.post("/api/sensors/river-042/readings", json={"value": "high"})
    assert r.status_code == 422


def test_calibration_changes_classification(client):
    client.post("/api/sensors", json=SENSOR_BODY)
    r = client.patch("/api/sensors/river-042/thresholds", json={"warning": 9.0, "critical": 12.0})
    assert r.status_code == 200
    assert r.json()["calibration"]["last_calibrated"] is not None

    reading = client.post("/api/sensors/river-042/readings", json={"value": 8.0}).json()
    assert reading["current_reading"]["status"] == "normal"


def test_history_endpoint(client):
    client.post("/api/sensors", json=SENSOR_BODY)
    for v in (1.0, 2.0, 6.0):
        client.post("/api/sensors/river-042/readings", json={"value": v})

    history = client.get("/api/sensors/river-042/history", params={"hours": 1}).json()
    assert history["summary"]["count"] == 3
    assert history["summary"]["max"] == 6.0


def test_alert_lifecycle(client):
    client.post("/api/sensors", json=SENSOR_BODY)
    alert = client.post("/api/sensors/river-042/readings", json={"value": 7.0}).json()["alert"]
    alert_id = alert["id"]

    listed = client.get("/api/alerts", params={"status": "active"}).json()["items"]
    assert [a["id"] for a in listed] == [alert_id]

    assert client.patch(f"/api/alerts/{alert_id}/acknowledge").json()["alert"]["acknowledged"] is True
    assert client.patch(f"/api/alerts/{alert_id}/acknowledge").status_code == 400

    client.post("/api/teams", json=TEAM_BODY)
    assigned = client.patch(f"/api/alerts/{alert_id}/assign-team", json={"team_id": "rescue-01"})
    assert assigned.json()["alert"]["response_teams"][0]["status"] == "dispatched"
    assert assigned.json()["team"]["status"] == "deployed"

    resolved = client.patch(f"/api/alerts/{alert_id}/resolve", json={"resolution": "Water receded"})
    assert resolved.json()["alert"]["resolution"] == "Water receded"
    assert client.get("/api/alerts", params={"status": "active"}).json()["items"] == []

    # resolution lifts suppression for the same sensor/type/severity
    again = client.post("/api/sensors/river-042/readings", json={"value": 7.0}).json()["alert"]
    assert again is not None
    assert again["id"] != alert_id


def test_alert_stats_endpoint(client):
    client.post("/api/sensors", json=SENSOR_BODY)
    client.post("/api/sensors/river-042/readings", json={"value": 9.0})

    stats = client.get("/api/alerts/stats/overview").json()
    assert stats["overview"]["total"] == 1
    assert stats["overview"]["critical"] == 1
    assert stats["recent_alerts"][0]["type"] == "flood"


def test_unknown_alert_is_404(client):
    assert client.get("/api/alerts/alert-0-missing").status_code == 404


def test_report_priority_on_create(client):
    r = client.post("/api/reports", json=REPORT_BODY)
    assert r.status_code == 201
    report = r.json()
    # 5 x 1.5 (high) x 1.5 (building_collapse) x 1.3 (>10 people) = 14.6 -> 10
    assert report["priority"] == 10
    assert report["report_id"].startswith("DR-")
    assert report["status"] == "reported"


def test_report_priority_not_client_controlled(client):
    body = dict(REPORT_BODY, severity="low", type="tree_fall", affected_people={}, priority=10)
    report = client.post("/api/reports", json=body).json()
    assert report["priority"] == 3


def test_reports_sorted_by_priority(client):
    low = dict(REPORT_BODY, severity="low", type="tree_fall", affected_people={})
    client.post("/api/reports", json=low)
    client.post("/api/reports", json=REPORT_BODY)

    priorities = [rp["priority"] for rp in client.get("/api/reports").json()["items"]]
    assert priorities == [10, 3]


def test_report_status_update_and_reprioritize(client, fake_redis):
    medium = dict(REPORT_BODY, severity="medium", type="flood", affected_people={})
    report_id = client.post("/api/reports", json=medium).json()["report_id"]

    updated = client.patch(f"/api/reports/{report_id}/status", json={"status": "verified"})
    assert updated.json()["status"] == "verified"
    assert updated.json()["priority"] == 5

    # age the report by 30 hours, then re-score
    report = store.get_report(fake_redis, report_id)
    report.created_at = utcnow() - timedelta(hours=30)
    fake_redis.set(store.report_key(report_id), report.model_dump_json())

    r = client.post(f"/api/reports/{report_id}/reprioritize")
    assert r.json()["priority"] == 6

    verified = client.get("/api/reports", params={"status": "verified"}).json()["items"]
    assert [rp["report_id"] for rp in verified] == [report_id]


def test_health(client, fake_redis):
    bootstrap_sensors(fake_redis)
    body = client.get("/api/health").json()
    assert body["ok"] is True
    assert body["redis"]["ok"] is True
    assert body["counts"]["sensors"] == 5


# -------------------------------
# Non-finite numbers
# -------------------------------
def test_nan_threshold_rejected_on_create(client, fake_redis):
    raw = json.dumps(dict(SENSOR_BODY, thresholds={"warning": float("nan"), "critical": 8.0}))
    r = client.post("/api/sensors", content=raw, headers=JSON)

    assert r.status_code == 422
    assert fake_redis.get(store.sensor_key("river-042")) is None
    assert client.get("/api/sensors").json()["items"] == []


def test_infinite_coordinates_rejected(client):
    body = dict(SENSOR_BODY, location={"name": "Nowhere", "coordinates": {"lat": float("inf"), "lng": 0}})
    r = client.post("/api/sensors", content=json.dumps(body), headers=JSON)
    assert r.status_code == 422


def test_nan_calibration_rejected(client):
    client.post("/api/sensors", json=SENSOR_BODY)
    r = client.patch(
        "/api/sensors/river-042/thresholds",
        content='{"warning": NaN, "critical": 12.0}',
        headers=JSON,
    )

    assert r.status_code == 422
    assert client.get("/api/sensors/river-042").json()["thresholds"] == {"warning": 6.0, "critical": 8.0}
    assert [s["sensor_id"] for s in client.get("/api/sensors").json()["items"]] == ["river-042"]


def test_infinite_reading_rejected(client, fake_redis):
    client.post("/api/sensors", json=SENSOR_BODY)
    for raw in ('{"value": Infinity}', '{"value": -Infinity}', '{"value": NaN}'):
        r = client.post("/api/sensors/river-042/readings", content=raw, headers=JSON)
        assert r.status_code == 422

    assert fake_redis.llen(store.readings_key("river-042")) == 0
    sensor = client.get("/api/sensors/river-042")
    assert sensor.status_code == 200
    assert sensor.json()["current_reading"] is None
    assert client.get("/api/alerts").json()["items"] == []


# -------------------------------
# Current readings
# -------------------------------
def test_current_readings_grouped(client, fake_redis):
    bootstrap_sensors(fake_redis)
    client.post("/api/sensors/seismic-001/readings", json={"value": 4.5})

    body = client.get("/api/sensors/readings/current").json()
    readings = body["readings"]

    assert set(readings) == {"seismic", "temperature", "air_quality", "water_level", "wind_speed"}
    assert readings["seismic"][0]["value"] == 4.5
    assert readings["seismic"][0]["status"] == "critical"
    assert readings["wind_speed"][0]["value"] is None
    assert body["data_source"] == "devices"


# -------------------------------
# Teams
# -------------------------------
def test_team_registration_and_lookup(client):
    r = client.post("/api/teams", json=TEAM_BODY)
    assert r.status_code == 201
    assert r.json()["status"] == "available"
    assert client.post("/api/teams", json=TEAM_BODY).status_code == 400

    assert client.get("/api/teams/rescue-01").json()["name"] == "Rescue Alpha"
    assert client.get("/api/teams/ghost-99").status_code == 404
    assert client.post("/api/teams", json=dict(TEAM_BODY, type="navy")).status_code == 422


def test_team_dispatch_and_complete(client):
    client.post("/api/sensors", json=SENSOR_BODY)
    alert_id = client.post("/api/sensors/river-042/readings", json={"value": 9.0}).json()["alert"]["id"]
    client.post("/api/teams", json=TEAM_BODY)

    r = client.patch("/api/teams/rescue-01/assign", json={"alert_id": alert_id, "priority": "critical"})
    assert r.status_code == 200
    assert r.json()["team"]["current_assignment"]["alert_id"] == alert_id
    assert client.get(f"/api/alerts/{alert_id}").json()["response_teams"][0]["team_id"] == "rescue-01"

    again = client.patch("/api/teams/rescue-01/assign", json={"alert_id": alert_id})
    assert again.status_code == 400
    assert again.json()["error"] == "Team is not available"
    assert client.get("/api/teams/available/rescue").json()["items"] == []

    done = client.patch("/api/teams/rescue-01/complete", json={"successful": True, "notes": "All clear"})
    assert done.json()["team"]["status"] == "available"
    assert done.json()["team"]["performance"]["successful_missions"] == 1
    assert client.get(f"/api/alerts/{alert_id}").json()["response_teams"][0]["status"] == "completed"

    assert client.patch("/api/teams/rescue-01/complete").status_code == 400


def test_team_listing_status_and_location(client):
    client.post("/api/teams", json=TEAM_BODY)
    client.post("/api/teams", json=dict(TEAM_BODY, team_id="med-01", name="Medics", type="medical"))

    r = client.patch("/api/teams/med-01/status", json={"status": "maintenance"})
    assert r.json()["team"]["status"] == "maintenance"
    assert client.patch("/api/teams/med-01/status", json={"status": "asleep"}).status_code == 422

    available = client.get("/api/teams", params={"available": "true"}).json()["items"]
    assert [t["team_id"] for t in available] == ["rescue-01"]
    assert len(client.get("/api/teams").json()["items"]) == 2

    moved = client.patch(
        "/api/teams/rescue-01/location",
        json={"address": "NH-24", "coordinates": {"lat": 28.64, "lng": 77.38}},
    )
    assert moved.json()["team"]["location"]["current"]["address"] == "NH-24"


def test_nearby_teams(client):
    client.post("/api/teams", json=TEAM_BODY)
    far = dict(TEAM_BODY, team_id="rescue-02", name="Rescue Far", location={
        "base": "Delhi HQ",
        "current": {"coordinates": {"lat": 28.61, "lng": 77.21}},
    })
    client.post("/api/teams", json=far)

    point = {"lat": 28.67, "lng": 77.45}
    near = client.post("/api/teams/nearby", json={"coordinates": point, "max_distance_m": 5000}).json()
    assert [t["team_id"] for t in near["items"]] == ["rescue-01"]

    wide = client.post("/api/teams/nearby", json={"coordinates": point}).json()
    assert [t["team_id"] for t in wide["items"]] == ["rescue-01", "rescue-02"]

    none = client.post("/api/teams/nearby", json={"coordinates": point, "type": "fire"}).json()
    assert none["items"] == []


def test_team_stats_endpoint(client):
    client.post("/api/teams", json=TEAM_BODY)
    client.post("/api/teams", json=dict(TEAM_BODY, team_id="fire-01", name="Fire One", type="fire"))
    client.patch("/api/teams/fire-01/status", json={"status": "busy"})

    stats = client.get("/api/teams/stats/overview").json()
    assert stats["overview"]["total"] == 2
    assert stats["overview"]["available"] == 1
    assert stats["overview"]["busy"] == 1
    assert stats["overview"]["availability_rate"] == 50.0


# -------------------------------
# Report follow-up
# -------------------------------
def test_report_responses(client):
    report_id = client.post("/api/reports", json=REPORT_BODY).json()["report_id"]

    r = client.post(
        f"/api/reports/{report_id}/responses",
        json={"message": "Is anyone trapped?", "type": "question"},
    )
    assert r.status_code == 201
    assert r.json()["response"]["type"] == "question"

    stored = client.get(f"/api/reports/{report_id}").json()
    assert [rs["message"] for rs in stored["responses"]] == ["Is anyone trapped?"]

    assert client.post(f"/api/reports/{report_id}/responses", json={"message": ""}).status_code == 422
    assert client.post("/api/reports/DR-0-000000/responses", json={"message": "hi"}).status_code == 404


def test_report_assign_team(client):
    client.post("/api/teams", json=TEAM_BODY)
    report_id = client.post("/api/reports", json=REPORT_BODY).json()["report_id"]

    r = client.patch(f"/api/reports/{report_id}/assign-team", json={"team_id": "rescue-01"})
    assert r.status_code == 200
    assert r.json()["report"]["status"] == "in_progress"
    assert r.json()["report"]["assigned_teams"][0]["status"] == "assigned"

    again = client.patch(f"/api/reports/{report_id}/assign-team", json={"team_id": "rescue-01"})
    assert again.status_code == 400
    unknown = client.patch(f"/api/reports/{report_id}/assign-team", json={"team_id": "ghost-99"})
    assert unknown.status_code == 404


def test_report_stats_endpoint(client):
    first = client.post("/api/reports", json=REPORT_BODY).json()["report_id"]
    client.post("/api/reports", json=dict(REPORT_BODY, type="flood", severity="low"))
    client.patch(f"/api/reports/{first}/status", json={"status": "resolved"})

    stats = client.get("/api/reports/stats/overview").json()
    assert stats["overview"] == {"total": 2, "active": 1, "resolved": 1, "resolution_rate": 50.0}
    assert len(stats["recent_reports"]) == 1
    assert stats["recent_reports"][0]["type"] == "flood"
