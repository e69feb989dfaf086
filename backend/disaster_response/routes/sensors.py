# disaster_response/routes/sensors.py
# ------------------------------------------------------------
# Sensors API
#
# Sensor configs, calibration and readings. Posting a reading
# runs the same pipeline as the simulation tick.
# ------------------------------------------------------------

from fastapi import APIRouter, Depends, Query
from typing import Optional
import redis

from ..config import settings
from ..redis_client import get_redis
from ..models import (
    SensorConfig,
    SensorStatus,
    SensorType,
    ReadingIn,
    Thresholds,
    ThresholdsUpdate,
    utcnow,
)
from .. import store
from ..simulator import process_reading

router = APIRouter(tags=["sensors"])


@router.get("/api/sensors")
def list_sensors(
    type: Optional[SensorType] = None,
    status: str = Query("active", pattern="^(all|active|inactive|maintenance|error)$"),
    limit: int = Query(50, ge=1, le=500),
    r: redis.Redis = Depends(get_redis),
):
    """
    List sensors, active ones by default. `status=all` disables the filter.
    """
    status_filter = None if status == "all" else SensorStatus(status)
    items = store.list_sensors(r, sensor_type=type, status=status_filter, limit=limit)
    return {"items": [s.model_dump(mode="json") for s in items]}


@router.post("/api/sensors", status_code=201)
def create_sensor(body: SensorConfig, r: redis.Redis = Depends(get_redis)):
    sensor = store.create_sensor(r, body)
    return sensor.model_dump(mode="json")


@router.get("/api/sensors/readings/current")
def current_readings(r: redis.Redis = Depends(get_redis)):
    """
    Latest reading of every active sensor, grouped by type.
    """
    return {
        "readings": store.current_readings(r),
        "data_source": "simulated" if settings.generators_enabled else "devices",
        "last_updated": utcnow().isoformat(),
    }


@router.get("/api/sensors/{sensor_id}")
def get_sensor(sensor_id: str, r: redis.Redis = Depends(get_redis)):
    return store.get_sensor(r, sensor_id).model_dump(mode="json")


@router.patch("/api/sensors/{sensor_id}/thresholds")
def calibrate_sensor(
    sensor_id: str,
    body: ThresholdsUpdate,
    r: redis.Redis = Depends(get_redis),
):
    thresholds = Thresholds(warning=body.warning, critical=body.critical)
    sensor = store.update_thresholds(r, sensor_id, thresholds, utcnow())
    return sensor.model_dump(mode="json")


@router.post("/api/sensors/{sensor_id}/readings")
def add_reading(sensor_id: str, body: ReadingIn, r: redis.Redis = Depends(get_redis)):
    """
    Ingest a device reading. The response carries the alert raised
    by this reading, or null when it was normal or deduplicated.
    """
    sensor = store.get_sensor(r, sensor_id)
    sensor, alert = process_reading(r, sensor, body.value, utcnow(), quality=body.quality)
    return {
        "current_reading": sensor.current_reading.model_dump(mode="json"),
        "alert": alert.model_dump(mode="json") if alert else None,
    }


@router.get("/api/sensors/{sensor_id}/history")
def sensor_history(
    sensor_id: str,
    hours: float = Query(24, gt=0, le=24 * 30),
    limit: int = Query(100, ge=1, le=1000),
    r: redis.Redis = Depends(get_redis),
):
    return store.reading_history(r, sensor_id, utcnow(), hours=hours, limit=limit)
