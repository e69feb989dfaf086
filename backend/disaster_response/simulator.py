# disaster_response/simulator.py
# ------------------------------------------------------------
# Sensor simulation and the reading -> alert pipeline.
#
# - Default sensors are provisioned once (only if none exist)
# - Each tick draws a plausible value per active sensor
# - Every reading (simulated or posted by a device) goes through
#   process_reading: store reading, evaluate, persist new alert
# - run_simulation drives the ticks and survives any tick failure
# ------------------------------------------------------------

from __future__ import annotations

import asyncio
import math
import random
from datetime import datetime, timedelta
from functools import partial
from typing import Dict, List, Optional, Tuple

import redis

from . import store
from .alerting import evaluate
from .config import settings
from .logger import get_logger
from .models import (
    Alert,
    Coordinates,
    Reading,
    ReadingQuality,
    SensorConfig,
    SensorLocation,
    SensorStatus,
    SensorType,
    Thresholds,
    utcnow,
)

logger = get_logger(__name__)


# -------------------------------
# Default sensor fleet
# -------------------------------
DEFAULT_SENSORS: List[Dict] = [
    {
        "sensor_id": "seismic-001",
        "type": SensorType.SEISMIC,
        "name": "Ghaziabad Central",
        "lat": 28.6692, "lng": 77.4538,
        "unit": "magnitude",
        "thresholds": (3.0, 4.0),
    },
    {
        "sensor_id": "weather-001",
        "type": SensorType.TEMPERATURE,
        "name": "Ghaziabad Weather Station",
        "lat": 28.6700, "lng": 77.4600,
        "unit": "°C",
        "thresholds": (35, 40),
    },
    {
        "sensor_id": "air-001",
        "type": SensorType.AIR_QUALITY,
        "name": "Ghaziabad Air Quality Monitor",
        "lat": 28.6650, "lng": 77.4500,
        "unit": "AQI",
        "thresholds": (150, 200),
    },
    {
        "sensor_id": "water-001",
        "type": SensorType.WATER_LEVEL,
        "name": "Hindon River Monitor",
        "lat": 28.6800, "lng": 77.4400,
        "unit": "m",
        "thresholds": (6.0, 8.0),
    },
    {
        "sensor_id": "wind-001",
        "type": SensorType.WIND_SPEED,
        "name": "Ghaziabad Wind Monitor",
        "lat": 28.6600, "lng": 77.4700,
        "unit": "km/h",
        "thresholds": (30, 50),
    },
]


def bootstrap_sensors(r: redis.Redis) -> int:
    """
    Provision the default sensors.
    Safe to call repeatedly; only runs if sensors:list is empty.
    """
    if r.llen(store.K_SENSORS) > 0:
        return 0

    for entry in DEFAULT_SENSORS:
        warning, critical = entry["thresholds"]
        store.create_sensor(r, SensorConfig(
            sensor_id=entry["sensor_id"],
            type=entry["type"],
            unit=entry["unit"],
            thresholds=Thresholds(warning=warning, critical=critical),
            location=SensorLocation(
                name=entry["name"],
                coordinates=Coordinates(lat=entry["lat"], lng=entry["lng"]),
            ),
            status=SensorStatus.ACTIVE,
        ))

    store.push_update(r, {"type": "bootstrap", "data": {"sensors": len(DEFAULT_SENSORS)}})
    logger.info("sensors_bootstrapped", count=len(DEFAULT_SENSORS))
    return len(DEFAULT_SENSORS)


# -------------------------------
# Simulation primitives
# -------------------------------
def simulate_value(sensor_type: str, now: datetime, rng: Optional[random.Random] = None) -> float:
    """
    Draw a plausible reading for the sensor type, plus +/-1 noise.
    Never negative.
    """
    rng = rng or random
    hour_phase = math.sin(now.timestamp() / 3600.0)

    if sensor_type == SensorType.SEISMIC:
        value = rng.random() * 5                              # 0-5 magnitude
    elif sensor_type == SensorType.TEMPERATURE:
        value = 20 + hour_phase * 10 + rng.random() * 5       # ~15-35 °C
    elif sensor_type == SensorType.HUMIDITY:
        value = 40 + rng.random() * 40                        # 40-80 %
    elif sensor_type == SensorType.WIND_SPEED:
        value = rng.random() * 50                             # 0-50 km/h
    elif sensor_type == SensorType.AIR_QUALITY:
        value = 50 + rng.random() * 200                       # 50-250 AQI
    elif sensor_type == SensorType.WATER_LEVEL:
        value = 2 + hour_phase * 3 + rng.random() * 2         # ~0-7 m
    elif sensor_type == SensorType.PRESSURE:
        value = 1000 + rng.random() * 50                      # 1000-1050 hPa
    else:
        value = rng.random() * 100

    return max(0.0, value + (rng.random() - 0.5) * 2)


# -------------------------------
# Pipeline
# -------------------------------
def process_reading(
    r: redis.Redis,
    sensor: SensorConfig,
    value: float,
    now: datetime,
    quality: ReadingQuality = ReadingQuality.GOOD,
) -> Tuple[SensorConfig, Optional[Alert]]:
    """
    Store the reading, then raise an alert unless the reading is
    normal or deduplicated. Returns (updated sensor, new alert or None).
    """
    sensor = store.add_reading(r, sensor, Reading(value=value, timestamp=now, quality=quality))

    command = evaluate(
        sensor,
        value,
        now,
        partial(store.recent_alerts, r),
        window=timedelta(seconds=settings.alert_dedup_window_sec),
    )
    if command is None:
        return sensor, None

    alert = store.save_new_alert(r, command)
    logger.warning(
        "alert_created",
        alert_id=alert.id,
        alert_type=alert.type.value,
        severity=alert.severity.value,
        sensor_id=sensor.sensor_id,
        message=alert.message,
    )
    return sensor, alert


def simulate_tick(
    r: redis.Redis,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> List[Alert]:
    """
    One simulation step over all active sensors.
    A failure on one sensor is logged and does not stop the others.
    """
    now = now or utcnow()
    raised: List[Alert] = []

    for sensor in store.list_sensors(r, status=SensorStatus.ACTIVE):
        try:
            value = simulate_value(sensor.type, now, rng)
            _, alert = process_reading(r, sensor, value, now)
        except (redis.RedisError, ValueError) as exc:
            logger.error("sensor_tick_failed", sensor_id=sensor.sensor_id, error=str(exc))
            continue
        if alert is not None:
            raised.append(alert)

    return raised


async def run_simulation(
    r: redis.Redis,
    interval_sec: float,
    max_ticks: Optional[int] = None,
) -> None:
    """
    Background loop: one tick every `interval_sec`.
    Any failure is logged with its traceback and the loop carries on;
    only cancellation stops it. `max_ticks` bounds the loop in tests.
    """
    ticks = 0
    while max_ticks is None or ticks < max_ticks:
        try:
            simulate_tick(r)
        except Exception:
            logger.exception("simulation_tick_failed")
        ticks += 1
        await asyncio.sleep(interval_sec)
