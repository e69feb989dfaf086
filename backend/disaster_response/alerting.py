# disaster_response/alerting.py
# ------------------------------------------------------------
# Sensor reading -> alert derivation with time-windowed dedup.
#
# Pure logic: the caller injects `now` and a lookup over the
# alert history, and persists whatever command comes back.
#
# Dedup key: (sensor_id, alert type, severity). At most one
# unresolved alert per key may have created_at inside the
# trailing window. Resolved alerts never suppress, so resolving
# an alert lets the next out-of-range reading alert again.
# ------------------------------------------------------------

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Dict, Iterable, Optional

from .logger import get_logger
from .models import (
    Alert,
    AlertCreationCommand,
    AlertSeverity,
    AlertType,
    Classification,
    SensorConfig,
    SensorData,
    SensorType,
    new_alert_id,
)
from .thresholds import classify

logger = get_logger(__name__)

DEDUP_WINDOW = timedelta(minutes=5)

# (sensor_id, alert_type, severity, since) -> unresolved alerts
RecentAlertLookup = Callable[[str, AlertType, AlertSeverity, datetime], Iterable[Alert]]


# -------------------------------
# Lookup tables
# -------------------------------
ALERT_TYPE_BY_SENSOR: Dict[SensorType, AlertType] = {
    SensorType.SEISMIC: AlertType.EARTHQUAKE,
    SensorType.WATER_LEVEL: AlertType.FLOOD,
    SensorType.WIND_SPEED: AlertType.STORM,
    SensorType.TEMPERATURE: AlertType.HEATWAVE,
    SensorType.AIR_QUALITY: AlertType.POLLUTION,
}

SEVERITY_BY_CLASSIFICATION: Dict[Classification, AlertSeverity] = {
    Classification.CRITICAL: AlertSeverity.CRITICAL,
    Classification.WARNING: AlertSeverity.WARNING,
}

IMPACT_BY_SENSOR: Dict[SensorType, Dict[AlertSeverity, int]] = {
    SensorType.SEISMIC: {AlertSeverity.CRITICAL: 10000, AlertSeverity.WARNING: 5000},
    SensorType.WATER_LEVEL: {AlertSeverity.CRITICAL: 8000, AlertSeverity.WARNING: 4000},
    SensorType.WIND_SPEED: {AlertSeverity.CRITICAL: 6000, AlertSeverity.WARNING: 3000},
    SensorType.TEMPERATURE: {AlertSeverity.CRITICAL: 12000, AlertSeverity.WARNING: 6000},
    SensorType.AIR_QUALITY: {AlertSeverity.CRITICAL: 15000, AlertSeverity.WARNING: 8000},
}
DEFAULT_IMPACT = 1000

MESSAGE_TEMPLATES: Dict[SensorType, str] = {
    SensorType.SEISMIC: "Seismic activity detected: {value:.1f} magnitude",
    SensorType.WATER_LEVEL: "Rising water levels detected: {value:.1f}{unit}",
    SensorType.WIND_SPEED: "High wind speeds detected: {value:.1f} {unit}",
    SensorType.TEMPERATURE: "Extreme temperature detected: {value:.1f}{unit}",
    SensorType.AIR_QUALITY: "Poor air quality detected: AQI {value:.0f}",
    SensorType.HUMIDITY: "Unusual humidity levels: {value:.1f}{unit}",
    SensorType.PRESSURE: "Atmospheric pressure anomaly: {value:.1f} {unit}",
}
DEFAULT_MESSAGE = "Sensor anomaly detected: {value:.1f} {unit}"


def alert_type_for(sensor_type: str) -> AlertType:
    """Unknown sensor types map to `other`."""
    return ALERT_TYPE_BY_SENSOR.get(sensor_type, AlertType.OTHER)


def estimated_impact(sensor_type: str, severity: AlertSeverity) -> int:
    return IMPACT_BY_SENSOR.get(sensor_type, {}).get(severity, DEFAULT_IMPACT)


def alert_message(sensor_type: str, value: float, unit: str) -> str:
    template = MESSAGE_TEMPLATES.get(sensor_type, DEFAULT_MESSAGE)
    return template.format(value=value, unit=unit)


def _suppresses(
    alert: Alert,
    sensor_id: str,
    alert_type: AlertType,
    severity: AlertSeverity,
    since: datetime,
) -> bool:
    sensor_data = alert.sensor_data
    return (
        not alert.resolved
        and sensor_data is not None
        and sensor_data.sensor_id == sensor_id
        and alert.type == alert_type
        and alert.severity == severity
        and alert.created_at >= since
    )


# -------------------------------
# Public API
# -------------------------------
def evaluate(
    sensor: SensorConfig,
    value: float,
    now: datetime,
    recent_alerts: RecentAlertLookup,
    window: timedelta = DEDUP_WINDOW,
) -> Optional[AlertCreationCommand]:
    """
    Decide whether `value` on `sensor` should raise a new alert.

    Returns None when the reading is normal or when an unresolved alert
    for the same (sensor, type, severity) was created within `window`
    before `now`. Otherwise returns the command describing the new alert.
    """
    classification = classify(value, sensor.thresholds)
    if classification == Classification.NORMAL:
        return None

    alert_type = alert_type_for(sensor.type)
    severity = SEVERITY_BY_CLASSIFICATION[classification]
    since = now - window

    for existing in recent_alerts(sensor.sensor_id, alert_type, severity, since):
        if _suppresses(existing, sensor.sensor_id, alert_type, severity, since):
            logger.debug(
                "alert_suppressed",
                sensor_id=sensor.sensor_id,
                alert_type=alert_type.value,
                severity=severity.value,
                existing_alert_id=existing.id,
            )
            return None

    return AlertCreationCommand(
        id=new_alert_id(now),
        type=alert_type,
        severity=severity,
        message=alert_message(sensor.type, value, sensor.unit),
        location=sensor.location.name,
        coordinates=sensor.location.coordinates,
        estimated_impact=estimated_impact(sensor.type, severity),
        sensor_data=SensorData(value=value, unit=sensor.unit, sensor_id=sensor.sensor_id),
        created_at=now,
    )
