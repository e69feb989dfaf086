# disaster_response/priority.py
# ------------------------------------------------------------
# Report priority scoring.
#
# score = 5 x severity x type x age x affected-people factors,
# rounded half-up and clamped to [1, 10]. Age tiers are exclusive:
# only the highest applicable one applies.
# ------------------------------------------------------------

from __future__ import annotations

import math
from datetime import datetime
from typing import Dict, FrozenSet, Optional

from .models import DisasterReport, ReportSeverity, ReportType

BASE_PRIORITY = 5.0
MIN_PRIORITY = 1
MAX_PRIORITY = 10

SEVERITY_MULTIPLIER: Dict[ReportSeverity, float] = {
    ReportSeverity.LOW: 0.5,
    ReportSeverity.MEDIUM: 1.0,
    ReportSeverity.HIGH: 1.5,
    ReportSeverity.CRITICAL: 2.0,
}

HIGH_PRIORITY_TYPES: FrozenSet[ReportType] = frozenset({
    ReportType.EARTHQUAKE,
    ReportType.FIRE,
    ReportType.BUILDING_COLLAPSE,
    ReportType.GAS_LEAK,
})
HIGH_PRIORITY_TYPE_MULTIPLIER = 1.5

AFFECTED_PEOPLE_THRESHOLD = 10
AFFECTED_PEOPLE_MULTIPLIER = 1.3


def age_multiplier(age_hours: float) -> float:
    if age_hours > 48:
        return 1.5
    if age_hours > 24:
        return 1.2
    return 1.0


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def compute_priority(
    report_type: str,
    severity: str,
    created_at: datetime,
    now: datetime,
    affected_people_estimated: Optional[float] = None,
) -> int:
    """
    Priority in [1, 10] from report attributes.

    Unknown severities count as medium; unknown types get no boost.
    Pure and idempotent; non-decreasing as `now` moves forward.
    """
    priority = BASE_PRIORITY
    priority *= SEVERITY_MULTIPLIER.get(severity, 1.0)

    if report_type in HIGH_PRIORITY_TYPES:
        priority *= HIGH_PRIORITY_TYPE_MULTIPLIER

    age_hours = (now - created_at).total_seconds() / 3600.0
    priority *= age_multiplier(age_hours)

    if affected_people_estimated is not None and affected_people_estimated > AFFECTED_PEOPLE_THRESHOLD:
        priority *= AFFECTED_PEOPLE_MULTIPLIER

    return max(MIN_PRIORITY, min(_round_half_up(priority), MAX_PRIORITY))


def score(report: DisasterReport, now: datetime) -> int:
    return compute_priority(
        report.type,
        report.severity,
        report.created_at,
        now,
        report.affected_people.estimated,
    )
