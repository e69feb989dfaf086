"""
Tests for report priority scoring (priority.compute_priority / score).
"""

from __future__ import annotations

import itertools
from datetime import timedelta

import pytest

from disaster_response.models import (
    AffectedPeople,
    Coordinates,
    DisasterReport,
    ReportLocation,
    ReportSeverity,
    ReportType,
)
from disaster_response.priority import age_multiplier, compute_priority, score


def _report(t0, report_type=ReportType.FLOOD, severity=ReportSeverity.MEDIUM, estimated=None):
    return DisasterReport(
        report_id="DR-1-ABCDEF",
        type=report_type,
        title="Water entering homes",
        description="Knee-deep water on the main road",
        severity=severity,
        location=ReportLocation(address="Sector 12", coordinates=Coordinates(lat=28.67, lng=77.45)),
        affected_people=AffectedPeople(estimated=estimated),
        created_at=t0,
    )


def test_flood_high_thirty_hours_old_clamps_to_ten(t0):
    """5 x 1.5 x 1.2 x 1.3 = 11.7 -> 12 -> 10."""
    report = _report(t0, ReportType.FLOOD, ReportSeverity.HIGH, estimated=15)
    assert score(report, t0 + timedelta(hours=30)) == 10


def test_fresh_medium_report_is_base(t0):
    assert score(_report(t0), t0) == 5


@pytest.mark.parametrize(
    "severity, expected",
    [
        (ReportSeverity.LOW, 3),       # 2.5 rounds half-up
        (ReportSeverity.MEDIUM, 5),
        (ReportSeverity.HIGH, 8),      # 7.5 rounds half-up
        (ReportSeverity.CRITICAL, 10),
    ],
)
def test_severity_multiplier(t0, severity, expected):
    assert score(_report(t0, severity=severity), t0) == expected


def test_unknown_severity_counts_as_medium(t0):
    assert compute_priority("flood", "catastrophic", t0, t0) == 5


@pytest.mark.parametrize(
    "report_type", ["earthquake", "fire", "building_collapse", "gas_leak"]
)
def test_high_priority_types(t0, report_type):
    # 5 x 1.5 = 7.5 -> 8
    assert compute_priority(report_type, "medium", t0, t0) == 8


def test_unknown_type_gets_no_boost(t0):
    assert compute_priority("meteor", "medium", t0, t0) == 5


def test_age_tiers_are_exclusive():
    assert age_multiplier(0) == 1.0
    assert age_multiplier(24) == 1.0
    assert age_multiplier(24.01) == 1.2
    assert age_multiplier(48) == 1.2
    assert age_multiplier(48.01) == 1.5


def test_age_over_48h_uses_single_tier(t0):
    # 5 x 1.5 = 7.5 -> 8 (cumulative 1.2 x 1.5 would give 9)
    assert compute_priority("flood", "medium", t0, t0 + timedelta(hours=50)) == 8


def test_affected_people_over_ten(t0):
    assert compute_priority("flood", "medium", t0, t0, affected_people_estimated=10) == 5
    # 5 x 1.3 = 6.5 -> 7
    assert compute_priority("flood", "medium", t0, t0, affected_people_estimated=11) == 7


def test_idempotent(t0):
    report = _report(t0, ReportType.FIRE, ReportSeverity.HIGH, estimated=40)
    now = t0 + timedelta(hours=26)
    assert score(report, now) == score(report, now)


def test_always_in_range_and_monotonic_in_age(t0):
    ages = [0, 1, 23.9, 24.5, 36, 48.5, 100, 1000]
    for report_type, severity, estimated in itertools.product(
        list(ReportType), list(ReportSeverity), [None, 0, 11, 500]
    ):
        report = _report(t0, report_type, severity, estimated)
        scores = [score(report, t0 + timedelta(hours=h)) for h in ages]
        assert all(1 <= s <= 10 for s in scores)
        assert scores == sorted(scores)
