# disaster_response/thresholds.py
# ------------------------------------------------------------
# Threshold evaluation: reading value -> normal / warning / critical.
#
# Both boundaries are inclusive and critical is checked first,
# so a value equal to `critical` is always critical.
# ------------------------------------------------------------

from __future__ import annotations

import math
from typing import Any

from .exceptions import InvalidReadingError, InvalidThresholdsError
from .models import Classification


def _threshold(thresholds: Any, name: str) -> float:
    if isinstance(thresholds, dict):
        raw = thresholds.get(name)
    else:
        raw = getattr(thresholds, name, None)

    if raw is None:
        raise InvalidThresholdsError(f"threshold '{name}' is required")
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise InvalidThresholdsError(f"threshold '{name}' must be a number, got {raw!r}")
    if math.isnan(raw):
        raise InvalidThresholdsError(f"threshold '{name}' is NaN")
    return float(raw)


def classify(value: float, thresholds: Any) -> Classification:
    """
    Classify a reading against {warning, critical} thresholds.

    `thresholds` may be a Thresholds model or a plain mapping.
    Raises InvalidThresholdsError / InvalidReadingError on contract
    violations instead of guessing a default.
    """
    critical = _threshold(thresholds, "critical")
    warning = _threshold(thresholds, "warning")

    if value is None or math.isnan(value):
        raise InvalidReadingError(f"reading value cannot be classified: {value!r}")

    if value >= critical:
        return Classification.CRITICAL
    if value >= warning:
        return Classification.WARNING
    return Classification.NORMAL
