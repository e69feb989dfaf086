"""
Pytest fixtures for disaster_response tests.

Redis is replaced by a small in-memory double that implements the
list/string commands the store uses. The simulation loop is disabled
so TestClient never needs a live Redis.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

os.environ.setdefault("GENERATORS_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest

from disaster_response.models import (
    Coordinates,
    SensorConfig,
    SensorLocation,
    SensorType,
    TeamIn,
    TeamLocation,
    TeamMember,
    TeamPosition,
    TeamType,
    Thresholds,
)


def _bounds(n: int, start: int, end: int) -> tuple[int, int]:
    s = start if start >= 0 else max(n + start, 0)
    e = end if end >= 0 else n + end
    return s, min(e, n - 1)


class FakePipeline:
    """Queues commands and applies them on execute()."""

    def __init__(self, redis: "FakeRedis"):
        self._redis = redis
        self._ops: List[tuple] = []

    def __getattr__(self, name: str):
        def queue(*args, **kwargs):
            self._ops.append((name, args, kwargs))
            return self
        return queue

    def execute(self) -> List[Any]:
        results = [getattr(self._redis, name)(*args, **kwargs) for name, args, kwargs in self._ops]
        self._ops = []
        return results


class FakeRedis:
    def __init__(self):
        self.strings: Dict[str, str] = {}
        self.lists: Dict[str, List[str]] = {}

    def ping(self) -> bool:
        return True

    def pipeline(self, transaction: bool = True) -> FakePipeline:
        return FakePipeline(self)

    # strings
    def get(self, key: str) -> Optional[str]:
        return self.strings.get(key)

    def set(self, key: str, value: Any) -> bool:
        self.strings[key] = str(value)
        return True

    def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            removed += int(self.strings.pop(key, None) is not None)
            removed += int(self.lists.pop(key, None) is not None)
        return removed

    # lists
    def rpush(self, key: str, *values: Any) -> int:
        lst = self.lists.setdefault(key, [])
        lst.extend(str(v) for v in values)
        return len(lst)

    def llen(self, key: str) -> int:
        return len(self.lists.get(key, []))

    def lrange(self, key: str, start: int, end: int) -> List[str]:
        lst = self.lists.get(key, [])
        s, e = _bounds(len(lst), start, end)
        return list(lst[s:e + 1]) if s <= e else []

    def ltrim(self, key: str, start: int, end: int) -> bool:
        lst = self.lists.get(key, [])
        s, e = _bounds(len(lst), start, end)
        kept = lst[s:e + 1] if s <= e else []
        if kept:
            self.lists[key] = kept
        else:
            self.lists.pop(key, None)
        return True

    def lindex(self, key: str, index: int) -> Optional[str]:
        lst = self.lists.get(key, [])
        try:
            return lst[index]
        except IndexError:
            return None

    def lrem(self, key: str, count: int, value: Any) -> int:
        # count > 0 removes from the head, as used by the store
        lst = self.lists.get(key, [])
        removed = 0
        kept: List[str] = []
        for item in lst:
            if item == str(value) and (count <= 0 or removed < count):
                removed += 1
                continue
            kept.append(item)
        if kept:
            self.lists[key] = kept
        else:
            self.lists.pop(key, None)
        return removed


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def client(fake_redis):
    """FastAPI TestClient wired to the in-memory Redis."""
    from fastapi.testclient import TestClient

    from disaster_response.main import app
    from disaster_response.redis_client import get_redis

    app.dependency_overrides[get_redis] = lambda: fake_redis
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def t0():
    return datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_sensor(
    sensor_id: str = "seismic-001",
    sensor_type: SensorType = SensorType.SEISMIC,
    unit: str = "magnitude",
    warning: float = 3.0,
    critical: float = 4.0,
) -> SensorConfig:
    return SensorConfig(
        sensor_id=sensor_id,
        type=sensor_type,
        unit=unit,
        thresholds=Thresholds(warning=warning, critical=critical),
        location=SensorLocation(
            name="Ghaziabad Central",
            coordinates=Coordinates(lat=28.6692, lng=77.4538),
        ),
    )


@pytest.fixture
def sensor_factory():
    return make_sensor


@pytest.fixture
def seismic_sensor() -> SensorConfig:
    return make_sensor()


def make_team(
    team_id: str = "rescue-01",
    name: str = "Rescue Alpha",
    team_type: TeamType = TeamType.RESCUE,
    lat: Optional[float] = 28.6692,
    lng: Optional[float] = 77.4538,
) -> TeamIn:
    current = None
    if lat is not None and lng is not None:
        current = TeamPosition(address="Ghaziabad Central", coordinates=Coordinates(lat=lat, lng=lng))
    return TeamIn(
        team_id=team_id,
        name=name,
        type=team_type,
        location=TeamLocation(base="Sector 23 Station", current=current),
        members=[TeamMember(name="A. Sharma", role="lead", is_leader=True)],
    )


@pytest.fixture
def team_factory():
    return make_team
