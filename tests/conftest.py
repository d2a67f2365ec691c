from __future__ import annotations

import random
from collections.abc import Callable, Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from moodline.app.core import config
from moodline.app.services.store import EntryStore


class StepClock:
    """Deterministic clock returning ``start``, ``start + step``, ..."""

    def __init__(self, start: datetime, step: timedelta = timedelta(minutes=1)) -> None:
        self._next = start
        self._step = step

    def set(self, value: datetime) -> None:
        self._next = value

    def __call__(self) -> datetime:
        value = self._next
        self._next += self._step
        return value


@pytest.fixture()
def clock() -> StepClock:
    return StepClock(datetime(2024, 7, 1, 9, 0, tzinfo=UTC))


@pytest.fixture()
def store(clock: StepClock) -> EntryStore:
    return EntryStore(clock=clock, rng=random.Random(1234), tz=UTC)


@pytest.fixture()
def make_store() -> Callable[..., EntryStore]:
    def factory(seed: int = 0, **kwargs) -> EntryStore:
        kwargs.setdefault("tz", UTC)
        return EntryStore(rng=random.Random(seed), **kwargs)

    return factory


@pytest.fixture()
def test_client(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[TestClient, None, None]:
    monkeypatch.setenv("VERSION", "0.1.0-test")
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "moodline.log"))
    monkeypatch.setenv("DUMMY_SEED", "7")
    for name in ("LOCAL_TZ", "DEFAULT_RANGE_DAYS", "METRICS_MAX_DAYS", "DUMMY_MAX_DAYS"):
        monkeypatch.delenv(name, raising=False)
    config.get_settings.cache_clear()

    from moodline.app.main import app

    with TestClient(app) as client:
        yield client
    config.get_settings.cache_clear()
