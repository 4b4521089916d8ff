"""Shared fixtures for the trimp-local test suite."""

from datetime import datetime, timedelta

import pytest

from db.models import get_engine, get_session_factory, init_db
from trimp.samples import ActivityKind, MetricKind, Sample
from trimp.units import BEATS_PER_MINUTE, Measurement

NOW = datetime(2025, 6, 15, 12, 0, 0)


def make_sample(
    start: datetime,
    value: float,
    minutes: float = 1.0,
    activity: ActivityKind = ActivityKind.RUNNING,
    metric: MetricKind = MetricKind.HEART_RATE,
    unit=BEATS_PER_MINUTE,
) -> Sample:
    return Sample(
        activity=activity,
        metric=metric,
        start_date=start,
        end_date=start + timedelta(minutes=minutes),
        measurement=Measurement(value, unit),
    )


def hr_series(start: datetime, points: list[tuple[float, float]], **kwargs) -> list[Sample]:
    """Heart rate samples from (minute offset, bpm) pairs; each lasts until the next."""
    samples = []
    for i, (offset, bpm) in enumerate(points):
        following = points[i + 1][0] if i + 1 < len(points) else offset
        samples.append(
            make_sample(
                start + timedelta(minutes=offset),
                bpm,
                minutes=following - offset,
                **kwargs,
            )
        )
    return samples


def resting(start: datetime, bpm: float) -> Sample:
    return make_sample(
        start,
        bpm,
        activity=ActivityKind.DAY_TO_DAY,
        metric=MetricKind.RESTING_HEART_RATE,
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def db_engine(tmp_path):
    """Engine on a fresh SQLite file with the schema created."""
    engine = get_engine(tmp_path / "trimp_test.db")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return get_session_factory(db_engine)
