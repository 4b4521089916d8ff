"""Activity/metric capabilities, samples, seasons and load results."""

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timedelta
from enum import Enum, IntFlag
from typing import Iterable, Iterator
from uuid import UUID, uuid4

from dateutil.relativedelta import relativedelta

from trimp.errors import UnknownActivityOption, UnknownMetricOption
from trimp.units import Measurement, Unit


class ActivityKind(IntFlag):
    """Activity kinds as combinable flags."""

    RUNNING = 1 << 0
    CYCLING = 1 << 1
    SWIMMING = 1 << 2
    STRENGTH = 1 << 3
    FUNCTIONAL = 1 << 4
    YOGA = 1 << 5
    CORE = 1 << 6
    DAY_TO_DAY = 1 << 7

    @classmethod
    def all(cls) -> "ActivityKind":
        result = cls(0)
        for member in cls:
            result |= member
        return result


class MetricKind(IntFlag):
    """Metric kinds (and profile attribute capabilities) as combinable flags."""

    # Vitals
    HEART_RATE = 1 << 0
    RESTING_HEART_RATE = 1 << 1
    HEART_RATE_VARIABILITY = 1 << 2
    WALKING_HEART_RATE_AVERAGE = 1 << 3
    HEART_RATE_RECOVERY_ONE_MINUTE = 1 << 4

    # Activity
    RUNNING_POWER = 1 << 5
    RUNNING_GROUND_CONTACT_TIME = 1 << 6
    RUNNING_SPEED = 1 << 7
    RUNNING_STRIDE_LENGTH = 1 << 8
    RUNNING_VERTICAL_OSCILLATION = 1 << 9
    DISTANCE_WALKING_RUNNING = 1 << 10
    DISTANCE_CYCLING = 1 << 11

    # Energy
    BASAL_ENERGY_BURNED = 1 << 12
    ACTIVE_ENERGY_BURNED = 1 << 13

    # Training load
    TRIMP = 1 << 14

    # Athlete attributes
    BIOLOGICAL_GENDER = 1 << 15
    AGE = 1 << 16
    HEIGHT = 1 << 17
    WEIGHT = 1 << 18


# Source activity names (Strava types, FIT sports) to activity kinds
ACTIVITY_ALIASES = {
    "run": ActivityKind.RUNNING,
    "running": ActivityKind.RUNNING,
    "trail_run": ActivityKind.RUNNING,
    "trailrun": ActivityKind.RUNNING,
    "virtualrun": ActivityKind.RUNNING,
    "ride": ActivityKind.CYCLING,
    "cycling": ActivityKind.CYCLING,
    "virtualride": ActivityKind.CYCLING,
    "swim": ActivityKind.SWIMMING,
    "swimming": ActivityKind.SWIMMING,
    "strength": ActivityKind.STRENGTH,
    "weighttraining": ActivityKind.STRENGTH,
    "strength_training": ActivityKind.STRENGTH,
    "functional": ActivityKind.FUNCTIONAL,
    "workout": ActivityKind.FUNCTIONAL,
    "training": ActivityKind.FUNCTIONAL,
    "yoga": ActivityKind.YOGA,
    "core": ActivityKind.CORE,
    "day_to_day": ActivityKind.DAY_TO_DAY,
    "walk": ActivityKind.DAY_TO_DAY,
    "walking": ActivityKind.DAY_TO_DAY,
}


def _normalize_name(name: str) -> str:
    return name.strip().lower().replace(" ", "_").replace("-", "_")


def parse_activity(name: str) -> ActivityKind:
    """Map an activity name to its ActivityKind.

    Raises:
        UnknownActivityOption: if the name is not recognised
    """
    key = _normalize_name(name)
    if key == "all":
        return ActivityKind.all()
    try:
        return ACTIVITY_ALIASES[key]
    except KeyError:
        raise UnknownActivityOption(name) from None


def parse_metric(name: str) -> MetricKind:
    """Map a snake_case metric name (e.g. 'heart_rate') to its MetricKind."""
    key = _normalize_name(name).upper()
    try:
        return MetricKind[key]
    except KeyError:
        raise UnknownMetricOption(name) from None


@dataclass(frozen=True)
class Sample:
    """A timestamped measurement for one activity/metric pair."""

    activity: ActivityKind
    metric: MetricKind
    start_date: datetime
    end_date: datetime
    measurement: Measurement
    id: UUID = field(default_factory=uuid4, compare=False)

    @property
    def value(self) -> float:
        return self.measurement.value

    @property
    def unit(self) -> Unit:
        return self.measurement.unit


def sort_samples(samples: Iterable[Sample]) -> list[Sample]:
    """Order samples by start date (stable for equal starts)."""
    return sorted(samples, key=lambda s: s.start_date)


class PhaseType(Enum):
    BASE = "base"
    BUILDING = "building"
    PEAK = "peak"


@dataclass(frozen=True)
class TrainingPhase:
    """A block of the season dedicated to one activity."""

    activity: ActivityKind
    phase_type: PhaseType
    start_date: datetime
    end_date: datetime
    id: UUID = field(default_factory=uuid4, compare=False)


def _day_start(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value.replace(hour=0, minute=0, second=0, microsecond=0)
    return datetime.combine(value, time.min)


@dataclass(frozen=True)
class Season:
    """A training date range, optionally split into phases.

    Samples belong to the season when ``start_date <= sample.start_date < end_date``.
    """

    start_date: datetime
    end_date: datetime
    phases: tuple[TrainingPhase, ...] = ()

    def __post_init__(self):
        if self.start_date > self.end_date:
            raise ValueError(
                f"Season start {self.start_date} is after end {self.end_date}"
            )
        object.__setattr__(self, "phases", tuple(self.phases))

    @classmethod
    def last(cls, days: int, now: datetime | None = None) -> "Season":
        """Season covering the last ``days`` days up to ``now``."""
        end = now or datetime.now()
        return cls(end - timedelta(days=days), end)

    @classmethod
    def last_months(cls, months: int, now: datetime | None = None) -> "Season":
        """Season covering the last ``months`` calendar months up to ``now``."""
        end = now or datetime.now()
        return cls(end - relativedelta(months=months), end)

    @classmethod
    def single_day(cls, day: date | datetime) -> "Season":
        start = _day_start(day)
        return cls(start, start + timedelta(days=1))

    def contains(self, moment: datetime) -> bool:
        return self.start_date <= moment < self.end_date

    def days(self) -> Iterator[datetime]:
        """Yield the start of each calendar day touched by the season."""
        current = _day_start(self.start_date)
        while current < self.end_date:
            yield current
            current += timedelta(days=1)

    def with_phase(self, phase: TrainingPhase) -> "Season":
        return replace(self, phases=self.phases + (phase,))


@dataclass(frozen=True)
class LoadResult:
    """Output of a load calculator; the unit identifies the method."""

    activity: ActivityKind
    start_date: datetime
    end_date: datetime
    measurement: Measurement
    metric: MetricKind = MetricKind.TRIMP

    @property
    def value(self) -> float:
        return self.measurement.value

    @property
    def unit(self) -> Unit:
        return self.measurement.unit

    def converted(self, unit: Unit) -> "LoadResult":
        return replace(self, measurement=self.measurement.converted(unit))
