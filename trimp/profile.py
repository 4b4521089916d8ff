"""Athlete profile and physiological parameter resolution."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterator
from uuid import UUID, uuid4

from loguru import logger

from trimp.config import (
    AGE_MAX_HR_CONSTANT,
    BMI_NORMAL_MAX,
    BMI_OVERWEIGHT_MAX,
    BMI_UNDERWEIGHT_MAX,
    HR_ZONE_DEFINITIONS,
    MAX_HR_LOOKBACK_MONTHS,
    RESTING_HR_LOOKBACK_DAYS,
)
from trimp.samples import ActivityKind, MetricKind, Sample, Season
from trimp.units import BEATS_PER_MINUTE, KILOGRAMS, METERS, Measurement


class BiologicalGender(Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    NOT_SET = "not set"

    @property
    def label(self) -> str:
        return self.value.title()


class BMICategory(Enum):
    UNDERWEIGHT = "underweight"
    NORMAL = "normal"
    OVERWEIGHT = "overweight"
    OBESE = "obese"

    @property
    def label(self) -> str:
        if self is BMICategory.NORMAL:
            return "Normal Weight"
        return self.value.title()

    @classmethod
    def for_bmi(cls, bmi: float) -> "BMICategory":
        if bmi < BMI_UNDERWEIGHT_MAX:
            return cls.UNDERWEIGHT
        if bmi < BMI_NORMAL_MAX:
            return cls.NORMAL
        if bmi < BMI_OVERWEIGHT_MAX:
            return cls.OVERWEIGHT
        return cls.OBESE


@dataclass(frozen=True)
class HeartRateZone:
    """A heart rate band in bpm."""

    lower_bound: float
    upper_bound: float
    name: str

    def contains(self, heart_rate: float) -> bool:
        return self.lower_bound <= heart_rate <= self.upper_bound


@dataclass(frozen=True)
class HeartRateZones:
    """Five contiguous training zones derived from max heart rate."""

    zones: tuple[HeartRateZone, ...]

    @classmethod
    def for_max(cls, max_heart_rate: float) -> "HeartRateZones":
        return cls(
            tuple(
                HeartRateZone(low * max_heart_rate, high * max_heart_rate, name)
                for low, high, name in HR_ZONE_DEFINITIONS
            )
        )

    def zone_for(self, heart_rate: float) -> HeartRateZone | None:
        """First zone containing ``heart_rate``, or None outside 50-100% of max."""
        for zone in self.zones:
            if zone.contains(heart_rate):
                return zone
        return None

    def __iter__(self) -> Iterator[HeartRateZone]:
        return iter(self.zones)

    def __len__(self) -> int:
        return len(self.zones)

    def __getitem__(self, index: int) -> HeartRateZone:
        return self.zones[index]


async def fetch_tolerant(sources, activity: ActivityKind, metric: MetricKind, season: Season) -> list[Sample]:
    """Fetch from each source in order; a failing source contributes nothing."""
    samples: list[Sample] = []
    for source in sources:
        try:
            samples.extend(await source.fetch(activity, metric, season))
        except Exception as e:
            logger.warning(f"Ignoring {metric.name} fetch failure from {source!r}: {e}")
    return samples


@dataclass(frozen=True, eq=False)
class AthleteProfile:
    """An athlete whose attributes are resolved from data sources.

    Nothing is cached: every call re-queries the sources, so results follow
    whatever the sources currently hold.
    """

    name: str
    sources: tuple = ()
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self):
        object.__setattr__(self, "sources", tuple(self.sources))

    def __eq__(self, other) -> bool:
        if not isinstance(other, AthleteProfile):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def _first_source(self, metric: MetricKind):
        for source in self.sources:
            if source.supports(metric=metric):
                return source
        return None

    def _sources_for(self, metric: MetricKind) -> list:
        return [source for source in self.sources if source.supports(metric=metric)]

    # Biological attributes

    def biological_gender(self) -> BiologicalGender | None:
        source = self._first_source(MetricKind.BIOLOGICAL_GENDER)
        return source.biological_gender() if source else None

    def age(self) -> int | None:
        source = self._first_source(MetricKind.AGE)
        return source.age() if source else None

    async def height(self) -> Measurement | None:
        source = self._first_source(MetricKind.HEIGHT)
        return await source.current_height() if source else None

    async def weight(self) -> Measurement | None:
        source = self._first_source(MetricKind.WEIGHT)
        return await source.current_weight() if source else None

    async def bmi(self) -> float | None:
        """Body mass index (kg/m²), None without height and weight."""
        height = await self.height()
        weight = await self.weight()
        if height is None or weight is None:
            return None

        height_m = height.converted(METERS).value
        if height_m <= 0:
            return None
        return weight.converted(KILOGRAMS).value / (height_m * height_m)

    async def bmi_category(self) -> BMICategory | None:
        bmi = await self.bmi()
        return BMICategory.for_bmi(bmi) if bmi is not None else None

    # Physiological parameters

    def estimated_max_heart_rate(self) -> float | None:
        """Age-based max HR estimate (220 - age)."""
        age = self.age()
        if age is None:
            return None
        return AGE_MAX_HR_CONSTANT - float(age)

    async def resolve_resting_heart_rate(self, now: datetime | None = None) -> float | None:
        """Most recent resting heart rate (bpm) over the last 30 days."""
        supported = self._sources_for(MetricKind.RESTING_HEART_RATE)
        if not supported:
            return None

        season = Season.last(RESTING_HR_LOOKBACK_DAYS, now)
        samples = await fetch_tolerant(
            supported, ActivityKind.all(), MetricKind.RESTING_HEART_RATE, season
        )
        if not samples:
            return None

        latest = max(samples, key=lambda s: s.start_date)
        resting = latest.measurement.converted(BEATS_PER_MINUTE).value
        logger.debug(f"{self.name}: resting HR {resting:.1f} bpm from {len(samples)} samples")
        return resting

    async def resolve_max_heart_rate(self, now: datetime | None = None) -> float | None:
        """Max heart rate (bpm) observed over the last 6 months of running/cycling.

        The age-based estimate is used when no data is available and acts
        as a floor when it is.
        """
        estimated = self.estimated_max_heart_rate()

        supported = self._sources_for(MetricKind.HEART_RATE)
        if not supported:
            return estimated

        season = Season.last_months(MAX_HR_LOOKBACK_MONTHS, now)
        samples = await fetch_tolerant(
            supported,
            ActivityKind.RUNNING | ActivityKind.CYCLING,
            MetricKind.HEART_RATE,
            season,
        )
        if not samples:
            return estimated

        observed = max(s.measurement.converted(BEATS_PER_MINUTE).value for s in samples)
        logger.debug(f"{self.name}: observed max HR {observed:.1f} bpm, estimate {estimated}")

        if estimated is not None:
            return max(observed, estimated)
        return observed

    async def heart_rate_zones(self, now: datetime | None = None) -> HeartRateZones | None:
        max_hr = await self.resolve_max_heart_rate(now)
        if max_hr is None:
            return None
        return HeartRateZones.for_max(max_hr)

    def __repr__(self) -> str:
        return f"<AthleteProfile {self.name} ({len(self.sources)} sources)>"
