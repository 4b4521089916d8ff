"""Training load calculators (Banister, Edwards, Lucia TRIMP and average power)."""

import math
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Sequence

from loguru import logger

from trimp.config import (
    BANISTER_FEMALE_COEFFICIENT,
    BANISTER_FEMALE_EXPONENT,
    BANISTER_MALE_COEFFICIENT,
    BANISTER_MALE_EXPONENT,
    EDWARDS_MULTIPLIERS,
    LUCIA_MULTIPLIERS,
)
from trimp.errors import (
    InvalidHeartRateReserve,
    MissingRequiredParameter,
    NoSupportedActivities,
    NoSupportedMetrics,
)
from trimp.profile import AthleteProfile, BiologicalGender, fetch_tolerant
from trimp.samples import ActivityKind, LoadResult, MetricKind, Sample, Season, sort_samples
from trimp.units import (
    BANISTER_TRIMP,
    BEATS_PER_MINUTE,
    EDWARDS_TRIMP,
    LUCIA_TRIMP,
    WATTS,
    Measurement,
    Unit,
)
from trimp.zones import (
    accumulate_zone_minutes,
    edwards_band,
    lucia_zone,
    weighted_zone_score,
)


def span_minutes(samples: Sequence[Sample]) -> float:
    """Minutes from the first sample's start to the last sample's end.

    Args:
        samples: Samples sorted by start date

    Returns:
        Total duration in minutes (0 for an empty series)
    """
    if not samples:
        return 0.0
    return (samples[-1].end_date - samples[0].start_date).total_seconds() / 60.0


def mean_heart_rate(samples: Sequence[Sample]) -> float:
    """Arithmetic mean of the samples in bpm."""
    if not samples:
        raise ValueError("Cannot average an empty sample series")
    total = sum(s.measurement.converted(BEATS_PER_MINUTE).value for s in samples)
    return total / len(samples)


def heart_rate_reserve(mean_hr: float, resting_hr: float, max_hr: float) -> float:
    """Compute heart rate reserve fraction HRr = (HR - rest) / (max - rest).

    Raises:
        InvalidHeartRateReserve: if max HR does not exceed resting HR or the
            reserve falls outside [0, 1]. Values are never clamped.
    """
    if max_hr <= resting_hr:
        raise InvalidHeartRateReserve(
            float("nan"),
            f"Max heart rate {max_hr:.1f} must exceed resting heart rate {resting_hr:.1f}",
        )

    hr_reserve = (mean_hr - resting_hr) / (max_hr - resting_hr)
    if not 0.0 <= hr_reserve <= 1.0:
        raise InvalidHeartRateReserve(hr_reserve)
    return hr_reserve


def banister_trimp(
    duration_minutes: float,
    hr_reserve: float,
    gender: BiologicalGender | None = None,
) -> float:
    """Compute Banister's TRIMP.

    TRIMP = duration × HRr × k × e^(b × HRr), with k=0.64, b=1.92 for men
    and k=0.86, b=1.67 for women.

    Args:
        duration_minutes: Session duration in minutes
        hr_reserve: Heart rate reserve fraction in [0, 1]
        gender: Biological gender; other, not set and unknown use the male
            coefficients

    Returns:
        TRIMP value
    """
    if gender is BiologicalGender.FEMALE:
        coefficient, exponent = BANISTER_FEMALE_COEFFICIENT, BANISTER_FEMALE_EXPONENT
    elif gender is BiologicalGender.MALE:
        coefficient, exponent = BANISTER_MALE_COEFFICIENT, BANISTER_MALE_EXPONENT
    else:
        # Other, not set and unknown fall back to the male coefficients
        coefficient, exponent = BANISTER_MALE_COEFFICIENT, BANISTER_MALE_EXPONENT

    return duration_minutes * hr_reserve * coefficient * math.exp(exponent * hr_reserve)


def edwards_zone_minutes(samples: Sequence[Sample], max_hr: float) -> list[float]:
    """Minutes in each Edwards band (50-60% ... 90-100% of max HR)."""
    return accumulate_zone_minutes(
        samples,
        lambda hr: edwards_band(hr / max_hr),
        len(EDWARDS_MULTIPLIERS),
    )


def lucia_zone_minutes(samples: Sequence[Sample], vt1: float, vt2: float) -> list[float]:
    """Minutes below VT1, between VT1 and VT2, and above VT2."""
    return accumulate_zone_minutes(
        samples,
        lambda hr: lucia_zone(hr, vt1, vt2),
        len(LUCIA_MULTIPLIERS),
    )


class LoadCalculator(ABC):
    """A method that turns samples from data sources into a single load value."""

    description = "Training load"
    activities: ActivityKind = ActivityKind.RUNNING | ActivityKind.CYCLING
    metric: MetricKind = MetricKind.HEART_RATE
    result_metric: MetricKind = MetricKind.TRIMP
    result_unit: Unit
    tolerate_source_errors: bool = False

    def supported_sources(self, sources) -> list:
        """Sources declaring every required activity and the required metric."""
        return [s for s in sources if s.supports(self.activities, self.metric)]

    async def collect_samples(self, sources, season: Season) -> list[Sample]:
        """Fetch samples from each supporting source, in source order.

        Fetch errors propagate unless ``tolerate_source_errors`` is set, in
        which case a failing source is logged and contributes nothing.

        Raises:
            NoSupportedActivities: no source supports the activities/metric
            NoSupportedMetrics: supporting sources returned no samples
        """
        supported = self.supported_sources(sources)
        if not supported:
            raise NoSupportedActivities(self.activities)

        if self.tolerate_source_errors:
            samples = await fetch_tolerant(supported, self.activities, self.metric, season)
        else:
            samples = []
            for source in supported:
                samples.extend(await source.fetch(self.activities, self.metric, season))

        if not samples:
            raise NoSupportedMetrics(self.metric)

        logger.debug(
            f"{self.description}: {len(samples)} samples from {len(supported)} sources"
        )
        return sort_samples(samples)

    def make_result(self, season: Season, value: float) -> LoadResult:
        return LoadResult(
            activity=self.activities,
            metric=self.result_metric,
            start_date=season.start_date,
            end_date=season.end_date,
            measurement=Measurement(value, self.result_unit),
        )

    @abstractmethod
    async def compute(self, sources, season: Season) -> LoadResult:
        """Compute the load for ``season`` from ``sources``."""

    def __str__(self) -> str:
        return self.description


class BanisterCalculator(LoadCalculator):
    """Banister's exponential TRIMP over the whole season.

    Duration is the span from the first to the last sample; intensity is the
    heart rate reserve of the mean heart rate.
    """

    description = "Banister TRIMP"
    result_unit = BANISTER_TRIMP

    def __init__(
        self,
        athlete: AthleteProfile,
        now: datetime | None = None,
        tolerate_source_errors: bool = False,
    ):
        self.athlete = athlete
        self.now = now
        self.tolerate_source_errors = tolerate_source_errors

    async def compute(self, sources, season: Season) -> LoadResult:
        samples = await self.collect_samples(sources, season)

        duration = span_minutes(samples)
        avg_hr = mean_heart_rate(samples)

        resting_hr = await self.athlete.resolve_resting_heart_rate(self.now)
        max_hr = await self.athlete.resolve_max_heart_rate(self.now)
        if resting_hr is None or max_hr is None:
            raise MissingRequiredParameter(
                f"Athlete {self.athlete.name} missing resting or max heart rate data"
            )

        hr_reserve = heart_rate_reserve(avg_hr, resting_hr, max_hr)
        gender = self.athlete.biological_gender()
        trimp = banister_trimp(duration, hr_reserve, gender)

        logger.debug(
            f"Banister: {duration:.1f} min, mean {avg_hr:.1f} bpm, "
            f"HRr {hr_reserve:.3f}, gender {gender} -> {trimp:.1f}"
        )
        return self.make_result(season, trimp)


class EdwardsCalculator(LoadCalculator):
    """Edwards' zone-weighted TRIMP using five bands of max heart rate."""

    description = "Edwards TRIMP"
    result_unit = EDWARDS_TRIMP

    def __init__(self, athlete: AthleteProfile, now: datetime | None = None):
        self.athlete = athlete
        self.now = now

    async def compute(self, sources, season: Season) -> LoadResult:
        samples = await self.collect_samples(sources, season)

        max_hr = await self.athlete.resolve_max_heart_rate(self.now)
        if max_hr is None:
            raise MissingRequiredParameter(
                f"Athlete {self.athlete.name} missing max heart rate data"
            )

        minutes = edwards_zone_minutes(samples, max_hr)
        trimp = weighted_zone_score(minutes, EDWARDS_MULTIPLIERS)
        logger.debug(f"Edwards: zone minutes {minutes} -> {trimp:.1f}")
        return self.make_result(season, trimp)


class LuciaCalculator(LoadCalculator):
    """Lucia's TRIMP using three zones split at the ventilatory thresholds.

    VT1 and VT2 (bpm) come from laboratory testing and are always supplied
    by the caller.
    """

    description = "Lucia TRIMP"
    result_unit = LUCIA_TRIMP

    def __init__(self, vt1: float | None, vt2: float | None):
        self.vt1 = vt1
        self.vt2 = vt2

    def _check_thresholds(self) -> None:
        if self.vt1 is None or self.vt2 is None:
            raise MissingRequiredParameter("Lactate thresholds VT1 and VT2 are required")
        if self.vt1 <= 0 or self.vt2 <= 0:
            raise MissingRequiredParameter("Lactate thresholds must be positive heart rates")
        if self.vt1 >= self.vt2:
            raise MissingRequiredParameter(
                f"VT1 ({self.vt1}) must be below VT2 ({self.vt2})"
            )

    async def compute(self, sources, season: Season) -> LoadResult:
        samples = await self.collect_samples(sources, season)
        self._check_thresholds()

        minutes = lucia_zone_minutes(samples, self.vt1, self.vt2)
        trimp = weighted_zone_score(minutes, LUCIA_MULTIPLIERS)
        logger.debug(f"Lucia: zone minutes {minutes} -> {trimp:.1f}")
        return self.make_result(season, trimp)


class AveragePowerCalculator(LoadCalculator):
    """Mean running power over the season, in watts."""

    description = "Average Power"
    activities = ActivityKind.RUNNING
    metric = MetricKind.RUNNING_POWER
    result_metric = MetricKind.RUNNING_POWER
    result_unit = WATTS

    async def compute(self, sources, season: Season) -> LoadResult:
        samples = await self.collect_samples(sources, season)
        total = sum(s.measurement.converted(WATTS).value for s in samples)
        return self.make_result(season, total / len(samples))
