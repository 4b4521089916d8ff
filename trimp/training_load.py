"""Training load computation (acute:chronic workload ratio)."""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Sequence

from loguru import logger

from trimp.calculators import BanisterCalculator, LoadCalculator
from trimp.config import ACUTE_DAYS, ACWR_HIGH, ACWR_LOW, ACWR_SPIKE, CHRONIC_DAYS
from trimp.errors import NoSupportedActivities, TrimpError
from trimp.profile import AthleteProfile
from trimp.samples import LoadResult, Season
from trimp.units import TRAINING_LOAD_RATIO


@dataclass(frozen=True)
class AcuteChronicLoad:
    """Rolling loads and their ratio."""

    acute: float
    chronic: float
    ratio: float


def acute_chronic_ratio(daily_loads: Sequence[float], acute_days: int = ACUTE_DAYS) -> AcuteChronicLoad:
    """Compute acute load, chronic load and their ratio.

    Args:
        daily_loads: Daily load values, oldest first, covering the chronic window
        acute_days: Number of most recent days in the acute window

    Returns:
        AcuteChronicLoad; ratio is 0 when chronic load is 0
    """
    if not daily_loads:
        return AcuteChronicLoad(0.0, 0.0, 0.0)

    acute_window = list(daily_loads[-acute_days:])
    acute = math.fsum(acute_window) / acute_days
    chronic = math.fsum(daily_loads) / len(daily_loads)

    ratio = acute / chronic if chronic > 0 else 0.0
    return AcuteChronicLoad(acute, chronic, ratio)


def describe_ratio(ratio: float) -> dict:
    """Interpret an acute:chronic ratio.

    The bands are conventional monitoring categories, not limits.

    Returns:
        Dict with status and description
    """
    if ratio <= 0:
        status = "insufficient_history"
        description = "No chronic load to compare against"
    elif ratio < ACWR_LOW:
        status = "underexposed"
        description = "Recent load well below your baseline"
    elif ratio <= ACWR_HIGH:
        status = "in_range"
        description = "Recent load in line with your baseline"
    elif ratio <= ACWR_SPIKE:
        status = "spike"
        description = "Recent load rising faster than your baseline"
    else:
        status = "high_spike"
        description = "Recent load far above your baseline, consider recovery"

    return {"ratio": ratio, "status": status, "description": description}


class AcuteChronicCalculator(LoadCalculator):
    """Acute:chronic ratio of daily Banister TRIMP.

    The chronic window is the 28 days ending at the season's end date. Each
    day is computed on its own. A source that fails to fetch contributes no
    samples while the others still count; a day that still fails (no data,
    missing parameters) counts as zero load.
    """

    description = "Training Load (A:C Ratio)"
    result_unit = TRAINING_LOAD_RATIO

    def __init__(
        self,
        athlete: AthleteProfile,
        acute_days: int = ACUTE_DAYS,
        chronic_days: int = CHRONIC_DAYS,
        now: datetime | None = None,
    ):
        if not 0 < acute_days <= chronic_days:
            raise ValueError("Acute window must be positive and no longer than the chronic window")
        self.athlete = athlete
        self.acute_days = acute_days
        self.chronic_days = chronic_days
        self.daily_calculator = BanisterCalculator(athlete, now=now, tolerate_source_errors=True)

    async def daily_loads(self, sources, end_date: datetime) -> list[tuple[datetime, float]]:
        """Banister TRIMP for each day of the chronic window ending at ``end_date``.

        Returns:
            List of (day start, load) pairs, oldest first
        """
        chronic_start = end_date - timedelta(days=self.chronic_days)
        loads = []

        for offset in range(self.chronic_days):
            day_start = chronic_start + timedelta(days=offset)
            day = Season(day_start, day_start + timedelta(days=1))

            try:
                result = await self.daily_calculator.compute(sources, day)
                load = result.value
            except TrimpError as e:
                logger.debug(f"No load for {day_start:%Y-%m-%d}: {e}")
                load = 0.0
            except Exception as e:
                logger.warning(f"Fetch failed for {day_start:%Y-%m-%d}, counting as rest day: {e}")
                load = 0.0

            loads.append((day_start, load))

        return loads

    async def compute(self, sources, season: Season) -> LoadResult:
        if not self.supported_sources(sources):
            raise NoSupportedActivities(self.activities)

        daily = await self.daily_loads(sources, season.end_date)
        loads = acute_chronic_ratio([load for _, load in daily], self.acute_days)

        logger.debug(
            f"A:C ratio: acute {loads.acute:.1f}, chronic {loads.chronic:.1f} -> {loads.ratio:.3f}"
        )
        return self.make_result(season, loads.ratio)
