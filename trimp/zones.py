"""Time-in-zone accumulation for zone-weighted TRIMP methods."""

from typing import Callable, Sequence

from trimp.config import EDWARDS_BAND_EDGES
from trimp.samples import Sample, sort_samples
from trimp.units import BEATS_PER_MINUTE


def accumulate_zone_minutes(
    samples: Sequence[Sample],
    classify: Callable[[float], int | None],
    zone_count: int,
) -> list[float]:
    """Compute minutes spent in each zone.

    Each consecutive pair of samples contributes the minutes between their
    start times to the zone of the first sample's heart rate.

    Args:
        samples: Heart rate samples (sorted here by start date)
        classify: Maps a bpm value to a zone index, or None to skip it
        zone_count: Number of zones

    Returns:
        List of minutes per zone
    """
    minutes = [0.0] * zone_count
    ordered = sort_samples(samples)

    for current, following in zip(ordered, ordered[1:]):
        hr = current.measurement.converted(BEATS_PER_MINUTE).value
        zone = classify(hr)
        if zone is None:
            continue

        elapsed = (following.start_date - current.start_date).total_seconds() / 60.0
        minutes[zone] += elapsed

    return minutes


def edwards_band(fraction_of_max: float) -> int | None:
    """Edwards band index for a heart rate given as a fraction of max HR.

    Bands are 50-60%, 60-70%, 70-80%, 80-90% (upper edge exclusive) and
    90-100% (inclusive). Anything outside 50-100% is skipped.
    """
    edges = EDWARDS_BAND_EDGES
    if fraction_of_max < edges[0] or fraction_of_max > edges[-1]:
        return None

    for index in range(len(edges) - 2):
        if fraction_of_max < edges[index + 1]:
            return index
    return len(edges) - 2


def lucia_zone(heart_rate: float, vt1: float, vt2: float) -> int:
    """Lucia zone: 0 below VT1, 1 between VT1 and VT2, 2 at or above VT2."""
    if heart_rate < vt1:
        return 0
    elif heart_rate < vt2:
        return 1
    return 2


def weighted_zone_score(minutes: Sequence[float], multipliers: Sequence[float]) -> float:
    """Sum of minutes in each zone times that zone's multiplier."""
    if len(minutes) != len(multipliers):
        raise ValueError(
            f"Got {len(minutes)} zone durations for {len(multipliers)} multipliers"
        )
    return sum(m * w for m, w in zip(minutes, multipliers))
