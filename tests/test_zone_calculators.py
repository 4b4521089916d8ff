"""Tests for the zone-weighted methods (Edwards and Lucia)."""

import random
from datetime import datetime

import pytest

from conftest import hr_series
from sources.memory import InMemoryDataSource
from trimp.calculators import EdwardsCalculator, LuciaCalculator, edwards_zone_minutes
from trimp.errors import MissingRequiredParameter
from trimp.profile import AthleteProfile
from trimp.samples import Season
from trimp.units import EDWARDS_TRIMP, LUCIA_TRIMP
from trimp.zones import edwards_band, lucia_zone, weighted_zone_score

START = datetime(2025, 6, 14, 7, 30)
DAY = Season.single_day(START)

# Age 20 gives an estimated max of 200 bpm
EDWARDS_POINTS = [(0, 110), (10, 130), (25, 150), (45, 170), (55, 190), (60, 100)]
LUCIA_POINTS = [(0, 130), (20, 150), (45, 180), (60, 120)]


class TestBands:
    @pytest.mark.parametrize(
        "fraction, band",
        [(0.5, 0), (0.55, 0), (0.65, 1), (0.75, 2), (0.85, 3), (0.95, 4), (1.0, 4)],
    )
    def test_edwards_bands(self, fraction, band):
        assert edwards_band(fraction) == band

    @pytest.mark.parametrize("fraction", [0.0, 0.3, 0.49, 1.01, 1.2])
    def test_edwards_out_of_range(self, fraction):
        assert edwards_band(fraction) is None

    def test_lucia_zones(self):
        assert lucia_zone(120, 140, 170) == 0
        assert lucia_zone(140, 140, 170) == 1
        assert lucia_zone(169, 140, 170) == 1
        assert lucia_zone(170, 140, 170) == 2

    def test_weighted_score(self):
        assert weighted_zone_score([10, 15, 20, 10, 5], [1, 2, 3, 4, 5]) == 165
        assert weighted_zone_score([20, 25, 15], [1, 2, 3]) == 115

    def test_weighted_score_length_mismatch(self):
        with pytest.raises(ValueError):
            weighted_zone_score([10, 20], [1, 2, 3])


class TestEdwardsCalculator:
    @pytest.mark.asyncio
    async def test_zone_weighted_score(self, now):
        source = InMemoryDataSource(hr_series(START, EDWARDS_POINTS), age=20)
        calculator = EdwardsCalculator(AthleteProfile("Sam", [source]), now=now)

        result = await calculator.compute([source], DAY)

        assert result.unit == EDWARDS_TRIMP
        assert result.value == pytest.approx(165)

    def test_zone_minutes(self):
        minutes = edwards_zone_minutes(hr_series(START, EDWARDS_POINTS), 200)
        assert minutes == pytest.approx([10, 15, 20, 10, 5])

    @pytest.mark.asyncio
    async def test_order_does_not_matter(self, now):
        samples = hr_series(START, EDWARDS_POINTS)
        random.Random(7).shuffle(samples)
        source = InMemoryDataSource(samples, age=20)
        calculator = EdwardsCalculator(AthleteProfile("Sam", [source]), now=now)

        result = await calculator.compute([source], DAY)

        assert result.value == pytest.approx(165)

    @pytest.mark.asyncio
    async def test_out_of_range_samples_are_skipped(self, now):
        samples = hr_series(START, [(0, 80), (10, 150), (20, 100)])
        source = InMemoryDataSource(samples, age=20)
        calculator = EdwardsCalculator(AthleteProfile("Sam", [source]), now=now)

        result = await calculator.compute([source], DAY)

        assert result.value == pytest.approx(10 * 3)

    @pytest.mark.asyncio
    async def test_missing_max_heart_rate(self, now):
        # Heart rate comes from a source the athlete profile does not know
        source = InMemoryDataSource(hr_series(START, EDWARDS_POINTS))
        calculator = EdwardsCalculator(AthleteProfile("Sam", []), now=now)

        with pytest.raises(MissingRequiredParameter):
            await calculator.compute([source], DAY)


class TestLuciaCalculator:
    @pytest.mark.asyncio
    async def test_threshold_weighted_score(self):
        source = InMemoryDataSource(hr_series(START, LUCIA_POINTS))

        result = await LuciaCalculator(140, 170).compute([source], DAY)

        assert result.unit == LUCIA_TRIMP
        assert result.value == pytest.approx(115)

    @pytest.mark.asyncio
    async def test_order_does_not_matter(self):
        samples = list(reversed(hr_series(START, LUCIA_POINTS)))
        source = InMemoryDataSource(samples)

        result = await LuciaCalculator(140, 170).compute([source], DAY)

        assert result.value == pytest.approx(115)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("vt1, vt2", [(None, 170), (140, None), (0, 170), (170, 140), (150, 150)])
    async def test_invalid_thresholds(self, vt1, vt2):
        source = InMemoryDataSource(hr_series(START, LUCIA_POINTS))

        with pytest.raises(MissingRequiredParameter):
            await LuciaCalculator(vt1, vt2).compute([source], DAY)
