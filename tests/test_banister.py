"""Tests for Banister TRIMP."""

import math
from datetime import datetime, timedelta

import pytest

from conftest import hr_series, make_sample, resting
from sources.memory import InMemoryDataSource
from trimp.calculators import (
    BanisterCalculator,
    banister_trimp,
    heart_rate_reserve,
    mean_heart_rate,
    span_minutes,
)
from trimp.errors import InvalidHeartRateReserve, MissingRequiredParameter, NoSupportedMetrics
from trimp.profile import AthleteProfile, BiologicalGender
from trimp.samples import MetricKind, Season
from trimp.units import BANISTER_TRIMP

SESSION_START = datetime(2025, 6, 14, 8, 0)
SESSION = Season(SESSION_START, SESSION_START + timedelta(hours=1))
VITALS = MetricKind.HEART_RATE | MetricKind.RESTING_HEART_RATE


def one_hour_at_150(now, gender=None, resting_bpm=60):
    """Source holding a 60 min session at 150 bpm, resting 60 and a 180 bpm max."""
    samples = hr_series(SESSION_START, [(0, 150), (20, 150), (40, 150), (60, 150)])
    samples.append(make_sample(datetime(2025, 6, 1, 9, 0), 180))
    samples.append(resting(now - timedelta(days=1), resting_bpm))
    return InMemoryDataSource(samples, metrics=VITALS, gender=gender)


class TestFormula:
    def test_male_reference_value(self):
        trimp = banister_trimp(60, 0.75, BiologicalGender.MALE)
        assert trimp == pytest.approx(60 * 0.75 * 0.64 * math.exp(1.92 * 0.75))
        assert round(trimp, 1) == 121.6

    def test_female_reference_value(self):
        trimp = banister_trimp(60, 0.75, BiologicalGender.FEMALE)
        assert trimp == pytest.approx(60 * 0.75 * 0.86 * math.exp(1.67 * 0.75))
        assert trimp == pytest.approx(135.3, abs=0.2)

    @pytest.mark.parametrize("gender", [None, BiologicalGender.OTHER, BiologicalGender.NOT_SET])
    def test_unknown_gender_uses_male_coefficients(self, gender):
        assert banister_trimp(60, 0.75, gender) == banister_trimp(60, 0.75, BiologicalGender.MALE)

    def test_monotonic_in_duration_and_reserve(self):
        assert banister_trimp(30, 0.7) < banister_trimp(60, 0.7)
        assert banister_trimp(60, 0.5) < banister_trimp(60, 0.6) < banister_trimp(60, 0.9)

    def test_zero_duration(self):
        assert banister_trimp(0, 0.8) == 0.0


class TestHeartRateReserve:
    def test_reserve(self):
        assert heart_rate_reserve(150, 60, 180) == pytest.approx(0.75)

    def test_bounds_are_valid(self):
        assert heart_rate_reserve(60, 60, 180) == 0.0
        assert heart_rate_reserve(180, 60, 180) == 1.0

    def test_below_resting(self):
        with pytest.raises(InvalidHeartRateReserve) as excinfo:
            heart_rate_reserve(50, 60, 180)
        assert excinfo.value.hr_reserve < 0

    def test_max_not_above_resting(self):
        with pytest.raises(InvalidHeartRateReserve):
            heart_rate_reserve(150, 180, 180)

    def test_is_a_missing_parameter(self):
        assert issubclass(InvalidHeartRateReserve, MissingRequiredParameter)


class TestHelpers:
    def test_span_uses_first_start_and_last_end(self):
        samples = hr_series(SESSION_START, [(0, 140), (15, 150), (45, 160)])
        samples[-1] = make_sample(SESSION_START + timedelta(minutes=45), 160, minutes=5)
        assert span_minutes(samples) == pytest.approx(50)

    def test_span_of_nothing(self):
        assert span_minutes([]) == 0.0

    def test_mean(self):
        samples = hr_series(SESSION_START, [(0, 140), (10, 150), (20, 160)])
        assert mean_heart_rate(samples) == pytest.approx(150)


class TestBanisterCalculator:
    @pytest.mark.asyncio
    async def test_male_session(self, now):
        source = one_hour_at_150(now, BiologicalGender.MALE)
        calculator = BanisterCalculator(AthleteProfile("Sam", [source]), now=now)

        result = await calculator.compute([source], SESSION)

        assert result.unit == BANISTER_TRIMP
        assert result.metric == MetricKind.TRIMP
        assert result.value == pytest.approx(121.556, abs=0.01)
        assert result.start_date == SESSION.start_date
        assert result.end_date == SESSION.end_date

    @pytest.mark.asyncio
    async def test_female_session(self, now):
        source = one_hour_at_150(now, BiologicalGender.FEMALE)
        calculator = BanisterCalculator(AthleteProfile("Alex", [source]), now=now)

        result = await calculator.compute([source], SESSION)

        assert result.value == pytest.approx(banister_trimp(60, 0.75, BiologicalGender.FEMALE))

    @pytest.mark.asyncio
    async def test_no_samples_in_season(self, now):
        source = one_hour_at_150(now)
        calculator = BanisterCalculator(AthleteProfile("Sam", [source]), now=now)

        with pytest.raises(NoSupportedMetrics):
            await calculator.compute([source], Season.single_day(datetime(2025, 3, 1)))

    @pytest.mark.asyncio
    async def test_missing_resting_heart_rate(self, now):
        samples = hr_series(SESSION_START, [(0, 150), (60, 150)])
        source = InMemoryDataSource(samples, metrics=VITALS, age=35)
        calculator = BanisterCalculator(AthleteProfile("Sam", [source]), now=now)

        with pytest.raises(MissingRequiredParameter):
            await calculator.compute([source], SESSION)

    @pytest.mark.asyncio
    async def test_mean_below_resting(self, now):
        source = one_hour_at_150(now, resting_bpm=155)
        calculator = BanisterCalculator(AthleteProfile("Sam", [source]), now=now)

        with pytest.raises(InvalidHeartRateReserve):
            await calculator.compute([source], SESSION)

    @pytest.mark.asyncio
    async def test_fetch_errors_propagate(self, now):
        broken = InMemoryDataSource(fail_with=ConnectionError("offline"))
        calculator = BanisterCalculator(AthleteProfile("Sam", [broken]), now=now)

        with pytest.raises(ConnectionError):
            await calculator.compute([broken], SESSION)

    @pytest.mark.asyncio
    async def test_tolerant_calculator_skips_failing_source(self, now):
        source = one_hour_at_150(now, BiologicalGender.MALE)
        broken = InMemoryDataSource(fail_with=ConnectionError("offline"))
        calculator = BanisterCalculator(
            AthleteProfile("Sam", [source]), now=now, tolerate_source_errors=True
        )

        result = await calculator.compute([broken, source], SESSION)

        assert result.value == pytest.approx(121.556, abs=0.01)
        assert len(broken.fetch_calls) == 1

    @pytest.mark.asyncio
    async def test_samples_combined_across_sources(self, now):
        profile_source = one_hour_at_150(now, BiologicalGender.MALE)
        first = InMemoryDataSource(hr_series(SESSION_START, [(0, 150), (30, 150)]))
        second = InMemoryDataSource(
            [make_sample(SESSION_START + timedelta(minutes=30), 150, minutes=30)]
        )
        calculator = BanisterCalculator(AthleteProfile("Sam", [profile_source]), now=now)

        result = await calculator.compute([first, second], SESSION)

        assert result.value == pytest.approx(121.556, abs=0.01)
