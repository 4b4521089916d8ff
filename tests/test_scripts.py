"""Tests for the command line helpers."""

from datetime import date, datetime

import pytest

from scripts.compute_load import build_calculator, resolve_season
from trimp.calculators import BanisterCalculator, LuciaCalculator
from trimp.profile import AthleteProfile
from trimp.training_load import AcuteChronicCalculator


def test_build_calculator():
    athlete = AthleteProfile("Sam")

    assert isinstance(build_calculator("banister", athlete), BanisterCalculator)
    assert isinstance(build_calculator("acwr", athlete), AcuteChronicCalculator)

    lucia = build_calculator("lucia", athlete, vt1=145, vt2=172)
    assert isinstance(lucia, LuciaCalculator)
    assert (lucia.vt1, lucia.vt2) == (145, 172)


def test_unknown_method():
    with pytest.raises(ValueError):
        build_calculator("foster", AthleteProfile("Sam"))


def test_season_from_days():
    season = resolve_season(None, None, 7, today=date(2025, 6, 14))

    assert season.start_date == datetime(2025, 6, 8)
    assert season.end_date == datetime(2025, 6, 15)


def test_season_end_is_inclusive():
    season = resolve_season(date(2025, 6, 1), date(2025, 6, 8), 7)

    assert season.start_date == datetime(2025, 6, 1)
    assert season.end_date == datetime(2025, 6, 9)
