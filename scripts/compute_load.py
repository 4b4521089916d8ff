"""Compute a training load score from the local sample database.

Usage:
    python -m scripts.compute_load --method banister --days 7 --athlete Sam
    python -m scripts.compute_load --method edwards --start 2025-06-01 --end 2025-06-08
    python -m scripts.compute_load --method lucia --vt1 145 --vt2 172 --convert-to B-TRIMP
    python -m scripts.compute_load --method acwr --athlete Sam
"""

import argparse
import asyncio
import sys
from datetime import date, datetime, timedelta
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from db.models import get_engine, get_session_factory, init_db
from sources.database import DatabaseDataSource
from trimp.calculators import (
    AveragePowerCalculator,
    BanisterCalculator,
    EdwardsCalculator,
    LoadCalculator,
    LuciaCalculator,
)
from trimp.errors import IncompatibleUnitsError, TrimpError, UnknownUnitError
from trimp.logger import setup_logger
from trimp.profile import AthleteProfile
from trimp.samples import ActivityKind, MetricKind, Season
from trimp.training_load import AcuteChronicCalculator, describe_ratio
from trimp.units import default_registry

METHODS = ("banister", "edwards", "lucia", "acwr", "power")


def build_calculator(
    method: str,
    athlete: AthleteProfile,
    vt1: float | None = None,
    vt2: float | None = None,
) -> LoadCalculator:
    """Create the calculator for a method name."""
    if method == "banister":
        return BanisterCalculator(athlete)
    if method == "edwards":
        return EdwardsCalculator(athlete)
    if method == "lucia":
        return LuciaCalculator(vt1, vt2)
    if method == "acwr":
        return AcuteChronicCalculator(athlete)
    if method == "power":
        return AveragePowerCalculator()
    raise ValueError(f"Unknown method: {method}")


def resolve_season(
    start: date | None,
    end: date | None,
    days: int,
    today: date | None = None,
) -> Season:
    """Season from explicit dates, or the last ``days`` days up to the end of today.

    End dates are inclusive: --end 2025-06-08 covers all of June 8th.
    """
    today = today or date.today()
    end_day = (end or today) + timedelta(days=1)
    start_day = start or end_day - timedelta(days=days)
    return Season(
        datetime.combine(start_day, datetime.min.time()),
        datetime.combine(end_day, datetime.min.time()),
    )


def main():
    parser = argparse.ArgumentParser(
        description="Compute training load (Banister/Edwards/Lucia TRIMP, A:C ratio)"
    )
    parser.add_argument("--method", choices=METHODS, default="banister")
    parser.add_argument("--start", type=date.fromisoformat, help="First day, YYYY-MM-DD")
    parser.add_argument("--end", type=date.fromisoformat, help="Last day (inclusive), YYYY-MM-DD")
    parser.add_argument(
        "--days",
        type=int,
        default=7,
        help="Number of days when --start is omitted (default: 7)",
    )
    parser.add_argument("--vt1", type=float, help="Aerobic threshold HR (Lucia)")
    parser.add_argument("--vt2", type=float, help="Anaerobic threshold HR (Lucia)")
    parser.add_argument("--athlete", help="Athlete name stored by scripts.ingest")
    parser.add_argument("--source", help="Only use samples with this source label")
    parser.add_argument(
        "--convert-to",
        action="append",
        default=[],
        metavar="SYMBOL",
        help="Also express the result in this unit (e.g. TRIMP, E-TRIMP); repeatable",
    )
    parser.add_argument(
        "--db",
        type=Path,
        help="Path to database file",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug logging",
    )

    args = parser.parse_args()
    setup_logger(level="DEBUG" if args.verbose else "WARNING")

    engine = get_engine(args.db)
    init_db(engine)

    source = DatabaseDataSource(
        get_session_factory(engine),
        name=args.source,
        activities=ActivityKind.RUNNING | ActivityKind.CYCLING,
        metrics=MetricKind.HEART_RATE | MetricKind.RESTING_HEART_RATE | MetricKind.RUNNING_POWER,
        athlete_name=args.athlete,
    )
    athlete = AthleteProfile(args.athlete or "athlete", [source])
    calculator = build_calculator(args.method, athlete, args.vt1, args.vt2)
    season = resolve_season(args.start, args.end, args.days)

    try:
        result = asyncio.run(calculator.compute([source], season))
    except TrimpError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"{calculator.description}")
    print(f"  Period: {season.start_date:%Y-%m-%d} to {season.end_date:%Y-%m-%d}")
    print(f"  Result: {result.measurement}")

    registry = default_registry()
    for symbol in args.convert_to:
        try:
            converted = result.converted(registry.get(symbol))
        except (IncompatibleUnitsError, UnknownUnitError) as e:
            print(f"  Cannot convert to {symbol}: {e}", file=sys.stderr)
            continue
        print(f"  As {symbol}: {converted.measurement}")

    if args.method == "acwr":
        status = describe_ratio(result.value)
        print(f"  Status: {status['status']}")
        print(f"  {status['description']}")


if __name__ == "__main__":
    main()
