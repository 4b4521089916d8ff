"""CLI script for running ingestion.

Usage:
    python -m scripts.ingest --csv samples.csv
    python -m scripts.ingest --fit-dir activities/ --source garmin
    python -m scripts.ingest --athlete "Sam" --gender female --birth-date 1990-04-02 --height 1.68 --weight 61
"""
import argparse
import sys
from datetime import date
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from db.models import get_engine, get_session, init_db
from ingest.ingest import run_ingestion, upsert_athlete
from trimp.logger import setup_logger


def main():
    parser = argparse.ArgumentParser(
        description="Ingest heart rate samples from CSV and FIT files into a local SQLite database."
    )
    parser.add_argument(
        "--csv",
        type=Path,
        help="Path to a sample export CSV file",
    )
    parser.add_argument(
        "--fit-dir",
        type=Path,
        help="Path to the directory containing FIT files",
    )
    parser.add_argument(
        "--source",
        default="local",
        help="Source label stored with the samples (default: local)",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Path to the SQLite database file (default: data/trimp_local.db)",
    )
    parser.add_argument("--athlete", help="Athlete name to create or update")
    parser.add_argument("--gender", choices=["male", "female", "other", "not set"])
    parser.add_argument("--birth-date", type=date.fromisoformat, help="YYYY-MM-DD")
    parser.add_argument("--height", type=float, help="Height in meters")
    parser.add_argument("--weight", type=float, help="Weight in kilograms")
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )

    args = parser.parse_args()
    setup_logger(level="WARNING" if args.quiet else "INFO")

    if not (args.csv or args.fit_dir or args.athlete):
        parser.error("nothing to do: pass --csv, --fit-dir or --athlete")

    # Validate inputs
    if args.csv and not args.csv.exists():
        print(f"Error: CSV file not found: {args.csv}", file=sys.stderr)
        sys.exit(1)

    if args.fit_dir and not args.fit_dir.is_dir():
        print(f"Error: FIT directory not found: {args.fit_dir}", file=sys.stderr)
        sys.exit(1)

    engine = get_engine(args.db)

    try:
        if args.athlete:
            init_db(engine)
            session = get_session(engine)
            try:
                upsert_athlete(
                    session,
                    args.athlete,
                    gender=args.gender,
                    birth_date=args.birth_date,
                    height_m=args.height,
                    weight_kg=args.weight,
                )
                session.commit()
            finally:
                session.close()
            if not args.quiet:
                print(f"Saved athlete profile for {args.athlete}")

        if args.csv or args.fit_dir:
            stats = run_ingestion(
                csv_path=args.csv,
                fit_dir=args.fit_dir,
                source_name=args.source,
                verbose=not args.quiet,
                engine=engine,
            )

            if stats.errors:
                print(f"\nWarnings/Errors ({len(stats.errors)}):")
                for error in stats.errors[:10]:
                    print(f"  - {error}")
                if len(stats.errors) > 10:
                    print(f"  ... and {len(stats.errors) - 10} more")

        sys.exit(0)

    except Exception as e:
        print(f"Error during ingestion: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
