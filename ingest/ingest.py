"""Main ingestion logic for trimp-local."""
from datetime import date, datetime
from pathlib import Path

from sqlalchemy.orm import Session

from db.models import AthleteRecord, FitFileRecord, SampleRecord, get_engine, get_session, init_db
from ingest.csv_loader import load_samples_csv
from ingest.fit_parser import FitData, compute_sha256, fit_samples, parse_fit_file
from trimp.samples import Sample


class IngestionStats:
    """Track ingestion statistics."""

    def __init__(self):
        self.csv_rows_loaded = 0
        self.csv_rows_skipped = 0
        self.fit_files_found = 0
        self.fit_files_parsed = 0
        self.fit_files_with_hr = 0
        self.fit_files_skipped = 0
        self.samples_new = 0
        self.samples_updated = 0
        self.errors: list[str] = []

    def __str__(self) -> str:
        return (
            f"Ingestion complete:\n"
            f"  CSV rows loaded: {self.csv_rows_loaded}\n"
            f"  - Skipped: {self.csv_rows_skipped}\n"
            f"  FIT files found: {self.fit_files_found}\n"
            f"  - Successfully parsed: {self.fit_files_parsed}\n"
            f"  - With heart rate: {self.fit_files_with_hr}\n"
            f"  - Already ingested: {self.fit_files_skipped}\n"
            f"  Samples new: {self.samples_new}\n"
            f"  Samples updated: {self.samples_updated}\n"
            f"  Errors: {len(self.errors)}"
        )


def find_fit_files(fit_dir: Path) -> list[Path]:
    """Find all .fit and .fit.gz files in a directory, sorted by name."""
    fit_files = []

    for file_path in fit_dir.iterdir():
        if not file_path.is_file():
            continue

        name = file_path.name.lower()
        if name.endswith(".fit") or name.endswith(".fit.gz"):
            fit_files.append(file_path)

    return sorted(fit_files)


def upsert_sample(session: Session, sample: Sample, source: str) -> tuple[SampleRecord, bool]:
    """
    Insert or update a sample.

    A sample is identified by source, metric and start time.

    Returns (record, is_new).
    """
    existing = (
        session.query(SampleRecord)
        .filter_by(source=source, metric_kind=int(sample.metric), start_time=sample.start_date)
        .first()
    )

    if existing:
        existing.activity_kind = int(sample.activity)
        existing.end_time = sample.end_date
        existing.value = sample.value
        existing.unit = sample.unit.symbol
        return existing, False

    record = SampleRecord(
        source=source,
        activity_kind=int(sample.activity),
        metric_kind=int(sample.metric),
        start_time=sample.start_date,
        end_time=sample.end_date,
        value=sample.value,
        unit=sample.unit.symbol,
    )
    session.add(record)
    return record, True


def store_samples(session: Session, samples: list[Sample], source: str, stats: IngestionStats) -> None:
    for sample in samples:
        _, is_new = upsert_sample(session, sample, source)
        if is_new:
            stats.samples_new += 1
        else:
            stats.samples_updated += 1

    # Make new rows visible to the duplicate check of the next batch
    session.flush()


def is_fit_file_ingested(session: Session, sha256: str) -> bool:
    """Whether a FIT file with this content hash was ingested before."""
    return session.query(FitFileRecord).filter_by(sha256=sha256).first() is not None


def record_fit_file(session: Session, fit_data: FitData, sample_count: int) -> FitFileRecord:
    """Remember a parsed FIT file so unchanged copies are skipped next time."""
    record = FitFileRecord(
        sha256=fit_data.sha256,
        file_path=fit_data.file_path,
        file_size=fit_data.file_size,
        sample_count=sample_count,
    )
    session.add(record)
    session.flush()
    return record


def upsert_athlete(
    session: Session,
    name: str,
    gender: str | None = None,
    birth_date: date | None = None,
    height_m: float | None = None,
    weight_kg: float | None = None,
) -> AthleteRecord:
    """Insert or update an athlete; None leaves a stored value unchanged."""
    athlete = session.query(AthleteRecord).filter_by(name=name).first()
    if athlete is None:
        athlete = AthleteRecord(name=name)
        session.add(athlete)

    if gender is not None:
        athlete.gender = gender
    if birth_date is not None:
        athlete.birth_date = birth_date
    if height_m is not None:
        athlete.height_m = height_m
    if weight_kg is not None:
        athlete.weight_kg = weight_kg
    athlete.updated_at = datetime.utcnow()

    return athlete


def run_ingestion(
    csv_path: Path | None = None,
    fit_dir: Path | None = None,
    db_path: Path | None = None,
    source_name: str = "local",
    verbose: bool = True,
    engine=None,
) -> IngestionStats:
    """
    Run the full ingestion process.

    Args:
        csv_path: Optional path to a sample export CSV file.
        fit_dir: Optional directory containing FIT files.
        db_path: Optional path to the SQLite database file.
        source_name: Source label stored with every sample.
        verbose: Whether to print progress messages.
        engine: Optional engine (overrides db_path).

    Returns:
        IngestionStats with summary of ingestion.
    """
    stats = IngestionStats()

    def log(msg: str):
        if verbose:
            print(msg)

    # Initialize database
    log("Initializing database...")
    engine = engine or get_engine(db_path)
    init_db(engine)
    session = get_session(engine)

    try:
        if csv_path:
            log(f"Loading CSV from {csv_path}...")
            loaded = load_samples_csv(csv_path)
            stats.csv_rows_loaded = len(loaded.samples)
            stats.csv_rows_skipped = len(loaded.skipped)
            stats.errors.extend(loaded.skipped)
            store_samples(session, loaded.samples, source_name, stats)
            log(f"  Loaded {len(loaded.samples)} samples from CSV")

        if fit_dir:
            log(f"Scanning FIT files in {fit_dir}...")
            fit_files = find_fit_files(fit_dir)
            stats.fit_files_found = len(fit_files)
            log(f"  Found {len(fit_files)} FIT files")

            for i, fit_path in enumerate(fit_files):
                sha256 = compute_sha256(fit_path)
                if is_fit_file_ingested(session, sha256):
                    stats.fit_files_skipped += 1
                    continue

                fit_data = parse_fit_file(fit_path, sha256)
                if fit_data is None:
                    stats.errors.append(f"Failed to parse FIT: {fit_path}")
                    continue

                stats.fit_files_parsed += 1
                samples = fit_samples(fit_data)
                if fit_data.has_heart_rate:
                    stats.fit_files_with_hr += 1
                    store_samples(session, samples, source_name, stats)
                record_fit_file(session, fit_data, len(samples))

                # Progress update
                if verbose and (i + 1) % 100 == 0:
                    log(f"  Processed {i + 1}/{len(fit_files)} FIT files...")

        # Commit all changes
        log("Committing to database...")
        session.commit()

        log(f"\n{stats}")

        return stats

    except Exception as e:
        session.rollback()
        stats.errors.append(f"Fatal error: {e}")
        raise

    finally:
        session.close()
