"""FIT file parsing utilities."""
import gzip
import hashlib
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from fitparse import FitFile
from loguru import logger

from trimp.errors import UnknownActivityOption
from trimp.samples import ActivityKind, MetricKind, Sample, parse_activity
from trimp.units import BEATS_PER_MINUTE, Measurement


@dataclass
class FitData:
    """Heart rate data parsed from a FIT file."""

    # File metadata
    file_path: str
    file_size: int
    sha256: str

    # Activity info
    start_time: datetime | None = None
    sport: str | None = None

    # (timestamp, bpm) pairs in file order
    heart_rate_records: list[tuple[datetime, int]] = field(default_factory=list)

    @property
    def has_heart_rate(self) -> bool:
        return len(self.heart_rate_records) > 0


def compute_sha256(file_path: Path) -> str:
    """Compute SHA256 hash of a file."""
    sha256_hash = hashlib.sha256()
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            sha256_hash.update(chunk)
    return sha256_hash.hexdigest()


def open_fit(file_path: Path) -> FitFile:
    """Open a plain .fit or gzipped .fit.gz file."""
    is_gzipped = file_path.suffix == ".gz" or file_path.name.endswith(".fit.gz")

    if is_gzipped:
        with gzip.open(file_path, "rb") as f:
            return FitFile(f.read())
    return FitFile(str(file_path))


def parse_fit_file(file_path: Path, sha256: str | None = None) -> FitData | None:
    """
    Parse a FIT file and extract sport and heart rate records.

    Handles both plain .fit files and gzipped .fit.gz files. Pass ``sha256``
    when the caller has already hashed the file.

    Returns FitData on success, None on failure.
    """
    if not file_path.exists():
        return None

    result = FitData(
        file_path=str(file_path),
        file_size=file_path.stat().st_size,
        sha256=sha256 or compute_sha256(file_path),
    )

    try:
        fit = open_fit(file_path)

        for record in fit.get_messages(["session", "record"]):
            if record.name == "session":
                for field_data in record:
                    if field_data.name == "start_time":
                        result.start_time = field_data.value
                    elif field_data.name == "sport" and field_data.value is not None:
                        result.sport = str(field_data.value)

            elif record.name == "record":
                hr = None
                ts = None

                for field_data in record:
                    if field_data.name == "heart_rate" and field_data.value is not None:
                        hr = int(field_data.value)
                    elif field_data.name == "timestamp":
                        ts = field_data.value

                # Only keep records with both a time and a heart rate
                if hr is not None and ts is not None:
                    result.heart_rate_records.append((ts, hr))

        return result

    except Exception as e:
        # Corrupt or truncated files are reported by the caller
        logger.warning(f"Failed to parse {file_path}: {e}")
        return None


def sport_to_activity(sport: str | None, default: ActivityKind = ActivityKind.DAY_TO_DAY) -> ActivityKind:
    """Map a FIT sport name to an ActivityKind."""
    if not sport:
        return default
    try:
        return parse_activity(sport)
    except UnknownActivityOption:
        logger.debug(f"Unmapped FIT sport {sport!r}, using {default!r}")
        return default


def fit_samples(fit_data: FitData, default_activity: ActivityKind = ActivityKind.DAY_TO_DAY) -> list[Sample]:
    """
    Turn parsed heart rate records into samples.

    Each sample lasts until the next record; the last one is instantaneous.
    """
    activity = sport_to_activity(fit_data.sport, default_activity)
    records = sorted(fit_data.heart_rate_records, key=lambda r: r[0])

    samples = []
    for i, (ts, hr) in enumerate(records):
        end = records[i + 1][0] if i + 1 < len(records) else ts
        samples.append(
            Sample(
                activity=activity,
                metric=MetricKind.HEART_RATE,
                start_date=ts,
                end_date=end,
                measurement=Measurement(float(hr), BEATS_PER_MINUTE),
            )
        )
    return samples
