"""CSV loading and parsing utilities for sample exports."""
import csv
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from dateutil import parser as dateparser

from trimp.errors import UnknownActivityOption, UnknownMetricOption, UnknownUnitError
from trimp.samples import ActivityKind, MetricKind, Sample, parse_activity, parse_metric
from trimp.units import Measurement, UnitRegistry, default_registry


def normalize_header(header: str) -> str:
    """
    Convert header to snake_case.

    Examples:
        'Start Time' -> 'start_time'
        'Heart Rate' -> 'heart_rate'
    """
    # Remove leading/trailing whitespace
    header = header.strip()

    # Replace spaces and special chars with underscores
    header = re.sub(r"[\s\-/]+", "_", header)

    # Convert to lowercase
    header = header.lower()

    # Remove consecutive underscores
    header = re.sub(r"_+", "_", header)

    # Remove leading/trailing underscores
    header = header.strip("_")

    return header


def parse_date(value: str | None) -> datetime | None:
    """
    Parse a date string robustly.

    Handles various formats including:
        - 'Mar 31, 2020, 9:26:15 PM'
        - '2020-03-31T21:26:15'
        - Unix timestamps
    """
    if not value or value.strip() == "":
        return None

    value = value.strip()

    # Try Unix timestamp (float)
    try:
        ts = float(value)
        if ts > 1e9:  # Reasonable timestamp range
            return datetime.fromtimestamp(ts)
    except ValueError:
        pass

    # Try dateutil parser
    try:
        return dateparser.parse(value)
    except (ValueError, TypeError, OverflowError):
        return None


def parse_float(value: str | None) -> float | None:
    """Parse a float value, returning None for empty or invalid values."""
    if not value or value.strip() == "":
        return None

    try:
        return float(value.strip())
    except ValueError:
        return None


# Mapping from normalized CSV headers to sample fields
FIELD_MAPPING = {
    "start_time": "start_time",
    "start_date": "start_time",
    "timestamp": "start_time",
    "end_time": "end_time",
    "end_date": "end_time",
    "value": "value",
    "heart_rate": "value",
    "bpm": "value",
    "unit": "unit",
    "activity": "activity",
    "activity_type": "activity",
    "type": "activity",
    "metric": "metric",
}


@dataclass
class CsvLoadResult:
    """Samples parsed from a CSV file plus the rows that were rejected."""

    samples: list[Sample] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def parse_row(
    row: dict[str, str],
    registry: UnitRegistry,
    default_activity: ActivityKind = ActivityKind.RUNNING,
) -> Sample:
    """
    Build a sample from one CSV row.

    Missing end time falls back to the start time, missing unit to bpm,
    missing metric to heart rate.

    Raises:
        ValueError: if the start time or value cannot be parsed
        TrimpError: if the activity or metric name is unknown
        UnknownUnitError: if the unit symbol is not registered
    """
    fields: dict[str, str] = {}
    for header, value in row.items():
        if header is None or value is None:
            continue
        normalized = normalize_header(header)
        if normalized in FIELD_MAPPING and value.strip():
            fields.setdefault(FIELD_MAPPING[normalized], value.strip())

    start = parse_date(fields.get("start_time"))
    if start is None:
        raise ValueError(f"invalid start time {fields.get('start_time')!r}")

    end = parse_date(fields.get("end_time")) or start

    value = parse_float(fields.get("value"))
    if value is None:
        raise ValueError(f"invalid value {fields.get('value')!r}")

    activity = parse_activity(fields["activity"]) if "activity" in fields else default_activity
    metric = parse_metric(fields["metric"]) if "metric" in fields else MetricKind.HEART_RATE
    unit = registry.get(fields.get("unit", "bpm"))

    return Sample(
        activity=activity,
        metric=metric,
        start_date=start,
        end_date=end,
        measurement=Measurement(value, unit),
    )


def load_samples_csv(
    csv_path: Path,
    registry: UnitRegistry | None = None,
    default_activity: ActivityKind = ActivityKind.RUNNING,
) -> CsvLoadResult:
    """
    Load and parse a sample export CSV file.

    Expected columns (any order, header names are normalized):
        start_time, end_time, value, unit, activity, metric

    Returns a CsvLoadResult with parsed samples and skipped-row messages.
    """
    registry = registry or default_registry()
    result = CsvLoadResult()

    with open(csv_path, "r", encoding="utf-8") as f:
        reader = csv.DictReader(f)

        # Line 1 is the header
        for line_number, row in enumerate(reader, start=2):
            try:
                result.samples.append(parse_row(row, registry, default_activity))
            except (ValueError, UnknownActivityOption, UnknownMetricOption, UnknownUnitError) as e:
                result.skipped.append(f"{csv_path.name}:{line_number}: {e}")

    return result
