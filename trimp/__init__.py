"""Training load computation for trimp-local."""

from trimp.calculators import (
    AveragePowerCalculator,
    BanisterCalculator,
    EdwardsCalculator,
    LoadCalculator,
    LuciaCalculator,
)
from trimp.errors import (
    IncompatibleUnitsError,
    InvalidHeartRateReserve,
    MissingRequiredParameter,
    NoSupportedActivities,
    NoSupportedMetrics,
    TrimpError,
)
from trimp.profile import AthleteProfile, BiologicalGender, HeartRateZones
from trimp.samples import ActivityKind, LoadResult, MetricKind, Sample, Season
from trimp.training_load import AcuteChronicCalculator, describe_ratio
from trimp.units import Measurement, Unit, default_registry

__all__ = [
    "AveragePowerCalculator",
    "BanisterCalculator",
    "EdwardsCalculator",
    "LoadCalculator",
    "LuciaCalculator",
    "AcuteChronicCalculator",
    "describe_ratio",
    "IncompatibleUnitsError",
    "InvalidHeartRateReserve",
    "MissingRequiredParameter",
    "NoSupportedActivities",
    "NoSupportedMetrics",
    "TrimpError",
    "AthleteProfile",
    "BiologicalGender",
    "HeartRateZones",
    "ActivityKind",
    "LoadResult",
    "MetricKind",
    "Sample",
    "Season",
    "Measurement",
    "Unit",
    "default_registry",
]
