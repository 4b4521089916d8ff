"""Data source interface consumed by the load calculators."""

from abc import ABC, abstractmethod
from enum import IntFlag

from trimp.samples import ActivityKind, MetricKind, Sample, Season
from trimp.units import Measurement, Unit


class AuthorizationOption(IntFlag):
    READ = 1 << 0
    WRITE = 1 << 1


class DataSource(ABC):
    """A provider of raw samples and athlete attributes.

    Sources declare their capabilities as flag sets; callers must check
    ``supports`` before fetching since capabilities differ between sources.
    """

    name: str = "source"

    @property
    @abstractmethod
    def supported_activity_kinds(self) -> ActivityKind:
        ...

    @property
    @abstractmethod
    def supported_metric_kinds(self) -> MetricKind:
        ...

    @property
    def default_units(self) -> dict[MetricKind, Unit]:
        return {}

    @property
    def is_available(self) -> bool:
        return True

    @abstractmethod
    async def fetch(
        self,
        activity: ActivityKind,
        metric: MetricKind,
        season: Season,
    ) -> list[Sample]:
        """Fetch samples of ``metric`` recorded during ``activity`` within ``season``."""

    async def request_authorization(
        self,
        metrics: MetricKind,
        options: AuthorizationOption = AuthorizationOption.READ,
    ) -> None:
        """Ask the platform for access to ``metrics``. Nothing to do by default."""
        return None

    def supports(
        self,
        activity: ActivityKind | None = None,
        metric: MetricKind | None = None,
    ) -> bool:
        """Whether every requested activity bit and metric bit is declared."""
        if activity is not None and (self.supported_activity_kinds & activity) != activity:
            return False
        if metric is not None and (self.supported_metric_kinds & metric) != metric:
            return False
        return True

    # Athlete attributes; None when the source does not know them

    def biological_gender(self):
        return None

    def age(self) -> int | None:
        return None

    async def current_height(self) -> Measurement | None:
        return None

    async def current_weight(self) -> Measurement | None:
        return None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
