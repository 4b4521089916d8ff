"""Data source backed by samples held in memory."""

from trimp.profile import BiologicalGender
from trimp.samples import ActivityKind, MetricKind, Sample, Season
from trimp.units import BEATS_PER_MINUTE, WATTS, Measurement, Unit

from sources.base import DataSource


class InMemoryDataSource(DataSource):
    """Serves a fixed list of samples and attribute values.

    Useful for tests and for callers that already hold the samples.
    Every fetch is recorded in ``fetch_calls``; when ``fail_with`` is set,
    fetches raise it instead of returning data.
    """

    def __init__(
        self,
        samples: list[Sample] | None = None,
        activities: ActivityKind = ActivityKind.RUNNING | ActivityKind.CYCLING,
        metrics: MetricKind = MetricKind.HEART_RATE,
        name: str = "memory",
        gender: BiologicalGender | None = None,
        age: int | None = None,
        height: Measurement | None = None,
        weight: Measurement | None = None,
        fail_with: Exception | None = None,
        available: bool = True,
    ):
        self.name = name
        self.samples = list(samples or [])
        self._activities = activities
        self._metrics = metrics
        self._gender = gender
        self._age = age
        self._height = height
        self._weight = weight
        self.fail_with = fail_with
        self._available = available
        self.fetch_calls: list[tuple[ActivityKind, MetricKind, Season]] = []

        # Declared attributes become capabilities
        if gender is not None:
            self._metrics |= MetricKind.BIOLOGICAL_GENDER
        if age is not None:
            self._metrics |= MetricKind.AGE
        if height is not None:
            self._metrics |= MetricKind.HEIGHT
        if weight is not None:
            self._metrics |= MetricKind.WEIGHT

    @property
    def supported_activity_kinds(self) -> ActivityKind:
        return self._activities

    @property
    def supported_metric_kinds(self) -> MetricKind:
        return self._metrics

    @property
    def default_units(self) -> dict[MetricKind, Unit]:
        return {
            MetricKind.HEART_RATE: BEATS_PER_MINUTE,
            MetricKind.RESTING_HEART_RATE: BEATS_PER_MINUTE,
            MetricKind.RUNNING_POWER: WATTS,
        }

    @property
    def is_available(self) -> bool:
        return self._available

    async def fetch(
        self,
        activity: ActivityKind,
        metric: MetricKind,
        season: Season,
    ) -> list[Sample]:
        self.fetch_calls.append((activity, metric, season))
        if self.fail_with is not None:
            raise self.fail_with

        return [
            sample
            for sample in self.samples
            if sample.activity & activity
            and sample.metric == metric
            and season.contains(sample.start_date)
        ]

    def add(self, *samples: Sample) -> None:
        self.samples.extend(samples)

    def biological_gender(self) -> BiologicalGender | None:
        return self._gender

    def age(self) -> int | None:
        return self._age

    async def current_height(self) -> Measurement | None:
        return self._height

    async def current_weight(self) -> Measurement | None:
        return self._weight
