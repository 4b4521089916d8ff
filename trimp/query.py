"""Fluent builder for multi-activity, multi-metric sample selections."""

from dataclasses import dataclass

from trimp.samples import ActivityKind, MetricKind, Sample, Season, sort_samples


@dataclass(frozen=True)
class ActivityTarget:
    """One activity and the metrics wanted for it."""

    activity: ActivityKind
    metrics: tuple[MetricKind, ...]


@dataclass(frozen=True)
class TrainingQuery:
    """An immutable selection: a season plus activity/metric targets.

    Example:
        query = (
            TrainingQuery.builder()
            .season(Season.last(28))
            .target(ActivityKind.RUNNING, MetricKind.HEART_RATE, MetricKind.RUNNING_POWER)
            .target(ActivityKind.CYCLING, MetricKind.HEART_RATE)
            .build()
        )
    """

    season: Season
    targets: tuple[ActivityTarget, ...]

    @staticmethod
    def builder() -> "TrainingQueryBuilder":
        return TrainingQueryBuilder()

    @property
    def components(self) -> tuple:
        return (self.season, *self.targets)

    def pairs(self) -> list[tuple[ActivityKind, MetricKind]]:
        """Every (activity, metric) pair in declaration order, without duplicates."""
        seen = []
        for target in self.targets:
            for metric in target.metrics:
                pair = (target.activity, metric)
                if pair not in seen:
                    seen.append(pair)
        return seen


class TrainingQueryBuilder:
    def __init__(self):
        self._season: Season | None = None
        self._targets: list[ActivityTarget] = []

    def season(self, season: Season) -> "TrainingQueryBuilder":
        self._season = season
        return self

    def target(self, activity: ActivityKind, *metrics: MetricKind) -> "TrainingQueryBuilder":
        if not metrics:
            raise ValueError(f"Target {activity!r} needs at least one metric")
        self._targets.append(ActivityTarget(activity, tuple(metrics)))
        return self

    def build(self) -> TrainingQuery:
        if self._season is None:
            raise ValueError("A training query needs a season")
        return TrainingQuery(self._season, tuple(self._targets))


async def run_query(query: TrainingQuery, sources) -> dict[tuple[ActivityKind, MetricKind], list[Sample]]:
    """Fetch every target of ``query`` from the sources that support it.

    Sources are visited in list order; unsupported pairs yield empty lists.

    Returns:
        Dict mapping (activity, metric) to samples sorted by start date
    """
    results = {}
    for activity, metric in query.pairs():
        samples: list[Sample] = []
        for source in sources:
            if source.supports(activity, metric):
                samples.extend(await source.fetch(activity, metric, query.season))
        results[(activity, metric)] = sort_samples(samples)
    return results
