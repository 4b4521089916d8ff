"""Data source reading samples and athlete attributes from the local database."""

import asyncio
from datetime import date

from dateutil.relativedelta import relativedelta
from sqlalchemy.orm import sessionmaker

from db.models import AthleteRecord, SampleRecord
from trimp.profile import BiologicalGender
from trimp.samples import ActivityKind, MetricKind, Sample, Season
from trimp.units import (
    BEATS_PER_MINUTE,
    KILOGRAMS,
    METERS,
    WATTS,
    Measurement,
    Unit,
    UnitRegistry,
    default_registry,
)

from sources.base import DataSource

ATTRIBUTE_METRICS = (
    MetricKind.BIOLOGICAL_GENDER | MetricKind.AGE | MetricKind.HEIGHT | MetricKind.WEIGHT
)


class DatabaseDataSource(DataSource):
    """Serves samples stored in the ``samples`` table.

    Queries run in a worker thread so the event loop is not blocked. When
    ``athlete_name`` is given, the matching ``athletes`` row provides gender,
    age, height and weight (read fresh on every call).
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        name: str | None = None,
        activities: ActivityKind = ActivityKind.RUNNING | ActivityKind.CYCLING,
        metrics: MetricKind = MetricKind.HEART_RATE | MetricKind.RESTING_HEART_RATE,
        athlete_name: str | None = None,
        registry: UnitRegistry | None = None,
    ):
        self.session_factory = session_factory
        self.name = name or "database"
        self.source_filter = name
        self.athlete_name = athlete_name
        self.registry = registry or default_registry()
        self._activities = activities
        self._metrics = metrics | ATTRIBUTE_METRICS if athlete_name else metrics

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

    def _to_sample(self, record: SampleRecord) -> Sample:
        return Sample(
            activity=ActivityKind(record.activity_kind),
            metric=MetricKind(record.metric_kind),
            start_date=record.start_time,
            end_date=record.end_time,
            measurement=Measurement(record.value, self.registry.get(record.unit)),
        )

    def _query_samples(
        self,
        activity: ActivityKind,
        metric: MetricKind,
        season: Season,
    ) -> list[Sample]:
        with self.session_factory() as session:
            query = (
                session.query(SampleRecord)
                .filter(SampleRecord.metric_kind == int(metric))
                .filter(SampleRecord.activity_kind.op("&")(int(activity)) != 0)
                .filter(SampleRecord.start_time >= season.start_date)
                .filter(SampleRecord.start_time < season.end_date)
            )
            if self.source_filter:
                query = query.filter(SampleRecord.source == self.source_filter)

            records = query.order_by(SampleRecord.start_time, SampleRecord.id).all()
            return [self._to_sample(r) for r in records]

    async def fetch(
        self,
        activity: ActivityKind,
        metric: MetricKind,
        season: Season,
    ) -> list[Sample]:
        return await asyncio.to_thread(self._query_samples, activity, metric, season)

    def _athlete(self) -> dict | None:
        if not self.athlete_name:
            return None

        with self.session_factory() as session:
            record = session.query(AthleteRecord).filter_by(name=self.athlete_name).first()
            if record is None:
                return None
            return {
                "gender": record.gender,
                "birth_date": record.birth_date,
                "height_m": record.height_m,
                "weight_kg": record.weight_kg,
            }

    def biological_gender(self) -> BiologicalGender | None:
        athlete = self._athlete()
        if not athlete or not athlete["gender"]:
            return None
        try:
            return BiologicalGender(athlete["gender"].strip().lower())
        except ValueError:
            return BiologicalGender.OTHER

    def age(self, today: date | None = None) -> int | None:
        athlete = self._athlete()
        if not athlete or athlete["birth_date"] is None:
            return None
        return relativedelta(today or date.today(), athlete["birth_date"]).years

    async def current_height(self) -> Measurement | None:
        athlete = await asyncio.to_thread(self._athlete)
        if not athlete or athlete["height_m"] is None:
            return None
        return Measurement(athlete["height_m"], METERS)

    async def current_weight(self) -> Measurement | None:
        athlete = await asyncio.to_thread(self._athlete)
        if not athlete or athlete["weight_kg"] is None:
            return None
        return Measurement(athlete["weight_kg"], KILOGRAMS)
