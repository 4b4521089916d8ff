"""Error types raised by load calculators and the unit network."""


class TrimpError(Exception):
    """Base class for training load computation failures."""


class NoSupportedActivities(TrimpError):
    """No data source declares support for the required activities and metric."""

    def __init__(self, activities):
        self.activities = activities
        super().__init__(f"No data source supports activities: {activities!r}")


class NoSupportedMetrics(TrimpError):
    """Supporting sources returned no samples for the required metric."""

    def __init__(self, metrics):
        self.metrics = metrics
        super().__init__(f"No samples available for metric: {metrics!r}")


class MissingRequiredParameter(TrimpError):
    """A physiological input needed by a calculator is unavailable or invalid."""


class InvalidHeartRateReserve(MissingRequiredParameter):
    """Heart rate reserve fell outside [0, 1]."""

    def __init__(self, hr_reserve: float, message: str | None = None):
        self.hr_reserve = hr_reserve
        super().__init__(
            message or f"Heart rate reserve {hr_reserve:.3f} outside valid range [0, 1]"
        )


class UnknownActivityOption(TrimpError):
    """Activity name could not be mapped to an ActivityKind."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown activity option: {name}")


class UnknownMetricOption(TrimpError):
    """Metric name could not be mapped to a MetricKind."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown metric option: {name}")


class IncompatibleUnitsError(TypeError):
    """Conversion requested between units of different quantity families."""

    def __init__(self, source, target):
        self.source = source
        self.target = target
        super().__init__(
            f"Cannot convert {source.symbol} ({source.family.value}) "
            f"to {target.symbol} ({target.family.value})"
        )


class UnknownUnitError(KeyError):
    """Unit symbol is not registered."""
