"""Units, measurements and the training load conversion network.

Every unit belongs to a quantity family and owns a converter that maps its
values to and from the family's base unit. Converting between two units of
the same family goes through the base: ``target.from_base(source.to_base(x))``.

Training load units share the "intensity-weighted minutes" base (``TRIMP``).
Method units (Banister, Edwards, Lucia, training load ratio) reach that base
through fixed empirical calibrations; these are an order-of-magnitude bridge
for trend comparison, not an exact inversion of each method's algorithm.
"""

from dataclasses import dataclass, field
from enum import Enum

from trimp.config import (
    DEFAULT_CALIBRATIONS,
    POLYNOMIAL_MAX_ITERATIONS,
    POLYNOMIAL_TOLERANCE,
    MethodCalibration,
)
from trimp.errors import IncompatibleUnitsError, UnknownUnitError


class QuantityFamily(Enum):
    """Physical quantity a unit measures."""

    FREQUENCY = "frequency"
    POWER = "power"
    LENGTH = "length"
    MASS = "mass"
    DURATION = "duration"
    TRAINING_LOAD = "training_load"


class TrimpMethod(Enum):
    """Training load calculation methods with their own scale."""

    BANISTER = "banister"
    EDWARDS = "edwards"
    LUCIA = "lucia"
    TRAINING_LOAD = "training_load"


class LinearConverter:
    """Scalar conversion: base = value × coefficient + constant."""

    def __init__(self, coefficient: float, constant: float = 0.0):
        if coefficient == 0:
            raise ValueError("Linear converter coefficient must be non-zero")
        self.coefficient = coefficient
        self.constant = constant

    def to_base(self, value: float) -> float:
        return value * self.coefficient + self.constant

    def from_base(self, value: float) -> float:
        return (value - self.constant) / self.coefficient

    def __repr__(self) -> str:
        return f"LinearConverter({self.coefficient!r}, {self.constant!r})"


class MethodConverter:
    """Approximate conversion between a TRIMP method and intensity-weighted minutes."""

    def __init__(
        self,
        method: TrimpMethod,
        calibration: MethodCalibration | None = None,
    ):
        self.method = method
        self.calibration = calibration or DEFAULT_CALIBRATIONS[method.value]

    def to_base(self, value: float) -> float:
        cal = self.calibration
        estimated_duration = value / cal.divisor
        return estimated_duration * cal.intensity * cal.scale

    def from_base(self, value: float) -> float:
        cal = self.calibration
        estimated_duration = value / (cal.intensity * cal.scale)
        return estimated_duration * cal.divisor

    def __repr__(self) -> str:
        return f"MethodConverter({self.method.value}, {self.calibration!r})"


class PolynomialConverter:
    """Empirically fitted conversion: base = a0 + a1·x + a2·x² + ...

    The reverse direction has no closed form, so it is solved with
    Newton-Raphson starting from the target value. Convergence is only
    expected for well-conditioned, low-degree fits; iteration is bounded
    and the last estimate is returned either way.
    """

    def __init__(
        self,
        coefficients,
        max_iterations: int = POLYNOMIAL_MAX_ITERATIONS,
        tolerance: float = POLYNOMIAL_TOLERANCE,
    ):
        coefficients = tuple(float(c) for c in coefficients)
        if not coefficients:
            raise ValueError("Polynomial converter needs at least one coefficient")
        self.coefficients = coefficients
        self.max_iterations = max_iterations
        self.tolerance = tolerance

    def evaluate(self, x: float) -> float:
        result = 0.0
        for coefficient in reversed(self.coefficients):
            result = result * x + coefficient
        return result

    def derivative(self, x: float) -> float:
        result = 0.0
        for power in range(len(self.coefficients) - 1, 0, -1):
            result = result * x + power * self.coefficients[power]
        return result

    def to_base(self, value: float) -> float:
        return self.evaluate(value)

    def from_base(self, value: float) -> float:
        x = value
        for _ in range(self.max_iterations):
            residual = self.evaluate(x) - value
            if abs(residual) < self.tolerance:
                break
            slope = self.derivative(x)
            if abs(slope) < self.tolerance:
                break
            x -= residual / slope
        return x

    def __repr__(self) -> str:
        return f"PolynomialConverter({list(self.coefficients)!r})"


@dataclass(frozen=True)
class Unit:
    """A named unit within a quantity family."""

    symbol: str
    family: QuantityFamily
    converter: object = field(compare=False, repr=False)
    name: str = field(default="", compare=False)

    def __str__(self) -> str:
        return self.symbol


@dataclass(frozen=True)
class Measurement:
    """A value tagged with its unit."""

    value: float
    unit: Unit

    def converted(self, unit: Unit) -> "Measurement":
        """Express this measurement in another unit of the same family.

        Raises:
            IncompatibleUnitsError: if the units measure different quantities
        """
        if unit.family is not self.unit.family:
            raise IncompatibleUnitsError(self.unit, unit)
        if unit == self.unit:
            return self
        base_value = self.unit.converter.to_base(self.value)
        return Measurement(unit.converter.from_base(base_value), unit)

    def __str__(self) -> str:
        return f"{self.value:.2f} {self.unit.symbol}"


def linear_unit(symbol: str, family: QuantityFamily, coefficient: float = 1.0, name: str = "") -> Unit:
    return Unit(symbol, family, LinearConverter(coefficient), name)


def method_unit(
    symbol: str,
    method: TrimpMethod,
    calibration: MethodCalibration | None = None,
    name: str = "",
) -> Unit:
    return Unit(symbol, QuantityFamily.TRAINING_LOAD, MethodConverter(method, calibration), name)


def polynomial_unit(symbol: str, coefficients, name: str = "") -> Unit:
    """Create an empirically calibrated training load unit."""
    return Unit(symbol, QuantityFamily.TRAINING_LOAD, PolynomialConverter(coefficients), name)


# Frequency
HERTZ = linear_unit("Hz", QuantityFamily.FREQUENCY, name="hertz")
BEATS_PER_MINUTE = linear_unit("bpm", QuantityFamily.FREQUENCY, 1.0 / 60.0, "beats per minute")

# Power
WATTS = linear_unit("W", QuantityFamily.POWER, name="watts")
KILOWATTS = linear_unit("kW", QuantityFamily.POWER, 1000.0, "kilowatts")

# Length
METERS = linear_unit("m", QuantityFamily.LENGTH, name="meters")
CENTIMETERS = linear_unit("cm", QuantityFamily.LENGTH, 0.01, "centimeters")
FEET = linear_unit("ft", QuantityFamily.LENGTH, 0.3048, "feet")
INCHES = linear_unit("in", QuantityFamily.LENGTH, 0.0254, "inches")

# Mass
KILOGRAMS = linear_unit("kg", QuantityFamily.MASS, name="kilograms")
GRAMS = linear_unit("g", QuantityFamily.MASS, 0.001, "grams")
POUNDS = linear_unit("lb", QuantityFamily.MASS, 0.45359237, "pounds")

# Duration
SECONDS = linear_unit("s", QuantityFamily.DURATION, name="seconds")
MINUTES = linear_unit("min", QuantityFamily.DURATION, 60.0, "minutes")
HOURS = linear_unit("h", QuantityFamily.DURATION, 3600.0, "hours")

# Training load, base is intensity-weighted minutes
TRIMP = linear_unit("TRIMP", QuantityFamily.TRAINING_LOAD, name="intensity-weighted minutes")
BANISTER_TRIMP = method_unit("B-TRIMP", TrimpMethod.BANISTER, name="Banister TRIMP")
EDWARDS_TRIMP = method_unit("E-TRIMP", TrimpMethod.EDWARDS, name="Edwards TRIMP")
LUCIA_TRIMP = method_unit("L-TRIMP", TrimpMethod.LUCIA, name="Lucia TRIMP")
TRAINING_LOAD_RATIO = method_unit("TL-Ratio", TrimpMethod.TRAINING_LOAD, name="Acute:Chronic ratio")

BASE_UNITS = (HERTZ, WATTS, METERS, KILOGRAMS, SECONDS, TRIMP)
DERIVED_UNITS = (
    BEATS_PER_MINUTE,
    KILOWATTS,
    CENTIMETERS,
    FEET,
    INCHES,
    GRAMS,
    POUNDS,
    MINUTES,
    HOURS,
)
METHOD_UNITS = {
    TrimpMethod.BANISTER: BANISTER_TRIMP,
    TrimpMethod.EDWARDS: EDWARDS_TRIMP,
    TrimpMethod.LUCIA: LUCIA_TRIMP,
    TrimpMethod.TRAINING_LOAD: TRAINING_LOAD_RATIO,
}


class UnitRegistry:
    """Units addressable by symbol, with one base unit per family."""

    def __init__(self):
        self._units: dict[str, Unit] = {}
        self._bases: dict[QuantityFamily, Unit] = {}

    def register(self, unit: Unit, base: bool = False) -> Unit:
        existing = self._units.get(unit.symbol)
        if existing is not None and existing.family is not unit.family:
            raise ValueError(
                f"Symbol {unit.symbol} already registered for {existing.family.value}"
            )
        self._units[unit.symbol] = unit
        if base:
            self._bases[unit.family] = unit
        return unit

    def get(self, symbol: str) -> Unit:
        try:
            return self._units[symbol]
        except KeyError:
            raise UnknownUnitError(symbol) from None

    def base(self, family: QuantityFamily) -> Unit:
        try:
            return self._bases[family]
        except KeyError:
            raise UnknownUnitError(family.value) from None

    def units(self, family: QuantityFamily | None = None) -> list[Unit]:
        return [u for u in self._units.values() if family is None or u.family is family]

    def convert(self, measurement: Measurement, symbol: str) -> Measurement:
        return measurement.converted(self.get(symbol))

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._units


def default_registry(calibrations: dict[str, MethodCalibration] | None = None) -> UnitRegistry:
    """Build the registry of built-in units.

    Args:
        calibrations: Optional per-method overrides keyed by method name
            ("banister", "edwards", "lucia", "training_load")

    Returns:
        UnitRegistry with base, derived and method units registered
    """
    registry = UnitRegistry()
    for unit in BASE_UNITS:
        registry.register(unit, base=True)
    for unit in DERIVED_UNITS:
        registry.register(unit)

    calibrations = calibrations or {}
    for method, unit in METHOD_UNITS.items():
        if method.value in calibrations:
            unit = method_unit(unit.symbol, method, calibrations[method.value], unit.name)
        registry.register(unit)

    return registry
