"""Tests for units, measurements and the conversion network."""

import pytest

from trimp.config import MethodCalibration
from trimp.errors import IncompatibleUnitsError, UnknownUnitError
from trimp.units import (
    BANISTER_TRIMP,
    BEATS_PER_MINUTE,
    CENTIMETERS,
    EDWARDS_TRIMP,
    FEET,
    HERTZ,
    KILOGRAMS,
    LUCIA_TRIMP,
    METERS,
    POUNDS,
    TRAINING_LOAD_RATIO,
    TRIMP,
    WATTS,
    LinearConverter,
    Measurement,
    MethodConverter,
    PolynomialConverter,
    QuantityFamily,
    TrimpMethod,
    default_registry,
    polynomial_unit,
)


class TestLinearConversion:
    def test_bpm_to_hertz(self):
        assert Measurement(120, BEATS_PER_MINUTE).converted(HERTZ).value == pytest.approx(2.0)

    def test_round_trip_is_exact(self):
        for value in (0.0, 1.0, 47.3, 180.0, 12345.678):
            there = Measurement(value, FEET).converted(CENTIMETERS)
            back = there.converted(FEET)
            assert back.value == pytest.approx(value, abs=1e-9)

    def test_same_unit_returns_same_measurement(self):
        measurement = Measurement(150, BEATS_PER_MINUTE)
        assert measurement.converted(BEATS_PER_MINUTE) is measurement

    def test_pounds_to_kilograms(self):
        assert Measurement(100, POUNDS).converted(KILOGRAMS).value == pytest.approx(45.359237)

    def test_constant_offset(self):
        converter = LinearConverter(1.8, 32.0)
        assert converter.to_base(100) == pytest.approx(212.0)
        assert converter.from_base(212.0) == pytest.approx(100.0)

    def test_zero_coefficient_rejected(self):
        with pytest.raises(ValueError):
            LinearConverter(0.0)


class TestIncompatibleUnits:
    def test_cross_family_raises(self):
        with pytest.raises(IncompatibleUnitsError) as excinfo:
            Measurement(150, BEATS_PER_MINUTE).converted(WATTS)
        assert excinfo.value.source is BEATS_PER_MINUTE
        assert "bpm" in str(excinfo.value)

    def test_training_load_is_not_a_duration(self):
        with pytest.raises(IncompatibleUnitsError):
            Measurement(100, BANISTER_TRIMP).converted(METERS)

    def test_is_a_type_error(self):
        assert issubclass(IncompatibleUnitsError, TypeError)


class TestMethodConversion:
    def test_banister_to_base(self):
        # 90 / 3.0 * 0.65 * 100
        assert Measurement(90, BANISTER_TRIMP).converted(TRIMP).value == pytest.approx(1950.0)

    def test_edwards_and_lucia_divisors(self):
        assert MethodConverter(TrimpMethod.EDWARDS).to_base(2.5) == pytest.approx(65.0)
        assert MethodConverter(TrimpMethod.LUCIA).to_base(2.0) == pytest.approx(65.0)

    def test_training_load_ratio_uses_weekly_baseline(self):
        assert Measurement(1.0, TRAINING_LOAD_RATIO).converted(TRIMP).value == pytest.approx(300.0)

    def test_between_methods(self):
        edwards = Measurement(150, BANISTER_TRIMP).converted(EDWARDS_TRIMP)
        assert edwards.value == pytest.approx(125.0)
        assert edwards.converted(BANISTER_TRIMP).value == pytest.approx(150.0)

    def test_round_trip(self):
        for unit in (BANISTER_TRIMP, EDWARDS_TRIMP, LUCIA_TRIMP, TRAINING_LOAD_RATIO):
            back = Measurement(42.0, unit).converted(TRIMP).converted(unit)
            assert back.value == pytest.approx(42.0)

    def test_custom_calibration(self):
        converter = MethodConverter(TrimpMethod.BANISTER, MethodCalibration(divisor=2.0, intensity=1.0, scale=1.0))
        assert converter.to_base(10.0) == pytest.approx(5.0)
        assert converter.from_base(5.0) == pytest.approx(10.0)


class TestPolynomialConversion:
    def test_forward_evaluates_polynomial(self):
        converter = PolynomialConverter([1.0, 2.0, 3.0])
        assert converter.to_base(2.0) == pytest.approx(1 + 4 + 12)

    def test_derivative(self):
        converter = PolynomialConverter([1.0, 2.0, 3.0])
        assert converter.derivative(2.0) == pytest.approx(2 + 12)

    def test_inverse_of_quadratic(self):
        converter = PolynomialConverter([5.0, 1.5, 0.02])
        target = converter.to_base(40.0)
        assert converter.from_base(target) == pytest.approx(40.0, abs=1e-4)

    def test_inverse_of_cubic(self):
        converter = PolynomialConverter([0.0, 1.0, 0.0, 0.001])
        target = converter.to_base(12.0)
        assert converter.from_base(target) == pytest.approx(12.0, abs=1e-4)

    def test_iteration_is_bounded(self):
        # x^2 + 1 has no real root for a target of 0; Newton never converges
        converter = PolynomialConverter([1.0, 0.0, 1.0], max_iterations=25)
        result = converter.from_base(0.0)
        assert isinstance(result, float)

    def test_flat_derivative_stops(self):
        converter = PolynomialConverter([3.0])
        assert converter.from_base(7.0) == 7.0

    def test_empty_coefficients_rejected(self):
        with pytest.raises(ValueError):
            PolynomialConverter([])

    def test_polynomial_unit_converts_to_methods(self):
        calibrated = polynomial_unit("HR-TSS", [0.0, 2.0])
        measurement = Measurement(100.0, calibrated).converted(TRIMP)
        assert measurement.value == pytest.approx(200.0)
        assert measurement.converted(calibrated).value == pytest.approx(100.0, abs=1e-4)


class TestRegistry:
    def test_lookup_by_symbol(self):
        registry = default_registry()
        assert registry.get("bpm") is BEATS_PER_MINUTE
        assert registry.get("E-TRIMP") is EDWARDS_TRIMP
        assert "TL-Ratio" in registry

    def test_base_units(self):
        registry = default_registry()
        assert registry.base(QuantityFamily.FREQUENCY) is HERTZ
        assert registry.base(QuantityFamily.TRAINING_LOAD) is TRIMP

    def test_unknown_symbol(self):
        with pytest.raises(UnknownUnitError):
            default_registry().get("furlongs")

    def test_units_by_family(self):
        symbols = {u.symbol for u in default_registry().units(QuantityFamily.TRAINING_LOAD)}
        assert symbols == {"TRIMP", "B-TRIMP", "E-TRIMP", "L-TRIMP", "TL-Ratio"}

    def test_convert_by_symbol(self):
        registry = default_registry()
        result = registry.convert(Measurement(60, BEATS_PER_MINUTE), "Hz")
        assert result.value == pytest.approx(1.0)

    def test_calibration_override(self):
        registry = default_registry({"banister": MethodCalibration(divisor=1.0, intensity=1.0, scale=1.0)})
        custom = registry.get("B-TRIMP")
        assert custom == BANISTER_TRIMP
        assert Measurement(10.0, custom).converted(TRIMP).value == pytest.approx(10.0)

    def test_symbol_clash_across_families(self):
        registry = default_registry()
        with pytest.raises(ValueError):
            registry.register(polynomial_unit("bpm", [0.0, 1.0]))
