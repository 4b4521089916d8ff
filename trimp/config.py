"""Configuration constants for training load computation."""

from dataclasses import dataclass

# Banister TRIMP constants (Training Impulse)
# TRIMP = duration × HRr × coefficient × e^(exponent × HRr)
BANISTER_MALE_COEFFICIENT = 0.64
BANISTER_MALE_EXPONENT = 1.92
BANISTER_FEMALE_COEFFICIENT = 0.86
BANISTER_FEMALE_EXPONENT = 1.67

# Edwards bands as fraction of max HR, multiplier = band index + 1
# Z1: 50-60%, Z2: 60-70%, Z3: 70-80%, Z4: 80-90%, Z5: 90-100%
EDWARDS_BAND_EDGES = (0.5, 0.6, 0.7, 0.8, 0.9, 1.0)
EDWARDS_MULTIPLIERS = (1.0, 2.0, 3.0, 4.0, 5.0)

# Lucia zones: below VT1, VT1-VT2, above VT2
LUCIA_MULTIPLIERS = (1.0, 2.0, 3.0)

# Acute:Chronic workload windows (days)
ACUTE_DAYS = 7
CHRONIC_DAYS = 28

# Conventional ACWR interpretation bands (informational only)
ACWR_LOW = 0.8
ACWR_HIGH = 1.3
ACWR_SPIKE = 1.5

# Athlete profile lookback windows
RESTING_HR_LOOKBACK_DAYS = 30
MAX_HR_LOOKBACK_MONTHS = 6

# Age-based max HR estimate (220 - age)
AGE_MAX_HR_CONSTANT = 220.0

# Training zones as fraction of max HR
HR_ZONE_DEFINITIONS = (
    (0.50, 0.60, "Recovery"),
    (0.60, 0.70, "Aerobic Base"),
    (0.70, 0.80, "Tempo"),
    (0.80, 0.90, "Lactate Threshold"),
    (0.90, 1.00, "VO2 Max"),
)

# BMI category thresholds
BMI_UNDERWEIGHT_MAX = 18.5
BMI_NORMAL_MAX = 25.0
BMI_OVERWEIGHT_MAX = 30.0

# Newton-Raphson limits for polynomial unit inversion
POLYNOMIAL_MAX_ITERATIONS = 100
POLYNOMIAL_TOLERANCE = 1e-6


@dataclass(frozen=True)
class MethodCalibration:
    """Empirical constants bridging one TRIMP method to intensity-weighted minutes.

    base = value / divisor * intensity * scale
    """

    divisor: float
    intensity: float = 0.65
    scale: float = 100.0


# Placeholder calibrations, no calibration data attached.
# Banister: at HRr ≈ 0.6 TRIMP ≈ duration × 3.0
# Edwards: average zone multiplier ≈ 2.5
# Lucia: average zone multiplier ≈ 2.0
# Training load: ratio 1.0 ≈ 300 intensity minutes per week
DEFAULT_CALIBRATIONS = {
    "banister": MethodCalibration(divisor=3.0),
    "edwards": MethodCalibration(divisor=2.5),
    "lucia": MethodCalibration(divisor=2.0),
    "training_load": MethodCalibration(divisor=1.0, intensity=1.0, scale=300.0),
}
