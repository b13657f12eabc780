"""Body-mass index computation and classification."""

from enum import StrEnum

from foodlens.domain.errors import InvalidMeasurement
from foodlens.domain.units import LB_PER_KG, round_half_up

WEIGHT_UNITS = frozenset({"kg", "lb"})
HEIGHT_UNITS = frozenset({"cm", "ft"})

UNDERWEIGHT_BELOW = 18.5
NORMAL_BELOW = 25.0
OVERWEIGHT_BELOW = 30.0


class BMICategory(StrEnum):
    """BMI classification bands."""

    UNDERWEIGHT = "Underweight"
    NORMAL = "Normal"
    OVERWEIGHT = "Overweight"
    OBESE = "Obese"


def compute_bmi(
    weight: float | None,
    height: float | None,
    weight_unit: str = "kg",
    height_unit: str = "cm",
) -> float:
    """Return BMI rounded to one decimal place.

    ``height`` is always the centimeter-equivalent value; ``height_unit`` only
    records how the user entered it.
    """
    if weight is None or height is None:
        raise InvalidMeasurement("Weight and height are required")
    if weight <= 0 or height <= 0:
        raise InvalidMeasurement("Weight and height must be positive")
    if weight_unit not in WEIGHT_UNITS:
        raise InvalidMeasurement(f"Unsupported weight unit: {weight_unit}")
    if height_unit not in HEIGHT_UNITS:
        raise InvalidMeasurement(f"Unsupported height unit: {height_unit}")

    weight_kg = weight / LB_PER_KG if weight_unit == "lb" else weight
    height_m = height / 100
    return round_half_up(weight_kg / (height_m * height_m), 1)


def classify(bmi: float) -> BMICategory:
    """Classify a BMI value; each band includes its lower bound."""
    if bmi < UNDERWEIGHT_BELOW:
        return BMICategory.UNDERWEIGHT
    if bmi < NORMAL_BELOW:
        return BMICategory.NORMAL
    if bmi < OVERWEIGHT_BELOW:
        return BMICategory.OVERWEIGHT
    return BMICategory.OBESE
