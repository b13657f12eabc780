"""Mass and length unit conversions."""

import math
from decimal import ROUND_HALF_UP, Decimal

LB_PER_KG = 2.20462
CM_PER_INCH = 2.54
INCHES_PER_FOOT = 12


def kg_to_lb(kg: float) -> float:
    """Convert kilograms to pounds, rounded to the nearest 0.5 lb."""
    return round_half_up(kg * LB_PER_KG * 2, 0) / 2


def lb_to_kg(lb: float) -> float:
    """Convert pounds to kilograms, rounded to 0.1 kg."""
    return round_half_up(lb / LB_PER_KG, 1)


def cm_to_feet_inches(cm: float) -> tuple[int, int]:
    """Convert centimeters to whole feet and rounded inches.

    Inches that round up to a full foot are carried into feet, so the result
    is never ``(feet, 12)``.
    """
    total_inches = cm / CM_PER_INCH
    feet = math.floor(total_inches / INCHES_PER_FOOT)
    inches = int(round_half_up(total_inches % INCHES_PER_FOOT, 0))
    if inches == INCHES_PER_FOOT:
        feet += 1
        inches = 0
    return feet, inches


def feet_inches_to_cm(feet: int, inches: float) -> int:
    """Convert feet and inches to whole centimeters."""
    return int(round_half_up((feet * INCHES_PER_FOOT + inches) * CM_PER_INCH, 0))


def round_half_up(value: float, digits: int) -> float:
    """Round with ties going up, the way UI pickers expect."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
