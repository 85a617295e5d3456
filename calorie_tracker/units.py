"""Unit conversion and rounding helpers.

Input is imperial (lbs, feet/inches); the BMR formula works in metric.
"""

import math

from calorie_tracker.config import CM_PER_INCH, INCHES_PER_FOOT, KG_PER_LB


def lbs_to_kg(lbs: float) -> float:
    """Convert pounds to kilograms."""
    return lbs * KG_PER_LB


def total_inches(feet: int, inches: int) -> int:
    return feet * INCHES_PER_FOOT + inches


def ft_in_to_cm(feet: int, inches: int) -> float:
    """Convert feet and inches to centimeters."""
    return total_inches(feet, inches) * CM_PER_INCH


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward positive infinity.

    round_half_up(2.5) == 3, round_half_up(-2.5) == -2. The built-in
    round() uses banker's rounding and would give 2 for both. Adding 0.5
    before flooring is avoided: 0.49999999999999994 + 0.5 is exactly 1.0.
    """
    whole = math.floor(value)
    return int(whole + 1 if value - whole >= 0.5 else whole)
