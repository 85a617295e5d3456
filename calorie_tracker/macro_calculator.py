"""Energy and macro target calculation.

Uses:
- Mifflin-St Jeor equation for Basal Metabolic Rate (BMR)
- Activity multipliers for Total Daily Energy Expenditure (TDEE)
- A body-weight heuristic for macros: 1 g protein and 0.4 g fat per
  pound, carbohydrates fill the remaining calories

References:
- Mifflin MD, St Jeor ST, et al. (1990). "A new predictive equation for
  resting energy expenditure in healthy individuals." Am J Clin Nutr.
"""

import logging
import math
from typing import Optional

from calorie_tracker import config
from calorie_tracker.config import (
    ACTIVITY_MULTIPLIERS,
    CALORIES_PER_GRAM,
    DEFAULT_ACTIVITY_LEVEL,
    FAT_G_PER_LB,
    PROTEIN_G_PER_LB,
    UNKNOWN_ACTIVITY_POLICIES,
)
from calorie_tracker.models import BiometricInput, EnergyResult, InvalidInputError, MacroTargets
from calorie_tracker.units import ft_in_to_cm, lbs_to_kg, round_half_up

logger = logging.getLogger(__name__)


def calculate_bmr(biometrics: BiometricInput) -> float:
    """Calculate Basal Metabolic Rate using the Mifflin-St Jeor equation.

    Male:   BMR = 10 × weight(kg) + 6.25 × height(cm) − 5 × age(y) + 5
    Female: BMR = 10 × weight(kg) + 6.25 × height(cm) − 5 × age(y) − 161
    """
    weight_kg = lbs_to_kg(biometrics.weight_pounds)
    height_cm = ft_in_to_cm(biometrics.height_feet, biometrics.height_inches)
    bmr = 10 * weight_kg + 6.25 * height_cm - 5 * biometrics.age_years
    if biometrics.sex == "male":
        bmr += 5
    else:
        bmr -= 161
    return bmr


def check_unknown_activity_policy(policy: str) -> str:
    if policy not in UNKNOWN_ACTIVITY_POLICIES:
        raise InvalidInputError(
            "unknown_activity",
            f"must be one of {', '.join(UNKNOWN_ACTIVITY_POLICIES)}, got {policy!r}",
        )
    return policy


def activity_multiplier(activity_level: str, unknown_activity: Optional[str] = None) -> float:
    """Look up the TDEE multiplier for an activity level.

    Unknown levels follow ``unknown_activity`` (default
    ``config.UNKNOWN_ACTIVITY_POLICY``): "fallback" uses the sedentary
    multiplier, "reject" raises InvalidInputError.
    """
    policy = check_unknown_activity_policy(unknown_activity or config.UNKNOWN_ACTIVITY_POLICY)

    if activity_level in ACTIVITY_MULTIPLIERS:
        return ACTIVITY_MULTIPLIERS[activity_level]

    if policy == "reject":
        raise InvalidInputError(
            "activity_level",
            f"must be one of {', '.join(ACTIVITY_MULTIPLIERS)}, got {activity_level!r}",
        )
    logger.warning("Unknown activity level %r, using %s multiplier", activity_level, DEFAULT_ACTIVITY_LEVEL)
    return ACTIVITY_MULTIPLIERS[DEFAULT_ACTIVITY_LEVEL]


def estimate_tdee(biometrics: BiometricInput, unknown_activity: Optional[str] = None) -> EnergyResult:
    """Estimate Total Daily Energy Expenditure.

    TDEE = BMR × activity multiplier, rounded half-up to whole calories.
    """
    bmr = calculate_bmr(biometrics)
    multiplier = activity_multiplier(biometrics.activity_level, unknown_activity)
    tdee = round_half_up(bmr * multiplier)
    logger.debug("BMR %.2f x %.3f -> TDEE %d", bmr, multiplier, tdee)
    return EnergyResult(tdee_calories=tdee, bmr=bmr, activity_multiplier=multiplier)


def _check_amount(name: str, value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidInputError(name, f"must be a finite number, got {value!r}")
    if value < 0:
        raise InvalidInputError(name, "must not be negative")
    return float(value)


def allocate_macros(tdee_calories: float, weight_pounds: float) -> MacroTargets:
    """Split a TDEE into protein, fat and carbohydrate gram targets.

    Steps:
    1. Protein = 1.0 g per lb, fat = 0.4 g per lb
    2. Subtract their calories (4/9 cal/g) from the TDEE, using the
       unrounded gram amounts
    3. Remaining calories / 4 = carbohydrate grams
    4. Round each gram value half-up

    Carbs go negative when protein and fat alone exceed the TDEE. The value
    is returned as-is and flagged by ``MacroTargets.has_carb_deficit``.
    """
    tdee_calories = _check_amount("tdee_calories", tdee_calories)
    weight_pounds = _check_amount("weight_pounds", weight_pounds)

    protein = weight_pounds * PROTEIN_G_PER_LB
    fat = weight_pounds * FAT_G_PER_LB
    protein_calories = protein * CALORIES_PER_GRAM["protein"]
    fat_calories = fat * CALORIES_PER_GRAM["fat"]
    remaining_calories = tdee_calories - (protein_calories + fat_calories)
    carbs = remaining_calories / CALORIES_PER_GRAM["carbs"]

    targets = MacroTargets(
        calories=round_half_up(tdee_calories),
        protein_g=round_half_up(protein),
        fat_g=round_half_up(fat),
        carbs_g=round_half_up(carbs),
    )
    if targets.has_carb_deficit:
        logger.warning(
            "Protein and fat targets exceed %d kcal at %.1f lbs; carbohydrate target is %dg",
            targets.calories, weight_pounds, targets.carbs_g,
        )
    return targets


def format_targets(targets: MacroTargets, energy: Optional[EnergyResult] = None) -> str:
    """Format macro targets for display."""
    lines = []
    if energy is not None:
        lines.append(f"BMR:      {energy.bmr:.0f} kcal")
        lines.append(f"Activity: x{energy.activity_multiplier:g}")
    lines.extend([
        f"TDEE:     {targets.calories} kcal/day",
        f"Protein:  {targets.protein_g}g ({targets.protein_g * 4} kcal)",
        f"Fat:      {targets.fat_g}g ({targets.fat_g * 9} kcal)",
        f"Carbs:    {targets.carbs_g}g ({targets.carbs_g * 4} kcal)",
    ])
    if targets.has_carb_deficit:
        lines.append("Warning:  protein and fat targets exceed your TDEE")
    return "\n".join(lines)
