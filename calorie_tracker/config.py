"""Application configuration and constants."""

import os

# Database
DB_DIR = os.path.join(os.path.expanduser("~"), ".calorie_tracker")
DB_PATH = os.environ.get("CALORIE_TRACKER_DB", os.path.join(DB_DIR, "calorie_tracker.db"))

# Logging
LOG_LEVEL = os.environ.get("CALORIE_TRACKER_LOG_LEVEL", "WARNING").upper()

# What to do with an activity level that has no multiplier:
#   "fallback" - use the sedentary multiplier and log a warning
#   "reject"   - raise InvalidInputError
UNKNOWN_ACTIVITY_POLICY = os.environ.get("CALORIE_TRACKER_UNKNOWN_ACTIVITY", "fallback").lower()
UNKNOWN_ACTIVITY_POLICIES = ("fallback", "reject")

# Unit conversions (imperial input, metric inside the BMR formula)
KG_PER_LB = 0.453592
CM_PER_INCH = 2.54
INCHES_PER_FOOT = 12

# Activity level multipliers for TDEE calculation
DEFAULT_ACTIVITY_LEVEL = "sedentary"
ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "lightly-active": 1.375,
    "active": 1.55,
    "very-active": 1.725,
}

ACTIVITY_DESCRIPTIONS = {
    "sedentary": "Little or no exercise",
    "lightly-active": "Light exercise 1-3 days/week",
    "active": "Moderate exercise 3-5 days/week",
    "very-active": "Hard exercise 6-7 days/week",
}

SEXES = ("male", "female")

# Food log
MEAL_TYPES = ("breakfast", "lunch", "dinner")

# Weight-based macro heuristic (grams per pound of body weight)
PROTEIN_G_PER_LB = 1.0
FAT_G_PER_LB = 0.4

# Macro calorie multipliers (calories per gram)
CALORIES_PER_GRAM = {
    "protein": 4,
    "carbs": 4,
    "fat": 9,
}

# Dashboard
STREAK_DAYS = 7
