"""Data models for the calorie tracking application."""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from calorie_tracker.config import MEAL_TYPES, SEXES
from calorie_tracker.units import round_half_up


class InvalidInputError(ValueError):
    """A user-supplied value is missing, non-numeric or out of range."""

    def __init__(self, field_name: str, message: str):
        super().__init__(f"{field_name}: {message}")
        self.field = field_name


def _coerce_number(data: dict, name: str) -> float:
    raw = data.get(name)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise InvalidInputError(name, "is required")
    if isinstance(raw, bool):
        raise InvalidInputError(name, f"must be a number, got {raw!r}")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidInputError(name, f"must be a number, got {raw!r}") from None
    if not math.isfinite(value):
        raise InvalidInputError(name, f"must be a finite number, got {raw!r}")
    return value


def _coerce_int(data: dict, name: str) -> int:
    value = _coerce_number(data, name)
    if not value.is_integer():
        raise InvalidInputError(name, f"must be a whole number, got {data.get(name)!r}")
    return int(value)


@dataclass(frozen=True)
class BiometricInput:
    """Inputs to the energy estimate, in imperial units."""
    age_years: int
    sex: str  # "male" or "female"
    height_feet: int
    height_inches: int
    weight_pounds: float
    activity_level: str  # sedentary, lightly-active, active, very-active

    def __post_init__(self):
        for name in ("age_years", "height_feet", "height_inches", "weight_pounds"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidInputError(name, f"must be a number, got {value!r}")
            if not math.isfinite(value):
                raise InvalidInputError(name, f"must be a finite number, got {value!r}")
        if self.age_years <= 0:
            raise InvalidInputError("age_years", "must be positive")
        if self.height_feet < 0:
            raise InvalidInputError("height_feet", "must not be negative")
        if not 0 <= self.height_inches <= 11:
            raise InvalidInputError("height_inches", "must be between 0 and 11")
        if self.weight_pounds <= 0:
            raise InvalidInputError("weight_pounds", "must be positive")
        if self.sex not in SEXES:
            raise InvalidInputError("sex", f"must be one of {', '.join(SEXES)}, got {self.sex!r}")
        if not isinstance(self.activity_level, str):
            raise InvalidInputError("activity_level", f"must be a string, got {self.activity_level!r}")

    @classmethod
    def from_form(cls, data: dict) -> "BiometricInput":
        """Build from raw form values (strings or numbers)."""
        sex = data.get("sex")
        if not sex:
            raise InvalidInputError("sex", "is required")
        return cls(
            age_years=_coerce_int(data, "age_years"),
            sex=sex,
            height_feet=_coerce_int(data, "height_feet"),
            height_inches=_coerce_int(data, "height_inches"),
            weight_pounds=_coerce_number(data, "weight_pounds"),
            activity_level=data.get("activity_level") or "",
        )


@dataclass(frozen=True)
class EnergyResult:
    """Estimated daily energy expenditure."""
    tdee_calories: int
    bmr: float
    activity_multiplier: float


@dataclass(frozen=True)
class MacroTargets:
    """Daily gram targets derived from a TDEE and body weight."""
    calories: int
    protein_g: int
    fat_g: int
    carbs_g: int

    @property
    def has_carb_deficit(self) -> bool:
        """True when protein and fat alone exceed the calorie budget."""
        return self.carbs_g < 0


@dataclass
class Nutrition:
    """Calories and macronutrients for one or more food entries."""
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float

    def __add__(self, other: "Nutrition") -> "Nutrition":
        return Nutrition(
            calories=self.calories + other.calories,
            protein_g=self.protein_g + other.protein_g,
            carbs_g=self.carbs_g + other.carbs_g,
            fat_g=self.fat_g + other.fat_g,
        )

    @staticmethod
    def zero() -> "Nutrition":
        return Nutrition(0, 0, 0, 0)

    def macro_percentages(self) -> dict:
        """Return macro percentages based on caloric contribution."""
        if self.calories == 0:
            return {"protein": 0, "carbs": 0, "fat": 0}
        return {
            "protein": (self.protein_g * 4 / self.calories) * 100,
            "carbs": (self.carbs_g * 4 / self.calories) * 100,
            "fat": (self.fat_g * 9 / self.calories) * 100,
        }


@dataclass
class UserProfile:
    """A registered user. Biometrics and TDEE are filled in by the quiz."""
    id: Optional[int]
    name: str
    email: str
    age: Optional[int] = None
    sex: Optional[str] = None
    height_feet: Optional[int] = None
    height_inches: Optional[int] = None
    weight_lbs: Optional[float] = None
    activity_level: Optional[str] = None
    tdee: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def has_completed_quiz(self) -> bool:
        return self.tdee is not None and self.weight_lbs is not None

    def biometrics(self) -> BiometricInput:
        """Return the stored biometrics; raises InvalidInputError if incomplete."""
        return BiometricInput(
            age_years=self.age,
            sex=self.sex,
            height_feet=self.height_feet,
            height_inches=self.height_inches,
            weight_pounds=self.weight_lbs,
            activity_level=self.activity_level or "",
        )


@dataclass
class FoodEntry:
    """A logged food item."""
    id: Optional[int]
    user_id: int
    name: str
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    meal_type: str  # breakfast, lunch, dinner
    entry_date: date
    serving_size: str = ""

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise InvalidInputError("name", "is required")
        if self.meal_type not in MEAL_TYPES:
            raise InvalidInputError(
                "meal_type", f"must be one of {', '.join(MEAL_TYPES)}, got {self.meal_type!r}"
            )

    @property
    def nutrition(self) -> Nutrition:
        return Nutrition(
            calories=self.calories or 0,
            protein_g=self.protein_g or 0,
            carbs_g=self.carbs_g or 0,
            fat_g=self.fat_g or 0,
        )


@dataclass
class WeightEntry:
    """A body weight reading; one per user per day."""
    id: Optional[int]
    user_id: int
    weight_lbs: float
    entry_date: date


@dataclass
class Food:
    """A catalog item with nutrition for one serving."""
    id: Optional[int]
    name: str
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    serving_size: str = ""
    dining_hall: str = ""

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise InvalidInputError("name", "is required")

    @property
    def nutrition(self) -> Nutrition:
        return Nutrition(self.calories, self.protein_g, self.carbs_g, self.fat_g)


@dataclass
class CustomMeal:
    """A user's named combination of catalog foods.

    ``nutrition`` is the sum over ``food_ids`` at the time the meal was saved.
    """
    id: Optional[int]
    user_id: int
    name: str
    food_ids: list = field(default_factory=list)
    nutrition: Nutrition = field(default_factory=Nutrition.zero)


@dataclass
class Dashboard:
    """A day's intake compared against the user's targets."""
    user: UserProfile
    day: date
    targets: MacroTargets
    totals: Nutrition
    meals: dict = field(default_factory=dict)  # meal_type -> list[FoodEntry]
    weight_history: list = field(default_factory=list)  # List[WeightEntry], oldest first
    streak: list = field(default_factory=list)  # [(date, logged)], oldest first

    @property
    def calories_remaining(self) -> float:
        return self.targets.calories - self.totals.calories

    @property
    def days_logged(self) -> int:
        return sum(1 for _, logged in self.streak if logged)

    def progress_pct(self) -> dict:
        """Percent of each target consumed, capped at 100.

        A target that is zero or negative (a carb deficit) reports 0.
        """

        def pct(actual, target):
            if target <= 0:
                return 0
            return min(100, round_half_up(actual / target * 100))

        return {
            "calories": pct(self.totals.calories, self.targets.calories),
            "protein": pct(self.totals.protein_g, self.targets.protein_g),
            "carbs": pct(self.totals.carbs_g, self.targets.carbs_g),
            "fat": pct(self.totals.fat_g, self.targets.fat_g),
        }
