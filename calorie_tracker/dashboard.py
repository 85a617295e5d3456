"""Daily progress dashboard: targets vs. logged intake, weight trend and logging streak."""

import logging
from datetime import date, timedelta
from typing import Optional

from calorie_tracker.config import MEAL_TYPES, STREAK_DAYS
from calorie_tracker.db import DB_PATH
from calorie_tracker.macro_calculator import allocate_macros
from calorie_tracker.models import Dashboard, UserProfile
from calorie_tracker.tracker import (
    entries_by_meal,
    get_food_entries,
    get_food_entries_between,
    get_weight_history,
    totals,
    totals_by_meal,
)

logger = logging.getLogger(__name__)


def logging_streak(user_id: int, today: date, days: int = STREAK_DAYS, db_path: str = DB_PATH) -> list:
    """Return [(date, logged)] for the last ``days`` days ending today, oldest first."""
    start = today - timedelta(days=days - 1)
    logged_days = {e.entry_date for e in get_food_entries_between(user_id, start, today, db_path)}
    return [(start + timedelta(days=i), start + timedelta(days=i) in logged_days) for i in range(days)]


def build_dashboard(user: UserProfile, day: Optional[date] = None, db_path: str = DB_PATH) -> Optional[Dashboard]:
    """Assemble the dashboard for a user and day.

    Returns None when the user has not completed the TDEE quiz yet.
    """
    if not user.has_completed_quiz:
        logger.debug("User %s has no TDEE yet, no dashboard", user.id)
        return None
    if day is None:
        day = date.today()

    targets = allocate_macros(user.tdee, user.weight_lbs)
    entries = get_food_entries(user.id, day, db_path=db_path)

    return Dashboard(
        user=user,
        day=day,
        targets=targets,
        totals=totals(entries),
        meals=entries_by_meal(entries),
        weight_history=get_weight_history(user.id, newest_first=False, db_path=db_path),
        streak=logging_streak(user.id, day, db_path=db_path),
    )


def format_dashboard(dashboard: Dashboard) -> str:
    """Format a dashboard for display."""
    t = dashboard.targets
    n = dashboard.totals
    pct = dashboard.progress_pct()

    lines = [
        f"Dashboard: {dashboard.user.name} - {dashboard.day.isoformat()}",
        "=" * 45,
        f"Calories: {n.calories:.0f} / {t.calories} kcal ({pct['calories']}%)",
        f"Remaining: {dashboard.calories_remaining:.0f} kcal",
        "",
        f"Protein:  {n.protein_g:.0f}g / {t.protein_g}g ({pct['protein']}%)",
        f"Carbs:    {n.carbs_g:.0f}g / {t.carbs_g}g ({pct['carbs']}%)",
        f"Fat:      {n.fat_g:.0f}g / {t.fat_g}g ({pct['fat']}%)",
    ]
    if t.has_carb_deficit:
        lines.append("Warning: protein and fat targets exceed your TDEE")

    meal_totals = totals_by_meal([e for entries in dashboard.meals.values() for e in entries])
    lines.append("\nBy meal:")
    for meal_type in MEAL_TYPES:
        count = len(dashboard.meals.get(meal_type, []))
        lines.append(f"  {meal_type.capitalize():<10} {meal_totals[meal_type].calories:>6.0f} kcal ({count} item(s))")

    if dashboard.weight_history:
        latest = dashboard.weight_history[-1]
        first = dashboard.weight_history[0]
        change = latest.weight_lbs - first.weight_lbs
        lines.append(
            f"\nWeight:   {latest.weight_lbs:.1f} lbs on {latest.entry_date.isoformat()} "
            f"({change:+.1f} lbs since {first.entry_date.isoformat()})"
        )
    else:
        lines.append("\nWeight:   no entries yet")

    marks = "".join("x" if logged else "." for _, logged in dashboard.streak)
    lines.append(f"Streak:   [{marks}] logged food on {dashboard.days_logged} of the last {len(dashboard.streak)} days")
    return "\n".join(lines)
