"""Food and body weight logging.

Food entries are grouped by meal type and by calendar date; weight is
recorded once per day.
"""

import logging
import math
from datetime import date
from typing import Optional

from calorie_tracker.config import MEAL_TYPES
from calorie_tracker.db import get_connection, DB_PATH
from calorie_tracker.models import FoodEntry, InvalidInputError, Nutrition, WeightEntry

logger = logging.getLogger(__name__)


def _row_to_food_entry(row) -> FoodEntry:
    return FoodEntry(
        id=row["id"],
        user_id=row["user_id"],
        name=row["name"],
        calories=row["calories"],
        protein_g=row["protein_g"],
        carbs_g=row["carbs_g"],
        fat_g=row["fat_g"],
        meal_type=row["meal_type"],
        entry_date=date.fromisoformat(row["entry_date"]),
        serving_size=row["serving_size"] or "",
    )


def validate_nutrition(n: Nutrition) -> None:
    """Raise InvalidInputError unless every amount is a finite, non-negative number."""
    for name, value in (("calories", n.calories), ("protein_g", n.protein_g),
                        ("carbs_g", n.carbs_g), ("fat_g", n.fat_g)):
        if isinstance(value, bool) or not isinstance(value, (int, float)) \
                or not math.isfinite(value) or value < 0:
            raise InvalidInputError(name, f"must be a non-negative number, got {value!r}")


def log_food(user_id: int, entry: FoodEntry, db_path: str = DB_PATH) -> int:
    """Log a food entry. Returns the entry ID."""
    n = entry.nutrition
    validate_nutrition(n)

    with get_connection(db_path) as conn:
        cursor = conn.execute(
            """INSERT INTO food_entries (user_id, name, calories, protein_g, carbs_g, fat_g,
               serving_size, meal_type, entry_date)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (user_id, entry.name.strip(), n.calories, n.protein_g, n.carbs_g, n.fat_g,
             entry.serving_size, entry.meal_type, entry.entry_date.isoformat()),
        )
        entry_id = cursor.lastrowid
    logger.info("Logged %s for user %d (%s, %s)", entry.name, user_id, entry.meal_type, entry.entry_date)
    return entry_id


def get_food_entries(
    user_id: int,
    day: Optional[date] = None,
    meal_type: Optional[str] = None,
    db_path: str = DB_PATH,
) -> list:
    """Get a user's food entries, optionally for one day and/or one meal."""
    if meal_type is not None and meal_type not in MEAL_TYPES:
        raise InvalidInputError("meal_type", f"must be one of {', '.join(MEAL_TYPES)}, got {meal_type!r}")

    query = "SELECT * FROM food_entries WHERE user_id = ?"
    params = [user_id]
    if day is not None:
        query += " AND entry_date = ?"
        params.append(day.isoformat())
    if meal_type is not None:
        query += " AND meal_type = ?"
        params.append(meal_type)
    query += " ORDER BY entry_date, id"

    with get_connection(db_path) as conn:
        rows = conn.execute(query, params).fetchall()
        return [_row_to_food_entry(row) for row in rows]


def get_food_entries_between(
    user_id: int,
    start_date: date,
    end_date: date,
    db_path: str = DB_PATH,
) -> list:
    """Get all food entries within a date range (inclusive)."""
    with get_connection(db_path) as conn:
        rows = conn.execute(
            """SELECT * FROM food_entries
               WHERE user_id = ? AND entry_date >= ? AND entry_date <= ?
               ORDER BY entry_date, id""",
            (user_id, start_date.isoformat(), end_date.isoformat()),
        ).fetchall()
        return [_row_to_food_entry(row) for row in rows]


def delete_food_entry(entry_id: int, user_id: int, db_path: str = DB_PATH) -> bool:
    """Delete one of a user's food entries. Returns True if deleted."""
    with get_connection(db_path) as conn:
        cursor = conn.execute(
            "DELETE FROM food_entries WHERE id = ? AND user_id = ?", (entry_id, user_id)
        )
        return cursor.rowcount > 0


def totals(entries: list) -> Nutrition:
    """Sum up nutrition across food entries."""
    total = Nutrition.zero()
    for entry in entries:
        total = total + entry.nutrition
    return total


def totals_by_meal(entries: list) -> dict:
    """Nutrition per meal type. Every meal type is present, even if empty."""
    grouped = {meal_type: Nutrition.zero() for meal_type in MEAL_TYPES}
    for entry in entries:
        grouped[entry.meal_type] = grouped[entry.meal_type] + entry.nutrition
    return grouped


def entries_by_meal(entries: list) -> dict:
    grouped = {meal_type: [] for meal_type in MEAL_TYPES}
    for entry in entries:
        grouped[entry.meal_type].append(entry)
    return grouped


def totals_by_date(entries: list) -> dict:
    """Nutrition per calendar date, in date order."""
    grouped = {}
    for entry in sorted(entries, key=lambda e: e.entry_date):
        grouped[entry.entry_date] = grouped.get(entry.entry_date, Nutrition.zero()) + entry.nutrition
    return grouped


def log_weight(
    user_id: int,
    weight_lbs: float,
    day: Optional[date] = None,
    db_path: str = DB_PATH,
) -> int:
    """Record body weight for a day, replacing any earlier reading that day."""
    if isinstance(weight_lbs, bool) or not isinstance(weight_lbs, (int, float)) \
            or not math.isfinite(weight_lbs) or weight_lbs <= 0:
        raise InvalidInputError("weight_lbs", f"must be a positive number, got {weight_lbs!r}")
    if day is None:
        day = date.today()

    with get_connection(db_path) as conn:
        conn.execute(
            """INSERT INTO weight_entries (user_id, weight_lbs, entry_date)
               VALUES (?, ?, ?)
               ON CONFLICT (user_id, entry_date) DO UPDATE SET weight_lbs = excluded.weight_lbs""",
            (user_id, float(weight_lbs), day.isoformat()),
        )
        row = conn.execute(
            "SELECT id FROM weight_entries WHERE user_id = ? AND entry_date = ?",
            (user_id, day.isoformat()),
        ).fetchone()
    logger.info("Logged weight %.1f lbs for user %d on %s", weight_lbs, user_id, day)
    return row["id"]


def get_weight_history(user_id: int, newest_first: bool = True, db_path: str = DB_PATH) -> list:
    """Get a user's weight entries sorted by date."""
    order = "DESC" if newest_first else "ASC"
    with get_connection(db_path) as conn:
        rows = conn.execute(
            f"SELECT * FROM weight_entries WHERE user_id = ? ORDER BY entry_date {order}",
            (user_id,),
        ).fetchall()
        return [
            WeightEntry(
                id=row["id"],
                user_id=row["user_id"],
                weight_lbs=row["weight_lbs"],
                entry_date=date.fromisoformat(row["entry_date"]),
            )
            for row in rows
        ]


def format_entries(entries: list) -> str:
    """Format food entries grouped by meal for display."""
    if not entries:
        return "No food logged."

    lines = []
    grouped = entries_by_meal(entries)
    meal_totals = totals_by_meal(entries)
    for meal_type in MEAL_TYPES:
        if not grouped[meal_type]:
            continue
        t = meal_totals[meal_type]
        lines.append(f"{meal_type.capitalize()} ({t.calories:.0f} kcal)")
        for e in grouped[meal_type]:
            serving = f", {e.serving_size}" if e.serving_size else ""
            lines.append(
                f"  [{e.id}] {e.name}{serving}: {e.calories:.0f} kcal | "
                f"P {e.protein_g:.0f}g | C {e.carbs_g:.0f}g | F {e.fat_g:.0f}g"
            )
    return "\n".join(lines)
