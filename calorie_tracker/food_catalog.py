"""Food catalog and custom meals.

Catalog foods are shared by every user and come from a CSV import. Custom
meals belong to one user; each stores the summed nutrition of its foods as
of the last save, so later catalog edits do not change past meals.
"""

import csv
import logging
from datetime import date
from typing import Optional

from calorie_tracker.db import get_connection, DB_PATH
from calorie_tracker.models import CustomMeal, Food, FoodEntry, InvalidInputError, Nutrition
from calorie_tracker.tracker import log_food, validate_nutrition

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["name", "dining_hall", "serving_size", "calories", "protein_g", "carbs_g", "fat_g"]

CUSTOM_MEAL_SERVING = "1 meal"


def _row_to_food(row) -> Food:
    return Food(
        id=row["id"],
        name=row["name"],
        calories=row["calories"],
        protein_g=row["protein_g"],
        carbs_g=row["carbs_g"],
        fat_g=row["fat_g"],
        serving_size=row["serving_size"] or "",
        dining_hall=row["dining_hall"] or "",
    )


# --- Catalog ---

def add_food(food: Food, db_path: str = DB_PATH) -> int:
    """Add a food to the catalog. Returns the food ID."""
    validate_nutrition(food.nutrition)
    with get_connection(db_path) as conn:
        cursor = conn.execute(
            """INSERT INTO foods (name, dining_hall, serving_size, calories, protein_g, carbs_g, fat_g)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (food.name.strip(), (food.dining_hall or "").strip(), food.serving_size or "",
             food.calories, food.protein_g, food.carbs_g, food.fat_g),
        )
        return cursor.lastrowid


def get_food(food_id: int, db_path: str = DB_PATH) -> Optional[Food]:
    with get_connection(db_path) as conn:
        row = conn.execute("SELECT * FROM foods WHERE id = ?", (food_id,)).fetchone()
        if not row:
            return None
        return _row_to_food(row)


def search_foods(
    query: str = "",
    dining_hall: Optional[str] = None,
    max_calories: Optional[float] = None,
    max_fat: Optional[float] = None,
    max_carbs: Optional[float] = None,
    db_path: str = DB_PATH,
) -> list:
    """Search the catalog.

    ``query`` matches a substring of the food name or the dining hall,
    ignoring case. ``dining_hall`` must match exactly (ignoring case). The
    ``max_*`` limits are inclusive. Results are ordered by name.
    """
    sql = "SELECT * FROM foods WHERE 1 = 1"
    params = []
    query = (query or "").strip()
    if query:
        sql += " AND (name LIKE ? OR dining_hall LIKE ?)"
        params.extend([f"%{query}%", f"%{query}%"])
    if dining_hall:
        sql += " AND lower(dining_hall) = lower(?)"
        params.append(dining_hall.strip())
    for column, limit in (("calories", max_calories), ("fat_g", max_fat), ("carbs_g", max_carbs)):
        if limit is not None:
            sql += f" AND {column} <= ?"
            params.append(limit)
    sql += " ORDER BY name, id"

    with get_connection(db_path) as conn:
        rows = conn.execute(sql, params).fetchall()
        return [_row_to_food(row) for row in rows]


def dining_halls(db_path: str = DB_PATH) -> list:
    """Distinct non-empty dining hall names, sorted."""
    with get_connection(db_path) as conn:
        rows = conn.execute(
            "SELECT DISTINCT dining_hall FROM foods WHERE dining_hall != '' ORDER BY dining_hall"
        ).fetchall()
        return [row["dining_hall"] for row in rows]


def _csv_amount(row: dict, column: str, line: int) -> float:
    raw = (row.get(column) or "").strip()
    if not raw:
        return 0.0
    try:
        return float(raw)
    except ValueError:
        raise InvalidInputError(column, f"line {line}: must be a number, got {raw!r}") from None


def import_foods_csv(file_path: str, db_path: str = DB_PATH) -> int:
    """Import catalog foods from a CSV file with ``CSV_COLUMNS`` headers.

    Rows without a name are skipped, as are foods already in the catalog
    with the same name and dining hall. Returns the number imported.
    """
    with get_connection(db_path) as conn:
        existing = {
            (row["name"].lower(), (row["dining_hall"] or "").lower())
            for row in conn.execute("SELECT name, dining_hall FROM foods").fetchall()
        }

    imported = 0
    with open(file_path, "r", newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for line, row in enumerate(reader, start=2):
            name = (row.get("name") or "").strip()
            if not name:
                continue
            hall = (row.get("dining_hall") or "").strip()
            if (name.lower(), hall.lower()) in existing:
                continue

            food = Food(
                id=None,
                name=name,
                calories=_csv_amount(row, "calories", line),
                protein_g=_csv_amount(row, "protein_g", line),
                carbs_g=_csv_amount(row, "carbs_g", line),
                fat_g=_csv_amount(row, "fat_g", line),
                serving_size=(row.get("serving_size") or "").strip(),
                dining_hall=hall,
            )
            add_food(food, db_path)
            existing.add((name.lower(), hall.lower()))
            imported += 1

    logger.info("Imported %d foods from %s", imported, file_path)
    return imported


def log_catalog_food(
    user_id: int,
    food_id: int,
    meal_type: str,
    day: Optional[date] = None,
    db_path: str = DB_PATH,
) -> Optional[int]:
    """Log one serving of a catalog food. Returns the entry ID, or None if the food doesn't exist."""
    food = get_food(food_id, db_path)
    if food is None:
        return None
    entry = FoodEntry(
        id=None, user_id=user_id, name=food.name, calories=food.calories,
        protein_g=food.protein_g, carbs_g=food.carbs_g, fat_g=food.fat_g,
        meal_type=meal_type, entry_date=day or date.today(), serving_size=food.serving_size,
    )
    return log_food(user_id, entry, db_path)


# --- Custom meals ---

def _meal_nutrition(conn, food_ids: list) -> Nutrition:
    if not food_ids:
        raise InvalidInputError("food_ids", "a meal needs at least one food")
    unique_ids = sorted(set(food_ids))
    placeholders = ", ".join("?" for _ in unique_ids)
    rows = conn.execute(
        f"SELECT * FROM foods WHERE id IN ({placeholders})", unique_ids
    ).fetchall()
    foods = {row["id"]: _row_to_food(row) for row in rows}
    missing = [food_id for food_id in unique_ids if food_id not in foods]
    if missing:
        raise InvalidInputError("food_ids", f"unknown food IDs: {', '.join(map(str, missing))}")

    total = Nutrition.zero()
    for food_id in food_ids:
        total = total + foods[food_id].nutrition
    return total


def _check_meal_name(name: str) -> str:
    if not name or not name.strip():
        raise InvalidInputError("name", "is required")
    return name.strip()


def _write_meal_foods(conn, meal_id: int, food_ids: list) -> None:
    conn.execute("DELETE FROM custom_meal_foods WHERE meal_id = ?", (meal_id,))
    conn.executemany(
        "INSERT INTO custom_meal_foods (meal_id, position, food_id) VALUES (?, ?, ?)",
        [(meal_id, position, food_id) for position, food_id in enumerate(food_ids)],
    )


def save_custom_meal(user_id: int, name: str, food_ids: list, db_path: str = DB_PATH) -> int:
    """Create a custom meal from catalog food IDs. Returns the meal ID.

    A food listed twice counts twice in the totals.
    """
    name = _check_meal_name(name)
    with get_connection(db_path) as conn:
        n = _meal_nutrition(conn, food_ids)
        cursor = conn.execute(
            """INSERT INTO custom_meals (user_id, name, total_calories, total_protein_g,
               total_carbs_g, total_fat_g)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (user_id, name, n.calories, n.protein_g, n.carbs_g, n.fat_g),
        )
        meal_id = cursor.lastrowid
        _write_meal_foods(conn, meal_id, food_ids)
    logger.info("Saved custom meal %r for user %d (%.0f kcal)", name, user_id, n.calories)
    return meal_id


def update_custom_meal(
    meal_id: int,
    user_id: int,
    name: str,
    food_ids: list,
    db_path: str = DB_PATH,
) -> bool:
    """Replace a meal's name and foods, recomputing its totals. Returns True if updated."""
    name = _check_meal_name(name)
    with get_connection(db_path) as conn:
        n = _meal_nutrition(conn, food_ids)
        cursor = conn.execute(
            """UPDATE custom_meals SET name=?, total_calories=?, total_protein_g=?,
               total_carbs_g=?, total_fat_g=?
               WHERE id=? AND user_id=?""",
            (name, n.calories, n.protein_g, n.carbs_g, n.fat_g, meal_id, user_id),
        )
        if cursor.rowcount == 0:
            return False
        _write_meal_foods(conn, meal_id, food_ids)
        return True


def _load_meals(conn, rows) -> list:
    meals = []
    for row in rows:
        food_rows = conn.execute(
            "SELECT food_id FROM custom_meal_foods WHERE meal_id = ? ORDER BY position",
            (row["id"],),
        ).fetchall()
        meals.append(CustomMeal(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            food_ids=[r["food_id"] for r in food_rows],
            nutrition=Nutrition(
                calories=row["total_calories"],
                protein_g=row["total_protein_g"],
                carbs_g=row["total_carbs_g"],
                fat_g=row["total_fat_g"],
            ),
        ))
    return meals


def get_custom_meal(meal_id: int, user_id: int, db_path: str = DB_PATH) -> Optional[CustomMeal]:
    with get_connection(db_path) as conn:
        row = conn.execute(
            "SELECT * FROM custom_meals WHERE id = ? AND user_id = ?", (meal_id, user_id)
        ).fetchone()
        if not row:
            return None
        return _load_meals(conn, [row])[0]


def get_custom_meals(
    user_id: int,
    query: str = "",
    max_calories: Optional[float] = None,
    max_fat: Optional[float] = None,
    max_carbs: Optional[float] = None,
    db_path: str = DB_PATH,
) -> list:
    """A user's custom meals, filtered like ``search_foods`` (name only, no dining hall)."""
    sql = "SELECT * FROM custom_meals WHERE user_id = ?"
    params = [user_id]
    query = (query or "").strip()
    if query:
        sql += " AND name LIKE ?"
        params.append(f"%{query}%")
    for column, limit in (("total_calories", max_calories), ("total_fat_g", max_fat),
                          ("total_carbs_g", max_carbs)):
        if limit is not None:
            sql += f" AND {column} <= ?"
            params.append(limit)
    sql += " ORDER BY name, id"

    with get_connection(db_path) as conn:
        return _load_meals(conn, conn.execute(sql, params).fetchall())


def delete_custom_meal(meal_id: int, user_id: int, db_path: str = DB_PATH) -> bool:
    """Delete one of a user's custom meals. Returns True if deleted."""
    with get_connection(db_path) as conn:
        cursor = conn.execute(
            "DELETE FROM custom_meals WHERE id = ? AND user_id = ?", (meal_id, user_id)
        )
        return cursor.rowcount > 0


def log_custom_meal(
    user_id: int,
    meal_id: int,
    meal_type: str,
    day: Optional[date] = None,
    db_path: str = DB_PATH,
) -> Optional[int]:
    """Log a custom meal as a single food entry. Returns the entry ID, or None if not found."""
    meal = get_custom_meal(meal_id, user_id, db_path)
    if meal is None:
        return None
    n = meal.nutrition
    entry = FoodEntry(
        id=None, user_id=user_id, name=meal.name, calories=n.calories,
        protein_g=n.protein_g, carbs_g=n.carbs_g, fat_g=n.fat_g,
        meal_type=meal_type, entry_date=day or date.today(), serving_size=CUSTOM_MEAL_SERVING,
    )
    return log_food(user_id, entry, db_path)


def format_catalog(foods: list, meals: Optional[list] = None) -> str:
    """Format search results: custom meals first, then catalog foods."""
    lines = []
    for meal in meals or []:
        n = meal.nutrition
        lines.append(
            f"  [meal {meal.id}] {meal.name} ({len(meal.food_ids)} foods): {n.calories:.0f} kcal | "
            f"P {n.protein_g:.0f}g | C {n.carbs_g:.0f}g | F {n.fat_g:.0f}g"
        )
    for food in foods:
        hall = f" @ {food.dining_hall}" if food.dining_hall else ""
        serving = f", {food.serving_size}" if food.serving_size else ""
        lines.append(
            f"  [{food.id}] {food.name}{serving}{hall}: {food.calories:.0f} kcal | "
            f"P {food.protein_g:.0f}g | C {food.carbs_g:.0f}g | F {food.fat_g:.0f}g"
        )
    if not lines:
        return "No matching foods."
    return "\n".join(lines)
