"""Tests for the food catalog and custom meals."""

import os
import tempfile
import unittest
from datetime import date

from calorie_tracker.db import init_db
from calorie_tracker.food_catalog import (
    add_food,
    delete_custom_meal,
    dining_halls,
    format_catalog,
    get_custom_meal,
    get_custom_meals,
    get_food,
    import_foods_csv,
    log_catalog_food,
    log_custom_meal,
    save_custom_meal,
    search_foods,
    update_custom_meal,
)
from calorie_tracker.models import Food, InvalidInputError, Nutrition, UserProfile
from calorie_tracker.tracker import get_food_entries, totals
from calorie_tracker.user_store import create_user


DAY = date(2025, 4, 10)


class CatalogTestCase(unittest.TestCase):
    def setUp(self):
        self.db_fd, self.db_path = tempfile.mkstemp(suffix=".db")
        init_db(self.db_path)
        self.user_id = create_user(UserProfile(None, "Testudo Terp", "testudo@umd.edu"), self.db_path)
        self.other_id = create_user(UserProfile(None, "Other", "other@umd.edu"), self.db_path)

        self.pizza = add_food(Food(None, "Pepperoni pizza", 300, 12, 34, 13, "1 slice", "Yahentamitsi"), self.db_path)
        self.eggs = add_food(Food(None, "Scrambled eggs", 180, 12, 2, 14, "1 cup", "South Campus"), self.db_path)
        self.salad = add_food(Food(None, "Garden salad", 120, 3, 10, 7, "1 bowl", "South Campus"), self.db_path)
        self.pasta = add_food(Food(None, "Penne alfredo", 650, 18, 80, 28, "1 plate", "251 North"), self.db_path)

    def tearDown(self):
        os.close(self.db_fd)
        os.unlink(self.db_path)

    def names(self, foods):
        return [f.name for f in foods]


class TestSearchFoods(CatalogTestCase):
    def test_all_sorted_by_name(self):
        self.assertEqual(
            self.names(search_foods(db_path=self.db_path)),
            ["Garden salad", "Penne alfredo", "Pepperoni pizza", "Scrambled eggs"],
        )

    def test_query_matches_name_ignoring_case(self):
        self.assertEqual(self.names(search_foods("PIZZA", db_path=self.db_path)), ["Pepperoni pizza"])

    def test_query_matches_dining_hall(self):
        self.assertEqual(
            self.names(search_foods("south", db_path=self.db_path)),
            ["Garden salad", "Scrambled eggs"],
        )

    def test_dining_hall_filter_is_exact(self):
        self.assertEqual(self.names(search_foods(dining_hall="251 north", db_path=self.db_path)), ["Penne alfredo"])
        self.assertEqual(search_foods(dining_hall="North", db_path=self.db_path), [])

    def test_max_limits_are_inclusive(self):
        self.assertEqual(
            self.names(search_foods(max_calories=180, db_path=self.db_path)),
            ["Garden salad", "Scrambled eggs"],
        )
        self.assertEqual(
            self.names(search_foods(max_fat=13, max_carbs=34, db_path=self.db_path)),
            ["Garden salad", "Pepperoni pizza"],
        )

    def test_filters_combine(self):
        foods = search_foods("south", max_fat=10, db_path=self.db_path)
        self.assertEqual(self.names(foods), ["Garden salad"])

    def test_dining_halls(self):
        self.assertEqual(dining_halls(self.db_path), ["251 North", "South Campus", "Yahentamitsi"])

    def test_negative_nutrition_rejected(self):
        with self.assertRaises(InvalidInputError):
            add_food(Food(None, "Antimatter", -5, 0, 0, 0), self.db_path)

    def test_log_catalog_food(self):
        entry_id = log_catalog_food(self.user_id, self.eggs, "breakfast", DAY, self.db_path)
        self.assertIsNotNone(entry_id)
        entry = get_food_entries(self.user_id, DAY, db_path=self.db_path)[0]
        self.assertEqual((entry.name, entry.calories, entry.serving_size), ("Scrambled eggs", 180, "1 cup"))
        self.assertIsNone(log_catalog_food(self.user_id, 999, "breakfast", DAY, self.db_path))


class TestCustomMeals(CatalogTestCase):
    def test_totals_are_summed(self):
        meal_id = save_custom_meal(self.user_id, "Brunch", [self.eggs, self.salad], self.db_path)
        meal = get_custom_meal(meal_id, self.user_id, self.db_path)
        self.assertEqual(meal.name, "Brunch")
        self.assertEqual(meal.food_ids, [self.eggs, self.salad])
        self.assertEqual(meal.nutrition, Nutrition(300, 15, 12, 21))

    def test_repeated_food_counts_twice(self):
        meal_id = save_custom_meal(self.user_id, "Two slices", [self.pizza, self.pizza], self.db_path)
        meal = get_custom_meal(meal_id, self.user_id, self.db_path)
        self.assertEqual(meal.nutrition.calories, 600)
        self.assertEqual(meal.food_ids, [self.pizza, self.pizza])

    def test_validation(self):
        with self.assertRaises(InvalidInputError):
            save_custom_meal(self.user_id, " ", [self.pizza], self.db_path)
        with self.assertRaises(InvalidInputError):
            save_custom_meal(self.user_id, "Empty", [], self.db_path)
        with self.assertRaises(InvalidInputError) as ctx:
            save_custom_meal(self.user_id, "Ghost", [self.pizza, 999], self.db_path)
        self.assertIn("999", str(ctx.exception))
        self.assertEqual(get_custom_meals(self.user_id, db_path=self.db_path), [])

    def test_update_recomputes_totals(self):
        meal_id = save_custom_meal(self.user_id, "Lunch", [self.salad], self.db_path)
        self.assertTrue(update_custom_meal(meal_id, self.user_id, "Big lunch", [self.salad, self.pasta], self.db_path))
        meal = get_custom_meal(meal_id, self.user_id, self.db_path)
        self.assertEqual(meal.name, "Big lunch")
        self.assertEqual(meal.nutrition, Nutrition(770, 21, 90, 35))
        self.assertEqual(meal.food_ids, [self.salad, self.pasta])

    def test_meals_are_per_user(self):
        meal_id = save_custom_meal(self.user_id, "Lunch", [self.salad], self.db_path)
        self.assertIsNone(get_custom_meal(meal_id, self.other_id, self.db_path))
        self.assertFalse(update_custom_meal(meal_id, self.other_id, "Mine", [self.pizza], self.db_path))
        self.assertFalse(delete_custom_meal(meal_id, self.other_id, self.db_path))
        self.assertEqual(get_custom_meals(self.other_id, db_path=self.db_path), [])

    def test_filters(self):
        save_custom_meal(self.user_id, "Light brunch", [self.eggs, self.salad], self.db_path)
        save_custom_meal(self.user_id, "Carb load", [self.pasta, self.pizza], self.db_path)
        self.assertEqual(self.names(get_custom_meals(self.user_id, "brunch", db_path=self.db_path)), ["Light brunch"])
        self.assertEqual(
            self.names(get_custom_meals(self.user_id, max_calories=300, db_path=self.db_path)),
            ["Light brunch"],
        )
        self.assertEqual(
            self.names(get_custom_meals(self.user_id, max_carbs=114, db_path=self.db_path)),
            ["Carb load", "Light brunch"],
        )

    def test_delete(self):
        meal_id = save_custom_meal(self.user_id, "Lunch", [self.salad], self.db_path)
        self.assertTrue(delete_custom_meal(meal_id, self.user_id, self.db_path))
        self.assertFalse(delete_custom_meal(meal_id, self.user_id, self.db_path))
        self.assertIsNone(get_custom_meal(meal_id, self.user_id, self.db_path))

    def test_log_custom_meal(self):
        meal_id = save_custom_meal(self.user_id, "Brunch", [self.eggs, self.salad], self.db_path)
        log_custom_meal(self.user_id, meal_id, "lunch", DAY, self.db_path)
        entries = get_food_entries(self.user_id, DAY, db_path=self.db_path)
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].serving_size, "1 meal")
        self.assertEqual(totals(entries), Nutrition(300, 15, 12, 21))
        self.assertIsNone(log_custom_meal(self.other_id, meal_id, "lunch", DAY, self.db_path))

    def test_format_catalog(self):
        save_custom_meal(self.user_id, "Brunch", [self.eggs, self.salad], self.db_path)
        text = format_catalog(search_foods("eggs", db_path=self.db_path), get_custom_meals(self.user_id, db_path=self.db_path))
        self.assertIn("[meal 1] Brunch (2 foods): 300 kcal", text)
        self.assertIn(f"[{self.eggs}] Scrambled eggs, 1 cup @ South Campus: 180 kcal", text)
        self.assertEqual(format_catalog([]), "No matching foods.")


class TestImportCSV(unittest.TestCase):
    def setUp(self):
        self.db_fd, self.db_path = tempfile.mkstemp(suffix=".db")
        init_db(self.db_path)
        self.csv_fd, self.csv_path = tempfile.mkstemp(suffix=".csv")

    def tearDown(self):
        os.close(self.db_fd)
        os.unlink(self.db_path)
        os.unlink(self.csv_path)

    def write_csv(self, text):
        with open(self.csv_path, "w", encoding="utf-8") as f:
            f.write(text)

    def test_import_skips_blank_and_duplicate_rows(self):
        self.write_csv(
            "name,dining_hall,serving_size,calories,protein_g,carbs_g,fat_g\n"
            "Pepperoni pizza,Yahentamitsi,1 slice,300,12,34,13\n"
            ",Yahentamitsi,,100,1,1,1\n"
            "pepperoni PIZZA,yahentamitsi,1 slice,300,12,34,13\n"
            "Pepperoni pizza,South Campus,1 slice,310,12,35,14\n"
            "Water,,,,,,\n"
        )
        self.assertEqual(import_foods_csv(self.csv_path, self.db_path), 3)
        water = [f for f in search_foods("water", db_path=self.db_path)][0]
        self.assertEqual(get_food(water.id, self.db_path).calories, 0)
        self.assertEqual(import_foods_csv(self.csv_path, self.db_path), 0)

    def test_bad_number(self):
        self.write_csv("name,calories\nMystery,lots\n")
        with self.assertRaises(InvalidInputError) as ctx:
            import_foods_csv(self.csv_path, self.db_path)
        self.assertEqual(ctx.exception.field, "calories")


if __name__ == "__main__":
    unittest.main()
