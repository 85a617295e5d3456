"""Tests for the food and weight logging module."""

import os
import tempfile
import unittest
from datetime import date

from calorie_tracker.db import init_db
from calorie_tracker.models import FoodEntry, InvalidInputError, UserProfile
from calorie_tracker.tracker import (
    delete_food_entry,
    format_entries,
    get_food_entries,
    get_food_entries_between,
    get_weight_history,
    log_food,
    log_weight,
    totals,
    totals_by_date,
    totals_by_meal,
)
from calorie_tracker.user_store import create_user


DAY = date(2025, 4, 10)


def _entry(name, calories, protein, carbs, fat, meal_type, entry_date=DAY, user_id=1):
    return FoodEntry(
        id=None, user_id=user_id, name=name, calories=calories,
        protein_g=protein, carbs_g=carbs, fat_g=fat,
        meal_type=meal_type, entry_date=entry_date,
    )


class TestFoodLog(unittest.TestCase):
    def setUp(self):
        self.db_fd, self.db_path = tempfile.mkstemp(suffix=".db")
        init_db(self.db_path)
        self.user_id = create_user(UserProfile(None, "Testudo Terp", "testudo@umd.edu"), self.db_path)
        self.other_id = create_user(UserProfile(None, "Other", "other@umd.edu"), self.db_path)

    def tearDown(self):
        os.close(self.db_fd)
        os.unlink(self.db_path)

    def _log_sample_day(self):
        log_food(self.user_id, _entry("Oatmeal with berries", 320, 12, 45, 8, "breakfast"), self.db_path)
        log_food(self.user_id, _entry("Greek yogurt", 150, 15, 8, 5, "breakfast"), self.db_path)
        log_food(self.user_id, _entry("Grilled chicken sandwich", 450, 35, 40, 15, "lunch"), self.db_path)

    def test_log_food(self):
        entry_id = log_food(self.user_id, _entry("Toast", 100, 3, 20, 1, "breakfast"), self.db_path)
        self.assertIsNotNone(entry_id)
        self.assertGreater(entry_id, 0)

    def test_get_entries_for_day(self):
        self._log_sample_day()
        log_food(self.user_id, _entry("Salmon fillet", 350, 40, 0, 20, "dinner", date(2025, 4, 9)), self.db_path)

        entries = get_food_entries(self.user_id, DAY, db_path=self.db_path)
        self.assertEqual(len(entries), 3)
        self.assertEqual(entries[0].name, "Oatmeal with berries")
        self.assertEqual(entries[0].entry_date, DAY)

        self.assertEqual(len(get_food_entries(self.user_id, db_path=self.db_path)), 4)

    def test_get_entries_by_meal(self):
        self._log_sample_day()
        breakfast = get_food_entries(self.user_id, DAY, "breakfast", self.db_path)
        self.assertEqual([e.name for e in breakfast], ["Oatmeal with berries", "Greek yogurt"])
        self.assertEqual(get_food_entries(self.user_id, DAY, "dinner", self.db_path), [])

    def test_get_entries_bad_meal_type(self):
        with self.assertRaises(InvalidInputError):
            get_food_entries(self.user_id, DAY, "brunch", self.db_path)

    def test_entries_are_per_user(self):
        self._log_sample_day()
        self.assertEqual(get_food_entries(self.other_id, DAY, db_path=self.db_path), [])

    def test_entries_between(self):
        self._log_sample_day()
        log_food(self.user_id, _entry("Brown rice", 220, 5, 45, 2, "dinner", date(2025, 4, 2)), self.db_path)
        entries = get_food_entries_between(self.user_id, date(2025, 4, 1), date(2025, 4, 9), self.db_path)
        self.assertEqual([e.name for e in entries], ["Brown rice"])

    def test_negative_calories_rejected(self):
        with self.assertRaises(InvalidInputError):
            log_food(self.user_id, _entry("Mystery", -50, 0, 0, 0, "lunch"), self.db_path)

    def test_delete_food_entry(self):
        entry_id = log_food(self.user_id, _entry("Toast", 100, 3, 20, 1, "breakfast"), self.db_path)
        self.assertFalse(delete_food_entry(entry_id, self.other_id, self.db_path))
        self.assertTrue(delete_food_entry(entry_id, self.user_id, self.db_path))
        self.assertFalse(delete_food_entry(entry_id, self.user_id, self.db_path))
        self.assertEqual(get_food_entries(self.user_id, db_path=self.db_path), [])

    def test_totals(self):
        self._log_sample_day()
        t = totals(get_food_entries(self.user_id, DAY, db_path=self.db_path))
        self.assertAlmostEqual(t.calories, 920)
        self.assertAlmostEqual(t.protein_g, 62)
        self.assertAlmostEqual(t.carbs_g, 93)
        self.assertAlmostEqual(t.fat_g, 28)

    def test_totals_by_meal(self):
        self._log_sample_day()
        by_meal = totals_by_meal(get_food_entries(self.user_id, DAY, db_path=self.db_path))
        self.assertEqual(set(by_meal), {"breakfast", "lunch", "dinner"})
        self.assertAlmostEqual(by_meal["breakfast"].calories, 470)
        self.assertAlmostEqual(by_meal["lunch"].protein_g, 35)
        self.assertEqual(by_meal["dinner"].calories, 0)

    def test_totals_by_date(self):
        entries = [
            _entry("B", 200, 0, 0, 0, "lunch", date(2025, 4, 10)),
            _entry("A", 100, 0, 0, 0, "lunch", date(2025, 4, 9)),
            _entry("C", 50, 0, 0, 0, "dinner", date(2025, 4, 10)),
        ]
        by_date = totals_by_date(entries)
        self.assertEqual(list(by_date), [date(2025, 4, 9), date(2025, 4, 10)])
        self.assertEqual(by_date[date(2025, 4, 10)].calories, 250)

    def test_format_entries(self):
        self._log_sample_day()
        text = format_entries(get_food_entries(self.user_id, DAY, db_path=self.db_path))
        self.assertIn("Breakfast (470 kcal)", text)
        self.assertIn("Grilled chicken sandwich", text)
        self.assertNotIn("Dinner", text)
        self.assertEqual(format_entries([]), "No food logged.")


class TestWeightLog(unittest.TestCase):
    def setUp(self):
        self.db_fd, self.db_path = tempfile.mkstemp(suffix=".db")
        init_db(self.db_path)
        self.user_id = create_user(UserProfile(None, "Testudo Terp", "testudo@umd.edu"), self.db_path)

    def tearDown(self):
        os.close(self.db_fd)
        os.unlink(self.db_path)

    def test_history_newest_first(self):
        for day, weight in [(date(2025, 4, 2), 171), (date(2025, 4, 10), 168), (date(2025, 4, 5), 170)]:
            log_weight(self.user_id, weight, day, self.db_path)

        history = get_weight_history(self.user_id, db_path=self.db_path)
        self.assertEqual([e.weight_lbs for e in history], [168, 170, 171])

        oldest_first = get_weight_history(self.user_id, newest_first=False, db_path=self.db_path)
        self.assertEqual(oldest_first[0].entry_date, date(2025, 4, 2))

    def test_same_day_replaces(self):
        first_id = log_weight(self.user_id, 170, DAY, self.db_path)
        second_id = log_weight(self.user_id, 169.5, DAY, self.db_path)
        self.assertEqual(first_id, second_id)

        history = get_weight_history(self.user_id, db_path=self.db_path)
        self.assertEqual(len(history), 1)
        self.assertAlmostEqual(history[0].weight_lbs, 169.5)

    def test_defaults_to_today(self):
        log_weight(self.user_id, 170, db_path=self.db_path)
        self.assertEqual(get_weight_history(self.user_id, db_path=self.db_path)[0].entry_date, date.today())

    def test_invalid_weight(self):
        for weight in (0, -5, float("nan"), "170", None):
            with self.assertRaises(InvalidInputError, msg=repr(weight)):
                log_weight(self.user_id, weight, DAY, self.db_path)


if __name__ == "__main__":
    unittest.main()
