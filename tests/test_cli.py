"""Tests for the command-line interface."""

import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from datetime import date
from unittest import mock

from calorie_tracker import config
from calorie_tracker.cli import build_parser, main
from calorie_tracker.models import InvalidInputError
from calorie_tracker.tracker import get_food_entries, get_weight_history
from calorie_tracker.user_store import get_user


QUIZ = ["--age", "25", "--sex", "male", "--feet", "5", "--inches", "10",
        "--weight", "165", "--activity", "active"]

CATALOG_CSV = """name,dining_hall,serving_size,calories,protein_g,carbs_g,fat_g
Pepperoni pizza,Yahentamitsi,1 slice,300,12,34,13
Scrambled eggs,South Campus,1 cup,180,12,2,14
Garden salad,South Campus,1 bowl,120,3,10,7
"""


class TestCLI(unittest.TestCase):
    def setUp(self):
        self.db_fd, self.db_path = tempfile.mkstemp(suffix=".db")

    def tearDown(self):
        os.close(self.db_fd)
        os.unlink(self.db_path)

    def run_cli(self, *argv):
        out = io.StringIO()
        with redirect_stdout(out):
            main(["--db", self.db_path, *argv])
        return out.getvalue()

    def run_cli_failing(self, *argv):
        out = io.StringIO()
        with redirect_stdout(out), self.assertRaises(SystemExit) as ctx:
            main(["--db", self.db_path, *argv])
        self.assertEqual(ctx.exception.code, 1)
        return out.getvalue()

    def test_parser_defaults(self):
        args = build_parser().parse_args(["food", "add", "--name", "Toast", "--meal", "breakfast",
                                          "--calories", "100"])
        self.assertEqual(args.user, 1)
        self.assertEqual(args.protein, 0.0)
        self.assertEqual(args.serving, "")

    def test_create_with_quiz(self):
        out = self.run_cli("profile", "create", "--name", "Testudo Terp", "--email", "testudo@umd.edu", *QUIZ)
        self.assertIn("Profile created (ID: 1)", out)
        self.assertIn("TDEE:     2696 kcal/day", out)
        self.assertIn("Carbs:", out)
        self.assertEqual(get_user(1, self.db_path).tdee, 2696)

    def test_create_then_quiz(self):
        self.run_cli("profile", "create", "--name", "Testudo Terp", "--email", "testudo@umd.edu")
        out = self.run_cli_failing("macros")
        self.assertIn("Complete the TDEE quiz first", out)

        out = self.run_cli("profile", "quiz", *QUIZ[:3], "female", *QUIZ[4:])
        self.assertIn("TDEE:     2439 kcal/day", out)
        self.assertIn("BMR:", out)

    def test_duplicate_email(self):
        self.run_cli("profile", "create", "--name", "A", "--email", "a@umd.edu")
        out = self.run_cli_failing("profile", "create", "--name", "B", "--email", "a@umd.edu")
        self.assertIn("already exists", out)

    def test_partial_quiz_is_invalid(self):
        out = self.run_cli_failing("profile", "create", "--name", "A", "--email", "a@umd.edu", "--age", "30")
        self.assertIn("Invalid input", out)
        self.assertIsNone(get_user(1, self.db_path))

    def test_missing_user(self):
        out = self.run_cli_failing("profile", "show")
        self.assertIn("No user with ID 1", out)

    def test_food_and_weight_flow(self):
        self.run_cli("profile", "create", "--name", "Testudo Terp", "--email", "testudo@umd.edu", *QUIZ)

        out = self.run_cli("food", "add", "--name", "Greek yogurt", "--meal", "breakfast",
                           "--calories", "150", "--protein", "15", "--carbs", "8", "--fat", "5",
                           "--serving", "6 oz", "--date", "2025-04-10")
        self.assertIn("Logged: Greek yogurt for breakfast (150 kcal) [#1]", out)

        out = self.run_cli("food", "list", "--date", "2025-04-10")
        self.assertIn("Greek yogurt, 6 oz", out)
        self.assertIn("Total: 150 kcal", out)

        self.run_cli("weight", "add", "168", "--date", "2025-04-10")
        self.assertEqual(get_weight_history(1, db_path=self.db_path)[0].weight_lbs, 168)

        out = self.run_cli("dashboard", "--date", "2025-04-10")
        self.assertIn("Calories: 150 / 2696 kcal (6%)", out)

        self.run_cli("food", "delete", "1")
        self.assertEqual(get_food_entries(1, db_path=self.db_path), [])
        self.run_cli_failing("food", "delete", "1")

    def test_bad_date(self):
        self.run_cli("profile", "create", "--name", "A", "--email", "a@umd.edu")
        out = self.run_cli_failing("weight", "add", "170", "--date", "04/10/2025")
        self.assertIn("date", out)

    def test_zero_weight_rejected(self):
        self.run_cli("profile", "create", "--name", "A", "--email", "a@umd.edu")
        out = self.run_cli_failing("weight", "add", "0")
        self.assertIn("Invalid input", out)

    def test_bad_activity_policy_creates_nothing(self):
        with mock.patch.object(config, "UNKNOWN_ACTIVITY_POLICY", "strict"):
            out = self.run_cli_failing("profile", "create", "--name", "A", "--email", "a@umd.edu", *QUIZ)
        self.assertIn("Invalid input - unknown_activity", out)
        self.assertNotIn("Profile created", out)
        self.assertIsNone(get_user(1, self.db_path))

    def test_failed_estimate_leaves_no_user(self):
        with mock.patch("calorie_tracker.cli.estimate_tdee", side_effect=InvalidInputError("activity_level", "nope")):
            self.run_cli_failing("profile", "create", "--name", "A", "--email", "a@umd.edu", *QUIZ)
        self.assertIsNone(get_user(1, self.db_path))

    def test_profile_update(self):
        self.run_cli("profile", "create", "--name", "Testudo Terp", "--email", "testudo@umd.edu", *QUIZ)
        out = self.run_cli("profile", "update", "--name", "Testudo", "--activity", "sedentary")
        self.assertIn("TDEE:     2088 kcal/day", out)
        user = get_user(1, self.db_path)
        self.assertEqual(user.name, "Testudo")
        self.assertEqual(user.tdee, 2088)

        self.run_cli_failing("profile", "update")
        out = self.run_cli_failing("profile", "update", "--inches", "12")
        self.assertIn("Invalid input - height_inches", out)


class TestCatalogCLI(unittest.TestCase):
    def setUp(self):
        self.db_fd, self.db_path = tempfile.mkstemp(suffix=".db")
        self.csv_fd, self.csv_path = tempfile.mkstemp(suffix=".csv")
        with os.fdopen(self.csv_fd, "w", encoding="utf-8") as f:
            f.write(CATALOG_CSV)
        self.run_cli("profile", "create", "--name", "Testudo Terp", "--email", "testudo@umd.edu", *QUIZ)

    def tearDown(self):
        os.close(self.db_fd)
        os.unlink(self.db_path)
        os.unlink(self.csv_path)

    def run_cli(self, *argv):
        out = io.StringIO()
        with redirect_stdout(out):
            main(["--db", self.db_path, *argv])
        return out.getvalue()

    def test_import_search_and_pick(self):
        self.assertIn("Imported 3 foods", self.run_cli("food", "import", self.csv_path))
        self.assertIn("Imported 0 foods", self.run_cli("food", "import", self.csv_path))

        out = self.run_cli("food", "search", "--hall", "South Campus")
        self.assertIn("Scrambled eggs", out)
        self.assertNotIn("Pepperoni pizza", out)

        out = self.run_cli("food", "search", "--max-calories", "200")
        self.assertIn("Scrambled eggs", out)
        self.assertNotIn("Pepperoni pizza", out)

        self.run_cli("food", "pick", "1", "--meal", "breakfast", "--date", "2025-04-10")
        entry = get_food_entries(1, date(2025, 4, 10), db_path=self.db_path)[0]
        self.assertEqual(entry.name, "Pepperoni pizza")
        self.assertEqual(entry.serving_size, "1 slice")

    def test_custom_meal_flow(self):
        self.run_cli("food", "import", self.csv_path)
        out = self.run_cli("meal", "add", "--name", "Pizza night", "1", "1", "3")
        self.assertIn("Saved meal #1: Pizza night (720 kcal)", out)

        out = self.run_cli("food", "search", "pizza")
        self.assertIn("[meal 1] Pizza night (3 foods): 720 kcal", out)

        out = self.run_cli("meal", "edit", "1", "--foods", "1")
        self.assertIn("(300 kcal)", out)

        self.run_cli("meal", "log", "1", "--meal", "dinner", "--date", "2025-04-10")
        entry = get_food_entries(1, date(2025, 4, 10), db_path=self.db_path)[0]
        self.assertEqual((entry.name, entry.calories, entry.serving_size), ("Pizza night", 300, "1 meal"))

        self.assertIn("Deleted meal #1", self.run_cli("meal", "delete", "1"))
        self.assertIn("No custom meals yet.", self.run_cli("meal", "list"))

    def test_unknown_food_in_meal(self):
        self.run_cli("food", "import", self.csv_path)
        out = io.StringIO()
        with redirect_stdout(out), self.assertRaises(SystemExit):
            main(["--db", self.db_path, "meal", "add", "--name", "Ghost", "99"])
        self.assertIn("unknown food IDs: 99", out.getvalue())


if __name__ == "__main__":
    unittest.main()
