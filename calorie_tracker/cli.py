"""Command-line interface for the calorie tracking application."""

import argparse
import logging
import sys
from datetime import date

from calorie_tracker import config
from calorie_tracker.config import ACTIVITY_MULTIPLIERS, DB_PATH, LOG_LEVEL, MEAL_TYPES, SEXES
from calorie_tracker.dashboard import build_dashboard, format_dashboard
from calorie_tracker.db import init_db
from calorie_tracker.food_catalog import (
    delete_custom_meal,
    format_catalog,
    get_custom_meal,
    get_custom_meals,
    import_foods_csv,
    log_catalog_food,
    log_custom_meal,
    save_custom_meal,
    search_foods,
    update_custom_meal,
)
from calorie_tracker.macro_calculator import (
    allocate_macros,
    check_unknown_activity_policy,
    estimate_tdee,
    format_targets,
)
from calorie_tracker.models import BiometricInput, FoodEntry, InvalidInputError, UserProfile
from calorie_tracker.tracker import (
    delete_food_entry,
    format_entries,
    get_food_entries,
    get_weight_history,
    log_food,
    log_weight,
    totals,
)
from calorie_tracker.user_store import (
    apply_tdee_quiz,
    create_user,
    get_user,
    record_quiz_answers,
    update_profile,
)

logger = logging.getLogger(__name__)


def _parse_date(value):
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidInputError("date", f"expected YYYY-MM-DD, got {value!r}") from None


def _biometrics_from_args(args) -> BiometricInput:
    return BiometricInput.from_form({
        "age_years": args.age,
        "sex": args.sex,
        "height_feet": args.feet,
        "height_inches": args.inches,
        "weight_pounds": args.weight,
        "activity_level": args.activity,
    })


def _get_active_user(args) -> UserProfile:
    user = get_user(args.user, args.db)
    if not user:
        print(f"No user with ID {args.user}. Create one first:")
        print("  python -m calorie_tracker profile create --name NAME --email EMAIL")
        sys.exit(1)
    return user


def _require_quiz(user: UserProfile) -> None:
    if not user.has_completed_quiz:
        print("Complete the TDEE quiz first:")
        print("  python -m calorie_tracker profile quiz --age .. --sex .. --feet .. --inches .. "
              "--weight .. --activity ..")
        sys.exit(1)


# --- Command handlers ---

def cmd_profile_create(args):
    profile = UserProfile(id=None, name=args.name, email=args.email)
    energy = None
    quiz_fields = (args.age, args.sex, args.feet, args.inches, args.weight, args.activity)
    if any(v is not None for v in quiz_fields):
        biometrics = _biometrics_from_args(args)
        energy = estimate_tdee(biometrics)
        record_quiz_answers(profile, biometrics, energy)

    user_id = create_user(profile, args.db)
    if user_id is None:
        print(f"A user with email {args.email} already exists.")
        sys.exit(1)
    print(f"Profile created (ID: {user_id})")

    if energy is not None:
        print("\nYour daily targets:")
        print(format_targets(allocate_macros(profile.tdee, profile.weight_lbs), energy))


def cmd_profile_show(args):
    user = _get_active_user(args)
    print(f"Name:     {user.name}")
    print(f"Email:    {user.email}")
    if not user.has_completed_quiz:
        print("\nTDEE quiz not completed yet.")
        return
    print(f"Age:      {user.age}")
    print(f"Weight:   {user.weight_lbs:.1f} lbs")
    print(f"Height:   {user.height_feet}'{user.height_inches}\"")
    print(f"Sex:      {user.sex}")
    print(f"Activity: {user.activity_level}")

    print("\nDaily Targets:")
    print(format_targets(allocate_macros(user.tdee, user.weight_lbs)))


def cmd_profile_quiz(args):
    user = _get_active_user(args)
    user, energy = apply_tdee_quiz(user.id, _biometrics_from_args(args), db_path=args.db)
    print("TDEE updated.")
    print(format_targets(allocate_macros(user.tdee, user.weight_lbs), energy))


def cmd_profile_update(args):
    user = _get_active_user(args)
    fields = (args.name, args.feet, args.inches, args.weight, args.activity)
    if all(v is None for v in fields):
        print("Nothing to update. Pass --name, --feet, --inches, --weight or --activity.")
        sys.exit(1)
    user = update_profile(
        user.id, name=args.name, height_feet=args.feet, height_inches=args.inches,
        weight_lbs=args.weight, activity_level=args.activity, db_path=args.db,
    )
    print("Profile updated.")
    if user.has_completed_quiz:
        print(format_targets(allocate_macros(user.tdee, user.weight_lbs)))


def cmd_macros(args):
    user = _get_active_user(args)
    _require_quiz(user)
    print(format_targets(allocate_macros(user.tdee, user.weight_lbs)))


def cmd_food_add(args):
    user = _get_active_user(args)
    entry = FoodEntry(
        id=None,
        user_id=user.id,
        name=args.name,
        calories=args.calories,
        protein_g=args.protein,
        carbs_g=args.carbs,
        fat_g=args.fat,
        meal_type=args.meal,
        entry_date=_parse_date(args.date),
        serving_size=args.serving,
    )
    entry_id = log_food(user.id, entry, args.db)
    print(f"Logged: {entry.name} for {entry.meal_type} ({entry.calories:.0f} kcal) [#{entry_id}]")


def cmd_food_list(args):
    user = _get_active_user(args)
    day = _parse_date(args.date)
    entries = get_food_entries(user.id, day, args.meal, args.db)
    print(f"Food log for {day.isoformat()}")
    print(format_entries(entries))
    if entries:
        t = totals(entries)
        print(f"\nTotal: {t.calories:.0f} kcal | P {t.protein_g:.0f}g | C {t.carbs_g:.0f}g | F {t.fat_g:.0f}g")


def cmd_food_delete(args):
    user = _get_active_user(args)
    if delete_food_entry(args.entry_id, user.id, args.db):
        print(f"Deleted food entry #{args.entry_id}")
    else:
        print(f"Food entry #{args.entry_id} not found.")
        sys.exit(1)


def cmd_food_search(args):
    user = _get_active_user(args)
    limits = dict(max_calories=args.max_calories, max_fat=args.max_fat, max_carbs=args.max_carbs)
    foods = search_foods(args.query, args.hall, db_path=args.db, **limits)
    meals = [] if args.hall else get_custom_meals(user.id, args.query, db_path=args.db, **limits)
    print(format_catalog(foods, meals))


def cmd_food_import(args):
    count = import_foods_csv(args.file, args.db)
    print(f"Imported {count} foods into the catalog.")


def cmd_food_pick(args):
    user = _get_active_user(args)
    entry_id = log_catalog_food(user.id, args.food_id, args.meal, _parse_date(args.date), args.db)
    if entry_id is None:
        print(f"Food #{args.food_id} not found in the catalog.")
        sys.exit(1)
    print(f"Logged catalog food #{args.food_id} for {args.meal} [#{entry_id}]")


# --- Custom meals ---

def cmd_meal_add(args):
    user = _get_active_user(args)
    meal_id = save_custom_meal(user.id, args.name, args.food_ids, args.db)
    meal = get_custom_meal(meal_id, user.id, args.db)
    print(f"Saved meal #{meal_id}: {meal.name} ({meal.nutrition.calories:.0f} kcal)")


def cmd_meal_edit(args):
    user = _get_active_user(args)
    meal = get_custom_meal(args.meal_id, user.id, args.db)
    if meal is None:
        print(f"Meal #{args.meal_id} not found.")
        sys.exit(1)
    update_custom_meal(
        meal.id, user.id, args.name or meal.name, args.foods or meal.food_ids, args.db
    )
    meal = get_custom_meal(meal.id, user.id, args.db)
    print(f"Updated meal #{meal.id}: {meal.name} ({meal.nutrition.calories:.0f} kcal)")


def cmd_meal_list(args):
    user = _get_active_user(args)
    meals = get_custom_meals(user.id, db_path=args.db)
    if not meals:
        print("No custom meals yet.")
        return
    print(format_catalog([], meals))


def cmd_meal_delete(args):
    user = _get_active_user(args)
    if delete_custom_meal(args.meal_id, user.id, args.db):
        print(f"Deleted meal #{args.meal_id}")
    else:
        print(f"Meal #{args.meal_id} not found.")
        sys.exit(1)


def cmd_meal_log(args):
    user = _get_active_user(args)
    entry_id = log_custom_meal(user.id, args.meal_id, args.meal, _parse_date(args.date), args.db)
    if entry_id is None:
        print(f"Meal #{args.meal_id} not found.")
        sys.exit(1)
    print(f"Logged meal #{args.meal_id} for {args.meal} [#{entry_id}]")


def cmd_weight_add(args):
    user = _get_active_user(args)
    day = _parse_date(args.date)
    log_weight(user.id, args.weight, day, args.db)
    print(f"Logged weight: {args.weight:.1f} lbs on {day.isoformat()}")


def cmd_weight_history(args):
    user = _get_active_user(args)
    entries = get_weight_history(user.id, db_path=args.db)
    if not entries:
        print("No weight entries yet.")
        return
    for e in entries:
        print(f"  {e.entry_date.isoformat()}  {e.weight_lbs:6.1f} lbs")


def cmd_dashboard(args):
    user = _get_active_user(args)
    _require_quiz(user)
    dashboard = build_dashboard(user, _parse_date(args.date), args.db)
    print(format_dashboard(dashboard))


# --- Argument parser ---

def _add_quiz_arguments(parser, required):
    parser.add_argument("--age", type=int, required=required)
    parser.add_argument("--sex", choices=list(SEXES), required=required)
    parser.add_argument("--feet", type=int, required=required, help="Height (feet)")
    parser.add_argument("--inches", type=int, required=required, help="Height (inches)")
    parser.add_argument("--weight", type=float, required=required, help="Weight in lbs")
    parser.add_argument("--activity", choices=list(ACTIVITY_MULTIPLIERS.keys()),
                        required=required, help="Activity level")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="calorie_tracker",
        description="Calorie Tracker - TDEE, macro targets and food logging",
    )
    parser.add_argument("--db", default=DB_PATH, help="SQLite database path")
    parser.add_argument("--user", type=int, default=1, help="Active user ID (default: 1)")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- profile ---
    profile_parser = subparsers.add_parser("profile", help="Manage user profile")
    profile_sub = profile_parser.add_subparsers(dest="subcommand")

    create_p = profile_sub.add_parser("create", help="Register a new user")
    create_p.add_argument("--name", required=True)
    create_p.add_argument("--email", required=True)
    _add_quiz_arguments(create_p, required=False)
    create_p.set_defaults(func=cmd_profile_create)

    show_p = profile_sub.add_parser("show", help="Show current profile")
    show_p.set_defaults(func=cmd_profile_show)

    quiz_p = profile_sub.add_parser("quiz", help="Answer the TDEE quiz and update targets")
    _add_quiz_arguments(quiz_p, required=True)
    quiz_p.set_defaults(func=cmd_profile_quiz)

    update_p = profile_sub.add_parser("update", help="Edit name or measurements (TDEE is recalculated)")
    update_p.add_argument("--name")
    update_p.add_argument("--feet", type=int, help="Height (feet)")
    update_p.add_argument("--inches", type=int, help="Height (inches)")
    update_p.add_argument("--weight", type=float, help="Weight in lbs")
    update_p.add_argument("--activity", choices=list(ACTIVITY_MULTIPLIERS.keys()), help="Activity level")
    update_p.set_defaults(func=cmd_profile_update)

    # --- macros ---
    macros_p = subparsers.add_parser("macros", help="Show daily macro targets")
    macros_p.set_defaults(func=cmd_macros)

    # --- food ---
    food_parser = subparsers.add_parser("food", help="Log and review food")
    food_sub = food_parser.add_subparsers(dest="subcommand")

    add_p = food_sub.add_parser("add", help="Log a food")
    add_p.add_argument("--name", required=True)
    add_p.add_argument("--meal", required=True, choices=list(MEAL_TYPES))
    add_p.add_argument("--calories", type=float, required=True)
    add_p.add_argument("--protein", type=float, default=0.0, help="Protein (g)")
    add_p.add_argument("--carbs", type=float, default=0.0, help="Carbohydrates (g)")
    add_p.add_argument("--fat", type=float, default=0.0, help="Fat (g)")
    add_p.add_argument("--serving", default="", help="Serving size, e.g. '1 cup'")
    add_p.add_argument("--date", help="Date (YYYY-MM-DD), default: today")
    add_p.set_defaults(func=cmd_food_add)

    list_p = food_sub.add_parser("list", help="List food for a day")
    list_p.add_argument("--date", help="Date (YYYY-MM-DD), default: today")
    list_p.add_argument("--meal", choices=list(MEAL_TYPES))
    list_p.set_defaults(func=cmd_food_list)

    delete_p = food_sub.add_parser("delete", help="Delete a food entry")
    delete_p.add_argument("entry_id", type=int, help="Food entry ID")
    delete_p.set_defaults(func=cmd_food_delete)

    search_p = food_sub.add_parser("search", help="Search the food catalog and your custom meals")
    search_p.add_argument("query", nargs="?", default="", help="Matches food name or dining hall")
    search_p.add_argument("--hall", help="Only foods from this dining hall")
    search_p.add_argument("--max-calories", type=float)
    search_p.add_argument("--max-fat", type=float, help="Max fat (g)")
    search_p.add_argument("--max-carbs", type=float, help="Max carbohydrates (g)")
    search_p.set_defaults(func=cmd_food_search)

    import_p = food_sub.add_parser("import", help="Import catalog foods from a CSV file")
    import_p.add_argument("file", help="CSV with name, dining_hall, serving_size, calories, protein_g, carbs_g, fat_g")
    import_p.set_defaults(func=cmd_food_import)

    pick_p = food_sub.add_parser("pick", help="Log one serving of a catalog food")
    pick_p.add_argument("food_id", type=int, help="Catalog food ID (see 'food search')")
    pick_p.add_argument("--meal", required=True, choices=list(MEAL_TYPES))
    pick_p.add_argument("--date", help="Date (YYYY-MM-DD), default: today")
    pick_p.set_defaults(func=cmd_food_pick)

    # --- custom meals ---
    meal_parser = subparsers.add_parser("meal", help="Manage custom meals built from catalog foods")
    meal_sub = meal_parser.add_subparsers(dest="subcommand")

    madd_p = meal_sub.add_parser("add", help="Create a custom meal")
    madd_p.add_argument("--name", required=True)
    madd_p.add_argument("food_ids", type=int, nargs="+", help="Catalog food IDs")
    madd_p.set_defaults(func=cmd_meal_add)

    medit_p = meal_sub.add_parser("edit", help="Rename a meal or replace its foods")
    medit_p.add_argument("meal_id", type=int)
    medit_p.add_argument("--name")
    medit_p.add_argument("--foods", type=int, nargs="+", help="New list of catalog food IDs")
    medit_p.set_defaults(func=cmd_meal_edit)

    mlist_p = meal_sub.add_parser("list", help="List your custom meals")
    mlist_p.set_defaults(func=cmd_meal_list)

    mdel_p = meal_sub.add_parser("delete", help="Delete a custom meal")
    mdel_p.add_argument("meal_id", type=int)
    mdel_p.set_defaults(func=cmd_meal_delete)

    mlog_p = meal_sub.add_parser("log", help="Log a custom meal")
    mlog_p.add_argument("meal_id", type=int)
    mlog_p.add_argument("--meal", required=True, choices=list(MEAL_TYPES))
    mlog_p.add_argument("--date", help="Date (YYYY-MM-DD), default: today")
    mlog_p.set_defaults(func=cmd_meal_log)

    # --- weight ---
    weight_parser = subparsers.add_parser("weight", help="Log body weight")
    weight_sub = weight_parser.add_subparsers(dest="subcommand")

    wadd_p = weight_sub.add_parser("add", help="Log today's (or a given day's) weight")
    wadd_p.add_argument("weight", type=float, help="Weight in lbs")
    wadd_p.add_argument("--date", help="Date (YYYY-MM-DD), default: today")
    wadd_p.set_defaults(func=cmd_weight_add)

    history_p = weight_sub.add_parser("history", help="Show weight history")
    history_p.set_defaults(func=cmd_weight_history)

    # --- dashboard ---
    dash_p = subparsers.add_parser("dashboard", help="Show today's progress")
    dash_p.add_argument("--date", help="Date (YYYY-MM-DD), default: today")
    dash_p.set_defaults(func=cmd_dashboard)

    return parser


def main(argv=None):
    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    init_db(args.db)
    if hasattr(args, "func"):
        try:
            check_unknown_activity_policy(config.UNKNOWN_ACTIVITY_POLICY)
            args.func(args)
        except InvalidInputError as e:
            print(f"Invalid input - {e}")
            sys.exit(1)
    else:
        # Subcommand not specified
        sub = parser._subparsers._group_actions[0].choices[args.command]
        sub.print_help()
