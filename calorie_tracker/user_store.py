"""User persistence layer - registration, lookup and profile updates."""

import logging
import sqlite3
from dataclasses import replace
from typing import Optional, Tuple

from calorie_tracker.db import get_connection, DB_PATH
from calorie_tracker.macro_calculator import estimate_tdee
from calorie_tracker.models import BiometricInput, EnergyResult, InvalidInputError, UserProfile

logger = logging.getLogger(__name__)


def _row_to_user(row) -> UserProfile:
    return UserProfile(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        age=row["age"],
        sex=row["sex"],
        height_feet=row["height_feet"],
        height_inches=row["height_inches"],
        weight_lbs=row["weight_lbs"],
        activity_level=row["activity_level"],
        tdee=row["tdee"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def create_user(profile: UserProfile, db_path: str = DB_PATH) -> Optional[int]:
    """Register a user. Returns the new ID, or None if the email is taken."""
    if not profile.name or not profile.name.strip():
        raise InvalidInputError("name", "is required")
    email = _normalize_email(profile.email)
    if not email:
        raise InvalidInputError("email", "is required")

    try:
        with get_connection(db_path) as conn:
            cursor = conn.execute(
                """INSERT INTO users (name, email, age, sex, height_feet, height_inches,
                   weight_lbs, activity_level, tdee)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (profile.name.strip(), email, profile.age, profile.sex,
                 profile.height_feet, profile.height_inches, profile.weight_lbs,
                 profile.activity_level, profile.tdee),
            )
            user_id = cursor.lastrowid
    except sqlite3.IntegrityError:
        if get_user_by_email(email, db_path) is not None:
            logger.info("Registration rejected, %s already exists", email)
            return None
        raise

    logger.info("Registered user %d (%s)", user_id, email)
    return user_id


def get_user(user_id: int, db_path: str = DB_PATH) -> Optional[UserProfile]:
    """Load a single user by ID."""
    with get_connection(db_path) as conn:
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        if not row:
            return None
        return _row_to_user(row)


def get_user_by_email(email: str, db_path: str = DB_PATH) -> Optional[UserProfile]:
    with get_connection(db_path) as conn:
        row = conn.execute(
            "SELECT * FROM users WHERE email = ?", (_normalize_email(email),)
        ).fetchone()
        if not row:
            return None
        return _row_to_user(row)


def update_user(profile: UserProfile, db_path: str = DB_PATH) -> bool:
    """Save profile changes. The email is never changed. Returns True if a row was updated."""
    with get_connection(db_path) as conn:
        cursor = conn.execute(
            """UPDATE users SET name=?, age=?, sex=?, height_feet=?, height_inches=?,
               weight_lbs=?, activity_level=?, tdee=?, updated_at=CURRENT_TIMESTAMP
               WHERE id=?""",
            (profile.name, profile.age, profile.sex, profile.height_feet,
             profile.height_inches, profile.weight_lbs, profile.activity_level,
             profile.tdee, profile.id),
        )
        return cursor.rowcount > 0


def record_quiz_answers(user: UserProfile, biometrics: BiometricInput, energy: EnergyResult) -> UserProfile:
    """Copy quiz answers and the estimated TDEE onto a profile (not saved)."""
    user.age = biometrics.age_years
    user.sex = biometrics.sex
    user.height_feet = biometrics.height_feet
    user.height_inches = biometrics.height_inches
    user.weight_lbs = biometrics.weight_pounds
    user.activity_level = biometrics.activity_level
    user.tdee = energy.tdee_calories
    return user


def apply_tdee_quiz(
    user_id: int,
    biometrics: BiometricInput,
    unknown_activity: Optional[str] = None,
    db_path: str = DB_PATH,
) -> Optional[Tuple[UserProfile, EnergyResult]]:
    """Estimate TDEE from quiz answers and store it with the biometrics.

    Shared by onboarding and later profile updates. Returns the updated
    profile and the estimate, or None if the user does not exist.
    """
    user = get_user(user_id, db_path)
    if user is None:
        return None

    energy = estimate_tdee(biometrics, unknown_activity)
    update_user(record_quiz_answers(user, biometrics, energy), db_path)
    logger.info("User %d TDEE set to %d kcal", user_id, energy.tdee_calories)
    return get_user(user_id, db_path), energy


def update_profile(
    user_id: int,
    name: Optional[str] = None,
    height_feet: Optional[int] = None,
    height_inches: Optional[int] = None,
    weight_lbs: Optional[float] = None,
    activity_level: Optional[str] = None,
    unknown_activity: Optional[str] = None,
    db_path: str = DB_PATH,
) -> Optional[UserProfile]:
    """Edit the name and body measurements of an existing user.

    Arguments left as None are unchanged. New measurements are run back
    through the TDEE estimate together with the stored age and sex, so
    the quiz must have been taken first. Returns the updated profile, or
    None if the user does not exist.
    """
    user = get_user(user_id, db_path)
    if user is None:
        return None

    if name is not None:
        if not name.strip():
            raise InvalidInputError("name", "is required")
        user.name = name.strip()

    changes = {
        key: value
        for key, value in (("height_feet", height_feet), ("height_inches", height_inches),
                           ("weight_pounds", weight_lbs), ("activity_level", activity_level))
        if value is not None
    }
    if changes:
        if not user.has_completed_quiz:
            raise InvalidInputError(next(iter(changes)), "take the TDEE quiz before editing measurements")
        biometrics = replace(user.biometrics(), **changes)
        energy = estimate_tdee(biometrics, unknown_activity)
        record_quiz_answers(user, biometrics, energy)
        logger.info("User %d measurements updated, TDEE now %d kcal", user_id, energy.tdee_calories)

    update_user(user, db_path)
    return get_user(user_id, db_path)
