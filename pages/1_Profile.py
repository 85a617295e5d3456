"""Profile Page.

Register a user, take the TDEE quiz and edit measurements afterwards.
"""

import streamlit as st
from calorie_tracker.config import ACTIVITY_DESCRIPTIONS, ACTIVITY_MULTIPLIERS, SEXES
from calorie_tracker.macro_calculator import allocate_macros
from calorie_tracker.models import BiometricInput, InvalidInputError, UserProfile
from calorie_tracker.user_store import apply_tdee_quiz, create_user, update_profile
from pages.components.charts import create_macro_pie_chart
from pages.components.nutrition_display import render_targets
from pages.components.session import flash, get_active_user, show_flash

st.set_page_config(page_title="Profile | Calorie Tracker", page_icon="📋", layout="wide")
st.title("📋 Profile")

user = get_active_user()
show_flash()

activity_levels = list(ACTIVITY_MULTIPLIERS.keys())


def _activity_label(level):
    return f"{level.replace('-', ' ').title()} - {ACTIVITY_DESCRIPTIONS[level]}"


def _activity_index(level):
    return activity_levels.index(level) if level in activity_levels else 0


# Registration
if not user:
    st.info("No profile found. Register below to get started!")

    with st.form("register_form"):
        name = st.text_input("Name*")
        email = st.text_input("Email*")
        submitted = st.form_submit_button("Register", use_container_width=True)

    if submitted:
        try:
            user_id = create_user(UserProfile(id=None, name=name, email=email))
        except InvalidInputError as e:
            st.error(f"⚠️ {e}")
            st.stop()
        if user_id is None:
            st.error("❌ A user with this email already exists")
            st.stop()
        st.session_state.user_id = user_id
        flash(f"✅ Registered! (ID: {user_id}) Now take the TDEE quiz.")
        st.rerun()
    st.stop()

st.markdown(f"### {user.name}")
st.caption(user.email)

if user.has_completed_quiz:
    targets = allocate_macros(user.tdee, user.weight_lbs)

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Age", f"{user.age} years")
        st.metric("Sex", user.sex.capitalize())
    with col2:
        st.metric("Weight", f"{user.weight_lbs:.1f} lbs")
        st.metric("Height", f"{user.height_feet}'{user.height_inches}\"")
    with col3:
        st.metric("Activity", user.activity_level.replace('-', ' ').title())
        st.metric("TDEE", f"{user.tdee} kcal")

    st.markdown("### Daily Targets")
    render_targets(targets)
    st.plotly_chart(create_macro_pie_chart(targets), use_container_width=True)
    st.divider()

    # Settings
    st.markdown("### Edit Profile")
    current = user.biometrics()
    with st.form("edit_profile"):
        new_name = st.text_input("Name", value=user.name)
        col1, col2, col3 = st.columns(3)
        with col1:
            feet = st.number_input("Height (feet)", min_value=0, max_value=8, value=current.height_feet)
        with col2:
            inches = st.number_input("Height (inches)", min_value=0, max_value=11, value=current.height_inches)
        with col3:
            weight = st.number_input(
                "Weight (lbs)", min_value=1.0, max_value=1000.0,
                value=float(current.weight_pounds), step=0.5
            )
        activity = st.selectbox(
            "Activity Level", activity_levels,
            index=_activity_index(current.activity_level), format_func=_activity_label
        )
        saved = st.form_submit_button("💾 Save Changes", use_container_width=True)

    if saved:
        try:
            updated = update_profile(
                user.id, name=new_name, height_feet=int(feet), height_inches=int(inches),
                weight_lbs=weight, activity_level=activity
            )
        except InvalidInputError as e:
            st.error(f"⚠️ {e}")
        else:
            flash(f"✅ Profile updated. TDEE is now **{updated.tdee} kcal/day**")
            st.rerun()
    st.divider()

# TDEE quiz
st.markdown("### TDEE Quiz" if not user.has_completed_quiz else "### Retake the TDEE Quiz")

with st.form("tdee_quiz"):
    col1, col2 = st.columns(2)
    with col1:
        age = st.number_input("Age*", min_value=1, max_value=120, value=user.age or 25)
    with col2:
        sex = st.selectbox(
            "Sex*",
            list(SEXES),
            index=list(SEXES).index(user.sex) if user.sex in SEXES else 0
        )

    col1, col2, col3 = st.columns(3)
    with col1:
        feet = st.number_input("Height (feet)*", min_value=0, max_value=8, value=user.height_feet or 5)
    with col2:
        inches = st.number_input(
            "Height (inches)*", min_value=0, max_value=11,
            value=user.height_inches if user.height_inches is not None else 10
        )
    with col3:
        weight = st.number_input(
            "Weight (lbs)*", min_value=1.0, max_value=1000.0,
            value=float(user.weight_lbs or 165.0), step=0.5
        )

    activity = st.selectbox(
        "Activity Level*", activity_levels,
        index=_activity_index(user.activity_level), format_func=_activity_label
    )

    submitted = st.form_submit_button("🧮 Calculate TDEE", use_container_width=True)

if submitted:
    try:
        biometrics = BiometricInput.from_form({
            "age_years": age,
            "sex": sex,
            "height_feet": feet,
            "height_inches": inches,
            "weight_pounds": weight,
            "activity_level": activity,
        })
        _, energy = apply_tdee_quiz(user.id, biometrics)
    except InvalidInputError as e:
        st.error(f"⚠️ {e}")
    else:
        flash(
            f"✅ Your TDEE is **{energy.tdee_calories} kcal/day** "
            f"(BMR {energy.bmr:.0f} × {energy.activity_multiplier:g})"
        )
        st.rerun()

st.markdown("---")
st.caption("💡 **Tip:** TDEE is estimated with the Mifflin-St Jeor equation times an activity multiplier.")
