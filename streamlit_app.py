"""Streamlit frontend for the Calorie Tracker.

Main entry point for the multi-page Streamlit application. The home page is
the daily dashboard.
"""

import streamlit as st
from datetime import date

from calorie_tracker.config import DB_PATH, MEAL_TYPES
from calorie_tracker.dashboard import build_dashboard
from pages.components.charts import create_progress_gauge, create_streak_chart, create_weight_trend
from pages.components.nutrition_display import render_progress, render_targets
from pages.components.session import get_active_user

st.set_page_config(
    page_title="Calorie Tracker",
    page_icon="🥗",
    layout="wide",
    initial_sidebar_state="expanded"
)

user = get_active_user()

# Sidebar: Show current user info
with st.sidebar:
    st.markdown("## 🥗 Calorie Tracker")
    st.markdown("---")

    if user:
        st.success(f"👤 **{user.name}**")
        if user.tdee:
            st.metric("Daily TDEE", f"{user.tdee} kcal")
    else:
        st.warning("⚠️ No profile found")
        st.caption("Register in the Profile page")

    st.markdown("---")
    st.markdown("### Navigation")
    st.markdown("- 📋 **Profile** - Register, TDEE quiz & edit profile")
    st.markdown("- 🍽️ **Food Log** - Log or pick what you eat")
    st.markdown("- ⚖️ **Weight** - Log your weight")
    st.markdown("- 🍱 **Meals** - Catalog import & custom meals")

st.title("🥗 Dashboard")

if not user:
    st.info("Welcome! Go to the **Profile** page to register and take the TDEE quiz.")
    st.stop()

dashboard = build_dashboard(user, st.date_input("Day", value=date.today()))

if dashboard is None:
    st.info("Complete the TDEE quiz on the **Profile** page to see your targets.")
    st.stop()

targets = dashboard.targets
pct = dashboard.progress_pct()

st.markdown("### Daily Targets")
render_targets(targets)

st.markdown("### Today's Progress")
col1, col2 = st.columns([1, 2])
with col1:
    st.metric(
        "Calories Remaining",
        f"{dashboard.calories_remaining:.0f} kcal",
        delta=f"{dashboard.totals.calories:.0f} / {targets.calories} eaten",
        delta_color="off"
    )
with col2:
    render_progress(dashboard)

col_a, col_b, col_c = st.columns(3)
with col_a:
    st.plotly_chart(create_progress_gauge(
        dashboard.totals.protein_g, targets.protein_g, pct["protein"], "Protein"
    ), use_container_width=True)
with col_b:
    st.plotly_chart(create_progress_gauge(
        dashboard.totals.carbs_g, targets.carbs_g, pct["carbs"], "Carbs"
    ), use_container_width=True)
with col_c:
    st.plotly_chart(create_progress_gauge(
        dashboard.totals.fat_g, targets.fat_g, pct["fat"], "Fat"
    ), use_container_width=True)

st.markdown("### Meals")
for meal_type in MEAL_TYPES:
    entries = dashboard.meals.get(meal_type, [])
    cal = sum(e.calories for e in entries)
    with st.expander(f"{meal_type.capitalize()} ({cal:.0f} cal, {len(entries)} item(s))"):
        if not entries:
            st.caption(f"No {meal_type} items logged yet")
        for e in entries:
            st.caption(
                f"{e.name} - {e.calories:.0f} cal • {e.protein_g:.0f}g protein • "
                f"{e.carbs_g:.0f}g carbs • {e.fat_g:.0f}g fat"
            )

col1, col2 = st.columns(2)
with col1:
    st.plotly_chart(create_weight_trend(dashboard.weight_history), use_container_width=True)
with col2:
    st.plotly_chart(create_streak_chart(dashboard.streak), use_container_width=True)
    st.caption(f"You've logged food on {dashboard.days_logged} of the last {len(dashboard.streak)} days")

st.markdown("---")
st.caption(f"All data is stored locally in a SQLite database at `{DB_PATH}`.")
