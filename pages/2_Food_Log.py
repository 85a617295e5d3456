"""Food Log Page.

Log foods by meal, by hand or from the food catalog, and review the diary for any day.
"""

import streamlit as st
import pandas as pd
from datetime import date, timedelta
from calorie_tracker.config import MEAL_TYPES
from calorie_tracker.food_catalog import (
    dining_halls, get_custom_meals, log_catalog_food, log_custom_meal, search_foods
)
from calorie_tracker.models import FoodEntry, InvalidInputError
from calorie_tracker.tracker import (
    delete_food_entry, entries_by_meal, get_food_entries,
    get_food_entries_between, log_food, totals, totals_by_meal
)
from pages.components.charts import create_daily_calories_trend
from pages.components.nutrition_display import render_nutrition_card
from pages.components.session import flash, get_active_user, show_flash

st.set_page_config(page_title="Food Log | Calorie Tracker", page_icon="🍽️", layout="wide")
st.title("🍽️ Food Log")

user = get_active_user()
if not user:
    st.warning("⚠️ No profile found. Please register first in the Profile page.")
    st.stop()

show_flash()

selected_date = st.date_input("Day", value=date.today())

# Logging form
st.markdown("### Log Food")

with st.form("log_food_form", clear_on_submit=True):
    col1, col2, col3 = st.columns([3, 2, 2])
    with col1:
        name = st.text_input("Food*", placeholder="e.g. Greek yogurt")
    with col2:
        meal_type = st.selectbox("Meal*", options=list(MEAL_TYPES))
    with col3:
        serving = st.text_input("Serving size", placeholder="e.g. 6 oz")

    col1, col2, col3, col4 = st.columns(4)
    calories = col1.number_input("Calories", min_value=0.0, value=0.0, step=10.0)
    protein = col2.number_input("Protein (g)", min_value=0.0, value=0.0, step=1.0)
    carbs = col3.number_input("Carbs (g)", min_value=0.0, value=0.0, step=1.0)
    fat = col4.number_input("Fat (g)", min_value=0.0, value=0.0, step=1.0)

    submitted = st.form_submit_button("📝 Log Food", use_container_width=True)

if submitted:
    try:
        entry = FoodEntry(
            id=None, user_id=user.id, name=name, calories=calories,
            protein_g=protein, carbs_g=carbs, fat_g=fat,
            meal_type=meal_type, entry_date=selected_date, serving_size=serving
        )
        log_food(user.id, entry)
    except InvalidInputError as e:
        st.error(f"⚠️ {e}")
    else:
        flash(f"✅ Logged: {entry.name} ({entry.calories:.0f} cal)")
        st.rerun()

st.divider()

# Catalog picker
st.markdown("### Pick from the Catalog")

col1, col2, col3 = st.columns([3, 2, 2])
with col1:
    query = st.text_input("Search", placeholder="Food or dining hall")
with col2:
    hall = st.selectbox("Dining hall", ["All"] + dining_halls())
with col3:
    pick_meal = st.selectbox("Add to", options=list(MEAL_TYPES), key="pick_meal")

with st.expander("Filters"):
    col1, col2, col3 = st.columns(3)
    max_calories = col1.slider("Max calories", 0, 1000, 1000, step=10)
    max_fat = col2.slider("Max fat (g)", 0, 50, 50)
    max_carbs = col3.slider("Max carbs (g)", 0, 100, 100)
    show_meals = st.checkbox("Include my custom meals", value=True)

limits = dict(max_calories=max_calories, max_fat=max_fat, max_carbs=max_carbs)
hall_filter = None if hall == "All" else hall
catalog = search_foods(query, hall_filter, **limits)
meals = get_custom_meals(user.id, query, **limits) if show_meals and not hall_filter else []

if not catalog and not meals:
    st.info("No matching foods. Import a catalog CSV on the Meals page.")

for meal in meals:
    n = meal.nutrition
    col1, col2 = st.columns([5, 1])
    with col1:
        st.write(f"🍱 **{meal.name}** ({len(meal.food_ids)} foods)")
        st.caption(f"{n.calories:.0f} cal • {n.protein_g:.0f}g protein • {n.carbs_g:.0f}g carbs • {n.fat_g:.0f}g fat")
    with col2:
        if st.button("➕", key=f"add_meal_{meal.id}"):
            log_custom_meal(user.id, meal.id, pick_meal, selected_date)
            flash(f"✅ Added {meal.name} to {pick_meal}")
            st.rerun()

for food in catalog[:50]:
    col1, col2 = st.columns([5, 1])
    with col1:
        where = f" • {food.dining_hall}" if food.dining_hall else ""
        serving = f" ({food.serving_size})" if food.serving_size else ""
        st.write(f"**{food.name}**{serving}")
        st.caption(
            f"{food.calories:.0f} cal • {food.protein_g:.0f}g protein • "
            f"{food.carbs_g:.0f}g carbs • {food.fat_g:.0f}g fat{where}"
        )
    with col2:
        if st.button("➕", key=f"add_food_{food.id}"):
            log_catalog_food(user.id, food.id, pick_meal, selected_date)
            flash(f"✅ Added {food.name} to {pick_meal}")
            st.rerun()
if len(catalog) > 50:
    st.caption(f"Showing 50 of {len(catalog)} matches. Narrow the search to see more.")

st.divider()

# Diary
entries = get_food_entries(user.id, selected_date)
grouped = entries_by_meal(entries)
meal_totals = totals_by_meal(entries)

st.markdown(f"### Diary for {selected_date.strftime('%B %d, %Y')}")

tabs = st.tabs([m.capitalize() for m in MEAL_TYPES])
for tab, meal in zip(tabs, MEAL_TYPES):
    with tab:
        if not grouped[meal]:
            st.info(f"No {meal} items logged yet")
            continue
        for e in grouped[meal]:
            col1, col2 = st.columns([5, 1])
            with col1:
                serving = f" ({e.serving_size})" if e.serving_size else ""
                st.write(f"**{e.name}**{serving}")
                st.caption(
                    f"{e.calories:.0f} cal • {e.protein_g:.0f}g protein • "
                    f"{e.carbs_g:.0f}g carbs • {e.fat_g:.0f}g fat"
                )
            with col2:
                if st.button("🗑️", key=f"delete_{e.id}"):
                    delete_food_entry(e.id, user.id)
                    st.rerun()
        t = meal_totals[meal]
        st.caption(
            f"Total: {t.calories:.0f} calories • {t.protein_g:.0f}g protein • "
            f"{t.carbs_g:.0f}g carbs • {t.fat_g:.0f}g fat"
        )

render_nutrition_card(totals(entries), title="Daily Totals")

# Last 30 days
st.markdown("### Last 30 Days")
history = get_food_entries_between(user.id, selected_date - timedelta(days=29), selected_date)
st.plotly_chart(create_daily_calories_trend(history, user.tdee), use_container_width=True)

if history:
    df = pd.DataFrame([
        {"Date": e.entry_date, "Meal": e.meal_type, "Food": e.name, "Calories": e.calories,
         "Protein (g)": e.protein_g, "Carbs (g)": e.carbs_g, "Fat (g)": e.fat_g}
        for e in history
    ])
    st.dataframe(df, use_container_width=True, hide_index=True)
