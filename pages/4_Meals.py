"""Meals Page.

Import the food catalog and build custom meals from it.
"""

import os
import tempfile

import streamlit as st
from calorie_tracker.food_catalog import (
    CSV_COLUMNS, delete_custom_meal, get_custom_meals, import_foods_csv,
    save_custom_meal, search_foods, update_custom_meal
)
from calorie_tracker.models import InvalidInputError
from pages.components.session import flash, get_active_user, show_flash

st.set_page_config(page_title="Meals | Calorie Tracker", page_icon="🍱", layout="wide")
st.title("🍱 Custom Meals")

user = get_active_user()
if not user:
    st.warning("⚠️ No profile found. Please register first in the Profile page.")
    st.stop()

show_flash()

foods = search_foods()
food_names = {f.id: f"{f.name} ({f.calories:.0f} cal{', ' + f.dining_hall if f.dining_hall else ''})" for f in foods}

# Catalog import
with st.expander("📥 Import food catalog", expanded=not foods):
    st.caption(f"CSV columns: {', '.join(CSV_COLUMNS)}")
    uploaded = st.file_uploader("Catalog CSV", type=["csv"])
    if uploaded is not None and st.button("Import", use_container_width=True):
        fd, path = tempfile.mkstemp(suffix=".csv")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(uploaded.getvalue())
            count = import_foods_csv(path)
        except InvalidInputError as e:
            st.error(f"⚠️ {e}")
        else:
            flash(f"✅ Imported {count} foods")
            st.rerun()
        finally:
            os.unlink(path)

if not foods:
    st.info("The catalog is empty. Import a CSV above to start building meals.")
    st.stop()

# Create
st.markdown("### New Meal")
with st.form("new_meal", clear_on_submit=True):
    name = st.text_input("Meal name*", placeholder="e.g. Usual breakfast")
    selected = st.multiselect("Foods*", options=list(food_names), format_func=food_names.get)
    submitted = st.form_submit_button("💾 Save Meal", use_container_width=True)

if submitted:
    try:
        save_custom_meal(user.id, name, selected)
    except InvalidInputError as e:
        st.error(f"⚠️ {e}")
    else:
        flash(f"✅ Saved {name.strip()}")
        st.rerun()

st.divider()

# Existing meals
st.markdown("### Your Meals")
meals = get_custom_meals(user.id)
if not meals:
    st.info("No custom meals yet.")

for meal in meals:
    n = meal.nutrition
    with st.expander(f"**{meal.name}** • {n.calories:.0f} cal"):
        st.caption(
            f"{n.protein_g:.0f}g protein • {n.carbs_g:.0f}g carbs • {n.fat_g:.0f}g fat"
        )
        with st.form(f"edit_meal_{meal.id}"):
            new_name = st.text_input("Name", value=meal.name)
            new_foods = st.multiselect(
                "Foods", options=list(food_names), format_func=food_names.get,
                default=[f for f in dict.fromkeys(meal.food_ids) if f in food_names]
            )
            col1, col2 = st.columns(2)
            save = col1.form_submit_button("💾 Update", use_container_width=True)
            delete = col2.form_submit_button("🗑️ Delete", use_container_width=True)

        if save:
            try:
                update_custom_meal(meal.id, user.id, new_name, new_foods)
            except InvalidInputError as e:
                st.error(f"⚠️ {e}")
            else:
                flash(f"✅ Updated {new_name.strip()}")
                st.rerun()
        if delete:
            delete_custom_meal(meal.id, user.id)
            flash(f"🗑️ Deleted {meal.name}")
            st.rerun()
