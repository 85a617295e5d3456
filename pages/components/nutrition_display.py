"""Nutrition display components for Streamlit pages."""

import streamlit as st
from calorie_tracker.models import Dashboard, Nutrition, MacroTargets


def render_nutrition_card(nutrition: Nutrition, title: str = "Nutrition"):
    """Render calories and macros as a row of metrics.

    Args:
        nutrition: Nutrition object
        title: Card title (default "Nutrition")
    """
    st.markdown(f"### {title}")
    cols = st.columns(4)
    cols[0].metric("Calories", f"{nutrition.calories:.0f}")
    cols[1].metric("Protein", f"{nutrition.protein_g:.0f}g")
    cols[2].metric("Carbs", f"{nutrition.carbs_g:.0f}g")
    cols[3].metric("Fat", f"{nutrition.fat_g:.0f}g")

    pcts = nutrition.macro_percentages()
    st.caption(
        f"Macros: {pcts['protein']:.0f}% protein | "
        f"{pcts['carbs']:.0f}% carbs | "
        f"{pcts['fat']:.0f}% fat"
    )


def render_targets(targets: MacroTargets):
    """Render daily targets, warning when carbs come out negative."""
    cols = st.columns(4)
    cols[0].metric("TDEE", f"{targets.calories} kcal")
    cols[1].metric("Protein", f"{targets.protein_g}g")
    cols[2].metric("Fat", f"{targets.fat_g}g")
    cols[3].metric("Carbs", f"{targets.carbs_g}g")
    st.caption("Protein 1 g/lb, fat 0.4 g/lb, carbohydrates fill the remaining calories.")

    if targets.has_carb_deficit:
        st.warning(
            "⚠️ Your protein and fat targets alone exceed your TDEE, "
            "so the carbohydrate target is negative. Re-check your quiz answers."
        )


def render_progress(dashboard: Dashboard):
    """Render consumed vs target with progress bars.

    Args:
        dashboard: Dashboard for the selected day
    """
    pct = dashboard.progress_pct()
    t = dashboard.targets
    n = dashboard.totals

    metrics = [
        ("Calories", "calories", n.calories, t.calories, "kcal"),
        ("Protein", "protein", n.protein_g, t.protein_g, "g"),
        ("Carbs", "carbs", n.carbs_g, t.carbs_g, "g"),
        ("Fat", "fat", n.fat_g, t.fat_g, "g"),
    ]

    for label, key, actual_val, target_val, unit in metrics:
        col1, col2, col3 = st.columns([2, 3, 1])
        with col1:
            st.metric(label, f"{actual_val:.0f}{unit}", delta=f"Target: {target_val}{unit}", delta_color="off")
        with col2:
            st.progress(pct[key] / 100)
        with col3:
            st.write(f"{pct[key]}%")
