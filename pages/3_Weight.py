"""Weight Page.

Log body weight (one reading per day) and view the trend.
"""

import streamlit as st
import pandas as pd
from datetime import date
from calorie_tracker.models import InvalidInputError
from calorie_tracker.tracker import get_weight_history, log_weight
from pages.components.charts import create_weight_trend
from pages.components.session import flash, get_active_user, show_flash

st.set_page_config(page_title="Weight | Calorie Tracker", page_icon="⚖️", layout="wide")
st.title("⚖️ Log Your Weight")

user = get_active_user()
if not user:
    st.warning("⚠️ No profile found. Please register first in the Profile page.")
    st.stop()

show_flash()

with st.form("log_weight_form", clear_on_submit=True):
    col1, col2 = st.columns(2)
    with col1:
        weight = st.number_input(
            "Weight (lbs)*", min_value=0.0, max_value=1000.0,
            value=float(user.weight_lbs or 0.0), step=0.1
        )
    with col2:
        entry_date = st.date_input("Date", value=date.today())
    submitted = st.form_submit_button("💾 Log Weight", use_container_width=True)

if submitted:
    try:
        log_weight(user.id, weight, entry_date)
    except InvalidInputError as e:
        st.error(f"⚠️ {e}")
    else:
        flash(f"✅ Logged {weight:.1f} lbs for {entry_date.isoformat()}")
        st.rerun()

history = get_weight_history(user.id)

st.plotly_chart(create_weight_trend(history), use_container_width=True)

st.markdown("### History")
if history:
    df = pd.DataFrame(
        [(e.entry_date, e.weight_lbs) for e in history],
        columns=["Date", "Weight (lbs)"],
    )
    df["Change"] = df["Weight (lbs)"].diff(-1)
    st.dataframe(df, use_container_width=True, hide_index=True)
else:
    st.info("No weight entries yet")
