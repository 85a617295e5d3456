"""Session helpers shared by the Streamlit pages."""

import streamlit as st
from calorie_tracker.db import init_db
from calorie_tracker.user_store import get_user


def init_session():
    """Initialize the DB and session keys once per browser session."""
    if 'db_initialized' not in st.session_state:
        init_db()
        st.session_state.db_initialized = True
    if 'user_id' not in st.session_state:
        st.session_state.user_id = 1


def get_active_user():
    """Load the active user fresh from the database (None if not registered)."""
    init_session()
    return get_user(st.session_state.user_id)


def flash(message):
    """Queue a success message to show after the next st.rerun()."""
    st.session_state.flash = message


def show_flash():
    message = st.session_state.pop('flash', None)
    if message:
        st.success(message)
