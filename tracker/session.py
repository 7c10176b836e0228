from __future__ import annotations

from typing import Optional

import streamlit as st

from tracker.config import Settings
from tracker.errors import StoreReadError
from tracker.identity import Identity, resolve_identity

SESSION_EMAIL_KEY = "collection_tracker_email"


def sign_in(email: str) -> None:
    st.session_state[SESSION_EMAIL_KEY] = str(email).strip().lower()


def sign_out() -> None:
    st.session_state.pop(SESSION_EMAIL_KEY, None)


def current_identity(conn, settings: Settings) -> Optional[Identity]:
    email = st.session_state.get(SESSION_EMAIL_KEY)
    if not email:
        return None
    return resolve_identity(conn, email, settings.admin_email)


def require_identity(conn, settings: Settings, *, admin: bool = False) -> Identity:
    """Stop the page unless someone is signed in (as admin when `admin`)."""
    try:
        ident = current_identity(conn, settings)
    except StoreReadError as e:
        st.error(str(e))
        st.stop()
    if ident is None:
        st.info("Sign in on the Home page first.")
        st.stop()
    if admin and not ident.is_admin:
        st.warning("This page is for the administrator only.")
        st.stop()
    return ident
