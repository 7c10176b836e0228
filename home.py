from __future__ import annotations

import streamlit as st

from tracker.config import get_settings
from tracker.db import get_conn, ensure_schema
from tracker.errors import StoreReadError
from tracker.session import current_identity, sign_in, sign_out

st.set_page_config(page_title="Daily Collection Tracker", page_icon="📊", layout="wide")

st.title("📊 Daily Collection Tracker")
st.caption("Branch managers record daily Target / ACH / Cash per executive. The administrator reviews, corrects and exports.")

settings = get_settings()
conn = get_conn(settings.db_path)
ensure_schema(conn)

with st.sidebar:
    st.subheader("Environment")
    st.write(f"**Data directory:** `{settings.data_dir}`")
    st.write(f"**Database:** `{settings.db_path.name}`")
    st.write(f"**Telegram:** {'configured' if settings.telegram_configured else 'not configured'}")

try:
    ident = current_identity(conn, settings)
except StoreReadError as e:
    st.error(str(e))
    st.stop()

if ident is None:
    with st.form("sign_in"):
        email = st.text_input("Email")
        if st.form_submit_button("Continue", type="primary"):
            if email.strip():
                sign_in(email)
                st.rerun()
            else:
                st.error("Enter your email.")
    st.stop()

st.success(f"Signed in as **{ident.email}**" + (" (Administrator)" if ident.is_admin else ""))

if ident.is_admin:
    st.info("Use **Admin** to review all branches and **Branches** to manage them.", icon="ℹ️")
elif ident.has_branch:
    st.info(f"Branch: **{ident.branch.name}**. Use **Daily Entry** to record today's figures.", icon="ℹ️")
else:
    st.error("No branch is assigned to this email. Ask the administrator to set you as a branch manager.")

if st.button("Sign out"):
    sign_out()
    st.rerun()
