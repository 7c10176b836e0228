from __future__ import annotations

import streamlit as st

from tracker.config import get_settings
from tracker.utils import configure_logging

st.set_page_config(page_title="Daily Collection Tracker", page_icon="📊", layout="wide")

configure_logging(get_settings().log_level)

pages = [
    st.Page("home.py", title="Home", icon="🏠"),
    st.Page("pages/1_📈_Dashboard.py", title="Dashboard", icon="📈"),
    st.Page("pages/2_📝_Daily_Entry.py", title="Daily Entry", icon="📝"),
    st.Page("pages/3_👥_Executives.py", title="Executives", icon="👥"),
    st.Page("pages/4_🏢_Branches.py", title="Branches", icon="🏢"),
    st.Page("pages/5_🛠️_Admin.py", title="Admin", icon="🛠️"),
    st.Page("pages/6_🧪_Data_Management.py", title="Data Management", icon="🧪"),
]

st.navigation(pages).run()
