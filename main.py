"""
main.py — Sanket Streamlit entry point
--------------------------------------

Run with `streamlit run main.py`.

Pages come from `.streamlit/pages_sections.toml` (Recognition and Tools
groups) or `.streamlit/pages.toml` when the sidebar "Sections" toggle is
off. With APP_MODE=demo the Model Tools page is hidden, so a public demo
cannot overwrite the served `model.json`.
"""

import asyncio

import streamlit as st
from st_pages import add_page_title, get_nav_from_toml, hide_pages

from config.settings import APP_MODE, configure_logging


configure_logging()

# st_pages expects an event loop on the script thread
try:
    asyncio.get_running_loop()
except RuntimeError:
    asyncio.set_event_loop(asyncio.new_event_loop())

st.set_page_config(
    page_title="Sanket — Sign Language Recognition",
    page_icon="🤟",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Grouped (Recognition / Tools) or flat sidebar
sections = st.sidebar.toggle(
    "Sections",
    value=True,
    key="use_sections"
)

nav = get_nav_from_toml(
    ".streamlit/pages_sections.toml" if sections else ".streamlit/pages.toml"
)

pg = st.navigation(nav)

add_page_title(pg)

# Demo deployments cannot rewrite the served model
if APP_MODE.lower() == "demo":
    hide_pages(["Model Tools"])

pg.run()
