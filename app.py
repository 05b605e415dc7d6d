import streamlit as st

from sections import arrest_map, model_performance, overview

st.set_page_config(
    page_title="SF Arrest Map",
    page_icon="🗺️",
    layout="wide"
)

SECTIONS = {
    "Overview":   overview.render,
    "Model":      model_performance.render,
    "Arrest Map": arrest_map.render,
}

# ── Sidebar ───────────────────────────────────────────────────────

st.sidebar.title("SF Arrest Map")
section = st.sidebar.radio("Navigate", list(SECTIONS))

st.sidebar.caption(
    "Outputs are read from data/processed/. "
    "Run `python run_all.py` to rebuild them."
)

# ── Page ──────────────────────────────────────────────────────────

SECTIONS[section]()
