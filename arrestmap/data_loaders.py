"""
arrestmap/data_loaders.py
-------------------------
All data loading functions for the dashboard.
Every function is decorated with @st.cache_data or @st.cache_resource
so that data is only read from disk once per session.

The dashboard never trains or scores anything itself: it reads the
files written by the processing scripts, and stops with a message
naming the script to run when one is missing.
"""

import os

import pandas as pd
import streamlit as st

from arrestmap.constants import MODEL_FILE, MODELS_DIR, PROCESSED_DIR
from arrestmap.model import load_model as _load_model_file

# ── Paths ─────────────────────────────────────────────────────────
_PROCESSED = PROCESSED_DIR
_MODELS    = MODELS_DIR


def _path(filename: str) -> str:
    return os.path.join(_PROCESSED, filename)


def _load_group(files: dict, script: str, optional: set = frozenset()) -> dict:
    """
    Read a group of processed CSVs into {key: DataFrame}.

    Missing optional files come back as empty DataFrames; any other
    missing file stops the page with the script that writes it.
    """
    result  = {}
    missing = []

    for key, filename in files.items():
        try:
            result[key] = pd.read_csv(_path(filename))
        except FileNotFoundError:
            if key in optional:
                result[key] = pd.DataFrame()
            else:
                missing.append(filename)
        except Exception as e:
            st.error(f"Could not load {filename}: {e}")
            st.stop()

    if missing:
        st.error(
            f"Files not found: {', '.join(missing)}. "
            f"Run {script} first."
        )
        st.stop()

    return result


# ── Model ─────────────────────────────────────────────────────────

def load_model():
    """
    The trained ArrestModel. The cache is keyed on the file's
    modification time, so a retrain is picked up without a restart.
    """
    model_path = os.path.join(_MODELS, MODEL_FILE)
    modified = os.path.getmtime(model_path) if os.path.exists(model_path) else None
    return _load_model_cached(model_path, modified)


@st.cache_resource
def _load_model_cached(model_path: str, modified: float | None):
    try:
        return _load_model_file(model_path)
    except FileNotFoundError:
        st.error(
            f"{MODEL_FILE} not found. "
            "Run processing/02_train_model.py first."
        )
        st.stop()
    except Exception as e:
        st.error(f"Could not load the arrest model: {e}")
        st.stop()


# ── Overview section ──────────────────────────────────────────────

@st.cache_data
def load_arrest_summary() -> dict:
    return _load_group(
        {
            "by_category": "arrests_by_category.csv",
            "by_hour":     "arrests_by_hour.csv",
            "by_weekday":  "arrests_by_weekday.csv",
            "headline":    "headline_totals.csv",
        },
        "processing/04_precompute_summary.py",
    )


# ── Model section ─────────────────────────────────────────────────

@st.cache_data
def load_evaluation() -> dict:
    """
    Keys:
        stats       – model_stats.csv (stat, value)
        class_stats – class_stats.csv
        confusion   – confusion_matrix.csv, wide, indexed by predicted category
        importance  – feature_importance.csv
    """
    data = _load_group(
        {
            "stats":       "model_stats.csv",
            "class_stats": "class_stats.csv",
            "confusion":   "confusion_matrix.csv",
            "importance":  "feature_importance.csv",
        },
        "processing/02_train_model.py",
    )
    data["confusion"] = data["confusion"].set_index("predicted")
    return data


# ── Arrest map section ────────────────────────────────────────────

@st.cache_data
def load_grid_outputs() -> dict:
    data = _load_group(
        {
            "grid":      "grid_predictions.csv",
            "animation": "grid_animation.csv",
            "colours":   "category_colours.csv",
        },
        "processing/03_grid_predictions.py",
        optional={"animation"},
    )
    return data


def colour_map(colours: pd.DataFrame) -> dict:
    """category_colours.csv → {category: colour}, in label index order."""
    return dict(zip(colours["category"], colours["colour"]))
