"""
arrestmap/constants.py
----------------------
Shared constants used across the processing scripts, the library
modules and the dashboard sections.
Import from here rather than defining locally in scripts or sections.

The feature schema (FEATURE_COLUMNS) and the day-of-week ordinal table
are fixed: a model trained against one schema can only be scored
against the same schema, so change them together with a retrain.
"""

import os

# ── Paths ─────────────────────────────────────────────────────────
RAW_DIR       = os.path.join("data", "raw")
PROCESSED_DIR = os.path.join("data", "processed")
MODELS_DIR    = "models"
MAPS_DIR      = os.path.join("outputs", "maps")

RAW_INCIDENTS_FILE = "Police_Department_Incidents.csv"
CLEAN_ARRESTS_FILE = "arrests_clean.csv"
MODEL_FILE         = "arrest_type_model.pkl"

# ── Raw input schema ──────────────────────────────────────────────
# Raw SFPD export column → snake_case name used everywhere downstream.
RAW_COLUMNS = {
    "Category":   "category",
    "DayOfWeek":  "day_of_week",
    "Date":       "date",
    "Time":       "time",
    "Resolution": "resolution",
    "X":          "x",
    "Y":          "y",
}

ARREST_TOKEN = "ARREST"

# ── Feature schema ────────────────────────────────────────────────
FEATURE_COLUMNS = ["x", "y", "hour", "month", "year", "day_of_week"]

# Monday=0 .. Sunday=6 so Saturday and Sunday sit next to each other.
DAY_OF_WEEK_ORDINALS = {
    "Monday":    0,
    "Tuesday":   1,
    "Wednesday": 2,
    "Thursday":  3,
    "Friday":    4,
    "Saturday":  5,
    "Sunday":    6,
}

# ── Split / training ──────────────────────────────────────────────
RANDOM_STATE        = 42
TRAIN_FRACTION      = 0.70
VALIDATION_FRACTION = 0.15   # share of the training partition held out for early stopping
MIN_CLASS_SAMPLES   = 2
MIN_CATEGORY_ARRESTS = 10  # rarer categories are dropped in script 01 so both splits can hold them

MODEL_DEFAULTS = dict(
    max_rounds=500,
    early_stopping_patience=20,
    worker_threads=4,
    learning_rate=0.1,
    num_leaves=31,
)

LOG_EVALUATION_PERIOD = 25

# ── Grid inference ────────────────────────────────────────────────
# (min_x, min_y, max_x, max_y) in degrees, covering San Francisco.
SF_BOUNDS = (-122.52, 37.70, -122.35, 37.82)

GRID_RESOLUTION       = 200            # points per axis → 40,000 grid points
TARGET_TIMESTAMP      = "2016-05-13 18:00"
ANIMATION_BASE        = "2016-05-13 00:00"
ANIMATION_HOUR_OFFSETS = list(range(24))
ANIMATION_RESOLUTION  = 80             # coarser lattice per frame keeps the HTML small
FRAME_LABEL_FORMAT    = "%Y-%m-%d %H:%M"

# ── Plotly chart config ───────────────────────────────────────────
CHART_CONFIG = {'displayModeBar': False, 'scrollZoom': False}

# Qualitative palette drawn from for per-category colours. Shuffled
# once per run with an explicit seed (see grid.category_colours).
CATEGORY_PALETTE = [
    '#e74c3c', '#e67e22', '#f1c40f', '#2ecc71', '#1abc9c',
    '#3498db', '#9b59b6', '#34495e', '#95a5a6', '#d35400',
    '#c0392b', '#16a085', '#27ae60', '#2980b9', '#8e44ad',
    '#f39c12', '#7f8c8d', '#ff6f91', '#845ec2', '#00c9a7',
    '#b39cd0', '#4b4453', '#c34a36', '#ff8066', '#008f7a',
    '#0081cf', '#d5cabd', '#926c00', '#4e8397', '#a178df',
    '#00896f', '#ffc75f', '#f9f871', '#b0a8b9', '#c4fcef',
    '#2c73d2', '#4d8076', '#ff9671', '#fbeaff',
]

# ── Map defaults ──────────────────────────────────────────────────
SF_MAP_CENTRE = {'lat': 37.76, 'lon': -122.435}
SF_MAP_ZOOM   = 11
MAPBOX_STYLE  = 'carto-positron'

# ── DataFrame column rename mappings ─────────────────────────────
STATS_RENAME = {
    'accuracy':            'Accuracy',
    'accuracy_lower':      'Accuracy 95% CI (lower)',
    'accuracy_upper':      'Accuracy 95% CI (upper)',
    'no_information_rate': 'No information rate',
    'accuracy_p_value':    'P-value [Acc > NIR]',
    'kappa':               'Kappa',
    'macro_f1':            'Macro F1',
    'log_loss':            'Multiclass log-loss',
    'n':                   'Test records',
}

# ── Shared layout defaults applied to all Plotly figures ─────────
BASE_LAYOUT = dict(
    plot_bgcolor='rgba(0,0,0,0)',
    paper_bgcolor='rgba(0,0,0,0)',
    dragmode=False,
    hovermode='x unified',
)

AXIS_DEFAULTS = dict(
    showspikes=False,
    gridcolor='rgba(255,255,255,0.05)',
)

LEGEND_TOP = dict(
    orientation='h',
    yanchor='bottom',
    y=1.02,
)
