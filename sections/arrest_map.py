"""
sections/arrest_map.py
----------------------
'Arrest Map' section — the model's predicted arrest type across a
regular grid over San Francisco, for the fixed target timestamp and
hour by hour through one day.

The target-time grid and the animation are precomputed by
03_grid_predictions.py. The 'Any other time' panel scores the coarse
lattice live with the cached model. Colours come from
category_colours.csv so a category looks the same in every panel and
in the exported HTML maps.
"""

import pandas as pd
import streamlit as st

from arrestmap.charts import grid_animation, grid_map, grid_raster
from arrestmap.constants import ANIMATION_RESOLUTION, CHART_CONFIG, SF_BOUNDS
from arrestmap.data_loaders import colour_map, load_grid_outputs, load_model
from arrestmap.grid import predict_grid


def render():
    st.title("Where Would an Arrest Be, and for What?")
    st.markdown("""
    Every dot is a point on a regular grid across the city. Its colour is
    the arrest type the model rates most likely there, at the stated time,
    if an arrest happened. These are not forecasts of how many arrests will
    happen: the model was trained only on places and times where arrests
    did happen.
    """)

    data    = load_grid_outputs()
    grid    = data["grid"]
    colours = colour_map(data["colours"])

    timestamp = pd.Timestamp(grid["timestamp"].iloc[0])
    shares = grid["predicted_category"].value_counts(normalize=True)

    col1, col2, col3 = st.columns(3)
    col1.metric("Grid points", f"{len(grid):,}")
    col2.metric("Most common prediction", shares.index[0], f"{shares.iloc[0]:.0%} of grid",
                delta_color="off")
    col3.metric("Mean confidence", f"{grid['confidence'].mean():.2f}")

    _render_static_map(grid, colours, timestamp)

    st.divider()

    _render_animation(data["animation"], colours)

    st.divider()

    _render_any_time(colours, timestamp)


def _render_static_map(grid: pd.DataFrame, colours: dict, timestamp: pd.Timestamp):
    st.subheader(f"{timestamp:%A %d %B %Y, %H:%M}")

    min_conf = st.slider(
        "Hide points where the model's confidence is below",
        min_value=0.0, max_value=1.0, value=0.0, step=0.05,
    )
    shown = grid[grid["confidence"] >= min_conf]
    if shown.empty:
        st.info("No grid points reach that confidence.")
        return

    fig = grid_map(shown, colours)
    st.plotly_chart(fig, use_container_width=True, config=CHART_CONFIG)


def _render_animation(animation: pd.DataFrame, colours: dict):
    st.subheader("Through the day")
    if animation.empty:
        st.info(
            "grid_animation.csv not found. "
            "Run processing/03_grid_predictions.py to build the hourly frames."
        )
        return

    st.markdown("""
    The same grid, one frame per hour. Press play, or drag the slider to
    step through the day. Only the hour changes between frames; place,
    month, year and weekday stay fixed.
    """)
    fig = grid_animation(animation, colours)
    st.plotly_chart(fig, use_container_width=True)


@st.cache_data
def _score_timestamp(_model, fingerprint: tuple, timestamp: pd.Timestamp) -> pd.DataFrame:
    # streamlit does not hash _model; fingerprint keys the cache on the booster.
    return predict_grid(_model, SF_BOUNDS, ANIMATION_RESOLUTION, timestamp)


def _render_any_time(colours: dict, default: pd.Timestamp):
    st.subheader("Any other time")
    st.markdown(f"""
    Pick a date and hour and the model scores a {ANIMATION_RESOLUTION} × {ANIMATION_RESOLUTION}
    grid for it on the spot. Years outside the training data are
    extrapolation: the model has never seen them.
    """)

    col1, col2 = st.columns(2)
    day  = col1.date_input("Date", value=default.date())
    hour = col2.slider("Hour", min_value=0, max_value=23, value=default.hour)

    model = load_model()
    timestamp = pd.Timestamp(day) + pd.Timedelta(hours=hour)
    frame = _score_timestamp(model, model.fingerprint, timestamp)

    fig = grid_raster(
        frame, ANIMATION_RESOLUTION, model.label_index, colours,
        title=f"{timestamp:%A %d %B %Y, %H:%M}",
    )
    st.plotly_chart(fig, use_container_width=True, config=CHART_CONFIG)
