"""
arrestmap/grid.py
-----------------
Scores the trained model over a regular lattice of points covering the
city, for one timestamp or for an hourly sequence of timestamps.

Grid points reuse the record encoder's feature schema with every point
sharing the same hour, month, year and weekday, and go through the
same reduction as the test split. They are synthetic: nothing here
feeds back into training.

Import example:
    from arrestmap.grid import predict_grid, predict_animation
"""

import numpy as np
import pandas as pd

from arrestmap.constants import CATEGORY_PALETTE, FRAME_LABEL_FORMAT
from arrestmap.encoding import encode_timestamp_features


def build_grid(bounds: tuple, resolution: int) -> tuple:
    """
    Lattice of resolution × resolution points inside
    bounds = (min_x, min_y, max_x, max_y), edges included.

    Returns:
        (x, y) flat float arrays of length resolution ** 2.
    """
    if resolution < 2:
        raise ValueError(f"Grid resolution must be at least 2, got {resolution}")
    min_x, min_y, max_x, max_y = bounds
    if not (min_x < max_x and min_y < max_y):
        raise ValueError(f"Invalid bounding box {bounds}")

    xs = np.linspace(min_x, max_x, resolution)
    ys = np.linspace(min_y, max_y, resolution)
    grid_x, grid_y = np.meshgrid(xs, ys)
    return grid_x.ravel(), grid_y.ravel()


def predict_grid(model, bounds: tuple, resolution: int, timestamp) -> pd.DataFrame:
    """
    Predicted arrest category at every grid point for one timestamp.

    Args:
        model:      ArrestModel (anything with predict() and label_index).
        bounds:     (min_x, min_y, max_x, max_y).
        resolution: Points per axis.
        timestamp:  Anything pd.Timestamp accepts.

    Returns:
        DataFrame with x, y, predicted_label, predicted_category,
        confidence, timestamp.
    """
    ts = pd.Timestamp(timestamp)
    x, y = build_grid(bounds, resolution)
    features = encode_timestamp_features(x, y, ts)

    labels, confidence = model.predict(features)

    return pd.DataFrame({
        "x":                  features["x"],
        "y":                  features["y"],
        "predicted_label":    labels,
        "predicted_category": model.label_index.decode(labels),
        "confidence":         confidence,
        "timestamp":          ts,
    })


def animation_timestamps(base, hour_offsets) -> list:
    base = pd.Timestamp(base)
    return [base + pd.Timedelta(hours=int(h)) for h in hour_offsets]


def predict_animation(
    model,
    bounds: tuple,
    resolution: int,
    base,
    hour_offsets,
) -> pd.DataFrame:
    """
    One predict_grid() frame per hourly offset from `base`, stacked,
    with a 'frame' column holding the formatted timestamp.
    """
    frames = []
    for ts in animation_timestamps(base, hour_offsets):
        frame = predict_grid(model, bounds, resolution, ts)
        frame["frame"] = ts.strftime(FRAME_LABEL_FORMAT)
        frames.append(frame)
    if not frames:
        raise ValueError("No hour offsets given for the animation")
    return pd.concat(frames, ignore_index=True)


def category_colours(categories, seed: int, palette: list | None = None) -> dict:
    """
    Assign each category a colour from a seeded shuffle of the palette.

    The mapping depends only on the category list and the seed, so
    every frame of an animation (and every rerun) draws a category in
    the same colour. Palettes shorter than the category list are
    cycled.
    """
    palette = list(palette if palette is not None else CATEGORY_PALETTE)
    if not palette:
        raise ValueError("Colour palette is empty")
    rng = np.random.default_rng(seed)
    order = rng.permutation(len(palette))
    shuffled = [palette[i] for i in order]
    return {
        category: shuffled[i % len(shuffled)]
        for i, category in enumerate(categories)
    }
