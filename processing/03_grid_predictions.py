"""
03_grid_predictions.py
----------------------
Scores the trained model over a regular lattice covering San Francisco
and renders the predicted arrest type as maps.

  - One static frame at TARGET_TIMESTAMP on a GRID_RESOLUTION lattice
    (200 × 200 = 40,000 points), drawn both over a street basemap and
    as a raster.
  - One animation of hourly frames from ANIMATION_BASE, on the coarser
    ANIMATION_RESOLUTION lattice.

Category colours come from one seeded shuffle of the palette, so a
category keeps its colour across every frame and every map.

Outputs:
    data/processed/grid_predictions.csv
    data/processed/grid_animation.csv
    data/processed/category_colours.csv
    outputs/maps/arrest_type_map.html
    outputs/maps/arrest_type_raster.html
    outputs/maps/arrest_type_animation.html

Run from project root (after 02_train_model.py):
    python processing/03_grid_predictions.py
"""

import os

import pandas as pd

from arrestmap.charts import grid_animation, grid_map, grid_raster
from arrestmap.constants import (
    ANIMATION_BASE,
    ANIMATION_HOUR_OFFSETS,
    ANIMATION_RESOLUTION,
    GRID_RESOLUTION,
    MAPS_DIR,
    MODEL_FILE,
    MODELS_DIR,
    PROCESSED_DIR,
    RANDOM_STATE,
    SF_BOUNDS,
    TARGET_TIMESTAMP,
)
from arrestmap.grid import category_colours, predict_animation, predict_grid
from arrestmap.model import load_model

# ── Paths ─────────────────────────────────────────────────────────
MODEL_PATH = os.path.join(MODELS_DIR, MODEL_FILE)


def out(filename: str) -> str:
    return os.path.join(PROCESSED_DIR, filename)


def map_path(filename: str) -> str:
    return os.path.join(MAPS_DIR, filename)


def summarise_frame(frame: pd.DataFrame):
    shares = frame["predicted_category"].value_counts(normalize=True)
    for category, share in shares.head(5).items():
        print(f"    {category:<28} {share:6.1%} of grid")
    print(f"    mean confidence {frame['confidence'].mean():.3f}")


# ── Main ──────────────────────────────────────────────────────────

def main():
    print("03_grid_predictions.py")
    print("=" * 50)

    print(f"Loading model from {MODEL_PATH}...")
    model = load_model(MODEL_PATH)
    label_index = model.label_index
    print(f"  {len(label_index)} categories")

    colours = category_colours(label_index.categories, seed=RANDOM_STATE)

    print(f"\n── Static grid ({GRID_RESOLUTION}×{GRID_RESOLUTION}) at {TARGET_TIMESTAMP} ──")
    frame = predict_grid(model, SF_BOUNDS, GRID_RESOLUTION, TARGET_TIMESTAMP)
    summarise_frame(frame)

    print(f"\n── Animation ({len(ANIMATION_HOUR_OFFSETS)} hourly frames, "
          f"{ANIMATION_RESOLUTION}×{ANIMATION_RESOLUTION}) ──")
    frames = predict_animation(
        model, SF_BOUNDS, ANIMATION_RESOLUTION, ANIMATION_BASE, ANIMATION_HOUR_OFFSETS
    )
    print(f"  {len(frames):,} rows across {frames['frame'].nunique()} frames")

    os.makedirs(PROCESSED_DIR, exist_ok=True)
    os.makedirs(MAPS_DIR, exist_ok=True)

    frame.to_csv(out("grid_predictions.csv"), index=False)
    frames.to_csv(out("grid_animation.csv"), index=False)
    pd.DataFrame(
        [{"category": c, "colour": colours[c]} for c in label_index.categories]
    ).to_csv(out("category_colours.csv"), index=False)
    print(f"\n✓ Grid predictions written to {PROCESSED_DIR}")

    title = f"Predicted arrest type, {pd.Timestamp(TARGET_TIMESTAMP):%A %d %B %Y %H:%M}"
    grid_map(frame, colours, title=title).write_html(map_path("arrest_type_map.html"))
    grid_raster(frame, GRID_RESOLUTION, label_index, colours, title=title).write_html(
        map_path("arrest_type_raster.html")
    )
    grid_animation(
        frames, colours, title="Predicted arrest type by hour"
    ).write_html(map_path("arrest_type_animation.html"))
    print(f"✓ Maps written to {MAPS_DIR}")


if __name__ == "__main__":
    main()
