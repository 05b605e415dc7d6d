"""
01_clean_incidents.py
---------------------
Reads the raw SFPD incident export, keeps arrest records, title-cases
the category text, drops rows outside the city, validates the date,
time and day-of-week fields, and writes data/processed/arrests_clean.csv.

Raw file expected at:
    data/raw/Police_Department_Incidents.csv

Columns consumed: Category, DayOfWeek, Date (MM/DD/YYYY), Time (HH:MM),
Resolution, X, Y.

Run from project root:
    python processing/01_clean_incidents.py
"""

import os

from arrestmap.constants import (
    CLEAN_ARRESTS_FILE,
    DAY_OF_WEEK_ORDINALS,
    MIN_CATEGORY_ARRESTS,
    PROCESSED_DIR,
    RAW_DIR,
    RAW_INCIDENTS_FILE,
    SF_BOUNDS,
)
from arrestmap.encoding import encode_features
from arrestmap.loader import drop_out_of_bounds, filter_arrests, normalize_category, read_incidents

# ── Paths ─────────────────────────────────────────────────────────
RAW_PATH    = os.path.join(RAW_DIR, RAW_INCIDENTS_FILE)
OUTPUT_PATH = os.path.join(PROCESSED_DIR, CLEAN_ARRESTS_FILE)


# ── Helpers ───────────────────────────────────────────────────────

def drop_rare_categories(df, minimum: int):
    """
    Stratified splitting needs every category on both sides of the
    train/test split and again of the validation slice, which a
    handful of records cannot supply.
    """
    counts = df["category"].value_counts()
    rare = counts[counts < minimum]
    for category, count in rare.items():
        print(f"  dropping {category} ({count} arrests)")
    return df[~df["category"].isin(rare.index)].reset_index(drop=True)


def validate(df):
    """
    Print a summary and fail on any record the encoder would reject.
    Encoding the whole frame once here means script 02 never meets a
    malformed timestamp halfway through training.
    """
    print(f"\n── Validation ───────────────────────────────")
    print(f"  Arrest rows:      {len(df):,}")
    print(f"  Categories:       {df['category'].nunique()}")

    unknown_days = set(df["day_of_week"].dropna().unique()) - set(DAY_OF_WEEK_ORDINALS)
    if unknown_days:
        print(f"  WARNING - unexpected day_of_week values: {unknown_days}")

    features = encode_features(df)
    print(f"  Year range:       {features['year'].min()} to {features['year'].max()}")
    print(f"  Hours covered:    {features['hour'].nunique()} of 24")

    print(f"\n  Top categories:")
    for category, count in df["category"].value_counts().head(10).items():
        print(f"    {category}: {count:,}")


# ── Main ──────────────────────────────────────────────────────────

def main():
    print("01_clean_incidents.py")
    print("=" * 50)

    if not os.path.exists(RAW_PATH):
        raise FileNotFoundError(
            f"Raw incident file not found at {RAW_PATH}.\n"
            "Download the SFPD incident export (Police Department Incidents) "
            "from DataSF and save it there."
        )

    print(f"Loading {RAW_PATH}...")
    raw = read_incidents(RAW_PATH)
    print(f"  {len(raw):,} raw incidents")

    print("Filtering to arrests...")
    arrests = filter_arrests(raw)
    print(f"  {len(arrests):,} arrests")

    arrests["category"] = normalize_category(arrests["category"])

    print("Dropping rows outside the city bounds...")
    before = len(arrests)
    arrests = drop_out_of_bounds(arrests, SF_BOUNDS).reset_index(drop=True)
    print(f"  {before - len(arrests):,} dropped")

    print(f"Dropping categories with fewer than {MIN_CATEGORY_ARRESTS} arrests...")
    arrests = drop_rare_categories(arrests, MIN_CATEGORY_ARRESTS)

    validate(arrests)

    os.makedirs(os.path.dirname(OUTPUT_PATH), exist_ok=True)
    arrests.to_csv(OUTPUT_PATH, index=False)
    print(f"\n✓ Written to {OUTPUT_PATH}")


if __name__ == "__main__":
    main()
