"""
04_precompute_summary.py
------------------------
Pre-computes small aggregations from arrests_clean.csv so that the
dashboard does not need to load the full arrest file at runtime.

Outputs (all small, suitable for git):
    data/processed/arrests_by_category.csv  — arrests per category
    data/processed/arrests_by_hour.csv      — arrests per category and hour
    data/processed/arrests_by_weekday.csv   — arrests per category and day of week
    data/processed/headline_totals.csv      — total arrests and year range

Run from project root:
    python processing/04_precompute_summary.py
"""

import os

import pandas as pd

from arrestmap.constants import CLEAN_ARRESTS_FILE, PROCESSED_DIR
from arrestmap.encoding import encode_features
from arrestmap.helpers import counts_by
from arrestmap.loader import read_clean_arrests

ARRESTS_PATH = os.path.join(PROCESSED_DIR, CLEAN_ARRESTS_FILE)
OUT_DIR      = PROCESSED_DIR


def main():
    print("04_precompute_summary.py")
    print("=" * 50)

    print("Loading arrests...")
    arrests = read_clean_arrests(ARRESTS_PATH)
    print(f"  {len(arrests):,} records")

    features = encode_features(arrests)
    arrests["hour"]    = features["hour"]
    arrests["year"]    = features["year"]
    arrests["weekday"] = features["day_of_week"]

    os.makedirs(OUT_DIR, exist_ok=True)

    # ── 1. Arrests per category ───────────────────────────────────
    print("  Building arrests_by_category.csv...")
    by_category = counts_by(arrests, ["category"]).sort_values("count", ascending=False)
    by_category.to_csv(os.path.join(OUT_DIR, "arrests_by_category.csv"), index=False)
    print(f"    ✓ {len(by_category)} categories")

    # ── 2. Arrests per category and hour ──────────────────────────
    print("  Building arrests_by_hour.csv...")
    by_hour = counts_by(arrests, ["category", "hour"])
    by_hour.to_csv(os.path.join(OUT_DIR, "arrests_by_hour.csv"), index=False)
    print(f"    ✓ {len(by_hour):,} rows")

    # ── 3. Arrests per category and weekday ───────────────────────
    print("  Building arrests_by_weekday.csv...")
    by_weekday = counts_by(arrests, ["category", "weekday", "day_of_week"])
    by_weekday.to_csv(os.path.join(OUT_DIR, "arrests_by_weekday.csv"), index=False)
    print(f"    ✓ {len(by_weekday):,} rows")

    # ── 4. Headline totals scalar ─────────────────────────────────
    print("  Building headline_totals.csv...")
    headline = pd.DataFrame([{
        "total_arrests": len(arrests),
        "categories":    arrests["category"].nunique(),
        "year_from":     int(arrests["year"].min()),
        "year_to":       int(arrests["year"].max()),
    }])
    headline.to_csv(os.path.join(OUT_DIR, "headline_totals.csv"), index=False)
    print(f"    ✓ 1 row")

    print(f"\n✓ Summary outputs written to {OUT_DIR}")


if __name__ == "__main__":
    main()
