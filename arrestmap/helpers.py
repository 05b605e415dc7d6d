"""
arrestmap/helpers.py
--------------------
Small general-purpose helper functions used across scripts and sections.
These are pure Python with no Streamlit or Plotly dependencies
so they can also be used safely inside processing scripts.

Import example:
    from arrestmap.helpers import counts_by, fmt_pct
"""

import pandas as pd


# ── DataFrame helpers ─────────────────────────────────────────────

def get_stat(stats_df: pd.DataFrame, stat_name: str) -> float:
    """
    Retrieve a single value from a two-column (stat, value) frame such
    as model_stats.csv.

    Returns float('nan') rather than raising if the stat is absent, so
    callers can format it safely without a try/except.
    """
    if stats_df.empty or "stat" not in stats_df.columns:
        return float("nan")
    vals = stats_df.loc[stats_df["stat"] == stat_name, "value"].values
    return float(vals[0]) if len(vals) else float("nan")


def counts_by(df: pd.DataFrame, columns: list[str]) -> pd.DataFrame:
    """Row counts per combination of `columns`, as a 'count' column."""
    return df.groupby(columns).size().reset_index(name="count")


# ── Formatting helpers ────────────────────────────────────────────

def fmt_pct(value: float, sign: bool = False, decimals: int = 1) -> str:
    """
    Format a fraction (0-1) as a percentage string.

    Args:
        value:    Fraction, e.g. 0.312 for 31.2%.
        sign:     If True, prepend '+' for positive values.
        decimals: Number of decimal places.

    Returns:
        Formatted string e.g. '31.2%', '+4.0%'.
    """
    fmt = f"+.{decimals}f" if sign else f".{decimals}f"
    return f"{value * 100:{fmt}}%"


def fmt_count(value: float | int) -> str:
    """Format a number with thousands separator."""
    return f"{int(value):,}"
