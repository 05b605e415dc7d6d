"""
arrestmap/loader.py
-------------------
Reads the raw SFPD incident export and reduces it to arrest records.

The raw export has one row per incident with the resolution as free
text ('ARREST, BOOKED', 'ARREST, CITED', 'JUVENILE ARRESTED', 'NONE',
...). Only rows whose resolution mentions an arrest are kept, and the
upper-case category text is title-cased for display.

Import example:
    from arrestmap.loader import load_arrests
"""

import os
import re

import pandas as pd

from arrestmap.constants import ARREST_TOKEN, RAW_COLUMNS

# A letter starts a new word at the start of the string or after
# whitespace, '/', '-' or '('. Apostrophes do not start a word.
_WORD_START = re.compile(r"(^|[\s/\-(])([a-z])")


def read_incidents(path: str) -> pd.DataFrame:
    """
    Read the raw incidents CSV, keeping only the consumed columns
    renamed to snake_case.

    Raises:
        ValueError: if any of the expected raw columns is missing.
    """
    header = pd.read_csv(path, nrows=0).columns
    missing = [c for c in RAW_COLUMNS if c not in header]
    if missing:
        raise ValueError(
            f"{path} is missing columns: {missing}. Found: {list(header)}"
        )

    df = pd.read_csv(
        path,
        usecols=list(RAW_COLUMNS),
        dtype={"Date": str, "Time": str},
        low_memory=False,
    )
    return df.rename(columns=RAW_COLUMNS)[list(RAW_COLUMNS.values())]


def filter_arrests(df: pd.DataFrame) -> pd.DataFrame:
    """Keep rows whose resolution mentions an arrest."""
    mask = (
        df["resolution"]
        .fillna("")
        .str.upper()
        .str.contains(ARREST_TOKEN, regex=False)
    )
    return df.loc[mask].copy()


def normalize_category(series: pd.Series) -> pd.Series:
    """
    Title-case category text.

    'LARCENY/THEFT' → 'Larceny/Theft', 'DRIVER'S LICENSE' → 'Driver's License'.
    """
    return (
        series.str.strip()
        .str.lower()
        .str.replace(_WORD_START, lambda m: m.group(1) + m.group(2).upper(), regex=True)
    )


def drop_out_of_bounds(df: pd.DataFrame, bounds: tuple) -> pd.DataFrame:
    """
    Drop rows with missing coordinates or coordinates outside
    bounds = (min_x, min_y, max_x, max_y). The raw export carries a
    handful of Y=90 placeholder rows that would otherwise stretch
    every map.
    """
    min_x, min_y, max_x, max_y = bounds
    df = df.dropna(subset=["x", "y"])
    inside = (
        df["x"].between(min_x, max_x) &
        df["y"].between(min_y, max_y)
    )
    return df.loc[inside].copy()


def read_clean_arrests(path: str) -> pd.DataFrame:
    """
    Read arrests_clean.csv back. Date and time stay strings so values
    like '0915' keep their leading zero.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(
            f"{path} not found. Run processing/01_clean_incidents.py first."
        )
    return pd.read_csv(path, dtype={"date": str, "time": str, "category": str})


def load_arrests(path: str) -> pd.DataFrame:
    df = read_incidents(path)
    df = filter_arrests(df)
    df["category"] = normalize_category(df["category"])
    return df.reset_index(drop=True)
