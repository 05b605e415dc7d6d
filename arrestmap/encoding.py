"""
arrestmap/encoding.py
---------------------
Turns arrest records (and synthetic grid points) into the fixed numeric
feature schema the model is trained and scored on, and maps category
text to integer label indices.

Feature schema, in column order (FEATURE_COLUMNS):

    x, y          float   longitude / latitude
    hour          int     0-23, first two characters of the time field
    month         int     1-12, first two characters of the MM/DD/YYYY date
    year          int     absolute calendar year, last four characters of the date
    day_of_week   int     Monday=0 .. Sunday=6

The label index is built once from the full arrest corpus and then
reused unchanged for the train split, the test split and grid
inference. Categories are ordered by their UTF-8 bytes, not by the
platform locale, so the same corpus always produces the same indices.

Every function here is pure: the same frame and label index always
give the same features and labels.
"""

import numpy as np
import pandas as pd

from arrestmap.constants import DAY_OF_WEEK_ORDINALS, FEATURE_COLUMNS
from arrestmap.errors import MalformedTimestamp, UnknownCategory


# ── Label index ───────────────────────────────────────────────────

def _byte_key(category: str) -> bytes:
    return category.encode("utf-8")


class LabelIndex:
    """
    Bijection between category strings and label indices 0..C-1.

    Build with LabelIndex.from_categories() over the whole corpus,
    before splitting.
    """

    def __init__(self, categories):
        categories = list(categories)
        if len(set(categories)) != len(categories):
            raise ValueError("LabelIndex categories must be distinct")
        self._categories = tuple(categories)
        self._index = {c: i for i, c in enumerate(self._categories)}

    @classmethod
    def from_categories(cls, values) -> "LabelIndex":
        distinct = pd.Series(values).dropna().astype(str).unique()
        return cls(sorted(distinct, key=_byte_key))

    @classmethod
    def from_dict(cls, mapping: dict) -> "LabelIndex":
        """Rebuild from {index: category}, e.g. as read back from disk."""
        indices = sorted(int(i) for i in mapping)
        if indices != list(range(len(indices))):
            raise ValueError("Label indices must be contiguous from 0")
        return cls(mapping[i] if i in mapping else mapping[str(i)] for i in indices)

    @property
    def categories(self) -> tuple:
        return self._categories

    def __len__(self) -> int:
        return len(self._categories)

    def __eq__(self, other) -> bool:
        return isinstance(other, LabelIndex) and self._categories == other._categories

    def __repr__(self) -> str:
        return f"LabelIndex({len(self)} categories)"

    def index_of(self, category: str) -> int:
        try:
            return self._index[str(category)]
        except KeyError:
            raise UnknownCategory(category) from None

    def category_of(self, index: int) -> str:
        if not 0 <= index < len(self._categories):
            raise IndexError(f"Label index {index} outside [0, {len(self)})")
        return self._categories[index]

    def encode(self, categories: pd.Series) -> np.ndarray:
        """
        Vectorized category → label index. Values are compared as
        strings, as in from_categories(). Unknown categories raise.
        """
        keys = categories.where(categories.isna(), categories.astype(str))
        labels = keys.map(self._index)
        unknown = labels.isna()
        if unknown.any():
            row = unknown.idxmax()
            raise UnknownCategory(categories.loc[row], row=row)
        return labels.to_numpy(dtype=np.int64)

    def decode(self, labels) -> np.ndarray:
        """Vectorized label index → category."""
        labels = np.asarray(labels, dtype=np.int64)
        if labels.size and (labels.min() < 0 or labels.max() >= len(self)):
            raise IndexError(f"Label indices outside [0, {len(self)})")
        return np.asarray(self._categories, dtype=object)[labels]

    def to_dict(self) -> dict:
        return dict(enumerate(self._categories))

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({
            "label_index": range(len(self)),
            "category":    self._categories,
        })


# ── Field parsers ─────────────────────────────────────────────────

def _parse_digits(
    values: pd.Series,
    digits: pd.Series,
    field: str,
    width: int,
    lo: int,
    hi: int,
) -> pd.Series:
    """
    Convert fixed-width digit substrings to ints, raising
    MalformedTimestamp on the first row that is not `width` digits
    or falls outside [lo, hi].
    """
    ok = digits.str.fullmatch(rf"\d{{{width}}}").fillna(False).astype(bool)
    if not ok.all():
        row = (~ok).idxmax()
        raise MalformedTimestamp(field, values.loc[row], row=row)

    parsed = pd.to_numeric(digits).astype(np.int64)
    in_range = parsed.between(lo, hi)
    if not in_range.all():
        row = (~in_range).idxmax()
        raise MalformedTimestamp(field, values.loc[row], row=row)
    return parsed


def parse_hour(time: pd.Series) -> pd.Series:
    """'1430' and '14:30' both → 14."""
    time = time.astype("string").str.strip()
    return _parse_digits(time, time.str[:2], "time", 2, 0, 23)


def parse_month(date: pd.Series) -> pd.Series:
    date = date.astype("string").str.strip()
    return _parse_digits(date, date.str[:2], "date", 2, 1, 12)


def parse_year(date: pd.Series) -> pd.Series:
    date = date.astype("string").str.strip()
    return _parse_digits(date, date.str[-4:], "date", 4, 1, 9999)


def parse_day_of_week(day: pd.Series) -> pd.Series:
    """Map day names through DAY_OF_WEEK_ORDINALS; anything else raises."""
    ordinals = day.astype("string").str.strip().map(DAY_OF_WEEK_ORDINALS)
    unknown = ordinals.isna()
    if unknown.any():
        row = unknown.idxmax()
        raise MalformedTimestamp("day_of_week", day.loc[row], row=row)
    return ordinals.astype(np.int64)


# ── Encoders ──────────────────────────────────────────────────────

def encode_features(df: pd.DataFrame) -> pd.DataFrame:
    """Raw arrest records → feature frame in FEATURE_COLUMNS order."""
    features = pd.DataFrame({
        "x":           df["x"].astype(np.float64),
        "y":           df["y"].astype(np.float64),
        "hour":        parse_hour(df["time"]),
        "month":       parse_month(df["date"]),
        "year":        parse_year(df["date"]),
        "day_of_week": parse_day_of_week(df["day_of_week"]),
    }, index=df.index)
    return features[FEATURE_COLUMNS]


def encode_records(df: pd.DataFrame, label_index: LabelIndex) -> tuple:
    """
    Encode arrest records into (features, labels).

    Args:
        df:          Records with x, y, time, date, day_of_week, category.
        label_index: The corpus-wide LabelIndex.

    Returns:
        (features DataFrame in FEATURE_COLUMNS order, labels int64 array)
    """
    features = encode_features(df)
    labels = label_index.encode(df["category"])
    return features, labels


def encode_timestamp_features(x, y, timestamp) -> pd.DataFrame:
    """
    Feature frame for synthetic points that all share one timestamp.
    Grid points are never labelled.
    """
    ts = pd.Timestamp(timestamp)
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    if x.shape != y.shape:
        raise ValueError(f"x and y must have the same shape, got {x.shape} and {y.shape}")

    n = x.size
    features = pd.DataFrame({
        "x":           x.ravel(),
        "y":           y.ravel(),
        "hour":        np.full(n, ts.hour, dtype=np.int64),
        "month":       np.full(n, ts.month, dtype=np.int64),
        "year":        np.full(n, ts.year, dtype=np.int64),
        "day_of_week": np.full(n, ts.dayofweek, dtype=np.int64),
    })
    return features[FEATURE_COLUMNS]
