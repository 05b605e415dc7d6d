"""
arrestmap/reducer.py
--------------------
Collapses a (rows × classes) probability matrix into one predicted
label index and its probability per row.

The same reduction is used for the test split and for grid inference
(tens of thousands of rows), so it stays a single numpy pass.

Ties go to the lowest label index: np.argmax returns the first
occurrence of the maximum, so [0.5, 0.5, 0.0] reduces to (0, 0.5).
"""

import numpy as np
import pandas as pd

from arrestmap.errors import ShapeMismatch


def reduce_predictions(
    proba,
    expected_rows: int | None = None,
    num_classes: int | None = None,
) -> tuple:
    """
    Args:
        proba:         Probability matrix, one row per record.
        expected_rows: If given, the row count the caller scored.
        num_classes:   If given, the number of classes in the label index.

    Returns:
        (label indices as int64 array, max probabilities as float64 array)

    Raises:
        ShapeMismatch: matrix is not 2-D or disagrees with the expected shape.
    """
    proba = np.asarray(proba, dtype=np.float64)
    expected = (
        expected_rows if expected_rows is not None else "any",
        num_classes if num_classes is not None else "any",
    )
    if proba.ndim != 2 or proba.shape[1] == 0:
        raise ShapeMismatch(expected, proba.shape)
    if expected_rows is not None and proba.shape[0] != expected_rows:
        raise ShapeMismatch(expected, proba.shape)
    if num_classes is not None and proba.shape[1] != num_classes:
        raise ShapeMismatch(expected, proba.shape)

    labels = proba.argmax(axis=1).astype(np.int64)
    confidence = proba[np.arange(proba.shape[0]), labels]
    return labels, confidence


def reduce_to_frame(proba, label_index, index=None) -> pd.DataFrame:
    """
    Reduce and attach category names.

    Returns a DataFrame with predicted_label, predicted_category and
    confidence columns.
    """
    expected_rows = len(index) if index is not None else None
    labels, confidence = reduce_predictions(
        proba, expected_rows=expected_rows, num_classes=len(label_index)
    )
    return pd.DataFrame({
        "predicted_label":    labels,
        "predicted_category": label_index.decode(labels),
        "confidence":         confidence,
    }, index=index)
