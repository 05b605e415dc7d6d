"""
arrestmap/evaluation.py
-----------------------
Test-split evaluation of reduced predictions against true label
indices: confusion tables, overall statistics and per-class scores.

Overall statistics follow the usual confusion-matrix report:
accuracy with an exact binomial 95% interval, the no-information rate
(share of the most frequent true class), a one-sided binomial test of
accuracy against that rate, and Cohen's kappa. Multiclass log-loss is
added when the probability matrix is supplied.
"""

import numpy as np
import pandas as pd
from scipy import stats
from sklearn.metrics import (
    accuracy_score,
    cohen_kappa_score,
    confusion_matrix,
    f1_score,
    log_loss,
    precision_recall_fscore_support,
)


def _check_lengths(predicted, actual):
    predicted = np.asarray(predicted, dtype=np.int64)
    actual    = np.asarray(actual, dtype=np.int64)
    if predicted.shape != actual.shape:
        raise ValueError(
            f"predicted and actual differ in length: {predicted.shape} vs {actual.shape}"
        )
    if predicted.size == 0:
        raise ValueError("Cannot evaluate an empty prediction set")
    return predicted, actual


def confusion_matrix_frame(predicted, actual, label_index) -> pd.DataFrame:
    """
    Wide C × C confusion matrix: rows are predicted categories,
    columns are actual categories.
    """
    predicted, actual = _check_lengths(predicted, actual)
    labels = list(range(len(label_index)))
    # sklearn puts true labels on rows; transpose for predicted-by-actual.
    matrix = confusion_matrix(actual, predicted, labels=labels).T
    names = list(label_index.categories)
    return pd.DataFrame(matrix, index=pd.Index(names, name="predicted"),
                        columns=pd.Index(names, name="actual"))


def confusion_table(predicted, actual, label_index) -> pd.DataFrame:
    """
    Long-form confusion counts keyed by (predicted_label, actual_label),
    one row for every pair of categories including zero counts.
    """
    wide = confusion_matrix_frame(predicted, actual, label_index)
    return (
        wide.stack()
        .rename("count")
        .reset_index()
        .rename(columns={"predicted": "predicted_label", "actual": "actual_label"})
    )


def overall_stats(predicted, actual, proba=None, num_classes: int | None = None) -> dict:
    """
    Args:
        predicted:   Predicted label indices.
        actual:      True label indices.
        proba:       Optional probability matrix, enables log_loss.
        num_classes: Number of classes in the label index (for log_loss).

    Returns:
        dict with accuracy, accuracy_lower, accuracy_upper,
        no_information_rate, accuracy_p_value, kappa, macro_f1,
        log_loss (nan without proba) and n.
    """
    predicted, actual = _check_lengths(predicted, actual)
    n = int(actual.size)
    correct = int((predicted == actual).sum())

    accuracy = accuracy_score(actual, predicted)
    ci = stats.binomtest(correct, n).proportion_ci(confidence_level=0.95, method="exact")

    nir = np.bincount(actual).max() / n
    p_value = stats.binomtest(correct, n, p=nir, alternative="greater").pvalue

    # Kappa is undefined when only one class appears in both vectors.
    if np.unique(np.concatenate([predicted, actual])).size > 1:
        kappa = cohen_kappa_score(actual, predicted)
    else:
        kappa = float("nan")

    if proba is not None:
        proba = np.asarray(proba, dtype=np.float64)
        labels = list(range(num_classes if num_classes is not None else proba.shape[1]))
        loss = log_loss(actual, proba, labels=labels)
    else:
        loss = float("nan")

    return {
        "accuracy":            round(float(accuracy), 4),
        "accuracy_lower":      round(float(ci.low), 4),
        "accuracy_upper":      round(float(ci.high), 4),
        "no_information_rate": round(float(nir), 4),
        "accuracy_p_value":    float(p_value),
        "kappa":               round(float(kappa), 4),
        "macro_f1":            round(float(f1_score(actual, predicted, average="macro", zero_division=0)), 4),
        "log_loss":            round(float(loss), 4),
        "n":                   n,
    }


def per_class_stats(predicted, actual, label_index) -> pd.DataFrame:
    """Precision, recall, F1 and support per category."""
    predicted, actual = _check_lengths(predicted, actual)
    labels = list(range(len(label_index)))
    precision, recall, f1, support = precision_recall_fscore_support(
        actual, predicted, labels=labels, zero_division=0
    )
    return pd.DataFrame({
        "label_index": labels,
        "category":    list(label_index.categories),
        "precision":   precision.round(4),
        "recall":      recall.round(4),
        "f1":          f1.round(4),
        "support":     support,
    })


def stats_frame(stats_dict: dict) -> pd.DataFrame:
    """Overall stats as a two-column (stat, value) frame for CSV output."""
    return pd.DataFrame(
        [{"stat": k, "value": v} for k, v in stats_dict.items()]
    )
