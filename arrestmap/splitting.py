"""
arrestmap/splitting.py
----------------------
Stratified train/test partitioning of labelled arrest records.

The seed is always passed in by the caller; nothing here touches the
global numpy random state.
"""

import numpy as np
from sklearn.model_selection import train_test_split

from arrestmap.constants import MIN_CLASS_SAMPLES
from arrestmap.errors import InsufficientClassSamples


def check_class_counts(labels, minimum: int = MIN_CLASS_SAMPLES) -> None:
    """Raise InsufficientClassSamples for the first class below `minimum`."""
    classes, counts = np.unique(np.asarray(labels), return_counts=True)
    for label, count in zip(classes, counts):
        if count < minimum:
            raise InsufficientClassSamples(label.item(), int(count), minimum)


def check_side_sizes(labels, train_fraction: float) -> None:
    """
    Raise InsufficientClassSamples when the train or test side is too
    small to hold one record of every class. Sizes are rounded the way
    train_test_split rounds them: train is floored, test takes the rest.
    """
    n_rows = len(labels)
    n_classes = np.unique(np.asarray(labels)).size
    n_train = int(np.floor(train_fraction * n_rows))
    n_test = n_rows - n_train
    for side, size in (("train", n_train), ("test", n_test)):
        if size < n_classes:
            raise InsufficientClassSamples(None, size, n_classes, side=side)


def stratified_split(labels, train_fraction: float, seed: int) -> tuple:
    """
    Partition row positions into train and test sets so that each
    class keeps roughly `train_fraction` of its rows in train.

    Args:
        labels:         Label index per row.
        train_fraction: Share of rows assigned to train, in (0, 1).
        seed:           Seed for the shuffle.

    Returns:
        (train_idx, test_idx) as sorted int arrays of row positions.
    """
    if not 0 < train_fraction < 1:
        raise ValueError(f"train_fraction must be in (0, 1), got {train_fraction}")

    labels = np.asarray(labels)
    check_class_counts(labels)
    check_side_sizes(labels, train_fraction)

    positions = np.arange(len(labels))
    train_idx, test_idx = train_test_split(
        positions,
        train_size=train_fraction,
        stratify=labels,
        random_state=seed,
    )
    return np.sort(train_idx), np.sort(test_idx)
