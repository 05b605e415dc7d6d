"""
arrestmap/model.py
------------------
LightGBM multiclass model over the arrest feature schema.

The boosting itself is LightGBM's; this module only builds its
parameters, trains with early stopping on multiclass log-loss, and
packages the trained booster together with the LabelIndex it was
trained against. The two are saved and loaded as one object so a
booster can never be scored with a different label mapping.

Import example:
    from arrestmap.model import ModelConfig, fit, ArrestModel
"""

import hashlib
import os
from dataclasses import dataclass, field
from functools import cached_property

import joblib
import lightgbm as lgb
import numpy as np
import pandas as pd

from arrestmap.constants import (
    FEATURE_COLUMNS,
    LOG_EVALUATION_PERIOD,
    MODEL_DEFAULTS,
    RANDOM_STATE,
)
from arrestmap.encoding import LabelIndex
from arrestmap.reducer import reduce_predictions, reduce_to_frame


# ── Configuration ─────────────────────────────────────────────────

@dataclass
class ModelConfig:
    num_classes: int
    max_rounds: int = MODEL_DEFAULTS["max_rounds"]
    early_stopping_patience: int = MODEL_DEFAULTS["early_stopping_patience"]
    worker_threads: int = MODEL_DEFAULTS["worker_threads"]
    learning_rate: float = MODEL_DEFAULTS["learning_rate"]
    num_leaves: int = MODEL_DEFAULTS["num_leaves"]
    categorical_feature_indices: set | None = None
    seed: int = RANDOM_STATE
    objective: str = "multiclass"
    loss_metric: str = "multi_logloss"

    def __post_init__(self):
        if self.num_classes < 2:
            raise ValueError(
                f"A multiclass model needs at least 2 classes, got {self.num_classes}"
            )
        if self.max_rounds < 1:
            raise ValueError(f"max_rounds must be positive, got {self.max_rounds}")

    def to_lgb_params(self) -> dict:
        return {
            "objective":     self.objective,
            "metric":        self.loss_metric,
            "num_class":     self.num_classes,
            "num_threads":   self.worker_threads,
            "learning_rate": self.learning_rate,
            "num_leaves":    self.num_leaves,
            "seed":          self.seed,
            "deterministic": True,
            "verbosity":     -1,
        }

    def categorical_features(self):
        if not self.categorical_feature_indices:
            return "auto"
        return sorted(self.categorical_feature_indices)


# ── Training / scoring ────────────────────────────────────────────

def fit(
    train_features: pd.DataFrame,
    train_labels,
    config: ModelConfig,
    valid: tuple | None = None,
    log_period: int = LOG_EVALUATION_PERIOD,
) -> lgb.Booster:
    """
    Train a booster.

    Args:
        train_features: Frame in FEATURE_COLUMNS order.
        train_labels:   Label index per row.
        config:         ModelConfig.
        valid:          Optional (features, labels) used for early stopping.
                        Without it the booster runs config.max_rounds rounds.
        log_period:     Print the validation loss every N rounds (0 = silent).

    Returns:
        The trained lightgbm.Booster (best_iteration set when early
        stopping was used).
    """
    categorical = config.categorical_features()
    train_set = lgb.Dataset(
        train_features,
        label=np.asarray(train_labels),
        categorical_feature=categorical,
        free_raw_data=False,
    )

    valid_sets, valid_names, callbacks = [], [], []
    if valid is not None:
        valid_features, valid_labels = valid
        valid_sets.append(lgb.Dataset(
            valid_features,
            label=np.asarray(valid_labels),
            categorical_feature=categorical,
            reference=train_set,
        ))
        valid_names.append("validation")
        callbacks.append(lgb.early_stopping(config.early_stopping_patience, verbose=False))
        if log_period:
            callbacks.append(lgb.log_evaluation(period=log_period))

    return lgb.train(
        config.to_lgb_params(),
        train_set,
        num_boost_round=config.max_rounds,
        valid_sets=valid_sets or None,
        valid_names=valid_names or None,
        callbacks=callbacks,
    )


def predict_proba(booster: lgb.Booster, features: pd.DataFrame) -> np.ndarray:
    """(rows × classes) probabilities, using the best iteration if one was recorded."""
    num_iteration = booster.best_iteration if booster.best_iteration > 0 else None
    return np.asarray(booster.predict(features, num_iteration=num_iteration))


def feature_importance_table(booster: lgb.Booster) -> pd.DataFrame:
    """
    Relative total gain per feature, as a percentage, sorted descending.
    """
    gain = booster.feature_importance(importance_type="gain").astype(np.float64)
    total = gain.sum()
    pct = gain / total * 100 if total > 0 else np.zeros_like(gain)
    table = pd.DataFrame({
        "feature":  booster.feature_name(),
        "gain_pct": pct.round(2),
    })
    return table.sort_values("gain_pct", ascending=False).reset_index(drop=True)


# ── Model bundle ──────────────────────────────────────────────────

@dataclass
class ArrestModel:
    """Trained booster plus everything needed to score and label with it."""

    booster: lgb.Booster
    label_index: LabelIndex
    config: ModelConfig
    feature_columns: list = field(default_factory=lambda: list(FEATURE_COLUMNS))
    evaluation: dict = field(default_factory=dict)

    @property
    def best_iteration(self) -> int:
        return self.booster.best_iteration or self.booster.current_iteration()

    @cached_property
    def fingerprint(self) -> tuple:
        """
        Hashable summary of the trained model, used as a cache key by the
        dashboard. Changes whenever a retrain produces a different booster.
        """
        # Trees only; the trailing parameter block is not part of the model.
        trees = self.booster.model_to_string(num_iteration=-1).split("end of trees")[0]
        tree_hash = hashlib.sha1(trees.encode("utf-8")).hexdigest()
        return (self.best_iteration, self.label_index.categories, tree_hash)

    def predict_proba(self, features: pd.DataFrame) -> np.ndarray:
        return predict_proba(self.booster, features[self.feature_columns])

    def predict(self, features: pd.DataFrame) -> tuple:
        """(label indices, confidences) for each feature row."""
        proba = self.predict_proba(features)
        return reduce_predictions(
            proba, expected_rows=len(features), num_classes=len(self.label_index)
        )

    def predict_frame(self, features: pd.DataFrame) -> pd.DataFrame:
        proba = self.predict_proba(features)
        return reduce_to_frame(proba, self.label_index, index=features.index)

    def feature_importance(self) -> pd.DataFrame:
        return feature_importance_table(self.booster)


def save_model(model: ArrestModel, path: str) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    joblib.dump(model, path)


def load_model(path: str) -> ArrestModel:
    if not os.path.exists(path):
        raise FileNotFoundError(
            f"{path} not found. Run processing/02_train_model.py first."
        )
    model = joblib.load(path)
    if not isinstance(model, ArrestModel):
        raise TypeError(f"{path} does not contain an ArrestModel")
    return model
