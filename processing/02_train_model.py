"""
02_train_model.py
-----------------
Trains a LightGBM multiclass model predicting the arrest category from
location and time (x, y, hour, month, year, day_of_week).

Steps:
  1. Build the label index once over the full arrest corpus
     (categories ordered by UTF-8 bytes, index 0 = first).
  2. Encode every record against that index.
  3. Stratified train/test split (TRAIN_FRACTION), seeded explicitly.
  4. Carve a stratified validation slice out of the train split and
     train with early stopping on multiclass log-loss. The test split
     is never seen during training.
  5. Score the test split, reduce to (label, confidence), and write
     the confusion table, overall and per-class statistics, and the
     feature importance table.
  6. Save the booster together with its label index as one joblib file.

Outputs:
    data/processed/label_index.csv
    data/processed/confusion_table.csv
    data/processed/confusion_matrix.csv
    data/processed/model_stats.csv
    data/processed/class_stats.csv
    data/processed/feature_importance.csv
    data/processed/test_predictions.csv
    models/arrest_type_model.pkl

Run from project root:
    python processing/02_train_model.py
"""

import os

import numpy as np

from arrestmap.constants import (
    CLEAN_ARRESTS_FILE,
    MODEL_DEFAULTS,
    MODEL_FILE,
    MODELS_DIR,
    PROCESSED_DIR,
    RANDOM_STATE,
    TRAIN_FRACTION,
    VALIDATION_FRACTION,
)
from arrestmap.encoding import LabelIndex, encode_records
from arrestmap.evaluation import (
    confusion_matrix_frame,
    confusion_table,
    overall_stats,
    per_class_stats,
    stats_frame,
)
from arrestmap.loader import read_clean_arrests
from arrestmap.model import ArrestModel, ModelConfig, feature_importance_table, fit, save_model
from arrestmap.splitting import stratified_split

# ── Paths ─────────────────────────────────────────────────────────
ARRESTS_PATH = os.path.join(PROCESSED_DIR, CLEAN_ARRESTS_FILE)
OUT_MODEL    = os.path.join(MODELS_DIR, MODEL_FILE)


def out(filename: str) -> str:
    return os.path.join(PROCESSED_DIR, filename)


# ── Training ──────────────────────────────────────────────────────

def split_for_training(labels: np.ndarray, seed: int) -> tuple:
    """
    Train/test split, then a validation slice out of train.

    Returns:
        (fit_idx, valid_idx, test_idx) as row positions into `labels`.
    """
    train_idx, test_idx = stratified_split(labels, TRAIN_FRACTION, seed)
    fit_pos, valid_pos = stratified_split(
        labels[train_idx], 1 - VALIDATION_FRACTION, seed
    )
    return train_idx[fit_pos], train_idx[valid_pos], test_idx


def train_and_evaluate(df, label_index: LabelIndex, seed: int = RANDOM_STATE) -> tuple:
    features, labels = encode_records(df, label_index)

    fit_idx, valid_idx, test_idx = split_for_training(labels, seed)
    print(f"  Fit rows:         {len(fit_idx):,}")
    print(f"  Validation rows:  {len(valid_idx):,}")
    print(f"  Test rows:        {len(test_idx):,}")

    config = ModelConfig(num_classes=len(label_index), seed=seed, **MODEL_DEFAULTS)

    print(f"\n── Training (max {config.max_rounds} rounds, "
          f"patience {config.early_stopping_patience}) ──────────")
    booster = fit(
        features.iloc[fit_idx],
        labels[fit_idx],
        config,
        valid=(features.iloc[valid_idx], labels[valid_idx]),
    )
    print(f"  Best iteration:   {booster.best_iteration}")

    model = ArrestModel(booster=booster, label_index=label_index, config=config)

    test_features = features.iloc[test_idx]
    test_labels   = labels[test_idx]
    proba = model.predict_proba(test_features)
    scored = model.predict_frame(test_features)
    predicted = scored["predicted_label"].to_numpy()

    stats = overall_stats(predicted, test_labels, proba=proba, num_classes=len(label_index))

    print(f"\n── Test split performance ───────────────────────────")
    print(f"  Accuracy:         {stats['accuracy']:.3f} "
          f"(95% CI {stats['accuracy_lower']:.3f}–{stats['accuracy_upper']:.3f})")
    print(f"  No-info rate:     {stats['no_information_rate']:.3f}  "
          f"p[Acc > NIR]={stats['accuracy_p_value']:.2e}")
    print(f"  Kappa:            {stats['kappa']:.3f}")
    print(f"  Log-loss:         {stats['log_loss']:.3f}")

    importance = feature_importance_table(booster)
    print(f"\n── Feature importance (gain) ────────────────────────")
    for _, row in importance.iterrows():
        print(f"  {row['feature']:<14} {row['gain_pct']:6.2f}%")

    model.evaluation = stats

    test_predictions = df.iloc[test_idx][["x", "y", "category"]].copy()
    test_predictions["actual_label"]       = test_labels
    test_predictions["predicted_label"]    = predicted
    test_predictions["predicted_category"] = scored["predicted_category"]
    test_predictions["confidence"]         = scored["confidence"].round(4)

    outputs = {
        "confusion_table":  confusion_table(predicted, test_labels, label_index),
        "confusion_matrix": confusion_matrix_frame(predicted, test_labels, label_index),
        "model_stats":      stats_frame(stats),
        "class_stats":      per_class_stats(predicted, test_labels, label_index),
        "importance":       importance,
        "test_predictions": test_predictions,
    }
    return model, outputs


# ── Main ──────────────────────────────────────────────────────────

def main():
    print("02_train_model.py")
    print("=" * 50)

    print("Loading arrests...")
    df = read_clean_arrests(ARRESTS_PATH)
    print(f"  {len(df):,} arrests")

    print("Building label index over the full corpus...")
    label_index = LabelIndex.from_categories(df["category"])
    print(f"  {len(label_index)} categories")

    model, outputs = train_and_evaluate(df, label_index)

    os.makedirs(PROCESSED_DIR, exist_ok=True)
    label_index.to_frame().to_csv(out("label_index.csv"), index=False)
    outputs["confusion_table"].to_csv(out("confusion_table.csv"), index=False)
    outputs["confusion_matrix"].to_csv(out("confusion_matrix.csv"))
    outputs["model_stats"].to_csv(out("model_stats.csv"), index=False)
    outputs["class_stats"].to_csv(out("class_stats.csv"), index=False)
    outputs["importance"].to_csv(out("feature_importance.csv"), index=False)
    outputs["test_predictions"].to_csv(out("test_predictions.csv"), index=False)
    print(f"\n✓ Evaluation outputs written to {PROCESSED_DIR}")

    save_model(model, OUT_MODEL)
    print(
        f"✓ Model saved to {OUT_MODEL}\n"
        f"  {len(label_index)} classes, best iteration {model.best_iteration}, "
        f"test accuracy {model.evaluation['accuracy']:.3f}"
    )


if __name__ == "__main__":
    main()
