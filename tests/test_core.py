"""
tests/test_core.py
------------------
Unit tests for the arrestmap library: loading, encoding, the label
index, stratified splitting, prediction reduction, evaluation and
grid inference. Everything runs on small synthetic frames, so no
processed data is needed.

Run with:
    pytest tests/test_core.py -v
"""

import numpy as np
import pandas as pd
import pytest

from arrestmap.constants import DAY_OF_WEEK_ORDINALS, FEATURE_COLUMNS
from arrestmap.encoding import (
    LabelIndex,
    encode_features,
    encode_records,
    encode_timestamp_features,
    parse_day_of_week,
    parse_hour,
)
from arrestmap.errors import (
    InsufficientClassSamples,
    MalformedTimestamp,
    ShapeMismatch,
    UnknownCategory,
)
from arrestmap.evaluation import (
    confusion_matrix_frame,
    confusion_table,
    overall_stats,
    per_class_stats,
)
from arrestmap.grid import (
    animation_timestamps,
    build_grid,
    category_colours,
    predict_animation,
    predict_grid,
)
from arrestmap.loader import drop_out_of_bounds, filter_arrests, load_arrests, normalize_category
from arrestmap.reducer import reduce_predictions, reduce_to_frame
from arrestmap.splitting import stratified_split

BOUNDS = (-122.52, 37.70, -122.35, 37.82)

VALID_FIELDS = {"time": "1430", "date": "01/02/2015", "day_of_week": "Monday"}

RAW_ROWS = [
    {"Category": "LARCENY/THEFT", "Resolution": "ARREST, BOOKED", "DayOfWeek": "Monday",
     "Date": "01/02/2015", "Time": "1430", "X": -122.4, "Y": 37.7},
    {"Category": "ASSAULT", "Resolution": "ARREST, CITED", "DayOfWeek": "Tuesday",
     "Date": "03/04/2016", "Time": "0915", "X": -122.41, "Y": 37.71},
    {"Category": "LARCENY/THEFT", "Resolution": "NONE", "DayOfWeek": "Wednesday",
     "Date": "05/06/2017", "Time": "2200", "X": -122.42, "Y": 37.72},
]


# ── Helpers ───────────────────────────────────────────────────────

def record_frame(**overrides) -> pd.DataFrame:
    """Two clean arrest records, with any column overridden."""
    df = pd.DataFrame({
        "category":    ["Larceny/Theft", "Assault"],
        "day_of_week": ["Monday", "Tuesday"],
        "date":        ["01/02/2015", "03/04/2016"],
        "time":        ["1430", "0915"],
        "resolution":  ["ARREST, BOOKED", "ARREST, CITED"],
        "x":           [-122.4, -122.41],
        "y":           [37.7, 37.71],
    })
    for col, values in overrides.items():
        df[col] = values
    return df


def synthetic_arrests(n: int = 300, seed: int = 0, noise: float = 0.0) -> pd.DataFrame:
    """
    Arrests whose category is decided by longitude band. With `noise`,
    that share of rows gets a category drawn at random instead.
    """
    rng = np.random.default_rng(seed)
    x = rng.uniform(-122.50, -122.36, n)
    category = np.where(
        x < -122.45, "Assault",
        np.where(x < -122.40, "Drug/Narcotic", "Larceny/Theft"),
    )
    df = pd.DataFrame({
        "category":    category,
        "day_of_week": rng.choice(list(DAY_OF_WEEK_ORDINALS), n),
        "date":        [f"{m:02d}/15/2016" for m in rng.integers(1, 13, n)],
        "time":        [f"{h:02d}:00" for h in rng.integers(0, 24, n)],
        "x":           x,
        "y":           rng.uniform(37.71, 37.81, n),
    })
    if noise:
        flip = rng.random(n) < noise
        df.loc[flip, "category"] = rng.choice(np.unique(category), flip.sum())
    return df


class StubModel:
    """Probabilities that slide from class 0 to the last class with x."""

    def __init__(self, label_index: LabelIndex):
        self.label_index = label_index

    def predict(self, features):
        n_classes = len(self.label_index)
        t = (features["x"].to_numpy() - BOUNDS[0]) / (BOUNDS[2] - BOUNDS[0])
        centres = np.linspace(0, 1, n_classes)
        scores = np.exp(-((t[:, None] - centres[None, :]) ** 2) * 20)
        proba = scores / scores.sum(axis=1, keepdims=True)
        return reduce_predictions(proba, expected_rows=len(features), num_classes=n_classes)


def train_synthetic(df: pd.DataFrame | None = None, **config_overrides) -> tuple:
    """
    Train a small booster on `df` (synthetic_arrests() by default), early
    stopping on the test split. Returns (ArrestModel, test features, test labels).
    """
    from arrestmap.model import ArrestModel, ModelConfig, fit

    if df is None:
        df = synthetic_arrests()
    label_index = LabelIndex.from_categories(df["category"])
    features, labels = encode_records(df, label_index)
    train_idx, test_idx = stratified_split(labels, 0.7, seed=42)

    settings = {"worker_threads": 1, "seed": 42, **config_overrides}
    config = ModelConfig(num_classes=len(label_index), **settings)
    booster = fit(
        features.iloc[train_idx], labels[train_idx], config,
        valid=(features.iloc[test_idx], labels[test_idx]), log_period=0,
    )
    model = ArrestModel(booster=booster, label_index=label_index, config=config)
    return model, features.iloc[test_idx], labels[test_idx]


# ══════════════════════════════════════════════════════════════════
# Record loader
# ══════════════════════════════════════════════════════════════════

class TestLoader:

    def test_filter_keeps_only_arrests(self):
        df = pd.DataFrame({"resolution": [
            "ARREST, BOOKED", "ARREST, CITED", "JUVENILE ARRESTED", "NONE", None, "UNFOUNDED",
        ]})
        kept = filter_arrests(df)
        assert kept["resolution"].tolist() == [
            "ARREST, BOOKED", "ARREST, CITED", "JUVENILE ARRESTED",
        ]

    @pytest.mark.parametrize("raw, expected", [
        ("LARCENY/THEFT", "Larceny/Theft"),
        ("DRUG/NARCOTIC", "Drug/Narcotic"),
        ("SEX OFFENSES, FORCIBLE", "Sex Offenses, Forcible"),
        ("DRIVER'S LICENSE", "Driver's License"),
        ("FORGERY/COUNTERFEITING", "Forgery/Counterfeiting"),
        ("  ASSAULT ", "Assault"),
    ])
    def test_normalize_category(self, raw, expected):
        assert normalize_category(pd.Series([raw])).iloc[0] == expected

    def test_drop_out_of_bounds_removes_placeholder_rows(self):
        df = pd.DataFrame({"x": [-122.4, -120.5, -122.4, np.nan], "y": [37.75, 90.0, 37.75, 37.75]})
        kept = drop_out_of_bounds(df, BOUNDS)
        assert len(kept) == 2

    def test_missing_raw_column_raises(self, tmp_path):
        path = tmp_path / "incidents.csv"
        pd.DataFrame(RAW_ROWS).drop(columns=["Resolution"]).to_csv(path, index=False)
        with pytest.raises(ValueError, match="Resolution"):
            load_arrests(str(path))


# ══════════════════════════════════════════════════════════════════
# Label index
# ══════════════════════════════════════════════════════════════════

class TestLabelIndex:

    def test_bijection(self):
        values = ["Larceny/Theft", "Assault", "Drug/Narcotic", "Assault", "Warrants"]
        index = LabelIndex.from_categories(values)
        assert len(index) == 4
        for i in range(len(index)):
            assert index.index_of(index.category_of(i)) == i
        for category in set(values):
            assert index.category_of(index.index_of(category)) == category

    def test_lexicographic_order(self):
        index = LabelIndex.from_categories(["Larceny/Theft", "Assault"])
        assert index.to_dict() == {0: "Assault", 1: "Larceny/Theft"}

    def test_byte_order_is_locale_independent(self):
        # UTF-8 bytes: 'B' (0x42) < 'a' (0x61) < 'b' (0x62) < 'Á' (0xC3 0x81)
        index = LabelIndex.from_categories(["b", "Á", "a", "B"])
        assert index.categories == ("B", "a", "b", "Á")

    def test_unknown_category_raises(self):
        index = LabelIndex.from_categories(["Assault"])
        with pytest.raises(UnknownCategory):
            index.index_of("Arson")
        with pytest.raises(UnknownCategory) as exc:
            index.encode(pd.Series(["Assault", "Arson"], index=[10, 11]))
        assert exc.value.row == 11

    def test_non_string_categories_encode(self):
        index = LabelIndex.from_categories([3, 1, 2, 1])
        assert index.categories == ("1", "2", "3")
        assert index.encode(pd.Series([1, 3])).tolist() == [0, 2]
        assert index.index_of(2) == 1

    def test_missing_category_is_unknown(self):
        index = LabelIndex.from_categories(["Assault"])
        with pytest.raises(UnknownCategory) as exc:
            index.encode(pd.Series(["Assault", None]))
        assert exc.value.row == 1

    def test_round_trip_through_dict(self):
        index = LabelIndex.from_categories(["Warrants", "Assault", "Robbery"])
        rebuilt = LabelIndex.from_dict({str(k): v for k, v in index.to_dict().items()})
        assert rebuilt == index

    def test_decode(self):
        index = LabelIndex.from_categories(["Warrants", "Assault", "Robbery"])
        assert index.decode([2, 0]).tolist() == ["Warrants", "Assault"]
        with pytest.raises(IndexError):
            index.decode([3])


# ══════════════════════════════════════════════════════════════════
# Feature encoder
# ══════════════════════════════════════════════════════════════════

class TestFeatureEncoder:

    @pytest.fixture
    def label_index(self):
        return LabelIndex.from_categories(["Larceny/Theft", "Assault"])

    def test_schema(self, label_index):
        features, labels = encode_records(record_frame(), label_index)
        assert list(features.columns) == FEATURE_COLUMNS
        assert features.iloc[0].tolist() == [-122.4, 37.7, 14, 1, 2015, 0]
        assert features.iloc[1].tolist() == [-122.41, 37.71, 9, 3, 2016, 1]
        assert labels.tolist() == [1, 0]

    def test_idempotent(self, label_index):
        df = record_frame()
        first_features, first_labels = encode_records(df, label_index)
        second_features, second_labels = encode_records(df, label_index)
        pd.testing.assert_frame_equal(first_features, second_features)
        np.testing.assert_array_equal(first_labels, second_labels)

    def test_does_not_mutate_input(self, label_index):
        df = record_frame()
        before = df.copy()
        encode_records(df, label_index)
        pd.testing.assert_frame_equal(df, before)

    def test_colon_time_format(self):
        assert parse_hour(pd.Series(["14:30", "00:05", "2359"])).tolist() == [14, 0, 23]

    @pytest.mark.parametrize("column, value", [
        ("time", "ab30"),
        ("time", "25:00"),
        ("time", None),
        ("date", "13/02/2015"),
        ("date", "01/02/15"),
        ("date", "xx/02/2015"),
        ("day_of_week", "Funday"),
        ("day_of_week", "monday"),
    ])
    def test_malformed_fields_raise(self, label_index, column, value):
        df = record_frame(**{column: [VALID_FIELDS[column], value]})
        with pytest.raises(MalformedTimestamp) as exc:
            encode_records(df, label_index)
        assert exc.value.row == 1

    def test_unknown_category_raises(self):
        index = LabelIndex.from_categories(["Assault"])
        with pytest.raises(UnknownCategory):
            encode_records(record_frame(), index)

    def test_weekend_days_adjacent_and_highest(self):
        ordinals = parse_day_of_week(pd.Series(list(DAY_OF_WEEK_ORDINALS)))
        saturday, sunday = ordinals.iloc[5], ordinals.iloc[6]
        assert sunday - saturday == 1
        assert sorted(ordinals)[-2:] == [saturday, sunday]

    def test_timestamp_features(self):
        # 13 May 2016 was a Friday.
        features = encode_timestamp_features([-122.4, -122.5], [37.7, 37.8], "2016-05-13 18:00")
        assert list(features.columns) == FEATURE_COLUMNS
        assert features["hour"].tolist() == [18, 18]
        assert features["month"].tolist() == [5, 5]
        assert features["year"].tolist() == [2016, 2016]
        assert features["day_of_week"].tolist() == [4, 4]

    def test_timestamp_features_match_record_encoding(self):
        record = record_frame().iloc[[0]]
        from_record = encode_features(record).reset_index(drop=True)
        from_timestamp = encode_timestamp_features([-122.4], [37.7], "2015-01-05 14:30")
        # 5 Jan 2015 was a Monday, matching the record's day_of_week.
        pd.testing.assert_frame_equal(from_record, from_timestamp)


# ══════════════════════════════════════════════════════════════════
# Split allocator
# ══════════════════════════════════════════════════════════════════

class TestSplitAllocator:

    @pytest.fixture
    def labels(self):
        return np.array([0] * 100 + [1] * 10)

    def test_proportions(self, labels):
        train_idx, test_idx = stratified_split(labels, 0.7, seed=42)
        train_labels = labels[train_idx]
        assert 68 <= (train_labels == 0).sum() <= 72
        assert 6 <= (train_labels == 1).sum() <= 8

    def test_partition(self, labels):
        train_idx, test_idx = stratified_split(labels, 0.7, seed=42)
        assert set(train_idx).isdisjoint(test_idx)
        assert sorted(np.concatenate([train_idx, test_idx])) == list(range(len(labels)))

    def test_deterministic_for_seed(self, labels):
        a = stratified_split(labels, 0.7, seed=7)
        b = stratified_split(labels, 0.7, seed=7)
        np.testing.assert_array_equal(a[0], b[0])
        np.testing.assert_array_equal(a[1], b[1])

    def test_different_seed_different_split(self, labels):
        a, _ = stratified_split(labels, 0.7, seed=1)
        b, _ = stratified_split(labels, 0.7, seed=2)
        assert not np.array_equal(a, b)

    def test_rare_class_raises(self):
        labels = np.array([0] * 20 + [1])
        with pytest.raises(InsufficientClassSamples) as exc:
            stratified_split(labels, 0.7, seed=42)
        assert exc.value.label == 1
        assert exc.value.count == 1

    @pytest.mark.parametrize("fraction, side, size", [
        (0.9, "test", 2),
        (0.1, "train", 2),
    ])
    def test_side_too_small_for_every_class(self, fraction, side, size):
        # Ten classes of two records each: every class is splittable on its
        # own, but one side of the split cannot hold all ten.
        labels = np.repeat(np.arange(10), 2)
        with pytest.raises(InsufficientClassSamples) as exc:
            stratified_split(labels, fraction, seed=42)
        assert exc.value.side == side
        assert exc.value.count == size
        assert exc.value.minimum == 10

    @pytest.mark.parametrize("fraction", [0.0, 1.0, -0.1, 1.5])
    def test_fraction_out_of_range(self, labels, fraction):
        with pytest.raises(ValueError):
            stratified_split(labels, fraction, seed=42)


# ══════════════════════════════════════════════════════════════════
# Prediction reducer
# ══════════════════════════════════════════════════════════════════

class TestPredictionReducer:

    def test_argmax(self):
        labels, confidence = reduce_predictions([[0.1, 0.7, 0.2]])
        assert labels.tolist() == [1]
        assert confidence.tolist() == pytest.approx([0.7])

    def test_tie_goes_to_lowest_index(self):
        labels, confidence = reduce_predictions([[0.5, 0.5, 0.0]])
        assert labels.tolist() == [0]
        assert confidence.tolist() == pytest.approx([0.5])

    def test_batch(self):
        rng = np.random.default_rng(3)
        proba = rng.dirichlet(np.ones(5), size=40_000)
        labels, confidence = reduce_predictions(proba, expected_rows=40_000, num_classes=5)
        assert labels.shape == (40_000,)
        np.testing.assert_array_equal(labels, proba.argmax(axis=1))
        np.testing.assert_allclose(confidence, proba.max(axis=1))

    @pytest.mark.parametrize("proba, kwargs", [
        ([0.2, 0.8], {}),
        ([[0.2, 0.8]], {"expected_rows": 2}),
        ([[0.2, 0.8]], {"num_classes": 3}),
        (np.zeros((2, 0)), {}),
    ])
    def test_shape_mismatch(self, proba, kwargs):
        with pytest.raises(ShapeMismatch):
            reduce_predictions(proba, **kwargs)

    def test_reduce_to_frame(self):
        index = LabelIndex.from_categories(["Assault", "Larceny/Theft"])
        frame = reduce_to_frame([[0.3, 0.7], [0.9, 0.1]], index)
        assert frame["predicted_category"].tolist() == ["Larceny/Theft", "Assault"]
        assert frame["confidence"].tolist() == pytest.approx([0.7, 0.9])


# ══════════════════════════════════════════════════════════════════
# Evaluator
# ══════════════════════════════════════════════════════════════════

class TestEvaluator:

    @pytest.fixture
    def label_index(self):
        return LabelIndex.from_categories(["Assault", "Larceny/Theft"])

    def test_confusion_table(self, label_index):
        table = confusion_table([0, 1, 1], [0, 1, 0], label_index)
        assert len(table) == 4
        counts = table.set_index(["predicted_label", "actual_label"])["count"]
        assert counts[("Assault", "Assault")] == 1
        assert counts[("Larceny/Theft", "Assault")] == 1
        assert counts[("Larceny/Theft", "Larceny/Theft")] == 1
        assert counts[("Assault", "Larceny/Theft")] == 0

    def test_confusion_matrix_orientation(self, label_index):
        wide = confusion_matrix_frame([1, 1, 1], [0, 0, 1], label_index)
        assert wide.loc["Larceny/Theft", "Assault"] == 2
        assert wide.to_numpy().sum() == 3

    def test_overall_stats(self, label_index):
        proba = [[0.8, 0.2], [0.3, 0.7], [0.4, 0.6]]
        stats = overall_stats([0, 1, 1], [0, 1, 0], proba=proba, num_classes=2)
        assert stats["accuracy"] == pytest.approx(2 / 3, abs=1e-4)
        assert stats["no_information_rate"] == pytest.approx(2 / 3, abs=1e-4)
        assert stats["accuracy_lower"] <= stats["accuracy"] <= stats["accuracy_upper"]
        assert stats["log_loss"] > 0
        assert stats["n"] == 3

    def test_overall_stats_without_proba(self):
        stats = overall_stats([0, 1], [0, 1])
        assert stats["accuracy"] == 1.0
        assert np.isnan(stats["log_loss"])

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            overall_stats([0, 1], [0])

    def test_per_class_stats(self, label_index):
        table = per_class_stats([0, 1, 1], [0, 1, 0], label_index)
        assert table["category"].tolist() == ["Assault", "Larceny/Theft"]
        assert table["support"].tolist() == [2, 1]
        assert table.loc[1, "recall"] == 1.0


# ══════════════════════════════════════════════════════════════════
# Grid inference
# ══════════════════════════════════════════════════════════════════

class TestGridInference:

    @pytest.fixture
    def model(self):
        return StubModel(LabelIndex.from_categories(["Assault", "Drug/Narcotic", "Larceny/Theft"]))

    def test_build_grid_size(self):
        x, y = build_grid(BOUNDS, 200)
        assert x.shape == y.shape == (40_000,)
        assert x.min() == pytest.approx(BOUNDS[0])
        assert y.max() == pytest.approx(BOUNDS[3])

    @pytest.mark.parametrize("resolution", [0, 1])
    def test_build_grid_rejects_tiny_resolution(self, resolution):
        with pytest.raises(ValueError):
            build_grid(BOUNDS, resolution)

    def test_predict_grid_columns(self, model):
        frame = predict_grid(model, BOUNDS, 20, "2016-05-13 18:00")
        assert len(frame) == 400
        assert {"x", "y", "predicted_label", "predicted_category", "confidence", "timestamp"} <= set(frame.columns)
        assert frame["predicted_label"].between(0, 2).all()
        assert frame["confidence"].between(0, 1).all()

    def test_predict_grid_deterministic(self, model):
        a = predict_grid(model, BOUNDS, 30, "2016-05-13 18:00")
        b = predict_grid(model, BOUNDS, 30, "2016-05-13 18:00")
        pd.testing.assert_frame_equal(a, b)

    def test_animation_frames(self, model):
        frames = predict_animation(model, BOUNDS, 10, "2016-05-13 00:00", [0, 1, 2])
        assert frames["frame"].tolist()[::100] == [
            "2016-05-13 00:00", "2016-05-13 01:00", "2016-05-13 02:00",
        ]
        assert len(frames) == 300

    def test_animation_timestamps(self):
        stamps = animation_timestamps("2016-05-13 22:00", [0, 1, 2, 3])
        assert stamps[-1] == pd.Timestamp("2016-05-14 01:00")

    def test_category_colours_stable(self):
        categories = ["Assault", "Drug/Narcotic", "Larceny/Theft"]
        assert category_colours(categories, seed=5) == category_colours(categories, seed=5)
        assert set(category_colours(categories, seed=5)) == set(categories)

    def test_category_colours_cycle_short_palette(self):
        colours = category_colours(["a", "b", "c"], seed=1, palette=["#000000", "#ffffff"])
        assert set(colours.values()) <= {"#000000", "#ffffff"}
        assert len(colours) == 3


# ══════════════════════════════════════════════════════════════════
# LightGBM model
# ══════════════════════════════════════════════════════════════════

class TestModel:

    @pytest.fixture(scope="class")
    def trained(self):
        return train_synthetic(max_rounds=60, early_stopping_patience=5)

    def test_probabilities_shape(self, trained):
        model, features, _ = trained
        proba = model.predict_proba(features)
        assert proba.shape == (len(features), 3)
        np.testing.assert_allclose(proba.sum(axis=1), 1.0, atol=1e-6)

    def test_learns_longitude_bands(self, trained):
        model, features, labels = trained
        predicted, _ = model.predict(features)
        assert (predicted == labels).mean() > 0.8

    def test_feature_importance_sums_to_100(self, trained):
        model, _, _ = trained
        importance = model.feature_importance()
        assert set(importance["feature"]) == set(FEATURE_COLUMNS)
        assert importance["gain_pct"].sum() == pytest.approx(100, abs=0.1)

    def test_grid_inference_deterministic(self, trained):
        model, _, _ = trained
        a = predict_grid(model, BOUNDS, 25, "2016-05-13 18:00")
        b = predict_grid(model, BOUNDS, 25, "2016-05-13 18:00")
        np.testing.assert_array_equal(a["predicted_label"], b["predicted_label"])

    def test_save_and_load(self, trained, tmp_path):
        from arrestmap.model import load_model, save_model

        model, features, _ = trained
        path = str(tmp_path / "model.pkl")
        save_model(model, path)
        loaded = load_model(path)
        assert loaded.label_index == model.label_index
        np.testing.assert_array_equal(loaded.predict(features)[0], model.predict(features)[0])

    def test_early_stopping_before_max_rounds(self):
        # Noisy labels guarantee the validation loss turns upward.
        model, features, _ = train_synthetic(
            synthetic_arrests(n=600, noise=0.3), max_rounds=200, early_stopping_patience=3,
        )
        booster = model.booster
        assert 0 < booster.best_iteration < model.config.max_rounds
        np.testing.assert_allclose(
            model.predict_proba(features),
            booster.predict(features, num_iteration=booster.best_iteration),
        )

    def test_categorical_day_of_week(self):
        day_index = FEATURE_COLUMNS.index("day_of_week")
        model, features, labels = train_synthetic(
            max_rounds=60, early_stopping_patience=5,
            categorical_feature_indices={day_index},
        )
        assert model.config.categorical_features() == [day_index]
        predicted, confidence = model.predict(features)
        assert predicted.shape == labels.shape
        assert (predicted == labels).mean() > 0.8
        assert ((confidence > 0) & (confidence <= 1)).all()

    def test_fingerprint_survives_save_and_load(self, tmp_path):
        from arrestmap.model import load_model, save_model

        # Freshly trained, so no fingerprint is cached before saving.
        model, _, _ = train_synthetic(max_rounds=10, early_stopping_patience=5)
        path = str(tmp_path / "model.pkl")
        save_model(model, path)
        fingerprint = load_model(path).fingerprint
        assert fingerprint == model.fingerprint
        assert isinstance(hash(fingerprint), int)

    def test_fingerprint_changes_with_training(self, trained):
        model, _, _ = trained
        other, _, _ = train_synthetic(max_rounds=3, early_stopping_patience=5)
        assert other.fingerprint != model.fingerprint

    def test_load_missing_model(self, tmp_path):
        from arrestmap.model import load_model

        with pytest.raises(FileNotFoundError):
            load_model(str(tmp_path / "absent.pkl"))

    def test_config_rejects_single_class(self):
        from arrestmap.model import ModelConfig

        with pytest.raises(ValueError):
            ModelConfig(num_classes=1)


# ══════════════════════════════════════════════════════════════════
# End to end
# ══════════════════════════════════════════════════════════════════

class TestEndToEnd:

    def test_three_record_scenario(self, tmp_path):
        path = tmp_path / "incidents.csv"
        pd.DataFrame(RAW_ROWS).to_csv(path, index=False)

        arrests = load_arrests(str(path))
        assert len(arrests) == 2
        assert arrests["category"].tolist() == ["Larceny/Theft", "Assault"]

        label_index = LabelIndex.from_categories(arrests["category"])
        assert label_index.to_dict() == {0: "Assault", 1: "Larceny/Theft"}

        features, labels = encode_records(arrests, label_index)
        assert labels.tolist() == [1, 0]
        assert features["hour"].tolist() == [14, 9]
        assert features["year"].tolist() == [2015, 2016]
        assert features["day_of_week"].tolist() == [0, 1]


class TestRunAll:

    def test_select_from(self):
        from run_all import select_scripts

        assert [n for n, _, _ in select_scripts("02", None)] == ["02", "03", "04"]

    def test_select_only(self):
        from run_all import select_scripts

        assert [n for n, _, _ in select_scripts(None, ["03"])] == ["03"]

    def test_select_unknown_from(self):
        from run_all import select_scripts

        with pytest.raises(ValueError):
            select_scripts("09", None)
