"""Tests for min-max normalization of continuous features."""

import numpy as np
import pandas as pd
import pytest

from fraud_report.data_loader import (
    BOOLEAN_FEATURES,
    CONTINUOUS_FEATURES,
    generate_synthetic_transactions,
)
from fraud_report.normalizer import MinMaxNormalizer
from fraud_report.splitter import DatasetSplit, StratifiedSplitter


def _make_splits(n: int = 1000):
    df = generate_synthetic_transactions(n_rows=n, fraud_rate=0.09, seed=42)
    return StratifiedSplitter().split(df)


# ── Fitting ────────────────────────────────────────────────────────


def test_fit_transform_maps_min_to_zero_and_max_to_one():
    splits = _make_splits()
    result = MinMaxNormalizer().fit_transform(splits.train)
    for col in CONTINUOUS_FEATURES:
        assert result[col].min() == pytest.approx(0.0)
        assert result[col].max() == pytest.approx(1.0)


def test_boolean_features_pass_through():
    splits = _make_splits()
    result = MinMaxNormalizer().fit_transform(splits.train)
    pd.testing.assert_frame_equal(result[BOOLEAN_FEATURES], splits.train[BOOLEAN_FEATURES])


def test_input_not_mutated():
    splits = _make_splits()
    original = splits.train.copy()
    MinMaxNormalizer().fit_transform(splits.train)
    pd.testing.assert_frame_equal(splits.train, original)


def test_values_outside_fitted_range_not_clipped():
    train = pd.DataFrame({"x": [0.0, 5.0, 10.0]})
    other = pd.DataFrame({"x": [-5.0, 20.0]})
    normalizer = MinMaxNormalizer(columns=["x"], mode="train_fit").fit(train)
    result = normalizer.transform(other)
    assert result["x"].tolist() == pytest.approx([-0.5, 2.0])


def test_constant_column_maps_to_zero():
    df = pd.DataFrame({"x": [3.0, 3.0, 3.0]})
    result = MinMaxNormalizer(columns=["x"]).fit_transform(df)
    assert (result["x"] == 0.0).all()


def test_feature_ranges_reported():
    df = pd.DataFrame({"x": [2.0, 4.0, 8.0]})
    normalizer = MinMaxNormalizer(columns=["x"]).fit(df)
    assert normalizer.feature_ranges() == {"x": (2.0, 8.0)}


def test_transform_requires_fit_first():
    with pytest.raises(RuntimeError, match="not been fitted"):
        MinMaxNormalizer().transform(pd.DataFrame({c: [1.0] for c in CONTINUOUS_FEATURES}))


def test_unknown_mode_rejected():
    with pytest.raises(ValueError, match="mode"):
        MinMaxNormalizer(mode="global")


# ── Split modes ────────────────────────────────────────────────────


def test_per_split_mode_fits_each_split_independently():
    splits = _make_splits()
    result = MinMaxNormalizer(mode="per_split").normalize_splits(splits)
    for _, part in result.items():
        for col in CONTINUOUS_FEATURES:
            assert part[col].min() == pytest.approx(0.0)
            assert part[col].max() == pytest.approx(1.0)


def test_train_fit_mode_reuses_training_statistics():
    splits = _make_splits()
    result = MinMaxNormalizer(mode="train_fit").normalize_splits(splits)

    col = "distance_from_home"
    lo, hi = splits.train[col].min(), splits.train[col].max()
    expected = (splits.test[col] - lo) / (hi - lo)
    np.testing.assert_allclose(result.test[col].values, expected.values)


def test_train_fit_mode_can_leave_unit_interval():
    train = pd.DataFrame({"x": [1.0, 2.0, 3.0]})
    validation = pd.DataFrame({"x": [0.0, 2.0]})
    test = pd.DataFrame({"x": [2.0, 5.0]})
    splits = DatasetSplit(train=train, validation=validation, test=test)

    result = MinMaxNormalizer(columns=["x"], mode="train_fit").normalize_splits(splits)
    assert result.validation["x"].tolist() == pytest.approx([-0.5, 0.5])
    assert result.test["x"].tolist() == pytest.approx([0.5, 2.0])


def test_per_split_mode_ignores_training_range():
    train = pd.DataFrame({"x": [1.0, 2.0, 3.0]})
    test = pd.DataFrame({"x": [2.0, 5.0]})
    splits = DatasetSplit(train=train, validation=test.copy(), test=test)

    result = MinMaxNormalizer(columns=["x"], mode="per_split").normalize_splits(splits)
    assert result.test["x"].tolist() == pytest.approx([0.0, 1.0])


def test_normalize_splits_preserves_indices():
    splits = _make_splits()
    result = MinMaxNormalizer().normalize_splits(splits)
    for (_, before), (_, after) in zip(splits.items(), result.items()):
        assert list(before.index) == list(after.index)
