"""Tests for the data loader module."""

import numpy as np
import pandas as pd
import pytest

from fraud_report.data_loader import (
    BOOLEAN_FEATURES,
    CONTINUOUS_FEATURES,
    TARGET_COLUMN,
    TRANSACTION_COLUMNS,
    generate_synthetic_transactions,
    load_dataset,
    load_transactions,
    summarize_transactions,
    validate_transactions,
)


# ── Synthetic generation ───────────────────────────────────────────


def test_generate_synthetic_has_correct_columns():
    df = generate_synthetic_transactions(n_rows=500)
    assert list(df.columns) == TRANSACTION_COLUMNS


def test_generate_synthetic_exact_fraud_count():
    df = generate_synthetic_transactions(n_rows=1000, fraud_rate=0.09)
    assert len(df) == 1000
    assert df[TARGET_COLUMN].sum() == 90


def test_generate_synthetic_boolean_columns_binary():
    df = generate_synthetic_transactions(n_rows=1000)
    for col in BOOLEAN_FEATURES + [TARGET_COLUMN]:
        assert set(df[col].unique()).issubset({0, 1})


def test_generate_synthetic_continuous_positive():
    df = generate_synthetic_transactions(n_rows=1000)
    assert (df[CONTINUOUS_FEATURES] > 0).all().all()


def test_generate_synthetic_fraud_shifted():
    df = generate_synthetic_transactions(n_rows=5000)
    means = df.groupby(TARGET_COLUMN)["ratio_to_median_purchase_price"].mean()
    assert means[1] > means[0]


def test_generate_synthetic_reproducible():
    df1 = generate_synthetic_transactions(n_rows=200, seed=7)
    df2 = generate_synthetic_transactions(n_rows=200, seed=7)
    pd.testing.assert_frame_equal(df1, df2)


# ── Loading and validation ─────────────────────────────────────────


def test_load_transactions_roundtrip_casts_booleans(tmp_path):
    df = generate_synthetic_transactions(n_rows=100)
    csv = df.astype({c: float for c in BOOLEAN_FEATURES + [TARGET_COLUMN]})
    path = tmp_path / "card_transdata.csv"
    csv.to_csv(path, index=False)

    loaded = load_transactions(path)
    assert list(loaded.columns) == TRANSACTION_COLUMNS
    assert len(loaded) == 100
    for col in BOOLEAN_FEATURES + [TARGET_COLUMN]:
        assert loaded[col].dtype == np.int64


def test_load_transactions_missing_file_raises():
    with pytest.raises(FileNotFoundError):
        load_transactions("/nonexistent/card_transdata.csv")


def test_load_transactions_missing_values_raise(tmp_path):
    df = generate_synthetic_transactions(n_rows=50)
    df["distance_from_home"] = df["distance_from_home"].astype(float)
    df.loc[3, "distance_from_home"] = np.nan
    path = tmp_path / "broken.csv"
    df.to_csv(path, index=False)
    with pytest.raises(ValueError, match="missing values"):
        load_transactions(path)


def test_validate_missing_column_raises():
    df = generate_synthetic_transactions(n_rows=20).drop(columns=["used_chip"])
    with pytest.raises(ValueError, match="missing columns"):
        validate_transactions(df)


def test_validate_non_boolean_raises():
    df = generate_synthetic_transactions(n_rows=20)
    df.loc[0, "online_order"] = 3
    with pytest.raises(ValueError, match="must be boolean"):
        validate_transactions(df)


def test_load_dataset_synthetic_fallback():
    df = load_dataset(
        "/nonexistent/path.csv",
        fallback_synthetic=True,
        synthetic_n=300,
    )
    assert len(df) == 300
    assert list(df.columns) == TRANSACTION_COLUMNS


def test_load_dataset_no_fallback_raises():
    with pytest.raises(FileNotFoundError):
        load_dataset("/nonexistent/path.csv", fallback_synthetic=False)


# ── Exploratory summary ────────────────────────────────────────────


def test_summarize_transactions_counts():
    df = generate_synthetic_transactions(n_rows=1000, fraud_rate=0.09)
    summary = summarize_transactions(df)
    assert summary.n_rows == 1000
    assert summary.n_fraud == 90
    assert summary.fraud_rate == pytest.approx(0.09)
    assert summary.imbalance_ratio == pytest.approx(910 / 90)


def test_summarize_transactions_feature_tables():
    df = generate_synthetic_transactions(n_rows=1000)
    summary = summarize_transactions(df)
    assert list(summary.continuous_stats.index) == CONTINUOUS_FEATURES
    assert list(summary.continuous_stats.columns) == ["Legitimate", "Fraud"]
    assert set(summary.boolean_fraud_rates) == set(BOOLEAN_FEATURES)
    for rates in summary.boolean_fraud_rates.values():
        assert all(0.0 <= r <= 1.0 for r in rates.values())


def test_summary_text_mentions_imbalance():
    df = generate_synthetic_transactions(n_rows=500)
    text = summarize_transactions(df).summary()
    assert "Imbalance:" in text
    assert "online_order" in text
