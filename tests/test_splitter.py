"""Tests for the stratified train/validation/test splitter."""

import pandas as pd
import pytest

from fraud_report.data_loader import TARGET_COLUMN, generate_synthetic_transactions
from fraud_report.splitter import DatasetSplit, StratifiedSplitter


def _make_df(n: int = 1000, fraud_rate: float = 0.09) -> pd.DataFrame:
    return generate_synthetic_transactions(n_rows=n, fraud_rate=fraud_rate, seed=42)


# ── Partition invariants ───────────────────────────────────────────


def test_partitions_are_disjoint():
    df = _make_df()
    splits = StratifiedSplitter().split(df)
    train, val, test = (set(p.index) for _, p in splits.items())
    assert not train & val
    assert not train & test
    assert not val & test


def test_partition_union_is_original():
    df = _make_df()
    splits = StratifiedSplitter().split(df)
    assert len(splits.train) + len(splits.validation) + len(splits.test) == len(df)
    union = splits.train.index.union(splits.validation.index).union(splits.test.index)
    assert set(union) == set(df.index)


def test_partition_sizes_match_proportions():
    df = _make_df()
    splits = StratifiedSplitter().split(df)
    assert len(splits.train) == 600
    assert len(splits.validation) == 200
    assert len(splits.test) == 200


def test_fraud_rate_preserved_within_one_point():
    df = _make_df(n=1000, fraud_rate=0.09)
    splits = StratifiedSplitter().split(df)
    for name, rate in splits.fraud_rates().items():
        assert abs(rate - 0.09) <= 0.01, f"{name} fraud rate {rate:.4f}"


def test_deterministic_under_fixed_seed():
    df = _make_df()
    a = StratifiedSplitter(random_state=3).split(df)
    b = StratifiedSplitter(random_state=3).split(df)
    assert list(a.test.index) == list(b.test.index)


def test_different_seed_changes_partition():
    df = _make_df()
    a = StratifiedSplitter(random_state=1).split(df)
    b = StratifiedSplitter(random_state=2).split(df)
    assert set(a.test.index) != set(b.test.index)


def test_custom_proportions():
    df = _make_df(n=2000)
    splits = StratifiedSplitter(0.7, 0.15, 0.15).split(df)
    assert len(splits.train) == 1400
    assert len(splits.validation) + len(splits.test) == 600


def test_summary_lists_each_partition():
    splits = StratifiedSplitter().split(_make_df())
    text = splits.summary()
    for name in ("train", "validation", "test"):
        assert name in text


def test_dataset_split_items_order():
    df = _make_df(n=100)
    split = DatasetSplit(train=df, validation=df, test=df)
    assert [name for name, _ in split.items()] == ["train", "validation", "test"]


# ── Errors ─────────────────────────────────────────────────────────


def test_proportions_must_sum_to_one():
    with pytest.raises(ValueError, match="sum to 1.0"):
        StratifiedSplitter(0.6, 0.3, 0.3)


def test_proportions_must_be_positive():
    with pytest.raises(ValueError, match="positive"):
        StratifiedSplitter(1.0, 0.0, 0.0)


def test_empty_stratum_partition_raises():
    df = _make_df(n=200, fraud_rate=0.01)  # 2 fraud rows
    with pytest.raises(ValueError, match="would contain none"):
        StratifiedSplitter().split(df)
