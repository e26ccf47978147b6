"""Tests for the report configuration."""

import pytest

from fraud_report.config import STAGES, ReportConfig


def test_defaults_validate():
    config = ReportConfig().validate()
    assert config.train_size == 0.6
    assert config.target_ratio == 1.6
    assert config.svm_c_grid == [1, 5, 100, 1000]
    assert config.svm_gamma_grid == [0.1, 1, 5, 10]
    assert config.svm_cv_folds == 10
    assert config.normalization == "per_split"


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"train_size": 0.5}, "sum to 1.0"),
        ({"test_size": 0.0, "train_size": 0.8}, "positive"),
        ({"target_ratio": 0.9}, "target_ratio"),
        ({"normalization": "zscore"}, "normalization"),
        ({"svm_sample_fraction": 0.0}, "svm_sample_fraction"),
        ({"svm_cv_folds": 1}, "svm_cv_folds"),
        ({"threshold": 1.0}, "threshold"),
    ],
)
def test_invalid_values_rejected(overrides, message):
    with pytest.raises(ValueError, match=message):
        ReportConfig(**overrides).validate()


def test_stage_seeds_cover_every_stage():
    seeds = ReportConfig(seed=1).stage_seeds()
    assert set(seeds) == set(STAGES)
    assert len(set(seeds.values())) == len(STAGES)


def test_stage_seeds_deterministic():
    assert ReportConfig(seed=9).stage_seeds() == ReportConfig(seed=9).stage_seeds()


def test_stage_seeds_depend_on_root_seed():
    assert ReportConfig(seed=1).stage_seeds() != ReportConfig(seed=2).stage_seeds()
