"""End-to-end tests for the report pipeline and CLI."""

import pandas as pd
import pytest

from fraud_report.cli import main
from fraud_report.config import ReportConfig
from fraud_report.data_loader import TARGET_COLUMN, generate_synthetic_transactions
from fraud_report.report import render_report_text, run_report


def _small_config(**overrides) -> ReportConfig:
    """Config scaled down for a 1500-row table."""
    params = dict(svm_sample_fraction=0.3, svm_cv_folds=3)
    params.update(overrides)
    return ReportConfig(**params)


@pytest.fixture(scope="module")
def transactions() -> pd.DataFrame:
    return generate_synthetic_transactions(n_rows=1500, fraud_rate=0.09, seed=42)


@pytest.fixture(scope="module")
def report(transactions, tmp_path_factory):
    output = tmp_path_factory.mktemp("report")
    return run_report(transactions, _small_config(), output_dir=output, visualize=True)


# ── Pipeline ───────────────────────────────────────────────────────


def test_report_evaluates_both_models(report):
    assert set(report.test_results) == {"XGBoost", "SVM"}
    assert set(report.validation_results) == {"XGBoost", "SVM"}


def test_confusion_matrices_cover_test_set(report):
    n_test = len(report.splits.test)
    for result in report.test_results.values():
        assert result.confusion_matrix.sum() == n_test
        assert 0.0 <= result.roc_auc <= 1.0


def test_splits_are_not_rebalanced(report, transactions):
    splits = report.splits
    total = len(splits.train) + len(splits.validation) + len(splits.test)
    assert total == len(transactions)
    for _, part in splits.items():
        assert part[TARGET_COLUMN].mean() == pytest.approx(0.09, abs=0.01)


def test_rebalancing_reaches_target(report):
    stats = report.rebalance_stats
    assert stats.minority_after >= stats.minority_before
    assert stats.ratio_after == pytest.approx(1.6, abs=0.02)
    assert stats.ratio_after > 1.0


def test_report_text_written(report):
    assert report.report_path.exists()
    text = report.report_path.read_text(encoding="utf-8")
    assert "Model Comparison" in text
    assert "per_split" in text
    assert "XGBoost" in text and "SVM" in text


def test_plots_written(report):
    names = {p.name for p in report.plot_paths}
    assert "class_balance.png" in names
    assert "feature_importance.png" in names
    assert "roc_curve_xgboost.png" in names
    assert "roc_curve_svm.png" in names
    assert "confusion_matrix_xgboost.png" in names
    assert "confusion_matrix_svm.png" in names
    assert "roc_comparison.png" in names
    assert all(p.exists() for p in report.plot_paths)


def test_report_reproducible(transactions, tmp_path):
    a = run_report(transactions, _small_config(), output_dir=tmp_path / "a", visualize=False)
    b = run_report(transactions, _small_config(), output_dir=tmp_path / "b", visualize=False)
    for name in ("XGBoost", "SVM"):
        assert a.test_results[name].roc_auc == b.test_results[name].roc_auc


def test_train_fit_normalization_mode(transactions, tmp_path):
    result = run_report(
        transactions,
        _small_config(normalization="train_fit"),
        output_dir=tmp_path,
        visualize=False,
    )
    assert "train_fit" in render_report_text(result)


def test_invalid_config_fails_fast(transactions, tmp_path):
    with pytest.raises(ValueError, match="target_ratio"):
        run_report(transactions, _small_config(target_ratio=0.5), output_dir=tmp_path)


# ── CLI ────────────────────────────────────────────────────────────


def test_cli_generate_writes_csv(tmp_path):
    out = tmp_path / "data.csv"
    code = main(["generate", "--rows", "400", "--fraud-rate", "0.1", "--output", str(out)])
    assert code == 0
    df = pd.read_csv(out)
    assert len(df) == 400
    assert df[TARGET_COLUMN].sum() == 40


def test_cli_run_missing_data_returns_error(tmp_path):
    code = main(["run", "--data", str(tmp_path / "missing.csv"), "--output", str(tmp_path)])
    assert code == 1


def test_cli_run_end_to_end(tmp_path):
    data = tmp_path / "data.csv"
    main(["generate", "--rows", "1500", "--fraud-rate", "0.09", "--output", str(data)])
    code = main([
        "run",
        "--data", str(data),
        "--output", str(tmp_path / "out"),
        "--svm-sample-fraction", "0.5",
        "--no-plots",
    ])
    assert code == 0
    assert (tmp_path / "out" / "report.txt").exists()


def test_cli_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "fraud-report" in capsys.readouterr().out
