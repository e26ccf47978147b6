"""
End-to-end fraud analysis report.

Runs the complete pipeline: loading, exploration, stratified split,
SMOTE rebalancing, min-max normalization, XGBoost and SVM training,
evaluation, visualization and the narrative text summary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import pandas as pd

from fraud_report.config import ReportConfig
from fraud_report.data_loader import (
    FEATURE_COLUMNS,
    TARGET_COLUMN,
    DatasetSummary,
    summarize_transactions,
)
from fraud_report.evaluator import EvaluationResult, evaluate_model
from fraud_report.model import BoostedTreeModel, SupportVectorModel
from fraud_report.normalizer import MinMaxNormalizer
from fraud_report.rebalancer import MinorityOversampler, RebalanceStats
from fraud_report.splitter import DatasetSplit, StratifiedSplitter
from fraud_report.visualizer import ReportVisualizer


NORMALIZATION_NOTES = {
    "per_split": (
        "Min-max statistics were fitted separately on each split. Validation "
        "and test scaling therefore uses their own ranges rather than the "
        "training range (reproduces the reference analysis)."
    ),
    "train_fit": (
        "Min-max statistics were fitted on the rebalanced training split and "
        "reused for validation and test; unseen values may fall outside [0, 1]."
    ),
}


@dataclass
class ReportResult:
    """Artifacts produced by one report run."""

    config: ReportConfig
    dataset_summary: DatasetSummary
    splits: DatasetSplit
    rebalance_stats: RebalanceStats
    boosted_model: BoostedTreeModel
    svm_model: SupportVectorModel
    validation_results: dict[str, EvaluationResult] = field(default_factory=dict)
    test_results: dict[str, EvaluationResult] = field(default_factory=dict)
    report_path: Optional[Path] = None
    plot_paths: list[Path] = field(default_factory=list)


def _divider(title: str) -> None:
    """Print a section divider."""
    width = 60
    print(f"\n{'=' * width}")
    print(f"  {title}")
    print(f"{'=' * width}\n")


def run_report(
    df: pd.DataFrame,
    config: Optional[ReportConfig] = None,
    output_dir: str | Path = "output",
    visualize: bool = True,
) -> ReportResult:
    """Execute the full analysis on a loaded transaction table.

    Args:
        df: Verified transaction table (see ``load_transactions``).
        config: Pipeline parameters; defaults reproduce the reference
            analysis.
        output_dir: Directory for ``report.txt`` and plots.
        visualize: Whether to render the charts.

    Returns:
        ``ReportResult`` with every intermediate artifact.
    """
    config = (config or ReportConfig()).validate()
    seeds = config.stage_seeds()
    output = Path(output_dir)
    output.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # 1. Exploration
    # ------------------------------------------------------------------
    _divider("1. EXPLORATORY ANALYSIS")

    dataset_summary = summarize_transactions(df)
    print(dataset_summary.summary())

    # ------------------------------------------------------------------
    # 2. Stratified split
    # ------------------------------------------------------------------
    _divider("2. STRATIFIED SPLIT")

    splitter = StratifiedSplitter(
        train_size=config.train_size,
        validation_size=config.validation_size,
        test_size=config.test_size,
        random_state=seeds["split"],
    )
    splits = splitter.split(df, stratify_column=TARGET_COLUMN)
    print(splits.summary())

    # ------------------------------------------------------------------
    # 3. Rebalancing (training split only)
    # ------------------------------------------------------------------
    _divider("3. SMOTE REBALANCING")

    oversampler = MinorityOversampler(
        target_ratio=config.target_ratio,
        k_neighbors=config.k_neighbors,
        random_state=seeds["rebalance"],
    )
    rebalanced_train = oversampler.fit_resample(splits.train, target_column=TARGET_COLUMN)
    rebalance_stats = oversampler.stats
    print(rebalance_stats.summary())

    # ------------------------------------------------------------------
    # 4. Normalization
    # ------------------------------------------------------------------
    _divider("4. NORMALIZATION")

    normalizer = MinMaxNormalizer(mode=config.normalization)
    prepared = normalizer.normalize_splits(
        DatasetSplit(
            train=rebalanced_train,
            validation=splits.validation,
            test=splits.test,
        )
    )
    print(f"  Mode: {config.normalization}")
    print(f"  {NORMALIZATION_NOTES[config.normalization]}")

    X_train, y_train = prepared.train[FEATURE_COLUMNS], prepared.train[TARGET_COLUMN].values
    X_val, y_val = prepared.validation[FEATURE_COLUMNS], prepared.validation[TARGET_COLUMN].values
    X_test, y_test = prepared.test[FEATURE_COLUMNS], prepared.test[TARGET_COLUMN].values

    # ------------------------------------------------------------------
    # 5. Model training
    # ------------------------------------------------------------------
    _divider("5. MODEL TRAINING")

    boosted = BoostedTreeModel(
        max_depth=config.max_depth,
        learning_rate=config.learning_rate,
        max_rounds=config.max_rounds,
        early_stopping_rounds=config.early_stopping_rounds,
        random_state=seeds["boosting"],
    )
    boosted.fit(X_train, y_train, X_val, y_val)

    svm = SupportVectorModel(
        sample_fraction=config.svm_sample_fraction,
        c_grid=config.svm_c_grid,
        gamma_grid=config.svm_gamma_grid,
        cv_folds=config.svm_cv_folds,
        scoring=config.svm_scoring,
        sample_random_state=seeds["svm_sample"],
        cv_random_state=seeds["svm_cv"],
    )
    svm.fit(X_train, y_train)

    # ------------------------------------------------------------------
    # 6. Evaluation
    # ------------------------------------------------------------------
    _divider("6. EVALUATION")

    validation_results: dict[str, EvaluationResult] = {}
    test_results: dict[str, EvaluationResult] = {}
    for model in (boosted, svm):
        validation_results[model.name] = evaluate_model(
            model, X_val, y_val, threshold=config.threshold, dataset="validation"
        )
        test_results[model.name] = evaluate_model(
            model, X_test, y_test, threshold=config.threshold, dataset="test"
        )
        print(test_results[model.name].summary())

    print("  Feature importance (gain):")
    for name, value in boosted.feature_importances.items():
        print(f"    {name:<32} {value:.4f}")

    result = ReportResult(
        config=config,
        dataset_summary=dataset_summary,
        splits=splits,
        rebalance_stats=rebalance_stats,
        boosted_model=boosted,
        svm_model=svm,
        validation_results=validation_results,
        test_results=test_results,
    )

    # ------------------------------------------------------------------
    # 7. Visualization
    # ------------------------------------------------------------------
    if visualize:
        _divider("7. VISUALIZATION")

        visualizer = ReportVisualizer(output_dir=output / "plots")
        paths = visualizer.generate_all(
            df, boosted.feature_importances, list(test_results.values())
        )
        result.plot_paths = [p for p in paths if p is not None]
        print(f"  Generated {len(result.plot_paths)} plots:")
        for p in result.plot_paths:
            print(f"    - {p}")

    # ------------------------------------------------------------------
    # Done
    # ------------------------------------------------------------------
    report_path = output / "report.txt"
    report_path.write_text(render_report_text(result), encoding="utf-8")
    result.report_path = report_path

    _divider("REPORT COMPLETE")
    print(f"  Report written to: {report_path.resolve()}")
    for name, res in test_results.items():
        print(f"  {name:<8} test ROC AUC: {res.roc_auc:.4f}")
    return result


def render_report_text(result: ReportResult) -> str:
    """Render the narrative plain-text report."""
    config = result.config
    boosted = result.boosted_model
    svm = result.svm_model

    sections = [
        "Credit Card Fraud Analysis",
        "=" * 60,
        "",
        result.dataset_summary.summary(),
        "",
        "Stratified Split",
        "-" * 40,
        result.splits.summary(),
        "",
        "SMOTE Rebalancing (training split only)",
        "-" * 40,
        f"  Target ratio: {config.target_ratio:.2f}:1, k = {config.k_neighbors}",
        result.rebalance_stats.summary(),
        "",
        "Normalization",
        "-" * 40,
        f"  Mode: {config.normalization}",
        f"  {NORMALIZATION_NOTES[config.normalization]}",
        "",
        "Models",
        "-" * 40,
        f"  XGBoost: max_depth={config.max_depth}, eta={config.learning_rate}, "
        f"rounds={boosted.best_rounds} (early stopping {config.early_stopping_rounds} "
        f"of max {config.max_rounds})",
        f"  SVM (RBF): {svm.best_params} on {svm.n_sampled:,} sampled rows, "
        f"{config.svm_cv_folds}-fold CV {config.svm_scoring} {svm.best_cv_score:.4f}",
        "",
        "  Feature importance (gain):",
    ]
    for name, value in boosted.feature_importances.items():
        sections.append(f"    {name:<32} {value:.4f}")

    sections += ["", "Model Comparison", "-" * 40]
    sections.append(f"  {'Model':<10} {'Val AUC':>10} {'Test AUC':>10} {'Recall':>10} {'Precision':>10}")
    for name, test_res in result.test_results.items():
        val_res = result.validation_results[name]
        sections.append(
            f"  {name:<10} {val_res.roc_auc:>10.4f} {test_res.roc_auc:>10.4f} "
            f"{test_res.recall:>10.4f} {test_res.precision:>10.4f}"
        )

    for test_res in result.test_results.values():
        sections += ["", test_res.summary()]

    return "\n".join(sections) + "\n"
