"""
Normalization benchmark for the fraud analysis report.

Runs the full report twice on the same data and seed, once with
per-split min-max fitting and once with training-only fitting, and
reports the test AUC of both models under each mode.

Usage:
    python -m benchmarks.run_benchmark
    python -m benchmarks.run_benchmark --data data/raw/card_transdata.csv
    python -m benchmarks.run_benchmark --synthetic --rows 20000
"""

from __future__ import annotations

import argparse
import sys
import time
import traceback
from pathlib import Path

import pandas as pd

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fraud_report.config import NORMALIZATION_MODES, ReportConfig
from fraud_report.data_loader import (
    DEFAULT_DATA_PATH,
    generate_synthetic_transactions,
    load_dataset,
)
from fraud_report.report import run_report


def run_benchmark(
    data_path: str = DEFAULT_DATA_PATH,
    force_synthetic: bool = False,
    synthetic_rows: int = 50000,
    svm_sample_fraction: float = 0.01,
    seed: int = 42,
    output_dir: str = "benchmarks/results",
) -> pd.DataFrame:
    """Run the report under every normalization mode.

    Args:
        data_path: Path to the card transaction CSV.
        force_synthetic: If True, always use synthetic data.
        synthetic_rows: Size of the synthetic table.
        svm_sample_fraction: Fraction of training rows for the SVM.
        seed: Root seed shared by both runs.
        output_dir: Directory for benchmark outputs.

    Returns:
        DataFrame with one row per (mode, model).
    """
    output = Path(output_dir)
    output.mkdir(parents=True, exist_ok=True)

    print("=" * 70)
    print("  Fraud Report - Normalization Benchmark")
    print("=" * 70)

    start_time = time.time()
    if force_synthetic:
        df = generate_synthetic_transactions(n_rows=synthetic_rows, seed=seed)
    else:
        df = load_dataset(
            data_path, fallback_synthetic=True, synthetic_n=synthetic_rows, seed=seed
        )

    rows = []
    for mode in NORMALIZATION_MODES:
        config = ReportConfig(
            seed=seed,
            normalization=mode,
            svm_sample_fraction=svm_sample_fraction,
        )
        result = run_report(df, config, output_dir=output / mode, visualize=False)
        for name, res in result.test_results.items():
            rows.append({
                "normalization": mode,
                "model": name,
                "validation_auc": result.validation_results[name].roc_auc,
                "test_auc": res.roc_auc,
                "recall": res.recall,
                "precision": res.precision,
            })

    results_df = pd.DataFrame(rows)
    elapsed = time.time() - start_time

    print("\nBenchmark Summary")
    print("=" * 70)
    print(f"  Rows: {len(df):,} | Seed: {seed} | Elapsed: {elapsed:.1f}s")
    print()
    print(f"  {'Normalization':<15} {'Model':<10} {'Val AUC':>10} {'Test AUC':>10}")
    print(f"  {'-'*15} {'-'*10} {'-'*10} {'-'*10}")
    for row in rows:
        print(
            f"  {row['normalization']:<15} {row['model']:<10} "
            f"{row['validation_auc']:>10.4f} {row['test_auc']:>10.4f}"
        )
    print("=" * 70)

    results_df.to_csv(output / "benchmark_results.csv", index=False)
    print(f"\n  Results saved to {output}/benchmark_results.csv")
    return results_df


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Compare per-split and training-only normalization"
    )
    parser.add_argument(
        "--data",
        type=str,
        default=DEFAULT_DATA_PATH,
        help="Path to card transaction CSV",
    )
    parser.add_argument(
        "--synthetic",
        action="store_true",
        help="Force use of synthetic data",
    )
    parser.add_argument(
        "--rows",
        type=int,
        default=50000,
        help="Synthetic rows (default: 50000)",
    )
    parser.add_argument(
        "--svm-sample-fraction",
        type=float,
        default=0.01,
        help="Fraction of training rows for the SVM (default: 0.01)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Root random seed (default: 42)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="benchmarks/results",
        help="Output directory for results",
    )

    args = parser.parse_args()

    try:
        run_benchmark(
            data_path=args.data,
            force_synthetic=args.synthetic,
            synthetic_rows=args.rows,
            svm_sample_fraction=args.svm_sample_fraction,
            seed=args.seed,
            output_dir=args.output,
        )
    except Exception as exc:
        print(f"\nBenchmark failed: {exc}", file=sys.stderr)
        traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
