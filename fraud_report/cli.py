"""
Command-line interface for the fraud analysis report.

Provides subcommands for running the full report and generating a
synthetic transaction table.
"""

from __future__ import annotations

import argparse
import sys
import traceback
from pathlib import Path

from fraud_report.config import NORMALIZATION_MODES, ReportConfig
from fraud_report.data_loader import (
    DEFAULT_DATA_PATH,
    TARGET_COLUMN,
    generate_synthetic_transactions,
    load_dataset,
)
from fraud_report.report import run_report


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="fraud-report",
        description="Credit card fraud analysis: SMOTE + XGBoost vs SVM",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- run ---
    run_parser = subparsers.add_parser("run", help="Run the full analysis report")
    run_parser.add_argument(
        "--data",
        type=str,
        default=DEFAULT_DATA_PATH,
        help=f"Path to transaction CSV (default: {DEFAULT_DATA_PATH})",
    )
    run_parser.add_argument(
        "--output",
        type=str,
        default="output",
        help="Directory for report and plots (default: output)",
    )
    run_parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Root random seed (default: 42)",
    )
    run_parser.add_argument(
        "--normalization",
        choices=NORMALIZATION_MODES,
        default="per_split",
        help="Min-max fitting mode (default: per_split)",
    )
    run_parser.add_argument(
        "--target-ratio",
        type=float,
        default=1.6,
        help="Majority:minority ratio after SMOTE (default: 1.6)",
    )
    run_parser.add_argument(
        "--svm-sample-fraction",
        type=float,
        default=0.01,
        help="Fraction of training rows used for the SVM (default: 0.01)",
    )
    run_parser.add_argument(
        "--synthetic",
        action="store_true",
        help="Generate synthetic data if --data does not exist",
    )
    run_parser.add_argument(
        "--no-plots",
        action="store_true",
        help="Skip chart generation",
    )

    # --- generate ---
    gen_parser = subparsers.add_parser("generate", help="Generate synthetic transaction data")
    gen_parser.add_argument(
        "--rows",
        type=int,
        default=100000,
        help="Number of transactions to generate (default: 100000)",
    )
    gen_parser.add_argument(
        "--fraud-rate",
        type=float,
        default=0.0874,
        help="Fraud rate (default: 0.0874)",
    )
    gen_parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed (default: 42)",
    )
    gen_parser.add_argument(
        "--output",
        type=str,
        default=DEFAULT_DATA_PATH,
        help=f"Output CSV path (default: {DEFAULT_DATA_PATH})",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        if args.command == "run":
            return _cmd_run(args)
        elif args.command == "generate":
            return _cmd_generate(args)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        traceback.print_exc()
        return 1

    return 0


def _cmd_run(args: argparse.Namespace) -> int:
    """Run the whole report."""
    config = ReportConfig(
        seed=args.seed,
        normalization=args.normalization,
        target_ratio=args.target_ratio,
        svm_sample_fraction=args.svm_sample_fraction,
    )
    df = load_dataset(args.data, fallback_synthetic=args.synthetic, seed=args.seed)
    run_report(df, config, output_dir=args.output, visualize=not args.no_plots)
    return 0


def _cmd_generate(args: argparse.Namespace) -> int:
    """Generate a synthetic transaction table."""
    print(f"Generating {args.rows:,} transactions (fraud rate: {args.fraud_rate:.2%})...")
    df = generate_synthetic_transactions(
        n_rows=args.rows, fraud_rate=args.fraud_rate, seed=args.seed
    )

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_path, index=False)
    print(f"Saved to {output_path}")
    print(
        f"  Total: {len(df):,} | Fraud: {df[TARGET_COLUMN].sum():,} "
        f"({df[TARGET_COLUMN].mean():.2%})"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
