"""
Data loading module for the card transaction fraud dataset.

Reads the card transaction table (Kaggle "card_transdata"), verifies its
schema and completeness, and generates a synthetic table in the same
format for development/testing when the real data is not available.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import numpy as np
import pandas as pd


CONTINUOUS_FEATURES = [
    "distance_from_home",
    "distance_from_last_transaction",
    "ratio_to_median_purchase_price",
]
BOOLEAN_FEATURES = [
    "repeat_retailer",
    "used_chip",
    "used_pin_number",
    "online_order",
]
FEATURE_COLUMNS = CONTINUOUS_FEATURES + BOOLEAN_FEATURES
TARGET_COLUMN = "fraud"
TRANSACTION_COLUMNS = FEATURE_COLUMNS + [TARGET_COLUMN]

DEFAULT_DATA_PATH = "data/raw/card_transdata.csv"


@dataclass
class DatasetSummary:
    """Exploratory statistics for a transaction table."""

    n_rows: int = 0
    n_fraud: int = 0
    fraud_rate: float = 0.0
    imbalance_ratio: float = 0.0
    continuous_stats: pd.DataFrame = field(default_factory=pd.DataFrame)
    boolean_fraud_rates: dict[str, dict[int, float]] = field(default_factory=dict)

    def summary(self) -> str:
        """Return a human-readable summary."""
        lines = [
            "Dataset Summary",
            "=" * 40,
            f"Transactions: {self.n_rows:,}",
            f"Fraudulent:   {self.n_fraud:,} ({self.fraud_rate:.2%})",
            f"Legitimate:   {self.n_rows - self.n_fraud:,}",
            f"Imbalance:    {self.imbalance_ratio:.1f}:1",
            "",
            "Continuous features (mean by class):",
            self.continuous_stats.to_string(float_format=lambda v: f"{v:.3f}"),
            "",
            "Fraud rate by boolean feature:",
        ]
        for col, rates in self.boolean_fraud_rates.items():
            parts = ", ".join(f"{k}={v:.2%}" for k, v in sorted(rates.items()))
            lines.append(f"  {col:<18} {parts}")
        return "\n".join(lines)


def load_transactions(path: str | Path = DEFAULT_DATA_PATH) -> pd.DataFrame:
    """Load the card transaction table and verify it.

    The table has three continuous features, four boolean features and
    the boolean ``fraud`` label.  Boolean columns are stored as ``0.0``
    / ``1.0`` in the published CSV and are cast to integers here.

    Args:
        path: Path to the CSV file.

    Returns:
        DataFrame with ``TRANSACTION_COLUMNS``.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If columns are missing or any field is empty.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(
            f"Transaction dataset not found at {path}. "
            "Download card_transdata.csv or run 'fraud-report generate'."
        )

    df = pd.read_csv(path)
    validate_transactions(df)
    df = _coerce_types(df[TRANSACTION_COLUMNS])

    print(f"[data_loader] Loaded card transactions: {len(df):,} rows from {path}")
    print(f"  Fraud: {df[TARGET_COLUMN].sum():,} ({df[TARGET_COLUMN].mean():.3%})")
    return df


def load_dataset(
    path: str | Path = DEFAULT_DATA_PATH,
    fallback_synthetic: bool = False,
    synthetic_n: int = 100000,
    seed: int = 42,
) -> pd.DataFrame:
    """Load the transaction table, optionally falling back to synthetic data.

    Args:
        path: Path to the real dataset CSV.
        fallback_synthetic: Whether to generate synthetic data if the
            real file is not found.
        synthetic_n: Number of rows for the synthetic fallback.
        seed: Seed for the synthetic fallback.

    Returns:
        DataFrame with ``TRANSACTION_COLUMNS``.
    """
    path = Path(path)
    if path.exists() or not fallback_synthetic:
        return load_transactions(path)

    print(f"[data_loader] Dataset not found at {path}, generating synthetic data...")
    print("  NOTE: This is synthetic data for pipeline testing.")
    return generate_synthetic_transactions(n_rows=synthetic_n, seed=seed)


def validate_transactions(df: pd.DataFrame) -> None:
    """Check schema and completeness of a transaction table.

    Raises:
        ValueError: If required columns are absent, any value is
            missing, or a boolean column holds values other than 0/1.
    """
    missing_cols = [c for c in TRANSACTION_COLUMNS if c not in df.columns]
    if missing_cols:
        raise ValueError(f"Transaction table is missing columns: {missing_cols}")

    null_counts = df[TRANSACTION_COLUMNS].isna().sum()
    null_counts = null_counts[null_counts > 0]
    if not null_counts.empty:
        detail = ", ".join(f"{col}={n}" for col, n in null_counts.items())
        raise ValueError(f"Transaction table has missing values: {detail}")

    for col in BOOLEAN_FEATURES + [TARGET_COLUMN]:
        values = set(pd.unique(df[col]))
        if not values.issubset({0, 1}):
            raise ValueError(
                f"Column {col!r} must be boolean (0/1), found {list(values)[:5]}"
            )


def summarize_transactions(df: pd.DataFrame) -> DatasetSummary:
    """Compute exploratory statistics for a transaction table.

    Args:
        df: Transaction DataFrame with ``TRANSACTION_COLUMNS``.

    Returns:
        ``DatasetSummary`` with class balance, per-class means of the
        continuous features and fraud rate per boolean feature value.
    """
    labels = df[TARGET_COLUMN]
    n_fraud = int(labels.sum())
    n_legit = len(df) - n_fraud

    stats = df.groupby(TARGET_COLUMN)[CONTINUOUS_FEATURES].mean().T
    stats.columns = ["Legitimate" if c == 0 else "Fraud" for c in stats.columns]

    boolean_rates = {
        col: {
            int(value): float(rate)
            for value, rate in df.groupby(col)[TARGET_COLUMN].mean().items()
        }
        for col in BOOLEAN_FEATURES
    }

    return DatasetSummary(
        n_rows=len(df),
        n_fraud=n_fraud,
        fraud_rate=n_fraud / len(df) if len(df) else 0.0,
        imbalance_ratio=n_legit / n_fraud if n_fraud else float("inf"),
        continuous_stats=stats,
        boolean_fraud_rates=boolean_rates,
    )


def generate_synthetic_transactions(
    n_rows: int = 100000,
    fraud_rate: float = 0.0874,
    seed: int = 42,
) -> pd.DataFrame:
    """Generate a synthetic table matching the card transaction format.

    Distances and the purchase-price ratio are log-normal; fraud rows
    are shifted towards larger distances, higher price ratios, more
    online orders and fewer chip/PIN uses.  Exactly
    ``round(n_rows * fraud_rate)`` rows are fraudulent.

    Args:
        n_rows: Total number of transactions.
        fraud_rate: Fraction of fraudulent transactions (default matches
            the published dataset's 8.74%).
        seed: Random seed for reproducibility.

    Returns:
        DataFrame with ``TRANSACTION_COLUMNS``.
    """
    rng = np.random.default_rng(seed)
    n_fraud = int(round(n_rows * fraud_rate))
    n_legit = n_rows - n_fraud

    labels = np.zeros(n_rows, dtype=np.int64)
    labels[n_legit:] = 1
    rng.shuffle(labels)
    is_fraud = labels == 1

    distance_home = rng.lognormal(mean=2.3, sigma=1.0, size=n_rows)
    distance_last = rng.lognormal(mean=0.6, sigma=1.2, size=n_rows)
    price_ratio = rng.lognormal(mean=0.0, sigma=0.7, size=n_rows)

    distance_home[is_fraud] *= rng.lognormal(mean=0.8, sigma=0.5, size=n_fraud)
    distance_last[is_fraud] *= rng.lognormal(mean=0.3, sigma=0.5, size=n_fraud)
    price_ratio[is_fraud] *= rng.lognormal(mean=1.0, sigma=0.4, size=n_fraud)

    repeat_retailer = rng.random(n_rows) < 0.88
    used_chip = rng.random(n_rows) < np.where(is_fraud, 0.26, 0.36)
    used_pin = rng.random(n_rows) < np.where(is_fraud, 0.005, 0.11)
    online_order = rng.random(n_rows) < np.where(is_fraud, 0.95, 0.62)

    df = pd.DataFrame({
        "distance_from_home": distance_home.round(6),
        "distance_from_last_transaction": distance_last.round(6),
        "ratio_to_median_purchase_price": price_ratio.round(6),
        "repeat_retailer": repeat_retailer.astype(np.int64),
        "used_chip": used_chip.astype(np.int64),
        "used_pin_number": used_pin.astype(np.int64),
        "online_order": online_order.astype(np.int64),
        TARGET_COLUMN: labels,
    }, columns=TRANSACTION_COLUMNS)

    print(f"[data_loader] Generated synthetic card transactions: {len(df):,} rows")
    print(f"  Fraud: {df[TARGET_COLUMN].sum():,} ({df[TARGET_COLUMN].mean():.3%})")
    return df


def _coerce_types(df: pd.DataFrame) -> pd.DataFrame:
    """Cast boolean columns and the label to integers."""
    df = df.copy()
    df[CONTINUOUS_FEATURES] = df[CONTINUOUS_FEATURES].astype(np.float64)
    for col in BOOLEAN_FEATURES + [TARGET_COLUMN]:
        df[col] = df[col].astype(np.int64)
    return df
