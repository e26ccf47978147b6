"""
Stratified train/validation/test partitioning.

Rows keep their original index labels, so the three partitions can be
checked for disjointness against the source table.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

from fraud_report.data_loader import TARGET_COLUMN


@dataclass
class DatasetSplit:
    """Named train/validation/test partitions of a transaction table."""

    train: pd.DataFrame
    validation: pd.DataFrame
    test: pd.DataFrame

    def items(self) -> list[tuple[str, pd.DataFrame]]:
        return [
            ("train", self.train),
            ("validation", self.validation),
            ("test", self.test),
        ]

    def fraud_rates(self, target_column: str = TARGET_COLUMN) -> dict[str, float]:
        """Label rate within each partition."""
        return {name: float(part[target_column].mean()) for name, part in self.items()}

    def summary(self, target_column: str = TARGET_COLUMN) -> str:
        lines = []
        for name, part in self.items():
            n_fraud = int(part[target_column].sum())
            lines.append(
                f"  {name:<11} {len(part):>9,} rows | "
                f"fraud {n_fraud:>7,} ({part[target_column].mean():.2%})"
            )
        return "\n".join(lines)


class StratifiedSplitter:
    """Partitions a table into stratified train/validation/test subsets.

    Two chained ``train_test_split`` calls: the first holds out
    validation + test, the second divides the hold-out between them.
    Both stratify on the same column.
    """

    def __init__(
        self,
        train_size: float = 0.6,
        validation_size: float = 0.2,
        test_size: float = 0.2,
        random_state: int = 42,
    ) -> None:
        """
        Args:
            train_size: Fraction of rows for training.
            validation_size: Fraction of rows for validation.
            test_size: Fraction of rows for testing.
            random_state: Seed for reproducibility.

        Raises:
            ValueError: If a proportion is non-positive or they do not
                sum to 1.
        """
        proportions = (train_size, validation_size, test_size)
        if any(p <= 0 for p in proportions):
            raise ValueError(f"Split proportions must be positive, got {proportions}")
        if not np.isclose(sum(proportions), 1.0):
            raise ValueError(
                f"Split proportions must sum to 1.0, got {sum(proportions):.4f}"
            )
        self._train_size = train_size
        self._validation_size = validation_size
        self._test_size = test_size
        self._random_state = random_state

    def split(
        self,
        df: pd.DataFrame,
        stratify_column: str = TARGET_COLUMN,
    ) -> DatasetSplit:
        """Split ``df`` preserving the distribution of ``stratify_column``.

        Args:
            df: Table to partition.
            stratify_column: Column whose marginal distribution each
                partition must preserve.

        Returns:
            ``DatasetSplit`` with disjoint partitions whose union is ``df``.

        Raises:
            ValueError: If any stratum is too small to appear in every
                partition.
        """
        self._check_strata(df[stratify_column])

        holdout_size = self._validation_size + self._test_size
        train, holdout = train_test_split(
            df,
            test_size=holdout_size,
            random_state=self._random_state,
            stratify=df[stratify_column],
        )
        validation, test = train_test_split(
            holdout,
            test_size=self._test_size / holdout_size,
            random_state=self._random_state,
            stratify=holdout[stratify_column],
        )
        return DatasetSplit(train=train, validation=validation, test=test)

    def _check_strata(self, labels: pd.Series) -> None:
        """Fail if a proportion leaves any stratum without rows."""
        smallest = min(self._train_size, self._validation_size, self._test_size)
        for value, count in labels.value_counts().items():
            if int(count * smallest) < 1:
                raise ValueError(
                    f"Stratum {value!r} has {count} rows; a {smallest:.0%} "
                    "partition would contain none of them"
                )
