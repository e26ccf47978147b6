"""
Synthetic minority oversampling for the training partition.

Wraps imbalanced-learn's ``SMOTENC``: continuous features of a new row
are interpolated between a minority anchor and one of its k nearest
minority neighbours, boolean features take the most frequent value
among those neighbours.  Only ever applied to training data.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd
from imblearn.over_sampling import SMOTE, SMOTENC

from fraud_report.data_loader import BOOLEAN_FEATURES, FEATURE_COLUMNS, TARGET_COLUMN


@dataclass
class RebalanceStats:
    """Class counts before and after oversampling."""

    majority_before: int
    minority_before: int
    majority_after: int
    minority_after: int

    @property
    def ratio_before(self) -> float:
        return self.majority_before / self.minority_before

    @property
    def ratio_after(self) -> float:
        return self.majority_after / self.minority_after

    @property
    def synthetic_rows(self) -> int:
        return self.minority_after - self.minority_before

    def summary(self) -> str:
        return (
            f"  Before: {self.majority_before:,} : {self.minority_before:,} "
            f"({self.ratio_before:.2f}:1)\n"
            f"  After:  {self.majority_after:,} : {self.minority_after:,} "
            f"({self.ratio_after:.2f}:1, +{self.synthetic_rows:,} synthetic)"
        )


class MinorityOversampler:
    """Oversamples the minority class up to a target majority:minority ratio.

    The ratio is a parameter rather than a fixed count: SMOTE adds
    ``majority / target_ratio - minority`` rows.  Stopping short of 1:1
    limits how much interpolated noise enters the training data.
    """

    def __init__(
        self,
        target_ratio: float = 1.6,
        k_neighbors: int = 5,
        random_state: int = 42,
        feature_columns: list[str] | None = None,
        categorical_columns: list[str] | None = None,
    ) -> None:
        """
        Args:
            target_ratio: Desired majority:minority ratio after
                resampling.  Must be at least 1.
            k_neighbors: Number of same-class neighbours considered
                for interpolation.
            random_state: Seed for reproducibility.
            feature_columns: Columns passed to SMOTE.  Defaults to all
                transaction features.
            categorical_columns: Subset of ``feature_columns`` treated
                as categorical.  Defaults to the boolean features.

        Raises:
            ValueError: If ``target_ratio < 1`` or ``k_neighbors < 1``.
        """
        if target_ratio < 1.0:
            raise ValueError(
                f"target_ratio must be >= 1.0 (majority:minority), got {target_ratio}"
            )
        if k_neighbors < 1:
            raise ValueError(f"k_neighbors must be >= 1, got {k_neighbors}")
        self._target_ratio = target_ratio
        self._k_neighbors = k_neighbors
        self._random_state = random_state
        self._feature_columns = list(feature_columns or FEATURE_COLUMNS)
        self._categorical_columns = list(
            categorical_columns if categorical_columns is not None else BOOLEAN_FEATURES
        )
        self._stats: RebalanceStats | None = None

    def fit_resample(
        self,
        df: pd.DataFrame,
        target_column: str = TARGET_COLUMN,
    ) -> pd.DataFrame:
        """Return ``df`` plus synthetic minority rows.

        Original rows come first with their index preserved; synthetic
        rows follow with fresh integer labels starting after the
        largest original label.  A non-integer index is replaced by a
        fresh ``RangeIndex`` over the whole result.

        Args:
            df: Labeled training table.
            target_column: Binary label column.

        Returns:
            Rebalanced DataFrame with the same columns as ``df``.

        Raises:
            ValueError: If the label is not binary or any class has
                fewer than ``k_neighbors + 1`` rows.
        """
        counts = df[target_column].value_counts()
        if len(counts) != 2:
            raise ValueError(
                f"Oversampling needs exactly two classes, found {len(counts)}"
            )
        too_small = counts[counts < self._k_neighbors + 1]
        if not too_small.empty:
            raise ValueError(
                f"Every class needs at least k_neighbors + 1 = "
                f"{self._k_neighbors + 1} rows for SMOTE; got "
                f"{too_small.to_dict()}"
            )

        majority_label = counts.idxmax()
        minority_label = counts.idxmin()
        n_majority = int(counts[majority_label])
        n_minority = int(counts[minority_label])

        n_target = int(n_majority / self._target_ratio)
        if n_target <= n_minority:
            print(
                f"[rebalancer] Ratio already {n_majority / n_minority:.2f}:1 "
                f"<= target {self._target_ratio:.2f}:1, no rows synthesized."
            )
            self._stats = RebalanceStats(n_majority, n_minority, n_majority, n_minority)
            return df.copy()

        categorical_idx = [
            self._feature_columns.index(c)
            for c in self._categorical_columns
            if c in self._feature_columns
        ]
        params = dict(
            sampling_strategy={minority_label: n_target},
            k_neighbors=self._k_neighbors,
            random_state=self._random_state,
        )
        if categorical_idx:
            smote = SMOTENC(categorical_features=categorical_idx, **params)
        else:
            smote = SMOTE(**params)
        X = df[self._feature_columns]
        y = df[target_column]
        X_res, y_res = smote.fit_resample(X, y)

        # imblearn appends synthetic rows after the originals
        synthetic = pd.DataFrame(
            np.asarray(X_res)[len(df):], columns=self._feature_columns
        )
        synthetic[target_column] = np.asarray(y_res)[len(df):]
        for col in self._categorical_columns + [target_column]:
            if col in synthetic.columns:
                synthetic[col] = synthetic[col].astype(df[col].dtype)
        for col in self._feature_columns:
            if col not in self._categorical_columns:
                synthetic[col] = synthetic[col].astype(df[col].dtype)

        original = df[self._feature_columns + [target_column]]
        if pd.api.types.is_integer_dtype(df.index):
            start = int(df.index.max()) + 1
            synthetic.index = pd.RangeIndex(start, start + len(synthetic))
            result = pd.concat([original, synthetic])
        else:
            # labels can only be extended for integer indexes
            result = pd.concat([original, synthetic], ignore_index=True)

        self._stats = RebalanceStats(
            majority_before=n_majority,
            minority_before=n_minority,
            majority_after=int((result[target_column] == majority_label).sum()),
            minority_after=int((result[target_column] == minority_label).sum()),
        )
        print(
            f"[rebalancer] SMOTE: {len(df):,} -> {len(result):,} rows "
            f"(+{len(synthetic):,} synthetic, k={self._k_neighbors})"
        )
        return result

    @property
    def stats(self) -> RebalanceStats | None:
        """Counts from the most recent ``fit_resample`` call."""
        return self._stats
