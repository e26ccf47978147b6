"""
Min-max normalization of the continuous transaction features.

Two modes are supported and must be chosen explicitly:

``per_split``
    Min/max are computed on each split independently (training,
    validation and test alike).  This reproduces the reference
    analysis, where validation and test statistics leak into their own
    scaling.

``train_fit``
    Min/max are computed once on the training split and reused for
    validation and test.  Values outside the training range map
    outside ``[0, 1]``; nothing is clipped.
"""

from __future__ import annotations

import pandas as pd
from sklearn.preprocessing import MinMaxScaler

from fraud_report.config import NORMALIZATION_MODES
from fraud_report.data_loader import CONTINUOUS_FEATURES
from fraud_report.splitter import DatasetSplit


class MinMaxNormalizer:
    """Rescales continuous columns to ``[0, 1]``; other columns pass through."""

    def __init__(
        self,
        columns: list[str] | None = None,
        mode: str = "per_split",
    ) -> None:
        """
        Args:
            columns: Continuous columns to rescale.  Defaults to the
                three continuous transaction features.
            mode: ``"per_split"`` or ``"train_fit"``.

        Raises:
            ValueError: If ``mode`` is unknown.
        """
        if mode not in NORMALIZATION_MODES:
            raise ValueError(
                f"mode must be one of {NORMALIZATION_MODES}, got {mode!r}"
            )
        self._columns = list(columns or CONTINUOUS_FEATURES)
        self._mode = mode
        self._scaler = MinMaxScaler(clip=False)
        self._fitted: bool = False

    @property
    def mode(self) -> str:
        return self._mode

    def fit(self, df: pd.DataFrame) -> "MinMaxNormalizer":
        """Learn per-column min/max from ``df``."""
        self._scaler.fit(df[self._columns].values)
        self._fitted = True
        return self

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        """Rescale ``df`` with the fitted min/max.

        Raises:
            RuntimeError: If called before ``fit``.
        """
        if not self._fitted:
            raise RuntimeError(
                "Normalizer has not been fitted. Call fit first."
            )
        df = df.copy()
        df[self._columns] = self._scaler.transform(df[self._columns].values)
        return df

    def fit_transform(self, df: pd.DataFrame) -> pd.DataFrame:
        return self.fit(df).transform(df)

    def normalize_splits(self, splits: DatasetSplit) -> DatasetSplit:
        """Rescale all three partitions according to ``mode``.

        Args:
            splits: Partitions to rescale.  ``train`` should already be
                the rebalanced training set.

        Returns:
            New ``DatasetSplit``; the input is left untouched.
        """
        train = self.fit_transform(splits.train)
        if self._mode == "train_fit":
            validation = self.transform(splits.validation)
            test = self.transform(splits.test)
        else:
            validation = MinMaxNormalizer(self._columns, self._mode).fit_transform(
                splits.validation
            )
            test = MinMaxNormalizer(self._columns, self._mode).fit_transform(
                splits.test
            )
        return DatasetSplit(train=train, validation=validation, test=test)

    def feature_ranges(self) -> dict[str, tuple[float, float]]:
        """Fitted ``(min, max)`` per column."""
        if not self._fitted:
            return {}
        return {
            col: (float(lo), float(hi))
            for col, lo, hi in zip(
                self._columns, self._scaler.data_min_, self._scaler.data_max_
            )
        }
