"""
Classifier training for the fraud analysis report.

Two off-the-shelf models are compared:

* ``BoostedTreeModel`` -- an XGBoost ensemble of shallow trees whose
  round count is chosen by early stopping on the validation set and
  then refitted on the training data alone.
* ``SupportVectorModel`` -- an RBF-kernel SVM tuned by k-fold grid
  search on a small random subsample of the training data.

Both are created once, scored many times, and never persisted.
"""

from __future__ import annotations

from typing import Any, Optional

import numpy as np
import pandas as pd
import xgboost as xgb
from sklearn.model_selection import GridSearchCV, StratifiedKFold
from sklearn.svm import SVC


class BoostedTreeModel:
    """Gradient-boosted tree ensemble with early-stopped round selection."""

    name = "XGBoost"

    def __init__(
        self,
        max_depth: int = 3,
        learning_rate: float = 0.3,
        max_rounds: int = 500,
        early_stopping_rounds: int = 50,
        random_state: int = 42,
    ) -> None:
        """
        Args:
            max_depth: Depth of every tree.
            learning_rate: Shrinkage applied to each round.
            max_rounds: Upper bound on boosting rounds.
            early_stopping_rounds: Stop after this many rounds without
                validation log-loss improvement.
            random_state: Seed for reproducibility.
        """
        self._params: dict[str, Any] = {
            "objective": "binary:logistic",
            "eval_metric": "logloss",
            "max_depth": max_depth,
            "learning_rate": learning_rate,
            "importance_type": "gain",
            "random_state": random_state,
            "n_jobs": 1,
        }
        self._max_rounds = max_rounds
        self._early_stopping_rounds = early_stopping_rounds
        self._model: Optional[xgb.XGBClassifier] = None
        self._best_rounds: int = 0
        self._feature_columns: list[str] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def fit(
        self,
        X_train: pd.DataFrame,
        y_train: np.ndarray,
        X_val: pd.DataFrame,
        y_val: np.ndarray,
    ) -> "BoostedTreeModel":
        """Select the round count on validation data, then refit.

        Args:
            X_train: Training features.
            y_train: Training labels.
            X_val: Validation features, used only to monitor loss.
            y_val: Validation labels.

        Returns:
            ``self``.
        """
        self._feature_columns = list(X_train.columns)

        search = xgb.XGBClassifier(
            n_estimators=self._max_rounds,
            early_stopping_rounds=self._early_stopping_rounds,
            **self._params,
        )
        search.fit(X_train, y_train, eval_set=[(X_val, y_val)], verbose=False)
        self._best_rounds = int(search.best_iteration) + 1

        print(
            f"[model] XGBoost early stopping: best round {self._best_rounds} "
            f"of max {self._max_rounds} "
            f"(validation logloss {search.best_score:.4f})"
        )

        final = xgb.XGBClassifier(n_estimators=self._best_rounds, **self._params)
        final.fit(X_train, y_train, verbose=False)
        self._model = final
        return self

    def predict_proba(self, X: pd.DataFrame) -> np.ndarray:
        """Return fraud probabilities.

        Raises:
            RuntimeError: If the model has not been fitted.
        """
        self._assert_trained()
        return self._model.predict_proba(X[self._feature_columns])[:, 1]

    def score(self, X: pd.DataFrame) -> np.ndarray:
        return self.predict_proba(X)

    @property
    def best_rounds(self) -> int:
        """Round count selected by early stopping."""
        return self._best_rounds

    @property
    def feature_importances(self) -> dict[str, float]:
        """Gain-based importances, highest first."""
        self._assert_trained()
        importances = self._model.feature_importances_
        return dict(
            sorted(
                zip(self._feature_columns, importances.tolist()),
                key=lambda x: x[1],
                reverse=True,
            )
        )

    @property
    def params(self) -> dict[str, Any]:
        return {**self._params, "n_estimators": self._best_rounds}

    def _assert_trained(self) -> None:
        if self._model is None:
            raise RuntimeError("Model not trained. Call fit() first.")


class SupportVectorModel:
    """RBF support vector classifier tuned by cross-validated grid search.

    Fitting on the full rebalanced training set is expensive (the grid
    search runs ``len(c_grid) * len(gamma_grid) * cv_folds`` fits), so
    only a uniformly random fraction of it is used.
    """

    name = "SVM"

    def __init__(
        self,
        sample_fraction: float = 0.01,
        c_grid: Optional[list[float]] = None,
        gamma_grid: Optional[list[float]] = None,
        cv_folds: int = 10,
        scoring: str = "accuracy",
        sample_random_state: int = 42,
        cv_random_state: int = 42,
    ) -> None:
        """
        Args:
            sample_fraction: Fraction of training rows used for tuning
                and fitting.
            c_grid: Candidate regularization costs.
            gamma_grid: Candidate RBF kernel widths.
            cv_folds: Number of stratified cross-validation folds.
            scoring: scikit-learn scorer used to pick the best pair.
            sample_random_state: Seed for the subsample.
            cv_random_state: Seed for fold assignment.
        """
        if not 0.0 < sample_fraction <= 1.0:
            raise ValueError(
                f"sample_fraction must be in (0, 1], got {sample_fraction}"
            )
        self._sample_fraction = sample_fraction
        self._c_grid = list(c_grid or [1, 5, 100, 1000])
        self._gamma_grid = list(gamma_grid or [0.1, 1, 5, 10])
        self._cv_folds = cv_folds
        self._scoring = scoring
        self._sample_random_state = sample_random_state
        self._cv_random_state = cv_random_state
        self._search: Optional[GridSearchCV] = None
        self._feature_columns: list[str] = []
        self._n_sampled: int = 0

    def fit(self, X_train: pd.DataFrame, y_train: np.ndarray) -> "SupportVectorModel":
        """Subsample, grid-search C and gamma, keep the best model.

        Args:
            X_train: Normalized, rebalanced training features.
            y_train: Training labels.

        Returns:
            ``self``.

        Raises:
            ValueError: If the subsample has fewer rows of a class than
                there are folds.
        """
        self._feature_columns = list(X_train.columns)
        y_train = pd.Series(np.asarray(y_train), index=X_train.index)

        X_sample = X_train.sample(
            frac=self._sample_fraction, random_state=self._sample_random_state
        )
        y_sample = y_train.loc[X_sample.index]
        self._n_sampled = len(X_sample)

        class_counts = y_sample.value_counts()
        if len(class_counts) < 2 or class_counts.min() < self._cv_folds:
            raise ValueError(
                f"SVM subsample of {len(X_sample):,} rows has class counts "
                f"{class_counts.to_dict()}; each class needs at least "
                f"{self._cv_folds} rows for {self._cv_folds}-fold CV. "
                "Increase sample_fraction."
            )

        print(
            f"[model] SVM grid search on {len(X_sample):,} sampled rows "
            f"({self._sample_fraction:.1%}), "
            f"{len(self._c_grid) * len(self._gamma_grid)} combinations x "
            f"{self._cv_folds} folds"
        )

        cv = StratifiedKFold(
            n_splits=self._cv_folds,
            shuffle=True,
            random_state=self._cv_random_state,
        )
        self._search = GridSearchCV(
            SVC(kernel="rbf"),
            {"C": self._c_grid, "gamma": self._gamma_grid},
            cv=cv,
            scoring=self._scoring,
            refit=True,
        )
        self._search.fit(X_sample.values, y_sample.values)

        print(
            f"[model] SVM best params: {self._search.best_params_} "
            f"(CV {self._scoring}: {self._search.best_score_:.4f})"
        )
        return self

    def predict(self, X: pd.DataFrame) -> np.ndarray:
        """Return predicted 0/1 labels.

        Raises:
            RuntimeError: If the model has not been fitted.
        """
        self._assert_trained()
        return self._search.best_estimator_.predict(X[self._feature_columns].values)

    def score(self, X: pd.DataFrame) -> np.ndarray:
        return self.predict(X).astype(np.float64)

    @property
    def best_params(self) -> dict[str, float]:
        self._assert_trained()
        return dict(self._search.best_params_)

    @property
    def best_cv_score(self) -> float:
        self._assert_trained()
        return float(self._search.best_score_)

    @property
    def cv_results(self) -> pd.DataFrame:
        """Mean/std CV score for every grid point."""
        self._assert_trained()
        results = pd.DataFrame(self._search.cv_results_)
        return results[
            ["param_C", "param_gamma", "mean_test_score", "std_test_score", "rank_test_score"]
        ].sort_values("rank_test_score")

    @property
    def n_sampled(self) -> int:
        return self._n_sampled

    def _assert_trained(self) -> None:
        if self._search is None:
            raise RuntimeError("Model not trained. Call fit() first.")
