"""
Run configuration for the fraud analysis report.

All tunables of the pipeline live in a single ``ReportConfig``
dataclass.  Defaults reproduce the reference analysis: a 60/20/20
stratified split, SMOTE up to a 1.6:1 majority:minority ratio,
per-split min-max normalization, a depth-3 XGBoost ensemble and an
RBF SVM tuned on a 1% subsample.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


NORMALIZATION_MODES = ("per_split", "train_fit")

STAGES = ("split", "rebalance", "svm_sample", "svm_cv", "boosting")


@dataclass
class ReportConfig:
    """Container for every pipeline parameter."""

    seed: int = 42

    # Splitter
    train_size: float = 0.6
    validation_size: float = 0.2
    test_size: float = 0.2

    # Rebalancer
    target_ratio: float = 1.6
    k_neighbors: int = 5

    # Normalizer
    normalization: str = "per_split"

    # Gradient boosting
    max_depth: int = 3
    learning_rate: float = 0.3
    max_rounds: int = 500
    early_stopping_rounds: int = 50

    # Support vector classifier
    svm_sample_fraction: float = 0.01
    svm_c_grid: list[float] = field(default_factory=lambda: [1, 5, 100, 1000])
    svm_gamma_grid: list[float] = field(default_factory=lambda: [0.1, 1, 5, 10])
    svm_cv_folds: int = 10
    svm_scoring: str = "accuracy"

    # Evaluator
    threshold: float = 0.5

    def validate(self) -> "ReportConfig":
        """Check parameter consistency.

        Returns:
            ``self`` so the call can be chained.

        Raises:
            ValueError: If any parameter is out of range.
        """
        proportions = (self.train_size, self.validation_size, self.test_size)
        if any(p <= 0 for p in proportions):
            raise ValueError(f"Split proportions must be positive, got {proportions}")
        if not np.isclose(sum(proportions), 1.0):
            raise ValueError(
                f"Split proportions must sum to 1.0, got {sum(proportions):.4f}"
            )
        if self.target_ratio < 1.0:
            raise ValueError(
                f"target_ratio must be >= 1.0 (majority:minority), got {self.target_ratio}"
            )
        if self.k_neighbors < 1:
            raise ValueError(f"k_neighbors must be >= 1, got {self.k_neighbors}")
        if self.normalization not in NORMALIZATION_MODES:
            raise ValueError(
                f"normalization must be one of {NORMALIZATION_MODES}, "
                f"got {self.normalization!r}"
            )
        if not 0.0 < self.svm_sample_fraction <= 1.0:
            raise ValueError(
                f"svm_sample_fraction must be in (0, 1], got {self.svm_sample_fraction}"
            )
        if self.svm_cv_folds < 2:
            raise ValueError(f"svm_cv_folds must be >= 2, got {self.svm_cv_folds}")
        if not self.svm_c_grid or not self.svm_gamma_grid:
            raise ValueError("SVM grids must not be empty")
        if not 0.0 < self.threshold < 1.0:
            raise ValueError(f"threshold must be in (0, 1), got {self.threshold}")
        if self.max_rounds < 1 or self.early_stopping_rounds < 1:
            raise ValueError("max_rounds and early_stopping_rounds must be >= 1")
        return self

    def stage_seeds(self) -> dict[str, int]:
        """Derive one independent integer seed per stochastic stage.

        Seeds are spawned from a single ``SeedSequence`` rooted at
        ``seed``, so each stage's draws do not depend on how many
        numbers an earlier stage consumed.
        """
        children = np.random.SeedSequence(self.seed).spawn(len(STAGES))
        return {
            stage: int(child.generate_state(1)[0])
            for stage, child in zip(STAGES, children)
        }
