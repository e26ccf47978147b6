"""
Held-out evaluation of fitted classifiers.

Turns scores (probabilities or hard labels) into a confusion matrix,
an ROC curve and its AUC, plus the threshold metrics quoted in the
narrative report.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from sklearn.metrics import (
    accuracy_score,
    classification_report,
    confusion_matrix,
    f1_score,
    precision_score,
    recall_score,
    roc_auc_score,
    roc_curve,
)


@dataclass
class EvaluationResult:
    """Container for one model's evaluation on one held-out set."""

    model_name: str = ""
    dataset: str = "test"
    n_rows: int = 0
    threshold: float = 0.5
    accuracy: float = 0.0
    precision: float = 0.0
    recall: float = 0.0
    f1: float = 0.0
    roc_auc: float = 0.0
    confusion_matrix: Optional[np.ndarray] = None
    classification_report: str = ""
    fpr: Optional[np.ndarray] = None
    tpr: Optional[np.ndarray] = None
    y_true: Optional[np.ndarray] = None
    y_score: Optional[np.ndarray] = None
    y_pred: Optional[np.ndarray] = None

    def summary(self) -> str:
        """Return a human-readable summary."""
        tn, fp, fn, tp = self.confusion_matrix.ravel()
        lines = [
            f"{self.model_name} ({self.dataset}, n={self.n_rows:,})",
            "=" * 40,
            f"ROC AUC:   {self.roc_auc:.4f}",
            f"Accuracy:  {self.accuracy:.4f}",
            f"Precision: {self.precision:.4f}",
            f"Recall:    {self.recall:.4f}",
            f"F1 Score:  {self.f1:.4f}",
            "",
            "Confusion matrix (rows = actual, cols = predicted):",
            f"               Legit    Fraud",
            f"  Legit   {tn:>9,} {fp:>8,}",
            f"  Fraud   {fn:>9,} {tp:>8,}",
            "",
            self.classification_report,
        ]
        return "\n".join(lines)


def evaluate_scores(
    y_true: np.ndarray,
    y_score: np.ndarray,
    *,
    threshold: float = 0.5,
    model_name: str = "model",
    dataset: str = "test",
) -> EvaluationResult:
    """Evaluate a score vector against true labels.

    ``y_score`` may hold probabilities or hard 0/1 labels; either way
    predictions are ``y_score >= threshold`` and the ROC curve is built
    from ``y_score`` directly.

    Args:
        y_true: True binary labels.
        y_score: Scores for the positive class.
        threshold: Decision threshold for predicted labels.
        model_name: Label used in summaries and plots.
        dataset: Name of the evaluated partition.

    Returns:
        ``EvaluationResult``.

    Raises:
        ValueError: If lengths differ or ``y_true`` holds a single class.
    """
    y_true = np.asarray(y_true).astype(int)
    y_score = np.asarray(y_score, dtype=np.float64)
    if y_true.shape != y_score.shape:
        raise ValueError(
            f"y_true and y_score must have the same shape, got "
            f"{y_true.shape} and {y_score.shape}"
        )
    if np.unique(y_true).size < 2:
        raise ValueError("y_true must contain both classes to compute AUC")

    y_pred = (y_score >= threshold).astype(int)
    fpr, tpr, _ = roc_curve(y_true, y_score)

    return EvaluationResult(
        model_name=model_name,
        dataset=dataset,
        n_rows=len(y_true),
        threshold=threshold,
        accuracy=float(accuracy_score(y_true, y_pred)),
        precision=float(precision_score(y_true, y_pred, zero_division=0)),
        recall=float(recall_score(y_true, y_pred, zero_division=0)),
        f1=float(f1_score(y_true, y_pred, zero_division=0)),
        roc_auc=float(roc_auc_score(y_true, y_score)),
        confusion_matrix=confusion_matrix(y_true, y_pred, labels=[0, 1]),
        classification_report=classification_report(
            y_true,
            y_pred,
            labels=[0, 1],
            target_names=["Legitimate", "Fraud"],
            zero_division=0,
        ),
        fpr=fpr,
        tpr=tpr,
        y_true=y_true,
        y_score=y_score,
        y_pred=y_pred,
    )


def evaluate_model(
    model,
    X,
    y_true: np.ndarray,
    *,
    threshold: float = 0.5,
    dataset: str = "test",
) -> EvaluationResult:
    """Score ``X`` with a fitted model and evaluate against ``y_true``.

    The model must expose ``name`` and ``score(X)``; probability models
    return probabilities, label models return 0/1.
    """
    return evaluate_scores(
        y_true,
        model.score(X),
        threshold=threshold,
        model_name=model.name,
        dataset=dataset,
    )
