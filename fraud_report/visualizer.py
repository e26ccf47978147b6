"""
Visualization utilities for the fraud analysis report.

Generates the report charts: class balance, feature distributions,
fraud rate by boolean feature, feature importance, ROC curves and
confusion matrices.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from fraud_report.data_loader import (
    BOOLEAN_FEATURES,
    CONTINUOUS_FEATURES,
    TARGET_COLUMN,
)
from fraud_report.evaluator import EvaluationResult


class ReportVisualizer:
    """Generates the charts that accompany the narrative report.

    All methods optionally save to disk and/or display interactively.
    """

    # Consistent styling
    COLORS = {
        "primary": "#1a73e8",
        "secondary": "#ea4335",
        "success": "#34a853",
        "warning": "#fbbc04",
        "bg": "#fafafa",
    }

    def __init__(self, output_dir: Optional[str | Path] = None) -> None:
        """
        Args:
            output_dir: Directory for saving plots. Created if missing.
                If ``None``, plots are shown but not saved.
        """
        self._output_dir: Optional[Path] = None
        if output_dir:
            self._output_dir = Path(output_dir)
            self._output_dir.mkdir(parents=True, exist_ok=True)

        plt.style.use("seaborn-v0_8-whitegrid")
        plt.rcParams.update({
            "figure.dpi": 150,
            "font.size": 10,
            "axes.titlesize": 12,
            "axes.labelsize": 10,
        })

    # ------------------------------------------------------------------
    # Exploratory plots
    # ------------------------------------------------------------------

    def plot_class_balance(
        self,
        df: pd.DataFrame,
        *,
        show: bool = False,
    ) -> Optional[Path]:
        """Bar chart of legitimate vs fraudulent transaction counts."""
        counts = df[TARGET_COLUMN].value_counts().reindex([0, 1], fill_value=0)

        fig, ax = plt.subplots(figsize=(6, 5))
        bars = ax.bar(
            ["Legitimate", "Fraud"],
            counts.values,
            color=[self.COLORS["primary"], self.COLORS["secondary"]],
            edgecolor="white",
        )
        total = counts.sum()
        for bar, val in zip(bars, counts.values):
            ax.text(
                bar.get_x() + bar.get_width() / 2,
                bar.get_height(),
                f"{val:,}\n({val / total:.1%})",
                ha="center",
                va="bottom",
                fontsize=9,
            )
        ax.set_ylabel("Transactions")
        ax.set_title("Class Balance")
        fig.tight_layout()
        return self._save_or_show(fig, "class_balance.png", show=show)

    def plot_feature_distributions(
        self,
        df: pd.DataFrame,
        *,
        show: bool = False,
    ) -> Optional[Path]:
        """Log-scale histograms of each continuous feature by class."""
        fig, axes = plt.subplots(1, len(CONTINUOUS_FEATURES), figsize=(15, 4.5))
        fraud = df[df[TARGET_COLUMN] == 1]
        legit = df[df[TARGET_COLUMN] == 0]

        for ax, col in zip(np.atleast_1d(axes), CONTINUOUS_FEATURES):
            positive = df[col][df[col] > 0]
            log_scale = positive.nunique() > 1
            if log_scale:
                bins = np.logspace(
                    np.log10(positive.min()), np.log10(positive.max()), 50
                )
            else:
                bins = 50
            ax.hist(legit[col], bins=bins, alpha=0.6, label="Legitimate", color=self.COLORS["primary"], density=True)
            ax.hist(fraud[col], bins=bins, alpha=0.6, label="Fraud", color=self.COLORS["secondary"], density=True)
            if log_scale:
                ax.set_xscale("log")
            ax.set_xlabel(col.replace("_", " "))
            ax.set_ylabel("Density")
            ax.legend()

        fig.suptitle("Continuous Features by Class", fontsize=14, fontweight="bold", y=1.02)
        fig.tight_layout()
        return self._save_or_show(fig, "feature_distributions.png", show=show)

    def plot_boolean_fraud_rates(
        self,
        df: pd.DataFrame,
        *,
        show: bool = False,
    ) -> Optional[Path]:
        """Fraud rate for each value of each boolean feature."""
        fig, ax = plt.subplots(figsize=(9, 5))
        x = np.arange(len(BOOLEAN_FEATURES))
        width = 0.35

        rates = {
            col: df.groupby(col)[TARGET_COLUMN].mean().reindex([0, 1], fill_value=0)
            for col in BOOLEAN_FEATURES
        }
        ax.bar(x - width / 2, [rates[c][0] for c in BOOLEAN_FEATURES], width, label="= 0", color=self.COLORS["primary"], alpha=0.8)
        ax.bar(x + width / 2, [rates[c][1] for c in BOOLEAN_FEATURES], width, label="= 1", color=self.COLORS["warning"], alpha=0.8)
        ax.set_xticks(x)
        ax.set_xticklabels([c.replace("_", " ") for c in BOOLEAN_FEATURES])
        ax.set_ylabel("Fraud Rate")
        ax.set_title("Fraud Rate by Boolean Feature")
        ax.yaxis.set_major_formatter(plt.FuncFormatter(lambda y, _: f"{y:.0%}"))
        ax.legend()
        fig.tight_layout()
        return self._save_or_show(fig, "boolean_fraud_rates.png", show=show)

    # ------------------------------------------------------------------
    # Model plots
    # ------------------------------------------------------------------

    def plot_feature_importance(
        self,
        importances: dict[str, float],
        *,
        show: bool = False,
    ) -> Optional[Path]:
        """Plot gain-based feature importances as a horizontal bar chart."""
        if not importances:
            return None

        items = sorted(importances.items(), key=lambda x: x[1], reverse=True)
        names = [x[0] for x in reversed(items)]
        values = [x[1] for x in reversed(items)]

        fig, ax = plt.subplots(figsize=(9, max(4, len(items) * 0.6)))
        bars = ax.barh(
            names,
            values,
            color=self.COLORS["primary"],
            edgecolor="white",
            height=0.7,
        )

        # Annotate values
        for bar, val in zip(bars, values):
            ax.text(
                bar.get_width() + 0.002,
                bar.get_y() + bar.get_height() / 2,
                f"{val:.4f}",
                va="center",
                fontsize=9,
            )

        ax.set_xlabel("Importance (gain)")
        ax.set_title("XGBoost Feature Importance")
        fig.tight_layout()
        return self._save_or_show(fig, "feature_importance.png", show=show)

    def plot_confusion_matrix(
        self,
        result: EvaluationResult,
        *,
        show: bool = False,
    ) -> Optional[Path]:
        """Plot one model's confusion matrix as a heatmap."""
        if result.confusion_matrix is None:
            return None

        cm = result.confusion_matrix
        fig, ax = plt.subplots(figsize=(7, 6))

        im = ax.imshow(cm, interpolation="nearest", cmap="Blues")
        fig.colorbar(im, ax=ax, shrink=0.8)

        labels = ["Legitimate", "Fraud"]
        tick_marks = np.arange(len(labels))
        ax.set_xticks(tick_marks)
        ax.set_xticklabels(labels)
        ax.set_yticks(tick_marks)
        ax.set_yticklabels(labels)

        thresh = cm.max() / 2.0
        for i in range(cm.shape[0]):
            for j in range(cm.shape[1]):
                ax.text(
                    j,
                    i,
                    f"{cm[i, j]:,}",
                    ha="center",
                    va="center",
                    color="white" if cm[i, j] > thresh else "black",
                    fontsize=14,
                    fontweight="bold",
                )

        ax.set_xlabel("Predicted Label")
        ax.set_ylabel("True Label")
        ax.set_title(f"Confusion Matrix: {result.model_name} ({result.dataset})")
        fig.tight_layout()
        return self._save_or_show(
            fig, f"confusion_matrix_{_slug(result.model_name)}.png", show=show
        )

    def plot_roc_curve(
        self,
        result: EvaluationResult,
        *,
        show: bool = False,
    ) -> Optional[Path]:
        """Plot one model's Receiver Operating Characteristic curve."""
        fig, ax = plt.subplots(figsize=(7, 6))
        ax.plot(
            result.fpr,
            result.tpr,
            color=self.COLORS["primary"],
            linewidth=2,
            label=f"ROC Curve (AUC = {result.roc_auc:.4f})",
        )
        self._draw_chance_line(ax)
        ax.fill_between(result.fpr, result.tpr, alpha=0.1, color=self.COLORS["primary"])
        ax.set_title(f"ROC Curve: {result.model_name} ({result.dataset})")
        fig.tight_layout()
        return self._save_or_show(
            fig, f"roc_curve_{_slug(result.model_name)}.png", show=show
        )

    def plot_roc_comparison(
        self,
        results: list[EvaluationResult],
        *,
        show: bool = False,
    ) -> Optional[Path]:
        """Overlay ROC curves of several models on one axis."""
        palette = [self.COLORS["primary"], self.COLORS["secondary"], self.COLORS["success"]]
        fig, ax = plt.subplots(figsize=(7, 6))
        for color, result in zip(palette, results):
            ax.plot(
                result.fpr,
                result.tpr,
                color=color,
                linewidth=2,
                label=f"{result.model_name} (AUC = {result.roc_auc:.4f})",
            )
        self._draw_chance_line(ax)
        ax.set_title("ROC Curve Comparison")
        fig.tight_layout()
        return self._save_or_show(fig, "roc_comparison.png", show=show)

    def generate_all(
        self,
        df: pd.DataFrame,
        importances: dict[str, float],
        results: list[EvaluationResult],
        *,
        show: bool = False,
    ) -> list[Optional[Path]]:
        """Generate every report chart.

        Args:
            df: Full transaction table (for exploratory plots).
            importances: Boosted model feature importances.
            results: Test-set evaluation of each model.
            show: Whether to display interactively.

        Returns:
            List of saved file paths.
        """
        paths = [
            self.plot_class_balance(df, show=show),
            self.plot_feature_distributions(df, show=show),
            self.plot_boolean_fraud_rates(df, show=show),
            self.plot_feature_importance(importances, show=show),
        ]
        for result in results:
            paths.append(self.plot_roc_curve(result, show=show))
            paths.append(self.plot_confusion_matrix(result, show=show))
        paths.append(self.plot_roc_comparison(results, show=show))
        return paths

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _draw_chance_line(ax: plt.Axes) -> None:
        ax.plot(
            [0, 1],
            [0, 1],
            color="gray",
            linestyle="--",
            linewidth=1,
            label="Random Classifier",
        )
        ax.set_xlabel("False Positive Rate")
        ax.set_ylabel("True Positive Rate")
        ax.legend(loc="lower right")
        ax.set_xlim([0, 1])
        ax.set_ylim([0, 1.05])

    def _save_or_show(
        self,
        fig: plt.Figure,
        filename: str,
        *,
        show: bool,
    ) -> Optional[Path]:
        """Save figure to disk and/or display it."""
        saved_path: Optional[Path] = None
        if self._output_dir:
            saved_path = self._output_dir / filename
            fig.savefig(saved_path, bbox_inches="tight", dpi=150)

        if show:
            plt.show()
        else:
            plt.close(fig)

        return saved_path


def _slug(name: str) -> str:
    return name.lower().replace(" ", "_")
