"""
Credit Card Fraud Report
========================

An offline analysis of card transactions: stratified splitting, SMOTE
rebalancing, min-max normalization, and a comparison of an XGBoost
ensemble against an RBF support vector machine by AUC and confusion
matrix.
"""

__version__ = "1.0.0"

from fraud_report.config import ReportConfig
from fraud_report.data_loader import (
    generate_synthetic_transactions,
    load_dataset,
    load_transactions,
    summarize_transactions,
)
from fraud_report.evaluator import EvaluationResult, evaluate_model, evaluate_scores
from fraud_report.model import BoostedTreeModel, SupportVectorModel
from fraud_report.normalizer import MinMaxNormalizer
from fraud_report.rebalancer import MinorityOversampler
from fraud_report.report import run_report
from fraud_report.splitter import DatasetSplit, StratifiedSplitter
from fraud_report.visualizer import ReportVisualizer

__all__ = [
    "ReportConfig",
    "StratifiedSplitter",
    "DatasetSplit",
    "MinorityOversampler",
    "MinMaxNormalizer",
    "BoostedTreeModel",
    "SupportVectorModel",
    "EvaluationResult",
    "ReportVisualizer",
    "evaluate_model",
    "evaluate_scores",
    "generate_synthetic_transactions",
    "load_dataset",
    "load_transactions",
    "run_report",
    "summarize_transactions",
]
