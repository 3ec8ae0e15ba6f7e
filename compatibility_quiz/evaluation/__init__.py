"""Evaluation module for scored answer batches."""

from .metrics import (
    compute_score_distribution_stats,
    compute_tier_counts,
    compute_vocabulary_summary,
    sanity_check_symmetry,
    EvaluationReport,
    create_evaluation_report
)

__all__ = [
    "compute_score_distribution_stats",
    "compute_tier_counts",
    "compute_vocabulary_summary",
    "sanity_check_symmetry",
    "EvaluationReport",
    "create_evaluation_report"
]
