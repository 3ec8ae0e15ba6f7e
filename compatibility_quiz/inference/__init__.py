"""
Inference module for compatibility scoring.

This module provides the scoring pipeline that turns two participants'
quiz answers into a compatibility percentage and message.
"""

from .schema import AnswerSet, CompatibilityResult, MessageTier, format_percentage
from .predict import (
    LocalCompatibilityScorer,
    FallbackCompatibilityScorer,
    ScoringConfig,
    compute_compatibility,
    create_scorer,
)

__all__ = [
    "AnswerSet",
    "CompatibilityResult",
    "MessageTier",
    "format_percentage",
    "LocalCompatibilityScorer",
    "FallbackCompatibilityScorer",
    "ScoringConfig",
    "compute_compatibility",
    "create_scorer",
]
