"""
Evaluation metrics for batches of compatibility scores.

There are no ground-truth labels for compatibility, so evaluation focuses on:
1. Score distribution analysis
2. How many pairs land in each message tier
3. Sanity checks (symmetry: score(A, B) must equal score(B, A))
4. Which words drive the overlap for each question

This module DOES NOT claim real-world predictive accuracy.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Sequence, Tuple
import json

import numpy as np
import pandas as pd
from sklearn.feature_extraction.text import CountVectorizer

from ..inference.predict import LocalCompatibilityScorer
from ..inference.schema import AnswerSet, MessageTier, DEFAULT_TIERS, DEFAULT_MESSAGE, QUESTION_KEYS

logger = logging.getLogger(__name__)


@dataclass
class ScoreDistributionStats:
    """Statistics about percentage distribution."""
    count: int
    mean: float
    std: float
    min: float
    max: float
    quantiles: Dict[str, float]  # e.g., {"p10": 20.0, "p50": 50.0, "p90": 80.0}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": int(self.count),
            "mean": float(self.mean),
            "std": float(self.std),
            "min": float(self.min),
            "max": float(self.max),
            "quantiles": {k: float(v) for k, v in self.quantiles.items()}
        }


@dataclass
class SymmetryCheck:
    """Results of the symmetry sanity check."""
    n_pairs: int
    n_violations: int
    max_abs_difference: float
    is_symmetric: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n_pairs": int(self.n_pairs),
            "n_violations": int(self.n_violations),
            "max_abs_difference": float(self.max_abs_difference),
            "is_symmetric": bool(self.is_symmetric)
        }


@dataclass
class EvaluationReport:
    """
    Complete evaluation report for a scored batch.

    Contains distribution statistics, tier counts and sanity checks.
    """
    scorer_name: str
    distribution_stats: ScoreDistributionStats
    tier_counts: Dict[str, int]
    symmetry_check: Optional[SymmetryCheck] = None
    vocabulary: Dict[str, List[Tuple[str, int]]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "scorer_name": self.scorer_name,
            "distribution_stats": self.distribution_stats.to_dict(),
            "tier_counts": dict(self.tier_counts),
            "vocabulary": {
                key: [[token, int(count)] for token, count in tokens]
                for key, tokens in self.vocabulary.items()
            }
        }
        if self.symmetry_check:
            result["symmetry_check"] = self.symmetry_check.to_dict()
        return result

    def save(self, filepath: str) -> None:
        """Save report to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved evaluation report to {filepath}")

    def summary(self) -> str:
        """Generate text summary of the report."""
        stats = self.distribution_stats
        lines = [
            f"Evaluation Report: {self.scorer_name}",
            "=" * 50,
            "",
            f"Score Distribution ({stats.count} pairs):",
            f"  Mean: {stats.mean:.2f}",
            f"  Std:  {stats.std:.2f}",
            f"  Min:  {stats.min:.2f}",
            f"  Max:  {stats.max:.2f}",
        ]

        for q_name, q_value in stats.quantiles.items():
            lines.append(f"  {q_name}: {q_value:.2f}")

        lines.extend(["", "Message Tiers:"])
        for message, count in self.tier_counts.items():
            lines.append(f"  {message}: {count}")

        if self.symmetry_check:
            lines.extend([
                "",
                "Symmetry Check:",
                f"  Is symmetric: {self.symmetry_check.is_symmetric}",
                f"  Violations: {self.symmetry_check.n_violations}/{self.symmetry_check.n_pairs}",
            ])

        if self.vocabulary:
            lines.extend(["", "Top Tokens:"])
            for key, tokens in self.vocabulary.items():
                rendered = ", ".join(f"{token} ({count})" for token, count in tokens)
                lines.append(f"  {key}: {rendered or '-'}")

        return "\n".join(lines)


def compute_score_distribution_stats(
    percentages: np.ndarray,
    quantiles: Sequence[float] = (0.1, 0.25, 0.5, 0.75, 0.9)
) -> ScoreDistributionStats:
    """
    Compute distribution statistics for percentages.

    Args:
        percentages: Array of compatibility percentages
        quantiles: Quantile values to compute (default: p10, p25, p50, p75, p90)

    Returns:
        ScoreDistributionStats instance (all zeros for an empty batch)
    """
    percentages = np.asarray(percentages, dtype=float)
    if percentages.size == 0:
        logger.warning("No scores to summarize")
        return ScoreDistributionStats(
            count=0, mean=0.0, std=0.0, min=0.0, max=0.0,
            quantiles={f"p{int(q * 100)}": 0.0 for q in quantiles}
        )

    quantile_dict = {
        f"p{int(q * 100)}": float(np.percentile(percentages, q * 100))
        for q in quantiles
    }

    return ScoreDistributionStats(
        count=int(percentages.size),
        mean=float(np.mean(percentages)),
        std=float(np.std(percentages)),
        min=float(np.min(percentages)),
        max=float(np.max(percentages)),
        quantiles=quantile_dict
    )


def compute_tier_counts(
    messages: Sequence[str],
    tiers: Sequence[MessageTier] = DEFAULT_TIERS,
    default: str = DEFAULT_MESSAGE
) -> Dict[str, int]:
    """
    Count results per message tier, highest tier first.

    Tiers with no results are reported as 0.

    Args:
        messages: Result messages
        tiers: Message tiers used for scoring
        default: Message below the lowest tier

    Returns:
        Ordered mapping of message -> count
    """
    counts = pd.Series(list(messages), dtype=object).value_counts()
    ordered = [t.message for t in sorted(tiers, key=lambda t: t.threshold, reverse=True)]
    ordered.append(default)

    tier_counts = {message: int(counts.get(message, 0)) for message in ordered}
    for message, count in counts.items():
        if message not in tier_counts:
            tier_counts[message] = int(count)
    return tier_counts


def sanity_check_symmetry(
    scorer: LocalCompatibilityScorer,
    pairs: Sequence[Tuple[AnswerSet, AnswerSet]],
    tolerance: float = 1e-9
) -> SymmetryCheck:
    """
    Check that swapping Person A and Person B never changes the score.

    Args:
        scorer: Scorer under test
        pairs: (answers_a, answers_b) tuples
        tolerance: Allowed absolute difference in percentage

    Returns:
        SymmetryCheck instance
    """
    forward = np.array([scorer.compute(a, b).percentage for a, b in pairs], dtype=float)
    backward = np.array([scorer.compute(b, a).percentage for a, b in pairs], dtype=float)

    differences = np.abs(forward - backward)
    n_violations = int(np.sum(differences > tolerance))
    if n_violations:
        logger.warning(f"Symmetry check found {n_violations} asymmetric pairs")

    return SymmetryCheck(
        n_pairs=len(pairs),
        n_violations=n_violations,
        max_abs_difference=float(differences.max()) if differences.size else 0.0,
        is_symmetric=n_violations == 0
    )


def compute_vocabulary_summary(
    pairs_df: pd.DataFrame,
    scorer: LocalCompatibilityScorer,
    top_k: int = 10
) -> Dict[str, List[Tuple[str, int]]]:
    """
    Find the most common significant tokens per question.

    Counts each token once per answer, across both participants, using the
    scorer's own tokenizer so stop words and short tokens are excluded.

    Args:
        pairs_df: Answer-pair frame (a_q1..b_q3 columns)
        scorer: Scorer whose tokenizer is used
        top_k: Number of tokens to keep per question

    Returns:
        Mapping of question key -> [(token, answer_count), ...]
    """
    summary = {}
    for key in QUESTION_KEYS:
        documents = pd.concat(
            [pairs_df[f"a_{key}"], pairs_df[f"b_{key}"]], ignore_index=True
        ).fillna("").astype(str).tolist()

        vectorizer = CountVectorizer(
            tokenizer=lambda text: sorted(scorer.tokenize(text)),
            lowercase=False,
            token_pattern=None,
            binary=True
        )
        try:
            counts = vectorizer.fit_transform(documents)
        except ValueError:
            # Every answer was blank or made only of stop words
            summary[key] = []
            continue

        totals = np.asarray(counts.sum(axis=0)).ravel()
        vocab = vectorizer.get_feature_names_out()
        order = sorted(range(len(vocab)), key=lambda i: (-totals[i], vocab[i]))[:top_k]
        summary[key] = [(str(vocab[i]), int(totals[i])) for i in order]

    return summary


def create_evaluation_report(
    scorer_name: str,
    scored_df: pd.DataFrame,
    scorer: Optional[LocalCompatibilityScorer] = None,
    pairs_df: Optional[pd.DataFrame] = None,
    pairs: Optional[Sequence[Tuple[AnswerSet, AnswerSet]]] = None,
    quantiles: Sequence[float] = (0.1, 0.25, 0.5, 0.75, 0.9),
    top_k: int = 10
) -> EvaluationReport:
    """
    Create a complete evaluation report.

    Args:
        scorer_name: Name shown in the report
        scored_df: Output of LocalCompatibilityScorer.score_frame
        scorer: Scorer used (needed for tier order, symmetry and vocabulary)
        pairs_df: Raw answer-pair frame (for vocabulary summary)
        pairs: Answer pairs (for symmetry check)
        quantiles: Quantiles to compute
        top_k: Tokens per question in the vocabulary summary

    Returns:
        EvaluationReport instance
    """
    scorer = scorer or LocalCompatibilityScorer()

    dist_stats = compute_score_distribution_stats(scored_df["percentage"].to_numpy(), quantiles)
    tier_counts = compute_tier_counts(
        scored_df["message"].tolist(), scorer.config.tiers, scorer.config.default_message
    )

    symmetry = None
    if pairs is not None:
        symmetry = sanity_check_symmetry(scorer, pairs)

    vocabulary = {}
    if pairs_df is not None:
        vocabulary = compute_vocabulary_summary(pairs_df, scorer, top_k)

    return EvaluationReport(
        scorer_name=scorer_name,
        distribution_stats=dist_stats,
        tier_counts=tier_counts,
        symmetry_check=symmetry,
        vocabulary=vocabulary
    )
