"""
Compatibility scoring from quiz answer sets.

This module provides the scoring pipeline that:
1. Accepts answer sets for Person A and Person B
2. Tokenizes each answer into significant words
3. Computes a Jaccard similarity per question
4. Averages the three similarities into a percentage and message

The local scorer has no external state and never raises, so it can serve
as the fallback when a remote (primary) scorer is unavailable.
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, asdict, replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import pandas as pd

from ..feature_engineering import (
    tokenize,
    jaccard_similarity,
    shared_tokens,
    DEFAULT_STOP_WORDS,
    MIN_TOKEN_LENGTH,
)
from .schema import (
    AnswerSet,
    CompatibilityResult,
    MessageTier,
    DEFAULT_TIERS,
    DEFAULT_MESSAGE,
    QUESTION_KEYS,
    message_for_percentage,
)

logger = logging.getLogger(__name__)


def _or_default(value: Any, default: Any) -> Any:
    """Treat an explicit null in YAML the same as a missing key."""
    return default if value is None else value


# A primary scorer takes two answer sets and returns a mapping with
# "percentage" and "message", or a CompatibilityResult.
PrimaryScorer = Callable[[AnswerSet, AnswerSet], Any]


@dataclass
class ScoringConfig:
    """
    Configuration for the local scorer.

    Attributes:
        stop_words: Words ignored when tokenizing
        min_token_length: Tokens shorter than this are ignored
        tiers: Message tiers, checked from the highest threshold down
        default_message: Message below the lowest tier
    """
    stop_words: Tuple[str, ...] = tuple(sorted(DEFAULT_STOP_WORDS))
    min_token_length: int = MIN_TOKEN_LENGTH
    tiers: Tuple[MessageTier, ...] = DEFAULT_TIERS
    default_message: str = DEFAULT_MESSAGE

    def validate(self) -> None:
        """Validate configuration values."""
        if self.min_token_length < 1:
            raise ValueError(f"min_token_length must be >= 1, got {self.min_token_length}")
        thresholds = [tier.threshold for tier in self.tiers]
        for threshold in thresholds:
            if not 0 <= threshold <= 100:
                raise ValueError(f"tier threshold must be in [0, 100], got {threshold}")
        if len(set(thresholds)) != len(thresholds):
            raise ValueError(f"tier thresholds must be unique, got {thresholds}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ScoringConfig":
        """Create from a ``scoring`` config section."""
        defaults = cls()
        tiers = d.get("tiers")
        return cls(
            stop_words=tuple(_or_default(d.get("stop_words"), defaults.stop_words)),
            min_token_length=_or_default(d.get("min_token_length"), defaults.min_token_length),
            tiers=tuple(
                MessageTier(float(t["threshold"]), t["message"]) for t in tiers
            ) if tiers else defaults.tiers,
            default_message=_or_default(d.get("default_message"), defaults.default_message)
        )

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ScoringConfig":
        """Create from main config dictionary."""
        return cls.from_dict(config.get("scoring") or {})


class LocalCompatibilityScorer:
    """
    Deterministic bag-of-words compatibility scorer.

    Attributes:
        config: Scoring configuration (stop words, tiers)
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()
        self.config.validate()
        self._stop_words = frozenset(self.config.stop_words)

    def tokenize(self, text: Optional[str]) -> set:
        """Tokenize one answer using this scorer's stop words."""
        return tokenize(text, self._stop_words, self.config.min_token_length)

    def compute(
        self,
        a: Any,
        b: Any,
        return_breakdown: bool = False
    ) -> CompatibilityResult:
        """
        Compute compatibility between two answer sets.

        Args:
            a: Answers for Person A (AnswerSet, mapping, or None)
            b: Answers for Person B (AnswerSet, mapping, or None)
            return_breakdown: Whether to include per-question details

        Returns:
            CompatibilityResult with an unrounded percentage
        """
        a = AnswerSet.coerce(a)
        b = AnswerSet.coerce(b)

        tokens_a = [self.tokenize(text) for text in a.answers()]
        tokens_b = [self.tokenize(text) for text in b.answers()]
        similarities = [jaccard_similarity(ta, tb) for ta, tb in zip(tokens_a, tokens_b)]

        average = sum(similarities) / len(similarities)
        percentage = average * 100
        message = message_for_percentage(
            percentage, self.config.tiers, self.config.default_message
        )

        breakdown = None
        if return_breakdown:
            breakdown = {
                "similarities": dict(zip(QUESTION_KEYS, similarities)),
                "shared_tokens": {
                    key: sorted(shared_tokens(ta, tb))
                    for key, ta, tb in zip(QUESTION_KEYS, tokens_a, tokens_b)
                }
            }

        logger.debug(f"Local score {percentage:.2f} from similarities {similarities}")
        return CompatibilityResult(
            percentage=percentage,
            message=message,
            source="local",
            breakdown=breakdown
        )

    __call__ = compute

    def compute_batch(
        self,
        pairs: Iterable[Tuple[Any, Any]],
        return_breakdown: bool = False
    ) -> List[CompatibilityResult]:
        """
        Compute compatibility for multiple pairs.

        Args:
            pairs: Iterable of (answers_a, answers_b) tuples
            return_breakdown: Whether to include per-question details

        Returns:
            List of CompatibilityResult objects
        """
        return [self.compute(a, b, return_breakdown) for a, b in pairs]

    def score_frame(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Score every row of an answer-pair frame.

        Expects columns a_q1..a_q3 and b_q1..b_q3; missing cells count as
        blank answers. An optional pair_id column is carried through.

        Returns:
            DataFrame with pair_id (if present), s1-s3, percentage, message
        """
        rows = []
        for record in df.to_dict(orient="records"):
            a = AnswerSet(*(record.get(f"a_{key}") for key in QUESTION_KEYS))
            b = AnswerSet(*(record.get(f"b_{key}") for key in QUESTION_KEYS))
            result = self.compute(a, b, return_breakdown=True)
            similarities = result.breakdown["similarities"]

            row = {}
            if "pair_id" in record:
                row["pair_id"] = record["pair_id"]
            row.update({f"s{i}": similarities[key] for i, key in enumerate(QUESTION_KEYS, start=1)})
            row["percentage"] = result.percentage
            row["message"] = result.message
            rows.append(row)

        columns = (["pair_id"] if "pair_id" in df.columns else []) + \
            ["s1", "s2", "s3", "percentage", "message"]
        return pd.DataFrame(rows, columns=columns)


class FallbackCompatibilityScorer:
    """
    Tries a primary scorer first and falls back to the local scorer.

    The primary scorer is any callable taking two AnswerSets, typically a
    remote model client owned by the caller. Any exception it raises, or
    any result without a numeric percentage and a string message, sends
    the pair to the local scorer instead.

    Attributes:
        primary: Optional primary scorer
        local: Local scorer used as fallback
    """

    def __init__(
        self,
        primary: Optional[PrimaryScorer] = None,
        local: Optional[LocalCompatibilityScorer] = None
    ):
        self.primary = primary
        self.local = local or LocalCompatibilityScorer()

    def compute(
        self,
        a: Any,
        b: Any,
        return_breakdown: bool = False
    ) -> CompatibilityResult:
        """
        Compute compatibility, preferring the primary scorer.

        Args:
            a: Answers for Person A
            b: Answers for Person B
            return_breakdown: Passed to the local scorer on fallback

        Returns:
            CompatibilityResult (source "remote" or "local")
        """
        a = AnswerSet.coerce(a)
        b = AnswerSet.coerce(b)

        if self.primary is not None:
            try:
                raw = self.primary(a, b)
            except Exception as e:
                logger.warning(f"Primary scorer failed, falling back to local: {e}")
            else:
                result = _coerce_primary_result(raw)
                if result is not None:
                    return result
                logger.warning(
                    f"Primary scorer returned unexpected result {raw!r}, falling back to local"
                )

        return self.local.compute(a, b, return_breakdown)

    __call__ = compute


def _coerce_primary_result(raw: Any) -> Optional[CompatibilityResult]:
    """Validate a primary scorer's result; None when unusable."""
    if isinstance(raw, CompatibilityResult):
        percentage, message = raw.percentage, raw.message
    elif isinstance(raw, Mapping):
        percentage, message = raw.get("percentage"), raw.get("message")
    else:
        return None

    if isinstance(percentage, bool) or not isinstance(percentage, (int, float)):
        return None
    if not math.isfinite(percentage) or not isinstance(message, str):
        return None

    percentage = max(0.0, min(100.0, float(percentage)))
    if isinstance(raw, CompatibilityResult):
        return replace(raw, percentage=percentage, source="remote")
    return CompatibilityResult(percentage=percentage, message=message, source="remote")


_default_scorer = LocalCompatibilityScorer()


def compute_compatibility(a: Any, b: Any, return_breakdown: bool = False) -> CompatibilityResult:
    """
    Score two answer sets with the default local scorer.

    Args:
        a: Answers for Person A (AnswerSet, mapping, or None)
        b: Answers for Person B (AnswerSet, mapping, or None)
        return_breakdown: Whether to include per-question details

    Returns:
        CompatibilityResult
    """
    return _default_scorer.compute(a, b, return_breakdown)


def create_scorer(
    config: Optional[Dict[str, Any]] = None,
    primary: Optional[PrimaryScorer] = None
) -> FallbackCompatibilityScorer:
    """
    Factory function to create a scorer from a config dictionary.

    Args:
        config: Main config dictionary (None for defaults)
        primary: Optional primary scorer tried before the local one

    Returns:
        Configured FallbackCompatibilityScorer instance
    """
    scoring_config = ScoringConfig.from_config(config or {})
    return FallbackCompatibilityScorer(primary, LocalCompatibilityScorer(scoring_config))
