"""
Text features for answer comparison.

This module turns a free-text answer into a set of significant tokens and
compares two such sets.

Feature Types:
- Token set: lower-cased words, punctuation treated as a separator
- Jaccard similarity: |A & B| / |A | B| (0.0 when both sets are empty)
- Shared tokens: A & B, used for result breakdowns
"""

import logging
import re
from typing import AbstractSet, Iterable, Optional, Set

logger = logging.getLogger(__name__)

DEFAULT_STOP_WORDS = frozenset([
    "a", "the", "and", "or", "to", "of", "in", "is", "are", "it", "you",
    "your", "my", "me", "for", "with", "that", "this", "as", "be", "so", "do",
])

# Tokens shorter than this are dropped
MIN_TOKEN_LENGTH = 2

_NON_WORD = re.compile(r"[^\w\s]")


def tokenize(
    text: Optional[str],
    stop_words: Optional[Iterable[str]] = None,
    min_length: int = MIN_TOKEN_LENGTH
) -> Set[str]:
    """
    Convert a free-text answer into a set of significant tokens.

    Punctuation is replaced by a space rather than removed, so "love/trust"
    yields two tokens instead of one fused word.

    Args:
        text: Answer text (None or empty yields an empty set)
        stop_words: Words to drop (default: DEFAULT_STOP_WORDS)
        min_length: Minimum token length to keep

    Returns:
        Set of lower-cased tokens, possibly empty
    """
    if not text:
        return set()
    if not isinstance(text, str):
        text = str(text)

    stop = DEFAULT_STOP_WORDS if stop_words is None else frozenset(stop_words)
    cleaned = _NON_WORD.sub(" ", text.lower())

    return {
        token for token in cleaned.split()
        if len(token) >= min_length and token not in stop
    }


def jaccard_similarity(tokens_a: AbstractSet[str], tokens_b: AbstractSet[str]) -> float:
    """
    Compute the Jaccard similarity of two token sets.

    Two empty sets score 0.0, not 1.0: two blank answers are not a match.

    Args:
        tokens_a: Token set for Person A
        tokens_b: Token set for Person B

    Returns:
        Similarity in [0, 1]
    """
    union = len(tokens_a | tokens_b)
    if union == 0:
        return 0.0
    return len(tokens_a & tokens_b) / union


def shared_tokens(tokens_a: AbstractSet[str], tokens_b: AbstractSet[str]) -> Set[str]:
    """Tokens present in both sets."""
    return set(tokens_a & tokens_b)
