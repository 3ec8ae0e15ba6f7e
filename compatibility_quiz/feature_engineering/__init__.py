"""Feature engineering module for answer tokenization and similarity."""

from .text_features import (
    tokenize,
    jaccard_similarity,
    shared_tokens,
    DEFAULT_STOP_WORDS,
    MIN_TOKEN_LENGTH
)

__all__ = [
    "tokenize",
    "jaccard_similarity",
    "shared_tokens",
    "DEFAULT_STOP_WORDS",
    "MIN_TOKEN_LENGTH"
]
