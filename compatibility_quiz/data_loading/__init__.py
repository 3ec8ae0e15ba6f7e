"""Data loading module for quiz answer pairs."""

from .loaders import load_answer_pairs, load_answer_pair, frame_to_pairs, validate_pair_columns

__all__ = ["load_answer_pairs", "load_answer_pair", "frame_to_pairs", "validate_pair_columns"]
