"""
Data loading functions for compatibility scoring.

This module handles loading answer pairs from CSV (batch) and JSON
(single pair) files. No scoring is done here.
"""

import json
import logging
from pathlib import Path
from typing import List, Tuple

import pandas as pd

from ..inference.schema import AnswerSet, QUESTION_KEYS

logger = logging.getLogger(__name__)

ANSWER_COLUMNS = [f"{side}_{key}" for side in ("a", "b") for key in QUESTION_KEYS]


def validate_pair_columns(df: pd.DataFrame) -> List[str]:
    """
    Check that a pair frame has every answer column.

    Args:
        df: Answer-pair DataFrame

    Returns:
        List of missing column names (empty if valid)
    """
    return [col for col in ANSWER_COLUMNS if col not in df.columns]


def load_answer_pairs(filepath: str, delimiter: str = ",") -> pd.DataFrame:
    """
    Load answer pairs from CSV.

    The file should contain:
    - a_q1, a_q2, a_q3: Person A's answers
    - b_q1, b_q2, b_q3: Person B's answers
    - Optional pair_id column
    - Each row represents one pair; blank cells are blank answers

    Args:
        filepath: Path to the CSV file
        delimiter: Field delimiter (default: comma)

    Returns:
        DataFrame with raw answer pairs

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty or answer columns are missing
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Answer pairs file not found: {filepath}")

    logger.info(f"Loading answer pairs from {filepath} (delimiter: {repr(delimiter)})")
    try:
        df = pd.read_csv(filepath, sep=delimiter, dtype=str)
    except pd.errors.EmptyDataError:
        raise ValueError(f"Answer pairs file is empty: {filepath}")

    if df.empty:
        raise ValueError(f"Answer pairs file is empty: {filepath}")

    missing = validate_pair_columns(df)
    if missing:
        raise ValueError(f"Answer pairs file is missing columns: {missing}")

    logger.info(f"Loaded {len(df)} answer pairs")
    return df


def load_answer_pair(filepath: str) -> Tuple[AnswerSet, AnswerSet]:
    """
    Load a single pair from a JSON file shaped {"a": {...}, "b": {...}}.

    Args:
        filepath: Path to the JSON file

    Returns:
        Tuple of (answers_a, answers_b)

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If "a" or "b" is missing
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Answer pair file not found: {filepath}")

    with open(filepath, "r") as f:
        data = json.load(f)

    if not isinstance(data, dict) or "a" not in data or "b" not in data:
        raise ValueError(f"Answer pair file must contain 'a' and 'b': {filepath}")

    return AnswerSet.coerce(data["a"]), AnswerSet.coerce(data["b"])


def frame_to_pairs(df: pd.DataFrame) -> List[Tuple[AnswerSet, AnswerSet]]:
    """Convert a pair frame into (answers_a, answers_b) tuples."""
    pairs = []
    for record in df.to_dict(orient="records"):
        a = AnswerSet(*(record.get(f"a_{key}") for key in QUESTION_KEYS))
        b = AnswerSet(*(record.get(f"b_{key}") for key in QUESTION_KEYS))
        pairs.append((a, b))
    return pairs
