"""
Pytest configuration and shared fixtures.
"""

import json
from pathlib import Path
from typing import Dict, Any

import pandas as pd
import pytest

from compatibility_quiz.inference import AnswerSet, LocalCompatibilityScorer

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def scorer() -> LocalCompatibilityScorer:
    """Local scorer with default settings."""
    return LocalCompatibilityScorer()


@pytest.fixture
def identical_answers() -> AnswerSet:
    """Answer set used for both participants in the identical case."""
    return AnswerSet(q1="trust and honesty", q2="quality time", q3="cheating")


@pytest.fixture
def disjoint_pair():
    """Two answer sets with no vocabulary in common."""
    return (
        AnswerSet(q1="cats", q2="dogs", q3="birds"),
        AnswerSet(q1="trains", q2="planes", q3="boats"),
    )


@pytest.fixture
def pair_payload() -> Dict[str, Any]:
    """Single pair in the app's request shape."""
    return {
        "a": {"q1": "Trust and honesty!", "q2": "Quality time", "q3": "Cheating"},
        "b": {"q1": "honesty, trust", "q2": "quality time together", "q3": "lying"},
    }


@pytest.fixture
def pairs_df() -> pd.DataFrame:
    """Small batch of answer pairs, including blank answers."""
    return pd.DataFrame([
        {"pair_id": "p1", "a_q1": "trust and honesty", "a_q2": "quality time", "a_q3": "cheating",
         "b_q1": "trust and honesty", "b_q2": "quality time", "b_q3": "cheating"},
        {"pair_id": "p2", "a_q1": "cats", "a_q2": "dogs", "a_q3": "birds",
         "b_q1": "trains", "b_q2": "planes", "b_q3": "boats"},
        {"pair_id": "p3", "a_q1": "hiking reading", "a_q2": "honesty loyalty", "a_q3": None,
         "b_q1": "hiking cooking", "b_q2": "honesty", "b_q3": None},
    ])


@pytest.fixture
def pairs_csv(tmp_path, pairs_df) -> Path:
    """Answer pairs written to a CSV file."""
    path = tmp_path / "pairs.csv"
    pairs_df.to_csv(path, index=False)
    return path


@pytest.fixture
def pair_json(tmp_path, pair_payload) -> Path:
    """Single pair written to a JSON file."""
    path = tmp_path / "pair.json"
    path.write_text(json.dumps(pair_payload))
    return path


@pytest.fixture
def sample_config_path() -> Path:
    """Sample configuration shipped with the repository."""
    return PROJECT_ROOT / "configs" / "config.yaml"
