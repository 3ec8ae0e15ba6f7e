"""
Tests for the local compatibility scorer.
"""

import itertools
from datetime import datetime, timezone
from types import MappingProxyType

import numpy as np
import pandas as pd
import pytest

from compatibility_quiz.inference import (
    AnswerSet,
    LocalCompatibilityScorer,
    MessageTier,
    ScoringConfig,
    compute_compatibility,
)


class TestComputeCompatibility:
    """Test the aggregated percentage and message."""

    def test_identical_answers(self, identical_answers):
        """Identical answers are a perfect match."""
        result = compute_compatibility(identical_answers, identical_answers)
        assert result.percentage == 100.0
        assert result.message == "Perfect match"

    def test_identical_answers_as_dicts(self):
        """Plain mappings are accepted."""
        answers = {"q1": "trust and honesty", "q2": "quality time", "q3": "cheating"}
        result = compute_compatibility(answers, dict(answers))
        assert result.percentage == 100.0
        assert result.message == "Perfect match"

    def test_disjoint_vocabulary(self, disjoint_pair):
        """No shared words scores zero."""
        result = compute_compatibility(*disjoint_pair)
        assert result.percentage == 0.0
        assert result.message == "Very different answers"

    def test_both_blank_scores_zero(self):
        """Blank answers on both sides do not count as agreement."""
        result = compute_compatibility(AnswerSet(), AnswerSet())
        assert result.percentage == 0.0
        assert result.message == "Very different answers"

    def test_blank_question_contributes_zero(self):
        """Each question weighs equally, even when both answers are blank."""
        a = AnswerSet(q1="trust", q2="quality time", q3="")
        b = AnswerSet(q1="Trust!", q2="Quality time.", q3=None)
        result = compute_compatibility(a, b)
        assert result.percentage == pytest.approx(200 / 3)
        assert result.message == "Great compatibility"

    def test_some_differences(self):
        """Half overlap on one question, full on another."""
        a = AnswerSet(q1="trust", q2="honesty loyalty", q3="cats")
        b = AnswerSet(q1="trust", q2="honesty", q3="dogs")
        result = compute_compatibility(a, b)
        assert result.percentage == pytest.approx(50.0)
        assert result.message == "Some differences"

    def test_percentage_not_rounded(self):
        """Percentage keeps its fractional part."""
        a = AnswerSet(q1="hiking reading")
        b = AnswerSet(q1="hiking cooking")
        result = compute_compatibility(a, b)
        assert result.percentage == pytest.approx(100 / 9)
        assert result.display_percentage == 11

    def test_read_only_mappings(self):
        """Any mapping is accepted, not only dict."""
        answers = {"q1": "trust and honesty", "q2": "quality time", "q3": "cheating"}
        result = compute_compatibility(MappingProxyType(answers), MappingProxyType(answers))
        assert result.percentage == 100.0
        assert result.message == "Perfect match"

    def test_exactly_eighty_is_perfect_match(self):
        """Similarities (1, 1, 2/5) land exactly on the top threshold."""
        a = AnswerSet(q1="trust", q2="time", q3="aa bb cc dd")
        b = AnswerSet(q1="trust", q2="time", q3="aa bb ee")
        result = compute_compatibility(a, b)
        assert result.percentage == 80.0
        assert result.message == "Perfect match"

    def test_just_below_eighty_is_great_compatibility(self):
        """Similarities (1, 1, 3/8) fall just under the top threshold."""
        a = AnswerSet(q1="trust", q2="time", q3="aa bb cc dd ee")
        b = AnswerSet(q1="trust", q2="time", q3="aa bb cc ff gg hh")
        result = compute_compatibility(a, b)
        assert result.percentage == pytest.approx(2.375 / 3 * 100)
        assert result.percentage < 80.0
        assert result.message == "Great compatibility"

    def test_none_answer_sets(self):
        """Missing answer sets behave like blank ones."""
        result = compute_compatibility(None, {"q1": "trust"})
        assert result.percentage == 0.0

    def test_computed_at_is_current_utc(self, identical_answers):
        """The timestamp is taken at computation time."""
        before = datetime.now(timezone.utc)
        result = compute_compatibility(identical_answers, identical_answers)
        after = datetime.now(timezone.utc)
        assert before <= result.computed_at <= after

    def test_deterministic(self, disjoint_pair):
        """Same inputs give the same percentage and message."""
        first = compute_compatibility(*disjoint_pair)
        second = compute_compatibility(*disjoint_pair)
        assert (first.percentage, first.message) == (second.percentage, second.message)

    def test_result_is_immutable(self, identical_answers):
        """Results cannot be modified after they are returned."""
        result = compute_compatibility(identical_answers, identical_answers)
        with pytest.raises(AttributeError):
            result.percentage = 0.0

    def test_local_source(self, identical_answers):
        """Local results are labelled as such."""
        assert compute_compatibility(identical_answers, identical_answers).source == "local"


class TestProperties:
    """Properties that hold for every input."""

    VALUES = [None, "", "   ", "?!", "the and", "Trust!", "trust honesty", 42, float("nan")]

    def test_total_and_in_range(self):
        """Every combination of answers produces a result within [0, 100]."""
        for v1, v2, v3 in itertools.product(self.VALUES, repeat=3):
            a = AnswerSet(q1=v1, q2=v2, q3=v3)
            b = AnswerSet(q1=v3, q2=v1, q3=v2)
            result = compute_compatibility(a, b)
            assert 0.0 <= result.percentage <= 100.0
            assert isinstance(result.message, str)

    def test_symmetric(self):
        """Swapping participants never changes the percentage."""
        for v1, v2 in itertools.product(self.VALUES, repeat=2):
            a = AnswerSet(q1=v1, q2=v2, q3="quality time")
            b = AnswerSet(q1=v2, q2="trust", q3=v1)
            assert compute_compatibility(a, b).percentage == compute_compatibility(b, a).percentage

    def test_nan_counts_as_blank(self):
        """NaN cells from data frames are blank answers, not the word 'nan'."""
        result = compute_compatibility(AnswerSet(q1=float("nan")), AnswerSet(q1="nan"))
        assert result.percentage == 0.0


class TestBreakdown:
    """Test the optional per-question breakdown."""

    def test_breakdown_contents(self):
        """Breakdown lists similarities and shared tokens per question."""
        a = AnswerSet(q1="hiking reading", q2="trust", q3=None)
        b = AnswerSet(q1="hiking cooking", q2="Trust!", q3=None)
        result = compute_compatibility(a, b, return_breakdown=True)

        assert result.breakdown["similarities"] == pytest.approx({"q1": 1 / 3, "q2": 1.0, "q3": 0.0})
        assert result.breakdown["shared_tokens"] == {"q1": ["hiking"], "q2": ["trust"], "q3": []}

    def test_no_breakdown_by_default(self, identical_answers):
        """Breakdown is opt-in."""
        result = compute_compatibility(identical_answers, identical_answers)
        assert result.breakdown is None
        assert "breakdown" not in result.to_dict()


class TestConfiguredScorer:
    """Test scorers built from non-default settings."""

    def test_inclusive_threshold_end_to_end(self):
        """A percentage exactly on a threshold gets that tier's message."""
        config = ScoringConfig(tiers=(MessageTier(50.0, "Halfway"),), default_message="Below")
        scorer = LocalCompatibilityScorer(config)
        a = AnswerSet(q1="trust", q2="honesty loyalty", q3="cats")
        b = AnswerSet(q1="trust", q2="honesty", q3="dogs")
        result = scorer.compute(a, b)
        assert result.percentage == 50.0
        assert result.message == "Halfway"

    def test_custom_min_token_length(self):
        """Single-character words count when configured."""
        scorer = LocalCompatibilityScorer(ScoringConfig(min_token_length=1))
        assert scorer.tokenize("I x") == {"i", "x"}

    def test_invalid_config_rejected(self):
        """Invalid settings fail at construction, not at scoring time."""
        with pytest.raises(ValueError):
            LocalCompatibilityScorer(ScoringConfig(min_token_length=0))
        with pytest.raises(ValueError):
            LocalCompatibilityScorer(ScoringConfig(tiers=(MessageTier(120.0, "Too high"),)))
        with pytest.raises(ValueError):
            LocalCompatibilityScorer(ScoringConfig(
                tiers=(MessageTier(50.0, "One"), MessageTier(50.0, "Two"))
            ))

    def test_callable(self, scorer, identical_answers):
        """Scorers can be called directly."""
        assert scorer(identical_answers, identical_answers).percentage == 100.0


class TestBatchScoring:
    """Test batch scoring helpers."""

    def test_compute_batch(self, scorer, identical_answers, disjoint_pair):
        """Each pair gets its own result, in order."""
        results = scorer.compute_batch([(identical_answers, identical_answers), disjoint_pair])
        assert [r.percentage for r in results] == [100.0, 0.0]

    def test_score_frame(self, scorer, pairs_df):
        """Frame scoring returns per-question similarities and messages."""
        scored = scorer.score_frame(pairs_df)

        assert list(scored.columns) == ["pair_id", "s1", "s2", "s3", "percentage", "message"]
        assert scored["pair_id"].tolist() == ["p1", "p2", "p3"]
        assert scored["percentage"].tolist() == pytest.approx([100.0, 0.0, (1 / 3 + 0.5) / 3 * 100])
        assert scored["message"].tolist() == [
            "Perfect match", "Very different answers", "Very different answers"
        ]
        assert scored.loc[2, "s3"] == 0.0

    def test_score_frame_without_pair_id(self, scorer):
        """pair_id is optional."""
        df = pd.DataFrame([{"a_q1": "trust", "a_q2": np.nan, "a_q3": np.nan,
                            "b_q1": "trust", "b_q2": np.nan, "b_q3": np.nan}])
        scored = scorer.score_frame(df)
        assert "pair_id" not in scored.columns
        assert scored.loc[0, "percentage"] == pytest.approx(100 / 3)
