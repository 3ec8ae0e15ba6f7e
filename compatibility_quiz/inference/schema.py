"""
Input and output schema for quiz compatibility scoring.

Defines the data structures exchanged with the surrounding app:
the three free-text answers each participant submits, and the
score + message shown on the result screen.

Quiz Composition (3 items per participant):
- q1, q2, q3: free-text answers, each optional
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Sequence, Tuple

QUESTION_KEYS = ("q1", "q2", "q3")


def _clean_answer(value: Any) -> Optional[str]:
    """Normalize a raw answer cell to a string or None."""
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, str):
        return value
    return str(value)


@dataclass
class AnswerSet:
    """
    One participant's quiz submission.

    Attributes:
        q1: Answer to question 1 (None or "" when left blank)
        q2: Answer to question 2
        q3: Answer to question 3
    """
    q1: Optional[str] = None
    q2: Optional[str] = None
    q3: Optional[str] = None

    def __post_init__(self):
        """Normalize non-string cells (NaN, numbers) coming from loaders."""
        self.q1 = _clean_answer(self.q1)
        self.q2 = _clean_answer(self.q2)
        self.q3 = _clean_answer(self.q3)

    def answers(self) -> Tuple[Optional[str], Optional[str], Optional[str]]:
        """Return answers in question order."""
        return (self.q1, self.q2, self.q3)

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Convert to dictionary."""
        return {"q1": self.q1, "q2": self.q2, "q3": self.q3}

    @classmethod
    def from_dict(cls, data: Optional[Mapping]) -> "AnswerSet":
        """Create from dictionary; missing keys count as blank answers."""
        data = data or {}
        return cls(**{key: data.get(key) for key in QUESTION_KEYS})

    @classmethod
    def coerce(cls, value: Any) -> "AnswerSet":
        """Accept an AnswerSet, a mapping, or None."""
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls.from_dict(value)
        return cls()


@dataclass(frozen=True)
class MessageTier:
    """A score band: percentages >= threshold get this message."""
    threshold: float
    message: str


DEFAULT_TIERS: Tuple[MessageTier, ...] = (
    MessageTier(80.0, "Perfect match"),
    MessageTier(60.0, "Great compatibility"),
    MessageTier(40.0, "Some differences"),
)

DEFAULT_MESSAGE = "Very different answers"


def message_for_percentage(
    percentage: float,
    tiers: Sequence[MessageTier] = DEFAULT_TIERS,
    default: str = DEFAULT_MESSAGE
) -> str:
    """
    Map a percentage to its message tier.

    Tiers are checked from the highest threshold down and the first tier
    whose threshold is <= percentage wins.

    Args:
        percentage: Compatibility percentage in [0, 100]
        tiers: Message tiers (any order)
        default: Message when no tier matches

    Returns:
        Message string
    """
    for tier in sorted(tiers, key=lambda t: t.threshold, reverse=True):
        if percentage >= tier.threshold:
            return tier.message
    return default


def round_percentage(percentage: float) -> int:
    """Round half up, the way the result screen displays scores."""
    return int(math.floor(percentage + 0.5))


def format_percentage(percentage: float) -> str:
    """Render the display line, e.g. "Score: 83%"."""
    return f"Score: {round_percentage(percentage)}%"


@dataclass(frozen=True)
class CompatibilityResult:
    """
    Result of compatibility scoring.

    Attributes:
        percentage: Unrounded compatibility percentage [0, 100]
        message: Human-readable tier message
        computed_at: UTC time the score was computed
        source: "local" for the Jaccard scorer, "remote" for a primary scorer
        breakdown: Optional per-question details
    """
    percentage: float
    message: str
    computed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    source: str = "local"
    breakdown: Optional[Dict[str, Any]] = None

    @property
    def display_percentage(self) -> int:
        """Percentage rounded for display."""
        return round_percentage(self.percentage)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire shape used by the app (computedAt in epoch ms)."""
        result = {
            "percentage": self.percentage,
            "message": self.message,
            "computedAt": int(self.computed_at.timestamp() * 1000),
            "source": self.source
        }
        if self.breakdown:
            result["breakdown"] = self.breakdown
        return result
