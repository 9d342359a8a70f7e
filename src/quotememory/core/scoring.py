"""Recall scoring.

Accuracy is the percentage of words recalled at the same position as in
the original quote. Comparison is case-insensitive and strictly positional:
a correct word in the wrong place is a miss.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ScoreBand = Literal["excellent", "good", "needs_practice"]

EXCELLENT_THRESHOLD = 80
GOOD_THRESHOLD = 60

_FEEDBACK: dict[str, str] = {
    "excellent": "Excellent!",
    "good": "Good job!",
    "needs_practice": "Keep practicing!",
}


def split_words(text: str) -> list[str]:
    """Lowercase text and split it on runs of whitespace."""
    return text.lower().split()


def calculate_accuracy(original: str, recalled: str) -> int:
    """Score recalled text against the original.

    Args:
        original: The quote text
        recalled: What the user typed from memory

    Returns:
        Integer percentage 0-100. An original with no words scores 0.
    """
    original_words = split_words(original)
    recalled_words = split_words(recalled)

    total = len(original_words)
    if total == 0:
        return 0

    # zip stops at the shorter sequence: positions missing on either side
    # never match, and extra recalled words never touch the denominator.
    matches = sum(1 for o, r in zip(original_words, recalled_words) if o == r)

    # Half-up rounding in integer arithmetic
    return (200 * matches + total) // (2 * total)


@dataclass(frozen=True)
class ScoreSummary:
    """Presentation of a computed accuracy."""

    accuracy: int
    band: ScoreBand
    feedback: str


def score_band(accuracy: int) -> ScoreBand:
    """Classify an accuracy value."""
    if accuracy >= EXCELLENT_THRESHOLD:
        return "excellent"
    if accuracy >= GOOD_THRESHOLD:
        return "good"
    return "needs_practice"


def summarize_score(accuracy: int) -> ScoreSummary:
    """Build the results-screen summary for an accuracy value."""
    band = score_band(accuracy)
    return ScoreSummary(accuracy=accuracy, band=band, feedback=_FEEDBACK[band])
