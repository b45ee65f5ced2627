"""Templated natural-language feedback for the three scoring dimensions.

Each dimension has three clauses (weak, medium, strong). The clause is chosen by
comparing the dimension's score with two thresholds: below `weak_below` selects the
weak clause, below `medium_below` the medium clause, anything else the strong clause.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple

WEAK_BELOW = 0.6
MEDIUM_BELOW = 0.8


class FeedbackTemplate(NamedTuple):
    """The three clauses available for one scoring dimension."""

    weak: str
    medium: str
    strong: str

    def select(self, score: float, weak_below: float = WEAK_BELOW, medium_below: float = MEDIUM_BELOW) -> str:
        """Return the clause matching `score`."""
        if score < weak_below:
            return self.weak
        if score < medium_below:
            return self.medium
        return self.strong


COHERENCE_FEEDBACK = FeedbackTemplate(
    weak=(
        "Your essay lacks coherence. Try to improve the flow between sentences and paragraphs. "
        "Make sure your ideas connect logically."
    ),
    medium="Your essay has decent coherence, but some transitions between ideas could be smoother.",
    strong="Your essay demonstrates excellent coherence with smooth transitions between ideas.",
)

GRAMMAR_FEEDBACK = FeedbackTemplate(
    weak=(
        "There are significant grammar issues that need attention. "
        "Consider reviewing basic grammar rules and proofreading carefully."
    ),
    medium="There are some grammar issues that could be improved. A thorough proofreading would help.",
    strong="Your grammar is generally strong with few errors.",
)

STRUCTURE_FEEDBACK = FeedbackTemplate(
    weak=(
        "The essay structure needs improvement. Ensure you have a clear introduction, "
        "well-developed body paragraphs, and a conclusion that summarizes your main points."
    ),
    medium=(
        "Your essay structure is adequate but could be strengthened. "
        "Make sure each paragraph has a clear purpose and connects to your thesis."
    ),
    strong=(
        "Your essay has an excellent structure with a clear introduction, "
        "well-developed body paragraphs, and a strong conclusion."
    ),
)

# Lower bounds for the display bands, checked from the top down.
SCORE_BANDS: tuple[tuple[float, str], ...] = (
    (0.8, "excellent"),
    (0.6, "good"),
    (0.4, "fair"),
)


def generate_feedback(
    coherence: float,
    grammar: float,
    structure: float,
    *,
    weak_below: float = WEAK_BELOW,
    medium_below: float = MEDIUM_BELOW,
) -> str:
    """
    Build the feedback string for a scored essay.

    Args:
        coherence (float): Coherence sub-score.
        grammar (float): Grammar sub-score.
        structure (float): Structure sub-score.
        weak_below (float): Scores below this get the weak clause.
        medium_below (float): Scores below this (and not weak) get the medium clause.

    Returns:
        str: The coherence, grammar and structure clauses joined by single spaces.
    """
    clauses = [
        COHERENCE_FEEDBACK.select(coherence, weak_below, medium_below),
        GRAMMAR_FEEDBACK.select(grammar, weak_below, medium_below),
        STRUCTURE_FEEDBACK.select(structure, weak_below, medium_below),
    ]
    return " ".join(clauses)


def score_band(score: float) -> str:
    """Map a score onto the `excellent`/`good`/`fair`/`poor` display band."""
    for lower_bound, band in SCORE_BANDS:
        if score >= lower_bound:
            return band
    return "poor"


def round_half_up(value: float, decimals: int = 0) -> float:
    """Round `value` to `decimals` places, sending exact ties away from zero (0.625 -> 0.63)."""
    # Decimal(value) is the exact binary value, so 1.005 (stored as 1.00499...) still rounds down.
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))
