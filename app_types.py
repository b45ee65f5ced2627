"""Defines Pydantic data models used throughout the essay scoring pipeline.

This module centralizes the definitions of data structures, ensuring type safety
and clear contracts between the pipeline stages. Models include:
- Segmentation output (`SegmentedEssay`).
- Per-dimension analysis reports (`CoherenceReport`, `GrammarReport`, `StructureReport`).
- The main output record (`EssayScore`) returned to callers.
- Submission boundary models (`Submission`, `ScoringOutcome`).
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from feedback import round_half_up, score_band

TOO_SHORT_WARNING = "too_short"


class SegmentedEssay(BaseModel):
    """Sentence and paragraph units of one essay, in document order.

    Every unit is trimmed and non-empty.
    """

    model_config = ConfigDict(frozen=True)

    sentences: tuple[str, ...] = Field(default=(), description="Sentence units in document order.")
    paragraphs: tuple[str, ...] = Field(default=(), description="Paragraph units in document order.")


class CoherenceReport(BaseModel):
    """Result of the adjacent-sentence similarity analysis."""

    model_config = ConfigDict(frozen=True)

    sentence_count: int = Field(default=0, ge=0, description="Number of sentences analysed.")
    pair_similarities: tuple[float, ...] = Field(
        default=(),
        description="Cosine similarity of each adjacent sentence pair (i, i+1), in order.",
    )
    # Mean of raw cosine similarities, which may dip below zero.
    score: float = Field(default=0.0, ge=-1.0, le=1.0, description="Mean adjacent-pair similarity.")


class GrammarReport(BaseModel):
    """Result of the surface-pattern grammar scan."""

    model_config = ConfigDict(frozen=True)

    issues_by_pattern: dict[str, int] = Field(
        default_factory=dict,
        description="Number of matches for each named surface pattern.",
    )
    long_sentence_penalty: int = Field(default=0, ge=0, description="Extra issues added for long sentences.")
    issue_count: int = Field(default=0, ge=0, description="Pattern matches plus the long-sentence penalty.")
    word_count: int = Field(default=0, ge=0, description="Whitespace-delimited tokens in the text.")
    sentence_count: int = Field(default=0, ge=0, description="Sentence units in the text.")
    avg_words_per_sentence: float = Field(default=0.0, ge=0.0, description="word_count / sentence_count.")
    issue_rate: float = Field(default=0.0, ge=0.0, le=1.0, description="Normalized issue rate, capped at 1.")
    score: float = Field(default=1.0, ge=0.0, le=1.0, description="1 - issue_rate.")


class StructureReport(BaseModel):
    """Result of the introduction/body/conclusion check."""

    model_config = ConfigDict(frozen=True)

    paragraph_count: int = Field(default=0, ge=0, description="Paragraph units in the text.")
    has_introduction: bool = Field(default=False, description="First paragraph reads like an introduction.")
    has_conclusion: bool = Field(default=False, description="Last paragraph reads like a conclusion.")
    body_paragraphs_with_topic_sentence: int = Field(default=0, ge=0)
    body_score: float = Field(default=0.0, ge=0.0, le=1.0, description="Share of body paragraphs with a topic sentence.")
    score: float = Field(default=0.5, ge=0.0, le=1.0, description="Weighted structure score.")


class EssayScore(BaseModel):
    """The score record returned for one essay.

    All numeric fields are rounded for presentation before the record is built.
    `coherence` and `overall` keep the unclamped mean of the cosine similarities,
    so they are only guaranteed to lie in [-1, 1].
    """

    model_config = ConfigDict(frozen=True)

    overall: float = Field(..., ge=-1.0, le=1.0, description="Weighted combination of the three sub-scores.")
    coherence: float = Field(..., ge=-1.0, le=1.0, description="Mean adjacent-sentence similarity.")
    grammar: float = Field(..., ge=0.0, le=1.0, description="Grammar heuristic score.")
    structure: float = Field(..., ge=0.0, le=1.0, description="Essay structure score.")
    feedback: str = Field(..., description="Coherence, grammar and structure feedback clauses.")
    warnings: tuple[str, ...] = Field(default=(), description="Advisory notes, e.g. 'too_short'.")

    def as_percentages(self) -> dict[str, int]:
        """Return each numeric score as a whole-number percentage."""
        return {
            "overall": int(round_half_up(self.overall * 100)),
            "coherence": int(round_half_up(self.coherence * 100)),
            "grammar": int(round_half_up(self.grammar * 100)),
            "structure": int(round_half_up(self.structure * 100)),
        }

    def bands(self) -> dict[str, str]:
        """Return the display band of each numeric score."""
        return {
            "overall": score_band(self.overall),
            "coherence": score_band(self.coherence),
            "grammar": score_band(self.grammar),
            "structure": score_band(self.structure),
        }


class Submission(BaseModel):
    """An essay handed over by the submission collaborator."""

    title: str = Field(..., min_length=1, description="Essay title.")
    content: str = Field(..., min_length=100, description="Essay body.")
    course_id: str = Field(..., description="Course the essay was submitted to.")

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")


class ScoringOutcome(BaseModel):
    """Outcome of scoring a submission, reported separately from the submission itself."""

    status: Literal["scored", "failed"] = Field(..., description="Whether a score was produced.")
    score: Optional[EssayScore] = Field(default=None, description="The score, when status is 'scored'.")
    error: Optional[str] = Field(default=None, description="Failure reason, when status is 'failed'.")
