"""
Introduction/body/conclusion structure check.

Essays with fewer than `min_paragraphs` paragraphs get a fixed score, since their
shape cannot be judged. Longer essays are scored as

    0.3 * introduction + 0.3 * conclusion + 0.4 * body

where the introduction and conclusion signals are keyword checks on the first and
last paragraphs (case-sensitive substring matches) and the body part is the share
of middle paragraphs whose first sentence is long enough to be a topic sentence.
"""

from __future__ import annotations

from typing import Optional

from app_types import StructureReport
from config import ScoringConfig
from preprocess import split_paragraphs, split_sentences

INTRODUCTION_KEYWORDS: tuple[str, ...] = ("introduction", "introduce", "topic", "discuss")
CONCLUSION_KEYWORDS: tuple[str, ...] = ("conclusion", "conclude", "summary", "therefore", "in summary")

MIN_SIGNAL_PARAGRAPH_CHARS = 50
MIN_TOPIC_SENTENCE_CHARS = 20

INTRODUCTION_WEIGHT = 0.3
CONCLUSION_WEIGHT = 0.3
BODY_WEIGHT = 0.4


def _has_signal(paragraph: str, keywords: tuple[str, ...]) -> bool:
    return len(paragraph) > MIN_SIGNAL_PARAGRAPH_CHARS and any(keyword in paragraph for keyword in keywords)


def has_topic_sentence(paragraph: str) -> bool:
    """Whether the paragraph opens with a sentence longer than the topic-sentence minimum."""
    sentences = split_sentences(paragraph)
    return bool(sentences) and len(sentences[0]) > MIN_TOPIC_SENTENCE_CHARS


def evaluate_structure(text: str, config: Optional[ScoringConfig] = None) -> StructureReport:
    """
    Inspect the paragraph layout of an essay.

    Args:
        text (str): Raw essay text.
        config (Optional[ScoringConfig]): Supplies `min_paragraphs` and `short_structure_score`.

    Returns:
        StructureReport: The introduction, conclusion and body signals and the structure score.
    """
    config = config or ScoringConfig()
    paragraphs = split_paragraphs(text)

    if len(paragraphs) < config.min_paragraphs:
        return StructureReport(paragraph_count=len(paragraphs), score=config.short_structure_score)

    has_introduction = _has_signal(paragraphs[0], INTRODUCTION_KEYWORDS)
    has_conclusion = _has_signal(paragraphs[-1], CONCLUSION_KEYWORDS)

    body = paragraphs[1:-1]
    with_topic_sentence = sum(1 for paragraph in body if has_topic_sentence(paragraph))
    body_score = with_topic_sentence / len(body)

    score = (
        (INTRODUCTION_WEIGHT if has_introduction else 0.0)
        + (CONCLUSION_WEIGHT if has_conclusion else 0.0)
        + BODY_WEIGHT * body_score
    )
    return StructureReport(
        paragraph_count=len(paragraphs),
        has_introduction=has_introduction,
        has_conclusion=has_conclusion,
        body_paragraphs_with_topic_sentence=with_topic_sentence,
        body_score=body_score,
        score=min(score, 1.0),
    )


def score_structure(text: str, config: Optional[ScoringConfig] = None) -> float:
    """Return only the structure score for `text`."""
    return evaluate_structure(text, config).score
