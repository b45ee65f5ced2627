"""
Sentence and paragraph segmentation.

This module splits raw essay text into the units the scorers work on:
- Sentences: pieces between runs of `.`, `!` or `?`.
- Paragraphs: pieces between blank lines (a newline, an optional
  whitespace-only line, then another newline).
- Words: whitespace-delimited tokens.

Every returned unit is trimmed and non-empty. Empty input yields empty sequences.
"""

from __future__ import annotations

import re

from app_types import SegmentedEssay

SENTENCE_TERMINATORS = re.compile(r"[.!?]+")
PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def split_sentences(text: str) -> list[str]:
    """
    Split text into sentence units.

    Args:
        text (str): The text to split.

    Returns:
        list[str]: Trimmed, non-empty sentences in document order.
    """
    pieces = (piece.strip() for piece in SENTENCE_TERMINATORS.split(text))
    return [piece for piece in pieces if piece]


def split_paragraphs(text: str) -> list[str]:
    """
    Split text into paragraph units on blank lines.

    Args:
        text (str): The text to split.

    Returns:
        list[str]: Trimmed, non-empty paragraphs in document order.
    """
    pieces = (piece.strip() for piece in PARAGRAPH_BREAK.split(text))
    return [piece for piece in pieces if piece]


def count_words(text: str) -> int:
    """Count whitespace-delimited tokens in `text`."""
    return len(text.split())


def segment_essay(text: str) -> SegmentedEssay:
    """
    Segment an essay into sentences and paragraphs.

    Args:
        text (str): The full essay body.

    Raises:
        TypeError: If `text` is not a string.

    Returns:
        SegmentedEssay: The sentence and paragraph units of the essay.
    """
    if not isinstance(text, str):
        msg = f"Essay text must be a string, got {type(text).__name__}"
        raise TypeError(msg)
    return SegmentedEssay(sentences=tuple(split_sentences(text)), paragraphs=tuple(split_paragraphs(text)))
