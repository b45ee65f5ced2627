"""
Heuristic grammar scoring from surface patterns.

This is an explainable proxy for mechanical writing quality, not a grammar checker.
Each regular expression in `GRAMMAR_PATTERNS` counts one issue per match. The
commonly-confused word checks count every occurrence, correct or not, because
they cannot tell correct usage from incorrect usage.

A long-sentence penalty is added on top: when the average sentence exceeds
`long_sentence_words` words, one extra issue is counted per `long_sentence_step`
words above the limit.
"""

from __future__ import annotations

import re
from typing import Optional

from app_types import GrammarReport
from config import ScoringConfig
from preprocess import count_words, split_sentences

# Word boundaries treat only ASCII letters, digits and "_" as word characters.
GRAMMAR_PATTERNS: dict[str, re.Pattern[str]] = {
    "space_before_comma": re.compile(r"\s+,"),
    "space_before_period": re.compile(r"\s+\."),
    "lowercase_i": re.compile(r"\bi\b", re.ASCII),  # case-sensitive
    "missing_apostrophe": re.compile(r"\b(?:dont|cant|wont)\b", re.IGNORECASE | re.ASCII),
    "their_there_theyre": re.compile(r"\b(?:their|there|they're)\b", re.IGNORECASE | re.ASCII),
    "your_youre": re.compile(r"\b(?:your|you're)\b", re.IGNORECASE | re.ASCII),
    "its_it_s": re.compile(r"\b(?:its|it's)\b", re.IGNORECASE | re.ASCII),
    "multiple_spaces": re.compile(r"\s{2,}"),
}


def find_grammar_issues(text: str) -> dict[str, int]:
    """
    Count matches of every grammar pattern in `text`.

    Args:
        text (str): Raw essay text.

    Returns:
        dict[str, int]: Match count per pattern name, including zero counts.
    """
    return {name: sum(1 for _ in pattern.finditer(text)) for name, pattern in GRAMMAR_PATTERNS.items()}


def long_sentence_penalty(avg_words_per_sentence: float, limit: int = 25, step: int = 5) -> int:
    """Extra issues for an average sentence length above `limit`."""
    if avg_words_per_sentence <= limit:
        return 0
    return int((avg_words_per_sentence - limit) // step)


def analyze_grammar(text: str, config: Optional[ScoringConfig] = None) -> GrammarReport:
    """
    Scan `text` for surface issues and compute the grammar score.

    The issue rate is `issue_count / (word_count * issue_density)` capped at 1,
    and the score is `1 - issue_rate`. Text without words scores 1.0 when it has
    no issues and 0.0 otherwise.

    Args:
        text (str): Raw essay text.
        config (Optional[ScoringConfig]): Heuristic constants; defaults are used if omitted.

    Returns:
        GrammarReport: Per-pattern counts, the penalty and the resulting score.
    """
    config = config or ScoringConfig()

    issues_by_pattern = find_grammar_issues(text)
    word_count = count_words(text)
    sentence_count = len(split_sentences(text))
    avg_words = word_count / sentence_count if sentence_count else 0.0

    penalty = long_sentence_penalty(avg_words, config.long_sentence_words, config.long_sentence_step)
    issue_count = sum(issues_by_pattern.values()) + penalty

    if word_count:
        issue_rate = min(issue_count / (word_count * config.issue_density), 1.0)
    else:
        issue_rate = 1.0 if issue_count else 0.0

    return GrammarReport(
        issues_by_pattern=issues_by_pattern,
        long_sentence_penalty=penalty,
        issue_count=issue_count,
        word_count=word_count,
        sentence_count=sentence_count,
        avg_words_per_sentence=avg_words,
        issue_rate=issue_rate,
        score=1.0 - issue_rate,
    )


def score_grammar(text: str, config: Optional[ScoringConfig] = None) -> float:
    """Return only the grammar score for `text`."""
    return analyze_grammar(text, config).score
