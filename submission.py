"""Scoring at the submission boundary.

Submitting an essay and scoring it are decoupled: a scoring failure is reported
as a failed `ScoringOutcome` and never prevents the submission itself.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app_types import ScoringOutcome, Submission
from errors import EssayScoringError

if TYPE_CHECKING:
    from score import EssayScorer

logger = logging.getLogger(__name__)


def score_submission(submission: Submission, scorer: EssayScorer) -> ScoringOutcome:
    """
    Score a submitted essay, turning scoring errors into a failed outcome.

    Args:
        submission (Submission): The submitted essay.
        scorer (EssayScorer): Scorer with a loaded model service.

    Returns:
        ScoringOutcome: `scored` with the score, or `failed` with the error message.
    """
    try:
        essay_score = scorer.score(submission.content)
    except EssayScoringError as e:
        logger.warning(f"Scoring failed for submission '{submission.title}' ({submission.course_id}): {e}")
        return ScoringOutcome(status="failed", error=str(e))
    return ScoringOutcome(status="scored", score=essay_score)


async def ascore_submission(submission: Submission, scorer: EssayScorer) -> ScoringOutcome:
    """Async form of `score_submission`."""
    try:
        essay_score = await scorer.ascore(submission.content)
    except EssayScoringError as e:
        logger.warning(f"Scoring failed for submission '{submission.title}' ({submission.course_id}): {e}")
        return ScoringOutcome(status="failed", error=str(e))
    return ScoringOutcome(status="scored", score=essay_score)
