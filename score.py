"""
Orchestrates the essay scoring process by combining the three analyzers.

This module defines the public entry points:
- `initialize_model` / `ainitialize_model`: load the embedding model once per process.
- `score_essay` / `ascore_essay`: score one essay and return an `EssayScore`.

It also provides `EssayScorer`, the injectable form used by the entry points, and
`aggregate_scores`, which weights the sub-scores, rounds them and attaches feedback.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from app_types import TOO_SHORT_WARNING, EssayScore
from coherence import CoherenceAnalyzer
from config import ScoringConfig
from embedding_model import EmbeddingModelService
from errors import EssayScoringError, ModelUnavailable, ScoringFailure
from feedback import generate_feedback, round_half_up
from grammar import score_grammar
from preprocess import segment_essay
from settings import default_model_service, settings
from structure import score_structure

logger = logging.getLogger(__name__)


def aggregate_scores(
    coherence: float,
    grammar: float,
    structure: float,
    config: Optional[ScoringConfig] = None,
    warnings: tuple[str, ...] = (),
) -> EssayScore:
    """
    Combine the three sub-scores into an `EssayScore`.

    The overall score is the weighted sum of the unrounded sub-scores and the
    feedback is chosen from the unrounded values; every number is rounded to
    `config.decimals` places only when the record is built.

    Args:
        coherence (float): Coherence sub-score.
        grammar (float): Grammar sub-score.
        structure (float): Structure sub-score.
        config (Optional[ScoringConfig]): Weights, thresholds and rounding. Defaults are used if omitted.
        warnings (tuple[str, ...]): Advisory notes to attach to the record.

    Returns:
        EssayScore: The rounded score record with feedback.
    """
    config = config or ScoringConfig()
    overall = (
        config.coherence_weight * coherence + config.grammar_weight * grammar + config.structure_weight * structure
    )
    feedback = generate_feedback(
        coherence,
        grammar,
        structure,
        weak_below=config.weak_below,
        medium_below=config.medium_below,
    )
    return EssayScore(
        overall=round_half_up(overall, config.decimals),
        coherence=round_half_up(coherence, config.decimals),
        grammar=round_half_up(grammar, config.decimals),
        structure=round_half_up(structure, config.decimals),
        feedback=feedback,
        warnings=warnings,
    )


class EssayScorer:
    """Scores essays with an injected embedding model service.

    Attributes:
        service (EmbeddingModelService): Supplies sentence embeddings; must be loaded before scoring.
        config (ScoringConfig): Weights, thresholds and heuristic constants.
        coherence_analyzer (CoherenceAnalyzer): Analyzer bound to `service`.
    """

    def __init__(
        self,
        service: EmbeddingModelService,
        config: Optional[ScoringConfig] = None,
        *,
        clamp_negative_similarity: bool = False,
    ) -> None:
        self.service = service
        self.config = config or ScoringConfig()
        self.coherence_analyzer = CoherenceAnalyzer(service, clamp_negative=clamp_negative_similarity)

    def score(self, text: str) -> EssayScore:
        """
        Score one essay.

        Args:
            text (str): The full essay body.

        Raises:
            ModelUnavailable: If the embedding model has not been loaded.
            ScoringFailure: If the input is not a string or any scoring step fails.

        Returns:
            EssayScore: The rounded score record with feedback.
        """
        if not isinstance(text, str):
            msg = f"Essay text must be a string, got {type(text).__name__}"
            logger.error(msg)
            raise ScoringFailure(msg)
        if not self.service.is_loaded:
            msg = "Embedding model is not loaded. Call initialize_model() before scoring."
            logger.error(msg)
            raise ModelUnavailable(msg)

        try:
            segmented = segment_essay(text)
            coherence = self.coherence_analyzer.score(segmented.sentences)
            grammar = score_grammar(text, self.config)
            structure = score_structure(text, self.config)

            warnings: tuple[str, ...] = ()
            if len(text.strip()) < self.config.min_essay_chars:
                warnings = (TOO_SHORT_WARNING,)

            logger.debug(
                f"Sub-scores for {len(segmented.sentences)} sentences / {len(segmented.paragraphs)} paragraphs: "
                f"coherence={coherence:.4f}, grammar={grammar:.4f}, structure={structure:.4f}",
            )
            return aggregate_scores(coherence, grammar, structure, self.config, warnings)
        except EssayScoringError:
            raise
        except Exception as e:
            logger.exception(f"Scoring failed for essay of {len(text)} characters.")
            msg = f"Failed to score essay: {e}"
            raise ScoringFailure(msg) from e

    async def ascore(self, text: str) -> EssayScore:
        """Score one essay in a worker thread so inference does not block the event loop."""
        return await asyncio.to_thread(self.score, text)


def _default_scorer(service: Optional[EmbeddingModelService], config: Optional[ScoringConfig]) -> EssayScorer:
    return EssayScorer(
        service or default_model_service,
        config or settings.scoring,
        clamp_negative_similarity=settings.embedding.clamp_negative_similarity,
    )


def initialize_model(service: Optional[EmbeddingModelService] = None) -> None:
    """
    Load the embedding model once. Later calls are no-ops.

    Raises:
        ModelLoadFailure: If the model cannot be fetched or initialized.
    """
    (service or default_model_service).load()


async def ainitialize_model(service: Optional[EmbeddingModelService] = None) -> None:
    """Async form of `initialize_model`; concurrent awaits share a single load."""
    await (service or default_model_service).initialize()


def score_essay(
    text: str,
    *,
    service: Optional[EmbeddingModelService] = None,
    config: Optional[ScoringConfig] = None,
) -> EssayScore:
    """
    Score an essay with the process-wide model service unless one is given.

    Args:
        text (str): The essay text to be scored.
        service (Optional[EmbeddingModelService]): Loaded model service to use instead of the default.
        config (Optional[ScoringConfig]): Scoring configuration to use instead of the settings.

    Returns:
        EssayScore: The rounded score record with feedback.
    """
    return _default_scorer(service, config).score(text)


async def ascore_essay(
    text: str,
    *,
    service: Optional[EmbeddingModelService] = None,
    config: Optional[ScoringConfig] = None,
) -> EssayScore:
    """Async form of `score_essay`."""
    return await _default_scorer(service, config).ascore(text)
