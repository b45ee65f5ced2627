"""Coherence scoring from adjacent-sentence embedding similarity.

Sentences are embedded in one batch and the cosine similarity of every adjacent
pair (i, i+1) is computed. Coherence is the arithmetic mean of those N-1 values.
Essays with fewer than two sentences have no adjacent pair and score 0.0.

Core Dependencies:
- `torch`: For tensor operations.
- `sentence-transformers`: Through `EmbeddingModelService`, for the embeddings.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

import torch
import torch.nn.functional as F  # noqa: N812 - Keep F as standard PyTorch alias

from app_types import CoherenceReport

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from embedding_model import EmbeddingModelService

logger = logging.getLogger(__name__)

MIN_SENTENCES = 2


@contextmanager
def inference_scope(device: str) -> Iterator[None]:
    """
    Run a block without autograd and release cached device memory afterwards.

    The cache is released on every exit path, including when the block raises.

    Args:
        device (str): Device the model runs on; only CUDA keeps a cache to release.
    """
    try:
        with torch.inference_mode():
            yield
    finally:
        if device.startswith("cuda") and torch.cuda.is_available():
            torch.cuda.empty_cache()


class CoherenceAnalyzer:
    """Scores topic continuity between consecutive sentences.

    Attributes:
        service (EmbeddingModelService): Provides the sentence embeddings.
        clamp_negative (bool): Clamp negative pair similarities to 0 before averaging.
    """

    def __init__(self, service: EmbeddingModelService, *, clamp_negative: bool = False) -> None:
        self.service = service
        self.clamp_negative = clamp_negative

    def _pair_similarities(self, sentences: Sequence[str]) -> list[float]:
        """Embed `sentences` and return the cosine similarity of each adjacent pair."""
        with inference_scope(self.service.device):
            embeddings = self.service.encode(sentences)
            if embeddings.dim() != 2 or embeddings.shape[0] != len(sentences):
                msg = f"Expected a ({len(sentences)}, dim) embedding matrix, got shape {tuple(embeddings.shape)}"
                raise ValueError(msg)
            similarities = F.cosine_similarity(embeddings[:-1], embeddings[1:], dim=1)
            return [float(value) for value in similarities.tolist()]

    def analyze(self, sentences: Sequence[str]) -> CoherenceReport:
        """
        Compute adjacent-pair similarities and their mean.

        Args:
            sentences (Sequence[str]): Sentence units in document order.

        Raises:
            ModelUnavailable: If two or more sentences need embedding and the model is not loaded.

        Returns:
            CoherenceReport: Pair similarities and the coherence score.
        """
        if len(sentences) < MIN_SENTENCES:
            return CoherenceReport(sentence_count=len(sentences), pair_similarities=(), score=0.0)

        pair_scores = self._pair_similarities(sentences)
        if self.clamp_negative:
            pair_scores = [max(0.0, value) for value in pair_scores]

        mean_similarity = sum(pair_scores) / len(pair_scores)
        # Float error can push a mean of identical unit vectors just past 1.
        mean_similarity = max(-1.0, min(1.0, mean_similarity))
        logger.debug(f"Coherence over {len(sentences)} sentences: {mean_similarity:.4f}")
        return CoherenceReport(
            sentence_count=len(sentences),
            pair_similarities=tuple(pair_scores),
            score=mean_similarity,
        )

    def score(self, sentences: Sequence[str]) -> float:
        """Return only the coherence score for `sentences`."""
        return self.analyze(sentences).score
