"""Lifecycle management for the sentence-embedding model.

`EmbeddingModelService` owns one SentenceTransformer (or any object exposing the
same `encode` signature) and moves through a small state machine:

    UNLOADED -> LOADING -> LOADED
                        -> FAILED -> LOADING (on an explicit retry)

Loading is single-flight: concurrent callers of `load()` or `initialize()` block on
the same lock, the first performs the load and the rest return once it finishes.
If that load fails, the waiters raise the same `ModelLoadFailure` instead of
fetching the model again.
Inference never triggers a load; `encode()` raises `ModelUnavailable` instead.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Optional

from sentence_transformers import SentenceTransformer

from errors import ModelLoadFailure, ModelUnavailable

if TYPE_CHECKING:
    from collections.abc import Sequence

    import torch

    from config import EmbeddingConfig

logger = logging.getLogger(__name__)

ModelLoader = Callable[[str, str], Any]


class ModelState(str, Enum):
    """Load state of an `EmbeddingModelService`."""

    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


def load_sentence_transformer(model_name: str, device: str) -> SentenceTransformer:
    """Fetch (if needed) and deserialize a SentenceTransformer model."""
    return SentenceTransformer(model_name, device=device)


class EmbeddingModelService:
    """Owns the embedding model and guards its one-time load.

    Attributes:
        model_name (str): Name or path passed to the loader.
        device (str): Device passed to the loader ('cpu', 'cuda', 'mps').
        batch_size (int): Batch size used when encoding sentences.
        normalize_embeddings (bool): Whether `encode` asks for L2-normalized vectors.
        load_count (int): Number of times the loader has been invoked.
    """

    def __init__(
        self,
        model_name: str = "all-MiniLM-L6-v2",
        device: str = "cpu",
        batch_size: int = 32,
        *,
        normalize_embeddings: bool = False,
        loader: Optional[ModelLoader] = None,
    ) -> None:
        if batch_size <= 0:
            msg = "batch_size must be positive."
            raise ValueError(msg)

        self.model_name = model_name
        self.device = device
        self.batch_size = batch_size
        self.normalize_embeddings = normalize_embeddings
        self.load_count = 0

        self._loader: ModelLoader = loader or load_sentence_transformer
        self._lock = threading.Lock()
        self._model: Any = None
        self._state = ModelState.UNLOADED
        self._attempts = 0
        self._last_error: Optional[BaseException] = None

    @classmethod
    def from_config(cls, config: EmbeddingConfig, loader: Optional[ModelLoader] = None) -> EmbeddingModelService:
        """Build an unloaded service from an `EmbeddingConfig`."""
        return cls(
            model_name=config.model_name,
            device=config.device,
            batch_size=config.batch_size,
            normalize_embeddings=config.normalize_embeddings,
            loader=loader,
        )

    def _failure_message(self) -> str:
        return f"Failed to load essay scoring model '{self.model_name}'"

    @property
    def state(self) -> ModelState:
        return self._state

    @property
    def is_loaded(self) -> bool:
        return self._state is ModelState.LOADED

    def load(self) -> None:
        """
        Load the model unless it is already loaded.

        Safe to call from many threads at once; only one of them runs the loader.
        Callers that were waiting on a load that fails get its `ModelLoadFailure`
        without loading again. The service is left in `FAILED` and only a call made
        after the failure retries.

        Raises:
            ModelLoadFailure: If the loader raises, or the load this call waited on failed.
        """
        if self._state is ModelState.LOADED:
            return
        attempts_seen = self._attempts
        with self._lock:
            if self._state is ModelState.LOADED:
                return
            if self._attempts != attempts_seen and self._state is ModelState.FAILED:
                # The load this call waited on has failed.
                raise ModelLoadFailure(self._failure_message()) from self._last_error
            self._state = ModelState.LOADING
            self.load_count += 1
            logger.info(
                f"Loading embedding model [cyan]{self.model_name}[/cyan] on device [yellow]{self.device}[/yellow]...",
            )
            try:
                model = self._loader(self.model_name, self.device)
            except Exception as exc:
                self._state = ModelState.FAILED
                logger.exception(f"Failed to load embedding model '{self.model_name}'.")
                self._last_error = exc
                raise ModelLoadFailure(self._failure_message()) from exc
            finally:
                self._attempts += 1
            self._model = model
            self._last_error = None
            self._state = ModelState.LOADED
            logger.info(f"Embedding model '{self.model_name}' loaded successfully.")

    async def initialize(self) -> None:
        """
        Load the model without blocking the event loop.

        The load runs in a worker thread. If the awaiting task is cancelled the
        load still completes in the background and leaves the service consistent.
        """
        if self.is_loaded:
            return
        await asyncio.to_thread(self.load)

    def encode(self, sentences: Sequence[str]) -> torch.Tensor:
        """
        Embed a batch of sentences.

        Args:
            sentences (Sequence[str]): Sentences to embed, in order.

        Raises:
            ModelUnavailable: If the model has not been loaded.

        Returns:
            torch.Tensor: A `(len(sentences), dim)` tensor, row i embedding sentence i.
        """
        model = self._model
        if self._state is not ModelState.LOADED or model is None:
            msg = (
                f"Embedding model '{self.model_name}' is not loaded (state: {self._state.value}). "
                "Call initialize_model() before scoring."
            )
            logger.error(msg)
            raise ModelUnavailable(msg)
        return model.encode(
            list(sentences),
            batch_size=self.batch_size,
            convert_to_tensor=True,
            normalize_embeddings=self.normalize_embeddings,
            show_progress_bar=False,
        )
