import re
import zlib

import pytest
import torch
import torch.nn.functional as F  # noqa: N812

from embedding_model import EmbeddingModelService
from score import EssayScorer


class FakeSentenceEncoder:
    """Deterministic bag-of-words encoder with the SentenceTransformer `encode` signature."""

    def __init__(self, dim: int = 512):
        self.dim = dim
        self.encode_calls: list[list[str]] = []

    def encode(
        self,
        sentences,
        batch_size=32,
        convert_to_tensor=False,
        normalize_embeddings=False,
        show_progress_bar=None,
    ):
        self.encode_calls.append(list(sentences))
        vectors = torch.zeros(len(sentences), self.dim)
        for row, sentence in enumerate(sentences):
            for token in re.findall(r"[a-z']+", sentence.lower()):
                vectors[row, zlib.crc32(token.encode("utf-8")) % self.dim] += 1.0
        if normalize_embeddings:
            vectors = F.normalize(vectors, dim=1)
        return vectors


@pytest.fixture
def fake_encoder() -> FakeSentenceEncoder:
    return FakeSentenceEncoder()


@pytest.fixture
def unloaded_service(fake_encoder: FakeSentenceEncoder) -> EmbeddingModelService:
    return EmbeddingModelService(model_name="fake-encoder", loader=lambda name, device: fake_encoder)


@pytest.fixture
def loaded_service(unloaded_service: EmbeddingModelService) -> EmbeddingModelService:
    unloaded_service.load()
    return unloaded_service


@pytest.fixture
def scorer(loaded_service: EmbeddingModelService) -> EssayScorer:
    return EssayScorer(loaded_service)


@pytest.fixture
def well_formed_essay() -> str:
    return (
        "This essay will discuss how public libraries support their communities today.\n"
        "\n"
        "Libraries give people free access to books and the internet. Many visitors rely on them daily.\n"
        "\n"
        "Librarians also run reading programmes for children and adults. These programmes build literacy.\n"
        "\n"
        "In summary, libraries remain a valuable public service that deserves steady funding."
    )
