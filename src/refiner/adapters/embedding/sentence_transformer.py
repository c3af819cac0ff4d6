from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Callable, Optional, Sequence

import numpy as np

# Requires: pip install sentence-transformers
from sentence_transformers import SentenceTransformer

from refiner.domain.errors import EmbeddingError

Vector = list[float]

DEFAULT_MODEL = "sentence-transformers/all-MiniLM-L6-v2"

logger = logging.getLogger(__name__)


class SentenceTransformerEmbedder:
    """
    Sentence-transformers embeddings with a lazily loaded, shared model.

    Notes:
      - the model is loaded on first use, in a worker thread
      - concurrent first callers wait on one load instead of racing
      - the model reference is set once, on the first successful load
      - nothing is retried here; load/encode failures raise EmbeddingError
    """

    def __init__(self, model: str = DEFAULT_MODEL, *, loader: Optional[Callable[[str], Any]] = None):
        self._model_name = model
        self._loader = loader or SentenceTransformer
        self._model: Any = None
        self._lock = threading.Lock()

    @property
    def model_name(self) -> str:
        return self._model_name

    @property
    def is_loaded(self) -> bool:
        return self._model is not None

    def _load_blocking(self) -> Any:
        with self._lock:
            if self._model is None:
                logger.info("Loading embedding model %s", self._model_name)
                try:
                    self._model = self._loader(self._model_name)
                except Exception as e:
                    raise EmbeddingError(f"Failed to load embedding model {self._model_name}: {e}") from e
            return self._model

    async def load(self) -> Any:
        if self._model is not None:
            return self._model
        return await asyncio.to_thread(self._load_blocking)

    async def embed_texts(self, texts: Sequence[str]) -> list[Vector]:
        if not texts:
            return []

        model = await self.load()
        try:
            raw = await asyncio.to_thread(model.encode, list(texts))
        except Exception as e:
            raise EmbeddingError(f"Embedding failed: {e}") from e

        arr = np.asarray(raw, dtype=float)
        if arr.ndim != 2 or arr.shape[0] != len(texts):
            raise EmbeddingError(
                f"Model returned shape {arr.shape} for {len(texts)} texts"
            )
        return [row.tolist() for row in arr]


_shared: dict[str, SentenceTransformerEmbedder] = {}
_shared_lock = threading.Lock()


def get_shared_embedder(model: str = DEFAULT_MODEL) -> SentenceTransformerEmbedder:
    """
    Process-wide embedder for `model`, created on first request and kept for
    the life of the process.
    """
    with _shared_lock:
        embedder = _shared.get(model)
        if embedder is None:
            embedder = SentenceTransformerEmbedder(model)
            _shared[model] = embedder
        return embedder
