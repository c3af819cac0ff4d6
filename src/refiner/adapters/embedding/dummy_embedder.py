from __future__ import annotations

from dataclasses import dataclass
from hashlib import sha256
from typing import Sequence

Vector = list[float]


@dataclass(frozen=True, slots=True)
class DummyEmbedder:
    """
    Deterministic fake embeddings for offline runs.
    Identical strings map to identical vectors; nothing else is meaningful.
    """
    dim: int = 128
    model: str = "dummy-embedder-v1"

    @property
    def model_name(self) -> str:
        return self.model

    async def embed_texts(self, texts: Sequence[str]) -> list[Vector]:
        out: list[Vector] = []
        for text in texts:
            digest = sha256(text.encode("utf-8")).digest()
            # cycle the digest bytes into dim floats in [-1, 1]
            out.append([(digest[i % len(digest)] / 127.5) - 1.0 for i in range(self.dim)])
        return out
