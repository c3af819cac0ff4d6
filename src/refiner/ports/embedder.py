from __future__ import annotations

from typing import Protocol, Sequence

Vector = list[float]


class Embedder(Protocol):
    """
    Turns text into dense vectors.

    Output has the same length and order as the input, and every vector in a
    batch has the same dimensionality.
    """

    @property
    def model_name(self) -> str: ...

    async def embed_texts(self, texts: Sequence[str]) -> list[Vector]:
        ...
