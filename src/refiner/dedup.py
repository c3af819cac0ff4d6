from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from refiner.domain.errors import EmbeddingError
from refiner.domain.models import DEFAULT_SIMILARITY_THRESHOLD, DedupResult, SuppressedKeyword
from refiner.ports import Embedder

# float rounding leaves parallel vectors a few ulps short of 1.0
SIMILARITY_TOLERANCE = 1e-9

logger = logging.getLogger(__name__)


def validate_threshold(threshold: float) -> float:
    if not -1.0 <= threshold <= 1.0:
        raise ValueError(f"threshold must be within [-1, 1], got {threshold}")
    return threshold


def is_similar(similarity: float, threshold: float) -> bool:
    """`similarity >= threshold`, within SIMILARITY_TOLERANCE. NaN is never similar."""
    return similarity >= threshold - SIMILARITY_TOLERANCE


def similarity_matrix(matrix: np.ndarray) -> np.ndarray:
    """
    Pairwise cosine similarities of the rows of `matrix`.

    A zero-magnitude row has no direction, so it scores 0.0 against every row
    (itself included). Results are clipped to [-1, 1] and values within
    SIMILARITY_TOLERANCE of 1.0 are snapped to exactly 1.0.
    """
    norms = np.linalg.norm(matrix, axis=1, keepdims=True)
    unit = np.divide(matrix, norms, out=np.zeros_like(matrix), where=norms != 0)
    sims = np.clip(unit @ unit.T, -1.0, 1.0)
    return np.where(np.abs(sims - 1.0) <= SIMILARITY_TOLERANCE, 1.0, sims)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two vectors, under the same policy as
    `similarity_matrix`. NaN components yield NaN.
    """
    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    if va.shape != vb.shape:
        raise ValueError(f"vector shapes differ: {va.shape} vs {vb.shape}")

    return float(similarity_matrix(np.stack([va.ravel(), vb.ravel()]))[0, 1])


def _as_matrix(embeddings: Sequence[Sequence[float]], n: int) -> np.ndarray:
    if len(embeddings) != n:
        raise EmbeddingError(f"expected {n} embeddings, got {len(embeddings)}")

    dims = {len(v) for v in embeddings}
    if len(dims) > 1:
        raise EmbeddingError(f"embeddings have mixed dimensionality: {sorted(dims)}")
    if dims == {0}:
        raise EmbeddingError("embeddings are empty vectors")

    return np.asarray(embeddings, dtype=float)


def partition_keywords(
    keywords: Sequence[str],
    embeddings: Sequence[Sequence[float]],
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> DedupResult:
    """
    Greedy first-occurrence-wins clustering.

    Keywords are scanned in order. The first one not yet suppressed becomes a
    representative, and every later keyword whose similarity to it is at least
    `threshold` is suppressed. Suppressed keywords are never compared against
    anything else, so there is no transitive merging.

    Args:
        keywords: Keywords in relevance order.
        embeddings: One vector per keyword, same order.
        threshold: Cosine similarity at or above which two keywords are duplicates.

    Returns:
        DedupResult with the kept representatives and what each suppressed
        keyword was absorbed into.
    """
    validate_threshold(threshold)

    n = len(keywords)
    if n == 0:
        return DedupResult(kept=(), threshold=threshold)

    sims = similarity_matrix(_as_matrix(embeddings, n))

    kept: list[str] = []
    suppressed: dict[int, SuppressedKeyword] = {}

    for i in range(n):
        if i in suppressed:
            continue
        kept.append(keywords[i])
        for j in range(i + 1, n):
            if j in suppressed:
                continue
            sim = float(sims[i, j])
            if is_similar(sim, threshold):
                suppressed[j] = SuppressedKeyword(
                    keyword=keywords[j],
                    index=j,
                    representative=keywords[i],
                    representative_index=i,
                    similarity=sim,
                )

    ordered = tuple(suppressed[j] for j in sorted(suppressed))
    for s in ordered:
        logger.debug("Suppressed %r (similarity %.3f to %r)", s.keyword, s.similarity, s.representative)

    return DedupResult(kept=tuple(kept), suppressed=ordered, threshold=threshold)


async def find_near_duplicates(
    keywords: Sequence[str],
    *,
    embedder: Embedder,
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> DedupResult:
    """Embed the keywords and partition them into representatives and duplicates."""
    if not keywords:
        return partition_keywords([], [], threshold)

    embeddings = await embedder.embed_texts(list(keywords))
    result = partition_keywords(keywords, embeddings, threshold)
    logger.info(
        "Dedup kept %d of %d keywords (threshold=%.2f, model=%s)",
        len(result.kept),
        len(keywords),
        threshold,
        embedder.model_name,
    )
    return result


async def dedupe_keywords(
    keywords: Sequence[str],
    *,
    embedder: Embedder,
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> list[str]:
    result = await find_near_duplicates(keywords, embedder=embedder, threshold=threshold)
    return list(result.kept)
