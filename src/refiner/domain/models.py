from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

DEFAULT_SIMILARITY_THRESHOLD = 0.8


# -------------------------
# Deduplication
# -------------------------

@dataclass(frozen=True, slots=True)
class SuppressedKeyword:
    """
    A keyword absorbed into an earlier representative's cluster.
    """
    keyword: str
    index: int
    representative: str
    representative_index: int
    similarity: float


@dataclass(frozen=True, slots=True)
class DedupResult:
    """
    Outcome of near-duplicate suppression.

    kept is always an order-preserving subsequence of the input keywords.
    """
    kept: tuple[str, ...]
    suppressed: tuple[SuppressedKeyword, ...] = ()
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD


# -------------------------
# Output objects
# -------------------------

@dataclass(frozen=True, slots=True)
class RefinedPrompt:
    """
    The original prompt plus the keywords that survived deduplication,
    and the composed prompt string sent to the image model.
    """
    prompt: str
    refined_prompt: str
    keywords: tuple[str, ...]
    raw_keywords: tuple[str, ...] = ()
    suppressed: Sequence[SuppressedKeyword] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class GeneratedImage:
    url: str
    prompt: str
    model: str
    revised_prompt: Optional[str] = None  # dall-e-3 rewrites prompts and reports it
