from __future__ import annotations

from typing import Protocol


class KeywordExtractor(Protocol):
    """
    Asks a language model for visual refinement keywords, most relevant first.
    """

    @property
    def model_name(self) -> str: ...

    async def extract_keywords(self, prompt: str) -> list[str]:
        ...
