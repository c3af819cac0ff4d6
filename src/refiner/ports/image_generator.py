from __future__ import annotations

from typing import Protocol

from refiner.domain.models import GeneratedImage


class ImageGenerator(Protocol):
    """
    Produces an image from a prompt and returns a reference to it.
    """

    @property
    def model_name(self) -> str: ...

    async def generate_image(self, prompt: str) -> GeneratedImage:
        ...
