from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

# Requires: pip install openai
import openai
from openai import AsyncOpenAI

from refiner.adapters.openai_errors import to_transport_error
from refiner.backoff import RetryPolicy
from refiner.domain.errors import ParseError
from refiner.domain.models import GeneratedImage

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OpenAIImageGenerator:
    """
    OpenAI image generator. Returns a URL, never image bytes.
    """
    api_key: str = field(repr=False)
    model: str = "dall-e-3"
    size: str = "1024x1024"
    quality: str = "standard"
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    client: Optional[Any] = field(default=None, repr=False)

    @property
    def model_name(self) -> str:
        return self.model

    def _client(self) -> Any:
        return self.client if self.client is not None else AsyncOpenAI(api_key=self.api_key)

    async def generate_image(self, prompt: str) -> GeneratedImage:
        client = self._client()
        logger.info("Requesting image from %s (%s, %s)", self.model, self.size, self.quality)
        logger.debug("Image prompt: %s", prompt)

        async def call() -> Any:
            return await client.images.generate(
                model=self.model,
                prompt=prompt,
                n=1,
                size=self.size,
                quality=self.quality,
                response_format="url",
            )

        try:
            resp = await self.retry.run(call)
        except openai.APIError as e:
            logger.error("Image generation failed: %s", e)
            raise to_transport_error(e) from e

        data = getattr(resp, "data", None) or []
        url = getattr(data[0], "url", None) if data else None
        if not url:
            raise ParseError("No image URL in response", raw_text=repr(resp))

        return GeneratedImage(
            url=url,
            prompt=prompt,
            model=self.model,
            revised_prompt=getattr(data[0], "revised_prompt", None),
        )
