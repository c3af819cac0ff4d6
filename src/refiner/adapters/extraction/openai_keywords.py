from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

# Requires: pip install openai
import openai
from openai import AsyncOpenAI

from refiner.adapters.openai_errors import to_transport_error
from refiner.backoff import RetryPolicy
from refiner.prompting import KEYWORD_SYSTEM_PROMPT, keyword_request_message
from refiner.utils.llm_json import parse_keyword_array

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OpenAIKeywordExtractor:
    """
    Keyword extraction through OpenAI chat completions.

    Notes:
      - every request goes through the retry policy (rate limits only)
      - the reply is expected to hold a JSON array, possibly wrapped in prose
      - `client` can be injected; otherwise one is built per call from api_key
    """
    api_key: str = field(repr=False)
    model: str = "gpt-3.5-turbo"
    temperature: float = 0.7
    keyword_count: int = 10
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    client: Optional[Any] = field(default=None, repr=False)

    @property
    def model_name(self) -> str:
        return self.model

    def _client(self) -> Any:
        return self.client if self.client is not None else AsyncOpenAI(api_key=self.api_key)

    async def extract_keywords(self, prompt: str) -> list[str]:
        client = self._client()
        messages = [
            {"role": "system", "content": KEYWORD_SYSTEM_PROMPT},
            {"role": "user", "content": keyword_request_message(prompt, self.keyword_count)},
        ]

        async def call() -> Any:
            return await client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                messages=messages,
            )

        try:
            resp = await self.retry.run(call)
        except openai.APIError as e:
            logger.error("Keyword extraction failed: %s", e)
            raise to_transport_error(e) from e

        content = resp.choices[0].message.content if resp.choices else None
        logger.debug("Keyword extraction raw reply: %r", content)

        keywords = parse_keyword_array(content)
        logger.info("Extracted %d keywords with %s", len(keywords), self.model)
        return keywords
