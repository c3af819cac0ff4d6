from __future__ import annotations

from typing import Sequence

from llama_index.core.prompts import PromptTemplate

REFINED_PROMPT_TEMPLATE = PromptTemplate(
    "{prompt}, with the following details: {details}"
)

KEYWORD_SYSTEM_PROMPT = (
    "You are a helpful assistant that generates relevant keywords for image refinement. "
    "Return only a JSON array of keywords."
)

KEYWORD_USER_TEMPLATE = PromptTemplate(
    "Generate {count} relevant keywords for refining this image prompt: {prompt}"
)


def compose_refined_prompt(
    prompt: str,
    keywords: Sequence[str],
    *,
    template: PromptTemplate = REFINED_PROMPT_TEMPLATE,
) -> str:
    """
    Build the refined prompt from the original text and the kept keywords.

    An empty keyword list still renders the full template.
    """
    return template.format(prompt=prompt.strip(), details=", ".join(keywords))


def keyword_request_message(prompt: str, count: int) -> str:
    return KEYWORD_USER_TEMPLATE.format(count=count, prompt=prompt)
