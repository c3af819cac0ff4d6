from __future__ import annotations

import logging

from refiner.dedup import find_near_duplicates, validate_threshold
from refiner.domain.models import DEFAULT_SIMILARITY_THRESHOLD, GeneratedImage, RefinedPrompt
from refiner.ports import Embedder, ImageGenerator, KeywordExtractor
from refiner.prompting import compose_refined_prompt

logger = logging.getLogger(__name__)


async def generate_refined_prompt(
    prompt: str,
    *,
    extractor: KeywordExtractor,
    embedder: Embedder,
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> RefinedPrompt:
    """
    Extract keywords, drop near-duplicates, and compose the refined prompt.
    Each step waits for the previous one.
    """
    if not prompt or not prompt.strip():
        raise ValueError("prompt must be a non-empty string")
    validate_threshold(threshold)

    raw_keywords = await extractor.extract_keywords(prompt)
    dedup = await find_near_duplicates(raw_keywords, embedder=embedder, threshold=threshold)
    refined_text = compose_refined_prompt(prompt, dedup.kept)

    logger.info("Refined prompt: %s", refined_text)
    return RefinedPrompt(
        prompt=prompt,
        refined_prompt=refined_text,
        keywords=dedup.kept,
        raw_keywords=tuple(raw_keywords),
        suppressed=dedup.suppressed,
    )


async def generate_image(refined: RefinedPrompt, *, generator: ImageGenerator) -> GeneratedImage:
    return await generator.generate_image(refined.refined_prompt)


async def refine_and_generate(
    prompt: str,
    *,
    extractor: KeywordExtractor,
    embedder: Embedder,
    generator: ImageGenerator,
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> tuple[RefinedPrompt, GeneratedImage]:
    refined = await generate_refined_prompt(prompt, extractor=extractor, embedder=embedder, threshold=threshold)
    image = await generate_image(refined, generator=generator)
    return refined, image
