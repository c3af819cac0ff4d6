from __future__ import annotations

from dataclasses import dataclass

from refiner.adapters.embedding.dummy_embedder import DummyEmbedder
from refiner.adapters.embedding.sentence_transformer import get_shared_embedder
from refiner.adapters.extraction.openai_keywords import OpenAIKeywordExtractor
from refiner.adapters.generation.openai_image import OpenAIImageGenerator
from refiner.backoff import RetryPolicy
from refiner.domain.errors import ConfigError
from refiner.ports import Embedder, ImageGenerator, KeywordExtractor
from refiner.settings import Settings


@dataclass(frozen=True, slots=True)
class Container:
    """
    Lightweight dependency container.
    Holds instances of adapters implementing the ports, plus the dedup threshold.
    """
    extractor: KeywordExtractor
    embedder: Embedder
    generator: ImageGenerator
    threshold: float


def build_embedder(settings: Settings, *, dummy: bool = False) -> Embedder:
    provider = "dummy" if dummy else settings.embeddings.provider
    if provider == "dummy":
        return DummyEmbedder()
    if provider == "sentence-transformers":
        return get_shared_embedder(settings.embeddings.model)
    raise ConfigError(f"Unknown embeddings provider: {provider!r}")


def build_container(settings: Settings, *, dummy_embeddings: bool = False) -> Container:
    retry = RetryPolicy(
        max_retries=settings.retry.max_retries,
        initial_delay_ms=settings.retry.initial_delay_ms,
    )
    extractor = OpenAIKeywordExtractor(
        api_key=settings.api_key,
        model=settings.extraction.model,
        temperature=settings.extraction.temperature,
        keyword_count=settings.extraction.keyword_count,
        retry=retry,
    )
    generator = OpenAIImageGenerator(
        api_key=settings.api_key,
        model=settings.image.model,
        size=settings.image.size,
        quality=settings.image.quality,
        retry=retry,
    )
    return Container(
        extractor=extractor,
        embedder=build_embedder(settings, dummy=dummy_embeddings),
        generator=generator,
        threshold=settings.dedup.threshold,
    )
