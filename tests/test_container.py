from dataclasses import replace

import pytest

from refiner.adapters.embedding.dummy_embedder import DummyEmbedder
from refiner.adapters.embedding.sentence_transformer import SentenceTransformerEmbedder
from refiner.app.container import build_container
from refiner.domain.errors import ConfigError
from refiner.settings import Embeddings, Retry, Settings


def test_container_wires_settings_through():
    settings = Settings(api_key="sk-test", retry=Retry(max_retries=5, initial_delay_ms=10))

    c = build_container(settings)

    assert isinstance(c.embedder, SentenceTransformerEmbedder)
    assert not c.embedder.is_loaded
    assert c.extractor.model_name == "gpt-3.5-turbo"
    assert c.generator.model_name == "dall-e-3"
    assert c.extractor.retry.max_retries == 5
    assert c.generator.retry.initial_delay_ms == 10
    assert c.threshold == 0.8


def test_containers_share_one_embedder():
    settings = Settings(api_key="sk-test")
    assert build_container(settings).embedder is build_container(settings).embedder


def test_dummy_embeddings():
    settings = Settings(api_key="sk-test")
    assert isinstance(build_container(settings, dummy_embeddings=True).embedder, DummyEmbedder)

    settings = replace(settings, embeddings=Embeddings(provider="dummy"))
    assert isinstance(build_container(settings).embedder, DummyEmbedder)


def test_unknown_provider():
    settings = Settings(api_key="sk-test", embeddings=Embeddings(provider="word2vec"))
    with pytest.raises(ConfigError):
        build_container(settings)
