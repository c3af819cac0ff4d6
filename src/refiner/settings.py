from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv

from refiner.domain.errors import ConfigError
from refiner.domain.models import DEFAULT_SIMILARITY_THRESHOLD

API_KEY_ENV = "OPENAI_API_KEY"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Extraction:
    model: str = "gpt-3.5-turbo"
    temperature: float = 0.7
    keyword_count: int = 10


@dataclass(frozen=True)
class Embeddings:
    provider: str = "sentence-transformers"
    model: str = "sentence-transformers/all-MiniLM-L6-v2"


@dataclass(frozen=True)
class Dedup:
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD


@dataclass(frozen=True)
class Image:
    model: str = "dall-e-3"
    size: str = "1024x1024"
    quality: str = "standard"


@dataclass(frozen=True)
class Retry:
    max_retries: int = 3
    initial_delay_ms: int = 1000


@dataclass(frozen=True)
class Settings:
    api_key: str = field(repr=False)
    extraction: Extraction = field(default_factory=Extraction)
    embeddings: Embeddings = field(default_factory=Embeddings)
    dedup: Dedup = field(default_factory=Dedup)
    image: Image = field(default_factory=Image)
    retry: Retry = field(default_factory=Retry)


def load_api_key(*, use_dotenv: bool = True) -> str:
    """
    Read the OpenAI API key once. Fails fast instead of letting the first
    request die with a 401.
    """
    if use_dotenv:
        load_dotenv()

    api_key = os.getenv(API_KEY_ENV, "").strip()
    if not api_key:
        raise ConfigError(
            f"OpenAI API key is not set. Please set {API_KEY_ENV} in your environment or .env file."
        )
    logger.debug("API key loaded: yes (length: %d)", len(api_key))
    return api_key


def load_settings(path: Optional[str | Path] = None, *, use_dotenv: bool = True) -> Settings:
    """
    Build Settings from an optional TOML file plus the environment.

    Args:
        path: settings.toml to read. None means defaults only; a path that
            does not exist is an error.
        use_dotenv: Load a .env file before reading the API key.
    """
    raw: dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Missing config file: {path}")
        with path.open("rb") as f:
            raw = tomllib.load(f)

    def section(name: str) -> Mapping[str, Any]:
        value = raw.get(name, {})
        if not isinstance(value, Mapping):
            raise ConfigError(f"Config section [{name}] must be a table")
        return value

    try:
        extraction = Extraction(**section("extraction"))
        embeddings = Embeddings(**section("embeddings"))
        dedup = Dedup(**section("dedup"))
        image = Image(**section("image"))
        retry = Retry(**section("retry"))
    except TypeError as e:
        raise ConfigError(f"Unknown config key: {e}") from e

    if not -1.0 <= float(dedup.threshold) <= 1.0:
        raise ConfigError(f"dedup.threshold must be within [-1, 1], got {dedup.threshold}")
    if retry.max_retries < 0 or retry.initial_delay_ms < 0:
        raise ConfigError("retry.max_retries and retry.initial_delay_ms must be >= 0")

    return Settings(
        api_key=load_api_key(use_dotenv=use_dotenv),
        extraction=extraction,
        embeddings=embeddings,
        dedup=dedup,
        image=image,
        retry=retry,
    )
