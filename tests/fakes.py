from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Iterable, Mapping, Optional, Sequence

import httpx
import openai

from refiner.domain.models import GeneratedImage


class TableEmbedder:
    """Looks vectors up by text, so tests control pairwise similarity exactly."""

    model_name = "table-embedder"

    def __init__(self, table: Mapping[str, Sequence[float]]):
        self.table = dict(table)
        self.calls: list[list[str]] = []

    async def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [list(self.table[t]) for t in texts]


class FailingEmbedder:
    model_name = "failing-embedder"

    def __init__(self, exc: Exception):
        self.exc = exc

    async def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        raise self.exc


class FakeExtractor:
    model_name = "fake-extractor"

    def __init__(self, keywords: Sequence[str] = (), exc: Optional[Exception] = None, events: Optional[list] = None):
        self.keywords = list(keywords)
        self.exc = exc
        self.prompts: list[str] = []
        self.events = events

    async def extract_keywords(self, prompt: str) -> list[str]:
        self.prompts.append(prompt)
        if self.events is not None:
            self.events.append("extract")
        if self.exc is not None:
            raise self.exc
        return list(self.keywords)


class FakeGenerator:
    model_name = "fake-image"

    def __init__(self, url: str = "https://images.example/1.png", events: Optional[list] = None):
        self.url = url
        self.prompts: list[str] = []
        self.events = events

    async def generate_image(self, prompt: str) -> GeneratedImage:
        self.prompts.append(prompt)
        if self.events is not None:
            self.events.append("generate")
        return GeneratedImage(url=self.url, prompt=prompt, model=self.model_name)


class FakeEndpoint:
    """Stands in for client.chat.completions / client.images; replays outcomes in order."""

    def __init__(self, outcomes: Iterable[Any]):
        self.outcomes = list(outcomes)
        self.calls: list[dict[str, Any]] = []

    async def _call(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    create = _call
    generate = _call


def fake_openai_client(*, chat: Iterable[Any] = (), images: Iterable[Any] = ()) -> SimpleNamespace:
    return SimpleNamespace(
        chat=SimpleNamespace(completions=FakeEndpoint(chat)),
        images=FakeEndpoint(images),
    )


def chat_reply(content: Optional[str]) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def image_reply(url: Optional[str], revised_prompt: Optional[str] = None) -> SimpleNamespace:
    return SimpleNamespace(data=[SimpleNamespace(url=url, revised_prompt=revised_prompt)])


_STATUS_ERRORS = {
    400: openai.BadRequestError,
    401: openai.AuthenticationError,
    429: openai.RateLimitError,
}


def status_error(status: int, body: Any = None) -> openai.APIStatusError:
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(status, request=request)
    cls = _STATUS_ERRORS.get(status, openai.APIStatusError)
    return cls(f"HTTP {status}", response=response, body=body)


def connection_error() -> openai.APIConnectionError:
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    return openai.APIConnectionError(request=request)


class SleepRecorder:
    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
