from __future__ import annotations

from enum import Enum
from typing import Optional


class PromptRefinerError(Exception):
    """Base error for the prompt refiner."""


class ConfigError(PromptRefinerError):
    pass


class TransportErrorKind(str, Enum):
    RATE_LIMITED = "rate_limited"
    UNAUTHORIZED = "unauthorized"
    BAD_REQUEST = "bad_request"
    UNKNOWN = "unknown"


class TransportError(PromptRefinerError):
    """
    A remote call failed.

    status_code mirrors the HTTP status when there was one, so the backoff
    executor can recognise a rate limit regardless of where it came from.
    """

    def __init__(self, message: str, *, kind: TransportErrorKind, status_code: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code


class ParseError(PromptRefinerError):
    """
    A model response could not be turned into the expected shape.
    raw_text holds the offending payload for diagnosis.
    """

    def __init__(self, message: str, *, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class EmbeddingError(PromptRefinerError):
    pass
