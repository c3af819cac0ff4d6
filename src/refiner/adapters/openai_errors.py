from __future__ import annotations

import json
from typing import Any

import openai

from refiner.domain.errors import TransportError, TransportErrorKind


def _api_message(body: Any, fallback: str) -> str:
    # OpenAI error bodies look like {"error": {"message": ...}} or just {"message": ...}
    if isinstance(body, dict):
        err = body.get("error", body)
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
    return fallback


def to_transport_error(exc: openai.APIError) -> TransportError:
    """
    Map an OpenAI client failure onto the transport error taxonomy.
    """
    if isinstance(exc, openai.APIStatusError):
        status = exc.status_code
        if status == 401:
            return TransportError(
                "Invalid API key. Please check OPENAI_API_KEY in your environment or .env file.",
                kind=TransportErrorKind.UNAUTHORIZED,
                status_code=status,
            )
        if status == 429:
            return TransportError(
                "Rate limit exceeded. Please wait a moment before trying again.",
                kind=TransportErrorKind.RATE_LIMITED,
                status_code=status,
            )
        if status == 400:
            detail = json.dumps(exc.body, default=str) if exc.body is not None else exc.message
            return TransportError(
                f"Invalid request: {detail}",
                kind=TransportErrorKind.BAD_REQUEST,
                status_code=status,
            )
        return TransportError(
            _api_message(exc.body, exc.message),
            kind=TransportErrorKind.UNKNOWN,
            status_code=status,
        )

    return TransportError(str(exc) or type(exc).__name__, kind=TransportErrorKind.UNKNOWN)
