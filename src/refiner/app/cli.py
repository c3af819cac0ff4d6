from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Optional, Sequence

from rich import print as rprint
from rich.markup import escape

from refiner.app.container import Container, build_container
from refiner.app.pipeline import generate_image, generate_refined_prompt
from refiner.debug import dump_refinement
from refiner.domain.errors import (
    ConfigError,
    EmbeddingError,
    ParseError,
    PromptRefinerError,
    TransportError,
    TransportErrorKind,
)
from refiner.domain.models import GeneratedImage, RefinedPrompt
from refiner.logging_utils import setup_logging
from refiner.settings import load_settings

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = Path("settings.toml")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Refine an image prompt with LLM keywords and generate the image.")
    p.add_argument("prompt", type=str, help="Free-form image description")

    p.add_argument("--settings", type=Path, default=None, help="settings.toml (default: ./settings.toml if present)")
    p.add_argument("--threshold", type=float, default=None, help="Cosine similarity threshold for keyword dedup")
    p.add_argument("--no-image", action="store_true", help="Stop after composing the refined prompt")
    p.add_argument("--dummy-embeddings", action="store_true", help="Use hash embeddings instead of loading a model")
    p.add_argument("--timeout", type=float, default=None, help="Give up on the whole run after this many seconds")

    p.add_argument("--dump", action="store_true", help="Write a JSON record of the run under logs/refinements")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    return p.parse_args(argv)


def describe_error(exc: PromptRefinerError) -> str:
    if isinstance(exc, ConfigError):
        return f"Configuration error: {exc}"
    if isinstance(exc, TransportError):
        if exc.kind is TransportErrorKind.UNAUTHORIZED:
            return f"Bad credential: {exc}"
        if exc.kind is TransportErrorKind.RATE_LIMITED:
            return f"Rate limited, retry later: {exc}"
        if exc.kind is TransportErrorKind.BAD_REQUEST:
            return f"Request rejected: {exc}"
        return f"Unknown failure: {exc}"
    if isinstance(exc, ParseError):
        return f"Malformed model response: {exc}\n{exc.raw_text}"
    if isinstance(exc, EmbeddingError):
        return f"Embedding failure: {exc}"
    return f"Unknown failure: {exc}"


async def run(
    prompt: str,
    container: Container,
    *,
    threshold: float,
    with_image: bool = True,
) -> tuple[RefinedPrompt, Optional[GeneratedImage]]:
    refined = await generate_refined_prompt(
        prompt,
        extractor=container.extractor,
        embedder=container.embedder,
        threshold=threshold,
    )
    image = await generate_image(refined, generator=container.generator) if with_image else None
    return refined, image


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(verbose=args.verbose)

    settings_path = args.settings
    if settings_path is None and DEFAULT_SETTINGS_FILE.exists():
        settings_path = DEFAULT_SETTINGS_FILE

    try:
        settings = load_settings(settings_path)
        container = build_container(settings, dummy_embeddings=args.dummy_embeddings)
        threshold = args.threshold if args.threshold is not None else container.threshold

        coro = run(args.prompt, container, threshold=threshold, with_image=not args.no_image)
        refined, image = asyncio.run(asyncio.wait_for(coro, timeout=args.timeout))
    except PromptRefinerError as e:
        rprint(f"[red]{escape(describe_error(e))}[/red]")
        return 1
    except TimeoutError:
        rprint(f"[red]Timed out after {args.timeout}s[/red]")
        return 1
    except (ValueError, FileNotFoundError) as e:
        rprint(f"[red]{escape(str(e))}[/red]")
        return 2

    rprint("\n[bold]=== KEYWORDS ===[/bold]")
    for kw in refined.keywords:
        rprint(f"  - {escape(kw)}")
    for s in refined.suppressed:
        rprint(f"  [dim]x {escape(s.keyword)} (~ {escape(s.representative)}, {s.similarity:.2f})[/dim]")

    rprint("\n[bold]=== REFINED PROMPT ===[/bold]\n")
    rprint(escape(refined.refined_prompt))

    if image is not None:
        rprint("\n[bold]=== IMAGE ===[/bold]\n")
        rprint(image.url)
        if image.revised_prompt:
            rprint(f"[dim]revised prompt: {escape(image.revised_prompt)}[/dim]")

    if args.dump:
        dump_path = dump_refinement(refined, image)
        rprint(f"\n[bold]Run dump saved:[/bold] {dump_path}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
