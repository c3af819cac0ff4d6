"""
Logging setup for the prompt refiner.

Modules log through `logging.getLogger(__name__)`; this installs a single
rich console handler on the package logger.
"""

import logging
from typing import Optional

from rich.logging import RichHandler

PACKAGE_LOGGER = "refiner"

_initialized = False


def setup_logging(verbose: bool = False, level: Optional[int] = None) -> logging.Logger:
    """
    Initialize logging once. Later calls only adjust the level.

    Args:
        verbose: DEBUG instead of INFO.
        level: Explicit level, overrides `verbose`.
    """
    global _initialized

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level if level is not None else (logging.DEBUG if verbose else logging.INFO))

    if not _initialized:
        handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        logger.addHandler(handler)
        logger.propagate = False
        _initialized = True

    return logger
