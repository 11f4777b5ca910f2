"""Logging helpers for nofmt.

Library modules get their loggers through `get_logger`; only the CLI
attaches a handler, via `configure_logging`.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the `nofmt.` namespace.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance
    """
    if not (name == "nofmt" or name.startswith("nofmt.")):
        name = f"nofmt.{name}"
    return logging.getLogger(name)


def configure_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Route nofmt log records to a rich handler on stderr."""
    logger = logging.getLogger("nofmt")
    logger.handlers.clear()
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
    )
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
