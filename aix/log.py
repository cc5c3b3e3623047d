"""Logging setup for the aix command line."""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

_TRUTHY = {"1", "true", "yes", "on"}


def debug_enabled() -> bool:
    """Check the AIX_DEBUG environment variable."""
    return os.environ.get("AIX_DEBUG", "").strip().lower() in _TRUTHY


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Attach a rich handler to the ``aix`` logger.

    Calling this more than once replaces the previous handler.

    Args:
        verbose: Log at DEBUG instead of WARNING

    Returns:
        The configured ``aix`` logger
    """
    logger = logging.getLogger("aix")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose or debug_enabled() else logging.WARNING)
    logger.propagate = False
    return logger
