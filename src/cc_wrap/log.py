"""Logging setup. All output goes to stderr so stdout stays clean."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "cc_wrap"


def configure_logging(verbose: bool = False) -> None:
    """Attach a rich handler to the package logger (idempotent)."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if any(isinstance(h, RichHandler) for h in logger.handlers):
        return
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=verbose,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
