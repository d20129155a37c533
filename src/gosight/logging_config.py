"""Logging for the ``gosight`` logger namespace.

Library modules only call ``get_logger(__name__)``. The CLI calls
``setup_logging`` once the configuration is resolved, so the ``verbosity``
setting from a TOML file or ``GOSIGHT_VERBOSITY`` decides the level.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_ROOT = "gosight"

LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}

_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """Install handlers on the ``gosight`` logger and return it.

    Records go to stderr through rich, and are appended as plain text to
    ``log_file`` when one is given. Handlers from an earlier call are
    replaced, so repeated CLI invocations in one process do not stack them.
    """
    level = LEVELS[verbosity]
    debug = level <= logging.DEBUG

    # markup off: messages carry Go type strings like []map[string]int
    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            markup=False,
            rich_tracebacks=True,
            show_path=debug,
            log_time_format="[%X]",
        )
    ]
    if log_file:
        to_file = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        to_file.setFormatter(logging.Formatter(_FILE_FORMAT))
        handlers.append(to_file)

    logger = logging.getLogger(_ROOT)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for ``name``, moved under the ``gosight`` namespace if needed."""
    if name is None or name == _ROOT:
        return logging.getLogger(_ROOT)
    if not name.startswith(_ROOT + "."):
        name = f"{_ROOT}.{name}"
    return logging.getLogger(name)
