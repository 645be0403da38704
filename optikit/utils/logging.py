"""Simple logging utilities for optikit.

Modules use the standard pattern:

    import logging
    logger = logging.getLogger(__name__)

and the CLI entry point calls `setup_logging()` once.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure the `optikit` logger hierarchy to write to stderr."""
    logger = logging.getLogger("optikit")
    level = logging.DEBUG if verbose else logging.WARNING

    # Only configure if not already configured
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    for handler in logger.handlers:
        handler.setLevel(level)
    logger.setLevel(level)

    return logger
