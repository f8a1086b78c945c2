"""
structdiff.log — logger namespace for the package.

Library modules only ever call get_logger(); handlers are attached by
configure_logging(), which the command-line entry point calls.  Code that
embeds structdiff keeps full control of logging otherwise.
"""

import logging
import sys
from typing import Optional

_ROOT = "structdiff"
_CONFIGURED = False


def configure_logging(level: int = logging.WARNING) -> None:
    """
    Attach a stderr handler to the `structdiff` logger once per process.

    Calling again only adjusts the level.
    """
    global _CONFIGURED
    logger = logging.getLogger(_ROOT)
    logger.setLevel(level)
    if _CONFIGURED:
        return

    # Only attach our handler if nobody attached one yet.
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("[%(levelname)s] [%(name)s] %(message)s"))
        logger.addHandler(handler)
    logger.propagate = False
    _CONFIGURED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the `structdiff` namespace (e.g. `structdiff.parse`)."""
    return logging.getLogger(f"{_ROOT}.{name}") if name else logging.getLogger(_ROOT)
