"""Logging configuration.

Log output goes to stderr so it never mixes with command output.

Environment variables:
- LEDGERDESK_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: WARNING)
"""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "[{asctime}] {levelname} {name} {message}"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the ``ledgerdesk`` logger hierarchy.

    Args:
        level: Level name; falls back to LEDGERDESK_LOG_LEVEL, then WARNING
    """
    level_name = (level or os.environ.get("LEDGERDESK_LOG_LEVEL") or "WARNING").upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level '{level_name}'")

    logger = logging.getLogger("ledgerdesk")
    logger.setLevel(numeric_level)

    # Reconfiguring replaces our handler instead of stacking another one
    for handler in list(logger.handlers):
        if getattr(handler, "_ledgerdesk", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, style="{"))
    handler._ledgerdesk = True
    logger.addHandler(handler)
    logger.propagate = False
