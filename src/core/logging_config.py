"""Logging setup for the API server and command-line tools."""

import logging
from typing import Optional

from config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger.

    Safe to call more than once; handlers are only installed the first time.

    Args:
        level: Log level name. Defaults to LOG_LEVEL from config.
    """
    level_name = (level or LOG_LEVEL).upper()
    logging.basicConfig(level=level_name, format=LOG_FORMAT)
    logging.getLogger().setLevel(level_name)
