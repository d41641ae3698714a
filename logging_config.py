"""
Logging configuration for parse-core.

- PARSE_CORE_DEBUG: enable debug logging (default: false)
"""

import logging
import sys
from typing import Optional

import config

ROOT_LOGGER = "parse_core"


def setup_logging(debug: Optional[bool] = None) -> logging.Logger:
    """
    Configure the parse-core root logger.

    Args:
        debug: Enable debug level. Defaults to config.DEBUG.

    Returns:
        Root logger for parse-core
    """
    if debug is None:
        debug = config.DEBUG

    level = logging.DEBUG if debug else logging.INFO

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)-5s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    stderr_handler.setLevel(level)
    logger.addHandler(stderr_handler)

    return logger


def get_logger(component: str) -> logging.Logger:
    """
    Get a logger for a specific component (e.g. "solidity", "api").
    """
    return logging.getLogger(f"{ROOT_LOGGER}.{component}")
