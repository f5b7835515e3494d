from __future__ import annotations

import logging
import sys


PACKAGE_LOGGER = "mcp_dice_expressions"

_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] - %(message)s"


def configure_logging(level: str = "WARNING") -> logging.Logger:
    # stdout belongs to the MCP stdio transport, so logs go to stderr.
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Avoid stacking handlers when run() is called more than once.
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)
    return logger
