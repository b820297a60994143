"""
Logging setup using Loguru.

Library modules log through ``loguru.logger`` directly; only the CLI decides
where records go and at which level.

Usage:
    from dfmark.log import configure_logging

    configure_logging("DEBUG")
"""

import sys

from loguru import logger


LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <7}</level> │ "
    "<cyan>{module}:{function}</cyan> ║ "
    "<level>{message}</level>"
)


def configure_logging(level: str = "WARNING") -> int:
    """
    Replace loguru's default handler with a stderr sink at the given level.

    Args:
        level: loguru level name (e.g. "DEBUG", "WARNING")

    Returns:
        The id of the added handler
    """
    logger.remove()
    return logger.add(sys.stderr, format=LOG_FORMAT, level=level)
