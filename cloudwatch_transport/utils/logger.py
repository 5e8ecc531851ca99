"""
Logging configuration for the transport's own diagnostics
"""

import logging
import os
import sys

LOGGER_NAME = 'cloudwatch_transport'


def setup_logging(level: str = None) -> logging.Logger:
    """
    Set up console logging for the transport's diagnostics

    Diagnostics go to stderr so they never mix with data read from or
    written to stdout, and they are never forwarded to CloudWatch.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured package logger
    """
    if level is None:
        level = os.environ.get('LOG_LEVEL', 'INFO')
    level = level.upper()

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level, logging.INFO))

    return logger

