"""Package logger for geomappable"""

__all__ = ['LOGGER', 'log_once', 'warn_once']

import logging
from typing import Optional

LOGGER = logging.getLogger('geomappable')
LOGGER.setLevel(logging.WARNING)
_LOG_HANDLER = logging.StreamHandler()
_LOG_HANDLER.setFormatter(logging.Formatter('[%(levelname)s] %(name)s: %(message)s'))
LOGGER.addHandler(_LOG_HANDLER)

# Formatted messages already emitted by log_once()
_LOGGED = set()


def log_once(
    logger: logging.Logger, level: int, msg: str, *args
) -> bool:
    """
    Logs a message unless the same formatted message has been logged before,
    by any logger.

    Args:
        logger:
            The logger to emit on

        level:
            The logging level, e.g. logging.WARNING

        msg:
            The message, with %-style placeholders for args

    Returns:
        bool, whether the message was emitted
    """
    formatted = msg % args if args else msg
    if formatted in _LOGGED:
        return False

    logger.log(level, msg, *args)
    _LOGGED.add(formatted)
    return True


def warn_once(msg: str, *args, logger: Optional[logging.Logger] = None) -> bool:
    """Logs a warning on the package logger, once per formatted message"""
    return log_once(logger or LOGGER, logging.WARNING, msg, *args)
