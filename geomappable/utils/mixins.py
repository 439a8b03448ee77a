"""Utility mixin classes"""

__all__ = ['LoggingMixin']

import logging
from typing import Optional

from geomappable.utils.logging import warn_once


class LoggingMixin:  # pylint: disable=too-few-public-methods
    """
    Gives a class a logger named '<module>.<class>', which propagates to the
    geomappable package logger for classes defined inside the package.
    """
    logger: logging.Logger

    def __init__(self, logstr: Optional[str] = None):
        self.logger = self.get_logger(logstr)

    @classmethod
    def get_logger(cls, logstr: Optional[str] = None) -> logging.Logger:
        name = f'{cls.__module__}.{cls.__name__}'
        if cls.__module__ == 'builtins':
            name = cls.__name__

        return logging.getLogger(f'{name}.{logstr}' if logstr else name)

    def warn_once(self, msg: str, *args) -> bool:
        """Logs a warning on this object's logger, once per formatted message"""
        return warn_once(msg, *args, logger=self.logger)
