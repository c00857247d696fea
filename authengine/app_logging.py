"""Logging setup for processes that embed the engine."""

import logging
from typing import Optional

from pythonjsonlogger import jsonlogger

from . import config


def setup_logger(level: Optional[str] = None, json: Optional[bool] = None) \
        -> logging.Logger:
    """Attach a single stream handler to the root logger."""
    level = level or config.LOG_LEVEL
    json = config.LOG_JSON if json is None else json
    logHandler = logging.StreamHandler()
    if json:
        formatter: logging.Formatter = jsonlogger.JsonFormatter(
            '%(asctime)s %(levelname)s %(name)s %(message)s',
            rename_fields={'levelname': 'level', 'asctime': 'timestamp'}
        )
    else:
        formatter = logging.Formatter(
            '%(asctime)s %(levelname)s %(name)s %(message)s'
        )
    logHandler.setFormatter(formatter)
    logger = logging.getLogger()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.addHandler(logHandler)
    logger.setLevel(level.upper())
    return logger
