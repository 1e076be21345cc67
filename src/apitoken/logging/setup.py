"""Structured logging configuration."""

import logging
import sys

from apitoken.constants import DEFAULT_SERVICE_NAME
from apitoken.logging.formatter import JSONLogFormatter
from apitoken.settings import get_settings


def configure_logging(service: str = DEFAULT_SERVICE_NAME, level: str | int | None = None) -> None:
    """Set up structured JSON logging on the root logger.

    *level* defaults to the ``LOG_LEVEL`` setting.
    """
    root = logging.getLogger()
    root.setLevel(get_settings().LOG_LEVEL if level is None else level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONLogFormatter(service=service))
    root.addHandler(handler)
