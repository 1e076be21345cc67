"""Structured logging — JSON formatter and setup."""

from apitoken.logging.formatter import JSONLogFormatter
from apitoken.logging.setup import configure_logging

__all__ = ["JSONLogFormatter", "configure_logging"]
