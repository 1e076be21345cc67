"""JSON log formatter for structured logging output."""

import json
import logging
from datetime import UTC, datetime

from apitoken.constants import DEFAULT_SERVICE_NAME


class JSONLogFormatter(logging.Formatter):
    """Emit log records as single-line JSON objects.

    Output format::

        {"timestamp": "...", "level": "WARNING", "service": "apitoken",
         "logger": "apitoken.service", "message": "...", "token_error": "integrity_mismatch"}
    """

    def __init__(self, service: str = DEFAULT_SERVICE_NAME) -> None:
        super().__init__()
        self._service = service

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "service": self._service,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Set by the codec and service on rejected tokens
        token_error = getattr(record, "token_error", None)
        if token_error:
            entry["token_error"] = token_error

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
