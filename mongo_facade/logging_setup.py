"""Structured logging for applications embedding mongo_facade.

Library modules only create loggers via logging.getLogger(__name__).
Applications that want single-line JSON output (handy for log shippers
such as CloudWatch or Loki) call configure_logging() once at startup.
"""

from __future__ import annotations

import json
import logging


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        """Serialize the log record to a JSON string."""
        payload = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """Install the JSON formatter on the root logger.

    Does nothing beyond setting the level if the root logger already has
    handlers, so repeated calls never duplicate output.

    Returns:
        The root logger.
    """
    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        root.addHandler(handler)
    return root
