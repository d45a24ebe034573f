"""
Structured logger implementation.

Formats log records as single-line JSON documents carrying a persistent
context (for example the request path or collection being searched).
"""

import json
import logging
import sys
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, TextIO


class LogLevel(Enum):
    """Standard log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def numeric(self) -> int:
        return getattr(logging, self.value)

    @classmethod
    def parse(cls, value: Optional[str], default: "LogLevel" = None) -> "LogLevel":
        """Parse a level name, falling back to ``default`` (INFO)."""
        try:
            return cls(str(value).upper())
        except ValueError:
            return default or cls.INFO


class StructuredLogger:
    """
    Structured logger.

    Wraps a stdlib logger and emits JSON entries with timestamp, level,
    logger name, message and merged context data.
    """

    def __init__(
        self,
        name: str,
        level: LogLevel = LogLevel.INFO,
        output: TextIO = sys.stdout
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Initial log level
            output: Output stream for logs
        """
        self.name = name
        self._level = level
        self._context: Dict[str, Any] = {}

        self._logger = logging.getLogger(name)
        self._logger.setLevel(level.numeric)
        self._logger.propagate = False

        # Reconfiguring the same name must not stack handlers.
        for existing in list(self._logger.handlers):
            if getattr(existing, "_structured", False):
                self._logger.removeHandler(existing)

        handler = logging.StreamHandler(output)
        handler.setFormatter(logging.Formatter('%(message)s'))
        handler._structured = True
        self._logger.addHandler(handler)

    def _log(
        self,
        level: LogLevel,
        message: str,
        **kwargs: Any
    ) -> None:
        if level.numeric < self._level.numeric:
            return

        log_entry = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": level.value,
            "logger": self.name,
            "message": message,
            "context": {**self._context, **kwargs}
        }

        self._logger.log(level.numeric, json.dumps(log_entry, default=str))

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a debug message."""
        self._log(LogLevel.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log an info message."""
        self._log(LogLevel.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning message."""
        self._log(LogLevel.WARNING, message, **kwargs)

    def add_context(self, **kwargs: Any) -> None:
        """Add context data."""
        self._context.update(kwargs)


def configure_logging(
    name: str = "solr_search",
    level: LogLevel = LogLevel.INFO,
    output: TextIO = sys.stdout
) -> StructuredLogger:
    """
    Configure and return a StructuredLogger instance.

    Args:
        name: Logger name
        level: Logging level
        output: Output stream for logs

    Returns:
        StructuredLogger: Configured logger instance
    """
    return StructuredLogger(name=name, level=level, output=output)
