"""
Structured logging for upload diagnostics.
Errors and warnings go to stderr, progress to stdout.
"""
import sys
from datetime import datetime
from enum import Enum
from typing import Optional


class LogLevel(Enum):
    """Log severity levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"


_LEVEL_ORDER = {
    LogLevel.DEBUG: 0,
    LogLevel.INFO: 1,
    LogLevel.SUCCESS: 1,
    LogLevel.WARNING: 2,
    LogLevel.ERROR: 3,
}


class StructuredLogger:
    """
    Level-filtered logger producing lines like::

        [2026-01-01 12:00:00] [ERROR] mysql_uploader: write failed (path=/tmp/x.csv)
    """

    def __init__(
        self,
        min_level: LogLevel = LogLevel.INFO,
        show_timestamp: bool = True,
        name: str = "mysql_uploader",
    ):
        self.min_level = min_level
        self.show_timestamp = show_timestamp
        self.name = name

    def _should_log(self, level: LogLevel) -> bool:
        """Check if message passes the minimum level."""
        return _LEVEL_ORDER[level] >= _LEVEL_ORDER[self.min_level]

    def _format_message(self, level: LogLevel, message: str, details: Optional[dict] = None) -> str:
        """Format log line with timestamp, level, name prefix and details."""
        parts = []

        if self.show_timestamp:
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            parts.append(f"[{timestamp}]")

        parts.append(f"[{level.value}]")
        parts.append(f"{self.name}: {message}" if self.name else message)

        if details:
            detail_strs = [f"{k}={v}" for k, v in details.items()]
            parts.append(f"({', '.join(detail_strs)})")

        return " ".join(parts)

    def _write(self, level: LogLevel, message: str, details: Optional[dict] = None):
        """Write log line to stderr (errors, warnings) or stdout."""
        if not self._should_log(level):
            return

        formatted = self._format_message(level, message, details)

        # Streams are looked up per call so redirected stdio is honoured
        stream = sys.stderr if level in (LogLevel.ERROR, LogLevel.WARNING) else sys.stdout
        stream.write(formatted + "\n")
        stream.flush()

    def debug(self, message: str, **details):
        """Log debug message."""
        self._write(LogLevel.DEBUG, message, details or None)

    def info(self, message: str, **details):
        """Log info message."""
        self._write(LogLevel.INFO, message, details or None)

    def success(self, message: str, **details):
        """Log success message."""
        self._write(LogLevel.SUCCESS, message, details or None)

    def warning(self, message: str, **details):
        """Log warning message."""
        self._write(LogLevel.WARNING, message, details or None)

    def error(self, message: str, **details):
        """Log error message."""
        self._write(LogLevel.ERROR, message, details or None)


_default_logger: Optional[StructuredLogger] = None


def get_logger() -> StructuredLogger:
    """Get or create default logger instance."""
    global _default_logger
    if _default_logger is None:
        _default_logger = StructuredLogger()
    return _default_logger


def set_logger(logger: StructuredLogger):
    """Set custom logger instance."""
    global _default_logger
    _default_logger = logger
