"""
Log formatters for memex_logging.

Provides a JSON formatter for log files and CI, and a compact console
formatter for stderr.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any


# Attributes every LogRecord carries; anything else came in via ``extra``
_STANDARD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "message",
        "taskName",
        "trace_id",
        "span_id",
        "session_id",
    }
)


class JsonFormatter(logging.Formatter):
    """One JSON object per line.

    Output format:
        {
            "timestamp": "2025-11-28T12:34:56.789Z",
            "severity": "INFO",
            "message": "Loaded document",
            "service": "memex",
            "component": "enricher",
            "session_id": "...",
            "extra": {"path": "core/DATABASE.md"}
        }
    """

    def __init__(
        self,
        service: str = "memex",
        component: str | None = None,
        environment: str | None = None,
        include_extra: bool = True,
    ):
        """Initialize the JSON formatter.

        Args:
            service: Service name for all logs
            component: Optional component within the service
            environment: Environment name (e.g., "host", "container", "ci")
            include_extra: Whether to include extra fields from log records
        """
        super().__init__()
        self.service = service
        self.component = component
        self.environment = environment
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self._format_timestamp(record),
            "severity": record.levelname,
            "message": record.getMessage(),
            "service": self.service,
        }

        if self.component:
            log_entry["component"] = self.component

        if self.environment:
            log_entry["environment"] = self.environment

        if record.name and record.name != self.service:
            log_entry["logger"] = record.name

        if getattr(record, "trace_id", None):
            log_entry["traceId"] = record.trace_id
        if getattr(record, "span_id", None):
            log_entry["spanId"] = record.span_id
        if getattr(record, "session_id", None):
            log_entry["session_id"] = record.session_id

        if self.include_extra:
            extra = self._extract_extra(record)
            if extra:
                log_entry["extra"] = extra

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        if record.levelno >= logging.WARNING:
            log_entry["sourceLocation"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(log_entry, default=str, ensure_ascii=False)

    def _format_timestamp(self, record: logging.LogRecord) -> str:
        """Format timestamp in ISO 8601 format with UTC timezone."""
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{int(dt.microsecond / 1000):03d}Z"

    def _extract_extra(self, record: logging.LogRecord) -> dict[str, Any]:
        return {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        }


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for stderr.

    Output format:
        2025-11-28 12:34:56 [WARNING ] memex: Skipping malformed rule (index=3)
    """

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(
        self,
        service: str = "memex",
        use_colors: bool | None = None,
        show_extra: bool = True,
    ):
        """Initialize the console formatter.

        Args:
            service: Service name for logs
            use_colors: Whether to use ANSI colors (auto-detected if None)
            show_extra: Whether to append structured fields as key=value pairs
        """
        super().__init__()
        self.service = service
        self.use_colors = use_colors if use_colors is not None else self._detect_color_support()
        self.show_extra = show_extra

    def _detect_color_support(self) -> bool:
        if not hasattr(sys.stderr, "isatty") or not sys.stderr.isatty():
            return False
        if os.environ.get("NO_COLOR"):
            return False
        return True

    def format(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created)
        timestamp = dt.strftime("%Y-%m-%d %H:%M:%S")

        level = record.levelname
        if self.use_colors:
            color = self.COLORS.get(level, "")
            level = f"{color}{level:8}{self.RESET}"
        else:
            level = f"{level:8}"

        parts = [f"{timestamp} [{level}] {self.service}"]

        # Sub-loggers show their last dotted component
        if record.name and record.name != self.service and "." in record.name:
            parts.append(f".{record.name.split('.')[-1]}")

        parts.append(f": {record.getMessage()}")

        if self.show_extra:
            fields = {
                key: value
                for key, value in record.__dict__.items()
                if key not in _STANDARD_ATTRS and not key.startswith("_")
            }
            if getattr(record, "session_id", None):
                fields = {"session": record.session_id, **fields}
            if fields:
                field_str = " ".join(f"{key}={value}" for key, value in fields.items())
                if self.use_colors:
                    field_str = f"\033[90m({field_str})\033[0m"
                else:
                    field_str = f"({field_str})"
                parts.append(f" {field_str}")

        message = "".join(parts)

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message
