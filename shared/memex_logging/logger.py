"""
MemexLogger - Structured logging for memex components.

Wraps the standard library logger so callers can pass structured fields as
keyword arguments, and so context (session id, trace id) is attached to
every record automatically.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from .context import get_current_context
from .formatters import ConsoleFormatter, JsonFormatter


def _coerce_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.WARNING)


class MemexLogger:
    """Structured logger for memex components.

    Provides a logging interface that:
    - Writes human-readable lines to stderr (JSON under CI)
    - Optionally writes JSON lines to a rotating log file
    - Propagates context (session_id, trace_id) to all logs
    - Never writes to stdout, which the hook reserves for injected context

    Usage:
        from memex_logging import get_logger

        logger = get_logger("memex", component="enricher")
        logger.info("Loaded document", path="core/DATABASE.md", lines=40)
    """

    def __init__(
        self,
        name: str,
        level: int | str = logging.WARNING,
        component: str | None = None,
    ):
        """Initialize the logger.

        Args:
            name: Logger name (typically service name)
            level: Log level (default WARNING)
            component: Optional component within the service
        """
        self.name = name
        self.component = component
        logger_name = f"{name}.{component}" if component else name
        self._logger = logging.getLogger(logger_name)
        self._logger.setLevel(_coerce_level(level))
        self._logger.propagate = False

        self._environment = self._detect_environment()

    def _detect_environment(self) -> str:
        if os.environ.get("CI"):
            return "ci"
        if Path("/.dockerenv").exists():
            return "container"
        return "host"

    def _ensure_handlers(self) -> None:
        """Attach the stderr handler on first use."""
        if self._logger.handlers:
            return

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG)

        if self._environment == "ci":
            console_handler.setFormatter(
                JsonFormatter(
                    service=self.name,
                    component=self.component,
                    environment=self._environment,
                )
            )
        else:
            console_handler.setFormatter(ConsoleFormatter(service=self.name))

        self._logger.addHandler(console_handler)

    def set_level(self, level: int | str) -> None:
        """Change the threshold of this logger."""
        self._logger.setLevel(_coerce_level(level))

    def _get_extra(self, extra: dict[str, Any] | None = None) -> dict[str, Any]:
        result: dict[str, Any] = {}

        ctx = get_current_context()
        if ctx:
            if ctx.trace_id:
                result["trace_id"] = ctx.trace_id
            if ctx.span_id:
                result["span_id"] = ctx.span_id
            if ctx.session_id:
                result["session_id"] = ctx.session_id
            if ctx.extra:
                result.update(ctx.extra)

        if extra:
            result.update(extra)

        return result

    def _log(
        self,
        level: int,
        msg: str,
        *args: Any,
        exc_info: Any = None,
        **kwargs: Any,
    ) -> None:
        if not self._logger.isEnabledFor(level):
            return

        self._ensure_handlers()

        self._logger.log(
            level,
            msg,
            *args,
            exc_info=exc_info,
            extra=self._get_extra(kwargs),
        )

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a debug message."""
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log an info message."""
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a warning message."""
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, exc_info: Any = None, **kwargs: Any) -> None:
        """Log an error message."""
        self._log(logging.ERROR, msg, *args, exc_info=exc_info, **kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log an exception (includes stack trace)."""
        self._log(logging.ERROR, msg, *args, exc_info=True, **kwargs)

    def add_file_handler(
        self,
        log_file: str | Path,
        level: int = logging.DEBUG,
        max_bytes: int = 5 * 1024 * 1024,  # 5 MB
        backup_count: int = 3,
    ) -> None:
        """Add a rotating file handler with JSON formatting.

        Adding the same file twice is a no-op. A file that cannot be opened
        is reported on stderr and skipped; logging carries on without it.

        Args:
            log_file: Path to the log file
            level: Log level for file handler
            max_bytes: Max file size before rotation
            backup_count: Number of backup files to keep
        """
        log_file = Path(log_file).expanduser()

        for handler in self._logger.handlers:
            if isinstance(handler, RotatingFileHandler) and handler.baseFilename == os.path.abspath(log_file):
                return

        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
        except OSError as e:
            self.warning("Could not open log file", path=str(log_file), error=str(e))
            return

        file_handler.setLevel(level)
        file_handler.setFormatter(
            JsonFormatter(
                service=self.name,
                component=self.component,
                environment=self._environment,
            )
        )

        # The stderr handler must still exist once a file handler is present
        self._ensure_handlers()
        self._logger.addHandler(file_handler)

    def with_context(self, **kwargs: Any) -> "BoundLogger":
        """Create a bound logger with additional context.

        Usage:
            bound = logger.with_context(path="core/DATABASE.md")
            bound.info("Reading")  # Includes path in all logs
        """
        return BoundLogger(self, kwargs)


class BoundLogger:
    """Logger bound to specific context fields."""

    def __init__(self, parent: MemexLogger, bound_fields: dict[str, Any]):
        self._parent = parent
        self._bound_fields = bound_fields

    def _merge_kwargs(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        result = dict(self._bound_fields)
        result.update(kwargs)
        return result

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._parent.debug(msg, *args, **self._merge_kwargs(kwargs))

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._parent.info(msg, *args, **self._merge_kwargs(kwargs))

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._parent.warning(msg, *args, **self._merge_kwargs(kwargs))

    def error(self, msg: str, *args: Any, exc_info: Any = None, **kwargs: Any) -> None:
        self._parent.error(msg, *args, exc_info=exc_info, **self._merge_kwargs(kwargs))

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._parent.exception(msg, *args, **self._merge_kwargs(kwargs))

    def with_context(self, **kwargs: Any) -> "BoundLogger":
        """Create a new bound logger with additional context."""
        merged = dict(self._bound_fields)
        merged.update(kwargs)
        return BoundLogger(self._parent, merged)


# Logger registry for singleton behavior
_loggers: dict[str, MemexLogger] = {}

# Settings applied by configure_logging(), inherited by loggers created later
_defaults: dict[str, Any] = {"level": None, "log_file": None}


def get_logger(
    name: str,
    level: int | str | None = None,
    component: str | None = None,
) -> MemexLogger:
    """Get or create a logger by name.

    Loggers are cached by name and component. Without an explicit level a
    new logger uses the level set by configure_logging(), then
    ``MEMEX_LOG_LEVEL``, then WARNING. Passing a level updates a cached
    logger.

    Args:
        name: Logger name (typically "memex")
        level: Log level
        component: Optional component within the service

    Returns:
        MemexLogger instance
    """
    key = f"{name}:{component or ''}"

    if key not in _loggers:
        initial = level
        if initial is None:
            initial = _defaults["level"] or os.environ.get("MEMEX_LOG_LEVEL", "WARNING")
        logger = MemexLogger(name, initial, component)
        if _defaults["log_file"]:
            logger.add_file_handler(_defaults["log_file"])
        _loggers[key] = logger
    elif level is not None:
        _loggers[key].set_level(level)

    return _loggers[key]


def configure_logging(
    level: int | str = logging.WARNING,
    log_file: str | Path | None = None,
) -> None:
    """Apply a level (and optional JSON log file) to every memex logger.

    Loggers created afterwards pick up the same settings.

    Args:
        level: Threshold for all memex loggers
        log_file: Optional path for a rotating JSON log file
    """
    _defaults["level"] = _coerce_level(level)
    _defaults["log_file"] = log_file

    for logger in _loggers.values():
        logger.set_level(level)
        if log_file:
            logger.add_file_handler(log_file)


def reset_logging() -> None:
    """Undo configure_logging(): close handlers and drop back to WARNING.

    Cached loggers stay registered, since modules hold on to them.
    """
    _defaults["level"] = None
    _defaults["log_file"] = None
    for logger in _loggers.values():
        for handler in logger._logger.handlers[:]:
            logger._logger.removeHandler(handler)
            handler.close()
        logger.set_level(logging.WARNING)
