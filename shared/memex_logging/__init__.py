"""
memex_logging - Structured logging library for memex components.

Usage:
    from memex_logging import get_logger, ContextScope

    logger = get_logger("memex", component="enricher")

    # Simple logging with structured fields
    logger.info("Loaded document", path="core/DATABASE.md", lines=40)

    # With context scope (all logs in scope include context)
    with ContextScope(session_id="abc123"):
        logger.info("Matching prompt")

    # Bound logger (all logs include bound fields)
    bound = logger.with_context(path="core/DATABASE.md")
    bound.warning("Section not found", anchor="queries")

stdout is never written to: the context-enricher hook uses it as the
channel for injected documentation.
"""

from .context import (
    ContextScope,
    LogContext,
    context_from_env,
    get_current_context,
)
from .formatters import ConsoleFormatter, JsonFormatter
from .logger import BoundLogger, MemexLogger, configure_logging, get_logger, reset_logging


__all__ = [
    "BoundLogger",
    "ConsoleFormatter",
    "ContextScope",
    "JsonFormatter",
    "LogContext",
    "MemexLogger",
    "configure_logging",
    "context_from_env",
    "get_current_context",
    "get_logger",
    "reset_logging",
]

__version__ = "0.3.0"
