"""
Context management for memex_logging.

Provides correlation IDs so every log line written during one hook
invocation can be tied back to the prompt and the session it served.
"""

import os
import secrets
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any


_current_context: ContextVar["LogContext | None"] = ContextVar("memex_log_context", default=None)


@dataclass
class LogContext:
    """Context for log correlation.

    Attributes:
        trace_id: Invocation id (32 hex chars)
        span_id: Step id within the invocation (16 hex chars)
        session_id: Interactive session the invocation belongs to
        extra: Additional context fields to include in logs
    """

    trace_id: str | None = None
    span_id: str | None = None
    session_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.trace_id is None:
            self.trace_id = secrets.token_hex(16)
        if self.span_id is None:
            self.span_id = secrets.token_hex(8)


def get_current_context() -> LogContext | None:
    """Get the current logging context."""
    return _current_context.get()


class ContextScope:
    """Context manager for scoped logging context.

    Usage:
        with ContextScope(session_id="abc123"):
            logger.info("Matching prompt")
            # All logs in this scope include the session id
    """

    def __init__(
        self,
        trace_id: str | None = None,
        span_id: str | None = None,
        session_id: str | None = None,
        **extra: Any,
    ):
        self._trace_id = trace_id
        self._span_id = span_id
        self._session_id = session_id
        self._extra = extra
        self._previous_context: LogContext | None = None
        self._token: Any = None

    def __enter__(self) -> LogContext:
        self._previous_context = get_current_context()

        # Nested scopes share the parent's trace
        trace_id = self._trace_id
        if trace_id is None and self._previous_context:
            trace_id = self._previous_context.trace_id

        session_id = self._session_id
        if session_id is None and self._previous_context:
            session_id = self._previous_context.session_id

        new_context = LogContext(
            trace_id=trace_id,
            span_id=self._span_id,
            session_id=session_id,
            extra=self._extra,
        )

        self._token = _current_context.set(new_context)
        return new_context

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        _current_context.reset(self._token)


def context_from_env() -> LogContext:
    """Create a context from environment variables.

    Looks for:
        - MEMEX_TRACE_ID: Trace ID
        - MEMEX_SESSION_ID: Session ID
    """
    return LogContext(
        trace_id=os.environ.get("MEMEX_TRACE_ID") or None,
        session_id=os.environ.get("MEMEX_SESSION_ID") or None,
    )
