#!/usr/bin/env python3
"""
Claude Code UserPromptSubmit hook: inject matching documentation.

Usage in .claude/settings.json:
{
  "hooks": {
    "UserPromptSubmit": [
      {
        "hooks": [
          {"type": "command", "command": "memex-context-enricher"}
        ]
      }
    ]
  }
}

Hook Input Format (JSON via stdin):
{
    "session_id": "...",
    "prompt": "what's the database schema?",
    "cwd": "/path/to/project"
}

Whatever this prints on stdout is added to the conversation, so stdout
carries only a complete envelope or nothing. Diagnostics go to stderr and
the optional log file. The exit status is always 0: this hook must never
block or fail the user's prompt.
"""

import json
import os
import sys
from typing import Any, TextIO

from memex_config import EnricherConfig
from memex_logging import ContextScope, configure_logging, context_from_env, get_logger

from .enricher import ContextEnricher
from .session_store import resolve_session_id


logger = get_logger("memex", component="hook")


def read_payload(stream: TextIO) -> dict[str, Any] | None:
    """Decode the hook payload; None when it is not a JSON object."""
    try:
        payload = json.loads(stream.read())
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Malformed hook payload", error=str(e))
        return None

    if not isinstance(payload, dict):
        logger.warning("Hook payload is not an object", type=type(payload).__name__)
        return None

    return payload


def load_config(payload: dict[str, Any]) -> EnricherConfig:
    """Config for the project the prompt was submitted in."""
    project_root = None
    if not os.environ.get("CLAUDE_PROJECT_DIR") and isinstance(payload.get("cwd"), str):
        project_root = payload["cwd"]
    return EnricherConfig.from_env(project_root)


def write_output(stream: TextIO, text: str) -> None:
    """Write ``text`` as UTF-8 whatever the stream's own encoding is."""
    buffer = getattr(stream, "buffer", None)
    if buffer is None:
        stream.write(text)
        stream.flush()
        return
    stream.flush()
    buffer.write(text.encode("utf-8"))
    buffer.flush()


def handle_prompt(payload: dict[str, Any], stdout: TextIO) -> str:
    """Inject documentation for one UserPromptSubmit payload.

    The session record is only updated once the envelope has been written,
    so a failed write leaves the documents eligible for the next prompt.

    Returns:
        The text written ("" when nothing matched)
    """
    prompt = payload.get("prompt")
    if not isinstance(prompt, str) or not prompt.strip():
        return ""

    config = load_config(payload)
    configure_logging(config.log_level, config.log_file)

    session_id = resolve_session_id(payload)
    enricher = ContextEnricher(config)
    result = enricher.enrich(prompt, session_id, record=False)
    if result.text:
        write_output(stdout, result.text)
        enricher.record_loaded(session_id, result.loaded)
    return result.text


def run(stdin: TextIO | None = None, stdout: TextIO | None = None) -> int:
    """Hook body. Always returns 0."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    env_context = context_from_env()
    with ContextScope(trace_id=env_context.trace_id, session_id=env_context.session_id):
        try:
            payload = read_payload(stdin)
            if payload is not None:
                handle_prompt(payload, stdout)
        except Exception:
            # Never let an internal failure reach the host
            logger.exception("Context enrichment failed")
    return 0


def main() -> None:
    """Main entry point for the hook."""
    sys.exit(run())


if __name__ == "__main__":
    main()
