"""
Session dedup store.

Remembers which document references were already injected during an
interactive session so that later prompts in the same session do not inject
them again. Records only grow; clearing is left to session-end housekeeping.

The file-backed store takes no lock between the membership check and the
append. Two hook processes racing on the same reference may both inject it;
at-least-once injection is acceptable here.
"""

import os
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from memex_logging import get_logger

from .references import DocumentReference


logger = get_logger("memex", component="session")

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def resolve_session_id(payload: dict[str, Any] | None = None) -> str:
    """Work out which interactive session this invocation belongs to.

    Order: the hook payload's ``session_id``, then ``MEMEX_SESSION_ID``,
    then the OS session of the parent process (the assistant), which is
    shared by every hook it spawns and differs between terminals.
    """
    if payload:
        session_id = payload.get("session_id")
        if isinstance(session_id, str) and session_id.strip():
            return session_id.strip()

    env_session = os.environ.get("MEMEX_SESSION_ID", "").strip()
    if env_session:
        return env_session

    parent = os.getppid()
    try:
        return f"sid-{os.getsid(parent)}"
    except (AttributeError, OSError):
        return f"ppid-{parent}"


class SessionStore(ABC):
    """Per-session record of injected document references."""

    @abstractmethod
    def loaded(self, session_id: str) -> set[str]:
        """Canonical keys already injected in the session."""
        ...

    @abstractmethod
    def mark_loaded(self, session_id: str, ref: DocumentReference) -> None:
        """Record that ``ref`` was injected in the session."""
        ...

    @abstractmethod
    def clear(self, session_id: str) -> None:
        """Forget everything recorded for the session."""
        ...

    def is_loaded(self, session_id: str, ref: DocumentReference) -> bool:
        return ref.key in self.loaded(session_id)


class MemorySessionStore(SessionStore):
    """In-process store, for tests and single-process use."""

    def __init__(self) -> None:
        self._records: dict[str, list[str]] = {}

    def loaded(self, session_id: str) -> set[str]:
        return set(self._records.get(session_id, []))

    def mark_loaded(self, session_id: str, ref: DocumentReference) -> None:
        self._records.setdefault(session_id, []).append(ref.key)

    def clear(self, session_id: str) -> None:
        self._records.pop(session_id, None)


class FileSessionStore(SessionStore):
    """One append-only text file per session, one key per line.

    Reads that fail count as "nothing loaded"; writes that fail are logged
    and dropped. Either way the hook keeps working, at worst re-injecting a
    document.
    """

    SUFFIX = ".loaded"

    def __init__(self, directory: Path | str):
        self.directory = Path(directory).expanduser()

    def record_path(self, session_id: str) -> Path:
        safe_id = _UNSAFE_CHARS.sub("_", session_id) or "default"
        return self.directory / f"{safe_id}{self.SUFFIX}"

    def loaded(self, session_id: str) -> set[str]:
        path = self.record_path(session_id)
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return set()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read session record", path=str(path), error=str(e))
            return set()
        return {line.strip() for line in content.splitlines() if line.strip()}

    def mark_loaded(self, session_id: str, ref: DocumentReference) -> None:
        path = self.record_path(session_id)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(path, "a", encoding="utf-8") as f:
                f.write(f"{ref.key}\n")
        except OSError as e:
            logger.warning("Could not update session record", path=str(path), error=str(e))

    def clear(self, session_id: str) -> None:
        path = self.record_path(session_id)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not clear session record", path=str(path), error=str(e))
