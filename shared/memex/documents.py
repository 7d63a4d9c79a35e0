"""
Read-only access to markdown documents under the documentation root.
"""

from dataclasses import dataclass, field
from pathlib import Path

from memex_logging import get_logger


logger = get_logger("memex", component="documents")


def split_lines(content: str) -> list[str]:
    """Split on ``\\n`` only, dropping one trailing ``\\r`` per line.

    Unlike ``str.splitlines()``, form feeds and Unicode line separators stay
    inside their line, so emitted lines are verbatim.
    """
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


@dataclass
class Document:
    """A markdown document loaded from the documentation root.

    Attributes:
        path: Path relative to the documentation root
        content: Full text of the file
    """

    path: str
    content: str
    lines: list[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.lines = split_lines(self.content)

    @property
    def line_count(self) -> int:
        return len(self.lines)


class DocumentStore:
    """Reads documents relative to a root directory.

    Missing, unreadable, non-UTF-8, and out-of-root files all read as None;
    the store never raises for a bad path.
    """

    def __init__(self, root: Path | str):
        self.root = Path(root).expanduser().resolve()
        self._cache: dict[str, Document | None] = {}

    def _resolve(self, path: str) -> Path | None:
        candidate = (self.root / path).resolve()
        if candidate != self.root and self.root not in candidate.parents:
            return None
        return candidate

    def exists(self, path: str) -> bool:
        """Return True if ``path`` names a regular file inside the root."""
        resolved = self._resolve(path)
        return resolved is not None and resolved.is_file()

    def read(self, path: str) -> Document | None:
        """Load a document.

        Args:
            path: Path relative to the documentation root

        Returns:
            The Document, or None if it cannot be read
        """
        if path in self._cache:
            return self._cache[path]

        document = None
        resolved = self._resolve(path)
        if resolved is None:
            logger.warning("Refusing document outside docs root", path=path)
        elif resolved.is_file():
            try:
                # newline="" keeps line endings untranslated
                with open(resolved, encoding="utf-8", newline="") as f:
                    document = Document(path=path, content=f.read())
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Could not read document", path=path, error=str(e))
        else:
            logger.debug("Document not found", path=path)

        self._cache[path] = document
        return document

    def iter_markdown(self) -> list[str]:
        """Relative paths of every ``.md`` file under the root, sorted."""
        if not self.root.is_dir():
            return []
        return sorted(p.relative_to(self.root).as_posix() for p in self.root.rglob("*.md") if p.is_file())
