"""
Document references.

A reference names either a whole markdown file or one heading-delimited
section of it. The canonical string form (``path`` or ``path#anchor``) is
what gets written to the session dedup record.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class DocumentReference:
    """A whole document, or one section of it.

    Attributes:
        path: Path relative to the documentation root
        anchor: Section slug, or None for the whole file
    """

    path: str
    anchor: str | None = None

    @property
    def key(self) -> str:
        """Canonical string form used for dedup."""
        if self.anchor:
            return f"{self.path}#{self.anchor}"
        return self.path

    @property
    def is_section(self) -> bool:
        return bool(self.anchor)

    @classmethod
    def parse(cls, text: str) -> "DocumentReference":
        """Parse ``path`` or ``path#anchor``.

        Leading ``./`` and ``/`` are dropped so the path is always relative
        to the documentation root. ``path#`` means the whole file.

        Raises:
            ValueError: If no path is present
        """
        path, _, anchor = text.strip().partition("#")
        path = cls._normalize_path(path)
        if not path:
            raise ValueError(f"Document reference has no path: {text!r}")
        return cls(path=path, anchor=anchor.strip() or None)

    @staticmethod
    def _normalize_path(path: str) -> str:
        path = path.strip().replace("\\", "/")
        while path.startswith("./"):
            path = path[2:]
        return path.lstrip("/")

    def __str__(self) -> str:
        return self.key
