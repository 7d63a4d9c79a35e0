"""
Output envelope for injected documentation.

The calling assistant reads this text verbatim, so the exact line layout is
part of the contract:

    <memex-context>
    <document path="core/DATABASE.md" anchor="queries">
    ## Queries
    ...
    </document>
    <!-- memex: token budget reached (~8000 tokens), skipped remaining documents -->
    <!-- memex: loaded 1 document(s), ~60 tokens -->
    </memex-context>
"""

from dataclasses import dataclass, field

from .references import DocumentReference


ENVELOPE_OPEN = "<memex-context>"
ENVELOPE_CLOSE = "</memex-context>"
DOCUMENT_CLOSE = "</document>"


def _escape_attr(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;").replace("<", "&lt;").replace(">", "&gt;")


def file_truncation_marker(shown: int, total: int) -> str:
    return f"<!-- memex: truncated, showing first {shown} of {total} lines -->"


def section_not_found_marker(anchor: str) -> str:
    return f"<!-- memex: section '#{anchor}' not found, showing summary -->"


def budget_marker(ceiling: int) -> str:
    return f"<!-- memex: token budget reached (~{ceiling} tokens), skipped remaining documents -->"


def summary_line(document_count: int, tokens: int) -> str:
    return f"<!-- memex: loaded {document_count} document(s), ~{tokens} tokens -->"


@dataclass
class DocumentBlock:
    """One injected document (or section) and its emitted lines."""

    reference: DocumentReference
    lines: list[str] = field(default_factory=list)

    def render(self) -> list[str]:
        attrs = f'path="{_escape_attr(self.reference.path)}"'
        if self.reference.anchor:
            attrs += f' anchor="{_escape_attr(self.reference.anchor)}"'
        return [f"<document {attrs}>", *self.lines, DOCUMENT_CLOSE]


class ContextEnvelope:
    """Collects document blocks and renders the final text.

    An envelope without blocks renders as the empty string; the caller
    must never see an empty ``<memex-context>`` element.
    """

    def __init__(self) -> None:
        self.blocks: list[DocumentBlock] = []
        self.budget_ceiling: int | None = None

    def add(self, reference: DocumentReference, lines: list[str]) -> DocumentBlock:
        block = DocumentBlock(reference=reference, lines=list(lines))
        self.blocks.append(block)
        return block

    def mark_budget_reached(self, ceiling: int) -> None:
        """Record that loading stopped at the budget. Idempotent."""
        self.budget_ceiling = ceiling

    def __bool__(self) -> bool:
        return bool(self.blocks)

    def render(self, tokens_used: int) -> str:
        """Render the envelope, or "" when nothing was added."""
        if not self.blocks:
            return ""

        lines = [ENVELOPE_OPEN]
        for block in self.blocks:
            lines.extend(block.render())
        if self.budget_ceiling is not None:
            lines.append(budget_marker(self.budget_ceiling))
        lines.append(summary_line(len(self.blocks), tokens_used))
        lines.append(ENVELOPE_CLOSE)
        return "\n".join(lines) + "\n"
