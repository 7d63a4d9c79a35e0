"""
Markdown section parsing and extraction.

A section starts at a heading line and runs up to (not including) the next
heading of the same or a shallower level, or to the end of the document.
Deeper headings are part of the section's content.

Anchors are slugs derived from heading text:

    >>> slugify("Queries & Indexes")
    'queries--indexes'
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass, field


HEADING_PATTERN = re.compile(r"^(#{1,4})\s+(\S.*?)\s*$")
FENCE_PATTERN = re.compile(r"^\s{0,3}(`{3,}|~{3,})(.*)$")
_SLUG_STRIP = re.compile(r"[^a-z0-9-]")


def slugify(text: str) -> str:
    """Derive an anchor slug from heading text.

    Lowercases, turns spaces into hyphens, then drops every character that
    is not a lowercase letter, digit or hyphen.
    """
    return _SLUG_STRIP.sub("", text.lower().replace(" ", "-"))


def section_truncation_marker(max_lines: int) -> str:
    return f"<!-- memex: section truncated at {max_lines} lines -->"


@dataclass(frozen=True)
class Section:
    """One heading-delimited span of a document.

    Attributes:
        level: Heading depth (1 for ``#``)
        title: Heading text without the leading hashes
        anchor: Slug of the title
        start: Index of the heading line
        end: Index one past the last line of the section
    """

    level: int
    title: str
    anchor: str
    start: int
    end: int

    @property
    def line_count(self) -> int:
        return self.end - self.start

    def matches(self, anchor: str) -> bool:
        """Exact slug match, or the anchor's words appear in the title."""
        if self.anchor == anchor:
            return True
        words = anchor.replace("-", " ")
        return bool(words) and words in self.title.lower()


@dataclass
class SectionExtract:
    """Result of extracting one section.

    Attributes:
        lines: Emitted lines (empty when not found)
        found: Whether a heading matched the anchor
        truncated: Whether the section was cut at the line cap
        section: The matched section, if any
    """

    lines: list[str] = field(default_factory=list)
    found: bool = False
    truncated: bool = False
    section: Section | None = None


def _headings(lines: Sequence[str]) -> list[tuple[int, int, str]]:
    """(line index, level, title) for every heading outside code fences."""
    headings = []
    fence: str | None = None

    for index, line in enumerate(lines):
        fence_match = FENCE_PATTERN.match(line)
        if fence is None:
            if fence_match:
                fence = fence_match.group(1)
                continue
        else:
            # Closing fence: same character, at least as long, no info string
            if (
                fence_match
                and fence_match.group(1)[0] == fence[0]
                and len(fence_match.group(1)) >= len(fence)
                and not fence_match.group(2).strip()
            ):
                fence = None
            continue

        match = HEADING_PATTERN.match(line)
        if match:
            headings.append((index, len(match.group(1)), match.group(2)))

    return headings


def parse_sections(lines: Sequence[str]) -> list[Section]:
    """Split a document into sections, in document order.

    Sections nest: a ``##`` section's span includes any ``###`` sections
    below it, and those appear as their own entries as well.
    """
    headings = _headings(lines)
    sections = []

    for position, (start, level, title) in enumerate(headings):
        end = len(lines)
        for next_start, next_level, _ in headings[position + 1 :]:
            if next_level <= level:
                end = next_start
                break
        sections.append(Section(level=level, title=title, anchor=slugify(title), start=start, end=end))

    return sections


def normalize_anchor(anchor: str) -> str:
    return anchor.strip().lstrip("#").strip().lower()


def find_section(sections: Sequence[Section], anchor: str) -> Section | None:
    """Return the first section in document order that matches ``anchor``."""
    anchor = normalize_anchor(anchor)
    if not anchor:
        return None
    for section in sections:
        if section.matches(anchor):
            return section
    return None


def extract_section(lines: Sequence[str], anchor: str, max_lines: int) -> SectionExtract:
    """Pull the lines of one section out of a document.

    Args:
        lines: Document lines
        anchor: Section slug to look for
        max_lines: Line cap; longer sections are cut and get one marker line

    Returns:
        SectionExtract. A missing anchor is reported with ``found=False``,
        never raised.
    """
    section = find_section(parse_sections(lines), anchor)
    if section is None:
        return SectionExtract()

    body = list(lines[section.start : section.end])
    if len(body) > max_lines:
        return SectionExtract(
            lines=body[:max_lines] + [section_truncation_marker(max_lines)],
            found=True,
            truncated=True,
            section=section,
        )

    return SectionExtract(lines=body, found=True, section=section)
