"""
YAML frontmatter parsing.

Frontmatter is a YAML mapping delimited by ``---`` lines at the very start
of a markdown file:

    ---
    keywords: [database, schema]
    ---

    # Database
"""

import re

import yaml

from memex_logging import get_logger


logger = get_logger("memex", component="frontmatter")

_FRONTMATTER = re.compile(r"^---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n(.*))?$", re.DOTALL)


def parse_yaml_frontmatter(content: str) -> tuple[dict, str]:
    """Split markdown content into frontmatter metadata and body.

    Args:
        content: Full markdown content, possibly starting with frontmatter.

    Returns:
        ``(metadata, body)``. Without frontmatter, or when the block is not
        a valid YAML mapping, returns ``({}, content)``.
    """
    match = _FRONTMATTER.match(content)
    if not match:
        return {}, content

    try:
        metadata = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        logger.warning("Failed to parse YAML frontmatter", error=str(e))
        return {}, content

    if not isinstance(metadata, dict):
        return {}, content

    return metadata, (match.group(2) or "").lstrip()
