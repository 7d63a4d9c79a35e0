"""
Keyword rule table and prompt matching.

A rule maps a set of keywords to one document reference. Matching is plain
case-insensitive substring search over the whole prompt: it is not
word-bounded, so ``api`` matches inside ``rapid``. Rules are tested in
declaration order and every rule is tested; the first rule to produce a
reference decides its position in the result.

Rule file format (YAML):

    rules:
      - keywords: [database, schema, migration]
        target: core/DATABASE.md
      - keywords: [query, queries]
        target: core/DATABASE.md#queries
      - keywords: auth
        target: {path: core/SECURITY.md, anchor: authentication}
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from memex_config import ValidationResult
from memex_logging import get_logger

from .documents import DocumentStore
from .frontmatter import parse_yaml_frontmatter
from .references import DocumentReference
from .sections import find_section, parse_sections


logger = get_logger("memex", component="rules")


@dataclass(frozen=True)
class MatchRule:
    """Keywords that pull in one document reference."""

    keywords: frozenset[str]
    target: DocumentReference

    @classmethod
    def create(cls, keywords: Iterable[str], target: DocumentReference | str) -> "MatchRule":
        """Build a rule, lowercasing keywords and dropping blank ones."""
        if isinstance(target, str):
            target = DocumentReference.parse(target)
        cleaned = frozenset(k.strip().lower() for k in keywords if k and k.strip())
        return cls(keywords=cleaned, target=target)

    def matches(self, prompt_lower: str) -> bool:
        return any(keyword in prompt_lower for keyword in self.keywords)


def match_rules(prompt: str, rules: Sequence[MatchRule]) -> list[DocumentReference]:
    """Return the references whose rules match ``prompt``.

    Args:
        prompt: Prompt text; lowercased here so callers may pass it raw
        rules: Rule table in declaration order

    Returns:
        Matched references in rule order, each at most once
    """
    prompt_lower = prompt.lower()
    matched: list[DocumentReference] = []

    for rule in rules:
        if rule.target not in matched and rule.matches(prompt_lower):
            matched.append(rule.target)

    return matched


def _parse_target(raw: Any) -> DocumentReference:
    if isinstance(raw, str):
        return DocumentReference.parse(raw)
    if isinstance(raw, dict) and isinstance(raw.get("path"), str):
        reference = DocumentReference.parse(raw["path"])
        anchor = raw.get("anchor")
        if anchor is not None:
            anchor = str(anchor).strip().lstrip("#")
            reference = DocumentReference(path=reference.path, anchor=anchor or None)
        return reference
    raise ValueError(f"target must be a string or a mapping with 'path', got {raw!r}")


def _parse_keywords(raw: Any) -> list[str]:
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, list) and all(isinstance(k, (str, int, float)) for k in raw):
        return [str(k) for k in raw]
    raise ValueError(f"keywords must be a string or a list of strings, got {raw!r}")


def parse_rules(data: Any) -> list[MatchRule]:
    """Build rules from decoded YAML.

    Accepts either a mapping with a ``rules`` list or a bare list. Entries
    that cannot be parsed are skipped with a warning.
    """
    entries = data.get("rules") if isinstance(data, dict) else data
    if not isinstance(entries, list):
        if entries is not None:
            logger.warning("Rule table is not a list", type=type(entries).__name__)
        return []

    rules: list[MatchRule] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            logger.warning("Skipping malformed rule", index=index, reason="not a mapping")
            continue
        try:
            rule = MatchRule.create(_parse_keywords(entry.get("keywords")), _parse_target(entry.get("target")))
        except ValueError as e:
            logger.warning("Skipping malformed rule", index=index, reason=str(e))
            continue
        if not rule.keywords:
            logger.warning("Skipping rule without keywords", index=index, target=rule.target.key)
            continue
        rules.append(rule)

    return rules


def load_rules(path: Path | str) -> list[MatchRule]:
    """Load the rule table from a YAML file.

    A missing or unparseable file is an empty table, not an error.
    """
    path = Path(path)
    if not path.is_file():
        logger.debug("Rules file not found", path=str(path))
        return []

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.warning("Could not load rules file", path=str(path), error=str(e))
        return []

    return parse_rules(data)


def discover_frontmatter_rules(store: DocumentStore) -> list[MatchRule]:
    """Build rules from documents that declare their own keywords.

    A document opts in with frontmatter such as:

        ---
        keywords: [deploy, release]
        anchor: rollout        # optional
        ---

    Rules come back sorted by document path.
    """
    rules: list[MatchRule] = []

    for path in store.iter_markdown():
        document = store.read(path)
        if document is None:
            continue
        metadata, _ = parse_yaml_frontmatter(document.content)
        if "keywords" not in metadata:
            continue
        try:
            keywords = _parse_keywords(metadata["keywords"])
        except ValueError as e:
            logger.warning("Ignoring frontmatter keywords", path=path, reason=str(e))
            continue
        anchor = str(metadata.get("anchor") or "").strip().lstrip("#")
        rule = MatchRule.create(keywords, DocumentReference(path=path, anchor=anchor or None))
        if rule.keywords:
            rules.append(rule)

    return rules


def check_rules(rules: Sequence[MatchRule], store: DocumentStore) -> ValidationResult:
    """Check that every rule target resolves.

    A missing document is an error: the rule can never inject anything. An
    anchor without a matching heading is a warning, since the enricher
    falls back to the head of the document.
    """
    errors: list[str] = []
    warnings: list[str] = []

    for index, rule in enumerate(rules):
        target = rule.target
        document = store.read(target.path)
        if document is None:
            errors.append(f"rule {index}: document not found: {target.path}")
            continue

        if target.anchor and find_section(parse_sections(document.lines), target.anchor) is None:
            warnings.append(f"rule {index}: no heading matches anchor '#{target.anchor}' in {target.path}")

    if errors:
        return ValidationResult.invalid(errors, warnings)
    return ValidationResult.valid(warnings)
