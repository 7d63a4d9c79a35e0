"""
memex - keyword-driven documentation injection for AI coding assistants.

Matches a prompt against an ordered keyword rule table, loads the matching
markdown documents (whole files or single sections), keeps the injected
amount under an approximate token budget, and skips documents already
injected earlier in the same session.

Usage:
    from memex import ContextEnricher
    from memex_config import EnricherConfig

    enricher = ContextEnricher(EnricherConfig.from_env())
    result = enricher.enrich("what's the database schema?", session_id="abc123")
    print(result.text)
"""

from .budget import TokenBudget
from .documents import Document, DocumentStore
from .enricher import ContextEnricher, EnrichmentResult, enrich_prompt
from .formatter import ContextEnvelope, DocumentBlock
from .references import DocumentReference
from .rules import MatchRule, check_rules, discover_frontmatter_rules, load_rules, match_rules, parse_rules
from .sections import Section, SectionExtract, extract_section, find_section, parse_sections, slugify
from .session_store import FileSessionStore, MemorySessionStore, SessionStore, resolve_session_id


__all__ = [
    "ContextEnricher",
    "ContextEnvelope",
    "Document",
    "DocumentBlock",
    "DocumentReference",
    "DocumentStore",
    "EnrichmentResult",
    "FileSessionStore",
    "MatchRule",
    "MemorySessionStore",
    "Section",
    "SectionExtract",
    "SessionStore",
    "TokenBudget",
    "check_rules",
    "discover_frontmatter_rules",
    "enrich_prompt",
    "extract_section",
    "find_section",
    "load_rules",
    "match_rules",
    "parse_rules",
    "parse_sections",
    "resolve_session_id",
    "slugify",
]

__version__ = "0.3.0"
