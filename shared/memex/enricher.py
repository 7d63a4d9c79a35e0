"""
Context enricher: turns a prompt into injected documentation.

Per invocation:

    prompt -> keyword rules -> references -> drop those already injected
    this session -> for each: budget gate -> read -> section or head of
    file -> count against budget -> envelope -> mark injected

Every condition short of a bug is handled here and reported in-band (a
marker line) or by producing no output at all; nothing is raised to the
hook.
"""

from dataclasses import dataclass, field

from memex_config import EnricherConfig
from memex_logging import ContextScope, get_logger

from .budget import TokenBudget
from .documents import Document, DocumentStore
from .formatter import ContextEnvelope, file_truncation_marker, section_not_found_marker
from .references import DocumentReference
from .rules import MatchRule, discover_frontmatter_rules, load_rules, match_rules
from .sections import extract_section
from .session_store import FileSessionStore, SessionStore


logger = get_logger("memex", component="enricher")


@dataclass
class EnrichmentResult:
    """What one invocation produced.

    Attributes:
        text: Envelope text for the assistant ("" when nothing was injected)
        matched: References produced by the keyword rules
        loaded: References injected by this invocation
        already_loaded: Matched references skipped as injected earlier
        missing: References whose document could not be read
        skipped: References dropped because the budget ran out
        tokens_used: Final token estimate
    """

    text: str = ""
    matched: list[DocumentReference] = field(default_factory=list)
    loaded: list[DocumentReference] = field(default_factory=list)
    already_loaded: list[DocumentReference] = field(default_factory=list)
    missing: list[DocumentReference] = field(default_factory=list)
    skipped: list[DocumentReference] = field(default_factory=list)
    tokens_used: int = 0

    @property
    def budget_exhausted(self) -> bool:
        return bool(self.skipped)


class ContextEnricher:
    """Matches prompts against the rule table and builds the envelope.

    Args:
        config: Enricher settings
        store: Document store (defaults to one rooted at ``config.docs_root``)
        session_store: Dedup store (defaults to files under ``config.session_dir``)
        rules: Rule table (defaults to ``config.rules_file``, plus frontmatter
            rules when ``config.discover_frontmatter`` is set)
    """

    def __init__(
        self,
        config: EnricherConfig,
        store: DocumentStore | None = None,
        session_store: SessionStore | None = None,
        rules: list[MatchRule] | None = None,
    ):
        self.config = config
        self.store = store or DocumentStore(config.docs_root)
        self.session_store = session_store or FileSessionStore(config.session_dir)
        self._rules = rules

    @property
    def rules(self) -> list[MatchRule]:
        """Lazily load the rule table."""
        if self._rules is None:
            rules = load_rules(self.config.rules_file)
            if self.config.discover_frontmatter:
                rules.extend(discover_frontmatter_rules(self.store))
            self._rules = rules
        return self._rules

    def render_reference(self, document: Document, reference: DocumentReference) -> list[str]:
        """Lines to inject for one reference, markers included."""
        if reference.anchor:
            extract = extract_section(document.lines, reference.anchor, self.config.max_section_lines)
            if extract.found:
                return extract.lines
            logger.info("Section not found, using document head", path=reference.path, anchor=reference.anchor)
            return [section_not_found_marker(reference.anchor), *document.lines[: self.config.max_section_lines]]

        limit = self.config.max_file_lines
        if document.line_count <= limit:
            return list(document.lines)
        return [*document.lines[:limit], file_truncation_marker(limit, document.line_count)]

    def enrich(self, prompt: str, session_id: str, dedup: bool = True, record: bool = True) -> EnrichmentResult:
        """Build the injected context for one prompt.

        Args:
            prompt: Raw prompt text
            session_id: Session the dedup record belongs to
            dedup: Skip and record references per session (off for dry runs)
            record: Write injected references to the session record now; pass
                False to call record_loaded() once the text has been delivered

        Returns:
            EnrichmentResult; ``text`` is empty when nothing new matched.
        """
        result = EnrichmentResult()
        if not prompt or not prompt.strip():
            return result

        with ContextScope(session_id=session_id):
            result.matched = match_rules(prompt, self.rules)
            if not result.matched:
                logger.debug("No rules matched")
                return result

            candidates = result.matched
            if dedup:
                already = self.session_store.loaded(session_id)
                result.already_loaded = [ref for ref in candidates if ref.key in already]
                candidates = [ref for ref in candidates if ref.key not in already]

            budget = TokenBudget(self.config.token_budget, self.config.tokens_per_line)
            envelope = ContextEnvelope()

            for position, reference in enumerate(candidates):
                if not budget.has_budget():
                    result.skipped = candidates[position:]
                    envelope.mark_budget_reached(budget.ceiling)
                    logger.info("Token budget reached", used=budget.used, skipped=len(result.skipped))
                    break

                log = logger.with_context(reference=reference.key)
                document = self.store.read(reference.path)
                if document is None:
                    log.info("Document not found, skipping")
                    result.missing.append(reference)
                    continue

                lines = self.render_reference(document, reference)
                budget.consume(len(lines))
                envelope.add(reference, lines)
                result.loaded.append(reference)
                log.info("Injected document", lines=len(lines), tokens=budget.used)

            if dedup and record:
                self.record_loaded(session_id, result.loaded)

            result.tokens_used = budget.used
            result.text = envelope.render(budget.used)

        return result

    def record_loaded(self, session_id: str, references: list[DocumentReference]) -> None:
        """Mark references as injected in the session."""
        for reference in references:
            self.session_store.mark_loaded(session_id, reference)


def enrich_prompt(prompt: str, session_id: str, config: EnricherConfig | None = None) -> str:
    """Convenience wrapper returning only the envelope text.

    Args:
        prompt: Raw prompt text
        session_id: Session identifier for dedup
        config: Settings (defaults to ``EnricherConfig.from_env()``)

    Returns:
        Envelope text, or "" when nothing was injected.
    """
    enricher = ContextEnricher(config or EnricherConfig.from_env())
    return enricher.enrich(prompt, session_id).text
