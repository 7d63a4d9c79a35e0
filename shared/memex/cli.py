"""
CLI tool for the context enricher.

Usage:
    memex enrich --prompt "how does auth work"  # Preview injected context
    memex validate                            # Check config and rule targets
    memex sections core/DATABASE.md           # List anchors in a document
    memex show                                # Show effective configuration
    memex reset-session                       # Forget what this session injected
"""

import argparse
import json
import sys

from memex_config import ConfigStatus, EnricherConfig, ValidationResult
from memex_logging import configure_logging

from .documents import DocumentStore
from .enricher import ContextEnricher
from .hook import read_payload, write_output
from .rules import check_rules
from .sections import parse_sections
from .session_store import FileSessionStore, resolve_session_id


def _load_config(args: argparse.Namespace) -> EnricherConfig:
    config = EnricherConfig.from_env(args.project_root)
    configure_logging(config.log_level, config.log_file)
    return config


def _print_validation_result(name: str, result: ValidationResult, *, verbose: bool = False) -> None:
    status_icons = {
        ConfigStatus.VALID: "[OK]",
        ConfigStatus.INVALID: "[FAIL]",
        ConfigStatus.DEGRADED: "[WARN]",
    }
    icon = status_icons.get(result.status, "[?]")
    print(f"{icon} {name}: {result.status.value}")

    for error in result.errors:
        print(f"      ERROR: {error}")

    if verbose:
        for warning in result.warnings:
            print(f"      WARNING: {warning}")


def cmd_enrich(args: argparse.Namespace) -> int:
    """Print the context a prompt would receive."""
    config = _load_config(args)

    payload: dict = {}
    if args.prompt is None:
        payload = read_payload(sys.stdin) or {}
    prompt = args.prompt if args.prompt is not None else payload.get("prompt", "")
    if args.session_id:
        payload["session_id"] = args.session_id

    enricher = ContextEnricher(config)
    result = enricher.enrich(prompt or "", resolve_session_id(payload), dedup=not args.no_dedup)

    if result.text:
        write_output(sys.stdout, result.text)
    elif args.verbose:
        print("No documentation injected.", file=sys.stderr)

    if args.verbose:
        print(f"Matched: {', '.join(r.key for r in result.matched) or '-'}", file=sys.stderr)
        if result.already_loaded:
            print(f"Already loaded: {', '.join(r.key for r in result.already_loaded)}", file=sys.stderr)
        if result.missing:
            print(f"Missing: {', '.join(r.key for r in result.missing)}", file=sys.stderr)
        if result.skipped:
            print(f"Over budget: {', '.join(r.key for r in result.skipped)}", file=sys.stderr)
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate configuration and rule targets; return exit code."""
    config = _load_config(args)

    config_result = config.validate()
    _print_validation_result("config", config_result, verbose=args.verbose)

    enricher = ContextEnricher(config)
    rules = enricher.rules
    if not rules:
        rules_result = ValidationResult.degraded([], ["no rules loaded; no prompt will inject anything"])
    else:
        rules_result = check_rules(rules, enricher.store)
    _print_validation_result(f"rules ({len(rules)})", rules_result, verbose=args.verbose)

    overall = config_result.merge(rules_result)
    if overall.is_valid:
        print("\nConfiguration valid.")
        return 0
    print("\nConfiguration has problems.")
    return 1


def cmd_sections(args: argparse.Namespace) -> int:
    """List the sections of a document with their anchors."""
    config = _load_config(args)
    document = DocumentStore(config.docs_root).read(args.path)
    if document is None:
        print(f"Document not found: {args.path}", file=sys.stderr)
        return 1

    sections = parse_sections(document.lines)
    if args.json:
        print(
            json.dumps(
                [
                    {
                        "level": s.level,
                        "title": s.title,
                        "anchor": s.anchor,
                        "start": s.start + 1,
                        "end": s.end,
                    }
                    for s in sections
                ],
                indent=2,
            )
        )
        return 0

    for section in sections:
        indent = "  " * (section.level - 1)
        print(f"{indent}#{section.anchor}  (lines {section.start + 1}-{section.end}, {section.line_count} lines)")
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    """Show the effective configuration."""
    config = _load_config(args)
    data = config.to_dict()
    data["health"] = config.health_check().to_dict()
    print(json.dumps(data, indent=2))
    return 0


def cmd_reset_session(args: argparse.Namespace) -> int:
    """Clear the dedup record of a session."""
    config = _load_config(args)
    session_id = resolve_session_id({"session_id": args.session_id} if args.session_id else None)
    FileSessionStore(config.session_dir).clear(session_id)
    print(f"Cleared session {session_id}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="memex",
        description="Keyword-driven documentation injection for AI coding assistants.",
    )
    parser.add_argument("--project-root", "-C", help="Project root (default: $CLAUDE_PROJECT_DIR or cwd)")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # enrich command
    enrich_parser = subparsers.add_parser("enrich", help="Preview injected context for a prompt")
    enrich_parser.add_argument("--prompt", "-p", help="Prompt text (default: hook JSON on stdin)")
    enrich_parser.add_argument("--session-id", help="Session to dedup against")
    enrich_parser.add_argument("--no-dedup", action="store_true", help="Ignore and do not update the session record")
    enrich_parser.add_argument("--verbose", "-v", action="store_true", help="Report match details on stderr")

    # validate command
    validate_parser = subparsers.add_parser("validate", help="Validate configuration and rules")
    validate_parser.add_argument("--verbose", "-v", action="store_true", help="Show warnings")

    # sections command
    sections_parser = subparsers.add_parser("sections", help="List the sections of a document")
    sections_parser.add_argument("path", help="Document path relative to the docs root")
    sections_parser.add_argument("--json", "-j", action="store_true", help="Output JSON")

    # show command
    subparsers.add_parser("show", help="Show effective configuration")

    # reset-session command
    reset_parser = subparsers.add_parser("reset-session", help="Forget documents injected in a session")
    reset_parser.add_argument("--session-id", help="Session to clear (default: current session)")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "enrich": cmd_enrich,
        "validate": cmd_validate,
        "sections": cmd_sections,
        "show": cmd_show,
        "reset-session": cmd_reset_session,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
