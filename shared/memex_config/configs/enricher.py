"""
Context enricher configuration.

Loads configuration from:
1. Environment variables (highest priority)
2. <project>/.claude/memex.yaml (nested 'memex:' key or top-level keys)
3. Built-in defaults
"""

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..base import BaseConfig, HealthCheckResult, ValidationResult
from ..utils import load_yaml_file, resolve_path, safe_bool, safe_int
from ..validators import validate_directory, validate_file, validate_positive_int


DEFAULT_MAX_FILE_LINES = 200
DEFAULT_MAX_SECTION_LINES = 100
DEFAULT_TOKEN_BUDGET = 8000
DEFAULT_TOKENS_PER_LINE = 10

CONFIG_FILE_NAME = Path(".claude") / "memex.yaml"
RULES_FILE_NAME = Path(".claude") / "memex-rules.yaml"


def default_session_dir() -> Path:
    """Directory holding per-session dedup records."""
    return Path(tempfile.gettempdir()) / "memex-sessions"


def resolve_project_root(project_root: str | Path | None = None) -> Path:
    """Pick the project root: argument, then CLAUDE_PROJECT_DIR, then cwd."""
    if project_root:
        return Path(project_root).expanduser().resolve()
    env_root = os.environ.get("CLAUDE_PROJECT_DIR")
    if env_root:
        return Path(env_root).expanduser().resolve()
    return Path.cwd().resolve()


@dataclass
class EnricherConfig(BaseConfig):
    """Configuration for the context enricher.

    Attributes:
        project_root: Root of the project the assistant is working in
        docs_root: Directory document paths in rules are relative to
        rules_file: YAML file holding the ordered keyword rule table
        max_file_lines: Line cap for whole-file loads
        max_section_lines: Line cap for section loads
        token_budget: Estimated token ceiling per invocation
        tokens_per_line: Token estimate per injected line
        session_dir: Directory for per-session dedup records
        discover_frontmatter: Also build rules from document frontmatter
        log_level: Threshold for memex loggers
        log_file: Optional rotating JSON log file
    """

    project_root: Path = field(default_factory=Path.cwd)
    docs_root: Path | None = None
    rules_file: Path | None = None
    max_file_lines: int = DEFAULT_MAX_FILE_LINES
    max_section_lines: int = DEFAULT_MAX_SECTION_LINES
    token_budget: int = DEFAULT_TOKEN_BUDGET
    tokens_per_line: int = DEFAULT_TOKENS_PER_LINE
    session_dir: Path = field(default_factory=default_session_dir)
    discover_frontmatter: bool = False
    log_level: str = "WARNING"
    log_file: Path | None = None

    def __post_init__(self) -> None:
        self.project_root = Path(self.project_root)
        if self.docs_root is None:
            self.docs_root = self.project_root / "docs"
        else:
            self.docs_root = Path(self.docs_root)
        if self.rules_file is None:
            self.rules_file = self.project_root / RULES_FILE_NAME
        else:
            self.rules_file = Path(self.rules_file)
        self.session_dir = Path(self.session_dir)
        if self.log_file is not None:
            self.log_file = Path(self.log_file)

    def validate(self) -> ValidationResult:
        """Validate limits and paths."""
        errors: list[str] = []
        warnings: list[str] = []

        for name in ("max_file_lines", "max_section_lines", "token_budget", "tokens_per_line"):
            is_valid, error = validate_positive_int(getattr(self, name), name)
            if not is_valid:
                errors.append(error)

        is_valid, error = validate_directory(self.docs_root, "docs_root")
        if not is_valid:
            errors.append(error)

        is_valid, error = validate_file(self.rules_file, "rules_file")
        if not is_valid:
            # Frontmatter discovery can stand in for a rules file
            if self.discover_frontmatter:
                warnings.append(error)
            else:
                errors.append(error)

        if not errors:
            if self.max_section_lines > self.max_file_lines:
                warnings.append(
                    f"max_section_lines ({self.max_section_lines}) exceeds "
                    f"max_file_lines ({self.max_file_lines})"
                )
            if self.token_budget < self.tokens_per_line:
                warnings.append("token_budget is smaller than a single line; only one document can ever load")

        if errors:
            return ValidationResult.invalid(errors, warnings)

        return ValidationResult.valid(warnings)

    def health_check(self) -> HealthCheckResult:
        """Check that the documentation root can be read."""
        is_valid, error = validate_directory(self.docs_root, "docs_root")
        if not is_valid:
            return HealthCheckResult(healthy=False, service_name=self.service_name, message=error)

        doc_count = sum(1 for _ in self.docs_root.rglob("*.md"))
        return HealthCheckResult(
            healthy=True,
            service_name=self.service_name,
            message=f"{doc_count} markdown document(s) under {self.docs_root}",
        )

    def to_dict(self) -> dict[str, Any]:
        """Return config as a JSON-friendly dict."""
        return {
            "project_root": str(self.project_root),
            "docs_root": str(self.docs_root),
            "rules_file": str(self.rules_file),
            "max_file_lines": self.max_file_lines,
            "max_section_lines": self.max_section_lines,
            "token_budget": self.token_budget,
            "tokens_per_line": self.tokens_per_line,
            "session_dir": str(self.session_dir),
            "discover_frontmatter": self.discover_frontmatter,
            "log_level": self.log_level,
            "log_file": str(self.log_file) if self.log_file else None,
        }

    @classmethod
    def from_env(cls, project_root: str | Path | None = None) -> "EnricherConfig":
        """Load enricher configuration from environment and config file.

        Priority:
        1. Environment variables (MEMEX_*)
        2. <project_root>/.claude/memex.yaml (supports nested 'memex:' and top-level keys)
        3. Defaults

        Relative paths are resolved against the project root. Values that do
        not parse, and limits that are not positive, fall back to defaults
        rather than failing.
        """
        root = resolve_project_root(project_root)

        yaml_config = load_yaml_file(root / CONFIG_FILE_NAME)
        nested = yaml_config.get("memex")
        memex_config = nested if isinstance(nested, dict) else {}

        def get_config(key: str, default: Any = None) -> Any:
            """Env var, then nested memex: key, then top-level key."""
            env_value = os.environ.get(f"MEMEX_{key.upper()}")
            if env_value not in (None, ""):
                return env_value
            if memex_config.get(key) is not None:
                return memex_config[key]
            if yaml_config.get(key) is not None:
                return yaml_config[key]
            return default

        def get_limit(key: str, default: int) -> int:
            """Positive integer setting; anything else falls back to the default."""
            value = safe_int(get_config(key), default)
            if value <= 0:
                return default
            return value

        def get_path(key: str) -> Path | None:
            value = get_config(key)
            return resolve_path(value, root) if value else None

        return cls(
            project_root=root,
            docs_root=get_path("docs_root"),
            rules_file=get_path("rules_file"),
            max_file_lines=get_limit("max_file_lines", DEFAULT_MAX_FILE_LINES),
            max_section_lines=get_limit("max_section_lines", DEFAULT_MAX_SECTION_LINES),
            token_budget=get_limit("token_budget", DEFAULT_TOKEN_BUDGET),
            tokens_per_line=get_limit("tokens_per_line", DEFAULT_TOKENS_PER_LINE),
            session_dir=get_path("session_dir") or default_session_dir(),
            discover_frontmatter=safe_bool(get_config("discover_frontmatter"), False),
            log_level=str(get_config("log_level", "WARNING")).upper(),
            log_file=get_path("log_file"),
        )
