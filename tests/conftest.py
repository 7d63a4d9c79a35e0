"""
Pytest configuration and shared fixtures for memex tests.
"""

import sys
from pathlib import Path

import pytest


# Add the shared source root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "shared"))


DATABASE_DOC = "\n".join(
    [
        "# Database",  # 1
        "",
        "All persistent state lives in PostgreSQL.",
        "",
        "## Schema",  # 5
        "",
        "Tables: users, sessions, documents.",
        "",
        "",
        "## Queries",  # 10
        "",
        "Use the repository layer for all queries.",
        "### Pagination",
        "Keyset pagination only.",
        "",  # 15
        "## Migrations",  # 16
        "",
        "Alembic manages migrations.",
    ]
)


@pytest.fixture
def temp_dir(tmp_path):
    """Alias for pytest's tmp_path fixture."""
    return tmp_path


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep host configuration out of tests."""
    for name in (
        "CLAUDE_PROJECT_DIR",
        "MEMEX_SESSION_ID",
        "MEMEX_DOCS_ROOT",
        "MEMEX_RULES_FILE",
        "MEMEX_MAX_FILE_LINES",
        "MEMEX_MAX_SECTION_LINES",
        "MEMEX_TOKEN_BUDGET",
        "MEMEX_TOKENS_PER_LINE",
        "MEMEX_SESSION_DIR",
        "MEMEX_DISCOVER_FRONTMATTER",
        "MEMEX_LOG_LEVEL",
        "MEMEX_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_memex_logging():
    """Undo logging configuration applied by hook and CLI runs."""
    yield
    from memex_logging import reset_logging

    reset_logging()


@pytest.fixture
def project(temp_dir):
    """A project with a docs tree and a rules file.

    Layout:
        docs/core/DATABASE.md   (18 lines, sections schema/queries/migrations)
        docs/core/ARCHITECTURE.md (3 lines)
        .claude/memex-rules.yaml
    """
    docs = temp_dir / "docs" / "core"
    docs.mkdir(parents=True)
    (docs / "DATABASE.md").write_text(DATABASE_DOC + "\n")
    (docs / "ARCHITECTURE.md").write_text("# Architecture\n\nThree services.\n")

    claude_dir = temp_dir / ".claude"
    claude_dir.mkdir()
    (claude_dir / "memex-rules.yaml").write_text(
        """rules:
  - keywords: [database, schema]
    target: core/DATABASE.md
  - keywords: [query, queries]
    target: core/DATABASE.md#queries
  - keywords: [architecture, design]
    target: core/ARCHITECTURE.md
"""
    )
    return temp_dir
