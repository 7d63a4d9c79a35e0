"""Tests for the keyword rule table."""

from memex.documents import DocumentStore
from memex.references import DocumentReference
from memex.rules import (
    MatchRule,
    check_rules,
    discover_frontmatter_rules,
    load_rules,
    match_rules,
    parse_rules,
)


DATABASE = DocumentReference("core/DATABASE.md")
QUERIES = DocumentReference("core/DATABASE.md", "queries")
API = DocumentReference("core/API.md")


class TestMatchRule:
    """Tests for MatchRule construction."""

    def test_keywords_are_lowercased_and_stripped(self):
        rule = MatchRule.create([" Database ", "SCHEMA"], "core/DATABASE.md")
        assert rule.keywords == frozenset({"database", "schema"})

    def test_blank_keywords_are_dropped(self):
        rule = MatchRule.create(["", "  ", "db"], "core/DATABASE.md")
        assert rule.keywords == frozenset({"db"})

    def test_string_target_is_parsed(self):
        rule = MatchRule.create(["q"], "core/DATABASE.md#queries")
        assert rule.target == QUERIES


class TestMatchRules:
    """Tests for prompt matching."""

    def test_matches_any_keyword(self):
        rules = [MatchRule.create(["database", "schema"], DATABASE)]
        assert match_rules("what's the schema?", rules) == [DATABASE]

    def test_match_is_case_insensitive(self):
        rules = [MatchRule.create(["database"], DATABASE)]
        assert match_rules("Explain the DATABASE layer", rules) == [DATABASE]

    def test_substring_is_not_word_bounded(self):
        """'api' matches inside 'rapid'."""
        rules = [MatchRule.create(["api"], API)]
        assert match_rules("a rapid prototype", rules) == [API]

    def test_no_match_returns_empty_list(self):
        rules = [MatchRule.create(["database"], DATABASE)]
        assert match_rules("fix the typo in the readme", rules) == []

    def test_every_rule_is_tested_in_declaration_order(self):
        rules = [
            MatchRule.create(["query"], QUERIES),
            MatchRule.create(["api"], API),
            MatchRule.create(["database"], DATABASE),
        ]
        prompt = "database query through the api"
        assert match_rules(prompt, rules) == [QUERIES, API, DATABASE]

    def test_duplicate_targets_keep_first_position(self):
        rules = [
            MatchRule.create(["schema"], DATABASE),
            MatchRule.create(["api"], API),
            MatchRule.create(["database"], DATABASE),
        ]
        assert match_rules("database schema api", rules) == [DATABASE, API]

    def test_file_and_section_references_are_distinct(self):
        rules = [
            MatchRule.create(["database"], DATABASE),
            MatchRule.create(["queries"], QUERIES),
        ]
        assert match_rules("database queries", rules) == [DATABASE, QUERIES]


class TestParseRules:
    """Tests for building rules from decoded YAML."""

    def test_parses_rules_mapping(self):
        rules = parse_rules(
            {
                "rules": [
                    {"keywords": ["database"], "target": "core/DATABASE.md"},
                    {"keywords": "queries", "target": "core/DATABASE.md#queries"},
                ]
            }
        )
        assert [r.target for r in rules] == [DATABASE, QUERIES]
        assert rules[1].keywords == frozenset({"queries"})

    def test_accepts_bare_list(self):
        rules = parse_rules([{"keywords": ["api"], "target": "core/API.md"}])
        assert [r.target for r in rules] == [API]

    def test_accepts_mapping_target(self):
        rules = parse_rules([{"keywords": ["q"], "target": {"path": "core/DATABASE.md", "anchor": "#queries"}}])
        assert rules[0].target == QUERIES

    def test_skips_malformed_entries(self):
        rules = parse_rules(
            {
                "rules": [
                    "not a mapping",
                    {"keywords": ["x"]},
                    {"keywords": {"a": 1}, "target": "core/X.md"},
                    {"keywords": [], "target": "core/EMPTY.md"},
                    {"keywords": ["api"], "target": "core/API.md"},
                ]
            }
        )
        assert [r.target for r in rules] == [API]

    def test_non_list_table_is_empty(self):
        assert parse_rules({"rules": "database"}) == []
        assert parse_rules(None) == []


class TestLoadRules:
    """Tests for loading the rules file."""

    def test_loads_yaml_file(self, project):
        rules = load_rules(project / ".claude" / "memex-rules.yaml")
        assert len(rules) == 3
        assert rules[1].target == QUERIES

    def test_missing_file_is_empty(self, temp_dir):
        assert load_rules(temp_dir / "nope.yaml") == []

    def test_invalid_yaml_is_empty(self, temp_dir):
        path = temp_dir / "rules.yaml"
        path.write_text("rules: [unclosed\n")
        assert load_rules(path) == []


class TestDiscoverFrontmatterRules:
    """Tests for rules declared in document frontmatter."""

    def test_builds_rules_sorted_by_path(self, temp_dir):
        (temp_dir / "ops").mkdir()
        (temp_dir / "ops" / "DEPLOY.md").write_text("---\nkeywords: [deploy, release]\nanchor: rollout\n---\n# Deploy\n")
        (temp_dir / "AUTH.md").write_text("---\nkeywords: auth\n---\n# Auth\n")
        (temp_dir / "PLAIN.md").write_text("# No frontmatter\n")

        rules = discover_frontmatter_rules(DocumentStore(temp_dir))

        assert [r.target for r in rules] == [
            DocumentReference("AUTH.md"),
            DocumentReference("ops/DEPLOY.md", "rollout"),
        ]
        assert rules[1].keywords == frozenset({"deploy", "release"})

    def test_ignores_bad_keywords(self, temp_dir):
        (temp_dir / "BAD.md").write_text("---\nkeywords: {a: 1}\n---\n# Bad\n")
        assert discover_frontmatter_rules(DocumentStore(temp_dir)) == []


class TestCheckRules:
    """Tests for rule target validation."""

    def test_valid_rules(self, project):
        store = DocumentStore(project / "docs")
        result = check_rules(load_rules(project / ".claude" / "memex-rules.yaml"), store)
        assert result.is_valid
        assert result.warnings == []

    def test_missing_document_is_error(self, project):
        store = DocumentStore(project / "docs")
        result = check_rules([MatchRule.create(["x"], "core/GONE.md")], store)
        assert not result.is_valid
        assert any("core/GONE.md" in e for e in result.errors)

    def test_unresolved_anchor_is_warning(self, project):
        store = DocumentStore(project / "docs")
        result = check_rules([MatchRule.create(["x"], "core/DATABASE.md#sharding")], store)
        assert result.is_valid
        assert any("#sharding" in w for w in result.warnings)
