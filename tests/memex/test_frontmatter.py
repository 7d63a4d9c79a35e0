"""Tests for YAML frontmatter parsing."""

from memex.frontmatter import parse_yaml_frontmatter


class TestParseYamlFrontmatter:
    """Tests for parse_yaml_frontmatter."""

    def test_splits_metadata_and_body(self):
        content = "---\nkeywords: [database, schema]\ntitle: DB\n---\n\n# Database\n"
        metadata, body = parse_yaml_frontmatter(content)
        assert metadata == {"keywords": ["database", "schema"], "title": "DB"}
        assert body == "# Database\n"

    def test_no_frontmatter(self):
        content = "# Database\n\n---\nnot: frontmatter\n---\n"
        assert parse_yaml_frontmatter(content) == ({}, content)

    def test_frontmatter_only(self):
        assert parse_yaml_frontmatter("---\nkeywords: [x]\n---") == ({"keywords": ["x"]}, "")

    def test_crlf_line_endings(self):
        metadata, body = parse_yaml_frontmatter("---\r\nkeywords: [x]\r\n---\r\nBody\r\n")
        assert metadata == {"keywords": ["x"]}
        assert body == "Body\r\n"

    def test_invalid_yaml_returns_content(self):
        content = "---\nkeywords: [unclosed\n---\nBody\n"
        assert parse_yaml_frontmatter(content) == ({}, content)

    def test_non_mapping_returns_content(self):
        content = "---\n- a\n- b\n---\nBody\n"
        assert parse_yaml_frontmatter(content) == ({}, content)
