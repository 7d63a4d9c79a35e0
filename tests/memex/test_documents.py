"""Tests for document references and the document store."""

import pytest

from memex.documents import Document, DocumentStore
from memex.references import DocumentReference


class TestDocumentReference:
    """Tests for DocumentReference."""

    def test_key_without_anchor(self):
        assert DocumentReference("core/DATABASE.md").key == "core/DATABASE.md"

    def test_key_with_anchor(self):
        assert DocumentReference("core/DATABASE.md", "queries").key == "core/DATABASE.md#queries"

    def test_str_is_key(self):
        assert str(DocumentReference("a.md", "b")) == "a.md#b"

    def test_file_and_section_are_not_equal(self):
        assert DocumentReference("a.md") != DocumentReference("a.md", "intro")

    def test_equal_references_hash_equal(self):
        assert len({DocumentReference("a.md", "x"), DocumentReference("a.md", "x")}) == 1

    def test_parse_with_anchor(self):
        assert DocumentReference.parse("core/DATABASE.md#queries") == DocumentReference("core/DATABASE.md", "queries")

    def test_parse_empty_anchor_is_whole_file(self):
        ref = DocumentReference.parse("core/DATABASE.md#")
        assert ref.anchor is None
        assert not ref.is_section

    def test_parse_strips_leading_dot_slash(self):
        assert DocumentReference.parse("./core/A.md").path == "core/A.md"
        assert DocumentReference.parse("/core/A.md").path == "core/A.md"

    def test_parse_without_path_raises(self):
        with pytest.raises(ValueError):
            DocumentReference.parse("#anchor")


class TestDocument:
    """Tests for the Document value."""

    def test_counts_lines_without_trailing_newline(self):
        doc = Document(path="a.md", content="one\ntwo\nthree\n")
        assert doc.lines == ["one", "two", "three"]
        assert doc.line_count == 3

    def test_empty_document(self):
        assert Document(path="a.md", content="").line_count == 0

    def test_only_newline_splits_lines(self):
        doc = Document(path="a.md", content="# Architecture\nA\x0cB\nC\u2028D\x85E\n")
        assert doc.lines == ["# Architecture", "A\x0cB", "C\u2028D\x85E"]
        assert doc.line_count == 3

    def test_crlf_endings_are_stripped_once(self):
        doc = Document(path="a.md", content="one\r\ntwo\r\r\nthree")
        assert doc.lines == ["one", "two\r", "three"]

    def test_blank_last_line_is_kept(self):
        assert Document(path="a.md", content="one\n\n").lines == ["one", ""]


class TestDocumentStore:
    """Tests for reading documents."""

    def test_reads_relative_path(self, project):
        store = DocumentStore(project / "docs")
        doc = store.read("core/ARCHITECTURE.md")
        assert doc is not None
        assert doc.path == "core/ARCHITECTURE.md"
        assert doc.lines[0] == "# Architecture"

    def test_read_keeps_lines_verbatim(self, temp_dir):
        (temp_dir / "page.md").write_bytes(b"# Page\r\nA\x0cB\nlone\rcarriage\n")
        doc = DocumentStore(temp_dir).read("page.md")
        assert doc.lines == ["# Page", "A\x0cB", "lone\rcarriage"]

    def test_missing_file_is_none(self, project):
        assert DocumentStore(project / "docs").read("core/NOPE.md") is None

    def test_directory_is_none(self, project):
        assert DocumentStore(project / "docs").read("core") is None

    def test_refuses_paths_outside_root(self, project):
        (project / "secret.md").write_text("secret\n")
        store = DocumentStore(project / "docs")
        assert store.read("../secret.md") is None
        assert not store.exists("../secret.md")

    def test_non_utf8_is_none(self, temp_dir):
        (temp_dir / "bin.md").write_bytes(b"\xff\xfe\x00bad")
        assert DocumentStore(temp_dir).read("bin.md") is None

    def test_exists(self, project):
        store = DocumentStore(project / "docs")
        assert store.exists("core/DATABASE.md")
        assert not store.exists("core/NOPE.md")

    def test_reads_are_cached(self, project):
        store = DocumentStore(project / "docs")
        first = store.read("core/DATABASE.md")
        (project / "docs" / "core" / "DATABASE.md").write_text("changed\n")
        assert store.read("core/DATABASE.md") is first

    def test_iter_markdown(self, project):
        (project / "docs" / "notes.txt").write_text("not markdown")
        assert DocumentStore(project / "docs").iter_markdown() == ["core/ARCHITECTURE.md", "core/DATABASE.md"]

    def test_iter_markdown_missing_root(self, temp_dir):
        assert DocumentStore(temp_dir / "missing").iter_markdown() == []
