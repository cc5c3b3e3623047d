"""Tests for markdown frontmatter parsing and formatting."""

import pytest

from aix import frontmatter
from aix.exceptions import ParseError


class TestParse:
    """Test frontmatter.parse."""

    def test_basic_document(self):
        meta, body = frontmatter.parse("---\nname: reviewer\ndescription: Reviews code\n---\nBe careful.\n")
        assert meta == {"name": "reviewer", "description": "Reviews code"}
        assert body == "Be careful.\n"

    def test_bytes_input(self):
        meta, body = frontmatter.parse(b"---\nname: x\n---\nbody\n")
        assert meta == {"name": "x"}
        assert body == "body\n"

    def test_no_frontmatter(self):
        meta, body = frontmatter.parse("# Just markdown\n")
        assert meta == {}
        assert body == "# Just markdown\n"

    def test_unterminated_block_is_body(self):
        text = "---\nname: x\nno closing delimiter\n"
        meta, body = frontmatter.parse(text)
        assert meta == {}
        assert body == text

    def test_empty_block(self):
        meta, body = frontmatter.parse("---\n---\nbody\n")
        assert meta == {}
        assert body == "body\n"

    def test_body_kept_verbatim(self):
        body = "Line one\n\n---\n\n  indented\n"
        _, parsed = frontmatter.parse(f"---\nname: x\n---\n{body}")
        assert parsed == body

    def test_malformed_yaml_reports_line(self):
        with pytest.raises(ParseError) as exc_info:
            frontmatter.parse("---\nname: x\ndescription: [unclosed\n---\nbody\n", "SKILL.md")
        assert exc_info.value.path == "SKILL.md"
        assert exc_info.value.line is not None
        assert exc_info.value.line >= 3
        assert str(exc_info.value).startswith("parsing SKILL.md:")

    def test_non_mapping_rejected(self):
        with pytest.raises(ParseError, match="frontmatter must be a YAML mapping"):
            frontmatter.parse("---\n- a\n- b\n---\nbody\n")

    def test_invalid_utf8(self):
        with pytest.raises(ParseError, match="invalid UTF-8"):
            frontmatter.parse(b"---\nname: \xff\n---\n")


class TestFormat:
    """Test frontmatter.format."""

    def test_keys_in_insertion_order(self):
        data = frontmatter.format({"name": "x", "description": "d", "license": "MIT"}, "body\n")
        assert data == b"---\nname: x\ndescription: d\nlicense: MIT\n---\nbody\n"

    def test_adds_trailing_newline(self):
        assert frontmatter.format({"name": "x"}, "body").endswith(b"body\n")

    def test_empty_body(self):
        assert frontmatter.format({"name": "x"}, "") == b"---\nname: x\n---\n"

    def test_round_trip(self):
        meta = {"name": "x", "allowed-tools": ["Read", "Bash(git:*)"], "metadata": {"version": "1.0"}}
        body = "Do the thing.\n\nThen stop.\n"
        assert frontmatter.parse(frontmatter.format(meta, body)) == (meta, body)

    def test_unicode(self):
        data = frontmatter.format({"description": "Prüft Code"}, "")
        assert "Prüft Code".encode("utf-8") in data


class TestParseFile:
    """Test frontmatter.parse_file."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(ParseError, match="file not found"):
            frontmatter.parse_file(tmp_path / "SKILL.md")

    def test_reads_file(self, tmp_path):
        path = tmp_path / "SKILL.md"
        path.write_text("---\nname: x\n---\nbody\n")
        assert frontmatter.parse_file(path) == ({"name": "x"}, "body\n")
