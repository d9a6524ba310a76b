"""Tests for front-matter splitting, parsing and rendering."""

from agentic_skills.frontmatter import (
    dump_front_matter,
    parse_front_matter,
    read_document,
    split_front_matter,
)


class TestSplitFrontMatter:

    def test_no_front_matter_returns_whole_text_as_body(self):
        header, body = split_front_matter("# Title\n\ntext\n")
        assert header is None
        assert body == "# Title\n\ntext\n"

    def test_body_is_verbatim_after_closing_delimiter(self):
        text = "---\nname: x\n---\n\n# Body\n---\nstill body\n"
        header, body = split_front_matter(text)
        assert header == "name: x\n"
        assert body == "\n# Body\n---\nstill body\n"

    def test_unterminated_header_is_not_front_matter(self):
        text = "---\nname: x\nno end\n"
        header, body = split_front_matter(text)
        assert header is None
        assert body == text


class TestParseFrontMatter:

    def test_valid_yaml_with_folded_description(self):
        data = parse_front_matter("name: a\ndescription: >-\n  one\n  two\ntools: Read, Bash\n")
        assert data == {"name": "a", "description": "one two", "tools": "Read, Bash"}

    def test_empty_header(self):
        assert parse_front_matter("\n") == {}

    def test_stray_colon_falls_back_to_scanner(self):
        data = parse_front_matter("name: reviewer\ndescription: Reviews code: finds bugs\n")
        assert data == {"name": "reviewer", "description": "Reviews code: finds bugs"}

    def test_fallback_handles_folded_block(self):
        header = (
            "name: architect\n"
            "description: >-\n"
            "  Designs systems\n"
            "  end to end.\n"
            "model: opus: latest\n"
        )
        data = parse_front_matter(header)
        assert data["description"] == "Designs systems end to end."
        assert data["model"] == "opus: latest"

    def test_fallback_handles_literal_block(self):
        header = "notes: |\n  line one\n  line two\nbad: a: b\n"
        data = parse_front_matter(header)
        assert data["notes"] == "line one\nline two\n"

    def test_fallback_unquotes_values(self):
        data = parse_front_matter("a: 'it''s'\nb: \"quoted\"\nc: x: y\n")
        assert data["a"] == "it's"
        assert data["b"] == "quoted"

    def test_non_mapping_yaml_falls_back(self):
        assert parse_front_matter("- just\n- a list\n") == {}


class TestReadAndDump:

    def test_read_document_without_header(self):
        assert read_document("plain\n") == ({}, "plain\n")

    def test_dump_preserves_key_order(self):
        text = dump_front_matter({"description": "x", "mode": "subagent"})
        assert text == "---\ndescription: x\nmode: subagent\n---\n"

    def test_dump_nested_mapping_reads_back(self):
        text = dump_front_matter({"tools": {"read": True, "write": False}}) + "body\n"
        data, body = read_document(text)
        assert data == {"tools": {"read": True, "write": False}}
        assert body == "body\n"
