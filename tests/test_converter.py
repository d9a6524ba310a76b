"""Tests for Claude persona -> OpenCode subagent conversion."""

from pathlib import Path

from agentic_skills.catalog import AgentEntry, enumerate_agents
from agentic_skills.converter import (
    CAPABILITIES,
    MINIMUM_CAPABILITIES,
    convert_agent,
    map_capabilities,
    parse_tool_tokens,
    render_opencode_agent,
)
from agentic_skills.frontmatter import read_document


def make_agent(front_matter, body="\nBody text.\n", name="helper"):
    return AgentEntry(
        name=name,
        filename=f"{name}.md",
        path=Path(f"/nonexistent/{name}.md"),
        front_matter=front_matter,
        body=body,
    )


class TestToolTokens:

    def test_comma_string(self):
        assert parse_tool_tokens("Read, Grep ,Bash") == ["read", "grep", "bash"]

    def test_yaml_list(self):
        assert parse_tool_tokens(["Read", "WebFetch"]) == ["read", "webfetch"]

    def test_missing_and_blank(self):
        assert parse_tool_tokens(None) == []
        assert parse_tool_tokens(" , ") == []


class TestMapCapabilities:

    def test_canonical_order(self):
        assert map_capabilities(["grep", "bash", "read", "glob"]) == ["read", "bash", "glob", "grep"]

    def test_aliases(self):
        assert map_capabilities(["multiedit", "ls"]) == ["edit", "list"]

    def test_duplicates_collapse(self):
        assert map_capabilities(["edit", "multiedit", "notebookedit", "edit"]) == ["edit"]

    def test_unknown_tokens_dropped(self):
        assert map_capabilities(["read", "mcp__server__tool"]) == ["read"]

    def test_no_equivalent_only_gives_minimum(self):
        assert map_capabilities(["websearch", "task"]) == list(MINIMUM_CAPABILITIES)

    def test_empty_gives_minimum(self):
        assert map_capabilities([]) == ["read", "glob", "grep"]


class TestConvertAgent:

    def test_front_matter_shape(self):
        converted = convert_agent(make_agent({"description": "Helps.", "tools": "Read, Write"}))
        fm = converted.front_matter
        assert list(fm) == ["description", "mode", "tools"]
        assert fm["mode"] == "subagent"
        assert list(fm["tools"]) == list(CAPABILITIES)
        assert fm["tools"]["read"] is True
        assert fm["tools"]["write"] is True
        assert fm["tools"]["bash"] is False

    def test_model_not_carried_over(self):
        converted = convert_agent(make_agent({"description": "x", "model": "opus"}))
        assert "model" not in converted.front_matter

    def test_missing_description_falls_back(self):
        converted = convert_agent(make_agent({}, name="planner"))
        assert converted.front_matter["description"] == "Specialized subagent: planner"

    def test_missing_tools_gets_minimum(self):
        tools = convert_agent(make_agent({"description": "x"})).front_matter["tools"]
        assert [cap for cap, granted in tools.items() if granted] == ["read", "glob", "grep"]

    def test_body_preserved(self):
        converted = convert_agent(make_agent({"description": "x"}, body="\n# Title\n\ntext\n"))
        assert converted.body == "\n# Title\n\ntext\n"

    def test_rendered_document_reads_back(self, source_root):
        architect = enumerate_agents(source_root)[0]
        rendered = render_opencode_agent(convert_agent(architect))
        data, body = read_document(rendered)
        assert data["mode"] == "subagent"
        assert data["description"] == "Designs systems end to end, from data model to deployment."
        assert data["tools"]["bash"] is True
        assert data["tools"]["write"] is False
        assert body == architect.body

    def test_fallback_parsed_description(self, source_root):
        reviewer = enumerate_agents(source_root)[1]
        rendered = render_opencode_agent(convert_agent(reviewer))
        data, _ = read_document(rendered)
        assert data["description"] == "Reviews code: finds bugs before they ship"
