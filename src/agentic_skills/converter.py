"""Convert Claude-style agent personas to OpenCode subagents.

OpenCode reads ``description``, ``mode`` and a ``tools`` boolean map from
an agent's front matter. Claude personas declare ``tools`` as a
comma-separated list of tool names, which are mapped here through a
closed table. Tokens the table does not know are dropped: they name
tools OpenCode has no equivalent for.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from agentic_skills.catalog import AgentEntry
from agentic_skills.frontmatter import dump_front_matter

# Canonical OpenCode capabilities, in emission order.
CAPABILITIES = (
    "read",
    "write",
    "edit",
    "bash",
    "glob",
    "grep",
    "list",
    "patch",
    "webfetch",
    "todowrite",
    "todoread",
)

# Every converted agent keeps at least basic navigation.
MINIMUM_CAPABILITIES = ("read", "glob", "grep")

# Source token (case-folded) -> capability, or None for "no equivalent".
CAPABILITY_TABLE: Dict[str, Optional[str]] = {
    "read": "read",
    "write": "write",
    "edit": "edit",
    "multiedit": "edit",
    "notebookedit": "edit",
    "bash": "bash",
    "glob": "glob",
    "grep": "grep",
    "ls": "list",
    "list": "list",
    "patch": "patch",
    "webfetch": "webfetch",
    "todowrite": "todowrite",
    "todoread": "todoread",
    "websearch": None,
    "task": None,
    "notebookread": None,
}


@dataclass
class OpenCodeAgent:
    front_matter: Dict[str, Any]
    body: str


def parse_tool_tokens(tools: Any) -> List[str]:
    """Split a tools field (comma string or YAML list) into normalized tokens."""
    if tools is None:
        return []
    if isinstance(tools, (list, tuple)):
        raw = [str(item) for item in tools]
    else:
        raw = str(tools).split(",")
    return [token.strip().casefold() for token in raw if token.strip()]


def map_capabilities(tokens: List[str]) -> List[str]:
    """Map tokens to capabilities in canonical order.

    Unknown tokens are dropped. An empty result becomes the minimum set.
    """
    granted = set()
    for token in tokens:
        capability = CAPABILITY_TABLE.get(token)
        if capability is not None:
            granted.add(capability)

    if not granted:
        granted.update(MINIMUM_CAPABILITIES)

    return [cap for cap in CAPABILITIES if cap in granted]


def convert_agent(entry: AgentEntry) -> OpenCodeAgent:
    description = entry.front_matter.get("description")
    description = str(description).strip() if description is not None else ""
    if not description:
        description = f"Specialized subagent: {entry.name}"

    granted = map_capabilities(parse_tool_tokens(entry.front_matter.get("tools")))

    front_matter = {
        "description": description,
        "mode": "subagent",
        "tools": {cap: cap in granted for cap in CAPABILITIES},
    }
    return OpenCodeAgent(front_matter=front_matter, body=entry.body)


def render_opencode_agent(agent: OpenCodeAgent) -> str:
    return dump_front_matter(agent.front_matter) + agent.body
