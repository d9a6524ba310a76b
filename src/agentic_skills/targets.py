"""Installation targets and where each one lives on disk."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from agentic_skills.errors import InvalidTarget


class TargetKind(str, Enum):
    CLAUDE_PROJECT = "claude-project"
    CLAUDE_GLOBAL = "claude-global"
    OPENCODE_PROJECT = "opencode-project"
    OPENCODE_GLOBAL = "opencode-global"
    CURSOR = "cursor"
    CODEX = "codex"


# Agent transforms select the adapter; several kinds share one.
IDENTITY = "identity"
OPENCODE_SUBAGENT = "opencode-subagent"
CURSOR_RULE = "cursor-rule"
CODEX_CONCAT = "codex-concat"

# Target-specific layout. "scope" decides whether "path" is relative to
# the working directory (project) or the home directory (global).
TARGET_CONFIG: Dict[TargetKind, Dict[str, Any]] = {
    TargetKind.CLAUDE_PROJECT: {
        "label": "Claude Code (project)",
        "flag": "--claude",
        "scope": "project",
        "path": ".claude",
        "supports_hooks": True,
        "agent_transform": IDENTITY,
        "restart_hint": "Restart Claude Code to activate.",
    },
    TargetKind.CLAUDE_GLOBAL: {
        "label": "Claude Code (global)",
        "flag": "--claude-global",
        "scope": "global",
        "path": ".claude",
        "supports_hooks": True,
        "agent_transform": IDENTITY,
        "restart_hint": "Restart Claude Code to activate.",
    },
    TargetKind.OPENCODE_PROJECT: {
        "label": "OpenCode (project)",
        "flag": "--opencode",
        "scope": "project",
        "path": ".opencode",
        "supports_hooks": True,
        "agent_transform": OPENCODE_SUBAGENT,
        "restart_hint": "Restart OpenCode to activate.",
    },
    TargetKind.OPENCODE_GLOBAL: {
        "label": "OpenCode (global)",
        "flag": "--opencode-global",
        "scope": "global",
        "path": ".config/opencode",
        "supports_hooks": True,
        "agent_transform": OPENCODE_SUBAGENT,
        "restart_hint": "Restart OpenCode to activate.",
    },
    TargetKind.CURSOR: {
        "label": "Cursor (project)",
        "flag": "--cursor",
        "scope": "project",
        "path": ".cursor/rules",
        "supports_hooks": False,
        "agent_transform": CURSOR_RULE,
        "restart_hint": "Restart Cursor to activate.",
    },
    TargetKind.CODEX: {
        "label": "Codex CLI",
        "flag": "--codex",
        "scope": "project",
        "path": ".",
        "supports_hooks": False,
        "agent_transform": CODEX_CONCAT,
        "restart_hint": "codex.md is ready.",
    },
}


@dataclass(frozen=True)
class TargetSpec:
    kind: TargetKind
    base_path: Path
    supports_hooks: bool
    agent_transform: str
    label: str

    @property
    def is_claude(self) -> bool:
        return self.kind in (TargetKind.CLAUDE_PROJECT, TargetKind.CLAUDE_GLOBAL)

    @property
    def is_opencode(self) -> bool:
        return self.kind in (TargetKind.OPENCODE_PROJECT, TargetKind.OPENCODE_GLOBAL)


def parse_kind(value: str) -> TargetKind:
    try:
        return TargetKind(value)
    except ValueError:
        raise InvalidTarget(f"Unknown target: {value}") from None


def resolve_target(
    kind: TargetKind,
    cwd: Optional[Path] = None,
    home: Optional[Path] = None,
    base_path: Optional[Path] = None,
) -> TargetSpec:
    """Build the TargetSpec for a kind.

    Args:
        kind: Target kind.
        cwd: Working directory for project targets (defaults to Path.cwd()).
        home: Home directory for global targets (defaults to Path.home()).
        base_path: Explicit installation root, used when re-targeting an
            existing installation from its manifest.
    """
    config = TARGET_CONFIG.get(kind)
    if config is None:
        raise InvalidTarget(f"Unknown target: {kind}")

    if base_path is None:
        if config["scope"] == "global":
            root = home if home is not None else Path.home()
        else:
            root = cwd if cwd is not None else Path.cwd()
        base_path = root / config["path"]

    return TargetSpec(
        kind=kind,
        base_path=Path(base_path),
        supports_hooks=config["supports_hooks"],
        agent_transform=config["agent_transform"],
        label=config["label"],
    )
