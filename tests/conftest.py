"""
Shared fixtures: a small but complete source tree and isolated project/home dirs.
"""

import json
from pathlib import Path

import pytest


ARCHITECT_AGENT = """---
name: architect
description: >-
  Designs systems end to end,
  from data model to deployment.
tools: Read, Grep, Glob, Bash, WebSearch
model: opus
---

# Architect

You design systems.
"""

# The stray colon in the description makes this header invalid YAML.
REVIEWER_AGENT = """---
name: reviewer
description: Reviews code: finds bugs before they ship
---

# Reviewer

You review code.
"""

PACKAGE_SETTINGS = {
    "hooks": {
        "PreToolUse": [
            {
                "matcher": "Bash",
                "hooks": [{"type": "command", "command": ".claude/hooks/guard.sh"}],
            }
        ]
    }
}

PACKAGE_LOCAL_SETTINGS = {
    "hooks": {
        "SessionStart": [
            {"hooks": [{"type": "command", "command": ".claude/hooks/session-start.sh"}]}
        ]
    }
}


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def build_source_tree(root: Path) -> Path:
    write(root / "skills" / "api-design" / "SKILL.md", "# API Design\n\nDesign good APIs.\n")
    write(root / "skills" / "api-design" / "references" / "checklist.md", "- versioning\n")
    write(root / "skills" / "testing" / "SKILL.md", "# Testing\n\nTest everything.\n")
    write(root / "skills" / "drafts" / "notes.md", "not a skill yet\n")
    write(root / "skills" / ".hidden" / "SKILL.md", "# Hidden\n")

    write(root / "agents" / "architect.md", ARCHITECT_AGENT)
    write(root / "agents" / "reviewer.md", REVIEWER_AGENT)
    write(root / "agents" / "README.txt", "not an agent\n")

    write(root / ".claude" / "hooks" / "guard.sh", "#!/bin/sh\nexit 0\n")
    write(root / ".claude" / "hooks" / "session-start.sh", "#!/bin/sh\necho hi\n")
    write(root / ".claude" / "settings.json", json.dumps(PACKAGE_SETTINGS, indent=2) + "\n")
    write(root / ".claude" / "settings.local.json", json.dumps(PACKAGE_LOCAL_SETTINGS, indent=2) + "\n")

    write(root / ".opencode" / "plugins" / "agentic-skills-hooks.js", "export default {};\n")
    return root


def snapshot(root: Path) -> dict:
    """Relative path -> bytes for every file under root."""
    if not root.exists():
        return {}
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


@pytest.fixture
def source_root(tmp_path):
    return build_source_tree(tmp_path / "source")


@pytest.fixture
def project(tmp_path, monkeypatch):
    """An empty project directory as cwd, with HOME pointed at a temp dir."""
    project_dir = tmp_path / "project"
    home_dir = tmp_path / "home"
    project_dir.mkdir()
    home_dir.mkdir()
    monkeypatch.chdir(project_dir)
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.setenv("COLUMNS", "200")
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("GH_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    return project_dir
