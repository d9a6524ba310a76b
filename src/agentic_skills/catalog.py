"""Source catalog: read-only enumeration of the package's source tree.

Source layout::

    <source>/
    ├── skills/<name>/SKILL.md       # plus optional reference files
    ├── agents/<name>.md
    ├── .claude/hooks/*.sh           # Claude lifecycle hooks
    ├── .claude/settings*.json       # hook registrations for Claude
    └── .opencode/plugins/*.js       # OpenCode hook bridge plugin
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

from agentic_skills.errors import SourceNotFound
from agentic_skills.frontmatter import read_document

SKILL_DOCUMENT = "SKILL.md"
SETTINGS_FILES = ("settings.json", "settings.local.json")


@dataclass(frozen=True)
class SkillEntry:
    name: str
    root: Path
    primary_document: Path
    reference_files: Tuple[Path, ...] = ()


@dataclass(frozen=True)
class AgentEntry:
    name: str
    filename: str
    path: Path
    front_matter: Dict[str, Any] = field(default_factory=dict, hash=False, compare=False)
    body: str = ""

    @property
    def text(self) -> str:
        return self.path.read_text(encoding="utf-8")


def _require_dir(source_root: Path, name: str) -> Path:
    path = source_root / name
    if not path.is_dir():
        raise SourceNotFound(source_root, name)
    return path


def enumerate_skills(source_root: Path) -> List[SkillEntry]:
    """List every skill directory under skills/, sorted by name.

    Hidden directories and directories without a SKILL.md are skipped.
    Reference files are every other file in the skill directory,
    recursively, as paths relative to the skill root.
    """
    skills_dir = _require_dir(source_root, "skills")
    entries = []

    for skill_dir in sorted(skills_dir.iterdir(), key=lambda p: p.name):
        if not skill_dir.is_dir() or skill_dir.name.startswith("."):
            continue
        primary = skill_dir / SKILL_DOCUMENT
        if not primary.is_file():
            continue

        references = sorted(
            (
                item.relative_to(skill_dir)
                for item in skill_dir.rglob("*")
                if item.is_file() and item != primary
                and not any(part.startswith(".") for part in item.relative_to(skill_dir).parts)
            ),
            key=lambda p: p.as_posix(),
        )
        entries.append(SkillEntry(
            name=skill_dir.name,
            root=skill_dir,
            primary_document=primary,
            reference_files=tuple(references),
        ))

    return entries


def enumerate_agents(source_root: Path) -> List[AgentEntry]:
    """List every agents/*.md persona, sorted by filename."""
    agents_dir = _require_dir(source_root, "agents")
    entries = []

    for agent_file in sorted(agents_dir.glob("*.md"), key=lambda p: p.name):
        if not agent_file.is_file():
            continue
        front_matter, body = read_document(agent_file.read_text(encoding="utf-8"))
        entries.append(AgentEntry(
            name=agent_file.stem,
            filename=agent_file.name,
            path=agent_file,
            front_matter=front_matter,
            body=body,
        ))

    return entries


def enumerate_hook_scripts(source_root: Path) -> List[Path]:
    hooks_dir = source_root / ".claude" / "hooks"
    if not hooks_dir.is_dir():
        return []
    return sorted((p for p in hooks_dir.glob("*.sh") if p.is_file()), key=lambda p: p.name)


def claude_settings_files(source_root: Path) -> List[Path]:
    """Package settings files carrying Claude hook registrations."""
    claude_dir = source_root / ".claude"
    return [claude_dir / name for name in SETTINGS_FILES if (claude_dir / name).is_file()]


def opencode_plugin_files(source_root: Path) -> List[Path]:
    plugins_dir = source_root / ".opencode" / "plugins"
    if not plugins_dir.is_dir():
        return []
    return sorted((p for p in plugins_dir.glob("*.js") if p.is_file()), key=lambda p: p.name)


def validate_source(source_root: Path):
    """Raise SourceNotFound unless both skills/ and agents/ exist."""
    _require_dir(source_root, "skills")
    _require_dir(source_root, "agents")
