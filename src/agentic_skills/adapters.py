"""Target adapters: where each catalog entry lands and what it looks like there.

Every target implements the same Adapter interface and is picked by the
target's agent transform, so adding a target means adding one class and
one ADAPTERS entry.
"""

import re
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Type

from agentic_skills import output
from agentic_skills.catalog import (
    SKILL_DOCUMENT,
    AgentEntry,
    SkillEntry,
    claude_settings_files,
    enumerate_hook_scripts,
    opencode_plugin_files,
)
from agentic_skills.converter import convert_agent, render_opencode_agent
from agentic_skills.errors import (
    CodexOutputExists,
    MaterializationFailure,
    MergeDegraded,
    UnsupportedComponentForTarget,
)
from agentic_skills.settings import MergeOutcome, merge_settings
from agentic_skills.targets import (
    CODEX_CONCAT,
    CURSOR_RULE,
    IDENTITY,
    OPENCODE_SUBAGENT,
    TargetSpec,
)
from agentic_skills.writer import FileWriter

CODEX_FILENAME = "codex.md"
CODEX_START = "<!-- agentic-skills:start -->"
CODEX_END = "<!-- agentic-skills:end -->"


@dataclass
class HookResult:
    hook_scripts: List[str] = field(default_factory=list)
    plugin_files: List[str] = field(default_factory=list)


@contextmanager
def materializing(entry: str):
    """Turn filesystem errors for one entry into MaterializationFailure."""
    try:
        yield
    except OSError as e:
        raise MaterializationFailure(entry, e.strerror or str(e)) from e


def safe_filename(name: str) -> str:
    """Flatten a name so it can never introduce a subdirectory."""
    flattened = re.sub(r"[\\/]+", "-", name).strip()
    return flattened.lstrip(".") or "unnamed"


class Adapter:
    """Base adapter. Subclasses override layout and materialization."""

    def __init__(self, spec: TargetSpec, source_root: Path, writer: FileWriter):
        self.spec = spec
        self.source_root = source_root
        self.writer = writer

    @property
    def base(self) -> Path:
        return self.spec.base_path

    def layout_skill(self, entry: SkillEntry) -> List[Path]:
        raise NotImplementedError

    def layout_agent(self, entry: AgentEntry) -> List[Path]:
        raise NotImplementedError

    def materialize_skill(self, entry: SkillEntry):
        raise NotImplementedError

    def materialize_agent(self, entry: AgentEntry):
        raise NotImplementedError

    def install(self, skills: List[SkillEntry], agents: List[AgentEntry], force: bool = False):
        for skill in skills:
            with materializing(f"skill {skill.name}"):
                self.materialize_skill(skill)
        for agent in agents:
            with materializing(f"agent {agent.filename}"):
                self.materialize_agent(agent)

    def install_hooks(self) -> HookResult:
        raise UnsupportedComponentForTarget("hooks", self.spec.label)


class ClaudeAdapter(Adapter):
    """Skills and agents verbatim; hook scripts plus merged settings."""

    def layout_skill(self, entry: SkillEntry) -> List[Path]:
        skill_dir = self.base / "skills" / entry.name
        return [skill_dir / SKILL_DOCUMENT] + [skill_dir / ref for ref in entry.reference_files]

    def layout_agent(self, entry: AgentEntry) -> List[Path]:
        return [self.base / "agents" / entry.filename]

    def materialize_skill(self, entry: SkillEntry):
        destinations = self.layout_skill(entry)
        sources = [entry.primary_document] + [entry.root / ref for ref in entry.reference_files]
        for source, dest in zip(sources, destinations):
            self.writer.copy_file(source, dest)

    def materialize_agent(self, entry: AgentEntry):
        self.writer.copy_file(entry.path, self.layout_agent(entry)[0])

    def install_hooks(self) -> HookResult:
        result = HookResult()
        hooks_dir = self.base / "hooks"
        self.writer.mkdir(hooks_dir / "logs")
        self.writer.mkdir(hooks_dir / "backups")

        for script in enumerate_hook_scripts(self.source_root):
            dest = hooks_dir / script.name
            with materializing(f"hook {script.name}"):
                self.writer.copy_file(script, dest)
                self.writer.make_executable(dest)
            result.hook_scripts.append(script.name)

        for package_settings in claude_settings_files(self.source_root):
            existing = self.base / package_settings.name
            try:
                outcome = merge_settings(existing, package_settings, self.writer)
            except MergeDegraded as e:
                output.warn(str(e))
                continue
            if outcome == MergeOutcome.SEEDED:
                output.info(f"Hook configuration written to {existing.name}")
            elif outcome == MergeOutcome.ALREADY_PRESENT:
                output.warn(f"Hooks already present in {existing.name} - skipped")
            else:
                output.info(f"Hook configuration merged into {existing.name}")

        return result


class OpenCodeAdapter(ClaudeAdapter):
    """Claude skill layout, converted agents, hooks as a bridge plugin."""

    def materialize_agent(self, entry: AgentEntry):
        converted = render_opencode_agent(convert_agent(entry))
        self.writer.write_text(self.layout_agent(entry)[0], converted)

    def install_hooks(self) -> HookResult:
        result = HookResult()
        for plugin in opencode_plugin_files(self.source_root):
            with materializing(f"plugin {plugin.name}"):
                self.writer.copy_file(plugin, self.base / "plugins" / plugin.name)
            result.plugin_files.append(plugin.name)
        return result


class CursorAdapter(Adapter):
    """Everything flattened into the rules directory."""

    def layout_skill(self, entry: SkillEntry) -> List[Path]:
        return [self.base / f"{safe_filename(entry.name)}.md"]

    def layout_agent(self, entry: AgentEntry) -> List[Path]:
        return [self.base / safe_filename(entry.filename)]

    def materialize_skill(self, entry: SkillEntry):
        self.writer.copy_file(entry.primary_document, self.layout_skill(entry)[0])

    def materialize_agent(self, entry: AgentEntry):
        self.writer.copy_file(entry.path, self.layout_agent(entry)[0])


class CodexAdapter(Adapter):
    """All skills and agents concatenated into a single marked block in codex.md."""

    @property
    def outfile(self) -> Path:
        return self.base / CODEX_FILENAME

    def layout_skill(self, entry: SkillEntry) -> List[Path]:
        return [self.outfile]

    def layout_agent(self, entry: AgentEntry) -> List[Path]:
        return [self.outfile]

    def render_block(self, skills: List[SkillEntry], agents: List[AgentEntry]) -> str:
        lines = [
            CODEX_START,
            "# Agentic Skills",
            "",
            f"> {len(skills)} expert-level domain skills + {len(agents)} specialized agents.",
            "",
        ]
        for skill in skills:
            with materializing(f"skill {skill.name}"):
                content = skill.primary_document.read_text(encoding="utf-8")
            lines += ["---", "", f"## Skill: {skill.name}", "", content.rstrip("\n"), ""]
        for agent in agents:
            with materializing(f"agent {agent.filename}"):
                content = agent.text
            lines += ["---", "", f"## Agent: {agent.name}", "", content.rstrip("\n"), ""]
        lines.append(CODEX_END)
        return "\n".join(lines) + "\n"

    def install(self, skills: List[SkillEntry], agents: List[AgentEntry], force: bool = False):
        if not skills and not agents:
            return
        block = self.render_block(skills, agents)

        with materializing(CODEX_FILENAME):
            existing = self.outfile.read_text(encoding="utf-8") if self.outfile.exists() else None

        if existing is None or not existing.strip():
            text = block
        elif CODEX_START in existing:
            if not force:
                raise CodexOutputExists(self.outfile)
            text = replace_codex_block(existing, block)
        else:
            # Keep the user's own content and append below it.
            text = existing.rstrip("\n") + "\n\n" + block

        with materializing(CODEX_FILENAME):
            self.writer.write_text(self.outfile, text)


def replace_codex_block(existing: str, block: str) -> str:
    """Swap the marked block in existing text for a new one."""
    start = existing.index(CODEX_START)
    end = existing.find(CODEX_END, start)
    if end == -1:
        tail = ""
    else:
        tail = existing[end + len(CODEX_END):]
        if tail.startswith("\n"):
            tail = tail[1:]
    return existing[:start] + block + tail


def remove_codex_block(existing: str) -> str:
    """Return existing text without the marked block (empty if nothing else remains)."""
    if CODEX_START not in existing:
        return existing
    remaining = replace_codex_block(existing, "")
    return remaining if remaining.strip() else ""


def installed_paths(spec: TargetSpec, skills: List[str], agents: List[str],
                    hook_scripts: List[str], plugin_files: List[str]) -> List[Path]:
    """Every file a manifest with these names accounts for, by target layout."""
    base = spec.base_path
    if spec.agent_transform == CODEX_CONCAT:
        paths = [base / CODEX_FILENAME] if (skills or agents) else []
    elif spec.agent_transform == CURSOR_RULE:
        paths = [base / f"{safe_filename(name)}.md" for name in skills]
        paths += [base / safe_filename(name) for name in agents]
    else:
        paths = [base / "skills" / name / SKILL_DOCUMENT for name in skills]
        paths += [base / "agents" / name for name in agents]

    if spec.is_claude:
        paths += [base / "hooks" / name for name in hook_scripts]
    elif spec.is_opencode:
        paths += [base / "plugins" / name for name in plugin_files]
    return paths


ADAPTERS: Dict[str, Type[Adapter]] = {
    IDENTITY: ClaudeAdapter,
    OPENCODE_SUBAGENT: OpenCodeAdapter,
    CURSOR_RULE: CursorAdapter,
    CODEX_CONCAT: CodexAdapter,
}


def get_adapter(spec: TargetSpec, source_root: Path, writer: FileWriter) -> Adapter:
    return ADAPTERS[spec.agent_transform](spec, source_root, writer)
