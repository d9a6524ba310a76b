"""The install pipeline: catalog -> adapter -> manifest.

The manifest is assembled as a value while entries are materialized and
written exactly once, after every write has succeeded. Any fatal error
raised on the way leaves the previous manifest (if any) untouched.
"""

from dataclasses import dataclass
from pathlib import Path

from agentic_skills import __version__, output
from agentic_skills.adapters import get_adapter
from agentic_skills.catalog import enumerate_agents, enumerate_skills, validate_source
from agentic_skills.errors import InvalidTarget, UnsupportedComponentForTarget
from agentic_skills.manifest import InstallManifest, manifest_path, write_manifest
from agentic_skills.targets import TargetSpec
from agentic_skills.writer import FileWriter


@dataclass(frozen=True)
class Selection:
    skills: bool = True
    agents: bool = True
    hooks: bool = True

    @classmethod
    def from_flags(
        cls,
        skills_only: bool = False,
        agents_only: bool = False,
        hooks_only: bool = False,
        no_skills: bool = False,
        no_agents: bool = False,
        no_hooks: bool = False,
    ) -> "Selection":
        only = [name for name, flag in (
            ("skills", skills_only), ("agents", agents_only), ("hooks", hooks_only)
        ) if flag]
        if len(only) > 1:
            raise InvalidTarget("Choose at most one of --skills-only, --agents-only, --hooks-only")

        if only:
            selection = cls(skills=only[0] == "skills", agents=only[0] == "agents", hooks=only[0] == "hooks")
        else:
            selection = cls(skills=not no_skills, agents=not no_agents, hooks=not no_hooks)

        if selection.is_empty:
            raise InvalidTarget("Nothing selected to install")
        return selection

    @classmethod
    def from_manifest(cls, manifest: InstallManifest) -> "Selection":
        return cls(skills=bool(manifest.skills), agents=bool(manifest.agents), hooks=manifest.hooks)

    @property
    def is_empty(self) -> bool:
        return not (self.skills or self.agents or self.hooks)


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def run_install(
    source_root: Path,
    spec: TargetSpec,
    selection: Selection,
    dry_run: bool = False,
    force: bool = False,
) -> InstallManifest:
    """Install the selected components from source_root into a target.

    Returns the manifest describing the run. In dry-run mode the manifest
    is built but nothing, including the manifest, is written.
    """
    source_root = Path(source_root).resolve()
    validate_source(source_root)
    skills = enumerate_skills(source_root) if selection.skills else []
    agents = enumerate_agents(source_root) if selection.agents else []

    writer = FileWriter(dry_run=dry_run)
    adapter = get_adapter(spec, source_root, writer)

    output.console.print("")
    if dry_run:
        output.header("Dry run - nothing will be written")
        output.console.print(f"  Target: [bold]{spec.label}[/bold]")
        output.console.print(f"  Path:   [dim]{spec.base_path}[/dim]")
    else:
        output.header(f"Installing to {spec.base_path} ...")
    output.console.print("")

    adapter.install(skills, agents, force=force)
    if skills:
        output.info(f"{_plural(len(skills), 'skill')} installed")
    if agents:
        output.info(f"{_plural(len(agents), 'agent')} installed")

    hook_scripts = []
    plugin_files = []
    if selection.hooks:
        try:
            result = adapter.install_hooks()
        except UnsupportedComponentForTarget as e:
            output.warn(str(e))
        else:
            hook_scripts = result.hook_scripts
            plugin_files = result.plugin_files
            if hook_scripts:
                output.info(f"{_plural(len(hook_scripts), 'hook script')} installed")
            if plugin_files:
                output.info(f"{_plural(len(plugin_files), 'plugin file')} installed")
            if not (hook_scripts or plugin_files):
                output.warn("No hook files found in the source - hooks not recorded")

    manifest = InstallManifest(
        version=__version__,
        source=str(source_root),
        target=spec.kind.value,
        target_path=str(spec.base_path.resolve()),
        skills=[skill.name for skill in skills],
        agents=[agent.filename for agent in agents],
        hooks=bool(hook_scripts or plugin_files),
        hook_scripts=hook_scripts,
        plugin_files=plugin_files,
    )

    if dry_run:
        output.console.print(f"\n  Manifest: [dim]{manifest_path(spec.base_path)}[/dim]")
    else:
        writer.mkdir(spec.base_path)
        write_manifest(manifest, spec.base_path, writer)
        output.info("Manifest saved")

    return manifest
