"""Manifest-driven removal. Only files the manifest lists are removed."""

import shutil
from dataclasses import dataclass
from pathlib import Path

from agentic_skills import output
from agentic_skills.adapters import CODEX_FILENAME, remove_codex_block, safe_filename
from agentic_skills.manifest import InstallManifest
from agentic_skills.targets import TargetKind, parse_kind


@dataclass
class RemovalCounts:
    skills: int = 0
    agents: int = 0
    hooks: int = 0


def _remove_file(path: Path) -> bool:
    if path.is_file() or path.is_symlink():
        path.unlink()
        return True
    return False


def _prune_if_empty(directory: Path):
    if directory.is_dir() and not any(directory.iterdir()):
        directory.rmdir()


def uninstall(manifest: InstallManifest, manifest_file: Path) -> RemovalCounts:
    """Remove everything a manifest records, then the manifest itself.

    Paths are resolved against the directory holding the manifest.
    """
    kind = parse_kind(manifest.target)
    root = manifest_file.parent
    counts = RemovalCounts()

    if kind == TargetKind.CODEX:
        outfile = root / CODEX_FILENAME
        if outfile.is_file():
            remaining = remove_codex_block(outfile.read_text(encoding="utf-8"))
            if remaining:
                outfile.write_text(remaining, encoding="utf-8")
            else:
                outfile.unlink()
            counts.skills = len(manifest.skills)
            counts.agents = len(manifest.agents)

    elif kind == TargetKind.CURSOR:
        for skill in manifest.skills:
            if _remove_file(root / f"{safe_filename(skill)}.md"):
                counts.skills += 1
        for agent in manifest.agents:
            if _remove_file(root / safe_filename(agent)):
                counts.agents += 1

    else:
        for skill in manifest.skills:
            skill_dir = root / "skills" / skill
            if skill_dir.is_dir():
                shutil.rmtree(skill_dir)
                counts.skills += 1
        for agent in manifest.agents:
            if _remove_file(root / "agents" / agent):
                counts.agents += 1
        _prune_if_empty(root / "skills")
        _prune_if_empty(root / "agents")

    if manifest.hooks:
        if kind in (TargetKind.CLAUDE_PROJECT, TargetKind.CLAUDE_GLOBAL):
            hooks_dir = root / "hooks"
            for script in manifest.hook_scripts:
                if _remove_file(hooks_dir / script):
                    counts.hooks += 1
            for runtime_dir in ("logs", "backups"):
                if (hooks_dir / runtime_dir).is_dir():
                    shutil.rmtree(hooks_dir / runtime_dir)
            _prune_if_empty(hooks_dir)
        elif kind in (TargetKind.OPENCODE_PROJECT, TargetKind.OPENCODE_GLOBAL):
            for plugin in manifest.plugin_files:
                if _remove_file(root / "plugins" / plugin):
                    counts.hooks += 1
            _prune_if_empty(root / "plugins")

    if counts.skills:
        output.info(f"{counts.skills} skills removed")
    if counts.agents:
        output.info(f"{counts.agents} agents removed")
    if counts.hooks:
        output.info(f"{counts.hooks} hook/plugin files removed")
    if manifest.hooks and kind in (TargetKind.CLAUDE_PROJECT, TargetKind.CLAUDE_GLOBAL):
        output.warn("Hooks config may exist in settings.json/settings.local.json - review and remove manually:")
        output.console.print(f"    {root / 'settings.json'}")
        output.console.print(f"    {root / 'settings.local.json'}")

    manifest_file.unlink()
    output.info("Manifest removed")
    return counts
