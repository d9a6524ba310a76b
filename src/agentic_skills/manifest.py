"""The installation manifest: what one install run wrote to a target root.

The manifest is a snapshot. Each run builds a fresh InstallManifest and
writes it once, after every entry has been materialized, replacing any
previous manifest at the same root.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from agentic_skills.errors import ManifestError
from agentic_skills.writer import FileWriter

MANIFEST_NAME = ".agentic-skills.manifest"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass
class InstallManifest:
    version: str
    source: str
    target: str
    target_path: str
    installed_at: str = field(default_factory=utc_timestamp)
    skills: List[str] = field(default_factory=list)
    agents: List[str] = field(default_factory=list)
    hooks: bool = False
    hook_scripts: List[str] = field(default_factory=list)
    plugin_files: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "installed_at": self.installed_at,
            "source": self.source,
            "target": self.target,
            "target_path": self.target_path,
            "skills": list(self.skills),
            "agents": list(self.agents),
            "hooks": self.hooks,
            "hook_scripts": list(self.hook_scripts),
            "plugin_files": list(self.plugin_files),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InstallManifest":
        missing = [key for key in ("target", "target_path") if not data.get(key)]
        if missing:
            raise ManifestError(f"Manifest is missing {', '.join(missing)}")
        return cls(
            version=str(data.get("version", "")),
            installed_at=str(data.get("installed_at", "")),
            source=str(data.get("source", "")),
            target=str(data["target"]),
            target_path=str(data["target_path"]),
            skills=list(data.get("skills") or []),
            agents=list(data.get("agents") or []),
            hooks=bool(data.get("hooks", False)),
            hook_scripts=list(data.get("hook_scripts") or []),
            plugin_files=list(data.get("plugin_files") or []),
        )


def manifest_path(target_root: Path) -> Path:
    return target_root / MANIFEST_NAME


def write_manifest(manifest: InstallManifest, target_root: Path, writer: FileWriter) -> Path:
    path = manifest_path(target_root)
    writer.write_text(path, json.dumps(manifest.to_dict(), indent=2) + "\n")
    return path


def read_manifest(path: Path) -> InstallManifest:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        raise ManifestError(f"Cannot read manifest {path}: {e}") from e
    if not isinstance(data, dict):
        raise ManifestError(f"Manifest {path} is not a JSON object")
    return InstallManifest.from_dict(data)


def default_search_roots(cwd: Optional[Path] = None, home: Optional[Path] = None) -> List[Path]:
    cwd = cwd if cwd is not None else Path.cwd()
    home = home if home is not None else Path.home()
    return [
        cwd / ".claude",
        home / ".claude",
        cwd / ".opencode",
        home / ".config" / "opencode",
        cwd / ".cursor" / "rules",
        cwd,
    ]


def discover_manifests(
    search_path: Optional[Path] = None,
    cwd: Optional[Path] = None,
    home: Optional[Path] = None,
) -> List[Path]:
    """Find manifests at a path (directory or manifest file) or in the usual places.

    Results are absolute and deduplicated, in search order.
    """
    candidates: List[Path] = []
    if search_path is not None:
        search_path = Path(search_path)
        if search_path.is_file():
            candidates.append(search_path)
        else:
            candidates.append(manifest_path(search_path))
    else:
        candidates = [manifest_path(root) for root in default_search_roots(cwd, home)]

    seen = set()
    found = []
    for candidate in candidates:
        if not candidate.is_file():
            continue
        resolved = candidate.resolve()
        if resolved in seen:
            continue
        seen.add(resolved)
        found.append(resolved)
    return found
