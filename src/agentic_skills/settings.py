"""Merge the package's Claude hook registrations into existing settings.

A user's settings file is never corrupted: when it cannot be parsed as a
JSON object, the merge is abandoned with MergeDegraded and the file is
left exactly as it was.
"""

import copy
import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List

from agentic_skills.errors import MergeDegraded
from agentic_skills.writer import FileWriter


class MergeOutcome(str, Enum):
    SEEDED = "seeded"
    ALREADY_PRESENT = "already-present"
    MERGED = "merged"


def load_settings(path: Path) -> Dict[str, Any]:
    """Load a settings file as a JSON object.

    Raises ValueError on invalid JSON or non-object content.
    """
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"{path} contains non-object JSON")
    return data


def dump_settings(settings: Dict[str, Any]) -> str:
    return json.dumps(settings, indent=2) + "\n"


def _dedupe(entries: List[Any]) -> List[Any]:
    unique: List[Any] = []
    for entry in entries:
        if entry not in unique:
            unique.append(entry)
    return unique


def package_hooks(package: Dict[str, Any]) -> Dict[str, List[Any]]:
    hooks = package.get("hooks", {})
    if not isinstance(hooks, dict):
        return {}
    return {event: list(entries) for event, entries in hooks.items() if isinstance(entries, list)}


def contains_hooks(existing: Dict[str, Any], package: Dict[str, Any]) -> bool:
    """True when every package hook entry is already registered."""
    existing_hooks = existing.get("hooks", {})
    if not isinstance(existing_hooks, dict):
        return False
    for event, entries in package_hooks(package).items():
        current = existing_hooks.get(event, [])
        if not isinstance(current, list):
            return False
        if any(entry not in current for entry in entries):
            return False
    return True


def check_mergeable(existing: Dict[str, Any], package: Dict[str, Any]):
    """Raise ValueError when merging would have to replace a user value."""
    if "hooks" not in existing:
        return
    hooks = existing["hooks"]
    if not isinstance(hooks, dict):
        raise ValueError("existing 'hooks' is not an object")
    for event in package_hooks(package):
        if event in hooks and not isinstance(hooks[event], list):
            raise ValueError(f"existing 'hooks.{event}' is not a list")


def merge_hook_config(existing: Dict[str, Any], package: Dict[str, Any]) -> Dict[str, Any]:
    """Append package hook entries per event and dedupe by structural equality.

    Keys other than ``hooks`` and events the package does not mention are
    carried over unchanged. Raises ValueError (see check_mergeable) rather
    than replace a ``hooks`` value of the wrong shape.
    """
    check_mergeable(existing, package)
    merged = copy.deepcopy(existing)
    hooks = merged.setdefault("hooks", {})

    for event, entries in package_hooks(package).items():
        current = hooks.get(event, [])
        hooks[event] = _dedupe(current + copy.deepcopy(entries))

    return merged


def merge_settings(existing_path: Path, package_path: Path, writer: FileWriter) -> MergeOutcome:
    """Reconcile package settings with the user's settings file.

    Raises MergeDegraded when the existing file cannot be merged.
    """
    if not existing_path.exists():
        writer.copy_file(package_path, existing_path)
        return MergeOutcome.SEEDED

    try:
        existing = load_settings(existing_path)
    except (ValueError, OSError) as e:
        raise MergeDegraded(existing_path, package_path, str(e)) from e

    try:
        package = load_settings(package_path)
    except (ValueError, OSError) as e:
        raise MergeDegraded(existing_path, package_path, str(e)) from e

    if contains_hooks(existing, package):
        return MergeOutcome.ALREADY_PRESENT

    try:
        merged = merge_hook_config(existing, package)
    except ValueError as e:
        raise MergeDegraded(existing_path, package_path, str(e)) from e

    writer.write_text(existing_path, dump_settings(merged))
    return MergeOutcome.MERGED
