"""Error taxonomy for the installer.

Fatal errors abort the whole run before any manifest is written. Non-fatal
ones are reported as warnings and the run carries on with reduced
functionality.
"""

from pathlib import Path
from typing import Optional


class AgenticSkillsError(Exception):
    """Base class for every installer error."""

    fatal = True


class SourceNotFound(AgenticSkillsError):
    """The source tree is missing skills/ or agents/."""

    def __init__(self, source_root: Path, missing: str):
        self.source_root = source_root
        self.missing = missing
        super().__init__(f"Cannot find {missing}/ directory in {source_root}")


class InvalidTarget(AgenticSkillsError):
    """Unknown target, conflicting target flags, or an empty component selection."""


class CloneFailure(AgenticSkillsError):
    """The remote source could not be fetched."""


class ManifestError(AgenticSkillsError):
    """A manifest exists but cannot be read or names an unknown target."""


class MaterializationFailure(AgenticSkillsError):
    """Writing one catalog entry to the target failed."""

    def __init__(self, entry: str, reason: str):
        self.entry = entry
        self.reason = reason
        super().__init__(f"Failed to install {entry}: {reason}")


class CodexOutputExists(MaterializationFailure):
    """codex.md already carries installed content and --force was not given."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(
            str(path),
            "already contains Agentic Skills content (use --force to overwrite)",
        )


class MergeDegraded(AgenticSkillsError):
    """Existing settings could not be merged automatically."""

    fatal = False

    def __init__(self, settings_path: Path, reference: Path, reason: Optional[str] = None):
        self.settings_path = settings_path
        self.reference = reference
        self.reason = reason
        detail = f" ({reason})" if reason else ""
        super().__init__(
            f"{settings_path.name} exists but could not be merged{detail}; "
            f"merge hooks manually from {reference}"
        )


class UnsupportedComponentForTarget(AgenticSkillsError):
    """A component was requested for a target that cannot host it."""

    fatal = False

    def __init__(self, component: str, target_label: str):
        self.component = component
        self.target_label = target_label
        super().__init__(
            f"{component.capitalize()} are only supported for Claude Code and OpenCode "
            f"({target_label}) - skipped"
        )
