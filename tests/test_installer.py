"""Tests for the install pipeline."""

import json
import shutil

import pytest

from conftest import snapshot
from agentic_skills import __version__
from agentic_skills.errors import CodexOutputExists, InvalidTarget, SourceNotFound
from agentic_skills.installer import Selection, run_install
from agentic_skills.manifest import MANIFEST_NAME, read_manifest
from agentic_skills.targets import TargetKind, resolve_target


def target(kind, tmp_path):
    return resolve_target(kind, cwd=tmp_path / "project", home=tmp_path / "home")


class TestSelection:

    def test_default_selects_everything(self):
        assert Selection.from_flags() == Selection(True, True, True)

    def test_only_flag(self):
        assert Selection.from_flags(agents_only=True) == Selection(False, True, False)

    def test_exclusions(self):
        assert Selection.from_flags(no_hooks=True) == Selection(True, True, False)

    def test_two_only_flags_conflict(self):
        with pytest.raises(InvalidTarget):
            Selection.from_flags(skills_only=True, hooks_only=True)

    def test_empty_selection_rejected(self):
        with pytest.raises(InvalidTarget, match="Nothing selected"):
            Selection.from_flags(no_skills=True, no_agents=True, no_hooks=True)

    def test_from_manifest(self, tmp_path, source_root):
        manifest = run_install(source_root, target(TargetKind.CURSOR, tmp_path), Selection())
        assert Selection.from_manifest(manifest) == Selection(True, True, False)


class TestRunInstall:

    def test_full_claude_install(self, tmp_path, source_root):
        spec = target(TargetKind.CLAUDE_PROJECT, tmp_path)
        manifest = run_install(source_root, spec, Selection())

        base = tmp_path / "project" / ".claude"
        assert manifest.version == __version__
        assert manifest.target == "claude-project"
        assert manifest.target_path == str(base.resolve())
        assert manifest.source == str(source_root.resolve())
        assert manifest.skills == ["api-design", "testing"]
        assert manifest.agents == ["architect.md", "reviewer.md"]
        assert manifest.hooks is True
        assert manifest.hook_scripts == ["guard.sh", "session-start.sh"]
        assert manifest.plugin_files == []
        assert read_manifest(base / MANIFEST_NAME) == manifest

    @pytest.mark.parametrize("kind", list(TargetKind))
    def test_reinstall_is_idempotent(self, tmp_path, source_root, kind):
        spec = target(kind, tmp_path)
        base = spec.base_path

        run_install(source_root, spec, Selection(), force=True)
        first_files = snapshot(base)
        first = json.loads(first_files.pop(MANIFEST_NAME))

        run_install(source_root, spec, Selection(), force=True)
        second_files = snapshot(base)
        second = json.loads(second_files.pop(MANIFEST_NAME))

        assert first_files == second_files
        first.pop("installed_at")
        second.pop("installed_at")
        assert first == second

    def test_dry_run_leaves_disk_untouched(self, tmp_path, source_root):
        project = tmp_path / "project"
        project.mkdir()
        (project / "keep.txt").write_text("x")
        before = snapshot(tmp_path)

        manifest = run_install(source_root, target(TargetKind.CLAUDE_PROJECT, tmp_path), Selection(), dry_run=True)

        assert snapshot(tmp_path) == before
        assert not (project / ".claude").exists()
        assert manifest.skills == ["api-design", "testing"]

    def test_skills_only(self, tmp_path, source_root):
        manifest = run_install(
            source_root, target(TargetKind.CLAUDE_PROJECT, tmp_path), Selection.from_flags(skills_only=True)
        )
        base = tmp_path / "project" / ".claude"
        assert (base / "skills" / "testing" / "SKILL.md").is_file()
        assert not (base / "agents").exists()
        assert not (base / "hooks").exists()
        assert not (base / "settings.json").exists()
        assert manifest.agents == []
        assert manifest.hooks is False

    def test_hooks_on_cursor_are_skipped(self, tmp_path, source_root):
        manifest = run_install(source_root, target(TargetKind.CURSOR, tmp_path), Selection())
        assert manifest.hooks is False
        assert manifest.hook_scripts == []
        assert (tmp_path / "project" / ".cursor" / "rules" / MANIFEST_NAME).is_file()

    def test_opencode_records_plugins(self, tmp_path, source_root):
        manifest = run_install(source_root, target(TargetKind.OPENCODE_GLOBAL, tmp_path), Selection())
        assert manifest.plugin_files == ["agentic-skills-hooks.js"]
        assert manifest.hook_scripts == []
        assert (tmp_path / "home" / ".config" / "opencode" / MANIFEST_NAME).is_file()

    def test_hooks_not_recorded_without_hook_files(self, tmp_path, source_root):
        shutil.rmtree(source_root / ".claude" / "hooks")
        shutil.rmtree(source_root / ".opencode")

        claude = run_install(source_root, target(TargetKind.CLAUDE_PROJECT, tmp_path), Selection())
        assert claude.hooks is False
        assert claude.hook_scripts == []

        opencode = run_install(source_root, target(TargetKind.OPENCODE_PROJECT, tmp_path), Selection())
        assert opencode.hooks is False
        assert opencode.plugin_files == []

    def test_missing_source_writes_nothing(self, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        with pytest.raises(SourceNotFound):
            run_install(empty, target(TargetKind.CLAUDE_PROJECT, tmp_path), Selection())
        assert not (tmp_path / "project").exists()

    def test_codex_refusal_keeps_previous_manifest(self, tmp_path, source_root):
        spec = target(TargetKind.CODEX, tmp_path)
        run_install(source_root, spec, Selection())
        manifest_file = tmp_path / "project" / MANIFEST_NAME
        before = manifest_file.read_bytes()

        with pytest.raises(CodexOutputExists):
            run_install(source_root, spec, Selection.from_flags(skills_only=True))
        assert manifest_file.read_bytes() == before
