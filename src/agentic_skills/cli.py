#!/usr/bin/env python3
"""
Agentic Skills - installer for skills, agents and hooks across AI coding tools.

Installs into:
- Claude Code (.claude/ or ~/.claude/)
- OpenCode (.opencode/ or ~/.config/opencode/)
- Cursor (.cursor/rules/)
- Codex CLI (codex.md)

Usage:
    agentic-skills install --claude
    agentic-skills install --opencode-global --no-hooks
    agentic-skills update --all
    agentic-skills uninstall --path .claude --force
"""

import platform
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import readchar
import typer
from rich.live import Live
from rich.panel import Panel
from rich.table import Table

from agentic_skills import __version__, output
from agentic_skills.adapters import installed_paths
from agentic_skills.errors import (
    AgenticSkillsError,
    InvalidTarget,
    ManifestError,
    SourceNotFound,
)
from agentic_skills.installer import Selection, run_install
from agentic_skills.manifest import InstallManifest, discover_manifests, read_manifest
from agentic_skills.remote import (
    CANONICAL_REPO,
    DEFAULT_REF,
    get_latest_version,
    is_source_tree,
    repo_url,
    resolved_source,
    temporary_clone,
)
from agentic_skills.targets import TARGET_CONFIG, TargetKind, parse_kind, resolve_target
from agentic_skills.uninstall import uninstall as remove_installation


app = typer.Typer(
    name="agentic-skills",
    help="Install skills, agents and hooks for AI coding assistants",
    add_completion=False,
)


@app.callback(invoke_without_command=True)
def main_callback(ctx: typer.Context):
    """
    Install skills, agents and hooks for AI coding assistants.
    """
    if ctx.invoked_subcommand is None:
        output.banner()
        output.console.print(ctx.get_help())


@contextmanager
def command_errors():
    """Print fatal installer errors as one line on stderr and exit 1."""
    try:
        yield
    except AgenticSkillsError as e:
        output.err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def stdin_is_interactive() -> bool:
    return sys.stdin.isatty()


# =============================================================================
# Interactive Selection Helpers
# =============================================================================

def get_key() -> str:
    """Read a single keypress and name the ones the selectors care about."""
    key = readchar.readkey()

    if key in (readchar.key.UP, readchar.key.CTRL_P):
        return 'up'
    if key in (readchar.key.DOWN, readchar.key.CTRL_N):
        return 'down'
    if key in (readchar.key.ENTER, readchar.key.CR, readchar.key.LF):
        return 'enter'
    if key == readchar.key.ESC:
        return 'esc'
    if key == readchar.key.CTRL_C:
        raise KeyboardInterrupt
    if key == ' ':
        return 'space'
    return key.lower()


def select_one_interactive(options: List[Tuple[str, str]], prompt_text: str) -> Optional[str]:
    """
    Arrow-key single choice. Returns the chosen key, or None when cancelled.

    Controls:
    - ↑/↓: Navigate
    - Enter: Confirm
    - Esc: Cancel
    """
    cursor_index = 0

    def create_panel():
        lines = []
        for i, (_, label) in enumerate(options):
            if i == cursor_index:
                lines.append(f"[bold cyan]→ {label}[/bold cyan]")
            else:
                lines.append(f"[white]  {label}[/white]")
        lines.append("")
        lines.append("[dim]↑/↓: navigate  Enter: confirm  Esc: cancel[/dim]")
        return Panel("\n".join(lines), title=f"[bold cyan]{prompt_text}[/bold cyan]", border_style="cyan")

    with Live(create_panel(), console=output.console, transient=True, refresh_per_second=10) as live:
        while True:
            try:
                key = get_key()
            except KeyboardInterrupt:
                return None
            if key == 'up':
                cursor_index = (cursor_index - 1) % len(options)
            elif key == 'down':
                cursor_index = (cursor_index + 1) % len(options)
            elif key == 'enter':
                return options[cursor_index][0]
            elif key == 'esc':
                return None
            live.update(create_panel())


def select_components_interactive(descriptions: Dict[str, str]) -> Optional[Selection]:
    """
    Multi-select over the offered components, all preselected.

    Controls:
    - ↑/↓: Navigate
    - Space: Toggle
    - A: Select/deselect all
    - Enter: Confirm
    - Esc: Cancel
    """
    components = list(descriptions)
    selected = set(components)
    cursor_index = 0

    def create_panel():
        lines = []
        for i, name in enumerate(components):
            cursor = "→" if i == cursor_index else " "
            check = "✓" if name in selected else " "
            detail = f"[dim]{descriptions[name]}[/dim]"
            style = "bold cyan" if i == cursor_index else "white"
            lines.append(f"[{style}]{cursor} [{check}] {name.capitalize()}[/{style}] {detail}")
        lines.append("")
        lines.append("[dim]↑/↓: navigate  Space: toggle  A: all  Enter: confirm  Esc: cancel[/dim]")
        return Panel("\n".join(lines), title="[bold cyan]Components[/bold cyan]", border_style="cyan")

    with Live(create_panel(), console=output.console, transient=True, refresh_per_second=10) as live:
        while True:
            try:
                key = get_key()
            except KeyboardInterrupt:
                return None
            if key == 'up':
                cursor_index = (cursor_index - 1) % len(components)
            elif key == 'down':
                cursor_index = (cursor_index + 1) % len(components)
            elif key == 'space':
                name = components[cursor_index]
                if name in selected:
                    selected.discard(name)
                else:
                    selected.add(name)
            elif key == 'a':
                selected = set() if len(selected) == len(components) else set(components)
            elif key == 'enter':
                return Selection(
                    skills="skills" in selected,
                    agents="agents" in selected,
                    hooks="hooks" in selected,
                )
            elif key == 'esc':
                return None
            live.update(create_panel())


def target_options() -> List[Tuple[str, str]]:
    options = []
    for kind, config in TARGET_CONFIG.items():
        base = config["path"] if config["scope"] == "project" else f"~/{config['path']}"
        options.append((kind.value, f"{config['label']:<24} [dim]{base}[/dim]"))
    return options


def choose_manifest(manifests: List[Path], force: bool = False) -> Path:
    """Pick one of several manifests: interactively on a TTY, else the first."""
    if len(manifests) == 1 or force or not stdin_is_interactive():
        return manifests[0]
    choice = select_one_interactive(
        [(str(m), str(m)) for m in manifests],
        "Multiple installations found",
    )
    if choice is None:
        output.console.print("\n  Aborted.")
        raise typer.Exit(0)
    return Path(choice)


# =============================================================================
# CLI Commands
# =============================================================================

def _chosen_target(flags: List[Tuple[TargetKind, bool]]) -> Optional[TargetKind]:
    chosen = [kind for kind, enabled in flags if enabled]
    if len(chosen) > 1:
        names = ", ".join(TARGET_CONFIG[kind]["flag"] for kind in chosen)
        raise InvalidTarget(f"Choose a single target (got {names})")
    return chosen[0] if chosen else None


@app.command()
def install(
    claude: bool = typer.Option(False, "--claude", help="Install to .claude/ in the current directory (default)"),
    claude_global: bool = typer.Option(False, "--claude-global", help="Install to ~/.claude/"),
    opencode: bool = typer.Option(False, "--opencode", help="Install to .opencode/ in the current directory"),
    opencode_global: bool = typer.Option(False, "--opencode-global", help="Install to ~/.config/opencode/"),
    cursor: bool = typer.Option(False, "--cursor", help="Install to .cursor/rules/"),
    codex: bool = typer.Option(False, "--codex", help="Write codex.md in the current directory"),
    skills_only: bool = typer.Option(False, "--skills-only", help="Only install skills"),
    agents_only: bool = typer.Option(False, "--agents-only", help="Only install agents"),
    hooks_only: bool = typer.Option(False, "--hooks-only", help="Only install hooks"),
    no_skills: bool = typer.Option(False, "--no-skills", help="Skip skills"),
    no_agents: bool = typer.Option(False, "--no-agents", help="Skip agents"),
    no_hooks: bool = typer.Option(False, "--no-hooks", help="Skip hooks"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be installed, don't write files"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite without prompting"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
    source: Optional[str] = typer.Option(
        None, "--source",
        help="Source checkout or git URL (defaults to this checkout, else the canonical repository)"
    ),
    ref: str = typer.Option(DEFAULT_REF, "--ref", help="Git ref to clone when fetching the source"),
):
    """
    Install skills, agents and hooks into one target.

    Examples:
        agentic-skills install                          # Interactive on a terminal
        agentic-skills install --claude --skills-only   # Project skills only
        agentic-skills install --codex --force          # Rewrite codex.md block
        agentic-skills install --cursor --dry-run       # Preview
    """
    output.configure_console(no_color)

    with command_errors():
        kind = _chosen_target([
            (TargetKind.CLAUDE_PROJECT, claude),
            (TargetKind.CLAUDE_GLOBAL, claude_global),
            (TargetKind.OPENCODE_PROJECT, opencode),
            (TargetKind.OPENCODE_GLOBAL, opencode_global),
            (TargetKind.CURSOR, cursor),
            (TargetKind.CODEX, codex),
        ])
        component_flags = (skills_only, agents_only, hooks_only, no_skills, no_agents, no_hooks)
        selection = Selection.from_flags(*component_flags)

        interactive = kind is None and not any(component_flags) and not force and stdin_is_interactive()
        if interactive:
            output.banner()
            choice = select_one_interactive(target_options(), "Install to")
            if choice is None:
                output.console.print("\n  Aborted.")
                raise typer.Exit(0)
            kind = parse_kind(choice)
            descriptions = {
                "skills": "domain expertise guides",
                "agents": "specialized AI agents",
            }
            if resolve_target(kind).supports_hooks:
                descriptions["hooks"] = "lifecycle hook scripts (Claude) / bridge plugin (OpenCode)"
            selection = select_components_interactive(descriptions)
            if selection is None or selection.is_empty:
                output.console.print("\n  Aborted.")
                raise typer.Exit(0)

        spec = resolve_target(kind or TargetKind.CLAUDE_PROJECT)

        with resolved_source(source, ref=ref) as source_root:
            run_install(source_root, spec, selection, dry_run=dry_run, force=force)

    if not dry_run:
        output.console.print("")
        output.info(f"Done! {TARGET_CONFIG[spec.kind]['restart_hint']}")
        output.console.print("  To uninstall: [dim]agentic-skills uninstall[/dim]")
        output.console.print("")


def update_installation(manifest_file: Path, source_root: Path, dry_run: bool, force: bool):
    """Reinstall one recorded installation from source_root."""
    manifest = read_manifest(manifest_file)
    try:
        kind = parse_kind(manifest.target)
    except InvalidTarget:
        raise ManifestError(f"Unknown target in manifest: {manifest.target} ({manifest_file})") from None

    selection = Selection.from_manifest(manifest)
    if selection.is_empty:
        output.warn(f"Nothing recorded in {manifest_file} - skipped")
        return

    spec = resolve_target(kind, base_path=manifest_file.parent)
    output.info(f"Updating {kind.value} at {spec.base_path}")
    run_install(source_root, spec, selection, dry_run=dry_run, force=force)


def _run_update(path: Optional[Path], update_all: bool, dry_run: bool, force: bool, source_root: Path):
    manifests = discover_manifests(path)
    if not manifests:
        raise ManifestError("No Agentic Skills installation found.")

    targets = manifests if update_all else [choose_manifest(manifests)]
    for manifest_file in targets:
        update_installation(manifest_file, source_root, dry_run, force)


@app.command()
def update(
    path: Optional[Path] = typer.Option(None, "--path", help="Installation directory or manifest file"),
    update_all: bool = typer.Option(False, "--all", help="Update all detected installations"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview without writing"),
    force: bool = typer.Option(True, "--force/--no-force", help="Overwrite existing files (default)"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
    source: Optional[str] = typer.Option(None, "--source", help="Source checkout or git URL"),
):
    """
    Reinstall based on existing manifest(s), keeping each one's target and components.

    Examples:
        agentic-skills update --all
        agentic-skills update --path .claude
    """
    output.configure_console(no_color)

    with command_errors():
        with resolved_source(source) as source_root:
            _run_update(path, update_all, dry_run, force, source_root)


@app.command(name="self-update")
def self_update(
    source: Optional[str] = typer.Option(
        None, "--source",
        help="Local directory or git URL instead of the GitHub default"
    ),
    repo: str = typer.Option(CANONICAL_REPO, "--repo", help="GitHub repository to clone"),
    ref: str = typer.Option(DEFAULT_REF, "--ref", help="Git ref/tag/branch"),
    ssh: bool = typer.Option(False, "--ssh", help="Clone the GitHub repository over SSH"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
    path: Optional[Path] = typer.Option(None, "--path", help="Installation directory or manifest file"),
    update_all: bool = typer.Option(False, "--all", help="Update all detected installations"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview only"),
    force: bool = typer.Option(True, "--force/--no-force", help="Overwrite existing files (default)"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
):
    """
    Fetch the latest content and run update with it.

    Examples:
        agentic-skills self-update --all --yes
        agentic-skills self-update --source ../agentic-skills --path .claude
    """
    output.configure_console(no_color)

    with command_errors():
        if source:
            fetched = resolved_source(source, ref=ref)
            label = source if Path(source).expanduser().is_dir() else f"{source}@{ref}"
        else:
            fetched = temporary_clone(repo_url(repo, ssh), ref)
            label = f"{repo}@{ref}"

        with fetched as source_root:
            if not is_source_tree(source_root):
                raise SourceNotFound(source_root, "skills")

            if not yes and stdin_is_interactive():
                output.console.print(f"Source: {label}")
                if not typer.confirm("Proceed with self-update?", default=True):
                    output.console.print("Aborted.")
                    raise typer.Exit(0)

            output.info(f"Running update from source: {label}")
            _run_update(path, update_all, dry_run, force, source_root)


@app.command(name="uninstall")
def uninstall_cmd(
    path: Optional[Path] = typer.Option(None, "--path", help="Installation directory or manifest file"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
):
    """
    Remove exactly what an installation's manifest records.

    Examples:
        agentic-skills uninstall
        agentic-skills uninstall --path .opencode --force
    """
    output.configure_console(no_color)

    with command_errors():
        manifests = discover_manifests(path)
        if not manifests:
            output.console.print("  No Agentic Skills installation found. Nothing to remove.")
            return

        manifest_file = choose_manifest(manifests, force=force)
        manifest = read_manifest(manifest_file)

        output.header("Found installation:")
        output.console.print("")
        output.console.print(f"    Path:    [bold]{manifest.target_path}[/bold]")
        output.console.print(f"    Target:  {manifest.target}")
        output.console.print(f"    Skills:  {len(manifest.skills)}")
        output.console.print(f"    Agents:  {len(manifest.agents)}")
        output.console.print(f"    Hooks:   {str(manifest.hooks).lower()}")
        output.console.print("")

        if not force and stdin_is_interactive():
            if not typer.confirm("  Remove everything?", default=False):
                output.console.print("\n  Aborted.")
                return

        remove_installation(manifest, manifest_file)

    output.console.print("\n  Agentic Skills uninstalled.\n")


def _components_line(manifest: InstallManifest) -> str:
    return (
        f"skills={len(manifest.skills)} agents={len(manifest.agents)} "
        f"hooks={str(manifest.hooks).lower()}"
    )


@app.command()
def status(
    path: Optional[Path] = typer.Option(None, "--path", help="Installation directory or manifest file"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
):
    """Show detected installations."""
    output.configure_console(no_color)

    with command_errors():
        manifests = discover_manifests(path)
        if not manifests:
            output.console.print("No Agentic Skills installations found.")
            return

        output.console.print(f"Found {len(manifests)} installation(s):")
        for manifest_file in manifests:
            manifest = read_manifest(manifest_file)
            output.console.print("")
            output.console.print(f"- Manifest: {manifest_file}", soft_wrap=True)
            output.console.print(f"  Target: [cyan]{manifest.target}[/cyan]")
            output.console.print(f"  Path: {manifest.target_path}", soft_wrap=True)
            output.console.print(f"  Version: {manifest.version}")
            output.console.print(f"  Installed at: {manifest.installed_at}")
            output.console.print(f"  Components: {_components_line(manifest)}")


def check_installation(manifest_file: Path) -> Tuple[int, List[str]]:
    """Return (passed, missing paths) for one manifest."""
    manifest = read_manifest(manifest_file)
    try:
        kind = parse_kind(manifest.target)
    except InvalidTarget:
        return 0, [f"Unknown target in manifest: {manifest.target}"]

    spec = resolve_target(kind, base_path=manifest_file.parent)
    expected = installed_paths(
        spec,
        manifest.skills,
        manifest.agents,
        manifest.hook_scripts if manifest.hooks else [],
        manifest.plugin_files if manifest.hooks else [],
    )
    missing = [f"Missing file: {p}" for p in expected if not p.is_file()]
    return len(expected) - len(missing), missing


@app.command()
def doctor(
    path: Optional[Path] = typer.Option(None, "--path", help="Installation directory or manifest file"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
):
    """Validate that every recorded file is still in place."""
    output.configure_console(no_color)

    with command_errors():
        manifests = discover_manifests(path)
        if not manifests:
            output.warn("No Agentic Skills installations found.")
            return

        pass_count = 0
        fail_count = 0
        for manifest_file in manifests:
            output.console.print("")
            output.console.print(f"Doctor: {manifest_file}", soft_wrap=True)
            try:
                passed, problems = check_installation(manifest_file)
            except ManifestError as e:
                passed, problems = 0, [str(e)]
            pass_count += passed
            fail_count += len(problems)
            for problem in problems:
                output.error(problem)

    output.console.print("")
    output.console.print(f"Doctor summary: pass={pass_count} fail={fail_count}")
    if fail_count:
        raise typer.Exit(1)


# =============================================================================
# Version
# =============================================================================

@app.command()
def version(
    check_update: bool = typer.Option(
        False, "--check", "-c",
        help="Check for a newer release"
    ),
):
    """Display version and optionally check for updates."""
    output.configure_console()

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="cyan", justify="right")
    table.add_column("Value", style="white")

    table.add_row("Version", __version__)
    table.add_row("Python", platform.python_version())
    table.add_row("Platform", platform.system())

    if check_update:
        latest = get_latest_version()
        if latest:
            table.add_row("Latest", latest)
            if latest != __version__:
                table.add_row("", "[yellow]Update available![/yellow]")
        else:
            table.add_row("Latest", "[dim]Unable to check[/dim]")

    output.console.print(table)


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
