"""Fetching the source tree when the installer is not running from a checkout."""

import os
import signal
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional

import httpx

from agentic_skills import output
from agentic_skills.errors import CloneFailure, SourceNotFound

CANONICAL_REPO = "samnetic/agentic-skills"
DEFAULT_REF = "main"


# =============================================================================
# GitHub Helpers
# =============================================================================

def get_github_token(cli_token: Optional[str] = None) -> Optional[str]:
    """Return GitHub token from CLI arg, GH_TOKEN, or GITHUB_TOKEN env var."""
    token = (cli_token or os.getenv("GH_TOKEN") or os.getenv("GITHUB_TOKEN") or "").strip()
    return token if token else None


def get_github_auth_headers(cli_token: Optional[str] = None) -> Dict[str, str]:
    token = get_github_token(cli_token)
    return {"Authorization": f"Bearer {token}"} if token else {}


def get_authenticated_git_url(url: str, token: Optional[str] = None) -> str:
    """Embed a token in a GitHub https URL so private forks can be cloned."""
    token = get_github_token(token)
    if not token:
        return url
    if url.startswith("https://github.com/"):
        return url.replace("https://github.com/", f"https://{token}@github.com/")
    return url


def repo_url(repo: str = CANONICAL_REPO, ssh: bool = False) -> str:
    if ssh:
        return f"git@github.com:{repo}.git"
    return f"https://github.com/{repo}.git"


def get_latest_version(repo: str = CANONICAL_REPO) -> Optional[str]:
    """Fetch the latest release tag from GitHub, or None when unreachable."""
    try:
        response = httpx.get(
            f"https://api.github.com/repos/{repo}/releases/latest",
            timeout=5,
            follow_redirects=True,
            headers=get_github_auth_headers(),
        )
    except httpx.HTTPError:
        return None
    if response.status_code != 200:
        return None
    try:
        data = response.json()
    except ValueError:
        return None
    tag = data.get("tag_name", "") if isinstance(data, dict) else ""
    return tag.lstrip("v") if tag else None


# =============================================================================
# Source Resolution
# =============================================================================

def is_git_url(value: str) -> bool:
    return "://" in value or value.startswith("git@") or value.endswith(".git")


def checkout_root() -> Path:
    """The repository checkout this package was imported from (src layout)."""
    return Path(__file__).resolve().parents[2]


def is_source_tree(path: Path) -> bool:
    return (path / "skills").is_dir() and (path / "agents").is_dir()


def default_source_root() -> Optional[Path]:
    """The local checkout when it carries content, else None (needs a clone)."""
    root = checkout_root()
    return root if is_source_tree(root) else None


def clone_repository(url: str, dest: Path, ref: str = DEFAULT_REF):
    try:
        subprocess.run(
            ["git", "clone", "--depth", "1", "--branch", ref, get_authenticated_git_url(url), str(dest)],
            check=True,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        raise CloneFailure("git is not installed") from e
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or "").strip().splitlines()
        reason = detail[-1] if detail else f"exit status {e.returncode}"
        raise CloneFailure(f"Failed to clone {url} (ref: {ref}): {reason}") from e


def _raise_exit(signum, frame):
    raise SystemExit(128 + signum)


@contextmanager
def temporary_clone(url: str, ref: str = DEFAULT_REF) -> Iterator[Path]:
    """Shallow-clone url into a temporary directory removed on every exit path.

    SIGTERM and SIGHUP are turned into SystemExit while the clone is alive,
    so the directory is cleaned up even when the process is signalled.
    """
    handled = [sig for sig in (getattr(signal, "SIGTERM", None), getattr(signal, "SIGHUP", None)) if sig]
    previous = {}
    try:
        for sig in handled:
            previous[sig] = signal.signal(sig, _raise_exit)
    except ValueError:
        # Not the main thread; signals stay with their current handlers.
        previous = {}

    try:
        with tempfile.TemporaryDirectory(prefix="agentic-skills-") as tmp:
            dest = Path(tmp) / "source"
            output.console.print(f"[cyan]Cloning {url}@{ref}...[/cyan]")
            clone_repository(url, dest, ref)
            yield dest
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


@contextmanager
def resolved_source(
    source: Optional[str] = None,
    repo: str = CANONICAL_REPO,
    ref: str = DEFAULT_REF,
    ssh: bool = False,
) -> Iterator[Path]:
    """Yield a local source root.

    A local directory is used as is. A non-directory value is treated as a
    git URL. With no value, the running checkout is used when it has
    content; otherwise the canonical repository is cloned.
    """
    if source:
        local = Path(source).expanduser()
        if local.is_dir():
            yield local.resolve()
            return
        if not is_git_url(source):
            raise SourceNotFound(local.parent, local.name)
        with temporary_clone(source, ref) as cloned:
            yield cloned
        return

    local_root = default_source_root()
    if local_root is not None:
        yield local_root
        return

    with temporary_clone(repo_url(repo, ssh), ref) as cloned:
        yield cloned
