"""Filesystem writes for an install run.

Every mutation an adapter performs goes through FileWriter. In dry-run
mode the writer records and reports each planned write and touches
nothing, so a dry run walks exactly the same decisions as a real one.
Filesystem errors surface as MaterializationFailure naming the path.
"""

import shutil
import stat
from contextlib import contextmanager
from pathlib import Path
from typing import List

from agentic_skills import output
from agentic_skills.errors import MaterializationFailure


@contextmanager
def writing(path: Path):
    try:
        yield
    except OSError as e:
        raise MaterializationFailure(str(path), e.strerror or str(e)) from e


class FileWriter:
    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run
        self.written: List[Path] = []

    def _record(self, dest: Path):
        self.written.append(dest)
        if self.dry_run:
            output.console.print(f"    [dim]→[/dim] {dest}")

    def mkdir(self, path: Path):
        if self.dry_run:
            return
        with writing(path):
            path.mkdir(parents=True, exist_ok=True)

    def copy_file(self, source: Path, dest: Path):
        self._record(dest)
        if self.dry_run:
            return
        with writing(dest):
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, dest)

    def write_text(self, dest: Path, text: str):
        self._record(dest)
        if self.dry_run:
            return
        with writing(dest):
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_text(text, encoding="utf-8")

    def make_executable(self, path: Path):
        if self.dry_run:
            return
        with writing(path):
            mode = path.stat().st_mode
            path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
