"""Subprocess utilities for running git commands."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional, Type

from ..errors import GitCommandError
from .console import console


def run_git_command(
    cmd: List[str],
    cwd: Optional[Path] = None,
    check: bool = True,
    error_cls: Type[GitCommandError] = GitCommandError,
) -> subprocess.CompletedProcess[str]:
    """Run a git command and return the result.

    When ``check`` is true a non-zero exit status is reported and raised as
    ``error_cls``; otherwise the completed process is returned as-is so the
    caller can inspect ``returncode``.
    """
    console.print(f"Running: {' '.join(cmd)}", style="dim")
    result = subprocess.run(cmd, cwd=cwd, capture_output=True, text=True)
    if check and result.returncode != 0:
        console.print(
            f"Command failed with exit code {result.returncode}", style="bold red"
        )
        if result.stdout.strip():
            console.print(f"stdout: {result.stdout.strip()}", style="bold yellow")
        if result.stderr.strip():
            console.print(f"stderr: {result.stderr.strip()}", style="bold yellow")
        raise error_cls(
            cmd,
            result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )
    return result
