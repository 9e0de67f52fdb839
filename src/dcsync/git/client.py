"""Repository client used by the synchronizer.

The synchronizer only talks to a :class:`RepositoryClient`; :class:`GitClient`
is the implementation backed by the ``git`` binary, tests use an in-memory
fake with the same surface.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Protocol

from ..errors import RemoteAccessError
from ..utils import run_git_command

REMOTE = "origin"


class RepositoryClient(Protocol):
    workdir: Path
    remote_url: str

    def remote_exists(self) -> bool: ...

    def clone(self) -> None: ...

    def init(self) -> None: ...

    def remote_branches(self) -> List[str]: ...

    def remote_branch_exists(self, branch: str) -> bool: ...

    def fetch(self) -> None: ...

    def checkout(self, branch: str) -> None: ...

    def pull(self, branch: str) -> None: ...

    def create_orphan(self, branch: str) -> None: ...

    def remove_all_tracked(self) -> None: ...

    def stage_all(self) -> None: ...

    def staged_files(self) -> List[str]: ...

    def commit(self, message: str) -> None: ...

    def push(self, branch: str) -> None: ...


def parse_heads(output: str) -> List[str]:
    """Extract branch names from ``git ls-remote --heads`` output."""
    branches: List[str] = []
    prefix = "refs/heads/"
    for line in output.splitlines():
        parts = line.split()
        if len(parts) == 2 and parts[1].startswith(prefix):
            branches.append(parts[1][len(prefix):])
    return sorted(branches)


def list_remote_branches(remote_url: str) -> List[str]:
    """List branches of a remote without a local clone."""
    result = run_git_command(
        ["git", "ls-remote", "--heads", remote_url], error_cls=RemoteAccessError
    )
    return parse_heads(result.stdout)


class GitClient:
    """RepositoryClient backed by the git command line inside ``workdir``."""

    def __init__(self, workdir: Path, remote_url: str) -> None:
        self.workdir = workdir
        self.remote_url = remote_url

    def _git(
        self, *args: str, check: bool = True
    ) -> subprocess.CompletedProcess[str]:
        return run_git_command(["git", *args], cwd=self.workdir, check=check)

    def _remote_git(self, *args: str) -> subprocess.CompletedProcess[str]:
        return run_git_command(
            ["git", *args], cwd=self.workdir, error_cls=RemoteAccessError
        )

    def remote_exists(self) -> bool:
        result = run_git_command(
            ["git", "ls-remote", self.remote_url], cwd=self.workdir, check=False
        )
        return result.returncode == 0

    def clone(self) -> None:
        self._remote_git("clone", self.remote_url, ".")

    def init(self) -> None:
        self._git("init")
        self._git("remote", "add", REMOTE, self.remote_url)

    def remote_branches(self) -> List[str]:
        result = self._remote_git("ls-remote", "--heads", REMOTE)
        return parse_heads(result.stdout)

    def remote_branch_exists(self, branch: str) -> bool:
        result = self._git(
            "ls-remote", "--exit-code", "--heads", REMOTE, branch, check=False
        )
        if result.returncode == 0:
            return True
        # --exit-code reports "no matching refs" as 2
        if result.returncode == 2:
            return False
        raise RemoteAccessError(
            ["git", "ls-remote", "--exit-code", "--heads", REMOTE, branch],
            result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )

    def fetch(self) -> None:
        self._remote_git("fetch", REMOTE)

    def checkout(self, branch: str) -> None:
        self._git("checkout", branch)

    def pull(self, branch: str) -> None:
        self._remote_git("pull", REMOTE, branch)

    def create_orphan(self, branch: str) -> None:
        self._git("checkout", "--orphan", branch)
        self.remove_all_tracked()

    def remove_all_tracked(self) -> None:
        if self._git("ls-files").stdout.strip():
            self._git("rm", "-rf", "--quiet", ".")

    def stage_all(self) -> None:
        # --force: global excludes must not drop mirrored source files
        self._git("add", "--all", "--force", ".")

    def staged_files(self) -> List[str]:
        result = self._git("diff", "--cached", "--name-only")
        return [line for line in result.stdout.splitlines() if line]

    def commit(self, message: str) -> None:
        self._git("commit", "--quiet", "-m", message)

    def push(self, branch: str) -> None:
        self._remote_git("push", "-u", REMOTE, branch)
