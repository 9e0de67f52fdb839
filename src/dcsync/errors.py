"""Error taxonomy for dcsync.

Every fatal condition is a :class:`SyncError`; the CLI turns any of them
into a red status line and exit status 1. A run that finds nothing to
commit is not an error, it is reported through :class:`Outcome`.
"""

from __future__ import annotations

import enum
from typing import Optional, Sequence


class Outcome(enum.Enum):
    """Result of a create-or-update step on one branch."""

    UPDATED = "updated"
    NO_OP = "no-op"


class SyncError(Exception):
    """Base class for fatal synchronization errors."""


class UsageError(SyncError):
    """Invocation arguments could not be resolved."""


class MissingSourceError(SyncError):
    """A required local source subtree is absent."""

    def __init__(self, path: object, where: Optional[str] = None) -> None:
        message = f"{path} directory not found"
        if where:
            message += f" in {where}"
        super().__init__(message)
        self.path = path


class SourceCopyError(SyncError):
    """A source subtree could not be copied into the staging clone."""

    def __init__(self, path: object, reason: object) -> None:
        super().__init__(f"Unable to copy {path}: {reason}")
        self.path = path


class ConfigError(SyncError):
    """The settings file is malformed."""


class GitCommandError(SyncError):
    """A git command exited with a non-zero status."""

    def __init__(
        self,
        cmd: Sequence[str],
        returncode: int,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        detail = stderr.strip().splitlines()[-1] if stderr.strip() else ""
        message = f"'{' '.join(self.cmd)}' failed with exit code {returncode}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class RemoteAccessError(GitCommandError):
    """A clone, fetch, pull or push against the remote failed."""
