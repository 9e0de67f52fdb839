"""Invocation context: argument resolution and workspace location."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence, Tuple

from .config import SyncSettings
from .errors import MissingSourceError, UsageError

URL_SCHEME_MARKER = "://"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

PACKAGE_FILE = Path(__file__).resolve()


@dataclass(frozen=True)
class SyncContext:
    """Everything one sync run needs, resolved up front."""

    template_name: str
    remote_url: str
    workspace: Path
    source_dirs: Tuple[str, ...]
    index_branch: str
    timestamp: datetime

    @property
    def stamp(self) -> str:
        return self.timestamp.strftime(TIMESTAMP_FORMAT)


def resolve_arguments(
    args: Sequence[str], default_remote: str
) -> Tuple[str, str]:
    """Resolve ``(template_name, remote_url)`` from positional arguments.

    Accepts ``<template> [url]`` as well as the legacy ``<url> <template>``
    ordering, told apart by a URI scheme in the first token.
    """
    if len(args) > 2:
        raise UsageError(f"Expected at most 2 arguments, got {len(args)}")
    if not args or not args[0]:
        raise UsageError("Template branch name is required")

    first = args[0]
    second = args[1] if len(args) > 1 else ""
    if URL_SCHEME_MARKER in first:
        remote_url, template_name = first, second
    else:
        template_name, remote_url = first, second or default_remote

    if not template_name:
        raise UsageError("Template branch name is required")
    if URL_SCHEME_MARKER in template_name:
        raise UsageError(f"Template branch name looks like a URL: {template_name}")
    return template_name, remote_url


def discover_workspace(source_dirs: Sequence[str]) -> Path:
    """Find the nearest parent of this package holding every source subtree.

    Raises MissingSourceError if no parent matches.
    """
    for parent in PACKAGE_FILE.parents:
        if all((parent / rel).is_dir() for rel in source_dirs):
            return parent
    raise MissingSourceError(
        source_dirs[0], where=f"any parent of {PACKAGE_FILE.parent}"
    )


def locate_workspace(
    source_dirs: Sequence[str], workspace: Optional[Path] = None
) -> Path:
    """Return the absolute workspace root holding every source subtree.

    Without an explicit ``workspace`` the root is discovered from where this
    package is installed, never from the caller's working directory.
    """
    if workspace is None:
        return discover_workspace(source_dirs)
    root = workspace.resolve()
    for rel in source_dirs:
        if not (root / rel).is_dir():
            raise MissingSourceError(root / rel)
    return root


def build_context(
    args: Sequence[str],
    settings: SyncSettings,
    workspace: Optional[Path] = None,
    now: Optional[datetime] = None,
) -> SyncContext:
    """Resolve arguments and workspace into an immutable :class:`SyncContext`."""
    template_name, remote_url = resolve_arguments(args, settings.remote_url)
    if template_name == settings.index_branch:
        raise UsageError(
            f"'{template_name}' is reserved for the templates index branch"
        )
    root = locate_workspace(settings.source_dirs, workspace)
    return SyncContext(
        template_name=template_name,
        remote_url=remote_url,
        workspace=root,
        source_dirs=settings.source_dirs,
        index_branch=settings.index_branch,
        timestamp=now or datetime.now(),
    )
