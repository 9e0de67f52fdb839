"""CLI interface for dcsync - devcontainer template catalog sync."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn, Optional, Tuple

import click

from .config import SyncSettings, get_settings
from .context import build_context
from .errors import ConfigError, SyncError, UsageError
from .git import list_remote_branches
from .pipeline import print_summary, run_reindex, run_sync
from .sync import template_branches
from .utils import console


def usage_text(default_remote: str) -> str:
    return "\n".join(
        [
            "Usage: devcontainer-sync sync <template-branch-name> [remote-repo-url]",
            "",
            "Examples:",
            "  devcontainer-sync sync nextjs-bun",
            "  devcontainer-sync sync nextjs-bun https://github.com/user/devcontainer-templates.git",
            "  devcontainer-sync sync python-django",
            "  devcontainer-sync sync react-vite",
            "",
            f"Default repository: {default_remote}",
            "",
            "Each template will be stored in its own branch.",
            "The main branch will automatically be updated with an index of all templates.",
        ]
    )


def _fail(error: SyncError, usage: Optional[str] = None) -> NoReturn:
    console.print(f"❌ Error: {error}", style="bold red")
    if usage:
        console.print(usage)
    sys.exit(1)


def _settings(index_branch: Optional[str] = None) -> SyncSettings:
    try:
        return get_settings().with_overrides(index_branch=index_branch)
    except ConfigError as e:
        _fail(e)


@click.group()
def cli() -> None:
    """Devcontainer template catalog manager."""
    pass


@cli.command("sync")
@click.argument("args", nargs=-1)
@click.option(
    "--source",
    "source",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Workspace root holding the source directories (default: nearest parent of the installed package that has them)",
)
@click.option("--index-branch", default=None, help="Branch holding the templates index")
def sync_cmd(args: Tuple[str, ...], source: Optional[Path], index_branch: Optional[str]) -> None:
    """
    Sync the devcontainer sources into a template branch.

    Accepts `<template-branch-name> [remote-repo-url]`, or the older
    `<remote-repo-url> <template-branch-name>` ordering. The branch is
    created as an orphan on first sync and wholly replaced afterwards; the
    index branch is regenerated from the remote branch list.
    """
    settings = _settings(index_branch)
    try:
        ctx = build_context(args, settings, workspace=source)
    except UsageError as e:
        _fail(e, usage_text(settings.remote_url))
    except SyncError as e:
        _fail(e)

    try:
        report = run_sync(ctx, settings.staging_prefix)
    except SyncError as e:
        _fail(e)
    except KeyboardInterrupt:
        console.print(f"\n🛑 Interrupted while syncing {ctx.template_name}", style="yellow")
        sys.exit(130)
    print_summary(ctx, report)


@cli.command("reindex")
@click.argument("remote_url", required=False)
@click.option("--index-branch", default=None, help="Branch holding the templates index")
def reindex_cmd(remote_url: Optional[str], index_branch: Optional[str]) -> None:
    """Regenerate only the templates index from the remote branch list."""
    settings = _settings(index_branch)
    url = remote_url or settings.remote_url
    try:
        run_reindex(url, settings)
    except SyncError as e:
        _fail(e)


@cli.command("list")
@click.argument("remote_url", required=False)
def list_cmd(remote_url: Optional[str]) -> None:
    """
    List template branches available on the remote.
    """
    settings = _settings()
    url = remote_url or settings.remote_url
    try:
        branches = list_remote_branches(url)
    except SyncError as e:
        _fail(e)
    templates = template_branches(branches, settings.index_branch)
    if not templates:
        console.print("No templates available yet.", style="yellow")
        return
    for name in templates:
        print(name)
