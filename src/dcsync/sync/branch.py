"""Create-or-update of a template branch."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..context import SyncContext
from ..errors import Outcome, RemoteAccessError
from ..git import RepositoryClient
from ..templates import (
    TemplateDocument,
    extract_timestamp,
    render_gitignore,
    render_template_readme,
)
from ..utils import console
from .mirror import GITIGNORE, README, clear_targets, mirror_sources


@dataclass
class BranchResult:
    branch: str
    outcome: Outcome
    changed_files: List[str] = field(default_factory=list)


def _read_stamp(readme: Path) -> Optional[str]:
    if not readme.is_file():
        return None
    return extract_timestamp(readme.read_text(encoding="utf-8", errors="replace"))


def _write_readme(workdir: Path, ctx: SyncContext, stamp: str) -> None:
    doc = TemplateDocument(
        branch=ctx.template_name,
        remote_url=ctx.remote_url,
        timestamp=stamp,
        sources=ctx.source_dirs,
        index_branch=ctx.index_branch,
    )
    (workdir / README).write_text(render_template_readme(doc), encoding="utf-8")


def commit_message(ctx: SyncContext, changed_files: List[str]) -> str:
    return (
        f"Update {ctx.template_name} template\n"
        f"\n"
        f"Updated: {', '.join(changed_files)}\n"
        f"\n"
        f"Synced from: {ctx.workspace}\n"
        f"Timestamp: {ctx.stamp}"
    )


def sync_template_branch(
    client: RepositoryClient, ctx: SyncContext, remote_existed: bool = True
) -> BranchResult:
    """Mirror the source subtrees into ``ctx.template_name`` and push on change.

    An existing branch has its tracked content wiped before the copy, a new
    branch is created as an orphan so templates never share history. The
    README keeps the timestamp found on the branch tip unless something
    else changed, so an unchanged workspace produces no commit.
    """
    branch = ctx.template_name
    workdir = client.workdir
    previous_stamp: Optional[str] = None

    console.print(f"🌿 Switching to template branch: {branch}")
    if remote_existed and client.remote_branch_exists(branch):
        console.print("   Branch exists, checking out and pulling latest...")
        client.checkout(branch)
        try:
            client.pull(branch)
        except RemoteAccessError:
            console.print("   No changes to pull", style="yellow")
        previous_stamp = _read_stamp(workdir / README)
        console.print("   Cleaning existing files for fresh sync...")
        client.remove_all_tracked()
    else:
        console.print("   Creating new orphan branch...")
        client.create_orphan(branch)

    clear_targets(workdir, ctx.source_dirs)

    console.print("📋 Copying devcontainer files from source workspace...")
    copied = mirror_sources(ctx.workspace, ctx.source_dirs, workdir)
    for rel in ctx.source_dirs:
        console.print(f"   ✓ Copied {rel}/", style="green")
    console.print(f"   {len(copied)} file(s) copied", style="dim")

    console.print("📝 Creating .gitignore and README.md for template...")
    (workdir / GITIGNORE).write_text(render_gitignore(), encoding="utf-8")
    _write_readme(workdir, ctx, previous_stamp or ctx.stamp)

    console.print("💾 Committing template branch changes...")
    client.stage_all()
    changed = client.staged_files()
    if not changed:
        console.print("✅ No changes to commit on template branch", style="green")
        return BranchResult(branch, Outcome.NO_OP)

    if previous_stamp is not None and previous_stamp != ctx.stamp:
        _write_readme(workdir, ctx, ctx.stamp)
        client.stage_all()
        changed = client.staged_files()

    client.commit(commit_message(ctx, changed))
    console.print("📤 Pushing template branch...")
    client.push(branch)
    console.print("✅ Template branch pushed successfully", style="green")
    console.print(f"   Files updated: {', '.join(changed)}", style="dim")
    return BranchResult(branch, Outcome.UPDATED, changed)
