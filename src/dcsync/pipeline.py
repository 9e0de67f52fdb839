"""End-to-end runs: template sync followed by index regeneration."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .config import SyncSettings
from .context import TIMESTAMP_FORMAT, SyncContext
from .errors import Outcome, SyncError
from .git import ClientFactory, GitClient, StagingArea
from .sync import BranchResult, regenerate_index, sync_template_branch
from .utils import console


@dataclass
class SyncReport:
    template: BranchResult
    index: Outcome


def run_sync(
    ctx: SyncContext,
    staging_prefix: str = "devcontainer-repo",
    client_factory: ClientFactory = GitClient,
) -> SyncReport:
    """Sync one template branch, then rebuild the index, in a fresh staging clone.

    A failure on the template branch aborts before the index is touched. A
    failure while rebuilding the index is reported as leaving the index stale
    and propagates; ``reindex`` repairs it.
    """
    console.print("🔄 Syncing devcontainer template to repository...", style="bold")
    console.print(f"   Remote: {ctx.remote_url}")
    console.print(f"   Template Branch: {ctx.template_name}")
    console.print(f"   Source: {ctx.workspace}\n")

    staging = StagingArea(ctx.remote_url, staging_prefix, client_factory)
    with staging as client:
        template = sync_template_branch(client, ctx, staging.remote_existed)
        try:
            index = regenerate_index(
                client,
                ctx.remote_url,
                ctx.index_branch,
                ctx.source_dirs,
                ctx.stamp,
            )
        except SyncError:
            if template.outcome is Outcome.UPDATED:
                console.print(
                    f"⚠ Template branch '{ctx.template_name}' was pushed but the "
                    f"{ctx.index_branch} index could not be updated; "
                    "run 'devcontainer-sync reindex' to repair it.",
                    style="yellow",
                )
            raise
    return SyncReport(template=template, index=index)


def run_reindex(
    remote_url: str,
    settings: SyncSettings,
    client_factory: ClientFactory = GitClient,
    now: Optional[datetime] = None,
) -> Outcome:
    """Rebuild only the index branch of ``remote_url``."""
    stamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    staging = StagingArea(remote_url, settings.staging_prefix, client_factory)
    with staging as client:
        return regenerate_index(
            client,
            remote_url,
            settings.index_branch,
            settings.source_dirs,
            stamp,
        )


def print_summary(ctx: SyncContext, report: SyncReport) -> None:
    console.print(
        f"\n🎉 Done! Template '{ctx.template_name}' is synced.", style="bold green"
    )
    console.print(f"📚 View all templates: {ctx.remote_url}")
    console.print(f"🌿 View this template: {ctx.remote_url}/tree/{ctx.template_name}")
    if report.template.outcome is Outcome.UPDATED:
        console.print("   ✅ Template was updated with new changes", style="green")
    else:
        console.print(
            "   ℹ️  No changes detected (template is up to date)", style="yellow"
        )
