"""Regeneration of the templates index on the index branch."""

from __future__ import annotations

from typing import List, Sequence

from ..errors import Outcome
from ..git import RepositoryClient
from ..templates import IndexDocument, IndexEntry, render_index
from ..utils import console
from .mirror import README


def template_branches(branches: Sequence[str], index_branch: str) -> List[str]:
    """Every branch except the index branch and symbolic refs, sorted."""
    return sorted(
        b for b in set(branches) if b != index_branch and b != "HEAD" and "->" not in b
    )


def regenerate_index(
    client: RepositoryClient,
    remote_url: str,
    index_branch: str,
    sources: Sequence[str],
    stamp: str,
) -> Outcome:
    """Rewrite README.md on ``index_branch`` from the live remote branch list.

    Commits and pushes only when the rendered document differs from the tip.
    """
    console.print(f"\n📚 Updating {index_branch} branch index...")
    client.fetch()

    if client.remote_branch_exists(index_branch):
        client.checkout(index_branch)
        client.pull(index_branch)
    else:
        client.create_orphan(index_branch)

    branches = template_branches(client.remote_branches(), index_branch)
    doc = IndexDocument(
        remote_url=remote_url,
        sources=tuple(sources),
        entries=[IndexEntry(b) for b in branches],
        index_branch=index_branch,
    )
    (client.workdir / README).write_text(render_index(doc), encoding="utf-8")
    console.print(f"   Templates listed: {len(branches)}", style="dim")

    client.stage_all()
    if not client.staged_files():
        console.print(
            f"✅ {index_branch.capitalize()} branch index is already up to date",
            style="green",
        )
        return Outcome.NO_OP

    client.commit(f"Update templates index ({stamp})")
    console.print(f"📤 Pushing {index_branch} branch...")
    client.push(index_branch)
    console.print(
        f"✅ {index_branch.capitalize()} branch index updated successfully",
        style="green",
    )
    return Outcome.UPDATED
