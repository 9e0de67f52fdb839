"""Branch synchronization logic for dcsync."""

from .branch import BranchResult, commit_message, sync_template_branch
from .index import regenerate_index, template_branches
from .mirror import clear_targets, mirror_sources

__all__ = [
    "BranchResult",
    "clear_targets",
    "commit_message",
    "mirror_sources",
    "regenerate_index",
    "sync_template_branch",
    "template_branches",
]
