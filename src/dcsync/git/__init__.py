"""Git operations for dcsync."""

from .client import GitClient, RepositoryClient, list_remote_branches, parse_heads
from .staging import ClientFactory, StagingArea

__all__ = [
    "ClientFactory",
    "GitClient",
    "RepositoryClient",
    "StagingArea",
    "list_remote_branches",
    "parse_heads",
]
