"""Disposable staging clone of the remote repository."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path
from types import TracebackType
from typing import Callable, Optional, Type

from ..utils import console
from .client import GitClient, RepositoryClient

ClientFactory = Callable[[Path, str], RepositoryClient]


class StagingArea:
    """Scoped staging clone; the directory is removed on every exit path.

    Entering allocates a fresh directory keyed by the process id, then
    clones the remote when it is reachable or initializes an empty
    repository pointed at it otherwise.
    """

    def __init__(
        self,
        remote_url: str,
        prefix: str = "devcontainer-repo",
        client_factory: ClientFactory = GitClient,
    ) -> None:
        self.remote_url = remote_url
        self.prefix = prefix
        self.client_factory = client_factory
        self.path: Optional[Path] = None
        self.remote_existed = False

    def __enter__(self) -> RepositoryClient:
        self.path = Path(tempfile.mkdtemp(prefix=f"{self.prefix}-{os.getpid()}-"))
        try:
            client = self.client_factory(self.path, self.remote_url)
            if client.remote_exists():
                console.print("📥 Cloning existing repository...")
                client.clone()
                self.remote_existed = True
            else:
                console.print("📝 Initializing new repository...")
                client.init()
        except BaseException:
            self.close()
            raise
        return client

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()

    def close(self) -> None:
        if self.path is None:
            return
        shutil.rmtree(self.path, ignore_errors=True)
        if self.path.exists():
            console.print(
                f"⚠ Could not remove staging directory {self.path}", style="yellow"
            )
        self.path = None
