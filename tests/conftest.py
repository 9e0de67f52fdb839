from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Set

import pytest

from dcsync.context import SyncContext
from dcsync.errors import GitCommandError, RemoteAccessError

_ids = itertools.count(1)


@dataclass
class Commit:
    id: str
    tree: Dict[str, bytes]
    parent: Optional[str]
    message: str


@dataclass
class FakeRemote:
    """In-memory stand-in for the remote repository."""

    exists: bool = True
    default_branch: str = "main"
    branches: Dict[str, str] = field(default_factory=dict)
    commits: Dict[str, Commit] = field(default_factory=dict)
    pushes: List[str] = field(default_factory=list)
    fail_push: Set[str] = field(default_factory=set)
    fail_pull: Set[str] = field(default_factory=set)
    fail_fetch: bool = False
    staging_dirs: List[Path] = field(default_factory=list)

    def add_commit(
        self, tree: Dict[str, bytes], parent: Optional[str], message: str
    ) -> str:
        commit_id = f"c{next(_ids)}"
        self.commits[commit_id] = Commit(commit_id, dict(tree), parent, message)
        return commit_id

    def seed_branch(self, branch: str, tree: Dict[str, bytes]) -> None:
        self.branches[branch] = self.add_commit(tree, None, f"seed {branch}")

    def tree(self, branch: str) -> Dict[str, bytes]:
        return self.commits[self.branches[branch]].tree

    def files(self, branch: str) -> Set[str]:
        return set(self.tree(branch))

    def text(self, branch: str, path: str) -> str:
        return self.tree(branch)[path].decode("utf-8")

    def history(self, branch: str) -> List[str]:
        out: List[str] = []
        current: Optional[str] = self.branches[branch]
        while current is not None:
            out.append(current)
            current = self.commits[current].parent
        return out

    def client_factory(self, workdir: Path, remote_url: str) -> "FakeClient":
        self.staging_dirs.append(workdir)
        return FakeClient(workdir, remote_url, self)


class FakeClient:
    """RepositoryClient working on a real directory against a FakeRemote."""

    def __init__(self, workdir: Path, remote_url: str, remote: FakeRemote) -> None:
        self.workdir = workdir
        self.remote_url = remote_url
        self.remote = remote
        self.remote_refs: Dict[str, str] = {}
        self.local: Dict[str, Optional[str]] = {}
        self.head = "master"
        self.index: Dict[str, bytes] = {}
        self.calls: List[str] = []

    # helpers

    def _head_tree(self) -> Dict[str, bytes]:
        commit_id = self.local.get(self.head)
        return self.remote.commits[commit_id].tree if commit_id else {}

    def _write_tree(self, tree: Dict[str, bytes]) -> None:
        for rel, data in tree.items():
            path = self.workdir / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        self.index = dict(tree)

    def _switch(self, branch: str) -> None:
        self.remove_all_tracked()
        self.head = branch
        self._write_tree(self._head_tree())

    # RepositoryClient

    def remote_exists(self) -> bool:
        return self.remote.exists

    def clone(self) -> None:
        self.calls.append("clone")
        self.remote_refs = dict(self.remote.branches)
        default = self.remote.default_branch
        if default in self.remote_refs:
            self.local[default] = self.remote_refs[default]
            self._switch(default)

    def init(self) -> None:
        self.calls.append("init")

    def remote_branches(self) -> List[str]:
        return sorted(self.remote.branches)

    def remote_branch_exists(self, branch: str) -> bool:
        return branch in self.remote.branches

    def fetch(self) -> None:
        self.calls.append("fetch")
        if self.remote.fail_fetch:
            raise RemoteAccessError(["git", "fetch", "origin"], 128, stderr="fetch failed")
        self.remote_refs = dict(self.remote.branches)

    def checkout(self, branch: str) -> None:
        self.calls.append(f"checkout {branch}")
        if branch not in self.local:
            if branch not in self.remote_refs:
                raise GitCommandError(["git", "checkout", branch], 1)
            self.local[branch] = self.remote_refs[branch]
        self._switch(branch)

    def pull(self, branch: str) -> None:
        self.calls.append(f"pull {branch}")
        if branch in self.remote.fail_pull:
            raise RemoteAccessError(
                ["git", "pull", "origin", branch], 1, stderr="could not pull"
            )
        self.local[branch] = self.remote.branches[branch]
        self._switch(branch)

    def create_orphan(self, branch: str) -> None:
        self.calls.append(f"orphan {branch}")
        self.head = branch
        self.local[branch] = None
        self.remove_all_tracked()

    def remove_all_tracked(self) -> None:
        for rel in self.index:
            path = self.workdir / rel
            if path.exists():
                path.unlink()
            parent = path.parent
            while parent != self.workdir and parent.exists() and not any(parent.iterdir()):
                parent.rmdir()
                parent = parent.parent
        self.index = {}

    def stage_all(self) -> None:
        self.index = {
            p.relative_to(self.workdir).as_posix(): p.read_bytes()
            for p in self.workdir.rglob("*")
            if p.is_file()
        }

    def staged_files(self) -> List[str]:
        head = self._head_tree()
        paths = set(head) | set(self.index)
        return sorted(p for p in paths if head.get(p) != self.index.get(p))

    def commit(self, message: str) -> None:
        if not self.staged_files():
            raise GitCommandError(["git", "commit"], 1, stdout="nothing to commit")
        self.calls.append("commit")
        self.local[self.head] = self.remote.add_commit(
            self.index, self.local.get(self.head), message
        )

    def push(self, branch: str) -> None:
        self.calls.append(f"push {branch}")
        if branch in self.remote.fail_push:
            raise RemoteAccessError(
                ["git", "push", "-u", "origin", branch], 128, stderr="permission denied"
            )
        self.remote.branches[branch] = self.local[branch]  # type: ignore[assignment]
        self.remote.exists = True
        self.remote.pushes.append(branch)


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A source workspace with both devcontainer subtrees."""
    root = tmp_path / "workspace"
    (root / ".devcontainer").mkdir(parents=True)
    (root / ".devcontainer" / "devcontainer.json").write_text('{"name": "app"}\n')
    (root / ".devcontainer" / "Dockerfile").write_text("FROM node:20\n")
    (root / ".devcontainer" / ".dockerignore").write_text("node_modules\n")
    (root / "scripts" / "devcontainer").mkdir(parents=True)
    (root / "scripts" / "devcontainer" / "postCreateContainer.sh").write_text(
        "#!/usr/bin/env bash\necho ready\n"
    )
    return root


@pytest.fixture
def make_context(workspace: Path):
    def _make(
        template_name: str = "react-vite",
        remote_url: str = "https://example.com/templates.git",
        when: datetime = datetime(2024, 5, 1, 12, 0, 0),
    ) -> SyncContext:
        return SyncContext(
            template_name=template_name,
            remote_url=remote_url,
            workspace=workspace,
            source_dirs=(".devcontainer", "scripts/devcontainer"),
            index_branch="main",
            timestamp=when,
        )

    return _make
