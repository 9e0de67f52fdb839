"""Physical copy of the source subtrees into the staging clone."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Iterable, List, Sequence

from ..errors import SourceCopyError
from ..templates import top_level_dirs

README = "README.md"
GITIGNORE = ".gitignore"


def clear_targets(dest: Path, source_dirs: Sequence[str]) -> None:
    """Remove anything left at the paths a sync is about to write."""
    for name in [*top_level_dirs(source_dirs), README, GITIGNORE]:
        target = dest / name
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        elif target.exists() or target.is_symlink():
            target.unlink()


def mirror_sources(workspace: Path, source_dirs: Iterable[str], dest: Path) -> List[str]:
    """Copy each ``workspace/<dir>`` to ``dest/<dir>``, following symlinks.

    Returns the relative paths of the copied files, sorted.
    """
    copied: List[str] = []
    for rel in source_dirs:
        src = workspace / rel
        target = dest / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            shutil.copytree(
                src,
                target,
                symlinks=False,
                ignore=shutil.ignore_patterns(".git"),
                dirs_exist_ok=True,
            )
        except (shutil.Error, OSError) as e:
            raise SourceCopyError(src, e) from e
        copied.extend(
            p.relative_to(dest).as_posix() for p in target.rglob("*") if p.is_file()
        )
    return sorted(copied)
