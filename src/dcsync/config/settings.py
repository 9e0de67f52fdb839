"""Sync settings discovery.

Non-configurable settings discovery:
- Discover a workspace settings file by walking up from this module's path,
  looking for `.github/devcontainer-sync.yml`.
- If not found (e.g., installed non-editable), fall back to the default
  settings bundled with the package.
- Expose a memoized getter so callers can treat it like a constant.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from functools import lru_cache
from importlib.resources import files
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from ..errors import ConfigError

SETTINGS_FILE = Path(".github") / "devcontainer-sync.yml"


@dataclass(frozen=True)
class SyncSettings:
    """Settings shared by every sync invocation."""

    remote_url: str  # https://github.com/jcesarprog/devcontainer-templates.git
    index_branch: str  # main
    source_dirs: Tuple[str, ...]  # (".devcontainer", "scripts/devcontainer")
    staging_prefix: str  # devcontainer-repo

    def with_overrides(self, **changes: Any) -> "SyncSettings":
        """Return a copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _require_str(data: Dict[str, Any], key: str, default: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str) or not value:
        raise ConfigError(f"Setting '{key}' must be a non-empty string")
    return value


def _parse_settings(data: Dict[str, Any], base: Optional[SyncSettings]) -> SyncSettings:
    defaults = base or SyncSettings(
        remote_url="",
        index_branch="main",
        source_dirs=(".devcontainer", "scripts/devcontainer"),
        staging_prefix="devcontainer-repo",
    )
    source_dirs = data.get("source_dirs", list(defaults.source_dirs))
    if not isinstance(source_dirs, list) or not all(
        isinstance(d, str) and d for d in source_dirs
    ):
        raise ConfigError("Setting 'source_dirs' must be a list of paths")
    if not source_dirs:
        raise ConfigError("Setting 'source_dirs' must name at least one directory")
    return SyncSettings(
        remote_url=_require_str(data, "remote_url", defaults.remote_url),
        index_branch=_require_str(data, "index_branch", defaults.index_branch),
        source_dirs=tuple(source_dirs),
        staging_prefix=_require_str(data, "staging_prefix", defaults.staging_prefix),
    )


def _load_yaml(content: str, origin: str) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Unable to parse {origin}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{origin} must contain a mapping")
    return data


def load_bundled_settings() -> SyncSettings:
    """Load the bundled default settings from the package resources."""
    content = files("dcsync.config").joinpath("defaults.yml").read_text(encoding="utf-8")
    return _parse_settings(_load_yaml(content, "bundled defaults.yml"), None)


def load_settings(path: Path) -> SyncSettings:
    """Load settings from a YAML file, filling gaps from the bundled defaults."""
    with path.open("r", encoding="utf-8") as f:
        data = _load_yaml(f.read(), str(path))
    return _parse_settings(data, load_bundled_settings())


def discover_settings_path() -> Optional[Path]:
    """Discover the repository settings file path by walking parents.

    Returns a Path if `.github/devcontainer-sync.yml` exists relative to any
    parent of this module; otherwise returns None.
    """
    here = Path(__file__).resolve()
    for parent in here.parents:
        candidate = parent / SETTINGS_FILE
        if candidate.exists():
            return candidate
    return None


@lru_cache(maxsize=1)
def get_settings() -> SyncSettings:
    """Return sync settings, discovered or default (memoized)."""
    repo_path = discover_settings_path()
    if repo_path is not None:
        return load_settings(repo_path)
    return load_bundled_settings()
