"""Pure rendering of the generated documents.

Nothing here touches a repository: each function maps a record to text so
the output can be compared byte-for-byte against what is on a branch tip.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from importlib.resources import files
from typing import List, Optional, Sequence, Tuple

import jinja2

_WORD_START = re.compile(r"\b(\w)")
_LAST_UPDATED = re.compile(r"^## 📝 Last Updated\n\n(?P<stamp>[^\n]+)$", re.MULTILINE)


@dataclass(frozen=True)
class TemplateDocument:
    """Inputs of a template branch README."""

    branch: str
    remote_url: str
    timestamp: str
    sources: Tuple[str, ...]
    index_branch: str = "main"


@dataclass(frozen=True)
class IndexEntry:
    branch: str

    @property
    def title(self) -> str:
        return display_name(self.branch)


@dataclass(frozen=True)
class IndexDocument:
    """Inputs of the index branch README."""

    remote_url: str
    sources: Tuple[str, ...]
    entries: List[IndexEntry] = field(default_factory=list)
    index_branch: str = "main"


def display_name(branch: str) -> str:
    """'react-vite' -> 'React Vite'. Only the first letter of each word changes."""
    return _WORD_START.sub(lambda m: m.group(1).upper(), branch.replace("-", " "))


def top_level_dirs(sources: Sequence[str]) -> List[str]:
    """First path component of each source, de-duplicated in order."""
    seen: List[str] = []
    for source in sources:
        top = source.strip("/").split("/", 1)[0]
        if top not in seen:
            seen.append(top)
    return seen


@lru_cache(maxsize=1)
def _environment() -> jinja2.Environment:
    return jinja2.Environment(
        loader=jinja2.BaseLoader(),
        keep_trailing_newline=True,
        trim_blocks=True,
        autoescape=False,
        undefined=jinja2.StrictUndefined,
    )


def _render(name: str, **variables: object) -> str:
    source = files("dcsync.templates").joinpath(name).read_text(encoding="utf-8")
    return _environment().from_string(source).render(**variables)


def render_template_readme(doc: TemplateDocument) -> str:
    return _render(
        "template_readme.md.jinja",
        title=display_name(doc.branch),
        branch=doc.branch,
        remote_url=doc.remote_url,
        timestamp=doc.timestamp,
        sources=doc.sources,
        top_levels=top_level_dirs(doc.sources),
        index_branch=doc.index_branch,
    )


def render_gitignore() -> str:
    return _render("gitignore.jinja")


def render_index(doc: IndexDocument) -> str:
    """Render the catalog README. Contains no timestamp, so it only changes
    when the remote URL or the set of template branches changes."""
    return _render(
        "index_readme.md.jinja",
        remote_url=doc.remote_url,
        entries=sorted(doc.entries, key=lambda e: e.branch),
        sources=doc.sources,
        top_levels=top_level_dirs(doc.sources),
        index_branch=doc.index_branch,
    )


def extract_timestamp(readme: str) -> Optional[str]:
    """Return the "Last Updated" value of a rendered template README."""
    match = _LAST_UPDATED.search(readme)
    return match.group("stamp") if match else None
