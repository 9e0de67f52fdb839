"""Document rendering for dcsync."""

from .render import (
    IndexDocument,
    IndexEntry,
    TemplateDocument,
    display_name,
    extract_timestamp,
    render_gitignore,
    render_index,
    render_template_readme,
    top_level_dirs,
)

__all__ = [
    "IndexDocument",
    "IndexEntry",
    "TemplateDocument",
    "display_name",
    "extract_timestamp",
    "render_gitignore",
    "render_index",
    "render_template_readme",
    "top_level_dirs",
]
