"""Markdown preview stages: wikilinks, note inclusion, tags, reference cleanup."""

from .inclusion import markdown_with_note_inclusion
from .links import markdown_with_links, render_link
from .pipeline import STAGES, Stage, create_markdown, render_note
from .references import markdown_with_remove_link_references
from .tags import markdown_with_tags

__all__ = [
    "STAGES",
    "Stage",
    "create_markdown",
    "markdown_with_links",
    "markdown_with_note_inclusion",
    "markdown_with_remove_link_references",
    "markdown_with_tags",
    "render_link",
    "render_note",
]
