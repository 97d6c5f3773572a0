"""mdweave - wikilinks, note embeds and tags for markdown-it."""

__version__ = "0.3.0"
