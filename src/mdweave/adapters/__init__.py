"""Filesystem, frontmatter and markdown parsing adapters."""
