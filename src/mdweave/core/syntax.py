"""Wiki reference and tag syntax shared by the parser and the preview stages."""

import re

from .model import Range, WikiReference, parse_reference

# ![[id]], [[id]], [[id#Section|Alias]]; brackets are not allowed inside
WIKILINK_RE = re.compile(r"(!?)\[\[([^\[\]]+?)\]\]")

# #tag, #si-t; not when glued to a preceding word character
TAG_RE = re.compile(r"(?<!\w)#([\w-]+)")


def find_references(text: str, offset: int = 0) -> list[WikiReference]:
    """All well-formed wiki references in ``text``, in order."""
    refs = []
    for m in WIKILINK_RE.finditer(text):
        ref = parse_reference(
            m.group(2),
            is_embed=bool(m.group(1)),
            range=Range(offset + m.start(), offset + m.end()),
        )
        if ref is not None:
            refs.append(ref)
    return refs


def extract_tags(text: str) -> list[str]:
    """Tag names (without ``#``) in order of first appearance."""
    seen: dict[str, None] = {}
    for m in TAG_RE.finditer(text):
        seen.setdefault(m.group(1), None)
    return list(seen)
