"""Drop link reference definitions made redundant by wikilinks."""

import re

from markdown_it import MarkdownIt
from markdown_it.common.utils import normalizeReference
from markdown_it.rules_core import StateCore

from ..core.syntax import find_references
from . import context

# `code`, ``co`de``: a backtick run closed by a run of the same length
CODE_SPAN_RE = re.compile(r"(?<!`)(`+)(?!`)(.+?)(?<!`)\1(?!`)", re.DOTALL)


def clear_references_rule(state: StateCore) -> None:
    """
    Record the wikilink targets of the document, then forget every
    ``[label]: url`` definition whose label is one of them.

    Must sit between block and inline parsing: definitions are collected by
    the block parser and consumed by the inline ``link`` rule. Code spans
    are not parsed yet at this point, so they are cut out before scanning.
    """
    consumed: set[str] = set()
    for token in state.tokens:
        if token.type == "inline":
            content = CODE_SPAN_RE.sub("", token.content)
            consumed.update(ref.identifier for ref in find_references(content))
    state.env[context.WIKILINKS] = consumed

    references = state.env.get("references")
    if not references:
        return
    labels = {normalizeReference(identifier) for identifier in consumed}
    for label in [label for label in references if label in labels]:
        del references[label]


def markdown_with_remove_link_references(md: MarkdownIt) -> MarkdownIt:
    md.core.ruler.after("block", "clear_references", clear_references_rule)
    return md
