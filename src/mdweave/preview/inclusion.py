"""
Note inclusion: ``![[id]]`` and ``![[id#Section]]`` embed the rendered
content of another resource in place.

The embedded text goes through the same MarkdownIt instance, so wikilinks,
tags and further embeds inside it are resolved too. The keys of the
resources being expanded travel in ``env`` (see ``context``); meeting one
of them again renders a warning instead of recursing.
"""

import logging
from collections.abc import MutableMapping
from typing import Any

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml

from ..config import PreviewConfig
from ..core.model import ATTACHMENT, IMAGE, Resource, WikiReference
from ..core.slicer import extract_section
from ..core.workspace import Workspace
from . import context
from .links import render_link
from .rules import reference_rule

logger = logging.getLogger(__name__)

CYCLE_WARNING = "Cyclic link detected for wikilink: {}"
ATTACHMENT_NOTICE = "Embed for attachments is not supported"


def embed_in_container(env: MutableMapping[str, Any], config: PreviewConfig) -> bool:
    """Embed mode, read from the config once per top-level render."""
    if context.CONTAINER not in env:
        env[context.CONTAINER] = bool(config.embed_note_in_container)
    return env[context.CONTAINER]


def render_embed(
    md: MarkdownIt,
    reference: WikiReference,
    workspace: Workspace,
    env: MutableMapping[str, Any],
    container: bool,
) -> str:
    resource = workspace.find(reference.identifier, env.get(context.BASE))
    if resource is None or resource.is_placeholder:
        logger.debug("Unresolved embed ![[%s]]", reference.raw)
        return escapeHtml(f"![[{reference.raw}]]")

    if resource.type == IMAGE:
        return _embed_image(md, resource, workspace)
    if resource.type == ATTACHMENT:
        return (
            f'<div class="embed-container-attachment">'
            f"{render_link(reference, resource, workspace)}<br/>{ATTACHMENT_NOTICE}</div>"
        )

    stack = context.inclusion_stack(env)
    if resource.key in stack:
        logger.debug("Cyclic embed of %s via ![[%s]]", resource.uri, reference.raw)
        warning = escapeHtml(CYCLE_WARNING.format(reference.identifier))
        return f'<div class="foam-cyclic-link-warning">{warning}</div>'

    text = workspace.read(resource)
    if reference.section:
        text = extract_section(resource, reference.section, text)
        if text is None:
            logger.debug("Section %r not found in %s", reference.section, resource.uri)
            return escapeHtml(f"![[{reference.raw}]]")

    with stack.including(resource.key):
        html = md.render(
            text,
            {context.STACK: stack, context.CONTAINER: container, context.BASE: resource.uri},
        )

    if container:
        return f'<div class="embed-container-note">{html}</div>'
    return html


def _embed_image(md: MarkdownIt, resource: Resource, workspace: Workspace) -> str:
    src = md.normalizeLink("/" + workspace.relative_path(resource.uri))
    return f'<div class="embed-container-image">{md.render(f"![]({src})")}</div>'


def markdown_with_note_inclusion(
    md: MarkdownIt, workspace: Workspace, config: PreviewConfig
) -> MarkdownIt:
    def render_wikilink_embed(self, tokens, idx, options, env) -> str:
        return render_embed(
            md,
            tokens[idx].meta["reference"],
            workspace,
            env,
            embed_in_container(env, config),
        )

    md.inline.ruler.before(
        "link", "wikilink_embed", reference_rule("wikilink_embed", is_embed=True)
    )
    md.add_render_rule("wikilink_embed", render_wikilink_embed)
    return md
