"""Wikilinks rendered as navigable anchors."""

from urllib.parse import quote

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml

from ..core.model import Resource, WikiReference
from ..core.workspace import Workspace
from . import context
from .rules import reference_rule

PLACEHOLDER_TITLE = "Link to non-existing resource"


def escape_attr(value: str) -> str:
    """Escape for a single-quoted attribute."""
    return escapeHtml(value).replace("'", "&#39;")


def render_link(
    reference: WikiReference, resource: Resource | None, workspace: Workspace
) -> str:
    text = escapeHtml(reference.alias or reference.raw)
    if resource is None or resource.is_placeholder:
        return (
            f"<a class='foam-placeholder-link' title=\"{PLACEHOLDER_TITLE}\" "
            f"href=\"javascript:void(0);\">{text}</a>"
        )
    href = "/" + workspace.relative_path(resource.uri)
    if reference.section:
        href += "#" + quote(reference.section)
    href = escape_attr(href)
    return (
        f"<a class='foam-note-link' title='{escape_attr(resource.title)}' "
        f"href='{href}' data-href='{href}'>{text}</a>"
    )


def markdown_with_links(md: MarkdownIt, workspace: Workspace) -> MarkdownIt:
    def render_wikilink(self, tokens, idx, options, env) -> str:
        reference = tokens[idx].meta["reference"]
        resource = workspace.find(reference.identifier, env.get(context.BASE))
        return render_link(reference, resource, workspace)

    md.inline.ruler.before("link", "wikilink", reference_rule("wikilink", is_embed=False))
    md.add_render_rule("wikilink", render_wikilink)
    return md
