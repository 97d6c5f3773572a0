"""Stylable ``#tag`` spans."""

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from markdown_it.rules_core import StateCore
from markdown_it.token import Token

from ..core.syntax import TAG_RE


def _split_tags(token: Token) -> list[Token]:
    out = []
    text = token.content
    pos = 0
    for m in TAG_RE.finditer(text):
        if m.start() > pos:
            out.append(Token("text", "", 0, content=text[pos : m.start()], level=token.level))
        out.append(Token("foam_tag", "span", 0, content=m.group(0), level=token.level))
        pos = m.end()
    if pos < len(text):
        out.append(Token("text", "", 0, content=text[pos:], level=token.level))
    return out


def tag_rule(state: StateCore) -> None:
    """
    Split plain text tokens around tags. Runs after inline parsing, so code
    spans, escaped ``\\#`` and the output of other stages are never touched.
    """
    for block_token in state.tokens:
        if block_token.type != "inline" or not block_token.children:
            continue
        children: list[Token] = []
        for child in block_token.children:
            if child.type == "text" and "#" in child.content:
                children.extend(_split_tags(child))
            else:
                children.append(child)
        block_token.children = children


def render_tag(tag: str) -> str:
    return f"<span class='foam-tag'>{escapeHtml(tag)}</span>"


def markdown_with_tags(md: MarkdownIt) -> MarkdownIt:
    def render_foam_tag(self, tokens, idx, options, env) -> str:
        return render_tag(tokens[idx].content)

    md.core.ruler.after("inline", "foam_tags", tag_rule)
    md.add_render_rule("foam_tag", render_foam_tag)
    return md
