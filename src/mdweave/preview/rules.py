"""markdown-it inline rule for ``[[...]]`` and ``![[...]]``."""

from collections.abc import Callable

from markdown_it.rules_inline import StateInline

from ..core.model import parse_reference
from ..core.syntax import WIKILINK_RE


def reference_rule(token_type: str, is_embed: bool) -> Callable[[StateInline, bool], bool]:
    """
    Build an inline rule that consumes one well-formed reference and pushes
    a ``token_type`` token with the parsed WikiReference in ``meta``.

    Malformed input (unbalanced or nested brackets, blank target) is left
    for the other rules, so it renders as literal text.
    """
    marker = "!" if is_embed else "["

    def rule(state: StateInline, silent: bool) -> bool:
        if state.src[state.pos] != marker:
            return False
        m = WIKILINK_RE.match(state.src, state.pos, state.posMax)
        if m is None or bool(m.group(1)) != is_embed:
            return False
        reference = parse_reference(m.group(2), is_embed=is_embed)
        if reference is None:
            return False

        if not silent:
            token = state.push(token_type, "", 0)
            token.content = m.group(0)
            token.markup = "![[" if is_embed else "[["
            token.meta = {"reference": reference}
        state.pos = m.end()
        return True

    return rule
