"""
Static composition of the preview stages onto a MarkdownIt instance.

Stages are installed once, sorted by phase then priority:

    block   remove-link-references  core rule between block and inline parsing
    inline  note-inclusion          ![[...]] inline rule, before "link"
    inline  wikilinks               [[...]] inline rule, before "link"
    post    tags                    core rule after inline parsing

The reference filter must see the definitions before the inline ``link``
rule consumes them; the tag stage must run after the reference rules so it
only ever splits plain text.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from markdown_it import MarkdownIt

from ..config import PreviewConfig
from ..core.model import Resource
from ..core.workspace import Workspace
from . import context
from .inclusion import markdown_with_note_inclusion
from .links import markdown_with_links
from .references import markdown_with_remove_link_references
from .tags import markdown_with_tags

PHASES = ("block", "inline", "post")


@dataclass(frozen=True)
class Stage:
    name: str
    phase: str  # one of PHASES
    priority: int  # lower installs first within a phase
    install: Callable[[MarkdownIt, Workspace, PreviewConfig], MarkdownIt]


STAGES: tuple[Stage, ...] = (
    Stage(
        "remove-link-references",
        "block",
        10,
        lambda md, workspace, config: markdown_with_remove_link_references(md),
    ),
    Stage(
        "note-inclusion",
        "inline",
        10,
        lambda md, workspace, config: markdown_with_note_inclusion(md, workspace, config),
    ),
    Stage(
        "wikilinks",
        "inline",
        20,
        lambda md, workspace, config: markdown_with_links(md, workspace),
    ),
    Stage("tags", "post", 10, lambda md, workspace, config: markdown_with_tags(md)),
)


def ordered(stages: Iterable[Stage]) -> list[Stage]:
    return sorted(stages, key=lambda s: (PHASES.index(s.phase), s.priority, s.name))


def create_markdown(
    workspace: Workspace,
    config: PreviewConfig | None = None,
    stages: Iterable[Stage] = STAGES,
    md: MarkdownIt | None = None,
) -> MarkdownIt:
    md = md if md is not None else MarkdownIt()
    config = config if config is not None else PreviewConfig()
    for stage in ordered(stages):
        stage.install(md, workspace, config)
    return md


def render_note(md: MarkdownIt, workspace: Workspace, resource: Resource) -> str:
    """
    Render a resource of the workspace. The resource itself is the bottom
    of the inclusion stack, so a note embedding itself is reported as a
    cycle straight away.
    """
    env = {
        context.STACK: context.InclusionStack([resource.key]),
        context.BASE: resource.uri,
    }
    return md.render(workspace.read(resource), env)
