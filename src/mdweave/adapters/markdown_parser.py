from pathlib import PurePosixPath

from markdown_it import MarkdownIt

from ..core.model import NOTE, Resource
from ..core.ports import FrontmatterCodec, ParserStrategy
from ..core.slicer import section_ranges
from ..core.syntax import extract_tags, find_references
from .yaml_codec import YamlFrontmatter

# block tokens whose lines hold no links, tags or headings
CODE_BLOCKS = ("fence", "code_block")


class MarkdownParser(ParserStrategy):
    """
    Derive sections, references and tags of a document.

    Headings and code blocks come from the block tokens of the same markdown
    engine that renders previews, so indented ATX and setext headings are
    sections here exactly when they render as headings.
    """

    def __init__(self, codec: FrontmatterCodec | None = None, md: MarkdownIt | None = None):
        self.codec = codec or YamlFrontmatter()
        self.md = md or MarkdownIt()

    def parse(self, uri: PurePosixPath, text: str) -> Resource:
        properties, body = self.codec.decode(text)

        lines = body.split("\n")
        line_starts = []
        offset = 0
        for ln in lines:
            line_starts.append(offset)
            offset += len(ln) + 1

        headings: list[tuple[int, str, int]] = []
        skipped: set[int] = set()
        tokens = self.md.parse(body)
        for i, token in enumerate(tokens):
            if token.map is None:
                continue
            if token.type in CODE_BLOCKS:
                skipped.update(range(*token.map))
            elif token.type == "heading_open":
                title = tokens[i + 1].content.strip()
                headings.append((int(token.tag[1]), title, line_starts[token.map[0]]))

        links = []
        tags: list[str] = []
        for n, line in enumerate(lines):
            if n in skipped:
                continue
            tags.extend(t for t in extract_tags(line) if t not in tags)
            links.extend(find_references(line, line_starts[n]))

        title = properties.get("title")
        if not isinstance(title, str) or not title.strip():
            title = next((t for level, t, _ in headings if level == 1), "")

        return Resource(
            uri=PurePosixPath(uri),
            type=NOTE,
            title=title,
            properties=properties,
            sections=section_ranges(headings, len(body)),
            links=links,
            tags=tags,
            text=body,
        )
