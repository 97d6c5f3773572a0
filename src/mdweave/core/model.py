from __future__ import annotations
import posixpath
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any

NOTE = "note"
IMAGE = "image"
ATTACHMENT = "attachment"
PLACEHOLDER = "placeholder"


def normalize_key(path: PurePosixPath | str) -> str:
    """Lookup key for a workspace path: normalized and lower-cased."""
    return posixpath.normpath(str(path)).lower()


@dataclass(frozen=True)
class Range:
    start: int  # char offsets into Resource.text
    end: int


@dataclass(frozen=True)
class Section:
    level: int  # 1..6
    title: str
    range: Range


@dataclass(frozen=True)
class WikiReference:
    is_embed: bool
    identifier: str
    section: str | None = None
    alias: str | None = None
    raw: str = ""  # inner text exactly as written
    range: Range | None = None

    @property
    def target(self) -> str:
        if self.section is None:
            return self.identifier
        return f"{self.identifier}#{self.section}"


def parse_reference(
    inner: str, is_embed: bool = False, range: Range | None = None
) -> WikiReference | None:
    """
    Parse the text between the brackets of ``[[...]]`` / ``![[...]]``.

    Handles: id | id#Section | id|Alias | id#Section|Alias.
    Returns None for blank references.
    """
    if not inner.strip():
        return None
    core, bar, alias = inner.partition("|")
    path, hash_, section = core.partition("#")
    return WikiReference(
        is_embed=is_embed,
        identifier=path.strip(),
        section=section.strip() if hash_ else None,
        alias=(alias.strip() or None) if bar else None,
        raw=inner,
        range=range,
    )


@dataclass
class Resource:
    uri: PurePosixPath
    type: str = NOTE  # "note" | "image" | "attachment" | "placeholder"
    title: str = ""
    properties: dict[str, Any] = field(default_factory=dict)
    sections: list[Section] = field(default_factory=list)
    links: list[WikiReference] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    text: str | None = None  # body without frontmatter; None when not loaded

    def __post_init__(self) -> None:
        self.uri = PurePosixPath(self.uri)
        if not self.title:
            self.title = self.uri.stem if self.type != PLACEHOLDER else self.uri.name

    @property
    def key(self) -> str:
        """Normalized lookup key, unique within a workspace."""
        return normalize_key(self.uri)

    @property
    def is_placeholder(self) -> bool:
        return self.type == PLACEHOLDER

    @classmethod
    def placeholder(cls, identifier: str) -> "Resource":
        return cls(uri=PurePosixPath("/", identifier), type=PLACEHOLDER)
