from pathlib import PurePosixPath
from typing import Any, Iterable, Protocol

from .model import Resource


class ContentReader(Protocol):
    """
    Load the text of a resource that was indexed without its content.
    Returns None when the file no longer exists.
    """

    def read_raw(self, path: PurePosixPath) -> str | None:
        pass


class StorageStrategy(ContentReader, Protocol):
    """
    Directory tree of documents; paths are workspace-absolute posix paths.
    """

    def list_all(self) -> Iterable[PurePosixPath]:
        pass


class ParserStrategy(Protocol):
    """
    Turn raw text into a Resource with derived sections, links and tags.
    """

    def parse(self, uri: PurePosixPath, text: str) -> Resource:
        pass


class FrontmatterCodec(Protocol):
    """
    Split optional frontmatter from the body without enforcing schema.
    """

    def decode(self, text: str) -> tuple[dict[str, Any], str]:
        pass


class ExportAdapter(Protocol):
    def export_all(self, out_dir: str | None = None) -> None:
        pass
