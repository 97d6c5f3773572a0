from __future__ import annotations

from collections.abc import Iterator
from pathlib import PurePosixPath

from .model import Resource, normalize_key
from .ports import ContentReader


class Workspace:
    """
    Resource index keyed by lower-cased workspace-absolute path.

    Lookups by identifier prefer real resources over placeholders, then the
    shortest matching path, then the lexicographically smallest one, so
    resolution never depends on the order resources were set in.
    """

    def __init__(
        self,
        reader: ContentReader | None = None,
        root: PurePosixPath | str = "/",
        default_extension: str = ".md",
    ):
        self.reader = reader
        self.root = PurePosixPath(root)
        self.default_extension = default_extension
        self._resources: dict[str, Resource] = {}

    def set(self, resource: Resource) -> "Workspace":
        self._resources[resource.key] = resource
        return self

    def delete(self, uri: PurePosixPath | str) -> Resource | None:
        return self._resources.pop(normalize_key(uri), None)

    def get(self, uri: PurePosixPath | str) -> Resource | None:
        return self._resources.get(normalize_key(uri))

    def exists(self, uri: PurePosixPath | str) -> bool:
        return normalize_key(uri) in self._resources

    def list(self) -> list[Resource]:
        return list(self._resources.values())

    def __len__(self) -> int:
        return len(self._resources)

    def __iter__(self) -> Iterator[Resource]:
        return iter(self.list())

    @staticmethod
    def is_identifier(path: str) -> bool:
        return not path.startswith(("/", "./", "../"))

    def list_by_identifier(self, identifier: str) -> list[Resource]:
        needle = "/" + identifier.lower()
        if needle.endswith(self.default_extension):
            md_needle = needle
        else:
            md_needle = needle + self.default_extension
        hits = [
            r
            for key, r in self._resources.items()
            if key.endswith(md_needle) or key.endswith(needle)
        ]
        return sorted(hits, key=lambda r: (r.is_placeholder, len(r.key), r.key))

    def find(
        self, reference: str, base: PurePosixPath | str | None = None
    ) -> Resource | None:
        """
        Resolve ``slug``, ``path/to/slug``, ``./rel``, ``/abs`` (each
        optionally followed by ``#Section``) to a resource.

        Relative paths resolve against the directory of ``base`` or, without
        one, the workspace root.
        """
        path = reference.partition("#")[0].strip()
        if not path:
            return None

        if self.is_identifier(path):
            hits = self.list_by_identifier(path)
            return hits[0] if hits else None

        for candidate in (path, path + self.default_extension):
            if candidate.startswith("/"):
                key = candidate
            else:
                base_dir = PurePosixPath(base).parent if base is not None else self.root
                key = str(base_dir / candidate)
            resource = self._resources.get(normalize_key(key))
            if resource is not None:
                return resource
        return None

    def identifier(self, uri: PurePosixPath | str) -> str:
        """Shortest path suffix (no markdown extension) that finds only ``uri``."""
        path = PurePosixPath(uri)
        if path.suffix.lower() == self.default_extension:
            path = path.with_suffix("")
        parts = [p for p in path.parts if p != "/"]
        for n in range(1, len(parts) + 1):
            candidate = "/".join(parts[-n:])
            if len(self.list_by_identifier(candidate)) <= 1:
                return candidate
        return "/".join(parts)

    def relative_path(self, uri: PurePosixPath | str) -> str:
        path = PurePosixPath(uri)
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix().lstrip("/")

    def read(self, resource: Resource) -> str:
        """
        Body text of a resource; falls back to the content reader when the
        resource was indexed without text. Missing files read as "".
        """
        if resource.text is not None:
            return resource.text
        if self.reader is None:
            return ""
        return self.reader.read_raw(resource.uri) or ""
