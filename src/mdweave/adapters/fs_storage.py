from pathlib import Path, PurePosixPath
from typing import Iterable
from ..core.ports import StorageStrategy


class FsStorage(StorageStrategy):
    """Directory tree; a file's workspace path is its path below ``root``."""

    def __init__(self, root: Path):
        self.root = root

    def _path(self, path: PurePosixPath | str) -> Path:
        return self.root / PurePosixPath("/", path).relative_to("/")

    def to_uri(self, path: Path) -> PurePosixPath:
        return PurePosixPath("/", path.relative_to(self.root).as_posix())

    def read_raw(self, path: PurePosixPath | str) -> str | None:
        p = self._path(path)
        return p.read_text(encoding="utf-8") if p.is_file() else None

    def list_all(self) -> Iterable[PurePosixPath]:
        if not self.root.exists():
            return []
        return (
            self.to_uri(p)
            for p in sorted(self.root.rglob("*"))
            if p.is_file() and not self._is_hidden(p)
        )

    def _is_hidden(self, path: Path) -> bool:
        rel = path.relative_to(self.root)
        return any(part.startswith(".") for part in rel.parts)
