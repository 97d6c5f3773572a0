"""Per-render state carried in the markdown-it ``env`` mapping."""

from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from typing import Any

# env keys
STACK = "inclusion_stack"
CONTAINER = "embed_note_in_container"
BASE = "base_uri"
WIKILINKS = "wikilinks"


class InclusionStack:
    """Keys of the resources being embedded by the current top-level render."""

    def __init__(self, keys: list[str] | None = None):
        self._keys: list[str] = list(keys or [])

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def push(self, key: str) -> None:
        if key in self._keys:
            raise ValueError(f"{key} is already being included")
        self._keys.append(key)

    def pop(self) -> str:
        return self._keys.pop()

    @contextmanager
    def including(self, key: str) -> Iterator[None]:
        self.push(key)
        try:
            yield
        finally:
            self.pop()


def inclusion_stack(env: MutableMapping[str, Any]) -> InclusionStack:
    stack = env.get(STACK)
    if stack is None:
        stack = env[STACK] = InclusionStack()
    return stack
