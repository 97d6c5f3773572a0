from dataclasses import dataclass
from typing import Protocol
from .core.model import Range, Resource
from .core.slicer import find_section
from .core.workspace import Workspace


@dataclass
class Finding:
    severity: str  # "info" | "warn" | "error"
    message: str
    range: Range | None = None


class LintRule(Protocol):
    id: str

    def check(self, resource: Resource, workspace: Workspace) -> list[Finding]:
        pass


class DeadLinksRule:
    id = "dead-links"

    def check(self, resource: Resource, workspace: Workspace) -> list[Finding]:
        out: list[Finding] = []
        for ref in resource.links:
            target = workspace.find(ref.identifier, resource.uri)
            kind = "embed" if ref.is_embed else "link"
            if target is None or target.is_placeholder:
                out.append(
                    Finding("error", f"Unresolved {kind} to {ref.identifier}", ref.range)
                )
            elif ref.section and find_section(target, ref.section) is None:
                out.append(
                    Finding("warn", f"Unknown section for {ref.target}", ref.range)
                )
        return out
