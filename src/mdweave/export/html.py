import json
import logging
from pathlib import Path, PurePosixPath
from typing import Any

from markdown_it import MarkdownIt

from ..core.model import NOTE
from ..core.ports import ExportAdapter
from ..core.workspace import Workspace
from ..preview.pipeline import render_note

logger = logging.getLogger(__name__)


class HtmlExporter(ExportAdapter):
    def __init__(self, workspace: Workspace, md: MarkdownIt, out: Path):
        self.workspace = workspace
        self.md = md
        self.out = out

    def target_path(self, uri: PurePosixPath, out: Path | None = None) -> Path:
        rel = self.workspace.relative_path(uri)
        return (out or self.out) / f"{rel}.html"

    def export_note(self, uri: PurePosixPath, out: Path | None = None) -> Path | None:
        resource = self.workspace.get(uri)
        if resource is None or resource.type != NOTE:
            return None
        dest = self.target_path(resource.uri, out)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(render_note(self.md, self.workspace, resource), encoding="utf-8")
        return dest

    def remove_note(self, uri: PurePosixPath, out: Path | None = None) -> None:
        dest = self.target_path(uri, out)
        if dest.exists():
            dest.unlink()

    def write_graph(self, out: Path | None = None) -> None:
        graph: dict[str, list[dict[str, Any]]] = {"nodes": [], "edges": []}
        for resource in self.workspace.list():
            if resource.type != NOTE:
                continue
            source = self.workspace.identifier(resource.uri)
            graph["nodes"].append(
                {"id": source, "title": resource.title, "tags": resource.tags}
            )
            for ref in resource.links:
                target = self.workspace.find(ref.identifier, resource.uri)
                graph["edges"].append(
                    {
                        "source": source,
                        "target": self.workspace.identifier(target.uri)
                        if target is not None
                        else ref.identifier,
                        "embed": ref.is_embed,
                        "resolved": target is not None and not target.is_placeholder,
                    }
                )
        (out or self.out).mkdir(parents=True, exist_ok=True)
        ((out or self.out) / "graph.json").write_text(
            json.dumps(graph, indent=2), encoding="utf-8"
        )

    def export_all(self, out_dir: str | None = None) -> None:
        out = self.out if out_dir is None else Path(out_dir)
        out.mkdir(parents=True, exist_ok=True)

        count = 0
        for resource in self.workspace.list():
            if self.export_note(resource.uri, out) is not None:
                count += 1
        self.write_graph(out)
        logger.info("Exported %d notes to %s", count, out)
