"""Tests for exporting a workspace to static HTML."""

import json
import tempfile
from pathlib import Path

import pytest

from mdweave.export.html import HtmlExporter
from mdweave.preview.pipeline import render_note
from mdweave.runtime import build_runtime


@pytest.fixture
def temp_workspace():
    """Create a temporary workspace with a few linked notes."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir) / "notes"
        (root / "sub").mkdir(parents=True)
        (root / "index.md").write_text(
            "# Index\n\nSee [[child]] and [[missing]].\n\n![[child#Part]]\n"
        )
        (root / "sub" / "child.md").write_text(
            "---\ntitle: Child Note\n---\n# Part\nchild body #topic\n"
        )
        (root / "diagram.png").write_bytes(b"\x89PNG")
        yield root, Path(tmpdir) / "site"


def test_export_all_writes_notes(temp_workspace):
    """Test that every note gets an HTML file and attachments do not."""
    root, out = temp_workspace
    rt = build_runtime(root=root)

    HtmlExporter(rt.workspace, rt.md, out).export_all()

    index = (out / "index.md.html").read_text()
    child = (out / "sub" / "child.md.html").read_text()
    assert "class='foam-note-link'" in index
    assert "class='foam-placeholder-link'" in index
    assert "child body" in index
    assert "<span class='foam-tag'>#topic</span>" in child
    assert not (out / "diagram.png.html").exists()


def test_graph_json(temp_workspace):
    """Test the node and edge listing written next to the pages."""
    root, out = temp_workspace
    rt = build_runtime(root=root)

    HtmlExporter(rt.workspace, rt.md, out).export_all()
    graph = json.loads((out / "graph.json").read_text())

    nodes = {n["id"]: n for n in graph["nodes"]}
    assert nodes["child"]["title"] == "Child Note"
    assert nodes["child"]["tags"] == ["topic"]
    assert {
        "source": "index",
        "target": "missing",
        "embed": False,
        "resolved": False,
    } in graph["edges"]
    assert {
        "source": "index",
        "target": "child",
        "embed": True,
        "resolved": True,
    } in graph["edges"]


def test_export_note_and_remove(temp_workspace):
    """Test single-note export and removal."""
    root, out = temp_workspace
    rt = build_runtime(root=root)
    exporter = HtmlExporter(rt.workspace, rt.md, out)

    dest = exporter.export_note(rt.workspace.find("child").uri)
    assert dest == out / "sub" / "child.md.html"
    assert dest.exists()

    exporter.remove_note(rt.workspace.find("child").uri)
    assert not dest.exists()

    assert exporter.export_note(rt.workspace.find("diagram.png").uri) is None


def test_container_mode_override(temp_workspace):
    """Test that the runtime flag controls embed wrapping."""
    root, out = temp_workspace

    flat = build_runtime(root=root, embed_note_in_container=False)
    boxed = build_runtime(root=root, embed_note_in_container=True)

    index_flat = flat.workspace.find("index")
    index_boxed = boxed.workspace.find("index")

    assert "embed-container-note" not in render_note(flat.md, flat.workspace, index_flat)
    assert "embed-container-note" in render_note(boxed.md, boxed.workspace, index_boxed)
