"""Tests for watch mode functionality."""

import tempfile
import time
from pathlib import Path, PurePosixPath

import pytest
from watchdog.events import (
    DirCreatedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from mdweave.preview.pipeline import render_note
from mdweave.runtime import build_runtime
from mdweave.watch import DebounceHandler, apply_changes


@pytest.fixture
def temp_workspace():
    """Create a temporary workspace for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir) / "notes"
        root.mkdir()
        (root / "a.md").write_text("A embeds ![[b]]\n")
        (root / "b.md").write_text("Old b\n")
        yield root


def test_debounce_handler_collects_events(temp_workspace):
    """Test that events are recorded by workspace path."""
    batches = []
    handler = DebounceHandler(temp_workspace, lambda c, d: batches.append((c, d)))

    handler.on_created(FileCreatedEvent(str(temp_workspace / "new.md")))
    handler.on_modified(FileModifiedEvent(str(temp_workspace / "sub" / "b.md")))
    handler.on_deleted(FileDeletedEvent(str(temp_workspace / "old.md")))
    handler.on_created(DirCreatedEvent(str(temp_workspace / "dir")))

    assert handler.changed == {PurePosixPath("/new.md"), PurePosixPath("/sub/b.md")}
    assert handler.deleted == {PurePosixPath("/old.md")}

    handler.flush()
    assert batches == [
        (
            {PurePosixPath("/new.md"), PurePosixPath("/sub/b.md")},
            {PurePosixPath("/old.md")},
        )
    ]
    assert not handler.changed and not handler.deleted


def test_debounce_handler_skips_hidden_and_temp(temp_workspace):
    """Test that hidden, swap and outside files are ignored."""
    handler = DebounceHandler(temp_workspace, None)

    for name in [".hidden.md", ".git/config", "note.md~", "note.md.swp"]:
        handler.on_modified(FileModifiedEvent(str(temp_workspace / name)))
    handler.on_modified(FileModifiedEvent("/somewhere/else.md"))

    assert handler.changed == set()


def test_debounce_handler_move(temp_workspace):
    """Test that a move is a delete plus a change."""
    handler = DebounceHandler(temp_workspace, None)

    handler.on_moved(
        FileMovedEvent(str(temp_workspace / "a.md"), str(temp_workspace / "c.md"))
    )

    assert handler.deleted == {PurePosixPath("/a.md")}
    assert handler.changed == {PurePosixPath("/c.md")}


def test_delete_then_recreate_is_a_change(temp_workspace):
    """Test that the last event for a path wins."""
    handler = DebounceHandler(temp_workspace, None)

    handler.on_deleted(FileDeletedEvent(str(temp_workspace / "a.md")))
    handler.on_created(FileCreatedEvent(str(temp_workspace / "a.md")))

    assert handler.changed == {PurePosixPath("/a.md")}
    assert handler.deleted == set()


def test_check_and_flush_waits_for_debounce(temp_workspace):
    """Test that batches are held until the debounce window passes."""
    batches = []
    handler = DebounceHandler(
        temp_workspace, lambda c, d: batches.append((c, d)), debounce_ms=50
    )

    handler.on_created(FileCreatedEvent(str(temp_workspace / "x.md")))
    handler.check_and_flush()
    assert batches == []

    time.sleep(0.1)
    handler.check_and_flush()
    assert len(batches) == 1


def test_event_during_batch_reaches_next_flush(temp_workspace):
    """Test that a file event arriving while a batch is handled is kept."""
    batches = []

    def on_batch(changed, deleted):
        batches.append((changed, deleted))
        if len(batches) == 1:
            handler.on_modified(FileModifiedEvent(str(temp_workspace / "late.md")))

    handler = DebounceHandler(temp_workspace, on_batch)
    handler.on_created(FileCreatedEvent(str(temp_workspace / "first.md")))

    handler.flush()
    assert handler.changed == {PurePosixPath("/late.md")}

    handler.flush()
    assert batches == [
        ({PurePosixPath("/first.md")}, set()),
        ({PurePosixPath("/late.md")}, set()),
    ]


def test_flushed_sets_are_not_reused(temp_workspace):
    """Test that a delivered batch is not mutated by later events."""
    batches = []
    handler = DebounceHandler(temp_workspace, lambda c, d: batches.append((c, d)))

    handler.on_created(FileCreatedEvent(str(temp_workspace / "a.md")))
    handler.flush()
    handler.on_created(FileCreatedEvent(str(temp_workspace / "b.md")))

    assert batches[0][0] == {PurePosixPath("/a.md")}


def test_apply_changes_updates_index(temp_workspace):
    """Test that edits, new files and deletions reach the workspace."""
    rt = build_runtime(root=temp_workspace)

    (temp_workspace / "b.md").write_text("New b\n")
    (temp_workspace / "c.md").write_text("# C\n")
    (temp_workspace / "a.md").unlink()

    counts = apply_changes(
        rt,
        changed={PurePosixPath("/b.md"), PurePosixPath("/c.md")},
        deleted={PurePosixPath("/a.md")},
    )

    assert counts == {"inserted": 1, "updated": 1, "removed": 1}
    assert rt.workspace.find("a") is None
    assert rt.workspace.find("c").title == "C"
    assert rt.workspace.find("b").text == "New b\n"


def test_embed_sees_updated_note(temp_workspace):
    """Test that the next render uses the changed embedded note."""
    rt = build_runtime(root=temp_workspace)
    assert "Old b" in render_note(rt.md, rt.workspace, rt.workspace.find("a"))

    (temp_workspace / "b.md").write_text("New b\n")
    apply_changes(rt, changed={PurePosixPath("/b.md")}, deleted=set())

    result = render_note(rt.md, rt.workspace, rt.workspace.find("a"))
    assert "New b" in result
    assert "Old b" not in result


def test_change_for_vanished_file_removes_it(temp_workspace):
    """Test a modify event for a file that no longer exists."""
    rt = build_runtime(root=temp_workspace)
    (temp_workspace / "b.md").unlink()

    counts = apply_changes(rt, changed={PurePosixPath("/b.md")}, deleted=set())

    assert counts["removed"] == 1
    assert rt.workspace.find("b") is None
