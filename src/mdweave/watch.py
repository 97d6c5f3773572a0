"""Watch mode for mdweave - keeps the workspace index and HTML export in sync."""

import json
import logging
import signal
import sys
import threading
import time
from pathlib import Path, PurePosixPath
from typing import Any

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .export.html import HtmlExporter
from .runtime import Runtime, load_resource

logger = logging.getLogger(__name__)


class DebounceHandler(FileSystemEventHandler):
    """File system event handler with debouncing."""

    def __init__(self, root: Path, on_batch: Any, debounce_ms: int = 150):
        super().__init__()
        self.root = root
        self.on_batch = on_batch
        self.debounce_ms = debounce_ms

        # Track pending changes by workspace path
        self.changed: set[PurePosixPath] = set()
        self.deleted: set[PurePosixPath] = set()
        self.last_event_time = 0.0
        # Observer thread records, main loop flushes
        self._lock = threading.Lock()

    def _should_skip(self, path: Path) -> bool:
        """Check if file should be skipped."""
        try:
            rel = path.relative_to(self.root)
        except ValueError:
            return True

        # Skip hidden files and directories
        if any(part.startswith(".") for part in rel.parts):
            return True

        # Skip temp/swap files
        name = path.name
        return name.endswith("~") or name.endswith(".swp") or name.startswith(".#")

    def _extract_uri(self, src_path: Any) -> PurePosixPath | None:
        """Workspace path for an event path, None for ignored files."""
        path = Path(str(src_path))
        if self._should_skip(path):
            return None
        return PurePosixPath("/", path.relative_to(self.root).as_posix())

    def _record_change(self, src_path: Any) -> None:
        uri = self._extract_uri(src_path)
        if uri:
            with self._lock:
                self.changed.add(uri)
                self.deleted.discard(uri)
                self.last_event_time = time.time()

    def _record_delete(self, src_path: Any) -> None:
        uri = self._extract_uri(src_path)
        if uri:
            with self._lock:
                self.deleted.add(uri)
                self.changed.discard(uri)
                self.last_event_time = time.time()

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._record_change(event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._record_change(event.src_path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._record_delete(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._record_delete(event.src_path)
            self._record_change(event.dest_path)

    def check_and_flush(self) -> None:
        """Check if debounce period has elapsed and flush if so."""
        if not (self.changed or self.deleted):
            return

        elapsed = (time.time() - self.last_event_time) * 1000
        if elapsed >= self.debounce_ms:
            self.flush()

    def flush(self) -> None:
        """Process accumulated events."""
        with self._lock:
            if not (self.changed or self.deleted):
                return
            changed, self.changed = self.changed, set()
            deleted, self.deleted = self.deleted, set()

        if self.on_batch:
            self.on_batch(changed, deleted)


def apply_changes(
    rt: Runtime, changed: set[PurePosixPath], deleted: set[PurePosixPath]
) -> dict[str, int]:
    """
    Bring the workspace index up to date with a batch of file events.
    Must not run while a render is in progress.
    """
    counts = {"inserted": 0, "updated": 0, "removed": 0}
    for uri in sorted(deleted):
        if rt.workspace.delete(uri) is not None:
            counts["removed"] += 1
    for uri in sorted(changed):
        resource = load_resource(
            rt.storage, rt.parser, uri, rt.config.workspace.image_extensions
        )
        if resource is None:
            if rt.workspace.delete(uri) is not None:
                counts["removed"] += 1
            continue
        key = "updated" if rt.workspace.exists(uri) else "inserted"
        rt.workspace.set(resource)
        counts[key] += 1
    return counts


def watch_workspace(
    rt: Runtime,
    out: Path,
    debounce_ms: int = 150,
    quiet: bool = False,
    json_output: bool = False,
) -> int:
    """
    Watch the workspace directory, update the index and re-export on change.

    Any note may embed any other, so every batch re-renders the whole export.
    """
    root = rt.config.workspace.root
    if not root.exists():
        print(f"Error: Workspace not found: {root}", file=sys.stderr)
        return 1

    exporter = HtmlExporter(rt.workspace, rt.md, out)
    exporter.export_all()

    running = True

    def handle_batch(changed: set[PurePosixPath], deleted: set[PurePosixPath]) -> None:
        """Handle a batch of changes."""
        start_time = time.time()

        try:
            counts = apply_changes(rt, changed, deleted)
            for uri in deleted:
                exporter.remove_note(uri)
            exporter.export_all()
        except OSError as e:
            logger.exception("Batch failed")
            if json_output:
                print(json.dumps({"type": "error", "message": str(e)}), flush=True)
            else:
                print(f"Error: {e}", file=sys.stderr, flush=True)
            return
        duration_ms = int((time.time() - start_time) * 1000)
        logger.info("Applied batch %s in %dms", counts, duration_ms)

        if json_output:
            event = {
                "type": "batch",
                "changed": sorted(str(uri) for uri in changed),
                "deleted": sorted(str(uri) for uri in deleted),
                "duration_ms": duration_ms,
            }
            print(json.dumps(event), flush=True)
        elif not quiet:
            print(
                f"Rendered: +{counts['inserted']} ~{counts['updated']} "
                f"-{counts['removed']} ({duration_ms}ms)",
                flush=True,
            )

    def signal_handler(signum: int, frame: Any) -> None:
        nonlocal running
        running = False
        if not quiet and not json_output:
            print("\nShutting down...", flush=True)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    handler = DebounceHandler(root.resolve(), handle_batch, debounce_ms)
    observer = Observer()
    observer.schedule(handler, str(root.resolve()), recursive=True)

    if not quiet and not json_output:
        print(f"Watching {root} (debounce: {debounce_ms}ms)", flush=True)
        print("Press Ctrl+C to stop", flush=True)

    observer.start()

    try:
        while running:
            time.sleep(0.1)
            handler.check_and_flush()
    finally:
        handler.flush()
        observer.stop()
        observer.join()

    if not quiet and not json_output:
        print("Watch stopped", flush=True)

    return 0
