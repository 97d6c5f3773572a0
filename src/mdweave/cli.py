"""CLI for mdweave - render interlinked markdown notes to HTML."""

import argparse
import json
import logging
import platform
import sys
from pathlib import Path, PurePosixPath
from typing import Any

from . import __version__
from .core.model import NOTE, Resource
from .core.slicer import extract_section
from .export.html import HtmlExporter
from .lint import DeadLinksRule, Finding
from .preview.pipeline import render_note
from .runtime import build_runtime


def _lookup(rt: Any, ref: str) -> Resource | None:
    """A workspace path (``notes/a.md``) or any reference ``find`` accepts."""
    path = ref.partition("#")[0].strip()
    if not path:
        return None
    resource = rt.workspace.get(PurePosixPath("/", path))
    if resource is None:
        resource = rt.workspace.find(ref)
    return resource


def cmd_render(args: argparse.Namespace, rt: Any) -> int:
    """Render one note to HTML on stdout."""
    resource = _lookup(rt, args.ref)
    if resource is None or resource.type != NOTE:
        print(f"Note {args.ref} not found", file=sys.stderr)
        return 1
    sys.stdout.write(render_note(rt.md, rt.workspace, resource))
    return 0


def cmd_resolve(args: argparse.Namespace, rt: Any) -> int:
    """Resolve a reference to a resource."""
    resource = _lookup(rt, args.ref)
    if resource is None:
        if args.json:
            print(json.dumps({"reference": args.ref, "found": False}))
        elif not args.quiet:
            print(f"Not found: {args.ref}", file=sys.stderr)
        return 1

    path = rt.workspace.relative_path(resource.uri)
    if args.json:
        print(
            json.dumps(
                {
                    "reference": args.ref,
                    "found": True,
                    "path": path,
                    "identifier": rt.workspace.identifier(resource.uri),
                    "type": resource.type,
                    "title": resource.title,
                }
            )
        )
    else:
        print(path)
    return 0


def cmd_section(args: argparse.Namespace, rt: Any) -> int:
    """Print the raw text of a note or one of its sections."""
    resource = _lookup(rt, args.ref)
    if resource is None or resource.type != NOTE:
        print(f"Note {args.ref} not found", file=sys.stderr)
        return 1

    title = args.ref.partition("#")[2].strip()
    text = rt.workspace.read(resource)
    if title:
        text = extract_section(resource, title, text)
        if text is None:
            print(f"Section #{title} not found in {args.ref}", file=sys.stderr)
            return 1
    sys.stdout.write(text)
    return 0


def cmd_lint(args: argparse.Namespace, rt: Any) -> int:
    """Report unresolved links and embeds."""
    rule = DeadLinksRule()

    all_findings: list[tuple[str, Finding]] = []
    for resource in rt.workspace.list():
        if resource.type != NOTE:
            continue
        path = rt.workspace.relative_path(resource.uri)
        for f in rule.check(resource, rt.workspace):
            all_findings.append((path, f))

    if args.json:
        output = [
            {
                "path": path,
                "severity": f.severity,
                "message": f.message,
                "range": {"start": f.range.start, "end": f.range.end} if f.range else None,
            }
            for path, f in all_findings
        ]
        print(json.dumps(output, indent=2))
    elif not args.quiet:
        for path, f in all_findings:
            print(f"[{f.severity}] {path}: {f.message}")
        if not all_findings:
            print("No issues found")

    return 1 if any(f.severity == "error" for _, f in all_findings) else 0


def cmd_export(args: argparse.Namespace, rt: Any) -> int:
    """Render every note to an HTML tree."""
    out = Path(args.outdir) if args.outdir else rt.config.export.out
    HtmlExporter(rt.workspace, rt.md, out).export_all()
    if not args.quiet:
        print(f"Exported to {out}")
    return 0


def cmd_watch(args: argparse.Namespace, rt: Any) -> int:
    """Keep an HTML export in sync with the workspace."""
    from .watch import watch_workspace

    out = Path(args.outdir) if args.outdir else rt.config.export.out
    return watch_workspace(
        rt, out, debounce_ms=args.debounce, quiet=args.quiet, json_output=args.json
    )


def _version_string() -> str:
    return (
        f"mdweave {__version__}\n"
        f"python {platform.python_version()}\n"
        f"platform {platform.platform()}"
    )


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="weave", description="Render wikilinked markdown notes"
    )
    parser.add_argument(
        "--version", action="version", version=_version_string()
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/weave.toml, root/weave.toml)",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Workspace directory (overrides config)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging on stderr"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # render command
    parser_render = subparsers.add_parser("render", help="Render a note to HTML")
    parser_render.add_argument("ref", help="Workspace path or identifier of the note")
    mode = parser_render.add_mutually_exclusive_group()
    mode.add_argument(
        "--container", dest="container", action="store_const", const=True,
        help="Wrap embedded notes in a container element",
    )
    mode.add_argument(
        "--flat", dest="container", action="store_const", const=False,
        help="Embed notes without a container element",
    )

    # resolve command
    parser_resolve = subparsers.add_parser("resolve", help="Resolve a reference")
    parser_resolve.add_argument("ref", help="Identifier or path, e.g. note-a or ./dir/note-a.md")

    # section command
    parser_section = subparsers.add_parser(
        "section", help="Print a note or one of its sections"
    )
    parser_section.add_argument("ref", help="Note reference: <id> or <id>#<Section title>")

    # lint command
    subparsers.add_parser("lint", help="Report unresolved links and embeds")

    # export command
    parser_export = subparsers.add_parser("export", help="Export the workspace to HTML")
    parser_export.add_argument("outdir", nargs="?", help="Output directory (default: config)")

    # watch command
    parser_watch = subparsers.add_parser("watch", help="Re-export on file changes")
    parser_watch.add_argument("outdir", nargs="?", help="Output directory (default: config)")
    parser_watch.add_argument(
        "--debounce", type=int, default=150, help="Debounce window in ms (default: 150)"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.root is not None and not args.root.is_dir():
        print(f"Error: Workspace not found: {args.root}", file=sys.stderr)
        sys.exit(1)

    rt = build_runtime(
        root=args.root,
        config_path=args.config,
        embed_note_in_container=getattr(args, "container", None),
    )

    handlers = {
        "render": cmd_render,
        "resolve": cmd_resolve,
        "section": cmd_section,
        "lint": cmd_lint,
        "export": cmd_export,
        "watch": cmd_watch,
    }

    handler = handlers.get(args.cmd)
    if handler is None:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)

    try:
        sys.exit(handler(args, rt))
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
