"""Configuration loader for weave.toml."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

CONFIG_NAME = "weave.toml"


@dataclass
class WorkspaceConfig:
    """Workspace location and file classification."""
    root: Path
    image_extensions: tuple[str, ...] = (".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp")


@dataclass
class PreviewConfig:
    """Preview rendering options."""
    embed_note_in_container: bool = True


@dataclass
class ExportConfig:
    """HTML export configuration."""
    out: Path = Path("site")


@dataclass
class WeaveConfig:
    """Complete mdweave configuration."""
    workspace: WorkspaceConfig
    preview: PreviewConfig = field(default_factory=PreviewConfig)
    export: ExportConfig = field(default_factory=ExportConfig)


def load_config(config_path: Path | None = None, root: Path | None = None) -> WeaveConfig:
    """
    Load configuration from weave.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/weave.toml
    3. root/weave.toml

    Args:
        config_path: Explicit path to config file
        root: Workspace root for fallback search

    Returns:
        WeaveConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_NAME)
    if root:
        search_paths.append(root / CONFIG_NAME)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break

    workspace_data = toml_data.get("workspace", {})
    workspace_config = WorkspaceConfig(
        root=Path(workspace_data.get("root", root or Path("."))),
    )
    if "image_extensions" in workspace_data:
        workspace_config.image_extensions = tuple(
            ext.lower() if ext.startswith(".") else f".{ext.lower()}"
            for ext in workspace_data["image_extensions"]
        )

    preview_data = toml_data.get("preview", {})
    preview_config = PreviewConfig(
        embed_note_in_container=bool(preview_data.get("embed_note_in_container", True)),
    )

    export_data = toml_data.get("export", {})
    export_config = ExportConfig(out=Path(export_data.get("out", "site")))

    return WeaveConfig(
        workspace=workspace_config,
        preview=preview_config,
        export=export_config,
    )
