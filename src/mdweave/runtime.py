"""Runtime wiring helper for CLI applications."""

from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from markdown_it import MarkdownIt

from .adapters.fs_storage import FsStorage
from .adapters.markdown_parser import MarkdownParser
from .config import WeaveConfig, load_config
from .core.model import ATTACHMENT, IMAGE, Resource
from .core.ports import ParserStrategy, StorageStrategy
from .core.workspace import Workspace
from .preview.pipeline import create_markdown


@dataclass
class Runtime:
    """Container for all wired components."""
    storage: FsStorage
    parser: MarkdownParser
    workspace: Workspace
    md: MarkdownIt
    config: WeaveConfig


def load_resource(
    storage: StorageStrategy,
    parser: ParserStrategy,
    uri: PurePosixPath,
    image_extensions: tuple[str, ...] = (),
    default_extension: str = ".md",
) -> Resource | None:
    """Build the resource for one file; None if it is gone."""
    suffix = uri.suffix.lower()
    if suffix == default_extension:
        raw = storage.read_raw(uri)
        if raw is None:
            return None
        return parser.parse(uri, raw)
    kind = IMAGE if suffix in image_extensions else ATTACHMENT
    return Resource(uri=uri, type=kind, title=uri.name)


def load_workspace(
    storage: StorageStrategy,
    parser: ParserStrategy,
    image_extensions: tuple[str, ...] = (),
) -> Workspace:
    workspace = Workspace(reader=storage)
    for uri in storage.list_all():
        resource = load_resource(storage, parser, uri, image_extensions)
        if resource is not None:
            workspace.set(resource)
    return workspace


def build_runtime(
    root: Path | None = None,
    config_path: Path | None = None,
    embed_note_in_container: bool | None = None,
) -> Runtime:
    """Build and wire all components for a workspace directory."""
    config = load_config(config_path=config_path, root=root)

    # CLI args win over config values
    if root is not None:
        config.workspace.root = root
    if embed_note_in_container is not None:
        config.preview.embed_note_in_container = embed_note_in_container

    storage = FsStorage(config.workspace.root)
    parser = MarkdownParser()
    workspace = load_workspace(storage, parser, config.workspace.image_extensions)
    md = create_markdown(workspace, config.preview)

    return Runtime(
        storage=storage,
        parser=parser,
        workspace=workspace,
        md=md,
        config=config,
    )
