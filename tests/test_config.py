"""Tests for configuration loading."""

import os
import tempfile
from pathlib import Path

from mdweave.config import load_config


def test_load_config_defaults():
    """Test loading config with defaults when no file exists."""
    with tempfile.TemporaryDirectory() as tmpdir:
        orig_cwd = os.getcwd()
        try:
            os.chdir(tmpdir)
            config = load_config()
        finally:
            os.chdir(orig_cwd)

    assert config.workspace.root == Path(".")
    assert ".png" in config.workspace.image_extensions
    assert config.preview.embed_note_in_container is True
    assert config.export.out == Path("site")


def test_load_config_from_file():
    """Test loading config from a file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "weave.toml"
        config_path.write_text("""
[workspace]
root = "my-notes"
image_extensions = ["PNG", ".tiff"]

[preview]
embed_note_in_container = false

[export]
out = "output"
""")

        config = load_config(config_path=config_path)

        assert config.workspace.root == Path("my-notes")
        assert config.workspace.image_extensions == (".png", ".tiff")
        assert config.preview.embed_note_in_container is False
        assert config.export.out == Path("output")


def test_load_config_search_cwd():
    """Test config search in current working directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        orig_cwd = os.getcwd()
        try:
            os.chdir(tmpdir)
            (Path(tmpdir) / "weave.toml").write_text("""
[preview]
embed_note_in_container = false
""")

            config = load_config()
            assert config.preview.embed_note_in_container is False
        finally:
            os.chdir(orig_cwd)


def test_load_config_search_root():
    """Test config search in the workspace directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir) / "notes"
        root.mkdir()
        (root / "weave.toml").write_text("""
[export]
out = "public"
""")

        orig_cwd = os.getcwd()
        try:
            os.chdir(tmpdir)
            config = load_config(root=root)
        finally:
            os.chdir(orig_cwd)

        assert config.export.out == Path("public")
        assert config.workspace.root == root
