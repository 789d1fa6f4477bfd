"""Tests for manifest lookup and diagnostic formatting."""

import json
from pathlib import Path

import pytest

from prebundle.config import ResolvedOptions
from prebundle.services import (
    ManifestError,
    find_closest_manifest,
    read_manifest_name,
    to_host_error,
)


class TestManifest:
    """Tests for manifest lookup."""

    def test_finds_nearest(self, node_modules: Path) -> None:
        """The closest package.json above the file is returned."""
        button = node_modules / "ui-kit" / "src" / "Button.svelte"
        assert find_closest_manifest(button) == node_modules / "ui-kit" / "package.json"

    def test_none_without_manifest(self, tmp_path: Path) -> None:
        """No manifest anywhere above returns None."""
        orphan = tmp_path / "orphan" / "App.svelte"
        orphan.parent.mkdir()
        orphan.write_text("<p/>")
        found = find_closest_manifest(orphan)
        assert found is None or not str(found).startswith(str(tmp_path))

    def test_read_name(self, tmp_path: Path) -> None:
        """The declared name is returned."""
        manifest = tmp_path / "package.json"
        manifest.write_text(json.dumps({"name": "@scope/ui", "version": "2.0.0"}))
        assert read_manifest_name(manifest) == "@scope/ui"

    @pytest.mark.parametrize("content", ["{", "[]", '{"version": "1.0.0"}', '{"name": 3}'])
    def test_read_name_invalid(self, tmp_path: Path, content: str) -> None:
        """Malformed manifests raise ManifestError."""
        manifest = tmp_path / "package.json"
        manifest.write_text(content)
        with pytest.raises(ManifestError):
            read_manifest_name(manifest)


class TestToHostError:
    """Tests for to_host_error."""

    def test_plain_exception(self) -> None:
        """Errors without position get text and a stack."""
        try:
            raise ValueError("bad input")
        except ValueError as e:
            message = to_host_error(e, ResolvedOptions())
        assert message.text == "bad input"
        assert message.location is None
        assert message.detail is not None
        assert "ValueError: bad input" in message.detail

    def test_positioned_error_in_dev(self) -> None:
        """Position and frame give a location; no stack outside build/debug."""
        error = RuntimeError("Unexpected token")
        error.filename = "/src/App.svelte"  # type: ignore[attr-defined]
        error.start = {"line": 2, "column": 4}  # type: ignore[attr-defined]
        error.frame = " 1: <script>\n 2: let = ;\n        ^\n 3: </script>"  # type: ignore[attr-defined]
        message = to_host_error(error, ResolvedOptions())
        assert message.location is not None
        assert message.location.file == "/src/App.svelte"
        assert (message.location.line, message.location.column) == (2, 4)
        assert message.location.line_text == "let = ;"
        assert message.detail is None

    def test_build_mode_attaches_stack(self) -> None:
        """Build mode always attaches the stack."""
        error = RuntimeError("Unexpected token")
        error.frame = "1: x"  # type: ignore[attr-defined]
        message = to_host_error(error, ResolvedOptions(is_build=True))
        assert message.detail is not None

    def test_empty_message_uses_type_name(self) -> None:
        """Exceptions without a message are named by type."""
        assert to_host_error(KeyboardInterrupt(), ResolvedOptions()).text == "KeyboardInterrupt"

    @pytest.mark.parametrize(
        "start",
        [{"line": "x"}, {"line": 3, "column": None}, {"line": None}, {"line": True, "column": 0}],
    )
    def test_malformed_start_has_no_location(self, start: dict) -> None:
        """Positions that are not integers are dropped and the stack is attached."""
        error = RuntimeError("Unexpected token")
        error.start = start  # type: ignore[attr-defined]
        error.frame = "1: x"  # type: ignore[attr-defined]
        message = to_host_error(error, ResolvedOptions())
        assert message.text == "Unexpected token"
        assert message.location is None
        assert message.detail is not None
