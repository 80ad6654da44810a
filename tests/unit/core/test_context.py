"""Unit tests for invocation context files."""

import json
from pathlib import Path

import pytest
import typer
from vaultunit.core.context import (
    ContextNotFoundError,
    ContextParseError,
    load_context,
    require_context,
)

CONTEXT = {
    "home": {
        "options": {"overwrite": True},
        "data": [".config/app", {"path": ".local/share/app", "required": True}],
        "bin": "bin/tool",
    }
}


class TestLoadContext:
    """Tests for load_context function."""

    def test_loads_json(self, tmp_path: Path) -> None:
        """JSON files are parsed as-is."""
        path = tmp_path / "unit.json"
        path.write_text(json.dumps(CONTEXT))

        assert load_context(path) == CONTEXT

    def test_loads_toml(self, tmp_path: Path) -> None:
        """TOML files give the same structure."""
        path = tmp_path / "unit.toml"
        path.write_text(
            "[home]\n"
            'data = [".config/app", { path = ".local/share/app", required = true }]\n'
            'bin = "bin/tool"\n'
            "[home.options]\n"
            "overwrite = true\n"
        )

        assert load_context(path) == CONTEXT

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file raises ContextNotFoundError."""
        with pytest.raises(ContextNotFoundError):
            load_context(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Broken JSON raises ContextParseError."""
        path = tmp_path / "unit.json"
        path.write_text("{")

        with pytest.raises(ContextParseError, match="Invalid context syntax"):
            load_context(path)

    def test_non_mapping(self, tmp_path: Path) -> None:
        """The top level must be a mapping."""
        path = tmp_path / "unit.json"
        path.write_text("[]")

        with pytest.raises(ContextParseError, match="must be a mapping"):
            load_context(path)


class TestRequireContext:
    """Tests for require_context function."""

    def test_exits_on_error(self, tmp_path: Path) -> None:
        """Load errors exit with code 1."""
        with pytest.raises(typer.Exit) as exc_info:
            require_context(tmp_path / "missing.json")

        assert exc_info.value.exit_code == 1
