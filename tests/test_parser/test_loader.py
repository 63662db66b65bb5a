"""Tests for oassdk.parser.loader."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from oassdk.exceptions import NotFoundError, ParseError
from oassdk.parser.loader import _parse_content, load_file, load_spec


# ---------------------------------------------------------------------------
# _parse_content
# ---------------------------------------------------------------------------


class TestParseContent:
    """Format detection between JSON and YAML."""

    def test_parses_json(self) -> None:
        assert _parse_content('{"openapi": "3.0.3"}') == {"openapi": "3.0.3"}

    def test_parses_yaml(self) -> None:
        assert _parse_content("openapi: 3.0.3\ninfo:\n  title: T\n") == {
            "openapi": "3.0.3",
            "info": {"title": "T"},
        }

    def test_yaml_hint_skips_json(self) -> None:
        assert _parse_content("a: 1", hint="yaml") == {"a": 1}

    def test_json_hint_reports_json_error(self) -> None:
        with pytest.raises(ParseError, match="Invalid JSON"):
            _parse_content("a: 1", hint="json")

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(ParseError, match="must be a JSON/YAML object"):
            _parse_content("[1, 2, 3]")

    def test_scalar_yaml_rejected(self) -> None:
        with pytest.raises(ParseError, match="got str"):
            _parse_content("just a string", hint="yaml")

    def test_garbage_reports_both_errors(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            _parse_content("{unbalanced: [")
        message = str(exc_info.value)
        assert "JSON error" in message
        assert "YAML error" in message


# ---------------------------------------------------------------------------
# load_file
# ---------------------------------------------------------------------------


class TestLoadFile:
    """Reading an already-located file."""

    def test_loads_yaml_fixture(self, petstore_path: Path) -> None:
        spec = load_file(petstore_path)
        assert spec["info"]["title"] == "Petstore"

    def test_loads_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "spec.json"
        path.write_text(json.dumps({"openapi": "3.1.0"}))
        assert load_file(path) == {"openapi": "3.1.0"}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ParseError, match="not found"):
            load_file(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("   \n")
        with pytest.raises(ParseError, match="empty"):
            load_file(path)

    def test_parse_error_names_the_file(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ParseError, match="bad.json"):
            load_file(path)


# ---------------------------------------------------------------------------
# load_spec
# ---------------------------------------------------------------------------


class TestLoadSpec:
    """Top-level loading from a path, search roots, or stdin."""

    def test_direct_path(self, petstore_path: Path) -> None:
        spec = load_spec(str(petstore_path))
        assert spec["openapi"] == "3.0.3"

    def test_missing_file_raises_parse_error(self, tmp_path: Path) -> None:
        with pytest.raises(ParseError):
            load_spec(str(tmp_path / "does-not-exist.yaml"))

    def test_direct_path_respects_size_limit(self, petstore_path: Path) -> None:
        with pytest.raises(ParseError, match="byte limit"):
            load_spec(str(petstore_path), max_file_size=100)

    def test_direct_path_rejects_unknown_extension(self, tmp_path: Path) -> None:
        target = tmp_path / "openapi.txt"
        target.write_text("openapi: 3.0.0\n", encoding="utf-8")
        with pytest.raises(ParseError, match="Unsupported spec file extension"):
            load_spec(str(target))

    def test_found_under_search_path(self, fixtures_dir: Path, isolated_config: Path) -> None:
        spec = load_spec("petstore.yaml", search_paths=[str(fixtures_dir)])
        assert spec["info"]["title"] == "Petstore"

    def test_not_in_any_search_path(self, tmp_path: Path, isolated_config: Path) -> None:
        with pytest.raises(NotFoundError):
            load_spec("absent.yaml", search_paths=[str(tmp_path)])

    def test_stdin(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("openapi: 3.0.0\npaths: {}\n"))
        assert load_spec("-") == {"openapi": "3.0.0", "paths": {}}

    def test_empty_stdin(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO(""))
        with pytest.raises(ParseError, match="No input"):
            load_spec("-")
