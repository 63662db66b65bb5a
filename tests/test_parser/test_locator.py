"""Tests for oassdk.parser.locator."""

from __future__ import annotations

from pathlib import Path

import pytest

from oassdk.exceptions import NotFoundError, ParseError
from oassdk.parser.locator import FileLocator


def _touch(path: Path, content: str = "a: 1\n") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


class TestLocate:
    """Lookup order: base directory, search roots, recursive search."""

    def test_absolute_path(self, tmp_path: Path) -> None:
        target = _touch(tmp_path / "spec.yaml")
        assert FileLocator().locate(str(target)) == target.resolve()

    def test_absolute_path_missing(self, tmp_path: Path) -> None:
        with pytest.raises(NotFoundError):
            FileLocator().locate(str(tmp_path / "missing.yaml"))

    def test_relative_to_base_dir(self, tmp_path: Path) -> None:
        target = _touch(tmp_path / "schemas" / "pet.yaml")
        found = FileLocator().locate("schemas/pet.yaml", base_dir=tmp_path)
        assert found == target.resolve()

    def test_base_dir_wins_over_search_path(self, tmp_path: Path) -> None:
        local = _touch(tmp_path / "doc" / "common.yaml")
        _touch(tmp_path / "shared" / "common.yaml")
        locator = FileLocator([tmp_path / "shared"])
        assert locator.locate("common.yaml", base_dir=tmp_path / "doc") == local.resolve()

    def test_search_paths_tried_in_order(self, tmp_path: Path) -> None:
        _touch(tmp_path / "first" / "common.yaml")
        _touch(tmp_path / "second" / "common.yaml")
        locator = FileLocator([tmp_path / "first", tmp_path / "second"])
        found = locator.locate("common.yaml", base_dir=tmp_path / "elsewhere")
        assert found.parent.name == "first"

    def test_missing_search_path_skipped(self, tmp_path: Path) -> None:
        target = _touch(tmp_path / "real" / "x.json", "{}")
        locator = FileLocator([tmp_path / "ghost", tmp_path / "real"])
        assert locator.locate("x.json") == target.resolve()

    def test_recursive_search(self, tmp_path: Path) -> None:
        target = _touch(tmp_path / "shared" / "deep" / "er" / "errors.yml")
        locator = FileLocator([tmp_path / "shared"])
        assert locator.locate("errors.yml") == target.resolve()

    def test_not_found_lists_tried_directories(self, tmp_path: Path) -> None:
        (tmp_path / "shared").mkdir()
        locator = FileLocator([tmp_path / "shared"])
        with pytest.raises(NotFoundError) as exc_info:
            locator.locate("nope.yaml", base_dir=tmp_path)
        assert str(tmp_path / "shared") in str(exc_info.value)


class TestRejections:
    """Inputs the locator refuses outright."""

    def test_traversal_rejected(self, tmp_path: Path) -> None:
        _touch(tmp_path / "secret.yaml")
        base = tmp_path / "specs"
        base.mkdir()
        with pytest.raises(ParseError, match="escapes"):
            FileLocator().locate("../secret.yaml", base_dir=base)

    @pytest.mark.parametrize("name", ["spec.txt", "spec", "spec.yaml.bak"])
    def test_unsupported_extension(self, tmp_path: Path, name: str) -> None:
        with pytest.raises(ParseError, match="extension"):
            FileLocator().locate(name, base_dir=tmp_path)

    def test_empty_reference(self) -> None:
        with pytest.raises(ParseError, match="empty"):
            FileLocator().locate("  ")

    def test_relative_without_base_or_search_paths(self) -> None:
        with pytest.raises(ParseError, match="no base directory"):
            FileLocator().locate("pet.yaml")

    def test_nul_bytes_and_backslashes_sanitised(self, tmp_path: Path) -> None:
        target = _touch(tmp_path / "schemas" / "pet.yaml")
        found = FileLocator().locate("schemas\\pet\0.yaml", base_dir=tmp_path)
        assert found == target.resolve()

    def test_oversized_file(self, tmp_path: Path) -> None:
        _touch(tmp_path / "big.yaml", "a: " + "x" * 100 + "\n")
        locator = FileLocator(max_file_size=10)
        with pytest.raises(ParseError, match="byte limit"):
            locator.locate("big.yaml", base_dir=tmp_path)
