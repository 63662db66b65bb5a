"""Tests for oassdk.session."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from oassdk.exceptions import (
    NotFoundError,
    OASSDKError,
    ParseError,
    ReferenceError_,
    ValidationError,
)
from oassdk.models import GlobalConfig
from oassdk.parser.resolver import CIRCULAR_MARKER
from oassdk.session import SpecSession


class TestLoad:
    """Loading runs the whole pipeline."""

    def test_load_petstore(self, petstore_path: Path) -> None:
        session = SpecSession().load(str(petstore_path))

        assert session.is_loaded
        assert session.source == petstore_path.resolve()
        assert session.metadata.title == "Petstore"
        assert session.metadata.operation_count == 4
        assert session.validate() is True

    def test_spec_is_resolved(self, petstore_path: Path) -> None:
        session = SpecSession().load(str(petstore_path))
        pets = session.spec["paths"]["/pets"]
        assert pets["parameters"][0]["name"] == "limit"

    def test_split_spec_with_search_path(
        self, split_spec_path: Path, shared_dir: Path
    ) -> None:
        session = SpecSession(GlobalConfig(search_paths=[str(shared_dir)]))
        session.load(str(split_spec_path))
        assert session.merged_schema("Pet").field_names == ["name", "tag"]

    def test_split_spec_without_search_path(self, split_spec_path: Path) -> None:
        with pytest.raises(NotFoundError):
            SpecSession().load(str(split_spec_path))

    def test_cyclic_spec(self, cyclic_path: Path) -> None:
        session = SpecSession().load(str(cyclic_path))
        node = session.spec["components"]["schemas"]["Node"]
        assert node["properties"]["parent"]["properties"]["parent"][CIRCULAR_MARKER] is True

    def test_locate_by_search_path(self, fixtures_dir: Path, isolated_config: Path) -> None:
        session = SpecSession(GlobalConfig(search_paths=[str(fixtures_dir)]))
        session.load("petstore.yaml")
        assert session.source == (fixtures_dir / "petstore.yaml").resolve()

    def test_stdin(self, petstore_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO(petstore_path.read_text()))
        session = SpecSession().load("-")
        assert session.source is None
        assert session.metadata.title == "Petstore"

    def test_ref_depth_from_config(self, petstore_path: Path) -> None:
        with pytest.raises(ReferenceError_, match="maximum reference depth"):
            SpecSession(GlobalConfig(max_ref_depth=1)).load(str(petstore_path))


class TestLoadFailures:
    """Errors propagate and leave the previous state alone."""

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ParseError):
            SpecSession().load(str(tmp_path / "nonexistent.yaml"))

    def test_max_file_size_from_config(self, petstore_path: Path) -> None:
        with pytest.raises(ParseError, match="byte limit"):
            SpecSession(GlobalConfig(max_file_size=100)).load(str(petstore_path))

    def test_missing_paths(self, fixtures_dir: Path) -> None:
        with pytest.raises(ValidationError) as exc_info:
            SpecSession().load(str(fixtures_dir / "invalid.yaml"))
        assert "Missing required top-level key 'paths'" in exc_info.value.errors

    def test_swagger_rejected(self, fixtures_dir: Path) -> None:
        with pytest.raises(ValidationError, match="Swagger"):
            SpecSession().load(str(fixtures_dir / "swagger.json"))

    def test_failed_load_keeps_previous_spec(
        self, petstore_path: Path, fixtures_dir: Path
    ) -> None:
        session = SpecSession().load(str(petstore_path))
        with pytest.raises(ValidationError):
            session.load(str(fixtures_dir / "invalid.yaml"))
        assert session.metadata.title == "Petstore"

    def test_accessors_before_load(self) -> None:
        session = SpecSession()
        assert not session.is_loaded
        with pytest.raises(OASSDKError, match="No specification loaded"):
            session.spec
        with pytest.raises(OASSDKError, match="No specification loaded"):
            session.metadata


class TestFilters:
    """Filtered views from the session."""

    @pytest.fixture
    def session(self, petstore_path: Path) -> SpecSession:
        return SpecSession().load(str(petstore_path))

    def test_no_filter_returns_resolved_spec(self, session: SpecSession) -> None:
        assert session.filtered_spec() is session.spec

    def test_path_filter(self, session: SpecSession) -> None:
        view = session.filter_paths(["/pets"]).filtered_spec()
        assert list(view["paths"]) == ["/pets"]
        assert list(session.spec["paths"]) == ["/pets", "/pets/{petId}"]

    def test_operation_filter(self, session: SpecSession) -> None:
        view = session.filter_operations({"/pets": ["get"]}).filtered_spec()
        pets = view["paths"]["/pets"]
        assert "get" in pets and "post" not in pets
        assert pets["summary"] == "Pet collection"

    def test_clear_filters(self, session: SpecSession) -> None:
        session.filter_paths(["/pets"]).filter_operations({"/pets": ["GET"]})
        assert session.clear_filters().filtered_spec() is session.spec

    def test_empty_filter_clears(self, session: SpecSession) -> None:
        session.filter_paths(["/pets"])
        session.filter_paths([])
        assert session.filtered_spec() is session.spec

    def test_config_defaults_apply(self, petstore_path: Path) -> None:
        config = GlobalConfig(
            include_paths=["/pets/{petId}"],
            include_operations={"/pets/{petId}": ["DELETE"]},
        )
        view = SpecSession(config).load(str(petstore_path)).filtered_spec()
        assert list(view["paths"]) == ["/pets/{petId}"]
        assert set(view["paths"]["/pets/{petId}"]) == {"parameters", "delete"}

    def test_session_filter_beats_config(self, petstore_path: Path) -> None:
        config = GlobalConfig(include_paths=["/pets/{petId}"])
        session = SpecSession(config).load(str(petstore_path))
        view = session.filter_paths(["/pets"]).filtered_spec()
        assert list(view["paths"]) == ["/pets"]


class TestMergedSchema:
    def test_scenario_owner(self, petstore_path: Path) -> None:
        session = SpecSession().load(str(petstore_path))
        owner = session.merged_schema("Owner")
        assert set(owner.field_names) == {"id", "name"}
        assert owner.required == ["name"]

    def test_unknown_schema(self, petstore_path: Path) -> None:
        session = SpecSession().load(str(petstore_path))
        with pytest.raises(ReferenceError_):
            session.merged_schema("Nope")

    def test_editing_merged_fields_leaves_spec_alone(self, petstore_path: Path) -> None:
        session = SpecSession().load(str(petstore_path))
        merged = session.merged_schema("NewPet")
        merged.properties["name"]["type"] = "integer"
        new_pet = session.spec["components"]["schemas"]["NewPet"]
        assert new_pet["properties"]["name"]["type"] == "string"
