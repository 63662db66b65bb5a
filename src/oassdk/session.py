"""Stateful spec session: the single object generators are handed.

A :class:`SpecSession` sequences the core pipeline for one spec --
load, resolve ``$ref`` pointers, validate, extract metadata -- and keeps the
path/operation filters a caller has selected.  Generators then ask it for
:meth:`SpecSession.filtered_spec` instead of touching the pipeline directly.

A session is single-writer: run one :meth:`~SpecSession.load` at a time and
use one session per thread.  Filtered views are independent copies, so
handing them to several consumers is safe.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from oassdk.exceptions import OASSDKError
from oassdk.models import (
    GlobalConfig,
    MergedSchema,
    OperationFilter,
    PathFilter,
    SpecMetadata,
)
from oassdk.parser.composer import merge_component
from oassdk.parser.filter import filter_spec
from oassdk.parser.loader import load_spec
from oassdk.parser.locator import FileLocator
from oassdk.parser.metadata import extract_metadata
from oassdk.parser.resolver import ReferenceResolver
from oassdk.parser.validator import is_valid, validate_spec

logger = logging.getLogger(__name__)


class SpecSession:
    """Holds one loaded, resolved and validated spec plus the active filters.

    Args:
        config: Effective configuration (search paths, limits and default
            filters). Defaults to :class:`~oassdk.models.GlobalConfig()`.

    Example::

        session = SpecSession(resolve_config())
        session.load("specs/petstore.yaml")
        session.filter_operations({"/pets": ["GET"]})
        view = session.filtered_spec()
    """

    def __init__(self, config: Optional[GlobalConfig] = None) -> None:
        self.config = config or GlobalConfig()
        self._spec: Optional[dict[str, Any]] = None
        self._metadata: Optional[SpecMetadata] = None
        self._source: Optional[Path] = None
        self._path_filter: Optional[PathFilter] = None
        self._operation_filter: Optional[OperationFilter] = None

    # ------------------------------------------------------------------ #
    # Loading
    # ------------------------------------------------------------------ #

    def load(self, source: str) -> SpecSession:
        """Load, resolve, validate and summarise the document at *source*.

        Replaces any previously loaded spec. On failure the session keeps
        its previous state and the error propagates unchanged.

        Raises:
            ParseError: The file is missing or malformed.
            NotFoundError: The file is not under any search root.
            ReferenceError_: A ``$ref`` does not resolve.
            ValidationError: The resolved spec is structurally unusable.
        """
        locator = FileLocator(
            self.config.search_paths, max_file_size=self.config.max_file_size
        )
        try:
            raw = load_spec(
                source,
                search_paths=self.config.search_paths,
                max_file_size=self.config.max_file_size,
            )
            base_path = self._base_path(source, locator)
            resolver = ReferenceResolver(locator, max_depth=self.config.max_ref_depth)
            spec = resolver.resolve(raw, base_path)
            validate_spec(spec)
            metadata = extract_metadata(spec)
        except OASSDKError as exc:
            logger.debug("Failed to load specification %s: %s", source, exc)
            raise

        self._spec = spec
        self._metadata = metadata
        self._source = base_path
        logger.info(
            "Loaded %s %s: %d paths, %d operations",
            metadata.title,
            metadata.version,
            metadata.endpoint_count,
            metadata.operation_count,
        )
        return self

    @staticmethod
    def _base_path(source: str, locator: FileLocator) -> Optional[Path]:
        if source == "-":
            return None
        direct = Path(source).expanduser()
        if direct.is_file():
            return direct.resolve()
        return locator.locate(source)

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #

    @property
    def is_loaded(self) -> bool:
        return self._spec is not None

    @property
    def source(self) -> Optional[Path]:
        """Absolute path of the loaded spec (``None`` for stdin)."""
        return self._source

    @property
    def spec(self) -> dict[str, Any]:
        """The resolved, unfiltered spec. Do not mutate it."""
        if self._spec is None:
            raise OASSDKError("No specification loaded. Call load() first.")
        return self._spec

    @property
    def metadata(self) -> SpecMetadata:
        if self._metadata is None:
            raise OASSDKError("No specification loaded. Call load() first.")
        return self._metadata

    def validate(self) -> bool:
        """Re-run validation on the loaded spec, returning ``False`` on failure."""
        return is_valid(self.spec)

    def merged_schema(self, name: str) -> MergedSchema:
        """Flattened fields of ``components.schemas.<name>``."""
        return merge_component(self.spec, name)

    # ------------------------------------------------------------------ #
    # Filters
    # ------------------------------------------------------------------ #

    def filter_paths(self, paths: Optional[Iterable[str]]) -> SpecSession:
        """Keep only *paths* in filtered views; ``None`` or empty clears it."""
        paths = list(paths or [])
        self._path_filter = PathFilter.of(paths) if paths else None
        return self

    def filter_operations(
        self, operations: Optional[Mapping[str, Iterable[str]]]
    ) -> SpecSession:
        """Restrict listed paths to the given methods; ``None`` or empty clears it."""
        self._operation_filter = OperationFilter.of(operations) if operations else None
        return self

    def clear_filters(self) -> SpecSession:
        self._path_filter = None
        self._operation_filter = None
        return self

    def filtered_spec(self) -> dict[str, Any]:
        """The document restricted by the active filters.

        Filters set on the session take precedence; otherwise the config's
        ``include_paths`` / ``include_operations`` apply. With no filter at
        all the resolved spec itself is returned.
        """
        path_filter = self._path_filter
        if path_filter is None and self.config.include_paths:
            path_filter = PathFilter.of(self.config.include_paths)

        operation_filter = self._operation_filter
        if operation_filter is None and self.config.include_operations:
            operation_filter = OperationFilter.of(self.config.include_operations)

        return filter_spec(self.spec, path_filter, operation_filter)
