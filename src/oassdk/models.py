"""Canonical Pydantic models shared across all oassdk modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig` and :class:`GlobalConfig`.

**Filter and composition models** -- built by callers before generation and
consumed by the core:
    :class:`HTTPMethod`, :class:`PathFilter`, :class:`OperationFilter`,
    and :class:`MergedSchema`.

**Metadata models** -- derived, read-only summaries of a resolved spec:
    :class:`OperationSummary`, :class:`EndpointSummary`,
    :class:`ModelSummary`, :class:`TagInfo`, :class:`ServerInfo`,
    :class:`SecuritySchemeInfo`, and :class:`SpecMetadata`.

The OpenAPI document itself is not a model: it is a plain tree of dicts and
lists (see :data:`SpecDocument`), and arbitrary extension keys survive
loading, resolution and filtering untouched.
"""

from __future__ import annotations

import enum
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

SpecDocument = dict[str, Any]
"""A parsed OpenAPI document: nested dicts/lists with JSON scalar leaves."""


# --- Config ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/oassdk/config.json``.

    Loaded and saved by :func:`~oassdk.config.load_global_config` and
    :func:`~oassdk.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~oassdk.config.resolve_config`
    for the full precedence chain.
    """

    search_paths: list[str] = Field(
        default_factory=list,
        description="Directories searched, in order, for specs and external $refs",
    )
    include_paths: Optional[list[str]] = Field(
        default=None, description="Default path filter applied to filtered views"
    )
    include_operations: Optional[dict[str, list[str]]] = Field(
        default=None,
        description="Default operation filter: path -> list of HTTP methods",
    )
    max_file_size: int = Field(
        default=100 * 1024 * 1024,
        description="Largest spec file (bytes) the loader will read",
    )
    max_ref_depth: int = Field(
        default=64, description="Maximum nesting of $ref expansions"
    )
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Filters ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by OpenAPI 3.x path-item objects.

    Values are the lower-case keys used inside a path item; filters use the
    upper-case token (``HTTPMethod.GET.token == "GET"``).
    """

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"

    @property
    def token(self) -> str:
        return self.value.upper()


class PathFilter(BaseModel):
    """The set of path templates to keep when filtering a spec.

    Paths that do not exist in the document are allowed; they simply match
    nothing.
    """

    model_config = ConfigDict(frozen=True)

    paths: frozenset[str] = Field(default_factory=frozenset)

    @classmethod
    def of(cls, paths: Iterable[str]) -> PathFilter:
        return cls(paths=frozenset(paths))

    def __contains__(self, path: object) -> bool:
        return path in self.paths


class OperationFilter(BaseModel):
    """Allowed HTTP methods per path template.

    Method tokens are normalised to upper case on construction, so
    ``{"/users": ["get"]}`` and ``{"/users": ["GET"]}`` are equivalent.
    """

    model_config = ConfigDict(frozen=True)

    operations: dict[str, frozenset[str]] = Field(default_factory=dict)

    @field_validator("operations", mode="before")
    @classmethod
    def _normalise_methods(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return {
                path: frozenset(
                    str(m).strip().upper()
                    for m in ([methods] if isinstance(methods, str) else methods)
                )
                for path, methods in value.items()
            }
        return value

    @classmethod
    def of(cls, operations: Mapping[str, Iterable[str]]) -> OperationFilter:
        return cls(operations=operations)

    def __contains__(self, path: object) -> bool:
        return path in self.operations

    def allowed(self, path: str) -> frozenset[str]:
        """Return the upper-case methods allowed for *path* (empty if unlisted)."""
        return self.operations.get(path, frozenset())


# --- Composition ---


class MergedSchema(BaseModel):
    """The flattened field set of a (possibly composed) schema.

    Produced by :func:`~oassdk.parser.composer.merge_schema`. ``properties``
    keeps the order in which fields were first contributed; ``required`` is
    an ordered, duplicate-free list.
    """

    properties: dict[str, Any] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)

    @property
    def field_names(self) -> list[str]:
        return list(self.properties)

    @property
    def optional_fields(self) -> list[str]:
        return [name for name in self.properties if name not in self.required]

    def is_required(self, name: str) -> bool:
        return name in self.required

    def is_empty(self) -> bool:
        return not self.properties and not self.required


# --- Metadata ---


class OperationSummary(BaseModel):
    """One HTTP operation under an :class:`EndpointSummary`."""

    method: str
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    parameter_count: int = 0
    response_codes: list[str] = Field(default_factory=list)
    deprecated: bool = False


class EndpointSummary(BaseModel):
    """A path template and the operations defined on it."""

    path: str
    operations: list[OperationSummary] = Field(default_factory=list)


class ModelSummary(BaseModel):
    """A ``components.schemas`` entry, summarised."""

    name: str
    type: Optional[str] = None
    description: Optional[str] = None
    properties: list[str] = Field(default_factory=list)
    required_fields: list[str] = Field(default_factory=list)

    @property
    def property_count(self) -> int:
        return len(self.properties)


class TagInfo(BaseModel):
    """A top-level tag declaration."""

    name: str
    description: Optional[str] = None
    external_docs: Optional[dict[str, Any]] = None


class ServerInfo(BaseModel):
    """A server entry from the document's ``servers`` array."""

    url: str
    description: Optional[str] = None


class SecuritySchemeInfo(BaseModel):
    """A ``components.securitySchemes`` entry, summarised."""

    name: str
    type: Optional[str] = None
    description: Optional[str] = None


class SpecMetadata(BaseModel):
    """Read-only summary of a resolved spec, used for reporting.

    Recomputed by :func:`~oassdk.parser.metadata.extract_metadata` whenever a
    new spec is loaded; has no lifecycle of its own.
    """

    title: str
    version: str
    description: Optional[str] = None
    openapi_version: Optional[str] = None
    terms_of_service: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_url: Optional[str] = None
    license_name: Optional[str] = None
    license_url: Optional[str] = None
    endpoint_count: int = 0
    operation_count: int = 0
    method_counts: dict[str, int] = Field(default_factory=dict)
    endpoints: list[EndpointSummary] = Field(default_factory=list)
    models: list[ModelSummary] = Field(default_factory=list)
    tags: list[TagInfo] = Field(default_factory=list)
    servers: list[ServerInfo] = Field(default_factory=list)
    security_schemes: list[SecuritySchemeInfo] = Field(default_factory=list)
    global_security: list[dict[str, Any]] = Field(default_factory=list)
    external_docs: Optional[dict[str, Any]] = None

    @property
    def tag_names(self) -> list[str]:
        return [tag.name for tag in self.tags]

    def lookup(self, key: str) -> Any:
        """Return the value at a dotted *key* (e.g. ``"method_counts.GET"``).

        List elements are addressed by index (``"endpoints.0.path"``).
        Returns ``None`` when any segment is missing.
        """
        current: Any = self.model_dump(mode="json")
        for segment in key.split("."):
            if isinstance(current, dict):
                current = current.get(segment)
            elif isinstance(current, list):
                try:
                    current = current[int(segment)]
                except (ValueError, IndexError):
                    return None
            else:
                return None
        return current
