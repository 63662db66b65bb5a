"""Derive a reporting summary from a resolved OpenAPI spec.

This module walks a ``$ref``-resolved spec dictionary and builds a
:class:`~oassdk.models.SpecMetadata` describing it: API info, endpoint and
operation counts, per-method counts, tags, servers, models and security
schemes.

The single public entry point is :func:`extract_metadata`.  Internally it
delegates to private helpers that each handle one section of the document:

* ``_info_fields`` -- the ``info`` object (title, version, contact, license).
* ``_endpoints`` -- the ``paths`` object, one summary per path template.
* ``_models`` -- the ``components/schemas`` map.
* ``_tags``, ``_servers``, ``_security_schemes`` -- the remaining top-level
  collections.
"""

from __future__ import annotations

from typing import Any

from oassdk.models import (
    EndpointSummary,
    HTTPMethod,
    ModelSummary,
    OperationSummary,
    SecuritySchemeInfo,
    ServerInfo,
    SpecMetadata,
    TagInfo,
)

_HTTP_METHODS = tuple(m.value for m in HTTPMethod)


def extract_metadata(spec: dict[str, Any]) -> SpecMetadata:
    """Build a :class:`~oassdk.models.SpecMetadata` from a resolved spec.

    Sections that are missing or malformed are skipped rather than
    reported; run :func:`~oassdk.parser.validator.validate_spec` first when
    structural guarantees matter.

    Args:
        spec: The resolved spec dictionary.

    Returns:
        A fully populated metadata instance.

    Example::

        meta = extract_metadata(resolve_refs(load_spec("petstore.yaml")))
        print(f"{meta.title} {meta.version}: {meta.operation_count} operations")
    """
    endpoints = _endpoints(spec)
    method_counts: dict[str, int] = {}
    for endpoint in endpoints:
        for op in endpoint.operations:
            method_counts[op.method] = method_counts.get(op.method, 0) + 1

    openapi_version = spec.get("openapi", spec.get("swagger"))
    return SpecMetadata(
        **_info_fields(spec),
        openapi_version=str(openapi_version) if openapi_version is not None else None,
        endpoint_count=len(endpoints),
        operation_count=sum(method_counts.values()),
        method_counts=method_counts,
        endpoints=endpoints,
        models=_models(spec),
        tags=_tags(spec),
        servers=_servers(spec),
        security_schemes=_security_schemes(spec),
        global_security=[s for s in _as_list(spec.get("security")) if isinstance(s, dict)],
        external_docs=spec.get("externalDocs") if isinstance(spec.get("externalDocs"), dict) else None,
    )


def _info_fields(spec: dict[str, Any]) -> dict[str, Any]:
    """Read the Info Object, defaulting title and version when absent."""
    info = _as_dict(spec.get("info"))
    contact = _as_dict(info.get("contact"))
    license_info = _as_dict(info.get("license"))

    return {
        "title": str(info.get("title") or "Untitled API"),
        "version": str(info.get("version") or "0.0.0"),
        "description": info.get("description"),
        "terms_of_service": info.get("termsOfService"),
        "contact_name": contact.get("name"),
        "contact_email": contact.get("email"),
        "contact_url": contact.get("url"),
        "license_name": license_info.get("name"),
        "license_url": license_info.get("url"),
    }


def _endpoints(spec: dict[str, Any]) -> list[EndpointSummary]:
    """Summarise every path item, in document order."""
    endpoints: list[EndpointSummary] = []

    for path, path_item in _as_dict(spec.get("paths")).items():
        if not isinstance(path_item, dict):
            continue

        operations: list[OperationSummary] = []
        for method in _HTTP_METHODS:
            operation = path_item.get(method)
            if not isinstance(operation, dict):
                continue
            operations.append(
                OperationSummary(
                    method=method.upper(),
                    operation_id=operation.get("operationId"),
                    summary=operation.get("summary"),
                    description=operation.get("description"),
                    tags=[str(t) for t in _as_list(operation.get("tags"))],
                    parameter_count=len(_as_list(operation.get("parameters"))),
                    response_codes=[str(code) for code in _as_dict(operation.get("responses"))],
                    deprecated=bool(operation.get("deprecated", False)),
                )
            )

        endpoints.append(EndpointSummary(path=str(path), operations=operations))

    return endpoints


def _models(spec: dict[str, Any]) -> list[ModelSummary]:
    schemas = _as_dict(_as_dict(spec.get("components")).get("schemas"))
    models: list[ModelSummary] = []
    for name, schema in schemas.items():
        if not isinstance(schema, dict):
            continue
        schema_type = schema.get("type")
        models.append(
            ModelSummary(
                name=str(name),
                type=str(schema_type) if isinstance(schema_type, str) else None,
                description=schema.get("description"),
                properties=[str(p) for p in _as_dict(schema.get("properties"))],
                required_fields=[str(r) for r in _as_list(schema.get("required"))],
            )
        )
    return models


def _tags(spec: dict[str, Any]) -> list[TagInfo]:
    """Declared tags first, then tags only used on operations."""
    tags: list[TagInfo] = []
    seen: set[str] = set()
    for tag in _as_list(spec.get("tags")):
        if isinstance(tag, dict) and tag.get("name"):
            name = str(tag["name"])
            if name in seen:
                continue
            seen.add(name)
            tags.append(
                TagInfo(
                    name=name,
                    description=tag.get("description"),
                    external_docs=_as_dict(tag.get("externalDocs")) or None,
                )
            )

    for path_item in _as_dict(spec.get("paths")).values():
        if not isinstance(path_item, dict):
            continue
        for method in _HTTP_METHODS:
            operation = path_item.get(method)
            if not isinstance(operation, dict):
                continue
            for name in _as_list(operation.get("tags")):
                if str(name) not in seen:
                    seen.add(str(name))
                    tags.append(TagInfo(name=str(name)))
    return tags


def _servers(spec: dict[str, Any]) -> list[ServerInfo]:
    return [
        ServerInfo(url=str(server.get("url", "/")), description=server.get("description"))
        for server in _as_list(spec.get("servers"))
        if isinstance(server, dict)
    ]


def _security_schemes(spec: dict[str, Any]) -> list[SecuritySchemeInfo]:
    schemes = _as_dict(_as_dict(spec.get("components")).get("securitySchemes"))
    return [
        SecuritySchemeInfo(
            name=str(name),
            type=scheme.get("type"),
            description=scheme.get("description"),
        )
        for name, scheme in schemes.items()
        if isinstance(scheme, dict)
    ]


def _as_dict(value: Any) -> dict[Any, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []
