"""Structural validation of a resolved OpenAPI document.

:func:`validate_spec` is a gate, not a compliance checker: it catches input
that downstream generators cannot use (no ``paths``, operations that are not
objects, parameters without a name) and reports every such problem at once.
It does not validate schemas against the OpenAPI meta-schema.
"""

from __future__ import annotations

import logging
from typing import Any

from oassdk.exceptions import ValidationError
from oassdk.models import HTTPMethod

logger = logging.getLogger(__name__)

_HTTP_METHODS = tuple(m.value for m in HTTPMethod)
_PARAMETER_LOCATIONS = frozenset({"query", "header", "path", "cookie"})


def detect_openapi_version(spec: dict[str, Any]) -> str:
    """Validate and return the OpenAPI version string.

    Supports OpenAPI 3.x. Raises for Swagger 2.x, a missing version field,
    or any other major version.

    Args:
        spec: The parsed spec dictionary.

    Returns:
        The OpenAPI version string (e.g., '3.0.3', '3.1.0').

    Raises:
        ValidationError: If the version is missing, unsupported, or
            indicates Swagger 2.x.
    """
    if "swagger" in spec:
        swagger_ver = str(spec["swagger"])
        msg = (
            f"Swagger {swagger_ver} is not supported. "
            "Only OpenAPI 3.x documents are supported."
        )
        raise ValidationError(msg, [msg])

    openapi_version = spec.get("openapi")
    if openapi_version is None:
        msg = "Missing 'openapi' field. Is this an OpenAPI 3.x document?"
        raise ValidationError(msg, [msg])

    version_str = str(openapi_version)
    if not version_str.startswith("3."):
        msg = f"Unsupported OpenAPI version: {version_str}. Only 3.x is supported."
        raise ValidationError(msg, [msg])

    return version_str


def validate_spec(spec: Any) -> None:
    """Check that *spec* has the structure generators rely on.

    Args:
        spec: A (normally resolved) spec document.

    Raises:
        ValidationError: Listing every problem found in ``errors``.
    """
    if not isinstance(spec, dict):
        msg = f"Spec must be a mapping (got {type(spec).__name__})"
        raise ValidationError(msg, [msg])

    errors: list[str] = []

    try:
        detect_openapi_version(spec)
    except ValidationError as exc:
        errors.extend(exc.errors)

    info = spec.get("info")
    if not isinstance(info, dict):
        errors.append("Missing or invalid 'info' object")
    else:
        for key in ("title", "version"):
            if info.get(key) in (None, ""):
                errors.append(f"'info.{key}' is required")

    if "paths" not in spec:
        errors.append("Missing required top-level key 'paths'")
    elif not isinstance(spec["paths"], dict):
        errors.append("'paths' must be a mapping of path templates to path items")
    elif not spec["paths"]:
        errors.append("'paths' must define at least one path")
    else:
        errors.extend(_check_paths(spec["paths"]))

    if errors:
        logger.debug("Spec failed validation with %d error(s)", len(errors))
        summary = errors[0] if len(errors) == 1 else f"{len(errors)} validation errors"
        raise ValidationError(f"Invalid OpenAPI document: {summary}", errors)


def is_valid(spec: Any) -> bool:
    """Return ``True`` when :func:`validate_spec` accepts *spec*."""
    try:
        validate_spec(spec)
    except ValidationError:
        return False
    return True


def _check_paths(paths: dict[Any, Any]) -> list[str]:
    errors: list[str] = []
    operation_ids: dict[str, str] = {}

    for path, path_item in paths.items():
        if not isinstance(path, str) or not path.startswith("/"):
            errors.append(f"Path '{path}' must start with '/'")
        if not isinstance(path_item, dict):
            errors.append(f"Path item '{path}' must be a mapping")
            continue

        errors.extend(_check_parameters(path_item.get("parameters"), f"paths.{path}"))

        for method in _HTTP_METHODS:
            if method not in path_item:
                continue
            where = f"{method.upper()} {path}"
            operation = path_item[method]
            if not isinstance(operation, dict):
                errors.append(f"Operation {where} must be a mapping")
                continue

            if "responses" in operation and not isinstance(operation["responses"], dict):
                errors.append(f"Operation {where}: 'responses' must be a mapping")
            if "tags" in operation and not isinstance(operation["tags"], list):
                errors.append(f"Operation {where}: 'tags' must be a list")
            errors.extend(_check_parameters(operation.get("parameters"), f"Operation {where}"))

            op_id = operation.get("operationId")
            if op_id is not None:
                if op_id in operation_ids:
                    errors.append(
                        f"Duplicate operationId '{op_id}' "
                        f"({operation_ids[op_id]} and {where})"
                    )
                else:
                    operation_ids[op_id] = where

    return errors


def _check_parameters(parameters: Any, where: str) -> list[str]:
    if parameters is None:
        return []
    if not isinstance(parameters, list):
        return [f"{where}: 'parameters' must be a list"]

    errors: list[str] = []
    for index, param in enumerate(parameters):
        if not isinstance(param, dict):
            errors.append(f"{where}: parameter #{index} must be a mapping")
            continue
        if "$ref" in param:
            continue
        if not param.get("name"):
            errors.append(f"{where}: parameter #{index} has no 'name'")
        if param.get("in") not in _PARAMETER_LOCATIONS:
            errors.append(
                f"{where}: parameter '{param.get('name', index)}' has invalid "
                f"location {param.get('in')!r}"
            )
    return errors
