"""Produce reduced views of a spec containing only selected paths/operations.

Generators are often asked to emit code for part of an API only.  The
selection is expressed as two optional filters:

* a :class:`~oassdk.models.PathFilter` -- the path templates to keep;
* an :class:`~oassdk.models.OperationFilter` -- for some paths, the HTTP
  methods to keep.

Path-level shared fields (``parameters``, ``summary``, ``description``) are
always carried over when a path item is reduced to some of its methods, and
a path item left with no operations is dropped.  Filters naming paths or
methods the document does not define simply match nothing.
"""

from __future__ import annotations

import copy
from typing import Any, Iterable, Mapping, Optional, Union

from oassdk.models import HTTPMethod, OperationFilter, PathFilter

_HTTP_METHODS = tuple(m.value for m in HTTPMethod)
_SHARED_FIELDS = ("parameters", "summary", "description")

PathFilterLike = Union[PathFilter, Iterable[str]]
OperationFilterLike = Union[OperationFilter, Mapping[str, Iterable[str]]]


def filter_spec(
    spec: dict[str, Any],
    path_filter: Optional[PathFilterLike] = None,
    operation_filter: Optional[OperationFilterLike] = None,
) -> dict[str, Any]:
    """Return a view of *spec* restricted to the selected paths/operations.

    Args:
        spec: A (normally resolved) spec document. Never modified.
        path_filter: Paths to keep; ``None`` keeps every path.
        operation_filter: Per-path allowed methods (case-insensitive);
            paths it does not mention keep all their operations.

    Returns:
        *spec* itself when both filters are ``None`` (callers must not
        mutate it); otherwise an independent deep copy whose ``paths``
        contains only the selected entries, in the original order.

    Example::

        view = filter_spec(
            resolved,
            path_filter={"/users", "/orders"},
            operation_filter={"/users": ["GET"]},
        )
    """
    if path_filter is None and operation_filter is None:
        return spec

    paths_to_keep = _as_path_filter(path_filter)
    operations = _as_operation_filter(operation_filter)

    filtered = {
        key: copy.deepcopy(value) for key, value in spec.items() if key != "paths"
    }
    paths = spec.get("paths")
    if not isinstance(paths, dict):
        if "paths" in spec:
            filtered["paths"] = copy.deepcopy(paths)
        return filtered

    filtered_paths: dict[str, Any] = {}
    for path, path_item in paths.items():
        if paths_to_keep is not None and path not in paths_to_keep:
            continue

        if operations is not None and path in operations and isinstance(path_item, dict):
            reduced = _reduce_path_item(path_item, operations.allowed(path))
            if reduced is not None:
                filtered_paths[path] = reduced
        else:
            filtered_paths[path] = copy.deepcopy(path_item)

    filtered["paths"] = filtered_paths
    return filtered


def _reduce_path_item(
    path_item: dict[str, Any], allowed: frozenset[str]
) -> Optional[dict[str, Any]]:
    """Keep *allowed* methods plus shared fields; ``None`` if no operation survives."""
    reduced: dict[str, Any] = {}
    for key, value in path_item.items():
        if key in _HTTP_METHODS:
            if key.upper() in allowed:
                reduced[key] = copy.deepcopy(value)
        elif key in _SHARED_FIELDS:
            reduced[key] = copy.deepcopy(value)

    if not any(key in _HTTP_METHODS for key in reduced):
        return None
    return reduced


def _as_path_filter(value: Optional[PathFilterLike]) -> Optional[PathFilter]:
    if value is None or isinstance(value, PathFilter):
        return value
    if isinstance(value, str):
        return PathFilter.of([value])
    return PathFilter.of(value)


def _as_operation_filter(
    value: Optional[OperationFilterLike],
) -> Optional[OperationFilter]:
    if value is None or isinstance(value, OperationFilter):
        return value
    return OperationFilter.of(value)
