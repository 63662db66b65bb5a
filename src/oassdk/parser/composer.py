"""Flatten composed schemas into a single field set.

Model and documentation generators need one flat list of fields per schema,
even when the schema is assembled from ``allOf`` fragments or offers
alternatives through ``oneOf``/``anyOf``.  :func:`merge_schema` walks a
schema and produces a :class:`~oassdk.models.MergedSchema`:

* **Direct** ``properties``/``required`` are copied as-is.
* **``$ref``** nodes still present (cycle placeholders, or a document that
  was never resolved) are looked up in *spec* and merged recursively when
  they are internal (``#/...``).  Placeholders naming another file only
  occur inside an expansion of their own target and contribute nothing.
* **``allOf``** members are merged in array order.  The first occurrence of
  a field name wins; ``required`` is the union of all members.
* **``oneOf``/``anyOf``** branches are *all* merged into the same field set
  rather than modelled as a tagged union.  A field is required only when
  every branch of the group requires it, so generated models expose the
  superset of fields with the rest optional.

Contributions are applied in the order: own ``properties``, ``allOf``,
``oneOf``, ``anyOf``.  A schema with none of these shapes yields an empty
result.
"""

from __future__ import annotations

import copy
from typing import Any, Optional

from oassdk.exceptions import ReferenceError_
from oassdk.models import MergedSchema
from oassdk.parser.resolver import resolve_pointer

_UNION_KEYWORDS = ("oneOf", "anyOf")


def merge_schema(
    schema: Any, spec: Optional[dict[str, Any]] = None
) -> MergedSchema:
    """Merge *schema* and everything it is composed of into one field set.

    Args:
        schema: A schema node, normally taken from a resolved spec.
        spec: The document used to look up any remaining internal
            ``$ref`` nodes. When ``None``, such nodes contribute nothing.

    Returns:
        The merged field set; empty when *schema* has no recognised shape.
        Property schemas are copies; editing them leaves *schema* intact.

    Raises:
        ReferenceError_: If a remaining ``$ref`` points at a missing node.

    Example::

        merged = merge_schema(resolved["components"]["schemas"]["Owner"])
        merged.field_names   # ['id', 'name']
        merged.required      # ['name']
    """
    merged = MergedSchema()
    _merge_into(merged, schema, spec, frozenset())
    return merged


def merge_component(spec: dict[str, Any], name: str) -> MergedSchema:
    """Merge the schema registered as ``components.schemas.<name>``.

    Raises:
        ReferenceError_: If no such schema exists.
    """
    schemas = (spec.get("components") or {}).get("schemas") or {}
    if name not in schemas:
        raise ReferenceError_(
            f"Schema '{name}' not found in components.schemas",
            ref=f"#/components/schemas/{name}",
        )
    return merge_schema(schemas[name], spec)


def _merge_into(
    merged: MergedSchema,
    schema: Any,
    spec: Optional[dict[str, Any]],
    seen: frozenset[str],
) -> None:
    if not isinstance(schema, dict):
        return

    ref = schema.get("$ref")
    if isinstance(ref, str):
        if ref in seen or spec is None or not ref.startswith("#"):
            return
        target = resolve_pointer(spec, ref, ref=ref)
        _merge_into(merged, target, spec, seen | {ref})
        return

    properties = schema.get("properties")
    if isinstance(properties, dict):
        for name, prop in properties.items():
            if name not in merged.properties:
                merged.properties[name] = copy.deepcopy(prop)

    required = schema.get("required")
    if isinstance(required, list):
        _add_required(merged, required)

    for member in _members(schema, "allOf"):
        _merge_into(merged, member, spec, seen)

    for keyword in _UNION_KEYWORDS:
        branches = _members(schema, keyword)
        if not branches:
            continue
        branch_results = []
        for branch in branches:
            result = MergedSchema()
            _merge_into(result, branch, spec, seen)
            branch_results.append(result)
            for name, prop in result.properties.items():
                merged.properties.setdefault(name, prop)

        common = [
            name
            for name in branch_results[0].required
            if all(name in other.required for other in branch_results[1:])
        ]
        _add_required(merged, common)


def _members(schema: dict[str, Any], keyword: str) -> list[Any]:
    value = schema.get(keyword)
    return value if isinstance(value, list) else []


def _add_required(merged: MergedSchema, names: list[Any]) -> None:
    for name in names:
        if isinstance(name, str) and name not in merged.required:
            merged.required.append(name)
