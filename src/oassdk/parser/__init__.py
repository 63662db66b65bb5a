"""OpenAPI spec core -- load, resolve ``$ref`` pointers, validate, summarise and filter.

This sub-package turns a raw OpenAPI 3.x document (JSON or YAML, local file
or stdin) into a fully resolved document that external generators can
consume, plus the derived views they need.

Typical usage::

    from oassdk.parser import extract_metadata, load_spec, resolve_refs, validate_spec

    raw = load_spec("specs/petstore.yaml", search_paths=["specs/shared"])
    spec = resolve_refs(raw, "specs/petstore.yaml", search_paths=["specs/shared"])
    validate_spec(spec)
    meta = extract_metadata(spec)

Sub-modules:

* :mod:`~oassdk.parser.locator` -- find files under a base directory and a
  list of search roots.
* :mod:`~oassdk.parser.loader` -- I/O layer (file, stdin) plus format
  detection.
* :mod:`~oassdk.parser.resolver` -- Recursive internal/external ``$ref``
  resolution with circular-reference detection.
* :mod:`~oassdk.parser.composer` -- Flatten ``allOf``/``oneOf``/``anyOf``
  into a :class:`~oassdk.models.MergedSchema`.
* :mod:`~oassdk.parser.validator` -- Structural gate before generation.
* :mod:`~oassdk.parser.metadata` -- :class:`~oassdk.models.SpecMetadata`
  extraction.
* :mod:`~oassdk.parser.filter` -- Path/operation filtered views.
"""

from oassdk.parser.composer import merge_component, merge_schema
from oassdk.parser.filter import filter_spec
from oassdk.parser.loader import load_spec
from oassdk.parser.metadata import extract_metadata
from oassdk.parser.resolver import resolve_pointer, resolve_refs
from oassdk.parser.validator import detect_openapi_version, is_valid, validate_spec

__all__ = [
    "load_spec",
    "resolve_refs",
    "resolve_pointer",
    "merge_schema",
    "merge_component",
    "validate_spec",
    "detect_openapi_version",
    "is_valid",
    "extract_metadata",
    "filter_spec",
]
