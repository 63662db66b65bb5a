"""Resolve ``$ref`` JSON Reference pointers in OpenAPI specifications.

OpenAPI documents commonly use ``$ref`` pointers (e.g.,
``{"$ref": "#/components/schemas/Pet"}``) to avoid repetition, and larger
APIs split shared fragments into separate files
(``{"$ref": "common/pet.yaml#/Pet"}``).  This module rebuilds the document
bottom-up, replacing every ``$ref`` with the object it points to.

* **Internal** references (``#/...``) resolve against the root of the
  document that contains them -- for a fragment loaded from another file,
  that is the other file, not the top-level spec.
* **External** references (``file.yaml#/...`` or ``file.yaml``) are located
  with a :class:`~oassdk.parser.locator.FileLocator` (the referencing
  document's directory first, then the search roots) and loaded once per
  resolution run.

Circular references are detected with an in-progress set keyed by
``"<absolute file>#<pointer>"``.  At the cycle point the ``$ref`` node is
kept, marked with ``x-circular-ref: true``; marked nodes are never expanded
again, which makes resolution idempotent.  The placeholder's ``$ref`` is
rewritten to be valid in the top-level document:
``#<pointer>`` for the top-level document itself, otherwise the target file
relative to the top-level document's directory (absolute when it lies
elsewhere) followed by ``#<pointer>``.

Every expansion site receives its own freshly built containers, so mutating
one expansion never affects another, and the input document is never
modified.

The public entry points are :func:`resolve_refs` and :func:`resolve_pointer`.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Iterable, NamedTuple, Optional
from urllib.parse import unquote

from oassdk.exceptions import ParseError, ReferenceError_
from oassdk.parser.loader import load_file
from oassdk.parser.locator import FileLocator

logger = logging.getLogger(__name__)

CIRCULAR_MARKER = "x-circular-ref"
"""Extension key set on ``$ref`` nodes left unexpanded at a cycle point."""

DEFAULT_MAX_DEPTH = 64


def resolve_refs(
    spec: dict[str, Any],
    base_path: Optional[str | Path] = None,
    search_paths: Optional[Iterable[str]] = None,
    *,
    locator: Optional[FileLocator] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> dict[str, Any]:
    """Resolve all ``$ref`` pointers in *spec*.

    Args:
        spec: The raw OpenAPI spec dictionary, as returned by
            :func:`~oassdk.parser.loader.load_spec`.
        base_path: Path of the file *spec* was loaded from. Relative
            external references resolve against its directory. May be
            ``None`` for in-memory documents that only use internal
            references (or rely on *search_paths*).
        search_paths: Extra directories for external references. Ignored
            when *locator* is given.
        locator: A pre-configured :class:`FileLocator`.
        max_depth: Maximum number of nested ``$ref`` expansions.

    Returns:
        A **new** dictionary with every resolvable ``$ref`` replaced by its
        target. Only cycle placeholders (marked ``x-circular-ref``) remain.

    Raises:
        ReferenceError_: If a pointer does not exist in its target document,
            or expansion nests deeper than *max_depth*.
        ParseError: If an external file cannot be read or parsed.
        NotFoundError: If an external file is not found in any search root.

    Example::

        raw = load_spec("petstore.yaml")
        resolved = resolve_refs(raw, "petstore.yaml")
        # resolved["paths"]["/pets"]["get"]["responses"]["200"]["content"]
        # now contains the inlined schema instead of a $ref pointer.
    """
    resolver = ReferenceResolver(
        locator or FileLocator(search_paths), max_depth=max_depth
    )
    return resolver.resolve(spec, base_path)


class _Document(NamedTuple):
    root: Any
    path: Optional[Path]

    def describe(self) -> str:
        return str(self.path) if self.path is not None else "<root document>"


class ReferenceResolver:
    """Stateful resolver holding the per-run cache of external documents.

    Use :func:`resolve_refs` unless the same loaded external files should be
    shared across several :meth:`resolve` calls.
    """

    def __init__(
        self,
        locator: Optional[FileLocator] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.locator = locator or FileLocator()
        self.max_depth = max_depth
        self._documents: dict[Path, Any] = {}
        self._root_path: Optional[Path] = None

    def resolve(
        self, spec: dict[str, Any], base_path: Optional[str | Path] = None
    ) -> dict[str, Any]:
        path = Path(base_path).expanduser().resolve() if base_path is not None else None
        self._root_path = path
        if path is not None:
            self._documents[path] = spec
        return self._walk(spec, _Document(spec, path), frozenset(), 0)

    def _walk(
        self, obj: Any, doc: _Document, in_progress: frozenset[str], depth: int
    ) -> Any:
        if isinstance(obj, dict):
            ref = obj.get("$ref")
            if isinstance(ref, str):
                if obj.get(CIRCULAR_MARKER) is True:
                    return copy.deepcopy(obj)
                return self._expand(obj, ref, doc, in_progress, depth)
            return {
                key: self._walk(value, doc, in_progress, depth)
                for key, value in obj.items()
            }

        if isinstance(obj, list):
            return [self._walk(item, doc, in_progress, depth) for item in obj]

        return obj

    def _expand(
        self,
        node: dict[str, Any],
        ref: str,
        doc: _Document,
        in_progress: frozenset[str],
        depth: int,
    ) -> Any:
        target_doc, pointer = self._target(ref, doc)
        key = f"{target_doc.path or ''}#{pointer}"

        if key in in_progress:
            logger.debug("Circular $ref '%s' in %s left unexpanded", ref, doc.describe())
            placeholder = copy.deepcopy(node)
            placeholder["$ref"] = self._placeholder_ref(target_doc, pointer)
            placeholder[CIRCULAR_MARKER] = True
            return placeholder

        if depth >= self.max_depth:
            raise ReferenceError_(
                f"Cannot resolve $ref '{ref}' in {doc.describe()}: "
                f"maximum reference depth {self.max_depth} exceeded",
                ref=ref,
            )

        target = resolve_pointer(target_doc.root, pointer, ref=ref, source=target_doc.describe())
        resolved = self._walk(target, target_doc, in_progress | {key}, depth + 1)

        siblings = {k: v for k, v in node.items() if k != "$ref"}
        if siblings and isinstance(resolved, dict):
            resolved.update(self._walk(siblings, doc, in_progress, depth))
        return resolved

    def _placeholder_ref(self, target_doc: _Document, pointer: str) -> str:
        """Spell a reference to *pointer* in *target_doc* from the top-level document."""
        target = target_doc.path
        if target is None or target == self._root_path:
            return f"#{pointer}"
        if self._root_path is not None and self._root_path.parent in target.parents:
            return f"{target.relative_to(self._root_path.parent).as_posix()}#{pointer}"
        return f"{target.as_posix()}#{pointer}"

    def _target(self, ref: str, doc: _Document) -> tuple[_Document, str]:
        """Split *ref* into the document it points into and a JSON pointer."""
        if ref.startswith("#"):
            return doc, ref[1:]

        file_part, _, fragment = ref.partition("#")
        if file_part.startswith(("http://", "https://")):
            raise ReferenceError_(
                f"Remote $ref not supported: {ref}. "
                "Download the document and reference it by file path.",
                ref=ref,
            )

        base_dir = doc.path.parent if doc.path is not None else None
        try:
            path = self.locator.locate(unquote(file_part), base_dir)
            document = self._load(path)
        except ParseError as exc:
            raise type(exc)(
                f"{exc} (while resolving $ref '{ref}' in {doc.describe()})"
            ) from exc
        return _Document(document, path), fragment

    def _load(self, path: Path) -> Any:
        if path not in self._documents:
            logger.debug("Loading external document %s", path)
            self._documents[path] = load_file(path)
        return self._documents[path]


def resolve_pointer(
    document: Any,
    pointer: str,
    ref: Optional[str] = None,
    source: Optional[str] = None,
) -> Any:
    """Return the node at JSON Pointer *pointer* inside *document*.

    Handles RFC 6901 escaping (``~1`` for ``/``, ``~0`` for ``~``) and
    percent-encoded segments. A leading ``#`` is accepted, and the empty
    pointer addresses the whole document.

    Args:
        document: The root to navigate.
        pointer: e.g. ``"/components/schemas/Pet"`` or
            ``"#/components/schemas/Pet"``.
        ref: The original ``$ref`` string, used in error messages.
        source: A description of *document* (file path), for messages.

    Raises:
        ReferenceError_: If the pointer is malformed or any segment does
            not exist.
    """
    ref = ref if ref is not None else pointer
    where = f" in {source}" if source else ""
    if pointer.startswith("#"):
        pointer = pointer[1:]
    if pointer == "":
        return document
    if not pointer.startswith("/"):
        raise ReferenceError_(
            f"Cannot resolve $ref '{ref}'{where}: "
            f"'{pointer}' is not a JSON pointer",
            ref=ref,
        )

    current: Any = document
    for raw_segment in pointer[1:].split("/"):
        segment = unquote(raw_segment).replace("~1", "/").replace("~0", "~")

        if isinstance(current, dict):
            if segment in current:
                current = current[segment]
            elif segment.isdigit() and int(segment) in current:
                # YAML loads unquoted keys such as response codes as ints
                current = current[int(segment)]
            else:
                raise ReferenceError_(
                    f"Cannot resolve $ref '{ref}'{where}: "
                    f"key '{segment}' not found",
                    ref=ref,
                )
        elif isinstance(current, list):
            try:
                if not segment.isdigit():
                    raise ValueError(segment)
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise ReferenceError_(
                    f"Cannot resolve $ref '{ref}'{where}: "
                    f"invalid array index '{segment}'",
                    ref=ref,
                ) from exc
        else:
            raise ReferenceError_(
                f"Cannot resolve $ref '{ref}'{where}: "
                f"cannot navigate into {type(current).__name__}",
                ref=ref,
            )

    return current
