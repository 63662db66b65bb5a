"""Load OpenAPI documents from a local file or stdin.

This module handles all I/O for reading raw OpenAPI documents and converting
them into Python dictionaries.  It supports both JSON and YAML formats with
automatic format detection.

The public functions are:

* :func:`load_spec` -- Load and parse a spec from a path (optionally looked up
  under a list of search roots) or stdin.
* :func:`load_file` -- Load an already-located file; used by the resolver
  for external ``$ref`` targets.

After loading, the raw dict should be passed to
:func:`~oassdk.parser.resolver.resolve_refs` which inlines ``$ref`` pointers.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Iterable, Optional

import yaml

from oassdk.exceptions import ParseError
from oassdk.parser.locator import MAX_FILE_SIZE, FileLocator

logger = logging.getLogger(__name__)


def load_spec(
    source: str,
    search_paths: Optional[Iterable[str]] = None,
    max_file_size: int = MAX_FILE_SIZE,
) -> dict[str, Any]:
    """Load an OpenAPI spec from a file path or stdin ('-').

    Supports JSON and YAML formats.
    Auto-detects format from content/extension.

    Args:
        source: A file path, or '-' for stdin. Paths that exist as given
            (absolute or relative to the working directory) are read
            directly; otherwise each search root is tried in order. Either
            way the extension and size limits of :class:`FileLocator` apply.
        search_paths: Optional search roots for *source*.
        max_file_size: Size limit passed to the :class:`FileLocator`.

    Returns:
        The parsed spec as a dictionary.

    Raises:
        ParseError: If the source cannot be found, read or parsed.
        NotFoundError: If search paths were given and none contains the file.
    """
    if source == "-":
        return _load_from_stdin()

    roots = list(search_paths or [])
    locator = FileLocator(roots, max_file_size=max_file_size)

    direct = Path(source).expanduser()
    if direct.is_file():
        return load_file(locator.locate(str(direct.resolve())))

    if not roots:
        raise ParseError(f"Spec file not found: {source}")
    return load_file(locator.locate(source))


def _load_from_stdin() -> dict[str, Any]:
    """Read spec from stdin.

    Reads all available input and attempts to parse as JSON, then YAML.

    Raises:
        ParseError: If stdin is empty or content cannot be parsed.
    """
    try:
        content = sys.stdin.read()
    except (OSError, ValueError) as exc:
        raise ParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise ParseError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def load_file(path: Path) -> dict[str, Any]:
    """Load spec from a local file.

    Supports .json, .yaml, and .yml extensions. Falls back to content-based
    detection if the extension is not recognized.

    Args:
        path: Path to the local file.

    Returns:
        The parsed spec dictionary.

    Raises:
        ParseError: If the file cannot be read or content cannot be parsed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise ParseError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ParseError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise ParseError(f"Spec file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    logger.debug("Loaded %s (%d bytes, format hint %r)", file_path, len(content), hint)
    try:
        return _parse_content(content, hint=hint)
    except ParseError as exc:
        raise ParseError(f"{file_path}: {exc}") from exc


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.
    Valid JSON is also valid YAML, but JSON parsing is stricter and faster.

    Args:
        content: The raw string content.
        hint: Optional format hint ('json' or 'yaml').

    Returns:
        The parsed dictionary.

    Raises:
        ParseError: If the content cannot be parsed as either format.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise ParseError(f"Invalid JSON: {exc}") from exc
        else:
            if not isinstance(result, dict):
                raise ParseError(
                    "Spec must be a JSON/YAML object (got "
                    f"{type(result).__name__})"
                )
            return result

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        yaml_error = exc
    else:
        if not isinstance(result, dict):
            raise ParseError(
                "Spec must be a JSON/YAML object (got "
                f"{type(result).__name__ if result is not None else 'empty document'})"
            )
        return result

    msg = "Failed to parse spec as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise ParseError(msg)
