"""Locate spec files and external ``$ref`` targets on the local filesystem.

External references such as ``common/schemas.yaml#/Pet`` name a file
*relative* to the document that contains them.  Real-world API repositories
often split shared fragments into separate directories, so a reference that
cannot be found next to the referencing document is also looked up under a
configurable list of search roots, tried in order.

Lookup order for a relative reference:

1. ``base_dir / reference`` -- the directory of the referencing document.
2. ``root / reference`` for each search root.
3. A recursive search of each search root for a file with the same name.

Every candidate must stay inside the directory it was resolved against, so
``../../etc/passwd`` style references are rejected rather than followed.
Only ``.yaml``, ``.yml`` and ``.json`` files are ever returned.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Optional

from oassdk.exceptions import NotFoundError, ParseError

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 100 * 1024 * 1024
"""Default upper bound (bytes) on the size of a spec file."""

ALLOWED_EXTENSIONS = frozenset({".yaml", ".yml", ".json"})


class FileLocator:
    """Resolve file references against a base directory and search roots.

    Args:
        search_paths: Directories tried, in order, after the referencing
            document's own directory. Non-existent entries are skipped.
        max_file_size: Files larger than this many bytes are rejected.

    Example::

        locator = FileLocator(["./shared", "/opt/api-fragments"])
        path = locator.locate("pet.yaml", base_dir=Path("specs"))
    """

    def __init__(
        self,
        search_paths: Optional[Iterable[str | os.PathLike[str]]] = None,
        max_file_size: int = MAX_FILE_SIZE,
    ) -> None:
        self.search_paths: list[Path] = [
            Path(p).expanduser() for p in (search_paths or []) if str(p).strip()
        ]
        self.max_file_size = max_file_size

    def locate(self, reference: str, base_dir: Optional[Path] = None) -> Path:
        """Return the absolute path of the file named by *reference*.

        Args:
            reference: A file path as written in a ``$ref`` or on the command
                line (absolute or relative).
            base_dir: Directory of the referencing document, or ``None`` for
                a top-level spec.

        Returns:
            The resolved, absolute :class:`~pathlib.Path`.

        Raises:
            ParseError: If the reference is empty, has an unsupported
                extension, escapes its base directory, is relative with no
                directory to resolve against, or names an oversized file.
            NotFoundError: If no candidate location contains the file.
        """
        cleaned = _sanitise(reference)
        candidate = Path(cleaned)

        if candidate.suffix.lower() not in ALLOWED_EXTENSIONS:
            raise ParseError(
                f"Unsupported spec file extension for '{cleaned}' "
                f"(expected one of: {', '.join(sorted(ALLOWED_EXTENSIONS))})"
            )

        if candidate.is_absolute():
            if not candidate.is_file():
                raise NotFoundError(f"Spec file not found: {cleaned}")
            return self._checked(candidate.resolve())

        if base_dir is None and not self.search_paths:
            raise ParseError(
                f"Cannot resolve relative reference '{cleaned}': "
                "no base directory or search paths configured"
            )

        tried: list[str] = []
        if base_dir is not None:
            found = _join_confined(base_dir, cleaned)
            tried.append(str(base_dir))
            if found.is_file():
                return self._checked(found)

        for root in self.search_paths:
            if not root.is_dir():
                logger.debug("Skipping missing search path %s", root)
                continue
            tried.append(str(root))
            found = _join_confined(root, cleaned)
            if found.is_file():
                logger.debug("Found '%s' under search path %s", cleaned, root)
                return self._checked(found)

        for root in self.search_paths:
            if not root.is_dir():
                continue
            match = _search_recursive(root, candidate.name)
            if match is not None:
                logger.debug("Found '%s' by recursive search at %s", cleaned, match)
                return self._checked(match)

        raise NotFoundError(
            f"File '{cleaned}' not found in: {', '.join(tried) or '(no directories)'}"
        )

    def _checked(self, path: Path) -> Path:
        size = path.stat().st_size
        if size > self.max_file_size:
            raise ParseError(
                f"Spec file {path} is {size} bytes, "
                f"exceeding the {self.max_file_size} byte limit"
            )
        return path


def _sanitise(reference: Optional[str]) -> str:
    """Strip NUL bytes and normalise Windows separators."""
    if reference is None:
        raise ParseError("File reference must not be empty")
    cleaned = reference.replace("\0", "").replace("\\", "/").strip()
    if not cleaned:
        raise ParseError("File reference must not be empty")
    return cleaned


def _join_confined(base: Path, reference: str) -> Path:
    """Join *reference* onto *base*, refusing results outside *base*."""
    base_resolved = base.resolve()
    joined = (base_resolved / reference).resolve()
    if joined != base_resolved and base_resolved not in joined.parents:
        raise ParseError(
            f"Reference '{reference}' escapes its base directory {base_resolved}"
        )
    return joined


def _search_recursive(root: Path, name: str) -> Optional[Path]:
    """Return the first file called *name* below *root*, in sorted walk order."""
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        if name in filenames:
            return (Path(dirpath) / name).resolve()
    return None
