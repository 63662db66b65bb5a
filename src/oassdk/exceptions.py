"""Exception hierarchy for oassdk.

All exceptions inherit from :class:`OASSDKError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`oassdk.exit_codes`.
The top-level error handler in :func:`oassdk.app.main` catches
``OASSDKError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    OASSDKError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- ParseError          (exit 7)
    |   +-- NotFoundError   (exit 4)
    +-- ReferenceError_     (exit 8)
    +-- ValidationError     (exit 9)
    +-- ConfigError         (exit 1)
"""

from __future__ import annotations

from typing import Optional

from oassdk.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_REFERENCE_ERROR,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_VALIDATION_ERROR,
)


class OASSDKError(Exception):
    """Base exception for all oassdk errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`oassdk.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(OASSDKError):
    """Raised for invalid CLI arguments or malformed filter expressions."""

    exit_code = EXIT_INVALID_USAGE


class ParseError(OASSDKError):
    """Raised when a spec file is missing, unreadable, or not valid JSON/YAML."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class NotFoundError(ParseError):
    """Raised when no configured search root yields the requested file.

    A subclass of :class:`ParseError`; callers handling "the document
    could not be loaded" need no second ``except`` clause.
    """

    exit_code = EXIT_NOT_FOUND


class ReferenceError_(OASSDKError):
    """Raised when a ``$ref`` pointer does not resolve to a node.

    Named with a trailing underscore to avoid shadowing the built-in
    ``ReferenceError``.

    Args:
        message: Human-readable error description.
        ref: The unresolved ``$ref`` string, when known.
    """

    exit_code = EXIT_REFERENCE_ERROR

    def __init__(self, message: str, ref: Optional[str] = None):
        super().__init__(message)
        self.ref = ref


class ValidationError(OASSDKError):
    """Raised when a resolved spec lacks the structure generators rely on.

    Args:
        message: Summary line.
        errors: Every individual problem found, in document order.
    """

    exit_code = EXIT_VALIDATION_ERROR

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(message)
        self.errors = list(errors or [])


class ConfigError(OASSDKError):
    """Raised for configuration problems (invalid JSON, unknown keys, bad search paths)."""

    exit_code = EXIT_GENERIC_FAILURE
