"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~oassdk.exceptions.OASSDKError` subclass.
External tooling (CI scripts, generator pipelines) can inspect the exit code
to determine the failure class without parsing stderr.

Example::

    $ oassdk validate openapi.yaml
    $ echo $?
    9   # EXIT_VALIDATION_ERROR -- the document has no usable paths
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_NOT_FOUND = 4
"""A spec file or external reference could not be found under any search root."""

EXIT_SPEC_PARSE_ERROR = 7
"""The OpenAPI document could not be read or parsed as JSON/YAML."""

EXIT_REFERENCE_ERROR = 8
"""A ``$ref`` pointer did not resolve to any node in its target document."""

EXIT_VALIDATION_ERROR = 9
"""The resolved document lacks the structure required for generation."""
