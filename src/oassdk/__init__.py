"""oassdk -- OpenAPI 3.x spec core for SDK, model and documentation generators.

This package turns an OpenAPI document, possibly split across several files,
into one fully resolved document that code generators can consume. It loads
JSON or YAML, resolves every internal and external ``$ref`` (cycles are cut
with marked placeholders), validates the structure, summarises the document and
produces path/operation filtered views.

Typical usage::

    from oassdk.session import SpecSession

    session = SpecSession().load("specs/petstore.yaml")
    session.filter_operations({"/pets": ["GET"]})
    resolved = session.filtered_spec()

Or from the command line::

    oassdk validate specs/petstore.yaml
    oassdk resolve specs/petstore.yaml --path /pets --format json

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    parser: Loading, ``$ref`` resolution, composition, validation,
        metadata and filtering.
    session: :class:`~oassdk.session.SpecSession`, the stateful facade.
"""

__version__ = "0.1.0"
