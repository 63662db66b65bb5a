"""Spec commands -- run the core pipeline on a single spec file.

* ``oassdk validate SPEC`` -- load, resolve and validate; exit non-zero
  with every problem listed when the document is unusable.
* ``oassdk resolve SPEC`` -- print the resolved (and optionally filtered)
  document as YAML or JSON for an external generator to consume.
* ``oassdk schema SPEC NAME`` -- print the flattened field set of one
  component schema.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import typer
import yaml

from oassdk.exceptions import InvalidUsageError, OASSDKError, ValidationError
from oassdk.output import get_output, print_document, print_structured, success, warning
from oassdk.commands.common import load_session, report_error


def validate_command(
    ctx: typer.Context,
    spec: str = typer.Argument(help="Path to the OpenAPI spec ('-' for stdin)."),
) -> None:
    """Validate a spec: load it, resolve every $ref and check its structure.

    Example::

        oassdk validate openapi.yaml
        oassdk --json validate openapi.yaml
    """
    from oassdk.config import resolve_config
    from oassdk.output import OutputFormat
    from oassdk.session import SpecSession

    obj = ctx.obj or {}
    json_mode = get_output().format == OutputFormat.JSON
    try:
        config = resolve_config(cli_search_paths=obj.get("search_paths"))
        session = SpecSession(config).load(spec)
    except ValidationError as exc:
        if json_mode:
            print_structured({"valid": False, "errors": exc.errors})
        report_error(exc)
        raise typer.Exit(code=exc.exit_code) from None
    except OASSDKError as exc:
        if json_mode:
            print_structured({"valid": False, "errors": [str(exc)]})
        report_error(exc)
        raise typer.Exit(code=exc.exit_code) from None

    meta = session.metadata
    if json_mode:
        print_structured({
            "valid": True,
            "title": meta.title,
            "version": meta.version,
            "operations": meta.operation_count,
        })
    success(
        f"{meta.title} {meta.version} is valid "
        f"({meta.endpoint_count} paths, {meta.operation_count} operations)"
    )


def resolve_command(
    ctx: typer.Context,
    spec: str = typer.Argument(help="Path to the OpenAPI spec ('-' for stdin)."),
    paths: Optional[list[str]] = typer.Option(
        None, "--path", help="Keep only this path (repeatable)."
    ),
    operations: Optional[list[str]] = typer.Option(
        None,
        "--operation",
        help="Keep only these methods of a path, as PATH:METHOD[,METHOD] (repeatable).",
    ),
    doc_format: str = typer.Option(
        "yaml", "--format", help="Document format: yaml or json."
    ),
) -> None:
    """Print the fully resolved spec, optionally filtered.

    Example::

        oassdk resolve openapi.yaml
        oassdk resolve openapi.yaml --path /users --operation /users:GET
        oassdk -o resolved.json resolve openapi.yaml --format json
    """
    if doc_format not in ("yaml", "json"):
        raise typer.BadParameter("must be 'yaml' or 'json'", param_hint="--format")

    try:
        operation_filter = parse_operation_filters(operations or [])
    except InvalidUsageError as exc:
        report_error(exc)
        raise typer.Exit(code=exc.exit_code) from None

    session = load_session(ctx, spec)
    session.filter_paths(paths)
    session.filter_operations(operation_filter)
    document = session.filtered_spec()
    if (paths or operation_filter) and not document.get("paths"):
        warning("No path or operation matched the filters")

    print_document(dump_document(document, doc_format), syntax=doc_format)


def schema_command(
    ctx: typer.Context,
    spec: str = typer.Argument(help="Path to the OpenAPI spec ('-' for stdin)."),
    name: str = typer.Argument(help="Name under components.schemas."),
) -> None:
    """Show the merged fields of a component schema (allOf/oneOf/anyOf flattened).

    Example::

        oassdk schema openapi.yaml Pet
    """
    session = load_session(ctx, spec)
    try:
        merged = session.merged_schema(name)
    except OASSDKError as exc:
        report_error(exc)
        raise typer.Exit(code=exc.exit_code) from None

    print_structured({
        "name": name,
        "fields": merged.field_names,
        "required": merged.required,
        "properties": merged.properties,
    })


def parse_operation_filters(expressions: list[str]) -> Optional[dict[str, list[str]]]:
    """Parse ``PATH:METHOD[,METHOD]`` expressions into an operation filter mapping.

    Repeated paths accumulate their methods.

    Raises:
        InvalidUsageError: If an expression has no ``:`` or no methods.
    """
    if not expressions:
        return None

    result: dict[str, list[str]] = {}
    for expression in expressions:
        path, sep, methods = expression.rpartition(":")
        tokens = [m.strip().upper() for m in methods.split(",") if m.strip()]
        if not sep or not path or not tokens:
            raise InvalidUsageError(
                f"Invalid --operation '{expression}'. Expected PATH:METHOD[,METHOD]"
            )
        bucket = result.setdefault(path, [])
        bucket.extend(t for t in tokens if t not in bucket)
    return result


def dump_document(document: dict[str, Any], doc_format: str) -> str:
    """Serialise a spec document as YAML or JSON, keeping key order."""
    if doc_format == "json":
        return json.dumps(document, indent=2, ensure_ascii=False, default=str)
    return yaml.safe_dump(document, sort_keys=False, allow_unicode=True)
