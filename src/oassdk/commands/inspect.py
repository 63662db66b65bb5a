"""Inspect commands -- examine a spec's metadata.

Provides the ``oassdk inspect`` sub-command group with read-only
commands for viewing what a spec contains: general info, paths and
operations, component schemas, and tags. Every sub-command loads the
spec through a :class:`~oassdk.session.SpecSession`, so the data shown is
the resolved and validated view a generator would see.
"""

from __future__ import annotations

from typing import Optional

import typer

from oassdk.commands.common import load_session
from oassdk.output import info, print_structured, print_table


inspect_app = typer.Typer(no_args_is_help=True)

_SPEC_ARG_HELP = "Path to the OpenAPI spec ('-' for stdin)."


@inspect_app.command("info")
def inspect_info(
    ctx: typer.Context,
    spec: str = typer.Argument(help=_SPEC_ARG_HELP),
    key: Optional[str] = typer.Option(
        None, "--key", "-k", help="Print one dotted field, e.g. 'method_counts.GET'."
    ),
) -> None:
    """Show general API info (title, version, contact, license, counts).

    Example::

        oassdk inspect info openapi.yaml
        oassdk inspect info openapi.yaml --key license_name
    """
    meta = load_session(ctx, spec).metadata

    if key is not None:
        print_structured(meta.lookup(key))
        return

    print_structured({
        "title": meta.title,
        "version": meta.version,
        "openapi": meta.openapi_version,
        "description": meta.description,
        "terms_of_service": meta.terms_of_service,
        "contact": {
            "name": meta.contact_name,
            "email": meta.contact_email,
            "url": meta.contact_url,
        },
        "license": {"name": meta.license_name, "url": meta.license_url},
        "servers": [s.url for s in meta.servers],
        "paths": meta.endpoint_count,
        "operations": meta.operation_count,
        "methods": meta.method_counts,
        "security_schemes": [s.name for s in meta.security_schemes],
    })


@inspect_app.command("paths")
def inspect_paths(
    ctx: typer.Context,
    spec: str = typer.Argument(help=_SPEC_ARG_HELP),
) -> None:
    """List every operation with its method, path, operationId and summary.

    Example::

        oassdk inspect paths openapi.yaml
        oassdk --json inspect paths openapi.yaml
    """
    meta = load_session(ctx, spec).metadata

    headers = ["Method", "Path", "Operation ID", "Summary", "Deprecated"]
    rows: list[list[str]] = []
    for endpoint in meta.endpoints:
        for op in endpoint.operations:
            rows.append([
                op.method,
                endpoint.path,
                op.operation_id or "-",
                op.summary or "-",
                "Yes" if op.deprecated else "",
            ])

    print_table(headers, rows, title=f"{meta.title} -- Paths ({len(rows)})")


@inspect_app.command("schemas")
def inspect_schemas(
    ctx: typer.Context,
    spec: str = typer.Argument(help=_SPEC_ARG_HELP),
) -> None:
    """List component schemas with their merged fields.

    Composed schemas (``allOf``/``oneOf``/``anyOf``) are flattened first,
    so the field list is what a generated model would carry. Required
    fields are marked with ``*``.

    Example::

        oassdk inspect schemas openapi.yaml
    """
    session = load_session(ctx, spec)
    schemas = (session.spec.get("components") or {}).get("schemas") or {}

    if not schemas:
        info("No schemas defined in this spec.")
        return

    headers = ["Schema", "Type", "Fields"]
    rows: list[list[str]] = []
    for model in session.metadata.models:
        merged = session.merged_schema(model.name)
        fields = [
            f"{name}*" if merged.is_required(name) else name
            for name in merged.field_names
        ]
        shown = ", ".join(fields[:6])
        if len(fields) > 6:
            shown += "..."
        rows.append([model.name, model.type or "-", shown or "-"])

    print_table(headers, rows, title=f"Schemas ({len(rows)})")


@inspect_app.command("tags")
def inspect_tags(
    ctx: typer.Context,
    spec: str = typer.Argument(help=_SPEC_ARG_HELP),
) -> None:
    """List tags, declared ones first, then any only used by operations.

    Example::

        oassdk inspect tags openapi.yaml
    """
    meta = load_session(ctx, spec).metadata

    if not meta.tags:
        info("No tags defined.")
        return

    counts: dict[str, int] = {}
    for endpoint in meta.endpoints:
        for op in endpoint.operations:
            for tag in op.tags:
                counts[tag] = counts.get(tag, 0) + 1

    headers = ["Tag", "Operations", "Description"]
    rows = [
        [tag.name, str(counts.get(tag.name, 0)), (tag.description or "-")[:60]]
        for tag in meta.tags
    ]
    print_table(headers, rows, title=f"Tags ({len(rows)})")
