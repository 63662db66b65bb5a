"""Helpers shared by the command modules."""

from __future__ import annotations

from typing import Optional

import typer

from oassdk.exceptions import NotFoundError, OASSDKError, ValidationError
from oassdk.output import debug, error, problems, suggest
from oassdk.session import SpecSession


def load_session(ctx: Optional[typer.Context], source: str) -> SpecSession:
    """Resolve the effective config and load *source* into a :class:`SpecSession`.

    Errors are reported on stderr and turned into ``typer.Exit`` with the
    exception's exit code, so every command fails the same way.
    """
    from oassdk.config import resolve_config

    obj = (ctx.obj if ctx is not None else None) or {}
    try:
        config = resolve_config(cli_search_paths=obj.get("search_paths"))
        debug(f"Search paths: {config.search_paths or '(none)'}")
        return SpecSession(config).load(source)
    except OASSDKError as exc:
        report_error(exc)
        raise typer.Exit(code=exc.exit_code) from None


def report_error(exc: OASSDKError) -> None:
    """Print *exc* on stderr, listing every problem of a validation failure."""
    if isinstance(exc, ValidationError) and len(exc.errors) > 1:
        problems(str(exc), exc.errors)
    else:
        error(str(exc))
    if isinstance(exc, NotFoundError):
        suggest("Add the directory holding the file with --search-path or OASSDK_SEARCH_PATHS")
