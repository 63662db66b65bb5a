"""Config commands -- view and edit the user-wide configuration.

Provides the ``oassdk config`` sub-command group:

* ``show`` -- print the effective configuration (or only the stored file
  with ``--stored``).
* ``set`` -- change one key using dot notation.
* ``reset`` -- restore defaults.
"""

from __future__ import annotations

import json
from typing import Any

import typer

from oassdk.output import error, info, print_structured, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(
    ctx: typer.Context,
    stored: bool = typer.Option(
        False, "--stored", help="Show only the saved global config, without overrides."
    ),
) -> None:
    """Show the current configuration.

    By default this is the effective configuration after project config,
    ``OASSDK_*`` environment variables and ``--search-path`` flags have
    been applied.

    Example::

        oassdk config show
        oassdk --json config show --stored
    """
    from oassdk.config import get_config_dir, load_global_config, resolve_config
    from oassdk.exceptions import ConfigError

    obj = ctx.obj or {}
    try:
        if stored:
            config = load_global_config()
        else:
            config = resolve_config(cli_search_paths=obj.get("search_paths"))
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Config directory: {get_config_dir()}")
    print_structured(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'output.format')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Values are coerced to the field's type. List fields take a
    comma-separated value; ``include_operations`` takes a JSON object.
    An empty string clears an optional field.

    Example::

        oassdk config set search_paths specs,specs/shared
        oassdk config set include_paths /pets,/users
        oassdk config set include_operations '{"/pets": ["GET"]}'
        oassdk config set max_ref_depth 32
        oassdk config set output.format json
    """
    from oassdk.config import load_global_config, save_global_config
    from oassdk.exceptions import ConfigError
    from oassdk.models import GlobalConfig

    try:
        config = load_global_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    try:
        coerced = _coerce(final_key, target[final_key], value)
    except ValueError as exc:
        error(f"Invalid value for {key}: {exc}")
        raise typer.Exit(code=2) from None
    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {json.dumps(coerced)}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset configuration to defaults.

    Example::

        oassdk config reset
        oassdk config reset --force
    """
    from oassdk.config import save_global_config
    from oassdk.models import GlobalConfig

    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")


def _coerce(name: str, current: Any, value: str) -> Any:
    """Convert the CLI string *value* to the type of the field's *current* value."""
    if name == "include_operations":
        if not value:
            return None
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as exc:
            raise ValueError(f"expected a JSON object ({exc.msg})") from None
        if not isinstance(parsed, dict):
            raise ValueError("expected a JSON object mapping paths to methods")
        return parsed
    if name == "include_paths" or isinstance(current, list):
        items = [item.strip() for item in value.split(",") if item.strip()]
        if name == "include_paths" and not items:
            return None
        return items
    if isinstance(current, bool):
        return value.lower() in ("true", "1", "yes")
    if isinstance(current, int):
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"expected an integer, got {value!r}") from None
    return value
