"""Where oassdk keeps its settings and how the effective settings are built.

Sources, lowest to highest precedence:

1. :class:`~oassdk.models.GlobalConfig` defaults.
2. The user file ``config.json`` in :func:`get_config_dir`.
3. ``./oassdk.json`` in the working directory, usually committed next to a
   split OpenAPI document to pin its search roots.
4. ``OASSDK_SEARCH_PATHS`` (``os.pathsep``-separated) and ``OASSDK_FORMAT``.
5. Command-line flags.

The user file is only ever replaced through :func:`_atomic_write`.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional, Sequence

from oassdk.exceptions import ConfigError
from oassdk.models import GlobalConfig

_APP_NAME = "oassdk"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "oassdk.json"

ENV_SEARCH_PATHS = "OASSDK_SEARCH_PATHS"
ENV_FORMAT = "OASSDK_FORMAT"

# kind -> (XDG variable, default under $HOME, subdirectory of ~/.oassdk)
_DIR_KINDS: dict[str, tuple[str, tuple[str, ...], tuple[str, ...]]] = {
    "config": ("XDG_CONFIG_HOME", (".config",), ()),
    "data": ("XDG_DATA_HOME", (".local", "share"), ("data",)),
}


# --- Directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(kind: str) -> Path:
    env_var, xdg_default, fallback = _DIR_KINDS[kind]
    if _is_xdg_platform():
        base = os.environ.get(env_var) or Path.home().joinpath(*xdg_default)
        path = Path(base) / _APP_NAME
    else:
        path = Path.home().joinpath(f".{_APP_NAME}", *fallback)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Directory holding ``config.json`` (created on demand).

    ``$XDG_CONFIG_HOME/oassdk`` on Linux and BSD, ``~/.oassdk`` elsewhere.
    """
    return _app_dir("config")


def get_data_dir() -> Path:
    """Directory for crash logs (created on demand).

    ``$XDG_DATA_HOME/oassdk`` on Linux and BSD, ``~/.oassdk/data`` elsewhere.
    """
    return _app_dir("data")


# --- Files ---


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* via a synced sibling temp file and ``os.replace``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="w",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
        encoding="utf-8",
    ) as tmp:
        tmp_path = Path(tmp.name)
        try:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        except BaseException:
            tmp.close()
            tmp_path.unlink(missing_ok=True)
            raise
    try:
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def _read_json_object(path: Path, label: str) -> Optional[dict[str, Any]]:
    """Parse *path* as a JSON object, or return None when it does not exist."""
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Invalid {label} config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {label} config at {path}: expected a JSON object")
    return data


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Read the user config file; defaults when it is absent.

    Raises:
        ConfigError: The file is not JSON or does not validate.
    """
    path = _global_config_path()
    data = _read_json_object(path, "global")
    if data is None:
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    text = json.dumps(config.model_dump(mode="json"), indent=2) + "\n"
    _atomic_write(_global_config_path(), text)


def load_project_config() -> Optional[dict[str, Any]]:
    """Raw keys from ``./oassdk.json``, or None when there is no such file."""
    return _read_json_object(Path.cwd() / _PROJECT_CONFIG_FILENAME, "project")


# --- Effective settings ---


def _split_search_paths(value: str) -> list[str]:
    return [p for p in value.split(os.pathsep) if p]


def resolve_config(
    cli_search_paths: Optional[Sequence[str]] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Merge every configuration source into one :class:`GlobalConfig`.

    Raises:
        ConfigError: A config file is unreadable or holds invalid values.
    """
    config = load_global_config()

    project = load_project_config()
    if project:
        try:
            config = GlobalConfig.model_validate({**config.model_dump(mode="json"), **project})
        except ValueError as exc:
            raise ConfigError(f"Invalid project config: {exc}") from exc

    env_paths = os.environ.get(ENV_SEARCH_PATHS)
    if env_paths:
        config.search_paths = _split_search_paths(env_paths)
    if os.environ.get(ENV_FORMAT):
        config.output.format = os.environ[ENV_FORMAT]

    if cli_search_paths:
        config.search_paths = list(cli_search_paths)
    if cli_format is not None:
        config.output.format = cli_format

    return config
