"""Configuration management with XDG paths and atomic writes.

This module handles all persistent configuration for pons-cli:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.pons-cli/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_cache_dir`, :func:`get_data_dir`.
* **Config file** -- a single :class:`~pons_cli.models.AppConfig` JSON
  file. :func:`load_config` fills in defaults for missing keys and writes
  the completed file back so users can see every available setting.
* **Setting values** -- :func:`set_config_value` coerces a string typed at
  the REPL to the field's type and validates the result.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from pons_cli.exceptions import ConfigError, InvalidUsageError
from pons_cli.models import AppConfig

_APP_NAME = "pons-cli"
_CONFIG_FILENAME = "config.json"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def _ensure_dir(path: Path) -> Path:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigError(f"Could not create directory {path}: {exc}") from exc
    return path


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/pons-cli/`` (default ``~/.config/pons-cli/``).
    On macOS/Windows: ``~/.pons-cli/``.

    Raises:
        ConfigError: If the directory cannot be created.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    return _ensure_dir(path)


def get_cache_dir() -> Path:
    """Return the cache directory, creating it if necessary.

    Holds one ``<sha256>.json`` file per looked-up word plus
    ``dictionaries.json``. Cached data can be safely deleted at any time.

    On Linux/BSD: ``$XDG_CACHE_HOME/pons-cli/`` (default ``~/.cache/pons-cli/``).
    On macOS/Windows: ``~/.pons-cli/cache/``.

    Raises:
        ConfigError: If the directory cannot be created.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    return _ensure_dir(path)


def get_data_dir() -> Path:
    """Return the data directory (search history, REPL history, crash logs).

    On Linux/BSD: ``$XDG_DATA_HOME/pons-cli/`` (default ``~/.local/share/pons-cli/``).
    On macOS/Windows: ``~/.pons-cli/data/``.

    Raises:
        ConfigError: If the directory cannot be created.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    return _ensure_dir(path)


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    On any failure the temp file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Config file ---


def config_path() -> Path:
    """Path to the config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_config() -> AppConfig:
    """Load the configuration, creating or completing the file as needed.

    A missing file is created with all defaults. A file lacking some keys
    is completed with defaults and rewritten.

    Returns:
        The effective :class:`~pons_cli.models.AppConfig`.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation,
            or the config directory cannot be created.
    """
    path = config_path()
    data: dict = {}
    if path.is_file():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            config = AppConfig.model_validate(data)
        except (json.JSONDecodeError, ValueError) as exc:
            raise ConfigError(f"Invalid config at {path}: {exc}") from exc
    else:
        config = AppConfig()

    if set(AppConfig.model_fields) - set(data):
        save_config(config)
    return config


def save_config(config: AppConfig) -> None:
    """Persist the configuration atomically to disk.

    Raises:
        ConfigError: If the file cannot be written.
    """
    data = config.model_dump(mode="json")
    try:
        _atomic_write(config_path(), json.dumps(data, indent=2) + "\n")
    except OSError as exc:
        raise ConfigError(f"Could not write config file: {exc}") from exc


def set_config_value(config: AppConfig, key: str, value: str) -> AppConfig:
    """Return a copy of *config* with *key* set to *value*.

    The value is coerced to match the existing field's type (bool, int,
    float, or str) and the result is validated against
    :class:`~pons_cli.models.AppConfig`. The caller persists it.

    Args:
        config: The current configuration.
        key: Field name, e.g. ``cache_ttl``.
        value: The raw string typed by the user.

    Raises:
        InvalidUsageError: If the key is unknown or the value cannot be
            coerced.
    """
    if key not in AppConfig.model_fields:
        raise InvalidUsageError(f"unknown variable: {key}")

    current = getattr(config, key)
    coerced: object
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, int):
        try:
            coerced = int(value)
        except ValueError:
            raise InvalidUsageError(f"invalid value for {key}: {value}") from None
    elif isinstance(current, float):
        try:
            coerced = float(value)
        except ValueError:
            raise InvalidUsageError(f"invalid value for {key}: {value}") from None
    else:
        coerced = value

    data = config.model_dump()
    data[key] = coerced
    try:
        return AppConfig.model_validate(data)
    except ValidationError as exc:
        raise InvalidUsageError(f"invalid value for {key}: {exc}") from None
