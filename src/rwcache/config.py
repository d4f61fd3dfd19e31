"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles the persistent side of rwcache's configuration:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.rwcache/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_cache_dir`, :func:`get_data_dir`.
* **Settings file** -- a single :class:`~rwcache.models.CacheConfig`
  JSON file used by the command line. Library users configure
  :class:`~rwcache.cache.FileCache` directly and never touch it.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, the settings file, and defaults.

All file writes, including cache entries, go through :func:`atomic_write`
(temp file in the target directory, then ``os.replace``).
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional, Union

from rwcache.exceptions import ConfigError
from rwcache.models import CacheConfig

_APP_NAME = "rwcache"
_CONFIG_FILENAME = "config.json"

ENV_DIRECTORY = "RWCACHE_DIR"
ENV_GZIP = "RWCACHE_GZIP"
ENV_EXTENSION = "RWCACHE_EXTENSION"


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


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/rwcache/`` (default ``~/.config/rwcache/``).
    On macOS/Windows: ``~/.rwcache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the default cache root used by the command line.

    The directory is not created here; the first write creates it.

    On Linux/BSD: ``$XDG_CACHE_HOME/rwcache/`` (default ``~/.cache/rwcache/``).
    On macOS/Windows: ``~/.rwcache/cache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/rwcache/`` (default ``~/.local/share/rwcache/``).
    On macOS/Windows: ``~/.rwcache/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _default_file_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def atomic_write(path: Path, data: Union[str, bytes]) -> None:
    """Write data to file atomically using temp file + rename.

    Missing parent directories are created. The temporary file lives in the
    same directory as *path* so that ``os.replace`` is an atomic rename on
    POSIX systems. On any failure the temp file is removed and the error
    re-raised.

    The file ends up with the mode a plain ``open()`` would give it
    (``0o666`` less the process umask), not the ``0o600`` of the temp file,
    so processes running as other users can still read shared entries.

    Raises:
        OSError: If a directory cannot be created or the file written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    binary = isinstance(data, bytes)
    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="wb" if binary else "w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding=None if binary else "utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.chmod(tmp_path, _default_file_mode())
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


# --- Settings file ---


def _settings_path() -> Path:
    """Path to the settings file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_settings() -> CacheConfig:
    """Load the persisted cache settings.

    Returns:
        The stored :class:`~rwcache.models.CacheConfig`, or one rooted at
        :func:`get_cache_dir` when no settings file exists yet.

    Raises:
        ConfigError: If the file contains invalid JSON, unknown keys, or
            values that fail validation.
    """
    path = _settings_path()
    if not path.is_file():
        return CacheConfig(cache_directory=get_cache_dir())
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return CacheConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid settings at {path}: {exc}") from exc


def save_settings(config: CacheConfig) -> None:
    """Persist *config* atomically to the settings file."""
    data = config.model_dump(mode="json")
    atomic_write(_settings_path(), json.dumps(data, indent=2) + "\n")


def _parse_bool(value: str, source: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"Expected a boolean for {source}, got: {value}")


# --- Precedence resolution ---


def resolve_config(
    cli_directory: Optional[str] = None,
    cli_compression: Optional[bool] = None,
) -> CacheConfig:
    """Resolve the effective cache configuration for the command line.

    Precedence (high to low):
        1. CLI flags (``--dir``, ``--gzip/--no-gzip``)
        2. Environment variables (``RWCACHE_DIR``, ``RWCACHE_GZIP``,
           ``RWCACHE_EXTENSION``)
        3. Settings file (``~/.config/rwcache/config.json``)
        4. Defaults

    Raises:
        ConfigError: If the settings file or an environment value is invalid.
    """
    config = load_settings()
    overrides: dict[str, Any] = {}

    env_directory = os.environ.get(ENV_DIRECTORY)
    if env_directory:
        overrides["cache_directory"] = env_directory
    env_gzip = os.environ.get(ENV_GZIP)
    if env_gzip:
        overrides["gzip_compression"] = _parse_bool(env_gzip, ENV_GZIP)
    env_extension = os.environ.get(ENV_EXTENSION)
    if env_extension:
        overrides["file_extension"] = env_extension

    if cli_directory is not None:
        overrides["cache_directory"] = cli_directory
    if cli_compression is not None:
        overrides["gzip_compression"] = cli_compression

    if not overrides:
        return config
    try:
        return CacheConfig.model_validate({**config.model_dump(), **overrides})
    except ValueError as exc:
        raise ConfigError(f"Invalid configuration override: {exc}") from exc
