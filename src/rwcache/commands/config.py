"""Config commands -- view and modify persisted settings.

Provides the ``rwcache config`` sub-command group for reading, updating,
and resetting the settings file (:class:`~rwcache.models.CacheConfig`).
Option names may be given in either form, ``cache_directory`` or the
legacy ``cacheDirectory``.
"""

from __future__ import annotations

import typer
from pydantic import ValidationError

from rwcache.exceptions import ConfigError
from rwcache.exit_codes import EXIT_INVALID_USAGE
from rwcache.models import CacheConfig
from rwcache.output import error, info, print_table, success


config_app = typer.Typer(no_args_is_help=True)


def _load() -> CacheConfig:
    from rwcache.config import load_settings

    try:
        return load_settings()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


@config_app.command("show")
def config_show() -> None:
    """Show the persisted settings.

    Example::

        rwcache config show
        rwcache --json config show
    """
    from rwcache.config import get_config_dir

    config = _load()
    info(f"Config directory: {get_config_dir()}")
    rows = [[name, str(value)] for name, value in config.model_dump(mode="json").items()]
    print_table(["option", "value"], rows, title="rwcache settings")


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Option name (gzip_compression, cache_directory, file_extension)."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a persisted option.

    The value is validated against :class:`~rwcache.models.CacheConfig`
    (``true``/``false`` for booleans) before saving.

    Raises:
        typer.Exit: With code 2 if the option is unknown or the value
            fails validation.

    Example::

        rwcache config set gzip_compression false
        rwcache config set cacheDirectory /var/cache/app
    """
    from rwcache.config import save_settings

    names = CacheConfig.option_names()
    if key not in names:
        error(f"Unknown config option: {key}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    config = _load()
    data = config.model_dump()
    data[names[key]] = value
    try:
        new_config = CacheConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_settings(new_config)
    success(f"Set {names[key]} = {getattr(new_config, names[key])}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset settings to defaults.

    The default cache directory is the XDG cache directory
    (``~/.cache/rwcache`` on Linux). Asks for confirmation unless
    ``--force`` is given.
    """
    from rwcache.config import get_cache_dir, save_settings

    if not force:
        confirmed = typer.confirm("Reset all settings to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_settings(CacheConfig(cache_directory=get_cache_dir()))
    success("Settings reset to defaults.")
