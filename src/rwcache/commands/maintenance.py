"""Maintenance commands -- sweep expired entries or empty the cache."""

from __future__ import annotations

import typer

from rwcache.commands import open_cache
from rwcache.exit_codes import EXIT_WRITE_FAILURE
from rwcache.output import error, info, success, warning


def clean_command(ctx: typer.Context) -> None:
    """Delete every expired entry, keeping live ones."""
    cache = open_cache(ctx)
    removed = cache.clean()
    noun = "entry" if removed == 1 else "entries"
    success(f"Removed {removed} expired {noun}")


def flush_command(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Delete all entries (``.keep`` files are preserved).

    Asks for confirmation unless ``--force`` is given.
    """
    cache = open_cache(ctx)
    directory = cache.config.cache_directory
    if not directory.is_dir():
        warning(f"{directory} does not exist, nothing to flush")
        return

    if not force:
        confirmed = typer.confirm(f"Delete everything under {directory}?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    if not cache.flush():
        error(f"Flush of {directory} did not complete")
        raise typer.Exit(code=EXIT_WRITE_FAILURE)
    success(f"Flushed {directory}")
