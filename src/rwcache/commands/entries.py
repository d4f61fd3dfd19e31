"""Entry commands -- store, read, replace, and remove single keys.

Each command resolves the effective configuration (flags, environment,
settings file) and acts on one key through
:class:`~rwcache.cache.FileCache`. Misses and write failures map to
dedicated exit codes so scripts can branch on them::

    rwcache set session.abc '{"user": 42}' --json-value --expiry 600
    rwcache get session.abc || echo "miss"
"""

from __future__ import annotations

import json
from typing import Any

import typer

from rwcache.commands import open_cache
from rwcache.exit_codes import EXIT_INVALID_USAGE, EXIT_NOT_FOUND, EXIT_WRITE_FAILURE
from rwcache.output import error, format_value, print_data, success, suggest


def _parse_value(value: str, as_json: bool) -> Any:  # noqa: ANN401
    """Return *value* unchanged, or parsed as JSON when *as_json* is set."""
    if not as_json:
        return value
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        error(f"--json-value given but VALUE is not valid JSON: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None


def set_command(
    ctx: typer.Context,
    key: str = typer.Argument(help="Cache key; punctuation becomes directory structure."),
    value: str = typer.Argument(help="Value to store."),
    expiry: int = typer.Option(
        0,
        "--expiry",
        "-e",
        help="0 = never, <= 2592000 = seconds from now, larger = Unix timestamp.",
    ),
    json_value: bool = typer.Option(
        False, "--json-value", help="Parse VALUE as JSON before storing."
    ),
) -> None:
    """Store a value under KEY.

    Example::

        rwcache set user.42.name Ada
        rwcache set user.42.tags '["admin", "ops"]' --json-value -e 3600
    """
    cache = open_cache(ctx)
    content = _parse_value(value, json_value)
    if not cache.set(key, content, expiry):
        error(f"Could not store '{key}'")
        suggest("Check the expiry is not in the past and the cache directory is writable")
        raise typer.Exit(code=EXIT_WRITE_FAILURE)
    success(f"Stored {key}")


def get_command(
    ctx: typer.Context,
    key: str = typer.Argument(help="Cache key to read."),
    last: bool = typer.Option(
        False, "--last", help="Return the last stored content even if expired."
    ),
) -> None:
    """Print the value stored under KEY.

    Exits with code 4 when there is no live entry. With ``--last`` the raw
    stored content is printed regardless of expiry.
    """
    cache = open_cache(ctx)
    value = cache.get_last(key) if last else cache.get(key)
    if value is False:
        error(f"No entry for '{key}'")
        if not last:
            suggest(f"Run: rwcache get {key} --last  to read an expired entry")
        raise typer.Exit(code=EXIT_NOT_FOUND)
    format_value(value)


def replace_command(
    ctx: typer.Context,
    key: str = typer.Argument(help="Cache key to overwrite."),
    value: str = typer.Argument(help="New value."),
    expiry: int = typer.Option(0, "--expiry", "-e", help="Expiry, as for 'set'."),
    json_value: bool = typer.Option(
        False, "--json-value", help="Parse VALUE as JSON before storing."
    ),
) -> None:
    """Overwrite KEY only if it currently holds a live value."""
    cache = open_cache(ctx)
    content = _parse_value(value, json_value)
    if not cache.replace(key, content, expiry):
        error(f"Nothing replaced: '{key}' has no live value")
        raise typer.Exit(code=EXIT_NOT_FOUND)
    success(f"Replaced {key}")


def delete_command(
    ctx: typer.Context,
    key: str = typer.Argument(help="Cache key to remove."),
) -> None:
    """Remove the entry stored under KEY."""
    cache = open_cache(ctx)
    if not cache.delete(key):
        error(f"No entry for '{key}'")
        raise typer.Exit(code=EXIT_NOT_FOUND)
    success(f"Deleted {key}")


def path_command(
    ctx: typer.Context,
    key: str = typer.Argument(help="Cache key."),
) -> None:
    """Print the file path KEY is stored at."""
    cache = open_cache(ctx)
    print_data(str(cache.path_for(key)))
