"""Typer application and CLI entry point for rwcache.

This module wires the root Typer application, registers the built-in
commands (``set``, ``get``, ``replace``, ``delete``, ``path``, ``clean``,
``flush``, ``config``), and installs the output manager and log handler
from the global flags.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Unhandled exceptions are written to a crash log under
the data directory.

See Also:
    :mod:`rwcache.config`: Settings resolution used by every command.
    :mod:`rwcache.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from rwcache import __version__
from rwcache.commands.config import config_app
from rwcache.commands.entries import (
    delete_command,
    get_command,
    path_command,
    replace_command,
    set_command,
)
from rwcache.commands.maintenance import clean_command, flush_command
from rwcache.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="rwcache",
    help="Filesystem-backed key/value cache.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("set")(set_command)
app.command("get")(get_command)
app.command("replace")(replace_command)
app.command("delete")(delete_command)
app.command("path")(path_command)
app.command("clean")(clean_command)
app.command("flush")(flush_command)
app.add_typer(config_app, name="config", help="Settings management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"rwcache {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    directory: Optional[str] = typer.Option(
        None, "--dir", "-d", help="Cache directory (overrides settings and RWCACHE_DIR)."
    ),
    gzip: Optional[bool] = typer.Option(
        None, "--gzip/--no-gzip", help="Compress written entries."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~rwcache.output.OutputManager` and the
    library log handler from CLI flags, and stores the configuration
    overrides in ``ctx.obj`` for :func:`~rwcache.commands.open_cache`.
    """
    from rwcache.output import OutputFormat, OutputManager, configure_logging, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
    )
    set_output(output)
    configure_logging(output)

    ctx.ensure_object(dict)
    ctx.obj["directory"] = directory
    ctx.obj["gzip"] = gzip
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from rwcache.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``rwcache`` console script.

    Unhandled :class:`~rwcache.exceptions.RWCacheError` instances cause a
    clean exit with the error's ``exit_code``. All other exceptions produce
    a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from rwcache.exceptions import RWCacheError
        from rwcache.output import error

        if isinstance(exc, RWCacheError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
