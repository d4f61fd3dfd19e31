"""Terminal output for the rwcache command line.

Cached values, paths and settings tables go to stdout so that
``rwcache get key | jq`` works; status lines, errors, hints and library
log records go to stderr. Rich styling is used only when stdout is a
terminal and colour is not turned off by ``--no-color``, ``NO_COLOR`` or
``TERM=dumb`` (see `clig.dev <https://clig.dev/>`_).

:func:`~rwcache.app.main_callback` builds one :class:`OutputManager` from
the global flags and installs it with :func:`set_output`; commands then
call the module-level shortcuts (:func:`error`, :func:`format_value`, ...).
"""

from __future__ import annotations

import json
import logging
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """How stdout data is rendered. ``AUTO`` picks ``RICH`` on a colour TTY, else ``PLAIN``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Holds the output preferences chosen by the global CLI flags.

    Args:
        format: Rendering for stdout data.
        no_color: Force colourless output even on a terminal.
        quiet: Drop status lines and hints (errors and warnings still print).
        verbose: Print ``[debug]`` lines and let debug log records through.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format != OutputFormat.AUTO:
            self._format = format
        elif _is_tty() and not self._no_color:
            self._format = OutputFormat.RICH
        else:
            self._format = OutputFormat.PLAIN

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def log_level(self) -> int:
        """Threshold for ``rwcache`` log records under these flags."""
        if self._verbose:
            return logging.DEBUG
        if self._quiet:
            return logging.ERROR
        return logging.WARNING

    @property
    def stderr_console(self) -> Console:
        return self._stderr

    # ------------------------------------------------------------------ #
    # Data (stdout)
    # ------------------------------------------------------------------ #

    def format_value(self, data: Any) -> None:
        """Print a value read from the cache.

        Strings print verbatim outside JSON mode so ``rwcache get`` output
        can be piped. Other values print as JSON: compact in plain mode,
        indented in JSON mode, highlighted in rich mode.
        """
        if self._format == OutputFormat.JSON:
            self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))
        elif isinstance(data, str):
            self.print_data(data)
        elif self._format == OutputFormat.PLAIN:
            self.print_data(json.dumps(data, ensure_ascii=False, default=str))
        else:
            text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as a Rich table, a JSON list of objects, or TSV lines.

        *title* is only shown by the Rich table.
        """
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
            return
        if self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
            return

        table = Table(title=title, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def _emit(self, text: str, markup: str, optional: bool = True) -> None:
        """Write one diagnostic line to stderr.

        *text* is printed as is without colour; otherwise *markup* (the same
        line with Rich style tags) goes through the stderr console.
        Optional lines are dropped in quiet mode.
        """
        if optional and self._quiet:
            return
        if self._no_color:
            print(text, file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup)

    def info(self, message: str) -> None:
        self._emit(message, message)

    def success(self, message: str) -> None:
        self._emit(message, f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        """Shown even in quiet mode."""
        self._emit(f"Warning: {message}", f"[yellow]Warning:[/yellow] {message}", optional=False)

    def error(self, message: str) -> None:
        """Shown even in quiet mode."""
        self._emit(f"Error: {message}", f"[bold red]Error:[/bold red] {message}", optional=False)

    def suggest(self, message: str) -> None:
        """Print a follow-up command hint, e.g. after a cache miss."""
        self._emit(f"→ {message}", f"[dim]→ {message}[/dim]")

    def debug(self, message: str) -> None:
        """Only shown with ``--verbose``."""
        if self._verbose:
            self._emit(f"[debug] {message}", f"[dim]\\[debug] {message}[/dim]", optional=False)


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


def _should_disable_color() -> bool:
    """``NO_COLOR`` set to anything, or ``TERM=dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


_LOG_HANDLER_NAME = "rwcache-cli"


def configure_logging(output: OutputManager) -> None:
    """Route the ``rwcache`` library loggers to stderr for CLI runs.

    Uses a :class:`~rich.logging.RichHandler` on the manager's stderr
    console. The level is ``DEBUG`` with ``--verbose``, ``ERROR`` with
    ``--quiet`` and ``WARNING`` otherwise. Calling it again replaces the
    previously installed handler.
    """
    logger = logging.getLogger("rwcache")
    for handler in list(logger.handlers):
        if handler.get_name() == _LOG_HANDLER_NAME:
            logger.removeHandler(handler)

    handler = RichHandler(
        console=output.stderr_console,
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.set_name(_LOG_HANDLER_NAME)
    logger.addHandler(handler)

    logger.setLevel(output.log_level)


# ------------------------------------------------------------------ #
# Process-wide manager, installed by the root callback
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance."""
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager; the next :func:`get_output` builds a default one."""
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Shortcuts on the global instance, used by the command modules
# ------------------------------------------------------------------ #


def format_value(data: Any) -> None:
    get_output().format_value(data)


def print_data(text: str) -> None:
    get_output().print_data(text)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def error(message: str) -> None:
    get_output().error(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)
