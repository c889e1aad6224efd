"""Terminal rendering for the ``wanikani`` CLI.

Payloads go to stdout and everything else goes to stderr, so
``wanikani get subjects --json | jq`` always sees clean JSON.  Payloads are
rendered in one of three formats:

* ``json`` -- indented JSON.
* ``plain`` -- one ``key<TAB>value`` line per field, or one tab-separated
  line per list item; nested values are printed as compact JSON.
* ``rich`` -- syntax-highlighted JSON and Rich tables.

``auto`` picks ``rich`` on an interactive terminal with colour enabled, and
``plain`` otherwise.  Colour is off when ``--no-color`` is passed, when
``NO_COLOR`` is set, or when ``TERM=dumb``.

The library never prints.  It logs through :mod:`logging`, and
:func:`configure_logging` sends the ``wanikani`` logger to the same stderr
console as the CLI's own diagnostics.
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
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


# level -> (plain prefix, rich markup template)
_DIAGNOSTICS: dict[str, tuple[str, str]] = {
    "info": ("", "{}"),
    "success": ("", "[green]{}[/green]"),
    "warning": ("Warning: ", "[yellow]Warning:[/yellow] {}"),
    "error": ("Error: ", "[bold red]Error:[/bold red] {}"),
    "debug": ("[debug] ", "[dim]\\[debug] {}[/dim]"),
}


class OutputManager:
    """Renders payloads and diagnostics for one CLI invocation.

    Args:
        format: Payload format; ``AUTO`` is resolved immediately.
        no_color: Disable colour and markup.
        quiet: Drop ``info`` and ``success`` messages.
        verbose: Show ``debug`` messages.
        output_file: Write payloads as JSON to this file instead of stdout.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        output_file: Optional[str] = None,
    ) -> None:
        self._no_color = no_color or _color_disabled_by_env()
        self._quiet = quiet
        self._verbose = verbose
        self._output_file = output_file
        if format is OutputFormat.AUTO:
            interactive = sys.stdout.isatty() if hasattr(sys.stdout, "isatty") else False
            format = OutputFormat.RICH if interactive and not self._no_color else OutputFormat.PLAIN
        self._format = format
        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=format is OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    @property
    def stderr_console(self) -> Console:
        return self._stderr

    # ------------------------------------------------------------------ #
    # Payloads (stdout)
    # ------------------------------------------------------------------ #

    def format_response(self, data: Any) -> None:
        """Render an API payload."""
        if self._output_file:
            with open(self._output_file, "w", encoding="utf-8") as fh:
                fh.write(_to_json(data) + "\n")
        elif self._format is OutputFormat.JSON:
            self._line(_to_json(data))
        elif self._format is OutputFormat.PLAIN:
            for line in _plain_lines(data):
                self._line(line)
        else:
            self._stdout.print(Syntax(_to_json(data), "json", theme="monokai", word_wrap=True))

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Render rows as a Rich table, a JSON list of objects, or TSV."""
        if self._format is OutputFormat.JSON:
            self._line(_to_json([dict(zip(headers, row)) for row in rows]))
        elif self._format is OutputFormat.PLAIN:
            for row in [headers, *rows]:
                self._line("\t".join(row))
        else:
            table = Table(*headers, title=title, header_style="bold cyan")
            for row in rows:
                table.add_row(*row)
            self._stdout.print(table)

    def _line(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic("info", message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic("success", message)

    def warning(self, message: str) -> None:
        self._diagnostic("warning", message)

    def error(self, message: str) -> None:
        self._diagnostic("error", message)

    def debug(self, message: str) -> None:
        if self._verbose:
            self._diagnostic("debug", message)

    def _diagnostic(self, level: str, message: str) -> None:
        prefix, markup = _DIAGNOSTICS[level]
        if self._no_color:
            print(prefix + message, file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup.format(escape(message)))


def _to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _plain_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


def _plain_lines(data: Any) -> list[str]:
    if isinstance(data, dict):
        return [f"{key}\t{_plain_value(value)}" for key, value in data.items()]
    if isinstance(data, list):
        return [
            "\t".join(_plain_value(v) for v in item.values()) if isinstance(item, dict) else str(item)
            for item in data
        ]
    return [str(data)]


def _color_disabled_by_env() -> bool:
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


def configure_logging(output: OutputManager) -> None:
    """Send ``wanikani`` log records to stderr through Rich.

    With ``--verbose`` cache hits, misses and revalidations are shown;
    otherwise only warnings such as failed cache writes.
    """
    logger = logging.getLogger("wanikani")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.addHandler(
        RichHandler(console=output.stderr_console, show_time=False, show_path=False, markup=False)
    )
    logger.setLevel(logging.DEBUG if output.is_verbose else logging.WARNING)


# ------------------------------------------------------------------ #
# Process-wide instance, installed by the CLI callback
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
