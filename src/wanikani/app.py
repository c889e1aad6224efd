"""The ``wanikani`` command line.

Sub-commands:

* ``wanikani get RESOURCE [ID]`` -- fetch through the response cache.
* ``wanikani cache info|prune|clear`` -- manage the cache directory.
* ``wanikani config show|set|reset`` -- manage ``config.json``.

:func:`main` is the console-script entry point.  Errors raised outside a
command's own handling are turned into exit codes here:
:class:`~wanikani.exceptions.WaniKaniError` uses its ``exit_code``, transport
failures exit with ``EXIT_CONNECTION_ERROR``, and anything else leaves a
traceback in a crash log under the data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import httpx
import typer

from wanikani import __version__
from wanikani.commands.cache import cache_app
from wanikani.commands.config import config_app
from wanikani.commands.get import get_command
from wanikani.exceptions import WaniKaniError
from wanikani.exit_codes import EXIT_CONNECTION_ERROR, EXIT_GENERIC_FAILURE
from wanikani.output import OutputFormat, OutputManager, configure_logging, error, set_output

app = typer.Typer(
    name="wanikani",
    help="Query the WaniKani API through a local response cache.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)
app.command("get")(get_command)
app.add_typer(cache_app, name="cache", help="Manage the response cache.")
app.add_typer(config_app, name="config", help="Show or change the global configuration.")


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"wanikani {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True, help="Show version and exit."
    ),
    json_output: bool = typer.Option(False, "--json", help="Print payloads as JSON."),
    plain_output: bool = typer.Option(False, "--plain", help="Print payloads as tab-separated text."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colour."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print payloads and errors."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log cache activity to stderr."),
    force: bool = typer.Option(False, "--force", "-f", help="Do not ask for confirmation."),
    output_file: Optional[str] = typer.Option(None, "-o", "--output", help="Write the payload to a file."),
) -> None:
    """Set up output and logging, and share ``--force`` with sub-commands."""
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = OutputFormat.AUTO

    output = OutputManager(
        format=fmt, no_color=no_color, quiet=quiet, verbose=verbose, output_file=output_file
    )
    set_output(output)
    configure_logging(output)
    ctx.obj = {"force": force, "verbose": verbose}


def _setup_signal_handlers() -> None:
    def _on_sigint(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _on_sigint)


def _write_crash_log(exc: BaseException) -> str:
    """Save the traceback of *exc* and return the log file path."""
    from wanikani.config import get_data_dir

    log_dir = get_data_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    path = log_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    path.write_text("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    return str(path)


def main() -> None:
    """Console-script entry point; always ends in ``SystemExit``."""
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except WaniKaniError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except httpx.TransportError as exc:
        error(f"Connection failed: {exc}")
        sys.exit(EXIT_CONNECTION_ERROR)
    except Exception as exc:
        error(f"Unexpected error. Debug log: {_write_crash_log(exc)}")
        sys.exit(EXIT_GENERIC_FAILURE)
