"""Typer application and CLI entry point for pons-cli.

This module wires together the top-level Typer application and registers the
built-in sub-commands (``translate``, ``dicts``, ``history``, ``config``).
Invoked without a sub-command, the root callback starts the interactive
REPL (:func:`~pons_cli.repl.run_repl`).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Unhandled exceptions are written to a crash log under
the data directory.

See Also:
    :mod:`pons_cli.config`: Directory and config file resolution.
    :mod:`pons_cli.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import sys
import traceback
from datetime import datetime
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from pons_cli import __version__
from pons_cli.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="pons",
    help="Translate words with the PONS online dictionaries.",
    no_args_is_help=False,
    add_completion=False,
    rich_markup_mode="rich",
)

# ------------------------------------------------------------------ #
# Sub-commands
# ------------------------------------------------------------------ #

from pons_cli.commands.config import config_app  # noqa: E402
from pons_cli.commands.lookup import dicts_command, history_command, translate_command  # noqa: E402

app.command("translate")(translate_command)
app.command("dicts")(dicts_command)
app.command("history")(history_command)
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"pons-cli {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Route ``pons_cli.*`` log records to stderr through Rich."""
    logger = logging.getLogger("pons_cli")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(console=Console(stderr=True), show_path=False, show_time=False)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    dictionary: Optional[str] = typer.Option(
        None, "--dict", "-d", help="Dictionary to start with, e.g. 'ende'."
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

    Initialises the global :class:`~pons_cli.output.OutputManager` and the
    ``pons_cli`` logger from CLI flags, and stores the ``--dict`` choice in
    the Typer context for sub-commands. Without a sub-command it runs the
    REPL until the user quits.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        dictionary: Dictionary key to select before the first lookup.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
    """
    from pons_cli.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    _configure_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["dictionary"] = dictionary

    if ctx.invoked_subcommand is None:
        _run_interactive(dictionary)


def _run_interactive(dictionary: Optional[str]) -> None:
    """Open a session and hand it to the REPL."""
    from pons_cli.commands import cli_errors, cli_session
    from pons_cli.config import get_data_dir
    from pons_cli.repl import CMD_HISTORY_FILENAME, run_repl

    with cli_errors(), cli_session(dictionary) as session:
        run_repl(session, history_file=get_data_dir() / CMD_HISTORY_FILENAME)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path.

    Args:
        exc: The unhandled exception to log.

    Returns:
        Absolute path to the written crash log file.
    """
    from pons_cli.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``pons`` console script.

    Unhandled :class:`~pons_cli.exceptions.PonsError` instances cause a
    clean exit with the error's ``exit_code``. Ctrl-C outside the REPL
    prompt exits with 130. All other exceptions produce a crash log and a
    generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from pons_cli.exceptions import PonsError
        from pons_cli.output import error

        if isinstance(exc, PonsError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
