"""Interactive read-eval-print loop.

Each input line is either a command starting with a dot or a word to
translate in the active dictionary::

    >>> .dict ende
    ende >>> house

Command handlers take the :class:`~pons_cli.pipeline.Session` and the
remaining whitespace-separated arguments. Every :class:`~pons_cli.exceptions.PonsError`
raised by a handler is printed and the loop carries on; only ``.quit``,
end-of-input, or Ctrl-C end the session.

Input history is kept by :mod:`readline` in ``cmd_history.txt`` under the
data directory and trimmed to ``cmd_history_limit`` lines at startup and
on exit.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from rich.text import Text

from pons_cli.config import save_config, set_config_value
from pons_cli.exceptions import InvalidUsageError, PonsError
from pons_cli.models import AppConfig
from pons_cli.output import OutputFormat, error, get_output, notice, print_table, success
from pons_cli.pipeline import Session, bilingual_dictionaries, get_dictionaries, select_dictionary, translate

try:
    import readline
except ImportError:  # pragma: no cover - Windows
    readline = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)

CMD_HISTORY_FILENAME = "cmd_history.txt"
PROMPT = ">>> "

WELCOME_MESSAGE = """
To use pons-cli, you must first configure your PONS API key.

Please enter:
  .set api_key <your_api_key>

If you don't have an API key, visit:
  https://en.pons.com/open_dict/public_api

Note: You may need to create an account on the PONS website.
"""

HELP_ENTRIES = (
    (".help", "Show this help message"),
    (".quit", "Exit the program"),
    (".dict", "List available dictionaries"),
    (".dict <key>", "Set the current dictionary"),
    (".history", "Show search history"),
    (".set", "Show current settings"),
    (".set <var> <value>", "Set a configuration variable"),
)

Handler = Callable[[Session, list[str]], None]


# ------------------------------------------------------------------ #
# Command handlers
# ------------------------------------------------------------------ #


def handle_help(session: Session, args: list[str]) -> None:
    notice("Available commands:")
    console = get_output().console
    for command, description in HELP_ENTRIES:
        console.print(Text(f"{command} - {description}"))


def handle_dict(session: Session, args: list[str]) -> None:
    """``.dict`` lists dictionaries; ``.dict <key>`` selects one."""
    if args:
        select_dictionary(session, args[0])
        return

    dictionaries = bilingual_dictionaries(get_dictionaries(session))
    output = get_output()
    if output.format == OutputFormat.JSON:
        output.print_json([{"key": d.key, "label": d.label} for d in dictionaries])
        return
    notice("Usage: .dict <dictionary_key>")
    for dictionary in dictionaries:
        output.console.print(Text.assemble((dictionary.key, "green"), f": {dictionary.label}"))


def handle_history(session: Session, args: list[str]) -> None:
    """``.history`` prints past searches, newest first."""
    if session.history is None:
        raise InvalidUsageError("search history is not available")
    rows = [
        [entry.term, entry.dictionary, entry.date.strftime("%Y-%m-%d %H:%M:%S")]
        for entry in session.history.entries()
    ]
    print_table(["Searched Term", "Dictionary", "Date"], rows)


def handle_set(session: Session, args: list[str]) -> None:
    """``.set`` shows settings; ``.set <var> <value>`` changes and saves one."""
    if not args:
        notice("Usage: .set <variable> <value>")
        console = get_output().console
        for name in AppConfig.model_fields:
            console.print(Text.assemble((name, "green"), f": {getattr(session.config, name)}"))
        return

    if len(args) != 2:
        raise InvalidUsageError("invalid number of arguments")

    key, value = args
    config = set_config_value(session.config, key, value)
    save_config(config)
    session.update_config(config)
    success(f"Set {key} = {getattr(config, key)}")


COMMANDS: dict[str, Handler] = {
    ".help": handle_help,
    ".dict": handle_dict,
    ".history": handle_history,
    ".set": handle_set,
}


def dispatch(session: Session, line: str) -> bool:
    """Run one input line.

    Returns:
        ``False`` when the session should end (``.quit``), ``True``
        otherwise. Command errors are printed, never raised.
    """
    line = line.strip()
    if not line:
        return True

    command, *args = line.split()
    if command == ".quit":
        return False

    try:
        handler = COMMANDS.get(command)
        if handler is not None:
            handler(session, args)
        elif command.startswith("."):
            raise InvalidUsageError(f"unknown command: {command} (type .help)")
        else:
            translate(session, line)
    except PonsError as exc:
        error(str(exc))
    return True


# ------------------------------------------------------------------ #
# Line history
# ------------------------------------------------------------------ #


def trim_history_file(path: Path, max_lines: int) -> None:
    """Keep only the last *max_lines* lines of *path*.

    A missing file is left alone.
    """
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except FileNotFoundError:
        return
    if len(lines) > max_lines:
        lines = lines[len(lines) - max_lines:] if max_lines > 0 else []
    path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")


def _load_line_history(history_file: Path, limit: int) -> None:
    if readline is None:
        return
    readline.set_history_length(limit)
    try:
        readline.read_history_file(str(history_file))
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("could not read history file %s: %s", history_file, exc)


def _save_line_history(history_file: Path) -> None:
    if readline is None:
        return
    try:
        readline.write_history_file(str(history_file))
    except OSError as exc:
        logger.warning("could not write history file %s: %s", history_file, exc)


# ------------------------------------------------------------------ #
# Loop
# ------------------------------------------------------------------ #


def prompt(session: Session) -> str:
    """The input prompt, showing the active dictionary in yellow."""
    if not session.dictionary:
        return PROMPT
    text = f"{session.dictionary} {PROMPT}"
    if get_output().format != OutputFormat.RICH:
        return text
    # \001 and \002 tell readline the escape codes take no columns.
    return f"\001\033[33m\002{text}\001\033[0m\002"


def run_repl(
    session: Session,
    history_file: Optional[Path] = None,
    read_line: Callable[[str], str] = input,
) -> None:
    """Read and dispatch lines until ``.quit`` or end-of-input.

    Args:
        session: The session every command runs against.
        history_file: Where to persist input history; ``None`` keeps it in
            memory only.
        read_line: Line reader, :func:`input` by default.
    """
    limit = session.config.cmd_history_limit
    if history_file is not None:
        _trim_quietly(history_file, limit)
        _load_line_history(history_file, limit)

    if not session.config.api_key:
        notice(WELCOME_MESSAGE)
    notice("Type .help for more information.")

    try:
        while True:
            try:
                line = read_line(prompt(session))
            except EOFError:
                get_output().print_data("")
                break
            except KeyboardInterrupt:
                get_output().print_data("^C")
                break
            if not dispatch(session, line):
                break
    finally:
        if history_file is not None:
            _save_line_history(history_file)
            _trim_quietly(history_file, session.config.cmd_history_limit)


def _trim_quietly(history_file: Path, limit: int) -> None:
    try:
        trim_history_file(history_file, limit)
    except OSError as exc:
        logger.warning("could not trim history file %s: %s", history_file, exc)
