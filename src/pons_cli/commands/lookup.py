"""Lookup commands -- translate a word, list dictionaries, show history.

One-shot equivalents of the REPL's default path, ``.dict`` and
``.history``. They share the REPL's handlers so both surfaces print the
same thing.
"""

from __future__ import annotations

from typing import Optional

import typer

from pons_cli.commands import cli_errors, cli_session
from pons_cli.pipeline import translate
from pons_cli.repl import handle_dict, handle_history


def translate_command(
    ctx: typer.Context,
    words: list[str] = typer.Argument(help="Word or phrase to translate."),
    dictionary: Optional[str] = typer.Option(
        None, "--dict", "-d", help="Dictionary key, e.g. 'ende'."
    ),
) -> None:
    """Translate a word or phrase.

    Uses the dictionary given with ``--dict`` here or on the root command.

    Example::

        pons translate house --dict ende
        pons --json translate house -d ende
    """
    dictionary = dictionary or (ctx.obj or {}).get("dictionary")
    with cli_errors(), cli_session(dictionary) as session:
        translate(session, " ".join(words))


def dicts_command() -> None:
    """List the available two-language dictionaries.

    Example::

        pons dicts
    """
    with cli_errors(), cli_session() as session:
        handle_dict(session, [])


def history_command() -> None:
    """Show past searches, newest first.

    Example::

        pons history
    """
    with cli_errors(), cli_session() as session:
        handle_history(session, [])
