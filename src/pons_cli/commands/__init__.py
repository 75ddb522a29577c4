"""Built-in CLI sub-commands for pons-cli.

This package groups the Typer sub-command modules that give one-shot
access to what the REPL does interactively:

* :mod:`~pons_cli.commands.lookup` -- ``translate``, ``dicts`` and
  ``history``.
* :mod:`~pons_cli.commands.config` -- view and modify settings.

Both build a :class:`~pons_cli.pipeline.Session` with :func:`cli_session`
and turn :class:`~pons_cli.exceptions.PonsError` into an exit code with
:func:`cli_errors`.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

import typer

from pons_cli.config import get_cache_dir, get_data_dir, load_config
from pons_cli.exceptions import PonsError
from pons_cli.output import error
from pons_cli.pipeline import Session, open_session, select_dictionary


@contextmanager
def cli_errors() -> Iterator[None]:
    """Print a :class:`~pons_cli.exceptions.PonsError` and exit with its code."""
    try:
        yield
    except PonsError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


@contextmanager
def cli_session(dictionary: Optional[str] = None) -> Iterator[Session]:
    """Open a session on the user's config, cache and data directories.

    When *dictionary* is given it is validated against the dictionary list
    and made active. The session is closed on exit.
    """
    session = open_session(load_config(), get_cache_dir(), get_data_dir())
    try:
        if dictionary:
            select_dictionary(session, dictionary)
        yield session
    finally:
        session.close()
