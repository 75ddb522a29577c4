"""Search history stored in a local SQLite database.

Every successful lookup appends a ``(term, dictionary, date)`` row to the
``search_history`` table in ``<data_dir>/pons-cli.db``. The REPL's
``.history`` command and ``pons history`` list the rows newest first.

Appending is a best-effort side effect of a lookup; see
:func:`~pons_cli.pipeline.best_effort`.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional

from pons_cli.exceptions import ConfigError, HistoryError
from pons_cli.models import HistoryEntry

HISTORY_DB_FILENAME = "pons-cli.db"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS search_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    searched_term TEXT NOT NULL,
    dict TEXT NOT NULL,
    date TEXT NOT NULL
)
"""


class SearchHistory:
    """Append-only log of searched terms.

    Args:
        path: SQLite database file, created if missing. ``":memory:"`` is
            accepted for tests.

    Raises:
        ConfigError: If the database cannot be opened or initialised.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = str(path)
        try:
            self._conn: Optional[sqlite3.Connection] = sqlite3.connect(self._path)
            self._conn.execute(_SCHEMA)
            self._conn.commit()
        except sqlite3.Error as exc:
            raise ConfigError(f"could not open history database {self._path}: {exc}") from exc

    def __enter__(self) -> SearchHistory:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def add(self, term: str, dictionary: str, date: Optional[datetime] = None) -> None:
        """Record a search. *date* defaults to now and is stored to the second.

        Raises:
            HistoryError: If the row cannot be written.
        """
        if date is None:
            date = datetime.now()
        conn = self._connection()
        try:
            conn.execute(
                "INSERT INTO search_history(searched_term, dict, date) VALUES(?, ?, ?)",
                (term, dictionary, date.strftime(DATE_FORMAT)),
            )
            conn.commit()
        except sqlite3.Error as exc:
            raise HistoryError(f"could not write search history: {exc}") from exc

    def entries(self, limit: Optional[int] = None) -> list[HistoryEntry]:
        """Return recorded searches, newest first.

        Raises:
            HistoryError: If the table cannot be read or holds a malformed date.
        """
        query = "SELECT searched_term, dict, date FROM search_history ORDER BY date DESC, id DESC"
        params: tuple = ()
        if limit is not None:
            query += " LIMIT ?"
            params = (limit,)
        try:
            rows = self._connection().execute(query, params).fetchall()
            return [
                HistoryEntry(term=term, dictionary=dictionary, date=datetime.fromisoformat(date))
                for term, dictionary, date in rows
            ]
        except (sqlite3.Error, ValueError, TypeError) as exc:
            raise HistoryError(f"could not read search history: {exc}") from exc

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _connection(self) -> sqlite3.Connection:
        assert self._conn is not None, "history database is closed"
        return self._conn
