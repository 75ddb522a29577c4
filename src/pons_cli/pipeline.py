"""Lookup pipeline: cache-or-fetch, deserialise, render.

A lookup walks these states::

    NoDictSelected -> error
    CacheCheck -> CacheHit  -> Deserialize -> Render
               -> CacheMiss -> Fetch -> Deserialize -> Persist -> Render
    Fetch (HTTP 204) -> "No translation found"

Payloads are validated before they are persisted, so a malformed response
never lands in the cache. Persisting and recording the search history are
best-effort: their failures go to the log via :func:`best_effort` and never
abort the lookup.

All state a command needs -- loaded config, active dictionary, cache and
history handles -- lives on an explicit :class:`Session` passed to every
handler.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

import httpx
from pydantic import ValidationError

from pons_cli.cache import ResponseCache
from pons_cli.client import PonsClient
from pons_cli.exceptions import DeserializationError, InvalidUsageError
from pons_cli.history import HISTORY_DB_FILENAME, SearchHistory
from pons_cli.models import AppConfig, Dictionary, DictionaryList, LanguageBlock, TranslationResponse
from pons_cli.output import OutputFormat, debug, get_output
from pons_cli.render import render_translation

logger = logging.getLogger(__name__)

NO_TRANSLATION_MESSAGE = "No translation found"
DICTIONARY_LIST_LANGUAGE = "en"


@dataclass
class Session:
    """Everything a command handler needs, in one place.

    Attributes:
        config: The loaded configuration.
        cache: Response cache rooted at the cache directory.
        history: Search-history database, or ``None`` to skip recording.
        dictionary: Key of the active dictionary (``""`` when none is
            selected).
        transport: Optional httpx transport handed to every
            :class:`~pons_cli.client.PonsClient` (tests use
            :class:`httpx.MockTransport`).
    """

    config: AppConfig
    cache: ResponseCache
    history: Optional[SearchHistory] = None
    dictionary: str = ""
    transport: Optional[httpx.BaseTransport] = field(default=None, repr=False)

    def client(self) -> PonsClient:
        return PonsClient(self.config, transport=self.transport)

    def update_config(self, config: AppConfig) -> None:
        """Replace the config, keeping the cache TTL in step."""
        self.config = config
        self.cache = ResponseCache(self.cache.directory, config.cache_ttl)

    def close(self) -> None:
        if self.history is not None:
            self.history.close()


def open_session(
    config: AppConfig,
    cache_dir: Path,
    data_dir: Optional[Path] = None,
    dictionary: str = "",
) -> Session:
    """Build a :class:`Session` and sweep expired cache entries.

    Args:
        config: The loaded configuration.
        cache_dir: Root of the response cache.
        data_dir: Directory holding the history database; ``None`` disables
            search history.
        dictionary: Initially active dictionary key.

    Raises:
        ConfigError: If the history database cannot be opened.
    """
    cache = ResponseCache(cache_dir, config.cache_ttl)
    cache.sweep()
    history = None
    if data_dir is not None:
        history = SearchHistory(data_dir / HISTORY_DB_FILENAME)
    return Session(config=config, cache=cache, history=history, dictionary=dictionary)


def best_effort(action: Callable[[], object], description: str) -> bool:
    """Run a side effect whose failure must not fail the calling command.

    Any exception raised by *action* is logged as a warning and swallowed.

    Returns:
        ``True`` if the action completed.
    """
    try:
        action()
    except Exception as exc:
        logger.warning("could not %s: %s", description, exc)
        return False
    return True


# ------------------------------------------------------------------ #
# Deserialisation
# ------------------------------------------------------------------ #


def parse_translation(body: bytes) -> list[LanguageBlock]:
    """Deserialise a translation response.

    Raises:
        DeserializationError: If *body* is not a valid response document.
    """
    try:
        return TranslationResponse.validate_json(body)
    except ValidationError as exc:
        raise DeserializationError(f"could not unmarshal json: {_first_error(exc)}") from exc


def parse_dictionaries(body: bytes) -> list[Dictionary]:
    """Deserialise a dictionary-list response.

    Raises:
        DeserializationError: If *body* is not a valid dictionary list.
    """
    try:
        return DictionaryList.validate_json(body)
    except ValidationError as exc:
        raise DeserializationError(f"could not unmarshal json: {_first_error(exc)}") from exc


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    return f"{loc}: {first['msg']}" if loc else first["msg"]


# ------------------------------------------------------------------ #
# Dictionaries
# ------------------------------------------------------------------ #


def get_dictionaries(session: Session) -> list[Dictionary]:
    """Return the dictionary list, from cache when fresh.

    Raises:
        NetworkError: If the list has to be fetched and the request fails.
        DeserializationError: If the cached or fetched list is malformed.
    """
    path = session.cache.dictionaries_path()
    if session.cache.is_fresh(path):
        body = session.cache.read(path)
        if body is not None:
            debug(f"Cache hit: {path.name}")
            return parse_dictionaries(body)

    with session.client() as client:
        body = client.fetch_dictionaries(DICTIONARY_LIST_LANGUAGE)
    dictionaries = parse_dictionaries(body)
    best_effort(lambda: session.cache.write(path, body), "write cache file")
    return dictionaries


def bilingual_dictionaries(dictionaries: list[Dictionary]) -> list[Dictionary]:
    """Dictionaries translating between exactly two languages."""
    return [d for d in dictionaries if len(d.languages) == 2]


def select_dictionary(session: Session, key: str) -> Dictionary:
    """Make *key* the session's active dictionary.

    Raises:
        InvalidUsageError: If no dictionary has that key.
    """
    for dictionary in get_dictionaries(session):
        if dictionary.key == key:
            session.dictionary = key
            return dictionary
    raise InvalidUsageError(f"unknown dictionary key: {key}")


# ------------------------------------------------------------------ #
# Translations
# ------------------------------------------------------------------ #


def lookup_translation(session: Session, word: str) -> Optional[list[LanguageBlock]]:
    """Return the translations of *word* in the active dictionary.

    Serves fresh cache entries without touching the network; otherwise
    fetches, validates, and caches the response.

    Returns:
        The deserialised response, or ``None`` when the API has no
        translation for *word* (HTTP 204). Empty results are not cached.

    Raises:
        InvalidUsageError: If no dictionary is selected.
        NetworkError: If the request fails.
        DeserializationError: If the cached or fetched payload is malformed.
    """
    if not session.dictionary:
        raise InvalidUsageError("no dictionary selected. Use .dict <key> to select one")

    path = session.cache.translation_path(word, session.dictionary)
    if session.cache.is_fresh(path):
        body = session.cache.read(path)
        if body is not None:
            debug(f"Cache hit: {word} ({session.dictionary})")
            return parse_translation(body)

    with session.client() as client:
        body = client.fetch_translation(word, session.dictionary)
    if body is None:
        return None

    blocks = parse_translation(body)
    best_effort(lambda: session.cache.write(path, body), "write cache file")
    return blocks


def translate(session: Session, word: str) -> Optional[list[LanguageBlock]]:
    """Look up *word*, print the result, and record the search.

    In JSON output mode the deserialised response is printed instead of the
    table view.

    Returns:
        The response that was printed, or ``None`` if nothing was found.
    """
    blocks = lookup_translation(session, word)
    output = get_output()
    if output.format == OutputFormat.JSON:
        output.print_json([] if blocks is None else [block.model_dump() for block in blocks])
    elif blocks is None:
        output.print_data(NO_TRANSLATION_MESSAGE)
    else:
        render_translation(blocks, session.dictionary, output.console)
    if blocks is None:
        return None

    history = session.history
    if history is not None:
        best_effort(lambda: history.add(word, session.dictionary), "add search history")
    return blocks
