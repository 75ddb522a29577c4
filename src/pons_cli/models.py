"""Canonical Pydantic models shared across all pons-cli modules.

The models fall into three groups:

**Configuration** -- serialised as JSON in the user's config directory:
    :class:`AppConfig`.

**API payloads** -- deserialised from the PONS dictionary API:
    :class:`Dictionary` (one entry of the dictionary list) and the nested
    translation document :class:`LanguageBlock` -> :class:`Hit` ->
    :class:`Rom` -> :class:`Arab` -> :class:`TranslationPair`. A whole
    translation response is a ``list[LanguageBlock]``; use
    :data:`TranslationResponse` to validate one.

**Local records**:
    :class:`HistoryEntry` rows of the search-history database.

Payload models ignore unknown fields and default missing ones to empty
strings and lists, so partial API documents still render.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

DEFAULT_BASE_URL = "https://api.pons.com/v1/"
DEFAULT_CACHE_TTL = 604800  # 7 days
DEFAULT_CMD_HISTORY_LIMIT = 100


# --- Configuration ---


class AppConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/pons-cli/config.json``.

    Loaded and saved by :func:`~pons_cli.config.load_config` and
    :func:`~pons_cli.config.save_config`. Every field can be changed from
    the REPL with ``.set <field> <value>``.
    """

    api_key: str = Field(default="", description="PONS API secret sent as X-Secret")
    cache_ttl: int = Field(
        default=DEFAULT_CACHE_TTL, description="Cache TTL in seconds"
    )
    cmd_history_limit: int = Field(
        default=DEFAULT_CMD_HISTORY_LIMIT,
        description="Lines of REPL input history to keep",
    )
    base_url: str = Field(default=DEFAULT_BASE_URL, description="API base URL")
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    max_retries: int = Field(
        default=2, description="Retries on network errors and 5xx responses"
    )

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return value


# --- API payloads ---


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


class Dictionary(_Payload):
    """One dictionary offered by the API, e.g. ``ende`` (English <-> German)."""

    key: str
    label: str = Field(default="", alias="simple_label")
    languages: list[str] = Field(default_factory=list)


class TranslationPair(_Payload):
    source: str = ""
    target: str = ""


class Arab(_Payload):
    """A sense group under a headword."""

    header: str = ""
    translations: list[TranslationPair] = Field(default_factory=list)


class Rom(_Payload):
    """A headword grouping one or more sense groups."""

    headword: str = ""
    arabs: list[Arab] = Field(default_factory=list)


class Hit(_Payload):
    """One match record.

    When ``roms`` is non-empty the hit's own ``source`` and ``target`` are
    unused and rendering descends into the headword groups instead.
    """

    roms: list[Rom] = Field(default_factory=list)
    source: str = ""
    target: str = ""


class LanguageBlock(_Payload):
    lang: str = ""
    hits: list[Hit] = Field(default_factory=list)


TranslationResponse = TypeAdapter(list[LanguageBlock])
"""Validator for a full translation response (a JSON array of language blocks)."""

DictionaryList = TypeAdapter(list[Dictionary])
"""Validator for the dictionary-list response."""


# --- Local records ---


class HistoryEntry(BaseModel):
    """A single row of the search history."""

    term: str
    dictionary: str
    date: datetime
