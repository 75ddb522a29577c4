"""Shared test fixtures for pons-cli.

Provides sample API payloads, isolated config environments, output
managers, and a session factory wired to an :class:`httpx.MockTransport`.
These fixtures are automatically discovered by pytest and available to
all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import pytest

from pons_cli.cache import ResponseCache
from pons_cli.history import SearchHistory
from pons_cli.models import AppConfig
from pons_cli.output import OutputFormat, OutputManager, reset_output, set_output
from pons_cli.pipeline import Session


DICTIONARIES: list[dict[str, Any]] = [
    {
        "key": "ende",
        "simple_label": "English « German",
        "dictionary": "English «» German",
        "languages": ["en", "de"],
    },
    {
        "key": "dede",
        "simple_label": "German",
        "languages": ["de"],
    },
    {
        "key": "enfr",
        "simple_label": "English « French",
        "languages": ["en", "fr"],
    },
]

TRANSLATION: list[dict[str, Any]] = [
    {
        "lang": "en",
        "hits": [
            {
                "type": "entry",
                "opendict": False,
                "roms": [
                    {
                        "headword": "house",
                        "headword_full": "house <span class=\"phonetics\">[haʊs]</span>",
                        "wordclass": "noun",
                        "arabs": [
                            {
                                "header": "1. house <span class=\"sense\">(building)</span>:",
                                "translations": [
                                    {
                                        "source": "<strong class=\"headword\">house</strong>",
                                        "target": "Haus <span class=\"genus\"><acronym title=\"neuter\">nt</acronym></span>",
                                    },
                                ],
                            },
                        ],
                    },
                    {
                        "headword": "house",
                        "wordclass": "verb",
                        "arabs": [
                            {
                                "header": "",
                                "translations": [
                                    {"source": "to house sb", "target": "jdn unterbringen"},
                                ],
                            },
                        ],
                    },
                ],
            },
            {
                "type": "translation",
                "source": "in the <b>house</b>",
                "target": "im Haus",
            },
        ],
    },
]


def json_bytes(data: Any) -> bytes:
    return json.dumps(data).encode("utf-8")


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    Resetting forces a fresh manager to be created on next use.
    """
    monkeypatch.setenv("COLUMNS", "80")
    monkeypatch.delenv("NO_COLOR", raising=False)
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Payload fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def translation_body() -> bytes:
    """A translation response for ``house`` in ``ende``."""
    return json_bytes(TRANSLATION)


@pytest.fixture
def dictionaries_body() -> bytes:
    """A dictionary-list response with two bilingual dictionaries."""
    return json_bytes(DICTIONARIES)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME, XDG_CACHE_HOME, and XDG_DATA_HOME to
    subdirectories of tmp_path so that tests never touch real user
    config, and forces XDG path resolution on every platform.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("pons_cli.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def plain_output(capsys: pytest.CaptureFixture[str]) -> OutputManager:
    """Install a PLAIN-format OutputManager writing to the captured streams."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output(capsys: pytest.CaptureFixture[str]) -> OutputManager:
    """Install a JSON-format OutputManager writing to the captured streams."""
    output = OutputManager(format=OutputFormat.JSON, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Session fixtures
# ---------------------------------------------------------------------------


class FakeApi:
    """Answers PONS API requests from canned bodies and records every request."""

    def __init__(
        self,
        translation: Optional[bytes] = None,
        dictionaries: Optional[bytes] = None,
        translation_status: int = 200,
    ) -> None:
        self.translation = translation
        self.dictionaries = dictionaries
        self.translation_status = translation_status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/dictionaries"):
            return httpx.Response(200, content=self.dictionaries or b"[]")
        if self.translation is None:
            return httpx.Response(204)
        return httpx.Response(self.translation_status, content=self.translation)

    def count(self, endpoint: str) -> int:
        return sum(1 for r in self.requests if r.url.path.endswith(f"/{endpoint}"))


@pytest.fixture
def make_session(tmp_path: Path) -> Callable[..., Session]:
    """Factory building a :class:`Session` backed by *tmp_path* and a fake API."""
    sessions: list[Session] = []

    def _make(
        api: FakeApi,
        dictionary: str = "ende",
        cache_ttl: int = 604800,
        history: bool = True,
    ) -> Session:
        config = AppConfig(api_key="secret", cache_ttl=cache_ttl, max_retries=0)
        session = Session(
            config=config,
            cache=ResponseCache(tmp_path / "cache", config.cache_ttl),
            history=SearchHistory(":memory:") if history else None,
            dictionary=dictionary,
            transport=httpx.MockTransport(api),
        )
        sessions.append(session)
        return session

    yield _make
    for session in sessions:
        session.close()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
