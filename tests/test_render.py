"""Tests for terminal rendering: Roman numerals, markup stripping, layout."""

from __future__ import annotations

from io import StringIO

import pytest
from rich.console import Console

from pons_cli.models import TranslationResponse
from pons_cli.render import (
    new_table,
    render_translation,
    strip_markup,
    target_language,
    terminal_half_width,
    to_roman,
)

from conftest import TRANSLATION, json_bytes


def _console() -> tuple[Console, StringIO]:
    buffer = StringIO()
    return Console(file=buffer, width=80, no_color=True, highlight=False), buffer


# ------------------------------------------------------------------ #
# Roman numerals
# ------------------------------------------------------------------ #


class TestToRoman:
    @pytest.mark.parametrize(
        "number, expected",
        [
            (1, "I"),
            (2, "II"),
            (4, "IV"),
            (9, "IX"),
            (14, "XIV"),
            (40, "XL"),
            (90, "XC"),
            (400, "CD"),
            (1994, "MCMXCIV"),
            (3999, "MMMCMXCIX"),
        ],
    )
    def test_conversion(self, number: int, expected: str) -> None:
        assert to_roman(number) == expected


# ------------------------------------------------------------------ #
# Markup stripping
# ------------------------------------------------------------------ #


class TestStripMarkup:
    def test_concatenates_text_nodes(self) -> None:
        assert strip_markup("<b>Hello</b> <i>World</i>") == "Hello World"

    def test_nested_tags_and_attributes(self) -> None:
        fragment = 'Haus <span class="genus"><acronym title="neuter">nt</acronym></span>'
        assert strip_markup(fragment) == "Haus nt"

    def test_plain_text_unchanged(self) -> None:
        assert strip_markup("just words") == "just words"

    def test_empty_string(self) -> None:
        assert strip_markup("") == ""

    def test_decodes_entities(self) -> None:
        assert strip_markup("salt &amp; pepper") == "salt & pepper"

    def test_drops_comments(self) -> None:
        assert strip_markup("a<!-- hidden -->b") == "ab"

    def test_unterminated_tag_returns_original(self) -> None:
        assert strip_markup("<b>Hello</b> <i") == "<b>Hello</b> <i"

    def test_unterminated_attribute_returns_original(self) -> None:
        fragment = '<span class="genus'
        assert strip_markup(fragment) == fragment

    def test_bare_less_than_is_text(self) -> None:
        assert strip_markup("a < b") == "a < b"


# ------------------------------------------------------------------ #
# Header labels and layout
# ------------------------------------------------------------------ #


class TestTargetLanguage:
    def test_removes_source_language(self) -> None:
        assert target_language("ende", "en") == "DE"

    def test_source_second(self) -> None:
        assert target_language("ende", "de") == "EN"

    def test_removes_first_occurrence_only(self) -> None:
        assert target_language("dede", "de") == "DE"


class TestLayout:
    def test_half_width_follows_terminal(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COLUMNS", "120")
        assert terminal_half_width() == 60

    def test_table_columns_are_half_width(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("pons_cli.render.terminal_half_width", lambda: 30)
        table = new_table([("a", "b")])
        assert len(table.columns) == 2
        assert all(column.width == 30 for column in table.columns)
        assert table.show_header is False

    def test_table_cells_are_stripped(self) -> None:
        console, buffer = _console()
        console.print(new_table([("<b>house</b>", "Haus <i>nt</i>")]))
        output = buffer.getvalue()
        assert "house" in output
        assert "Haus nt" in output
        assert "<b>" not in output


# ------------------------------------------------------------------ #
# Full rendering
# ------------------------------------------------------------------ #


class TestRenderTranslation:
    @pytest.fixture
    def rendered(self, monkeypatch: pytest.MonkeyPatch) -> str:
        monkeypatch.setattr("pons_cli.render.terminal_half_width", lambda: 40)
        console, buffer = _console()
        blocks = TranslationResponse.validate_json(json_bytes(TRANSLATION))
        render_translation(blocks, "ende", console)
        return buffer.getvalue()

    def test_block_header(self, rendered: str) -> None:
        assert "EN > DE" in rendered

    def test_headwords_numbered_in_roman(self, rendered: str) -> None:
        assert "I. house" in rendered
        assert "II. house" in rendered

    def test_sense_header_stripped(self, rendered: str) -> None:
        assert "1. house (building):" in rendered

    def test_translation_pairs(self, rendered: str) -> None:
        assert "Haus nt" in rendered
        assert "jdn unterbringen" in rendered

    def test_hit_without_headwords_uses_own_pair(self, rendered: str) -> None:
        assert "in the house" in rendered
        assert "im Haus" in rendered

    def test_order_follows_response(self, rendered: str) -> None:
        positions = [
            rendered.index("EN > DE"),
            rendered.index("I. house"),
            rendered.index("Haus nt"),
            rendered.index("II. house"),
            rendered.index("jdn unterbringen"),
            rendered.index("im Haus"),
        ]
        assert positions == sorted(positions)

    def test_same_input_renders_identically(self, monkeypatch: pytest.MonkeyPatch, rendered: str) -> None:
        console, buffer = _console()
        blocks = TranslationResponse.validate_json(json_bytes(TRANSLATION))
        render_translation(blocks, "ende", console)
        assert buffer.getvalue() == rendered

    def test_empty_response_prints_blank_line(self) -> None:
        console, buffer = _console()
        render_translation([], "ende", console)
        assert buffer.getvalue() == "\n"
