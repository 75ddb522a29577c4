"""Terminal rendering of translation responses.

:func:`render_translation` walks the nested response model (language block
-> hit -> headword group -> sense group -> translation pair) and prints it
as coloured headings followed by borderless two-column tables, each column
half the terminal width.

Text fields from the API carry inline HTML (``<span class="genus">``,
``<acronym>``, ...); :func:`strip_markup` reduces them to plain text before
they reach the table.
"""

from __future__ import annotations

import re
import shutil
import warnings
from typing import Iterable

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning, ParserRejectedMarkup
from rich.console import Console
from rich.table import Table
from rich.text import Text

from pons_cli.models import LanguageBlock

# Single words like "etc." look like file names to BeautifulSoup.
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)

_ROMAN_NUMERALS = (
    (1000, "M"),
    (900, "CM"),
    (500, "D"),
    (400, "CD"),
    (100, "C"),
    (90, "XC"),
    (50, "L"),
    (40, "XL"),
    (10, "X"),
    (9, "IX"),
    (5, "V"),
    (4, "IV"),
    (1, "I"),
)

# A tag opened at the end of the fragment and never closed with ">".
_UNTERMINATED_TAG = re.compile(r"<[A-Za-z!/?][^>]*$")

DEFAULT_TERMINAL_WIDTH = 80


def to_roman(number: int) -> str:
    """Return *number* (a positive 1-based index) in Roman numerals."""
    parts = []
    for value, symbol in _ROMAN_NUMERALS:
        while number >= value:
            number -= value
            parts.append(symbol)
    return "".join(parts)


def strip_markup(fragment: str) -> str:
    """Return the text content of an HTML fragment.

    Text nodes are concatenated in document order; tags, attributes and
    comments are dropped and character references are decoded. If the
    fragment cannot be parsed (including a tag left unterminated at the
    end) the original string is returned unchanged.

    Example::

        >>> strip_markup("<b>Hello</b> <i>World</i>")
        'Hello World'
    """
    if _UNTERMINATED_TAG.search(fragment):
        return fragment
    try:
        soup = BeautifulSoup(fragment, "html.parser")
    except ParserRejectedMarkup:
        return fragment
    return soup.get_text()


def target_language(dictionary: str, source_lang: str) -> str:
    """Derive the target-language label shown in a block header.

    The first occurrence of *source_lang* is removed from the dictionary
    key and the rest is uppercased: ``("ende", "en") -> "DE"``.
    """
    return dictionary.replace(source_lang, "", 1).upper()


def terminal_half_width() -> int:
    """Half the terminal width, falling back to an 80-column terminal."""
    columns = shutil.get_terminal_size(fallback=(DEFAULT_TERMINAL_WIDTH, 24)).columns
    if columns <= 0:
        columns = DEFAULT_TERMINAL_WIDTH
    return columns // 2


def new_table(rows: Iterable[tuple[str, str]]) -> Table:
    """Build a borderless two-column table with each column at half width."""
    half = terminal_half_width()
    table = Table(
        show_header=False,
        show_edge=False,
        show_lines=False,
        box=None,
        padding=0,
        pad_edge=False,
    )
    table.add_column(width=half, min_width=half, max_width=half, overflow="fold")
    table.add_column(width=half, min_width=half, max_width=half, overflow="fold")
    for source, target in rows:
        table.add_row(Text(strip_markup(source)), Text(strip_markup(target)))
    return table


def render_translation(
    blocks: list[LanguageBlock],
    dictionary: str,
    console: Console,
) -> None:
    """Print a translation response.

    Args:
        blocks: The deserialised response.
        dictionary: Key of the dictionary the lookup ran against; used for
            the ``EN > DE`` block headers.
        console: Destination console (the stdout console in the CLI).
    """
    for block in blocks:
        header = f"\n{block.lang.upper()} > {target_language(dictionary, block.lang)}"
        console.print(Text(header, style="bold red"))
        for hit in block.hits:
            if hit.roms:
                for index, rom in enumerate(hit.roms, start=1):
                    console.print(Text(f"\n{to_roman(index)}. {rom.headword}", style="bold yellow"))
                    for arab in rom.arabs:
                        console.print(Text(strip_markup(arab.header), style="green"))
                        console.print(
                            new_table((t.source, t.target) for t in arab.translations)
                        )
            else:
                console.print(new_table([(hit.source, hit.target)]))
    console.print()
