"""pons-cli -- Look up words in the PONS online dictionaries from a terminal.

Running ``pons`` with no sub-command starts an interactive prompt. Pick a
dictionary, then type words to translate them::

    $ pons
    >>> .set api_key <your_api_key>
    >>> .dict ende
    ende >>> house

Responses are cached on disk for a week and every lookup is recorded in a
local search history. One-shot sub-commands (``pons translate``,
``pons dicts``, ``pons history``, ``pons config``) expose the same
operations to scripts.

Modules:
    app: Typer application and CLI entry point.
    repl: Interactive loop and dot-command dispatch.
    pipeline: Cache-or-fetch lookups and the :class:`~pons_cli.pipeline.Session`.
    render: Terminal rendering, markup stripping, Roman numerals.
    models: Pydantic models for config and API payloads.
    config: XDG-aware directories and the JSON config file.
    history: SQLite search history.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
