"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet mode suppression rules
- Verbose mode debug output
- print_table in all three modes
- Global instance management
"""

from __future__ import annotations

import json

import pytest

from pons_cli import output as output_module
from pons_cli.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture(autouse=True)
def _reset_global_output():
    """Ensure the global output instance is reset between tests."""
    reset_output()
    yield
    reset_output()


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("pons_cli.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("pons_cli.output._is_tty", lambda: True)


# ------------------------------------------------------------------ #
# OutputFormat resolution
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.RICH

    def test_no_color_flag_forces_plain(self, tty, monkeypatch):
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager(format=OutputFormat.AUTO, no_color=True).format == OutputFormat.PLAIN

    def test_explicit_json_stays_json(self, tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    def test_no_color_env_any_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb_disables_color(self, monkeypatch):
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# stdout vs stderr discipline
# ------------------------------------------------------------------ #


class TestStdoutStderrDiscipline:
    @pytest.fixture()
    def mgr(self, capfd, non_tty) -> OutputManager:
        return OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)

    def test_print_data_goes_to_stdout(self, mgr, capfd):
        mgr.print_data("No translation found")
        captured = capfd.readouterr()
        assert captured.out == "No translation found\n"
        assert captured.err == ""

    @pytest.mark.parametrize("method", ["info", "notice", "success", "error", "debug"])
    def test_diagnostics_go_to_stderr(self, mgr, capfd, method):
        getattr(mgr, method)("diagnostic text")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "diagnostic text" in captured.err

    def test_error_prefix(self, mgr, capfd):
        mgr.error("bad status code: 500")
        assert capfd.readouterr().err == "Error: bad status code: 500\n"

    def test_rich_error_does_not_interpret_markup(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH)
        mgr.error("unknown dictionary key: [bold]x[/bold]")
        assert "[bold]x[/bold]" in capfd.readouterr().err


class TestQuietVerbose:
    def test_quiet_suppresses_informational(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.info("info")
        mgr.notice("notice")
        mgr.success("success")
        assert capfd.readouterr().err == ""

    def test_quiet_keeps_errors(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.error("broken")
        assert capfd.readouterr().err == "Error: broken\n"

    def test_debug_hidden_without_verbose(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).debug("Cache hit: house")
        assert capfd.readouterr().err == ""

    def test_debug_shown_with_verbose(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True).debug("Cache hit: house")
        assert "[debug] Cache hit: house" in capfd.readouterr().err


# ------------------------------------------------------------------ #
# Tables and JSON
# ------------------------------------------------------------------ #


class TestPrintTable:
    HEADERS = ["Searched Term", "Dictionary", "Date"]
    ROWS = [["house", "ende", "2024-01-01 10:00:00"]]

    def test_plain_is_tab_separated(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).print_table(self.HEADERS, self.ROWS)
        assert capfd.readouterr().out.splitlines() == [
            "Searched Term\tDictionary\tDate",
            "house\tende\t2024-01-01 10:00:00",
        ]

    def test_json_is_list_of_records(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).print_table(self.HEADERS, self.ROWS)
        assert json.loads(capfd.readouterr().out) == [
            {"Searched Term": "house", "Dictionary": "ende", "Date": "2024-01-01 10:00:00"}
        ]

    def test_rich_renders_headers_and_cells(self, capfd, non_tty):
        OutputManager(format=OutputFormat.RICH).print_table(self.HEADERS, self.ROWS, title="History")
        out = capfd.readouterr().out
        assert "Searched Term" in out
        assert "house" in out

    def test_print_json_keeps_unicode(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).print_json({"label": "English « German"})
        assert "«" in capfd.readouterr().out


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_creates_default(self):
        assert isinstance(get_output(), OutputManager)

    def test_set_output_replaces_instance(self):
        mgr = OutputManager(format=OutputFormat.JSON)
        set_output(mgr)
        assert get_output() is mgr

    def test_convenience_functions_delegate(self, capfd, non_tty):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        output_module.print_data("data")
        output_module.error("oops")
        captured = capfd.readouterr()
        assert captured.out == "data\n"
        assert captured.err == "Error: oops\n"
