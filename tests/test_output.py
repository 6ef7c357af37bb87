"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline, quiet and verbose modes
- JSON and plain rendering of data and tables
- Global instance management
"""

from __future__ import annotations

import json

import pytest

from clientgrant import output as output_module
from clientgrant.output import (
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
    reset_output()
    yield
    reset_output()


@pytest.fixture()
def non_tty(monkeypatch):
    monkeypatch.setattr("clientgrant.output._is_tty", lambda: False)


@pytest.fixture()
def clean_env(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("TERM", raising=False)


# ------------------------------------------------------------------ #
# Format resolution and colour
# ------------------------------------------------------------------ #


class TestFormatResolution:
    def test_auto_resolves_plain_when_piped(self, non_tty, clean_env):
        assert OutputManager().format == OutputFormat.PLAIN

    def test_auto_resolves_rich_on_tty(self, monkeypatch, clean_env):
        monkeypatch.setattr("clientgrant.output._is_tty", lambda: True)
        assert OutputManager().format == OutputFormat.RICH

    def test_auto_resolves_plain_on_tty_without_color(self, monkeypatch, clean_env):
        monkeypatch.setattr("clientgrant.output._is_tty", lambda: True)
        assert OutputManager(no_color=True).format == OutputFormat.PLAIN

    def test_explicit_format_kept(self, non_tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    def test_no_color_env(self, monkeypatch, clean_env):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch, clean_env):
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_default_enabled(self, clean_env):
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# Stream discipline
# ------------------------------------------------------------------ #


class TestDiagnostics:
    def test_info_goes_to_stderr(self, capsys, non_tty):
        OutputManager(no_color=True).info("hello")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "hello" in captured.err

    def test_quiet_suppresses_info_not_errors(self, capsys, non_tty):
        out = OutputManager(no_color=True, quiet=True)
        out.info("info")
        out.success("done")
        out.warning("careful")
        out.error("broken")
        err = capsys.readouterr().err
        assert "info" not in err
        assert "done" not in err
        assert "Warning: careful" in err
        assert "Error: broken" in err

    def test_styled_messages_are_not_markup(self, capsys, non_tty, clean_env):
        out = OutputManager()
        out.warning("scope [admin] was narrowed")
        out.error("unexpected_status: token endpoint answered HTTP 401")
        err = capsys.readouterr().err
        assert "Warning: scope [admin] was narrowed" in err
        assert "Error: unexpected_status: token endpoint answered HTTP 401" in err

    def test_debug_only_when_verbose(self, capsys, non_tty):
        OutputManager(no_color=True).debug("hidden")
        OutputManager(no_color=True, verbose=True).debug("shown")
        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "[debug] shown" in err


class TestDataOutput:
    def test_json_format(self, capsys, non_tty):
        OutputManager(format=OutputFormat.JSON).format_response({"token_type": "Bearer"})
        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"token_type": "Bearer"}
        assert captured.err == ""

    def test_plain_format_dict(self, capsys, non_tty):
        OutputManager(format=OutputFormat.PLAIN).format_response(
            {"token_type": "Bearer", "expires_in": None}
        )
        assert capsys.readouterr().out == "token_type\tBearer\nexpires_in\t\n"

    def test_table_json(self, capsys, non_tty):
        OutputManager(format=OutputFormat.JSON).print_table(["name", "url"], [["a", "u"]])
        assert json.loads(capsys.readouterr().out) == [{"name": "a", "url": "u"}]

    def test_table_plain(self, capsys, non_tty):
        OutputManager(format=OutputFormat.PLAIN).print_table(["name", "url"], [["a", "u"]])
        assert capsys.readouterr().out == "name\turl\na\tu\n"


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_is_lazy_singleton(self, non_tty):
        first = get_output()
        assert get_output() is first

    def test_set_output_used_by_helpers(self, capsys, non_tty):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        output_module.print_data("data")
        output_module.error("oops")
        captured = capsys.readouterr()
        assert captured.out == "data\n"
        assert "Error: oops" in captured.err
