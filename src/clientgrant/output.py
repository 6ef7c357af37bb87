"""Terminal output for the clientgrant CLI, and its only logging layer.

Results (token responses, request previews, profile listings) go to
stdout so they can be piped into other tools. Everything else, from
progress notes to ``--verbose`` request tracing, goes to stderr.

Results are rendered in one of three formats: JSON (``--json``),
tab-separated text (``--plain``, or whenever stdout is not a terminal) and
Rich syntax highlighting / tables on an interactive terminal. ``NO_COLOR``,
``TERM=dumb`` and ``--no-color`` turn styling off.

Commands do not hold an :class:`OutputManager`; they call the module-level
:func:`info`, :func:`error`, :func:`debug` ... which forward to the
instance installed by :func:`~clientgrant.app.main_callback`.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text


class OutputFormat(str, Enum):
    """How results are printed. ``AUTO`` picks ``RICH`` or ``PLAIN``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Routes results to stdout and diagnostics to stderr.

    Args:
        format: Result format; ``AUTO`` means Rich on a colour terminal,
            plain text otherwise.
        no_color: Never style anything.
        quiet: Drop :meth:`info` and :meth:`success` messages.
        verbose: Show :meth:`debug` messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            rich_ok = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    # --- results (stdout) ---

    def format_response(self, data: Any) -> None:
        """Print a JSON-compatible value, typically a ``model_dump(mode="json")``."""
        if self._format == OutputFormat.PLAIN:
            self._print_plain(data)
            return

        text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self._format == OutputFormat.JSON:
            self.print_data(text)
        else:
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))

    def print_data(self, text: str) -> None:
        """Print *text* verbatim, bypassing Rich."""
        print(text, file=sys.stdout, flush=True)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as a list of JSON objects, TSV lines, or a Rich table."""
        if self._format == OutputFormat.JSON:
            self.print_data(
                json.dumps([dict(zip(headers, row)) for row in rows], indent=2, ensure_ascii=False)
            )
            return

        if self._format == OutputFormat.PLAIN:
            for line in (headers, *rows):
                self.print_data("\t".join(line))
            return

        table = Table(*headers, title=title, header_style="bold cyan")
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    def _print_plain(self, data: Any) -> None:
        if isinstance(data, dict):
            for key, value in data.items():
                self.print_data(f"{key}\t{'' if value is None else value}")
        elif isinstance(data, list):
            for item in data:
                self.print_data(str(item))
        else:
            self.print_data(str(data))

    # --- diagnostics (stderr) ---

    def info(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message, style="green")

    def warning(self, message: str) -> None:
        """Shown even with ``--quiet``."""
        self._diagnostic(message, prefix="Warning:", style="yellow")

    def error(self, message: str) -> None:
        """Shown even with ``--quiet``."""
        self._diagnostic(message, prefix="Error:", style="bold red")

    def debug(self, message: str) -> None:
        """Request tracing; only with ``--verbose``. Never pass secrets here."""
        if self._verbose:
            self._diagnostic(message, prefix="[debug]", style="dim")

    def _diagnostic(self, message: str, prefix: str = "", style: str = "") -> None:
        if self._no_color:
            print(f"{prefix} {message}" if prefix else message, file=sys.stderr, flush=True)
        elif prefix:
            self._stderr.print(Text.assemble((prefix, style), " ", message))
        else:
            self._stderr.print(Text(message, style=style))


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """``NO_COLOR`` set to anything, or ``TERM=dumb`` (see https://no-color.org)."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# --- global instance ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """The installed :class:`OutputManager`; a default one if none was set."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (tests use this between runs)."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_data(text: str) -> None:
    get_output().print_data(text)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
