"""The ``clientgrant`` command: global options plus the ``token`` and ``profile`` groups.

``clientgrant [--profile NAME] [--json | --plain] [-q | -v] <group> <command>``

:func:`main_callback` turns the global options into the process-wide
:class:`~clientgrant.output.OutputManager` and remembers ``--profile`` for
the sub-commands in ``ctx.obj``.

:func:`main` is the console script. An error that escapes a command ends
the process with one ``Error:`` line on stderr. A
:class:`~clientgrant.exceptions.ClientGrantError` exits with its own code;
any other exception is a bug, and its traceback is saved under
:func:`~clientgrant.config.get_log_dir` so it can be attached to a report.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer

from clientgrant import __version__
from clientgrant.commands.profile import profile_app
from clientgrant.commands.token import token_app
from clientgrant.exceptions import ClientGrantError
from clientgrant.exit_codes import EXIT_CANCELLED, EXIT_GENERIC_FAILURE
from clientgrant.output import OutputFormat, OutputManager, error, set_output


app = typer.Typer(
    name="clientgrant",
    help="Request OAuth 2.0 access tokens with the client credentials grant.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.add_typer(token_app, name="token", help="Fetch an access token or preview the request.")
app.add_typer(profile_app, name="profile", help="Manage saved token endpoint profiles.")


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"clientgrant {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", callback=_show_version, is_eager=True, help="Print the version."
    ),
    profile: Optional[str] = typer.Option(
        None,
        "--profile",
        "-p",
        help="Profile to use; overrides $CLIENTGRANT_PROFILE and the default profile.",
    ),
    json_output: bool = typer.Option(False, "--json", help="Print results as JSON."),
    plain_output: bool = typer.Option(
        False, "--plain", help="Print results as tab-separated text."
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Turn off colours and styling."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only print results, warnings and errors."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Trace the token request on stderr."
    ),
) -> None:
    """Request OAuth 2.0 access tokens with the client credentials grant."""
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = OutputFormat.AUTO
    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile


def _cancel(*_: Any) -> NoReturn:
    sys.stderr.write("\nCancelled.\n")
    sys.exit(EXIT_CANCELLED)


def _save_traceback(exc: BaseException) -> Path:
    """Write *exc*'s traceback to a timestamped file and return its path."""
    from clientgrant.config import get_log_dir

    now = datetime.now()
    log_path = get_log_dir() / f"crash-{now:%Y%m%d-%H%M%S}.log"
    header = f"clientgrant {__version__} crashed at {now.isoformat(timespec='seconds')}\n"
    log_path.write_text(
        header + "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        encoding="utf-8",
    )
    return log_path


def main() -> None:
    """Console-script entry point; always ends in :class:`SystemExit`."""
    signal.signal(signal.SIGINT, _cancel)
    try:
        app()
    except KeyboardInterrupt:
        _cancel()
    except ClientGrantError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        log_path = _save_traceback(exc)
        error(f"clientgrant hit an internal error ({type(exc).__name__}). Traceback: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
