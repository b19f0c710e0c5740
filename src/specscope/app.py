"""Typer application and CLI entry point for specscope.

This module wires together the top-level Typer application and registers
the built-in commands: the read-only browsing commands (``info``,
``endpoints``, ``show``, ``schema``) and the playground commands
(``curl``, ``try``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
:class:`~specscope.exceptions.SpecscopeError` instances exit with their
own code; any other exception is written to a crash log under the data
directory.

See Also:
    :mod:`specscope.config`: Configuration resolution used by :func:`main_callback`.
    :mod:`specscope.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from specscope import __version__
from specscope.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="specscope",
    help="Explore an OpenAPI 3.0 spec: browse endpoints, view examples, and try requests.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"specscope {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    spec: Optional[str] = typer.Option(
        None, "--spec", "-s", help="OpenAPI document: URL, file path, or '-' for stdin."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Override the spec's first server URL."
    ),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", help="Credential sent with live requests."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every command.

    Resolves the effective configuration, initialises the global
    :class:`~specscope.output.OutputManager` from CLI flags and the
    configured default format, and stores the configuration and credential
    in ``ctx.obj`` for the commands.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        spec: Spec source override (highest precedence).
        base_url: Base URL override for built requests.
        api_key: Credential override.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
    """
    from specscope.config import get_credential, resolve_config
    from specscope.output import OutputFormat, OutputManager, debug, set_output

    cli_format: Optional[str] = None
    if json_output:
        cli_format = OutputFormat.JSON.value
    elif plain_output:
        cli_format = OutputFormat.PLAIN.value

    # Diagnostics from config resolution need an output manager first.
    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))
    config = resolve_config(cli_spec=spec, cli_base_url=base_url, cli_format=cli_format)

    try:
        fmt = OutputFormat(config.output.format)
    except ValueError:
        fmt = OutputFormat.AUTO
    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    debug(f"Spec source: {config.spec}")

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["credential"] = get_credential(config, api_key)
    ctx.obj["verbose"] = verbose


# ------------------------------------------------------------------ #
# Built-in commands
# ------------------------------------------------------------------ #

from specscope.commands.browse import endpoints_command, info_command, schema_command, show_command  # noqa: E402
from specscope.commands.playground import curl_command, try_command  # noqa: E402

app.command("info")(info_command)
app.command("endpoints")(endpoints_command)
app.command("show")(show_command)
app.command("schema")(schema_command)
app.command("curl")(curl_command)
app.command("try")(try_command)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path.

    Args:
        exc: The unhandled exception to log.

    Returns:
        Absolute path to the written crash log file.
    """
    from specscope.config import get_data_dir

    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = get_data_dir() / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``specscope`` console script.

    Unhandled :class:`~specscope.exceptions.SpecscopeError` instances
    cause a clean exit with the error's ``exit_code``. All other exceptions
    produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from specscope.exceptions import SpecscopeError
        from specscope.output import error

        if isinstance(exc, SpecscopeError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
