"""Playground commands -- build and send requests for one endpoint.

``curl`` prints the shell command for a request without sending it;
``try`` sends it and shows the status line and response body. Both start
from the endpoint's default parameter values (examples and defaults
declared in the spec) and apply ``-P name=value`` overrides. A body is
sent only when ``--body`` is given; ``show`` prints the example body.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import typer

from specscope.client.response import render_outcome
from specscope.commands import open_session
from specscope.exceptions import InvalidUsageError, RequestFailedError
from specscope.models import Endpoint, TransportFailure
from specscope.output import print_data, warning
from specscope.session import ExplorerSession


def parse_param_options(options: Optional[list[str]]) -> dict[str, str]:
    """Parse repeated ``-P name=value`` options into a mapping.

    The value may be empty (``-P cursor=``) and may itself contain ``=``.

    Raises:
        InvalidUsageError: If an option has no ``=`` or an empty name.
    """
    values: dict[str, str] = {}
    for option in options or []:
        name, sep, value = option.partition("=")
        if not sep or not name:
            raise InvalidUsageError(f"Invalid parameter '{option}': expected name=value")
        values[name] = value
    return values


def _prepare(
    session: ExplorerSession,
    method: str,
    path: str,
    params: Optional[list[str]],
) -> tuple[Endpoint, dict[str, str]]:
    endpoint = session.find_endpoint(method, path)
    values = session.select(endpoint)
    values.update(parse_param_options(params))
    return endpoint, values


def curl_command(
    ctx: typer.Context,
    method: str = typer.Argument(..., help="HTTP method, e.g. GET."),
    path: str = typer.Argument(..., help="Path template, e.g. /markets/{id}."),
    params: Optional[list[str]] = typer.Option(
        None, "--param", "-P", help="Parameter value as name=value (repeatable)."
    ),
    body: Optional[str] = typer.Option(
        None, "--body", "-d", help="JSON request body."
    ),
) -> None:
    """Print the curl command for a request without sending it.

    Example::

        specscope curl GET /markets/{id} -P id=42
    """
    session = open_session(ctx)
    endpoint, values = _prepare(session, method, path, params)
    print_data(session.curl(endpoint, values, body))


def try_command(
    ctx: typer.Context,
    method: str = typer.Argument(..., help="HTTP method, e.g. GET."),
    path: str = typer.Argument(..., help="Path template, e.g. /markets/{id}."),
    params: Optional[list[str]] = typer.Option(
        None, "--param", "-P", help="Parameter value as name=value (repeatable)."
    ),
    body: Optional[str] = typer.Option(
        None, "--body", "-d", help="JSON request body."
    ),
) -> None:
    """Send a request and show the status, timing, and response body.

    An HTTP error status is a normal result; only a request that gets no
    response at all exits non-zero.

    Example::

        specscope --api-key secret try GET /markets/{id} -P id=42
    """
    session = open_session(ctx)
    endpoint, values = _prepare(session, method, path, params)

    outcome = asyncio.run(session.execute(endpoint, values, body))
    if outcome is None:
        warning("Request was superseded before it completed.")
        return
    if isinstance(outcome, TransportFailure):
        raise RequestFailedError(f"Request failed: {outcome.message}")
    render_outcome(outcome)
