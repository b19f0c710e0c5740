"""Response decoding and rendering -- maps HTTP outcomes to the output system.

:func:`extract_response_data` decides how a live response body is
represented (decoded JSON or raw text). :func:`render_outcome` writes an
outcome produced by :class:`~specscope.client.async_client.ApiClient`:
the status line (coloured by status class) and timing go to stderr, the body
to stdout.

See Also:
    :mod:`specscope.output` -- the output manager that renders data.
"""

from __future__ import annotations

import json
from typing import Any, Union

import httpx

from specscope.models import ResponseResult, TransportFailure
from specscope.output import get_output


def extract_response_data(response: httpx.Response) -> Any:
    """Extract the body from an HTTP response.

    The body is decoded as JSON when the ``content-type`` header names
    ``application/json``; a body that fails to decode is kept as text.
    Any other content type yields the raw text.
    """
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type and response.content:
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            pass
    return response.text


def render_outcome(outcome: Union[ResponseResult, TransportFailure]) -> None:
    """Print a live request outcome through the global output system."""
    output = get_output()
    if isinstance(outcome, TransportFailure):
        output.error(f"Request failed: {outcome.message}")
        return

    output.print_status(outcome.status_code, outcome.reason, outcome.duration_ms)
    if outcome.body not in (None, ""):
        output.format_response(outcome.body)
