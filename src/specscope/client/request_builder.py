"""Build concrete HTTP requests from an endpoint and user-entered values.

Everything here is pure: :func:`build_request` turns declarative spec data
plus a ``name -> value`` map into a :class:`~specscope.models.BuiltRequest`,
and :func:`to_curl` renders that same request as a shell command. Execution
lives in :class:`~specscope.client.async_client.ApiClient`, so the command
shown to the user and the request actually sent can never drift apart.

Omission rules shared by both:

* an unset path parameter leaves its ``{name}`` placeholder in the URL;
* an empty query parameter is left out entirely (never ``name=``);
* ``Content-Type: application/json`` is sent only together with a body;
* a body is sent only for POST, PUT and PATCH, and only when non-empty.
"""

from __future__ import annotations

import shlex
from typing import Iterable, Mapping, Optional
from urllib.parse import quote

from specscope.models import (
    DEFAULT_CREDENTIAL_HEADER,
    BuiltRequest,
    Endpoint,
    HTTPMethod,
    Parameter,
    ParameterLocation,
    Spec,
)
from specscope.parser.resolver import resolve_parameters

JSON_CONTENT_TYPE = "application/json"

BODY_METHODS = frozenset({HTTPMethod.POST, HTTPMethod.PUT, HTTPMethod.PATCH})

# encodeURIComponent leaves these unescaped in addition to quote()'s defaults.
_QUERY_SAFE = "!*'()"


def build_path(
    path_template: str, parameters: Iterable[Parameter], values: Mapping[str, str]
) -> str:
    """Substitute path parameter values into *path_template*.

    Values are inserted verbatim (no percent-encoding). Parameters without
    a non-empty value keep their ``{name}`` placeholder.

    Example::

        build_path("/markets/{id}", [id_param], {"id": "42"})  # "/markets/42"
        build_path("/markets/{id}", [id_param], {})            # "/markets/{id}"
    """
    path = path_template
    for param in parameters:
        if param.location != ParameterLocation.PATH:
            continue
        value = values.get(param.name)
        if value:
            path = path.replace("{" + param.name + "}", value)
    return path


def build_query_string(
    parameters: Iterable[Parameter], values: Mapping[str, str]
) -> str:
    """Render query parameters with non-empty values as ``?a=1&b=2``.

    Returns ``""`` when no query parameter has a value.
    """
    parts = [
        f"{param.name}={quote(values[param.name], safe=_QUERY_SAFE)}"
        for param in parameters
        if param.location == ParameterLocation.QUERY and values.get(param.name)
    ]
    return f"?{'&'.join(parts)}" if parts else ""


def build_url(
    spec: Spec,
    endpoint: Endpoint,
    values: Mapping[str, str],
    base_url: Optional[str] = None,
) -> str:
    """Full request URL: base + substituted path + query string.

    Args:
        spec: The loaded spec (parameters are resolved against it).
        endpoint: The endpoint to call.
        values: User-entered values keyed by parameter name.
        base_url: Override for the spec's first server URL.
    """
    parameters = resolve_parameters(spec, endpoint.operation)
    base = spec.base_url if base_url is None else base_url
    path = build_path(endpoint.path, parameters, values)
    return f"{base}{path}{build_query_string(parameters, values)}"


def sends_body(method: HTTPMethod, body: Optional[str]) -> bool:
    """Whether a request with *method* carries *body*."""
    return method in BODY_METHODS and bool(body)


def build_headers(
    with_body: bool,
    credential: Optional[str] = None,
    credential_header: str = DEFAULT_CREDENTIAL_HEADER,
) -> dict[str, str]:
    """The only headers the explorer ever sends: credential and content type."""
    headers: dict[str, str] = {}
    if credential:
        headers[credential_header] = credential
    if with_body:
        headers["Content-Type"] = JSON_CONTENT_TYPE
    return headers


def build_request(
    spec: Spec,
    endpoint: Endpoint,
    values: Mapping[str, str],
    *,
    body: Optional[str] = None,
    credential: Optional[str] = None,
    credential_header: str = DEFAULT_CREDENTIAL_HEADER,
    base_url: Optional[str] = None,
) -> BuiltRequest:
    """Build the request for *endpoint* from user-entered *values*.

    Args:
        spec: The loaded spec.
        endpoint: The endpoint to call.
        values: User-entered parameter values keyed by name.
        body: Raw request body text, passed through without validation.
        credential: Static API credential; omitted from headers when empty.
        credential_header: Header name carrying *credential*.
        base_url: Override for the spec's first server URL.

    Returns:
        A :class:`~specscope.models.BuiltRequest` ready for execution or
        :func:`to_curl`.
    """
    with_body = sends_body(endpoint.method, body)
    return BuiltRequest(
        method=endpoint.method.value.upper(),
        url=build_url(spec, endpoint, values, base_url),
        headers=build_headers(with_body, credential, credential_header),
        body=body if with_body else None,
    )


def to_curl(request: BuiltRequest) -> str:
    """Render *request* as an equivalent multi-line ``curl`` command.

    Arguments are quoted with :func:`shlex.quote`; nothing is executed.
    """
    lines = [f"curl -X {request.method}", shlex.quote(request.url)]
    for name, value in request.headers.items():
        lines.append(f"-H {shlex.quote(f'{name}: {value}')}")
    if request.body is not None:
        lines.append(f"-d {shlex.quote(request.body)}")
    return " \\\n  ".join(lines)
