"""Browse commands -- read-only views of an OpenAPI spec.

Provides the ``info``, ``endpoints``, ``show`` and ``schema`` commands.
Every command loads the configured spec through
:func:`~specscope.commands.open_session` and renders through the global
output manager, so ``--json`` and ``--plain`` apply uniformly.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from specscope.commands import open_session
from specscope.exceptions import SchemaNotFoundError
from specscope.generator.example import (
    JSON_CONTENT_TYPE,
    describe_schema_fields,
    request_body_example,
    response_example,
    success_response,
    synthesize_example,
)
from specscope.models import Endpoint, Parameter, Schema, SchemaField, Spec
from specscope.output import format_response, get_output, info
from specscope.parser.resolver import resolve_parameters, resolve_schema


def info_command(ctx: typer.Context) -> None:
    """Show API info (title, version, servers, tags).

    Example::

        specscope --spec ./openapi.json info
    """
    session = open_session(ctx)
    spec = session.spec

    data: dict[str, Any] = {
        "title": spec.info.title,
        "version": spec.info.version,
        "openapi_version": spec.openapi,
        "description": spec.info.description or "-",
        "servers": [s.url for s in spec.servers],
        "endpoints": len(session.endpoints()),
        "tags": [group.name for group in session.tag_groups()],
        "security_schemes": list(spec.components.security_schemes.keys()),
    }
    format_response(data)


def endpoints_command(
    ctx: typer.Context,
    tag: Optional[str] = typer.Option(
        None, "--tag", "-t", help="Only list endpoints of this group."
    ),
) -> None:
    """List visible endpoints grouped by their first tag.

    Groups follow the order of the spec's ``tags``; untagged endpoints
    appear under ``Other``.

    Example::

        specscope endpoints
        specscope endpoints --tag Markets
    """
    session = open_session(ctx)

    headers = ["Group", "Method", "Path", "Summary"]
    rows: list[list[str]] = []
    for group in session.tag_groups():
        if tag is not None and group.name != tag:
            continue
        for endpoint in group.endpoints:
            rows.append([
                group.name,
                endpoint.method.value.upper(),
                endpoint.path,
                endpoint.label,
            ])

    if not rows:
        info("No endpoints to show.")
        return
    get_output().print_table(headers, rows, title=f"{session.spec.info.title} -- Endpoints")


def show_command(
    ctx: typer.Context,
    method: str = typer.Argument(..., help="HTTP method, e.g. GET."),
    path: str = typer.Argument(..., help="Path template, e.g. /markets/{id}."),
) -> None:
    """Document one endpoint: parameters, example bodies, and response fields.

    Example::

        specscope show GET /markets/{id}
    """
    session = open_session(ctx)
    endpoint = session.find_endpoint(method, path)
    format_response(describe_endpoint(session.spec, endpoint))


def schema_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name under components.schemas."),
) -> None:
    """Show a named component schema: its fields and a synthesised example.

    Example::

        specscope schema Market
    """
    session = open_session(ctx)
    spec = session.spec
    schema = spec.components.schemas.get(name)
    if schema is None:
        raise SchemaNotFoundError(f"No schema '{name}' in spec")

    format_response({
        "name": name,
        "description": schema.description,
        "fields": [_field_record(f) for f in describe_schema_fields(schema, spec)],
        "example": synthesize_example(schema, spec),
    })


def describe_endpoint(spec: Spec, endpoint: Endpoint) -> dict[str, Any]:
    """Build the documentation record shown by ``specscope show``."""
    operation = endpoint.operation
    parameters = resolve_parameters(spec, operation)

    response_schema: Optional[Schema] = None
    response = success_response(operation)
    if response is not None:
        media = response.content.get(JSON_CONTENT_TYPE)
        response_schema = media.schema_ if media is not None else None

    data: dict[str, Any] = {
        "method": endpoint.method.value.upper(),
        "path": endpoint.path,
        "summary": operation.summary,
        "description": operation.description,
        "tags": operation.tags,
        "parameters": [_parameter_record(spec, p) for p in parameters],
        "response_example": response_example(operation, spec),
        "response_fields": [
            _field_record(f) for f in describe_schema_fields(response_schema, spec)
        ],
    }
    body = request_body_example(operation, spec)
    if body is not None:
        data["request_body_example"] = body
    if operation.deprecated:
        data["deprecated"] = True
    return data


def _parameter_record(spec: Spec, param: Parameter) -> dict[str, Any]:
    type_label = None
    if param.schema_ is not None:
        type_label = resolve_schema(spec, param.schema_).type_label
    return {
        "name": param.name,
        "in": param.location.value,
        "required": param.required,
        "type": type_label or "string",
        "description": param.description,
    }


def _field_record(field: SchemaField) -> dict[str, Any]:
    return field.model_dump()
