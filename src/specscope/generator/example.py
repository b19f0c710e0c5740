"""Synthesise representative JSON values from OpenAPI schemas.

:func:`synthesize_example` is the core: a pure, deterministic recursion over
a (possibly ``$ref``-indirected) :class:`~specscope.models.Schema` that
dispatches on :attr:`Schema.kind <specscope.models.Schema.kind>`. The
output is a *plausible shape*, not a valid instance: ``enum``,
``required`` and numeric ranges are ignored, and object properties get
shallow placeholder values so examples stay small.

The remaining helpers feed the endpoint documentation view:

* :func:`success_response`, :func:`response_example` and
  :func:`request_body_example` pick the schema to synthesise from.
* :func:`default_parameter_values` pre-fills parameter inputs.
* :func:`describe_schema_fields` lists the properties of a response schema.
"""

from __future__ import annotations

import copy
import json
from typing import Any, Iterable, Optional

from specscope.models import (
    MediaType,
    Operation,
    Parameter,
    Response,
    Schema,
    SchemaField,
    SchemaKind,
    Spec,
)
from specscope.parser.resolver import resolve_schema

JSON_CONTENT_TYPE = "application/json"
DATE_TIME_EXAMPLE = "2024-01-01T00:00:00Z"

MAX_EXAMPLE_DEPTH = 16
"""Nesting limit for arrays of self-referencing item schemas."""

_SUCCESS_STATUSES = ("200", "201")


def synthesize_example(
    schema: Optional[Schema], spec: Spec, max_depth: int = MAX_EXAMPLE_DEPTH
) -> Any:
    """Build an example JSON value for *schema*.

    Precedence:

    1. ``$ref`` is resolved and the target synthesised; an unresolvable
       reference is treated as an untyped schema.
    2. An explicit ``example`` is returned verbatim.
    3. ``array`` -> a one-element list of the ``items`` example (``{}``
       without ``items``).
    4. ``object`` with ``properties`` -> one placeholder per property, see
       :func:`_property_example`.
    5. Anything else -> ``{}``.

    Args:
        schema: The schema, or ``None`` when an operation declares none.
        spec: The spec used to resolve ``$ref`` pointers.
        max_depth: Remaining nesting budget; ``{}`` is returned past it.

    Returns:
        A JSON-compatible value. Example values are deep-copied, so the
        result can be modified freely.
    """
    if schema is None or max_depth <= 0:
        return {}

    kind = schema.kind
    if schema.ref is not None:
        resolved = resolve_schema(spec, schema)
        if resolved.ref is None:
            return synthesize_example(resolved, spec, max_depth - 1)
        schema = resolved
        kind = SchemaKind.UNKNOWN

    if schema.has_example:
        return copy.deepcopy(schema.example)

    if kind == SchemaKind.ARRAY:
        item = synthesize_example(schema.items, spec, max_depth - 1)
        return [item]

    if kind == SchemaKind.OBJECT and schema.properties is not None:
        return {
            name: _property_example(prop) for name, prop in schema.properties.items()
        }

    return {}


def _property_example(prop: Schema) -> Any:
    """Shallow placeholder for one object property.

    Nested arrays become ``[]`` and nested objects (or ``$ref`` properties)
    become ``None`` unless they carry their own example.
    """
    if prop.has_example:
        return copy.deepcopy(prop.example)

    kind = prop.kind
    if kind == SchemaKind.STRING:
        return DATE_TIME_EXAMPLE if prop.format == "date-time" else "string"
    if kind in (SchemaKind.NUMBER, SchemaKind.INTEGER):
        return 0
    if kind == SchemaKind.BOOLEAN:
        return True
    if kind == SchemaKind.ARRAY:
        return []
    return None


def success_response(operation: Operation) -> Optional[Response]:
    """The operation's ``200`` response, else its ``201`` response."""
    for status in _SUCCESS_STATUSES:
        response = operation.responses.get(status)
        if response is not None:
            return response
    return None


def response_example(operation: Operation, spec: Spec) -> Any:
    """Example body for the operation's success response (``{}`` if undeclared)."""
    response = success_response(operation)
    schema = None
    if response is not None:
        media = response.content.get(JSON_CONTENT_TYPE)
        schema = media.schema_ if media is not None else None
    return synthesize_example(schema, spec)


def request_body_example(operation: Operation, spec: Spec) -> Any:
    """Example request body, or ``None`` when the operation takes no body.

    The JSON media type is preferred; a media-level ``example`` wins over
    synthesis from its schema.
    """
    body = operation.request_body
    if body is None:
        return None

    media: Optional[MediaType] = body.content.get(JSON_CONTENT_TYPE)
    if media is None and body.content:
        media = next(iter(body.content.values()))
    if media is None:
        return {}
    if "example" in media.model_fields_set:
        return copy.deepcopy(media.example)
    return synthesize_example(media.schema_, spec)


def default_parameter_values(parameters: Iterable[Parameter]) -> dict[str, str]:
    """Initial input values keyed by parameter name.

    Each value is the first non-empty of the parameter's ``example``, its
    schema's ``example`` and its schema's ``default``, rendered as form
    text; ``""`` when none is set.
    """
    values: dict[str, str] = {}
    for param in parameters:
        schema = param.schema_
        candidates = (
            param.example,
            schema.example if schema is not None else None,
            schema.default if schema is not None else None,
        )
        values[param.name] = next(
            (text for text in map(_form_text, candidates) if text), ""
        )
    return values


def _form_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def describe_schema_fields(
    schema: Optional[Schema], spec: Spec, max_depth: int = MAX_EXAMPLE_DEPTH
) -> list[SchemaField]:
    """List the documented properties of *schema*.

    ``$ref`` pointers are resolved and arrays are described by their
    ``items``. Properties without a type are shown as ``object``. Scalar
    and unresolvable schemas have no fields.
    """
    if schema is None or max_depth <= 0:
        return []

    schema = resolve_schema(spec, schema)
    if schema.kind == SchemaKind.ARRAY and schema.items is not None:
        return describe_schema_fields(schema.items, spec, max_depth - 1)
    if schema.kind != SchemaKind.OBJECT or not schema.properties:
        return []

    return [
        SchemaField(
            name=name,
            type=prop.type_label or "object",
            description=prop.description,
            required=name in schema.required,
        )
        for name, prop in schema.properties.items()
    ]
