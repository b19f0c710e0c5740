"""Resolve ``$ref`` pointers for schemas and parameters.

OpenAPI documents use pointers such as ``#/components/schemas/Pet`` and
``#/components/parameters/limit`` to avoid repetition. Resolution here is a
pure lookup against the spec's :class:`~specscope.models.Components`
tables: nothing is copied or patched in place, so every function can be
called redundantly on each render.

Resolution is permissive. A pointer with a different prefix, or one that
names a missing component, is never an error:

* :func:`resolve_schema` returns the last unresolved schema, so callers can
  still display *something*;
* :func:`resolve_parameter` returns ``None``, since a dangling parameter
  reference has no usable name or schema.

Cycles (a schema referencing itself directly or through a chain) are cut by
a hop budget rather than a visited set.
"""

from __future__ import annotations

from typing import Optional, Union

from specscope.models import Operation, Parameter, ParameterRef, Schema, Spec

SCHEMA_REF_PREFIX = "#/components/schemas/"
PARAMETER_REF_PREFIX = "#/components/parameters/"

MAX_REF_HOPS = 32
"""Maximum number of pointers followed before giving up."""


def resolve_schema(spec: Spec, schema: Schema, max_hops: int = MAX_REF_HOPS) -> Schema:
    """Follow *schema*'s ``$ref`` chain to a concrete schema.

    Args:
        spec: The loaded spec providing ``components.schemas``.
        schema: A schema that may carry ``$ref``.
        max_hops: Pointer budget; past it the last unresolved form is
            returned.

    Returns:
        The first schema in the chain without ``$ref``, or the last
        unresolved schema when a pointer cannot be followed. A schema
        without ``$ref`` is returned unchanged.

    Example::

        resolve_schema(spec, Schema(ref="#/components/schemas/Market"))
        # -> the Market schema, with any alias chain followed
    """
    current = schema
    for _ in range(max_hops):
        if current.ref is None:
            return current
        target = _lookup(current.ref, SCHEMA_REF_PREFIX, spec.components.schemas)
        if target is None:
            return current
        current = target
    return current


def resolve_parameter(
    spec: Spec,
    param: Union[Parameter, ParameterRef],
    max_hops: int = MAX_REF_HOPS,
) -> Optional[Parameter]:
    """Return the literal parameter behind *param*.

    Literal parameters are returned as-is. References are looked up in
    ``components.parameters``; component entries that are themselves
    references are followed within *max_hops*.

    Returns:
        The resolved :class:`Parameter`, or ``None`` when the reference
        cannot be resolved.
    """
    current: Union[Parameter, ParameterRef, None] = param
    for _ in range(max_hops):
        if isinstance(current, Parameter):
            return current
        if current is None:
            return None
        current = _lookup(current.ref, PARAMETER_REF_PREFIX, spec.components.parameters)
    return current if isinstance(current, Parameter) else None


def resolve_parameters(spec: Spec, operation: Operation) -> list[Parameter]:
    """Resolve every declared parameter of *operation*, in declaration order.

    Entries that fail to resolve are dropped. Duplicates (a literal and a
    reference sharing a name) are both kept.
    """
    resolved: list[Parameter] = []
    for entry in operation.parameters:
        param = resolve_parameter(spec, entry)
        if param is not None:
            resolved.append(param)
    return resolved


def _lookup(ref: str, prefix: str, table: dict):  # noqa: ANN202
    """Look up ``<prefix><Name>`` in *table*, or ``None``."""
    if not ref.startswith(prefix):
        return None
    return table.get(ref[len(prefix):])
