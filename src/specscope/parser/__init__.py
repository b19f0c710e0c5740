"""OpenAPI spec parser -- load documents, resolve ``$ref`` pointers, index endpoints.

This sub-package turns a raw OpenAPI 3.0 document (JSON or YAML, local file
or remote URL) into the immutable :class:`~specscope.models.Spec` and the
navigable views derived from it.

Typical usage::

    from specscope.parser import load_spec, parse_spec, group_endpoints_by_tag

    spec = parse_spec(load_spec("./openapi.json"))
    for group in group_endpoints_by_tag(spec):
        print(group.name, [e.key for e in group.endpoints])

Sub-modules:

* :mod:`~specscope.parser.loader` -- I/O layer (URL, file, stdin), format
  detection, version validation and model construction.
* :mod:`~specscope.parser.resolver` -- ``$ref`` resolution for schemas and
  parameters with a hop budget.
* :mod:`~specscope.parser.indexer` -- Endpoint list and tag groups.
"""

from specscope.parser.indexer import (
    extract_endpoints,
    find_endpoint,
    group_endpoints_by_tag,
)
from specscope.parser.loader import (
    load_spec,
    load_spec_async,
    parse_spec,
    validate_openapi_version,
)
from specscope.parser.resolver import (
    resolve_parameter,
    resolve_parameters,
    resolve_schema,
)

__all__ = [
    "load_spec",
    "load_spec_async",
    "parse_spec",
    "validate_openapi_version",
    "resolve_schema",
    "resolve_parameter",
    "resolve_parameters",
    "extract_endpoints",
    "group_endpoints_by_tag",
    "find_endpoint",
]
