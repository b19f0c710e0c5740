"""Example generation -- turn schemas into representative payloads.

Sub-modules:

* :mod:`~specscope.generator.example` -- :func:`synthesize_example` and the
  helpers that pick response/request schemas and default parameter values.
"""

from specscope.generator.example import (
    default_parameter_values,
    describe_schema_fields,
    request_body_example,
    response_example,
    success_response,
    synthesize_example,
)

__all__ = [
    "synthesize_example",
    "success_response",
    "response_example",
    "request_body_example",
    "default_parameter_values",
    "describe_schema_fields",
]
