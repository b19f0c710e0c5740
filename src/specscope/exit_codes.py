"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specscope.exceptions.SpecscopeError` subclass.

An HTTP 4xx/5xx answer from the explored API is *not* an error for
specscope: ``specscope try`` still exits with :data:`EXIT_SUCCESS` and
shows the status.

Example::

    $ specscope --spec missing.json endpoints
    $ echo $?
    3   # EXIT_SPEC_LOAD_ERROR -- the spec could not be loaded
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_SPEC_LOAD_ERROR = 3
"""The OpenAPI document could not be fetched, parsed, or validated."""

EXIT_NOT_FOUND = 4
"""The requested endpoint or schema does not exist in the spec."""

EXIT_CONNECTION_ERROR = 5
"""A live request failed at the transport level (timeout, DNS, refused)."""
