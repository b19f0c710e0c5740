"""Exception hierarchy for specscope.

All exceptions inherit from :class:`SpecscopeError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specscope.exit_codes`.
The top-level error handler in :func:`specscope.app.main` catches
``SpecscopeError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Unresolvable ``$ref`` pointers are deliberately absent from this hierarchy:
the resolver degrades silently instead of raising.

Subclass hierarchy::

    SpecscopeError (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- SpecLoadError          (exit 3)
    +-- NotFoundError          (exit 4)
    |   +-- EndpointNotFoundError
    |   +-- SchemaNotFoundError
    +-- RequestFailedError     (exit 5)
    +-- ConfigError            (exit 1)
"""

from specscope.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SPEC_LOAD_ERROR,
)


class SpecscopeError(Exception):
    """Base exception for all specscope errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specscope.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecscopeError):
    """Raised for invalid CLI arguments (e.g. a malformed ``-P name=value``)."""

    exit_code = EXIT_INVALID_USAGE


class SpecLoadError(SpecscopeError):
    """Raised when the OpenAPI document cannot be fetched, parsed, or validated."""

    exit_code = EXIT_SPEC_LOAD_ERROR


class NotFoundError(SpecscopeError):
    """Raised when a requested item does not exist in the loaded spec."""

    exit_code = EXIT_NOT_FOUND


class EndpointNotFoundError(NotFoundError):
    """Raised when a method/path pair is not in the visible spec."""


class SchemaNotFoundError(NotFoundError):
    """Raised when ``components.schemas`` has no schema by the given name."""


class RequestFailedError(SpecscopeError):
    """Raised by the CLI when a live request fails before any HTTP response arrives."""

    exit_code = EXIT_CONNECTION_ERROR


class ConfigError(SpecscopeError):
    """Raised for configuration problems (invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE
