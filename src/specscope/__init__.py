"""specscope -- explore an OpenAPI 3.0 document and try its endpoints.

This package reads an OpenAPI specification, indexes its operations by tag,
synthesises example payloads from the declared schemas, and builds concrete
HTTP requests (URL, query string, headers, body) from user-supplied
parameter values. Requests can be rendered as ``curl`` commands or executed
live against the described API.

Typical workflow::

    specscope --spec ./openapi.json endpoints
    specscope show GET /markets/{id}
    specscope try GET /markets/{id} -P id=42

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for the spec tree, derived views, and config.
    session: Explorer session with load state and in-flight request tracking.
    config: XDG-aware configuration and credential resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
