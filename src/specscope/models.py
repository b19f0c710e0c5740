"""Canonical Pydantic models shared across all specscope modules.

This is the single source of truth for data shapes in the project. The
models fall into three groups:

**Spec models** -- the immutable structural model of an OpenAPI 3.0
document, validated straight from the raw JSON/YAML dict (wire names such as
``$ref``, ``in`` and ``requestBody`` are accepted through aliases):
    :class:`Spec`, :class:`APIInfo`, :class:`ServerInfo`, :class:`Tag`,
    :class:`PathItem`, :class:`Operation`, :class:`Parameter`,
    :class:`ParameterRef`, :class:`RequestBody`, :class:`MediaType`,
    :class:`Response`, :class:`Schema`, :class:`SecurityScheme`, and
    :class:`Components`.

**Derived and request models** -- views recomputed from a :class:`Spec` and
the values exchanged with the HTTP layer:
    :class:`Endpoint`, :class:`TagGroup`, :class:`SchemaField`,
    :class:`BuiltRequest`,
    :class:`ResponseResult`, and :class:`TransportFailure`.

**Configuration models** -- serialised as JSON in the user's config
directory or the project's ``specscope.json``:
    :class:`RequestConfig`, :class:`OutputConfig`, and
    :class:`ExplorerConfig`.

Spec and derived models are frozen: a loaded spec is never mutated for the
lifetime of a session.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_HIDDEN_PATHS: frozenset[str] = frozenset({"/api/v1/test-key"})
"""Paths never shown in the endpoint index (internal/demo-only endpoints)."""

DEFAULT_CREDENTIAL_HEADER = "X-API-Key"
"""Header that carries the static API credential on every live request."""


# --- Spec Models ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods the explorer indexes, in navigation order."""

    GET = "get"
    POST = "post"
    PUT = "put"
    DELETE = "delete"
    PATCH = "patch"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"


class SchemaKind(str, enum.Enum):
    """Tagged variant of a :class:`Schema`, derived from its ``type``.

    ``UNKNOWN`` covers an absent type as well as anything outside the
    OpenAPI primitive set, so consumers can dispatch on it explicitly.
    """

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    UNKNOWN = "unknown"


class Schema(BaseModel):
    """A recursive OpenAPI *Schema Object*.

    Only the keywords specscope interprets are declared; any other keyword
    is preserved in ``model_extra``. ``$ref`` is exposed as :attr:`ref`.

    Whether an ``example`` was written in the document is tracked through
    :attr:`has_example`, so an explicit ``example: null`` still counts as
    the author's example.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    ref: Optional[str] = Field(default=None, alias="$ref")
    type: Optional[Union[str, list[str]]] = None
    format: Optional[str] = None
    description: Optional[str] = None
    properties: Optional[dict[str, Schema]] = None
    items: Optional[Schema] = None
    required: list[str] = Field(default_factory=list)
    enum: Optional[list[Any]] = None
    example: Any = None
    default: Any = None

    @property
    def kind(self) -> SchemaKind:
        """The schema's :class:`SchemaKind`.

        OpenAPI 3.1 style type lists use their first non-``null`` entry.
        """
        type_name = self.type
        if isinstance(type_name, list):
            type_name = next((t for t in type_name if t != "null"), None)
        if type_name is None:
            return SchemaKind.UNKNOWN
        try:
            return SchemaKind(type_name)
        except ValueError:
            return SchemaKind.UNKNOWN

    @property
    def type_label(self) -> Optional[str]:
        """The declared type as a display string, or ``None`` when absent."""
        kind = self.kind
        return None if kind == SchemaKind.UNKNOWN else kind.value

    @property
    def has_example(self) -> bool:
        """Whether the document declared an ``example`` on this schema."""
        return "example" in self.model_fields_set


class Parameter(BaseModel):
    """A literal OpenAPI *Parameter Object*.

    Identity within an operation is ``(name, location)``.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    name: str
    location: ParameterLocation = Field(alias="in")
    required: bool = False
    description: Optional[str] = None
    schema_: Optional[Schema] = Field(default=None, alias="schema")
    example: Any = None


class ParameterRef(BaseModel):
    """A parameter entry that points at ``#/components/parameters/<Name>``.

    Any entry carrying ``$ref`` is treated as a reference; sibling keys are
    ignored.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    ref: str = Field(alias="$ref")


ParameterEntry = Annotated[
    Union[ParameterRef, Parameter], Field(union_mode="left_to_right")
]
"""A declared parameter: a reference first, otherwise a literal parameter."""


class MediaType(BaseModel):
    """One entry of a request or response ``content`` map."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    schema_: Optional[Schema] = Field(default=None, alias="schema")
    example: Any = None


class RequestBody(BaseModel):
    """An OpenAPI *Request Body Object*."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    description: Optional[str] = None
    required: bool = False
    content: dict[str, MediaType] = Field(default_factory=dict)


class Response(BaseModel):
    """An OpenAPI *Response Object* for a single status code."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    description: Optional[str] = None
    content: dict[str, MediaType] = Field(default_factory=dict)


class Operation(BaseModel):
    """The documented behaviour of one HTTP method on one path."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    summary: Optional[str] = None
    description: Optional[str] = None
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    tags: list[str] = Field(default_factory=list)
    parameters: list[ParameterEntry] = Field(default_factory=list)
    request_body: Optional[RequestBody] = Field(default=None, alias="requestBody")
    responses: dict[str, Response] = Field(default_factory=dict)
    security: Optional[list[dict[str, list[str]]]] = None
    deprecated: bool = False

    @field_validator("responses", mode="before")
    @classmethod
    def _stringify_status_codes(cls, value: Any) -> Any:
        # YAML documents often key responses by bare integers.
        if isinstance(value, dict):
            return {str(k): v for k, v in value.items()}
        return value


class PathItem(BaseModel):
    """The operations declared under one path template."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    get: Optional[Operation] = None
    post: Optional[Operation] = None
    put: Optional[Operation] = None
    delete: Optional[Operation] = None
    patch: Optional[Operation] = None

    def operation(self, method: HTTPMethod) -> Optional[Operation]:
        """Return the operation for *method*, or ``None`` when not declared."""
        return getattr(self, method.value)


class SecurityScheme(BaseModel):
    """An OpenAPI *Security Scheme Object* (informational only)."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    type: str
    name: Optional[str] = None
    location: Optional[str] = Field(default=None, alias="in")
    scheme: Optional[str] = None
    description: Optional[str] = None


class Components(BaseModel):
    """Named, reusable schema and parameter definitions."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    schemas: dict[str, Schema] = Field(default_factory=dict)
    parameters: dict[str, ParameterEntry] = Field(default_factory=dict)
    security_schemes: dict[str, SecurityScheme] = Field(
        default_factory=dict, alias="securitySchemes"
    )


class Tag(BaseModel):
    """A declared tag: the unit of navigation grouping."""

    model_config = ConfigDict(extra="allow", frozen=True)

    name: str
    description: Optional[str] = None


class APIInfo(BaseModel):
    """API metadata from the spec's *Info Object*."""

    model_config = ConfigDict(extra="allow", frozen=True)

    title: str = "Untitled API"
    version: str = "0.0.0"
    description: Optional[str] = None
    contact: Optional[dict[str, Any]] = None

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: Any) -> Any:
        # ``version: 1.0`` in YAML arrives as a float.
        if isinstance(value, (int, float)):
            return str(value)
        return value


class ServerInfo(BaseModel):
    """A server entry from the spec's ``servers`` array."""

    model_config = ConfigDict(extra="allow", frozen=True)

    url: str = "/"
    description: Optional[str] = None


class Spec(BaseModel):
    """The root OpenAPI document.

    ``paths`` keeps the document's own key order, which is the order the
    endpoint index walks.

    See Also:
        :func:`~specscope.parser.loader.parse_spec`: Build a ``Spec`` from
        a raw dictionary.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    openapi: str
    info: APIInfo = Field(default_factory=APIInfo)
    servers: list[ServerInfo] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)
    paths: dict[str, PathItem] = Field(default_factory=dict)
    components: Components = Field(default_factory=Components)
    security: list[dict[str, list[str]]] = Field(default_factory=list)

    @property
    def base_url(self) -> str:
        """The first declared server URL, or ``""`` when there is none."""
        return self.servers[0].url if self.servers else ""


# --- Derived Views ---


class Endpoint(BaseModel):
    """A (path, method, operation) triple -- the unit of navigation."""

    model_config = ConfigDict(frozen=True)

    path: str
    method: HTTPMethod
    operation: Operation

    @property
    def key(self) -> str:
        """Stable identity, e.g. ``"GET /markets/{id}"``."""
        return f"{self.method.value.upper()} {self.path}"

    @property
    def label(self) -> str:
        """Navigation label: the operation summary, falling back to the path."""
        return self.operation.summary or self.path


class TagGroup(BaseModel):
    """A tag and the endpoints whose first tag it is."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: Optional[str] = None
    endpoints: list[Endpoint] = Field(default_factory=list)


class SchemaField(BaseModel):
    """One documented property of an object schema."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    description: Optional[str] = None
    required: bool = False


# --- Request / Response Models ---


class BuiltRequest(BaseModel):
    """A concrete HTTP request produced by the request builder."""

    model_config = ConfigDict(frozen=True)

    method: str
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: Optional[str] = None


class ResponseResult(BaseModel):
    """Outcome of a live request that received an HTTP response.

    4xx and 5xx statuses are ordinary results; :attr:`status_class` tells
    the presentation layer how to colour them.
    """

    model_config = ConfigDict(frozen=True)

    status_code: int
    reason: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = None
    duration_ms: float

    @property
    def status_class(self) -> str:
        """``"success"`` for 2xx, ``"error"`` for 4xx/5xx, ``"other"`` otherwise."""
        if 200 <= self.status_code < 300:
            return "success"
        if self.status_code >= 400:
            return "error"
        return "other"


class TransportFailure(BaseModel):
    """Outcome of a live request that never received an HTTP response."""

    model_config = ConfigDict(frozen=True)

    message: str
    duration_ms: float


# --- Configuration Models ---


class RequestConfig(BaseModel):
    """HTTP settings applied to every live request."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class OutputConfig(BaseModel):
    """Default output format preferences."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class ExplorerConfig(BaseModel):
    """Effective configuration for an explorer session.

    Loaded from the user config file and the project-local
    ``specscope.json``, then overridden by environment variables and CLI
    flags. See :func:`~specscope.config.resolve_config` for the full
    precedence chain.
    """

    spec: str = Field(
        default="./openapi.json",
        description="URL, file path, or '-' (stdin) of the OpenAPI document",
    )
    base_url: Optional[str] = Field(
        default=None, description="Override the spec's first server URL"
    )
    hidden_paths: list[str] = Field(
        default_factory=lambda: sorted(DEFAULT_HIDDEN_PATHS),
        description="Exact path templates excluded from the endpoint index",
    )
    credential_header: str = Field(
        default=DEFAULT_CREDENTIAL_HEADER,
        description="Header carrying the API credential",
    )
    credential_source: Optional[str] = Field(
        default=None, description="Credential source: env:VAR or file:/path"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
