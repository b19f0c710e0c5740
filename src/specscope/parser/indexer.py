"""Derive the navigable endpoint index from a spec's path map.

Endpoints and tag groups are projections of the immutable
:class:`~specscope.models.Spec`; they are recomputed on every call instead
of being cached.

* :func:`extract_endpoints` -- flat list in document path order, methods in
  the fixed order GET, POST, PUT, DELETE, PATCH.
* :func:`group_endpoints_by_tag` -- the same endpoints partitioned by their
  first tag, groups ordered by the spec's ``tags`` declaration.
* :func:`find_endpoint` -- look up one visible endpoint by method and path.

Paths in the hidden set (internal or demo-only endpoints) are skipped
before anything else, regardless of method.
"""

from __future__ import annotations

from typing import Iterable

from specscope.exceptions import EndpointNotFoundError
from specscope.models import (
    DEFAULT_HIDDEN_PATHS,
    Endpoint,
    HTTPMethod,
    Spec,
    TagGroup,
)

UNTAGGED_GROUP = "Other"

_METHOD_ORDER = (
    HTTPMethod.GET,
    HTTPMethod.POST,
    HTTPMethod.PUT,
    HTTPMethod.DELETE,
    HTTPMethod.PATCH,
)


def extract_endpoints(
    spec: Spec, hidden_paths: Iterable[str] = DEFAULT_HIDDEN_PATHS
) -> list[Endpoint]:
    """List every visible (path, method) pair of *spec*.

    Args:
        spec: The loaded spec.
        hidden_paths: Exact path templates to leave out entirely.

    Returns:
        One :class:`~specscope.models.Endpoint` per present method, paths
        in document order.
    """
    hidden = frozenset(hidden_paths)
    endpoints: list[Endpoint] = []
    for path, path_item in spec.paths.items():
        if path in hidden:
            continue
        for method in _METHOD_ORDER:
            operation = path_item.operation(method)
            if operation is not None:
                endpoints.append(Endpoint(path=path, method=method, operation=operation))
    return endpoints


def group_endpoints_by_tag(
    spec: Spec, hidden_paths: Iterable[str] = DEFAULT_HIDDEN_PATHS
) -> list[TagGroup]:
    """Partition the visible endpoints by their first tag.

    Endpoints without tags land in the ``"Other"`` group. Groups follow the
    order of ``spec.tags``; tags not declared there come after all declared
    ones, in the order they were first seen. Empty groups are omitted.
    """
    buckets: dict[str, list[Endpoint]] = {}
    for endpoint in extract_endpoints(spec, hidden_paths):
        tags = endpoint.operation.tags
        name = tags[0] if tags else UNTAGGED_GROUP
        buckets.setdefault(name, []).append(endpoint)

    declared = {tag.name: index for index, tag in enumerate(spec.tags)}
    descriptions = {tag.name: tag.description for tag in spec.tags}

    # sorted() is stable, so undeclared tags keep their first-seen order.
    ordered = sorted(buckets, key=lambda name: declared.get(name, len(declared)))
    return [
        TagGroup(name=name, description=descriptions.get(name), endpoints=buckets[name])
        for name in ordered
        if buckets[name]
    ]


def find_endpoint(
    spec: Spec,
    method: str,
    path: str,
    hidden_paths: Iterable[str] = DEFAULT_HIDDEN_PATHS,
) -> Endpoint:
    """Return the visible endpoint for *method* (any case) and *path*.

    Raises:
        EndpointNotFoundError: If the pair is unknown or its path is hidden.
    """
    wanted = method.lower()
    for endpoint in extract_endpoints(spec, hidden_paths):
        if endpoint.path == path and endpoint.method.value == wanted:
            return endpoint
    raise EndpointNotFoundError(f"No endpoint {method.upper()} {path} in spec")
