"""Request construction and execution.

Modules:
    :mod:`~specscope.client.request_builder` -- pure URL/header/body
    construction and ``curl`` rendering.
    :mod:`~specscope.client.async_client` -- :class:`ApiClient`, which sends
    a built request with :mod:`httpx` and classifies the outcome.
    :mod:`~specscope.client.response` -- body decoding and outcome
    rendering.

Example::

    from specscope.client import ApiClient, build_request

    built = build_request(spec, endpoint, {"id": "42"}, credential=key)
    async with ApiClient() as client:
        outcome = await client.send(built)
"""

from specscope.client.async_client import ApiClient
from specscope.client.request_builder import build_request, build_url, to_curl

__all__ = ["ApiClient", "build_request", "build_url", "to_curl"]
