"""Asynchronous HTTP client that executes built requests.

:class:`ApiClient` wraps :class:`httpx.AsyncClient` and sends a
:class:`~specscope.models.BuiltRequest` exactly as built: no retries, no
redirect following, no extra headers. Every call returns an outcome instead
of raising:

* :class:`~specscope.models.ResponseResult` whenever an HTTP response
  arrived, including 4xx and 5xx statuses;
* :class:`~specscope.models.TransportFailure` for timeouts, DNS failures,
  refused connections and other :class:`httpx.RequestError` cases.

Elapsed wall-clock time is measured with :func:`time.perf_counter` around
the request and body read.
"""

from __future__ import annotations

import time
from typing import Optional, Union

import httpx

from specscope.client.response import extract_response_data
from specscope.models import (
    BuiltRequest,
    RequestConfig,
    ResponseResult,
    TransportFailure,
)
from specscope.output import get_output

Outcome = Union[ResponseResult, TransportFailure]


class ApiClient:
    """Asynchronous client for "try it" requests.

    Must be used as an async context manager.

    Args:
        config: Timeout and SSL verification settings.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`
            in tests.

    Example::

        async with ApiClient(RequestConfig(timeout=10)) as client:
            outcome = await client.send(built)
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config or RequestConfig()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> ApiClient:
        self._client = httpx.AsyncClient(
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=False,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    async def send(self, request: BuiltRequest) -> Outcome:
        """Execute *request* and classify the outcome.

        Returns:
            A :class:`ResponseResult` for any HTTP response, or a
            :class:`TransportFailure` when no response was received.
        """
        assert self._client is not None, "Client not initialised -- use as async context manager"

        output = get_output()
        output.debug(f"{request.method} {request.url}")
        start = time.perf_counter()
        try:
            response = await self._client.request(
                request.method,
                request.url,
                headers=request.headers,
                content=request.body,
            )
        except httpx.RequestError as exc:
            duration_ms = _elapsed_ms(start)
            output.debug(f"Request failed after {duration_ms:.0f}ms: {exc!r}")
            return TransportFailure(
                message=str(exc) or type(exc).__name__, duration_ms=duration_ms
            )

        duration_ms = _elapsed_ms(start)
        output.debug(f"HTTP {response.status_code} in {duration_ms:.0f}ms")
        return ResponseResult(
            status_code=response.status_code,
            reason=response.reason_phrase or "",
            headers=dict(response.headers),
            body=extract_response_data(response),
            duration_ms=duration_ms,
        )


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000.0
