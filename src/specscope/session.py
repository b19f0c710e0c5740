"""Explorer session -- one loaded spec and at most one in-flight request.

An :class:`ExplorerSession` ties the pure engine (parser, synthesizer,
request builder) to the two suspension points of an interactive explorer:

* :meth:`ExplorerSession.load` fetches and parses the spec exactly once,
  moving :attr:`~ExplorerSession.state` from ``LOADING`` to ``READY`` or
  ``FAILED``. A failed load is terminal for the session; it is not
  retried.
* :meth:`ExplorerSession.execute` runs one "try it" request. Starting
  another request, or selecting a different endpoint, cancels the one in
  flight and discards its result (the superseded call returns ``None``), so
  a slow response can never overwrite a newer one.

Everything else (endpoint lists, tag groups, examples, built requests) is
recomputed from the immutable spec on each call.
"""

from __future__ import annotations

import asyncio
import enum
from typing import Mapping, Optional

import httpx

from specscope.client.async_client import ApiClient, Outcome
from specscope.client.request_builder import build_request, to_curl
from specscope.exceptions import SpecLoadError
from specscope.generator.example import default_parameter_values
from specscope.models import BuiltRequest, Endpoint, ExplorerConfig, Spec, TagGroup
from specscope.output import debug
from specscope.parser.indexer import (
    extract_endpoints,
    find_endpoint,
    group_endpoints_by_tag,
)
from specscope.parser.loader import load_spec_async, parse_spec
from specscope.parser.resolver import resolve_parameters


class SessionState(str, enum.Enum):
    """Lifecycle of the spec within a session."""

    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class ExplorerSession:
    """Interactive exploration state for one OpenAPI document.

    Args:
        config: Effective configuration (spec source, hidden paths,
            credential header, request settings).
        credential: Static API credential attached to every live request.
        transport: Optional httpx transport for live requests (tests).

    Example::

        session = ExplorerSession(config, credential="secret")
        if await session.load() is SessionState.READY:
            endpoint = session.find_endpoint("GET", "/markets/{id}")
            outcome = await session.execute(endpoint, {"id": "42"})
    """

    def __init__(
        self,
        config: ExplorerConfig,
        credential: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._credential = credential
        self._transport = transport
        self._state = SessionState.LOADING
        self._spec: Optional[Spec] = None
        self._error: Optional[str] = None
        self._load_task: Optional[asyncio.Future[None]] = None
        self._in_flight: Optional[asyncio.Future[Outcome]] = None
        self._selected: Optional[str] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def error(self) -> Optional[str]:
        """The load failure message, when :attr:`state` is ``FAILED``."""
        return self._error

    @property
    def spec(self) -> Spec:
        """The loaded spec.

        Raises:
            SpecLoadError: If the session is not ``READY``.
        """
        if self._spec is None:
            raise SpecLoadError(self._error or "Spec has not been loaded")
        return self._spec

    # ------------------------------------------------------------------ #
    # Loading
    # ------------------------------------------------------------------ #

    async def load(self) -> SessionState:
        """Fetch and parse the spec once; later calls return the settled state."""
        if self._state is not SessionState.LOADING:
            return self._state
        if self._load_task is None:
            self._load_task = asyncio.ensure_future(self._load())
        await self._load_task
        return self._state

    async def _load(self) -> None:
        try:
            raw = await load_spec_async(self._config.spec)
            spec = parse_spec(raw)
        except SpecLoadError as exc:
            self._error = str(exc)
            self._state = SessionState.FAILED
            debug(f"Spec load failed: {exc}")
        else:
            self._spec = spec
            self._state = SessionState.READY

    # ------------------------------------------------------------------ #
    # Navigation
    # ------------------------------------------------------------------ #

    def endpoints(self) -> list[Endpoint]:
        return extract_endpoints(self.spec, self._config.hidden_paths)

    def tag_groups(self) -> list[TagGroup]:
        return group_endpoints_by_tag(self.spec, self._config.hidden_paths)

    def find_endpoint(self, method: str, path: str) -> Endpoint:
        """Look up a visible endpoint (see :func:`~specscope.parser.indexer.find_endpoint`)."""
        return find_endpoint(self.spec, method, path, self._config.hidden_paths)

    def select(self, endpoint: Endpoint) -> dict[str, str]:
        """Make *endpoint* current and return its initial parameter values.

        Switching to a different endpoint cancels any in-flight request.
        """
        if endpoint.key != self._selected:
            self._cancel_in_flight()
            self._selected = endpoint.key
        return default_parameter_values(resolve_parameters(self.spec, endpoint.operation))

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    def build(
        self,
        endpoint: Endpoint,
        values: Mapping[str, str],
        body: Optional[str] = None,
    ) -> BuiltRequest:
        """Build the request for *endpoint* with the session's credential."""
        return build_request(
            self.spec,
            endpoint,
            values,
            body=body,
            credential=self._credential,
            credential_header=self._config.credential_header,
            base_url=self._config.base_url,
        )

    def curl(
        self,
        endpoint: Endpoint,
        values: Mapping[str, str],
        body: Optional[str] = None,
    ) -> str:
        """Shell command equivalent to :meth:`execute` with the same arguments."""
        return to_curl(self.build(endpoint, values, body))

    async def execute(
        self,
        endpoint: Endpoint,
        values: Mapping[str, str],
        body: Optional[str] = None,
    ) -> Optional[Outcome]:
        """Send the request for *endpoint* and return its outcome.

        Returns:
            The :class:`~specscope.models.ResponseResult` or
            :class:`~specscope.models.TransportFailure`, or ``None`` when
            this request was superseded before it completed.
        """
        built = self.build(endpoint, values, body)
        self._cancel_in_flight()
        self._selected = endpoint.key

        task = asyncio.ensure_future(self._send(built))
        self._in_flight = task
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            if self._in_flight is task:
                self._in_flight = None

        if task.cancelled():
            debug(f"Discarded superseded request {built.method} {built.url}")
            return None
        return task.result()

    async def _send(self, built: BuiltRequest) -> Outcome:
        async with ApiClient(self._config.request, self._transport) as client:
            return await client.send(built)

    def _cancel_in_flight(self) -> None:
        if self._in_flight is not None and not self._in_flight.done():
            self._in_flight.cancel()
        self._in_flight = None
