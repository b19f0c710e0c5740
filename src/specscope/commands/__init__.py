"""Built-in CLI commands for specscope.

* :mod:`~specscope.commands.browse` -- read-only views of the spec:
  ``info``, ``endpoints``, ``show``, ``schema``.
* :mod:`~specscope.commands.playground` -- request construction and
  execution: ``curl``, ``try``.

Each module exports plain callback functions registered directly on the
root app. They share :func:`open_session`, which builds an
:class:`~specscope.session.ExplorerSession` from the context prepared by
:func:`~specscope.app.main_callback` and loads its spec.
"""

from __future__ import annotations

import asyncio

import typer

from specscope.exceptions import SpecLoadError
from specscope.session import ExplorerSession, SessionState


def open_session(ctx: typer.Context) -> ExplorerSession:
    """Create a session from ``ctx.obj`` and load its spec.

    ``ctx.obj`` may also carry a ``"transport"`` (an
    :class:`httpx.AsyncBaseTransport`) used for live requests.

    Raises:
        SpecLoadError: If the spec cannot be loaded.
    """
    obj = ctx.obj or {}
    session = ExplorerSession(
        obj["config"],
        credential=obj.get("credential"),
        transport=obj.get("transport"),
    )
    if asyncio.run(session.load()) is SessionState.FAILED:
        raise SpecLoadError(session.error or "Spec could not be loaded")
    return session
