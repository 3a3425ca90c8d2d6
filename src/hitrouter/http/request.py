"""Immutable HTTP request.

Frozen metadata with async body access. Path parameters are attached by
the dispatcher once the route table has resolved the request.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import parse_qsl

from hitrouter._internal.asgi import Receive, Scope
from hitrouter.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, etc.) is frozen at creation.
    Body is accessed asynchronously via ``.body()``, ``.json()``, ``.text()``.
    """

    method: str
    path: str
    headers: Headers
    query_string: str
    path_params: dict[str, str]
    http_version: str
    client: tuple[str, int] | None

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Private: mutable cache for the body bytes
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def query(self) -> dict[str, str]:
        """Query string parameters (first value wins)."""
        params: dict[str, str] = {}
        for key, value in parse_qsl(self.query_string, keep_blank_values=True):
            params.setdefault(key, value)
        return params

    @property
    def url(self) -> str:
        """Request path plus query string."""
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        """Return a copy carrying the captured path parameters.

        The body cache is shared so a body read before routing is not lost.
        """
        return replace(self, path_params=path_params)

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached — the ASGI receive is consumed once, then
        the same bytes are returned on subsequent calls.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(await self.body())

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query_string=scope.get("query_string", b"").decode("latin-1"),
            path_params={},
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
            _receive=receive,
        )
