"""Endpoint registry — per-route hit counters behind a single lock.

Every tracked route gets an integer token at registration time. The
dispatcher reports each matched request against that token, and the
introspection routes read snapshots back out.

Thread safety:
    ``record``, ``hit`` and ``snapshot`` all take the same ``threading.Lock``
    for the duration of a dict lookup, so concurrent requests serialise on
    it. No I/O happens under the lock.
"""

import logging
import threading
from dataclasses import dataclass, replace

from hitrouter.errors import RegistryInvariantError

logger = logging.getLogger("hitrouter.registry")


@dataclass(frozen=True, slots=True)
class Endpoint:
    """One registered route and how many requests it has served."""

    method: str
    path: str
    hits: int = 0
    internal: bool = False


class EndpointRegistry:
    """Token-keyed endpoint table.

    ``strict=True`` turns an unknown token in ``hit()`` into a
    ``RegistryInvariantError``; otherwise the violation is logged and the
    request carries on.
    """

    __slots__ = ("_endpoints", "_lock", "_strict")

    def __init__(self, *, strict: bool = False) -> None:
        self._endpoints: dict[int, Endpoint] = {}
        self._lock = threading.Lock()
        self._strict = strict

    def record(self, token: int, method: str, path: str, *, internal: bool = False) -> None:
        """Create the endpoint for *token* with zero hits."""
        with self._lock:
            if token in self._endpoints:
                msg = f"Endpoint token {token} already recorded for {method} {path}"
                raise RegistryInvariantError(msg)
            self._endpoints[token] = Endpoint(method, path, internal=internal)
        logger.debug("Recorded endpoint %s %s (token %d)", method, path, token)

    def hit(self, token: int) -> None:
        """Count one dispatched request against *token*."""
        with self._lock:
            endpoint = self._endpoints.get(token)
            if endpoint is not None:
                self._endpoints[token] = replace(endpoint, hits=endpoint.hits + 1)
                return

        logger.error("Hit recorded for unknown endpoint token %d", token)
        if self._strict:
            msg = f"No endpoint recorded for token {token}"
            raise RegistryInvariantError(msg)

    def get(self, token: int) -> Endpoint | None:
        """Return the current state of one endpoint."""
        with self._lock:
            return self._endpoints.get(token)

    def snapshot(self, *, unhit: bool = False) -> list[Endpoint]:
        """Copy of the public endpoints, optionally only those never hit.

        Internal endpoints (the introspection routes) are always left out.
        Order is unspecified.
        """
        with self._lock:
            endpoints = list(self._endpoints.values())
        return [
            endpoint
            for endpoint in endpoints
            if not endpoint.internal and not (unhit and endpoint.hits > 0)
        ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._endpoints)
