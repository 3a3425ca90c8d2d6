"""Hitrouter exception hierarchy.

Shared across the route table, registry, dispatcher, and CLI so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class HitRouterError(Exception):
    """Base for all hitrouter-specific errors."""


class ConfigurationError(HitRouterError):
    """Raised when a route pattern or router setting is invalid.

    Always raised at registration time, never while serving.
    """


class RouteConflict(ConfigurationError):  # noqa: N818
    """Two patterns registered for the same method would match ambiguously."""

    def __init__(self, method: str, pattern: str, existing: str, reason: str) -> None:
        self.method = method
        self.pattern = pattern
        self.existing = existing
        super().__init__(
            f"{method} {pattern!r} conflicts with {method} {existing!r}: {reason}"
        )


class RegistryInvariantError(HitRouterError):
    """The endpoint registry was asked about a token it never recorded.

    Indicates a bug in the dispatcher, not a client error.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(HitRouterError):
    """An error that maps directly to an HTTP status code.

    Used to build the default 404/405 responses when no collaborator
    handler is configured.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405 — route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods and embeds
    the allowed methods in the detail string for developer visibility.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
