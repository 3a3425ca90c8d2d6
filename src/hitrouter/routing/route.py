"""Route definitions and resolution outcomes (frozen dataclasses)."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeAlias


class SegmentKind(Enum):
    STATIC = "static"
    PARAM = "param"
    CATCH_ALL = "catch_all"


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route pattern.

    Static:    ``/users``     (kind=STATIC, value="users")
    Param:     ``/:id``       (kind=PARAM, value="id")
    Catch-all: ``/*filepath`` (kind=CATCH_ALL, value="filepath")
    """

    value: str
    kind: SegmentKind = SegmentKind.STATIC


@dataclass(frozen=True, slots=True)
class Route:
    """A registered route.

    ``token`` is the registry key used for hit accounting; ``None`` marks
    an untracked route (static file delegation).
    """

    method: str
    path: str
    handler: Callable[..., Any]
    token: int | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """The request resolved to a route."""

    route: Route
    path_params: dict[str, str]


@dataclass(frozen=True, slots=True)
class SlashRedirect:
    """Nothing matched, but the path with its trailing slash toggled does."""

    location: str


@dataclass(frozen=True, slots=True)
class MethodMismatch:
    """The path matches, but only under other methods."""

    allowed: frozenset[str]


@dataclass(frozen=True, slots=True)
class NoMatch:
    """No route matches the path under any method."""


Resolution: TypeAlias = RouteMatch | SlashRedirect | MethodMismatch | NoMatch
