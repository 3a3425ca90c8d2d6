"""Route table with per-method trie matching.

Each HTTP method owns a trie keyed by path segment. At every level the
static children are tried first, then the single parameter edge, then the
catch-all, so ``/users/new`` wins over ``/users/:id`` without scanning
every registered pattern.
"""

from dataclasses import dataclass

from hitrouter.errors import ConfigurationError, RouteConflict
from hitrouter.routing.route import (
    MethodMismatch,
    NoMatch,
    PathSegment,
    Resolution,
    Route,
    RouteMatch,
    SegmentKind,
    SlashRedirect,
)


def split_path(path: str) -> list[str]:
    """Split a path into raw segments, keeping empty ones.

    ``"/"`` -> ``[""]``, ``"/a"`` -> ``["a"]``, ``"/a/"`` -> ``["a", ""]``.
    Keeping the trailing empty segment is what makes ``/a`` and ``/a/``
    distinct routes.
    """
    return path.removeprefix("/").split("/")


def parse_path(pattern: str) -> list[PathSegment]:
    """Parse a route pattern into segments.

    Examples::

        "/users"          -> [PathSegment("users")]
        "/users/:id"      -> [PathSegment("users"), PathSegment("id", PARAM)]
        "/files/*rest"    -> [PathSegment("files"), PathSegment("rest", CATCH_ALL)]

    Raises ``ConfigurationError`` for patterns that do not start with ``/``,
    unnamed or repeated parameters, and catch-alls that are not the final segment.
    """
    if not pattern.startswith("/"):
        msg = f"Route pattern must start with '/': {pattern!r}"
        raise ConfigurationError(msg)

    parts = split_path(pattern)
    segments: list[PathSegment] = []
    names: set[str] = set()
    for index, part in enumerate(parts):
        if part[:1] in (":", "*"):
            name = part[1:]
            if not name or ":" in name or "*" in name:
                msg = f"Invalid parameter segment {part!r} in route pattern {pattern!r}"
                raise ConfigurationError(msg)
            if name in names:
                msg = (
                    f"Invalid parameter segment {part!r} in route pattern {pattern!r}: "
                    f"name {name!r} is already used"
                )
                raise ConfigurationError(msg)
            names.add(name)
            if part[0] == "*":
                if index != len(parts) - 1:
                    msg = f"Catch-all {part!r} must be the final segment of {pattern!r}"
                    raise ConfigurationError(msg)
                segments.append(PathSegment(name, SegmentKind.CATCH_ALL))
            else:
                segments.append(PathSegment(name, SegmentKind.PARAM))
        else:
            segments.append(PathSegment(part))
    return segments


class _TrieNode:
    """A node in a method trie. Mutable during registration only."""

    __slots__ = ("catch_all", "children", "param_child", "route")

    def __init__(self) -> None:
        # Static segment children: "users" -> node
        self.children: dict[str, _TrieNode] = {}
        # Single parameter child (one parameter name per position)
        self.param_child: _ParamEdge | None = None
        # Catch-all edge, consumes the rest of the path
        self.catch_all: _CatchAllEdge | None = None
        # Route terminating at this node
        self.route: Route | None = None


@dataclass(slots=True)
class _ParamEdge:
    """A parameter edge in the trie."""

    param_name: str
    node: _TrieNode


@dataclass(slots=True)
class _CatchAllEdge:
    """A catch-all edge — always terminal."""

    param_name: str
    route: Route


def _first_pattern(node: _TrieNode) -> str:
    """Return some pattern registered at or below *node* (for error messages)."""
    if node.route is not None:
        return node.route.path
    if node.catch_all is not None:
        return node.catch_all.route.path
    for child in node.children.values():
        found = _first_pattern(child)
        if found:
            return found
    if node.param_child is not None:
        return _first_pattern(node.param_child.node)
    return ""


class Router:
    """Route table with per-method trie matching.

    Usage::

        router = Router()
        router.add(Route("GET", "/users/:id", handler))
        router.compile()
        outcome = router.resolve("GET", "/users/42")

    All ``add`` calls must complete before the first ``resolve``; the
    tries are never locked, so they must not change while serving.
    """

    __slots__ = ("_compiled", "_redirect_trailing_slash", "_roots")

    def __init__(self, *, redirect_trailing_slash: bool = True) -> None:
        self._roots: dict[str, _TrieNode] = {}
        self._redirect_trailing_slash = redirect_trailing_slash
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route. Must be called before compile().

        Raises ``RouteConflict`` when the pattern is ambiguous with one
        already registered for the same method. Conflicts are always
        detected on pre-existing nodes, so a rejected pattern leaves the
        trie unchanged.
        """
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        segments = parse_path(route.path)
        node = self._roots.setdefault(route.method, _TrieNode())

        for seg in segments:
            if seg.kind is SegmentKind.CATCH_ALL:
                if node.catch_all is not None:
                    existing = node.catch_all
                    reason = (
                        "duplicate route"
                        if existing.param_name == seg.value
                        else f"catch-all '*{seg.value}' clashes with '*{existing.param_name}'"
                    )
                    raise RouteConflict(route.method, route.path, existing.route.path, reason)
                if node.children or node.param_child is not None:
                    raise RouteConflict(
                        route.method,
                        route.path,
                        _first_pattern(node),
                        f"catch-all '*{seg.value}' collides with routes at the same position",
                    )
                node.catch_all = _CatchAllEdge(seg.value, route)
                return

            if node.catch_all is not None:
                raise RouteConflict(
                    route.method,
                    route.path,
                    node.catch_all.route.path,
                    f"segment {seg.value!r} collides with catch-all '*{node.catch_all.param_name}'",
                )

            if seg.kind is SegmentKind.PARAM:
                edge = node.param_child
                if edge is None:
                    edge = node.param_child = _ParamEdge(seg.value, _TrieNode())
                elif edge.param_name != seg.value:
                    raise RouteConflict(
                        route.method,
                        route.path,
                        _first_pattern(edge.node),
                        f"parameter ':{seg.value}' clashes with ':{edge.param_name}'",
                    )
                node = edge.node
            else:
                child = node.children.get(seg.value)
                if child is None:
                    child = node.children[seg.value] = _TrieNode()
                node = child

        if node.route is not None:
            raise RouteConflict(route.method, route.path, node.route.path, "duplicate route")
        node.route = route

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    @property
    def routes(self) -> list[Route]:
        """Return all registered routes, in trie order per method."""
        result: list[Route] = []
        for root in self._roots.values():
            _collect_routes(root, result)
        return result

    def resolve(self, method: str, path: str) -> Resolution:
        """Resolve a request to a route or a routing outcome.

        Precedence: a match under *method*, then a trailing-slash
        redirect under *method*, then the set of other methods that
        match *path*, and finally ``NoMatch``.
        """
        parts = split_path(path)
        root = self._roots.get(method)

        if root is not None:
            found = _match_node(root, parts, 0, {})
            if found is not None:
                route, params = found
                return RouteMatch(route=route, path_params=params)

            if self._redirect_trailing_slash and path != "/":
                location = path[:-1] if path.endswith("/") else path + "/"
                if _match_node(root, split_path(location), 0, {}) is not None:
                    return SlashRedirect(location)

        allowed = frozenset(
            other
            for other, other_root in self._roots.items()
            if other != method and _match_node(other_root, parts, 0, {}) is not None
        )
        if allowed:
            return MethodMismatch(allowed)
        return NoMatch()


def _collect_routes(node: _TrieNode, result: list[Route]) -> None:
    """Recursively collect routes from a trie."""
    if node.route is not None:
        result.append(node.route)
    for child in node.children.values():
        _collect_routes(child, result)
    if node.param_child is not None:
        _collect_routes(node.param_child.node, result)
    if node.catch_all is not None:
        result.append(node.catch_all.route)


def _match_node(
    node: _TrieNode,
    parts: list[str],
    index: int,
    params: dict[str, str],
) -> tuple[Route, dict[str, str]] | None:
    """Recursively match path parts against a trie.

    Backtracks: if a static branch dead-ends deeper down, the parameter
    and catch-all branches at this level are still tried.
    """
    # All parts consumed
    if index == len(parts):
        if node.route is not None:
            return node.route, params
        return None

    part = parts[index]

    # 1. Static child (exact match)
    child = node.children.get(part)
    if child is not None:
        result = _match_node(child, parts, index + 1, params)
        if result is not None:
            return result

    # 2. Parameter child: exactly one non-empty segment
    edge = node.param_child
    if edge is not None and part:
        result = _match_node(edge.node, parts, index + 1, {**params, edge.param_name: part})
        if result is not None:
            return result

    # 3. Catch-all: the remainder, separators included
    if node.catch_all is not None:
        remaining = "/".join(parts[index:])
        return node.catch_all.route, {**params, node.catch_all.param_name: remaining}

    return None
