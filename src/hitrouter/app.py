"""HitRouter — an ASGI router that counts how often each route is served.

Mutable during setup (route registration). Frozen when the first ASGI
scope arrives; from then on the route table is read-only and only the
hit counters change.
"""

import itertools
import threading
from collections.abc import Callable
from pathlib import Path

from hitrouter._internal.asgi import Receive, Scope, Send
from hitrouter._internal.types import FallbackHandler, Handler, PanicHandler
from hitrouter.config import RouterConfig
from hitrouter.errors import ConfigurationError
from hitrouter.http.response import Response
from hitrouter.routing.route import Route
from hitrouter.routing.router import Router
from hitrouter.server.files import FileServer
from hitrouter.server.handler import handle_request
from hitrouter.tracking.registry import Endpoint, EndpointRegistry
from hitrouter.tracking.report import endpoints_response

_FILEPATH_SUFFIX = "/*filepath"


class HitRouter:
    """Request router with per-endpoint hit counting.

    Not built for throughput: every counted request takes the registry
    lock. Use it to find endpoints a test suite never exercises — after a
    run, ``GET /endpoints/unhit`` lists them.

    Usage::

        router = HitRouter()

        @router.route("/users/:id")
        def show_user(id: int):
            return {"id": id}

        router.post("/users", create_user)

    Collaborators (all optional, assignable at any time before serving):

    - ``not_found(request)`` — replaces the default 404 response.
    - ``method_not_allowed(request, allowed)`` — replaces the default 405.
    - ``panic_handler(request, exc)`` — recovers handler failures; without
      one they propagate to the ASGI server.

    Thread safety:
        Registration is single-threaded. The freeze transition uses a
        Lock + double-check so exactly one thread compiles the route
        table even if several workers deliver their first scope at once.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_registry",
        "_router",
        "_tokens",
        "config",
        "method_not_allowed",
        "not_found",
        "panic_handler",
    )

    def __init__(
        self,
        config: RouterConfig | None = None,
        *,
        not_found: FallbackHandler | None = None,
        method_not_allowed: FallbackHandler | None = None,
        panic_handler: PanicHandler | None = None,
    ) -> None:
        self.config: RouterConfig = config or RouterConfig()
        self.not_found = not_found
        self.method_not_allowed = method_not_allowed
        self.panic_handler = panic_handler

        self._router = Router(redirect_trailing_slash=self.config.redirect_trailing_slash)
        self._registry = EndpointRegistry(strict=self.config.debug)
        self._tokens = itertools.count(1)
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        if self.config.introspection:
            self._add(
                "GET", self.config.endpoints_path, self._report_endpoints, internal=True
            )
            self._add(
                "GET", self.config.endpoints_unhit_path, self._report_unhit, internal=True
            )

    # -- Route registration --

    def handle(self, method: str, path: str, handler: Handler) -> int:
        """Register *handler* for *method* and *path*.

        Returns the endpoint token the hits are counted under. Raises
        ``RouteConflict`` if the pattern is ambiguous with an existing
        one for the same method (exact duplicates included).
        """
        return self._add(method.upper(), path, handler)

    def get(self, path: str, handler: Handler) -> int:
        """Shortcut for ``handle("GET", path, handler)``."""
        return self.handle("GET", path, handler)

    def head(self, path: str, handler: Handler) -> int:
        """Shortcut for ``handle("HEAD", path, handler)``."""
        return self.handle("HEAD", path, handler)

    def options(self, path: str, handler: Handler) -> int:
        """Shortcut for ``handle("OPTIONS", path, handler)``."""
        return self.handle("OPTIONS", path, handler)

    def post(self, path: str, handler: Handler) -> int:
        """Shortcut for ``handle("POST", path, handler)``."""
        return self.handle("POST", path, handler)

    def put(self, path: str, handler: Handler) -> int:
        """Shortcut for ``handle("PUT", path, handler)``."""
        return self.handle("PUT", path, handler)

    def patch(self, path: str, handler: Handler) -> int:
        """Shortcut for ``handle("PATCH", path, handler)``."""
        return self.handle("PATCH", path, handler)

    def delete(self, path: str, handler: Handler) -> int:
        """Shortcut for ``handle("DELETE", path, handler)``."""
        return self.handle("DELETE", path, handler)

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            path: Route pattern. ``:name`` captures one segment,
                ``*name`` (last segment only) captures the rest of the path.
            methods: HTTP methods. Defaults to ``["GET"]``. Each method
                becomes its own endpoint with its own hit count.
        """

        def decorator(func: Handler) -> Handler:
            for method in methods or ["GET"]:
                self.handle(method, path, func)
            return func

        return decorator

    def serve_files(self, path: str, root: str | Path) -> None:
        """Serve files from *root* under *path*.

        *path* must end with ``/*filepath``, e.g. ``"/static/*filepath"``.
        File requests are not counted and never show up in the listings.
        """
        if not path.endswith(_FILEPATH_SUFFIX):
            msg = f"serve_files path must end with {_FILEPATH_SUFFIX!r}: {path!r}"
            raise ConfigurationError(msg)
        self._check_not_frozen()
        self._router.add(Route("GET", path, FileServer(root)))

    def _add(self, method: str, path: str, handler: Handler, *, internal: bool = False) -> int:
        self._check_not_frozen()
        token = next(self._tokens)
        # The route table validates first; a conflict leaves the registry untouched
        self._router.add(Route(method, path, handler, token))
        self._registry.record(token, method, path, internal=internal)
        return token

    # -- Introspection --

    def endpoints(self, *, unhit: bool = False) -> list[Endpoint]:
        """Snapshot of the registered endpoints, introspection routes excluded."""
        return self._registry.snapshot(unhit=unhit)

    @property
    def routes(self) -> list[Route]:
        """Every route in the table, file routes and introspection routes included."""
        return self._router.routes

    def _report_endpoints(self) -> Response:
        return endpoints_response(self._registry.snapshot(), indent=self.config.json_indent)

    def _report_unhit(self) -> Response:
        return endpoints_response(
            self._registry.snapshot(unhit=True), indent=self.config.json_indent
        )

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve this router with the pounce ASGI server."""
        from hitrouter.server.dev import run_server

        run_server(
            self,
            host or self.config.host,
            port or self.config.port,
            log_level=self.config.log_level,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        self._ensure_frozen()

        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            registry=self._registry,
            not_found=self.not_found,
            method_not_allowed=self.method_not_allowed,
            panic_handler=self.panic_handler,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Acknowledge the ASGI lifespan protocol; there are no hooks to run."""
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._router.compile()
            self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot register routes after the router has started serving requests. "
                "Register every route before the first request."
            )
            raise ConfigurationError(msg)
