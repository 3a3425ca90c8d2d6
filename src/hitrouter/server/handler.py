"""ASGI dispatcher — resolves, invokes, and counts.

The only component that touches raw ASGI directly. Builds a Request from
the scope, resolves it against the route table, runs the matched handler
or the matching fallback, and sends the Response back through send().

Every request that resolves to a tracked route is counted exactly once,
whether the handler returns, raises, or is cancelled.
"""

import inspect
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

from hitrouter._internal.asgi import Receive, Scope, Send
from hitrouter._internal.invoke import invoke
from hitrouter.errors import MethodNotAllowed, NotFound
from hitrouter.http.request import Request
from hitrouter.http.response import Redirect, Response
from hitrouter.routing.route import MethodMismatch, RouteMatch, SlashRedirect
from hitrouter.routing.router import Router
from hitrouter.server.errors import call_fallback, http_error_response
from hitrouter.server.negotiation import negotiate
from hitrouter.server.sender import send_response
from hitrouter.server.terminal_errors import log_error
from hitrouter.tracking.registry import EndpointRegistry

# RFC 3986 path characters left unescaped in redirect locations
_LOCATION_SAFE = "/:@!$&'()*+,;=-._~"


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    registry: EndpointRegistry,
    not_found: Callable[..., Any] | None = None,
    method_not_allowed: Callable[..., Any] | None = None,
    panic_handler: Callable[..., Any] | None = None,
) -> None:
    """Process a single HTTP request through the full pipeline.

    Failures raised by handlers (or by the fallbacks) are passed to
    *panic_handler* when one is configured; otherwise they propagate to
    the hosting server.
    """
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    try:
        response = await dispatch(
            request,
            router=router,
            registry=registry,
            not_found=not_found,
            method_not_allowed=method_not_allowed,
        )
    except Exception as exc:
        if panic_handler is None:
            raise
        log_error(exc, request)
        response = await call_fallback(panic_handler, 500, request, exc)

    await send_response(response, send, method=request.method)


async def dispatch(
    request: Request,
    *,
    router: Router,
    registry: EndpointRegistry,
    not_found: Callable[..., Any] | None = None,
    method_not_allowed: Callable[..., Any] | None = None,
) -> Response:
    """Resolve *request* and produce its Response."""
    outcome = router.resolve(request.method, request.path)

    if isinstance(outcome, RouteMatch):
        return await _invoke_route(outcome, request, registry)

    if isinstance(outcome, SlashRedirect):
        location = quote(outcome.location, safe=_LOCATION_SAFE)
        if request.query_string:
            location = f"{location}?{request.query_string}"
        # 308 keeps the method and body
        status = 301 if request.method in ("GET", "HEAD") else 308
        return negotiate(Redirect(location, status=status))

    if isinstance(outcome, MethodMismatch):
        if method_not_allowed is None:
            return http_error_response(MethodNotAllowed(outcome.allowed), request)
        allow_value = ", ".join(sorted(outcome.allowed))
        response = await call_fallback(method_not_allowed, 405, request, outcome.allowed)
        if response.header("Allow") is None:
            response = response.with_header("Allow", allow_value)
        return response

    if not_found is None:
        detail = f"No route matches {request.method} {request.path}"
        return http_error_response(NotFound(detail), request)
    return await call_fallback(not_found, 404, request)


async def _invoke_route(
    match: RouteMatch,
    request: Request,
    registry: EndpointRegistry,
) -> Response:
    """Call the matched route handler and count the hit on every exit path."""
    route = match.route
    request = request.with_path_params(match.path_params)
    try:
        kwargs = _build_handler_kwargs(route.handler, request, match.path_params)
        result = await invoke(route.handler, **kwargs)
    finally:
        if route.token is not None:
            registry.hit(route.token)

    return negotiate(result)


def _build_handler_kwargs(
    handler: Callable[..., Any],
    request: Request,
    path_params: dict[str, str],
) -> dict[str, Any]:
    """Inspect handler signature and build kwargs from request + path params.

    Resolution order:
    1. ``request`` parameter (by name or ``Request`` annotation)
    2. Path parameters (by name, converted through the annotation when possible)
    """
    sig = inspect.signature(handler, eval_str=True)
    kwargs: dict[str, Any] = {}

    for name, param in sig.parameters.items():
        if name == "request" or param.annotation is Request:
            kwargs[name] = request
        elif name in path_params:
            value = path_params[name]
            if param.annotation is not inspect.Parameter.empty and param.annotation is not str:
                try:
                    kwargs[name] = param.annotation(value)
                except (ValueError, TypeError):
                    kwargs[name] = value
            else:
                kwargs[name] = value

    return kwargs
