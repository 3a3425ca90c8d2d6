"""Fallback responses for routing outcomes and recovered handler failures.

Turns NotFound / MethodNotAllowed outcomes and panics into Response
objects, using the configured collaborator handlers or plain defaults.
"""

import inspect
import logging
from collections.abc import Callable
from typing import Any

from hitrouter._internal.invoke import invoke
from hitrouter.errors import HTTPError
from hitrouter.http.request import Request
from hitrouter.http.response import Response
from hitrouter.server.negotiation import negotiate

logger = logging.getLogger("hitrouter.server")


async def call_fallback(
    handler: Callable[..., Any],
    status: int,
    *args: Any,
) -> Response:
    """Invoke a collaborator handler with as many positional args as it takes.

    A NotFound handler may accept ``()`` or ``(request)``; a
    MethodNotAllowed handler may also take ``(request, allowed)``; a
    panic handler ``(request, exc)``. Sync and async handlers both work.
    A plain ``200`` result is replaced by *status* so a handler that just
    returns a string (or nothing) still produces the right error code.
    """
    params = list(inspect.signature(handler).parameters.values())
    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params):
        count = len(args)
    else:
        count = min(len(params), len(args))

    result = await invoke(handler, *args[:count])
    if result is None:
        return Response(body="", status=status)
    response = negotiate(result)
    if response.status == 200:
        response = response.with_status(status)
    return response


def http_error_response(exc: HTTPError, request: Request) -> Response:
    """Default plain-text response for an HTTPError."""
    logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)
    response = Response(body=exc.detail or f"Error {exc.status}").with_status(exc.status)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response

