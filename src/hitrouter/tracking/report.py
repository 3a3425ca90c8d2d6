"""Introspection report — the JSON body served at ``/endpoints``.

Field names and the two-space, one-level-nested indentation match the
format existing coverage tooling already parses::

    [
        {
          "Method": "GET",
          "Path": "/users/:id",
          "Hits": 3
        }
      ]
"""

import json as json_module
import logging
from collections.abc import Iterable

from hitrouter.http.response import Response
from hitrouter.tracking.registry import Endpoint

logger = logging.getLogger("hitrouter.server")

JSON_CONTENT_TYPE = "application/json"


def endpoint_payload(endpoints: Iterable[Endpoint]) -> list[dict[str, object]]:
    """Serialisable form of *endpoints*, sorted by path then method."""
    ordered = sorted(endpoints, key=lambda e: (e.path, e.method))
    return [{"Method": e.method, "Path": e.path, "Hits": e.hits} for e in ordered]


def render_endpoints(endpoints: Iterable[Endpoint], *, indent: int = 2) -> str:
    """Encode *endpoints* as indented JSON, every line after the first prefixed."""
    text = json_module.dumps(endpoint_payload(endpoints), indent=indent)
    prefix = " " * indent
    return f"\n{prefix}".join(text.split("\n"))


def endpoints_response(endpoints: Iterable[Endpoint], *, indent: int = 2) -> Response:
    """Build the ``200 application/json`` report, or a ``500`` if encoding fails."""
    try:
        body = render_endpoints(endpoints, indent=indent)
    except (TypeError, ValueError) as exc:
        logger.error("Failed to encode endpoint report: %s", exc)
        return Response(body=str(exc), status=500)
    return Response(body=body, content_type=JSON_CONTENT_TYPE)
