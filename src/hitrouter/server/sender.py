"""ASGI response sending — translates Response objects to ASGI messages."""

import logging

from hitrouter._internal.asgi import Send
from hitrouter.http.response import Response

logger = logging.getLogger("hitrouter.server")


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


async def send_response(response: Response, send: Send, *, method: str = "GET") -> None:
    """Translate a Response into ASGI send() calls.

    Once the start message is out the response is committed, so a
    failure writing the body is logged and swallowed rather than raised
    into a request that can no longer change its status.
    A HEAD response advertises the full content-length but sends no body.
    """
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    for name, value in response.headers:
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

    body = response.body_bytes if _body_allowed(response.status) else b""

    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))
    if method == "HEAD":
        body = b""

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    try:
        await send(
            {
                "type": "http.response.body",
                "body": body,
            }
        )
    except OSError as exc:
        logger.warning("Failed to write %d-byte response body: %s", len(body), exc)
