"""Server startup — runs a HitRouter under the pounce ASGI server.

The hosting server is the only part of the transport hitrouter does not
implement itself; it is imported lazily so the library works with any
ASGI server.
"""

from __future__ import annotations


def run_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
    log_level: str = "info",
    app_path: str | None = None,
) -> None:
    """Start a single-worker pounce server for *app*.

    Args:
        app: ASGI callable (a HitRouter instance).
        host: Bind host address.
        port: Bind port number.
        reload: Enable auto-reload on file changes (development only).
        log_level: Log level handed to the server.
        app_path: Optional ``"module:attribute"`` import string. When
            provided, pounce reimports the app on each reload cycle so
            that code changes on disk take effect immediately.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        reload=reload,
        log_level=log_level,
    )
    server = Server(config, app, app_path=app_path)
    server.run()
