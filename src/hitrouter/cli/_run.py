"""``hitrouter run`` — serve a router with the pounce ASGI server."""

import argparse
import sys

from hitrouter.cli._resolve import resolve_app


def run_server(args: argparse.Namespace) -> None:
    """Resolve ``args.app`` and serve it; reload is on when ``config.debug`` is set."""
    try:
        router = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    from hitrouter.server.dev import run_server as _run

    _run(
        router,
        args.host or router.config.host,
        args.port or router.config.port,
        reload=router.config.debug,
        log_level=router.config.log_level,
        app_path=args.app,
    )
