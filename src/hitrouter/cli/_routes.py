"""``hitrouter routes`` — list registered routes."""

import argparse
import sys

from hitrouter.cli._resolve import resolve_app


def _handler_name(handler: object) -> str:
    name = getattr(handler, "__qualname__", None) or getattr(handler, "__name__", None)
    return name or type(handler).__name__


def run_routes(args: argparse.Namespace) -> None:
    """Print a METHOD / PATH / HANDLER table for the resolved router."""
    try:
        router = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    routes = sorted(router.routes, key=lambda r: (r.path, r.method))
    if not routes:
        print("No routes registered.")
        return

    rows = [
        (
            route.method,
            route.path,
            _handler_name(route.handler) + ("" if route.token is not None else " (untracked)"),
        )
        for route in routes
    ]

    max_method = max(6, *(len(r[0]) for r in rows))  # "METHOD" header
    max_path = max(4, *(len(r[1]) for r in rows))  # "PATH" header

    fmt = f"{{:<{max_method}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "HANDLER"))
    sep_len = max_method + max_path + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for method, path, handler_name in rows:
        print(fmt.format(method, path, handler_name))
