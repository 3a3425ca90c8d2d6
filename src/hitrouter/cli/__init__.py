"""Hitrouter CLI — route listing, dev server, and hit-coverage reports.

Entry point registered as ``hitrouter`` in ``pyproject.toml``::

    [project.scripts]
    hitrouter = "hitrouter.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``hitrouter`` command."""
    parser = argparse.ArgumentParser(
        prog="hitrouter",
        description="Hitrouter — find the endpoints your tests never hit.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- hitrouter routes -------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument("app", help="Import string (e.g. myapp:router)")

    # -- hitrouter run ----------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Serve a router with pounce")
    run_parser.add_argument("app", help="Import string (e.g. myapp:router)")
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")

    # -- hitrouter report -------------------------------------------------
    report_parser = subparsers.add_parser(
        "report", help="Print hit counts from a running server"
    )
    report_parser.add_argument("url", help="Base URL of the server (e.g. http://127.0.0.1:8000)")
    report_parser.add_argument(
        "--path",
        default="/endpoints",
        help="Introspection path on the server (default: /endpoints)",
    )
    report_parser.add_argument(
        "--unhit",
        action="store_true",
        help="Only list endpoints that were never hit",
    )
    report_parser.add_argument(
        "--fail-on-unhit",
        action="store_true",
        help="Exit with status 1 if any endpoint was never hit",
    )
    report_parser.add_argument(
        "--timeout",
        type=float,
        default=10.0,
        help="Request timeout in seconds",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from hitrouter.cli._routes import run_routes

        run_routes(args)
    elif args.command == "run":
        from hitrouter.cli._run import run_server

        run_server(args)
    elif args.command == "report":
        from hitrouter.cli._report import run_report

        run_report(args)
