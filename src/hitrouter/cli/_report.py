"""``hitrouter report`` — fetch hit counts from a running server.

Reads the full ``/endpoints`` listing over HTTP (``--unhit`` filters
locally, so only one introspection path needs to be known) and prints a
table. With ``--fail-on-unhit`` the exit status gates a CI job on every
endpoint having been exercised.
"""

import argparse
import sys
from typing import Any

import httpx


def fetch_endpoints(url: str, *, timeout: float = 10.0) -> list[dict[str, Any]]:
    """GET *url* and return the decoded endpoint listing.

    Raises ``httpx.HTTPError`` on transport failures and non-2xx answers,
    ``ValueError`` if the body is not a JSON list.
    """
    response = httpx.get(url, timeout=timeout)
    response.raise_for_status()
    payload = response.json()
    if not isinstance(payload, list):
        msg = f"Expected a JSON array from {url}, got {type(payload).__name__}"
        raise ValueError(msg)
    return payload


def format_table(endpoints: list[dict[str, Any]]) -> str:
    """Render endpoints as a METHOD / PATH / HITS table."""
    rows = [
        (str(e.get("Method", "")), str(e.get("Path", "")), str(e.get("Hits", 0)))
        for e in sorted(endpoints, key=lambda e: (e.get("Path", ""), e.get("Method", "")))
    ]
    max_method = max([6, *(len(r[0]) for r in rows)])
    max_path = max([4, *(len(r[1]) for r in rows)])

    fmt = f"{{:<{max_method}}}  {{:<{max_path}}}  {{:>4}}"
    lines = [fmt.format("METHOD", "PATH", "HITS"), "-" * (max_method + max_path + 8)]
    lines.extend(fmt.format(*row) for row in rows)
    return "\n".join(lines)


def run_report(args: argparse.Namespace) -> None:
    """Print the report; exit 1 on fetch errors or, when asked, on unhit endpoints."""
    url = args.url.rstrip("/") + args.path
    try:
        endpoints = fetch_endpoints(url, timeout=args.timeout)
    except (httpx.HTTPError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    unhit = [e for e in endpoints if e.get("Hits", 0) == 0]
    shown = unhit if args.unhit else endpoints

    if shown:
        print(format_table(shown))
    else:
        print("No unhit endpoints." if args.unhit else "No endpoints registered.")

    total = len(endpoints)
    print(f"\n{total - len(unhit)}/{total} endpoints hit")

    if args.fail_on_unhit and unhit:
        raise SystemExit(1)
