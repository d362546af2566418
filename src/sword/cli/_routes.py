"""``sword routes``: list registered routes in priority order."""

import argparse
import sys

from sword.cli._resolve import resolve_engine
from sword.errors import ConfigurationError


def run_routes(args: argparse.Namespace) -> None:
    """Print a table of METHOD, PATTERN and CALLBACK for ``args.engine``."""
    try:
        engine = resolve_engine(args.engine)
    except (ConfigurationError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    routes = engine.router().routes
    if not routes:
        print("No routes registered.")
        return

    rows: list[tuple[str, str, str]] = []
    for route in routes:
        methods_str = "*" if route.methods is None else "|".join(route.methods)
        name = route.callback.name
        if route.pass_route:
            name = f"{name} (pass_route)"
        rows.append((methods_str, route.path, name))

    width_methods = max(len("METHOD"), *(len(r[0]) for r in rows))
    width_path = max(len("PATTERN"), *(len(r[1]) for r in rows))

    fmt = f"{{:<{width_methods}}}  {{:<{width_path}}}  {{}}"
    print(fmt.format("METHOD", "PATTERN", "CALLBACK"))
    print("-" * min(width_methods + width_path + 4 + max(len(r[2]) for r in rows), 80))
    for row in rows:
        print(fmt.format(*row))
