"""Sword CLI: route introspection and a development server.

Entry point registered as ``sword`` in ``pyproject.toml``::

    [project.scripts]
    sword = "sword.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``sword`` command."""
    parser = argparse.ArgumentParser(
        prog="sword",
        description="Sword: request router and extensible method dispatcher.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- sword routes -----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument("engine", help="Import string (e.g. myapp:engine)")

    # -- sword run --------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the development server")
    run_parser.add_argument("engine", help="Import string (e.g. myapp:engine)")
    run_parser.add_argument("--host", default="127.0.0.1", help="Bind host address")
    run_parser.add_argument("--port", type=int, default=8000, help="Bind port number")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from sword.cli._routes import run_routes

        run_routes(args)
    elif args.command == "run":
        from sword.cli._run import run_server

        run_server(args)
