"""``sword run``: serve an engine with the stdlib WSGI server.

Meant for local development. Production deployments hand the engine,
which is a WSGI callable, to a real WSGI server.
"""

import argparse
import logging
import sys
from wsgiref.simple_server import make_server

from sword.cli._resolve import resolve_engine
from sword.errors import ConfigurationError

logger = logging.getLogger("sword.cli")


def run_server(args: argparse.Namespace) -> None:
    """Resolve ``args.engine`` and serve it on ``args.host``:``args.port``."""
    try:
        engine = resolve_engine(args.engine)
    except (ConfigurationError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    with make_server(args.host, args.port, engine) as server:
        print(f"Serving {args.engine} on http://{args.host}:{args.port}")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            logger.info("Server stopped")
