"""Sword: a small request router with an extensible method dispatcher.

Routes are tried in declaration order, handlers can pass a request on to
the next matching route, and every framework method can be filtered or
replaced at runtime.

Basic usage::

    from sword import Engine, Request

    engine = Engine()

    @engine.route("/blog(/@year(/@month))")
    def archive(year, month):
        return f"archive {year or 'all'}/{month or 'all'}"

    response = engine.handle(Request.from_url("GET", "/blog/2012"))

Served over WSGI, an engine is the application callable::

    from wsgiref.simple_server import make_server
    make_server("", 8000, engine).serve_forever()
"""

__version__ = "0.1.0"
__all__ = [
    "BoundCallback",
    "ClassCallback",
    "ConfigurationError",
    "Dispatcher",
    "Engine",
    "EngineConfig",
    "FilterResult",
    "FunctionCallback",
    "HTTPError",
    "Halt",
    "NotFound",
    "NotMappedError",
    "NotRegisteredError",
    "Registry",
    "Request",
    "ReservedNameError",
    "Response",
    "Route",
    "RouteMatch",
    "RoutePatternError",
    "Router",
    "SwordError",
    "View",
    "get_request",
    "get_response",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import sword`` fast while providing a clean top-level API.
    """
    if name == "Engine":
        from sword.engine import Engine

        return Engine

    if name == "EngineConfig":
        from sword.config import EngineConfig

        return EngineConfig

    if name in ("Request", "Response"):
        from sword import http as _http

        return getattr(_http, name)

    if name == "Router":
        from sword.routing.router import Router

        return Router

    if name in ("Route", "RouteMatch"):
        from sword.routing import route as _route

        return getattr(_route, name)

    if name in ("Dispatcher", "FilterResult"):
        from sword import dispatcher as _dispatcher

        return getattr(_dispatcher, name)

    if name == "Registry":
        from sword.registry import Registry

        return Registry

    if name in ("BoundCallback", "ClassCallback", "FunctionCallback"):
        from sword import callbacks as _callbacks

        return getattr(_callbacks, name)

    if name == "View":
        from sword.view import View

        return View

    if name in ("get_request", "get_response"):
        from sword import context as _ctx

        return getattr(_ctx, name)

    if name in (
        "ConfigurationError",
        "HTTPError",
        "Halt",
        "NotFound",
        "NotMappedError",
        "NotRegisteredError",
        "ReservedNameError",
        "RoutePatternError",
        "SwordError",
    ):
        from sword import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
