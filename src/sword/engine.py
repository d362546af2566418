"""The sword engine.

Owns one ``Dispatcher``, one ``Registry`` and a variable store. The router
and the view are registry components, so they can be swapped with
``engine.register("router", MyRouter)``.

Every framework method (``start``, ``route``, ``not_found``, ``json``...)
is dispatched by name, which means it can be filtered with
``before()``/``after()`` and replaced with ``map()``::

    engine = Engine()

    @engine.route("/hello/@name")
    def hello(name):
        return f"Hello, {name}!"

    engine.before("start", lambda params, output: print("starting"))
    engine.map("not_found", lambda: engine.response().set_status(404).write("nope"))

    response = engine.handle(Request.from_url("GET", "/hello/bob"))

Thread safety:
    Registration is single-threaded setup. A dispatch cycle mutates the
    shared router's cursor, so each worker thread needs its own engine.
"""

import html
import json as json_module
import logging
import re
import traceback
from collections.abc import Callable, Iterable, Mapping, Sequence
from email.utils import formatdate, parsedate_to_datetime
from typing import Any, Final

from sword._internal.types import Filter, Hook
from sword.config import EngineConfig
from sword.context import request_var, response_var
from sword.dispatcher import Dispatcher, Phase
from sword.errors import Halt, HTTPError, NotFound, NotMappedError
from sword.http.request import Request
from sword.http.response import Response
from sword.registry import Registry
from sword.routing.router import Router
from sword.view import View

logger = logging.getLogger("sword.engine")

FRAMEWORK_METHODS: Final = (
    "start",
    "stop",
    "route",
    "halt",
    "error",
    "not_found",
    "render",
    "redirect",
    "etag",
    "last_modified",
    "json",
    "jsonp",
    "post",
    "put",
    "patch",
    "delete",
)
"""Dispatched methods. Each can be filtered and remapped."""

RESERVED_NAMES: Final = frozenset(
    {
        "after",
        "before",
        "call",
        "clear",
        "get",
        "handle",
        "has",
        "hook",
        "map",
        "register",
        "reset",
        "set",
    }
)
"""Engine methods that can be neither mapped, registered, nor filtered."""

_NOT_FOUND_BODY: Final = (
    "<h1>404 Not Found</h1><h3>The page you have requested could not be found.</h3>"
)


class Engine:
    """Request router and extensible method dispatcher.

    ``reset()`` returns the engine to its freshly constructed state.
    """

    __slots__ = ("_dispatcher", "_registry", "_vars", "config")

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config: EngineConfig = config or EngineConfig()
        self._vars: dict[str, Any] = {}
        self._registry = Registry(reserved=RESERVED_NAMES)
        self._dispatcher = Dispatcher(reserved=RESERVED_NAMES)
        self._init()

    def _init(self) -> None:
        self._registry.register("router", Router)
        self._registry.register("view", View, callback=self._configure_view)

        for name in FRAMEWORK_METHODS:
            self._dispatcher.set(name, getattr(self, f"_{name}"))

        self._vars.update(self.config.as_vars())

        self._dispatcher.hook("start", "before", self._prepare_start)
        self._dispatcher.hook("start", "after", self._finish_start)

    def reset(self) -> None:
        """Drop routes, mappings, filters, registrations and variables."""
        self._vars.clear()
        self._registry.reset()
        self._dispatcher.reset()
        self._init()

    # -- Extension surface --

    def call(self, name: str, *args: Any) -> Any:
        """Invoke a named operation.

        A callable mapped with ``map()`` wins. Otherwise a class registered
        with ``register()`` is resolved; the first argument selects shared
        (default, truthy) or fresh (falsy) resolution.

        Raises ``NotMappedError`` if neither table knows *name*.
        """
        if self._dispatcher.get(name) is not None:
            return self._dispatcher.run(name, args)
        if not self._registry.has(name):
            raise NotMappedError(name)
        shared = not args or bool(args[0])
        return self._registry.resolve(name, shared)

    def map(self, name: str, callback: Callable[..., Any]) -> None:
        """Map *callback* to a framework method name."""
        self._dispatcher.set(name, callback)

    def register(
        self,
        name: str,
        class_ref: type | Callable[..., Any] | str,
        params: Sequence[Any] = (),
        callback: Hook | None = None,
    ) -> None:
        """Register a class to a framework method name."""
        self._registry.register(name, class_ref, params, callback)

    def before(self, name: str, filter_: Filter) -> None:
        """Add a pre-filter to a method."""
        self._dispatcher.hook(name, "before", filter_)

    def after(self, name: str, filter_: Filter) -> None:
        """Add a post-filter to a method."""
        self._dispatcher.hook(name, "after", filter_)

    def hook(self, name: str, phase: Phase, filter_: Filter) -> None:
        self._dispatcher.hook(name, phase, filter_)

    # -- Variables --

    def get(self, key: str | None = None) -> Any:
        """Return a variable, or a copy of all variables when *key* is None."""
        if key is None:
            return dict(self._vars)
        return self._vars.get(key)

    def set(self, key: str | Mapping[str, Any], value: Any = None) -> None:
        """Set one variable, or several from a mapping."""
        if isinstance(key, Mapping):
            self._vars.update(key)
        else:
            self._vars[key] = value

    def has(self, key: str) -> bool:
        return self._vars.get(key) is not None

    def clear(self, key: str | None = None) -> None:
        """Unset one variable, or all of them."""
        if key is None:
            self._vars.clear()
        else:
            self._vars.pop(key, None)

    # -- Components --

    def router(self) -> Router:
        return self.call("router")

    def view(self) -> View:
        return self.call("view")

    def request(self) -> Request:
        """The request of the current dispatch cycle."""
        return request_var.get()

    def response(self) -> Response:
        """The response of the current dispatch cycle."""
        return response_var.get()

    def _configure_view(self, view: View) -> None:
        view.path = str(self.get("sword.views.path"))
        view.extension = str(self.get("sword.views.extension") or "")

    # -- Entry points --

    def handle(self, request: Request) -> Response:
        """Run one dispatch cycle for *request* and return the response.

        Handler exceptions go to the ``error`` method when
        ``sword.handle_errors`` is set and propagate otherwise.
        """
        response = Response(content_length=bool(self.get("sword.content_length")))
        request_token = request_var.set(request)
        response_token = response_var.set(response)
        try:
            try:
                self.start()
            except Halt as halt:
                return halt.response
            except Exception as exc:
                if not self.get("sword.handle_errors"):
                    raise
                if self.get("sword.log_errors"):
                    logger.exception("500 %s %s", request.method, request.path)
                self.error(exc)
            return response_var.get()
        finally:
            response_var.reset(response_token)
            request_var.reset(request_token)

    def __call__(
        self, environ: dict[str, Any], start_response: Callable[..., Any]
    ) -> Iterable[bytes]:
        """WSGI entry point."""
        response = self.handle(Request.from_environ(environ))
        start_response(response.status_line, response.header_items())
        return [response.body_bytes]

    # -- Framework methods (dispatched) --

    def start(self) -> None:
        """Route the current request."""
        self._dispatcher.run("start")

    def stop(self, code: int | None = None) -> None:
        """Finalize the current response."""
        self._dispatcher.run("stop", [code])

    def route(
        self, pattern: str, callback: Any = None, pass_route: bool = False
    ) -> Any:
        """Route a URL pattern to a callback.

        Without *callback*, returns a decorator::

            @engine.route("GET /users/@id")
            def show(id): ...
        """
        return self._add_route("route", pattern, callback, pass_route)

    def post(self, pattern: str, callback: Any = None, pass_route: bool = False) -> Any:
        return self._add_route("post", pattern, callback, pass_route)

    def put(self, pattern: str, callback: Any = None, pass_route: bool = False) -> Any:
        return self._add_route("put", pattern, callback, pass_route)

    def patch(self, pattern: str, callback: Any = None, pass_route: bool = False) -> Any:
        return self._add_route("patch", pattern, callback, pass_route)

    def delete(self, pattern: str, callback: Any = None, pass_route: bool = False) -> Any:
        return self._add_route("delete", pattern, callback, pass_route)

    def halt(self, code: int = 200, message: str = "") -> None:
        """Replace the response and stop processing."""
        self._dispatcher.run("halt", [code, message])

    def error(self, exc: BaseException) -> None:
        """Send a 500 response describing *exc*."""
        self._dispatcher.run("error", [exc])

    def not_found(self) -> None:
        """Send a 404 response."""
        self._dispatcher.run("not_found")

    def render(
        self, file: str, data: Mapping[str, Any] | None = None, key: str | None = None
    ) -> None:
        """Render a template into the response, or into view variable *key*."""
        self._dispatcher.run("render", [file, data, key])

    def redirect(self, url: str, code: int = 303) -> None:
        self._dispatcher.run("redirect", [url, code])

    def etag(self, id: str, type: str = "strong") -> None:  # noqa: A002
        self._dispatcher.run("etag", [id, type])

    def last_modified(self, time: float) -> None:
        self._dispatcher.run("last_modified", [time])

    def json(
        self, data: Any, code: int = 200, encode: bool = True, charset: str = "utf-8"
    ) -> None:
        self._dispatcher.run("json", [data, code, encode, charset])

    def jsonp(
        self,
        data: Any,
        param: str = "jsonp",
        code: int = 200,
        encode: bool = True,
        charset: str = "utf-8",
    ) -> None:
        self._dispatcher.run("jsonp", [data, param, code, encode, charset])

    def _add_route(self, name: str, pattern: str, callback: Any, pass_route: bool) -> Any:
        if callback is None:

            def decorator(func: Any) -> Any:
                self._dispatcher.run(name, [pattern, func, pass_route])
                return func

            return decorator
        return self._dispatcher.run(name, [pattern, callback, pass_route])

    # -- Default implementations --

    def _prepare_start(self, params: list[Any], output: Any) -> None:
        self.router().case_sensitive = bool(self.get("sword.case_sensitive"))
        self.response().content_length = bool(self.get("sword.content_length"))

    def _finish_start(self, params: list[Any], output: Any) -> None:
        self.stop()

    def _start(self) -> None:
        request = self.request()
        router = self.router()
        router.reset()

        dispatched = False
        while (match := router.find_next(request.method, request.path)) is not None:
            handler = match.route.callback.resolve(self._registry)
            try:
                result = self._dispatcher.execute(handler, match.arguments())
            except NotFound:
                logger.debug("%s raised NotFound", match.route.pattern)
                break
            except HTTPError as exc:
                self.halt(exc.status, exc.detail)
                dispatched = True
                break
            dispatched = True
            if result is not True:
                self._apply_result(result)
                break
            logger.debug("%s passed %s %s", match.route.pattern, request.method, request.path)
            router.advance()
            dispatched = False

        if not dispatched:
            self.not_found()

    def _apply_result(self, result: Any) -> None:
        match result:
            case Response():
                response_var.set(result)
            case str() | bytes():
                self.response().write(result)

    def _stop(self, code: int | None = None) -> None:
        response = self.response()
        if not response.sent:
            if code is not None:
                response.set_status(code)
            response.send()

    def _route(self, pattern: str, callback: Any, pass_route: bool = False) -> None:
        self.router().add(pattern, callback, pass_route=pass_route)

    def _post(self, pattern: str, callback: Any, pass_route: bool = False) -> None:
        self.router().add(f"POST {pattern}", callback, pass_route=pass_route)

    def _put(self, pattern: str, callback: Any, pass_route: bool = False) -> None:
        self.router().add(f"PUT {pattern}", callback, pass_route=pass_route)

    def _patch(self, pattern: str, callback: Any, pass_route: bool = False) -> None:
        self.router().add(f"PATCH {pattern}", callback, pass_route=pass_route)

    def _delete(self, pattern: str, callback: Any, pass_route: bool = False) -> None:
        self.router().add(f"DELETE {pattern}", callback, pass_route=pass_route)

    def _halt(self, code: int = 200, message: str = "") -> None:
        response = self.response().clear().set_status(code).write(message).send()
        raise Halt(response)

    def _error(self, exc: BaseException) -> None:
        trace = "".join(traceback.format_exception(exc))
        body = (
            "<h1>500 Internal Server Error</h1>"
            f"<h3>{html.escape(str(exc))} ({type(exc).__name__})</h3>"
            f"<pre>{html.escape(trace)}</pre>"
        )
        self.response().clear().set_status(500).write(body).send()

    def _not_found(self) -> None:
        self.response().clear().set_status(404).write(_NOT_FOUND_BODY).send()

    def _render(
        self, file: str, data: Mapping[str, Any] | None = None, key: str | None = None
    ) -> None:
        view = self.view()
        if key is not None:
            view.set(key, view.fetch(file, data))
        else:
            self.response().write(view.fetch(file, data))

    def _redirect(self, url: str, code: int = 303) -> None:
        base = self.get("sword.base_url")
        if base is None:
            base = self.request().base

        if base != "/" and "://" not in url:
            url = base.rstrip("/") + re.sub(r"/+", "/", "/" + url)

        self.response().clear().set_status(code).header("Location", url).send()

    def _etag(self, id: str, type: str = "strong") -> None:  # noqa: A002
        tag = f"W/{id}" if type == "weak" else id
        self.response().header("ETag", tag)
        if self.request().header("if-none-match") == tag:
            self.halt(304)

    def _last_modified(self, time: float) -> None:
        self.response().header("Last-Modified", formatdate(time, usegmt=True))
        since = self.request().header("if-modified-since")
        if since is None:
            return
        try:
            stamp = parsedate_to_datetime(since).timestamp()
        except (TypeError, ValueError):
            return
        if int(stamp) == int(time):
            self.halt(304)

    def _json(
        self, data: Any, code: int = 200, encode: bool = True, charset: str = "utf-8"
    ) -> None:
        body = json_module.dumps(data) if encode else data
        self.response().set_status(code).header(
            "Content-Type", f"application/json; charset={charset}"
        ).write(body).send()

    def _jsonp(
        self,
        data: Any,
        param: str = "jsonp",
        code: int = 200,
        encode: bool = True,
        charset: str = "utf-8",
    ) -> None:
        body = json_module.dumps(data) if encode else data
        callback = self.request().query.get(param, "")
        self.response().set_status(code).header(
            "Content-Type", f"application/javascript; charset={charset}"
        ).write(f"{callback}({body});").send()
