"""Tests for sword.routing.route: Route, RouteMatch, compile_route."""

from types import MappingProxyType

import pytest

from sword.callbacks import ClassCallback, FunctionCallback
from sword.errors import ConfigurationError
from sword.routing.route import ANY_METHOD, Route, RouteMatch, compile_route


def _handler() -> str:
    return "ok"


class TestCompileRoute:
    def test_any_method(self) -> None:
        route = compile_route("/users", _handler)
        assert route.methods is ANY_METHOD
        assert route.pattern == "/users"
        assert route.path == "/users"
        assert route.callback == FunctionCallback(_handler)
        assert route.pass_route is False

    def test_methods(self) -> None:
        route = compile_route("GET|POST /users", _handler)
        assert route.methods == ("GET", "POST")
        assert route.pattern == "GET|POST /users"
        assert route.path == "/users"

    def test_class_callback(self) -> None:
        route = compile_route("/users", ("users", "index"))
        assert route.callback == ClassCallback("users", "index")

    def test_invalid_callback(self) -> None:
        with pytest.raises(ConfigurationError):
            compile_route("/users", 42)

    def test_frozen(self) -> None:
        route = compile_route("/", _handler)
        with pytest.raises(AttributeError):
            route.pattern = "/other"  # type: ignore[misc]


class TestRouteMatch:
    def test_method_filter(self) -> None:
        route = compile_route("POST /users", _handler)
        assert route.match("GET", "/users") is None
        assert route.match("post", "/users") is not None

    def test_any_method_matches_all(self) -> None:
        route = compile_route("/users", _handler)
        for method in ("GET", "POST", "DELETE", "OPTIONS"):
            assert route.match(method, "/users") is not None

    def test_match_values(self) -> None:
        route = compile_route("GET /blog/@slug/*", _handler)
        match = route.match("GET", "/blog/hello/comments/2")

        assert isinstance(match, RouteMatch)
        assert match.route is route
        assert dict(match.params) == {"slug": "hello"}
        assert match.splat == ("comments/2",)
        assert match.methods == ("GET",)
        assert match.regex == route.matcher.source
        assert match.pattern == "GET /blog/@slug/*"

    def test_any_method_reported_as_star(self) -> None:
        match = compile_route("/", _handler).match("GET", "/")
        assert match.methods == ("*",)

    def test_params_read_only(self) -> None:
        match = compile_route("/@id", _handler).match("GET", "/1")
        assert isinstance(match.params, MappingProxyType)
        with pytest.raises(TypeError):
            match.params["id"] = "2"  # type: ignore[index]

    def test_arguments(self) -> None:
        match = compile_route("/@a(/@b)", _handler).match("GET", "/x")
        assert match.arguments() == ["x", None]

    def test_arguments_with_pass_route(self) -> None:
        route = compile_route("/@a", _handler, pass_route=True)
        match = route.match("GET", "/x")
        args = match.arguments()
        assert args[0] == "x"
        assert args[-1] is match

    def test_frozen(self) -> None:
        match = compile_route("/", _handler).match("GET", "/")
        with pytest.raises(AttributeError):
            match.splat = ("x",)  # type: ignore[misc]

    def test_route_is_route(self) -> None:
        assert isinstance(compile_route("/", _handler), Route)
