"""Route and RouteMatch frozen dataclasses."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Final

from sword.callbacks import Callback, as_callback
from sword.routing.pattern import PathPattern, compile_pattern, parse_method_spec

ANY_METHOD: Final = None
"""``Route.methods`` value for routes declared without a method token."""


@dataclass(frozen=True, slots=True)
class Route:
    """A compiled route. Immutable once registered."""

    pattern: str
    methods: tuple[str, ...] | None
    matcher: PathPattern
    callback: Callback
    pass_route: bool = False

    @property
    def path(self) -> str:
        return self.matcher.text

    def matches_method(self, method: str) -> bool:
        return self.methods is ANY_METHOD or method.upper() in self.methods

    def match(self, method: str, path: str, *, case_sensitive: bool = False) -> RouteMatch | None:
        """Match a request method and path. Returns ``None`` on no match."""
        if not self.matches_method(method):
            return None
        result = self.matcher.match(path, case_sensitive=case_sensitive)
        if result is None:
            return None
        params, splat = result
        return RouteMatch(route=self, params=MappingProxyType(params), splat=splat)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match.

    Also the route-info value handed to callbacks of ``pass_route``
    routes. Parameters inside an unmatched optional group are ``None``.
    """

    route: Route
    params: Mapping[str, str | None] = field(default_factory=lambda: MappingProxyType({}))
    splat: tuple[str, ...] = ()

    @property
    def methods(self) -> tuple[str, ...]:
        return ("*",) if self.route.methods is ANY_METHOD else self.route.methods

    @property
    def regex(self) -> str:
        return self.route.matcher.source

    @property
    def pattern(self) -> str:
        return self.route.pattern

    def arguments(self) -> list[Any]:
        """Positional arguments for the callback: params in pattern order,
        then this match when the route was declared with ``pass_route``."""
        args: list[Any] = list(self.params.values())
        if self.route.pass_route:
            args.append(self)
        return args


def compile_route(pattern: str, callback: Any, *, pass_route: bool = False) -> Route:
    """Compile ``"[METHOD[|METHOD...] ]path"`` and a callback into a Route.

    Raises ``RoutePatternError`` for malformed patterns and
    ``ConfigurationError`` for callbacks that cannot be invoked.
    """
    methods, path = parse_method_spec(pattern)
    return Route(
        pattern=pattern,
        methods=methods,
        matcher=compile_pattern(path),
        callback=as_callback(callback),
        pass_route=pass_route,
    )
