"""Ordered router with a scan cursor.

Routes are tried in declaration order. The cursor implements passing: a
handler that declines a request returns ``True``, the engine calls
``advance()``, and the next ``find_next()`` resumes after the route that
declined.
"""

import logging
from collections.abc import Iterator
from typing import Any

from sword.routing.route import Route, RouteMatch, compile_route

logger = logging.getLogger("sword.routing")


class Router:
    """Ordered route list plus a cursor.

    Usage::

        router = Router()
        router.add("/users/@id:[0-9]+", show_user)
        router.add("POST /users", create_user)

        router.reset()
        match = router.find_next("GET", "/users/42")
        match.params  # {"id": "42"}

    The cursor is per-router state. Call ``reset()`` at the start of every
    dispatch cycle, and give each thread its own router if requests are
    handled concurrently.
    """

    __slots__ = ("_cursor", "_last_index", "_routes", "case_sensitive")

    def __init__(self, *, case_sensitive: bool = False) -> None:
        self._routes: list[Route] = []
        self._cursor = 0
        self._last_index: int | None = None
        self.case_sensitive = case_sensitive

    def add(self, pattern: str, callback: Any, *, pass_route: bool = False) -> Route:
        """Compile *pattern* and append the route.

        Raises ``RoutePatternError`` if the pattern is malformed.
        """
        route = compile_route(pattern, callback, pass_route=pass_route)
        self._routes.append(route)
        logger.debug("Added route %s -> %s", pattern, route.callback.name)
        return route

    @property
    def routes(self) -> tuple[Route, ...]:
        """Return all registered routes in priority order."""
        return tuple(self._routes)

    @property
    def cursor(self) -> int:
        return self._cursor

    def find_next(self, method: str, path: str) -> RouteMatch | None:
        """Return the first route at or after the cursor that matches.

        Does not move the cursor: calling it again without ``advance()``
        returns the same route.
        """
        for index in range(self._cursor, len(self._routes)):
            match = self._routes[index].match(method, path, case_sensitive=self.case_sensitive)
            if match is not None:
                self._last_index = index
                return match
        return None

    def advance(self) -> None:
        """Move the cursor past the route last returned by ``find_next()``.

        A no-op when nothing has been matched since the last advance or reset.
        """
        if self._last_index is None:
            return
        self._cursor = self._last_index + 1
        self._last_index = None

    def reset(self) -> None:
        """Rewind the cursor for a new dispatch cycle."""
        self._cursor = 0
        self._last_index = None

    def clear(self) -> None:
        """Remove every route and rewind the cursor."""
        self._routes.clear()
        self.reset()

    def __iter__(self) -> Iterator[Route]:
        return iter(tuple(self._routes))

    def __len__(self) -> int:
        return len(self._routes)
