"""Sword exception hierarchy.

Shared across Router, Dispatcher, Registry and Engine so every module
raises and catches the same types.
"""

from dataclasses import dataclass
from typing import Any


class SwordError(Exception):
    """Base for all sword-specific errors."""


class ConfigurationError(SwordError):
    """Raised when engine setup is invalid.

    Registration and resolution calls raise these immediately; they are
    never retried.
    """


class RoutePatternError(ConfigurationError):
    """A route pattern could not be compiled."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid route pattern {pattern!r}: {reason}")


class ReservedNameError(ConfigurationError):
    """Attempt to map, register or filter a reserved engine method."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Cannot override an existing framework method: {name!r}")


class NotRegisteredError(ConfigurationError):
    """The registry has no entry under the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No class registered under {name!r}")


class NotMappedError(ConfigurationError):
    """Neither the dispatcher nor the registry knows the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"{name!r} must be a mapped method")


class TemplateNotFoundError(SwordError):
    """A view template file does not exist."""


@dataclass(frozen=True, slots=True)
class HTTPError(SwordError):
    """An error that maps directly to an HTTP status code.

    Raised from a route handler, it halts the cycle with ``status`` and
    ``detail`` as the response. ``NotFound`` instead falls through to the
    engine's ``not_found`` method.
    """

    status: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: no route handled the request."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class Halt(SwordError):  # noqa: N818
    """Stops request processing and carries the final response.

    Raised by ``Engine.halt()`` and caught by ``Engine.start()``.
    """

    def __init__(self, response: Any) -> None:
        self.response = response
        super().__init__(f"halted with status {getattr(response, 'status', '?')}")
