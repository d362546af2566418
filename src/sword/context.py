"""Dispatch-cycle context via ContextVar.

Provides:
- ``request_var``: the ``Request`` being dispatched.
- ``response_var``: the ``Response`` being built for it.

Both are set by ``Engine.handle()`` and reset when the cycle ends.
Accessing them outside a cycle raises ``LookupError``.
"""

from contextvars import ContextVar

from sword.http.request import Request
from sword.http.response import Response

request_var: ContextVar[Request] = ContextVar("sword_request")
"""The current request."""

response_var: ContextVar[Response] = ContextVar("sword_response")
"""The current response. Replaced when a handler returns a ``Response``."""


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a dispatch cycle.
    """
    return request_var.get()


def get_response() -> Response:
    """Return the current response.

    Raises ``LookupError`` if called outside a dispatch cycle.
    """
    return response_var.get()
