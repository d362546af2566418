"""HTTP request and response values."""

from sword.http.request import Request
from sword.http.response import Response

__all__ = ["Request", "Response"]
