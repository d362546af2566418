"""Immutable HTTP request.

Frozen metadata built once per dispatch cycle, either directly (tests,
embedding) or from a WSGI environ.
"""

from __future__ import annotations

import posixpath
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl, unquote, urlencode, urlsplit


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``headers`` keys are lower-case. ``base`` is the mount point of the
    application (``"/"`` when served at the root) and is used to build
    redirect URLs.
    """

    method: str = "GET"
    path: str = "/"
    query: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    base: str = "/"
    body: bytes = b""
    scheme: str = "http"

    @property
    def url(self) -> str:
        """Path plus query string."""
        if not self.query:
            return self.path
        return f"{self.path}?{urlencode(self.query)}"

    def header(self, name: str, default: str | None = None) -> str | None:
        return self.headers.get(name.lower(), default)

    @classmethod
    def from_url(
        cls,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes = b"",
    ) -> Request:
        """Build a request from a method and a ``/path?query`` URL."""
        parts = urlsplit(url)
        return cls(
            method=method.upper(),
            path=unquote(parts.path) or "/",
            query=dict(parse_qsl(parts.query, keep_blank_values=True)),
            headers={k.lower(): v for k, v in (headers or {}).items()},
            body=body,
        )

    @classmethod
    def from_environ(cls, environ: Mapping[str, Any]) -> Request:
        """Build a request from a PEP 3333 WSGI environ."""
        # PATH_INFO arrives as latin-1 decoded bytes
        raw_path = environ.get("PATH_INFO", "") or "/"
        path = raw_path.encode("latin-1").decode("utf-8", "replace")

        headers = {
            key[5:].replace("_", "-").lower(): value
            for key, value in environ.items()
            if key.startswith("HTTP_")
        }
        if environ.get("CONTENT_TYPE"):
            headers["content-type"] = environ["CONTENT_TYPE"]
        if environ.get("CONTENT_LENGTH"):
            headers["content-length"] = environ["CONTENT_LENGTH"]

        body = b""
        length = headers.get("content-length", "")
        stream = environ.get("wsgi.input")
        if stream is not None and length.isdigit() and int(length) > 0:
            body = stream.read(int(length))

        script_name = environ.get("SCRIPT_NAME", "")
        base = posixpath.normpath(script_name) if script_name else "/"

        return cls(
            method=environ.get("REQUEST_METHOD", "GET").upper(),
            path=path,
            query=dict(parse_qsl(environ.get("QUERY_STRING", ""), keep_blank_values=True)),
            headers=headers,
            base=base,
            body=body,
            scheme=environ.get("wsgi.url_scheme", "http"),
        )
