"""HTTP response built up over one dispatch cycle.

Handlers and framework methods share the current response and edit it
through chainable methods::

    engine.response().set_status(201).header("X-Id", "42").write("created")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from http import HTTPStatus

DEFAULT_CONTENT_TYPE = "text/html; charset=utf-8"


@dataclass(slots=True)
class Response:
    """A mutable HTTP response. Chainable setters return ``self``."""

    status: int = 200
    body: str | bytes = ""
    content_type: str = DEFAULT_CONTENT_TYPE
    headers: dict[str, str] = field(default_factory=dict)
    content_length: bool = True
    sent: bool = False

    # -- Chainable setters --

    def set_status(self, status: int) -> Response:
        self.status = status
        return self

    def header(self, name: str, value: str) -> Response:
        """Set a header, replacing any value with the same name."""
        if name.lower() == "content-type":
            self.content_type = value
        else:
            self.headers[name] = value
        return self

    def write(self, data: str | bytes) -> Response:
        """Append to the body.

        The body stays text while only text is written; once bytes are
        written it is held as bytes.
        """
        if isinstance(self.body, str) and isinstance(data, str):
            self.body += data
        else:
            self.body = _as_bytes(self.body) + _as_bytes(data)
        return self

    def clear(self) -> Response:
        """Reset status, headers and body. Keeps the content-length setting."""
        self.status = 200
        self.body = ""
        self.content_type = DEFAULT_CONTENT_TYPE
        self.headers = {}
        self.sent = False
        return self

    def send(self) -> Response:
        """Mark the response final."""
        self.sent = True
        return self

    # -- Serialization --

    @property
    def body_bytes(self) -> bytes:
        return _as_bytes(self.body)

    @property
    def text(self) -> str:
        """Body as text. Undecodable bytes are replaced."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8", "replace")
        return self.body

    @property
    def status_line(self) -> str:
        """WSGI status line, e.g. ``"404 Not Found"``."""
        try:
            phrase = HTTPStatus(self.status).phrase
        except ValueError:
            phrase = "Unknown"
        return f"{self.status} {phrase}"

    def header_items(self) -> list[tuple[str, str]]:
        """All headers as WSGI ``(name, value)`` pairs."""
        items = [("Content-Type", self.content_type), *self.headers.items()]
        if self.content_length:
            items.append(("Content-Length", str(len(self.body_bytes))))
        return items


def _as_bytes(data: str | bytes) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else data
