"""Route pattern compiler.

Turns pattern text such as ``/blog(/@year:[0-9]{4}(/@month))`` into an
ordered tuple of segment values and an anchored regular expression.

Pattern language::

    /literal          matched verbatim
    /@name            one or more non-slash characters, bound to ``name``
    /@name:expr       ``expr`` replaces the default capture class
    ( ... )           optional group, may nest
    *                 wildcard, captures the remainder of the path
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from sword.errors import RoutePatternError

DEFAULT_PARAM_REGEX = r"[^/]+"

# Regex group holding the wildcard capture. Not usable as a parameter name.
SPLAT_GROUP = "_splat"

_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


@dataclass(frozen=True, slots=True)
class Literal:
    """Text matched verbatim (case-folded unless the router is case-sensitive)."""

    text: str


@dataclass(frozen=True, slots=True)
class Param:
    """A named parameter. ``expr`` is None for the default capture class."""

    name: str
    expr: str | None = None

    @property
    def regex(self) -> str:
        return self.expr if self.expr is not None else DEFAULT_PARAM_REGEX


@dataclass(frozen=True, slots=True)
class OptionalGroup:
    """A parenthesized sub-sequence that may be absent as a whole."""

    segments: tuple[Segment, ...]


@dataclass(frozen=True, slots=True)
class Wildcard:
    """Captures the rest of the path, slashes included."""


type Segment = Literal | Param | OptionalGroup | Wildcard


@dataclass(frozen=True, slots=True)
class PathPattern:
    """A compiled path pattern.

    ``source`` is the unanchored regex; matching always consumes the whole
    path. Both case variants are compiled up front so the router's
    case-sensitivity flag can change between requests.
    """

    text: str
    segments: tuple[Segment, ...]
    source: str
    param_names: tuple[str, ...]
    _exact: re.Pattern[str] = field(repr=False, compare=False)
    _folded: re.Pattern[str] = field(repr=False, compare=False)

    @property
    def has_wildcard(self) -> bool:
        return SPLAT_GROUP in self._exact.groupindex

    def match(
        self, path: str, *, case_sensitive: bool = False
    ) -> tuple[dict[str, str | None], tuple[str, ...]] | None:
        """Match *path* against the pattern.

        Returns ``(params, splat)`` or ``None``. Parameters inside an
        unmatched optional group are bound to ``None``.
        """
        regex = self._exact if case_sensitive else self._folded
        m = regex.fullmatch(path)
        if m is None:
            return None
        params = {name: m.group(name) for name in self.param_names}
        splat = m.group(SPLAT_GROUP) if self.has_wildcard else None
        # "/blog" and "/blog/" both leave nothing to capture
        return params, ((splat,) if splat else ())


class _Parser:
    """Recursive-descent parser over the path portion of a pattern."""

    __slots__ = ("_names", "_pos", "_text")

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0
        self._names: list[str] = []

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._names)

    def fail(self, reason: str) -> RoutePatternError:
        return RoutePatternError(self._text, reason)

    def parse(self) -> tuple[Segment, ...]:
        return self._sequence(depth=0)

    def _sequence(self, depth: int) -> tuple[Segment, ...]:
        text = self._text
        segments: list[Segment] = []
        literal: list[str] = []

        def flush() -> None:
            if literal:
                segments.append(Literal("".join(literal)))
                literal.clear()

        while self._pos < len(text):
            ch = text[self._pos]
            if ch == "(":
                flush()
                self._pos += 1
                segments.append(OptionalGroup(self._sequence(depth + 1)))
            elif ch == ")":
                if depth == 0:
                    raise self.fail(f"unbalanced ')' at position {self._pos}")
                flush()
                self._pos += 1
                if not segments:
                    raise self.fail("empty optional group")
                return tuple(segments)
            elif ch == "@":
                flush()
                segments.append(self._param())
            elif ch == "*":
                flush()
                self._pos += 1
                if depth > 0 or self._pos < len(text):
                    raise self.fail("wildcard '*' must be the final token")
                segments.append(Wildcard())
            else:
                literal.append(ch)
                self._pos += 1

        if depth > 0:
            raise self.fail("unbalanced '('")
        flush()
        return tuple(segments)

    def _param(self) -> Param:
        text = self._text
        m = _NAME_RE.match(text, self._pos + 1)
        if m is None:
            raise self.fail(f"expected a parameter name after '@' at position {self._pos}")
        name = m.group()
        if name == SPLAT_GROUP:
            raise self.fail(f"parameter name {name!r} is reserved")
        if name in self._names:
            raise self.fail(f"duplicate parameter name {name!r}")
        self._names.append(name)
        self._pos = m.end()

        if self._pos >= len(text) or text[self._pos] != ":":
            return Param(name)

        self._pos += 1
        start = self._pos
        while self._pos < len(text) and text[self._pos] not in "/)":
            if text[self._pos] == "(":
                raise self.fail(f"expression for @{name} must not contain parentheses")
            self._pos += 1
        expr = text[start : self._pos]
        if not expr:
            raise self.fail(f"empty expression for @{name}")
        try:
            re.compile(expr)
        except re.error as exc:
            raise self.fail(f"invalid expression for @{name}: {exc}") from exc
        return Param(name, expr)


def _to_regex(segments: tuple[Segment, ...]) -> str:
    parts: list[str] = []
    for index, seg in enumerate(segments):
        match seg:
            case Literal(text=text):
                following = segments[index + 1] if index + 1 < len(segments) else None
                if isinstance(following, Wildcard) and text.endswith("/"):
                    # "/blog/*" also matches "/blog"
                    parts.append(re.escape(text[:-1]))
                else:
                    parts.append(re.escape(text))
            case Param(name=name):
                parts.append(f"(?P<{name}>{seg.regex})")
            case OptionalGroup(segments=inner):
                parts.append(f"(?:{_to_regex(inner)})?")
            case Wildcard():
                previous = segments[index - 1] if index > 0 else None
                if isinstance(previous, Literal) and previous.text.endswith("/"):
                    parts.append(f"(?:/(?P<{SPLAT_GROUP}>.*))?")
                else:
                    parts.append(f"/?(?P<{SPLAT_GROUP}>.*)")
    return "".join(parts)


def parse_method_spec(text: str) -> tuple[tuple[str, ...] | None, str]:
    """Split ``"GET|POST /path"`` into ``(("GET", "POST"), "/path")``.

    A pattern without a method token, or with ``*`` as the token, matches
    any method and yields ``None``.
    """
    parts = text.strip().split(None, 1)
    if len(parts) < 2:
        return None, text.strip()

    token, path = parts
    methods: list[str] = []
    for raw in token.split("|"):
        method = raw.strip().upper()
        if not method:
            raise RoutePatternError(text, "empty HTTP method in method list")
        if method not in methods:
            methods.append(method)
    if "*" in methods:
        return None, path.strip()
    return tuple(methods), path.strip()


def compile_pattern(text: str) -> PathPattern:
    """Compile the path portion of a route pattern.

    Raises ``RoutePatternError`` on malformed syntax.
    """
    if not text:
        raise RoutePatternError(text, "empty path")

    parser = _Parser(text)
    segments = parser.parse()
    source = _to_regex(segments)

    # A trailing slash on the request path is tolerated
    if not (segments and isinstance(segments[-1], Wildcard)):
        if source.endswith("/"):
            if source != "/":
                source = source[:-1] + "/?"
        else:
            source += "/?"

    try:
        exact = re.compile(source)
        folded = re.compile(source, re.IGNORECASE)
    except re.error as exc:
        raise RoutePatternError(text, str(exc)) from exc

    return PathPattern(
        text=text,
        segments=segments,
        source=source,
        param_names=parser.names,
        _exact=exact,
        _folded=folded,
    )
