"""Dispatcher: named operations with ordered before/after filter chains.

Every named operation has an optional target callable and two filter
lists. ``run()`` threads an explicit parameter list and pending output
through the chain::

    before filters -> target -> after filters

A filter receives ``(params, output)`` and controls the chain through its
return value:

- ``False`` stops the chain. If it happens in the before phase, the
  target and the after filters never run.
- ``FilterResult(params=..., output=..., stop=...)`` replaces the params
  and/or the pending output, and stops the chain when ``stop`` is set.
- Anything else (usually ``None``) continues with the current values.

The params list belongs to the call, so filters may also edit it in place.

Usage::

    dispatcher = Dispatcher()
    dispatcher.set("greet", lambda name: f"hello {name}")
    dispatcher.hook("greet", "before", lambda params, output: params.__setitem__(0, "bob"))
    dispatcher.run("greet", ["alice"])  # "hello bob"
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Final, Literal

from sword._internal.types import Filter
from sword.errors import ConfigurationError, NotMappedError, ReservedNameError

logger = logging.getLogger("sword.dispatcher")

type Phase = Literal["before", "after"]

PHASES: Final = ("before", "after")


class _Unchanged:
    __slots__ = ()

    def __repr__(self) -> str:
        return "UNCHANGED"


UNCHANGED: Final = _Unchanged()
"""Marks a ``FilterResult`` field that keeps the current value."""


@dataclass(frozen=True, slots=True)
class FilterResult:
    """Explicit replacement values returned by a filter."""

    params: Sequence[Any] | None = None
    output: Any = UNCHANGED
    stop: bool = False


@dataclass(slots=True)
class _Entry:
    target: Callable[..., Any] | None = None
    before: list[Filter] = field(default_factory=list)
    after: list[Filter] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return self.target is None and not self.before and not self.after


class Dispatcher:
    """Name-to-callable table with filter chains.

    Names in *reserved* can neither be mapped nor filtered.
    """

    __slots__ = ("_entries", "_reserved")

    def __init__(self, reserved: Iterable[str] = ()) -> None:
        self._entries: dict[str, _Entry] = {}
        self._reserved = frozenset(reserved)

    def _check_name(self, name: str) -> None:
        if name in self._reserved:
            raise ReservedNameError(name)

    # -- Registration --

    def set(self, name: str, target: Callable[..., Any]) -> None:
        """Map *target* to *name*. Existing filters on *name* are kept."""
        self._check_name(name)
        self._entries.setdefault(name, _Entry()).target = target

    def hook(self, name: str, phase: Phase, filter_: Filter) -> None:
        """Append *filter_* to the *phase* chain of *name*."""
        self._check_name(name)
        if phase not in PHASES:
            msg = f"Invalid filter phase {phase!r}, expected 'before' or 'after'"
            raise ConfigurationError(msg)
        entry = self._entries.setdefault(name, _Entry())
        getattr(entry, phase).append(filter_)

    def get(self, name: str) -> Callable[..., Any] | None:
        """Return the target mapped to *name*, or ``None``."""
        entry = self._entries.get(name)
        return entry.target if entry is not None else None

    def has(self, name: str) -> bool:
        return self.get(name) is not None

    def filters(self, name: str, phase: Phase) -> tuple[Filter, ...]:
        entry = self._entries.get(name)
        if entry is None:
            return ()
        return tuple(getattr(entry, phase))

    def clear(self, name: str) -> None:
        """Remove the target and both filter chains of *name*."""
        self._entries.pop(name, None)

    def reset(self) -> None:
        """Remove every target and every filter chain."""
        self._entries.clear()

    # -- Invocation --

    def run(self, name: str, params: Sequence[Any] = ()) -> Any:
        """Run the full filter chain for *name* and return the final output.

        Raises ``NotMappedError`` if *name* has neither a target nor filters.
        """
        entry = self._entries.get(name)
        if entry is None or entry.empty:
            raise NotMappedError(name)

        args = list(params)
        output: Any = None

        args, output, stopped = self._apply_filters(entry.before, args, output)
        if stopped:
            logger.debug("Before filter stopped %r", name)
            return output

        if entry.target is not None:
            output = self.execute(entry.target, args)

        _, output, _ = self._apply_filters(entry.after, args, output)
        return output

    def execute(self, target: Callable[..., Any], params: Sequence[Any] = ()) -> Any:
        """Call *target* with *params*, bypassing every filter chain."""
        return target(*params)

    @staticmethod
    def _apply_filters(
        filters: list[Filter], args: list[Any], output: Any
    ) -> tuple[list[Any], Any, bool]:
        # Snapshot so a filter that registers filters does not extend this run
        for filter_ in tuple(filters):
            result = filter_(args, output)
            if result is False:
                return args, output, True
            if isinstance(result, FilterResult):
                if result.params is not None:
                    args = list(result.params)
                if result.output is not UNCHANGED:
                    output = result.output
                if result.stop:
                    return args, output, True
        return args, output, False
