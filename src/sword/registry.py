"""Instance registry: named factories with shared or fresh resolution.

Mirrors the ``Router`` + ``Route`` pattern: ``RegistryEntry`` is the
frozen definition, ``Registry`` is the lookup table that owns the cached
shared instances.

Registration happens during engine setup. Resolution is lazy: nothing is
constructed until the first ``resolve()`` for a name.
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from sword._internal.imports import import_string
from sword._internal.types import Hook
from sword.errors import ConfigurationError, NotRegisteredError, ReservedNameError

logger = logging.getLogger("sword.registry")


@dataclass(frozen=True, slots=True)
class RegistryEntry:
    """A frozen factory definition.

    ``class_ref`` is a class, any factory callable, or an import string
    such as ``"myapp.db:Database"``.
    """

    class_ref: type | Callable[..., Any] | str
    params: tuple[Any, ...] = ()
    callback: Hook | None = None


class Registry:
    """Name-to-factory table with a per-entry shared-instance cache.

    Usage::

        registry = Registry()
        registry.register("db", Database, ["sqlite:///app.db"], lambda db: db.connect())
        db = registry.resolve("db")               # constructed, hooked, cached
        assert registry.resolve("db") is db       # cached
        other = registry.resolve("db", shared=False)  # fresh, hooked again

    The cache is not locked. Share a registry across threads only for
    entries whose instances are themselves safe to share.
    """

    __slots__ = ("_entries", "_instances", "_reserved")

    def __init__(self, reserved: Iterable[str] = ()) -> None:
        self._entries: dict[str, RegistryEntry] = {}
        self._instances: dict[str, Any] = {}
        self._reserved = frozenset(reserved)

    def register(
        self,
        name: str,
        class_ref: type | Callable[..., Any] | str,
        params: Sequence[Any] = (),
        callback: Hook | None = None,
    ) -> None:
        """Record a factory under *name*, replacing any previous entry.

        A replaced entry's cached shared instance is dropped.

        Raises ``ReservedNameError`` for reserved names.
        """
        if name in self._reserved:
            raise ReservedNameError(name)
        self._entries[name] = RegistryEntry(class_ref, tuple(params), callback)
        self._instances.pop(name, None)
        logger.debug("Registered %r -> %r", name, class_ref)

    def get(self, name: str) -> RegistryEntry | None:
        """Look up an entry by name. Returns ``None`` if not registered."""
        return self._entries.get(name)

    def has(self, name: str) -> bool:
        return name in self._entries

    def resolve(self, name: str, shared: bool = True) -> Any:
        """Return an instance for *name*.

        With ``shared=True`` the cached instance is returned when one
        exists; otherwise a new instance is built, the entry's hook runs on
        it, and it is cached. With ``shared=False`` a new instance is built
        and hooked every time and nothing is cached.

        Raises ``NotRegisteredError`` if *name* has no entry.
        """
        entry = self._entries.get(name)
        if entry is None:
            raise NotRegisteredError(name)

        if shared and name in self._instances:
            return self._instances[name]

        instance = self.new_instance(entry.class_ref, entry.params)
        if entry.callback is not None:
            entry.callback(instance)
        if shared:
            self._instances[name] = instance
        return instance

    def new_instance(
        self, class_ref: type | Callable[..., Any] | str, params: Sequence[Any] = ()
    ) -> Any:
        """Construct an object from a class, factory, or import string."""
        factory = import_string(class_ref) if isinstance(class_ref, str) else class_ref
        if not callable(factory):
            msg = f"{class_ref!r} is not a class or factory"
            raise ConfigurationError(msg)
        return factory(*params)

    def reset(self) -> None:
        """Drop every entry and every cached shared instance."""
        self._entries.clear()
        self._instances.clear()

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)
