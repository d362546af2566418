"""Route callback variants.

A route's callback is one of three shapes, each carrying exactly what is
needed to produce a callable at dispatch time:

- ``FunctionCallback(func)``: any callable.
- ``ClassCallback(class_ref, method)``: a method looked up on a class.
  When ``class_ref`` names a registry entry, the method is looked up on
  that entry's shared instance instead.
- ``BoundCallback(obj, method)``: a method looked up on an object.

``as_callback()`` turns the user-facing forms (a callable, a
``(class, "method")`` tuple, an ``(obj, "method")`` tuple) into one of
these.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sword._internal.imports import import_string
from sword._internal.types import Handler
from sword.errors import ConfigurationError

if TYPE_CHECKING:
    from sword.registry import Registry


def _lookup(target: Any, method: str, label: str) -> Handler:
    func = getattr(target, method, None)
    if func is None or not callable(func):
        msg = f"{label} has no callable {method!r}"
        raise ConfigurationError(msg)
    return func


@dataclass(frozen=True, slots=True)
class FunctionCallback:
    func: Handler

    @property
    def name(self) -> str:
        return getattr(self.func, "__qualname__", repr(self.func))

    def resolve(self, registry: Registry | None = None) -> Handler:
        return self.func


@dataclass(frozen=True, slots=True)
class ClassCallback:
    class_ref: type | str
    method: str

    @property
    def name(self) -> str:
        ref = self.class_ref if isinstance(self.class_ref, str) else self.class_ref.__qualname__
        return f"{ref}.{self.method}"

    def resolve(self, registry: Registry | None = None) -> Handler:
        """Produce the callable, going through *registry* for registered names."""
        ref = self.class_ref
        if isinstance(ref, str):
            if registry is not None and registry.has(ref):
                return _lookup(registry.resolve(ref), self.method, f"registered {ref!r}")
            ref = import_string(ref)
        return _lookup(ref, self.method, repr(ref))


@dataclass(frozen=True, slots=True)
class BoundCallback:
    obj: Any
    method: str

    @property
    def name(self) -> str:
        return f"{type(self.obj).__qualname__}.{self.method}"

    def resolve(self, registry: Registry | None = None) -> Handler:
        return _lookup(self.obj, self.method, repr(self.obj))


type Callback = FunctionCallback | ClassCallback | BoundCallback


def as_callback(value: Any) -> Callback:
    """Normalize a user-supplied callback into a ``Callback`` variant.

    Raises ``ConfigurationError`` for anything that is not invokable.
    """
    match value:
        case FunctionCallback() | ClassCallback() | BoundCallback():
            return value
        case (str() | type()) as ref, str() as method:
            return ClassCallback(ref, method)
        case obj, str() as method:
            return BoundCallback(obj, method)
        case _ if callable(value):
            return FunctionCallback(value)
    msg = f"{value!r} is not a valid route callback"
    raise ConfigurationError(msg)
