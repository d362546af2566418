"""Import-string resolution for CLI commands.

Resolves strings like ``"myapp:engine"`` or ``"myapp.main:create_engine"``
to a sword Engine.
"""

from sword._internal.imports import import_string
from sword.engine import Engine


def resolve_engine(target: str) -> Engine:
    """Resolve ``"module:attribute"`` to an Engine.

    The attribute defaults to ``engine``. A callable that is not an Engine
    is treated as a factory and called with no arguments.

    Raises:
        ConfigurationError: If the import fails.
        TypeError: If the object is not an Engine.
    """
    obj = import_string(target, default_attr="engine")

    if callable(obj) and not isinstance(obj, Engine):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {target!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, Engine):
        msg = f"{target!r} resolved to {type(obj).__name__}, not a sword.Engine instance"
        raise TypeError(msg)

    return obj
