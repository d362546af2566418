"""Import-string resolution: ``"package.module:Attribute"`` to an object.

Shared by the registry (class identifiers given as strings), callbacks
and ``sword routes``.
"""

import importlib
from typing import Any

from sword.errors import ConfigurationError


def import_string(import_string: str, *, default_attr: str | None = None) -> Any:
    """Resolve an import string to the object it names.

    Accepts ``"module:attribute"``; the attribute part may be dotted
    (``"app.controllers:Users.show"``). When the attribute part is omitted,
    *default_attr* is used, and if that is ``None`` too the string is
    rejected.

    Raises:
        ConfigurationError: If the string is malformed, the module cannot
            be imported, or the attribute does not exist.
    """
    module_path, _, attr_path = import_string.partition(":")
    if not attr_path:
        attr_path = default_attr or ""
    if not module_path or not attr_path:
        msg = f"{import_string!r} is not a 'module:attribute' import string"
        raise ConfigurationError(msg)

    try:
        obj: Any = importlib.import_module(module_path)
    except ImportError as exc:
        msg = f"Cannot import module {module_path!r} for {import_string!r}: {exc}"
        raise ConfigurationError(msg) from exc

    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            msg = f"{import_string!r} has no attribute {part!r}"
            raise ConfigurationError(msg) from exc
    return obj
