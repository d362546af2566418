"""Shared type aliases used across sword modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: user-defined function with variable signature
Handler: TypeAlias = Callable[..., Any]

# Dispatcher filter: receives (params, output), returns a control value
Filter: TypeAlias = Callable[[list[Any], Any], Any]

# Registry post-construct hook: receives the new instance
Hook: TypeAlias = Callable[[Any], Any]
