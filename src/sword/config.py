"""Engine configuration.

EngineConfig is a frozen dataclass, immutable after creation. The engine
seeds its variable store from it under the ``sword.*`` keys, so runtime
overrides go through ``engine.set()``.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Engine configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = EngineConfig(case_sensitive=True, views_path="templates")
    """

    # Routing
    base_url: str | None = None
    case_sensitive: bool = False

    # Errors
    handle_errors: bool = True
    log_errors: bool = False

    # Views
    views_path: str | Path = "./views"
    views_extension: str = ".html"

    # Responses
    content_length: bool = True

    def as_vars(self) -> dict[str, Any]:
        """Return the settings keyed the way the engine's variable store expects."""
        return {
            "sword.base_url": self.base_url,
            "sword.case_sensitive": self.case_sensitive,
            "sword.handle_errors": self.handle_errors,
            "sword.log_errors": self.log_errors,
            "sword.views.path": str(self.views_path),
            "sword.views.extension": self.views_extension,
            "sword.content_length": self.content_length,
        }
