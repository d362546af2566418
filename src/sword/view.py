"""Template view backed by kida.

A ``View`` holds template variables and renders files from its ``path``
directory. The engine registers it under ``"view"`` and copies
``sword.views.path`` / ``sword.views.extension`` into it after
construction.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from kida import Environment, FileSystemLoader

from sword.errors import TemplateNotFoundError


class View:
    """Template variables plus kida rendering.

    Usage::

        view = View("templates", extension=".html")
        view.set("title", "Home")
        html = view.fetch("index", {"user": user})
    """

    __slots__ = ("_env", "_env_path", "extension", "path", "vars")

    def __init__(self, path: str | Path = ".", extension: str = ".html") -> None:
        self.path = str(path)
        self.extension = extension
        self.vars: dict[str, Any] = {}
        self._env: Environment | None = None
        self._env_path: str | None = None

    # -- Variables --

    def get(self, key: str) -> Any:
        return self.vars.get(key)

    def set(self, key: str | Mapping[str, Any], value: Any = None) -> None:
        """Set one variable, or several from a mapping."""
        if isinstance(key, Mapping):
            self.vars.update(key)
        else:
            self.vars[key] = value

    def has(self, key: str) -> bool:
        return key in self.vars

    def clear(self, key: str | None = None) -> None:
        """Remove one variable, or all of them."""
        if key is None:
            self.vars.clear()
        else:
            self.vars.pop(key, None)

    # -- Templates --

    def template_name(self, file: str) -> str:
        """Append the configured extension unless *file* already ends with it."""
        if self.extension and not file.endswith(self.extension):
            return file + self.extension
        return file

    def exists(self, file: str) -> bool:
        return (Path(self.path) / self.template_name(file)).is_file()

    def fetch(self, file: str, data: Mapping[str, Any] | None = None) -> str:
        """Render *file* and return the text.

        *data* is merged into the view variables before rendering.

        Raises ``TemplateNotFoundError`` if the file does not exist.
        """
        name = self.template_name(file)
        if not self.exists(file):
            msg = f"Template file not found: {Path(self.path) / name}"
            raise TemplateNotFoundError(msg)
        if data:
            self.vars.update(data)
        template = self._environment().get_template(name)
        return template.render(dict(self.vars))

    def _environment(self) -> Environment:
        # path is assigned after construction by the engine's hook
        if self._env is None or self._env_path != self.path:
            self._env = Environment(
                loader=FileSystemLoader(self.path),
                autoescape=True,
            )
            self._env_path = self.path
        return self._env
