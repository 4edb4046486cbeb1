"""Sources of nested configuration trees for :func:`blueprint_ioc.load_config`.

Each source yields a plain mapping. The loader merges them in the order given
and reads the ``blueprint`` section, so a file can hold other settings too.
"""

import json
import os
from typing import Any, Dict, Mapping, Optional

from .exceptions import ConfigurationError


class TreeSource:
    """A provider of one configuration tree. Subclasses override :meth:`get_tree`."""

    def get_tree(self) -> Mapping[str, Any]:
        raise NotImplementedError


class DictSource(TreeSource):
    """Wraps an in-memory mapping, e.g. settings assembled by the application.

    Example:
        >>> DictSource({"blueprint": {"modules": ["app.services"]}}).get_tree()
        {'blueprint': {'modules': ['app.services']}}
    """

    def __init__(self, data: Mapping[str, Any]):
        self._data = data

    def get_tree(self) -> Mapping[str, Any]:
        return self._data


class _FileTreeSource(TreeSource):
    kind = "file"

    def __init__(self, path: str):
        self._path = path

    def _parse(self, stream) -> Any:
        raise NotImplementedError

    def _errors(self) -> tuple:
        return (OSError, ValueError)

    def get_tree(self) -> Mapping[str, Any]:
        errors = self._errors()
        try:
            with open(self._path, encoding="utf-8") as f:
                data = self._parse(f)
        except errors as e:
            raise ConfigurationError(f"Failed to load {self.kind} config: {e}") from e
        return data or {}


class JsonTreeSource(_FileTreeSource):
    """Reads a JSON document from *path*.

    Raises:
        ConfigurationError: The file is missing, unreadable or not valid JSON.
    """

    kind = "JSON"

    def _parse(self, stream) -> Any:
        return json.load(stream)


class YamlTreeSource(_FileTreeSource):
    """Reads a YAML document from *path*; an empty file is an empty tree.

    PyYAML is optional (``pip install blueprint-ioc[yaml]``) and only imported
    when the tree is read.

    Raises:
        ConfigurationError: PyYAML is missing, or the file cannot be read or parsed.
    """

    kind = "YAML"

    def _errors(self) -> tuple:
        try:
            import yaml
        except ImportError as e:
            raise ConfigurationError("PyYAML not installed") from e
        return (OSError, yaml.YAMLError)

    def _parse(self, stream) -> Any:
        import yaml
        return yaml.safe_load(stream)


class EnvSource(TreeSource):
    """Tree source built from prefixed environment variables.

    ``BLUEPRINT_IOC_MODULES=app.a,app.b`` becomes
    ``{"blueprint": {"modules": "app.a,app.b"}}``. Values stay strings; the
    config loader coerces them.

    Args:
        prefix: Variable name prefix to collect.
        section: Top-level key the collected values are placed under.
        environ: Mapping to read instead of ``os.environ``.
    """

    def __init__(
        self,
        prefix: str = "BLUEPRINT_IOC_",
        *,
        section: str = "blueprint",
        environ: Optional[Mapping[str, str]] = None,
    ):
        self._prefix = prefix
        self._section = section
        self._environ = environ

    def get_tree(self) -> Mapping[str, Any]:
        env = self._environ if self._environ is not None else os.environ
        values: Dict[str, Any] = {}
        for name, value in env.items():
            if name.startswith(self._prefix) and len(name) > len(self._prefix):
                values[name[len(self._prefix):].lower()] = value
        return {self._section: values} if values else {}
