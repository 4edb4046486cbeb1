"""Candidate type discovery.

Turns the targets handed to :func:`blueprint_ioc.build` (dotted module-name
prefixes, module objects, or classes) into an ordered, duplicate-free tuple of
classes that carry a role marker.
"""

import importlib
import inspect
import logging
import pkgutil
import types
from typing import Any, Iterable, Iterator, List, Set, Tuple

from .analysis import roles_of
from .constants import NON_SINGLETON_FLAG, SINGLETON_FLAG
from .exceptions import ConfigurationError, type_name

_logger = logging.getLogger(__name__)


def _import(name: str) -> types.ModuleType:
    try:
        return importlib.import_module(name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import module '{name}': {e}") from e


def _walk(package: types.ModuleType) -> Iterator[types.ModuleType]:
    yield package
    if not hasattr(package, "__path__"):
        return
    for _, name, _ in pkgutil.walk_packages(package.__path__, package.__name__ + "."):
        yield _import(name)


def _classes_in(module: types.ModuleType) -> Iterator[type]:
    for _, obj in inspect.getmembers(module, inspect.isclass):
        yield obj


def _iter_targets(targets: Iterable[Any]) -> Iterator[type]:
    for target in targets:
        if isinstance(target, type):
            yield target
        elif isinstance(target, str):
            for module in _walk(_import(target)):
                for cls in _classes_in(module):
                    if cls.__module__ == target or cls.__module__.startswith(target + "."):
                        yield cls
        elif inspect.ismodule(target):
            for module in _walk(target):
                yield from _classes_in(module)
        elif isinstance(target, Iterable):
            yield from _iter_targets(target)
        else:
            raise ConfigurationError(f"Cannot discover components in {target!r}")


def discover(targets: Iterable[Any]) -> Tuple[type, ...]:
    """Return the role-marked classes reachable from *targets*, in discovery order.

    Duplicate reports of the same class are collapsed onto the first one.
    """
    seen: Set[type] = set()
    found: List[type] = []
    for cls in _iter_targets(targets):
        if cls in seen:
            continue
        seen.add(cls)
        if roles_of(cls):
            found.append(cls)
        elif vars(cls).get(SINGLETON_FLAG) or vars(cls).get(NON_SINGLETON_FLAG):
            _logger.warning("Ignoring %s: scope marker without a component role", type_name(cls))
    _logger.debug("Discovered %d candidate types", len(found))
    return tuple(found)
