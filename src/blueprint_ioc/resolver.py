# src/blueprint_ioc/resolver.py
import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from .blueprint import Blueprint, Provider
from .exceptions import (
    CircularDependencyError,
    ComponentCreationError,
    UnknownDependencyError,
    type_name,
)

KeyT = Union[str, type]

_logger = logging.getLogger(__name__)


class Resolver:
    """Materializes the singletons of a :class:`Blueprint`.

    Dependencies are resolved depth-first. Singleton instances are cached and
    indexed under every ancestor of their type; non-singleton instances are
    built fresh for each dependent and never stored.
    """

    def __init__(self, blueprint: Blueprint) -> None:
        self._blueprint = blueprint
        self._singletons: Dict[KeyT, Any] = {}
        self._type_index: Dict[KeyT, List[Any]] = {}
        self._in_progress: List[KeyT] = []

    @property
    def singletons(self) -> Dict[KeyT, Any]:
        return self._singletons

    @property
    def type_index(self) -> Dict[KeyT, List[Any]]:
        return self._type_index

    def resolve_all(self) -> None:
        for key in self._blueprint.singleton_types:
            if key not in self._singletons:
                self.resolve(key, None)

    def resolve(self, key: KeyT, dependent: Optional[KeyT] = None) -> Any:
        if key in self._singletons:
            return self._singletons[key]
        if key in self._in_progress:
            raise CircularDependencyError(self._in_progress, key)

        provider = self._blueprint.provider_for(key)
        if provider is None:
            origin = self._in_progress[-1] if self._in_progress else None
            raise UnknownDependencyError(key, origin)

        self._in_progress.append(key)
        try:
            args = self._resolve_args(provider, dependent)
            instance = self._invoke(provider, args)
            if provider.singleton:
                self._store(provider, instance)
            _logger.debug(
                "Created %s instance of %s",
                "singleton" if provider.singleton else "non-singleton", type_name(key),
            )
            return instance
        finally:
            self._in_progress.pop()

    def _resolve_args(self, provider: Provider, dependent: Optional[KeyT]) -> Tuple[Any, ...]:
        args: List[Any] = []
        for slot in provider.parameters:
            if slot.dependent_type and not provider.singleton:
                args.append(dependent)
                continue
            next_dependent = None if self._blueprint.is_singleton(slot.key) else provider.key
            args.append(self.resolve(slot.key, next_dependent))
        return tuple(args)

    def _invoke(self, provider: Provider, args: Tuple[Any, ...]) -> Any:
        factory_instance = None
        if provider.factory_key is not None:
            factory_instance = self.resolve(provider.factory_key, None)

        via = "factory method" if provider.is_factory_method else "constructor"
        try:
            return provider.provide(factory_instance, args)
        except Exception as creation_error:
            raise ComponentCreationError(provider.key, creation_error, via=via) from creation_error

    def _store(self, provider: Provider, instance: Any) -> None:
        self._singletons[provider.key] = instance
        for ancestor in provider.ancestors or (provider.key,):
            self._type_index.setdefault(ancestor, []).append(instance)
