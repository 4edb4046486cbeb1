"""Blueprint building: validation of candidates into construction recipes.

This module defines :class:`Provider` (the construction recipe of one type),
:class:`Blueprint` (the validated, immutable map of type identifiers to
providers, partitioned by scope), and :class:`BlueprintBuilder`, which turns a
sequence of :class:`~blueprint_ioc.descriptor.TypeDescriptor` objects into a
blueprint or fails on the first invalid declaration.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .analysis import roles_of
from .constants import ROLE_COMPONENT, ROLE_FACTORY
from .descriptor import ConstructorDescriptor, MethodDescriptor, ParameterSlot, TypeDescriptor
from .exceptions import ConfigurationError, type_name

KeyT = Union[str, type]

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Provider:
    """The construction recipe for one type identifier.

    A provider is either constructor-based (``method_name`` is ``None`` and
    ``invoke`` takes the argument tuple) or factory-method-based (``invoke``
    takes the factory instance and the argument tuple).

    Attributes:
        key: The type identifier this provider produces.
        singleton: Whether produced instances are cached and shared.
        parameters: The argument slots, in call order.
        invoke: The constructing callable.
        source: Human-readable origin, used in error messages.
        factory_key: The owning component factory of an instance-bound
            provider method, ``None`` otherwise.
        method_name: The provider method name, ``None`` for constructors.
        static: Whether the provider method needs no factory instance.
        ordering: The declared ordering hint. Recorded only.
        ancestors: Type identifiers the instance is indexed under.
    """
    key: KeyT
    singleton: bool
    parameters: Tuple[ParameterSlot, ...]
    invoke: Callable[..., Any]
    source: str
    factory_key: Optional[KeyT] = None
    method_name: Optional[str] = None
    static: bool = False
    ordering: int = 0
    ancestors: Tuple[KeyT, ...] = ()

    @property
    def is_factory_method(self) -> bool:
        return self.method_name is not None

    def provide(self, factory_instance: Any, args: Tuple[Any, ...]) -> Any:
        if self.is_factory_method:
            return self.invoke(factory_instance, args)
        return self.invoke(args)


@dataclass(frozen=True, eq=False)
class Blueprint:
    """Validated construction plan. Never mutated after it is built.

    Attributes:
        providers: Read-only mapping of type identifier to :class:`Provider`.
        singleton_types: Singleton type identifiers, in discovery order.
        non_singleton_types: Non-singleton type identifiers, in discovery order.
    """
    providers: Mapping[KeyT, Provider]
    singleton_types: Tuple[KeyT, ...]
    non_singleton_types: Tuple[KeyT, ...]

    def __contains__(self, key: KeyT) -> bool:
        return key in self.providers

    def __len__(self) -> int:
        return len(self.providers)

    def provider_for(self, key: KeyT) -> Optional[Provider]:
        return self.providers.get(key)

    def is_singleton(self, key: KeyT) -> bool:
        provider = self.providers.get(key)
        return provider is not None and provider.singleton

    def dependency_graph(self) -> Dict[KeyT, Tuple[KeyT, ...]]:
        graph: Dict[KeyT, Tuple[KeyT, ...]] = {}
        for key, provider in self.providers.items():
            deps: List[KeyT] = [
                slot.key for slot in provider.parameters
                if not (slot.dependent_type and not provider.singleton)
            ]
            if provider.factory_key is not None:
                deps.append(provider.factory_key)
            graph[key] = tuple(deps)
        return graph


class BlueprintBuilder:
    """Validates type descriptors and assembles a :class:`Blueprint`.

    Building is eager and fails fast: the first invalid declaration raises
    :class:`~blueprint_ioc.exceptions.ConfigurationError` and no blueprint is
    produced.

    Args:
        strict_dependent_type: Reject the dependent-type parameter marker on
            singleton providers at build time. When ``False`` such slots are
            resolved like any other dependency.
    """

    def __init__(self, *, strict_dependent_type: bool = True) -> None:
        self._strict_dependent_type = strict_dependent_type
        self._by_key: Dict[KeyT, TypeDescriptor] = {}
        self._providers: Dict[KeyT, Provider] = {}
        self._singletons: List[KeyT] = []
        self._non_singletons: List[KeyT] = []

    def build(self, descriptors: Iterable[TypeDescriptor]) -> Blueprint:
        self._by_key = {}
        self._providers = {}
        self._singletons = []
        self._non_singletons = []

        candidates: List[TypeDescriptor] = []
        for d in descriptors:
            if any(d is c for c in candidates):
                continue
            candidates.append(d)
            self._by_key.setdefault(d.key, d)

        for d in candidates:
            self._scan(d)

        _logger.debug(
            "Blueprint built: %d providers (%d singleton, %d non-singleton)",
            len(self._providers), len(self._singletons), len(self._non_singletons),
        )
        return Blueprint(
            providers=MappingProxyType(dict(self._providers)),
            singleton_types=tuple(self._singletons),
            non_singleton_types=tuple(self._non_singletons),
        )

    def _scan(self, d: TypeDescriptor) -> None:
        if d.component and d.factory:
            raise ConfigurationError(
                f"Class \"{d.name}\" cannot be both a component and a component factory. "
                "Must be one or the other."
            )
        if d.component:
            self._scan_component(d)
        elif d.factory:
            self._scan_factory(d)
        else:
            _logger.debug("Skipping %s: no component role", d.name)

    def _scan_component(self, d: TypeDescriptor) -> None:
        if d.singleton == d.non_singleton:
            raise ConfigurationError(
                f"Component \"{d.name}\" not specified as singleton or non-singleton. "
                "Must be one or the other, and not both."
            )
        ctor = self._select_constructor(d, "Component")
        self._claim(
            Provider(
                key=d.key,
                singleton=d.singleton,
                parameters=ctor.parameters,
                invoke=ctor.construct,
                source=f"component {d.name}",
                ordering=d.ordering,
                ancestors=d.type_chain(),
            )
        )

    def _scan_factory(self, d: TypeDescriptor) -> None:
        if d.singleton:
            raise ConfigurationError(
                f"Component Factory \"{d.name}\" implies singleton - marker is redundant."
            )
        if d.non_singleton:
            raise ConfigurationError(
                f"Component Factory \"{d.name}\" cannot be non-singleton - factories are always singleton."
            )
        existing = self._providers.get(d.key)
        if existing is not None:
            raise ConfigurationError(
                f"Component Factory \"{d.name}\" cannot be provided by another source, only itself "
                f"(already provided by {existing.source})."
            )

        ctor = self._select_constructor(d, "Component Factory")
        self._claim(
            Provider(
                key=d.key,
                singleton=True,
                parameters=ctor.parameters,
                invoke=ctor.construct,
                source=f"component factory {d.name}",
                ordering=d.ordering,
                ancestors=d.type_chain(),
            )
        )

        for m in d.methods:
            if m.provider:
                self._claim(self._method_provider(d, m))

    def _method_provider(self, d: TypeDescriptor, m: MethodDescriptor) -> Provider:
        where = f"{d.name}.{m.name}"
        if not m.public:
            raise ConfigurationError(
                f"Component Factory \"{d.name}\" cannot have a non-public provider method: {m.name}"
            )
        if m.return_type is None:
            raise ConfigurationError(
                f"Component Factory \"{d.name}\" cannot have a provider method that returns nothing: {m.name}"
            )
        roles = self._roles_of(m.return_type)
        if ROLE_COMPONENT in roles:
            raise ConfigurationError(
                f"Component Factory method \"{where}\" provides a component class, "
                "which could already provide itself!"
            )
        if ROLE_FACTORY in roles:
            raise ConfigurationError(
                f"Component Factory method \"{where}\" provides a component factory class, "
                "which could already provide itself!"
            )
        if m.singleton == m.non_singleton:
            raise ConfigurationError(
                f"Component Factory method \"{where}\" not specified as singleton or non-singleton. "
                "Must be one or the other, and not both."
            )
        return Provider(
            key=m.return_type,
            singleton=m.singleton,
            parameters=m.parameters,
            invoke=m.invoke,
            source=f"factory method {where}",
            factory_key=None if m.static else d.key,
            method_name=m.name,
            static=m.static,
            ordering=m.ordering,
            ancestors=self._ancestors_of(m.return_type),
        )

    def _select_constructor(self, d: TypeDescriptor, label: str) -> ConstructorDescriptor:
        found: Optional[ConstructorDescriptor] = None
        for ctor in d.constructors:
            if not ctor.designated:
                continue
            if found is not None:
                raise ConfigurationError(
                    f"{label} \"{d.name}\" already had a designated constructor "
                    f"({found.name}); found another: {ctor.name}"
                )
            if not ctor.public:
                raise ConfigurationError(
                    f"{label} \"{d.name}\" cannot have a non-public designated constructor: {ctor.name}"
                )
            found = ctor
        if found is not None:
            return found

        for ctor in d.constructors:
            if ctor.public and not ctor.parameters:
                return ctor
        raise ConfigurationError(
            f"{label} \"{d.name}\" does not have a designated constructor, "
            "nor a public no-argument constructor!"
        )

    def _roles_of(self, key: KeyT) -> Tuple[str, ...]:
        d = self._by_key.get(key)
        if d is not None:
            return tuple(
                role for role, present in ((ROLE_COMPONENT, d.component), (ROLE_FACTORY, d.factory))
                if present
            )
        return roles_of(key)

    def _ancestors_of(self, key: KeyT) -> Tuple[KeyT, ...]:
        d = self._by_key.get(key)
        if d is not None:
            return d.type_chain()
        if isinstance(key, type):
            return tuple(key.__mro__)
        return (key,)

    def _claim(self, provider: Provider) -> None:
        existing = self._providers.get(provider.key)
        if existing is not None:
            raise ConfigurationError(
                f"Type \"{type_name(provider.key)}\" is already provided by {existing.source}; "
                f"cannot also be provided by {provider.source}"
            )
        if provider.singleton and self._strict_dependent_type:
            for slot in provider.parameters:
                if slot.dependent_type:
                    raise ConfigurationError(
                        f"Parameter '{slot.name}' of {provider.source} is marked as the dependent type, "
                        "which is only valid on non-singleton providers"
                    )

        self._providers[provider.key] = provider
        if provider.singleton:
            self._singletons.append(provider.key)
        else:
            self._non_singletons.append(provider.key)
        _logger.debug(
            "Registered %s provider for %s (%s)",
            "singleton" if provider.singleton else "non-singleton",
            type_name(provider.key), provider.source,
        )
