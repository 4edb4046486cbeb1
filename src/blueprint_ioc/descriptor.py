"""Type descriptors: the read-only view of a candidate type.

A :class:`TypeDescriptor` carries everything the blueprint builder needs to
know about one candidate: its role and scope markers, its constructors, and
its provider methods. Descriptors are produced by
:func:`blueprint_ioc.analysis.describe` for decorated classes, or written by
hand to register types without any class introspection.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, Union

from .exceptions import type_name

KeyT = Union[str, type]


@dataclass(frozen=True)
class ParameterSlot:
    """One argument of a construction recipe.

    Attributes:
        name: The parameter name.
        key: The type identifier required for the argument.
        dependent_type: Whether the slot receives the requesting type instead
            of a resolved dependency.
        keyword_only: Whether the argument must be passed by name.
    """
    name: str
    key: KeyT
    dependent_type: bool = False
    keyword_only: bool = False


@dataclass(frozen=True)
class ConstructorDescriptor:
    """A way of constructing the described type.

    Attributes:
        name: Member name (``__init__`` or an alternate-constructor name).
        parameters: The argument slots, in call order.
        construct: Callable taking the tuple of resolved arguments and
            returning the new instance.
        designated: Whether the constructor carries the designated-constructor
            marker.
        public: Whether the constructor is public.
    """
    name: str
    parameters: Tuple[ParameterSlot, ...]
    construct: Callable[[Tuple[Any, ...]], Any]
    designated: bool = False
    public: bool = True


@dataclass(frozen=True)
class MethodDescriptor:
    """A method declared on a component factory.

    Attributes:
        name: Method name.
        return_type: The type identifier the method produces, or ``None``
            when the method returns nothing.
        parameters: The argument slots, in call order.
        invoke: Callable taking the factory instance (``None`` for static
            methods) and the tuple of resolved arguments.
        provider: Whether the method carries the provider marker.
        singleton: Whether the method carries the singleton marker.
        non_singleton: Whether the method carries the non-singleton marker.
        static: Whether the method can be invoked without a factory instance.
        public: Whether the method is public.
        ordering: The ordering hint (inert).
    """
    name: str
    return_type: Optional[KeyT]
    parameters: Tuple[ParameterSlot, ...]
    invoke: Callable[[Any, Tuple[Any, ...]], Any]
    provider: bool = False
    singleton: bool = False
    non_singleton: bool = False
    static: bool = False
    public: bool = True
    ordering: int = 0


@dataclass(frozen=True)
class TypeDescriptor:
    """Read-only view of one candidate type.

    Attributes:
        key: The type identifier.
        component: Whether the type carries the Component role.
        factory: Whether the type carries the ComponentFactory role.
        singleton: Whether the type carries the singleton marker.
        non_singleton: Whether the type carries the non-singleton marker.
        ordering: The ordering hint (inert).
        constructors: Public and non-public constructors of the type.
        methods: Methods declared on the type (only provider methods matter).
        ancestors: The ancestor chain used by the type index, the type itself
            included. Defaults to ``(key,)``.
    """
    key: KeyT
    component: bool = False
    factory: bool = False
    singleton: bool = False
    non_singleton: bool = False
    ordering: int = 0
    constructors: Tuple[ConstructorDescriptor, ...] = ()
    methods: Tuple[MethodDescriptor, ...] = ()
    ancestors: Tuple[KeyT, ...] = ()

    @property
    def name(self) -> str:
        return type_name(self.key)

    @property
    def has_role(self) -> bool:
        return self.component or self.factory

    def type_chain(self) -> Tuple[KeyT, ...]:
        return self.ancestors or (self.key,)
