# blueprint_ioc/decorators.py
from __future__ import annotations

from typing import Annotated, Any

from .constants import (
    COMPONENT_FLAG,
    CONSTRUCTOR_FLAG,
    FACTORY_FLAG,
    NON_SINGLETON_FLAG,
    ORDERING_KEY,
    PROVIDES_FLAG,
    SINGLETON_FLAG,
)


class DependentType:
    """Parameter marker: the argument receives the type that requested the component."""
    __slots__ = ()

    def __repr__(self) -> str:
        return "DEPENDENT_TYPE"


DEPENDENT_TYPE = DependentType()

# Annotate a provider parameter as ``requester: Requester`` to receive the
# type identifier of whichever provider triggered the construction.
Requester = Annotated[type, DEPENDENT_TYPE]


def _stamp(obj: Any, flag: str, value: Any = True) -> Any:
    # staticmethod/classmethod: stamp the wrapped function.
    target = getattr(obj, "__func__", obj)
    setattr(target, flag, value)
    return obj


def component(cls):
    setattr(cls, COMPONENT_FLAG, True)
    return cls


def component_factory(cls):
    setattr(cls, FACTORY_FLAG, True)
    return cls


def singleton(obj):
    """Mark a component class or provider method as singleton-scoped."""
    return _stamp(obj, SINGLETON_FLAG)


def non_singleton(obj):
    """Mark a component class or provider method as non-singleton-scoped."""
    return _stamp(obj, NON_SINGLETON_FLAG)


def provides(fn):
    """Mark a component-factory method as a provider for its return type."""
    return _stamp(fn, PROVIDES_FLAG)


def component_constructor(fn):
    """Mark ``__init__`` or a classmethod as the designated constructor."""
    return _stamp(fn, CONSTRUCTOR_FLAG)


def ordering(value: int = 0):
    """Attach an ordering hint. Recorded on providers, not applied to lookups."""
    def dec(obj):
        return _stamp(obj, ORDERING_KEY, int(value))
    return dec


__all__ = [
    "component", "component_factory", "singleton", "non_singleton",
    "provides", "component_constructor", "ordering",
    "DependentType", "DEPENDENT_TYPE", "Requester",
]
