"""Read-only access to the singletons materialized by a build.

:class:`Registry` is the object returned by :func:`blueprint_ioc.build`. It
never constructs anything and never raises on lookups: unknown types simply
yield ``None`` or an empty tuple. No writes happen after construction, so a
registry can be shared between threads without locking.
"""

from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

from .blueprint import Blueprint

KeyT = Union[str, type]


class Registry:
    """Immutable view over the singleton cache and the type index.

    Args:
        blueprint: The blueprint the instances were built from.
        singletons: Type identifier to singleton instance.
        type_index: Supertype identifier to instances, in construction order.
    """

    def __init__(
        self,
        blueprint: Blueprint,
        singletons: Mapping[KeyT, Any],
        type_index: Mapping[KeyT, Iterable[Any]],
    ) -> None:
        self._blueprint = blueprint
        self._singletons: Mapping[KeyT, Any] = MappingProxyType(dict(singletons))
        self._type_index: Mapping[KeyT, Tuple[Any, ...]] = MappingProxyType(
            {k: tuple(v) for k, v in type_index.items()}
        )

    @property
    def blueprint(self) -> Blueprint:
        return self._blueprint

    def get(self, key: KeyT) -> Optional[Any]:
        """Return the singleton cached for exactly *key*, or ``None``.

        Non-singleton types are never cached, so they always yield ``None``.
        """
        try:
            return self._singletons.get(key)
        except TypeError:
            return None

    def get_with_type(self, key: KeyT) -> Tuple[Any, ...]:
        """Return every singleton whose type chain includes *key*.

        Instances are returned in the order they were constructed. The
        ordering hint declared on providers is not applied.
        """
        try:
            return self._type_index.get(key, ())
        except TypeError:
            return ()

    def keys(self) -> Tuple[KeyT, ...]:
        return tuple(self._singletons.keys())

    def __contains__(self, key: object) -> bool:
        try:
            return key in self._singletons
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._singletons)

    def __repr__(self) -> str:
        return f"Registry(singletons={len(self._singletons)}, types={len(self._type_index)})"
