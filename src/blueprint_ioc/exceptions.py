"""Exception hierarchy for blueprint-ioc.

All library exceptions inherit from :class:`ComponentError`, so any failure of
:func:`blueprint_ioc.build` can be caught with a single ``except ComponentError``
clause. Every one of them is fatal to the build that raised it.
"""

from typing import Any, Iterable, Optional


def type_name(key: Any) -> str:
    """Render a type identifier for messages (``module.QualName`` for classes)."""
    if isinstance(key, type):
        module = getattr(key, "__module__", None)
        qualname = getattr(key, "__qualname__", key.__name__)
        if module and module != "builtins":
            return f"{module}.{qualname}"
        return qualname
    return str(key)


class ComponentError(Exception):
    """Base exception for all blueprint-ioc errors."""

    pass


class ConfigurationError(ComponentError):
    """Raised for invalid role/scope markers, constructor selection, duplicate
    provider claims, malformed provider methods, or bad library configuration."""

    def __init__(self, msg: str):
        super().__init__(msg)


class UnknownDependencyError(ComponentError):
    """Raised when a provider requires a type that nothing provides.

    Attributes:
        key: The type identifier that was not registered.
        origin: The type whose provider required it, if any.
    """

    def __init__(self, key: Any, origin: Optional[Any] = None):
        origin_name = type_name(origin) if origin is not None else "build"
        super().__init__(
            f"Type '{type_name(key)}' is not a component nor provided by a component factory "
            f"(required by: '{origin_name}')"
        )
        self.key = key
        self.origin = origin


class CircularDependencyError(ComponentError):
    """Raised when a type is requested while it is already being constructed.

    Attributes:
        chain: The in-progress construction stack, outermost first.
        key: The type that closed the cycle.
    """

    def __init__(self, chain: Iterable[Any], key: Any):
        self.chain = tuple(chain)
        self.key = key
        path = " -> ".join(type_name(k) for k in self.chain + (key,))
        super().__init__(
            f"Circular dependency: '{type_name(key)}' is already being constructed ({path})"
        )


class ComponentCreationError(ComponentError):
    """Raised when a constructor or provider method fails while creating a component.

    Attributes:
        key: The type identifier whose creation failed.
        cause: The original exception that caused the failure.
    """

    def __init__(self, key: Any, cause: Exception, via: str = "constructor"):
        super().__init__(
            f"Type '{type_name(key)}' could not be constructed - exception in {via}; "
            f"cause: {cause.__class__.__name__}: {cause}"
        )
        self.key = key
        self.cause = cause
