import time
from typing import Any, Iterable, List

from .analysis import describe
from .blueprint import BlueprintBuilder
from .config import ManagerConfig
from .constants import LOGGER
from .descriptor import TypeDescriptor
from .discovery import discover
from .registry import Registry
from .resolver import Resolver


def build(
    *targets: Any,
    descriptors: Iterable[TypeDescriptor] = (),
    strict_dependent_type: bool = True,
) -> Registry:
    """Discover components, build the blueprint and materialize every singleton.

    Args:
        *targets: Dotted module-name prefixes, module objects, classes, or
            iterables of these.
        descriptors: Hand-written type descriptors registered alongside the
            discovered classes.
        strict_dependent_type: Reject the dependent-type marker on singleton
            providers while building the blueprint.

    Returns:
        A fully materialized, immutable :class:`Registry`.

    Raises:
        ConfigurationError: On invalid declarations or duplicate providers.
        UnknownDependencyError: When a provider requires an unregistered type.
        CircularDependencyError: When a type depends on itself transitively.
        ComponentCreationError: When a constructor or provider method fails.
    """
    t0 = time.perf_counter()
    candidates: List[TypeDescriptor] = [describe(cls) for cls in discover(targets)]
    candidates.extend(descriptors)

    blueprint = BlueprintBuilder(strict_dependent_type=strict_dependent_type).build(candidates)

    resolver = Resolver(blueprint)
    resolver.resolve_all()
    registry = Registry(blueprint, resolver.singletons, resolver.type_index)

    took_ms = (time.perf_counter() - t0) * 1000
    LOGGER.info(
        "Built %d providers, %d singletons materialized in %.1f ms",
        len(blueprint), len(registry), took_ms,
    )
    return registry


def build_from_config(config: ManagerConfig, *, descriptors: Iterable[TypeDescriptor] = ()) -> Registry:
    return build(
        *config.modules,
        descriptors=descriptors,
        strict_dependent_type=config.strict_dependent_type,
    )
