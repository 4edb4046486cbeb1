# blueprint_ioc/__init__.py
from ._version import __version__

from .api import build, build_from_config
from .blueprint import Blueprint, BlueprintBuilder, Provider
from .config import ManagerConfig, load_config
from .config_sources import DictSource, EnvSource, JsonTreeSource, TreeSource, YamlTreeSource
from .decorators import (
    component, component_factory, provides,
    singleton, non_singleton,
    component_constructor, ordering,
    DEPENDENT_TYPE, Requester,
)
from .descriptor import ConstructorDescriptor, MethodDescriptor, ParameterSlot, TypeDescriptor
from .exceptions import (
    ComponentError, ConfigurationError, UnknownDependencyError,
    CircularDependencyError, ComponentCreationError,
)
from .graph_export import export_graph, to_dot
from .registry import Registry

__all__ = [
    "__version__",
    "build",
    "build_from_config",
    "Blueprint",
    "BlueprintBuilder",
    "Provider",
    "Registry",
    "ManagerConfig",
    "load_config",
    "TreeSource",
    "DictSource",
    "EnvSource",
    "JsonTreeSource",
    "YamlTreeSource",
    "component",
    "component_factory",
    "provides",
    "singleton",
    "non_singleton",
    "component_constructor",
    "ordering",
    "DEPENDENT_TYPE",
    "Requester",
    "TypeDescriptor",
    "ConstructorDescriptor",
    "MethodDescriptor",
    "ParameterSlot",
    "ComponentError",
    "ConfigurationError",
    "UnknownDependencyError",
    "CircularDependencyError",
    "ComponentCreationError",
    "export_graph",
    "to_dot",
]
