"""Constants used throughout the blueprint-ioc library.

This module defines the internal attribute names stamped onto decorated classes
and functions, the library logger, and the role and scope identifiers.
"""

import logging

LOGGER_NAME: str = "blueprint_ioc"
"""Default logger name for the blueprint-ioc library."""

LOGGER: logging.Logger = logging.getLogger(LOGGER_NAME)
"""Pre-configured logger instance for blueprint-ioc internal diagnostics."""

COMPONENT_FLAG: str = "_bp_component"
"""Attribute name marking a class with the Component role."""

FACTORY_FLAG: str = "_bp_component_factory"
"""Attribute name marking a class with the ComponentFactory role."""

SINGLETON_FLAG: str = "_bp_singleton"
"""Attribute name marking a class or provider method as singleton-scoped."""

NON_SINGLETON_FLAG: str = "_bp_non_singleton"
"""Attribute name marking a class or provider method as non-singleton-scoped."""

PROVIDES_FLAG: str = "_bp_provides"
"""Attribute name marking a factory method as a provider method."""

CONSTRUCTOR_FLAG: str = "_bp_component_constructor"
"""Attribute name marking the designated constructor of a class."""

ORDERING_KEY: str = "_bp_ordering"
"""Attribute name storing the ordering hint (an ``int``, default ``0``)."""

ROLE_COMPONENT: str = "component"
"""Role of a class built by the container."""

ROLE_FACTORY: str = "component_factory"
"""Role of a class whose provider methods build other types."""

SCOPE_SINGLETON: str = "singleton"
"""Scope: one shared, cached instance per registry."""

SCOPE_NON_SINGLETON: str = "non_singleton"
"""Scope: a fresh instance for every dependent that requires one."""
