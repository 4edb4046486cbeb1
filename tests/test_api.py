# tests/test_api.py
import types

import pytest

from blueprint_ioc import (
    CircularDependencyError,
    ComponentError,
    ConfigurationError,
    ConstructorDescriptor,
    ManagerConfig,
    MethodDescriptor,
    ParameterSlot,
    TypeDescriptor,
    UnknownDependencyError,
    build,
    build_from_config,
    component,
    component_constructor,
    component_factory,
    non_singleton,
    provides,
    singleton,
)
from blueprint_ioc.discovery import discover


# --- Discovery through dotted module prefixes ---

def test_build_from_package_prefix_walks_subpackages():
    from sample_app.extras.garage import Garage
    from sample_app.logging_factory import LogFactory, Logger
    from sample_app.vehicles import Drivable, FordCar, Loggable, Radio, Stealable

    reg = build("sample_app")

    car = reg.get(FordCar)
    radio = reg.get(Radio)
    assert car is not None and radio is not None
    assert car.radio is radio
    assert reg.get(Garage).parked() == [car]
    assert reg.get(Logger) is None
    assert isinstance(reg.get(LogFactory), LogFactory)

    # Each logger was built for the type that asked for it.
    assert car.logger.owner is FordCar
    assert radio.logger.owner is Radio
    assert car.logger is not radio.logger

    # Radio finishes before FordCar, which depends on it.
    assert reg.get_with_type(Loggable) == (radio, car)
    assert reg.get_with_type(Stealable) == (radio, car)
    assert reg.get_with_type(Drivable) == (car,)

    car.log("vroom")
    assert reg.get(LogFactory).lines == ["[FordCar] vroom"]


def test_prefix_only_reports_classes_under_it():
    names = {cls.__name__ for cls in discover(["sample_app.vehicles"])}
    assert names == {"FordCar", "Radio"}

    # Garage needs FordCar, which is outside the prefix.
    with pytest.raises(UnknownDependencyError):
        build("sample_app.extras")


def test_duplicate_reports_are_tolerated():
    from sample_app.vehicles import FordCar, Radio

    found = discover(["sample_app.vehicles", "sample_app", FordCar, [Radio]])
    assert found.count(FordCar) == 1
    assert found.count(Radio) == 1


def test_unknown_module_is_a_configuration_error():
    with pytest.raises(ConfigurationError, match="Cannot import module 'no_such_pkg_xyz'"):
        build("no_such_pkg_xyz")


def test_unsupported_target_is_rejected():
    with pytest.raises(ConfigurationError, match="Cannot discover components in 42"):
        build(42)


# --- Module objects, in the style of hand-built test packages ---

def test_build_from_module_object_and_scope_marker_warning(captured_logs):
    pkg = types.ModuleType("pkg_module_obj")

    @singleton
    class Orphan: ...

    @component
    @singleton
    class Service: ...

    pkg.__dict__.update(locals())
    reg = build(pkg)

    assert isinstance(reg.get(Service), Service)
    assert reg.get(Orphan) is None
    assert any("scope marker without a component role" in line for line in captured_logs)
    assert any("singletons materialized" in line for line in captured_logs)


def test_failures_abort_the_whole_build():
    pkg = types.ModuleType("pkg_cycle")

    class A: ...
    class B: ...

    @component_factory
    class Cycle:
        @provides
        @singleton
        def a(self, b: B) -> A:
            return A()

        @provides
        @singleton
        def b(self, a: A) -> B:
            return B()

    pkg.__dict__.update(locals())
    with pytest.raises(CircularDependencyError):
        build(pkg)


def test_conflict_is_reported_before_any_construction():
    built = []
    pkg = types.ModuleType("pkg_conflict")

    class Shared: ...

    @component
    @singleton
    class Early:
        def __init__(self):
            built.append(self)

    @component_factory
    class One:
        @provides
        @singleton
        def shared(self) -> Shared:
            return Shared()

    @component_factory
    class Two:
        @provides
        @non_singleton
        def shared(self) -> Shared:
            return Shared()

    pkg.__dict__.update(locals())
    with pytest.raises(ConfigurationError, match="already provided by"):
        build(pkg)
    assert built == []


def test_all_errors_share_a_base_class():
    pkg = types.ModuleType("pkg_base_error")

    @component
    class NoScope: ...

    pkg.__dict__.update(locals())
    with pytest.raises(ComponentError):
        build(pkg)


def test_keyword_only_dependencies_are_injected():
    pkg = types.ModuleType("pkg_keyword_only")

    class Thing:
        def __init__(self, store):
            self.store = store

    @component
    @singleton
    class Store: ...

    @component
    @singleton
    class Service:
        @component_constructor
        def __init__(self, *, store: Store):
            self.store = store

    @component_factory
    class ThingFactory:
        @provides
        @singleton
        def thing(self, *, store: Store) -> Thing:
            return Thing(store)

    pkg.__dict__.update(locals())
    reg = build(pkg)

    store = reg.get(Store)
    assert reg.get(Service).store is store
    assert reg.get(Thing).store is store


def test_factory_method_cannot_claim_a_registered_component():
    pkg = types.ModuleType("pkg_component_vs_factory")

    class Thing: ...

    @component_factory
    class ThingFactory:
        @provides
        @singleton
        def thing(self) -> Thing:
            return Thing()

    pkg.__dict__.update(locals())
    thing_descriptor = TypeDescriptor(
        key=Thing,
        component=True,
        singleton=True,
        constructors=(ConstructorDescriptor("__init__", (), lambda args: Thing()),),
    )
    with pytest.raises(ConfigurationError, match="provides a component class"):
        build(pkg, descriptors=[thing_descriptor])


# --- Explicit registration table (no class introspection) ---

def _table():
    config = TypeDescriptor(
        key="config",
        component=True,
        singleton=True,
        constructors=(ConstructorDescriptor("make", (), lambda args: {"dsn": "sqlite://"}, designated=True),),
    )
    pool = TypeDescriptor(
        key="pool",
        component=True,
        singleton=True,
        constructors=(
            ConstructorDescriptor(
                "make",
                (ParameterSlot("config", "config"),),
                lambda args: {"pool_for": args[0]["dsn"]},
                designated=True,
            ),
        ),
        ancestors=("pool", "resource"),
    )
    factory = TypeDescriptor(
        key="handles",
        factory=True,
        constructors=(ConstructorDescriptor("__init__", (), lambda args: {"issued": 0}),),
        methods=(
            MethodDescriptor(
                name="handle",
                return_type="handle",
                parameters=(ParameterSlot("owner", type, dependent_type=True), ParameterSlot("pool", "pool")),
                invoke=lambda inst, args: ("handle", args[0], args[1]["pool_for"]),
                provider=True,
                non_singleton=True,
            ),
            MethodDescriptor(
                name="report",
                return_type="report",
                parameters=(ParameterSlot("handle", "handle"),),
                invoke=lambda inst, args: {"report": args[0]},
                provider=True,
                singleton=True,
                ordering=7,
            ),
        ),
    )
    return config, pool, factory


def test_registration_table_without_classes():
    reg = build(descriptors=_table())

    assert reg.get("config") == {"dsn": "sqlite://"}
    assert reg.get("pool") == {"pool_for": "sqlite://"}
    assert reg.get("report") == {"report": ("handle", "report", "sqlite://")}
    assert reg.get("handle") is None
    assert reg.get_with_type("resource") == (reg.get("pool"),)
    assert reg.blueprint.provider_for("report").ordering == 7


def test_build_from_config():
    reg = build_from_config(ManagerConfig(modules=("sample_app",)))
    from sample_app.vehicles import FordCar
    assert reg.get(FordCar) is not None


def test_build_from_config_passes_strictness():
    tagged = TypeDescriptor(
        key="tag",
        component=True,
        singleton=True,
        constructors=(
            ConstructorDescriptor(
                "make", (ParameterSlot("owner", type, dependent_type=True),), lambda args: "tag", designated=True,
            ),
        ),
    )

    with pytest.raises(ConfigurationError, match="only valid on non-singleton providers"):
        build_from_config(ManagerConfig(), descriptors=[tagged])

    # Lenient: the slot is an ordinary dependency on `type`, which nothing provides.
    with pytest.raises(UnknownDependencyError):
        build_from_config(ManagerConfig(strict_dependent_type=False), descriptors=[tagged])
