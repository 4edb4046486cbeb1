# tests/test_registry.py
import threading
import types

import pytest

from blueprint_ioc import Registry, build, component, component_constructor, non_singleton, singleton
from blueprint_ioc.blueprint import BlueprintBuilder


class Greeter: ...


def _pkg():
    pkg = types.ModuleType("pkg_registry")

    @component
    @singleton
    class English(Greeter): ...

    @component
    @singleton
    class Spanish(Greeter):
        @component_constructor
        def __init__(self, english: English):
            self.english = english

    @component
    @non_singleton
    class Casual(Greeter): ...

    pkg.__dict__.update(locals())
    return pkg


def test_get_returns_cached_singletons_and_none_otherwise():
    pkg = _pkg()
    reg = build(pkg)
    assert isinstance(reg.get(pkg.English), pkg.English)
    assert reg.get(pkg.English) is reg.get(pkg.English)
    assert reg.get(pkg.Casual) is None
    assert reg.get(Greeter) is None
    assert reg.get("nothing") is None


def test_lookups_never_raise_on_unhashable_keys():
    reg = build(_pkg())
    assert reg.get([]) is None
    assert reg.get_with_type({}) == ()
    assert ([] in reg) is False


def test_get_with_type_excludes_non_singletons_and_keeps_construction_order():
    pkg = _pkg()
    reg = build(pkg)
    english, spanish = reg.get(pkg.English), reg.get(pkg.Spanish)
    assert reg.get_with_type(Greeter) == (english, spanish)
    assert reg.get_with_type(pkg.Casual) == ()
    assert reg.get_with_type(int) == ()


def test_registry_is_read_only():
    reg = build(_pkg())
    assert isinstance(reg.get_with_type(Greeter), tuple)
    with pytest.raises(TypeError):
        reg._singletons[Greeter] = object()


def test_registry_is_detached_from_the_source_dicts():
    bp = BlueprintBuilder().build([])
    singletons = {Greeter: Greeter()}
    index = {Greeter: [singletons[Greeter]]}
    reg = Registry(bp, singletons, index)

    singletons.clear()
    index[Greeter].append(object())

    assert Greeter in reg
    assert len(reg.get_with_type(Greeter)) == 1
    assert reg.blueprint is bp


def test_keys_len_and_contains():
    pkg = _pkg()
    reg = build(pkg)
    assert set(reg.keys()) == {pkg.English, pkg.Spanish}
    assert len(reg) == 2
    assert pkg.English in reg
    assert pkg.Casual not in reg
    assert "Registry(singletons=2" in repr(reg)


def test_concurrent_readers_see_the_same_instances():
    pkg = _pkg()
    reg = build(pkg)
    expected = reg.get(pkg.Spanish)
    seen = []

    def reader():
        for _ in range(200):
            seen.append(reg.get(pkg.Spanish) is expected and len(reg.get_with_type(Greeter)) == 2)

    threads = [threading.Thread(target=reader) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert all(seen)
    assert len(seen) == 800
