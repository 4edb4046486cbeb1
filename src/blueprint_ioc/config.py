import os
import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Tuple

from .config_sources import TreeSource
from .exceptions import ConfigurationError

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})

_env_pat = re.compile(r"\$\{ENV:([A-Za-z_][A-Za-z0-9_]*)\}")


@dataclass(frozen=True)
class ManagerConfig:
    """Settings for :func:`blueprint_ioc.build_from_config`.

    Attributes:
        modules: Dotted module-name prefixes to discover components in.
        strict_dependent_type: Reject the dependent-type marker on singleton
            providers while building the blueprint.
    """
    modules: Tuple[str, ...] = ()
    strict_dependent_type: bool = True


def _deep_merge(a: Any, b: Any) -> Any:
    if isinstance(a, dict) and isinstance(b, dict):
        out = dict(a)
        for k, v in b.items():
            out[k] = _deep_merge(out[k], v) if k in out else v
        return out
    return b


def _interpolate(node: Any) -> Any:
    if isinstance(node, dict):
        return {k: _interpolate(v) for k, v in node.items()}
    if isinstance(node, list):
        return [_interpolate(x) for x in node]
    if isinstance(node, str):
        def repl_env(m):
            v = os.environ.get(m.group(1))
            if v is None:
                raise ConfigurationError(f"Missing ENV var {m.group(1)}")
            return v
        return _env_pat.sub(repl_env, node)
    return node


def _as_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _TRUE:
        return True
    if isinstance(value, str) and value.strip().lower() in _FALSE:
        return False
    raise ConfigurationError(f"Config key '{name}' must be a boolean, got {value!r}")


def _as_modules(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        items: Iterable[Any] = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        raise ConfigurationError(f"Config key 'modules' must be a list or a comma-separated string, got {value!r}")
    out = []
    for item in items:
        if not isinstance(item, str):
            raise ConfigurationError(f"Module names must be strings, got {item!r}")
        if item.strip():
            out.append(item.strip())
    return tuple(out)


def merge_trees(sources: Iterable[TreeSource]) -> Mapping[str, Any]:
    acc: Any = {}
    for s in sources:
        acc = _deep_merge(acc, dict(s.get_tree()))
    return _interpolate(acc)


def load_config(*sources: TreeSource, section: str = "blueprint") -> ManagerConfig:
    """Merge *sources* in order (later wins) and read the *section* subtree.

    Strings may reference environment variables as ``${ENV:NAME}``.

    Raises:
        ConfigurationError: On unknown keys, bad values, or missing variables.
    """
    tree = merge_trees(sources)
    node = tree.get(section, {})
    if not isinstance(node, dict):
        raise ConfigurationError(f"Config section '{section}' must be a mapping")

    unknown = set(node) - {"modules", "strict_dependent_type"}
    if unknown:
        raise ConfigurationError(f"Unknown config keys in '{section}': {sorted(unknown)}")

    return ManagerConfig(
        modules=_as_modules(node.get("modules", ())),
        strict_dependent_type=_as_bool("strict_dependent_type", node.get("strict_dependent_type", True)),
    )
