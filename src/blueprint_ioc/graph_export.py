from typing import Dict, List, Optional, Union

from .blueprint import Blueprint
from .exceptions import type_name

KeyT = Union[str, type]


def to_dot(
    blueprint: Blueprint,
    *,
    include_scopes: bool = True,
    rankdir: str = "LR",
    title: Optional[str] = None,
) -> str:
    graph = blueprint.dependency_graph()

    lines: List[str] = []
    lines.append("digraph Blueprint {")
    lines.append(f'  rankdir="{rankdir}";')
    lines.append("  node [shape=box, fontsize=10];")
    if title:
        lines.append('  labelloc="t";')
        lines.append(f'  label="{title}";')

    ids: Dict[KeyT, str] = {}

    def _node_id(k: KeyT) -> str:
        if k not in ids:
            ids[k] = f"n{len(ids)}"
        return ids[k]

    def _node_label(k: KeyT) -> str:
        parts = [type_name(k)]
        provider = blueprint.provider_for(k)
        if provider is not None and include_scopes:
            parts.append("[singleton]" if provider.singleton else "[non-singleton]")
        elif provider is None:
            parts.append("[missing]")
        return "\\n".join(parts)

    nodes = list(graph.keys())
    for deps in graph.values():
        for d in deps:
            if d not in nodes:
                nodes.append(d)

    for key in nodes:
        lines.append(f'  {_node_id(key)} [label="{_node_label(key)}"];')

    for parent, deps in graph.items():
        for child in deps:
            lines.append(f"  {_node_id(parent)} -> {_node_id(child)};")

    lines.append("}")
    return "\n".join(lines)


def export_graph(
    blueprint: Blueprint,
    path: str,
    *,
    include_scopes: bool = True,
    rankdir: str = "LR",
    title: Optional[str] = None,
) -> None:
    """Write the blueprint's dependency graph to *path* in Graphviz DOT format."""
    dot = to_dot(blueprint, include_scopes=include_scopes, rankdir=rankdir, title=title)
    with open(path, "w", encoding="utf-8") as f:
        f.write(dot)
