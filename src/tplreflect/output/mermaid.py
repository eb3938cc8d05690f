"""Mermaid flowcharts of a template's block tree.

The node shape tells the block kind apart: loops are subroutine boxes,
withs are rounded boxes and the root is a plain box.  Each label carries
the number of variables found in that block's own scope.
"""

from __future__ import annotations

from tplreflect.graph.tree import ROOT_NODE
from tplreflect.output.formatter import abbrev_kind

# kind -> Mermaid shape brackets
_SHAPES = {
    "root": ("[", "]"),
    "loop": ("[[", "]]"),
    "with": ("(", ")"),
}


def node_id(block) -> str:
    """Mermaid id for a block graph node: ``root`` or ``b<offset>``."""
    return ROOT_NODE if block == ROOT_NODE else f"b{block}"


def block_label(kind: str, name: str, var_count: int | None = None) -> str:
    label = f"{abbrev_kind(kind)} {name}".rstrip()
    if var_count is not None:
        label += f" ({var_count} var{'' if var_count == 1 else 's'})"
    return label.replace('"', "'")


def block_node(block, kind: str, name: str, var_count: int | None = None) -> str:
    left, right = _SHAPES.get(kind, ("[", "]"))
    return f'    {node_id(block)}{left}"{block_label(kind, name, var_count)}"{right}'


def nesting_edge(parent, child) -> str:
    return f"    {node_id(parent)} --> {node_id(child)}"


def block_flowchart(G, var_counts: dict | None = None, direction: str = "TD") -> str:
    """Render a graph from ``build_block_graph`` as a Mermaid flowchart.

    Nodes and edges come out in source order, root first, so the same
    template always gives the same text.  *var_counts* maps graph node to
    the size of its variable map; nodes missing from it get no count.
    """
    var_counts = var_counts or {}
    order = sorted(G.nodes, key=lambda n: (n != ROOT_NODE, G.nodes[n]["start"]))
    lines = [f"flowchart {direction}"]
    for n in order:
        attrs = G.nodes[n]
        lines.append(block_node(n, attrs["kind"], attrs["name"], var_counts.get(n)))
    for n in order:
        for child in sorted(G.successors(n), key=lambda c: G.nodes[c]["start"]):
            lines.append(nesting_edge(n, child))
    return "\n".join(lines)
