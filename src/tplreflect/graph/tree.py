"""Build a NetworkX graph from a template's block tree."""

from __future__ import annotations

import networkx as nx

from tplreflect.reflector import TemplateReflection

ROOT_NODE = "root"


def build_block_graph(reflection: TemplateReflection) -> nx.DiGraph:
    """Build a directed parent -> child graph of the blocks.

    Nodes are block ids plus the ``"root"`` node, with attributes
    name, kind, start, end.  Top-level blocks hang off the root node.
    """
    G = nx.DiGraph()
    root = reflection.root
    G.add_node(ROOT_NODE, name=root.name, kind=root.kind, start=0, end=len(reflection.code))

    for block in reflection.blocks:
        G.add_node(block.id, name=block.name, kind=block.kind, start=block.start, end=block.end)
    for block in reflection.blocks:
        parent = block.parent.id if block.parent is not None else ROOT_NODE
        G.add_edge(parent, block.id)

    return G


def is_proper_tree(G: nx.DiGraph) -> bool:
    """True if every block is reachable from the root along exactly one path."""
    return nx.is_arborescence(G)


def block_depths(G: nx.DiGraph) -> dict[int, int]:
    """Nesting depth per block id; top-level blocks have depth 1."""
    lengths = nx.single_source_shortest_path_length(G, ROOT_NODE)
    return {node: depth for node, depth in lengths.items() if node != ROOT_NODE}


def spans_nested(G: nx.DiGraph) -> bool:
    """True if child spans sit strictly inside their parent and never overlap."""
    for parent in G.nodes:
        p = G.nodes[parent]
        children = sorted(G.successors(parent), key=lambda n: G.nodes[n]["start"])
        prev_end = p["start"] if parent == ROOT_NODE else None
        for child in children:
            c = G.nodes[child]
            if parent != ROOT_NODE and not (p["start"] < c["start"] and c["end"] < p["end"]):
                return False
            if prev_end is not None and c["start"] < prev_end:
                return False
            prev_end = c["end"]
    return True
