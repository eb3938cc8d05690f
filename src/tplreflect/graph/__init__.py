"""Graph views of a template's block structure."""

from tplreflect.graph.tree import block_depths, build_block_graph, is_proper_tree, spans_nested

__all__ = ["block_depths", "build_block_graph", "is_proper_tree", "spans_nested"]
