"""Show the block nesting of a template as an outline or Mermaid diagram."""

from __future__ import annotations

import click

from tplreflect.commands.resolve import json_mode, reflect_file, template_options
from tplreflect.graph.tree import ROOT_NODE, build_block_graph, is_proper_tree
from tplreflect.output.formatter import abbrev_kind, json_envelope, to_json
from tplreflect.output.mermaid import block_flowchart


def _mermaid(reflection, G) -> str:
    var_counts = {b.id: len(b.variables) for b in reflection.blocks}
    var_counts[ROOT_NODE] = len(reflection.top_level_vars)
    return block_flowchart(G, var_counts)


def _outline(G, current=ROOT_NODE, level=0) -> list[str]:
    lines = []
    for child in sorted(G.successors(current), key=lambda n: G.nodes[n]["start"]):
        attrs = G.nodes[child]
        lines.append(f"{'  ' * level}{abbrev_kind(attrs['kind'])} {attrs['name']}  @{child}")
        lines.extend(_outline(G, child, level + 1))
    return lines


@click.command("tree")
@template_options
@click.option("--mermaid", "mermaid_mode", is_flag=True, help="Output Mermaid diagram")
@click.pass_context
def tree(ctx, template, preset, config_path, mermaid_mode):
    """Block nesting outline of a template."""
    reflection = reflect_file(template, preset, config_path)
    G = build_block_graph(reflection)

    if json_mode(ctx):
        extra = {}
        if mermaid_mode:
            extra["mermaid"] = _mermaid(reflection, G)
        click.echo(
            to_json(
                json_envelope(
                    "tree",
                    summary={"blocks": len(reflection.blocks), "proper_tree": is_proper_tree(G)},
                    template=template,
                    blocks=[b.to_dict() for b in reflection.top_level_blocks],
                    **extra,
                )
            )
        )
        return

    if mermaid_mode:
        click.echo(_mermaid(reflection, G))
        return

    lines = _outline(G)
    click.echo("\n".join(lines) if lines else "(no blocks)")
