"""Flat listing of every addressable block in a template."""

from __future__ import annotations

import click

from tplreflect.commands.resolve import json_mode, reflect_file, template_options
from tplreflect.graph.tree import block_depths, build_block_graph
from tplreflect.output.formatter import format_table, format_table_compact, json_envelope, table_to_dicts, to_json

_HEADERS = ["id", "kind", "name", "parent", "depth", "vars"]


@click.command("blocks")
@template_options
@click.option("--loops", "only_loops", is_flag=True, help="Only <% loop %> blocks")
@click.option("--withs", "only_withs", is_flag=True, help="Only <% with %> blocks")
@click.pass_context
def blocks(ctx, template, preset, config_path, only_loops, only_withs):
    """Table of blocks with their nesting depth and variable counts."""
    reflection = reflect_file(template, preset, config_path)
    depths = block_depths(build_block_graph(reflection))

    if only_loops and not only_withs:
        selected = reflection.loops
    elif only_withs and not only_loops:
        selected = reflection.withs
    else:
        selected = reflection.blocks

    rows = [
        [
            b.id,
            b.kind,
            b.name,
            b.parent.id if b.parent is not None else "",
            depths.get(b.id, 0),
            len(b.variables),
        ]
        for b in selected
    ]

    if json_mode(ctx):
        click.echo(
            to_json(
                json_envelope(
                    "blocks",
                    summary={"total": len(rows), "excluded": reflection.excluded_count},
                    template=template,
                    blocks=table_to_dicts(_HEADERS, rows),
                )
            )
        )
        return

    if ctx.obj and ctx.obj.get("compact"):
        click.echo(format_table_compact(_HEADERS, rows))
    else:
        click.echo(format_table(_HEADERS, rows))
