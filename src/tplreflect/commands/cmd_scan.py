"""Scan a template: top-level variables, booleans and every block's scope."""

from __future__ import annotations

import click

from tplreflect.commands.resolve import json_mode, reflect_file, template_options
from tplreflect.output.formatter import abbrev_kind, indent, json_envelope, section, to_json, var_lines
from tplreflect.parse.block import Block


def _block_text(block: Block) -> str:
    header = f"{abbrev_kind(block.kind)} {block.name}  @{block.id}"
    lines = [header]
    lines.extend(var_lines(block.variables, block.booleans))
    for child in block.children:
        lines.append(indent(_block_text(child)))
    return "\n".join(lines)


@click.command("scan")
@template_options
@click.pass_context
def scan(ctx, template, preset, config_path):
    """List the variables each scope of a template uses, with likely types."""
    reflection = reflect_file(template, preset, config_path)
    top_vars = reflection.top_level_vars

    if json_mode(ctx):
        click.echo(
            to_json(
                json_envelope(
                    "scan",
                    summary={
                        "blocks": len(reflection.blocks),
                        "loops": len(reflection.loops),
                        "withs": len(reflection.withs),
                        "excluded": reflection.excluded_count,
                        "top_level_variables": len(top_vars),
                    },
                    template=template,
                    **reflection.to_dict(),
                )
            )
        )
        return

    click.echo(f"=== {template} ({reflection.ctx.name}) ===\n")
    click.echo(section("Top level:", var_lines(top_vars, reflection.top_level_booleans)))
    if reflection.top_level_blocks:
        click.echo("")
        click.echo("Blocks:")
        for block in reflection.top_level_blocks:
            click.echo(indent(_block_text(block)))
