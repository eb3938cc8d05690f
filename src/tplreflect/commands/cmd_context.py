"""Show the effective lookup tables for a preset or config file."""

from __future__ import annotations

import click

from tplreflect.commands.resolve import json_mode
from tplreflect.lookup.config import resolve_context
from tplreflect.lookup.context import PRESETS
from tplreflect.output.formatter import format_table, json_envelope, section, to_json


@click.command("context")
@click.option("--preset", type=click.Choice(sorted(PRESETS)), default=None, help="Lookup preset")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Lookup config file (default: nearest .tplreflect.json)",
)
@click.pass_context
def context(ctx, preset, config_path):
    """Dump global accessors, method tables and inference rules."""
    lookup = resolve_context(preset=preset, config_path=config_path)
    data = lookup.to_dict()

    if json_mode(ctx):
        click.echo(
            to_json(
                json_envelope(
                    "context",
                    summary={
                        "name": lookup.name,
                        "global_accessors": len(lookup.global_accessors),
                        "field_methods": len(lookup.field_methods),
                        "collection_methods": len(lookup.collection_methods),
                        "inference_rules": len(lookup.inference_rules),
                    },
                    **data,
                )
            )
        )
        return

    click.echo(f"=== Lookup context: {lookup.name} ===\n")
    click.echo(section("Global accessors:", [f"  {', '.join(data['global_accessors'])}"]))
    click.echo("")
    click.echo(section("Collection methods:", [f"  {', '.join(data['collection_methods'])}"]))
    click.echo("")
    click.echo("Inference rules (first match wins):")
    click.echo(format_table(["pattern", "type"], data["inference_rules"]))
    click.echo("")
    click.echo(f"Default type: {lookup.default_type}")
    click.echo(f"Boolean type: {lookup.boolean_type}")
    click.echo(f"Relation type: {lookup.relation_type}")
