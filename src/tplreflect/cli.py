"""Click CLI entry point with lazy-loaded subcommands."""

import os
import sys

# Fix Unicode output on Windows consoles (cp1253, cp1252, etc.)
if sys.platform == "win32" and not os.environ.get("PYTHONIOENCODING"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

import click


# Lazy-loading command group: imports command modules only when invoked.
# This avoids importing networkx on every CLI call.
_COMMANDS = {
    "scan":    ("tplreflect.commands.cmd_scan",    "scan"),
    "blocks":  ("tplreflect.commands.cmd_blocks",  "blocks"),
    "tree":    ("tplreflect.commands.cmd_tree",    "tree"),
    "context": ("tplreflect.commands.cmd_context", "context"),
}


class LazyGroup(click.Group):
    """A Click group that lazy-loads command modules on first access."""

    def list_commands(self, ctx):
        return sorted(_COMMANDS.keys())

    def get_command(self, ctx, cmd_name):
        if cmd_name not in _COMMANDS:
            return None
        module_path, attr_name = _COMMANDS[cmd_name]
        import importlib
        mod = importlib.import_module(module_path)
        return getattr(mod, attr_name)


@click.group(cls=LazyGroup)
@click.version_option(package_name="tplreflect")
@click.option('--json', 'json_mode', is_flag=True, help='Output in JSON format')
@click.option('--compact', is_flag=True, help='Compact output: TSV tables, minimal JSON envelope')
@click.pass_context
def cli(ctx, json_mode, compact):
    """tplreflect: find the variables and blocks a template uses."""
    ctx.ensure_object(dict)
    ctx.obj['json'] = json_mode
    ctx.obj['compact'] = compact


if __name__ == "__main__":
    cli()
