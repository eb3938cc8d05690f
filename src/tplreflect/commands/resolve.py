"""Shared template loading helpers for all tplreflect commands."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from tplreflect.lookup.config import resolve_context
from tplreflect.lookup.context import PRESETS
from tplreflect.reflector import TemplateReflection, process

log = logging.getLogger(__name__)


def template_options(f):
    """Attach the TEMPLATE argument and the --preset/--config options."""
    f = click.option(
        "--config",
        "config_path",
        type=click.Path(exists=True, dir_okay=False),
        default=None,
        help="Lookup config file (default: nearest .tplreflect.json)",
    )(f)
    f = click.option(
        "--preset",
        type=click.Choice(sorted(PRESETS)),
        default=None,
        help="Lookup preset: extra accessors for page or email templates",
    )(f)
    f = click.argument("template", type=click.Path(exists=True, dir_okay=False))(f)
    return f


def reflect_file(template: str, preset: str | None = None, config_path: str | None = None) -> TemplateReflection:
    """Read *template* and analyze it with the resolved lookup context."""
    path = Path(template)
    ctx = resolve_context(preset=preset, config_path=config_path, start=path.parent)
    text = path.read_text(encoding="utf-8", errors="replace")
    log.info("Analyzing %s with context %r", path, ctx.name)
    return process(text, ctx)


def json_mode(ctx: click.Context) -> bool:
    return bool(ctx.obj.get("json")) if ctx.obj else False
