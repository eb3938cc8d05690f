"""Lookup configuration: discovery, loading, validation."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from tplreflect.exit_codes import ConfigError
from tplreflect.lookup.context import PRESETS, LookupContext, base_context, get_preset

log = logging.getLogger(__name__)

CONFIG_NAME = ".tplreflect.json"

_LIST_KEYS = ("global_accessors", "collection_methods", "known_types")
_STR_KEYS = ("preset", "default_datatype", "boolean_type", "relation_type")


def find_config(start: str | Path = ".") -> Path | None:
    """Walk up from *start* looking for a .tplreflect.json file.

    Returns the path of the config file, or None.
    """
    current = Path(start).resolve()
    if current.is_file():
        current = current.parent
    while True:
        candidate = current / CONFIG_NAME
        if candidate.exists():
            return candidate
        if current == current.parent:
            return None
        current = current.parent


def load_config(path: Path) -> dict[str, Any]:
    """Read and validate a lookup config file.

    Returns the parsed config dict.  Raises ConfigError on problems.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config {path}: {exc}") from exc
    try:
        cfg = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc
    _validate_config(cfg)
    return cfg


def context_from_config(cfg: dict[str, Any], preset: str | None = None) -> LookupContext:
    """Build a LookupContext from a validated config dict.

    *preset* overrides the config's own ``preset`` key.  Custom entries are
    layered on the base tables first, so the preset's accessors still apply.
    """
    overrides = {}
    if "default_datatype" in cfg:
        overrides["default_type"] = cfg["default_datatype"]
    if "boolean_type" in cfg:
        overrides["boolean_type"] = cfg["boolean_type"]
    if "relation_type" in cfg:
        overrides["relation_type"] = cfg["relation_type"]

    base = base_context().extend(
        global_accessors=cfg.get("global_accessors", ()),
        field_methods=cfg.get("field_methods"),
        collection_methods=cfg.get("collection_methods", ()),
        inference_rules=[tuple(rule) for rule in cfg.get("infer_datatype", ())],
        known_types=cfg.get("known_types", ()),
        **overrides,
    )
    name = preset or cfg.get("preset") or "base"
    ctx = get_preset(name, base)
    log.debug("Built lookup context %r from config (%d accessors)", ctx.name, len(ctx.global_accessors))
    return ctx


def resolve_context(
    preset: str | None = None,
    config_path: str | Path | None = None,
    start: str | Path = ".",
) -> LookupContext:
    """Pick the lookup context for a run.

    An explicit *config_path* wins, otherwise a .tplreflect.json is searched
    for upward from *start*.  With no config at all, the named preset (or the
    base context) is returned.
    """
    path = Path(config_path) if config_path else find_config(start)
    if path is None:
        return get_preset(preset or "base")
    log.info("Using lookup config %s", path)
    return context_from_config(load_config(path), preset=preset)


def _validate_config(cfg: Any) -> None:
    """Raise ConfigError if the config is structurally invalid."""
    if not isinstance(cfg, dict):
        raise ConfigError("Lookup config must be a JSON object")
    for key in _STR_KEYS:
        if key in cfg and not isinstance(cfg[key], str):
            raise ConfigError(f"'{key}' must be a string")
    if "preset" in cfg and cfg["preset"] not in PRESETS:
        raise ConfigError(f"Unknown preset '{cfg['preset']}'. Choose from: {', '.join(sorted(PRESETS))}")
    for key in _LIST_KEYS:
        if key in cfg:
            value = cfg[key]
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigError(f"'{key}' must be a list of strings")
    if "field_methods" in cfg:
        methods = cfg["field_methods"]
        if not isinstance(methods, dict) or not all(isinstance(v, str) for v in methods.values()):
            raise ConfigError("'field_methods' must map method names to type names")
    if "infer_datatype" in cfg:
        rules = cfg["infer_datatype"]
        if not isinstance(rules, list):
            raise ConfigError("'infer_datatype' must be a list of [pattern, type] pairs")
        for i, rule in enumerate(rules):
            if not (isinstance(rule, list) and len(rule) == 2 and all(isinstance(p, str) for p in rule)):
                raise ConfigError(f"infer_datatype entry {i} must be a [pattern, type] pair")
