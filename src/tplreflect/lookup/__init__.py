"""Lookup tables consulted during template analysis."""

from tplreflect.lookup.context import (
    PRESETS,
    LookupContext,
    base_context,
    email_context,
    get_preset,
    site_tree_context,
)

__all__ = [
    "PRESETS",
    "LookupContext",
    "base_context",
    "email_context",
    "get_preset",
    "site_tree_context",
]
