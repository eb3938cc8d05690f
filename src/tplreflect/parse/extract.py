"""Variable and boolean extraction with type inference.

Highly opinionated: it relies on the convention that template variables
and methods are UpperCamelCase, and on naming idioms ("Date", "Image",
"Content") to guess field types.  Nothing here raises; anything that can't
be resolved gets a generic label.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable

from tplreflect.lookup.context import LookupContext
from tplreflect.parse.scanner import LOOP

# <% if $SoldOut %>, <% if not $Items.Count %>; "if not" must be tried first
_CONDITION_RE = re.compile(r"<% (if not|if) \$?([A-Za-z0-9._]+)(.*?) %>")

# $Title, $Created.Nice, $Image.SetWidth(200) (arguments are never captured)
_VARIABLE_RE = re.compile(r"\$([A-Za-z0-9_]+(?:\.[A-Za-z0-9_]+)*)")


def infer_datatype(name: str, rules: Iterable[tuple[str, str]], default: str) -> str:
    """Guess a field type from a variable name.

    The first rule whose pattern occurs in *name* (case-sensitive) wins;
    otherwise *default* is returned.
    """
    for pattern, datatype in rules:
        if pattern in name:
            return datatype
    return default


def extract_booleans(
    content: str,
    ctx: LookupContext,
    is_block_name: Callable[[str], bool],
) -> tuple[str, ...]:
    """Collect names used as ``<% if %>`` / ``<% if not %>`` conditions.

    Skips global accessors (``<% if $Menu(2) %>``), list methods
    (``<% if $Last %>``) and names of known blocks (``<% if $Items %>``).
    Keeps first-seen order.
    """
    booleans: list[str] = []
    for m in _CONDITION_RE.finditer(content):
        label = m.group(2).strip()
        if label in booleans:
            continue
        if ctx.is_global_accessor(label):
            continue
        if ctx.is_collection_method(label):
            continue
        if is_block_name(label):
            continue
        booleans.append(label)
    return tuple(booleans)


def extract_variables(
    content: str,
    kind: str,
    ctx: LookupContext,
    has_child_named: Callable[[str], bool],
    booleans: Iterable[str] = (),
) -> dict[str, str]:
    """Map each variable in *content* to its most likely type.

    *kind* is the enclosing block kind; loops ignore list methods such as
    ``$Pos`` while other scopes ignore global accessors such as ``$Up``.
    Names only ever used as a condition in *booleans* end up typed as
    booleans.
    """
    found: dict[str, str] = {}
    counts: dict[str, int] = {}

    for m in _VARIABLE_RE.finditer(content):
        label = m.group(1)

        if "." in label:
            relation, member = label.split(".", 2)[:2]
            # $Up.Title, $Top.Menu: framework internals
            if ctx.is_global_accessor(relation):
                continue
            field_type = ctx.field_type(member)
            if field_type is not None:
                # $Created.Nice: a field method tells us the field type
                found[relation] = field_type
            elif ctx.is_known_type(relation):
                # $Image.Title: named like a known class, likely a has_one to it
                found[relation] = relation
            else:
                found[relation] = ctx.relation_type
            continue

        counts[label] = counts.get(label, 0) + 1
        if label in found or has_child_named(label):
            continue
        if kind == LOOP:
            if not ctx.is_collection_method(label):
                found[label] = infer_datatype(label, ctx.inference_rules, ctx.default_type)
        elif not ctx.is_global_accessor(label):
            found[label] = infer_datatype(label, ctx.inference_rules, ctx.default_type)

    # A name whose only use is the condition itself is a flag
    for name in booleans:
        if name in counts:
            counts[name] -= 1
            if counts[name] == 0:
                found[name] = ctx.boolean_type

    return found
