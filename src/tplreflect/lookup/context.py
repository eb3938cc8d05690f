"""Lookup context: the read-only tables the analyzer consults.

A context is built once (from the defaults, a preset, or a config file)
and shared across any number of ``process()`` calls.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

from tplreflect.lookup import defaults


def _lower_set(names: Iterable[str]) -> frozenset[str]:
    return frozenset(n.lower() for n in names)


@dataclass(frozen=True, eq=False)
class LookupContext:
    """Immutable lookup tables for template analysis.

    Accessor and method names are matched case-insensitively, so they are
    stored lowercased.  ``inference_rules`` keep their order: the first
    matching pattern wins.

    Instances hash by identity, which lets the reflector cache parses per
    context without comparing whole tables.
    """

    name: str = "base"
    global_accessors: frozenset[str] = frozenset()
    field_methods: Mapping[str, str] = field(default_factory=dict)
    collection_methods: frozenset[str] = frozenset()
    inference_rules: tuple[tuple[str, str], ...] = ()
    default_type: str = defaults.DEFAULT_DATATYPE
    boolean_type: str = defaults.BOOLEAN_DATATYPE
    relation_type: str = defaults.RELATION_DATATYPE
    known_types: frozenset[str] = frozenset()
    known_type_predicate: Callable[[str], bool] | None = None

    def __post_init__(self):
        object.__setattr__(self, "global_accessors", _lower_set(self.global_accessors))
        object.__setattr__(self, "collection_methods", _lower_set(self.collection_methods))
        object.__setattr__(
            self,
            "field_methods",
            MappingProxyType({k.lower(): v for k, v in dict(self.field_methods).items()}),
        )
        object.__setattr__(self, "inference_rules", tuple((p, t) for p, t in self.inference_rules))
        object.__setattr__(self, "known_types", frozenset(self.known_types))

    # -- lookups ------------------------------------------------------------

    def is_global_accessor(self, name: str) -> bool:
        return name.lower() in self.global_accessors

    def is_collection_method(self, name: str) -> bool:
        return name.lower() in self.collection_methods

    def field_type(self, method: str) -> str | None:
        """Type implied by invoking *method* on a field, or None."""
        return self.field_methods.get(method.lower())

    def is_known_type(self, name: str) -> bool:
        """True if *name* is a data-bearing class in the host type catalog."""
        if self.known_type_predicate is not None:
            return bool(self.known_type_predicate(name))
        return name in self.known_types

    # -- composition --------------------------------------------------------

    def extend(
        self,
        name: str | None = None,
        *,
        global_accessors: Iterable[str] = (),
        field_methods: Mapping[str, str] | None = None,
        collection_methods: Iterable[str] = (),
        inference_rules: Iterable[tuple[str, str]] = (),
        known_types: Iterable[str] = (),
        **overrides,
    ) -> LookupContext:
        """Return a new context with extra entries layered on this one.

        Set-valued tables are unioned, field methods are merged with the new
        entries winning, and extra inference rules are tried before the
        existing ones.  Scalar fields (``default_type`` etc.) can be replaced
        through *overrides*.
        """
        merged_methods = dict(self.field_methods)
        if field_methods:
            merged_methods.update({k.lower(): v for k, v in field_methods.items()})
        return dataclasses.replace(
            self,
            name=name or self.name,
            global_accessors=self.global_accessors | _lower_set(global_accessors),
            field_methods=merged_methods,
            collection_methods=self.collection_methods | _lower_set(collection_methods),
            inference_rules=tuple(inference_rules) + self.inference_rules,
            known_types=self.known_types | frozenset(known_types),
            **overrides,
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "global_accessors": sorted(self.global_accessors),
            "field_methods": dict(sorted(self.field_methods.items())),
            "collection_methods": sorted(self.collection_methods),
            "inference_rules": [list(r) for r in self.inference_rules],
            "default_type": self.default_type,
            "boolean_type": self.boolean_type,
            "relation_type": self.relation_type,
            "known_types": sorted(self.known_types),
        }


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------


def base_context() -> LookupContext:
    """Context with the accessors every template can see."""
    return LookupContext(
        name="base",
        global_accessors=frozenset(defaults.BASE_GLOBAL_ACCESSORS),
        field_methods=defaults.FIELD_METHODS,
        collection_methods=frozenset(defaults.COLLECTION_METHODS),
        inference_rules=defaults.INFER_DATATYPE_RULES,
        known_types=frozenset(defaults.KNOWN_TYPES),
    )


def site_tree_context(base: LookupContext | None = None) -> LookupContext:
    """Content page templates: adds page hierarchy and navigation accessors."""
    return (base or base_context()).extend("site-tree", global_accessors=defaults.SITE_TREE_ACCESSORS)


def email_context(base: LookupContext | None = None) -> LookupContext:
    """Email templates: adds the message header fields."""
    return (base or base_context()).extend("email", global_accessors=defaults.EMAIL_ACCESSORS)


PRESETS: dict[str, Callable[..., LookupContext]] = {
    "base": lambda base=None: base or base_context(),
    "site-tree": site_tree_context,
    "email": email_context,
}


def get_preset(name: str, base: LookupContext | None = None) -> LookupContext:
    """Build the named preset, optionally on top of a customized *base*."""
    try:
        factory = PRESETS[name]
    except KeyError:
        raise ValueError(f"Unknown preset '{name}'. Choose from: {', '.join(sorted(PRESETS))}") from None
    return factory(base)
