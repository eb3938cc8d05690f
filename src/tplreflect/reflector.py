"""Template reflection: collect the variables and blocks of a template.

Works like PHP's ReflectionClass, but for template markup.  Attempts to
infer what field type each variable might be from its name and from the
methods invoked on it, and flags dotted variables that look like custom
has_one relations.

    reflector = TemplateReflector(site_tree_context())
    reflection = reflector.process(Path("Page.ss").read_text())

    for name, datatype in reflection.top_level_vars.items():
        print(f"The template variable {name} is likely a {datatype}")

    for block in reflection.top_level_blocks:
        print(block.name, "loop" if block.is_loop() else "with")
        for child in block.children:
            print("  ", child.name, child.variables)
"""

from __future__ import annotations

import hashlib
import logging
from collections import OrderedDict

from tplreflect.lookup.context import LookupContext, base_context
from tplreflect.parse.block import Block
from tplreflect.parse.builder import build_blocks, build_root, index_spans, reinsert_blocks, strip_blocks
from tplreflect.parse.scanner import normalize, scan_delimiters

log = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = 64


class TemplateReflection:
    """The analyzed block tree of one template.

    Blocks are indexed by their offset in the normalized code.  The tree
    is fixed once built; only each block's variable map is filled in
    lazily.
    """

    def __init__(self, code: str, ctx: LookupContext):
        self.code = normalize(code)
        self.ctx = ctx

        opens, closes = scan_delimiters(self.code)
        self.open_count = len(opens)

        spans = index_spans(opens, closes)
        tree = build_blocks(self.code, spans, ctx, self.has_block_named)
        self._blocks: dict[int, Block] = tree.blocks
        self.excluded_count = len(tree.excluded)
        self.top_level_blocks: list[Block] = tree.top_level

        # The root is everything left once the known blocks are cut out
        residual, self.excised = strip_blocks(self.code, tree.top_level)
        self.root = build_root(residual, tree.top_level, ctx, self.has_block_named)

    # -- lookups ------------------------------------------------------------

    @property
    def blocks(self) -> list[Block]:
        """All addressable blocks, nested ones included, in source order."""
        return list(self._blocks.values())

    @property
    def loops(self) -> list[Block]:
        return [b for b in self._blocks.values() if b.is_loop()]

    @property
    def withs(self) -> list[Block]:
        return [b for b in self._blocks.values() if b.is_with()]

    def get_block_by_id(self, block_id: int) -> Block | None:
        return self._blocks.get(block_id)

    def get_block_by_name(self, name: str) -> Block | None:
        """First block named *name*.

        Not very reliable: the same name may open several blocks.
        """
        for block in self._blocks.values():
            if block.name == name:
                return block
        return None

    def has_block_named(self, name: str) -> bool:
        return self.get_block_by_name(name) is not None

    # -- top level ----------------------------------------------------------

    @property
    def top_level_vars(self) -> dict[str, str]:
        return self.root.variables

    @property
    def top_level_booleans(self) -> tuple[str, ...]:
        return self.root.booleans

    @property
    def top_level_code(self) -> str:
        return self.root.own_content

    def reassemble(self) -> str:
        """Rebuild the normalized code from the root text and cut blocks."""
        return reinsert_blocks(self.root.own_content, self.excised)

    def to_dict(self) -> dict:
        return {
            "context": self.ctx.name,
            "variables": dict(self.top_level_vars),
            "booleans": list(self.top_level_booleans),
            "blocks": [b.to_dict() for b in self.top_level_blocks],
        }


class TemplateReflector:
    """Processes templates against one lookup context.

    Identical templates are served from a small cache keyed by the context
    in use and the hash of their normalized code, so reassigning ``ctx``
    never returns a tree built with the previous tables.
    """

    def __init__(self, ctx: LookupContext | None = None, cache_size: int = DEFAULT_CACHE_SIZE):
        self.ctx = ctx or base_context()
        self.cache_size = cache_size
        self._cache: OrderedDict[tuple[LookupContext, str], TemplateReflection] = OrderedDict()

    def process(self, code: str) -> TemplateReflection:
        """Analyze *code*.

        Raises MalformedTemplateError or UnresolvedParentError; no partial
        result is produced in either case.
        """
        if self.cache_size <= 0:
            return TemplateReflection(code, self.ctx)

        digest = hashlib.sha256(normalize(code).encode("utf-8")).hexdigest()
        key = (self.ctx, digest)
        cached = self._cache.get(key)
        if cached is not None:
            log.debug("Reflection cache hit %s (%s)", digest[:12], self.ctx.name)
            self._cache.move_to_end(key)
            return cached

        reflection = TemplateReflection(code, self.ctx)
        self._cache[key] = reflection
        if len(self._cache) > self.cache_size:
            self._cache.popitem(last=False)
        return reflection

    def clear_cache(self) -> None:
        self._cache.clear()


def process(code: str, ctx: LookupContext | None = None) -> TemplateReflection:
    """Analyze *code* once, without caching."""
    return TemplateReflection(code, ctx or base_context())
