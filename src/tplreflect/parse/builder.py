"""Block tree builder: rebuilds nesting from the flat delimiter stream.

Close tags carry no name, so nesting is recovered with a stack: every close
belongs to the most recently opened block that is still open.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from tplreflect.exit_codes import MalformedTemplateError, UnresolvedParentError
from tplreflect.lookup.context import LookupContext
from tplreflect.parse.block import ROOT, Block
from tplreflect.parse.scanner import CLOSE_LENGTH, OPEN, Delimiter

log = logging.getLogger(__name__)


@dataclass
class BlockSpan:
    """Where a block starts and ends, and which block encloses it."""

    opener: Delimiter
    parent: int | None
    end: int | None = None

    @property
    def start(self) -> int:
        return self.opener.offset


@dataclass
class BlockTree:
    """Result of materializing spans into Block objects."""

    blocks: dict[int, Block] = field(default_factory=dict)
    top_level: list[Block] = field(default_factory=list)
    excluded: list[BlockSpan] = field(default_factory=list)


def index_spans(opens: list[Delimiter], closes: list[Delimiter]) -> dict[int, BlockSpan]:
    """Pair opens with closes in one pass over the offset-ordered stream.

    Returns spans keyed by the offset of their opening delimiter, in
    ascending order.  Raises MalformedTemplateError when a close has no
    open block to end, or when blocks are left open.
    """
    spans: dict[int, BlockSpan] = {}
    stack: list[int] = []

    for delim in sorted(opens + closes, key=lambda d: d.offset):
        if delim.kind == OPEN:
            spans[delim.offset] = BlockSpan(opener=delim, parent=stack[-1] if stack else None)
            stack.append(delim.offset)
            continue
        if not stack:
            raise MalformedTemplateError(
                f"Template is malformed. '{delim.raw}' at offset {delim.offset} closes no open block."
            )
        opener = stack.pop()
        span = spans[opener]
        if span.opener.keyword != delim.keyword:
            log.debug("'%s' at %d closes a %s block opened at %d", delim.raw, delim.offset, span.opener.keyword, opener)
        span.end = delim.offset + CLOSE_LENGTH

    if stack:
        raise MalformedTemplateError(
            f"Template is malformed. {len(stack)} block(s) left open, first at offset {stack[0]}."
        )
    return spans


def build_blocks(
    code: str,
    spans: dict[int, BlockSpan],
    ctx: LookupContext,
    is_block_name: Callable[[str], bool],
) -> BlockTree:
    """Create a Block for every span and link children to parents.

    Blocks named after a global accessor (``<% with $Top %>``) are left out
    of the tree; their text stays with the enclosing scope.  A block nested
    directly in such an excluded block has no addressable parent and raises
    UnresolvedParentError.
    """
    tree = BlockTree()
    for start in sorted(spans):
        span = spans[start]
        name = span.opener.name
        if ctx.is_global_accessor(name):
            log.debug("Excluding block '%s' at %d: global accessor", name, start)
            tree.excluded.append(span)
            continue

        block = Block(
            code,
            start,
            span.end,
            span.opener.keyword,
            name,
            ctx=ctx,
            is_block_name=is_block_name,
            opening=span.opener.raw,
            closing_length=CLOSE_LENGTH,
        )
        tree.blocks[start] = block

        if span.parent is None:
            tree.top_level.append(block)
            continue
        parent = tree.blocks.get(span.parent)
        if parent is None:
            raise UnresolvedParentError(start, span.parent, spans[span.parent].opener.name)
        parent.add_child(block)

    log.debug("Built %d blocks (%d excluded)", len(tree.blocks), len(tree.excluded))
    return tree


def strip_blocks(code: str, top_level: list[Block]) -> tuple[str, list[tuple[int, str]]]:
    """Cut every top-level block out of *code*.

    Returns the residual text and the excised ``(offset, outer_contents)``
    pieces, offsets in the original text.
    """
    parts = []
    excised = []
    pos = 0
    for block in sorted(top_level, key=lambda b: b.start):
        parts.append(code[pos : block.start])
        excised.append((block.start, block.outer_contents))
        pos = block.end
    parts.append(code[pos:])
    return "".join(parts), excised


def reinsert_blocks(residual: str, excised: list[tuple[int, str]]) -> str:
    """Inverse of strip_blocks: put excised pieces back at their offsets."""
    text = residual
    for offset, piece in sorted(excised):
        text = text[:offset] + piece + text[offset:]
    return text


def build_root(
    residual: str,
    top_level: list[Block],
    ctx: LookupContext,
    is_block_name: Callable[[str], bool],
) -> Block:
    """Synthetic root block over everything outside the top-level blocks.

    The root lists the top-level blocks as its children, so a root-level
    ``$Items`` next to ``<% loop $Items %>`` names the block and is not a variable.
    """
    root = Block(residual, 0, len(residual), ROOT, "Root", ctx=ctx, is_block_name=is_block_name)
    # Top-level blocks keep parent=None; the root only lists them.
    root.children = list(top_level)
    return root
