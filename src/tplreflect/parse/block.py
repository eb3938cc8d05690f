"""Block: one node of the template's block tree."""

from __future__ import annotations

from typing import Callable

from tplreflect.lookup.context import LookupContext
from tplreflect.parse.extract import extract_booleans, extract_variables
from tplreflect.parse.scanner import LOOP, WITH

ROOT = "root"

# Masks child blocks in own content; normalized text never contains it
MASK_CHAR = "\n"


class Block:
    """A ``<% loop %>`` / ``<% with %>`` block, or the synthetic root.

    Holds its slice of the normalized template and knows its parent and
    children.  ``variables`` and ``booleans`` are computed on first access
    and cached for the lifetime of the tree.
    """

    def __init__(
        self,
        code: str,
        start: int,
        end: int,
        kind: str,
        name: str,
        *,
        ctx: LookupContext,
        is_block_name: Callable[[str], bool],
        opening: str = "",
        closing_length: int = 0,
    ):
        self.id = start
        self.start = start
        self.end = end
        self.kind = kind
        self.name = name
        self.opening_delimiter = opening
        self.parent: Block | None = None
        self.children: list[Block] = []

        self._code = code
        self._ctx = ctx
        self._is_block_name = is_block_name
        self._inner_start = start + len(opening)
        self._inner_end = end - closing_length
        self._own_content: str | None = None
        self._variables: dict[str, str] | None = None
        self._booleans: tuple[str, ...] | None = None

    def __repr__(self) -> str:
        return f"Block({self.kind} {self.name!r} @{self.id})"

    # -- structure ----------------------------------------------------------

    def add_child(self, child: Block) -> None:
        if any(c.id == child.id for c in self.children):
            return
        self.children.append(child)
        child.parent = self

    def get_child_by_name(self, name: str) -> Block | None:
        for child in self.children:
            if child.name == name:
                return child
        return None

    @property
    def span(self) -> tuple[int, int]:
        return self.start, self.end

    @property
    def relative_offset(self) -> int:
        """Offset of this block relative to its parent's opening delimiter."""
        if self.parent is not None:
            return self.id - self.parent.id
        return self.id

    def is_root(self) -> bool:
        return self.kind == ROOT

    def is_loop(self) -> bool:
        return self.kind == LOOP

    def is_with(self) -> bool:
        return self.kind == WITH

    # -- content ------------------------------------------------------------

    @property
    def outer_contents(self) -> str:
        """Block text including its opening and closing delimiters."""
        return self._code[self.start : self.end]

    @property
    def inner_contents(self) -> str:
        """Block text between its delimiters, child blocks included."""
        return self._code[self._inner_start : self._inner_end]

    @property
    def own_content(self) -> str:
        """Inner contents with every child block masked out.

        Masking keeps the length, so offsets inside the block stay valid.
        The root's text has its blocks removed already.
        """
        if self._own_content is None:
            content = self.inner_contents
            if not self.is_root():
                for child in self.children:
                    rel = child.start - self._inner_start
                    length = child.end - child.start
                    content = content[:rel] + MASK_CHAR * length + content[rel + length :]
            self._own_content = content
        return self._own_content

    # -- analysis -----------------------------------------------------------

    @property
    def booleans(self) -> tuple[str, ...]:
        """Names used as if / if-not conditions in this block's own scope."""
        if self._booleans is None:
            self._booleans = extract_booleans(self.own_content, self._ctx, self._is_block_name)
        return self._booleans

    @property
    def variables(self) -> dict[str, str]:
        """Variables in this block's own scope, mapped as name -> type."""
        if self._variables is None:
            self._variables = extract_variables(
                self.own_content,
                self.kind,
                self._ctx,
                lambda label: self.get_child_by_name(label) is not None,
                self.booleans,
            )
        return self._variables

    def to_dict(self, recursive: bool = True) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "kind": self.kind,
            "parent": self.parent.id if self.parent is not None else None,
            "variables": dict(self.variables),
            "booleans": list(self.booleans),
        }
        if recursive:
            data["children"] = [c.to_dict() for c in self.children]
        else:
            data["children"] = [c.id for c in self.children]
        return data
