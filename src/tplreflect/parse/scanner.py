"""Delimiter scanner: finds block open/close tags in normalized template text."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from tplreflect.exit_codes import MalformedTemplateError

log = logging.getLogger(__name__)

OPEN = "open"
CLOSE = "close"

LOOP = "loop"
WITH = "with"

# <% loop $Items.limit(5) %> / <% with $Product %>; the expression is optional
# and never contains "%>" or "<%", so an open can't swallow another tag
_OPEN_RE = re.compile(r"<% (loop|with)(?: ((?:(?!%>|<%).)*?))? %>")
_CLOSE_RE = re.compile(r"<% end_(loop|with) %>")

# Leading identifier of a block expression, after an optional $ sigil
_NAME_RE = re.compile(r"\$?([A-Za-z0-9_]+)")

# "<% end_loop %>" and "<% end_with %>" have the same length
CLOSE_LENGTH = len("<% end_loop %>")

_STRIP_CHARS = str.maketrans("", "", "\r\n\t")


def normalize(code: str) -> str:
    """Flatten template code so tabs and newlines don't get in the way.

    Every later offset is relative to this normalized text.
    """
    return code.translate(_STRIP_CHARS)


@dataclass(frozen=True)
class Delimiter:
    """One open or close tag found in the normalized text."""

    kind: str  # OPEN | CLOSE
    keyword: str  # LOOP | WITH
    offset: int
    raw: str
    expr: str = ""

    @property
    def end(self) -> int:
        return self.offset + len(self.raw)

    @property
    def name(self) -> str:
        """Block name: the leading identifier of the expression."""
        m = _NAME_RE.match(self.expr.strip())
        return m.group(1) if m else ""


def find_opens(text: str) -> list[Delimiter]:
    return [
        Delimiter(OPEN, m.group(1), m.start(), m.group(0), m.group(2) or "")
        for m in _OPEN_RE.finditer(text)
    ]


def find_closes(text: str) -> list[Delimiter]:
    return [Delimiter(CLOSE, m.group(1), m.start(), m.group(0)) for m in _CLOSE_RE.finditer(text)]


def scan_delimiters(text: str) -> tuple[list[Delimiter], list[Delimiter]]:
    """Find all open and close delimiters in *text*, each ordered by offset.

    Raises MalformedTemplateError when the counts differ.
    """
    opens = find_opens(text)
    closes = find_closes(text)
    log.debug("Scanned %d open and %d close delimiters", len(opens), len(closes))
    if len(opens) != len(closes):
        raise MalformedTemplateError(
            f"Template is malformed. Open loops and closed loops are mismatched "
            f"({len(opens)} opened, {len(closes)} closed).",
            opens=len(opens),
            closes=len(closes),
        )
    return opens, closes
