"""Standardized CLI exit codes and error types for tplreflect.

Exit code scheme:

    0  SUCCESS         -- analysis completed
    1  GENERAL_ERROR   -- unexpected failure, crash, unhandled exception
    2  USAGE_ERROR     -- invalid arguments, bad flags, unknown command (Click default)
    3  MALFORMED       -- open/close block delimiters do not pair up
    4  UNRESOLVED      -- a block is nested inside a block that is not addressable
    5  CONFIG_ERROR    -- the lookup configuration file is invalid

The analysis errors are raised by the library itself, not only by the CLI,
so embedding callers can catch them directly.
"""

from __future__ import annotations

import click

# ---------------------------------------------------------------------------
# Exit code constants
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_ERROR: int = 1
EXIT_USAGE: int = 2
EXIT_MALFORMED: int = 3
EXIT_UNRESOLVED: int = 4
EXIT_CONFIG: int = 5

# ---------------------------------------------------------------------------
# Human-readable descriptions
# ---------------------------------------------------------------------------

DESCRIPTIONS: dict[int, str] = {
    EXIT_SUCCESS: "success",
    EXIT_ERROR: "unexpected error",
    EXIT_USAGE: "invalid usage (bad arguments or flags)",
    EXIT_MALFORMED: "template is malformed -- block delimiters are mismatched",
    EXIT_UNRESOLVED: "block parent could not be resolved",
    EXIT_CONFIG: "invalid lookup configuration",
}

# ---------------------------------------------------------------------------
# Custom exceptions (caught by the click error handler)
# ---------------------------------------------------------------------------


class ReflectError(click.ClickException):
    """Base class for tplreflect errors with exit codes."""

    def __init__(self, message: str, exit_code: int = EXIT_ERROR):
        super().__init__(message)
        self.exit_code = exit_code

    def format_message(self) -> str:
        return self.message


class MalformedTemplateError(ReflectError):
    """Raised when open and close block delimiters do not pair up."""

    def __init__(
        self,
        message: str = "Template is malformed. Open loops and closed loops are mismatched.",
        *,
        opens: int | None = None,
        closes: int | None = None,
    ):
        super().__init__(message, EXIT_MALFORMED)
        self.opens = opens
        self.closes = closes


class UnresolvedParentError(ReflectError):
    """Raised when a block's parent is not an addressable block.

    Happens when the enclosing block is named after a global accessor,
    e.g. ``<% with $Top %><% loop $Items %>...``.
    """

    def __init__(self, block_id: int, parent_id: int, parent_name: str | None = None):
        label = f" ({parent_name})" if parent_name else ""
        super().__init__(
            f"Block at offset {block_id} is nested in block at offset {parent_id}{label}, "
            "which is not addressable.",
            EXIT_UNRESOLVED,
        )
        self.block_id = block_id
        self.parent_id = parent_id
        self.parent_name = parent_name


class ConfigError(ReflectError):
    """Raised when a lookup configuration file is structurally invalid."""

    def __init__(self, message: str):
        super().__init__(message, EXIT_CONFIG)
