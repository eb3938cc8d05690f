"""Plain-text and JSON formatting for CLI output."""

from __future__ import annotations

import json as _json
from datetime import datetime, timezone

# Envelope schema versioning (semver: major.minor.patch)
ENVELOPE_SCHEMA_VERSION = "1.0.0"
ENVELOPE_SCHEMA_NAME = "tplreflect-envelope-v1"

KIND_ABBREV = {
    "loop": "loop",
    "with": "with",
    "root": "top",
}


def abbrev_kind(kind: str) -> str:
    return KIND_ABBREV.get(kind, kind)


def section(title: str, lines: list[str], budget: int = 0) -> str:
    out = [title]
    if budget and len(lines) > budget:
        out.extend(lines[:budget])
        out.append(f"  (+{len(lines) - budget} more)")
    else:
        out.extend(lines)
    return "\n".join(out)


def indent(text: str, level: int = 1) -> str:
    prefix = "  " * level
    return "\n".join(prefix + line for line in text.splitlines())


def var_lines(variables: dict[str, str], booleans: tuple[str, ...] | list[str] = ()) -> list[str]:
    """One ``name  type`` line per variable, plus unmatched boolean guards."""
    if not variables and not booleans:
        return ["  (none)"]
    width = max((len(n) for n in variables), default=0)
    lines = [f"  ${name.ljust(width)}  {datatype}" for name, datatype in variables.items()]
    extra = [b for b in booleans if b not in variables]
    if extra:
        lines.append(f"  if: {', '.join(extra)}")
    return lines


def format_table(headers: list[str], rows: list[list[str]], budget: int = 0) -> str:
    if not rows:
        return "(none)"
    widths = [len(h) for h in headers]
    num_cols = len(widths)
    for row in rows:
        for i, cell in enumerate(row):
            if i < num_cols:
                widths[i] = max(widths[i], len(str(cell)))
    lines = []
    header_line = "  ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
    lines.append(header_line)
    lines.append("  ".join("-" * w for w in widths))
    display_rows = rows
    if budget and len(rows) > budget:
        display_rows = rows[:budget]
    for row in display_rows:
        line = "  ".join(str(cell).ljust(widths[i]) for i, cell in enumerate(row))
        lines.append(line)
    if budget and len(rows) > budget:
        lines.append(f"(+{len(rows) - budget} more)")
    return "\n".join(lines)


def format_table_compact(headers: list[str], rows: list[list[str]], budget: int = 0) -> str:
    """Tab-separated table output."""
    if not rows:
        return "(none)"
    lines = ["\t".join(headers)]
    display_rows = rows[:budget] if budget and len(rows) > budget else rows
    for row in display_rows:
        lines.append("\t".join(str(cell) for cell in row))
    if budget and len(rows) > budget:
        lines.append(f"(+{len(rows) - budget} more)")
    return "\n".join(lines)


def table_to_dicts(headers: list[str], rows: list[list[str]]) -> list[dict]:
    """Convert table headers + rows into a list of dicts (for JSON output)."""
    return [dict(zip(headers, row)) for row in rows]


def to_json(data) -> str:
    """Serialize data to a JSON string with deterministic key ordering."""
    return _json.dumps(data, indent=2, default=str, sort_keys=True)


def _compact_mode_enabled() -> bool:
    """Return True when the CLI requested compact output mode."""
    import click

    ctx = click.get_current_context(silent=True)
    if ctx and isinstance(ctx.obj, dict):
        return bool(ctx.obj.get("compact"))
    return False


def json_envelope(command: str, summary: dict | None = None, **payload) -> dict:
    """Wrap command output in a self-describing envelope.

    Non-deterministic metadata (``timestamp``) is placed in a ``_meta``
    sub-dict so the content keys stay identical across runs.

    Returns a dict with at minimum::

        {
            "schema":  "tplreflect-envelope-v1",
            "command": "scan",
            "version": "<current>",
            "summary": { ... },
            "_meta":   {"timestamp": "2026-02-12T14:30:00Z"},
            ...payload
        }
    """
    if _compact_mode_enabled():
        return compact_json_envelope(command, summary=summary or {}, **payload)

    ts = datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")

    out: dict = {
        "schema": ENVELOPE_SCHEMA_NAME,
        "schema_version": ENVELOPE_SCHEMA_VERSION,
        "command": command,
        "version": _get_version(),
        "summary": summary or {},
    }
    out.update(payload)
    out["_meta"] = {"timestamp": ts}
    return out


def compact_json_envelope(command: str, **payload) -> dict:
    """Minimal JSON envelope: command name, summary and payload only."""
    out = {"command": command}
    out.update(payload)
    return out


def _get_version() -> str:
    from tplreflect import __version__

    return __version__
