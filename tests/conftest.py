"""Shared test fixtures and helpers for tplreflect tests.

Provides:
- Sample templates: PAGE_TEMPLATE (the canonical example), NESTED_TEMPLATE
- CliRunner fixtures: cli_runner, invoke_cli()
- Factory fixture: template_factory for writing templates (and configs) to disk
- JSON validation helpers: parse_json_output(), assert_json_envelope()
"""

from __future__ import annotations

import json
import os

import pytest
from click.testing import CliRunner

# ===========================================================================
# Sample templates
# ===========================================================================

PAGE_TEMPLATE = (
    "<div>\n"
    "\t<h2>$Headline</h2>\n"
    "\t<% if $ShowIntro %><p>$Intro</p><% end_if %>\n"
    "\t<% loop $Items %>\n"
    "\t\t<h3>$Title</h3>\n"
    "\t\t<p>$PublishDate.Nice</p>\n"
    "\t\t<% if $First %>first<% end_if %>\n"
    "\t\t$Pos\n"
    "\t<% end_loop %>\n"
    "\t<% with $FeaturedProduct %>\n"
    "\t\t<h4>$Name</h4>\n"
    "\t\t$Description\n"
    "\t\t$Price\n"
    "\t\t$Photo.SetWidth(200)\n"
    "\t\t$Category.Title\n"
    "\t<% end_with %>\n"
    "</div>\n"
)

# Offsets in the normalized text: Pages @0, Children @23
NESTED_TEMPLATE = (
    "<% loop $Pages %>$Title"
    "<% loop $Children %>$MenuTitle<% end_loop %>"
    "<% with $Author %>$FirstName<% end_with %>"
    "$Summary"
    "<% end_loop %>"
)


# ===========================================================================
# CliRunner helpers
# ===========================================================================


@pytest.fixture
def cli_runner():
    """Provide a Click CliRunner for in-process CLI testing."""
    return CliRunner()


def invoke_cli(runner, args, cwd=None, json_mode=False):
    """Invoke the tplreflect CLI via CliRunner.

    Args:
        runner: CliRunner instance
        args: list of CLI arguments (e.g. ["scan", "Page.ss"])
        cwd: directory to run in
        json_mode: if True, prepend --json flag
    Returns:
        click.testing.Result
    """
    from tplreflect.cli import cli

    full_args = []
    if json_mode:
        full_args.append("--json")
    full_args.extend(str(a) for a in args)

    old_cwd = os.getcwd()
    try:
        if cwd:
            os.chdir(str(cwd))
        result = runner.invoke(cli, full_args, catch_exceptions=False)
    finally:
        os.chdir(old_cwd)

    return result


# ===========================================================================
# JSON validation helpers
# ===========================================================================


def parse_json_output(result, command=None):
    """Parse JSON from a CliRunner result.

    Raises AssertionError with context on a non-zero exit or parse failure.
    """
    assert result.exit_code == 0, f"Command {command or '?'} failed (exit {result.exit_code}):\n{result.output}"
    try:
        return json.loads(result.output)
    except json.JSONDecodeError as e:
        pytest.fail(f"Invalid JSON from {command or '?'}: {e}\nOutput was:\n{result.output[:500]}")


def assert_json_envelope(data, command=None):
    """Validate that a parsed JSON dict follows the envelope contract."""
    assert isinstance(data, dict), f"Expected dict, got {type(data)}"
    assert "command" in data, "Missing 'command' key in envelope"
    assert "version" in data, "Missing 'version' key in envelope"
    assert "summary" in data, "Missing 'summary' key in envelope"
    assert "timestamp" in data.get("_meta", {}), "Missing 'timestamp' in _meta"
    if command:
        assert data["command"] == command, f"Expected command={command}, got {data['command']}"
    assert isinstance(data["summary"], dict), f"summary should be dict, got {type(data['summary'])}"


# ===========================================================================
# Template fixtures
# ===========================================================================


@pytest.fixture
def template_factory(tmp_path_factory):
    """Factory fixture for writing templates to a fresh directory.

    Usage:
        def test_something(template_factory):
            path = template_factory({"Page.ss": "<% loop $Items %>...<% end_loop %>"})

    Accepts ``{relative_path: content}`` (a dict value is written as JSON)
    and returns the path of the first file.
    """

    def _create(files):
        root = tmp_path_factory.mktemp("templates")
        first = None
        for rel_path, content in files.items():
            fp = root / rel_path
            fp.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, dict):
                content = json.dumps(content)
            fp.write_text(content, encoding="utf-8")
            if first is None:
                first = fp
        return first

    return _create


@pytest.fixture
def page_template(template_factory):
    return template_factory({"Page.ss": PAGE_TEMPLATE})
