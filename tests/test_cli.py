"""CLI tests: scan, blocks, tree, context in text and JSON modes."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))
from conftest import NESTED_TEMPLATE, assert_json_envelope, invoke_cli, parse_json_output


@pytest.fixture
def nested_template(template_factory):
    return template_factory({"Page.ss": NESTED_TEMPLATE})


# ===========================================================================
# Group
# ===========================================================================


class TestGroup:
    def test_help_lists_commands(self, cli_runner):
        result = invoke_cli(cli_runner, ["--help"])
        assert result.exit_code == 0
        for name in ("scan", "blocks", "tree", "context"):
            assert name in result.output

    def test_unknown_command(self, cli_runner):
        result = invoke_cli(cli_runner, ["nope"])
        assert result.exit_code == 2


# ===========================================================================
# scan
# ===========================================================================


class TestScan:
    def test_text(self, cli_runner, page_template):
        result = invoke_cli(cli_runner, ["scan", page_template], cwd=page_template.parent)
        assert result.exit_code == 0, result.output
        out = result.output
        assert "(base) ===" in out
        assert "Top level:" in out
        assert "$ShowIntro" in out and "Boolean" in out
        assert "loop Items  @" in out
        assert "with FeaturedProduct  @" in out
        assert "has_one" in out

    def test_nested_children_indented(self, cli_runner, nested_template):
        result = invoke_cli(cli_runner, ["scan", nested_template], cwd=nested_template.parent)
        assert "    loop Children  @23" in result.output

    def test_json(self, cli_runner, page_template):
        result = invoke_cli(cli_runner, ["scan", page_template], cwd=page_template.parent, json_mode=True)
        data = parse_json_output(result, "scan")
        assert_json_envelope(data, "scan")
        assert data["summary"] == {
            "blocks": 2,
            "loops": 1,
            "withs": 1,
            "excluded": 0,
            "top_level_variables": 3,
        }
        assert data["variables"] == {"Headline": "Text", "ShowIntro": "Boolean", "Intro": "Text"}
        assert data["booleans"] == ["ShowIntro"]
        items = data["blocks"][0]
        assert items["name"] == "Items"
        assert items["variables"] == {"PublishDate": "Date", "Title": "Text"}

    def test_compact_json(self, cli_runner, page_template):
        result = invoke_cli(cli_runner, ["--compact", "--json", "scan", page_template], cwd=page_template.parent)
        data = parse_json_output(result, "scan")
        assert data["command"] == "scan"
        assert "_meta" not in data

    def test_preset(self, cli_runner, template_factory):
        path = template_factory({"Page.ss": "$Title $Teaser"})
        result = invoke_cli(cli_runner, ["scan", path, "--preset", "site-tree"], cwd=path.parent, json_mode=True)
        data = parse_json_output(result, "scan")
        assert data["context"] == "site-tree"
        assert data["variables"] == {"Teaser": "Text"}

    def test_discovers_config_next_to_template(self, cli_runner, template_factory):
        path = template_factory({"Page.ss": "$Widget $Title", ".tplreflect.json": {"global_accessors": ["Widget"]}})
        result = invoke_cli(cli_runner, ["scan", path], json_mode=True)
        data = parse_json_output(result, "scan")
        assert data["variables"] == {"Title": "Text"}

    def test_explicit_config(self, cli_runner, template_factory, tmp_path):
        path = template_factory({"Page.ss": "$PublishDate"})
        config = tmp_path / "lookup.json"
        config.write_text('{"default_datatype": "Varchar", "infer_datatype": [["Date", "Datetime"]]}')
        result = invoke_cli(cli_runner, ["scan", path, "--config", config], json_mode=True)
        data = parse_json_output(result, "scan")
        assert data["variables"] == {"PublishDate": "Datetime"}

    def test_bad_preset_is_usage_error(self, cli_runner, page_template):
        result = invoke_cli(cli_runner, ["scan", page_template, "--preset", "cms"])
        assert result.exit_code == 2


# ===========================================================================
# blocks
# ===========================================================================


class TestBlocks:
    def test_table(self, cli_runner, nested_template):
        result = invoke_cli(cli_runner, ["blocks", nested_template], cwd=nested_template.parent)
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0].split() == ["id", "kind", "name", "parent", "depth", "vars"]
        assert lines[2].split() == ["0", "loop", "Pages", "1", "2"]
        assert lines[3].split() == ["23", "loop", "Children", "0", "2", "1"]

    def test_json(self, cli_runner, nested_template):
        result = invoke_cli(cli_runner, ["blocks", nested_template], cwd=nested_template.parent, json_mode=True)
        data = parse_json_output(result, "blocks")
        assert_json_envelope(data, "blocks")
        assert data["summary"] == {"total": 3, "excluded": 0}
        assert [b["name"] for b in data["blocks"]] == ["Pages", "Children", "Author"]
        assert data["blocks"][2] == {"id": 67, "kind": "with", "name": "Author", "parent": 0, "depth": 2, "vars": 1}

    def test_filters(self, cli_runner, nested_template):
        loops = parse_json_output(invoke_cli(cli_runner, ["blocks", nested_template, "--loops"], json_mode=True))
        withs = parse_json_output(invoke_cli(cli_runner, ["blocks", nested_template, "--withs"], json_mode=True))
        assert [b["name"] for b in loops["blocks"]] == ["Pages", "Children"]
        assert [b["name"] for b in withs["blocks"]] == ["Author"]

    def test_compact(self, cli_runner, nested_template):
        result = invoke_cli(cli_runner, ["--compact", "blocks", nested_template])
        assert result.output.splitlines()[0] == "id\tkind\tname\tparent\tdepth\tvars"

    def test_no_blocks(self, cli_runner, template_factory):
        path = template_factory({"Page.ss": "$Title"})
        result = invoke_cli(cli_runner, ["blocks", path])
        assert result.output.strip() == "(none)"


# ===========================================================================
# tree
# ===========================================================================


class TestTree:
    def test_outline(self, cli_runner, nested_template):
        result = invoke_cli(cli_runner, ["tree", nested_template])
        assert result.output.splitlines() == [
            "loop Pages  @0",
            "  loop Children  @23",
            "  with Author  @67",
        ]

    def test_no_blocks(self, cli_runner, template_factory):
        path = template_factory({"Page.ss": "$Title"})
        assert invoke_cli(cli_runner, ["tree", path]).output.strip() == "(no blocks)"

    def test_json(self, cli_runner, nested_template):
        data = parse_json_output(invoke_cli(cli_runner, ["tree", nested_template], json_mode=True), "tree")
        assert_json_envelope(data, "tree")
        assert data["summary"] == {"blocks": 3, "proper_tree": True}
        assert "mermaid" not in data
        assert [c["name"] for c in data["blocks"][0]["children"]] == ["Children", "Author"]


# ===========================================================================
# context
# ===========================================================================


class TestContext:
    def test_text(self, cli_runner, tmp_path):
        result = invoke_cli(cli_runner, ["context"], cwd=tmp_path)
        assert result.exit_code == 0, result.output
        assert "=== Lookup context: base ===" in result.output
        assert "currentmember" in result.output
        assert "Default type: Text" in result.output

    def test_preset_json(self, cli_runner, tmp_path):
        result = invoke_cli(cli_runner, ["context", "--preset", "email"], cwd=tmp_path, json_mode=True)
        data = parse_json_output(result, "context")
        assert_json_envelope(data, "context")
        assert data["summary"]["name"] == "email"
        assert "subject" in data["global_accessors"]
        assert data["relation_type"] == "has_one"

    def test_config_in_cwd(self, cli_runner, template_factory):
        path = template_factory({".tplreflect.json": {"preset": "site-tree", "known_types": ["Product"]}})
        result = invoke_cli(cli_runner, ["context"], cwd=path.parent, json_mode=True)
        data = parse_json_output(result, "context")
        assert data["name"] == "site-tree"
        assert "Product" in data["known_types"]


# ===========================================================================
# Shared loading helper
# ===========================================================================


class TestReflectFile:
    def test_fresh_analysis_per_call(self, template_factory):
        from tplreflect.commands.resolve import reflect_file

        path = template_factory({"Page.ss": "$Subject $Greeting"})
        first = reflect_file(str(path), "email")
        second = reflect_file(str(path), "email")
        assert first is not second
        assert first.ctx.name == "email"
        assert first.top_level_vars == {"Greeting": "Text"}
