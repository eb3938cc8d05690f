"""Tests for tplreflect.lookup.config: discovery, loading, validation."""

from __future__ import annotations

import json

import pytest

from tplreflect.exit_codes import EXIT_CONFIG, ConfigError
from tplreflect.lookup.config import (
    CONFIG_NAME,
    context_from_config,
    find_config,
    load_config,
    resolve_context,
)


def _write_config(directory, data):
    path = directory / CONFIG_NAME
    path.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")
    return path


class TestFindConfig:
    def test_in_start_dir(self, tmp_path):
        path = _write_config(tmp_path, {})
        assert find_config(tmp_path) == path.resolve()

    def test_walks_upward(self, tmp_path):
        path = _write_config(tmp_path, {})
        nested = tmp_path / "themes" / "simple" / "templates"
        nested.mkdir(parents=True)
        assert find_config(nested) == path.resolve()

    def test_start_may_be_a_file(self, tmp_path):
        path = _write_config(tmp_path, {})
        template = tmp_path / "Page.ss"
        template.write_text("$Title")
        assert find_config(template) == path.resolve()

    def test_nearest_wins(self, tmp_path):
        _write_config(tmp_path, {})
        inner = tmp_path / "inner"
        inner.mkdir()
        path = _write_config(inner, {"preset": "email"})
        assert find_config(inner) == path.resolve()


class TestLoadConfig:
    def test_valid(self, tmp_path):
        path = _write_config(tmp_path, {"preset": "site-tree", "global_accessors": ["Widget"]})
        assert load_config(path)["preset"] == "site-tree"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read"):
            load_config(tmp_path / "nope.json")

    def test_bad_json(self, tmp_path):
        path = _write_config(tmp_path, "{not json")
        with pytest.raises(ConfigError, match="Invalid JSON") as exc_info:
            load_config(path)
        assert exc_info.value.exit_code == EXIT_CONFIG

    @pytest.mark.parametrize(
        "data, message",
        [
            ([], "JSON object"),
            ({"preset": "cms"}, "Unknown preset"),
            ({"preset": 3}, "must be a string"),
            ({"global_accessors": "Top"}, "list of strings"),
            ({"known_types": [1, 2]}, "list of strings"),
            ({"field_methods": ["nice"]}, "field_methods"),
            ({"infer_datatype": {"Date": "Date"}}, "infer_datatype"),
            ({"infer_datatype": [["Date"]]}, "entry 0"),
        ],
    )
    def test_invalid(self, tmp_path, data, message):
        path = _write_config(tmp_path, data)
        with pytest.raises(ConfigError, match=message):
            load_config(path)


class TestContextFromConfig:
    def test_empty_config_is_base(self):
        ctx = context_from_config({})
        assert ctx.name == "base"
        assert ctx.is_global_accessor("Top")

    def test_custom_entries_survive_preset(self):
        ctx = context_from_config({"preset": "site-tree", "global_accessors": ["Widget"]})
        assert ctx.name == "site-tree"
        assert ctx.is_global_accessor("Widget")
        assert ctx.is_global_accessor("Menu")

    def test_preset_argument_overrides_config(self):
        ctx = context_from_config({"preset": "site-tree"}, preset="email")
        assert ctx.name == "email"
        assert not ctx.is_global_accessor("Menu")

    def test_rules_prepended(self):
        ctx = context_from_config({"infer_datatype": [["Date", "Datetime"]]})
        assert ctx.inference_rules[0] == ("Date", "Datetime")

    def test_scalar_labels(self):
        ctx = context_from_config({"default_datatype": "Varchar", "boolean_type": "Bool", "relation_type": "Rel"})
        assert (ctx.default_type, ctx.boolean_type, ctx.relation_type) == ("Varchar", "Bool", "Rel")

    def test_field_methods_and_known_types(self):
        ctx = context_from_config({"field_methods": {"Markdown": "HTMLText"}, "known_types": ["Product"]})
        assert ctx.field_type("markdown") == "HTMLText"
        assert ctx.is_known_type("Product")

    def test_collection_methods(self):
        ctx = context_from_config({"collection_methods": ["PaginationSummary"]})
        assert ctx.is_collection_method("paginationsummary")


class TestResolveContext:
    def test_no_config_uses_preset(self, tmp_path):
        assert resolve_context("email", start=tmp_path).name == "email"

    def test_no_config_no_preset_is_base(self, tmp_path):
        assert resolve_context(start=tmp_path).name == "base"

    def test_discovered_config(self, tmp_path):
        _write_config(tmp_path, {"preset": "site-tree"})
        assert resolve_context(start=tmp_path).name == "site-tree"

    def test_explicit_path(self, tmp_path):
        path = _write_config(tmp_path, {"global_accessors": ["Widget"]})
        ctx = resolve_context(config_path=path, start="/")
        assert ctx.is_global_accessor("Widget")

    def test_invalid_discovered_config_raises(self, tmp_path):
        _write_config(tmp_path, {"preset": "cms"})
        with pytest.raises(ConfigError):
            resolve_context(start=tmp_path)
