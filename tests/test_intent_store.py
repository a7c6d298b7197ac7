"""
Tests for intent_store.py - registry parsing and context rendering.
"""

import os
import sys

import pytest

from conftest import write_registry
from intent_store import (
    Intent,
    RegistryStatus,
    list_intent_ids,
    load_registry,
    render_intent_context,
    resolve_intent,
)


class TestLoadRegistry:

    def test_loads_sample(self, workspace):
        snapshot = load_registry(workspace)
        assert snapshot.status == RegistryStatus.LOADED
        assert snapshot.intent_ids == ["INT-001", "INT-002", "INT-003"]

    def test_missing_file(self, bare_workspace):
        snapshot = load_registry(bare_workspace)
        assert snapshot.status == RegistryStatus.MISSING
        assert snapshot.intents == []

    def test_invalid_yaml_is_malformed_not_fatal(self, tmp_path):
        write_registry(tmp_path, raw="active_intents: [unclosed\n  - : :")
        snapshot = load_registry(tmp_path)
        assert snapshot.status == RegistryStatus.MALFORMED
        assert snapshot.intents == []
        assert "invalid YAML" in snapshot.error

    @pytest.mark.parametrize("raw", [
        "- id: INT-001\n",           # list at top level
        "intents:\n  - id: X\n",     # wrong key
        "active_intents: INT-001\n",  # not a list
        "",                          # empty document
    ])
    def test_wrong_shape_is_malformed(self, tmp_path, raw):
        write_registry(tmp_path, raw=raw)
        snapshot = load_registry(tmp_path)
        assert snapshot.status == RegistryStatus.MALFORMED
        assert snapshot.intent_ids == []

    def test_records_without_id_skipped(self, tmp_path):
        write_registry(tmp_path, intents=[
            {"name": "no id"},
            "just a string",
            {"id": "INT-009", "name": "ok"},
        ])
        assert list_intent_ids(tmp_path) == ["INT-009"]

    def test_numeric_ids_become_strings(self, tmp_path):
        write_registry(tmp_path, raw="active_intents:\n  - id: 42\n    name: numeric\n")
        assert resolve_intent(tmp_path, "42").name == "numeric"

    @pytest.mark.skipif(sys.platform == "win32" or os.geteuid() == 0,
                        reason="permission bits not enforced")
    def test_unreadable_file(self, workspace):
        registry = workspace / ".orchestration" / "active_intents.yaml"
        registry.chmod(0o000)
        try:
            snapshot = load_registry(workspace)
            assert snapshot.status == RegistryStatus.UNREADABLE
        finally:
            registry.chmod(0o644)

    def test_edits_visible_on_next_read(self, workspace):
        assert resolve_intent(workspace, "INT-777") is None
        write_registry(workspace, intents=[{"id": "INT-777", "name": "late addition"}])
        assert resolve_intent(workspace, "INT-777").name == "late addition"


class TestAvailableIdsText:

    def test_ids_joined(self, workspace):
        assert load_registry(workspace).available_ids_text("?") == "INT-001, INT-002, INT-003"

    def test_empty_registry_says_none(self, tmp_path):
        write_registry(tmp_path, intents=[])
        assert load_registry(tmp_path).available_ids_text("?") == "none"

    def test_unreadable_uses_fallback(self, tmp_path):
        write_registry(tmp_path, raw="{{{{")
        assert load_registry(tmp_path).available_ids_text("could not read") == "could not read"


class TestResolveIntent:

    def test_resolves_fields(self, workspace):
        intent = resolve_intent(workspace, "INT-001")
        assert intent.name == "Weather API"
        assert intent.owned_scope == ["src/api/**", "tests/api/**"]
        assert intent.constraints == ["No new dependencies"]

    def test_absent_lists_default_empty(self, workspace):
        intent = resolve_intent(workspace, "INT-003")
        assert intent.owned_scope == []
        assert intent.constraints == []
        assert intent.acceptance_criteria == []

    def test_unknown_and_empty_ids(self, workspace):
        assert resolve_intent(workspace, "INT-404") is None
        assert resolve_intent(workspace, "") is None

    def test_display_name_falls_back_to_id(self):
        assert Intent(id="INT-5").display_name == "INT-5"


class TestRenderIntentContext:

    def test_full_intent(self, workspace):
        rendered = render_intent_context(resolve_intent(workspace, "INT-001"))
        assert rendered.startswith("<intent_context>")
        assert rendered.endswith("</intent_context>")
        assert "<id>INT-001</id>" in rendered
        assert "    src/api/**\n    tests/api/**" in rendered
        assert "No new dependencies" in rendered
        assert "Unit tests green" in rendered

    def test_placeholders_for_empty_lists(self, workspace):
        rendered = render_intent_context(resolve_intent(workspace, "INT-003"))
        assert "<owned_scope>\n    Any\n  </owned_scope>" in rendered
        assert "<constraints>\n    None\n  </constraints>" in rendered
        assert "<acceptance_criteria>\n    None\n  </acceptance_criteria>" in rendered
