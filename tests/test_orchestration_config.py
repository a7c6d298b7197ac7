"""
Tests for orchestration_config.py and gate_logger.py.
"""

import gate_logger
from orchestration_config import (
    DEFAULT_API_PORT,
    DEFAULT_REVISION_TIMEOUT_SECONDS,
    GateSettings,
    get_intent_map_path,
    get_registry_path,
    get_trace_path,
    is_enabled,
)


class TestPaths:

    def test_fixed_locations(self, tmp_path):
        assert get_registry_path(tmp_path) == tmp_path / ".orchestration" / "active_intents.yaml"
        assert get_trace_path(tmp_path) == tmp_path / ".orchestration" / "agent_trace.jsonl"
        assert get_intent_map_path(tmp_path) == tmp_path / ".orchestration" / "intent_map.md"

    def test_enabled_only_with_registry_file(self, workspace, bare_workspace):
        assert is_enabled(workspace) is True
        assert is_enabled(bare_workspace) is False

    def test_registry_directory_is_not_enabled(self, tmp_path):
        get_registry_path(tmp_path).mkdir(parents=True)
        assert is_enabled(tmp_path) is False

    def test_nonsense_root_is_not_enabled(self, tmp_path):
        assert is_enabled(tmp_path / "missing") is False
        assert is_enabled("bad\x00path") is False


class TestGateSettings:

    def test_defaults(self, monkeypatch):
        for name in ("INTENT_GATE_REVISION_TIMEOUT", "INTENT_GATE_API_HOST", "INTENT_GATE_API_PORT",
                     "INTENT_GATE_DEV_MODE", "INTENT_GATE_DEBUG"):
            monkeypatch.delenv(name, raising=False)
        settings = GateSettings.from_env()
        assert settings.revision_timeout == DEFAULT_REVISION_TIMEOUT_SECONDS
        assert settings.api_host == "127.0.0.1"
        assert settings.api_port == DEFAULT_API_PORT
        assert settings.dev_mode is False
        assert settings.debug is False

    def test_overrides(self, monkeypatch, isolated_log_dir):
        monkeypatch.setenv("INTENT_GATE_REVISION_TIMEOUT", "0.25")
        monkeypatch.setenv("INTENT_GATE_API_PORT", "9100")
        monkeypatch.setenv("INTENT_GATE_DEV_MODE", "true")
        settings = GateSettings.from_env()
        assert settings.revision_timeout == 0.25
        assert settings.api_port == 9100
        assert settings.dev_mode is True
        assert settings.log_dir == isolated_log_dir

    def test_bad_values_fall_back(self, monkeypatch):
        monkeypatch.setenv("INTENT_GATE_REVISION_TIMEOUT", "-3")
        monkeypatch.setenv("INTENT_GATE_API_PORT", "eighty")
        settings = GateSettings.from_env()
        assert settings.revision_timeout == DEFAULT_REVISION_TIMEOUT_SECONDS
        assert settings.api_port == DEFAULT_API_PORT


class TestGateLogger:

    def test_writes_to_configured_dir(self, isolated_log_dir):
        gate_logger.log_warn("something odd")
        text = (isolated_log_dir / gate_logger.LOG_FILE_NAME).read_text(encoding="utf-8")
        assert "WARNING - something odd" in text

    def test_debug_suppressed_by_default(self, isolated_log_dir, monkeypatch):
        monkeypatch.delenv("INTENT_GATE_DEBUG", raising=False)
        gate_logger.reset_logger()
        gate_logger.log_debug("hidden")
        gate_logger.log_info("shown")
        text = (isolated_log_dir / gate_logger.LOG_FILE_NAME).read_text(encoding="utf-8")
        assert "hidden" not in text
        assert "shown" in text

    def test_debug_enabled(self, isolated_log_dir, monkeypatch):
        monkeypatch.setenv("INTENT_GATE_DEBUG", "1")
        gate_logger.reset_logger()
        gate_logger.log_debug("visible now")
        text = (isolated_log_dir / gate_logger.LOG_FILE_NAME).read_text(encoding="utf-8")
        assert "visible now" in text

    def test_unusable_log_dir_falls_back(self, tmp_path, monkeypatch):
        blocker = tmp_path / "file-not-dir"
        blocker.write_text("x", encoding="utf-8")
        monkeypatch.setenv("INTENT_GATE_LOG_DIR", str(blocker / "logs"))
        gate_logger.reset_logger()
        gate_logger.log_error("goes nowhere")
        assert not (blocker / "logs").exists()
