"""
Tests for lesson_recorder.py - AGENTS.md appends.
"""

import pytest

from lesson_recorder import AGENTS_HEADER, get_agents_path, record_lesson


class TestRecordLesson:

    def test_creates_file_with_header(self, tmp_path):
        message = record_lesson(tmp_path, "TEST_FAILURE", "Mock the clock in weather tests.")
        assert message == "Lesson recorded in AGENTS.md under category [TEST_FAILURE]."

        text = get_agents_path(tmp_path).read_text(encoding="utf-8")
        assert text.startswith(AGENTS_HEADER)
        assert "## [TEST_FAILURE] - " in text
        assert "**Lesson:** Mock the clock in weather tests." in text
        assert "**File:**" not in text

    def test_appends_in_order(self, tmp_path):
        record_lesson(tmp_path, "LINT_FAILURE", "first")
        record_lesson(tmp_path, "ARCHITECTURAL_DECISION", "second", file_context="src/api/client.py")
        text = get_agents_path(tmp_path).read_text(encoding="utf-8")
        assert text.count(AGENTS_HEADER) == 1
        assert text.index("first") < text.index("second")
        assert "**File:** `src/api/client.py`" in text

    def test_existing_content_preserved(self, tmp_path):
        get_agents_path(tmp_path).write_text("# Team notes\n", encoding="utf-8")
        record_lesson(tmp_path, "BUILD_FAILURE", "Pin the toolchain.")
        text = get_agents_path(tmp_path).read_text(encoding="utf-8")
        assert text.startswith("# Team notes\n")
        assert "Pin the toolchain." in text

    def test_invalid_category(self, tmp_path):
        with pytest.raises(ValueError, match="Invalid lesson category"):
            record_lesson(tmp_path, "OOPS", "text")
        assert not get_agents_path(tmp_path).exists()

    def test_empty_lesson(self, tmp_path):
        with pytest.raises(ValueError):
            record_lesson(tmp_path, "SCOPE_VIOLATION", "   ")

    def test_write_failure_reported(self, tmp_path):
        get_agents_path(tmp_path).mkdir()
        message = record_lesson(tmp_path, "TEST_FAILURE", "text")
        assert message.startswith("Failed to record lesson:")
