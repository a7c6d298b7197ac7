"""
Lesson Recorder - Shared Agent Brain
====================================

Appends "lessons learned" to AGENTS.md at the workspace root when a
verification step fails (lint, tests, build), when an architectural
decision should outlive the session, or after a scope violation.

AGENTS.md is read by future agents; entries are append-only.
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from gate_logger import log_error, log_info
from orchestration_config import PathLike
from time_utils import utc_now_iso

AGENTS_FILE_NAME = "AGENTS.md"

AGENTS_HEADER = (
    "# Shared Agent Brain - Lessons Learned\n"
    "\n"
    "This file is maintained by the AI agent. Lessons are automatically appended "
    "when verification steps fail or architectural decisions are made.\n"
)


class LessonCategory(str, Enum):
    LINT_FAILURE = "LINT_FAILURE"
    TEST_FAILURE = "TEST_FAILURE"
    BUILD_FAILURE = "BUILD_FAILURE"
    ARCHITECTURAL_DECISION = "ARCHITECTURAL_DECISION"
    SCOPE_VIOLATION = "SCOPE_VIOLATION"


def get_agents_path(workspace_root: PathLike) -> Path:
    return Path(workspace_root) / AGENTS_FILE_NAME


def format_lesson(category: LessonCategory, lesson: str, file_context: Optional[str], timestamp: str) -> str:
    lines = [f"\n## [{category.value}] - {timestamp}"]
    if file_context:
        lines.append(f"**File:** `{file_context}`")
    lines.append(f"**Lesson:** {lesson.strip()}")
    lines.append("")
    return "\n".join(lines)


def record_lesson(
    workspace_root: PathLike,
    category: str,
    lesson: str,
    file_context: Optional[str] = None,
) -> str:
    """
    Append a lesson to AGENTS.md.

    Args:
        workspace_root: Workspace directory holding AGENTS.md
        category: One of LessonCategory
        lesson: 1-3 specific, actionable sentences
        file_context: Optional file or component the lesson relates to

    Returns:
        Confirmation message, or a failure message on I/O errors.

    Raises:
        ValueError: unknown category or empty lesson
    """
    try:
        lesson_category = LessonCategory(category)
    except ValueError:
        valid = ", ".join(c.value for c in LessonCategory)
        raise ValueError(f"Invalid lesson category: {category}. Use one of: {valid}")

    if not isinstance(lesson, str) or not lesson.strip():
        raise ValueError("lesson must be a non-empty string")

    agents_path = get_agents_path(workspace_root)
    entry = format_lesson(lesson_category, lesson, file_context, utc_now_iso())

    try:
        try:
            existing = agents_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            existing = AGENTS_HEADER
        agents_path.write_text(existing + entry, encoding="utf-8")
    except OSError as e:
        log_error(f"Failed to record lesson in {agents_path}: {e}")
        return f"Failed to record lesson: {e}"

    log_info(f"Lesson recorded category={lesson_category.value}")
    return f"Lesson recorded in {AGENTS_FILE_NAME} under category [{lesson_category.value}]."
