"""
Pytest fixtures for intent gate tests.
"""

import sys
from pathlib import Path

import pytest
import yaml

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import gate_logger
from orchestration_config import get_orchestration_dir, get_registry_path


SAMPLE_INTENTS = [
    {
        "id": "INT-001",
        "name": "Weather API",
        "status": "IN_PROGRESS",
        "owned_scope": ["src/api/**", "tests/api/**"],
        "constraints": ["No new dependencies"],
        "acceptance_criteria": ["Unit tests green"],
    },
    {
        "id": "INT-002",
        "name": "Docs refresh",
        "status": "PENDING",
        "owned_scope": ["*.md"],
        "constraints": [],
        "acceptance_criteria": [],
    },
    {
        "id": "INT-003",
        "name": "Unscoped chores",
        "status": "IN_PROGRESS",
    },
]


def write_registry(workspace: Path, intents=None, raw: str = None) -> Path:
    """Write an active_intents.yaml into the workspace."""
    get_orchestration_dir(workspace).mkdir(parents=True, exist_ok=True)
    registry = get_registry_path(workspace)
    if raw is not None:
        registry.write_text(raw, encoding="utf-8")
    else:
        registry.write_text(
            yaml.safe_dump({"active_intents": SAMPLE_INTENTS if intents is None else intents}),
            encoding="utf-8",
        )
    return registry


@pytest.fixture(autouse=True)
def isolated_log_dir(tmp_path_factory, monkeypatch):
    """Keep the operational log out of the home directory."""
    log_dir = tmp_path_factory.mktemp("gate-logs")
    monkeypatch.setenv("INTENT_GATE_LOG_DIR", str(log_dir))
    gate_logger.reset_logger()
    yield log_dir
    gate_logger.reset_logger()


@pytest.fixture(autouse=True)
def no_parent_git(tmp_path, monkeypatch):
    """Stop git from discovering a repository above the test workspace."""
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path.parent))


@pytest.fixture
def workspace(tmp_path):
    """A workspace with the sample registry (gate enabled)."""
    root = tmp_path / "workspace"
    root.mkdir()
    write_registry(root)
    return root


@pytest.fixture
def bare_workspace(tmp_path):
    """A workspace without a registry (gate disabled)."""
    root = tmp_path / "bare"
    root.mkdir()
    return root
