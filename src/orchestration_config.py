"""
Orchestration Config - Opt-in Guard and Settings
================================================

The gate is opt-in per workspace. A workspace participates only if it
carries an intent registry at `.orchestration/active_intents.yaml`.
No registry = no gate: every tool call passes through untouched.

The check is re-evaluated on every call (pre-hook and post-hook
separately), so creating or deleting the registry mid-session takes
effect on the very next tool call.

Settings (environment):
- INTENT_GATE_LOG_DIR: operational log directory
- INTENT_GATE_REVISION_TIMEOUT: seconds allowed for `git rev-parse`
- INTENT_GATE_DEBUG: "1" enables debug logging
- INTENT_GATE_API_HOST / INTENT_GATE_API_PORT: HTTP surface bind
- INTENT_GATE_DEV_MODE: "1" enables auto-reload for the HTTP surface
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from gate_logger import DEBUG_ENV, get_log_dir


# === PATHS ===

ORCHESTRATION_DIR_NAME = ".orchestration"
REGISTRY_FILE_NAME = "active_intents.yaml"
TRACE_FILE_NAME = "agent_trace.jsonl"
INTENT_MAP_FILE_NAME = "intent_map.md"

# Relative form used in caller-facing messages
REGISTRY_RELATIVE_PATH = f"{ORCHESTRATION_DIR_NAME}/{REGISTRY_FILE_NAME}"

PathLike = Union[str, "os.PathLike[str]"]


def get_orchestration_dir(workspace_root: PathLike) -> Path:
    return Path(workspace_root) / ORCHESTRATION_DIR_NAME


def get_registry_path(workspace_root: PathLike) -> Path:
    return get_orchestration_dir(workspace_root) / REGISTRY_FILE_NAME


def get_trace_path(workspace_root: PathLike) -> Path:
    return get_orchestration_dir(workspace_root) / TRACE_FILE_NAME


def get_intent_map_path(workspace_root: PathLike) -> Path:
    return get_orchestration_dir(workspace_root) / INTENT_MAP_FILE_NAME


# === OPT-IN GUARD ===

def is_enabled(workspace_root: PathLike) -> bool:
    """
    True if the workspace is configured for intent tracking.

    Never raises: a missing path, a permission error or a nonsense
    workspace root all read as "disabled".
    """
    try:
        return get_registry_path(workspace_root).is_file()
    except (OSError, TypeError, ValueError):
        return False


# === SETTINGS ===

REVISION_TIMEOUT_ENV = "INTENT_GATE_REVISION_TIMEOUT"
API_HOST_ENV = "INTENT_GATE_API_HOST"
API_PORT_ENV = "INTENT_GATE_API_PORT"
DEV_MODE_ENV = "INTENT_GATE_DEV_MODE"

DEFAULT_REVISION_TIMEOUT_SECONDS = 2.0
DEFAULT_API_HOST = "127.0.0.1"
DEFAULT_API_PORT = 8004


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass
class GateSettings:
    """Process-level settings. Workspace opt-in is never a setting."""
    log_dir: Path
    revision_timeout: float = DEFAULT_REVISION_TIMEOUT_SECONDS
    debug: bool = False
    api_host: str = DEFAULT_API_HOST
    api_port: int = DEFAULT_API_PORT
    dev_mode: bool = False

    @classmethod
    def from_env(cls) -> "GateSettings":
        return cls(
            log_dir=get_log_dir(),
            revision_timeout=_env_float(REVISION_TIMEOUT_ENV, DEFAULT_REVISION_TIMEOUT_SECONDS),
            debug=_env_flag(DEBUG_ENV),
            api_host=os.environ.get(API_HOST_ENV, DEFAULT_API_HOST),
            api_port=_env_int(API_PORT_ENV, DEFAULT_API_PORT),
            dev_mode=_env_flag(DEV_MODE_ENV),
        )

