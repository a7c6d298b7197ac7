"""
Revision resolver - best-effort VCS revision for provenance.

The revision id is metadata, never a gating condition. Any failure
(not a repository, git missing, timeout) resolves to the NO_REVISION
sentinel instead of raising.
"""

import subprocess
from dataclasses import dataclass
from typing import Optional

from gate_logger import log_debug
from orchestration_config import GateSettings, PathLike

NO_REVISION = "no-git"


@dataclass
class RevisionInfo:
    """Outcome of a revision query. `revision_id` is the sentinel when unavailable."""
    revision_id: str
    available: bool
    error: Optional[str] = None


def resolve_revision(workspace_root: PathLike, timeout: Optional[float] = None) -> RevisionInfo:
    """Ask git for HEAD with a short timeout."""
    if timeout is None:
        timeout = GateSettings.from_env().revision_timeout

    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            cwd=str(workspace_root),
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        log_debug(f"git rev-parse timed out after {timeout}s in {workspace_root}")
        return RevisionInfo(NO_REVISION, False, "timeout")
    except (OSError, ValueError, subprocess.SubprocessError) as e:
        # git not installed, cwd missing, etc.
        log_debug(f"git rev-parse unavailable in {workspace_root}: {e}")
        return RevisionInfo(NO_REVISION, False, str(e))

    revision = result.stdout.strip()
    if result.returncode != 0 or not revision:
        return RevisionInfo(NO_REVISION, False, result.stderr.strip() or f"exit {result.returncode}")

    return RevisionInfo(revision, True)


def current_revision(workspace_root: PathLike, timeout: Optional[float] = None) -> str:
    """Current revision id, or NO_REVISION."""
    return resolve_revision(workspace_root, timeout=timeout).revision_id
