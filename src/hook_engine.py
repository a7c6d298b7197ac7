"""
Hook Engine - Intent Gate for Tool Execution
============================================

The checkpoint between the agent and its tool handlers.

    pre-hook  -> decide allow/deny before the tool runs
    post-hook -> record provenance after an allowed mutation ran

Design principles:
- OPT-IN: no `.orchestration/active_intents.yaml` = pass everything through
- FAIL-CLOSED ON AUTHORIZATION: a mutating call with no active intent,
  or outside the intent's scope, is denied
- FAIL-OPEN ON BOOKKEEPING: registry parse errors, missing git, failed
  trace writes never block a call
- STATELESS: the active intent comes in on the context every call; the
  engine holds nothing between calls and re-reads disk each time

Decision order for a mutating tool:
1. Active intent bound?            -> else deny (no_active_intent)
2. Target path extractable?        -> else allow (path-less tool)
3. Path inside the intent's scope? -> else deny (scope_violation)
4. Whole-file overwrite with a known hash that no longer matches
   the file on disk?                -> deny (stale_file)
"""

from pathlib import Path
from typing import List, Optional

from agent_trace import TraceEntry, record_mutation
from content_fingerprint import hash_of_file, normalize_digest
from gate_logger import log_debug, log_error, log_info
from intent_store import load_registry, render_intent_context
from invocation import DecisionResult, DenyReason, InvocationContext
from orchestration_config import REGISTRY_RELATIVE_PATH, PathLike, is_enabled
from scope_matcher import is_in_scope
from tool_catalog import (
    INTENT_ID_PARAM,
    KNOWN_HASH_PARAM,
    SELECT_INTENT_TOOL,
    WHOLE_FILE_OVERWRITE_TOOLS,
    is_intent_selection,
    is_mutating_tool,
    target_path_for,
)

HOOK_ENGINE_VERSION = "0.2.0"

# Shown instead of an id list when the registry can't be read
IDS_UNREADABLE_ON_SELECT = "unknown (could not read file)"
IDS_UNREADABLE_ON_MUTATION = f"could not read - try read_file('{REGISTRY_RELATIVE_PATH}')"


# ============================================================
# DENIAL MESSAGES
# ============================================================

def _missing_intent_id() -> DecisionResult:
    return DecisionResult.denied(
        DenyReason.MISSING_INTENT_ID,
        f"Missing {INTENT_ID_PARAM} in {SELECT_INTENT_TOOL} parameters.",
    )


def _unknown_intent(intent_id: str, available_ids: str) -> DecisionResult:
    return DecisionResult.denied(
        DenyReason.UNKNOWN_INTENT,
        f"Intent '{intent_id}' not found in {REGISTRY_RELATIVE_PATH}. "
        f"Available intent IDs: [{available_ids}]. "
        f"Call {SELECT_INTENT_TOOL} again with one of those IDs.",
    )


def _no_active_intent(available_ids: str) -> DecisionResult:
    return DecisionResult.denied(
        DenyReason.NO_ACTIVE_INTENT,
        f"No active intent is set. You MUST call {SELECT_INTENT_TOOL} before modifying any file. "
        f"Available intent IDs: [{available_ids}]. "
        f"Do NOT switch modes. Call {SELECT_INTENT_TOOL}({INTENT_ID_PARAM}) now, then retry.",
    )


def _scope_violation(intent_id: str, target_path: str, scope: List[str]) -> DecisionResult:
    return DecisionResult.denied(
        DenyReason.SCOPE_VIOLATION,
        f"Scope Violation: Intent '{intent_id}' is not authorized to edit '{target_path}'. "
        f"Allowed scope: [{', '.join(scope)}]. Request scope expansion if needed.",
    )


def _stale_file(target_path: str, known_hash: str, disk_hash: str) -> DecisionResult:
    return DecisionResult.denied(
        DenyReason.STALE_FILE,
        f"Stale File Conflict: The file '{target_path}' has been modified since you last read it "
        f"(your hash: {known_hash[:8]}..., disk hash: {disk_hash[:8]}...). "
        f"Re-read the file, incorporate the changes, then retry.",
    )


# ============================================================
# DECISION STEPS
# ============================================================

def _select_intent(context: InvocationContext, workspace_root: PathLike) -> DecisionResult:
    """Resolve an intent-selection call and hand back its context block."""
    intent_id = context.params.get(INTENT_ID_PARAM)
    if not isinstance(intent_id, str) or not intent_id.strip():
        return _missing_intent_id()

    snapshot = load_registry(workspace_root)
    intent = snapshot.get(intent_id)
    if intent is None:
        return _unknown_intent(intent_id, snapshot.available_ids_text(IDS_UNREADABLE_ON_SELECT))

    return DecisionResult.allowed(injected_context=render_intent_context(intent))


def _resolve_against_workspace(workspace_root: PathLike, target_path: str) -> Path:
    path = Path(target_path)
    if path.is_absolute():
        return path
    return Path(workspace_root) / path


def _check_stale(context: InvocationContext, workspace_root: PathLike, target_path: str) -> Optional[DecisionResult]:
    """Optimistic lock: a single compare, no retry."""
    known_hash = context.params.get(KNOWN_HASH_PARAM)
    if not isinstance(known_hash, str) or not known_hash.strip():
        return None

    disk_hash = hash_of_file(_resolve_against_workspace(workspace_root, target_path))
    if disk_hash is None:
        # Nothing on disk to conflict with
        return None

    if normalize_digest(known_hash) != disk_hash:
        return _stale_file(target_path, known_hash, disk_hash)
    return None


def _gate_mutation(context: InvocationContext, workspace_root: PathLike) -> DecisionResult:
    tool_name = context.normalized_tool_name

    if not context.active_intent_id:
        snapshot = load_registry(workspace_root)
        return _no_active_intent(snapshot.available_ids_text(IDS_UNREADABLE_ON_MUTATION))

    target_path = target_path_for(tool_name, context.params)
    if target_path is None:
        # Path-less tool (command, subtask, multi-file patch)
        return DecisionResult.allowed()

    # Scope is checked against the declared intent only
    intent = load_registry(workspace_root).get(context.active_intent_id)
    if intent is not None and intent.owned_scope:
        if not is_in_scope(target_path, intent.owned_scope):
            return _scope_violation(intent.id, target_path, intent.owned_scope)

    if tool_name in WHOLE_FILE_OVERWRITE_TOOLS:
        stale = _check_stale(context, workspace_root, target_path)
        if stale is not None:
            return stale

    return DecisionResult.allowed()


def decide(context: InvocationContext, workspace_root: PathLike) -> DecisionResult:
    """
    Pure decision over the context plus the current disk state.

    Mutates nothing.
    """
    if not is_enabled(workspace_root):
        return DecisionResult.allowed()

    if is_intent_selection(context.tool_name):
        return _select_intent(context, workspace_root)

    if is_mutating_tool(context.tool_name):
        return _gate_mutation(context, workspace_root)

    return DecisionResult.allowed()


# ============================================================
# HOOK ENTRY POINTS
# ============================================================

def run_pre_hook(context: InvocationContext, workspace_root: PathLike) -> DecisionResult:
    """Decide, and log denials to the operational log."""
    result = decide(context, workspace_root)
    if not result.allow:
        log_info(
            f"DENY tool={context.tool_name} intent={context.active_intent_id or '-'} "
            f"reason={result.reason}"
        )
    else:
        log_debug(f"ALLOW tool={context.tool_name} intent={context.active_intent_id or '-'}")
    return result


def run_post_hook(context: InvocationContext, workspace_root: PathLike) -> Optional[TraceEntry]:
    """
    Record provenance for a mutation that already executed successfully.

    Never raises: the tool call cannot be rolled back, so a bookkeeping
    failure is only reported to the operational log.
    """
    try:
        return record_mutation(context, workspace_root)
    except Exception as e:
        log_error(f"Post-hook failed for tool={context.tool_name}: {type(e).__name__}: {e}")
        return None


class HookEngine:
    """
    Workspace-bound facade over the hook functions.

    Holds the workspace root only; the active intent still comes in on
    each context.
    """

    version = HOOK_ENGINE_VERSION

    def __init__(self, workspace_root: PathLike):
        self.workspace_root = Path(workspace_root)

    @property
    def enabled(self) -> bool:
        return is_enabled(self.workspace_root)

    def pre_hook(self, context: InvocationContext) -> DecisionResult:
        return run_pre_hook(context, self.workspace_root)

    def post_hook(self, context: InvocationContext) -> Optional[TraceEntry]:
        return run_post_hook(context, self.workspace_root)
