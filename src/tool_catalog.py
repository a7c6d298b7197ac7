"""
Tool Catalog - Static Gating Tables
===================================

Which tools the gate cares about, and where each one keeps its target
path and new content. Adding a gated tool is a table edit here, never a
new branch in the hook engine.

Callers that decide whether to route a call through the gate must use
MUTATING_TOOLS from this module, so every consumer agrees on the set.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional


# ============================================================
# TOOL NAMES
# ============================================================

SELECT_INTENT_TOOL = "select_active_intent"
INTENT_ID_PARAM = "intent_id"

# Tools that mutate the workspace. All of them require an active intent.
MUTATING_TOOLS: FrozenSet[str] = frozenset({
    "write_to_file",
    "edit_file",
    "search_replace",
    "apply_diff",
    "execute_command",
    "new_task",
    "edit",
    "search_and_replace",
    "apply_patch",
})

# Tools that replace the whole file and therefore take part in
# optimistic locking.
WHOLE_FILE_OVERWRITE_TOOLS: FrozenSet[str] = frozenset({"write_to_file"})
KNOWN_HASH_PARAM = "known_content_hash"

# Which params key holds the target path. Tools absent here are
# path-less (apply_patch embeds its paths in the patch body).
PATH_PARAM_BY_TOOL: Dict[str, str] = {
    "write_to_file": "path",
    "apply_diff": "path",
    "edit_file": "file_path",
    "search_replace": "file_path",
    "edit": "file_path",
    "search_and_replace": "file_path",
}


@dataclass(frozen=True)
class ContentParams:
    """Where the post-hook finds the target path and the new content."""
    path_param: str
    content_param: str


# Tools the post-hook can trace.
CONTENT_PARAMS_BY_TOOL: Dict[str, ContentParams] = {
    "write_to_file": ContentParams("path", "content"),
    "edit_file": ContentParams("file_path", "new_string"),
    "search_replace": ContentParams("file_path", "new_string"),
    "apply_diff": ContentParams("path", "diff"),
}

# Metadata keys the runtime merges into params for provenance.
MODEL_IDENTIFIER_PARAM = "_modelIdentifier"
SESSION_ID_PARAM = "_sessionId"


class MutationClass(str, Enum):
    """Change categories recorded in the trace."""
    INTENT_EVOLUTION = "INTENT_EVOLUTION"
    AST_REFACTOR = "AST_REFACTOR"
    BUG_FIX = "BUG_FIX"
    DOCUMENTATION = "DOCUMENTATION"


DEFAULT_MUTATION_CLASS = MutationClass.INTENT_EVOLUTION.value


# ============================================================
# LOOKUPS
# ============================================================

MCP_PREFIX = "mcp__"


def normalize_tool_name(tool_name: str) -> str:
    """
    Normalize tool name by stripping an MCP server prefix.

    Handles: mcp__roo__write_to_file -> write_to_file
    """
    if not isinstance(tool_name, str):
        return ""
    name = tool_name.strip()
    if name.startswith(MCP_PREFIX):
        remainder = name[len(MCP_PREFIX):]
        _, sep, tail = remainder.partition("__")
        name = tail if sep else remainder
    return name


def is_mutating_tool(tool_name: str) -> bool:
    return normalize_tool_name(tool_name) in MUTATING_TOOLS


def is_intent_selection(tool_name: str) -> bool:
    return normalize_tool_name(tool_name) == SELECT_INTENT_TOOL


def _string_param(params: Mapping[str, Any], key: str) -> Optional[str]:
    value = params.get(key)
    if isinstance(value, str) and value:
        return value
    return None


def target_path_for(tool_name: str, params: Mapping[str, Any]) -> Optional[str]:
    """Target file path of a mutating call, or None for path-less tools."""
    key = PATH_PARAM_BY_TOOL.get(normalize_tool_name(tool_name))
    if key is None:
        return None
    return _string_param(params, key)


def modified_content_for(tool_name: str, params: Mapping[str, Any]) -> Optional[tuple]:
    """(path, content) the post-hook should trace, or None."""
    content_params = CONTENT_PARAMS_BY_TOOL.get(normalize_tool_name(tool_name))
    if content_params is None:
        return None
    path = _string_param(params, content_params.path_param)
    content = _string_param(params, content_params.content_param)
    if not path or not content:
        return None
    return path, content
