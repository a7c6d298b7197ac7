"""
Invocation Context and Decision Result
======================================

The two values that cross the gate boundary. Both are built fresh for
every tool call; the gate never keeps them.

The active intent binding lives here, on the context. The gate holds no
session state of its own: the runtime carries the binding for the
lifetime of the task and hands it in on every call.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from tool_catalog import DEFAULT_MUTATION_CLASS, normalize_tool_name


class GateError(Exception):
    """Base error for misuse of the gate API (never raised for denials)."""


class InvalidInvocationError(GateError, ValueError):
    """An invocation context could not be built from the given input."""


class DenyReason:
    """Machine-readable denial codes."""
    MISSING_INTENT_ID = "missing_intent_id"
    UNKNOWN_INTENT = "unknown_intent"
    NO_ACTIVE_INTENT = "no_active_intent"
    SCOPE_VIOLATION = "scope_violation"
    STALE_FILE = "stale_file"


# ============================================================
# INVOCATION CONTEXT
# ============================================================

@dataclass
class InvocationContext:
    """
    One tool call as seen by the gate.

    `params` is the runtime's merged parameter mapping: display params
    and authoritative typed params folded into one dict.
    """
    tool_name: str
    params: Dict[str, Any] = field(default_factory=dict)
    active_intent_id: Optional[str] = None
    mutation_class: str = DEFAULT_MUTATION_CLASS

    def __post_init__(self):
        if not isinstance(self.tool_name, str):
            raise InvalidInvocationError(f"tool_name must be a string, got {type(self.tool_name).__name__}")
        if self.params is None:
            self.params = {}
        if not isinstance(self.params, Mapping):
            raise InvalidInvocationError(f"params must be a mapping, got {type(self.params).__name__}")
        self.params = dict(self.params)
        if isinstance(self.active_intent_id, (int, float)) and not isinstance(self.active_intent_id, bool):
            # YAML ids like `42` arrive as numbers from JSON callers
            self.active_intent_id = str(self.active_intent_id)
        if self.active_intent_id is not None and not isinstance(self.active_intent_id, str):
            raise InvalidInvocationError(
                f"active_intent_id must be a string, got {type(self.active_intent_id).__name__}"
            )
        if not self.active_intent_id:
            self.active_intent_id = None
        if not self.mutation_class:
            self.mutation_class = DEFAULT_MUTATION_CLASS

    @property
    def normalized_tool_name(self) -> str:
        return normalize_tool_name(self.tool_name)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "InvocationContext":
        """
        Build from a JSON payload.

        Accepts both camelCase (toolName, activeIntentId, mutationClass)
        and snake_case keys.
        """
        if not isinstance(payload, Mapping):
            raise InvalidInvocationError("invocation payload must be a JSON object")

        def pick(*keys):
            for key in keys:
                if payload.get(key) is not None:
                    return payload[key]
            return None

        tool_name = pick("toolName", "tool_name")
        if not tool_name:
            raise InvalidInvocationError("invocation payload has no toolName")

        return cls(
            tool_name=tool_name,
            params=pick("params") or {},
            active_intent_id=pick("activeIntentId", "active_intent_id"),
            mutation_class=pick("mutationClass", "mutation_class") or DEFAULT_MUTATION_CLASS,
        )


# ============================================================
# DECISION RESULT
# ============================================================

@dataclass
class DecisionResult:
    """Allow/deny verdict for one tool call."""
    allow: bool
    error: Optional[str] = None
    injected_context: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def allowed(cls, injected_context: Optional[str] = None) -> "DecisionResult":
        return cls(allow=True, injected_context=injected_context)

    @classmethod
    def denied(cls, reason: str, error: str) -> "DecisionResult":
        return cls(allow=False, error=error, reason=reason)

    def to_dict(self) -> Dict[str, Any]:
        """Wire form for the runtime, omitting empty fields."""
        d: Dict[str, Any] = {"allow": self.allow}
        if self.error is not None:
            d["error"] = self.error
        if self.injected_context is not None:
            d["injectedContext"] = self.injected_context
        if self.reason is not None:
            d["reason"] = self.reason
        return d
