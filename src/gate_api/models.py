"""
Intent Gate REST API - Pydantic Models

Request/response shapes for the hook endpoints. The decision itself is
computed by hook_engine; these models only validate the wire form.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from invocation import InvocationContext
from lesson_recorder import LessonCategory
from tool_catalog import MutationClass


# =============================================================================
# Hooks
# =============================================================================

class InvocationRequest(BaseModel):
    """One tool call, as the runtime sees it."""
    workspace_root: str = Field(..., min_length=1, description="Absolute path of the workspace")
    tool_name: str = Field(..., min_length=1, description="Tool being invoked")
    params: dict[str, Any] = Field(default_factory=dict, description="Merged display + typed params")
    active_intent_id: Optional[str] = Field(default=None, description="Intent bound to this session")

    def to_context(self) -> InvocationContext:
        return InvocationContext(
            tool_name=self.tool_name,
            params=self.params,
            active_intent_id=self.active_intent_id,
        )


class PostHookRequest(InvocationRequest):
    """A completed tool call to record."""
    mutation_class: MutationClass = Field(default=MutationClass.INTENT_EVOLUTION)

    def to_context(self) -> InvocationContext:
        context = super().to_context()
        context.mutation_class = self.mutation_class.value
        return context


class DecisionResponse(BaseModel):
    """Allow/deny verdict."""
    allow: bool
    error: Optional[str] = None
    injected_context: Optional[str] = None
    reason: Optional[str] = Field(default=None, description="Machine-readable denial code")


class PostHookResponse(BaseModel):
    recorded: bool
    trace_id: Optional[str] = None


# =============================================================================
# Registry / Trace
# =============================================================================

class IntentSummary(BaseModel):
    id: str
    name: str
    status: str
    owned_scope: list[str] = Field(default_factory=list)


class IntentListResponse(BaseModel):
    enabled: bool
    registry_status: str
    intents: list[IntentSummary]


class TraceListResponse(BaseModel):
    entries: list[dict]
    total: int


# =============================================================================
# Lessons
# =============================================================================

class LessonCreate(BaseModel):
    workspace_root: str = Field(..., min_length=1)
    category: LessonCategory
    lesson: str = Field(..., min_length=1, max_length=2000, description="1-3 specific sentences")
    file_context: Optional[str] = Field(default=None)


class LessonResponse(BaseModel):
    message: str
