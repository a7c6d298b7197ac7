"""
Hooks router - pre/post tool-call endpoints.

The runtime calls /hooks/pre before every tool call and only runs the
tool when `allow` is true; it calls /hooks/post after the tool
succeeded. Denials are 200 responses with allow=false: a denial is a
decision, not an HTTP error.
"""

from fastapi import APIRouter

from gate_api.models import DecisionResponse, InvocationRequest, PostHookRequest, PostHookResponse
from hook_engine import run_post_hook, run_pre_hook

router = APIRouter()


@router.post("/hooks/pre", response_model=DecisionResponse)
async def pre_hook(request: InvocationRequest):
    """Decide whether a tool call may run."""
    result = run_pre_hook(request.to_context(), request.workspace_root)
    return DecisionResponse(
        allow=result.allow,
        error=result.error,
        injected_context=result.injected_context,
        reason=result.reason,
    )


@router.post("/hooks/post", response_model=PostHookResponse)
async def post_hook(request: PostHookRequest):
    """Record provenance for a tool call that already ran."""
    entry = run_post_hook(request.to_context(), request.workspace_root)
    return PostHookResponse(recorded=entry is not None, trace_id=entry.id if entry else None)
