"""
Registry router - read-only views of intents, trace and lessons.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from agent_trace import read_trace
from gate_api.models import (
    IntentListResponse, IntentSummary, LessonCreate, LessonResponse, TraceListResponse
)
from intent_store import load_registry
from lesson_recorder import record_lesson
from orchestration_config import is_enabled

router = APIRouter()


@router.get("/intents", response_model=IntentListResponse)
async def list_intents(workspace_root: str = Query(..., min_length=1)):
    """Intents currently declared in the workspace registry."""
    snapshot = load_registry(workspace_root)
    return IntentListResponse(
        enabled=is_enabled(workspace_root),
        registry_status=snapshot.status,
        intents=[
            IntentSummary(id=i.id, name=i.name, status=i.status, owned_scope=i.owned_scope)
            for i in snapshot.intents
        ],
    )


@router.get("/trace", response_model=TraceListResponse)
async def list_trace(
    workspace_root: str = Query(..., min_length=1),
    intent_id: Optional[str] = Query(default=None),
    path: Optional[str] = Query(default=None),
    limit: int = Query(default=50, ge=1, le=1000),
):
    """Trace entries, newest first."""
    entries = read_trace(workspace_root, intent_id=intent_id, path=path, limit=limit)
    return TraceListResponse(entries=entries, total=len(entries))


@router.post("/lessons", response_model=LessonResponse)
async def create_lesson(request: LessonCreate):
    """Append a lesson to AGENTS.md."""
    try:
        message = record_lesson(
            request.workspace_root,
            request.category.value,
            request.lesson,
            file_context=request.file_context,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return LessonResponse(message=message)
