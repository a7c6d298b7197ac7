"""
Health check endpoint.

No workspace access, no auth required.
"""

import time

from fastapi import APIRouter

router = APIRouter()


def get_state():
    from gate_api.main import state
    return state


@router.get("/health")
async def health_check():
    """Liveness plus version and uptime."""
    state = get_state()
    now = time.time()
    return {
        "status": "healthy",
        "version": state.version,
        "uptime_seconds": round(now - state.start_time, 2) if state.start_time else 0,
    }
