"""
Intent Gate REST API
HTTP interface for the pre/post tool-call hooks.

Lets agent runtimes that can't shell out to `intent-gate` consult the
gate over HTTP. Binds to localhost by default: the workspace root comes
in on every request, so this must not be exposed beyond the machine.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI

from gate_api.routers import health, hooks, registry
from gate_logger import log_info
from hook_engine import HOOK_ENGINE_VERSION


# =============================================================================
# Shared State
# =============================================================================

class GateState:
    """Shared application state."""
    start_time: float = None
    version: str = HOOK_ENGINE_VERSION


state = GateState()


# =============================================================================
# Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    state.start_time = time.time()
    log_info(f"Intent gate API starting (version={state.version})")
    yield
    log_info("Intent gate API shutting down")


# =============================================================================
# App
# =============================================================================

app = FastAPI(
    title="Intent Gate API",
    description="""
Pre/post tool-call hooks enforcing intent handshake, file scope and
optimistic locking, with an append-only provenance trace.

- `POST /api/v1/hooks/pre` before a tool runs; run it only if `allow` is true
- `POST /api/v1/hooks/post` after a mutating tool succeeded
    """,
    version=state.version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


@app.get("/")
async def root():
    """API root - basic info."""
    return {
        "name": "Intent Gate API",
        "version": state.version,
        "docs": "/docs",
    }


app.include_router(health.router, tags=["health"])
app.include_router(hooks.router, prefix="/api/v1", tags=["hooks"])
app.include_router(registry.router, prefix="/api/v1", tags=["registry"])
