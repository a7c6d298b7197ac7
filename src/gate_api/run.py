#!/usr/bin/env python3
"""
Intent Gate REST API entry point.

Usage:
    intent-gate-api                            # Default 127.0.0.1:8004
    INTENT_GATE_API_PORT=9000 intent-gate-api  # Custom port
    INTENT_GATE_DEV_MODE=1 intent-gate-api     # Auto-reload
"""

import uvicorn

from orchestration_config import GateSettings


def main():
    settings = GateSettings.from_env()

    print(f"Starting Intent Gate API on {settings.api_host}:{settings.api_port}")
    if settings.dev_mode:
        print("Development mode: auto-reload enabled")

    uvicorn.run(
        "gate_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.dev_mode,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
