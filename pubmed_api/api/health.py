from __future__ import annotations

import time

from fastapi import APIRouter, Request

from pubmed_api import __version__

router = APIRouter(tags=["health"])

SERVICE_NAME = "pubmed-api"


@router.get("/healthz")
async def healthz(request: Request) -> dict:
    # started_at is captured once in the app lifespan
    started_at = getattr(request.app.state, "started_at", None)
    uptime = time.monotonic() - started_at if started_at is not None else 0.0
    return {
        "service": SERVICE_NAME,
        "version": __version__,
        "status": "ok",
        "uptime": uptime,
    }
