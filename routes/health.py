# ─────────────────────────────────────────────────────────────────
# routes/health.py — Liveness & Uptime Endpoints
#
# GET /health is what the external monitor calls. Every call is
# also a sample: it records a check in the store's 24h window.
# GET /api/uptime only reads, it never records a check.
# ─────────────────────────────────────────────────────────────────

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

import config
from database import TelemetryStore
from models import HealthResponse, UptimeResponse
from routes.deps import get_store

logger = logging.getLogger("routes")

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
def health(store: TelemetryStore = Depends(get_store)):
    """
    Liveness probe.

    Returns 200 with uptime figures while the store answers.
    If anything unexpected blows up, returns 503 so the monitor
    treats the service as down.
    """

    try:
        store.record_uptime_check()
        total_visits = store.get_total_visits()
        uptime_stats = store.get_uptime_stats()

        return HealthResponse(
            status="healthy",
            timestamp=datetime.now(timezone.utc),
            uptime=store.uptime_seconds(),
            total_visits=total_visits,
            uptime_hours=uptime_stats.uptime_hours,
            last_check=uptime_stats.last_check,
            checks_in_window=uptime_stats.checks_in_window,
            environment=config.ENVIRONMENT,
        )

    except Exception:
        logger.exception("💥 Health check failed")
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "error": "Service unavailable",
            },
        )


@router.get("/api/uptime", response_model=UptimeResponse)
def uptime(store: TelemetryStore = Depends(get_store)):
    try:
        uptime_stats = store.get_uptime_stats()
    except Exception:
        logger.exception("💥 Failed to read uptime statistics")
        raise HTTPException(status_code=500, detail="Failed to get uptime statistics")

    return UptimeResponse(
        uptime=uptime_stats.uptime_hours,
        last_check=uptime_stats.last_check,
        server_status="online",
    )
