# ─────────────────────────────────────────────────────────────────
# routes/visits.py — Visit Tracking Endpoints
#
# This file owns the HTTP side of visits:
# It does NOT know how visits are stored (that's database.py)
# It does NOT know how the weekly chart is built (that's stats.py)
# It does NOT know how Discord is called (that's alerts.py)
# ─────────────────────────────────────────────────────────────────

import logging
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request

from alerts import notify_visit
from database import TelemetryStore
from models import Visit, VisitCreate, VisitList, VisitStats
from routes.deps import get_store
from stats import weekly_visit_stats

logger = logging.getLogger("routes")

router = APIRouter(
    prefix="/api/visits",
    tags=["Visits"]
)


def resolve_client_ip(request: Request, fallback: Optional[str] = None) -> Optional[str]:
    """
    Best guess at the visitor's real IP.

    Behind a proxy (Render, nginx...) the socket peer is the proxy,
    so the forwarding headers win. X-Forwarded-For can hold a chain
    "client, proxy1, proxy2"; the first entry is the client.
    The IP the browser put in the body is the last resort.
    """

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    if request.client and request.client.host:
        return request.client.host

    return fallback


# ─────────────────────────────────────────────────────────────────
# POST /api/visits — Record a page visit
# ─────────────────────────────────────────────────────────────────

@router.post("", response_model=Visit)
def create_visit(
    payload: VisitCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    store: TelemetryStore = Depends(get_store),
):
    """
    Flow:
    1. Validate the body via Pydantic (automatic, 422 on bad shape)
    2. Replace the IP with the one the server actually sees
    3. Store the visit
    4. Queue the Discord notification (runs AFTER the response)
    """

    ip = resolve_client_ip(request, fallback=payload.ip)
    visit = store.create_visit(payload.model_copy(update={"ip": ip}))

    # visit.id equals the total at insertion time; a later read could
    # already include concurrent visits
    background_tasks.add_task(notify_visit, visit, visit.id)

    return visit


# ─────────────────────────────────────────────────────────────────
# GET /api/visits — Every recorded visit
# ─────────────────────────────────────────────────────────────────

@router.get("", response_model=VisitList)
def list_visits(store: TelemetryStore = Depends(get_store)):
    visits = store.get_all_visits()
    return VisitList(visits=visits, total=len(visits))


# ─────────────────────────────────────────────────────────────────
# GET /api/visits/stats — Total + 7-day histogram for the chart
# ─────────────────────────────────────────────────────────────────

@router.get("/stats", response_model=VisitStats)
def visit_stats(store: TelemetryStore = Depends(get_store)):
    try:
        return weekly_visit_stats(store)
    except Exception:
        logger.exception("💥 Failed to build visit statistics")
        raise HTTPException(status_code=500, detail="Failed to get visit statistics")


# ─────────────────────────────────────────────────────────────────
# GET /api/visits/recent?days=N — Sliding window query
# ─────────────────────────────────────────────────────────────────

@router.get("/recent", response_model=List[Visit])
def recent_visits(
    days: int = Query(7, ge=0, description="window length in days; 0 means the last 24 hours"),
    store: TelemetryStore = Depends(get_store),
):
    return store.get_visits_by_date_range(days)
