# ─────────────────────────────────────────────────────────────────
# database.py — In-Memory Telemetry Store
#
# SEPARATION OF CONCERNS:
# This file owns all visit records and uptime checks.
# Routes never touch the lists directly. They call the methods on
# the single `telemetry_store` instance created at the bottom.
#
# Nothing here survives a restart: a crash loses the visit history
# and resets the server start time. That is accepted for this project.
#
# WHY A LOCK?
# FastAPI runs plain `def` endpoints in a thread pool, so two requests
# can hit the store at the same moment. One threading.Lock guards the
# id counter, the visit list and the check window together, so an id
# is never handed out twice and a reader never sees half an insert.
# ─────────────────────────────────────────────────────────────────

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from models import VISIT_FIELDS, UptimeStats, Visit, VisitCreate

logger = logging.getLogger("storage")

# Liveness checks older than this are dropped from the window
UPTIME_WINDOW = timedelta(hours=24)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TelemetryStore:
    """
    Holds every visit and the rolling 24h window of liveness checks.

    `clock` returns the current time as a timezone-aware datetime.
    Tests pass a fake clock to move time forward without sleeping.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or utc_now
        self._lock = threading.Lock()

        # Visits in creation order; ids and timestamps only ever grow
        self._visits: List[Visit] = []
        self._last_visit_id = 0

        # Timestamps of liveness checks in the order they arrived
        self._uptime_checks: List[datetime] = []

        # Fixed once. Anchors uptime_hours for the life of the process.
        self._server_start_time = self._clock()

    @property
    def server_start_time(self) -> datetime:
        return self._server_start_time

    def now(self) -> datetime:
        """Current time according to the store's clock."""
        return self._clock()

    # ── VISITS ────────────────────────────────────────────────────

    def create_visit(self, payload: Optional[VisitCreate] = None) -> Visit:
        """
        Stores a new visit and returns it.

        Empty strings and absent fields both become None.
        The id and visited_at are always assigned here, never by
        the caller.
        """

        data = payload.model_dump() if payload is not None else {}
        attributes = {name: (data.get(name) or None) for name in VISIT_FIELDS}

        with self._lock:
            now = self._clock()

            # Clock went backwards (NTP step, VM resume...). Keep the
            # visit order intact instead of storing an older timestamp.
            if self._visits and now < self._visits[-1].visited_at:
                logger.warning(
                    f"⏪ Clock regression detected: {now.isoformat()} < "
                    f"{self._visits[-1].visited_at.isoformat()}, clamping"
                )
                now = self._visits[-1].visited_at

            self._last_visit_id += 1
            visit = Visit(id=self._last_visit_id, visited_at=now, **attributes)
            self._visits.append(visit)

        logger.info(f"👣 Visit #{visit.id} recorded | country: {visit.country} | browser: {visit.browser}")
        return visit

    def get_all_visits(self) -> List[Visit]:
        with self._lock:
            return list(self._visits)

    def get_visits_by_date_range(self, days: int) -> List[Visit]:
        """
        Returns visits newer than a sliding cutoff of `days` × 24h
        before now.

        This is NOT calendar aligned; see stats.py for the
        midnight-to-midnight buckets.

        days=0 is an alias for days=1 ("the last 24 hours"), never
        an empty window.
        """

        if days < 0:
            raise ValueError(f"days must be >= 0, got {days}")

        window = timedelta(days=max(days, 1))

        with self._lock:
            cutoff = self._clock() - window
            return [visit for visit in self._visits if visit.visited_at >= cutoff]

    def get_total_visits(self) -> int:
        # Records are never deleted, so the list length IS the total
        with self._lock:
            return len(self._visits)

    # ── UPTIME ────────────────────────────────────────────────────

    def record_uptime_check(self) -> None:
        """
        Called once per incoming health check.
        Appends now and immediately drops everything 24h or older,
        so the window length is always a real 24h sample.
        """

        with self._lock:
            now = self._clock()
            self._uptime_checks.append(now)

            # Not necessarily sorted after a clock regression
            cutoff = now - UPTIME_WINDOW
            self._uptime_checks = [check for check in self._uptime_checks if check > cutoff]

    def get_uptime_stats(self) -> UptimeStats:
        """
        uptime_hours is wall-clock age of the process. It does not
        depend on how often (or whether) the monitor has called in.
        """

        with self._lock:
            now = self._clock()
            uptime_hours = (now - self._server_start_time).total_seconds() / 3600
            last_check = self._uptime_checks[-1] if self._uptime_checks else self._server_start_time
            checks = len(self._uptime_checks)

        return UptimeStats(
            uptime_hours=round(uptime_hours, 2),
            last_check=last_check,
            checks_in_window=checks,
        )

    def uptime_seconds(self) -> float:
        return (self.now() - self._server_start_time).total_seconds()


# The one store for the whole process.
# Do NOT create another TelemetryStore elsewhere in the app. A second
# instance would start from zero visits and a new start time.
telemetry_store = TelemetryStore()
