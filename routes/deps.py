# ─────────────────────────────────────────────────────────────────
# routes/deps.py — Shared Dependencies
#
# Endpoints receive the store through Depends(get_store) instead of
# importing the global directly. Production always gets the single
# process-wide instance; tests swap in their own via
# app.dependency_overrides[get_store].
# ─────────────────────────────────────────────────────────────────

from database import TelemetryStore, telemetry_store


def get_store() -> TelemetryStore:
    return telemetry_store
