# ─────────────────────────────────────────────────────────────────
# main.py — Application Entry Point
#
# Builds the FastAPI app and plugs in the routers.
# No endpoint logic lives here:
#   routes/visits.py  → visit tracking + weekly stats
#   routes/health.py  → /health and /api/uptime
#
# Run locally:
#   uvicorn main:app --reload
# or
#   python main.py          (uses HOST / PORT from config.py)
# ─────────────────────────────────────────────────────────────────

import logging

from fastapi import FastAPI

import alerts  # noqa: F401  (configures logging on import)
import config
from routes import health, visits

logger = logging.getLogger("main")

app = FastAPI(
    title="Visit Pulse API",
    description="Visitor tracking and uptime telemetry for a small public page",
    version=config.VERSION
)

app.include_router(health.router)
app.include_router(visits.router)


@app.get("/")
def root():
    return {
        "message": "Visit Pulse API is running",
        "version": config.VERSION,
        "docs": "/docs"
    }


if __name__ == "__main__":
    import uvicorn

    logger.info(f"🚀 Starting server on {config.HOST}:{config.PORT} ({config.ENVIRONMENT})")
    uvicorn.run(app, host=config.HOST, port=config.PORT)
