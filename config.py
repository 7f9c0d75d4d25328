# ─────────────────────────────────────────────────────────────────
# config.py — Environment Settings
#
# SEPARATION OF CONCERNS:
# Every value that changes between a laptop and a deployed server
# is read here, once, from environment variables.
# Other files import the constant they need instead of calling
# os.environ themselves.
# ─────────────────────────────────────────────────────────────────

import os

VERSION = "1.0.0"

# Where uvicorn binds when the app is started with `python main.py`
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "10000"))

# Reported back by GET /health so the monitor knows which deploy answered
ENVIRONMENT = os.environ.get("ENVIRONMENT") or os.environ.get("NODE_ENV") or "development"

# Discord webhook that receives a message for every visit and every failed
# health check. Left empty → notifications are switched off.
# NEVER hardcode the real URL here, it is a secret.
DISCORD_WEBHOOK_URL = os.environ.get("DISCORD_WEBHOOK_URL", "").strip()

# Seconds before an outbound webhook / health request gives up
HTTP_TIMEOUT = float(os.environ.get("HTTP_TIMEOUT", "10"))

# Used by monitoring.py (the external uptime probe)
HEALTH_ENDPOINT = os.environ.get("HEALTH_ENDPOINT", f"http://localhost:{PORT}/health")
HEALTH_CHECK_INTERVAL = int(os.environ.get("HEALTH_CHECK_INTERVAL", "0"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
