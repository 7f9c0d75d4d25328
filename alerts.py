# ─────────────────────────────────────────────────────────────────
# alerts.py — Logging Setup & Discord Notifications
#
# SEPARATION OF CONCERNS:
# All outbound notifications live here. The store never talks to
# the network; routes and the monitoring probe call into this file
# after the store has done its work.
#
# Two messages exist:
#   1. "New visit" embed  → sent after every POST /api/visits
#   2. "Server alert"     → sent by monitoring.py when /health fails
#
# A failed webhook is logged and forgotten. It must never turn a
# successful visit into an error response.
# ─────────────────────────────────────────────────────────────────

import logging
from datetime import datetime, timezone
from typing import Optional

import requests

import config
from models import Visit

# ── LOGGING CONFIGURATION ─────────────────────────────────────────
# %(asctime)s    → timestamp e.g. "2026-03-01 10:34:22"
# %(levelname)s  → severity e.g. "INFO", "CRITICAL"
# %(name)s       → which logger sent this e.g. "alerts"
# %(message)s    → the actual message we wrote
logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s — %(levelname)s — [%(name)s] — %(message)s"
)

logger = logging.getLogger("alerts")

VISIT_COLOR = 0x8B5CF6   # purple
ALERT_COLOR = 0xFF0000   # red


def _or_unknown(value: Optional[str], fallback: str = "Unknown") -> str:
    return value if value else fallback


def build_visit_embed(visit: Visit, total_visits: int) -> dict:
    """
    Builds the Discord message for a new visit.
    Missing fields show as "Unknown"; a missing referrer means
    the visitor typed the address, so it shows as "Direct".
    """

    location = (
        f"**IP:** {_or_unknown(visit.ip)}\n"
        f"**Country:** {_or_unknown(visit.country)}\n"
        f"**City:** {_or_unknown(visit.city)}\n"
        f"**Region:** {_or_unknown(visit.region)}"
    )
    browser = (
        f"**Browser:** {_or_unknown(visit.browser)}\n"
        f"**Platform:** {_or_unknown(visit.platform)}\n"
        f"**Language:** {_or_unknown(visit.language)}"
    )
    stats = (
        f"**Total Visits:** {total_visits}\n"
        f"**Referrer:** {_or_unknown(visit.referrer, 'Direct')}"
    )

    return {
        "embeds": [{
            "title": "🔥 New Website Visit",
            "color": VISIT_COLOR,
            "fields": [
                {"name": "📍 Location Info", "value": location, "inline": True},
                {"name": "🌐 Browser Info", "value": browser, "inline": True},
                {"name": "📊 Visit Stats", "value": stats, "inline": False},
            ],
            "footer": {"text": f"Visit recorded at {visit.visited_at.isoformat()}"},
        }]
    }


def build_health_alert(error: str, timestamp: str) -> dict:
    return {
        "embeds": [{
            "title": "🚨 Server Alert",
            "description": "Server health check failed",
            "color": ALERT_COLOR,
            "fields": [
                {"name": "Error", "value": error, "inline": False},
                {"name": "Timestamp", "value": timestamp, "inline": True},
                {"name": "Action Required", "value": "Check server status and restart if necessary", "inline": False},
            ],
        }]
    }


def send_webhook(url: str, payload: dict) -> bool:
    """
    POSTs the payload as JSON. Returns True when Discord accepted it.

    Any network problem or non-2xx answer is logged and reported as
    False. Callers carry on either way.
    """

    try:
        response = requests.post(url, json=payload, timeout=config.HTTP_TIMEOUT)
        response.raise_for_status()
    except requests.exceptions.RequestException as exc:
        logger.error(f"❌ Failed to send webhook: {exc}")
        return False

    return True


def notify_visit(visit: Visit, total_visits: int) -> bool:
    """Runs as a FastAPI background task after the visit response is sent."""

    if not config.DISCORD_WEBHOOK_URL:
        logger.debug("Webhook URL not configured, skipping visit notification")
        return False

    sent = send_webhook(config.DISCORD_WEBHOOK_URL, build_visit_embed(visit, total_visits))
    if sent:
        logger.info(f"📨 Visit #{visit.id} forwarded to Discord")
    return sent


def fire_health_alert(error: str) -> bool:
    """
    Called by monitoring.py when the service looks down.
    Always logs CRITICAL, even when no webhook is configured.
    """

    timestamp = datetime.now(timezone.utc).isoformat()

    logger.critical("🚨 " + "=" * 50)
    logger.critical(f"SERVICE UNHEALTHY: {error} at {timestamp}")
    logger.critical("=" * 50)

    if not config.DISCORD_WEBHOOK_URL:
        return False

    return send_webhook(config.DISCORD_WEBHOOK_URL, build_health_alert(error, timestamp))
