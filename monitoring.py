# ─────────────────────────────────────────────────────────────────
# monitoring.py — External Uptime Probe
#
# Runs OUTSIDE the web server (cron job, UptimeRobot-style box,
# or just a second terminal) and asks GET /health whether the
# service is alive. Every successful call also feeds the server's
# rolling 24h check window.
#
#   python monitoring.py                       → one check, then exit
#   python monitoring.py --interval 300        → check every 5 minutes
#
# WHY ASYNCIO?
# The watch loop spends almost all its time sleeping. asyncio.sleep()
# makes that sleep cancellable (Ctrl+C stops it cleanly), and the
# blocking HTTP call runs in a worker thread so the loop stays free.
# ─────────────────────────────────────────────────────────────────

import argparse
import asyncio
import logging

import requests

import config
from alerts import fire_health_alert

logger = logging.getLogger("monitoring")


def check_health(endpoint: str = config.HEALTH_ENDPOINT) -> dict:
    """
    One health check.

    Healthy  → HTTP 2xx AND body says {"status": "healthy"}
    Anything else (timeout, refused connection, 503, garbage body)
    counts as unhealthy and fires an alert.
    """

    try:
        response = requests.get(endpoint, timeout=config.HTTP_TIMEOUT)
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.ok and data.get("status") == "healthy":
            logger.info(
                f"✅ Service is healthy - Uptime: {data.get('uptimeHours')}h "
                f"- Total Visits: {data.get('totalVisits')}"
            )
            return {"status": "healthy", "data": data}

        error = f"Health check failed: {data.get('error') or f'HTTP {response.status_code}'}"

    except requests.exceptions.RequestException as exc:
        error = f"Health check failed: {exc}"

    logger.error(f"❌ {error}")
    fire_health_alert(error)
    return {"status": "unhealthy", "error": error}


async def watch(endpoint: str, interval: int):
    """
    Checks the endpoint every `interval` seconds until cancelled.
    """

    logger.info(f"👀 Watching {endpoint} every {interval}s")

    try:
        while True:
            await asyncio.to_thread(check_health, endpoint)
            await asyncio.sleep(interval)

    except asyncio.CancelledError:
        # Ctrl+C or shutdown. Not an error.
        logger.info("⏹️  Monitoring stopped")
        raise


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Poll the /health endpoint and alert on failure")
    parser.add_argument("--endpoint", default=config.HEALTH_ENDPOINT, help="health URL to check")
    parser.add_argument(
        "--interval",
        type=int,
        default=config.HEALTH_CHECK_INTERVAL,
        help="seconds between checks; 0 runs a single check",
    )
    args = parser.parse_args(argv)

    if args.interval <= 0:
        result = check_health(args.endpoint)
        return 0 if result["status"] == "healthy" else 1

    try:
        asyncio.run(watch(args.endpoint, args.interval))
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
