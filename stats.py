# ─────────────────────────────────────────────────────────────────
# stats.py — Weekly Visit Histogram
#
# Builds the 7-bar chart shown on the page.
#
# TWO DIFFERENT "DATE RANGES":
# The store's get_visits_by_date_range(7) is a sliding window
# (now minus 7 × 24h). The buckets below are calendar days in the
# server's local time zone: midnight to midnight. The chart needs
# the calendar version, so bucketing happens here, on top of the
# sliding query, instead of inside the store.
# ─────────────────────────────────────────────────────────────────

from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, List, Optional, Tuple

from database import TelemetryStore
from models import Visit, VisitStats

WEEK_DAYS = 7

# Fixed English names; strftime("%a") would follow the host locale
WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def calendar_days(today: date, days: int = WEEK_DAYS) -> List[date]:
    """The last `days` calendar dates ending with `today`, oldest first."""
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def daily_visit_stats(
    visits: Iterable[Visit],
    now: datetime,
    tz: Optional[tzinfo] = None,
    days: int = WEEK_DAYS,
) -> Tuple[List[int], List[str]]:
    """
    Counts visits per calendar day for the `days` days ending today.

    A visit belongs to the local date it happened on, so one stamped
    exactly at 00:00 counts for the day that starts at that instant.
    `tz=None` means the server's local time zone.

    Returns (daily counts, short weekday labels), both oldest first.
    """

    local_today = now.astimezone(tz).date()
    buckets = calendar_days(local_today, days)
    index = {day: position for position, day in enumerate(buckets)}

    daily = [0] * len(buckets)
    for visit in visits:
        position = index.get(visit.visited_at.astimezone(tz).date())
        if position is not None:
            daily[position] += 1

    labels = [WEEKDAY_LABELS[day.weekday()] for day in buckets]
    return daily, labels


def weekly_visit_stats(store: TelemetryStore, tz: Optional[tzinfo] = None) -> VisitStats:
    """The payload behind GET /api/visits/stats"""

    total = store.get_total_visits()
    recent = store.get_visits_by_date_range(WEEK_DAYS)
    daily, labels = daily_visit_stats(recent, store.now(), tz)

    return VisitStats(total=total, daily=daily, labels=labels)
