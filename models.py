# ─────────────────────────────────────────────────────────────────
# models.py — Data Models (Pydantic Schemas)
#
# All data shapes live here: the visit payload the browser sends,
# the visit record the store hands back, and every response body.
#
# Python code uses snake_case. The JSON the page talks is camelCase
# (countryCode, userAgent, visitedAt), so every model carries a
# camelCase alias generator. FastAPI serializes response models
# by alias, and populate_by_name lets tests build models with the
# Python names.
# ─────────────────────────────────────────────────────────────────

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# Attribute names shared by the payload and the stored record
VISIT_FIELDS = (
    "ip",
    "country",
    "city",
    "region",
    "country_code",
    "timezone",
    "browser",
    "platform",
    "language",
    "user_agent",
    "referrer",
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VisitCreate(CamelModel):
    """
    Shape of the JSON body for POST /api/visits

    {
        "country": "Germany",
        "countryCode": "DE",
        "browser": "Firefox",
        "language": "de-DE"
    }

    Every field is optional: the page only sends what it managed
    to collect. Pydantic still rejects wrong types (e.g. a number
    where a string belongs) before the store ever sees the data.
    """

    ip: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    country_code: Optional[str] = None
    timezone: Optional[str] = None
    browser: Optional[str] = None
    platform: Optional[str] = None
    language: Optional[str] = None
    user_agent: Optional[str] = None
    referrer: Optional[str] = None


class Visit(VisitCreate):
    """
    One stored visit. Frozen: once the store creates a record
    nobody can change it.

    None means "not collected". The store turns empty strings
    into None so there is exactly one missing marker.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: int
    visited_at: datetime


class UptimeStats(CamelModel):
    uptime_hours: float        # process age, rounded to 2 decimals
    last_check: datetime       # newest liveness check, or server start
    checks_in_window: int = 0  # size of the rolling check window


class VisitStats(CamelModel):
    """Response body for GET /api/visits/stats"""

    total: int
    daily: List[int]      # 7 buckets, oldest day first
    labels: List[str]     # short weekday names, same order


class VisitList(CamelModel):
    visits: List[Visit]
    total: int


class HealthResponse(CamelModel):
    """
    Response body for GET /health. The external uptime monitor
    reads it to decide whether the site is alive.
    """

    status: str
    timestamp: datetime
    uptime: float              # seconds since the store was created
    total_visits: int
    uptime_hours: float
    last_check: datetime
    checks_in_window: int
    environment: str


class UptimeResponse(CamelModel):
    uptime: float
    last_check: datetime
    server_status: str
