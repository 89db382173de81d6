# FILE: medstore/utils/timezone.py
from __future__ import annotations

from datetime import date, datetime, time
from zoneinfo import ZoneInfo

from medstore.core.config import settings


def _store_tz() -> ZoneInfo:
    return ZoneInfo(settings.TIMEZONE)


def now_local() -> datetime:
    """
    Returns a *naive* datetime in the store's timezone.
    All DateTime columns are naive, so every timestamp goes through here.
    """
    return datetime.now(_store_tz()).replace(tzinfo=None)


def today_local() -> date:
    return now_local().date()


def start_of_day(d: date) -> datetime:
    return datetime.combine(d, time.min)


def end_of_day(d: date) -> datetime:
    return datetime.combine(d, time.max)


def start_of_month(d: date) -> datetime:
    return datetime(d.year, d.month, 1)


def epoch_millis() -> int:
    return int(datetime.now(_store_tz()).timestamp() * 1000)


def parse_client_datetime(raw: str, *, end: bool = False) -> datetime:
    """
    ISO date or datetime from a query string, as a naive store-local datetime.
    A bare date means the start of that day, or its end when ``end`` is set.
    Raises ValueError on anything else.
    """
    text = (raw or "").strip()
    if len(text) == 10:
        d = date.fromisoformat(text)
        return end_of_day(d) if end else start_of_day(d)

    dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if dt.tzinfo is not None:
        dt = dt.astimezone(_store_tz()).replace(tzinfo=None)
    return dt
