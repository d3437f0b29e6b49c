# core/utils.py

from datetime import date, datetime, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    return utc_now().isoformat()


def today_utc() -> date:
    return utc_now().date()


def iso_day(value: date) -> str:
    """YYYY-MM-DD, the format of every `date` column."""
    return value.isoformat()


def days_before(day: date, days: int) -> date:
    return day - timedelta(days=days)


def day_of(timestamp: Optional[str]) -> Optional[str]:
    """
    First 10 chars of an ISO timestamp ("2025-01-31T22:10:00Z" → "2025-01-31").
    Supabase always returns ISO strings, so no parsing needed.
    """
    if not timestamp:
        return None
    return str(timestamp)[:10]
