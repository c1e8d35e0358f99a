"""Date helpers. All stored timestamps are naive UTC."""
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Tuple


def utcnow() -> datetime:
    """Current time as naive UTC"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def day_window(day: date) -> Tuple[datetime, datetime]:
    """[start, end) of a calendar day"""
    start = datetime(day.year, day.month, day.day)
    return start, start + timedelta(days=1)


def tomorrow_window(now: datetime) -> Tuple[datetime, datetime]:
    """[start, end) of the day after `now`"""
    return day_window((now + timedelta(days=1)).date())


def parse_month(month: str) -> Tuple[int, int]:
    """Parse YYYY-MM into (year, month)"""
    try:
        year_str, mon_str = month.split("-")
        year, mon = int(year_str), int(mon_str)
    except ValueError:
        raise ValueError(f"Invalid month '{month}', expected YYYY-MM")
    if not 1 <= mon <= 12:
        raise ValueError(f"Invalid month '{month}', expected YYYY-MM")
    return year, mon


def month_window(month: str) -> Tuple[datetime, datetime]:
    """[start, end) of a YYYY-MM month"""
    year, mon = parse_month(month)
    start = datetime(year, mon, 1)
    end = datetime(year + 1, 1, 1) if mon == 12 else datetime(year, mon + 1, 1)
    return start, end


def month_key(value: datetime) -> str:
    return f"{value.year}-{value.month:02d}"


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move (year, month) by `delta` months"""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def parse_iso_date(value) -> Optional[date]:
    """Read a date stored in transaction metadata (ISO string, date or datetime)"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None
