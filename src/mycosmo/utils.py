"""Utility helpers for date ranges and display formatting."""

from __future__ import annotations

from datetime import date, datetime, timedelta


def recent_dates(start: date, days_back: int) -> list[date]:
    """Return ``start`` followed by each earlier day, ``days_back`` days in total back."""
    return [start - timedelta(days=offset) for offset in range(days_back + 1)]


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp as served by the news APIs."""
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def format_timestamp(value: str | None, fmt: str = "%Y-%m-%d %H:%M") -> str:
    parsed = parse_timestamp(value)
    if parsed is None:
        return value or "—"
    return parsed.strftime(fmt)


def truncate(text: str | None, length: int = 80) -> str:
    if not text:
        return ""
    return (text[:length] + "…") if len(text) > length else text
