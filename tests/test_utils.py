from datetime import date

from mycosmo.utils import format_timestamp, recent_dates, truncate


def test_recent_dates_walks_back_one_week() -> None:
    days = recent_dates(date(2024, 3, 2), 7)
    assert len(days) == 8
    assert days[0] == date(2024, 3, 2)
    assert days[-1] == date(2024, 2, 24)


def test_format_timestamp_handles_zulu_and_garbage() -> None:
    assert format_timestamp("2024-05-10T14:03:00Z") == "2024-05-10 14:03"
    assert format_timestamp("not a date") == "not a date"
    assert format_timestamp(None) == "—"


def test_truncate() -> None:
    assert truncate("short", 10) == "short"
    assert truncate("abcdefghij", 4) == "abcd…"
    assert truncate(None) == ""
