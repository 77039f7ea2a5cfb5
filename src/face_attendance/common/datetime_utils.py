from __future__ import annotations

from datetime import date, datetime, time, timedelta


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def truncate_to_millis(value: datetime) -> datetime:
    """Drop sub-millisecond precision so timestamps survive a JSON round-trip."""
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


def epoch_millis(value: datetime) -> int:
    return int(round(value.timestamp() * 1000))


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Half-open local-time window [midnight, next midnight) for a calendar day."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def format_timestamp(value: datetime) -> str:
    return value.isoformat(timespec="milliseconds")


def parse_timestamp(value: str) -> datetime:
    # Accept a trailing "Z" written by JavaScript's Date.toJSON().
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed
