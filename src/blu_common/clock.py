"""Clock capability injected into every operation that needs "now" or "today".

Domain functions never read the system clock themselves, so tests pin time
with FixedClock.
"""

from datetime import date, datetime, timezone
from typing import Protocol
from zoneinfo import ZoneInfo

from config.settings import settings


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


class Clock(Protocol):
    def now(self) -> datetime: ...

    def today(self) -> date: ...


class SystemClock:
    """Wall clock. `today()` is the calendar date in the business timezone."""

    def __init__(self, tz_name: str = "America/Sao_Paulo") -> None:
        self._tz = ZoneInfo(tz_name)

    def now(self) -> datetime:
        return utc_now()

    def today(self) -> date:
        return utc_now().astimezone(self._tz).date()


class FixedClock:
    """Deterministic clock for tests and replays."""

    def __init__(self, at: datetime, today: date | None = None) -> None:
        if at.tzinfo is None:
            raise ValueError("FixedClock requires a timezone-aware datetime")
        self._at = at
        self._today = today or at.date()

    def now(self) -> datetime:
        return self._at

    def today(self) -> date:
        return self._today


def default_clock() -> SystemClock:
    return SystemClock(settings.BUSINESS_TIMEZONE)
