"""Injectable wall-clock so services can be driven deterministically in tests"""

from datetime import date, datetime, timezone


class SystemClock:
    """UTC wall-clock"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)

    def today(self) -> date:
        return self.now().date()


_default_clock = SystemClock()


def get_clock() -> SystemClock:
    """FastAPI dependency returning the process clock (overridden in tests)"""
    return _default_clock
