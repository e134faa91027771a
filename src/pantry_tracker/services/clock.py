"""Clock abstraction used for timestamps and calendar days."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    """Source of the current time in the household's timezone."""

    def now(self) -> datetime:
        """Return the current timezone-aware datetime."""

    def today(self) -> date:
        """Return the current local calendar day."""


@dataclass
class SystemClock(Clock):
    """Wall clock pinned to a named timezone."""

    timezone_name: str = "UTC"

    def now(self) -> datetime:
        return datetime.now(tz=ZoneInfo(self.timezone_name))

    def today(self) -> date:
        return self.now().date()
