"""Once-per-day gate around a scheduled job."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import date
from typing import Generic, Protocol, TypeVar

from pantry_tracker.services.clock import Clock

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class DayMarkerRepository(Protocol):
    """Storage for the last day the job completed."""

    def get_last_processed_day(self) -> date | None:
        """Return the stored day, if any."""

    def set_last_processed_day(self, day: date) -> None:
        """Persist the day the job last completed."""


@dataclass(frozen=True)
class TriggerOutcome(Generic[T]):
    """Result of a gate invocation."""

    day: date
    ran: bool
    result: T | None = None


@dataclass
class TriggerGate:
    """Runs a job at most once per local calendar day.

    The marker is written only after the job succeeds, so a failed run is
    retried on the next invocation.
    """

    marker_repository: DayMarkerRepository
    clock: Clock
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    async def run(self, job: Callable[[], Awaitable[T]]) -> TriggerOutcome[T]:
        """Invoke job unless it already completed today."""
        async with self._lock:
            today = self.clock.today()
            if self.marker_repository.get_last_processed_day() == today:
                _logger.info("Daily job already ran", extra={"day": today.isoformat()})
                return TriggerOutcome(day=today, ran=False)
            result = await job()
            self.marker_repository.set_last_processed_day(today)
            _logger.info("Daily job completed", extra={"day": today.isoformat()})
            return TriggerOutcome(day=today, ran=True, result=result)
