"""Day marker persisted in a small JSON file."""

import json
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from pantry_tracker.services.trigger import DayMarkerRepository

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileDayMarkerRepository(DayMarkerRepository):
    """Stores the last processed day next to the scheduler that runs the job."""

    path: Path

    def get_last_processed_day(self) -> date | None:
        """Return the stored day, treating an unreadable file as no marker."""
        if not self.path.exists():
            return None
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            return date.fromisoformat(payload["last_processed_day"])
        except (ValueError, KeyError, TypeError):
            _logger.warning("Ignoring malformed day marker", extra={"path": str(self.path)})
            return None

    def set_last_processed_day(self, day: date) -> None:
        """Write the marker, creating parent directories as needed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps({"last_processed_day": day.isoformat()}), encoding="utf-8"
        )
