"""Supabase storage for the auto-consumption day marker."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from pantry_tracker.services.trigger import DayMarkerRepository

MARKER_KEY = "last_auto_consumption_day"


@dataclass
class SupabaseDayMarkerRepository(DayMarkerRepository):
    """Keeps the day marker in the app_state key/value table."""

    client: Client
    key: str = MARKER_KEY

    def get_last_processed_day(self) -> date | None:
        """Return the stored day, if any."""
        response = (
            self.client.table("app_state")
            .select("value")
            .eq("key", self.key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        raw = response.data[0].get("value")
        return date.fromisoformat(raw) if isinstance(raw, str) and raw else None

    def set_last_processed_day(self, day: date) -> None:
        """Upsert the day marker."""
        self.client.table("app_state").upsert(
            {"key": self.key, "value": day.isoformat()}
        ).execute()
