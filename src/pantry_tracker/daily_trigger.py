"""Console entrypoint run by an external scheduler once a day.

It calls the service's daily auto-consumption endpoint, which is gated by the
server-side day marker. A local file marker saves the request once this host
has already triggered the pass today.
"""

import asyncio
import logging
from pathlib import Path

from pantry_tracker.adapters.file_day_marker_repository import (
    JsonFileDayMarkerRepository,
)
from pantry_tracker.adapters.pantry_api_client import (
    HttpxPantryApiClient,
    PantryApiClient,
)
from pantry_tracker.app_logging import configure_logging
from pantry_tracker.config import Settings
from pantry_tracker.services.clock import SystemClock
from pantry_tracker.services.trigger import TriggerGate, TriggerOutcome

_logger = logging.getLogger(__name__)


async def run_daily_trigger(
    gate: TriggerGate, client: PantryApiClient
) -> TriggerOutcome[dict[str, object]]:
    """Call the gated daily endpoint unless this host already did so today."""
    return await gate.run(client.run_daily_auto_consumption)


async def _run(settings: Settings) -> int:
    gate = TriggerGate(
        marker_repository=JsonFileDayMarkerRepository(Path(settings.day_marker_path)),
        clock=SystemClock(settings.timezone),
    )
    client = HttpxPantryApiClient.create(settings.api_base_url)
    try:
        outcome = await run_daily_trigger(gate, client)
    except Exception:
        _logger.exception(
            "Failed to process auto-consumption",
            extra={"api_base_url": settings.api_base_url},
        )
        return 1
    finally:
        await client.close()
    if outcome.ran:
        _logger.info("Auto-consumption processed for %s", outcome.day)
    else:
        _logger.info("Auto-consumption already processed for %s", outcome.day)
    return 0


def main() -> int:
    """Entry point for the ``pantry-daily-trigger`` script."""
    configure_logging()
    return asyncio.run(_run(Settings()))


if __name__ == "__main__":
    raise SystemExit(main())
