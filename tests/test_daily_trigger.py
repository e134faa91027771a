"""Tests for the scheduled daily trigger entrypoint."""

import asyncio
from pathlib import Path

import httpx
import pytest

from pantry_tracker.adapters.file_day_marker_repository import (
    JsonFileDayMarkerRepository,
)
from pantry_tracker.adapters.pantry_api_client import HttpxPantryApiClient
from pantry_tracker.api.app import create_app
from pantry_tracker.containers import AppContainer
from pantry_tracker.daily_trigger import run_daily_trigger
from pantry_tracker.services.trigger import TriggerGate
from tests.conftest import FIXED_NOW, FixedClock, food_payload


class _FakePantryApiClient:
    def __init__(self, error: Exception | None = None) -> None:
        self.calls = 0
        self.error = error

    async def run_daily_auto_consumption(self) -> dict[str, object]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return {"day": "2026-10-19", "processed": True, "consumed": []}


def test_daily_trigger_calls_api_once_per_day(tmp_path: Path) -> None:
    marker = JsonFileDayMarkerRepository(tmp_path / "state" / "marker.json")
    clock = FixedClock()
    client = _FakePantryApiClient()

    first = asyncio.run(run_daily_trigger(TriggerGate(marker, clock), client))
    second = asyncio.run(run_daily_trigger(TriggerGate(marker, clock), client))

    assert first.ran is True
    assert first.result == {"day": "2026-10-19", "processed": True, "consumed": []}
    assert second.ran is False
    assert client.calls == 1
    assert marker.get_last_processed_day() == FIXED_NOW.date()


def test_daily_trigger_failure_leaves_marker_unset(tmp_path: Path) -> None:
    marker = JsonFileDayMarkerRepository(tmp_path / "marker.json")
    request = httpx.Request("POST", "http://pantry.test/api/auto-consumption/daily")
    error = httpx.ConnectError("connection refused", request=request)
    client = _FakePantryApiClient(error=error)

    with pytest.raises(httpx.ConnectError):
        asyncio.run(run_daily_trigger(TriggerGate(marker, FixedClock()), client))

    assert not marker.path.exists()
    client.error = None
    outcome = asyncio.run(run_daily_trigger(TriggerGate(marker, FixedClock()), client))
    assert outcome.ran is True
    assert client.calls == 2


def test_malformed_marker_file_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / "marker.json"
    path.write_text("not json", encoding="utf-8")

    assert JsonFileDayMarkerRepository(path).get_last_processed_day() is None


def test_triggers_from_two_hosts_consume_once(
    tmp_path: Path, container: AppContainer
) -> None:
    item = container.inventory_service.create_food_item(
        food_payload(quantity=5, auto_consume=True, daily_consumption_amount=2)
    )

    async def trigger_from(marker_path: Path) -> dict[str, object] | None:
        async_client = httpx.AsyncClient(
            transport=httpx.ASGITransport(app=create_app(container))
        )
        client = HttpxPantryApiClient(
            base_url="http://pantry.test", http_client=async_client
        )
        gate = TriggerGate(JsonFileDayMarkerRepository(marker_path), FixedClock())
        try:
            return (await run_daily_trigger(gate, client)).result
        finally:
            await client.close()

    first = asyncio.run(trigger_from(tmp_path / "host-a.json"))
    second = asyncio.run(trigger_from(tmp_path / "host-b.json"))

    assert first is not None and first["processed"] is True
    assert second is not None and second["processed"] is False
    assert container.inventory_service.get_food_item(item.id).quantity == 3
