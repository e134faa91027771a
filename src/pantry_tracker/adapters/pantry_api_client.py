"""HTTP client for the pantry tracker REST API."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class PantryApiClient(Protocol):
    """Interface for calling a running pantry tracker service."""

    async def run_daily_auto_consumption(self) -> dict[str, object]:
        """Trigger the service's once-per-day automatic consumption."""


@dataclass
class HttpxPantryApiClient(PantryApiClient):
    """HTTPX-backed pantry API client."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxPantryApiClient":
        """Create a client with a managed httpx session."""
        return cls(base_url=base_url.rstrip("/"), http_client=httpx.AsyncClient())

    async def run_daily_auto_consumption(self) -> dict[str, object]:
        """Trigger the daily pass; the service skips it if it already ran today."""
        response = await self.http_client.post(
            f"{self.base_url}/api/auto-consumption/daily", timeout=30
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
