"""USDA FoodData Central API client."""

from dataclasses import dataclass, field
from typing import Protocol

import httpx

from nutrition_pipeline.errors import ConfigurationError


class FdcClient(Protocol):
    """Interface for FoodData Central API interactions."""

    async def search_foods(
        self, query: str, page_size: int = 5, data_types: list[str] | None = None
    ) -> dict[str, object]:
        """Search foods by query and return raw API data."""

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        """Fetch a food by FDC id and return raw API data."""


@dataclass
class HttpxFdcClient(FdcClient):
    """HTTPX-backed FDC client."""

    api_key: str | None
    base_url: str
    http_client: httpx.AsyncClient
    headers: dict[str, str] = field(
        default_factory=lambda: {"Content-Type": "application/json"}
    )

    @classmethod
    def create(cls, api_key: str | None, base_url: str) -> "HttpxFdcClient":
        """Create an FDC client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def search_foods(
        self, query: str, page_size: int = 5, data_types: list[str] | None = None
    ) -> dict[str, object]:
        """Search foods by query, optionally restricted to dataset types."""
        params: dict[str, str | int] = {
            "api_key": self._require_key(),
            "query": query,
            "pageSize": page_size,
        }
        if data_types:
            params["dataType"] = ",".join(data_types)
        response = await self.http_client.get(
            f"{self.base_url}/foods/search",
            params=params,
            headers=self.headers,
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        """Fetch a food by FDC id."""
        response = await self.http_client.get(
            f"{self.base_url}/food/{fdc_id}",
            params={"api_key": self._require_key()},
            headers=self.headers,
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _require_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError("FDC_API_KEY is not configured")
        return self.api_key
