"""Upstash QStash publish client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from nutrition_pipeline.errors import ConfigurationError


class JobPublisher(Protocol):
    """Interface for publishing job messages to the queue transport."""

    async def publish_json(self, url: str, payload: dict[str, object]) -> str | None:
        """Publish a JSON payload for delivery to ``url``; return a message id."""


@dataclass
class HttpxQStashClient(JobPublisher):
    """HTTPX-backed QStash client."""

    token: str | None
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, token: str | None, base_url: str) -> "HttpxQStashClient":
        """Create a QStash client with a managed httpx session."""
        return cls(token=token, base_url=base_url, http_client=httpx.AsyncClient())

    async def publish_json(self, url: str, payload: dict[str, object]) -> str | None:
        """Publish a JSON message for delivery to a destination URL."""
        if not self.token:
            raise ConfigurationError("QSTASH_TOKEN is not configured")
        response = await self.http_client.post(
            f"{self.base_url}/v2/publish/{url}",
            headers={"Authorization": f"Bearer {self.token}"},
            json=payload,
            timeout=15,
        )
        response.raise_for_status()
        data = response.json()
        if isinstance(data, dict):
            return data.get("messageId")
        return None

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
