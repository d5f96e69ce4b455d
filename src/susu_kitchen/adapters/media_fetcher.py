"""HTTP media download client."""

from dataclasses import dataclass

import httpx

from susu_kitchen.services.media import MediaFetcher


@dataclass
class HttpxMediaFetcher(MediaFetcher):
    """Media fetcher using httpx."""

    http_client: httpx.AsyncClient

    @classmethod
    def create(cls) -> "HttpxMediaFetcher":
        """Create a fetcher with a managed httpx session."""
        return cls(http_client=httpx.AsyncClient(follow_redirects=True))

    async def fetch(self, url: str) -> bytes:
        """Download media bytes."""
        response = await self.http_client.get(url, timeout=20)
        response.raise_for_status()
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
