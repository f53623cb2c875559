"""Photo download client."""

from dataclasses import dataclass

import httpx

from calorie_tracker.domain.errors import InferenceUnavailable
from calorie_tracker.services.analysis import ImageFetcher


@dataclass
class HttpxImageFetcher(ImageFetcher):
    """Image fetcher using httpx."""

    http_client: httpx.AsyncClient

    @classmethod
    def create(cls) -> "HttpxImageFetcher":
        """Create an image fetcher with a managed httpx session."""
        return cls(http_client=httpx.AsyncClient(follow_redirects=True))

    async def fetch(self, url: str) -> bytes:
        """Download the photo at ``url``."""
        try:
            response = await self.http_client.get(url, timeout=20)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise InferenceUnavailable(f"Failed to download image: {exc}") from exc
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
