"""OpenStreetMap Nominatim reverse-geocoding client."""

from dataclasses import dataclass

import httpx

from capture_narrator.services.location import GeocodingClient


@dataclass
class HttpxNominatimClient(GeocodingClient):
    """HTTPX-backed Nominatim client."""

    base_url: str
    user_agent: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str, user_agent: str) -> "HttpxNominatimClient":
        """Create a Nominatim client with a managed httpx session."""
        return cls(
            base_url=base_url, user_agent=user_agent, http_client=httpx.AsyncClient()
        )

    async def reverse(
        self, latitude: float, longitude: float
    ) -> dict[str, object] | None:
        """Look up the address for a coordinate pair."""
        url = f"{self.base_url}/reverse"
        response = await self.http_client.get(
            url,
            params={"format": "json", "lat": latitude, "lon": longitude},
            headers={"User-Agent": self.user_agent},
            timeout=10,
        )
        if response.is_error:
            return None
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
