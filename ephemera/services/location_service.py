import logging
from typing import Any, Dict, List, Optional

import httpx

from ephemera.config import settings

logger = logging.getLogger(__name__)


class LocationService:
    """
    Service for searching locations using Open-Meteo Geocoding API.
    This API is free for non-commercial use and requires no API key.

    Resolves a free-text birth place into latitude, longitude and an
    IANA timezone. Failures are reported as "no match"; retrying is
    left to the caller.
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url or settings.GEOCODING_API_URL
        self.timeout = timeout if timeout is not None else settings.GEOCODING_TIMEOUT
        self.transport = transport

    async def search_cities(self, query: str, count: int = 10) -> List[Dict[str, Any]]:
        """
        Searches for cities using Open-Meteo API.
        """
        if not query or len(query.strip()) < 2:
            return []

        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.get(
                    self.api_url,
                    params={
                        "name": query.strip(),
                        "count": count,
                        "language": "en",
                        "format": "json"
                    },
                    timeout=self.timeout
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            logger.warning(f"Geocoding lookup failed for '{query}': {e}")
            return []

        mapped_results = []
        for item in data.get("results") or []:
            if item.get("latitude") is None or item.get("longitude") is None:
                continue

            # Construct a display name: Name, Region, Country
            parts = [item.get("name")]
            if item.get("admin1"):
                parts.append(item.get("admin1"))
            if item.get("country"):
                parts.append(item.get("country"))

            mapped_results.append({
                "display_name": ", ".join([p for p in parts if p]),
                "latitude": item.get("latitude"),
                "longitude": item.get("longitude"),
                "timezone": item.get("timezone")
            })

        return mapped_results

    async def resolve_place(self, name: str) -> Optional[Dict[str, Any]]:
        """
        Best match for a place name, or None. A match without a
        timezone is not usable for charts and counts as no match.
        """
        results = await self.search_cities(name, count=1)
        if not results or not results[0].get("timezone"):
            logger.info(f"No usable geocoding match for '{name}'")
            return None
        return results[0]
