"""
HubSpot Integration
====================

Read-only CRM connector used by the dashboard alongside uploaded intent data:
- Contacts
- Companies
- Deals

Setup:
1. Create a private app in HubSpot -> Settings -> Integrations -> Private Apps
2. Set HUBSPOT_API_KEY in .env

Set PAUSE_API_CALLS=true to stop all outbound HubSpot calls without
removing the key.
"""

import logging
from typing import Any, Dict, List, Optional

import aiohttp

from scripts.lib.config import Settings, get_settings
from scripts.lib.errors import APIPausedError

logger = logging.getLogger(__name__)

HUBSPOT_API_URL = "https://api.hubapi.com"
PAGE_SIZE = 100


class HubSpotIntegration:
    """HubSpot CRM connector."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.api_key = self.settings.hubspot_api_key

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @property
    def is_paused(self) -> bool:
        return self.settings.pause_api_calls

    def _headers(self) -> Dict[str, str]:
        """Build authorization headers."""
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def _request(self, method: str, path: str, params: dict = None) -> Optional[Dict]:
        """Make an authenticated request to the HubSpot API."""
        if self.is_paused:
            raise APIPausedError("hubspot")
        if not self.is_configured:
            logger.warning("HubSpot is not configured; set HUBSPOT_API_KEY in .env")
            return None

        url = f"{HUBSPOT_API_URL}{path}"
        try:
            async with aiohttp.ClientSession() as session:
                async with session.request(method, url, headers=self._headers(), params=params) as resp:
                    if resp.status == 200:
                        return await resp.json()
                    text = await resp.text()
                    logger.error("HubSpot API %s %s returned %s: %s", method, path, resp.status, text)
                    return None
        except aiohttp.ClientError as e:
            logger.error("HubSpot API error: %s", e)
            return None

    async def _list_objects(self, object_type: str, limit: int, max_pages: int) -> List[Dict]:
        """Follow HubSpot's paging.next.after cursor until limit or max_pages."""
        results: List[Dict] = []
        after = None
        for _ in range(max_pages):
            params = {"limit": min(PAGE_SIZE, limit - len(results))}
            if after:
                params["after"] = after
            data = await self._request("GET", f"/crm/v3/objects/{object_type}", params=params)
            if not data:
                break
            results.extend(data.get("results", []))
            after = data.get("paging", {}).get("next", {}).get("after")
            if not after or len(results) >= limit:
                break
        return results[:limit]

    async def get_contacts(self, limit: int = 50, max_pages: int = 10) -> List[Dict]:
        """Fetch contacts from HubSpot."""
        return await self._list_objects("contacts", limit, max_pages)

    async def get_companies(self, limit: int = 50, max_pages: int = 10) -> List[Dict]:
        """Fetch companies from HubSpot."""
        return await self._list_objects("companies", limit, max_pages)

    async def get_deals(self, limit: int = 50, max_pages: int = 10) -> List[Dict]:
        """Fetch deals from HubSpot."""
        return await self._list_objects("deals", limit, max_pages)

    def get_status(self) -> Dict[str, Any]:
        return {
            "name": "HubSpot",
            "configured": self.is_configured,
            "paused": self.is_paused,
            "features": ["contacts", "companies", "deals"],
        }
