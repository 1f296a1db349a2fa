"""
Google Custom Search client with rate limiting using aiolimiter.
"""
from typing import Any, Dict, List, Optional
from aiohttp import ClientSession, ClientTimeout
from aiolimiter import AsyncLimiter
from loguru import logger

from website_updater.config import Settings


class SearchClient:
    """
    Client for the Google Custom Search JSON API.
    Owns a lazily created aiohttp session; call close() when the run ends.
    """

    def __init__(self, settings: Settings):
        self.api_key = settings.google_cse_key
        self.cx = settings.google_cx
        self.base_url = settings.search_url
        self.timeout = settings.search_timeout
        self.rate_limiter = AsyncLimiter(max_rate=settings.rate_limit, time_period=1.0)
        self._session: Optional[ClientSession] = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.cx)

    async def _get_session(self) -> ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = ClientSession(timeout=ClientTimeout(total=self.timeout))
        return self._session

    async def search(self, query: str, num: int = 5) -> List[Dict[str, Any]]:
        """
        Run a search and return the raw result items.

        Args:
            query: Free-text search query.
            num: Maximum number of results to request.

        Returns:
            List of {"title", "link", "snippet"} dicts in provider order.
        """
        params = {"key": self.api_key, "cx": self.cx, "q": query, "num": str(num)}
        async with self.rate_limiter:
            session = await self._get_session()
            try:
                async with session.get(self.base_url, params=params) as resp:
                    if resp.status >= 400:
                        text = await resp.text()
                        raise Exception(f"Search API error: HTTP {resp.status}: {text[:200]}")
                    data = await resp.json(content_type=None)
            except Exception as e:
                logger.debug(f"⚠️ Search request failed for '{query}': {e}")
                raise

        items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(items, list):
            return []
        return [
            {
                "title": item.get("title") or "",
                "link": item.get("link") or "",
                "snippet": item.get("snippet") or "",
            }
            for item in items[:num]
            if isinstance(item, dict)
        ]

    async def close(self):
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
