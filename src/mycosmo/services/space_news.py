"""Spaceflight News API fetcher."""

from __future__ import annotations

import httpx
import structlog

from mycosmo.models import NewsType, SpaceNewsArticle, SpaceNewsPage
from mycosmo.settings import Settings
from .http import decode, get_json

logger = structlog.get_logger(__name__)

DEFAULT_LIMIT = 20


class SpaceNewsFetcher:
    name = "space-news"

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings

    async def fetch(
        self, news_type: NewsType = NewsType.ALL, limit: int = DEFAULT_LIMIT
    ) -> list[SpaceNewsArticle]:
        page = await self.fetch_page(news_type, limit=limit)
        return page.results

    async def fetch_page(
        self, news_type: NewsType = NewsType.ALL, *, limit: int = DEFAULT_LIMIT
    ) -> SpaceNewsPage:
        url = f"{self._settings.space_news_base_url.rstrip('/')}/{news_type.endpoint}/"
        logger.info("space_news.fetch", endpoint=news_type.endpoint, limit=limit)
        payload, _ = await get_json(self._client, self.name, url, params={"limit": limit})
        return decode(SpaceNewsPage, payload, self.name)
