"""Keyword news search fetcher (NewsAPI ``/v2/everything``)."""

from __future__ import annotations

import httpx
import structlog

from mycosmo.exceptions import DecodeError, MissingAPIKeyError
from mycosmo.models import NewsArticle, NewsFilter
from mycosmo.settings import Settings
from .http import decode, get_json

logger = structlog.get_logger(__name__)

PAGE_SIZE = 10


class NewsSearchFetcher:
    name = "news-search"

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings

    async def fetch(self, news_filter: NewsFilter = NewsFilter.ALL, page: int = 1) -> list[NewsArticle]:
        if not self._settings.news_api_key:
            raise MissingAPIKeyError("NewsAPI")
        params = {
            "q": news_filter.search_query,
            "language": "en",
            "sortBy": "publishedAt",
            "pageSize": PAGE_SIZE,
            "page": page,
            "apiKey": self._settings.news_api_key,
        }
        logger.info("news.fetch", filter=news_filter.value, page=page)
        payload, _ = await get_json(self._client, self.name, self._settings.news_base_url, params=params)
        if not isinstance(payload, dict) or not isinstance(payload.get("articles"), list):
            raise DecodeError(self.name, "response has no articles array")
        return [decode(NewsArticle, item, self.name) for item in payload["articles"]]
